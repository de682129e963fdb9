"""Pydantic response models for API endpoints."""

from pydantic import BaseModel

from api.models.requests import CamelModel


class HealthResponse(BaseModel):
    """Health check response."""

    status: str  # "healthy" or "unhealthy"
    version: str
    database_available: bool
    timestamp: str  # ISO 8601 UTC
    error: str | None = None


class ErrorResponse(BaseModel):
    """Standard error response."""

    error: str
    code: str
    details: list[str] = []


class ErrorCodes:
    """Error code constants."""

    INVALID_REQUEST = "INVALID_REQUEST"
    UNAUTHORIZED = "UNAUTHORIZED"
    FORBIDDEN = "FORBIDDEN"
    NOT_FOUND = "NOT_FOUND"
    VALIDATION_ERROR = "VALIDATION_ERROR"
    INTERNAL_ERROR = "INTERNAL_ERROR"


class AllocationDetailResponse(CamelModel):
    opportunity_id: str
    role_name: str
    allocation: float
    start_date: str
    end_date: str | None = None


class AllocationEntryResponse(CamelModel):
    employee_id: str
    name: str
    total_allocation: float
    allocations: list[AllocationDetailResponse]


class AllocationWarningResponse(CamelModel):
    message: str | None
    is_over_allocated: bool


class AllocationCheckResponse(CamelModel):
    allocations: list[AllocationEntryResponse]
    warning: AllocationWarningResponse | None = None


class RoleResponse(CamelModel):
    id: str
    role_name: str
    required_grade: str | None
    allocation: float
    status: str
    needs_hire: bool
    comments: str
    assigned_member_ids: list[str]


class OpportunityResponse(CamelModel):
    id: str
    client_name: str
    opportunity_name: str
    open_date: str | None
    expected_start_date: str
    expected_end_date: str | None
    probability: int
    status: str
    is_active: bool
    activated_at: str | None
    created_at: str | None
    comments: str
    roles: list[RoleResponse]


class OpportunityPage(CamelModel):
    items: list[OpportunityResponse]
    total: int
    page: int
    page_size: int
    total_pages: int


class EmployeeResponse(CamelModel):
    id: str
    name: str
    grade: str | None = None
    email: str | None = None


class NavigationItemResponse(CamelModel):
    title: str
    url: str
    permission: str


class RolePermissionsResponse(CamelModel):
    role: str
    name: str
    description: str
    permissions: list[str]
    navigation: list[NavigationItemResponse]
