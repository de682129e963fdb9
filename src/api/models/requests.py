"""Pydantic request models for API endpoints."""

from datetime import date
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel

from core.config import GRADES, OPPORTUNITY_STATUSES, ROLE_STATUSES

OpportunityStatus = Literal[OPPORTUNITY_STATUSES]
RoleStatus = Literal[ROLE_STATUSES]
Grade = Literal[GRADES]


class CamelModel(BaseModel):
    """Accepts camelCase on the wire, snake_case in Python."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class AllocationCheckRequest(CamelModel):
    """Body of POST /v1/employees/allocations."""

    employee_ids: list[str]
    start_date: date
    end_date: date | None = None
    current_opportunity_id: str | None = None
    current_role_id: str | None = None
    current_allocation: float | None = None

    @model_validator(mode="after")
    def check_window(self) -> "AllocationCheckRequest":
        if self.end_date is not None and self.end_date < self.start_date:
            raise ValueError("endDate must not be before startDate")
        return self


class OpportunityCreate(CamelModel):
    client_name: str = Field(min_length=1)
    opportunity_name: str = ""
    expected_start_date: date
    expected_end_date: date | None = None
    probability: int = Field(ge=0, le=100)
    comments: str = ""


class OpportunityUpdate(CamelModel):
    client_name: str = Field(min_length=1)
    opportunity_name: str = ""
    expected_start_date: date
    expected_end_date: date | None = None
    probability: int = Field(ge=0, le=100)
    status: OpportunityStatus | None = None
    comments: str = ""


class ActivateRequest(CamelModel):
    is_active: bool


class MoveRequest(CamelModel):
    to_status: OpportunityStatus


class RoleCreate(CamelModel):
    role_name: str = Field(min_length=1)
    required_grade: Grade
    allocation: float | None = Field(default=None, ge=0, le=100)
    needs_hire: bool | Literal["Yes", "No"] = False
    comments: str = ""


class RoleStatusUpdate(CamelModel):
    status: RoleStatus


class RoleUpdate(CamelModel):
    role_name: str | None = Field(default=None, min_length=1)
    required_grade: Grade | None = None
    allocation: float | None = Field(default=None, ge=0, le=100)
    status: RoleStatus | None = None
    needs_hire: bool | Literal["Yes", "No"] | None = None
    comments: str | None = None
    assigned_member_ids: list[str] | None = None
