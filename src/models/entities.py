"""
Data models for opportunities, roles, employees and allocations.

TypedDicts describe the plain dictionaries passed between the database layer,
the services and the allocation core.
"""

from typing import TypedDict


class Role(TypedDict):
    """Staffing position within an opportunity."""
    id: str
    role_name: str
    required_grade: str
    allocation: float
    status: str
    needs_hire: bool
    comments: str
    assigned_member_ids: list[str]


class Opportunity(TypedDict):
    """Tracked sales/staffing engagement with a client."""
    id: str
    client_name: str
    opportunity_name: str
    open_date: str
    expected_start_date: str
    expected_end_date: str | None
    probability: int
    status: str
    is_active: bool
    activated_at: str | None
    created_at: str
    comments: str
    roles: list[Role]


class Employee(TypedDict):
    """Directory entry; only id and name matter for allocation checks."""
    id: str
    name: str
    grade: str | None
    email: str | None


class AllocationDetail(TypedDict):
    """One role commitment counted towards an employee's total."""
    opportunity_id: str
    role_name: str
    allocation: float
    start_date: str
    end_date: str | None


class AllocationEntry(TypedDict):
    """Aggregated allocation for one employee over a date window."""
    employee_id: str
    name: str
    total_allocation: float
    allocations: list[AllocationDetail]
