"""
Opportunity and role management.

Business rules for creating, updating, activating and staffing opportunities,
plus filtering and pagination of opportunity lists.
"""

import math
import sqlite3
import uuid
from dataclasses import dataclass, field
from datetime import date

from core import database
from core.config import (
    AUTO_ACTIVATE_PROBABILITY,
    DEFAULT_ROLE_ALLOCATION,
    OPPORTUNITY_STATUSES,
    ROLE_STATUSES,
)
from models.entities import Opportunity, Role


class OpportunityNotFoundError(LookupError):
    """Raised when an opportunity id does not exist."""


class RoleNotFoundError(LookupError):
    """Raised when a role id does not exist on the opportunity."""


# =============================================================================
# FILTERS & PAGINATION
# =============================================================================


@dataclass
class OpportunityFilters:
    """Filters for opportunity listings."""

    client: str = ""
    grades: list[str] = field(default_factory=list)
    needs_hire: str = "all"  # "yes", "no" or "all"
    probability: tuple[int, int] = (0, 100)
    status: str | None = None


def parse_probability_range(value: str | None) -> tuple[int, int]:
    """Parse 'min-max' into a tuple, falling back to (0, 100) when malformed."""
    if not value:
        return (0, 100)
    parts = value.split("-")
    if len(parts) != 2:
        return (0, 100)
    try:
        low, high = int(parts[0]), int(parts[1])
    except ValueError:
        return (0, 100)
    return (low, high)


def parse_grades(value: str | None) -> list[str]:
    """Parse a comma-separated grade list."""
    if not value:
        return []
    return [g.strip() for g in value.split(",") if g.strip()]


def parse_needs_hire(value: str | None) -> str:
    return value if value in ("yes", "no") else "all"


def matches_filters(opportunity: Opportunity, filters: OpportunityFilters) -> bool:
    roles = opportunity.get("roles", [])

    if filters.status and opportunity["status"] != filters.status:
        return False

    if filters.client and filters.client.lower() not in opportunity["client_name"].lower():
        return False

    if filters.grades and not any(r["required_grade"] in filters.grades for r in roles):
        return False

    if filters.needs_hire != "all":
        has_hiring_needs = any(r["needs_hire"] for r in roles)
        if has_hiring_needs != (filters.needs_hire == "yes"):
            return False

    low, high = filters.probability
    return low <= opportunity["probability"] <= high


def apply_filters(opportunities: list[Opportunity], filters: OpportunityFilters) -> list[Opportunity]:
    return [opp for opp in opportunities if matches_filters(opp, filters)]


def paginate(items: list, page: int, page_size: int) -> dict:
    """
    Slice a list into a page.

    Pages are 1-based. A page past the end yields no items but keeps totals.
    """
    total = len(items)
    start = (page - 1) * page_size
    return {
        "items": items[start:start + page_size],
        "total": total,
        "page": page,
        "page_size": page_size,
        "total_pages": math.ceil(total / page_size) if total else 0,
    }


# =============================================================================
# OPPORTUNITIES
# =============================================================================


def _today() -> str:
    return date.today().isoformat()


def _validate_dates(start: str | None, end: str | None) -> None:
    if start and end and date.fromisoformat(end) < date.fromisoformat(start):
        raise ValueError(f"Expected end date {end} is before start date {start}")


def _validate_status(status: str, allowed: tuple[str, ...], kind: str) -> None:
    if status not in allowed:
        raise ValueError(f"Invalid {kind} status '{status}'. Expected one of: {', '.join(allowed)}")


def get_opportunity(conn: sqlite3.Connection, opportunity_id: str) -> Opportunity:
    opportunity = database.get_opportunity(conn, opportunity_id)
    if opportunity is None:
        raise OpportunityNotFoundError(f"Opportunity '{opportunity_id}' not found")
    return opportunity


def list_opportunities(conn: sqlite3.Connection, filters: OpportunityFilters) -> list[Opportunity]:
    return apply_filters(database.list_opportunities(conn, filters.status), filters)


def create_opportunity(conn: sqlite3.Connection, data: dict) -> Opportunity:
    """
    Create an opportunity in status 'In Progress' with no roles.

    Opportunities created at or above the auto-activation probability start
    active, with activated_at equal to created_at.
    """
    _validate_dates(data["expected_start_date"], data.get("expected_end_date"))

    today = _today()
    auto_active = data["probability"] >= AUTO_ACTIVATE_PROBABILITY
    opportunity: Opportunity = {
        "id": str(uuid.uuid4()),
        "client_name": data["client_name"],
        "opportunity_name": data.get("opportunity_name") or "",
        "open_date": today,
        "expected_start_date": data["expected_start_date"],
        "expected_end_date": data.get("expected_end_date"),
        "probability": data["probability"],
        "status": "In Progress",
        "is_active": auto_active,
        "activated_at": today if auto_active else None,
        "created_at": today,
        "comments": data.get("comments") or "",
        "roles": [],
    }
    database.insert_opportunity(conn, opportunity)
    return opportunity


def apply_auto_activation(current: Opportunity, updates: dict, today: str) -> dict:
    """
    Derive activation fields for an update.

    Reaching the auto-activation probability activates an inactive opportunity.
    Dropping below it deactivates only opportunities that were auto-activated
    (activated_at == created_at).
    """
    updates = dict(updates)
    probability = updates.get("probability", current["probability"])

    if probability >= AUTO_ACTIVATE_PROBABILITY and not current["is_active"]:
        updates["is_active"] = True
        updates["activated_at"] = today
    elif (
        probability < AUTO_ACTIVATE_PROBABILITY
        and current["is_active"]
        and current["activated_at"] == current["created_at"]
    ):
        updates["is_active"] = False
        updates["activated_at"] = None

    return updates


def update_opportunity(conn: sqlite3.Connection, opportunity_id: str, data: dict) -> Opportunity:
    """
    Update opportunity fields, applying auto-activation rules.

    A missing or None status leaves the current status unchanged.
    """
    current = get_opportunity(conn, opportunity_id)

    data = dict(data)
    if data.get("status") is None:
        data.pop("status", None)
    else:
        _validate_status(data["status"], OPPORTUNITY_STATUSES, "opportunity")
    _validate_dates(
        data.get("expected_start_date", current["expected_start_date"]),
        data.get("expected_end_date", current["expected_end_date"]),
    )

    updates = apply_auto_activation(current, data, _today())
    database.update_opportunity(conn, opportunity_id, updates)
    return get_opportunity(conn, opportunity_id)


def set_active(conn: sqlite3.Connection, opportunity_id: str, is_active: bool) -> Opportunity:
    """Manually (de)activate; activating keeps an existing activation date."""
    current = get_opportunity(conn, opportunity_id)
    if is_active:
        updates = {"is_active": True, "activated_at": current["activated_at"] or _today()}
    else:
        updates = {"is_active": False, "activated_at": None}
    database.update_opportunity(conn, opportunity_id, updates)
    return get_opportunity(conn, opportunity_id)


def move_opportunity(conn: sqlite3.Connection, opportunity_id: str, to_status: str) -> Opportunity:
    _validate_status(to_status, OPPORTUNITY_STATUSES, "opportunity")
    get_opportunity(conn, opportunity_id)
    database.update_opportunity(conn, opportunity_id, {"status": to_status})
    return get_opportunity(conn, opportunity_id)


# =============================================================================
# ROLES
# =============================================================================


def parse_needs_hire_flag(value) -> bool:
    """Accept booleans or the form values 'Yes'/'No'."""
    if isinstance(value, str):
        return value.strip().lower() == "yes"
    return bool(value)


def _find_role(opportunity: Opportunity, role_id: str) -> Role:
    for role in opportunity["roles"]:
        if role["id"] == role_id:
            return role
    raise RoleNotFoundError(f"Role '{role_id}' not found on opportunity '{opportunity['id']}'")


def add_role(conn: sqlite3.Connection, opportunity_id: str, data: dict) -> Opportunity:
    """Add an open, unstaffed role to an opportunity."""
    get_opportunity(conn, opportunity_id)

    allocation = data.get("allocation")
    role: Role = {
        "id": str(uuid.uuid4()),
        "role_name": data["role_name"],
        "required_grade": data.get("required_grade"),
        "allocation": DEFAULT_ROLE_ALLOCATION if allocation is None else allocation,
        "status": "Open",
        "needs_hire": parse_needs_hire_flag(data.get("needs_hire", False)),
        "comments": data.get("comments") or "",
        "assigned_member_ids": [],
    }
    database.insert_role(conn, opportunity_id, role)
    return get_opportunity(conn, opportunity_id)


def update_role_status(
    conn: sqlite3.Connection, opportunity_id: str, role_id: str, status: str
) -> Opportunity:
    _validate_status(status, ROLE_STATUSES, "role")
    _find_role(get_opportunity(conn, opportunity_id), role_id)
    database.update_role(conn, role_id, {"status": status})
    return get_opportunity(conn, opportunity_id)


def edit_role(
    conn: sqlite3.Connection, opportunity_id: str, role_id: str, fields: dict
) -> Opportunity:
    """Merge the given fields into a role, including member assignment."""
    _find_role(get_opportunity(conn, opportunity_id), role_id)

    updates = dict(fields)
    if "status" in updates:
        _validate_status(updates["status"], ROLE_STATUSES, "role")
    if "needs_hire" in updates:
        updates["needs_hire"] = parse_needs_hire_flag(updates["needs_hire"])
    if updates.get("comments") is None:
        updates.pop("comments", None)

    database.update_role(conn, role_id, updates)
    return get_opportunity(conn, opportunity_id)
