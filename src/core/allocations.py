"""
Allocation overlap checking.

Sums each employee's committed allocation across opportunities whose expected
date range overlaps a window, and renders over-allocation warnings.
"""

from dataclasses import dataclass
from datetime import date

from core.config import FULL_ALLOCATION, OPEN_ENDED_ALWAYS_OVERLAPS, UNKNOWN_EMPLOYEE_NAME
from models.entities import AllocationDetail, AllocationEntry, Employee, Opportunity


@dataclass(frozen=True)
class DateWindow:
    """Date range being checked; end=None means open-ended."""

    start: date
    end: date | None = None


@dataclass(frozen=True)
class RoleRef:
    """(opportunity, role) pair, used to exclude the role being edited."""

    opportunity_id: str
    role_id: str


@dataclass(frozen=True)
class AllocationWarning:
    """Rendered warning for a proposed allocation."""

    message: str | None
    is_over_allocated: bool


# =============================================================================
# DATE HELPERS
# =============================================================================


def parse_date(value: date | str | None) -> date | None:
    """
    Parse an ISO date (YYYY-MM-DD).

    Returns None for a missing value. Raises ValueError for a malformed one.
    """
    if value is None or value == "":
        return None
    if isinstance(value, date):
        return value
    try:
        return date.fromisoformat(value)
    except (TypeError, ValueError):
        raise ValueError(f"Invalid date: {value!r}")


def effective_end(end: date | None) -> date:
    """End of a range, with open-ended ranges running to date.max."""
    return end if end is not None else date.max


def overlaps(
    a_start: date | str,
    a_end: date | str | None,
    b_start: date | str,
    b_end: date | str | None,
) -> bool:
    """
    Check whether two date ranges intersect (inclusive bounds).

    A missing end means the range runs indefinitely. Any bound that is not a
    valid date fails the comparison, so the ranges are reported as disjoint.
    """
    try:
        a_start_d = parse_date(a_start)
        a_end_d = parse_date(a_end)
        b_start_d = parse_date(b_start)
        b_end_d = parse_date(b_end)
    except ValueError:
        return False

    if a_start_d is None or b_start_d is None:
        return False

    return a_start_d <= effective_end(b_end_d) and b_start_d <= effective_end(a_end_d)


def opportunity_in_window(opportunity: Opportunity, window: DateWindow) -> bool:
    """Check whether an opportunity's expected dates overlap the window."""
    if not opportunity.get("expected_end_date") and OPEN_ENDED_ALWAYS_OVERLAPS:
        return True
    return overlaps(
        opportunity.get("expected_start_date"),
        opportunity.get("expected_end_date"),
        window.start,
        window.end,
    )


# =============================================================================
# AGGREGATION
# =============================================================================


def aggregate_allocations(
    employee_ids: list[str],
    window: DateWindow,
    opportunities: list[Opportunity],
    employees: list[Employee],
    exclude: RoleRef | None = None,
) -> list[AllocationEntry]:
    """
    Sum each employee's role allocations across overlapping opportunities.

    Returns one entry per requested employee id, in request order, including
    employees with no matching roles. Employees missing from the directory are
    named "Unknown Employee".
    """
    names = {str(e["id"]): e["name"] for e in employees}
    matching = [opp for opp in opportunities if opportunity_in_window(opp, window)]

    entries = []
    for employee_id in employee_ids:
        total_allocation = 0
        details: list[AllocationDetail] = []

        for opp in matching:
            opp_id = str(opp["id"])
            for role in opp.get("roles", []):
                if employee_id not in role.get("assigned_member_ids", []):
                    continue
                if exclude and exclude == RoleRef(opp_id, str(role["id"])):
                    continue

                total_allocation += role["allocation"]
                details.append(
                    {
                        "opportunity_id": opp_id,
                        "role_name": role["role_name"],
                        "allocation": role["allocation"],
                        "start_date": opp["expected_start_date"],
                        "end_date": opp.get("expected_end_date"),
                    }
                )

        entries.append(
            {
                "employee_id": employee_id,
                "name": names.get(employee_id) or UNKNOWN_EMPLOYEE_NAME,
                "total_allocation": total_allocation,
                "allocations": details,
            }
        )

    return entries


# =============================================================================
# WARNINGS
# =============================================================================


def format_percent(value: float) -> str:
    """Render a percentage, dropping the decimal point for whole numbers."""
    if float(value).is_integer():
        return str(int(value))
    return str(value)


def format_warning(entries: list[AllocationEntry], incoming_allocation: float) -> AllocationWarning:
    """
    Build the warning shown when adding incoming_allocation to each employee.

    Over 100% flags over-allocation; exactly 100% is reported as at capacity.
    """
    message = ""
    is_over_allocated = False

    for entry in entries:
        final_allocation = entry["total_allocation"] + incoming_allocation
        if final_allocation > FULL_ALLOCATION:
            message += (
                f"{entry['name']} will be over-allocated at {format_percent(final_allocation)}%. "
            )
            is_over_allocated = True
        elif final_allocation == FULL_ALLOCATION:
            message += f"{entry['name']} will be at 100% allocation. "

    return AllocationWarning(message=message or None, is_over_allocated=is_over_allocated)
