"""
Allocation checks against the stored opportunity and employee collections.
"""

import sqlite3
from datetime import date

from core import database
from core.allocations import DateWindow, RoleRef, aggregate_allocations
from models.entities import AllocationEntry, Employee, Opportunity


class AllocationDataError(RuntimeError):
    """Raised when opportunities or employees could not be loaded."""


def load_snapshot(conn: sqlite3.Connection) -> tuple[list[Opportunity], list[Employee]]:
    """
    Read the opportunity and employee collections.

    Raises:
        AllocationDataError: either collection failed to load
    """
    try:
        return database.list_opportunities(conn), database.list_employees(conn)
    except Exception as e:
        raise AllocationDataError(f"Failed to load allocation data: {e}") from e


def check_allocations(
    conn: sqlite3.Connection,
    employee_ids: list[str],
    window: DateWindow,
    exclude: RoleRef | None = None,
) -> tuple[list[AllocationEntry], int]:
    """
    Aggregate allocations for the given employees over a window.

    Returns:
        Tuple of (entries, opportunities_scanned)

    Raises:
        AllocationDataError: opportunities or employees could not be loaded
    """
    opportunities, employees = load_snapshot(conn)
    entries = aggregate_allocations(employee_ids, window, opportunities, employees, exclude)
    return entries, len(opportunities)


def current_allocation(conn: sqlite3.Connection, employee_id: str) -> AllocationEntry:
    """An employee's commitments from today onwards."""
    entries, _ = check_allocations(conn, [employee_id], DateWindow(start=date.today()))
    return entries[0]


def team_allocations(conn: sqlite3.Connection, window: DateWindow) -> list[AllocationEntry]:
    """Allocations for every employee in the directory, in directory order."""
    opportunities, employees = load_snapshot(conn)
    return aggregate_allocations([e["id"] for e in employees], window, opportunities, employees)
