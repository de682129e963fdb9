#!/usr/bin/env python3
"""
Check whether assigning employees to a role would over-allocate them.

Usage:
    python src/scripts/check_allocations.py e1 e2 --start 2025-01-01 --end 2025-03-31 --allocation 50

Example (ignoring the role being edited):
    python src/scripts/check_allocations.py e1 --start 2025-01-01 --allocation 40 \
        --opportunity 1 --role 2
"""

import argparse
import sys
from datetime import date
from pathlib import Path

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from core.allocations import DateWindow, RoleRef, format_percent, format_warning
from core.config import DB_PATH
from core.database import get_connection
from services.allocations import check_allocations


def main():
    parser = argparse.ArgumentParser(description="Check employee allocations for a date window")
    parser.add_argument("employee_ids", nargs="+", help="Employee IDs to check")
    parser.add_argument("--start", required=True, type=date.fromisoformat, help="Window start (YYYY-MM-DD)")
    parser.add_argument("--end", type=date.fromisoformat, help="Window end (YYYY-MM-DD); open-ended if omitted")
    parser.add_argument("--allocation", type=float, default=0, help="Incoming allocation percentage")
    parser.add_argument("--opportunity", help="Opportunity ID of the role being edited")
    parser.add_argument("--role", help="Role ID of the role being edited")
    args = parser.parse_args()

    exclude = RoleRef(args.opportunity, args.role) if args.opportunity and args.role else None

    conn = get_connection(DB_PATH)
    try:
        entries, scanned = check_allocations(
            conn, args.employee_ids, DateWindow(start=args.start, end=args.end), exclude
        )
    finally:
        conn.close()

    print(f"Scanned {scanned} opportunities\n")
    for entry in entries:
        print(f"{entry['name']} ({entry['employee_id']}): {format_percent(entry['total_allocation'])}%")
        for detail in entry["allocations"]:
            end = detail["end_date"] or "open-ended"
            print(
                f"  - {detail['role_name']} on {detail['opportunity_id']}: "
                f"{format_percent(detail['allocation'])}% ({detail['start_date']} to {end})"
            )

    warning = format_warning(entries, args.allocation)
    if warning.message:
        print(f"\n{warning.message.strip()}")
    if warning.is_over_allocated:
        sys.exit(2)


if __name__ == "__main__":
    main()
