#!/usr/bin/env python3
"""
Generate an Excel allocation report for every employee.

Usage:
    python src/scripts/create_allocation_report.py --start 2025-01-01 --end 2025-03-31
"""

import argparse
import sys
from datetime import date
from pathlib import Path

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from core.allocations import DateWindow
from core.config import DB_PATH, OUTPUT_DIR
from core.database import get_connection
from services.allocations import team_allocations
from services.reports import save_report


def main():
    parser = argparse.ArgumentParser(description="Generate allocation report")
    parser.add_argument(
        "--start",
        type=date.fromisoformat,
        default=date.today(),
        help="Window start (YYYY-MM-DD). Defaults to today.",
    )
    parser.add_argument("--end", type=date.fromisoformat, help="Window end (YYYY-MM-DD)")
    parser.add_argument(
        "--output-dir",
        type=Path,
        default=OUTPUT_DIR / "reports" / "allocations",
        help="Directory for the generated workbook",
    )
    args = parser.parse_args()

    window = DateWindow(start=args.start, end=args.end)
    conn = get_connection(DB_PATH)
    try:
        entries = team_allocations(conn, window)
    finally:
        conn.close()

    output_path = save_report(entries, window, args.output_dir)
    print(f"\nReport covers {len(entries)} employees: {output_path}")


if __name__ == "__main__":
    main()
