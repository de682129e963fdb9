#!/usr/bin/env python3
"""
Load the JSON mock dataset into the staffing database for local development.

Replaces all existing opportunities, roles and employees.

Usage:
    python src/scripts/seed_db.py
    python src/scripts/seed_db.py --file tests/fixtures/generated_db.json
"""

import argparse
import json
import sys
from pathlib import Path

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from core.config import DB_PATH, MOCK_DATA_PATH
from core.database import create_schema, get_connection, load_mock_data


def seed(data_file: Path) -> tuple[int, int]:
    with open(data_file, encoding="utf-8") as f:
        data = json.load(f)

    DB_PATH.parent.mkdir(parents=True, exist_ok=True)
    conn = get_connection(DB_PATH)
    try:
        create_schema(conn)
        return load_mock_data(conn, data)
    finally:
        conn.close()


def main():
    parser = argparse.ArgumentParser(description="Seed the database with mock data")
    parser.add_argument(
        "--file",
        type=Path,
        default=MOCK_DATA_PATH,
        help=f"JSON dataset to load (default: {MOCK_DATA_PATH})",
    )
    args = parser.parse_args()

    try:
        employee_count, opportunity_count = seed(args.file)
        print(f"Loaded {employee_count} employees and {opportunity_count} opportunities into {DB_PATH}")
    except (OSError, ValueError, KeyError) as e:
        print(f"\nError: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
