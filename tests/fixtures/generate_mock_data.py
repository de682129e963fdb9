#!/usr/bin/env python3
"""
Generate a larger mock dataset (employees, opportunities, staffed roles) as JSON.

The output matches data/mock/db.json and can be loaded with:
    python src/scripts/seed_db.py --file tests/fixtures/generated_db.json
"""

import argparse
import json
import random
from datetime import date, timedelta
from pathlib import Path

from faker import Faker

fake = Faker()

OUTPUT_FILE = Path(__file__).parent / "generated_db.json"

GRADES = ["JT", "T", "ST", "EN", "SE", "C", "SC", "SM"]
ROLE_NAMES = [
    "Frontend Developer",
    "Backend Developer",
    "Mobile Developer",
    "Data Engineer",
    "QA Engineer",
    "Solution Architect",
    "Project Manager",
    "UX Designer",
]
ALLOCATIONS = [25, 50, 50, 75, 100, 100]

# Weighted towards active work
STATUS_WEIGHTS = {"In Progress": 6, "On Hold": 2, "Done": 2}
ROLE_STATUS_BY_OPPORTUNITY = {
    "In Progress": ["Open", "Staffed"],
    "On Hold": ["Open", "Staffed"],
    "Done": ["Won", "Lost"],
}


def generate_employees(count: int) -> list[dict]:
    employees = []
    for idx in range(1, count + 1):
        name = fake.name()
        employees.append(
            {
                "id": str(idx),
                "name": name,
                "grade": random.choice(GRADES),
                "email": f"{name.lower().replace(' ', '.')}@example.com",
            }
        )
    return employees


def generate_roles(status: str, employee_ids: list[str], next_role_id: int) -> list[dict]:
    roles = []
    for offset in range(random.randint(0, 4)):
        role_status = random.choice(ROLE_STATUS_BY_OPPORTUNITY[status])
        staffed = role_status in ("Staffed", "Won")
        roles.append(
            {
                "id": str(next_role_id + offset),
                "roleName": random.choice(ROLE_NAMES),
                "requiredGrade": random.choice(GRADES),
                "allocation": random.choice(ALLOCATIONS),
                "status": role_status,
                "needsHire": not staffed and random.random() < 0.5,
                "comments": fake.sentence() if random.random() < 0.3 else "",
                "assignedMemberIds": random.sample(employee_ids, k=random.randint(1, 2)) if staffed else [],
            }
        )
    return roles


def generate_opportunities(count: int, employee_ids: list[str], start: date) -> list[dict]:
    opportunities = []
    next_role_id = 1

    for idx in range(1, count + 1):
        status = random.choices(list(STATUS_WEIGHTS), weights=list(STATUS_WEIGHTS.values()))[0]
        open_date = start + timedelta(days=random.randint(0, 180))
        expected_start = open_date + timedelta(days=random.randint(14, 90))
        # About one in five opportunities has no planned end
        expected_end = None
        if random.random() > 0.2:
            expected_end = expected_start + timedelta(days=random.randint(30, 365))

        probability = 100 if status == "Done" else random.randrange(0, 101, 5)
        is_active = probability >= 80
        roles = generate_roles(status, employee_ids, next_role_id)
        next_role_id += len(roles)

        opportunity = {
            "id": str(idx),
            "clientName": fake.company(),
            "opportunityName": fake.catch_phrase(),
            "openDate": open_date.isoformat(),
            "createdAt": open_date.isoformat(),
            "expectedStartDate": expected_start.isoformat(),
            "probability": probability,
            "status": status,
            "isActive": is_active,
            "activatedAt": open_date.isoformat() if is_active else None,
            "roles": roles,
        }
        if expected_end:
            opportunity["expectedEndDate"] = expected_end.isoformat()
        opportunities.append(opportunity)

    return opportunities


def main():
    parser = argparse.ArgumentParser(description="Generate a mock staffing dataset")
    parser.add_argument("--employees", type=int, default=40)
    parser.add_argument("--opportunities", type=int, default=60)
    parser.add_argument("--start", type=date.fromisoformat, default=date(2024, 1, 1))
    parser.add_argument("--seed", type=int, help="Random seed for reproducible output")
    parser.add_argument("--output", type=Path, default=OUTPUT_FILE)
    args = parser.parse_args()

    if args.seed is not None:
        random.seed(args.seed)
        Faker.seed(args.seed)

    employees = generate_employees(args.employees)
    opportunities = generate_opportunities(
        args.opportunities, [e["id"] for e in employees], args.start
    )

    with open(args.output, "w", encoding="utf-8") as f:
        json.dump({"employees": employees, "opportunities": opportunities}, f, indent=2)

    staffed = sum(1 for o in opportunities for r in o["roles"] if r["assignedMemberIds"])
    print(f"Generated {len(employees)} employees, {len(opportunities)} opportunities ({staffed} staffed roles)")
    print(f"Saved to: {args.output}")


if __name__ == "__main__":
    main()
