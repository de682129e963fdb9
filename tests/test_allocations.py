"""
Tests for the allocation overlap checker.
"""

from datetime import date

import pytest

from core import allocations
from core.allocations import (
    AllocationWarning,
    DateWindow,
    RoleRef,
    aggregate_allocations,
    format_percent,
    format_warning,
    overlaps,
    parse_date,
)

Q1 = DateWindow(start=date(2025, 1, 1), end=date(2025, 3, 31))


class TestOverlaps:
    @pytest.mark.parametrize(
        "a, b, expected",
        [
            (("2025-01-01", "2025-01-31"), ("2025-01-15", "2025-02-15"), True),
            (("2025-01-01", "2025-01-31"), ("2025-01-31", "2025-02-15"), True),
            (("2025-01-01", "2025-01-31"), ("2025-02-01", "2025-02-15"), False),
            (("2025-01-01", None), ("2030-01-01", "2030-02-01"), True),
            (("2025-01-01", "2025-12-31"), ("2024-01-01", None), True),
            (("2025-06-01", None), ("2025-01-01", "2025-02-01"), False),
            (("2025-01-01", None), ("2026-01-01", None), True),
        ],
    )
    def test_overlap_is_symmetric(self, a, b, expected):
        assert overlaps(a[0], a[1], b[0], b[1]) is expected
        assert overlaps(b[0], b[1], a[0], a[1]) is expected

    def test_accepts_date_objects(self):
        assert overlaps(date(2025, 1, 1), date(2025, 1, 10), date(2025, 1, 10), None)

    def test_invalid_dates_never_overlap(self):
        assert overlaps("2025-13-45", None, "2025-01-01", None) is False
        assert overlaps("2025-01-01", "not-a-date", "2025-01-01", None) is False
        assert overlaps(None, None, "2025-01-01", None) is False


def test_parse_date():
    assert parse_date("2025-02-03") == date(2025, 2, 3)
    assert parse_date(None) is None
    assert parse_date("") is None
    with pytest.raises(ValueError):
        parse_date("03/02/2025")


class TestAggregateAllocations:
    def test_sums_overlapping_roles(self, sample_opportunities, sample_employees):
        [entry] = aggregate_allocations(["e1"], Q1, sample_opportunities, sample_employees)

        assert entry["employee_id"] == "e1"
        assert entry["name"] == "Ada Lovelace"
        assert entry["total_allocation"] == 110
        assert [d["role_name"] for d in entry["allocations"]] == ["Developer", "Architect"]
        assert entry["allocations"][1] == {
            "opportunity_id": "o2",
            "role_name": "Architect",
            "allocation": 70,
            "start_date": "2025-02-01",
            "end_date": "2025-06-30",
        }

    def test_excludes_role_being_edited(self, sample_opportunities, sample_employees):
        entries = aggregate_allocations(
            ["e2"], Q1, sample_opportunities, sample_employees, exclude=RoleRef("o1", "r2")
        )
        assert entries[0]["total_allocation"] == 0
        assert entries[0]["allocations"] == []

    def test_exclusion_needs_matching_opportunity(self, sample_opportunities, sample_employees):
        entries = aggregate_allocations(
            ["e2"], Q1, sample_opportunities, sample_employees, exclude=RoleRef("o2", "r2")
        )
        assert entries[0]["total_allocation"] == 50

    def test_unknown_employee_gets_default_name(self, sample_opportunities, sample_employees):
        [entry] = aggregate_allocations(["nobody"], Q1, sample_opportunities, sample_employees)
        assert entry == {
            "employee_id": "nobody",
            "name": "Unknown Employee",
            "total_allocation": 0,
            "allocations": [],
        }

    def test_preserves_request_order(self, sample_opportunities, sample_employees):
        entries = aggregate_allocations(["e2", "e1"], Q1, sample_opportunities, sample_employees)
        assert [e["employee_id"] for e in entries] == ["e2", "e1"]

    def test_skips_opportunities_outside_window(self, sample_opportunities, sample_employees):
        window = DateWindow(start=date(2025, 5, 1), end=date(2025, 5, 31))
        [entry] = aggregate_allocations(["e1"], window, sample_opportunities, sample_employees)
        assert entry["total_allocation"] == 70

    def test_open_ended_opportunity_always_counts(self, sample_employees):
        opportunities = [
            {
                "id": "o9",
                "expected_start_date": "2024-01-01",
                "expected_end_date": None,
                "roles": [{"id": "r9", "role_name": "Lead", "allocation": 30, "assigned_member_ids": ["e1"]}],
            }
        ]
        far_future = DateWindow(start=date(2030, 1, 1), end=date(2030, 2, 1))
        before_start = DateWindow(start=date(2020, 1, 1), end=date(2020, 2, 1))

        assert aggregate_allocations(["e1"], far_future, opportunities, sample_employees)[0]["total_allocation"] == 30
        assert aggregate_allocations(["e1"], before_start, opportunities, sample_employees)[0]["total_allocation"] == 30

    def test_open_ended_policy_can_be_disabled(self, sample_employees, monkeypatch):
        monkeypatch.setattr(allocations, "OPEN_ENDED_ALWAYS_OVERLAPS", False)
        opportunities = [
            {
                "id": "o9",
                "expected_start_date": "2024-01-01",
                "roles": [{"id": "r9", "role_name": "Lead", "allocation": 30, "assigned_member_ids": ["e1"]}],
            }
        ]
        before_start = DateWindow(start=date(2020, 1, 1), end=date(2020, 2, 1))
        after_start = DateWindow(start=date(2030, 1, 1))

        assert aggregate_allocations(["e1"], before_start, opportunities, sample_employees)[0]["total_allocation"] == 0
        assert aggregate_allocations(["e1"], after_start, opportunities, sample_employees)[0]["total_allocation"] == 30

    def test_malformed_dates_exclude_opportunity(self, sample_employees):
        opportunities = [
            {
                "id": "bad",
                "expected_start_date": "2025-02-30",
                "expected_end_date": "2025-03-31",
                "roles": [{"id": "r1", "role_name": "Dev", "allocation": 60, "assigned_member_ids": ["e1"]}],
            }
        ]
        [entry] = aggregate_allocations(["e1"], Q1, opportunities, sample_employees)
        assert entry["total_allocation"] == 0

    def test_is_idempotent(self, sample_opportunities, sample_employees):
        first = aggregate_allocations(["e1", "e2"], Q1, sample_opportunities, sample_employees)
        second = aggregate_allocations(["e1", "e2"], Q1, sample_opportunities, sample_employees)
        assert first == second
        assert sample_opportunities[0]["roles"][0]["assigned_member_ids"] == ["e1"]


class TestFormatWarning:
    @staticmethod
    def entry(total, name="Ada Lovelace"):
        return {"employee_id": "e1", "name": name, "total_allocation": total, "allocations": []}

    def test_exactly_full(self):
        warning = format_warning([self.entry(60)], 40)
        assert "at 100% allocation" in warning.message
        assert warning.is_over_allocated is False

    def test_over_allocated(self):
        warning = format_warning([self.entry(60)], 50)
        assert "over-allocated at 110%" in warning.message
        assert warning.is_over_allocated is True

    def test_under_capacity(self):
        assert format_warning([self.entry(60)], 10) == AllocationWarning(message=None, is_over_allocated=False)

    def test_messages_follow_entry_order(self):
        warning = format_warning([self.entry(80, "Ada"), self.entry(10, "Bob"), self.entry(50, "Cy")], 50)
        assert warning.message == "Ada will be over-allocated at 130%. Cy will be at 100% allocation. "
        assert warning.is_over_allocated is True


def test_format_percent():
    assert format_percent(110) == "110"
    assert format_percent(110.0) == "110"
    assert format_percent(102.5) == "102.5"
