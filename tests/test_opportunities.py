"""
Tests for opportunity and role business rules.
"""

from datetime import date

import pytest

from services import opportunities as service
from services.opportunities import OpportunityFilters


def opp(**overrides):
    base = {
        "id": "x",
        "client_name": "TechCorp Solutions",
        "probability": 50,
        "status": "In Progress",
        "is_active": False,
        "activated_at": None,
        "created_at": "2025-01-01",
        "roles": [],
    }
    return {**base, **overrides}


class TestFilters:
    def test_parse_probability_range(self):
        assert service.parse_probability_range("20-80") == (20, 80)
        assert service.parse_probability_range(None) == (0, 100)
        assert service.parse_probability_range("20") == (0, 100)
        assert service.parse_probability_range("a-b") == (0, 100)

    def test_parse_grades_and_needs_hire(self):
        assert service.parse_grades("SE, SC,") == ["SE", "SC"]
        assert service.parse_grades(None) == []
        assert service.parse_needs_hire("yes") == "yes"
        assert service.parse_needs_hire("maybe") == "all"

    def test_client_filter_is_case_insensitive(self):
        assert service.matches_filters(opp(), OpportunityFilters(client="techcorp"))
        assert not service.matches_filters(opp(), OpportunityFilters(client="globex"))

    def test_grade_and_hiring_filters_look_at_roles(self):
        staffed = opp(roles=[{"required_grade": "SE", "needs_hire": False}])
        assert service.matches_filters(staffed, OpportunityFilters(grades=["SE", "SC"]))
        assert not service.matches_filters(staffed, OpportunityFilters(grades=["JT"]))
        assert service.matches_filters(staffed, OpportunityFilters(needs_hire="no"))
        assert not service.matches_filters(staffed, OpportunityFilters(needs_hire="yes"))

    def test_probability_bounds_are_inclusive(self):
        assert service.matches_filters(opp(probability=80), OpportunityFilters(probability=(50, 80)))
        assert not service.matches_filters(opp(probability=81), OpportunityFilters(probability=(50, 80)))


def test_paginate():
    page = service.paginate(list(range(7)), page=2, page_size=3)
    assert page == {"items": [3, 4, 5], "total": 7, "page": 2, "page_size": 3, "total_pages": 3}
    assert service.paginate(list(range(7)), page=4, page_size=3)["items"] == []
    assert service.paginate([], page=1, page_size=3)["total_pages"] == 0


class TestAutoActivation:
    def test_reaching_threshold_activates(self):
        updates = service.apply_auto_activation(opp(), {"probability": 80}, "2025-02-01")
        assert updates["is_active"] is True
        assert updates["activated_at"] == "2025-02-01"

    def test_dropping_below_deactivates_auto_activated(self):
        current = opp(is_active=True, activated_at="2025-01-01", probability=90)
        updates = service.apply_auto_activation(current, {"probability": 70}, "2025-02-01")
        assert updates["is_active"] is False
        assert updates["activated_at"] is None

    def test_manual_activation_is_kept(self):
        current = opp(is_active=True, activated_at="2025-01-15", probability=90)
        updates = service.apply_auto_activation(current, {"probability": 70}, "2025-02-01")
        assert "is_active" not in updates


class TestOpportunityLifecycle:
    def test_create_starts_in_progress_without_roles(self, conn):
        created = service.create_opportunity(
            conn,
            {"client_name": "Acme", "expected_start_date": "2025-01-01", "probability": 90},
        )
        stored = service.get_opportunity(conn, created["id"])

        assert stored["status"] == "In Progress"
        assert stored["roles"] == []
        assert stored["is_active"] is True
        assert stored["activated_at"] == stored["created_at"] == date.today().isoformat()

    def test_create_rejects_end_before_start(self, conn):
        with pytest.raises(ValueError):
            service.create_opportunity(
                conn,
                {
                    "client_name": "Acme",
                    "expected_start_date": "2025-03-01",
                    "expected_end_date": "2025-02-01",
                    "probability": 10,
                },
            )

    def test_update_deactivates_auto_activated(self, conn):
        created = service.create_opportunity(
            conn, {"client_name": "Acme", "expected_start_date": "2025-01-01", "probability": 85}
        )
        updated = service.update_opportunity(conn, created["id"], {"probability": 40})
        assert updated["is_active"] is False
        assert updated["probability"] == 40

    def test_update_with_no_status_keeps_current_status(self, conn):
        updated = service.update_opportunity(conn, "3", {"probability": 45, "status": None})
        assert updated["status"] == "On Hold"
        assert updated["probability"] == 45

        updated = service.update_opportunity(conn, "3", {"status": "Done"})
        assert updated["status"] == "Done"

    def test_set_active_keeps_existing_activation_date(self, conn):
        reactivated = service.set_active(conn, "1", True)
        assert reactivated["activated_at"] == "2024-05-15"

        deactivated = service.set_active(conn, "1", False)
        assert deactivated["is_active"] is False
        assert deactivated["activated_at"] is None

    def test_move(self, conn):
        assert service.move_opportunity(conn, "3", "Done")["status"] == "Done"
        with pytest.raises(ValueError):
            service.move_opportunity(conn, "3", "Archived")

    def test_missing_opportunity(self, conn):
        with pytest.raises(service.OpportunityNotFoundError):
            service.get_opportunity(conn, "404")


class TestRoles:
    def test_add_role_defaults(self, conn):
        updated = service.add_role(
            conn, "4", {"role_name": "QA Engineer", "required_grade": "ST", "needs_hire": "Yes"}
        )
        [role] = updated["roles"]
        assert role["status"] == "Open"
        assert role["allocation"] == 100
        assert role["needs_hire"] is True
        assert role["assigned_member_ids"] == []

    def test_edit_role_assigns_members(self, conn):
        updated = service.edit_role(conn, "1", "1", {"assigned_member_ids": ["2", "4"], "allocation": 60})
        role = next(r for r in updated["roles"] if r["id"] == "1")
        assert role["assigned_member_ids"] == ["2", "4"]
        assert role["allocation"] == 60
        assert role["role_name"] == "Senior Frontend Developer"

    def test_update_role_status(self, conn):
        updated = service.update_role_status(conn, "1", "1", "Lost")
        assert next(r for r in updated["roles"] if r["id"] == "1")["status"] == "Lost"

    def test_role_must_belong_to_opportunity(self, conn):
        with pytest.raises(service.RoleNotFoundError):
            service.update_role_status(conn, "2", "1", "Won")
