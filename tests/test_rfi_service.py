"""RFI lifecycle, response thread and the overdue sweep."""

from datetime import date, timedelta

import pytest

from app.models import db
from app.models.audit import ActivityLogEntry
from app.models.rfi import RFI, RFIResponse
from app.services import rfi_service as svc
from app.utils.errors import E


def _create(actor, project, subject="Tie spacing at turnout 4", **extra):
    payload = {"subject": subject, "question": "Confirm spacing per detail 7?", **extra}
    result = svc.create_rfi(actor.id, project.id, payload)
    assert result.success, result.error
    return result.data


class TestCreateRFI:
    def test_defaults_and_activity(self, project, member_of):
        foreman = member_of("foreman")
        rfi = _create(foreman, project)
        assert rfi.number == "RFI-001"
        assert rfi.status == "open"
        assert rfi.priority == "medium"
        assert rfi.submitted_by == foreman.id

        entry = ActivityLogEntry.query.one()
        assert (entry.entity_type, entry.action) == ("rfi", "created")
        assert entry.description == "created RFI-001: Tie spacing at turnout 4"

    @pytest.mark.parametrize("missing", ["subject", "question"])
    def test_required_fields(self, project, admin, missing):
        payload = {"subject": "S", "question": "Q"}
        payload.pop(missing)
        result = svc.create_rfi(admin.id, project.id, payload)
        assert result.error == f"{missing} is required"
        assert RFI.query.count() == 0

    def test_invalid_priority(self, project, admin):
        result = svc.create_rfi(admin.id, project.id, {"subject": "S", "question": "Q", "priority": "urgent"})
        assert result.success is False
        assert "priority" in result.error

    def test_explicit_priority_and_due_date(self, project, admin):
        rfi = _create(admin, project, priority="critical", due_date="2025-06-30")
        assert rfi.priority == "critical"
        assert rfi.due_date == date(2025, 6, 30)

    def test_unknown_assignee(self, project, admin):
        payload = {"subject": "S", "question": "Q", "assigned_to": 99999}
        result = svc.create_rfi(admin.id, project.id, payload)
        assert result.code == E.NOT_FOUND
        assert result.error == "User profile not found"
        assert RFI.query.count() == 0
        assert ActivityLogEntry.query.count() == 0

    def test_assignee_must_exist_but_may_be_outside_project(self, project, admin, make_profile):
        designer = make_profile(full_name="Dana Designer")
        assert _create(admin, project, assigned_to=str(designer.id)).assigned_to == designer.id

    def test_every_role_may_create(self, project, member_of):
        for n, role in enumerate(["owner", "inspector", "contractor"]):
            assert _create(member_of(role), project, f"Question {n}").number == f"RFI-00{n + 1}"


class TestRFIStatus:
    def test_close_requires_permission(self, project, admin, member_of):
        rfi = _create(admin, project)
        engineer = member_of("engineer")
        result = svc.update_rfi_status(engineer.id, project.id, rfi.id, "closed")
        assert result.error == "Permission denied"

        superintendent = member_of("superintendent")
        result = svc.update_rfi_status(superintendent.id, project.id, rfi.id, "closed")
        assert result.success
        assert result.data.status == "closed"
        assert result.data.response_date is not None

    def test_overdue_is_not_user_settable(self, project, admin):
        rfi = _create(admin, project)
        result = svc.update_rfi_status(admin.id, project.id, rfi.id, "overdue")
        assert result.success is False
        assert "overdue" in result.error
        db.session.expire_all()
        assert db.session.get(RFI, rfi.id).status == "open"

    def test_member_can_mark_answered(self, project, admin, member_of):
        rfi = _create(admin, project)
        contractor = member_of("contractor")
        result = svc.update_rfi_status(contractor.id, project.id, rfi.id, "answered")
        assert result.success
        entry = ActivityLogEntry.query.filter_by(action="status_changed").one()
        assert entry.description == "changed RFI-001 status to answered"


class TestRFIResponses:
    def test_official_response_answers(self, project, admin, member_of):
        rfi = _create(admin, project)
        engineer = member_of("engineer")
        result = svc.add_rfi_response(engineer.id, project.id, rfi.id, "Use 610 mm spacing.", is_official=True)
        assert result.success
        assert result.data.is_official_response is True

        db.session.expire_all()
        stored = db.session.get(RFI, rfi.id)
        assert stored.status == "answered"
        assert stored.answer == "Use 610 mm spacing."
        assert stored.response_date is not None

        entry = ActivityLogEntry.query.filter_by(action="commented").one()
        assert entry.description == "officially responded to RFI-001"

    def test_unofficial_response_keeps_status(self, project, admin, member_of):
        rfi = _create(admin, project)
        owner = member_of("owner")
        result = svc.add_rfi_response(owner.id, project.id, rfi.id, "Following this one.")
        assert result.success
        db.session.expire_all()
        assert db.session.get(RFI, rfi.id).status == "open"
        assert ActivityLogEntry.query.filter_by(action="commented").one().description == "responded to RFI-001"

    def test_official_response_requires_respond(self, project, admin, member_of):
        rfi = _create(admin, project)
        foreman = member_of("foreman")
        result = svc.add_rfi_response(foreman.id, project.id, rfi.id, "Answer", is_official=True)
        assert result.error == "Permission denied"
        assert RFIResponse.query.count() == 0

    def test_empty_content_rejected(self, project, admin):
        rfi = _create(admin, project)
        assert svc.add_rfi_response(admin.id, project.id, rfi.id, "   ").error == "content is required"

    def test_detail_includes_thread(self, project, admin):
        rfi = _create(admin, project)
        svc.add_rfi_response(admin.id, project.id, rfi.id, "First")
        svc.add_rfi_response(admin.id, project.id, rfi.id, "Second", is_official=True)
        detail = svc.get_rfi(admin.id, project.id, rfi.id).data
        assert [r["content"] for r in detail["responses"]] == ["First", "Second"]
        assert detail["status"] == "answered"


class TestOverdueSweep:
    def test_marks_only_stale_open_rfis(self, project, admin):
        today = date(2025, 5, 10)
        stale = _create(admin, project, "Stale", due_date=(today - timedelta(days=1)).isoformat())
        _create(admin, project, "Due today", due_date=today.isoformat())
        _create(admin, project, "No due date")
        answered = _create(admin, project, "Answered", due_date="2025-01-01")
        svc.update_rfi_status(admin.id, project.id, answered.id, "answered")

        result = svc.mark_overdue_rfis(project.id, today=today)
        assert result.success
        assert [r.id for r in result.data] == [stale.id]

        entry = ActivityLogEntry.query.filter(
            ActivityLogEntry.description == "changed RFI-001 status to overdue"
        ).one()
        assert entry.performed_by is None

    def test_sweep_is_idempotent(self, project, admin):
        _create(admin, project, due_date="2025-01-01")
        svc.mark_overdue_rfis(project.id, today=date(2025, 2, 1))
        again = svc.mark_overdue_rfis(project.id, today=date(2025, 2, 1))
        assert again.data == []

    def test_missing_project(self):
        assert svc.mark_overdue_rfis(4242).error == "Project not found"
