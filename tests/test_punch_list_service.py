"""Punch-list items: creation and the resolve / verify sign-off gates."""

from app.models import db
from app.models.audit import ActivityLogEntry
from app.models.punch_list import PunchListItem
from app.services import punch_list_service as svc
from app.utils.errors import E


def _create(actor, project, title="Loose rail anchor at MP 12.4", **extra):
    result = svc.create_punch_list_item(actor.id, project.id, {"title": title, **extra})
    assert result.success, result.error
    return result.data


class TestCreatePunchListItem:
    def test_defaults(self, project, member_of):
        inspector = member_of("inspector")
        item = _create(inspector, project, location="Track 2")
        assert item.number == "PL-001"
        assert item.status == "open"
        assert item.priority == "medium"
        assert item.assigned_to == inspector.id
        assert item.created_by == inspector.id
        entry = ActivityLogEntry.query.one()
        assert entry.description == "created PL-001: Loose rail anchor at MP 12.4"

    def test_explicit_assignee(self, project, admin, member_of):
        foreman = member_of("foreman")
        item = _create(admin, project, assigned_to=foreman.id, priority="high")
        assert item.assigned_to == foreman.id
        assert item.priority == "high"

    def test_owner_cannot_create(self, project, member_of):
        owner = member_of("owner")
        result = svc.create_punch_list_item(owner.id, project.id, {"title": "X"})
        assert result.error == "Permission denied"

    def test_title_required(self, project, admin):
        assert svc.create_punch_list_item(admin.id, project.id, {}).error == "title is required"

    def test_unknown_assignee(self, project, admin):
        result = svc.create_punch_list_item(admin.id, project.id, {"title": "Loose bolt", "assigned_to": 99999})
        assert result.success is False
        assert result.code == E.NOT_FOUND
        assert result.error == "User profile not found"
        assert PunchListItem.query.count() == 0
        assert ActivityLogEntry.query.count() == 0

    def test_non_integer_assignee(self, project, admin):
        result = svc.create_punch_list_item(admin.id, project.id, {"title": "Loose bolt", "assigned_to": "foreman"})
        assert result.code == E.VALIDATION_INVALID
        assert result.details == {"assigned_to": "invalid"}
        assert PunchListItem.query.count() == 0


class TestPunchListSignOff:
    def test_foreman_resolves_but_cannot_verify(self, project, admin, member_of):
        item = _create(admin, project)
        foreman = member_of("foreman")

        resolved = svc.update_punch_list_status(
            foreman.id, project.id, item.id, "resolved", "Re-driven and torqued",
        )
        assert resolved.success
        assert resolved.data.resolved_date is not None
        assert resolved.data.resolution_notes == "Re-driven and torqued"
        entries_before = ActivityLogEntry.query.count()

        denied = svc.update_punch_list_status(foreman.id, project.id, item.id, "verified")
        assert denied.success is False
        assert denied.error == "Permission denied"

        db.session.expire_all()
        stored = db.session.get(PunchListItem, item.id)
        assert stored.status == "resolved"
        assert stored.verified_date is None
        assert ActivityLogEntry.query.count() == entries_before

    def test_inspector_verifies(self, project, admin, member_of):
        item = _create(admin, project)
        svc.update_punch_list_status(admin.id, project.id, item.id, "resolved")
        inspector = member_of("inspector")
        result = svc.update_punch_list_status(inspector.id, project.id, item.id, "verified")
        assert result.success
        assert result.data.verified_date is not None
        last = ActivityLogEntry.query.order_by(ActivityLogEntry.id.desc()).first()
        assert last.description == "changed PL-001 status to verified"
        assert last.action == "status_changed"

    def test_inspector_cannot_resolve(self, project, admin, member_of):
        item = _create(admin, project)
        inspector = member_of("inspector")
        result = svc.update_punch_list_status(inspector.id, project.id, item.id, "resolved")
        assert result.error == "Permission denied"

    def test_in_progress_needs_membership_only(self, project, admin, member_of):
        item = _create(admin, project)
        owner = member_of("owner")
        assert svc.update_punch_list_status(owner.id, project.id, item.id, "in_progress").success

    def test_non_member_gets_not_a_member(self, project, admin, outsider):
        item = _create(admin, project)
        result = svc.update_punch_list_status(outsider.id, project.id, item.id, "in_progress")
        assert result.error == "Not a member of this project"

    def test_unknown_item(self, project, admin):
        result = svc.update_punch_list_status(admin.id, project.id, 999, "in_progress")
        assert result.error == "Punch list item not found"
