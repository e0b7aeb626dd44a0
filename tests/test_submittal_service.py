"""Submittal creation, numbering and review transitions."""

import pytest
from sqlalchemy.exc import IntegrityError

from app.models import db
from app.models.audit import ActivityLogEntry
from app.models.submittal import Submittal
from app.services import submittal_service as svc
from app.services.helpers.numbering import create_numbered
from app.utils.errors import E


def _create(actor, project, title="Ballast gradation", **extra):
    result = svc.create_submittal(actor.id, project.id, {"title": title, **extra})
    assert result.success, result.error
    return result.data


class TestCreateSubmittal:
    def test_sequential_numbers(self, project, member_of):
        contractor = member_of("contractor")
        numbers = [_create(contractor, project, f"Package {n}").number for n in range(3)]
        assert numbers == ["SUB-001", "SUB-002", "SUB-003"]

    def test_numbers_are_per_project(self, project, make_project, admin):
        other = make_project(name="Second line")
        _create(admin, project)
        assert _create(admin, other).number == "SUB-001"

    def test_initial_state_and_activity(self, project, member_of):
        contractor = member_of("contractor")
        sub = _create(contractor, project, "Rail anchors", spec_section="34 11 13")
        assert sub.status == "submitted"
        assert sub.submitted_by == contractor.id
        assert sub.submit_date is not None

        entry = ActivityLogEntry.query.one()
        assert entry.entity_type == "submittal"
        assert entry.action == "created"
        assert entry.description == "submitted SUB-001: Rail anchors"

    def test_title_required(self, project, member_of):
        contractor = member_of("contractor")
        result = svc.create_submittal(contractor.id, project.id, {"title": "  "})
        assert result.success is False
        assert result.error == "title is required"
        assert result.code == E.VALIDATION_INVALID

    def test_role_without_create_is_denied(self, project, member_of):
        owner = member_of("owner")
        result = svc.create_submittal(owner.id, project.id, {"title": "Anything"})
        assert result.error == "Permission denied"
        assert Submittal.query.count() == 0
        assert ActivityLogEntry.query.count() == 0

    def test_unauthenticated(self, project):
        result = svc.create_submittal(None, project.id, {"title": "Anything"})
        assert result.error == "Not authenticated"
        assert result.code == E.AUTH_REQUIRED

    def test_number_collision_exhausts_retries(self, project, admin):
        # One row carrying SUB-002 makes count+1 collide on every attempt.
        db.session.add(Submittal(project_id=project.id, number="SUB-002", title="Legacy"))
        db.session.commit()

        result = svc.create_submittal(admin.id, project.id, {"title": "Collides"})
        assert result.success is False
        assert result.code == E.CONFLICT_DUPLICATE
        assert Submittal.query.count() == 1
        assert ActivityLogEntry.query.count() == 0

    def test_other_integrity_errors_are_not_retried(self, project, admin, caplog):
        with pytest.raises(IntegrityError):
            create_numbered(Submittal, project.id, lambda number: Submittal(
                project_id=project.id, number=number, title="Orphan", submitted_by=99999,
            ))
        db.session.rollback()
        assert "collided" not in caplog.text
        assert Submittal.query.count() == 0

    def test_database_failure_surfaces_as_database_error(self, project, admin, monkeypatch):
        def _broken(model, project_id, build):
            raise IntegrityError("INSERT", {}, Exception("FOREIGN KEY constraint failed"))

        monkeypatch.setattr(svc, "create_numbered", _broken)
        result = svc.create_submittal(admin.id, project.id, {"title": "Orphan"})
        assert result.code == E.DATABASE
        assert ActivityLogEntry.query.count() == 0


class TestReviewSubmittal:
    def _seed_four(self, project, admin):
        for n in range(4):
            sub = _create(admin, project, f"Package {n + 1}")
        return sub

    def test_engineer_approves(self, project, admin, member_of):
        sub4 = self._seed_four(project, admin)
        assert sub4.number == "SUB-004"
        engineer = member_of("engineer")

        result = svc.update_submittal_status(engineer.id, project.id, sub4.id, "approved", "Meets spec")
        assert result.success
        assert result.data.status == "approved"
        assert result.data.reviewed_by == engineer.id
        assert result.data.review_date is not None
        assert result.data.review_notes == "Meets spec"

        entry = ActivityLogEntry.query.filter_by(action="approved").one()
        assert "SUB-004" in entry.description
        assert entry.performed_by == engineer.id

    def test_rejection_verb(self, project, admin, member_of):
        sub = _create(admin, project)
        superintendent = member_of("superintendent")
        svc.update_submittal_status(superintendent.id, project.id, sub.id, "rejected")
        entry = ActivityLogEntry.query.filter_by(action="rejected").one()
        assert entry.description == "changed SUB-001 status to rejected"

    def test_conditional_uses_status_changed_verb(self, project, admin, member_of):
        sub = _create(admin, project)
        engineer = member_of("engineer")
        svc.update_submittal_status(engineer.id, project.id, sub.id, "conditional")
        assert ActivityLogEntry.query.filter_by(action="status_changed").count() == 1

    def test_contractor_cannot_review(self, project, admin, member_of):
        sub = _create(admin, project)
        contractor = member_of("contractor")
        result = svc.update_submittal_status(contractor.id, project.id, sub.id, "approved")
        assert result.error == "Permission denied"
        db.session.expire_all()
        assert db.session.get(Submittal, sub.id).status == "submitted"

    def test_non_review_move_needs_membership_only(self, project, admin, member_of):
        sub = _create(admin, project)
        owner = member_of("owner")
        result = svc.update_submittal_status(owner.id, project.id, sub.id, "under_review")
        assert result.success
        assert result.data.reviewed_by is None

    def test_unknown_status(self, project, admin):
        sub = _create(admin, project)
        result = svc.update_submittal_status(admin.id, project.id, sub.id, "lost")
        assert result.success is False
        assert "Invalid status" in result.error


class TestSubmittalReads:
    def test_list_newest_first(self, project, admin, member_of):
        for n in range(3):
            _create(admin, project, f"Package {n}")
        owner = member_of("owner")
        result = svc.list_submittals(owner.id, project.id)
        assert [s.number for s in result.data] == ["SUB-003", "SUB-002", "SUB-001"]

    def test_list_filters_by_status(self, project, admin):
        sub = _create(admin, project)
        _create(admin, project)
        svc.update_submittal_status(admin.id, project.id, sub.id, "approved")
        result = svc.list_submittals(admin.id, project.id, "approved")
        assert [s.id for s in result.data] == [sub.id]

    def test_cross_project_id_is_not_found(self, project, make_project, admin, make_member):
        other = make_project(name="Q")
        foreign = _create(admin, other)
        make_member(project, admin, "manager")

        result = svc.get_submittal(admin.id, project.id, foreign.id)
        assert result.error == "Submittal not found"
        result = svc.update_submittal_status(admin.id, project.id, foreign.id, "approved")
        assert result.error == "Submittal not found"

    def test_non_member_read_denied(self, project, admin, outsider):
        sub = _create(admin, project)
        assert svc.get_submittal(outsider.id, project.id, sub.id).error == "Not a member of this project"
        assert svc.list_submittals(outsider.id, project.id).error == "Not a member of this project"
