"""Team membership management."""

from app.models import db
from app.models.audit import ActivityLogEntry
from app.models.auth import ProjectMember
from app.services import team_service as svc
from app.services.permission_service import resolve_membership
from app.utils.errors import E


class TestAddMember:
    def test_admin_adds_without_own_membership(self, make_project, make_profile, admin):
        q = make_project(name="Q")
        foreman = make_profile(full_name="Frank Foreman")

        result = svc.add_member(admin.id, q.id, foreman.id, "foreman")
        assert result.success, result.error
        assert result.data["project_role"] == "foreman"
        assert result.data["can_edit"] is True
        assert result.data["profile"]["full_name"] == "Frank Foreman"

        entry = ActivityLogEntry.query.one()
        assert entry.entity_type == "project"
        assert entry.action == "assigned"
        assert entry.description == "added Frank Foreman as foreman"
        assert ProjectMember.query.filter_by(project_id=q.id, profile_id=admin.id).count() == 0

    def test_duplicate_member(self, project, admin, member_of):
        contractor = member_of("contractor")
        result = svc.add_member(admin.id, project.id, contractor.id, "engineer")
        assert result.error == "This user is already a member of this project"
        assert result.code == E.CONFLICT_DUPLICATE

    def test_unknown_profile(self, project, admin):
        result = svc.add_member(admin.id, project.id, 5555, "owner")
        assert result.error == "User profile not found"

    def test_unknown_role(self, project, admin, outsider):
        result = svc.add_member(admin.id, project.id, outsider.id, "surveyor")
        assert result.success is False
        assert "project_role" in result.error

    def test_non_manager_denied(self, project, member_of, outsider):
        superintendent = member_of("superintendent")
        result = svc.add_member(superintendent.id, project.id, outsider.id, "owner")
        assert result.error == "Permission denied"
        assert resolve_membership(outsider.id, project.id) is None

    def test_falls_back_to_email(self, project, admin, make_profile):
        nameless = make_profile(full_name=" ", email="crew@railcommand.test")
        nameless.full_name = ""
        db.session.commit()
        svc.add_member(admin.id, project.id, nameless.id, "contractor")
        assert ActivityLogEntry.query.one().description == "added crew@railcommand.test as contractor"


class TestUpdateAndRemove:
    def test_role_change_recomputes_can_edit(self, project, admin, make_member, outsider):
        member = make_member(project, outsider, "owner")
        assert member.can_edit is False

        result = svc.update_member_role(admin.id, project.id, member.id, "engineer")
        assert result.data["project_role"] == "engineer"
        assert result.data["can_edit"] is True

        result = svc.update_member_role(admin.id, project.id, member.id, "inspector")
        assert result.data["can_edit"] is False
        last = ActivityLogEntry.query.order_by(ActivityLogEntry.id.desc()).first()
        assert last.description == "changed Owen Outsider role to inspector"

    def test_member_from_other_project(self, project, make_project, make_member, admin, outsider):
        other = make_project(name="Q")
        foreign = make_member(other, outsider, "owner")
        result = svc.update_member_role(admin.id, project.id, foreign.id, "engineer")
        assert result.error == "Member not found on this project"
        assert result.code == E.NOT_FOUND

    def test_remove_member(self, project, admin, make_member, outsider):
        member = make_member(project, outsider, "contractor")
        result = svc.remove_member(admin.id, project.id, member.id)
        assert result.data == {"removed": True, "id": member.id}
        assert resolve_membership(outsider.id, project.id) is None
        assert ActivityLogEntry.query.one().description == "removed Owen Outsider from the project"

    def test_cannot_remove_self(self, project, member_of):
        manager = member_of("manager")
        own = ProjectMember.query.filter_by(profile_id=manager.id).one()
        result = svc.remove_member(manager.id, project.id, own.id)
        assert result.error == "You cannot remove yourself from the project"
        assert ProjectMember.query.count() == 1


class TestTeamReads:
    def test_list_in_join_order(self, project, member_of):
        first = member_of("manager")
        second = member_of("owner")
        result = svc.list_members(second.id, project.id)
        assert [m["profile_id"] for m in result.data] == [first.id, second.id]

    def test_non_member_cannot_list(self, project, outsider):
        assert svc.list_members(outsider.id, project.id).error == "Not a member of this project"

    def test_my_permissions(self, project, member_of):
        foreman = member_of("foreman")
        perms = svc.get_my_permissions(foreman.id, project.id).data
        assert perms["project_role"] == "foreman"
        assert "punch_list:resolve" in perms["allowed_actions"]
        assert "punch_list:verify" not in perms["allowed_actions"]
