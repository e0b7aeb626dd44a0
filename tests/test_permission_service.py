"""Permission evaluator and membership resolver against real rows."""

import logging

import pytest

from app.core.exceptions import (
    AuthenticationError,
    NotAMemberError,
    PermissionDeniedError,
    ProfileNotFoundError,
)
from app.models.auth import ProjectRole
from app.services.permission import Action
from app.services.permission_service import (
    check_permission,
    get_accessible_project_ids,
    get_effective_permissions,
    get_global_role,
    require_membership,
    require_permission,
    resolve_membership,
)


# ── Membership resolver ──────────────────────────────────────────────────


class TestResolveMembership:
    def test_explicit_row_returns_its_role(self, project, member_of):
        foreman = member_of("foreman")
        m = resolve_membership(foreman.id, project.id)
        assert m.project_role is ProjectRole.FOREMAN
        assert m.can_edit is True
        assert m.implicit is False
        assert m.member_id is not None

    def test_admin_without_row_gets_implicit_manager(self, project, admin):
        m = resolve_membership(admin.id, project.id)
        assert m.project_role is ProjectRole.MANAGER
        assert m.can_edit is True
        assert m.implicit is True
        assert m.member_id is None

    def test_admin_explicit_row_wins_over_implicit(self, project, admin, make_member):
        make_member(project, admin, "owner")
        m = resolve_membership(admin.id, project.id)
        assert m.project_role is ProjectRole.OWNER
        assert m.can_edit is False
        assert m.implicit is False

    def test_non_admin_without_row_is_not_a_member(self, project, outsider):
        assert resolve_membership(outsider.id, project.id) is None

    def test_global_manager_gets_no_implicit_membership(self, project, make_profile):
        manager = make_profile(role="manager")
        assert resolve_membership(manager.id, project.id) is None

    def test_no_actor(self, project):
        assert resolve_membership(None, project.id) is None

    def test_require_membership_raises(self, project, outsider):
        with pytest.raises(AuthenticationError):
            require_membership(None, project.id)
        with pytest.raises(NotAMemberError, match="Not a member of this project"):
            require_membership(outsider.id, project.id)


# ── Permission evaluator ─────────────────────────────────────────────────


class TestCheckPermission:
    def test_unauthenticated(self, project):
        d = check_permission(None, project.id, Action.RFI_CREATE)
        assert d["allowed"] is False
        assert d["decision"] == "deny_unauthenticated"
        assert d["reason"] == "Not authenticated"

    def test_profile_missing(self, project):
        d = check_permission(987654, project.id, Action.RFI_CREATE)
        assert d["decision"] == "deny_profile_missing"
        assert d["reason"] == "Profile not found"

    @pytest.mark.parametrize("action", list(Action))
    def test_admin_allowed_everything_without_membership(self, project, admin, action):
        d = check_permission(admin.id, project.id, action)
        assert d["allowed"] is True
        assert d["decision"] == "allow_admin_bypass"
        assert d["global_role"] == "admin"

    @pytest.mark.parametrize("action", list(Action))
    def test_admin_allowed_regardless_of_project_role(self, project, admin, make_member, action):
        make_member(project, admin, "owner")
        assert check_permission(admin.id, project.id, action)["allowed"] is True

    def test_admin_allowed_on_project_never_seen(self, make_project, admin):
        other = make_project(name="Q")
        assert check_permission(admin.id, other.id, "team:manage")["allowed"] is True

    @pytest.mark.parametrize("action", list(Action))
    def test_non_member_denied_every_action(self, project, outsider, action):
        d = check_permission(outsider.id, project.id, action)
        assert d["allowed"] is False
        assert d["decision"] == "deny_not_member"
        assert d["reason"] == "Not a member of this project"

    def test_role_grant(self, project, member_of):
        engineer = member_of("engineer")
        d = check_permission(engineer.id, project.id, "submittal:review")
        assert d["allowed"] is True
        assert d["decision"] == "allow_role_grant"
        assert d["project_role"] == "engineer"

    def test_role_lacks_action(self, project, member_of):
        foreman = member_of("foreman")
        d = check_permission(foreman.id, project.id, Action.PUNCH_LIST_VERIFY)
        assert d["allowed"] is False
        assert d["decision"] == "deny_by_role"
        assert d["reason"] == "Permission denied"

    def test_unknown_action_raises(self, project, admin):
        with pytest.raises(ValueError):
            check_permission(admin.id, project.id, "project:destroy")

    def test_check_has_no_side_effects(self, project, member_of):
        from app.models.audit import ActivityLogEntry

        owner = member_of("owner")
        check_permission(owner.id, project.id, Action.TEAM_MANAGE)
        assert ActivityLogEntry.query.count() == 0


class TestRequirePermission:
    def test_maps_denials_to_taxonomy(self, project, member_of, outsider):
        foreman = member_of("foreman")
        with pytest.raises(AuthenticationError):
            require_permission(None, project.id, Action.RFI_CREATE)
        with pytest.raises(ProfileNotFoundError):
            require_permission(424242, project.id, Action.RFI_CREATE)
        with pytest.raises(NotAMemberError):
            require_permission(outsider.id, project.id, Action.RFI_CREATE)
        with pytest.raises(PermissionDeniedError) as exc_info:
            require_permission(foreman.id, project.id, Action.PUNCH_LIST_VERIFY)
        assert exc_info.value.message == "Permission denied"
        assert exc_info.value.action == "punch_list:verify"

    def test_denial_is_logged(self, project, member_of, caplog):
        owner = member_of("owner")
        with caplog.at_level(logging.WARNING, logger="app.services.permission_service"):
            with pytest.raises(PermissionDeniedError):
                require_permission(owner.id, project.id, Action.TEAM_MANAGE)
        assert "team:manage" in caplog.text


# ── Derived views ────────────────────────────────────────────────────────


class TestDerivedViews:
    def test_global_role_lookup(self, admin, outsider):
        assert get_global_role(admin.id).value == "admin"
        assert get_global_role(outsider.id).value == "member"
        assert get_global_role(31337) is None

    def test_accessible_projects(self, make_project, make_member, outsider, admin):
        p1 = make_project(name="P1")
        p2 = make_project(name="P2")
        make_project(name="P3")
        make_member(p2, outsider, "contractor")
        make_member(p1, outsider, "owner")
        assert get_accessible_project_ids(outsider.id) == sorted([p1.id, p2.id])
        assert get_accessible_project_ids(admin.id) is None

    def test_effective_permissions_for_member(self, project, member_of):
        inspector = member_of("inspector")
        perms = get_effective_permissions(inspector.id, project.id)
        assert perms["project_role"] == "inspector"
        assert perms["can_edit"] is False
        assert perms["allowed_actions"] == ["punch_list:create", "punch_list:verify", "rfi:create"]

    def test_effective_permissions_for_implicit_admin(self, project, admin):
        perms = get_effective_permissions(admin.id, project.id)
        assert perms["implicit"] is True
        assert len(perms["allowed_actions"]) == len(Action)
