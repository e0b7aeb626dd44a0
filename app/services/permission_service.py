"""
Permission Service — project-scoped RBAC evaluation and membership resolution.

Two admin special cases, kept as separate branches:
  1. Admin bypass (check_permission): an actor whose *global* role is
     ``admin`` is allowed every action on every project, without looking
     at memberships at all.
  2. Implicit admin membership (resolve_membership): when an admin has no
     explicit membership row, a synthetic ``manager`` membership (can_edit
     true) is returned so membership-gated reads and transitions work too.

Evaluation for everyone else is deny-by-default:
  - no actor id            → deny_unauthenticated
  - no backing profile     → deny_profile_missing
  - no membership row      → deny_not_member
  - role lacks the action  → deny_by_role
"""

import logging
from dataclasses import dataclass

from app.core.exceptions import (
    AuthenticationError,
    NotAMemberError,
    PermissionDeniedError,
    ProfileNotFoundError,
)
from app.models import db
from app.models.auth import GlobalRole, Profile, ProjectMember, ProjectRole, role_can_edit
from app.services.permission import can_perform, get_allowed_actions, to_action

logger = logging.getLogger(__name__)

# Role synthesized for admins without an explicit membership row.
IMPLICIT_ADMIN_ROLE = ProjectRole.MANAGER


@dataclass(frozen=True)
class Membership:
    """Resolved membership of one actor in one project."""

    project_role: ProjectRole
    can_edit: bool
    implicit: bool = False
    member_id: int | None = None

    def to_dict(self) -> dict:
        return {
            "project_role": self.project_role.value,
            "can_edit": self.can_edit,
            "implicit": self.implicit,
            "member_id": self.member_id,
        }


# ── Lookups ──────────────────────────────────────────────────────────────────


def get_profile(actor_id: int | None) -> Profile | None:
    if actor_id is None:
        return None
    return db.session.get(Profile, actor_id)


def get_global_role(actor_id: int | None) -> GlobalRole | None:
    """Global role of the actor, or None when there is no backing profile."""
    profile = get_profile(actor_id)
    return profile.global_role if profile is not None else None


def _membership_row(actor_id: int, project_id: int) -> ProjectMember | None:
    return (
        ProjectMember.query
        .filter_by(project_id=project_id, profile_id=actor_id)
        .first()
    )


# ── Membership Resolver ──────────────────────────────────────────────────────


def resolve_membership(actor_id: int | None, project_id: int) -> Membership | None:
    """
    Resolve the actor's membership in a project.

    Explicit row → its role. No row but global admin → implicit manager
    membership. Otherwise None (not a member).
    """
    if actor_id is None:
        return None

    row = _membership_row(actor_id, project_id)
    if row is not None:
        try:
            role = ProjectRole(row.project_role)
        except ValueError:
            logger.error(
                "Membership %d has unknown project_role %r, treating as non-member",
                row.id, row.project_role,
            )
            return None
        return Membership(project_role=role, can_edit=bool(row.can_edit), member_id=row.id)

    if get_global_role(actor_id) is GlobalRole.ADMIN:
        return Membership(
            project_role=IMPLICIT_ADMIN_ROLE,
            can_edit=role_can_edit(IMPLICIT_ADMIN_ROLE),
            implicit=True,
        )
    return None


# ── Permission Evaluator ─────────────────────────────────────────────────────


def check_permission(actor_id: int | None, project_id: int, action) -> dict:
    """
    Decide whether the actor may perform *action* in the project.

    Pure decision, no side effects. Returns:
        {"allowed": bool, "decision": str, "reason": str | None,
         "global_role": str | None, "project_role": str | None,
         "permission": str}

    Raises:
        ValueError: *action* is not a known Action token.
    """
    action = to_action(action)
    result = {
        "allowed": False,
        "decision": "deny_unauthenticated",
        "reason": AuthenticationError.default_message,
        "global_role": None,
        "project_role": None,
        "permission": action.value,
    }
    if actor_id is None:
        return result

    global_role = get_global_role(actor_id)
    if global_role is None:
        result.update(decision="deny_profile_missing", reason=ProfileNotFoundError.default_message)
        return result
    result["global_role"] = global_role.value

    if global_role is GlobalRole.ADMIN:
        result.update(allowed=True, decision="allow_admin_bypass", reason=None)
        return result

    membership = resolve_membership(actor_id, project_id)
    if membership is None:
        result.update(decision="deny_not_member", reason=NotAMemberError.default_message)
        return result
    result["project_role"] = membership.project_role.value

    if can_perform(membership.project_role, action):
        result.update(allowed=True, decision="allow_role_grant", reason=None)
    else:
        result.update(decision="deny_by_role", reason=PermissionDeniedError.default_message)
    return result


_DENIAL_ERRORS = {
    "deny_unauthenticated": AuthenticationError,
    "deny_profile_missing": ProfileNotFoundError,
    "deny_not_member": NotAMemberError,
    "deny_by_role": PermissionDeniedError,
}


def require_actor(actor_id: int | None) -> int:
    """Return the actor id or raise AuthenticationError."""
    if actor_id is None:
        raise AuthenticationError()
    return actor_id


def require_permission(actor_id: int | None, project_id: int, action) -> dict:
    """Raising variant of check_permission; returns the decision on success."""
    decision = check_permission(actor_id, project_id, action)
    if decision["allowed"]:
        return decision

    logger.warning(
        "Actor %s denied '%s' on project %s: %s",
        actor_id, decision["permission"], project_id, decision["decision"],
    )
    error_cls = _DENIAL_ERRORS[decision["decision"]]
    if error_cls is PermissionDeniedError:
        raise PermissionDeniedError(action=decision["permission"])
    raise error_cls()


def require_membership(actor_id: int | None, project_id: int) -> Membership:
    """Gate for reads and membership-only transitions."""
    require_actor(actor_id)
    membership = resolve_membership(actor_id, project_id)
    if membership is None:
        logger.warning("Actor %s denied access to project %s: not a member", actor_id, project_id)
        raise NotAMemberError()
    return membership


def require_global_role(actor_id: int | None, roles: set[GlobalRole], message: str) -> Profile:
    """Gate on the actor's global role (project creation / deletion)."""
    require_actor(actor_id)
    profile = get_profile(actor_id)
    if profile is None:
        raise ProfileNotFoundError()
    if profile.global_role not in roles:
        logger.warning("Actor %s denied: global role %s not in %s", actor_id, profile.role, sorted(roles))
        raise PermissionDeniedError(message)
    return profile


# ── Derived views ────────────────────────────────────────────────────────────


def get_accessible_project_ids(actor_id: int) -> list[int] | None:
    """Project ids the actor may read; ``None`` means every project (admin)."""
    if get_global_role(actor_id) is GlobalRole.ADMIN:
        return None
    rows = db.session.query(ProjectMember.project_id).filter_by(profile_id=actor_id).all()
    return sorted({r[0] for r in rows})


def get_effective_permissions(actor_id: int | None, project_id: int) -> dict:
    """Membership plus the sorted list of allowed action tokens."""
    membership = require_membership(actor_id, project_id)
    if get_global_role(actor_id) is GlobalRole.ADMIN:
        actions = get_allowed_actions(IMPLICIT_ADMIN_ROLE)
    else:
        actions = get_allowed_actions(membership.project_role)
    return {
        **membership.to_dict(),
        "allowed_actions": sorted(a.value for a in actions),
    }
