"""
Team Service — project membership management.

Every mutation requires ``team:manage``. An actor can never remove their
own membership, so a project cannot be left without the member who is
managing it by accident.
"""

import logging

from app.core.exceptions import ConflictError, NotFoundError, ValidationError
from app.core.results import ActionResult
from app.models import db
from app.models.auth import Profile, ProjectMember, ProjectRole, role_can_edit
from app.services.activity_service import record_activity
from app.services.helpers.guards import guarded_action
from app.services.helpers.scoped_queries import get_project_or_404
from app.services.permission import Action
from app.services.permission_service import (
    get_effective_permissions,
    require_actor,
    require_membership,
    require_permission,
)
from app.utils.helpers import parse_enum

logger = logging.getLogger(__name__)


def _display_name(profile: Profile | None) -> str:
    if profile is None:
        return "Unknown user"
    return profile.full_name or profile.email


def _get_member(project_id: int, member_id: int) -> ProjectMember:
    member = ProjectMember.query.filter_by(id=member_id, project_id=project_id).first()
    if member is None:
        raise NotFoundError(
            resource="Member", resource_id=member_id, project_id=project_id,
            message="Member not found on this project",
        )
    return member


@guarded_action("Failed to load team members")
def list_members(actor_id: int | None, project_id: int) -> ActionResult:
    require_membership(actor_id, project_id)
    get_project_or_404(project_id)
    members = (
        ProjectMember.query
        .filter_by(project_id=project_id)
        .order_by(ProjectMember.added_at.asc(), ProjectMember.id.asc())
        .all()
    )
    return ActionResult.ok([m.to_dict(include_profile=True) for m in members])


@guarded_action("Failed to add team member")
def add_member(actor_id: int | None, project_id: int, profile_id, role) -> ActionResult:
    require_actor(actor_id)
    if not profile_id:
        raise ValidationError("profile_id is required", details={"profile_id": "required"})
    project_role = parse_enum(ProjectRole, role, "project_role")
    require_permission(actor_id, project_id, Action.TEAM_MANAGE)
    get_project_or_404(project_id)

    profile = db.session.get(Profile, profile_id)
    if profile is None:
        raise NotFoundError(resource="User profile", resource_id=profile_id)

    existing = ProjectMember.query.filter_by(project_id=project_id, profile_id=profile.id).first()
    if existing is not None:
        raise ConflictError(
            resource="ProjectMember", field="profile_id", value=str(profile.id),
            message="This user is already a member of this project",
        )

    member = ProjectMember(
        project_id=project_id,
        profile_id=profile.id,
        project_role=project_role.value,
        can_edit=role_can_edit(project_role),
    )
    db.session.add(member)
    db.session.commit()

    record_activity(project_id, "project", project_id, "assigned",
                    f"added {_display_name(profile)} as {project_role.value}", actor_id)
    return ActionResult.ok(member.to_dict(include_profile=True))


@guarded_action("Failed to update member role")
def update_member_role(actor_id: int | None, project_id: int, member_id: int, role) -> ActionResult:
    """Change a member's project role; can_edit is recomputed from the role."""
    require_actor(actor_id)
    project_role = parse_enum(ProjectRole, role, "project_role")
    require_permission(actor_id, project_id, Action.TEAM_MANAGE)

    member = _get_member(project_id, member_id)
    member.project_role = project_role.value
    member.can_edit = role_can_edit(project_role)
    db.session.commit()

    record_activity(project_id, "project", project_id, "updated",
                    f"changed {_display_name(member.profile)} role to {project_role.value}", actor_id)
    return ActionResult.ok(member.to_dict(include_profile=True))


@guarded_action("Failed to remove team member")
def remove_member(actor_id: int | None, project_id: int, member_id: int) -> ActionResult:
    require_permission(actor_id, project_id, Action.TEAM_MANAGE)

    member = _get_member(project_id, member_id)
    if member.profile_id == actor_id:
        raise ValidationError("You cannot remove yourself from the project")

    name = _display_name(member.profile)
    db.session.delete(member)
    db.session.commit()
    logger.info("Member %d (%s) removed from project %d by %s", member_id, name, project_id, actor_id)

    record_activity(project_id, "project", project_id, "updated",
                    f"removed {name} from the project", actor_id)
    return ActionResult.ok({"removed": True, "id": member_id})


@guarded_action("Failed to load permissions")
def get_my_permissions(actor_id: int | None, project_id: int) -> ActionResult:
    """The actor's resolved membership and allowed action tokens in a project."""
    require_membership(actor_id, project_id)
    get_project_or_404(project_id)
    return ActionResult.ok(get_effective_permissions(actor_id, project_id))
