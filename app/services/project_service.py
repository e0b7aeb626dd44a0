"""Project CRUD service with role-gated creation, management and deletion."""

from __future__ import annotations

import logging
from datetime import date

from app.core.results import ActionResult
from app.models import db
from app.models.auth import GlobalRole, ProjectMember, ProjectRole, role_can_edit
from app.models.project import Project, ProjectStatus
from app.services.activity_service import record_activity
from app.services.helpers.guards import guarded_action
from app.services.helpers.scoped_queries import get_project_or_404
from app.services.permission import Action, can_perform
from app.services.permission_service import (
    get_accessible_project_ids,
    get_global_role,
    require_actor,
    require_global_role,
    require_membership,
    require_permission,
)
from app.utils.helpers import optional_text, parse_date_input, parse_enum, parse_number, require_text

logger = logging.getLogger(__name__)

_CREATOR_ROLES = {GlobalRole.ADMIN, GlobalRole.MANAGER}
_TEXT_FIELDS = ("description", "location", "client")
_DATE_FIELDS = ("start_date", "target_end_date")
_BUDGET_FIELDS = ("budget_total", "budget_spent")


def _can_view_budget(actor_id: int, project_id: int) -> bool:
    if get_global_role(actor_id) is GlobalRole.ADMIN:
        return True
    membership = require_membership(actor_id, project_id)
    return can_perform(membership.project_role, Action.BUDGET_VIEW)


def _serialize(actor_id: int, project: Project) -> dict:
    return project.to_dict(include_budget=_can_view_budget(actor_id, project.id))


def _apply_fields(project: Project, data: dict) -> None:
    for attr in _TEXT_FIELDS:
        if attr in data:
            setattr(project, attr, optional_text(data, attr))
    for attr in _DATE_FIELDS:
        if attr in data:
            setattr(project, attr, parse_date_input(data.get(attr), attr))
    for attr in _BUDGET_FIELDS:
        if attr in data:
            setattr(project, attr, parse_number(data.get(attr), attr, minimum=0))


@guarded_action("Failed to load projects")
def list_projects(actor_id: int | None) -> ActionResult:
    """Projects the actor can see, newest first (admins see all)."""
    require_actor(actor_id)
    allowed_ids = get_accessible_project_ids(actor_id)

    query = Project.query
    if allowed_ids is not None:
        if not allowed_ids:
            return ActionResult.ok([])
        query = query.filter(Project.id.in_(allowed_ids))
    projects = query.order_by(Project.created_at.desc(), Project.id.desc()).all()
    return ActionResult.ok([_serialize(actor_id, p) for p in projects])


@guarded_action("Failed to load project")
def get_project(actor_id: int | None, project_id: int) -> ActionResult:
    require_membership(actor_id, project_id)
    project = get_project_or_404(project_id)
    return ActionResult.ok(_serialize(actor_id, project))


@guarded_action("Failed to create project")
def create_project(actor_id: int | None, data: dict) -> ActionResult:
    """Create a project; the creator becomes its manager."""
    require_actor(actor_id)
    name = require_text(data, "name")
    require_global_role(
        actor_id, _CREATOR_ROLES,
        "Permission denied: only admins and managers can create projects",
    )

    project = Project(name=name, created_by=actor_id)
    _apply_fields(project, data)
    if "status" in data:
        project.status = parse_enum(ProjectStatus, data.get("status")).value
    db.session.add(project)
    db.session.flush()

    db.session.add(ProjectMember(
        project_id=project.id,
        profile_id=actor_id,
        project_role=ProjectRole.MANAGER.value,
        can_edit=role_can_edit(ProjectRole.MANAGER),
    ))
    db.session.commit()
    logger.info("Project %d '%s' created by %s", project.id, project.name, actor_id)

    record_activity(project.id, "project", project.id, "created",
                    f"created project: {project.name}", actor_id)
    return ActionResult.ok(project.to_dict())


@guarded_action("Failed to update project")
def update_project(actor_id: int | None, project_id: int, data: dict) -> ActionResult:
    require_actor(actor_id)
    if "name" in data:
        require_text(data, "name")
    require_permission(actor_id, project_id, Action.PROJECT_MANAGE)

    project = get_project_or_404(project_id)
    if "name" in data:
        project.name = require_text(data, "name")
    _apply_fields(project, data)
    db.session.commit()

    record_activity(project.id, "project", project.id, "updated",
                    f"updated project: {project.name}", actor_id)
    return ActionResult.ok(project.to_dict())


@guarded_action("Failed to update project status")
def update_project_status(actor_id: int | None, project_id: int, status) -> ActionResult:
    """Change project status; ``completed`` stamps the actual end date."""
    require_actor(actor_id)
    new_status = parse_enum(ProjectStatus, status)
    require_permission(actor_id, project_id, Action.PROJECT_MANAGE)

    project = get_project_or_404(project_id)
    project.status = new_status.value
    if new_status is ProjectStatus.COMPLETED:
        project.actual_end_date = date.today()
    db.session.commit()

    label = new_status.value.replace("_", " ")
    record_activity(project.id, "project", project.id, "status_changed",
                    f"project marked as {label}", actor_id)
    return ActionResult.ok(project.to_dict())


@guarded_action("Failed to delete project")
def delete_project(actor_id: int | None, project_id: int) -> ActionResult:
    """Delete a project and everything scoped to it (global admins only)."""
    require_global_role(actor_id, {GlobalRole.ADMIN}, "Permission denied: only admins can delete projects")
    project = get_project_or_404(project_id)

    db.session.delete(project)
    db.session.commit()
    logger.info("Project %d deleted by %s", project_id, actor_id)
    return ActionResult.ok({"deleted": True, "id": project_id})
