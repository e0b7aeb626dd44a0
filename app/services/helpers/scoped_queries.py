"""
Project-scoped query helpers.

Every get-by-id of a project-owned entity goes through these helpers
instead of ``db.session.get(Model, pk)``. A record that exists but belongs
to another project is indistinguishable from a missing one: both raise
NotFoundError, so the caller-facing message never confirms that another
project's id exists.

Usage:
    rfi = get_scoped(RFI, rfi_id, project_id=project_id)
    project = get_project_or_404(project_id)
    profile = get_profile_or_404(profile_id)
"""

import logging

from sqlalchemy import select

from app.core.exceptions import NotFoundError
from app.models import db
from app.models.auth import Profile
from app.models.project import Project

logger = logging.getLogger(__name__)


def get_scoped(model, pk: int, *, project_id: int, resource: str | None = None):
    """Fetch a single entity by PK, filtered by ``project_id``.

    Args:
        model: Model class with ``id`` and ``project_id`` columns.
        pk: Primary key value to look up.
        project_id: Scope that must match the row's ``project_id``.
        resource: Caller-facing entity name; defaults to the class name.

    Raises:
        ValueError: *project_id* is None or the model has no project_id column.
        NotFoundError: missing row, or row owned by another project.
    """
    if project_id is None:
        raise ValueError(
            f"{model.__name__} id={pk} requires a project_id scope. "
            "Unscoped lookups are forbidden."
        )
    if not hasattr(model, "project_id"):
        raise ValueError(f"{model.__name__} has no project_id column; refusing unscoped lookup")

    stmt = select(model).where(model.id == pk, model.project_id == project_id)
    result = db.session.execute(stmt).scalar_one_or_none()

    if result is None:
        logger.debug("get_scoped: %s id=%s not found in project %s", model.__name__, pk, project_id)
        raise NotFoundError(resource=resource or model.__name__, resource_id=pk, project_id=project_id)
    return result


def get_project_or_404(project_id: int) -> Project:
    """Load a project or raise NotFoundError("Project not found")."""
    project = db.session.get(Project, project_id)
    if project is None:
        raise NotFoundError(resource="Project", resource_id=project_id)
    return project


def get_profile_or_404(profile_id: int) -> Profile:
    """Load a user profile (assignees, reviewers) or raise NotFoundError("User profile not found")."""
    profile = db.session.get(Profile, profile_id)
    if profile is None:
        raise NotFoundError(resource="User profile", resource_id=profile_id)
    return profile
