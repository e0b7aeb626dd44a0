"""
Activity Service — project activity feed.

Write side:  ``record_activity`` is called by every mutating service
             *after* the domain change has been committed. It is
             best-effort: a failed write is rolled back on its own, logged
             at WARNING on this module's logger, and never turned into a
             failure of the caller's operation.
Read side:   ``get_activity_log`` returns newest-first entries for members.
"""

import logging

from flask import current_app
from sqlalchemy.exc import SQLAlchemyError

from app.core.results import ActionResult
from app.models import db
from app.models.audit import ActivityEntityType, ActivityLogEntry, ActivityVerb, write_activity
from app.services.helpers.guards import guarded_action
from app.services.helpers.scoped_queries import get_project_or_404
from app.services.permission_service import require_membership

logger = logging.getLogger(__name__)


def record_activity(
    project_id: int,
    entity_type: ActivityEntityType | str,
    entity_id,
    action: ActivityVerb | str,
    description: str,
    actor_id: int | None,
) -> ActivityLogEntry | None:
    """
    Append one activity entry and commit it.

    Returns the entry, or None when persistence failed.

    Raises:
        ValueError: unknown entity type or verb (programmer error, raised
                    before anything is written).
    """
    entity_type = ActivityEntityType(entity_type)
    action = ActivityVerb(action)

    try:
        entry = write_activity(
            project_id=project_id,
            entity_type=entity_type,
            entity_id=entity_id,
            action=action,
            description=description,
            performed_by=actor_id,
        )
        db.session.commit()
        return entry
    except SQLAlchemyError:
        db.session.rollback()
        logger.warning(
            "Activity write failed: project=%s %s/%s %s by %s",
            project_id, entity_type.value, entity_id, action.value, actor_id,
            exc_info=True,
        )
        return None


def clamp_limit(limit) -> int:
    """Coerce a requested feed size into [1, ACTIVITY_LOG_MAX_LIMIT]."""
    default = current_app.config.get("ACTIVITY_LOG_DEFAULT_LIMIT", 50)
    maximum = current_app.config.get("ACTIVITY_LOG_MAX_LIMIT", 200)
    if limit is None:
        return default
    try:
        limit = int(limit)
    except (TypeError, ValueError):
        return default
    return max(1, min(limit, maximum))


@guarded_action("Failed to load activity log")
def get_activity_log(actor_id: int | None, project_id: int, limit=None) -> ActionResult:
    """Most recent activity for a project, newest first (ties: latest insert first)."""
    require_membership(actor_id, project_id)
    get_project_or_404(project_id)

    entries = (
        ActivityLogEntry.query
        .filter_by(project_id=project_id)
        .order_by(ActivityLogEntry.created_at.desc(), ActivityLogEntry.id.desc())
        .limit(clamp_limit(limit))
        .all()
    )
    return ActionResult.ok(entries)
