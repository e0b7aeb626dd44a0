"""
Milestone Service — project schedule milestones (``schedule:edit``).

Setting status to ``complete`` fills ``actual_date`` with today and
``percent_complete`` with 100 unless the caller supplies either value.
"""

import logging
from datetime import date

from sqlalchemy import func

from app.core.results import ActionResult
from app.models import db
from app.models.schedule import Milestone, MilestoneStatus
from app.services.activity_service import record_activity
from app.services.helpers.guards import guarded_action
from app.services.helpers.scoped_queries import get_project_or_404, get_scoped
from app.services.permission import Action
from app.services.permission_service import require_actor, require_membership, require_permission
from app.utils.helpers import optional_text, parse_date_input, parse_enum, parse_number, require_text

logger = logging.getLogger(__name__)


def _parse_changes(data: dict, *, creating: bool) -> dict:
    """Validate a milestone payload into column values (only keys present)."""
    changes = {}
    if creating or "name" in data:
        changes["name"] = require_text(data, "name")
    if "description" in data:
        changes["description"] = optional_text(data, "description")
    for attr in ("target_date", "actual_date"):
        if attr in data:
            changes[attr] = parse_date_input(data.get(attr), attr)
    if "status" in data:
        changes["status"] = parse_enum(MilestoneStatus, data.get("status")).value
    if "percent_complete" in data:
        changes["percent_complete"] = int(parse_number(
            data.get("percent_complete"), "percent_complete", minimum=0, maximum=100,
        ))
    for attr in ("budget_planned", "budget_actual"):
        if attr in data:
            changes[attr] = parse_number(data.get(attr), attr, minimum=0)
    if data.get("sort_order") is not None:
        changes["sort_order"] = int(parse_number(data.get("sort_order"), "sort_order", minimum=0))

    if changes.get("status") == MilestoneStatus.COMPLETE.value:
        if "actual_date" not in changes:
            changes["actual_date"] = date.today()
        if "percent_complete" not in changes:
            changes["percent_complete"] = 100
    return changes


def _next_sort_order(project_id: int) -> int:
    current = (
        db.session.query(func.max(Milestone.sort_order))
        .filter(Milestone.project_id == project_id)
        .scalar()
    )
    return (current or 0) + 1


@guarded_action("Failed to load milestones")
def list_milestones(actor_id: int | None, project_id: int) -> ActionResult:
    require_membership(actor_id, project_id)
    milestones = (
        Milestone.query_for_project(project_id)
        .order_by(Milestone.sort_order.asc(), Milestone.id.asc())
        .all()
    )
    return ActionResult.ok(milestones)


@guarded_action("Failed to create milestone")
def create_milestone(actor_id: int | None, project_id: int, data: dict) -> ActionResult:
    require_actor(actor_id)
    changes = _parse_changes(data, creating=True)
    require_permission(actor_id, project_id, Action.SCHEDULE_EDIT)
    get_project_or_404(project_id)

    changes.setdefault("sort_order", _next_sort_order(project_id))
    milestone = Milestone(project_id=project_id, **changes)
    db.session.add(milestone)
    db.session.commit()

    record_activity(project_id, "milestone", milestone.id, "created",
                    f"created milestone: {milestone.name}", actor_id)
    return ActionResult.ok(milestone)


@guarded_action("Failed to update milestone")
def update_milestone(actor_id: int | None, project_id: int, milestone_id: int, data: dict) -> ActionResult:
    require_actor(actor_id)
    changes = _parse_changes(data, creating=False)
    require_permission(actor_id, project_id, Action.SCHEDULE_EDIT)

    milestone = get_scoped(Milestone, milestone_id, project_id=project_id)
    for attr, value in changes.items():
        setattr(milestone, attr, value)
    db.session.commit()

    if "status" in changes:
        verb = "status_changed"
        description = f'changed milestone "{milestone.name}" status to {milestone.status}'
    else:
        verb = "updated"
        description = f"updated milestone: {milestone.name}"
    record_activity(project_id, "milestone", milestone.id, verb, description, actor_id)
    return ActionResult.ok(milestone)
