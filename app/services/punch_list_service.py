"""
Punch List Service — deficiency items and their sign-off lifecycle.

    open → in_progress → resolved → verified    (reopen: back to open)

``resolved`` needs punch_list:resolve and stamps the resolution time and
notes; ``verified`` needs punch_list:verify and stamps the verification
time. Any other move only requires membership.
"""

import logging
from datetime import datetime, timezone

from app.core.results import ActionResult
from app.models import db
from app.models.punch_list import PunchListItem, PunchListStatus
from app.models.rfi import Priority
from app.services.activity_service import record_activity
from app.services.helpers.guards import guarded_action
from app.services.helpers.numbering import create_numbered
from app.services.helpers.scoped_queries import get_profile_or_404, get_project_or_404, get_scoped
from app.services.permission import Action
from app.services.permission_service import require_actor, require_membership, require_permission
from app.utils.helpers import optional_text, parse_date_input, parse_enum, parse_id, require_text

logger = logging.getLogger(__name__)

_STATUS_ACTIONS = {
    PunchListStatus.RESOLVED: Action.PUNCH_LIST_RESOLVE,
    PunchListStatus.VERIFIED: Action.PUNCH_LIST_VERIFY,
}


@guarded_action("Failed to load punch list")
def list_punch_list_items(actor_id: int | None, project_id: int, status: str | None = None) -> ActionResult:
    require_membership(actor_id, project_id)
    query = PunchListItem.query_for_project(project_id)
    if status:
        query = query.filter_by(status=parse_enum(PunchListStatus, status).value)
    return ActionResult.ok(query.order_by(PunchListItem.created_at.desc(), PunchListItem.id.desc()).all())


@guarded_action("Failed to load punch list item")
def get_punch_list_item(actor_id: int | None, project_id: int, item_id: int) -> ActionResult:
    require_membership(actor_id, project_id)
    return ActionResult.ok(
        get_scoped(PunchListItem, item_id, project_id=project_id, resource="Punch list item")
    )


@guarded_action("Failed to create punch list item")
def create_punch_list_item(actor_id: int | None, project_id: int, data: dict) -> ActionResult:
    require_actor(actor_id)
    title = require_text(data, "title")
    priority = parse_enum(Priority, data.get("priority") or Priority.MEDIUM.value, "priority")
    due_date = parse_date_input(data.get("due_date"), "due_date")
    assigned_to = parse_id(data.get("assigned_to"), "assigned_to") or actor_id
    require_permission(actor_id, project_id, Action.PUNCH_LIST_CREATE)
    get_project_or_404(project_id)
    get_profile_or_404(assigned_to)

    item = create_numbered(PunchListItem, project_id, lambda number: PunchListItem(
        project_id=project_id,
        number=number,
        title=title,
        description=optional_text(data, "description"),
        location=optional_text(data, "location"),
        status=PunchListStatus.OPEN.value,
        priority=priority.value,
        assigned_to=assigned_to,
        created_by=actor_id,
        due_date=due_date,
    ))
    db.session.commit()
    logger.info("Punch list item %s created in project %d by %s", item.number, project_id, actor_id)

    record_activity(project_id, "punch_list", item.id, "created",
                    f"created {item.number}: {item.title}", actor_id)
    return ActionResult.ok(item)


@guarded_action("Failed to update punch list item status")
def update_punch_list_status(
    actor_id: int | None,
    project_id: int,
    item_id: int,
    status,
    resolution_notes: str | None = None,
) -> ActionResult:
    require_actor(actor_id)
    new_status = parse_enum(PunchListStatus, status)
    required = _STATUS_ACTIONS.get(new_status)
    if required is not None:
        require_permission(actor_id, project_id, required)
    else:
        require_membership(actor_id, project_id)

    item = get_scoped(PunchListItem, item_id, project_id=project_id, resource="Punch list item")
    item.status = new_status.value
    now = datetime.now(timezone.utc)
    if new_status is PunchListStatus.RESOLVED:
        item.resolved_date = now
        if resolution_notes is not None:
            item.resolution_notes = resolution_notes
    elif new_status is PunchListStatus.VERIFIED:
        item.verified_date = now
    db.session.commit()

    record_activity(project_id, "punch_list", item.id, "status_changed",
                    f"changed {item.number} status to {new_status.value}", actor_id)
    return ActionResult.ok(item)
