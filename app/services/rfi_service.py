"""
RFI Service — requests for information, their response threads, and the
overdue sweep.

Permission rules:
  - create:              rfi:create
  - status → closed:     rfi:close
  - other status moves:  membership (``overdue`` is never user-set)
  - official response:   rfi:respond, and the RFI becomes ``answered``
  - other responses:     membership, status unchanged
"""

import logging
from datetime import date, datetime, timezone

from app.core.exceptions import ValidationError
from app.core.results import ActionResult
from app.models import db
from app.models.rfi import RFI, Priority, RFIResponse, RFIStatus
from app.models.schedule import Milestone
from app.services.activity_service import record_activity
from app.services.helpers.guards import guarded_action
from app.services.helpers.numbering import create_numbered
from app.services.helpers.scoped_queries import get_profile_or_404, get_project_or_404, get_scoped
from app.services.permission import Action
from app.services.permission_service import require_actor, require_membership, require_permission
from app.utils.helpers import parse_date_input, parse_enum, parse_id, require_text

logger = logging.getLogger(__name__)

# Statuses that record when the RFI received its answer.
_RESPONSE_STAMPED = {RFIStatus.ANSWERED, RFIStatus.CLOSED}


@guarded_action("Failed to load RFIs")
def list_rfis(actor_id: int | None, project_id: int, status: str | None = None) -> ActionResult:
    require_membership(actor_id, project_id)
    query = RFI.query_for_project(project_id)
    if status:
        query = query.filter_by(status=parse_enum(RFIStatus, status).value)
    return ActionResult.ok(query.order_by(RFI.created_at.desc(), RFI.id.desc()).all())


@guarded_action("Failed to load RFI")
def get_rfi(actor_id: int | None, project_id: int, rfi_id: int) -> ActionResult:
    """RFI with its response thread."""
    require_membership(actor_id, project_id)
    rfi = get_scoped(RFI, rfi_id, project_id=project_id)
    return ActionResult.ok(rfi.to_dict(include_responses=True))


@guarded_action("Failed to create RFI")
def create_rfi(actor_id: int | None, project_id: int, data: dict) -> ActionResult:
    require_actor(actor_id)
    subject = require_text(data, "subject")
    question = require_text(data, "question")
    priority = parse_enum(Priority, data.get("priority") or Priority.MEDIUM.value, "priority")
    due_date = parse_date_input(data.get("due_date"), "due_date")
    require_permission(actor_id, project_id, Action.RFI_CREATE)
    get_project_or_404(project_id)

    milestone = None
    milestone_id = parse_id(data.get("milestone_id"), "milestone_id")
    if milestone_id is not None:
        milestone = get_scoped(Milestone, milestone_id, project_id=project_id)
    assigned_to = parse_id(data.get("assigned_to"), "assigned_to")
    if assigned_to is not None:
        get_profile_or_404(assigned_to)

    rfi = create_numbered(RFI, project_id, lambda number: RFI(
        project_id=project_id,
        number=number,
        subject=subject,
        question=question,
        status=RFIStatus.OPEN.value,
        priority=priority.value,
        submitted_by=actor_id,
        assigned_to=assigned_to,
        submit_date=datetime.now(timezone.utc),
        due_date=due_date,
        milestone_id=milestone.id if milestone else None,
    ))
    db.session.commit()
    logger.info("RFI %s created in project %d by %s", rfi.number, project_id, actor_id)

    record_activity(project_id, "rfi", rfi.id, "created",
                    f"created {rfi.number}: {rfi.subject}", actor_id)
    return ActionResult.ok(rfi)


@guarded_action("Failed to update RFI status")
def update_rfi_status(actor_id: int | None, project_id: int, rfi_id: int, status) -> ActionResult:
    require_actor(actor_id)
    new_status = parse_enum(RFIStatus, status)
    if new_status is RFIStatus.OVERDUE:
        raise ValidationError(
            "RFI status 'overdue' is derived from the due date and cannot be set manually",
            details={"status": "not user-settable"},
        )
    if new_status is RFIStatus.CLOSED:
        require_permission(actor_id, project_id, Action.RFI_CLOSE)
    else:
        require_membership(actor_id, project_id)

    rfi = get_scoped(RFI, rfi_id, project_id=project_id)
    rfi.status = new_status.value
    if new_status in _RESPONSE_STAMPED and rfi.response_date is None:
        rfi.response_date = datetime.now(timezone.utc)
    db.session.commit()

    record_activity(project_id, "rfi", rfi.id, "status_changed",
                    f"changed {rfi.number} status to {new_status.value}", actor_id)
    return ActionResult.ok(rfi)


@guarded_action("Failed to add RFI response")
def add_rfi_response(
    actor_id: int | None,
    project_id: int,
    rfi_id: int,
    content: str,
    is_official: bool = False,
) -> ActionResult:
    """Append a response; an official one answers the RFI."""
    require_actor(actor_id)
    content = require_text({"content": content}, "content")
    if is_official:
        require_permission(actor_id, project_id, Action.RFI_RESPOND)
    else:
        require_membership(actor_id, project_id)

    rfi = get_scoped(RFI, rfi_id, project_id=project_id)
    response = RFIResponse(
        rfi_id=rfi.id,
        author_id=actor_id,
        content=content,
        is_official_response=bool(is_official),
    )
    db.session.add(response)
    if is_official:
        rfi.status = RFIStatus.ANSWERED.value
        rfi.answer = content
        rfi.response_date = datetime.now(timezone.utc)
    db.session.commit()

    prefix = "officially " if is_official else ""
    record_activity(project_id, "rfi", rfi.id, "commented",
                    f"{prefix}responded to {rfi.number}", actor_id)
    return ActionResult.ok(response)


@guarded_action("Failed to mark overdue RFIs")
def mark_overdue_rfis(project_id: int, today: date | None = None) -> ActionResult:
    """
    System sweep: open RFIs whose due date has passed become ``overdue``.

    Runs without an actor; activity entries carry ``performed_by`` NULL.
    Returns the RFIs that changed.
    """
    get_project_or_404(project_id)
    today = today or date.today()

    stale = (
        RFI.query_for_project(project_id)
        .filter(RFI.status == RFIStatus.OPEN.value, RFI.due_date.isnot(None), RFI.due_date < today)
        .order_by(RFI.id.asc())
        .all()
    )
    if not stale:
        return ActionResult.ok([])

    for rfi in stale:
        rfi.status = RFIStatus.OVERDUE.value
    db.session.commit()
    logger.info("Marked %d RFI(s) overdue in project %d", len(stale), project_id)

    for rfi in stale:
        record_activity(project_id, "rfi", rfi.id, "status_changed",
                        f"changed {rfi.number} status to {RFIStatus.OVERDUE.value}", None)
    return ActionResult.ok(stale)

