"""
Submittal Service — creation and review of submittal packages.

Status changes to a review outcome (approved / conditional / rejected)
require ``submittal:review`` and stamp the reviewer and review time. Any
other status change only requires project membership.
"""

import logging
from datetime import datetime, timezone

from app.core.results import ActionResult
from app.models import db
from app.models.schedule import Milestone
from app.models.submittal import REVIEW_OUTCOMES, Submittal, SubmittalStatus
from app.services.activity_service import record_activity
from app.services.helpers.guards import guarded_action
from app.services.helpers.numbering import create_numbered
from app.services.helpers.scoped_queries import get_project_or_404, get_scoped
from app.services.permission import Action
from app.services.permission_service import require_actor, require_membership, require_permission
from app.utils.helpers import optional_text, parse_date_input, parse_enum, require_text

logger = logging.getLogger(__name__)

_OUTCOME_VERBS = {
    SubmittalStatus.APPROVED: "approved",
    SubmittalStatus.REJECTED: "rejected",
}


def _resolve_milestone_id(data: dict, project_id: int) -> int | None:
    milestone_id = data.get("milestone_id")
    if not milestone_id:
        return None
    return get_scoped(Milestone, milestone_id, project_id=project_id).id


@guarded_action("Failed to load submittals")
def list_submittals(actor_id: int | None, project_id: int, status: str | None = None) -> ActionResult:
    require_membership(actor_id, project_id)
    query = Submittal.query_for_project(project_id)
    if status:
        query = query.filter_by(status=parse_enum(SubmittalStatus, status).value)
    return ActionResult.ok(query.order_by(Submittal.created_at.desc(), Submittal.id.desc()).all())


@guarded_action("Failed to load submittal")
def get_submittal(actor_id: int | None, project_id: int, submittal_id: int) -> ActionResult:
    require_membership(actor_id, project_id)
    return ActionResult.ok(get_scoped(Submittal, submittal_id, project_id=project_id))


@guarded_action("Failed to create submittal")
def create_submittal(actor_id: int | None, project_id: int, data: dict) -> ActionResult:
    require_actor(actor_id)
    title = require_text(data, "title")
    due_date = parse_date_input(data.get("due_date"), "due_date")
    require_permission(actor_id, project_id, Action.SUBMITTAL_CREATE)
    get_project_or_404(project_id)
    milestone_id = _resolve_milestone_id(data, project_id)

    submittal = create_numbered(Submittal, project_id, lambda number: Submittal(
        project_id=project_id,
        number=number,
        title=title,
        description=optional_text(data, "description"),
        spec_section=optional_text(data, "spec_section"),
        status=SubmittalStatus.SUBMITTED.value,
        submitted_by=actor_id,
        submit_date=datetime.now(timezone.utc),
        due_date=due_date,
        milestone_id=milestone_id,
    ))
    db.session.commit()
    logger.info("Submittal %s created in project %d by %s", submittal.number, project_id, actor_id)

    record_activity(project_id, "submittal", submittal.id, "created",
                    f"submitted {submittal.number}: {submittal.title}", actor_id)
    return ActionResult.ok(submittal)


@guarded_action("Failed to update submittal status")
def update_submittal_status(
    actor_id: int | None,
    project_id: int,
    submittal_id: int,
    status,
    review_notes: str | None = None,
) -> ActionResult:
    """Move a submittal to *status*; review outcomes are permission-gated."""
    require_actor(actor_id)
    new_status = parse_enum(SubmittalStatus, status)
    is_review = new_status in REVIEW_OUTCOMES
    if is_review:
        require_permission(actor_id, project_id, Action.SUBMITTAL_REVIEW)
    else:
        require_membership(actor_id, project_id)

    submittal = get_scoped(Submittal, submittal_id, project_id=project_id)
    submittal.status = new_status.value
    if is_review:
        submittal.reviewed_by = actor_id
        submittal.review_date = datetime.now(timezone.utc)
    if review_notes is not None:
        submittal.review_notes = review_notes
    db.session.commit()

    verb = _OUTCOME_VERBS.get(new_status, "status_changed")
    record_activity(project_id, "submittal", submittal.id, verb,
                    f"changed {submittal.number} status to {new_status.value}", actor_id)
    return ActionResult.ok(submittal)
