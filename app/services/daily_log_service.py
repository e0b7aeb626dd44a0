"""Daily log service — field reports with personnel, equipment and work-item rows."""

import logging

from app.core.results import ActionResult
from app.models import db
from app.models.daily_log import DailyLog, DailyLogEquipment, DailyLogPersonnel, DailyLogWorkItem
from app.services.activity_service import record_activity
from app.services.helpers.guards import guarded_action
from app.services.helpers.scoped_queries import get_project_or_404, get_scoped
from app.services.permission import Action
from app.services.permission_service import require_actor, require_membership, require_permission
from app.utils.helpers import optional_text, parse_date_input, parse_number, parse_rows, require_text

logger = logging.getLogger(__name__)


def _personnel_rows(rows) -> list[DailyLogPersonnel]:
    out = []
    for row in rows:
        role = str(row.get("role") or "").strip()
        if not role:
            continue
        out.append(DailyLogPersonnel(
            role=role,
            headcount=parse_number(row.get("headcount"), "headcount", minimum=0),
            company=optional_text(row, "company"),
        ))
    return out


def _equipment_rows(rows) -> list[DailyLogEquipment]:
    out = []
    for row in rows:
        equipment_type = str(row.get("equipment_type") or "").strip()
        if not equipment_type:
            continue
        out.append(DailyLogEquipment(
            equipment_type=equipment_type,
            count=parse_number(row.get("count"), "count", minimum=0),
            notes=optional_text(row, "notes"),
        ))
    return out


def _work_item_rows(rows) -> list[DailyLogWorkItem]:
    out = []
    for row in rows:
        description = str(row.get("description") or "").strip()
        if not description:
            continue
        out.append(DailyLogWorkItem(
            description=description,
            quantity=parse_number(row.get("quantity"), "quantity", minimum=0),
            unit=optional_text(row, "unit"),
            location=optional_text(row, "location"),
        ))
    return out


@guarded_action("Failed to load daily logs")
def list_daily_logs(actor_id: int | None, project_id: int) -> ActionResult:
    require_membership(actor_id, project_id)
    logs = (
        DailyLog.query_for_project(project_id)
        .order_by(DailyLog.log_date.desc(), DailyLog.id.desc())
        .all()
    )
    return ActionResult.ok(logs)


@guarded_action("Failed to load daily log")
def get_daily_log(actor_id: int | None, project_id: int, daily_log_id: int) -> ActionResult:
    require_membership(actor_id, project_id)
    log = get_scoped(DailyLog, daily_log_id, project_id=project_id, resource="Daily log")
    return ActionResult.ok(log.to_dict(include_children=True))


@guarded_action("Failed to create daily log")
def create_daily_log(actor_id: int | None, project_id: int, data: dict) -> ActionResult:
    """Create a daily log; blank child rows are dropped."""
    require_actor(actor_id)
    log_date = parse_date_input(data.get("log_date"), "log_date", required=True)
    work_summary = require_text(data, "work_summary")
    personnel = _personnel_rows(parse_rows(data.get("personnel"), "personnel"))
    equipment = _equipment_rows(parse_rows(data.get("equipment"), "equipment"))
    work_items = _work_item_rows(parse_rows(data.get("work_items"), "work_items"))
    weather_temp = parse_number(data.get("weather_temp"), "weather_temp", default=None)
    require_permission(actor_id, project_id, Action.DAILY_LOG_CREATE)
    get_project_or_404(project_id)

    log = DailyLog(
        project_id=project_id,
        log_date=log_date,
        created_by=actor_id,
        weather_temp=weather_temp,
        weather_conditions=optional_text(data, "weather_conditions"),
        weather_wind=optional_text(data, "weather_wind"),
        work_summary=work_summary,
        safety_notes=optional_text(data, "safety_notes"),
        personnel=personnel,
        equipment=equipment,
        work_items=work_items,
    )
    db.session.add(log)
    db.session.commit()
    logger.info(
        "Daily log %d for %s created in project %d (%d personnel, %d equipment, %d work items)",
        log.id, log_date, project_id, len(personnel), len(equipment), len(work_items),
    )

    record_activity(project_id, "daily_log", log.id, "created",
                    f"created daily log for {log_date.isoformat()}", actor_id)
    return ActionResult.ok(log.to_dict(include_children=True))
