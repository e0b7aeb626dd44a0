"""
RailCommand
Daily log blueprint.

Endpoints:
    GET  /api/v1/projects/<pid>/daily-logs         list (newest log date first)
    POST /api/v1/projects/<pid>/daily-logs         create (daily_log:create)
    GET  /api/v1/projects/<pid>/daily-logs/<lid>   detail with crew / equipment / work items
"""

from flask import Blueprint

from app.auth import current_actor_id
from app.blueprints import json_body
from app.services import daily_log_service
from app.utils.errors import result_response

daily_log_bp = Blueprint("daily_logs", __name__, url_prefix="/api/v1/projects/<int:pid>/daily-logs")


@daily_log_bp.route("", methods=["GET"])
def list_daily_logs(pid):
    return result_response(daily_log_service.list_daily_logs(current_actor_id(), pid))


@daily_log_bp.route("", methods=["POST"])
def create_daily_log(pid):
    result = daily_log_service.create_daily_log(current_actor_id(), pid, json_body())
    return result_response(result, created=True)


@daily_log_bp.route("/<int:lid>", methods=["GET"])
def get_daily_log(pid, lid):
    return result_response(daily_log_service.get_daily_log(current_actor_id(), pid, lid))
