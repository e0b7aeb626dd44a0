"""
RailCommand
Activity feed blueprint.

Endpoints:
    GET /api/v1/projects/<pid>/activity?limit=50   newest first, limit capped at 200
"""

from flask import Blueprint, request

from app.auth import current_actor_id
from app.services import activity_service
from app.utils.errors import result_response

activity_bp = Blueprint("activity", __name__, url_prefix="/api/v1/projects/<int:pid>/activity")


@activity_bp.route("", methods=["GET"])
def get_activity(pid):
    result = activity_service.get_activity_log(current_actor_id(), pid, request.args.get("limit"))
    return result_response(result)
