"""
RailCommand
Milestone blueprint — project schedule.

Endpoints:
    GET /api/v1/projects/<pid>/milestones         list (sort order)
    POST /api/v1/projects/<pid>/milestones        create (schedule:edit)
    PUT /api/v1/projects/<pid>/milestones/<mid>   update (schedule:edit)
"""

from flask import Blueprint

from app.auth import current_actor_id
from app.blueprints import json_body
from app.services import milestone_service
from app.utils.errors import result_response

milestone_bp = Blueprint("milestones", __name__, url_prefix="/api/v1/projects/<int:pid>/milestones")


@milestone_bp.route("", methods=["GET"])
def list_milestones(pid):
    return result_response(milestone_service.list_milestones(current_actor_id(), pid))


@milestone_bp.route("", methods=["POST"])
def create_milestone(pid):
    result = milestone_service.create_milestone(current_actor_id(), pid, json_body())
    return result_response(result, created=True)


@milestone_bp.route("/<int:mid>", methods=["PUT"])
def update_milestone(pid, mid):
    return result_response(milestone_service.update_milestone(current_actor_id(), pid, mid, json_body()))
