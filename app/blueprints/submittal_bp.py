"""
RailCommand
Submittal blueprint.

Endpoints:
    GET   /api/v1/projects/<pid>/submittals              list (?status=)
    POST  /api/v1/projects/<pid>/submittals              create (submittal:create)
    GET   /api/v1/projects/<pid>/submittals/<sid>        detail
    PATCH /api/v1/projects/<pid>/submittals/<sid>/status review / status change
"""

from flask import Blueprint, request

from app.auth import current_actor_id
from app.blueprints import json_body
from app.services import submittal_service
from app.utils.errors import result_response

submittal_bp = Blueprint("submittals", __name__, url_prefix="/api/v1/projects/<int:pid>/submittals")


@submittal_bp.route("", methods=["GET"])
def list_submittals(pid):
    result = submittal_service.list_submittals(current_actor_id(), pid, request.args.get("status"))
    return result_response(result)


@submittal_bp.route("", methods=["POST"])
def create_submittal(pid):
    result = submittal_service.create_submittal(current_actor_id(), pid, json_body())
    return result_response(result, created=True)


@submittal_bp.route("/<int:sid>", methods=["GET"])
def get_submittal(pid, sid):
    return result_response(submittal_service.get_submittal(current_actor_id(), pid, sid))


@submittal_bp.route("/<int:sid>/status", methods=["PATCH"])
def update_submittal_status(pid, sid):
    data = json_body()
    result = submittal_service.update_submittal_status(
        current_actor_id(), pid, sid, data.get("status"), data.get("review_notes"),
    )
    return result_response(result)
