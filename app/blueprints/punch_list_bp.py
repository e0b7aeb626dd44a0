"""
RailCommand
Punch list blueprint.

Endpoints:
    GET   /api/v1/projects/<pid>/punch-list              list (?status=)
    POST  /api/v1/projects/<pid>/punch-list              create (punch_list:create)
    GET   /api/v1/projects/<pid>/punch-list/<iid>        detail
    PATCH /api/v1/projects/<pid>/punch-list/<iid>/status resolve / verify / reopen
"""

from flask import Blueprint, request

from app.auth import current_actor_id
from app.blueprints import json_body
from app.services import punch_list_service
from app.utils.errors import result_response

punch_list_bp = Blueprint("punch_list", __name__, url_prefix="/api/v1/projects/<int:pid>/punch-list")


@punch_list_bp.route("", methods=["GET"])
def list_items(pid):
    result = punch_list_service.list_punch_list_items(current_actor_id(), pid, request.args.get("status"))
    return result_response(result)


@punch_list_bp.route("", methods=["POST"])
def create_item(pid):
    result = punch_list_service.create_punch_list_item(current_actor_id(), pid, json_body())
    return result_response(result, created=True)


@punch_list_bp.route("/<int:iid>", methods=["GET"])
def get_item(pid, iid):
    return result_response(punch_list_service.get_punch_list_item(current_actor_id(), pid, iid))


@punch_list_bp.route("/<int:iid>/status", methods=["PATCH"])
def update_item_status(pid, iid):
    data = json_body()
    result = punch_list_service.update_punch_list_status(
        current_actor_id(), pid, iid, data.get("status"), data.get("resolution_notes"),
    )
    return result_response(result)
