"""
RailCommand
RFI blueprint.

Endpoints:
    GET   /api/v1/projects/<pid>/rfis                  list (?status=)
    POST  /api/v1/projects/<pid>/rfis                  create (rfi:create)
    GET   /api/v1/projects/<pid>/rfis/<rid>            detail with responses
    PATCH /api/v1/projects/<pid>/rfis/<rid>/status     status change
    POST  /api/v1/projects/<pid>/rfis/<rid>/responses  add response
"""

from flask import Blueprint, request

from app.auth import current_actor_id
from app.blueprints import json_body
from app.services import rfi_service
from app.utils.errors import result_response

rfi_bp = Blueprint("rfis", __name__, url_prefix="/api/v1/projects/<int:pid>/rfis")


@rfi_bp.route("", methods=["GET"])
def list_rfis(pid):
    return result_response(rfi_service.list_rfis(current_actor_id(), pid, request.args.get("status")))


@rfi_bp.route("", methods=["POST"])
def create_rfi(pid):
    return result_response(rfi_service.create_rfi(current_actor_id(), pid, json_body()), created=True)


@rfi_bp.route("/<int:rid>", methods=["GET"])
def get_rfi(pid, rid):
    return result_response(rfi_service.get_rfi(current_actor_id(), pid, rid))


@rfi_bp.route("/<int:rid>/status", methods=["PATCH"])
def update_rfi_status(pid, rid):
    status = json_body().get("status")
    return result_response(rfi_service.update_rfi_status(current_actor_id(), pid, rid, status))


@rfi_bp.route("/<int:rid>/responses", methods=["POST"])
def add_rfi_response(pid, rid):
    data = json_body()
    result = rfi_service.add_rfi_response(
        current_actor_id(), pid, rid,
        data.get("content"),
        bool(data.get("is_official_response", False)),
    )
    return result_response(result, created=True)
