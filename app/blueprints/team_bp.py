"""
RailCommand
Team blueprint — project membership.

Endpoints:
    GET    /api/v1/projects/<pid>/members                 list members
    POST   /api/v1/projects/<pid>/members                 add (team:manage)
    PATCH  /api/v1/projects/<pid>/members/<mid>           change role (team:manage)
    DELETE /api/v1/projects/<pid>/members/<mid>           remove (team:manage)
    GET    /api/v1/projects/<pid>/members/me/permissions  caller's allowed actions
"""

from flask import Blueprint

from app.auth import current_actor_id
from app.blueprints import json_body
from app.services import team_service
from app.utils.errors import result_response

team_bp = Blueprint("team", __name__, url_prefix="/api/v1/projects/<int:pid>/members")


@team_bp.route("", methods=["GET"])
def list_members(pid):
    return result_response(team_service.list_members(current_actor_id(), pid))


@team_bp.route("", methods=["POST"])
def add_member(pid):
    data = json_body()
    result = team_service.add_member(
        current_actor_id(), pid, data.get("profile_id"), data.get("project_role"),
    )
    return result_response(result, created=True)


@team_bp.route("/<int:mid>", methods=["PATCH"])
def update_member_role(pid, mid):
    role = json_body().get("project_role")
    return result_response(team_service.update_member_role(current_actor_id(), pid, mid, role))


@team_bp.route("/<int:mid>", methods=["DELETE"])
def remove_member(pid, mid):
    return result_response(team_service.remove_member(current_actor_id(), pid, mid))


@team_bp.route("/me/permissions", methods=["GET"])
def my_permissions(pid):
    return result_response(team_service.get_my_permissions(current_actor_id(), pid))
