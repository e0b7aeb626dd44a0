"""
RailCommand
Project blueprint.

Endpoints:
    GET    /api/v1/projects                    list visible projects
    POST   /api/v1/projects                    create (global admin / manager)
    GET    /api/v1/projects/<pid>              detail (member)
    PUT    /api/v1/projects/<pid>              update (project:manage)
    PATCH  /api/v1/projects/<pid>/status       status change (project:manage)
    DELETE /api/v1/projects/<pid>              delete (global admin)
"""

from flask import Blueprint

from app.auth import current_actor_id
from app.blueprints import json_body
from app.services import project_service
from app.utils.errors import result_response

project_bp = Blueprint("projects", __name__, url_prefix="/api/v1/projects")


@project_bp.route("", methods=["GET"])
def list_projects():
    return result_response(project_service.list_projects(current_actor_id()))


@project_bp.route("", methods=["POST"])
def create_project():
    result = project_service.create_project(current_actor_id(), json_body())
    return result_response(result, created=True)


@project_bp.route("/<int:pid>", methods=["GET"])
def get_project(pid):
    return result_response(project_service.get_project(current_actor_id(), pid))


@project_bp.route("/<int:pid>", methods=["PUT"])
def update_project(pid):
    return result_response(project_service.update_project(current_actor_id(), pid, json_body()))


@project_bp.route("/<int:pid>/status", methods=["PATCH"])
def update_project_status(pid):
    status = json_body().get("status")
    return result_response(project_service.update_project_status(current_actor_id(), pid, status))


@project_bp.route("/<int:pid>", methods=["DELETE"])
def delete_project(pid):
    return result_response(project_service.delete_project(current_actor_id(), pid))
