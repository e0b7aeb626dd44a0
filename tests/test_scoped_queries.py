"""
Tests for app/services/helpers/scoped_queries.py

Scenarios covered:
  1. ValueError when the project scope is missing
  2. ValueError when the model has no project_id column
  3. NotFoundError when the PK exists but belongs to another project
  4. Correct entity returned when PK + project both match
  5. Caller-facing message never carries the id
"""

import pytest

from app.core.exceptions import NotFoundError
from app.models import db
from app.models.auth import Profile
from app.models.schedule import Milestone
from app.services.helpers.scoped_queries import get_project_or_404, get_scoped


def _milestone(project, name="Ballast drop"):
    ms = Milestone(project_id=project.id, name=name)
    db.session.add(ms)
    db.session.commit()
    return ms


class TestScopeRequired:
    def test_none_project_id(self, project):
        ms = _milestone(project)
        with pytest.raises(ValueError, match="requires a project_id scope"):
            get_scoped(Milestone, ms.id, project_id=None)

    def test_model_without_project_column(self, admin):
        with pytest.raises(ValueError, match="no project_id column"):
            get_scoped(Profile, admin.id, project_id=1)


class TestIsolation:
    def test_match_returns_entity(self, project):
        ms = _milestone(project)
        assert get_scoped(Milestone, ms.id, project_id=project.id).id == ms.id

    def test_other_project_looks_missing(self, project, make_project):
        other = make_project(name="Q")
        foreign = _milestone(other)
        with pytest.raises(NotFoundError) as exc_info:
            get_scoped(Milestone, foreign.id, project_id=project.id)
        assert exc_info.value.message == "Milestone not found"
        assert str(foreign.id) not in exc_info.value.message

    def test_custom_resource_name(self, project):
        with pytest.raises(NotFoundError, match="Daily log"):
            get_scoped(Milestone, 12345, project_id=project.id, resource="Daily log")

    def test_project_lookup(self, project):
        assert get_project_or_404(project.id) is project
        with pytest.raises(NotFoundError) as exc_info:
            get_project_or_404(project.id + 100)
        assert exc_info.value.message == "Project not found"
