"""
Shared pytest fixtures for the RailCommand test suite.

Provides:
    - app: Flask application (session-scoped)
    - _setup_db: Database table creation/teardown (session-scoped)
    - session: Per-test DB cleanup w/ rollback + recreate (autouse)
    - client: Flask test client (function-scoped)
    - make_profile / make_project / make_member: row factories
    - auth_headers: Bearer-token headers for a profile
    - project, admin, outsider: common pre-built entities
"""

import pytest

from app import create_app
from app.models import db as _db
from app.models.auth import Profile, ProjectMember, role_can_edit
from app.models.project import Project
from app.services.jwt_service import generate_access_token


# ── App & DB fixtures ────────────────────────────────────────────────────


@pytest.fixture(scope="session")
def app():
    """Create the Flask application once per test session."""
    application = create_app("testing")
    return application


@pytest.fixture(scope="session")
def _setup_db(app):
    """Create all tables at session start, drop at end."""
    with app.app_context():
        _db.create_all()
    yield
    with app.app_context():
        _db.drop_all()


@pytest.fixture(autouse=True)
def session(app, _setup_db):
    """Per-test: open app context, rollback after test, recreate tables."""
    with app.app_context():
        yield
        _db.session.rollback()
        _db.drop_all()
        _db.create_all()


@pytest.fixture()
def client(app):
    """Flask test client."""
    return app.test_client()


# ── Factories ────────────────────────────────────────────────────────────


@pytest.fixture()
def make_profile():
    counter = {"n": 0}

    def _make(role="member", full_name=None, email=None):
        counter["n"] += 1
        n = counter["n"]
        profile = Profile(
            email=email or f"user{n}@railcommand.test",
            full_name=full_name or f"User {n}",
            role=role,
        )
        _db.session.add(profile)
        _db.session.commit()
        return profile

    return _make


@pytest.fixture()
def make_project():
    def _make(name="Northline Track Renewal", created_by=None, **kwargs):
        project = Project(name=name, created_by=created_by, **kwargs)
        _db.session.add(project)
        _db.session.commit()
        return project

    return _make


@pytest.fixture()
def make_member():
    def _make(project, profile, project_role):
        member = ProjectMember(
            project_id=project.id,
            profile_id=profile.id,
            project_role=project_role,
            can_edit=role_can_edit(project_role),
        )
        _db.session.add(member)
        _db.session.commit()
        return member

    return _make


@pytest.fixture()
def member_of(make_profile, make_member, project):
    """Create a profile holding *project_role* on the default project."""

    def _make(project_role, global_role="member", full_name=None):
        profile = make_profile(role=global_role, full_name=full_name)
        make_member(project, profile, project_role)
        return profile

    return _make


@pytest.fixture()
def auth_headers(app):
    def _headers(profile_or_id):
        profile_id = getattr(profile_or_id, "id", profile_or_id)
        return {"Authorization": f"Bearer {generate_access_token(profile_id)}"}

    return _headers


# ── Convenience fixtures ─────────────────────────────────────────────────


@pytest.fixture()
def project(make_project):
    return make_project()


@pytest.fixture()
def admin(make_profile):
    return make_profile(role="admin", full_name="Ada Admin")


@pytest.fixture()
def outsider(make_profile):
    """A non-admin profile with no membership anywhere."""
    return make_profile(role="member", full_name="Owen Outsider")
