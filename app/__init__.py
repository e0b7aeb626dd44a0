"""
RailCommand
Flask Application Factory.

Usage:
    from app import create_app
    app = create_app()           # defaults to "development"
    app = create_app("testing")  # explicit config
"""

import logging
import os

from flask import Flask, request
from flask_cors import CORS
from flask_limiter import Limiter
from flask_limiter.util import get_remote_address
from flask_migrate import Migrate
from sqlalchemy import engine as _sa_engine
from sqlalchemy import event as _sa_event

from app.auth import init_auth
from app.config import config
from app.middleware.jwt_auth import init_jwt_middleware
from app.middleware.logging_config import configure_logging
from app.middleware.rate_limiter import init_rate_limits
from app.models import db

logger = logging.getLogger(__name__)


# ── SQLite FK enforcement (global engine event) ─────────────────────────
@_sa_event.listens_for(_sa_engine.Engine, "connect")
def _enable_sqlite_fk(dbapi_conn, connection_record):
    """Enable foreign key enforcement for SQLite connections (ON DELETE CASCADE)."""
    if "sqlite" in type(dbapi_conn).__module__:
        cursor = dbapi_conn.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


migrate = Migrate()
limiter = Limiter(
    key_func=get_remote_address,
    default_limits=[],                     # no global limit — apply per-blueprint
)


def create_app(config_name=None):
    """
    Create and configure the Flask application.

    Args:
        config_name: Configuration environment name.
                     One of: "development", "testing", "production".
                     Defaults to APP_ENV env var, or "development" if unset.

    Returns:
        Configured Flask application instance.
    """
    if config_name is None:
        config_name = os.getenv("APP_ENV", "development")

    app = Flask(__name__, instance_relative_config=True)
    app.config.from_object(config[config_name]())

    # ── Structured logging (must be first) ───────────────────────────────
    configure_logging(app)

    # ── Extensions ───────────────────────────────────────────────────────
    db.init_app(app)
    migrate.init_app(app, db)
    limiter.init_app(app)
    cors_origins = app.config.get("CORS_ORIGINS", "*")
    if cors_origins and cors_origins != "*":
        CORS(app, origins=[o.strip() for o in cors_origins.split(",") if o.strip()])
    else:
        CORS(app)

    # ── Identity: bearer token → g.actor_id ──────────────────────────────
    init_jwt_middleware(app)

    # ── Request hygiene (JSON Content-Type on mutations) ─────────────────
    init_auth(app)

    # ── Import all models so Alembic can detect them ─────────────────────
    from app.models import auth as _auth_models               # noqa: F401
    from app.models import project as _project_models         # noqa: F401
    from app.models import submittal as _submittal_models     # noqa: F401
    from app.models import rfi as _rfi_models                 # noqa: F401
    from app.models import daily_log as _daily_log_models     # noqa: F401
    from app.models import punch_list as _punch_list_models   # noqa: F401
    from app.models import schedule as _schedule_models       # noqa: F401
    from app.models import audit as _audit_models             # noqa: F401

    # ── Blueprints ───────────────────────────────────────────────────────
    from app.blueprints.activity_bp import activity_bp
    from app.blueprints.daily_log_bp import daily_log_bp
    from app.blueprints.health_bp import health_bp
    from app.blueprints.milestone_bp import milestone_bp
    from app.blueprints.project_bp import project_bp
    from app.blueprints.punch_list_bp import punch_list_bp
    from app.blueprints.rfi_bp import rfi_bp
    from app.blueprints.submittal_bp import submittal_bp
    from app.blueprints.team_bp import team_bp

    app.register_blueprint(health_bp)
    app.register_blueprint(project_bp)
    app.register_blueprint(team_bp)
    app.register_blueprint(submittal_bp)
    app.register_blueprint(rfi_bp)
    app.register_blueprint(daily_log_bp)
    app.register_blueprint(punch_list_bp)
    app.register_blueprint(milestone_bp)
    app.register_blueprint(activity_bp)

    # ── CLI commands ─────────────────────────────────────────────────────
    @app.cli.command("mark-overdue-rfis")
    def mark_overdue_rfis_cmd():
        """Mark open RFIs past their due date as overdue in every project."""
        from app.models.project import Project
        from app.services.rfi_service import mark_overdue_rfis

        total = 0
        for (project_id,) in db.session.query(Project.id).order_by(Project.id).all():
            result = mark_overdue_rfis(project_id)
            if not result.success:
                logger.error("Overdue sweep failed for project %d: %s", project_id, result.error)
                continue
            total += len(result.data)
        logger.info("Marked %d RFI(s) overdue.", total)

    # ── Error handlers ───────────────────────────────────────────────────
    @app.errorhandler(404)
    def not_found(e):
        return {"error": "Not found", "path": request.path}, 404

    @app.errorhandler(405)
    def method_not_allowed(e):
        return {"error": "Method not allowed"}, 405

    @app.errorhandler(429)
    def rate_limited(e):
        return {"error": "Too many requests", "retry_after": e.description}, 429

    @app.errorhandler(500)
    def server_error(e):
        logger.error("500 error: %s", e, exc_info=True)
        return {"error": "Internal server error"}, 500

    # ── Rate limiting (after blueprints registered) ──────────────────────
    init_rate_limits(app, limiter)

    return app
