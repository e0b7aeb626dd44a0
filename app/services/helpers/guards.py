"""
Service-boundary guard.

Domain services raise the exceptions in ``app.core.exceptions`` internally.
``guarded_action`` is the single place where those, and database errors,
are turned into ``ActionResult.fail`` values, so no public service
function ever raises for an expected failure.

Usage:
    @guarded_action("Failed to create submittal")
    def create_submittal(actor_id, project_id, data):
        ...
        return ActionResult.ok(submittal)
"""

import functools
import logging

from sqlalchemy.exc import SQLAlchemyError

from app.core.exceptions import RailCommandError
from app.core.results import ActionResult
from app.models import db
from app.utils.errors import E

logger = logging.getLogger(__name__)


def guarded_action(failure_message: str):
    """Wrap a service function so failures come back as ActionResult values.

    RailCommandError → its own message and code.
    SQLAlchemyError  → *failure_message*, code ``ERR_DATABASE``; the
                       session is rolled back and the error logged.
    """

    def decorator(fn):
        @functools.wraps(fn)
        def wrapper(*args, **kwargs):
            try:
                return fn(*args, **kwargs)
            except RailCommandError as exc:
                db.session.rollback()
                logger.info("%s: %s (%s)", fn.__name__, exc, exc.code)
                return ActionResult.fail(exc.message, exc.code, getattr(exc, "details", None))
            except SQLAlchemyError:
                db.session.rollback()
                logger.exception("%s: database error", fn.__name__)
                return ActionResult.fail(failure_message, E.DATABASE)

        return wrapper

    return decorator
