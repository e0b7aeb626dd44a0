"""Allocation of project-scoped human-readable numbers (SUB-001, RFI-002, PL-003)."""

import logging

from flask import current_app
from sqlalchemy import UniqueConstraint
from sqlalchemy.exc import IntegrityError

from app.core.exceptions import ConflictError
from app.models import db

logger = logging.getLogger(__name__)


def _is_number_collision(exc: IntegrityError, model) -> bool:
    """True when *exc* was raised by the model's ``(project_id, number)`` unique constraint."""
    message = str(exc.orig)
    names = [
        c.name for c in model.__table__.constraints
        if isinstance(c, UniqueConstraint) and "number" in c.columns.keys() and c.name
    ]
    # PostgreSQL/MySQL report the constraint name, SQLite the column list.
    return any(name in message for name in names) or f"{model.__tablename__}.number" in message


def create_numbered(model, project_id: int, build):
    """Insert a numbered entity, retrying when a concurrent insert took the number.

    *build* receives the candidate number string and returns an unsaved
    instance. Each attempt runs in a SAVEPOINT so a unique-constraint
    collision only discards that attempt. Any other integrity failure
    (foreign keys, NOT NULL) is re-raised untouched.

    Raises:
        ConflictError: every attempt collided.
        IntegrityError: the insert failed on something other than the number.
    """
    attempts = current_app.config.get("ENTITY_NUMBER_MAX_RETRIES", 3)
    number = None
    for attempt in range(1, attempts + 1):
        number = model.next_number(project_id)
        try:
            with db.session.begin_nested():
                entity = build(number)
                db.session.add(entity)
            return entity
        except IntegrityError as exc:
            if not _is_number_collision(exc, model):
                raise
            logger.warning(
                "%s number %s collided in project %s (attempt %d/%d)",
                model.__name__, number, project_id, attempt, attempts,
            )

    raise ConflictError(
        resource=model.__name__,
        field="number",
        value=number,
        message=f"Could not allocate a unique {model.NUMBER_PREFIX} number, please retry",
    )
