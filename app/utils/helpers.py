"""Shared input-coercion helpers used by the domain services.

parse_date:        returns None on bad input (optional fields)
parse_date_input:  raises ValidationError on bad input (required fields)
require_text:      non-empty, stripped string or ValidationError
parse_enum:        closed-set value or ValidationError
parse_number:      finite number, optionally range-checked
parse_id:          optional integer reference or ValidationError
parse_rows:        list of objects or ValidationError
"""
import logging
import math
from datetime import date, datetime

from app.core.exceptions import ValidationError

logger = logging.getLogger(__name__)


def parse_date(value):
    """Parse a date string (ISO or DD.MM.YYYY) to a date object.

    Returns None for empty/invalid input. Supports:
    - YYYY-MM-DD (ISO format)
    - YYYY-MM-DDTHH:MM:SS (datetime ISO → .date())
    - DD.MM.YYYY (European format)
    """
    if not value:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        return date.fromisoformat(str(value))
    except (ValueError, TypeError):
        pass
    try:
        return datetime.fromisoformat(str(value)).date()
    except (ValueError, TypeError):
        pass
    try:
        return datetime.strptime(str(value), "%d.%m.%Y").date()
    except (ValueError, TypeError):
        return None


def parse_date_input(value, field: str = "date", *, required: bool = False):
    """Parse a date, raising ValidationError on bad input.

    Same as parse_date() but a non-empty unparseable value is an error, and
    an empty value is an error when *required*.
    """
    if not value:
        if required:
            raise ValidationError(f"{field} is required", details={field: "required"})
        return None
    parsed = parse_date(value)
    if parsed is None:
        raise ValidationError(
            f"Invalid {field}. Use YYYY-MM-DD or DD.MM.YYYY.",
            details={field: "invalid date"},
        )
    return parsed


def require_text(data: dict, field: str) -> str:
    """Return ``data[field]`` stripped; empty or missing is a ValidationError."""
    value = str(data.get(field, "") or "").strip()
    if not value:
        raise ValidationError(f"{field} is required", details={field: "required"})
    return value


def optional_text(data: dict, field: str, default: str = "") -> str:
    value = data.get(field)
    if value is None:
        return default
    return str(value).strip()


def parse_enum(enum_cls, value, field: str = "status"):
    """Coerce *value* into *enum_cls* or raise ValidationError listing allowed values."""
    try:
        return enum_cls(value)
    except ValueError:
        allowed = ", ".join(m.value for m in enum_cls)
        raise ValidationError(
            f"Invalid {field} '{value}'. Allowed: {allowed}",
            details={field: "invalid"},
        ) from None


def parse_number(value, field: str, *, default=0, minimum=None, maximum=None):
    """Coerce a numeric input; None → *default*; out-of-range is a ValidationError."""
    if value is None or value == "":
        return default
    try:
        number = float(value)
    except (TypeError, ValueError, OverflowError):
        raise ValidationError(f"{field} must be a number", details={field: "invalid"}) from None
    if not math.isfinite(number):
        raise ValidationError(f"{field} must be a number", details={field: "invalid"})
    if minimum is not None and number < minimum:
        raise ValidationError(f"{field} must be >= {minimum}", details={field: "out of range"})
    if maximum is not None and number > maximum:
        raise ValidationError(f"{field} must be <= {maximum}", details={field: "out of range"})
    return int(number) if number.is_integer() else number


def parse_id(value, field: str):
    """Optional integer reference; empty → None, anything non-integral is a ValidationError."""
    if value is None or value == "":
        return None
    if isinstance(value, bool):
        raise ValidationError(f"{field} must be an integer id", details={field: "invalid"})
    try:
        return int(str(value).strip())
    except ValueError:
        raise ValidationError(f"{field} must be an integer id", details={field: "invalid"}) from None


def parse_rows(value, field: str) -> list[dict]:
    """Child-row payload: None → [], otherwise a list whose items are all objects."""
    if value is None:
        return []
    if not isinstance(value, list):
        raise ValidationError(f"{field} must be a list", details={field: "invalid"})
    for row in value:
        if not isinstance(row, dict):
            raise ValidationError(f"{field} entries must be objects", details={field: "invalid"})
    return value
