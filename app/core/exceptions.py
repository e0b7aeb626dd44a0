"""
Platform-wide exception hierarchy.

Services raise these internally; ``app.services.helpers.guards.guarded_action``
turns them into ``ActionResult`` failures at the service boundary, so none
of them ever reaches a caller as an exception.

Usage:
    from app.core.exceptions import NotFoundError, ValidationError

    raise NotFoundError(resource="Submittal", resource_id=42)
    raise ValidationError("title is required", details={"title": "required"})

Each exception carries:
    message — the caller-facing string returned verbatim in ``{"error": ...}``
    code    — machine-readable code from ``app.utils.errors.E``
"""

from app.utils.errors import E


class RailCommandError(Exception):
    """Base class for every failure that is returned as a value."""

    code = E.INTERNAL
    default_message = "Operation failed"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class AuthenticationError(RailCommandError):
    """No valid actor identity was resolved. Always checked first."""

    code = E.AUTH_REQUIRED
    default_message = "Not authenticated"


class ProfileNotFoundError(RailCommandError):
    """Identity resolved but has no backing profile (data-integrity fault)."""

    code = E.PROFILE_MISSING
    default_message = "Profile not found"


class NotAMemberError(RailCommandError):
    """Actor holds no membership in the project and is not a global admin."""

    code = E.NOT_A_MEMBER
    default_message = "Not a member of this project"


class PermissionDeniedError(RailCommandError):
    """Actor is a member but the project role lacks the required action.

    Also used for global-role gates (project creation / deletion) with a
    more specific message.
    """

    code = E.FORBIDDEN
    default_message = "Permission denied"

    def __init__(self, message: str | None = None, action: str | None = None) -> None:
        self.action = action
        super().__init__(message)


class NotFoundError(RailCommandError):
    """Raised when a requested resource does not exist within the given scope.

    Security note: Used for BOTH genuinely missing records AND cross-project
    id guesses. The caller-facing message never includes the id, so another
    project's entity is indistinguishable from a missing one.

    Args:
        resource: Human-readable entity name (e.g. "Submittal", "RFI").
        resource_id: The PK that was looked up. Included in logs only.
        project_id: Optional scope that was enforced. For debug logging only.
        message: Optional caller-facing override.
    """

    code = E.NOT_FOUND

    def __init__(
        self,
        resource: str,
        resource_id: int | str | None = None,
        project_id: int | None = None,
        message: str | None = None,
    ) -> None:
        self.resource = resource
        self.resource_id = resource_id
        self.project_id = project_id
        super().__init__(message or f"{resource} not found")

    def __str__(self) -> str:
        msg = self.resource
        if self.resource_id is not None:
            msg += f" id={self.resource_id}"
        msg += " not found"
        if self.project_id is not None:
            msg += f" (project={self.project_id})"
        return msg


class ValidationError(RailCommandError):
    """Raised when input is malformed or violates a business rule.

    Caught before any mutation is attempted.

    Args:
        message: Human-readable explanation of what failed.
        details: Optional field-level breakdown for structured API responses.
    """

    code = E.VALIDATION_INVALID

    def __init__(self, message: str, details: dict | None = None) -> None:
        self.details = details or {}
        super().__init__(message)


class ConflictError(RailCommandError):
    """Raised when an operation would duplicate a unique value.

    Args:
        resource: Model name.
        field: The unique field that would be duplicated.
        value: The conflicting value.
        message: Optional caller-facing override.
    """

    code = E.CONFLICT_DUPLICATE

    def __init__(
        self,
        resource: str,
        field: str,
        value: str | None = None,
        message: str | None = None,
    ) -> None:
        self.resource = resource
        self.field = field
        self.value = value
        super().__init__(message or f"{resource} with {field}={value!r} already exists")
