"""
ActionResult — the value every service operation returns.

Either ``success=True`` with ``data``, or ``success=False`` with an
``error`` string (returned verbatim to the caller) and a machine-readable
``code``. Failures are values, never exceptions.
"""

from dataclasses import dataclass, field
from typing import Any

from app.utils.errors import E


@dataclass(frozen=True)
class ActionResult:
    success: bool
    data: Any = None
    error: str | None = None
    code: str | None = None
    details: dict = field(default_factory=dict)

    @classmethod
    def ok(cls, data: Any = None) -> "ActionResult":
        return cls(success=True, data=data)

    @classmethod
    def fail(cls, error: str, code: str = E.INTERNAL, details: dict | None = None) -> "ActionResult":
        return cls(success=False, error=error, code=code, details=details or {})

    def to_dict(self) -> dict:
        if self.success:
            return {"success": True, "data": self.data}
        return {"error": self.error}
