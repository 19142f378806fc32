"""
Operation result type.

Handlers never raise for database failures; they return an OperationResult
that is either a success payload or an error payload. The router inspects
``ok`` instead of catching exceptions.
"""

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class OperationResult:
    """Outcome of one Data API action."""

    payload: dict[str, Any] = field(default_factory=dict)
    error_code: str | None = None
    error_message: str | None = None

    @classmethod
    def success(cls, **payload: Any) -> "OperationResult":
        return cls(payload=payload)

    @classmethod
    def failure(cls, error_code: str, message: str) -> "OperationResult":
        return cls(error_code=error_code, error_message=message)

    @property
    def ok(self) -> bool:
        return self.error_code is None

    def to_dict(self) -> dict[str, Any]:
        """Response body: the success payload or ``{error, error_code}``."""
        if self.ok:
            return dict(self.payload)
        return {"error": self.error_message, "error_code": self.error_code}
