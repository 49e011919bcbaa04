"""
Exceptions raised by the sizing engine.

Only input problems are raised. An empty catalog and an undersized catalog
are reported on the result (``using_fallback`` and ``capacity_exceeded``)
instead.
"""

from typing import Any, Optional


class SizingError(Exception):
    """Base exception for sizing engine errors.

    Attributes:
        message: Error description
        field: Name of the offending input (if applicable)
        value: The rejected value (if applicable)
    """

    def __init__(
        self,
        message: str,
        field: Optional[str] = None,
        value: Any = None,
    ):
        super().__init__(message)
        self.message = message
        self.field = field
        self.value = value

    def __str__(self) -> str:
        parts = [self.message]
        if self.field:
            parts.append(f"field={self.field}")
        if self.value is not None:
            parts.append(f"value={self.value!r}")
        return " | ".join(parts)


class ValidationError(SizingError):
    """Raised when a sizing input is missing, non-finite or not positive."""
    pass
