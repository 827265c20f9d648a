from __future__ import annotations

from typing import Any, Optional


class ResolutionError(Exception):
    """An operation on a handler type could not be turned into an affordance."""

    def __init__(self, message: str, handler_type: Any = None, operation: Optional[str] = None) -> None:
        super().__init__(message)
        self.handler_type = handler_type
        self.operation = operation


class AmbiguousOperationError(ResolutionError):
    """The operation block captured zero or several candidate operations."""


class UnroutableOperationError(ResolutionError):
    """The captured operation does not map to routing metadata."""
