"""Exception types raised by the B-Side engine."""

from __future__ import annotations


class BSideError(Exception):
    """Base exception for B-Side rendering errors."""

    pass


class ParameterError(BSideError, ValueError):
    """Raised when render parameters are invalid, before any pixel work starts."""

    pass


class ResourceLimitError(BSideError):
    """Raised when an input or request exceeds a configured ceiling."""

    pass


class RenderCancelled(BSideError):
    """Raised from inside a render loop when its control was stopped or timed out."""

    pass
