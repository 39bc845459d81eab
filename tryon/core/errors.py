"""
Error Taxonomy
Exceptions raised by the stores, the job lifecycle and the processing triggers.
API routes translate them into HTTP responses.
"""

from typing import Optional


class TryOnError(Exception):
    """Base exception for try-on errors."""

    def __init__(self, message: str, details: Optional[dict] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class InvalidRequest(TryOnError):
    """Request is malformed or violates a policy (e.g. too many garments)."""


class InvalidReference(InvalidRequest):
    """Request names an asset or catalog id that does not resolve."""


class NotFound(TryOnError):
    """Unknown asset, catalog item or job on lookup."""


class NotReady(TryOnError):
    """Result requested before the job succeeded."""


class TransitionError(TryOnError):
    """Base for rejected status writes. Logged, never fatal."""


class InvalidTransition(TransitionError):
    """Transition not allowed by the state machine."""


class AlreadyTerminal(TransitionError):
    """Job already reached succeeded/failed; the write was ignored."""


class DispatchFailure(TryOnError):
    """External compositor could not be reached or refused the job."""


class PayloadTooLarge(TryOnError):
    """Upload exceeds the configured size limit."""


class UnsupportedType(TryOnError):
    """Upload is not an image."""


__all__ = [
    "TryOnError",
    "InvalidRequest",
    "InvalidReference",
    "NotFound",
    "NotReady",
    "TransitionError",
    "InvalidTransition",
    "AlreadyTerminal",
    "DispatchFailure",
    "PayloadTooLarge",
    "UnsupportedType",
]
