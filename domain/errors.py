"""
Domain: Offer lifecycle error taxonomy.

Every failure of the lifecycle engine is raised as one of these typed
exceptions. Callers translate them at their own boundary (HTTP status codes,
CLI exit codes); none of them is ever interpreted as success.

- ValidationError: malformed/missing input. Recoverable by correcting input.
- AlreadyProcessedOrInvalid: the conditional transition matched zero rows.
- NotFound: no offer is reachable by the given token (or id).
- PersistenceError: the store is unreachable or the operation failed for
  infrastructure reasons. Safe to retry.
- AccessDenied: no valid HR identity was presented.

AlreadyProcessedOrInvalid and NotFound share the OfferLinkError base so the
candidate-facing surface can report both with one message and never reveal
whether a token ever existed.
"""

from __future__ import annotations


class OfferError(Exception):
    """Base class for all offer lifecycle errors."""


class ValidationError(OfferError):
    """Raised when input to an offer operation is missing or malformed."""


class OfferLinkError(OfferError):
    """A candidate link that can no longer be used."""


class AlreadyProcessedOrInvalid(OfferLinkError):
    """Raised when a token is unknown, already consumed, or its offer is resolved."""


class NotFound(OfferLinkError):
    """Raised when no offer is reachable by the given token or id."""


class PersistenceError(OfferError):
    """Raised when the offer store fails for infrastructure reasons."""


class AccessDenied(OfferError):
    """Raised when an HR-only operation is attempted without a valid identity."""


__all__ = [
    "OfferError",
    "ValidationError",
    "OfferLinkError",
    "AlreadyProcessedOrInvalid",
    "NotFound",
    "PersistenceError",
    "AccessDenied",
]
