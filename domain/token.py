"""
Domain: Offer token generation.

A token is the single-use credential embedded in the candidate's offer link.
It authorizes exactly one state transition on exactly one offer.

Tokens are random UUID4 values (122 random bits), so the probability of a
collision over any realistic offer volume is negligible. The store still keeps
a unique index on the column; a collision surfaces as a persistence failure,
never as two offers sharing a token.
"""

from __future__ import annotations

from typing import Callable
from uuid import uuid4

TokenGenerator = Callable[[], str]


def generate_offer_token() -> str:
    """Return a fresh, unguessable offer token."""

    return str(uuid4())


def mask_token(token: str | None) -> str:
    """Shorten a token for log output so full credentials never reach the logs."""

    if not token:
        return "<empty>"
    return f"{token[:8]}..."


__all__ = ["TokenGenerator", "generate_offer_token", "mask_token"]
