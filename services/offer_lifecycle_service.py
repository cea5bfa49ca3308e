"""
Offer lifecycle service.

Handles:
- Offer creation (validation, token generation, single atomic insert)
- Exactly-once resolution of an offer through its single-use token
- Read-only lookups for the candidate decision page and the HR roster

The service holds no mutable state between calls. Every decision is made by the
injected OfferRepository; in particular `resolve_offer` relies entirely on the
store's conditional transition and never reads before it writes.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Callable, List, Optional

from domain.errors import (
    AccessDenied,
    AlreadyProcessedOrInvalid,
    NotFound,
    ValidationError,
)
from domain.hr import HRIdentity
from domain.offer import Offer, OfferStatus, OfferTerms, OfferView, parse_decision
from domain.time import utc_now
from domain.token import TokenGenerator, generate_offer_token, mask_token
from repositories.offer_repository import OfferRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class CreatedOffer:
    """
    Result of a successful offer creation.

    The token is handed to the notification step by the caller; the offer is
    already committed when this is returned.
    """
    offer_id: int
    token: str
    offer: Offer


@dataclass(frozen=True, slots=True)
class ResolutionResult:
    """Result of a successful resolve: the terminal status that was applied."""
    status: OfferStatus


class OfferLifecycleService:
    def __init__(
        self,
        repository: OfferRepository,
        token_generator: TokenGenerator = generate_offer_token,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self._repository = repository
        self._token_generator = token_generator
        self._clock = clock

    @staticmethod
    def _require_identity(identity: Optional[HRIdentity]) -> HRIdentity:
        if not isinstance(identity, HRIdentity):
            raise AccessDenied("An authenticated HR identity is required")
        return identity

    def create_offer(
        self,
        identity: Optional[HRIdentity],
        candidate_name: Any,
        email: Any,
        position: Any,
        salary: Any,
    ) -> CreatedOffer:
        """
        Create a PENDING offer.

        Process:
        1. Require an HR identity
        2. Validate all four fields (ValidationError, nothing persisted)
        3. Generate a token
        4. Persist the offer with a single insert (PersistenceError on failure)

        Notification is NOT part of this operation; a delivery failure later can
        never undo a created offer.
        """

        hr = self._require_identity(identity)
        terms = OfferTerms.parse(candidate_name, email, position, salary)

        token = self._token_generator()
        if not token:
            raise RuntimeError("Token generator returned an empty token")

        offer = self._repository.insert(terms, token, self._clock())

        logger.info(
            "Offer created",
            extra={
                "offer_id": offer.offer_id,
                "created_by": hr.email,
                "position": offer.position,
                "token": mask_token(token),
            },
        )
        return CreatedOffer(offer_id=offer.offer_id, token=token, offer=offer)

    def resolve_offer(self, token: Any, decision: Any) -> ResolutionResult:
        """
        Apply the candidate's decision exactly once.

        Issues one conditional transition (token matches AND status is PENDING).
        Zero rows affected means the token was never valid, was already consumed,
        or its offer is resolved; all of these raise AlreadyProcessedOrInvalid.
        Repeating an identical call is safe: the second attempt matches nothing.
        """

        if not isinstance(token, str) or not token.strip():
            raise ValidationError("token is required")
        status = parse_decision(decision)
        token = token.strip()

        affected = self._repository.conditional_transition(token, status)

        if affected == 0:
            logger.info(
                "Offer resolution rejected: no pending offer matched the token",
                extra={"token": mask_token(token), "decision": status.value},
            )
            raise AlreadyProcessedOrInvalid("This offer link is no longer valid")

        logger.info(
            "Offer resolved",
            extra={"token": mask_token(token), "decision": status.value},
        )
        return ResolutionResult(status=status)

    def get_offer_by_token(self, token: Any) -> OfferView:
        """
        Look up an offer for the candidate decision page.

        Resolved offers have their token cleared, so they are no longer reachable
        here and raise NotFound just like unknown tokens.
        """

        if not isinstance(token, str) or not token.strip():
            raise NotFound("Offer not found")

        offer = self._repository.find_by_token(token.strip())
        if offer is None:
            raise NotFound("Offer not found")
        return offer.view()

    def list_offers(self, identity: Optional[HRIdentity]) -> List[Offer]:
        """HR roster: every offer with its current status, newest first."""

        self._require_identity(identity)
        return self._repository.list_all()

    def reissue_notification(self, identity: Optional[HRIdentity], offer_id: int) -> Offer:
        """
        Return a still-PENDING offer so its link can be sent again.

        Used when a delivery failed. Nothing is modified; the existing token is
        reused, so an earlier link and the new one are the same credential.
        """

        hr = self._require_identity(identity)

        offer = self._repository.find_by_id(offer_id)
        if offer is None:
            raise NotFound(f"Offer not found: {offer_id}")
        if not offer.is_pending:
            raise AlreadyProcessedOrInvalid(
                f"Offer {offer_id} is already {offer.status.value}"
            )

        logger.info(
            "Offer notification reissued",
            extra={"offer_id": offer.offer_id, "requested_by": hr.email},
        )
        return offer


__all__ = [
    "CreatedOffer",
    "ResolutionResult",
    "OfferLifecycleService",
]
