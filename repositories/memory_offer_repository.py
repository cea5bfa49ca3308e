"""
In-memory offer repository.

A process-local OfferRepository used by the test-suite and for local development
(OFFER_STORE=memory). It keeps the same guarantees as the SQL store:

- ids are assigned monotonically, starting at 1
- a token is never accepted twice, even after the offer holding it is resolved
- the conditional transition is a compare-and-swap performed under one lock

Data lives only as long as the process.
"""

from __future__ import annotations

import threading
from datetime import datetime
from typing import Dict, List, Optional

from domain.errors import PersistenceError
from domain.offer import DECISIONS, Offer, OfferStatus, OfferTerms
from domain.time import require_utc_timestamp


class InMemoryOfferRepository:
    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._offers: Dict[int, Offer] = {}
        self._by_token: Dict[str, int] = {}
        self._issued_tokens: set[str] = set()
        self._next_id = 1

    def insert(self, terms: OfferTerms, token: str, created_at: datetime) -> Offer:
        require_utc_timestamp("created_at", created_at)
        if not token:
            raise PersistenceError("Failed to insert offer: token is required")

        with self._lock:
            if token in self._issued_tokens:
                raise PersistenceError("Failed to insert offer: unique constraint violated")

            offer = Offer(
                offer_id=self._next_id,
                candidate_name=terms.candidate_name,
                email=terms.email,
                position=terms.position,
                salary=terms.salary,
                status=OfferStatus.PENDING,
                token=token,
                created_at=created_at,
            )
            self._offers[offer.offer_id] = offer
            self._by_token[token] = offer.offer_id
            self._issued_tokens.add(token)
            self._next_id += 1
            return offer

    def conditional_transition(self, token: str, new_status: OfferStatus) -> int:
        if new_status not in DECISIONS:
            raise PersistenceError(f"Invalid target status: {new_status}")

        with self._lock:
            offer_id = self._by_token.get(token)
            if offer_id is None:
                return 0
            offer = self._offers[offer_id]
            if not offer.is_pending:
                return 0

            self._offers[offer_id] = offer.resolved(new_status)
            del self._by_token[token]
            return 1

    def find_by_token(self, token: str) -> Optional[Offer]:
        with self._lock:
            offer_id = self._by_token.get(token)
            if offer_id is None:
                return None
            return self._offers[offer_id]

    def find_by_id(self, offer_id: int) -> Optional[Offer]:
        with self._lock:
            return self._offers.get(offer_id)

    def list_all(self) -> List[Offer]:
        with self._lock:
            return [self._offers[offer_id] for offer_id in sorted(self._offers, reverse=True)]


__all__ = ["InMemoryOfferRepository"]
