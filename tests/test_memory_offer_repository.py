"""
Tests for `repositories/memory_offer_repository.py`.

Covers store guarantees:
- ids are assigned monotonically.
- tokens are never accepted twice, including tokens of resolved offers.
- the conditional transition affects a row at most once per token.
- resolved offers are no longer reachable by token.
- list_all is newest first.
"""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from datetime import datetime, timezone
from decimal import Decimal
from threading import Barrier

import pytest

from domain.errors import PersistenceError
from domain.offer import OfferStatus, OfferTerms
from repositories.memory_offer_repository import InMemoryOfferRepository

CREATED = datetime(2025, 1, 1, 0, 0, 0, tzinfo=timezone.utc)
TERMS = OfferTerms(
    candidate_name="Asha Rao",
    email="asha@x.com",
    position="Engineer",
    salary=Decimal("50000"),
)


def test_insert_assigns_monotonic_ids(repository: InMemoryOfferRepository) -> None:
    first = repository.insert(TERMS, "tok-1", CREATED)
    second = repository.insert(TERMS, "tok-2", CREATED)

    assert first.offer_id == 1
    assert second.offer_id == 2
    assert first.status is OfferStatus.PENDING
    assert first.token == "tok-1"


def test_insert_rejects_duplicate_token(repository: InMemoryOfferRepository) -> None:
    repository.insert(TERMS, "tok-1", CREATED)

    with pytest.raises(PersistenceError):
        repository.insert(TERMS, "tok-1", CREATED)

    assert len(repository.list_all()) == 1


def test_insert_rejects_token_of_resolved_offer(repository: InMemoryOfferRepository) -> None:
    """A cleared token is still never reused."""

    repository.insert(TERMS, "tok-1", CREATED)
    assert repository.conditional_transition("tok-1", OfferStatus.ACCEPTED) == 1

    with pytest.raises(PersistenceError):
        repository.insert(TERMS, "tok-1", CREATED)


def test_insert_requires_utc_created_at(repository: InMemoryOfferRepository) -> None:
    with pytest.raises(ValueError):
        repository.insert(TERMS, "tok-1", datetime(2025, 1, 1))


def test_conditional_transition_applies_once(repository: InMemoryOfferRepository) -> None:
    offer = repository.insert(TERMS, "tok-1", CREATED)

    assert repository.conditional_transition("tok-1", OfferStatus.REJECTED) == 1
    assert repository.conditional_transition("tok-1", OfferStatus.REJECTED) == 0
    assert repository.conditional_transition("tok-1", OfferStatus.ACCEPTED) == 0

    stored = repository.find_by_id(offer.offer_id)
    assert stored is not None
    assert stored.status is OfferStatus.REJECTED
    assert stored.token is None


def test_conditional_transition_unknown_token(repository: InMemoryOfferRepository) -> None:
    assert repository.conditional_transition("missing", OfferStatus.ACCEPTED) == 0


def test_conditional_transition_rejects_pending_target(repository: InMemoryOfferRepository) -> None:
    repository.insert(TERMS, "tok-1", CREATED)

    with pytest.raises(PersistenceError):
        repository.conditional_transition("tok-1", OfferStatus.PENDING)


def test_find_by_token_after_resolution_returns_none(repository: InMemoryOfferRepository) -> None:
    repository.insert(TERMS, "tok-1", CREATED)
    assert repository.find_by_token("tok-1") is not None

    repository.conditional_transition("tok-1", OfferStatus.ACCEPTED)

    assert repository.find_by_token("tok-1") is None


def test_list_all_is_newest_first(repository: InMemoryOfferRepository) -> None:
    for i in range(3):
        repository.insert(TERMS, f"tok-{i}", CREATED)

    assert [offer.offer_id for offer in repository.list_all()] == [3, 2, 1]


def test_concurrent_transitions_affect_exactly_one_row(repository: InMemoryOfferRepository) -> None:
    repository.insert(TERMS, "tok-1", CREATED)
    workers = 16
    barrier = Barrier(workers)

    def attempt(i: int) -> int:
        barrier.wait()
        decision = OfferStatus.ACCEPTED if i % 2 else OfferStatus.REJECTED
        return repository.conditional_transition("tok-1", decision)

    with ThreadPoolExecutor(max_workers=workers) as pool:
        results = list(pool.map(attempt, range(workers)))

    assert sorted(results) == [0] * (workers - 1) + [1]
