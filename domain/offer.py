"""
Domain: Offer entity and lifecycle status.

Rules implemented here:
- An Offer is created PENDING with a non-empty token.
- PENDING is the only non-terminal status; ACCEPTED and REJECTED are terminal.
- token is non-empty if and only if status is PENDING.
- Descriptive fields (candidate_name, email, position, salary) never change after
  creation. Only status and token move, and they move together.

This module contains only pure domain entities/value objects: no I/O, no database,
no frameworks. Enforcement of "exactly one transition" under concurrency lives in
the store's conditional update, not here.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Any, Optional

from .errors import ValidationError
from .time import require_utc_timestamp


class OfferStatus(str, Enum):
    PENDING = "PENDING"
    ACCEPTED = "ACCEPTED"
    REJECTED = "REJECTED"

    @property
    def is_terminal(self) -> bool:
        return self is not OfferStatus.PENDING


# Statuses a candidate may choose when resolving an offer.
DECISIONS: frozenset[OfferStatus] = frozenset({OfferStatus.ACCEPTED, OfferStatus.REJECTED})


# Matches the offers.salary column, numeric(14, 2).
SALARY_QUANTUM: Decimal = Decimal("0.01")
SALARY_MAX: Decimal = Decimal("999999999999.99")


def _require_text(name: str, value: Any) -> str:
    if value is None or not isinstance(value, str):
        raise ValidationError(f"{name} is required")
    text = value.strip()
    if not text:
        raise ValidationError(f"{name} is required")
    # Names and positions end up in email headers.
    if "\r" in text or "\n" in text:
        raise ValidationError(f"{name} must be a single line")
    return text


def parse_salary(value: Any) -> Decimal:
    """
    Parse a salary into a positive, finite Decimal.

    Accepts str, int, float and Decimal. Booleans are rejected even though they
    are ints in Python. The value must fit the stored column exactly: at most
    2 decimal places and no more than SALARY_MAX.
    """

    if value is None or isinstance(value, bool):
        raise ValidationError("salary is required")

    if isinstance(value, str):
        value = value.strip()
        if not value:
            raise ValidationError("salary is required")

    try:
        salary = Decimal(str(value))
    except (InvalidOperation, ValueError):
        raise ValidationError(f"salary must be numeric, got {value!r}") from None

    if not salary.is_finite():
        raise ValidationError("salary must be a finite number")
    if salary <= 0:
        raise ValidationError("salary must be positive")
    if salary > SALARY_MAX:
        raise ValidationError(f"salary must not exceed {SALARY_MAX}")
    if salary != salary.quantize(SALARY_QUANTUM):
        raise ValidationError("salary must have at most 2 decimal places")
    return salary


def parse_decision(value: Any) -> OfferStatus:
    """Parse a candidate decision; only ACCEPTED and REJECTED are valid."""

    if isinstance(value, OfferStatus):
        status = value
    elif isinstance(value, str):
        try:
            status = OfferStatus(value.strip())
        except ValueError:
            raise ValidationError(f"Invalid decision: {value!r}") from None
    else:
        raise ValidationError("decision is required")

    if status not in DECISIONS:
        raise ValidationError(f"Invalid decision: {status.value}")
    return status


@dataclass(frozen=True, slots=True)
class OfferTerms:
    """
    Validated creation input for an Offer.

    Build instances through `OfferTerms.parse`, which applies the input rules:
    all fields present and non-empty, email containing '@', salary positive.
    """

    candidate_name: str
    email: str
    position: str
    salary: Decimal

    @staticmethod
    def parse(candidate_name: Any, email: Any, position: Any, salary: Any) -> "OfferTerms":
        name = _require_text("candidate_name", candidate_name)
        address = _require_text("email", email)
        if "@" not in address:
            raise ValidationError("email must be a valid email address")
        role = _require_text("position", position)
        return OfferTerms(
            candidate_name=name,
            email=address,
            position=role,
            salary=parse_salary(salary),
        )


@dataclass(frozen=True, slots=True)
class Offer:
    """
    Immutable snapshot of a persisted offer row.

    Instances are never authoritative: every lifecycle decision is taken against
    the store. A resolved snapshot is produced with `resolved()`, which returns a
    new instance with the token cleared.
    """

    offer_id: int
    candidate_name: str
    email: str
    position: str
    salary: Decimal
    status: OfferStatus
    token: Optional[str]
    created_at: datetime

    def __post_init__(self) -> None:
        require_utc_timestamp("created_at", self.created_at)
        has_token = bool(self.token)
        if self.status is OfferStatus.PENDING and not has_token:
            raise ValueError("A PENDING offer must carry a token")
        if self.status is not OfferStatus.PENDING and has_token:
            raise ValueError(f"A {self.status.value} offer must not carry a token")

    @property
    def is_pending(self) -> bool:
        return self.status is OfferStatus.PENDING

    @property
    def terms(self) -> OfferTerms:
        return OfferTerms(
            candidate_name=self.candidate_name,
            email=self.email,
            position=self.position,
            salary=self.salary,
        )

    def resolved(self, decision: OfferStatus) -> "Offer":
        """Return a new Offer moved to a terminal status with its token cleared."""

        if not self.is_pending:
            raise ValueError(f"Offer {self.offer_id} is already {self.status.value}")
        if decision not in DECISIONS:
            raise ValueError(f"Invalid decision: {decision}")
        return Offer(
            offer_id=self.offer_id,
            candidate_name=self.candidate_name,
            email=self.email,
            position=self.position,
            salary=self.salary,
            status=decision,
            token=None,
            created_at=self.created_at,
        )

    def view(self) -> "OfferView":
        return OfferView(
            candidate_name=self.candidate_name,
            position=self.position,
            salary=self.salary,
            status=self.status,
        )


@dataclass(frozen=True, slots=True)
class OfferView:
    """What a candidate sees on the decision page before choosing."""

    candidate_name: str
    position: str
    salary: Decimal
    status: OfferStatus


__all__ = [
    "OfferStatus",
    "DECISIONS",
    "OfferTerms",
    "Offer",
    "OfferView",
    "parse_salary",
    "parse_decision",
]
