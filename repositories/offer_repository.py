"""
Offer repository (persistence).

This module provides *only* persistence operations for the Offer domain entity.
It contains no business rules about who may create or resolve offers; it only
enforces persistence constraints:

- Token uniqueness (unique index on `offers.token`, see scripts/offers_schema.sql).
- The exactly-once lifecycle transition, expressed as ONE conditional UPDATE:

      UPDATE offers SET status = :decision, token = NULL
       WHERE token = :token AND status = 'PENDING'

  The existence check and the write are never split into two round trips.
  PostgreSQL serializes concurrent updates on the same row, so among any number
  of concurrent attempts on one token exactly one affects a row.

Infrastructure failures are reported as PersistenceError.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from decimal import Decimal
from typing import Any, Callable, List, Mapping, Optional, Protocol

import httpx
from postgrest.exceptions import APIError
from supabase import Client  # type: ignore[import-not-found]

from config import Settings
from domain.errors import PersistenceError
from domain.offer import Offer, OfferStatus, OfferTerms
from domain.time import parse_utc_datetime, require_utc_timestamp
from domain.token import mask_token

logger = logging.getLogger(__name__)

# Supabase table name for offers.
# Keep this aligned with scripts/offers_schema.sql.
_OFFERS_TABLE: str = "offers"

# PostgreSQL SQLSTATE for unique_violation.
_UNIQUE_VIOLATION: str = "23505"


class OfferRepository(Protocol):
    """Store contract the lifecycle engine depends on."""

    def insert(self, terms: OfferTerms, token: str, created_at: datetime) -> Offer:
        """Atomically persist a new PENDING offer and return it with its assigned id."""
        ...

    def conditional_transition(self, token: str, new_status: OfferStatus) -> int:
        """Move the PENDING offer holding `token` to `new_status`; return rows affected."""
        ...

    def find_by_token(self, token: str) -> Optional[Offer]:
        ...

    def find_by_id(self, offer_id: int) -> Optional[Offer]:
        ...

    def list_all(self) -> List[Offer]:
        """Every offer, newest first by creation order."""
        ...


def _to_iso_utc(dt: datetime, *, name: str) -> str:
    """Serialize a UTC datetime to ISO-8601 (timezone-aware, offset 0)."""

    require_utc_timestamp(name, dt)
    return dt.astimezone(timezone.utc).isoformat()


def _row_to_offer(row: Mapping[str, Any]) -> Offer:
    """Convert a Supabase row into an Offer."""

    return Offer(
        offer_id=int(row["id"]),
        candidate_name=str(row["candidate_name"]),
        email=str(row["email"]),
        position=str(row["position"]),
        salary=Decimal(str(row["salary"])),
        status=OfferStatus(str(row["status"])),
        token=row.get("token") or None,
        created_at=parse_utc_datetime(row["created_at_utc"]),
    )


class SupabaseOfferRepository:
    """OfferRepository backed by the `offers` table through supabase-py."""

    def __init__(self, client: Client) -> None:
        self._client = client

    def _execute(self, action: str, run: Callable[[], Any]) -> List[Mapping[str, Any]]:
        """
        Execute a prepared query and return its rows.

        Translates PostgREST and transport failures into PersistenceError.
        """

        try:
            response = run()
        except APIError as e:
            code = getattr(e, "code", None)
            if str(code) == _UNIQUE_VIOLATION:
                raise PersistenceError(f"Failed to {action}: unique constraint violated") from e
            raise PersistenceError(f"Failed to {action}: {e}") from e
        except httpx.HTTPError as e:
            raise PersistenceError(f"Failed to {action}: store unreachable ({e})") from e

        error = getattr(response, "error", None)
        if error:
            raise PersistenceError(f"Failed to {action}: {error}")

        return getattr(response, "data", None) or []

    def insert(self, terms: OfferTerms, token: str, created_at: datetime) -> Offer:
        payload: dict[str, Any] = {
            "candidate_name": terms.candidate_name,
            "email": terms.email,
            "position": terms.position,
            "salary": str(terms.salary),
            "token": token,
            "status": OfferStatus.PENDING.value,
            "created_at_utc": _to_iso_utc(created_at, name="created_at"),
        }

        rows = self._execute(
            "insert offer",
            lambda: self._client.table(_OFFERS_TABLE).insert(payload).execute(),
        )
        if not rows:
            raise PersistenceError("Failed to insert offer: store returned no row")

        return _row_to_offer(rows[0])

    def conditional_transition(self, token: str, new_status: OfferStatus) -> int:
        update_payload: dict[str, Any] = {"status": new_status.value, "token": None}

        rows = self._execute(
            "transition offer",
            lambda: (
                self._client.table(_OFFERS_TABLE)
                .update(update_payload)
                .eq("token", token)
                .eq("status", OfferStatus.PENDING.value)
                .execute()
            ),
        )

        if len(rows) > 1:
            # The unique index on token makes this impossible; refuse to report success.
            logger.error(
                "Conditional transition matched more than one offer",
                extra={"token": mask_token(token), "rows": len(rows)},
            )
            raise PersistenceError("Conditional transition matched more than one offer")

        return len(rows)

    def find_by_token(self, token: str) -> Optional[Offer]:
        rows = self._execute(
            "get offer by token",
            lambda: (
                self._client.table(_OFFERS_TABLE)
                .select("*")
                .eq("token", token)
                .limit(1)
                .execute()
            ),
        )
        if not rows:
            return None
        return _row_to_offer(rows[0])

    def find_by_id(self, offer_id: int) -> Optional[Offer]:
        rows = self._execute(
            "get offer",
            lambda: (
                self._client.table(_OFFERS_TABLE)
                .select("*")
                .eq("id", offer_id)
                .limit(1)
                .execute()
            ),
        )
        if not rows:
            return None
        return _row_to_offer(rows[0])

    def list_all(self) -> List[Offer]:
        rows = self._execute(
            "list offers",
            lambda: self._client.table(_OFFERS_TABLE).select("*").order("id", desc=True).execute(),
        )
        return [_row_to_offer(row) for row in rows]


def build_offer_repository(settings: Settings) -> OfferRepository:
    """Create the offer store selected by OFFER_STORE."""

    if settings.offer_store == "memory":
        from repositories.memory_offer_repository import InMemoryOfferRepository

        logger.warning("Using the in-memory offer store; offers are lost on restart")
        return InMemoryOfferRepository()

    from repositories.client import get_supabase

    return SupabaseOfferRepository(get_supabase())


__all__ = [
    "OfferRepository",
    "SupabaseOfferRepository",
    "build_offer_repository",
]
