"""
Check offer status - how many offers are pending, accepted and rejected.
"""

from __future__ import annotations

import sys
from collections import Counter
from pathlib import Path
from typing import List

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from config import get_settings
from domain.offer import Offer, OfferStatus
from repositories.offer_repository import build_offer_repository


def summarize_offers(offers: List[Offer]) -> dict[OfferStatus, int]:
    """Count offers per status (every status present, zero when absent)."""

    counts = Counter(offer.status for offer in offers)
    return {status: counts.get(status, 0) for status in OfferStatus}


def check_offer_status() -> None:
    """Print the roster summary followed by every offer, newest first."""

    offers = build_offer_repository(get_settings()).list_all()
    counts = summarize_offers(offers)

    print("=" * 60)
    print("OFFER STATUS")
    print("=" * 60)
    print(f"Total offers:   {len(offers)}")
    for status, count in counts.items():
        print(f"{status.value + ':':<15} {count}")
    print("=" * 60)

    if not offers:
        return

    print("\nRoster (newest first):")
    print("-" * 60)
    for offer in offers:
        print(
            f"#{offer.offer_id:<5} {offer.status.value:<9} "
            f"{offer.candidate_name} - {offer.position} ({offer.salary}) "
            f"created {offer.created_at:%Y-%m-%d %H:%M} UTC"
        )
    print("-" * 60)


if __name__ == "__main__":
    check_offer_status()
