#!/usr/bin/env python3
"""
Create an offer from the command line.

Logs in with the configured HR account (HR_EMAIL / HR_PASSWORD), creates a PENDING
offer, prints the candidate link and sends the notification.

Usage:
    python scripts/create_offer.py --name "Asha Rao" --email asha@example.com \\
        --position Engineer --salary 50000
    python scripts/create_offer.py ... --no-notify
"""

from __future__ import annotations

import argparse
import sys
from datetime import timedelta
from pathlib import Path
from typing import List, Optional

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from config import Settings, get_settings, setup_logging
from domain.errors import AccessDenied, PersistenceError, ValidationError
from repositories.offer_repository import OfferRepository, build_offer_repository
from services.access_gateway import AccessGateway
from services.notification_service import (
    OfferDispatcher,
    OfferNotification,
    build_offer_dispatcher,
    deliver_offer_notification,
)
from services.offer_lifecycle_service import OfferLifecycleService


def create_offer(
    args: argparse.Namespace,
    settings: Settings,
    repository: OfferRepository,
    dispatcher: OfferDispatcher,
) -> int:
    """Run the create flow; returns a process exit code."""

    gateway = AccessGateway(
        secret=settings.session_secret,
        hr_email=settings.hr_email,
        hr_password=settings.hr_password,
        session_ttl=timedelta(minutes=settings.session_ttl_minutes),
    )

    try:
        identity = gateway.verify(gateway.login(settings.hr_email, settings.hr_password))
    except AccessDenied as e:
        print(f"[ERROR] HR login failed: {e}", file=sys.stderr)
        return 2

    service = OfferLifecycleService(repository)

    try:
        created = service.create_offer(
            identity,
            candidate_name=args.name,
            email=args.email,
            position=args.position,
            salary=args.salary,
        )
    except ValidationError as e:
        print(f"[ERROR] Invalid offer: {e}", file=sys.stderr)
        return 2
    except PersistenceError as e:
        print(f"[ERROR] Could not store offer: {e}", file=sys.stderr)
        return 1

    notification = OfferNotification.for_offer(created.offer, settings.host_url)

    print("[SUCCESS] Offer created")
    print(f"  Offer ID: {created.offer_id}")
    print(f"  Candidate: {created.offer.candidate_name} <{created.offer.email}>")
    print(f"  Position: {created.offer.position}")
    print(f"  Salary: {created.offer.salary}")
    print(f"  Link: {notification.offer_link}")

    if args.no_notify:
        return 0

    if deliver_offer_notification(dispatcher, notification):
        print("  Notification: sent")
    else:
        print("  Notification: FAILED (offer is still pending; re-send from the dashboard)")
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(
        description="Create a job offer and send the candidate their link",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python scripts/create_offer.py --name "Asha Rao" --email asha@example.com --position Engineer --salary 50000

  # Create without sending the email
  python scripts/create_offer.py --name "Asha Rao" --email asha@example.com --position Engineer --salary 50000 --no-notify
        """
    )
    parser.add_argument("--name", required=True, help="Candidate full name")
    parser.add_argument("--email", required=True, help="Candidate email address")
    parser.add_argument("--position", required=True, help="Position offered")
    parser.add_argument("--salary", required=True, help="Monthly salary")
    parser.add_argument(
        "--no-notify",
        action="store_true",
        help="Create the offer without sending the notification"
    )

    args = parser.parse_args(argv)

    settings = get_settings()
    setup_logging(settings.log_level)

    try:
        repository = build_offer_repository(settings)
        return create_offer(args, settings, repository, build_offer_dispatcher(settings))
    except KeyboardInterrupt:
        print("\n\nInterrupted by user")
        return 130


if __name__ == "__main__":
    sys.exit(main())
