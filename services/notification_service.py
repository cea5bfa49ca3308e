"""
Offer notification service.

Delivers the candidate's offer link and an attached offer letter summarizing the
offer terms (employer, position, salary, standard terms).

Delivery is deliberately separate from offer creation:
- It runs after the offer has been committed (a background task in the API)
- A failure is logged and reported, never allowed to touch the offer record
- HR can trigger delivery again for any offer that is still PENDING
"""

from __future__ import annotations

import logging
import smtplib
from dataclasses import dataclass
from decimal import Decimal
from email.message import EmailMessage
from io import StringIO
from typing import Optional, Protocol
from urllib.parse import urlencode

from config import Settings
from domain.offer import Offer
from domain.token import mask_token

logger = logging.getLogger(__name__)

OFFER_PAGE_PATH: str = "/offer.html"

STANDARD_TERMS: tuple[str, ...] = (
    "Working hours as per company policy",
    "Confidentiality must be maintained",
    "Salary credited monthly",
)


class NotificationError(Exception):
    """Raised when an offer notification could not be delivered."""
    pass


@dataclass(frozen=True, slots=True)
class OfferNotification:
    """Everything the dispatcher needs to tell a candidate about their offer."""
    email: str
    candidate_name: str
    position: str
    salary: Decimal
    offer_link: str

    @staticmethod
    def for_offer(offer: Offer, base_url: str) -> "OfferNotification":
        if not offer.token:
            raise ValueError(f"Offer {offer.offer_id} has no token to send")
        return OfferNotification(
            email=offer.email,
            candidate_name=offer.candidate_name,
            position=offer.position,
            salary=offer.salary,
            offer_link=build_offer_link(base_url, offer.token),
        )


class OfferDispatcher(Protocol):
    def dispatch(self, notification: OfferNotification) -> None:
        """Deliver the notification or raise NotificationError."""
        ...


def build_offer_link(base_url: str, token: str) -> str:
    """
    Build the candidate-facing link embedding the token.

    Example:
        build_offer_link("https://offers.example.com/", "abc")
        # Returns "https://offers.example.com/offer.html?token=abc"
    """

    return f"{base_url.rstrip('/')}{OFFER_PAGE_PATH}?{urlencode({'token': token})}"


def mask_offer_link(link: str) -> str:
    """Replace the token in an offer link with its masked form for logging."""

    base, separator, token = link.partition("token=")
    if not separator:
        return link
    return f"{base}{separator}{mask_token(token)}"


def render_offer_letter(
    notification: OfferNotification,
    employer_name: str,
    employer_location: str,
) -> str:
    """Render the plain-text offer letter attached to the notification."""

    output = StringIO()
    output.write("OFFER LETTER\n\n")
    output.write(f"Company: {employer_name}\n")
    output.write(f"Location: {employer_location}\n\n")
    output.write(f"Candidate Name: {notification.candidate_name}\n")
    output.write(f"Position: {notification.position}\n")
    output.write(f"Salary: {notification.salary} per month\n\n")
    output.write("Terms & Conditions:\n")
    for term in STANDARD_TERMS:
        output.write(f"- {term}\n")
    output.write("\nPlease use the link in this email to accept or reject this offer.\n")
    return output.getvalue()


def build_offer_email(
    notification: OfferNotification,
    sender: str,
    employer_name: str,
    employer_location: str,
) -> EmailMessage:
    message = EmailMessage()
    message["Subject"] = f"Your offer from {employer_name}: {notification.position}"
    message["From"] = sender
    message["To"] = notification.email
    message.set_content(
        f"Dear {notification.candidate_name},\n\n"
        f"We are pleased to offer you the position of {notification.position} "
        f"at {employer_name}.\n\n"
        f"Review the offer and accept or reject it here:\n{notification.offer_link}\n\n"
        "This link can be used only once.\n\n"
        f"Regards,\n{employer_name}\n"
    )
    message.add_attachment(
        render_offer_letter(notification, employer_name, employer_location),
        subtype="plain",
        filename="offer_letter.txt",
    )
    return message


class SmtpOfferDispatcher:
    """Sends offer notifications by email over SMTP."""

    def __init__(
        self,
        host: str,
        port: int,
        sender: str,
        username: Optional[str] = None,
        password: Optional[str] = None,
        use_tls: bool = True,
        employer_name: str = "TYROADS",
        employer_location: str = "Gwalior",
        timeout: float = 30.0,
    ) -> None:
        self._host = host
        self._port = port
        self._sender = sender
        self._username = username
        self._password = password
        self._use_tls = use_tls
        self._employer_name = employer_name
        self._employer_location = employer_location
        self._timeout = timeout

    def dispatch(self, notification: OfferNotification) -> None:
        try:
            message = build_offer_email(
                notification,
                sender=self._sender,
                employer_name=self._employer_name,
                employer_location=self._employer_location,
            )
        except ValueError as e:
            raise NotificationError(f"Cannot build offer email for {notification.email}: {e}") from e

        try:
            with smtplib.SMTP(self._host, self._port, timeout=self._timeout) as smtp:
                if self._use_tls:
                    smtp.starttls()
                if self._username:
                    smtp.login(self._username, self._password or "")
                smtp.send_message(message)
        except (smtplib.SMTPException, OSError, ValueError) as e:
            raise NotificationError(f"Failed to send offer email to {notification.email}: {e}") from e

        logger.info("Offer email sent", extra={"recipient": notification.email})


class LoggingOfferDispatcher:
    """Development dispatcher: logs a masked offer link instead of sending it."""

    def dispatch(self, notification: OfferNotification) -> None:
        logger.info(
            f"Offer link for {notification.email}: {mask_offer_link(notification.offer_link)}",
            extra={"recipient": notification.email, "position": notification.position},
        )


def build_offer_dispatcher(settings: Settings) -> OfferDispatcher:
    """SMTP delivery when SMTP_HOST is configured, otherwise log the links."""

    if not settings.smtp_host:
        return LoggingOfferDispatcher()
    return SmtpOfferDispatcher(
        host=settings.smtp_host,
        port=settings.smtp_port,
        sender=settings.smtp_sender or settings.smtp_username or f"offers@{settings.smtp_host}",
        username=settings.smtp_username,
        password=settings.smtp_password,
        use_tls=settings.smtp_use_tls,
        employer_name=settings.employer_name,
        employer_location=settings.employer_location,
    )


def deliver_offer_notification(dispatcher: OfferDispatcher, notification: OfferNotification) -> bool:
    """
    Best-effort delivery step run after an offer is committed.

    Returns True on success. A NotificationError is logged and reported as False;
    the offer stays PENDING and HR can send it again.
    """

    try:
        dispatcher.dispatch(notification)
    except NotificationError:
        logger.exception(
            "Offer notification failed; offer remains pending",
            extra={"recipient": notification.email},
        )
        return False
    return True


__all__ = [
    "NotificationError",
    "OfferNotification",
    "OfferDispatcher",
    "build_offer_link",
    "mask_offer_link",
    "render_offer_letter",
    "build_offer_email",
    "SmtpOfferDispatcher",
    "LoggingOfferDispatcher",
    "build_offer_dispatcher",
    "deliver_offer_notification",
]
