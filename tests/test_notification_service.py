"""
Tests for `services/notification_service.py`.
"""

from __future__ import annotations

import logging
import smtplib
from datetime import datetime, timezone
from decimal import Decimal
from unittest.mock import MagicMock, patch

import pytest

from config import load_settings
from domain.offer import Offer, OfferStatus
from services.notification_service import (
    LoggingOfferDispatcher,
    NotificationError,
    OfferNotification,
    SmtpOfferDispatcher,
    build_offer_dispatcher,
    build_offer_email,
    build_offer_link,
    deliver_offer_notification,
    mask_offer_link,
    render_offer_letter,
)

NOTIFICATION = OfferNotification(
    email="asha@x.com",
    candidate_name="Asha Rao",
    position="Engineer",
    salary=Decimal("50000"),
    offer_link="https://offers.example.com/offer.html?token=tok-1",
)


def _offer(**overrides) -> Offer:
    values = dict(
        offer_id=3,
        candidate_name="Asha Rao",
        email="asha@x.com",
        position="Engineer",
        salary=Decimal("50000"),
        status=OfferStatus.PENDING,
        token="tok-1",
        created_at=datetime(2025, 1, 1, tzinfo=timezone.utc),
    )
    values.update(overrides)
    return Offer(**values)


def test_build_offer_link() -> None:
    assert build_offer_link("https://offers.example.com/", "tok-1") == (
        "https://offers.example.com/offer.html?token=tok-1"
    )


def test_notification_for_offer() -> None:
    notification = OfferNotification.for_offer(_offer(), "https://offers.example.com")

    assert notification == NOTIFICATION


def test_notification_for_resolved_offer_is_refused() -> None:
    with pytest.raises(ValueError):
        OfferNotification.for_offer(
            _offer(status=OfferStatus.ACCEPTED, token=None), "https://offers.example.com"
        )


def test_render_offer_letter_contains_terms() -> None:
    letter = render_offer_letter(NOTIFICATION, "TYROADS", "Gwalior")

    assert letter.startswith("OFFER LETTER")
    assert "Company: TYROADS" in letter
    assert "Location: Gwalior" in letter
    assert "Candidate Name: Asha Rao" in letter
    assert "Position: Engineer" in letter
    assert "Salary: 50000 per month" in letter
    assert "- Confidentiality must be maintained" in letter


def test_build_offer_email_has_link_and_attachment() -> None:
    message = build_offer_email(NOTIFICATION, "offers@tyroads.example", "TYROADS", "Gwalior")

    assert message["To"] == "asha@x.com"
    assert message["From"] == "offers@tyroads.example"
    body = message.get_body(preferencelist=("plain",)).get_content()
    assert NOTIFICATION.offer_link in body

    attachments = list(message.iter_attachments())
    assert [a.get_filename() for a in attachments] == ["offer_letter.txt"]
    assert "Position: Engineer" in attachments[0].get_content()


@patch("services.notification_service.smtplib.SMTP")
def test_smtp_dispatcher_sends_message(mock_smtp: MagicMock) -> None:
    smtp = mock_smtp.return_value.__enter__.return_value
    dispatcher = SmtpOfferDispatcher(
        host="smtp.example.com",
        port=587,
        sender="offers@example.com",
        username="user",
        password="pass",
    )

    dispatcher.dispatch(NOTIFICATION)

    mock_smtp.assert_called_once_with("smtp.example.com", 587, timeout=30.0)
    smtp.starttls.assert_called_once()
    smtp.login.assert_called_once_with("user", "pass")
    smtp.send_message.assert_called_once()


@patch("services.notification_service.smtplib.SMTP")
def test_smtp_dispatcher_wraps_failures(mock_smtp: MagicMock) -> None:
    smtp = mock_smtp.return_value.__enter__.return_value
    smtp.send_message.side_effect = smtplib.SMTPRecipientsRefused({"asha@x.com": (550, b"no")})
    dispatcher = SmtpOfferDispatcher(host="smtp.example.com", port=25, sender="o@example.com", use_tls=False)

    with pytest.raises(NotificationError):
        dispatcher.dispatch(NOTIFICATION)

    smtp.starttls.assert_not_called()


def test_deliver_reports_failure_without_raising() -> None:
    dispatcher = MagicMock()
    dispatcher.dispatch.side_effect = NotificationError("smtp down")

    assert deliver_offer_notification(dispatcher, NOTIFICATION) is False


def test_deliver_reports_success() -> None:
    assert deliver_offer_notification(LoggingOfferDispatcher(), NOTIFICATION) is True


def test_build_offer_dispatcher_from_settings(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("SMTP_HOST", raising=False)
    assert isinstance(build_offer_dispatcher(load_settings()), LoggingOfferDispatcher)

    monkeypatch.setenv("SMTP_HOST", "smtp.example.com")
    assert isinstance(build_offer_dispatcher(load_settings()), SmtpOfferDispatcher)


@patch("services.notification_service.smtplib.SMTP")
def test_unsendable_header_is_reported_as_failed_delivery(mock_smtp: MagicMock) -> None:
    notification = OfferNotification(
        email="asha@x.com",
        candidate_name="Asha Rao",
        position="Engineer\nBcc: evil@x.com",
        salary=Decimal("50000"),
        offer_link="https://offers.example.com/offer.html?token=tok-1",
    )
    dispatcher = SmtpOfferDispatcher(host="smtp.example.com", port=587, sender="offers@example.com")

    with pytest.raises(NotificationError):
        dispatcher.dispatch(notification)
    assert deliver_offer_notification(dispatcher, notification) is False

    mock_smtp.assert_not_called()


def test_mask_offer_link() -> None:
    link = build_offer_link("https://offers.example.com", "6f1c2a7e-3d44-4b8f-9f0e-2b1c5d6e7f80")

    assert mask_offer_link(link) == "https://offers.example.com/offer.html?token=6f1c2a7e..."
    assert mask_offer_link("https://offers.example.com/") == "https://offers.example.com/"


def test_logging_dispatcher_never_logs_full_token(caplog: pytest.LogCaptureFixture) -> None:
    token = "6f1c2a7e-3d44-4b8f-9f0e-2b1c5d6e7f80"
    notification = OfferNotification.for_offer(_offer(token=token), "https://offers.example.com")

    with caplog.at_level(logging.INFO, logger="services.notification_service"):
        LoggingOfferDispatcher().dispatch(notification)

    assert "token=6f1c2a7e..." in caplog.text
    assert token not in caplog.text
