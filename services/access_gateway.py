"""
Access gateway for HR actors.

Issues and verifies signed HR session tokens. A session token has the form

    <base64url(json payload)>.<hex HMAC-SHA256 of the encoded payload>

where the payload carries the HR email and an expiry (unix seconds). Nothing is
kept server-side: a token is valid as long as its signature verifies and it has
not expired.

Security:
- Credentials and signatures are compared in constant time (hmac.compare_digest)
- Failed logins and rejected tokens are logged without secrets
"""

from __future__ import annotations

import base64
import binascii
import hashlib
import hmac
import json
import logging
from datetime import datetime, timedelta, timezone
from typing import Callable, Optional

from domain.errors import AccessDenied
from domain.hr import HRIdentity
from domain.time import utc_now

logger = logging.getLogger(__name__)


def _b64encode(raw: bytes) -> str:
    return base64.urlsafe_b64encode(raw).rstrip(b"=").decode("ascii")


def _b64decode(text: str) -> bytes:
    padding = "=" * (-len(text) % 4)
    return base64.urlsafe_b64decode(text + padding)


class AccessGateway:
    def __init__(
        self,
        secret: str,
        hr_email: Optional[str],
        hr_password: Optional[str],
        session_ttl: timedelta = timedelta(hours=1),
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        if not secret:
            raise ValueError("secret is required")
        self._secret = secret.encode("utf-8")
        self._hr_email = (hr_email or "").strip().lower()
        self._hr_password = hr_password or ""
        self._session_ttl = session_ttl
        self._clock = clock

    def _sign(self, payload: str) -> str:
        return hmac.new(self._secret, payload.encode("ascii"), hashlib.sha256).hexdigest()

    def login(self, email: Optional[str], password: Optional[str]) -> str:
        """
        Verify HR credentials and return a signed session token.

        Raises:
            AccessDenied: when no HR account is configured or credentials do not match
        """

        if not self._hr_email or not self._hr_password:
            logger.error("HR login attempted but HR_EMAIL/HR_PASSWORD are not configured")
            raise AccessDenied("HR login is not configured")

        given_email = (email or "").strip().lower()
        email_ok = hmac.compare_digest(given_email.encode("utf-8"), self._hr_email.encode("utf-8"))
        password_ok = hmac.compare_digest(
            (password or "").encode("utf-8"), self._hr_password.encode("utf-8")
        )
        if not (email_ok and password_ok):
            logger.warning("HR login failed", extra={"email": given_email})
            raise AccessDenied("Invalid credentials")

        expires_at = self._clock() + self._session_ttl
        body = json.dumps(
            {"email": self._hr_email, "exp": int(expires_at.timestamp())},
            separators=(",", ":"),
            sort_keys=True,
        )
        payload = _b64encode(body.encode("utf-8"))

        logger.info("HR login succeeded", extra={"email": self._hr_email})
        return f"{payload}.{self._sign(payload)}"

    def verify(self, session_token: Optional[str]) -> HRIdentity:
        """
        Verify a session token and return the HR identity it carries.

        Raises:
            AccessDenied: when the token is missing, malformed, tampered with or expired
        """

        if not session_token:
            raise AccessDenied("HR session required")

        payload, sep, signature = session_token.partition(".")
        if not sep or not payload or not signature:
            raise AccessDenied("Malformed HR session")

        if not hmac.compare_digest(self._sign(payload), signature):
            logger.warning("Rejected HR session with invalid signature")
            raise AccessDenied("Invalid HR session")

        try:
            data = json.loads(_b64decode(payload))
            email = str(data["email"])
            expires_at = datetime.fromtimestamp(int(data["exp"]), tz=timezone.utc)
        except (binascii.Error, UnicodeDecodeError, ValueError, KeyError, TypeError):
            raise AccessDenied("Malformed HR session") from None

        identity = HRIdentity(email=email, expires_at=expires_at)
        if identity.is_expired(self._clock()):
            raise AccessDenied("HR session expired")
        return identity


__all__ = ["AccessGateway"]
