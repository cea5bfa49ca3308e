"""
FastAPI dependency providers.

Wires the configured offer store, lifecycle service, access gateway and
notification dispatcher. Everything is built once per process and injected into
the routers; tests replace these with `app.dependency_overrides`.
"""

from __future__ import annotations

from datetime import timedelta
from functools import lru_cache
from typing import Optional

from fastapi import Cookie, Depends, Header, HTTPException

from config import get_settings
from domain.errors import AccessDenied
from domain.hr import HRIdentity
from repositories.offer_repository import OfferRepository, build_offer_repository
from services.access_gateway import AccessGateway
from services.notification_service import OfferDispatcher, build_offer_dispatcher
from services.offer_lifecycle_service import OfferLifecycleService

SESSION_COOKIE_NAME: str = "offer-session"


@lru_cache(maxsize=1)
def get_offer_repository() -> OfferRepository:
    return build_offer_repository(get_settings())


def get_offer_service(
    repository: OfferRepository = Depends(get_offer_repository),
) -> OfferLifecycleService:
    return OfferLifecycleService(repository)


@lru_cache(maxsize=1)
def get_access_gateway() -> AccessGateway:
    settings = get_settings()
    return AccessGateway(
        secret=settings.session_secret,
        hr_email=settings.hr_email,
        hr_password=settings.hr_password,
        session_ttl=timedelta(minutes=settings.session_ttl_minutes),
    )


@lru_cache(maxsize=1)
def get_offer_dispatcher() -> OfferDispatcher:
    return build_offer_dispatcher(get_settings())


def get_host_url() -> str:
    return get_settings().host_url


def require_hr_identity(
    authorization: Optional[str] = Header(default=None),
    session_cookie: Optional[str] = Cookie(default=None, alias=SESSION_COOKIE_NAME),
    gateway: AccessGateway = Depends(get_access_gateway),
) -> HRIdentity:
    """
    Resolve the calling HR identity.

    Accepts `Authorization: Bearer <session token>` or the session cookie set at
    login. Raises 401 when neither verifies.
    """

    session_token: Optional[str] = None
    if authorization:
        scheme, _, credentials = authorization.partition(" ")
        if scheme.lower() == "bearer" and credentials.strip():
            session_token = credentials.strip()
    if session_token is None:
        session_token = session_cookie

    try:
        return gateway.verify(session_token)
    except AccessDenied as e:
        raise HTTPException(
            status_code=401,
            detail=str(e),
            headers={"WWW-Authenticate": "Bearer"},
        )


__all__ = [
    "SESSION_COOKIE_NAME",
    "get_offer_repository",
    "get_offer_service",
    "get_access_gateway",
    "get_offer_dispatcher",
    "get_host_url",
    "require_hr_identity",
]
