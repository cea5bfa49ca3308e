"""
HR API Endpoints.

Endpoints for HR login, offer creation, the offer roster and re-sending offer
links. Everything except login/logout requires an HR session.
"""

import logging

from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException, Response

from api.dependencies import (
    SESSION_COOKIE_NAME,
    get_access_gateway,
    get_host_url,
    get_offer_dispatcher,
    get_offer_service,
    require_hr_identity,
)
from api.models import (
    CreateOfferRequest,
    CreateOfferResponse,
    LoginRequest,
    LoginResponse,
    NotifyResponse,
    OfferListResponse,
    OfferResponse,
)
from config import get_settings
from domain.errors import (
    AccessDenied,
    AlreadyProcessedOrInvalid,
    NotFound,
    PersistenceError,
    ValidationError,
)
from domain.hr import HRIdentity
from services.access_gateway import AccessGateway
from services.notification_service import (
    OfferDispatcher,
    OfferNotification,
    deliver_offer_notification,
)
from services.offer_lifecycle_service import OfferLifecycleService

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post(
    "/hr/login",
    response_model=LoginResponse,
    summary="HR Login",
    description="Exchange HR credentials for a signed session token."
)
def hr_login(
    request: LoginRequest,
    response: Response,
    gateway: AccessGateway = Depends(get_access_gateway),
):
    """
    Log an HR user in.

    The session token is returned in the body (use it as `Authorization: Bearer ...`)
    and also set as the `offer-session` cookie.
    """
    try:
        session_token = gateway.login(request.email, request.password)
    except AccessDenied as e:
        raise HTTPException(status_code=401, detail=str(e))

    settings = get_settings()
    max_age = settings.session_ttl_minutes * 60
    response.set_cookie(
        key=SESSION_COOKIE_NAME,
        value=session_token,
        max_age=max_age,
        httponly=True,
        samesite="lax",
        secure=settings.cookie_secure,
    )
    return LoginResponse(session_token=session_token, expires_in=max_age)


@router.post("/hr/logout", summary="HR Logout")
def hr_logout(response: Response):
    """Clear the HR session cookie."""
    response.delete_cookie(key=SESSION_COOKIE_NAME)
    return {"message": "Logged out"}


@router.post(
    "/offers",
    response_model=CreateOfferResponse,
    summary="Create Offer",
    description="Create a PENDING offer and send the candidate their single-use link."
)
def create_offer(
    request: CreateOfferRequest,
    background_tasks: BackgroundTasks,
    identity: HRIdentity = Depends(require_hr_identity),
    service: OfferLifecycleService = Depends(get_offer_service),
    dispatcher: OfferDispatcher = Depends(get_offer_dispatcher),
    host_url: str = Depends(get_host_url),
):
    """
    Create an offer.

    **Process:**
    1. Validates the candidate name, email, position and salary
    2. Persists the offer as PENDING with a fresh single-use token
    3. Schedules delivery of the offer link after the response is sent

    A delivery failure never removes the offer; use
    `POST /offers/{offer_id}/notify` to send the link again.

    **Example request:**
    ```json
    {
      "candidate_name": "Asha Rao",
      "email": "asha@example.com",
      "position": "Engineer",
      "salary": "50000"
    }
    ```
    """
    try:
        created = service.create_offer(
            identity,
            candidate_name=request.candidate_name,
            email=request.email,
            position=request.position,
            salary=request.salary,
        )
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except PersistenceError as e:
        logger.error(f"Offer creation failed: {e}")
        raise HTTPException(status_code=503, detail="Offer store unavailable, please retry")

    notification = OfferNotification.for_offer(created.offer, host_url)
    background_tasks.add_task(deliver_offer_notification, dispatcher, notification)

    return CreateOfferResponse(
        message="Offer created successfully",
        offer_id=created.offer_id,
        token=created.token,
        link=notification.offer_link,
    )


@router.get(
    "/offers",
    response_model=OfferListResponse,
    summary="Offer Roster",
    description="List every offer with its current status, newest first."
)
def list_offers(
    identity: HRIdentity = Depends(require_hr_identity),
    service: OfferLifecycleService = Depends(get_offer_service),
):
    try:
        offers = service.list_offers(identity)
    except PersistenceError as e:
        logger.error(f"Offer roster failed: {e}")
        raise HTTPException(status_code=503, detail="Offer store unavailable, please retry")

    items = [
        OfferResponse(
            offer_id=offer.offer_id,
            candidate_name=offer.candidate_name,
            email=offer.email,
            position=offer.position,
            salary=offer.salary,
            status=offer.status.value,
            created_at=offer.created_at,
        )
        for offer in offers
    ]
    return OfferListResponse(offers=items, total_count=len(items))


@router.post(
    "/offers/{offer_id}/notify",
    response_model=NotifyResponse,
    summary="Re-send Offer Link",
    description="Send the offer link again for an offer that is still PENDING."
)
def notify_offer(
    offer_id: int,
    background_tasks: BackgroundTasks,
    identity: HRIdentity = Depends(require_hr_identity),
    service: OfferLifecycleService = Depends(get_offer_service),
    dispatcher: OfferDispatcher = Depends(get_offer_dispatcher),
    host_url: str = Depends(get_host_url),
):
    try:
        offer = service.reissue_notification(identity, offer_id)
    except NotFound as e:
        raise HTTPException(status_code=404, detail=str(e))
    except AlreadyProcessedOrInvalid as e:
        raise HTTPException(status_code=409, detail=str(e))
    except PersistenceError as e:
        logger.error(f"Offer lookup failed: {e}")
        raise HTTPException(status_code=503, detail="Offer store unavailable, please retry")

    background_tasks.add_task(
        deliver_offer_notification,
        dispatcher,
        OfferNotification.for_offer(offer, host_url),
    )
    return NotifyResponse(message="Offer notification scheduled", offer_id=offer.offer_id)
