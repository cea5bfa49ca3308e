"""
Candidate API Endpoints.

Endpoints behind the candidate's single-use offer link: view the offer terms and
accept or reject the offer exactly once.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException

from api.dependencies import get_offer_service
from api.models import OfferActionRequest, OfferActionResponse, OfferDetailsResponse
from domain.errors import OfferLinkError, PersistenceError, ValidationError
from services.offer_lifecycle_service import OfferLifecycleService

logger = logging.getLogger(__name__)

router = APIRouter()

# Unknown, consumed and resolved tokens all read the same to the candidate.
INVALID_LINK_MESSAGE: str = "This offer link is no longer valid."


@router.get(
    "/offer-details",
    response_model=OfferDetailsResponse,
    summary="Offer Details",
    description="Show the offer terms behind a pending offer link."
)
def get_offer_details(
    token: Optional[str] = None,
    service: OfferLifecycleService = Depends(get_offer_service),
):
    """
    Get the offer terms for the decision page.

    **Example usage:**
    ```
    GET /api/v1/offer-details?token=6f1c2a7e-3d44-4b8f-9f0e-2b1c5d6e7f80
    ```
    """
    try:
        view = service.get_offer_by_token(token)
    except OfferLinkError:
        raise HTTPException(status_code=404, detail=INVALID_LINK_MESSAGE)
    except PersistenceError as e:
        logger.error(f"Offer lookup failed: {e}")
        raise HTTPException(status_code=503, detail="Service temporarily unavailable, please retry")

    return OfferDetailsResponse(
        candidate_name=view.candidate_name,
        position=view.position,
        salary=view.salary,
        status=view.status.value,
    )


@router.post(
    "/offer-action",
    response_model=OfferActionResponse,
    summary="Accept or Reject Offer",
    description="Apply the candidate's decision. Each link works exactly once."
)
def offer_action(
    request: OfferActionRequest,
    service: OfferLifecycleService = Depends(get_offer_service),
):
    """
    Accept or reject an offer.

    Concurrent or repeated submissions for the same link are safe: exactly one
    succeeds and every other one receives the invalid-link response.

    If this call times out, do not assume an outcome; re-check
    `GET /offer-details` (a 404 there means the decision was recorded).

    **Example request:**
    ```json
    {
      "token": "6f1c2a7e-3d44-4b8f-9f0e-2b1c5d6e7f80",
      "status": "ACCEPTED"
    }
    ```
    """
    try:
        result = service.resolve_offer(request.token, request.status)
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except OfferLinkError:
        raise HTTPException(status_code=404, detail=INVALID_LINK_MESSAGE)
    except PersistenceError as e:
        logger.error(f"Offer resolution failed: {e}")
        raise HTTPException(status_code=503, detail="Service temporarily unavailable, please retry")

    return OfferActionResponse(
        message=f"Offer {result.status.value}",
        status=result.status.value,
    )
