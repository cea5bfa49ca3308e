"""
API Request and Response Models.

Pydantic models for validating API requests and serializing responses.

Offer fields are accepted loosely here and validated by the lifecycle service,
so missing or malformed input is reported as a 400 with the service's message.
"""

from datetime import datetime
from decimal import Decimal
from typing import List, Optional, Union

from pydantic import BaseModel, Field


# ============================================================================
# HR Session Models
# ============================================================================

class LoginRequest(BaseModel):
    """HR credentials."""
    email: str
    password: str

    class Config:
        json_schema_extra = {
            "example": {
                "email": "hr@example.com",
                "password": "correct horse battery staple"
            }
        }


class LoginResponse(BaseModel):
    """Signed HR session token (also set as the `offer-session` cookie)."""
    session_token: str
    token_type: str = "bearer"
    expires_in: int = Field(..., description="Session lifetime in seconds")


# ============================================================================
# Offer Models (HR)
# ============================================================================

class CreateOfferRequest(BaseModel):
    """Request to create an offer."""
    candidate_name: Optional[str] = None
    email: Optional[str] = None
    position: Optional[str] = None
    salary: Union[str, int, float, None] = None

    class Config:
        json_schema_extra = {
            "example": {
                "candidate_name": "Asha Rao",
                "email": "asha@example.com",
                "position": "Engineer",
                "salary": "50000"
            }
        }


class CreateOfferResponse(BaseModel):
    """Response after an offer is created."""
    message: str
    offer_id: int
    token: str
    link: str

    class Config:
        json_schema_extra = {
            "example": {
                "message": "Offer created successfully",
                "offer_id": 42,
                "token": "6f1c2a7e-3d44-4b8f-9f0e-2b1c5d6e7f80",
                "link": "https://offers.example.com/offer.html?token=6f1c2a7e-3d44-4b8f-9f0e-2b1c5d6e7f80"
            }
        }


class OfferResponse(BaseModel):
    """Single offer in the HR roster. Tokens are never listed."""
    offer_id: int
    candidate_name: str
    email: str
    position: str
    salary: Decimal
    status: str  # PENDING, ACCEPTED, REJECTED
    created_at: datetime


class OfferListResponse(BaseModel):
    """HR roster, newest first."""
    offers: List[OfferResponse]
    total_count: int


class NotifyResponse(BaseModel):
    message: str
    offer_id: int


# ============================================================================
# Candidate Models
# ============================================================================

class OfferDetailsResponse(BaseModel):
    """Offer terms shown on the candidate decision page."""
    candidate_name: str
    position: str
    salary: Decimal
    status: str

    class Config:
        json_schema_extra = {
            "example": {
                "candidate_name": "Asha Rao",
                "position": "Engineer",
                "salary": "50000",
                "status": "PENDING"
            }
        }


class OfferActionRequest(BaseModel):
    """Candidate decision for the offer behind `token`."""
    token: Optional[str] = None
    status: Optional[str] = Field(None, description="ACCEPTED or REJECTED")

    class Config:
        json_schema_extra = {
            "example": {
                "token": "6f1c2a7e-3d44-4b8f-9f0e-2b1c5d6e7f80",
                "status": "ACCEPTED"
            }
        }


class OfferActionResponse(BaseModel):
    message: str
    status: str


# ============================================================================
# Error Models
# ============================================================================

class ErrorResponse(BaseModel):
    """Standard error response."""
    detail: str

    class Config:
        json_schema_extra = {
            "example": {
                "detail": "This offer link is no longer valid."
            }
        }
