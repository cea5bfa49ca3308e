"""
Offer Portal API - Main Application.

FastAPI application with CORS enabled for the HR dashboard and candidate pages.
"""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from api import __version__
from config import get_settings, setup_logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(application: FastAPI) -> AsyncIterator[None]:
    """Application lifespan: configure logging on startup."""
    setup_logging()
    logger.info(f"Offer Portal API starting (store: {get_settings().offer_store})")
    yield
    logger.info("Offer Portal API shutting down")


# Create FastAPI application
app = FastAPI(
    title="Offer Portal API",
    description="REST API for issuing job offers and recording candidate decisions",
    version=__version__,
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)

# Configure CORS from ALLOWED_ORIGINS
_allowed_origins = get_settings().allowed_origin_list
app.add_middleware(
    CORSMiddleware,
    allow_origins=_allowed_origins,
    # Session cookies cannot be combined with a wildcard origin
    allow_credentials=_allowed_origins != ["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/health", tags=["Health"])
def health_check():
    """
    Health check endpoint.

    Returns the API status and version.
    """
    return {
        "status": "healthy",
        "version": __version__,
        "service": "offer-portal-api"
    }


@app.get("/", tags=["Root"])
def root():
    """
    Root endpoint with API information.
    """
    return {
        "message": "Offer Portal API",
        "version": __version__,
        "docs": "/docs",
        "health": "/health"
    }


# Import and include routers
from api.routers import hr, offers

app.include_router(hr.router, prefix="/api/v1", tags=["HR"])
app.include_router(offers.router, prefix="/api/v1", tags=["Candidate"])
