"""CORS configuration for the web client + FastAPI integration."""
import logging

from fastapi.middleware.cors import CORSMiddleware

from mediator_api.config import ENVIRONMENT, FRONTEND_URL

logger = logging.getLogger(__name__)

# Base allowed origins for development
ALLOWED_ORIGINS = [
    "http://localhost:3000",
    "http://127.0.0.1:3000",
]

# Add production frontend URL if provided
if FRONTEND_URL and FRONTEND_URL not in ALLOWED_ORIGINS:
    ALLOWED_ORIGINS.append(FRONTEND_URL)


def add_cors_middleware(app):
    """Add CORS middleware to the FastAPI application."""
    if ENVIRONMENT == "production":
        # Production only trusts the configured frontend
        origins = [FRONTEND_URL] if FRONTEND_URL else []
        logger.info(f"[PROD] Using production CORS with origins: {origins}")
    else:
        origins = ALLOWED_ORIGINS
        logger.info(f"[DEV] Using development CORS with origins: {origins}")

    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
