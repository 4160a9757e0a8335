"""Main FastAPI application for the guided mediation API."""
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse

from mediator_api.config import LOG_LEVEL
from mediator_api.db.init import init_db
from mediator_api.errors import MediationError, MediationServiceError, UnauthorizedError
from mediator_api.mediation.cohere_client import CohereMediationClient
from mediator_api.middleware.cors import add_cors_middleware
from mediator_api.realtime.broadcaster import SessionBroadcaster
from mediator_api.routers import invites_router, partnerships_router, sessions_router, settings_router
from mediator_api.utils.metrics import metrics_collector

logging.basicConfig(
    level=getattr(logging, LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

VERSION = "1.0.0"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Create tables and the external clients once per process."""
    try:
        init_db()
        logger.info("[SUCCESS] Database tables initialized successfully.")
    except Exception as e:
        logger.warning(f"[WARNING] Database initialization failed: {str(e)}")
        logger.warning("[WARNING] Server will continue but database operations may fail.")

    app.state.mediation_client = CohereMediationClient()
    app.state.broadcaster = SessionBroadcaster()
    logger.info("[SUCCESS] Application startup complete.")
    yield


# Create FastAPI application
app = FastAPI(
    title="Guided Mediation API",
    description="REST API for structured, stage-based mediation conversations between two people",
    version=VERSION,
    lifespan=lifespan,
)

# Add CORS middleware
add_cors_middleware(app)


@app.exception_handler(MediationError)
async def mediation_error_handler(request: Request, exc: MediationError):
    if isinstance(exc, MediationServiceError):
        # Collaborator detail stays in the server log
        logger.error(f"Mediation failure on {request.url.path}: {exc.message}")
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": exc.code, "detail": "Failed to generate a response. Please try again.", "details": {}},
        )

    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.code, "detail": exc.message, "details": jsonable_encoder(exc.details)},
        headers={"WWW-Authenticate": "Bearer"} if isinstance(exc, UnauthorizedError) else None,
    )


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={
            "error": "VALIDATION_ERROR",
            "detail": "Invalid request",
            "details": {"errors": jsonable_encoder(exc.errors())},
        },
    )


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy", "version": VERSION}


@app.get("/metrics")
async def metrics():
    """In-process counters since startup."""
    return metrics_collector.get_metrics()


@app.get("/")
async def root():
    """Root endpoint - API welcome message."""
    return {
        "message": "Welcome to the Guided Mediation API",
        "title": "Guided Mediation API",
        "version": VERSION,
        "docs": "/docs",
        "health": "/health",
    }


# Invites first: /sessions/join must match before /sessions/{session_id}
app.include_router(invites_router, prefix="/api")
app.include_router(sessions_router, prefix="/api")
app.include_router(partnerships_router, prefix="/api")
app.include_router(settings_router, prefix="/api")


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "mediator_api.main:app",
        host="0.0.0.0",
        port=8000,
        reload=True,
    )
