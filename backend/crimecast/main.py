"""FastAPI application for the crime forecast dashboard backend."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from crimecast import __version__
from crimecast.config import get_settings
from crimecast.dependencies import get_incident_store
from crimecast.exceptions import CrimeCastError
from crimecast.limiter import limiter
from crimecast.routers import (
    alerts_router,
    chat_router,
    forecast_router,
    health_router,
    incidents_router,
    patrol_router,
)

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

settings = get_settings()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan management."""
    logger.info("Starting CrimeCast backend...")

    store = get_incident_store()
    logger.info(f"Incident store ready: {len(store)} records")

    if not settings.gemini_api_key:
        logger.warning("GEMINI_API_KEY is not set; forecast, chat and alert endpoints will fail")

    yield

    logger.info("CrimeCast backend shut down")


# Create FastAPI app
app = FastAPI(
    title="CrimeCast API",
    description="Crime forecasting, patrol routing and incident Q&A powered by Gemini",
    version=__version__,
    lifespan=lifespan,
)

# Add rate limiter
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(CrimeCastError)
async def crimecast_exception_handler(request: Request, exc: CrimeCastError):
    """Report application errors (e.g. missing API key) as a JSON error."""
    logger.error(f"{type(exc).__name__} on {request.url.path}: {exc}")
    return JSONResponse(
        status_code=500,
        content={"error": str(exc)},
    )


# Global exception handler
@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Handle unhandled exceptions."""
    logger.error(f"Unhandled exception: {exc}", exc_info=True)
    return JSONResponse(
        status_code=500,
        content={"error": "Internal server error"},
    )


# Include routers
app.include_router(health_router)
app.include_router(forecast_router)
app.include_router(patrol_router)
app.include_router(chat_router)
app.include_router(alerts_router)
app.include_router(incidents_router)


@app.get("/")
async def root():
    """Root endpoint with API info."""
    return {
        "name": "CrimeCast API",
        "version": __version__,
        "docs": "/docs",
        "health": "/health",
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "crimecast.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.debug,
    )
