"""
Main application entry point - FastAPI app instance and configuration.
This is where the ASGI application is created and configured.
Run with: uvicorn app.main:app --reload
"""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.core.config import settings
from app.ai.monitoring import ai_metrics
from app.routers import chat, images, videos, devices

# ---------------------------------------------------------------------------
# CREATE FASTAPI APPLICATION
# ---------------------------------------------------------------------------
app = FastAPI(
    title=settings.APP_NAME,
    debug=settings.DEBUG,
    docs_url="/docs",
    redoc_url="/redoc",
)

# ---------------------------------------------------------------------------
# CORS MIDDLEWARE
# ---------------------------------------------------------------------------
# The studio front end is served from a different origin than the API
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# ---------------------------------------------------------------------------
# REGISTER ROUTERS
# ---------------------------------------------------------------------------
# chat.router: /chat assistant replies
# images.router: /images/create, /images/edit
# videos.router: /videos (Veo jobs, polled to completion)
# devices.router: /devices, /devices/command, /devices/reset
app.include_router(chat.router)
app.include_router(images.router)
app.include_router(videos.router)
app.include_router(devices.router)


# ---------------------------------------------------------------------------
# HEALTH CHECK ENDPOINT
# ---------------------------------------------------------------------------
@app.get("/health", tags=["health"])
def health_check():
    """
    Simple health check endpoint.

    Does NOT call the model service.

    Returns:
        {"status": "ok"}
    """
    return {"status": "ok"}


@app.get("/stats", tags=["health"])
def model_stats():
    """Aggregated model-call metrics since startup."""
    return ai_metrics.get_stats().to_dict()
