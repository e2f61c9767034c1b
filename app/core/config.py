"""
Configuration module - centralized settings for the entire application.
Uses pydantic-settings to load values from environment variables and .env file.
"""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Pydantic-settings automatically:
    1. Reads from environment variables (highest priority)
    2. Falls back to .env file values
    3. Uses default values if neither exists

    To override in production, set environment variables:
        export GEMINI_API_KEY=your-key
        export VIDEO_POLL_INTERVAL_SECONDS=10
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ---------------------------------------------------------------------------
    # APPLICATION SETTINGS
    # ---------------------------------------------------------------------------
    APP_NAME: str = "AI for Future Studio"
    DEBUG: bool = False

    # ---------------------------------------------------------------------------
    # CREDENTIALS
    # ---------------------------------------------------------------------------
    # GEMINI_API_KEY: key for every model call (chat, image, video, devices)
    # - Video generation (Veo) needs a paid key; the host may select one
    #   interactively before the first job (see app/core/credentials.py)
    GEMINI_API_KEY: str = ""

    # ---------------------------------------------------------------------------
    # MODEL SELECTION (one model per request class)
    # ---------------------------------------------------------------------------
    CHAT_MODEL_FAST: str = "gemini-2.5-flash"
    CHAT_MODEL_DEEP: str = "gemini-3-pro-preview"
    IMAGE_CREATE_MODEL: str = "gemini-3-pro-image-preview"
    IMAGE_EDIT_MODEL: str = "gemini-2.5-flash-image"
    VIDEO_MODEL: str = "veo-3.1-fast-generate-preview"
    DEVICE_MODEL: str = "gemini-2.5-flash"

    # Thinking budget (tokens) attached to "deep" chat requests
    DEEP_THINKING_BUDGET: int = 2048

    # Output size for generated images
    IMAGE_SIZE: str = "1K"

    # ---------------------------------------------------------------------------
    # VIDEO JOB POLLING
    # ---------------------------------------------------------------------------
    # Seconds between status checks of a running video job
    VIDEO_POLL_INTERVAL_SECONDS: float = 5.0

    # Upper bound on status checks (120 x 5s = 10 minutes)
    VIDEO_MAX_POLLS: int = 120

    # Seconds between checks for a client that dropped a /videos request
    VIDEO_DISCONNECT_CHECK_SECONDS: float = 0.5

    # AI Request timeout in seconds
    AI_REQUEST_TIMEOUT: int = 60


# ---------------------------------------------------------------------------
# GLOBAL SETTINGS INSTANCE
# ---------------------------------------------------------------------------
# Usage: from app.core.config import settings
settings = Settings()
