"""
AI Module - Generation orchestration core.

Everything that talks to the generative model service lives here.
The services layer (app/services) builds on it: one orchestrator per
studio, all sharing the same gateway.

Architecture Overview:
=====================

┌──────────┐ ┌──────────┐ ┌──────────┐ ┌────────────────┐
│   Chat   │ │  Image   │ │  Video   │ │ Device Command │
│          │ │          │ │  (poll)  │ │  Interpreter   │
└────┬─────┘ └────┬─────┘ └────┬─────┘ └───────┬────────┘
     │            │            │               │
     └────────────┴─────┬──────┴───────────────┘
                        ▼
              ┌───────────────────┐
              │   ModelGateway    │  send() / submit_video_job()
              │  (GeminiGateway)  │  / poll_video_job()
              └───────────────────┘

Module Structure:
================
- providers/: gateway contract and the Gemini implementation
- intent/: device intents and device name resolution
- prompts/: persona and function-calling declarations
- monitoring/: structured logging and metrics
- errors.py: error taxonomy shared by every orchestrator
"""

__version__ = "0.1.0"

from app.ai.errors import (
    DeviceNotFound,
    GenerationFailure,
    MissingResultUri,
    NoImageReturned,
    StudioError,
    VideoJobCancelled,
    VideoJobTimeout,
)

__all__ = [
    "DeviceNotFound",
    "GenerationFailure",
    "MissingResultUri",
    "NoImageReturned",
    "StudioError",
    "VideoJobCancelled",
    "VideoJobTimeout",
]
