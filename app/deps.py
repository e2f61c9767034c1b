"""
Dependencies module - reusable FastAPI dependencies for route handlers.

Every orchestrator is built on top of the shared gateway singleton.
Tests replace any of them with app.dependency_overrides.
"""

from fastapi import Depends

from app.core.credentials import CredentialProvider, credential_provider
from app.ai.providers.base import ModelGateway
from app.ai.providers.gemini import gemini_gateway
from app.services.chat_service import ChatOrchestrator
from app.services.device_registry import DeviceRegistry, device_registry
from app.services.device_service import DeviceCommandInterpreter
from app.services.image_service import ImageOrchestrator
from app.services.video_service import VideoJobOrchestrator


def get_gateway() -> ModelGateway:
    return gemini_gateway


def get_credentials() -> CredentialProvider:
    return credential_provider


def get_device_registry() -> DeviceRegistry:
    return device_registry


def get_chat_orchestrator(gateway: ModelGateway = Depends(get_gateway)) -> ChatOrchestrator:
    return ChatOrchestrator(gateway)


def get_image_orchestrator(gateway: ModelGateway = Depends(get_gateway)) -> ImageOrchestrator:
    return ImageOrchestrator(gateway)


def get_video_orchestrator(
    gateway: ModelGateway = Depends(get_gateway),
    credentials: CredentialProvider = Depends(get_credentials),
) -> VideoJobOrchestrator:
    return VideoJobOrchestrator(gateway, credentials)


def get_device_interpreter(
    gateway: ModelGateway = Depends(get_gateway),
) -> DeviceCommandInterpreter:
    return DeviceCommandInterpreter(gateway)
