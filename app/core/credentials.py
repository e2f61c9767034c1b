"""
Credential providers - where the gateway gets its API key from.

The key is process-wide: it is set once at startup (environment / .env)
or through a single interactive selection step before the first video
job. Instead of looking it up from a global at call time, the gateway and
the video orchestrator receive a CredentialProvider.

Example:
    provider = SettingsCredentialProvider()
    await provider.ensure_selected()
    key = provider.get_api_key()
"""

import logging
from abc import ABC, abstractmethod
from typing import Awaitable, Callable, Optional

from app.core.config import settings

logger = logging.getLogger("omni.core.credentials")

# Async callback that asks the host environment for a key.
# Returns the selected key, or None if the user dismissed the prompt.
KeySelector = Callable[[], Awaitable[Optional[str]]]


class CredentialProvider(ABC):
    """Source of the API key used for model calls."""

    @abstractmethod
    def get_api_key(self) -> Optional[str]:
        """Return the current key, or None when no key is available."""
        pass

    def has_selected_key(self) -> bool:
        return bool(self.get_api_key())

    async def ensure_selected(self) -> None:
        """
        Make sure a key is selected before a request that needs one.

        The default does nothing; providers backed by an interactive
        host override it.
        """
        return None


class SettingsCredentialProvider(CredentialProvider):
    """
    Key from settings, with an optional interactive fallback.

    Args:
        api_key: Explicit key (defaults to settings.GEMINI_API_KEY)
        selector: Async callback used when no key has been selected yet
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        selector: Optional[KeySelector] = None,
    ):
        self._api_key = api_key if api_key is not None else settings.GEMINI_API_KEY
        self._selector = selector

    def get_api_key(self) -> Optional[str]:
        return self._api_key or None

    def select_key(self, api_key: str) -> None:
        """Store a key chosen after startup."""
        self._api_key = api_key
        logger.info("API key selected")

    async def ensure_selected(self) -> None:
        if self.has_selected_key():
            return
        if self._selector is None:
            logger.warning("No API key selected and no interactive selector configured")
            return

        logger.info("No API key selected, opening key selection")
        selected = await self._selector()
        if selected:
            self.select_key(selected)


# ---------------------------------------------------------------------------
# SINGLETON INSTANCE
# ---------------------------------------------------------------------------
credential_provider = SettingsCredentialProvider()
