"""API key capability injected by the hosting environment."""

import abc
import logging

from ..config import StudioConfig

logger = logging.getLogger(__name__)


class CredentialProvider(abc.ABC):
    """Interface for checking and requesting the generation API key."""

    @abc.abstractmethod
    async def has_credential(self) -> bool:
        """Whether a key is already selected."""

    @abc.abstractmethod
    async def request_credential(self) -> bool:
        """Trigger key selection and report whether a key is now available."""

    @abc.abstractmethod
    def get_api_key(self) -> str | None:
        """The currently selected key, if any."""


class EnvironmentCredentialProvider(CredentialProvider):
    """Reads the key from the environment or `.env` via StudioConfig.

    `request_credential` re-reads the environment, so a key exported after
    startup is picked up without restarting the server.
    """

    def __init__(self, config: StudioConfig | None = None):
        self._api_key = config.gemini_api_key if config else None
        if config is None:
            self._reload()

    def _reload(self) -> None:
        self._api_key = StudioConfig().gemini_api_key

    async def has_credential(self) -> bool:
        return bool(self._api_key)

    async def request_credential(self) -> bool:
        self._reload()
        ready = await self.has_credential()
        if not ready:
            logger.warning("No API key found in GEMINI_API_KEY, GOOGLE_API_KEY or API_KEY")
        return ready

    def get_api_key(self) -> str | None:
        return self._api_key


class StaticCredentialProvider(CredentialProvider):
    """Holds a fixed key supplied by the embedding application."""

    def __init__(self, api_key: str | None):
        self._api_key = api_key

    async def has_credential(self) -> bool:
        return bool(self._api_key)

    async def request_credential(self) -> bool:
        return await self.has_credential()

    def get_api_key(self) -> str | None:
        return self._api_key
