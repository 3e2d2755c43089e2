"""Translation gateway interface."""

from abc import ABC, abstractmethod


class TranslationGateway(ABC):
    """Translates one string between two languages.

    Implementations raise :class:`~translation_sync.errors.TranslationGatewayError`
    (or any other exception) on failure; the orchestrator falls back to the
    source text per key.
    """

    @abstractmethod
    async def translate(self, text: str, source_lang: str, target_lang: str) -> str:
        """Return ``text`` translated from ``source_lang`` to ``target_lang``."""
        pass

    async def aclose(self) -> None:
        """Release network resources."""
        pass


class EchoGateway(TranslationGateway):
    """Returns text unchanged; used for dry runs."""

    async def translate(self, text: str, source_lang: str, target_lang: str) -> str:
        return text
