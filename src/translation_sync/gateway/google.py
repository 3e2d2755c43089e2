"""Google Translate gateway using the public ``translate_a/single`` endpoint."""

from typing import Any, Optional

import httpx
import structlog

from ..errors import TranslationGatewayError
from .base import TranslationGateway

logger = structlog.get_logger(__name__)

DEFAULT_URL = "https://translate.googleapis.com/translate_a/single"
DEFAULT_TIMEOUT = 5.0


def parse_translation(payload: Any) -> str:
    """Join the translated sentence segments of a ``dt=t`` response.

    The response looks like ``[[["Hola", "Hello", ...], ...], null, "en", ...]``.
    """
    try:
        segments = payload[0]
        text = "".join(segment[0] for segment in segments if segment and isinstance(segment[0], str))
    except (TypeError, IndexError, KeyError) as e:
        raise TranslationGatewayError("Failed to parse translation response", previous_error=e) from e

    if not text:
        raise TranslationGatewayError("Empty translation response")
    return text


class GoogleTranslateGateway(TranslationGateway):
    """Unofficial Google Translate client.

    Args:
        url: Endpoint URL
        timeout: Per-request timeout in seconds
        client: Pre-built ``httpx.AsyncClient`` (not closed by :meth:`aclose`)
    """

    def __init__(
        self,
        url: str = DEFAULT_URL,
        timeout: float = DEFAULT_TIMEOUT,
        client: Optional[httpx.AsyncClient] = None,
    ):
        self.url = url
        self.timeout = timeout
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(
            timeout=timeout,
            headers={"User-Agent": "Mozilla/5.0"},
        )

    async def translate(self, text: str, source_lang: str, target_lang: str) -> str:
        params = {
            "client": "gtx",
            "sl": source_lang,
            "tl": target_lang,
            "dt": "t",
            "q": text,
        }

        try:
            response = await self._client.get(self.url, params=params, timeout=self.timeout)
            response.raise_for_status()
            payload = response.json()
        except httpx.TimeoutException as e:
            raise TranslationGatewayError(
                "Translation request timeout",
                source_lang=source_lang,
                target_lang=target_lang,
                previous_error=e,
            ) from e
        except httpx.HTTPStatusError as e:
            raise TranslationGatewayError(
                f"Translation request failed with HTTP {e.response.status_code}",
                source_lang=source_lang,
                target_lang=target_lang,
                previous_error=e,
            ) from e
        except httpx.HTTPError as e:
            raise TranslationGatewayError(
                f"Translation request failed: {e}",
                source_lang=source_lang,
                target_lang=target_lang,
                previous_error=e,
            ) from e
        except ValueError as e:
            raise TranslationGatewayError(
                "Translation response is not JSON",
                source_lang=source_lang,
                target_lang=target_lang,
                previous_error=e,
            ) from e

        return parse_translation(payload)

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()
