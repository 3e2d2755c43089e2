"""
Unit tests for translation gateways.
"""

import httpx
import pytest

from translation_sync.errors import TranslationGatewayError
from translation_sync.gateway import EchoGateway, GoogleTranslateGateway, parse_translation


def make_gateway(handler) -> GoogleTranslateGateway:
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return GoogleTranslateGateway(url="https://translate.test/translate_a/single", client=client)


class TestParseTranslation:
    """Test response parsing."""

    def test_single_segment(self):
        assert parse_translation([[["Hola", "Hello", None, None, 10]], None, "en"]) == "Hola"

    def test_multiple_segments_joined(self):
        payload = [[["Hola. ", "Hello. ", None], ["¿Cómo estás?", "How are you?", None]], None, "en"]

        assert parse_translation(payload) == "Hola. ¿Cómo estás?"

    @pytest.mark.parametrize("payload", [None, {}, [], [None], [[]], [[[None, "Save"]]]])
    def test_malformed(self, payload):
        with pytest.raises(TranslationGatewayError):
            parse_translation(payload)


class TestGoogleTranslateGateway:
    """Test HTTP interaction with a mocked transport."""

    @pytest.mark.asyncio
    async def test_request_parameters(self):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen.update(dict(request.url.params))
            seen["user_agent"] = request.headers.get("user-agent")
            return httpx.Response(200, json=[[["Guardar", "Save", None]], None, "en"])

        gateway = make_gateway(handler)
        try:
            result = await gateway.translate("Save", "en", "es")
        finally:
            await gateway._client.aclose()

        assert result == "Guardar"
        assert seen["client"] == "gtx"
        assert seen["sl"] == "en"
        assert seen["tl"] == "es"
        assert seen["dt"] == "t"
        assert seen["q"] == "Save"

    @pytest.mark.asyncio
    async def test_http_error_status(self):
        gateway = make_gateway(lambda request: httpx.Response(429, text="Too Many Requests"))

        with pytest.raises(TranslationGatewayError) as exc_info:
            await gateway.translate("Save", "en", "es")

        assert "429" in exc_info.value.message
        assert exc_info.value.context == {"source_lang": "en", "target_lang": "es"}
        await gateway._client.aclose()

    @pytest.mark.asyncio
    async def test_transport_error(self):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        gateway = make_gateway(handler)

        with pytest.raises(TranslationGatewayError):
            await gateway.translate("Save", "en", "es")
        await gateway._client.aclose()

    @pytest.mark.asyncio
    async def test_timeout(self):
        def handler(request):
            raise httpx.ReadTimeout("timed out", request=request)

        gateway = make_gateway(handler)

        with pytest.raises(TranslationGatewayError) as exc_info:
            await gateway.translate("Save", "en", "es")

        assert exc_info.value.message == "Translation request timeout"
        assert exc_info.value.is_retryable()
        await gateway._client.aclose()

    @pytest.mark.asyncio
    async def test_non_json_response(self):
        gateway = make_gateway(lambda request: httpx.Response(200, text="<html>captcha</html>"))

        with pytest.raises(TranslationGatewayError):
            await gateway.translate("Save", "en", "es")
        await gateway._client.aclose()

    @pytest.mark.asyncio
    async def test_injected_client_not_closed(self):
        client = httpx.AsyncClient(transport=httpx.MockTransport(lambda r: httpx.Response(200)))
        gateway = GoogleTranslateGateway(client=client)

        await gateway.aclose()

        assert not client.is_closed
        await client.aclose()

    @pytest.mark.asyncio
    async def test_owned_client_closed(self):
        gateway = GoogleTranslateGateway()

        await gateway.aclose()

        assert gateway._client.is_closed


@pytest.mark.asyncio
async def test_echo_gateway():
    assert await EchoGateway().translate("Save", "en", "es") == "Save"
