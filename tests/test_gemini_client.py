"""Tests for the Gemini request wrapper."""

import base64
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from lumiere.config import GenerationConfig
from lumiere.exceptions import CredentialError, NoImageReturnedError
from lumiere.models import POSES, FashionStyle
from lumiere.services import GeminiImageClient, StaticCredentialProvider
from lumiere.services.gemini_client import (
    extract_image_from_response,
    normalize_inline_data,
    split_data_url,
)


def image_response(data):
    """Response shaped like the SDK's: candidates[0].content.parts."""
    parts = [
        SimpleNamespace(text="Here is your image", inline_data=None),
        SimpleNamespace(text=None, inline_data=SimpleNamespace(mime_type="image/png", data=data)),
    ]
    return SimpleNamespace(candidates=[SimpleNamespace(content=SimpleNamespace(parts=parts))])


def text_only_response():
    parts = [SimpleNamespace(text="I can't do that", inline_data=None)]
    return SimpleNamespace(candidates=[SimpleNamespace(content=SimpleNamespace(parts=parts))])


class TestDataUrlHandling:
    """Tests for payload prefix stripping."""

    def test_split_data_url_strips_prefix(self):
        mime, encoded = split_data_url("data:image/png;base64,QUJD")
        assert mime == "image/png"
        assert encoded == "QUJD"

    def test_split_raw_base64_passes_through(self):
        mime, encoded = split_data_url("QUJD")
        assert mime == "image/jpeg"
        assert encoded == "QUJD"

    def test_split_non_image_mime_uses_default(self):
        mime, _ = split_data_url("data:application/octet-stream;base64,QUJD", "image/jpeg")
        assert mime == "image/jpeg"

    def test_normalize_inline_data(self):
        assert normalize_inline_data(b"abc") == b"abc"
        assert normalize_inline_data(base64.b64encode(b"abc").decode()) == b"abc"
        with pytest.raises(TypeError):
            normalize_inline_data(123)


class TestResponseParsing:
    """Tests for pulling the image out of a response."""

    def test_first_inline_image_returned(self):
        assert extract_image_from_response(image_response(b"img")) == b"img"

    def test_text_only_response_raises(self):
        with pytest.raises(NoImageReturnedError):
            extract_image_from_response(text_only_response())

    def test_response_parts_shortcut(self):
        inline = SimpleNamespace(mime_type="image/png", data=b"from-parts")
        response = SimpleNamespace(
            parts=[SimpleNamespace(text=None, inline_data=inline)],
            candidates=[],
        )

        assert extract_image_from_response(response) == b"from-parts"

    def test_falls_back_to_candidates_when_parts_empty(self):
        response = image_response(b"from-candidate")
        response.parts = None

        assert extract_image_from_response(response) == b"from-candidate"

    def test_empty_inline_payload_is_skipped(self):
        parts = [
            SimpleNamespace(text=None, inline_data=SimpleNamespace(mime_type="image/png", data=b"")),
            SimpleNamespace(text=None, inline_data=SimpleNamespace(mime_type="image/png", data=b"real")),
        ]
        response = SimpleNamespace(candidates=[SimpleNamespace(content=SimpleNamespace(parts=parts))])

        assert extract_image_from_response(response) == b"real"

    def test_only_empty_inline_payload_raises(self):
        parts = [SimpleNamespace(text=None, inline_data=SimpleNamespace(mime_type="image/png", data=b""))]
        response = SimpleNamespace(candidates=[SimpleNamespace(content=SimpleNamespace(parts=parts))])

        with pytest.raises(NoImageReturnedError):
            extract_image_from_response(response)

    def test_no_candidates_raises(self):
        with pytest.raises(NoImageReturnedError):
            extract_image_from_response(SimpleNamespace(candidates=None))


class TestRequestBuilding:
    """Tests for request contents and config."""

    @pytest.fixture
    def client(self):
        return GeminiImageClient(GenerationConfig(), StaticCredentialProvider("test-key"))

    def test_contents_order(self, client, png_data_url, jpeg_bytes, png_bytes):
        raw_jpeg = base64.b64encode(jpeg_bytes).decode()

        parts = client.build_contents(png_data_url, [raw_jpeg, png_data_url], FashionStyle.LUXURY, POSES[0])

        assert len(parts) == 4
        assert parts[0].inline_data.data == png_bytes
        assert parts[0].inline_data.mime_type == "image/png"
        assert parts[1].inline_data.data == jpeg_bytes
        assert parts[1].inline_data.mime_type == "image/jpeg"
        assert parts[2].inline_data.data == png_bytes
        assert FashionStyle.LUXURY.value in parts[3].text
        assert POSES[0] in parts[3].text

    def test_config_aspect_ratio_and_size(self, client):
        config = client.build_config()
        assert config.image_config.aspect_ratio == "3:4"
        assert config.image_config.image_size == "4K"


class TestGenerateFashionImage:
    """Tests for the one-shot generation call."""

    @pytest.fixture
    def client(self):
        return GeminiImageClient(GenerationConfig(), StaticCredentialProvider("test-key"))

    @pytest.fixture
    def mock_sdk(self):
        with patch("lumiere.services.gemini_client.genai.Client") as mock_client_cls:
            sdk = MagicMock()
            sdk.aio.models.generate_content = AsyncMock(return_value=image_response(b"generated"))
            mock_client_cls.return_value = sdk
            yield mock_client_cls, sdk

    @pytest.mark.asyncio
    async def test_returns_png_data_url(self, client, mock_sdk, png_data_url):
        url = await client.generate_fashion_image(
            png_data_url, [png_data_url], FashionStyle.MINIMALIST, POSES[0]
        )

        assert url == f"data:image/png;base64,{base64.b64encode(b'generated').decode()}"

    @pytest.mark.asyncio
    async def test_uses_selected_key_and_model(self, client, mock_sdk, png_data_url):
        mock_client_cls, sdk = mock_sdk

        await client.generate_fashion_image(png_data_url, [png_data_url], FashionStyle.MINIMALIST, POSES[1])

        mock_client_cls.assert_called_once_with(api_key="test-key")
        kwargs = sdk.aio.models.generate_content.await_args.kwargs
        assert kwargs["model"] == "gemini-3-pro-image-preview"
        assert len(kwargs["contents"]) == 3

    @pytest.mark.asyncio
    async def test_no_image_raises(self, client, mock_sdk, png_data_url):
        _, sdk = mock_sdk
        sdk.aio.models.generate_content = AsyncMock(return_value=text_only_response())

        with pytest.raises(NoImageReturnedError):
            await client.generate_fashion_image(png_data_url, [png_data_url], FashionStyle.MINIMALIST, POSES[0])

    @pytest.mark.asyncio
    async def test_transport_error_propagates_unchanged(self, client, mock_sdk, png_data_url):
        _, sdk = mock_sdk
        error = ConnectionError("network down")
        sdk.aio.models.generate_content = AsyncMock(side_effect=error)

        with pytest.raises(ConnectionError) as exc_info:
            await client.generate_fashion_image(png_data_url, [png_data_url], FashionStyle.MINIMALIST, POSES[0])

        assert exc_info.value is error

    @pytest.mark.asyncio
    @pytest.mark.parametrize("count", [0, 4])
    async def test_product_count_enforced(self, client, mock_sdk, png_data_url, count):
        _, sdk = mock_sdk

        with pytest.raises(ValueError):
            await client.generate_fashion_image(
                png_data_url, [png_data_url] * count, FashionStyle.MINIMALIST, POSES[0]
            )

        sdk.aio.models.generate_content.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_missing_key_raises(self, png_data_url):
        client = GeminiImageClient(GenerationConfig(), StaticCredentialProvider(None))

        with pytest.raises(CredentialError):
            await client.generate_fashion_image(png_data_url, [png_data_url], FashionStyle.MINIMALIST, POSES[0])
