"""Gemini image-generation client for editorial composites."""

import base64
import logging
from typing import Any

from google import genai
from google.genai import types

from ..config import GenerationConfig
from ..exceptions import CredentialError, NoImageReturnedError
from ..models import FashionStyle
from ..prompts import build_editorial_prompt
from .credentials import CredentialProvider

logger = logging.getLogger(__name__)

MAX_PRODUCT_IMAGES = 3


def split_data_url(payload: str, default_mime: str = "image/jpeg") -> tuple[str, str]:
    """Strip a `data:<mime>;base64,` prefix.

    Returns (mime_type, base64_text). Raw base64 passes through with the
    default MIME type.
    """
    if payload.startswith("data:") and "," in payload:
        header, encoded = payload.split(",", 1)
        mime_type = header[len("data:"):].split(";")[0]
        if not mime_type.startswith("image/"):
            mime_type = default_mime
        return mime_type, encoded
    return default_mime, payload


def normalize_inline_data(data: Any) -> bytes:
    if isinstance(data, bytes):
        return data
    if isinstance(data, str):
        return base64.b64decode(data)
    raise TypeError(f"Unsupported inline data type: {type(data)}")


def _first_inline_image(parts: Any) -> bytes | None:
    # Parts with an empty payload are skipped
    for part in parts or []:
        inline = getattr(part, "inline_data", None)
        if inline and getattr(inline, "data", None):
            return normalize_inline_data(inline.data)
    return None


def extract_image_from_response(response: Any) -> bytes:
    """Return the first inline image payload.

    Prefers the SDK's `response.parts` shortcut, then falls back to the
    parts of the first candidate.
    """
    image = _first_inline_image(getattr(response, "parts", None))
    if image is not None:
        return image

    candidates = getattr(response, "candidates", None) or []
    if candidates:
        content = getattr(candidates[0], "content", None)
        image = _first_inline_image(getattr(content, "parts", None))
        if image is not None:
            return image

    raise NoImageReturnedError("No image generated in response")


class GeminiImageClient:
    """Wraps a single one-shot call to the Gemini image model.

    A new SDK client is created for every call so the most recently
    selected API key is always used. No retry, no backoff.
    """

    def __init__(self, config: GenerationConfig, credentials: CredentialProvider):
        self.config = config
        self.credentials = credentials

    def _create_client(self) -> genai.Client:
        api_key = self.credentials.get_api_key()
        if not api_key:
            raise CredentialError("No API key selected")
        return genai.Client(api_key=api_key)

    def build_contents(
        self,
        portrait_base64: str,
        product_base64s: list[str],
        style: FashionStyle | str,
        pose_description: str,
    ) -> list[types.Part]:
        """Portrait image, then each product image, then the instruction text."""
        parts = []
        for payload in [portrait_base64, *product_base64s]:
            mime_type, encoded = split_data_url(payload, self.config.input_mime_type)
            parts.append(
                types.Part.from_bytes(data=base64.b64decode(encoded), mime_type=mime_type)
            )
        parts.append(types.Part.from_text(text=build_editorial_prompt(style, pose_description)))
        return parts

    def build_config(self) -> types.GenerateContentConfig:
        return types.GenerateContentConfig(
            image_config=types.ImageConfig(
                aspect_ratio=self.config.aspect_ratio,
                image_size=self.config.image_size,
            )
        )

    async def generate_fashion_image(
        self,
        portrait_base64: str,
        product_base64s: list[str],
        style: FashionStyle | str,
        pose_description: str,
    ) -> str:
        """Generate one editorial image.

        Args:
            portrait_base64: Portrait as a data URL or raw base64
            product_base64s: 1-3 product images as data URLs or raw base64
            style: Aesthetic preset (enum member or its text)
            pose_description: Literal pose text

        Returns:
            The generated image as a `data:image/png;base64,...` URL
        """
        if not 1 <= len(product_base64s) <= MAX_PRODUCT_IMAGES:
            raise ValueError(
                f"Expected 1-{MAX_PRODUCT_IMAGES} product images, got {len(product_base64s)}"
            )

        contents = self.build_contents(portrait_base64, product_base64s, style, pose_description)
        client = self._create_client()

        try:
            response = await client.aio.models.generate_content(
                model=self.config.model,
                contents=contents,
                config=self.build_config(),
            )
            image_bytes = extract_image_from_response(response)
        except Exception:
            logger.error("Gemini generation error (model=%s)", self.config.model)
            raise

        encoded = base64.b64encode(image_bytes).decode("utf-8")
        return f"data:image/png;base64,{encoded}"
