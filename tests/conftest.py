# Test fixtures and configuration
import base64
import io
import sys
from pathlib import Path
from unittest.mock import AsyncMock

import pytest
from PIL import Image

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from lumiere.config import StudioConfig  # noqa: E402
from lumiere.pipeline import EditorialPipeline  # noqa: E402
from lumiere.services import StaticCredentialProvider  # noqa: E402
from lumiere.studio import StudioSession  # noqa: E402


def make_image_bytes(fmt: str = "PNG", color: str = "red", size=(4, 4)) -> bytes:
    buffer = io.BytesIO()
    Image.new("RGB", size, color).save(buffer, format=fmt)
    return buffer.getvalue()


@pytest.fixture
def png_bytes():
    """Small valid PNG image bytes."""
    return make_image_bytes("PNG")


@pytest.fixture
def jpeg_bytes():
    """Small valid JPEG image bytes."""
    return make_image_bytes("JPEG", color="blue")


@pytest.fixture
def png_data_url(png_bytes):
    return f"data:image/png;base64,{base64.b64encode(png_bytes).decode()}"


@pytest.fixture
def studio_config():
    """Config with a fake key, independent of the developer's environment."""
    return StudioConfig(gemini_api_key="test-key", _env_file=None)


@pytest.fixture
def fake_generator(png_data_url):
    """Stand-in for GeminiImageClient that always returns the same image."""
    generator = AsyncMock()
    generator.generate_fashion_image = AsyncMock(return_value=png_data_url)
    return generator


@pytest.fixture
def studio(fake_generator, studio_config):
    """Studio session wired to the fake generator."""
    pipeline = EditorialPipeline(fake_generator)
    return StudioSession(pipeline, StaticCredentialProvider("test-key"), studio_config)
