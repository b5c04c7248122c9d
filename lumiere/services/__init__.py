"""External services and upload handling for the editorial studio."""

from .credentials import CredentialProvider, EnvironmentCredentialProvider, StaticCredentialProvider
from .gemini_client import GeminiImageClient
from .intake import ImageSlot

__all__ = [
    "CredentialProvider",
    "EnvironmentCredentialProvider",
    "StaticCredentialProvider",
    "GeminiImageClient",
    "ImageSlot",
]
