"""Data models for the Lumière editorial studio."""

from .catalog import DEFAULT_STYLE, POSES, FashionStyle
from .images import GeneratedResult, UploadedImage
from .batch import BatchReport, BatchState, PoseOutcome

__all__ = [
    "DEFAULT_STYLE",
    "POSES",
    "FashionStyle",
    "GeneratedResult",
    "UploadedImage",
    "BatchReport",
    "BatchState",
    "PoseOutcome",
]
