"""Uploaded and generated image models."""

import base64
import time

from pydantic import BaseModel, ConfigDict, Field, computed_field


class UploadedImage(BaseModel):
    """A user-selected image held by an upload slot."""

    id: str = Field(description="Short random identifier, unique within the session")
    filename: str = Field(description="Name of the file the user selected")
    content_type: str = Field(description="Detected image MIME type, e.g. 'image/jpeg'")
    data: bytes = Field(exclude=True, repr=False)
    preview_url: str = Field(description="Where the shell serves the raw upload")

    @computed_field
    @property
    def size(self) -> int:
        return len(self.data)

    @property
    def base64(self) -> str:
        """The upload as a data URL, ready for the generation request."""
        encoded = base64.b64encode(self.data).decode("utf-8")
        return f"data:{self.content_type};base64,{encoded}"


class GeneratedResult(BaseModel):
    """One editorial image returned for a (style, pose) pair. Never mutated."""

    model_config = ConfigDict(frozen=True)

    id: str
    url: str = Field(description="Image data URL returned by the generation call")
    prompt: str = Field(description="'<style> | <pose>' for provenance")
    pose_index: int = Field(ge=0)

    @classmethod
    def create(cls, url: str, style: str, pose: str, pose_index: int) -> "GeneratedResult":
        """Build a result with a timestamped id."""
        return cls(
            id=f"gen-{int(time.time() * 1000)}-{pose_index}",
            url=url,
            prompt=f"{style} | {pose}",
            pose_index=pose_index,
        )

    @property
    def image_bytes(self) -> bytes:
        """Decoded image payload (the part after the data URL comma)."""
        _, _, encoded = self.url.rpartition(",")
        return base64.b64decode(encoded)
