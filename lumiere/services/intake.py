"""Upload slots for the portrait and product images."""

import io
import logging
import uuid

from PIL import Image, UnidentifiedImageError

from ..exceptions import InvalidImageError
from ..models import UploadedImage

logger = logging.getLogger(__name__)


def detect_image_type(data: bytes) -> str:
    """Return the MIME type of an image, verified with Pillow."""
    try:
        with Image.open(io.BytesIO(data)) as img:
            image_format = img.format
            img.verify()
    except (UnidentifiedImageError, OSError, SyntaxError) as e:
        raise InvalidImageError(f"Not a readable image: {e}") from e

    mime_type = Image.MIME.get(image_format or "")
    if not mime_type:
        raise InvalidImageError(f"Unsupported image format: {image_format}")
    return mime_type


class ImageSlot:
    """Holds up to `capacity` uploaded images.

    A single-file slot replaces its content on every selection; a multiple
    slot appends and truncates to capacity.
    """

    def __init__(
        self,
        name: str,
        capacity: int,
        multiple: bool = False,
        max_file_bytes: int | None = None,
    ):
        self.name = name
        self.capacity = capacity
        self.multiple = multiple
        self.max_file_bytes = max_file_bytes
        self._images: list[UploadedImage] = []

    @property
    def images(self) -> list[UploadedImage]:
        return list(self._images)

    @property
    def is_empty(self) -> bool:
        return not self._images

    @property
    def is_full(self) -> bool:
        return len(self._images) >= self.capacity

    def __len__(self) -> int:
        return len(self._images)

    def read_file(self, filename: str, data: bytes) -> UploadedImage:
        """Convert raw file bytes into an UploadedImage for this slot."""
        if self.max_file_bytes is not None and len(data) > self.max_file_bytes:
            raise InvalidImageError(
                f"{filename} is too large ({len(data)} bytes, limit {self.max_file_bytes})"
            )
        content_type = detect_image_type(data)
        image_id = uuid.uuid4().hex[:9]
        return UploadedImage(
            id=image_id,
            filename=filename,
            content_type=content_type,
            data=data,
            preview_url=f"/api/uploads/{self.name}/{image_id}/preview",
        )

    def add(self, files: list[tuple[str, bytes]]) -> list[UploadedImage]:
        """Read and store newly selected files.

        Every file is read before the slot changes, so one bad file leaves
        the slot untouched. Returns the slot content afterwards.
        """
        if not files:
            return self.images

        processed = [self.read_file(filename, data) for filename, data in files]

        if self.multiple:
            combined = self._images + processed
            if len(combined) > self.capacity:
                logger.info(
                    "%s slot holds at most %d images, dropping %d",
                    self.name, self.capacity, len(combined) - self.capacity,
                )
            self._images = combined[:self.capacity]
        else:
            self._images = processed[:1]

        return self.images

    def get(self, image_id: str) -> UploadedImage | None:
        for img in self._images:
            if img.id == image_id:
                return img
        return None

    def remove(self, image_id: str) -> bool:
        """Remove an image by id. Returns False if it was not present."""
        remaining = [img for img in self._images if img.id != image_id]
        removed = len(remaining) != len(self._images)
        self._images = remaining
        return removed

    def clear(self) -> None:
        self._images = []
