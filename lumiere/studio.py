"""Per-page studio state rendered by the presentation shell."""

import asyncio
import logging
from dataclasses import dataclass, field

from .config import StudioConfig
from .exceptions import GenerationInProgressError, MissingInputError
from .models import DEFAULT_STYLE, BatchReport, FashionStyle, GeneratedResult
from .pipeline import EditorialPipeline
from .services import CredentialProvider, ImageSlot

logger = logging.getLogger(__name__)

GENERIC_GENERATION_ERROR = "An error occurred during generation."


@dataclass(frozen=True)
class GenerationRequest:
    """Inputs captured when a batch starts, so later slot edits can't leak in.

    Also identifies the batch: only the session's current request may write
    progress, results or the report back into the session.
    """
    portrait: str
    products: tuple[str, ...]
    style: FashionStyle
    cancel_event: asyncio.Event = field(default_factory=asyncio.Event, compare=False, repr=False)


class StudioSession:
    """Upload slots, style choice, progress and results for one user session."""

    def __init__(
        self,
        pipeline: EditorialPipeline,
        credentials: CredentialProvider,
        config: StudioConfig,
    ):
        self.pipeline = pipeline
        self.credentials = credentials
        self.config = config

        self.portrait = ImageSlot(
            "portrait",
            capacity=config.uploads.portrait_max_files,
            max_file_bytes=config.uploads.max_file_bytes,
        )
        self.products = ImageSlot(
            "products",
            capacity=config.uploads.product_max_files,
            multiple=True,
            max_file_bytes=config.uploads.max_file_bytes,
        )
        self.selected_style: FashionStyle = DEFAULT_STYLE

        self.api_key_ready = False
        self.results: list[GeneratedResult] = []
        self.progress = 0.0
        self.is_generating = False
        self.generation_error: str | None = None
        self.last_report: BatchReport | None = None
        self._current: GenerationRequest | None = None

    @property
    def total_poses(self) -> int:
        return len(self.pipeline.poses)

    @property
    def is_busy(self) -> bool:
        """True while a batch runs, or while a reset batch's last call settles."""
        return self.is_generating or self.pipeline.is_running

    @property
    def can_generate(self) -> bool:
        return not self.portrait.is_empty and not self.products.is_empty and not self.is_busy

    def slot(self, name: str) -> ImageSlot:
        if name == self.portrait.name:
            return self.portrait
        if name == self.products.name:
            return self.products
        raise KeyError(name)

    def get_result(self, result_id: str) -> GeneratedResult | None:
        for result in self.results:
            if result.id == result_id:
                return result
        return None

    def download_filename(self, result: GeneratedResult) -> str:
        return f"{self.config.download_prefix}-{result.id}.png"

    async def check_credentials(self) -> bool:
        """Ask the credential provider whether a key exists and remember the answer."""
        try:
            self.api_key_ready = await self.credentials.has_credential()
        except Exception:
            logger.warning("API key check failed", exc_info=True)
            self.api_key_ready = False
        return self.api_key_ready

    async def connect(self) -> bool:
        """Ask the provider for a key (the 'API Key' button)."""
        try:
            self.api_key_ready = await self.credentials.request_credential()
        except Exception:
            logger.exception("Failed to connect API key")
            self.api_key_ready = False
        return self.api_key_ready

    def begin_generation(self) -> GenerationRequest:
        """Validate inputs and switch the session into the generating state."""
        if self.portrait.is_empty or self.products.is_empty:
            raise MissingInputError("Upload a portrait and at least one product image first")
        if self.is_busy:
            raise GenerationInProgressError("A batch is already running")

        request = GenerationRequest(
            portrait=self.portrait.images[0].base64,
            products=tuple(img.base64 for img in self.products.images),
            style=self.selected_style,
        )

        self.is_generating = True
        self.progress = 0.0
        self.results = []
        self.generation_error = None
        self.last_report = None
        self._current = request
        return request

    def _is_current(self, request: GenerationRequest) -> bool:
        return self._current is request

    async def run_generation(self, request: GenerationRequest) -> BatchReport | None:
        """Run the batch, updating results and progress as poses complete.

        Once the session is reset the batch keeps running to its cancel
        point, but nothing it produces reaches the session any more.
        """

        def on_result(result: GeneratedResult) -> None:
            if self._is_current(request):
                self.results.append(result)

        def on_progress(fraction: float) -> None:
            if self._is_current(request):
                self.progress = fraction

        try:
            report = await self.pipeline.run(
                request.portrait,
                request.products,
                request.style,
                on_result=on_result,
                on_progress=on_progress,
                cancel_event=request.cancel_event,
            )
            if self._is_current(request):
                self.last_report = report
            return report
        except Exception as e:
            logger.exception("Generation batch failed")
            if self._is_current(request):
                self.generation_error = str(e) or GENERIC_GENERATION_ERROR
            return None
        finally:
            if self._is_current(request):
                self.is_generating = False
                self._current = None

    async def generate(self) -> BatchReport | None:
        """Begin and run a batch in one step."""
        request = self.begin_generation()
        return await self.run_generation(request)

    def cancel_generation(self) -> bool:
        """Stop issuing calls once the in-flight one settles."""
        if self._current is None:
            return False
        self._current.cancel_event.set()
        return True

    def reset(self) -> None:
        """Forget uploads and results, like reloading the page.

        A running batch is cancelled and detached from the session.
        """
        if self._current is not None:
            self._current.cancel_event.set()
            self._current = None
        self.is_generating = False
        self.portrait.clear()
        self.products.clear()
        self.selected_style = DEFAULT_STYLE
        self.results = []
        self.progress = 0.0
        self.generation_error = None
        self.last_report = None
