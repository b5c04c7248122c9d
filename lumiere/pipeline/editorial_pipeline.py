"""Sequential ten-pose editorial generation pipeline."""

import asyncio
import logging
from collections.abc import Callable, Sequence
from datetime import datetime

from ..exceptions import GenerationInProgressError, MissingInputError
from ..models import POSES, BatchReport, BatchState, FashionStyle, GeneratedResult
from ..services import GeminiImageClient

logger = logging.getLogger(__name__)


class EditorialPipeline:
    """Runs one generation call per pose, strictly one after another.

    Flow:
    1. Refuse to start without a portrait and at least one product
    2. For each pose in order, call the image generator
    3. Append successes, log failures and carry on
    4. Return to idle once every pose has been attempted

    A failed pose never aborts the batch.
    """

    def __init__(self, generator: GeminiImageClient, poses: Sequence[str] = POSES):
        self.generator = generator
        self.poses = tuple(poses)
        self.state = BatchState.IDLE

    @property
    def is_running(self) -> bool:
        return self.state is BatchState.RUNNING

    async def run(
        self,
        portrait: str | None,
        products: Sequence[str],
        style: FashionStyle,
        on_result: Callable[[GeneratedResult], None] | None = None,
        on_progress: Callable[[float], None] | None = None,
        cancel_event: asyncio.Event | None = None,
    ) -> BatchReport:
        """Run a full batch.

        Args:
            portrait: Portrait payload (data URL)
            products: 1-3 product payloads (data URLs)
            style: Aesthetic preset applied to every pose
            on_result: Called with each new result as soon as it arrives
            on_progress: Called with the attempted fraction after every pose
            cancel_event: When set, no further calls are issued

        Returns:
            BatchReport with one outcome per attempted pose
        """
        if not portrait or not products:
            raise MissingInputError("A portrait and at least one product image are required")
        if self.is_running:
            raise GenerationInProgressError("A batch is already running")

        report = BatchReport(style=style, total=len(self.poses))
        products = list(products)
        self.state = BatchState.RUNNING
        logger.info("Starting batch: %d poses, style=%s", report.total, style.label)

        try:
            for i, pose in enumerate(self.poses):
                if cancel_event is not None and cancel_event.is_set():
                    report.cancelled = True
                    logger.info("Batch cancelled after %d of %d poses", i, report.total)
                    break

                try:
                    url = await self.generator.generate_fashion_image(
                        portrait, products, style, pose
                    )
                except Exception as e:
                    # Continue trying other poses even if one fails
                    logger.exception("Error generating image %d", i + 1)
                    report.record_failure(i, pose, e)
                else:
                    result = GeneratedResult.create(url, style.value, pose, i)
                    report.record_success(i, pose, result)
                    logger.info("Generated image %d/%d", i + 1, report.total)
                    if on_result is not None:
                        on_result(result)

                if on_progress is not None:
                    on_progress((i + 1) / report.total)
        finally:
            self.state = BatchState.IDLE
            report.completed_at = datetime.now()

        logger.info(
            "Batch finished: %d succeeded, %d failed",
            len(report.results), len(report.failures),
        )
        return report
