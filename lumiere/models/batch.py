"""Batch state and per-pose outcome tracking models."""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, Field, computed_field

from .catalog import FashionStyle
from .images import GeneratedResult


class BatchState(str, Enum):
    IDLE = "idle"
    RUNNING = "running"


class PoseOutcome(BaseModel):
    """Result of a single pose attempt: either a result or an error message."""

    index: int
    pose: str
    result: GeneratedResult | None = None
    error: str | None = None
    timestamp: datetime = Field(default_factory=datetime.now)

    @computed_field
    @property
    def succeeded(self) -> bool:
        return self.result is not None


class BatchReport(BaseModel):
    """Complete record of one batch run."""

    style: FashionStyle
    total: int
    outcomes: list[PoseOutcome] = Field(default_factory=list)
    cancelled: bool = False

    started_at: datetime = Field(default_factory=datetime.now)
    completed_at: datetime | None = None

    @computed_field
    @property
    def results(self) -> list[GeneratedResult]:
        """Successful results in call order."""
        return [o.result for o in self.outcomes if o.result is not None]

    @computed_field
    @property
    def failures(self) -> list[PoseOutcome]:
        return [o for o in self.outcomes if not o.succeeded]

    @computed_field
    @property
    def progress(self) -> float:
        """Fraction of poses attempted so far (0.0 - 1.0)."""
        if self.total == 0:
            return 1.0
        return len(self.outcomes) / self.total

    def record_success(self, index: int, pose: str, result: GeneratedResult) -> PoseOutcome:
        outcome = PoseOutcome(index=index, pose=pose, result=result)
        self.outcomes.append(outcome)
        return outcome

    def record_failure(self, index: int, pose: str, error: Exception) -> PoseOutcome:
        outcome = PoseOutcome(index=index, pose=pose, error=str(error) or type(error).__name__)
        self.outcomes.append(outcome)
        return outcome
