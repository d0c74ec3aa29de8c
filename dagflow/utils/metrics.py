"""Token usage and stage timing."""

import time
from dataclasses import dataclass, field
from typing import Optional


@dataclass
class TokenUsage:
    """Token usage for a single producer call."""

    input_tokens: int = 0
    output_tokens: int = 0
    model: str = ""


@dataclass
class StageMetrics:
    """Wall-clock timings of pipeline stages, in seconds."""

    timings: dict[str, float] = field(default_factory=dict)

    def record(self, stage: str, duration: float) -> None:
        """Add a duration to a stage, accumulating repeated runs."""
        self.timings[stage] = self.timings.get(stage, 0.0) + duration


class StageTimer:
    """Context manager timing one stage into a :class:`StageMetrics`."""

    def __init__(self, metrics: StageMetrics, stage: str):
        self.metrics = metrics
        self.stage = stage
        self.start_time: Optional[float] = None

    def __enter__(self) -> "StageTimer":
        self.start_time = time.perf_counter()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        if self.start_time is not None:
            self.metrics.record(self.stage, time.perf_counter() - self.start_time)
