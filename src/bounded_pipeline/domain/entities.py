"""
Core Domain Entities.

Run lifecycle and the result objects a pipeline run reports back to its
caller.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

from bounded_pipeline.domain.errors import Cancelled, PipelineError
from bounded_pipeline.domain.value_objects import ChannelStats


class RunState(str, Enum):
    """Lifecycle of a single pipeline run."""

    IDLE = "IDLE"
    RUNNING = "RUNNING"
    DRAINING = "DRAINING"  # source exhausted, buffered items still moving
    COMPLETED = "COMPLETED"
    FAILED = "FAILED"

    @property
    def is_terminal(self) -> bool:
        return self in (RunState.COMPLETED, RunState.FAILED)


class StageReport(BaseModel):
    """Per-stage counters for the run summary."""

    stage_name: str
    input_count: int = 0
    output_count: int = 0
    busy_seconds: float = 0.0

    @property
    def dropped_count(self) -> int:
        """Inputs that produced fewer outputs (0 for expanding stages)."""
        return max(self.input_count - self.output_count, 0)


class RunResult(BaseModel):
    """Terminal outcome of a pipeline run."""

    state: RunState
    error: Optional[PipelineError] = None
    correlation_id: str
    produced_count: int = 0
    delivered_count: int = 0
    duration_seconds: float = 0.0
    stages: List[StageReport] = Field(default_factory=list)
    channels: List[ChannelStats] = Field(default_factory=list)
    metrics: Dict[str, Any] = Field(default_factory=dict)

    model_config = {"arbitrary_types_allowed": True}

    @property
    def completed(self) -> bool:
        return self.state == RunState.COMPLETED

    @property
    def cancelled(self) -> bool:
        return isinstance(self.error, Cancelled)

    def raise_for_state(self) -> "RunResult":
        """Raise the terminal error of a failed run, otherwise return self."""
        if self.state == RunState.FAILED and self.error is not None:
            raise self.error
        return self
