"""
Domain Layer - Run State, Results, Markers and Errors.

Entities:
    - RunState: Lifecycle of a pipeline run
    - RunResult: Terminal outcome reported to the caller
    - StageReport: Per-stage counters

Value Objects:
    - END_OF_STREAM / EMPTY: Stream markers
    - ChannelStats: Channel counters snapshot

Errors:
    - PipelineError and its subclasses

Design Principles:
    - No infrastructure dependencies (Pydantic only)
    - Immutable snapshots where possible
"""

from bounded_pipeline.domain.entities import RunResult, RunState, StageReport
from bounded_pipeline.domain.errors import (
    Cancelled,
    ChannelClosed,
    ChannelFull,
    PipelineError,
    PipelineStateError,
    SinkError,
    SourceError,
    StageError,
)
from bounded_pipeline.domain.value_objects import (
    EMPTY,
    END_OF_STREAM,
    ChannelStats,
    Record,
)

__all__ = [
    "RunResult",
    "RunState",
    "StageReport",
    "Cancelled",
    "ChannelClosed",
    "ChannelFull",
    "PipelineError",
    "PipelineStateError",
    "SinkError",
    "SourceError",
    "StageError",
    "EMPTY",
    "END_OF_STREAM",
    "ChannelStats",
    "Record",
]
