"""
Error Taxonomy.

Every failure that can end a pipeline run is a PipelineError. Component
errors wrap the exception raised by the collaborator in ``cause`` so the
caller sees both where the run broke and why.
"""

from __future__ import annotations

from typing import Optional


class PipelineError(Exception):
    """Base class for all pipeline failures."""

    def __init__(self, message: str, cause: Optional[BaseException] = None) -> None:
        super().__init__(message)
        self.cause = cause


class SourceError(PipelineError):
    """Raised when a Source fails to produce the next item."""

    def __init__(self, cause: Optional[BaseException] = None, message: str = "") -> None:
        super().__init__(message or f"source failed: {cause!r}", cause)


class StageError(PipelineError):
    """Raised when a Stage fails while applying an item."""

    def __init__(
        self,
        cause: Optional[BaseException] = None,
        stage_name: str = "stage",
        message: str = "",
    ) -> None:
        super().__init__(message or f"stage {stage_name} failed: {cause!r}", cause)
        self.stage_name = stage_name


class SinkError(PipelineError):
    """Raised when a Sink fails to accept an item or to close."""

    def __init__(self, cause: Optional[BaseException] = None, message: str = "") -> None:
        super().__init__(message or f"sink failed: {cause!r}", cause)


class ChannelClosed(PipelineError):
    """Raised on enqueue after end-of-stream was marked."""


class ChannelFull(PipelineError):
    """Raised on a direct enqueue into a channel already at capacity."""


class Cancelled(PipelineError):
    """Terminal reason for a run stopped by Pipeline.cancel()."""

    def __init__(self, message: str = "pipeline run cancelled") -> None:
        super().__init__(message)


class PipelineStateError(RuntimeError):
    """Raised when a pipeline run is started twice."""
