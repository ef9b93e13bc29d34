"""
Audit Logger Protocol.

Defines the interface for run auditing. The audit logger receives the
lifecycle events of a pipeline run: start and end of the run, start and
end of each stage worker, filtered items and flow-control transitions.

Design Notes:
    - Correlation ID propagation for tracing one run
    - Called from worker threads; implementations must be thread-safe
    - No side effects on the data flowing through the pipeline
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional, Protocol, runtime_checkable


@runtime_checkable
class AuditLogger(Protocol):
    """Abstract interface for audit logging."""

    def set_correlation_id(self, correlation_id: str) -> None:
        """Set correlation ID for subsequent log entries."""
        ...

    def log_run_start(self, segment_names: List[str]) -> None:
        """
        Log the start of a run.

        Args:
            segment_names: Source, stage and sink names in flow order
        """
        ...

    def log_run_end(
        self,
        state: str,
        duration_seconds: float,
        error: Optional[BaseException] = None,
    ) -> None:
        """Log the terminal state of a run."""
        ...

    def log_stage_start(self, stage_name: str) -> None:
        """Log that a stage worker started pulling input."""
        ...

    def log_stage_end(
        self,
        stage_name: str,
        input_count: int,
        output_count: int,
        duration_seconds: float,
    ) -> None:
        """Log that a stage worker forwarded end-of-stream."""
        ...

    def log_item_filtered(self, stage_name: str, item: Any) -> None:
        """Log that a stage emitted nothing for an input item."""
        ...

    def log_flow_control(
        self,
        channel_name: str,
        event: str,
        metadata: Optional[Dict[str, Any]] = None,
    ) -> None:
        """
        Log a flow-control transition.

        Args:
            channel_name: Channel that changed state
            event: congested, drained, paused or resumed
            metadata: Buffer size and watermarks at the transition
        """
        ...
