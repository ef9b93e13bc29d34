"""
Console Audit Logger.

A simple audit logger that prints run events to the console, including
the congestion/drain and pause/resume transitions that show backpressure
at work.
"""

from __future__ import annotations

from datetime import datetime
from threading import Lock
from typing import IO, Any, Dict, List, Optional


class ConsoleAuditLogger:
    """Simple console-based audit logger."""

    def __init__(self, verbose: bool = True, stream: Optional[IO[str]] = None) -> None:
        """
        Initialize console logger.

        Args:
            verbose: If True, log every event. If False, only run and
                stage summaries.
            stream: Output stream (default: stdout)
        """
        self._verbose = verbose
        self._stream = stream
        self._correlation_id: Optional[str] = None
        self._lock = Lock()

    def set_correlation_id(self, correlation_id: str) -> None:
        """Set correlation ID for subsequent log entries."""
        self._correlation_id = correlation_id

    def log_run_start(self, segment_names: List[str]) -> None:
        self._log("INFO", f"Starting run: {' -> '.join(segment_names)}")

    def log_run_end(
        self,
        state: str,
        duration_seconds: float,
        error: Optional[BaseException] = None,
    ) -> None:
        if error is None:
            self._log("INFO", f"Run {state} ({duration_seconds:.3f}s)")
        else:
            self._log("ERROR", f"Run {state} ({duration_seconds:.3f}s): {error}")

    def log_stage_start(self, stage_name: str) -> None:
        if self._verbose:
            self._log("INFO", f"Starting {stage_name}")

    def log_stage_end(
        self,
        stage_name: str,
        input_count: int,
        output_count: int,
        duration_seconds: float,
    ) -> None:
        self._log(
            "INFO",
            f"Completed {stage_name}: {input_count} in, {output_count} out "
            f"({duration_seconds:.3f}s)",
        )

    def log_item_filtered(self, stage_name: str, item: Any) -> None:
        if self._verbose:
            self._log("DEBUG", f"{item!r} filtered by {stage_name}")

    def log_flow_control(
        self,
        channel_name: str,
        event: str,
        metadata: Optional[Dict[str, Any]] = None,
    ) -> None:
        if not self._verbose:
            return
        size = (metadata or {}).get("size", "?")
        self._log("INFO", f"{channel_name} {event} (buffered={size})")

    def _log(self, level: str, message: str) -> None:
        """Internal logging method."""
        timestamp = datetime.now().strftime("%H:%M:%S")
        corr_id = self._correlation_id[:8] if self._correlation_id else "--------"
        with self._lock:
            print(f"[{timestamp}] [{corr_id}] [{level:5}] {message}", file=self._stream)
