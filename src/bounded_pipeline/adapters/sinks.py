"""
Reference Sinks.

    - ConsoleSink: Prints each item, optionally slowly
    - CollectingSink: Keeps every item in memory
    - RetryingSink: Retries a flaky sink before giving up
"""

from __future__ import annotations

import logging
import sys
import time
from threading import Lock
from typing import IO, Any, List, Optional

from bounded_pipeline.domain.errors import SinkError
from bounded_pipeline.interfaces.sink import Sink
from bounded_pipeline.resilience.error_handler import ErrorHandler, RetryExhausted

logger = logging.getLogger(__name__)


class ConsoleSink:
    """Print every accepted item on its own line."""

    def __init__(
        self,
        delay_seconds: float = 0.0,
        stream: Optional[IO[str]] = None,
        prefix: str = "",
    ) -> None:
        """
        Initialize console sink.

        Args:
            delay_seconds: Simulated processing time per item
            stream: Output stream (default: sys.stdout at write time)
            prefix: Text printed before every item
        """
        self._delay_seconds = delay_seconds
        self._stream = stream
        self._prefix = prefix
        self.accepted_count = 0

    def accept(self, item: Any) -> None:
        if self._delay_seconds > 0:
            time.sleep(self._delay_seconds)
        print(f"{self._prefix}{item!r}", file=self._stream or sys.stdout)
        self.accepted_count += 1

    def close(self) -> None:
        print(f"{self._prefix}done ({self.accepted_count} items)", file=self._stream or sys.stdout)


class CollectingSink:
    """Sink that records items and close() calls for inspection."""

    def __init__(self, delay_seconds: float = 0.0) -> None:
        self._delay_seconds = delay_seconds
        self._items: List[Any] = []
        self._lock = Lock()
        self.close_count = 0

    @property
    def items(self) -> List[Any]:
        with self._lock:
            return list(self._items)

    @property
    def closed(self) -> bool:
        return self.close_count > 0

    def accept(self, item: Any) -> None:
        if self._delay_seconds > 0:
            time.sleep(self._delay_seconds)
        with self._lock:
            self._items.append(item)

    def close(self) -> None:
        self.close_count += 1


class RetryingSink:
    """Wraps a sink and retries failed accept() calls."""

    def __init__(self, sink: Sink, error_handler: ErrorHandler) -> None:
        self._sink = sink
        self._error_handler = error_handler
        self.name = f"retrying_{type(sink).__name__}"

    def accept(self, item: Any) -> Any:
        try:
            return self._error_handler.retry(
                lambda: self._sink.accept(item), operation_name=f"{self.name}.accept"
            )
        except RetryExhausted as e:
            raise SinkError(e.cause or e) from e

    def close(self) -> None:
        self._sink.close()
