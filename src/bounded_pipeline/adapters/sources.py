"""
Reference Sources.

    - IterableSource: Pulls lazily from any iterable or generator
    - RetryingSource: Retries a flaky source before giving up
"""

from __future__ import annotations

import logging
import time
from typing import Any, Iterable, Iterator, Optional

from bounded_pipeline.domain.errors import SourceError
from bounded_pipeline.domain.value_objects import END_OF_STREAM
from bounded_pipeline.interfaces.source import Source
from bounded_pipeline.resilience.error_handler import ErrorHandler, RetryExhausted

logger = logging.getLogger(__name__)


class IterableSource:
    """Source backed by an iterable, consumed one item per next() call."""

    def __init__(
        self,
        iterable: Iterable[Any],
        delay_seconds: float = 0.0,
        name: str = "iterable_source",
    ) -> None:
        """
        Initialize the source.

        Args:
            iterable: Items to produce; iterated lazily
            delay_seconds: Pause before each item, simulating slow I/O
            name: Source name for logs
        """
        self._iterator: Optional[Iterator[Any]] = iter(iterable)
        self._delay_seconds = delay_seconds
        self.name = name
        self.produced_count = 0

    def next(self) -> Any:
        if self._iterator is None:
            return END_OF_STREAM

        if self._delay_seconds > 0:
            time.sleep(self._delay_seconds)

        try:
            item = next(self._iterator)
        except StopIteration:
            self._iterator = None
            logger.debug(f"{self.name}: exhausted after {self.produced_count} items")
            return END_OF_STREAM

        self.produced_count += 1
        return item


class RetryingSource:
    """Wraps a source and retries failed next() calls."""

    def __init__(self, source: Source, error_handler: ErrorHandler) -> None:
        self._source = source
        self._error_handler = error_handler
        self.name = f"retrying_{getattr(source, 'name', type(source).__name__)}"

    def next(self) -> Any:
        try:
            return self._error_handler.retry(self._source.next, operation_name=self.name)
        except RetryExhausted as e:
            raise SourceError(e.cause or e) from e
