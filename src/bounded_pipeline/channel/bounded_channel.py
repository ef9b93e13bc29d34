"""
Bounded Channel - FIFO Queue with Watermark Backpressure.

Connects exactly one producer to exactly one consumer. The channel holds
at most ``capacity`` items and tracks a Congested flag with hysteresis:

    - Congested is set when the buffered count reaches ``high_watermark``
      after an enqueue
    - Congested is cleared only when the count falls to ``low_watermark``
      or below after a dequeue

A producer using put() or wait_writable() is suspended while the channel
is Congested. A consumer using get() is suspended while the channel is
empty or paused. Pausing only holds back delivery; the producer keeps
filling the buffer up to the high watermark.

Design Notes:
    - One threading.Condition guards every mutation
    - Listener callbacks run outside the lock
    - END_OF_STREAM is never revoked
"""

from __future__ import annotations

import logging
import threading
from collections import deque
from typing import TYPE_CHECKING, Any, Callable, Deque, Dict, List, Optional, Tuple

from bounded_pipeline.domain.errors import ChannelClosed, ChannelFull
from bounded_pipeline.domain.value_objects import EMPTY, END_OF_STREAM, ChannelStats

if TYPE_CHECKING:
    from bounded_pipeline.config.models import ChannelConfig

logger = logging.getLogger(__name__)

# (channel_name, event, metadata)
ChannelListener = Callable[[str, str, Dict[str, Any]], None]

CONGESTED = "congested"
DRAINED = "drained"
PAUSED = "paused"
RESUMED = "resumed"

DEFAULT_CAPACITY = 16


class BoundedChannel:
    """Bounded FIFO buffer with high/low watermark backpressure."""

    def __init__(
        self,
        capacity: int = DEFAULT_CAPACITY,
        high_watermark: Optional[int] = None,
        low_watermark: Optional[int] = None,
        name: str = "channel",
        listener: Optional[ChannelListener] = None,
    ) -> None:
        """
        Initialize an empty, open channel.

        Args:
            capacity: Maximum number of buffered items (>= 1)
            high_watermark: Count that makes the channel Congested
                (default: capacity)
            low_watermark: Count at or below which a Congested channel
                drains (default: high_watermark // 2)
            name: Channel name for logs and stats
            listener: Optional callback for flow-control transitions

        Raises:
            ValueError: If the watermarks are inconsistent
        """
        if capacity < 1:
            raise ValueError(f"capacity must be >= 1, got {capacity}")

        high = capacity if high_watermark is None else high_watermark
        if not 1 <= high <= capacity:
            raise ValueError(
                f"high_watermark must be within 1..{capacity}, got {high}"
            )

        low = high // 2 if low_watermark is None else low_watermark
        if not 0 <= low < high:
            raise ValueError(
                f"low_watermark must be within 0..{high - 1}, got {low}"
            )

        self.name = name
        self.capacity = capacity
        self.high_watermark = high
        self.low_watermark = low
        self._listener = listener

        self._buffer: Deque[Any] = deque()
        self._cond = threading.Condition(threading.Lock())
        self._congested = False
        self._paused = False
        self._end_of_stream = False

        self._enqueued = 0
        self._dequeued = 0
        self._discarded = 0
        self._peak_size = 0
        self._congestion_count = 0

    @classmethod
    def from_config(
        cls,
        config: "ChannelConfig",
        name: str = "channel",
        listener: Optional[ChannelListener] = None,
    ) -> "BoundedChannel":
        """Create a channel from a validated ChannelConfig."""
        return cls(
            capacity=config.capacity,
            high_watermark=config.resolved_high_watermark,
            low_watermark=config.resolved_low_watermark,
            name=name,
            listener=listener,
        )

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------

    def __len__(self) -> int:
        with self._cond:
            return len(self._buffer)

    def __repr__(self) -> str:
        return (
            f"BoundedChannel(name={self.name!r}, capacity={self.capacity}, "
            f"high={self.high_watermark}, low={self.low_watermark})"
        )

    @property
    def congested(self) -> bool:
        with self._cond:
            return self._congested

    @property
    def paused(self) -> bool:
        with self._cond:
            return self._paused

    @property
    def end_of_stream(self) -> bool:
        with self._cond:
            return self._end_of_stream

    def stats(self) -> ChannelStats:
        """Snapshot of the channel counters."""
        with self._cond:
            return ChannelStats(
                name=self.name,
                capacity=self.capacity,
                high_watermark=self.high_watermark,
                low_watermark=self.low_watermark,
                size=len(self._buffer),
                enqueued=self._enqueued,
                dequeued=self._dequeued,
                discarded=self._discarded,
                peak_size=self._peak_size,
                congestion_count=self._congestion_count,
                congested=self._congested,
                paused=self._paused,
                end_of_stream=self._end_of_stream,
            )

    # ------------------------------------------------------------------
    # Producer side
    # ------------------------------------------------------------------

    def enqueue(self, item: Any) -> None:
        """
        Append an item without waiting.

        Callers that honour backpressure check ``congested`` first, or use
        put() which waits for the channel to drain.

        Raises:
            ChannelClosed: If end-of-stream was already marked
            ChannelFull: If the buffer already holds ``capacity`` items
        """
        with self._cond:
            events = self._enqueue_locked(item)
        self._emit(events)

    def put(self, item: Any, timeout: Optional[float] = None) -> bool:
        """
        Wait until the channel is not Congested, then append the item.

        Args:
            item: Item to append
            timeout: Seconds to wait; None waits indefinitely

        Returns:
            True if the item was enqueued, False on timeout

        Raises:
            ChannelClosed: If end-of-stream is marked before or while waiting
        """
        with self._cond:
            ready = self._cond.wait_for(
                lambda: self._end_of_stream or not self._congested, timeout
            )
            if not ready:
                return False
            events = self._enqueue_locked(item)
        self._emit(events)
        return True

    def wait_writable(self, timeout: Optional[float] = None) -> bool:
        """
        Wait until the channel accepts items again.

        Returns:
            True when the channel is open and not Congested; False on
            timeout or once end-of-stream is marked
        """
        with self._cond:
            self._cond.wait_for(
                lambda: self._end_of_stream or not self._congested, timeout
            )
            return not self._end_of_stream and not self._congested

    def mark_end_of_stream(self) -> None:
        """Record that no further items will be enqueued. Idempotent."""
        with self._cond:
            if self._end_of_stream:
                return
            self._end_of_stream = True
            self._cond.notify_all()
        logger.debug(f"{self.name}: end of stream marked")

    # ------------------------------------------------------------------
    # Consumer side
    # ------------------------------------------------------------------

    def dequeue(self) -> Any:
        """
        Remove and return the oldest item without waiting.

        Returns:
            The oldest item; EMPTY if nothing is deliverable right now
            (empty or paused); END_OF_STREAM once drained after
            end-of-stream
        """
        with self._cond:
            if self._paused:
                return EMPTY
            if not self._buffer:
                return END_OF_STREAM if self._end_of_stream else EMPTY
            item, events = self._dequeue_locked()
        self._emit(events)
        return item

    def get(self, timeout: Optional[float] = None) -> Any:
        """
        Wait for the next deliverable item.

        Args:
            timeout: Seconds to wait; None waits indefinitely

        Returns:
            The oldest item, END_OF_STREAM once drained after end-of-stream,
            or EMPTY on timeout
        """
        with self._cond:
            ready = self._cond.wait_for(
                lambda: not self._paused and (self._buffer or self._end_of_stream),
                timeout,
            )
            if not ready:
                return EMPTY
            if not self._buffer:
                return END_OF_STREAM
            item, events = self._dequeue_locked()
        self._emit(events)
        return item

    # ------------------------------------------------------------------
    # Flow control
    # ------------------------------------------------------------------

    def pause(self) -> None:
        """Hold back delivery to the consumer regardless of watermarks."""
        with self._cond:
            if self._paused or self._end_of_stream and not self._buffer:
                return
            self._paused = True
            events = [(PAUSED, self._metadata_locked())]
        self._emit(events)

    def resume(self) -> None:
        """Release a previous pause()."""
        with self._cond:
            if not self._paused:
                return
            self._paused = False
            self._cond.notify_all()
            events = [(RESUMED, self._metadata_locked())]
        self._emit(events)

    def abort(self) -> int:
        """
        Close the channel and discard everything buffered.

        Releases every waiter: producers see ChannelClosed, consumers see
        END_OF_STREAM.

        Returns:
            Number of discarded items
        """
        with self._cond:
            discarded = len(self._buffer)
            self._buffer.clear()
            self._discarded += discarded
            self._end_of_stream = True
            self._paused = False
            self._congested = False
            self._cond.notify_all()
        if discarded:
            logger.debug(f"{self.name}: aborted, discarded {discarded} items")
        return discarded

    # ------------------------------------------------------------------
    # Internals (lock held)
    # ------------------------------------------------------------------

    def _enqueue_locked(self, item: Any) -> List[Tuple[str, Dict[str, Any]]]:
        if self._end_of_stream:
            raise ChannelClosed(f"channel {self.name} is closed")
        if len(self._buffer) >= self.capacity:
            raise ChannelFull(
                f"channel {self.name} is at capacity ({self.capacity})"
            )

        self._buffer.append(item)
        self._enqueued += 1
        self._peak_size = max(self._peak_size, len(self._buffer))
        self._cond.notify_all()

        if not self._congested and len(self._buffer) >= self.high_watermark:
            self._congested = True
            self._congestion_count += 1
            return [(CONGESTED, self._metadata_locked())]
        return []

    def _dequeue_locked(self) -> Tuple[Any, List[Tuple[str, Dict[str, Any]]]]:
        item = self._buffer.popleft()
        self._dequeued += 1
        events: List[Tuple[str, Dict[str, Any]]] = []

        if self._congested and len(self._buffer) <= self.low_watermark:
            self._congested = False
            events.append((DRAINED, self._metadata_locked()))

        self._cond.notify_all()
        return item, events

    def _metadata_locked(self) -> Dict[str, Any]:
        return {
            "size": len(self._buffer),
            "capacity": self.capacity,
            "high_watermark": self.high_watermark,
            "low_watermark": self.low_watermark,
        }

    def _emit(self, events: List[Tuple[str, Dict[str, Any]]]) -> None:
        for event, metadata in events:
            logger.debug(f"{self.name}: {event} (size={metadata['size']})")
            if self._listener is not None:
                self._listener(self.name, event, metadata)
