"""
Channel Package - Bounded Queue with Backpressure.

Components:
    - BoundedChannel: FIFO with capacity, high/low watermarks, pause flag
      and end-of-stream marker
"""

from bounded_pipeline.channel.bounded_channel import (
    CONGESTED,
    DRAINED,
    PAUSED,
    RESUMED,
    BoundedChannel,
    ChannelListener,
)

__all__ = [
    "BoundedChannel",
    "ChannelListener",
    "CONGESTED",
    "DRAINED",
    "PAUSED",
    "RESUMED",
]
