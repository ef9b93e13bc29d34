"""
Value Objects for Domain Layer.

Stream markers and immutable statistics snapshots. None of these carry
identity; two snapshots with the same numbers are the same snapshot.
"""

from __future__ import annotations

from typing import Any, Dict

from pydantic import BaseModel, Field


class _Marker:
    """Singleton marker returned in place of an item."""

    __slots__ = ("_label",)

    def __init__(self, label: str) -> None:
        self._label = label

    def __repr__(self) -> str:
        return self._label

    def __bool__(self) -> bool:
        return False

    def __reduce__(self) -> str:
        return self._label


# No further items will ever be produced on this source or channel.
END_OF_STREAM = _Marker("END_OF_STREAM")

# Channel has nothing buffered right now but is still open.
EMPTY = _Marker("EMPTY")

# Records in the tutorial domain: id, name, value, originalValue
Record = Dict[str, Any]


class ChannelStats(BaseModel):
    """Point-in-time counters for a single channel."""

    name: str
    capacity: int = Field(ge=1)
    high_watermark: int = Field(ge=1)
    low_watermark: int = Field(ge=0)
    size: int = Field(default=0, ge=0)
    enqueued: int = Field(default=0, ge=0)
    dequeued: int = Field(default=0, ge=0)
    discarded: int = Field(default=0, ge=0)
    peak_size: int = Field(default=0, ge=0)
    congestion_count: int = Field(
        default=0, ge=0, description="Times the high watermark was reached"
    )
    congested: bool = False
    paused: bool = False
    end_of_stream: bool = False

    model_config = {"frozen": True}
