"""
Source Protocol.

A source produces a lazy, finite sequence of items on demand.

The source is responsible for:
    - Returning one fully built item per call
    - Returning END_OF_STREAM once exhausted, and on every call after that
    - Owning its external resources (file handles, connections)

Design Notes:
    - Uses typing.Protocol for structural subtyping
    - next() may block while producing (simulated or real I/O)
    - Failures are raised as SourceError(cause); the pipeline wraps
      anything else it catches
"""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class Source(Protocol):
    """Abstract interface for item sources."""

    def next(self) -> Any:
        """
        Produce the next item.

        Returns:
            The next item, or END_OF_STREAM when the source is exhausted
        """
        ...
