"""
Sink Protocol.

A sink consumes items one at a time, strictly in the order received.
close() is called exactly once after the last accept() of a completed run.
"""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class Sink(Protocol):
    """Abstract interface for item sinks."""

    def accept(self, item: Any) -> Any:
        """Consume one item. May block."""
        ...

    def close(self) -> None:
        """Called once after the final item of a completed run."""
        ...
