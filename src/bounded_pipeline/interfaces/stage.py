"""
Stage Protocol.

Defines the interface for transform stages. A stage turns one input item
into zero (filter), one (map) or many (expand) output items.

Design Notes:
    - apply() is never called concurrently on the same instance, so
      internal counters need no locking
    - Output must be deterministic given the input and prior state
    - Stages are order-preserving
    - An optional close() is called when the run ends
"""

from __future__ import annotations

from typing import Any, Iterable, Protocol, runtime_checkable


@runtime_checkable
class Stage(Protocol):
    """Abstract interface for transform stages."""

    @property
    def name(self) -> str:
        """Name used in logs, reports and channel names."""
        ...

    def apply(self, item: Any) -> Iterable[Any]:
        """
        Transform one input item.

        Args:
            item: Input item

        Returns:
            Zero or more output items, in emission order
        """
        ...
