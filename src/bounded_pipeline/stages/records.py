"""
Record Stages.

Stages for dict records shaped like the tutorial dataset:
``{"id": 0, "name": "object 0", "value": 2}``.

Records are never mutated in place; every stage that changes a field
emits a shallow copy, so an item already handed downstream cannot change
under its consumer.
"""

from __future__ import annotations

import logging
from typing import Any, List

from bounded_pipeline.domain.value_objects import Record

logger = logging.getLogger(__name__)


class DropValueStage:
    """Drop records whose ``field`` equals ``value``."""

    def __init__(self, field: str = "value", value: Any = 0) -> None:
        """
        Initialize with the field to inspect and the value to drop.

        Args:
            field: Record key to compare
            value: Records with record[field] == value are dropped
        """
        self.field = field
        self.value = value

    @property
    def name(self) -> str:
        return f"drop_{self.field}_{self.value}"

    def apply(self, item: Record) -> List[Record]:
        if item.get(self.field) == self.value:
            return []
        return [item]


class IncrementValueStage:
    """
    Remember the original value, then increment it.

    Copies ``record[field]`` into ``record[original_field]`` and adds
    ``step`` to ``record[field]``:

        {"id": 0, "name": "object 0", "value": 2}
        -> {"id": 0, "name": "object 0", "value": 3, "originalValue": 2}
    """

    def __init__(
        self,
        field: str = "value",
        original_field: str = "originalValue",
        step: int = 1,
    ) -> None:
        self.field = field
        self.original_field = original_field
        self.step = step

    @property
    def name(self) -> str:
        return f"increment_{self.field}"

    def apply(self, item: Record) -> List[Record]:
        if self.field not in item:
            raise KeyError(f"record has no field {self.field!r}: {item!r}")
        record = dict(item)
        record[self.original_field] = item[self.field]
        record[self.field] = item[self.field] + self.step
        return [record]


class SequenceStage:
    """
    Stamp each record with a running counter.

    The counter lives on the instance and starts at ``start`` for every
    pipeline run built from a fresh instance.
    """

    def __init__(self, field: str = "seq", start: int = 0) -> None:
        self.field = field
        self.start = start
        self._next = start

    @property
    def name(self) -> str:
        return f"sequence_{self.field}"

    def apply(self, item: Record) -> List[Record]:
        record = dict(item)
        record[self.field] = self._next
        self._next += 1
        return [record]

    def close(self) -> None:
        logger.debug(f"{self.name}: stamped {self._next - self.start} records")
