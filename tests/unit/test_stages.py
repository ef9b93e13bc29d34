"""
Unit Tests for Stages.

Test Aspects Covered:
    ✅ Business Logic: Map, filter, expand, record transforms
    ✅ Edge Cases: Missing fields, input not mutated, stateful counter
"""

from __future__ import annotations

from typing import List

import pytest

from bounded_pipeline.domain.value_objects import Record
from bounded_pipeline.interfaces.stage import Stage
from bounded_pipeline.stages import (
    DropValueStage,
    FilterStage,
    FlatMapStage,
    IncrementValueStage,
    MapStage,
    SequenceStage,
)


class TestGenericStages:
    """Function-backed stages."""

    def test_map_emits_one_output(self) -> None:
        """
        SCENARIO: MapStage doubling numbers
        EXPECTED: Exactly one output per input
        """
        stage = MapStage(lambda x: x * 2, name="double")

        assert stage.apply(21) == [42]
        assert stage.name == "double"

    def test_filter_keeps_or_drops(self) -> None:
        """
        SCENARIO: FilterStage keeping even numbers
        EXPECTED: Even input kept, odd input dropped
        """
        def is_even(x: int) -> bool:
            return x % 2 == 0

        stage = FilterStage(is_even)

        assert stage.apply(4) == [4]
        assert stage.apply(3) == []
        assert stage.name == "filter_is_even"

    def test_flat_map_expands_in_order(self) -> None:
        """
        SCENARIO: FlatMapStage repeating an item n times
        EXPECTED: Outputs in emission order, empty for n = 0
        """
        stage = FlatMapStage(lambda n: [n] * n)

        assert stage.apply(3) == [3, 3, 3]
        assert stage.apply(0) == []

    def test_stages_satisfy_protocol(self) -> None:
        """
        SCENARIO: Structural protocol check
        EXPECTED: Every shipped stage is a Stage without inheriting from one
        """
        stages = [
            MapStage(str),
            FilterStage(bool),
            FlatMapStage(list),
            DropValueStage(),
            IncrementValueStage(),
            SequenceStage(),
        ]

        assert all(isinstance(stage, Stage) for stage in stages)


class TestDropValueStage:
    """Filtering the tutorial dataset."""

    def test_drops_zero_values(self, tutorial_records: List[Record]) -> None:
        """
        SCENARIO: Records with values 2, 0, 4, 0, 2
        EXPECTED: Records with values 2, 4, 2 remain, in order
        """
        stage = DropValueStage(field="value", value=0)

        kept = [out for record in tutorial_records for out in stage.apply(record)]

        assert [r["value"] for r in kept] == [2, 4, 2]
        assert [r["id"] for r in kept] == [0, 2, 4]

    def test_missing_field_is_kept(self) -> None:
        """
        SCENARIO: Record without the inspected field
        EXPECTED: Kept
        """
        stage = DropValueStage(field="value", value=0)

        assert stage.apply({"id": 1}) == [{"id": 1}]


class TestIncrementValueStage:
    """Transforming the tutorial dataset."""

    def test_copies_original_and_increments(self) -> None:
        """
        SCENARIO: {id: 0, name: "object 0", value: 2}
        EXPECTED: {id: 0, name: "object 0", value: 3, originalValue: 2}
        """
        stage = IncrementValueStage()

        result = stage.apply({"id": 0, "name": "object 0", "value": 2})

        assert result == [{"id": 0, "name": "object 0", "value": 3, "originalValue": 2}]

    def test_does_not_mutate_input(self) -> None:
        """
        SCENARIO: Input record handed to the stage
        EXPECTED: Input unchanged, output is a new dict
        """
        record = {"id": 1, "name": "object 1", "value": 5}
        stage = IncrementValueStage(step=10)

        [out] = stage.apply(record)

        assert record == {"id": 1, "name": "object 1", "value": 5}
        assert out["value"] == 15
        assert out is not record

    def test_missing_field_raises(self) -> None:
        """
        SCENARIO: Record without the value field
        EXPECTED: KeyError naming the field
        """
        with pytest.raises(KeyError, match="value"):
            IncrementValueStage().apply({"id": 1})


class TestSequenceStage:
    """Stateful running counter."""

    def test_stamps_running_counter(self) -> None:
        """
        SCENARIO: Three records through one instance
        EXPECTED: seq 10, 11, 12
        """
        stage = SequenceStage(field="seq", start=10)

        outputs = [stage.apply({"id": i})[0] for i in range(3)]

        assert [o["seq"] for o in outputs] == [10, 11, 12]

    def test_fresh_instance_restarts(self) -> None:
        """
        SCENARIO: Second instance
        EXPECTED: Counter starts over
        """
        SequenceStage().apply({"id": 0})

        assert SequenceStage().apply({"id": 0})[0]["seq"] == 0
