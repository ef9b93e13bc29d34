"""
Stages Package - Reference Transform Stages.

Generic:
    - MapStage, FilterStage, FlatMapStage

Records (tutorial dataset):
    - DropValueStage: Filter records by a field value
    - IncrementValueStage: Keep originalValue, increment value
    - SequenceStage: Running counter (stateful)
"""

from bounded_pipeline.stages.records import (
    DropValueStage,
    IncrementValueStage,
    SequenceStage,
)
from bounded_pipeline.stages.transform import FilterStage, FlatMapStage, MapStage

__all__ = [
    "MapStage",
    "FilterStage",
    "FlatMapStage",
    "DropValueStage",
    "IncrementValueStage",
    "SequenceStage",
]
