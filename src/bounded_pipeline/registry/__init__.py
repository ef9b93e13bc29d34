"""
Registry Package - Named Stage Factories.

    - StageRegistry: Thread-safe name -> factory mapping
    - default_registry(): Registry with the built-in record stages
"""

from bounded_pipeline.registry.stage_registry import (
    StageInfo,
    StageRegistry,
    UnknownStageError,
    default_registry,
    register_builtin_stages,
)

__all__ = [
    "StageInfo",
    "StageRegistry",
    "UnknownStageError",
    "default_registry",
    "register_builtin_stages",
]
