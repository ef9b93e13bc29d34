"""
Stage Registry - Named Stage Factories.

Maps the stage names used in configuration files to factories that build
stage instances from the ``params`` mapping of a StageConfig.

Usage:
    registry = StageRegistry()
    registry.register("drop_value", DropValueStage, "1.0.0")
    stage = registry.create("drop_value", {"field": "value", "value": 0})

    # Or start from the built-in stages
    registry = default_registry()
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from threading import RLock
from typing import TYPE_CHECKING, Any, Callable, Dict, List, Mapping, Optional

from bounded_pipeline.stages.records import (
    DropValueStage,
    IncrementValueStage,
    SequenceStage,
)

if TYPE_CHECKING:
    from bounded_pipeline.config.models import StageConfig
    from bounded_pipeline.interfaces.stage import Stage

logger = logging.getLogger(__name__)

StageFactory = Callable[..., "Stage"]


class UnknownStageError(KeyError):
    """Raised when a configuration names a stage nobody registered."""


@dataclass
class StageInfo:
    """Metadata about a registered stage factory."""

    name: str
    version: str
    factory: StageFactory
    description: str = ""
    tags: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "name": self.name,
            "version": self.version,
            "description": self.description,
            "tags": self.tags,
            "factory": getattr(self.factory, "__name__", repr(self.factory)),
        }


class StageRegistry:
    """
    Thread-safe registry of stage factories.

    Supports:
        - Registration of custom stages by name
        - Version tracking per stage
        - Building fresh stage instances from config params
    """

    def __init__(self) -> None:
        self._stages: Dict[str, StageInfo] = {}
        self._lock = RLock()

    def register(
        self,
        name: str,
        factory: StageFactory,
        version: str = "1.0.0",
        description: str = "",
        tags: Optional[List[str]] = None,
    ) -> None:
        """
        Register a stage factory.

        Args:
            name: Unique name used in configuration
            factory: Callable taking the stage params as keyword arguments
            version: Version string
            description: Optional description
            tags: Optional tags for categorization

        Raises:
            ValueError: If the name is already registered
        """
        with self._lock:
            if name in self._stages:
                raise ValueError(
                    f"Stage '{name}' is already registered. Use unregister() first."
                )
            self._stages[name] = StageInfo(
                name=name,
                version=version,
                factory=factory,
                description=description,
                tags=tags or [],
            )
        logger.debug(f"Registered stage: {name} v{version}")

    def unregister(self, name: str) -> bool:
        """Remove a stage; False if it was not registered."""
        with self._lock:
            if name not in self._stages:
                return False
            del self._stages[name]
        logger.debug(f"Unregistered stage: {name}")
        return True

    def is_registered(self, name: str) -> bool:
        with self._lock:
            return name in self._stages

    def list_all(self) -> Dict[str, StageInfo]:
        with self._lock:
            return dict(self._stages)

    def create(self, name: str, params: Optional[Mapping[str, Any]] = None) -> "Stage":
        """
        Build a new stage instance.

        Args:
            name: Registered stage name
            params: Keyword arguments for the factory

        Returns:
            Fresh stage instance

        Raises:
            UnknownStageError: If the name is not registered
            TypeError: If the params do not fit the factory
        """
        with self._lock:
            info = self._stages.get(name)
        if info is None:
            raise UnknownStageError(
                f"Unknown stage '{name}'. Registered: {sorted(self.list_all())}"
            )
        return info.factory(**dict(params or {}))

    def factory_for(self, config: "StageConfig") -> Callable[[], "Stage"]:
        """
        Zero-argument factory for a configured stage.

        The name is checked now; the instance is built when the pipeline
        starts.
        """
        if not self.is_registered(config.name):
            raise UnknownStageError(f"Unknown stage '{config.name}'")
        params = dict(config.params)
        return lambda: self.create(config.name, params)


def register_builtin_stages(registry: StageRegistry) -> StageRegistry:
    """Register the record stages shipped with the package."""
    registry.register(
        "drop_value",
        DropValueStage,
        description="Drop records whose field equals a value",
        tags=["filter"],
    )
    registry.register(
        "increment_value",
        IncrementValueStage,
        description="Copy a field into originalValue and increment it",
        tags=["transform"],
    )
    registry.register(
        "sequence",
        SequenceStage,
        description="Stamp records with a running counter",
        tags=["transform", "stateful"],
    )
    return registry


def default_registry() -> StageRegistry:
    """New registry holding the built-in stages."""
    return register_builtin_stages(StageRegistry())
