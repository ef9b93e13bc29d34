"""
Generic Transform Stages.

Function-backed stages for the three shapes a stage can take:
    - MapStage: one output per input
    - FilterStage: the input or nothing
    - FlatMapStage: any number of outputs per input
"""

from __future__ import annotations

from typing import Any, Callable, Iterable, List, Optional


class MapStage:
    """Emit func(item) for every item."""

    def __init__(self, func: Callable[[Any], Any], name: Optional[str] = None) -> None:
        self._func = func
        self._name = name or f"map_{getattr(func, '__name__', 'func')}"

    @property
    def name(self) -> str:
        return self._name

    def apply(self, item: Any) -> List[Any]:
        return [self._func(item)]


class FilterStage:
    """Keep items for which predicate(item) is true."""

    def __init__(
        self, predicate: Callable[[Any], bool], name: Optional[str] = None
    ) -> None:
        self._predicate = predicate
        self._name = name or f"filter_{getattr(predicate, '__name__', 'predicate')}"

    @property
    def name(self) -> str:
        return self._name

    def apply(self, item: Any) -> List[Any]:
        if self._predicate(item):
            return [item]
        return []


class FlatMapStage:
    """Emit every element of func(item), in order."""

    def __init__(
        self, func: Callable[[Any], Iterable[Any]], name: Optional[str] = None
    ) -> None:
        self._func = func
        self._name = name or f"flat_map_{getattr(func, '__name__', 'func')}"

    @property
    def name(self) -> str:
        return self._name

    def apply(self, item: Any) -> List[Any]:
        return list(self._func(item))
