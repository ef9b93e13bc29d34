"""
In-Memory Metrics Collector.

Keeps one series per metric name and tag set. get_metrics() flattens
every series into a summary keyed as ``name{tag=value,...}``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from threading import Lock
from typing import Any, Dict, List, Optional, Tuple

SeriesKey = Tuple[str, Tuple[Tuple[str, str], ...]]


@dataclass
class _Series:
    kind: str
    values: List[float] = field(default_factory=list)

    def summary(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {
            "type": self.kind,
            "samples": len(self.values),
            "last": self.values[-1],
            "max": max(self.values),
        }
        if self.kind != "gauge":
            result["total"] = sum(self.values)
        return result


class InMemoryMetricsCollector:
    """Thread-safe in-memory metrics collector."""

    def __init__(self) -> None:
        self._series: Dict[SeriesKey, _Series] = {}
        self._lock = Lock()

    def record_timing(
        self,
        name: str,
        duration_seconds: float,
        tags: Optional[Dict[str, str]] = None,
    ) -> None:
        self._record(name, "timing", duration_seconds, tags)

    def record_count(
        self,
        name: str,
        value: int,
        tags: Optional[Dict[str, str]] = None,
    ) -> None:
        self._record(name, "count", value, tags)

    def record_gauge(
        self,
        name: str,
        value: float,
        tags: Optional[Dict[str, str]] = None,
    ) -> None:
        self._record(name, "gauge", value, tags)

    def get_metrics(self) -> Dict[str, Any]:
        """Summaries of every recorded series."""
        with self._lock:
            return {
                self._format_key(key): series.summary()
                for key, series in self._series.items()
                if series.values
            }

    def get_total(self, name: str, tags: Optional[Dict[str, str]] = None) -> float:
        """Sum of all samples of one series (0 if never recorded)."""
        with self._lock:
            series = self._series.get(self._key(name, tags))
            return sum(series.values) if series else 0

    def clear(self) -> None:
        with self._lock:
            self._series.clear()

    def _record(
        self,
        name: str,
        kind: str,
        value: float,
        tags: Optional[Dict[str, str]],
    ) -> None:
        key = self._key(name, tags)
        with self._lock:
            series = self._series.get(key)
            if series is None:
                series = self._series[key] = _Series(kind=kind)
            elif series.kind != kind:
                raise ValueError(
                    f"metric {self._format_key(key)} already recorded as {series.kind}"
                )
            series.values.append(value)

    @staticmethod
    def _key(name: str, tags: Optional[Dict[str, str]]) -> SeriesKey:
        return name, tuple(sorted((tags or {}).items()))

    @staticmethod
    def _format_key(key: SeriesKey) -> str:
        name, tags = key
        if not tags:
            return name
        return name + "{" + ",".join(f"{k}={v}" for k, v in tags) + "}"
