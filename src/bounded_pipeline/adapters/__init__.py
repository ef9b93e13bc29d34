"""
Adapters Package - Reference Implementations of the Interfaces.

Sources:
    - IterableSource: Lazy source over any iterable
    - RetryingSource: Retry wrapper

Sinks:
    - ConsoleSink: Prints items, optional per-item delay
    - CollectingSink: Keeps items in memory
    - RetryingSink: Retry wrapper

Observability:
    - ConsoleAuditLogger: Console event log
    - InMemoryMetricsCollector: In-memory metrics

Design Principles:
    - All adapters implement their respective protocols
    - Easily swappable via Dependency Injection
    - No pipeline logic in adapters
"""

from bounded_pipeline.adapters.console_logger import ConsoleAuditLogger
from bounded_pipeline.adapters.metrics_collector import InMemoryMetricsCollector
from bounded_pipeline.adapters.sinks import CollectingSink, ConsoleSink, RetryingSink
from bounded_pipeline.adapters.sources import IterableSource, RetryingSource

__all__ = [
    "IterableSource",
    "RetryingSource",
    "ConsoleSink",
    "CollectingSink",
    "RetryingSink",
    "ConsoleAuditLogger",
    "InMemoryMetricsCollector",
]
