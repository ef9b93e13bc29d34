"""
Interfaces Layer - Structural Protocols for Pipeline Collaborators.

Any object with the right methods qualifies; there is no base class to
inherit from.

Protocols:
    - Source: next() -> item | END_OF_STREAM
    - Stage: apply(item) -> iterable of items
    - Sink: accept(item), close()
    - AuditLogger: Run and flow-control event log
    - MetricsCollector: Timings, counts and gauges
"""

from bounded_pipeline.interfaces.audit_logger import AuditLogger
from bounded_pipeline.interfaces.metrics_collector import MetricsCollector
from bounded_pipeline.interfaces.sink import Sink
from bounded_pipeline.interfaces.source import Source
from bounded_pipeline.interfaces.stage import Stage

__all__ = ["Source", "Stage", "Sink", "AuditLogger", "MetricsCollector"]
