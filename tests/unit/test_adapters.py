"""
Unit Tests for Adapters.

Test Aspects Covered:
    ✅ Business Logic: Sources, sinks, retry wrappers, console log, metrics
    ✅ Edge Cases: Idempotent end-of-stream, lazy iteration, retry exhaustion
"""

from __future__ import annotations

import io
from typing import Iterator
from unittest.mock import Mock

import pytest

from bounded_pipeline.adapters import (
    CollectingSink,
    ConsoleAuditLogger,
    ConsoleSink,
    InMemoryMetricsCollector,
    IterableSource,
    RetryingSink,
    RetryingSource,
)
from bounded_pipeline.domain.errors import SinkError, SourceError
from bounded_pipeline.domain.value_objects import END_OF_STREAM
from bounded_pipeline.interfaces import AuditLogger, MetricsCollector, Sink, Source
from bounded_pipeline.resilience.error_handler import ErrorHandler, RetryConfig


@pytest.fixture
def fast_handler() -> ErrorHandler:
    """Three attempts, no real sleeping."""
    return ErrorHandler(RetryConfig(max_attempts=3, base_delay_seconds=0.0), sleep=lambda _: None)


class TestIterableSource:
    """Test cases for IterableSource."""

    def test_produces_items_then_end_of_stream(self) -> None:
        """
        SCENARIO: Source over three items
        EXPECTED: Items in order, then END_OF_STREAM on every later call
        """
        source = IterableSource(["a", "b", "c"])

        produced = [source.next() for _ in range(3)]

        assert produced == ["a", "b", "c"]
        assert source.next() is END_OF_STREAM
        assert source.next() is END_OF_STREAM
        assert source.produced_count == 3

    def test_pulls_lazily(self) -> None:
        """
        SCENARIO: Source over a generator
        EXPECTED: Generator advanced only as far as next() was called
        """
        pulled = []

        def generate() -> Iterator[int]:
            for i in range(100):
                pulled.append(i)
                yield i

        source = IterableSource(generate())
        source.next()
        source.next()

        assert pulled == [0, 1]

    def test_satisfies_protocol(self) -> None:
        """
        SCENARIO: Structural check
        EXPECTED: IterableSource is a Source
        """
        assert isinstance(IterableSource([]), Source)


class TestRetryingSource:
    """Test cases for RetryingSource."""

    def test_retries_transient_failure(self, fast_handler: ErrorHandler) -> None:
        """
        SCENARIO: Wrapped source fails once, then succeeds
        EXPECTED: Item returned
        """
        inner = Mock()
        inner.next.side_effect = [IOError("flaky"), "item"]

        source = RetryingSource(inner, fast_handler)

        assert source.next() == "item"
        assert inner.next.call_count == 2

    def test_exhaustion_becomes_source_error(self, fast_handler: ErrorHandler) -> None:
        """
        SCENARIO: Wrapped source keeps failing
        EXPECTED: SourceError whose cause is the last failure
        """
        inner = Mock()
        inner.next.side_effect = IOError("disk gone")

        source = RetryingSource(inner, fast_handler)

        with pytest.raises(SourceError) as exc_info:
            source.next()
        assert isinstance(exc_info.value.cause, IOError)
        assert inner.next.call_count == 3


class TestSinks:
    """Test cases for ConsoleSink, CollectingSink and RetryingSink."""

    def test_console_sink_prints_items(self) -> None:
        """
        SCENARIO: Two items and close
        EXPECTED: One line per item plus a summary line
        """
        stream = io.StringIO()
        sink = ConsoleSink(stream=stream, prefix="out: ")

        sink.accept({"id": 0})
        sink.accept("text")
        sink.close()

        assert stream.getvalue().splitlines() == [
            "out: {'id': 0}",
            "out: 'text'",
            "out: done (2 items)",
        ]

    def test_collecting_sink_records(self, collecting_sink: CollectingSink) -> None:
        """
        SCENARIO: Items accepted and sink closed
        EXPECTED: Items kept in order, close counted
        """
        collecting_sink.accept(1)
        collecting_sink.accept(2)
        collecting_sink.close()

        assert collecting_sink.items == [1, 2]
        assert collecting_sink.closed
        assert collecting_sink.close_count == 1
        assert isinstance(collecting_sink, Sink)

    def test_retrying_sink_retries(self, fast_handler: ErrorHandler) -> None:
        """
        SCENARIO: Wrapped sink fails twice, then accepts
        EXPECTED: Item accepted once successfully
        """
        inner = Mock()
        inner.accept.side_effect = [IOError("busy"), IOError("busy"), None]

        RetryingSink(inner, fast_handler).accept("x")

        assert inner.accept.call_count == 3

    def test_retrying_sink_exhaustion(self, fast_handler: ErrorHandler) -> None:
        """
        SCENARIO: Wrapped sink never accepts
        EXPECTED: SinkError with the last failure as cause
        """
        inner = Mock()
        inner.accept.side_effect = IOError("broken pipe")

        with pytest.raises(SinkError) as exc_info:
            RetryingSink(inner, fast_handler).accept("x")

        assert isinstance(exc_info.value.cause, IOError)

    def test_retrying_sink_forwards_close(self, fast_handler: ErrorHandler) -> None:
        """
        SCENARIO: close() on the wrapper
        EXPECTED: Wrapped sink closed once
        """
        inner = Mock()

        RetryingSink(inner, fast_handler).close()

        inner.close.assert_called_once_with()


class TestConsoleAuditLogger:
    """Test cases for ConsoleAuditLogger."""

    def test_prefixes_correlation_id(self, output: io.StringIO) -> None:
        """
        SCENARIO: Correlation id set before logging
        EXPECTED: First 8 characters of the id on every line
        """
        logger = ConsoleAuditLogger(stream=output)
        logger.set_correlation_id("abcdef1234567890")

        logger.log_run_start(["source", "stage", "sink"])

        line = output.getvalue().strip()
        assert "[abcdef12]" in line
        assert "source -> stage -> sink" in line

    def test_quiet_mode_skips_flow_control(self, output: io.StringIO) -> None:
        """
        SCENARIO: verbose=False
        EXPECTED: Flow-control and filter events suppressed, stage end kept
        """
        logger = ConsoleAuditLogger(verbose=False, stream=output)

        logger.log_flow_control("a->b", "congested", {"size": 4})
        logger.log_item_filtered("drop", {"id": 1})
        logger.log_stage_end("drop", 5, 3, 0.01)

        lines = output.getvalue().splitlines()
        assert len(lines) == 1
        assert "Completed drop: 5 in, 3 out" in lines[0]

    def test_logs_failed_run(self, console_logger: ConsoleAuditLogger, output: io.StringIO) -> None:
        """
        SCENARIO: Run ends with an error
        EXPECTED: ERROR line with the state and message
        """
        console_logger.log_run_end("FAILED", 0.5, RuntimeError("boom"))

        assert "[ERROR]" in output.getvalue()
        assert "Run FAILED" in output.getvalue()
        assert "boom" in output.getvalue()

    def test_satisfies_protocol(self, console_logger: ConsoleAuditLogger) -> None:
        assert isinstance(console_logger, AuditLogger)


class TestInMemoryMetricsCollector:
    """Test cases for InMemoryMetricsCollector."""

    def test_summarises_series_by_tags(self, metrics_collector: InMemoryMetricsCollector) -> None:
        """
        SCENARIO: Counts for two stages and one gauge
        EXPECTED: Separate series per tag set, totals only for counts
        """
        metrics_collector.record_count("items", 2, {"stage": "a"})
        metrics_collector.record_count("items", 3, {"stage": "a"})
        metrics_collector.record_count("items", 7, {"stage": "b"})
        metrics_collector.record_gauge("peak", 4.0)

        metrics = metrics_collector.get_metrics()

        assert metrics["items{stage=a}"]["total"] == 5
        assert metrics["items{stage=a}"]["samples"] == 2
        assert metrics["items{stage=b}"]["last"] == 7
        assert metrics["peak"]["max"] == 4.0
        assert "total" not in metrics["peak"]
        assert metrics_collector.get_total("items", {"stage": "a"}) == 5
        assert metrics_collector.get_total("missing") == 0

    def test_rejects_kind_change(self, metrics_collector: InMemoryMetricsCollector) -> None:
        """
        SCENARIO: Same series recorded as count then gauge
        EXPECTED: ValueError
        """
        metrics_collector.record_count("x", 1)

        with pytest.raises(ValueError):
            metrics_collector.record_gauge("x", 1.0)

    def test_clear(self, metrics_collector: InMemoryMetricsCollector) -> None:
        metrics_collector.record_timing("t", 0.1)
        metrics_collector.clear()

        assert metrics_collector.get_metrics() == {}
        assert isinstance(metrics_collector, MetricsCollector)
