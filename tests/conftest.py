"""
Pytest Configuration and Shared Fixtures.

This module contains fixtures available to all tests.
"""

from __future__ import annotations

import io
from pathlib import Path
from typing import List

import pytest

from bounded_pipeline.adapters.console_logger import ConsoleAuditLogger
from bounded_pipeline.adapters.metrics_collector import InMemoryMetricsCollector
from bounded_pipeline.adapters.sinks import CollectingSink
from bounded_pipeline.config.models import ChannelConfig, PipelineConfig
from bounded_pipeline.domain.value_objects import Record
from bounded_pipeline.tutorial import make_records


@pytest.fixture
def sample_config_path() -> Path:
    """Path to sample configuration file."""
    return Path(__file__).parent / "fixtures" / "sample_config.yaml"


@pytest.fixture
def tutorial_records() -> List[Record]:
    """The five tutorial records, values 2, 0, 4, 0, 2."""
    return make_records()


@pytest.fixture
def output() -> io.StringIO:
    """Captured console output."""
    return io.StringIO()


@pytest.fixture
def console_logger(output: io.StringIO) -> ConsoleAuditLogger:
    """Create console logger writing to the captured output."""
    return ConsoleAuditLogger(verbose=True, stream=output)


@pytest.fixture
def metrics_collector() -> InMemoryMetricsCollector:
    """Create metrics collector for testing."""
    return InMemoryMetricsCollector()


@pytest.fixture
def collecting_sink() -> CollectingSink:
    """Create an in-memory sink."""
    return CollectingSink()


@pytest.fixture
def small_channel_config() -> ChannelConfig:
    """Channel that congests after four items and drains at one."""
    return ChannelConfig(capacity=4, high_watermark=4, low_watermark=1)


@pytest.fixture
def default_config() -> PipelineConfig:
    """Create default pipeline configuration."""
    return PipelineConfig()
