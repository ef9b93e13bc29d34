"""
Pipeline Factory - Build a StreamingPipeline from PipelineConfig.
"""

from __future__ import annotations

import logging
from typing import Optional

from bounded_pipeline.adapters.sinks import RetryingSink
from bounded_pipeline.config.models import PipelineConfig
from bounded_pipeline.interfaces.audit_logger import AuditLogger
from bounded_pipeline.interfaces.metrics_collector import MetricsCollector
from bounded_pipeline.interfaces.sink import Sink
from bounded_pipeline.interfaces.source import Source
from bounded_pipeline.pipeline.streaming_pipeline import StreamingPipeline
from bounded_pipeline.registry.stage_registry import StageRegistry, default_registry
from bounded_pipeline.resilience.error_handler import ErrorHandler, RetryConfig

logger = logging.getLogger(__name__)


def build_pipeline(
    config: PipelineConfig,
    source: Source,
    sink: Sink,
    registry: Optional[StageRegistry] = None,
    audit_logger: Optional[AuditLogger] = None,
    metrics_collector: Optional[MetricsCollector] = None,
    name: str = "pipeline",
) -> StreamingPipeline:
    """
    Build a pipeline from configuration.

    Disabled stages are skipped. Stage instances are created when the
    pipeline starts, so every pipeline built from the same config gets
    fresh stage state.

    Args:
        config: Validated pipeline configuration
        source: Item producer
        sink: Item consumer; wrapped in a RetryingSink if ``sink_retry`` is set
        registry: Stage registry (default: built-in stages)
        audit_logger: Optional audit logger
        metrics_collector: Optional metrics collector
        name: Pipeline name

    Returns:
        A pipeline ready to start()

    Raises:
        UnknownStageError: If a stage name is not registered
    """
    registry = registry or default_registry()
    stage_configs = config.enabled_stages

    if config.sink_retry is not None:
        handler = ErrorHandler(RetryConfig.from_policy(config.sink_retry))
        sink = RetryingSink(sink, handler)

    logger.debug(
        f"Building {name} with stages {[s.name for s in stage_configs]} "
        f"(skipped {len(config.stages) - len(stage_configs)} disabled)"
    )

    return StreamingPipeline(
        source=source,
        stages=[registry.factory_for(stage) for stage in stage_configs],
        sink=sink,
        channel_config=config.channel,
        stage_channel_configs=[stage.channel for stage in stage_configs],
        sink_channel_config=config.sink_channel,
        audit_logger=audit_logger,
        metrics_collector=metrics_collector,
        name=name,
    )
