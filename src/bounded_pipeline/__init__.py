"""
Bounded Pipeline - Backpressure-Aware Streaming Pipeline Primitive.

A small streaming toolkit that moves items from a Source through zero or
more transform Stages into a Sink. Adjacent components are connected by
bounded Channels, so a slow consumer suspends its producer instead of
letting buffers grow without limit.

Architecture:
    - Ports & Adapters: Source/Stage/Sink are structural protocols
    - One worker thread per pipeline segment
    - Watermark-based backpressure with hysteresis
    - Configuration-driven pipelines via YAML

Main Components:
    - domain: Run state, results, sentinels and the error taxonomy
    - interfaces: Protocols for sources, stages, sinks and observers
    - channel: Bounded FIFO with high/low watermarks
    - pipeline: Driver that wires and runs the segments
    - stages: Reference transform stages (map, filter, expand, counters)
    - adapters: Reference sources/sinks, console audit logger, metrics
    - config: Pydantic models and YAML loader
    - registry: Named stage factories for config-built pipelines
    - tutorial: Console walkthrough of readable/writable/transform streams

Example:
    >>> from bounded_pipeline import StreamingPipeline
    >>> from bounded_pipeline.adapters import IterableSource, CollectingSink
    >>> sink = CollectingSink()
    >>> result = StreamingPipeline(IterableSource([1, 2, 3]), [], sink).run()
    >>> print(result.state, sink.items)

"""

import logging

__version__ = "0.1.0"


def configure_logging(
    level: int = logging.INFO,
    format: str = "%(asctime)s | %(levelname)-8s | %(threadName)s | %(name)s | %(message)s",
) -> None:
    """
    Configure logging for Bounded Pipeline.

    Call this at application startup to see log messages.
    By default, only WARNING and above are visible.

    Args:
        level: Logging level (default: INFO)
        format: Log message format

    Example:
        >>> import bounded_pipeline
        >>> bounded_pipeline.configure_logging(logging.DEBUG)
    """
    logging.basicConfig(
        level=level,
        format=format,
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    logging.getLogger("bounded_pipeline").setLevel(level)


from bounded_pipeline.channel import BoundedChannel  # noqa: E402
from bounded_pipeline.domain import (  # noqa: E402
    EMPTY,
    END_OF_STREAM,
    Cancelled,
    ChannelClosed,
    ChannelFull,
    PipelineError,
    RunResult,
    RunState,
    SinkError,
    SourceError,
    StageError,
)
from bounded_pipeline.pipeline import StreamingPipeline, build_pipeline  # noqa: E402

__all__ = [
    "configure_logging",
    "BoundedChannel",
    "StreamingPipeline",
    "build_pipeline",
    "RunResult",
    "RunState",
    "EMPTY",
    "END_OF_STREAM",
    "PipelineError",
    "SourceError",
    "StageError",
    "SinkError",
    "ChannelClosed",
    "ChannelFull",
    "Cancelled",
]
