"""
Tutorial - Readable, Writable and Transform Streams on the Console.

Five small records flow through a pipeline and are printed as they
arrive. Each demo isolates one idea:

    readable      a source on its own, drained into the console
    writable      a slow sink, showing per-item latency
    transform     increment ``value`` and keep ``originalValue``
    flow-control  pause delivery, watch the buffer fill, resume
    pipe          source -> filter -> transform -> sink
    config        stages, channels and timeout from a YAML file

Run ``bounded-pipeline-tutorial pipe`` (or any other demo name), or
``bounded-pipeline-tutorial config --config pipeline.yaml [--profile NAME]``.
"""

from __future__ import annotations

import argparse
import logging
import sys
import time
from pathlib import Path
from typing import IO, Callable, Dict, List, Optional, Sequence

import yaml

import bounded_pipeline
from bounded_pipeline.adapters.console_logger import ConsoleAuditLogger
from bounded_pipeline.adapters.sinks import ConsoleSink
from bounded_pipeline.adapters.sources import IterableSource
from bounded_pipeline.config.loader import load_config
from bounded_pipeline.config.models import ChannelConfig, PipelineConfig
from bounded_pipeline.domain.entities import RunResult
from bounded_pipeline.domain.value_objects import Record
from bounded_pipeline.pipeline.factory import build_pipeline
from bounded_pipeline.pipeline.streaming_pipeline import StreamingPipeline
from bounded_pipeline.stages.records import DropValueStage, IncrementValueStage

TUTORIAL_VALUES = (2, 0, 4, 0, 2)


def make_records(values: Sequence[int] = TUTORIAL_VALUES) -> List[Record]:
    """The tutorial dataset: ``{"id": i, "name": "object i", "value": v}``."""
    return [
        {"id": index, "name": f"object {index}", "value": value}
        for index, value in enumerate(values)
    ]


def readable_demo(stream: Optional[IO[str]] = None) -> RunResult:
    """Drain a source straight into the console."""
    pipeline = StreamingPipeline(
        IterableSource(make_records(), name="records"),
        [],
        ConsoleSink(stream=stream, prefix="data: "),
    )
    return pipeline.run()


def writable_demo(delay_seconds: float = 0.5, stream: Optional[IO[str]] = None) -> RunResult:
    """Write every record with an artificial delay per item."""
    pipeline = StreamingPipeline(
        IterableSource(make_records(), name="records"),
        [],
        ConsoleSink(delay_seconds=delay_seconds, stream=stream, prefix="write: "),
    )
    return pipeline.run()


def transform_demo(stream: Optional[IO[str]] = None) -> RunResult:
    """Copy value into originalValue and increment value."""
    pipeline = StreamingPipeline(
        IterableSource(make_records(), name="records"),
        [IncrementValueStage()],
        ConsoleSink(stream=stream, prefix="transformed: "),
    )
    return pipeline.run()


def flow_control_demo(
    pause_seconds: float = 1.0,
    stream: Optional[IO[str]] = None,
) -> RunResult:
    """
    Pause delivery, let the producer buffer, then resume.

    The source keeps producing while the sink is paused until the
    sink-facing channel reaches its high watermark. Nothing is printed
    until resume().
    """
    audit_logger = ConsoleAuditLogger(verbose=True, stream=stream)
    pipeline = StreamingPipeline(
        IterableSource(make_records(), name="records"),
        [],
        ConsoleSink(stream=stream, prefix="data: "),
        channel_config=ChannelConfig(capacity=3, high_watermark=3, low_watermark=1),
        audit_logger=audit_logger,
    )

    pipeline.pause()
    pipeline.start()
    time.sleep(pause_seconds)

    stats = pipeline.channels[-1].stats()
    print(
        f"paused for {pause_seconds:.1f}s: {stats.size} buffered, "
        f"congested={stats.congested}",
        file=stream,
    )

    pipeline.resume()
    return pipeline.wait()


def pipe_demo(stream: Optional[IO[str]] = None) -> RunResult:
    """Drop zero values, transform the rest, print them."""
    pipeline = StreamingPipeline(
        IterableSource(make_records(), name="records"),
        [DropValueStage(field="value", value=0), IncrementValueStage()],
        ConsoleSink(stream=stream, prefix="piped: "),
        audit_logger=ConsoleAuditLogger(verbose=False, stream=stream),
    )
    return pipeline.run()


def config_demo(
    config: PipelineConfig,
    delay_seconds: float = 0.0,
    stream: Optional[IO[str]] = None,
) -> RunResult:
    """
    Run the tutorial records through stages named in a YAML config.

    ``global.join_timeout_seconds`` bounds the run; a run still active
    after it is cancelled.
    """
    pipeline = build_pipeline(
        config,
        IterableSource(make_records(), name="records"),
        ConsoleSink(delay_seconds=delay_seconds, stream=stream, prefix="configured: "),
        audit_logger=ConsoleAuditLogger(verbose=False, stream=stream),
        name="configured",
    )
    timeout = config.global_settings.join_timeout_seconds
    try:
        return pipeline.run(timeout)
    except TimeoutError:
        print(f"configured run exceeded {timeout}s, cancelling", file=stream)
        pipeline.cancel()
        return pipeline.wait()


DEMOS: Dict[str, Callable[[argparse.Namespace], RunResult]] = {
    "readable": lambda args: readable_demo(),
    "writable": lambda args: writable_demo(delay_seconds=args.delay),
    "transform": lambda args: transform_demo(),
    "flow-control": lambda args: flow_control_demo(pause_seconds=args.pause),
    "pipe": lambda args: pipe_demo(),
    "config": lambda args: config_demo(args.pipeline_config, delay_seconds=args.delay),
}


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Command-line entry point; returns the process exit code."""
    parser = argparse.ArgumentParser(
        prog="bounded-pipeline-tutorial",
        description="Console walkthrough of readable, writable and transform streams.",
    )
    parser.add_argument("demo", choices=sorted(DEMOS), help="demo to run")
    parser.add_argument("--delay", type=float, default=None, help="sink seconds per item")
    parser.add_argument("--pause", type=float, default=1.0, help="flow-control: seconds paused")
    parser.add_argument("--config", type=Path, help="config: pipeline YAML file")
    parser.add_argument("--profile", help="config: profile under <config dir>/config/profiles")
    parser.add_argument("--log-level", help="logging level (default: config file, else WARNING)")
    args = parser.parse_args(argv)

    if args.demo == "config" and args.config is None:
        parser.error("the config demo needs --config")
    if args.profile and args.config is None:
        parser.error("--profile needs --config")

    args.pipeline_config = None
    if args.config is not None:
        config_path = args.config.resolve()
        try:
            args.pipeline_config = load_config(
                config_path, profile=args.profile, base_path=config_path.parent
            )
        except (OSError, ValueError, yaml.YAMLError) as e:
            print(f"cannot load {args.config}: {e}", file=sys.stderr)
            return 1

    level_name = args.log_level or (
        args.pipeline_config.global_settings.log_level if args.pipeline_config else "WARNING"
    )
    bounded_pipeline.configure_logging(getattr(logging, level_name.upper(), logging.WARNING))

    if args.delay is None:
        args.delay = 0.5 if args.demo == "writable" else 0.0

    result = DEMOS[args.demo](args)
    if not result.completed:
        print(f"{args.demo} failed: {result.error}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
