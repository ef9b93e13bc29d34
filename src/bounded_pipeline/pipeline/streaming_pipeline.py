"""
Streaming Pipeline - Main Orchestrator.

Wires Source -> [Channel -> Stage]* -> Channel -> Sink and drives the
chain to exactly one terminal outcome.

Scheduling:
    One worker thread per segment. The source worker waits for its output
    channel to leave the Congested state *before* calling next(), so a
    stalled consumer bounds how many items the source is asked for. Stage
    and sink workers block on their input channel and forward
    END_OF_STREAM only after everything ahead of it was handled.

Failure:
    The first error wins. It halts the run, aborts every channel (buffered
    items are discarded, waiters released) and no further next(), apply()
    or accept() calls are issued. Calls already in flight finish.
"""

from __future__ import annotations

import logging
import threading
import time
import uuid
from typing import Any, Callable, Dict, List, Optional, Sequence, Union

from bounded_pipeline.channel.bounded_channel import BoundedChannel
from bounded_pipeline.config.models import ChannelConfig
from bounded_pipeline.domain.entities import RunResult, RunState, StageReport
from bounded_pipeline.domain.errors import (
    Cancelled,
    ChannelClosed,
    PipelineError,
    PipelineStateError,
    SinkError,
    SourceError,
    StageError,
)
from bounded_pipeline.domain.value_objects import END_OF_STREAM
from bounded_pipeline.interfaces.audit_logger import AuditLogger
from bounded_pipeline.interfaces.metrics_collector import MetricsCollector
from bounded_pipeline.interfaces.sink import Sink
from bounded_pipeline.interfaces.source import Source
from bounded_pipeline.interfaces.stage import Stage

logger = logging.getLogger(__name__)

# A stage instance, or a zero-argument factory building one at start()
StageSpec = Union[Stage, Callable[[], Stage]]


def _segment_name(component: Any, default: str) -> str:
    name = getattr(component, "name", None)
    return name if isinstance(name, str) and name else default


class StreamingPipeline:
    """Single-use driver for one Source, zero or more Stages and one Sink."""

    def __init__(
        self,
        source: Source,
        stages: Sequence[StageSpec],
        sink: Sink,
        channel_config: Optional[ChannelConfig] = None,
        stage_channel_configs: Optional[Sequence[Optional[ChannelConfig]]] = None,
        sink_channel_config: Optional[ChannelConfig] = None,
        audit_logger: Optional[AuditLogger] = None,
        metrics_collector: Optional[MetricsCollector] = None,
        name: str = "pipeline",
    ) -> None:
        """
        Initialize pipeline with all collaborators.

        Args:
            source: Item producer (driven, not owned)
            stages: Ordered stage instances or zero-argument stage factories
            sink: Item consumer (driven, not owned)
            channel_config: Default capacity/watermarks for every channel
            stage_channel_configs: Per-stage overrides for the channel
                feeding that stage (None entries use the default)
            sink_channel_config: Override for the channel feeding the sink
            audit_logger: For run and flow-control events (optional)
            metrics_collector: For run metrics (optional)
            name: Pipeline name, used for worker thread names

        Raises:
            TypeError: If a stage spec is neither a stage nor a factory
            ValueError: If there are more channel overrides than stages
        """
        for spec in stages:
            if not hasattr(spec, "apply") and not callable(spec):
                raise TypeError(f"not a stage or stage factory: {spec!r}")
        if stage_channel_configs is not None and len(stage_channel_configs) > len(stages):
            raise ValueError("more stage channel configs than stages")

        self.source = source
        self.sink = sink
        self.name = name
        self.audit_logger = audit_logger
        self.metrics_collector = metrics_collector
        self.correlation_id = str(uuid.uuid4())

        self._stage_specs: List[StageSpec] = list(stages)
        self._channel_config = channel_config or ChannelConfig()
        self._stage_channel_configs = list(stage_channel_configs or [])
        self._sink_channel_config = sink_channel_config

        self._stages: List[Stage] = []
        self._channels: List[BoundedChannel] = []
        self._reports: List[StageReport] = []
        self._threads: List[threading.Thread] = []

        self._state = RunState.IDLE
        self._state_lock = threading.Lock()
        self._halted = threading.Event()
        # Guarded by _state_lock; decides whether a collaborator call may start
        self._stopping = False
        self._done = threading.Event()
        self._error: Optional[PipelineError] = None
        self._sink_closed = False
        self._pause_requested = False
        self._result: Optional[RunResult] = None

        self._produced_count = 0
        self._delivered_count = 0
        self._started_at: Optional[float] = None

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    @property
    def state(self) -> RunState:
        with self._state_lock:
            return self._state

    @property
    def channels(self) -> List[BoundedChannel]:
        """Channels in flow order; empty before start()."""
        return list(self._channels)

    @property
    def result(self) -> Optional[RunResult]:
        return self._result

    def start(self) -> None:
        """
        Build stages and channels and start one worker per segment.

        A stage factory that raises ends the run as FAILED with a
        StageError; no worker is started and wait() returns that result.

        Raises:
            PipelineStateError: If this pipeline was already started,
                cancelled or finished
        """
        with self._state_lock:
            if self._state != RunState.IDLE:
                raise PipelineStateError(
                    f"pipeline {self.name} is {self._state.value}; runs are not reusable"
                )
            self._state = RunState.RUNNING

        self._started_at = time.perf_counter()
        try:
            for index, spec in enumerate(self._stage_specs):
                stage = self._instantiate(spec)
                self._stages.append(stage)
                self._reports.append(
                    StageReport(stage_name=_segment_name(stage, f"stage_{index}"))
                )
        except Exception as e:
            self._fail(StageError(e, stage_name=f"stage_{len(self._stages)}"))
            self._finish()
            return

        self._channels = self._build_channels()
        if self._halted.is_set():
            # cancel() raced with start() before the channels existed
            for channel in self._channels:
                channel.abort()
        elif self._pause_requested:
            self._channels[-1].pause()

        segment_names = self._segment_names()
        if self.audit_logger:
            self.audit_logger.set_correlation_id(self.correlation_id)
            self.audit_logger.log_run_start(segment_names)
        logger.info(f"{self.name}: starting {' -> '.join(segment_names)}")

        self._threads.append(
            threading.Thread(
                target=self._guarded,
                args=(self._run_source, self._channels[0]),
                name=f"{self.name}-source",
                daemon=True,
            )
        )
        for index, stage in enumerate(self._stages):
            self._threads.append(
                threading.Thread(
                    target=self._guarded,
                    args=(
                        self._run_stage,
                        index,
                        stage,
                        self._channels[index],
                        self._channels[index + 1],
                    ),
                    name=f"{self.name}-{self._reports[index].stage_name}",
                    daemon=True,
                )
            )
        self._threads.append(
            threading.Thread(
                target=self._guarded,
                args=(self._run_sink, self._channels[-1]),
                name=f"{self.name}-sink",
                daemon=True,
            )
        )

        for thread in self._threads:
            thread.start()
        threading.Thread(
            target=self._supervise, name=f"{self.name}-supervisor", daemon=True
        ).start()

    def wait(self, timeout: Optional[float] = None) -> RunResult:
        """
        Block until the run reaches a terminal state.

        Raises:
            PipelineStateError: If the pipeline was never started
            TimeoutError: If the run is still active after ``timeout``
        """
        if self.state == RunState.IDLE:
            raise PipelineStateError(f"pipeline {self.name} was not started")
        if not self._done.wait(timeout):
            raise TimeoutError(f"pipeline {self.name} still {self.state.value} after {timeout}s")
        result = self._result
        if result is None:
            raise PipelineStateError(f"pipeline {self.name} finished without a result")
        return result

    def run(self, timeout: Optional[float] = None) -> RunResult:
        """Start the pipeline and wait for its terminal outcome."""
        self.start()
        return self.wait(timeout)

    def pause(self) -> None:
        """
        Hold back delivery to the sink.

        Upstream segments keep running until the sink-facing channel reaches
        its high watermark; automatic backpressure takes over from there.
        """
        self._pause_requested = True
        if self._channels:
            self._channels[-1].pause()

    def resume(self) -> None:
        """Release a previous pause()."""
        self._pause_requested = False
        if self._channels:
            self._channels[-1].resume()

    def cancel(self) -> bool:
        """
        Stop the run and discard everything buffered.

        Returns:
            True if this call cancelled the run; False if it had already
            reached (or committed to) a terminal state
        """
        with self._state_lock:
            was_idle = self._state == RunState.IDLE
            if was_idle:
                self._state = RunState.RUNNING
        if not self._fail(Cancelled()):
            return False
        if was_idle:
            self._started_at = time.perf_counter()
            self._finish()
        return True

    # ------------------------------------------------------------------
    # Workers
    # ------------------------------------------------------------------

    def _run_source(self, out: BoundedChannel) -> None:
        while not self._halted.is_set():
            if not out.wait_writable():
                return
            if self._halted.is_set() or not self._admit():
                return

            try:
                item = self.source.next()
            except SourceError as e:
                self._fail(e)
                return
            except Exception as e:
                self._fail(SourceError(e))
                return

            if item is END_OF_STREAM:
                with self._state_lock:
                    if self._state == RunState.RUNNING:
                        self._state = RunState.DRAINING
                logger.debug(f"{self.name}: source exhausted after {self._produced_count} items")
                out.mark_end_of_stream()
                return

            self._produced_count += 1
            if not self._forward(out, item):
                return

    def _run_stage(
        self,
        index: int,
        stage: Stage,
        inp: BoundedChannel,
        out: BoundedChannel,
    ) -> None:
        report = self._reports[index]
        if self.audit_logger:
            self.audit_logger.log_stage_start(report.stage_name)

        while True:
            item = inp.get()
            if item is END_OF_STREAM:
                break
            if self._halted.is_set() or not self._admit():
                return

            report.input_count += 1
            stage_start = time.perf_counter()
            try:
                outputs = list(stage.apply(item))
            except StageError as e:
                self._fail(e)
                return
            except Exception as e:
                self._fail(StageError(e, stage_name=report.stage_name))
                return
            report.busy_seconds += time.perf_counter() - stage_start

            if self._halted.is_set():
                return
            if not outputs and self.audit_logger:
                self.audit_logger.log_item_filtered(report.stage_name, item)

            for output in outputs:
                if not self._forward(out, output):
                    return
                report.output_count += 1

        if self._halted.is_set():
            return
        out.mark_end_of_stream()
        if self.audit_logger:
            self.audit_logger.log_stage_end(
                report.stage_name,
                report.input_count,
                report.output_count,
                report.busy_seconds,
            )

    def _run_sink(self, inp: BoundedChannel) -> None:
        while True:
            item = inp.get()
            if item is END_OF_STREAM:
                break
            if self._halted.is_set() or not self._admit():
                return

            try:
                self.sink.accept(item)
            except SinkError as e:
                self._fail(e)
                return
            except Exception as e:
                self._fail(SinkError(e))
                return
            self._delivered_count += 1

        # Committing to close() makes the run uncancellable
        with self._state_lock:
            if self._stopping:
                return
            self._sink_closed = True

        try:
            self.sink.close()
        except Exception as e:
            error = e if isinstance(e, SinkError) else SinkError(e)
            logger.error(f"{self.name}: closing sink failed: {error}")
            with self._state_lock:
                if self._error is None:
                    self._error = error

    def _guarded(self, worker: Callable[..., None], *args: Any) -> None:
        """Turn anything a worker did not handle into the run's failure."""
        try:
            worker(*args)
        except PipelineError as e:
            self._fail(e)
        except Exception as e:
            self._fail(
                PipelineError(f"{threading.current_thread().name} crashed: {e!r}", e)
            )

    def _supervise(self) -> None:
        for thread in self._threads:
            thread.join()
        self._finish()

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _forward(self, channel: BoundedChannel, item: Any) -> bool:
        """Put an item downstream; False when the run must stop."""
        try:
            channel.put(item)
        except ChannelClosed as e:
            if not self._halted.is_set():
                self._fail(e)
            return False
        return True

    def _admit(self) -> bool:
        """
        Claim the right to issue one next(), apply() or accept() call.

        Checked under the same lock _fail() takes to stop the run, so a call
        either was admitted before the run stopped (and is in flight) or is
        refused.
        """
        with self._state_lock:
            return not self._stopping

    def _fail(self, error: PipelineError) -> bool:
        """Record the first terminal error and halt every segment."""
        with self._state_lock:
            if self._error is not None or self._sink_closed or self._state.is_terminal:
                return False
            self._error = error
            self._stopping = True
            self._halted.set()

        if isinstance(error, Cancelled):
            logger.info(f"{self.name}: cancelled")
        else:
            logger.error(f"{self.name}: failed: {error}")

        for channel in self._channels:
            channel.abort()
        return True

    def _finish(self) -> None:
        self._teardown_stages()

        with self._state_lock:
            self._state = RunState.FAILED if self._error is not None else RunState.COMPLETED
            state, error = self._state, self._error

        duration = time.perf_counter() - (self._started_at or time.perf_counter())
        self._record_metrics(duration)

        self._result = RunResult(
            state=state,
            error=error,
            correlation_id=self.correlation_id,
            produced_count=self._produced_count,
            delivered_count=self._delivered_count,
            duration_seconds=duration,
            stages=[report.model_copy() for report in self._reports],
            channels=[channel.stats() for channel in self._channels],
            metrics=self.metrics_collector.get_metrics() if self.metrics_collector else {},
        )

        if self.audit_logger:
            self.audit_logger.log_run_end(state.value, duration, error)
        logger.info(
            f"{self.name}: {state.value} in {duration:.3f}s "
            f"({self._produced_count} produced, {self._delivered_count} delivered)"
        )
        self._done.set()

    def _teardown_stages(self) -> None:
        for stage, report in zip(self._stages, self._reports):
            close = getattr(stage, "close", None)
            if not callable(close):
                continue
            try:
                close()
            except Exception as e:
                logger.error(f"{self.name}: closing {report.stage_name} failed: {e}")
                # A failed teardown still fails a run that was about to complete
                with self._state_lock:
                    if self._error is None:
                        self._error = StageError(e, stage_name=report.stage_name)

    def _record_metrics(self, duration: float) -> None:
        if not self.metrics_collector:
            return
        metrics = self.metrics_collector
        metrics.record_timing("run_duration_seconds", duration, {"pipeline": self.name})
        metrics.record_count("items_produced_total", self._produced_count)
        metrics.record_count("items_delivered_total", self._delivered_count)
        for report in self._reports:
            tags = {"stage": report.stage_name}
            metrics.record_count("stage_items_in_total", report.input_count, tags)
            metrics.record_count("stage_items_out_total", report.output_count, tags)
            metrics.record_timing("stage_busy_seconds", report.busy_seconds, tags)
        for channel in self._channels:
            stats = channel.stats()
            tags = {"channel": channel.name}
            metrics.record_gauge("channel_peak_size", stats.peak_size, tags)
            metrics.record_count("channel_congestion_total", stats.congestion_count, tags)

    def _instantiate(self, spec: StageSpec) -> Stage:
        if hasattr(spec, "apply") and not isinstance(spec, type):
            return spec  # type: ignore[return-value]
        stage = spec()  # type: ignore[operator]
        if not hasattr(stage, "apply"):
            raise TypeError(f"stage factory {spec!r} returned {stage!r}")
        return stage

    def _segment_names(self) -> List[str]:
        return (
            [_segment_name(self.source, "source")]
            + [report.stage_name for report in self._reports]
            + [_segment_name(self.sink, "sink")]
        )

    def _build_channels(self) -> List[BoundedChannel]:
        names = self._segment_names()
        channels: List[BoundedChannel] = []
        for index in range(len(self._stages) + 1):
            if index == len(self._stages):
                config = self._sink_channel_config or self._channel_config
            elif index < len(self._stage_channel_configs):
                config = self._stage_channel_configs[index] or self._channel_config
            else:
                config = self._channel_config
            channels.append(
                BoundedChannel.from_config(
                    config,
                    name=f"{names[index]}->{names[index + 1]}",
                    listener=self._on_flow_control,
                )
            )
        return channels

    def _on_flow_control(self, channel_name: str, event: str, metadata: Dict[str, Any]) -> None:
        if self.audit_logger:
            self.audit_logger.log_flow_control(channel_name, event, metadata)
        if self.metrics_collector:
            self.metrics_collector.record_count(
                "flow_control_events_total", 1, {"channel": channel_name, "event": event}
            )
