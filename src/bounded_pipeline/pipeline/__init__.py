"""
Pipeline Package - Orchestration.

Components:
    - StreamingPipeline: Wires and drives Source -> Stages -> Sink
    - build_pipeline: Builds a StreamingPipeline from PipelineConfig

The pipeline is responsible for:
    - Creating channels and stage instances per run
    - Running one worker per segment
    - Propagating end-of-stream after a full drain
    - Pause/resume of sink delivery and cancellation
    - Reporting exactly one terminal RunResult

Design Principles:
    - All collaborators injected via constructor
    - Runs are single-use
"""

from bounded_pipeline.pipeline.factory import build_pipeline
from bounded_pipeline.pipeline.streaming_pipeline import StageSpec, StreamingPipeline

__all__ = ["StreamingPipeline", "StageSpec", "build_pipeline"]
