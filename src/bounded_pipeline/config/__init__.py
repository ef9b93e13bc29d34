"""
Configuration Package - Models and Loaders.

Configuration Structure:
    - PipelineConfig: Root configuration object
    - GlobalConfig: Log level, wait timeout
    - ChannelConfig: Capacity and watermarks
    - StageConfig: Registered stage name, params, input channel override
    - RetryPolicyConfig: Sink retry policy

Design Principles:
    - Type-safe via Pydantic
    - Validation on load (fail fast)
    - Support for profiles merged over a base file
"""

from bounded_pipeline.config.loader import ConfigLoader, load_config
from bounded_pipeline.config.models import (
    ChannelConfig,
    GlobalConfig,
    PipelineConfig,
    RetryPolicyConfig,
    StageConfig,
)

__all__ = [
    "ConfigLoader",
    "load_config",
    "ChannelConfig",
    "GlobalConfig",
    "PipelineConfig",
    "RetryPolicyConfig",
    "StageConfig",
]
