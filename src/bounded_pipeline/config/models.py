"""
Configuration Models - Pydantic Models for Type-Safe Config.

All configuration is validated at load time using Pydantic.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field, model_validator


class GlobalConfig(BaseModel):
    """Global configuration settings."""

    log_level: str = Field(default="INFO")
    join_timeout_seconds: Optional[float] = Field(
        default=None, gt=0, description="Runs still active after this many seconds are cancelled"
    )


class ChannelConfig(BaseModel):
    """Capacity and watermarks for one channel."""

    capacity: int = Field(default=16, ge=1)
    high_watermark: Optional[int] = Field(default=None, ge=1)
    low_watermark: Optional[int] = Field(default=None, ge=0)

    @model_validator(mode="after")
    def _check_watermarks(self) -> "ChannelConfig":
        high = self.resolved_high_watermark
        if high > self.capacity:
            raise ValueError(
                f"high_watermark ({high}) must not exceed capacity ({self.capacity})"
            )
        low = self.resolved_low_watermark
        if low >= high:
            raise ValueError(
                f"low_watermark ({low}) must be below high_watermark ({high})"
            )
        return self

    @property
    def resolved_high_watermark(self) -> int:
        if self.high_watermark is None:
            return self.capacity
        return self.high_watermark

    @property
    def resolved_low_watermark(self) -> int:
        if self.low_watermark is None:
            return self.resolved_high_watermark // 2
        return self.low_watermark


class StageConfig(BaseModel):
    """One entry of the stage list."""

    name: str = Field(..., min_length=1, description="Registered stage name")
    enabled: bool = True
    params: Dict[str, Any] = Field(default_factory=dict)
    channel: Optional[ChannelConfig] = Field(
        default=None, description="Override for this stage's input channel"
    )


class RetryPolicyConfig(BaseModel):
    """Retry policy for a collaborator that owns its own retries."""

    max_attempts: int = Field(default=3, ge=1)
    base_delay_seconds: float = Field(default=0.1, ge=0)
    max_delay_seconds: float = Field(default=5.0, ge=0)
    exponential_base: float = Field(default=2.0, ge=1)


class PipelineConfig(BaseModel):
    """Root configuration object."""

    version: str = "1.0"
    global_settings: GlobalConfig = Field(
        default_factory=GlobalConfig,
        alias="global",
    )
    channel: ChannelConfig = Field(
        default_factory=ChannelConfig,
        description="Default for every channel",
    )
    sink_channel: Optional[ChannelConfig] = Field(
        default=None,
        description="Override for the channel feeding the sink",
    )
    stages: List[StageConfig] = Field(default_factory=list)
    sink_retry: Optional[RetryPolicyConfig] = None

    model_config = {"populate_by_name": True}

    @property
    def enabled_stages(self) -> List[StageConfig]:
        return [stage for stage in self.stages if stage.enabled]
