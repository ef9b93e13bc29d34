"""
Resilience Package - Retry for Pipeline Collaborators.

The core pipeline fails fast; retrying belongs to the source or sink that
owns the flaky resource.

    - ErrorHandler: Retry with exponential backoff
    - RetryConfig: Attempts and delays
"""

from bounded_pipeline.resilience.error_handler import (
    ErrorHandler,
    RetryConfig,
    RetryExhausted,
)

__all__ = ["ErrorHandler", "RetryConfig", "RetryExhausted"]
