"""Utility modules for dagflow."""

from dagflow.utils.config import Settings, get_settings
from dagflow.utils.logger import get_logger, setup_logging
from dagflow.utils.metrics import StageMetrics, StageTimer, TokenUsage
from dagflow.utils.resilience import (
    MaxRetriesExceededError,
    RetryConfig,
    calculate_delay,
    with_retry,
)

__all__ = [
    # Config
    "Settings",
    "get_settings",
    # Logging
    "get_logger",
    "setup_logging",
    # Metrics
    "StageMetrics",
    "StageTimer",
    "TokenUsage",
    # Resilience
    "MaxRetriesExceededError",
    "RetryConfig",
    "calculate_delay",
    "with_retry",
]
