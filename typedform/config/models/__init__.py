"""Configuration model exports."""

from typedform.config.models.forms import FormsConfig
from typedform.config.models.observability import (
    LoggingConfig,
    MetricsConfig,
    ObservabilityConfig,
)

__all__ = [
    "FormsConfig",
    "LoggingConfig",
    "MetricsConfig",
    "ObservabilityConfig",
]
