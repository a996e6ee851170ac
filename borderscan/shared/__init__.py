"""
Shared utilities and models for BorderScan.
"""

from borderscan.shared.cancellation import (
    CancellationToken,
    OperationCancelled,
    check_cancelled,
)
from borderscan.shared.config import Settings, get_settings, reload_settings
from borderscan.shared.log import JsonFormatter, configure_logging
from borderscan.shared.models import (
    Rectangle,
    ThresholdResult,
    TraceSummary,
    TracingMode,
)

__all__ = [
    "CancellationToken",
    "OperationCancelled",
    "check_cancelled",
    "Settings",
    "get_settings",
    "reload_settings",
    "JsonFormatter",
    "configure_logging",
    "Rectangle",
    "ThresholdResult",
    "TraceSummary",
    "TracingMode",
]
