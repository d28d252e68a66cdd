"""Shared telemetry: logging setup, OpenTelemetry config, and tracing helpers."""

from searchmodel.shared.telemetry.logging import get_logger, setup_logging
from searchmodel.shared.telemetry.telemetry import (
    TelemetryConfig,
    configure_telemetry,
    get_telemetry,
    set_telemetry,
)
from searchmodel.shared.telemetry.tracing import (
    TracedOperation,
    add_span_attributes,
    add_span_event,
    traced,
)

__all__ = [
    "setup_logging",
    "get_logger",
    "TelemetryConfig",
    "configure_telemetry",
    "get_telemetry",
    "set_telemetry",
    "traced",
    "add_span_attributes",
    "add_span_event",
    "TracedOperation",
]
