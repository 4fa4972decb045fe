"""
Status Streaming

Sinks that receive the orchestrator's stage-boundary events: an
in-memory buffer for request/response transport, a queue for live SSE
streaming, and logger/console sinks for the CLI.
"""

from .status_sink import (
    StatusSink,
    BufferedStatusSink,
    QueueStatusSink,
    LoggingStatusSink,
    ConsoleStatusSink,
    deliver,
    fan_out,
    format_sse,
)

__all__ = [
    "StatusSink",
    "BufferedStatusSink",
    "QueueStatusSink",
    "LoggingStatusSink",
    "ConsoleStatusSink",
    "deliver",
    "fan_out",
    "format_sse",
]
