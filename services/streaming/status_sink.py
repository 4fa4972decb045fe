"""
Status Sinks for the Production Pipeline

A status sink is any callable that accepts a StatusEvent and returns
either None or an awaitable. The orchestrator pushes events through
``deliver`` which bounds async sinks with a timeout and isolates failures:
a broken status channel never fails a production run.

Usage:
    sink = BufferedStatusSink()
    result = await pipeline.run(brief, sink)
    print([e.detail for e in sink.events])

    # Several destinations at once
    sink = fan_out(BufferedStatusSink(), LoggingStatusSink())
"""

import asyncio
import inspect
import json
import logging
import sys
from typing import Any, Awaitable, Callable, Optional, TextIO, Union

from services.orchestrator.state import StatusEvent

logger = logging.getLogger(__name__)

StatusSink = Callable[[StatusEvent], Union[None, Awaitable[None]]]


async def deliver(
    sink: Optional[StatusSink],
    event: StatusEvent,
    timeout: Optional[float] = None,
) -> bool:
    """
    Push one event into a sink (supports sync and async sinks).

    Returns False if the sink raised or timed out. Never raises except
    for cancellation of the calling task.
    """
    if sink is None:
        return True
    try:
        result = sink(event)
        if inspect.isawaitable(result):
            await asyncio.wait_for(result, timeout=timeout)
        return True
    except asyncio.TimeoutError:
        logger.warning(f"Status sink timed out after {timeout}s on {event.stage.value} event")
    except Exception as e:
        logger.warning(f"Status sink failed on {event.stage.value} event: {e}")
    return False


class BufferedStatusSink:
    """In-memory, append-only buffer of status events (one per run)."""

    def __init__(self):
        self._events: list[StatusEvent] = []

    def __call__(self, event: StatusEvent) -> None:
        self._events.append(event)

    def __len__(self) -> int:
        return len(self._events)

    @property
    def events(self) -> list[StatusEvent]:
        """Events received so far, in arrival order."""
        return self._events.copy()

    def to_dicts(self) -> list[dict[str, Any]]:
        return [event.to_dict() for event in self._events]


class QueueStatusSink:
    """
    Pushes events onto an asyncio.Queue for live streaming.

    Never blocks: when the queue is full the event is dropped and logged,
    since a slow consumer must not hold up the pipeline.
    """

    def __init__(self, queue: Optional[asyncio.Queue] = None, maxsize: int = 100):
        self.queue: asyncio.Queue = queue if queue is not None else asyncio.Queue(maxsize=maxsize)

    def __call__(self, event: StatusEvent) -> None:
        try:
            self.queue.put_nowait(event)
        except asyncio.QueueFull:
            logger.warning(f"Status queue full, dropping {event.stage.value} event")


class LoggingStatusSink:
    """Writes each event to a logger."""

    def __init__(self, log: Optional[logging.Logger] = None, level: int = logging.INFO):
        self.log = log or logger
        self.level = level

    def __call__(self, event: StatusEvent) -> None:
        self.log.log(self.level, f"[{event.stage.value}] {event.detail}")


class ConsoleStatusSink:
    """Prints each event as a CLI line."""

    def __init__(self, stream: Optional[TextIO] = None):
        self.stream = stream

    def __call__(self, event: StatusEvent) -> None:
        print(event.to_cli_line(), file=self.stream or sys.stdout, flush=True)


def fan_out(*sinks: StatusSink) -> StatusSink:
    """Combine several sinks; a failure in one does not affect the others."""

    async def sink(event: StatusEvent) -> None:
        for target in sinks:
            await deliver(target, event)

    return sink


def format_sse(event_name: str, data: dict[str, Any]) -> str:
    """Format data as an SSE message."""
    return f"event: {event_name}\ndata: {json.dumps(data)}\n\n"
