"""
Video Production HTTP + SSE Server

FastAPI server that provides:
- POST /api/pipeline - Run a production brief, respond with the full envelope
- POST /api/pipeline/stream - Same run, status events streamed over SSE
- GET /health - Health check
- GET / - Service info

Envelopes:
    success       200  {"ok": true, "result": {...}, "statusUpdates": [...]}
    invalid brief 422  {"ok": false, "error": "...", "statusUpdates": []}
    stage failure 500  {"ok": false, "error": "...", "failedStage": "render", "statusUpdates": [...]}

Usage:
    # Start server
    python -m uvicorn services.orchestrator.server:app --host 0.0.0.0 --port 8765

    # Or via main.py
    python main.py server
"""

import asyncio
import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Any, Optional

from fastapi import Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse, StreamingResponse

from services.streaming.status_sink import (
    BufferedStatusSink,
    QueueStatusSink,
    fan_out,
    format_sse,
)

from .errors import StageFailure, describe_cause
from .pipeline import VideoPipeline
from .state import Brief

logger = logging.getLogger(__name__)

HEARTBEAT_SECONDS = 30.0

# Lazily-built production pipeline (overridden in tests via dependency_overrides)
_pipeline: Optional[VideoPipeline] = None


def get_pipeline() -> VideoPipeline:
    """Dependency: the production pipeline wired with the default adapters."""
    global _pipeline
    if _pipeline is None:
        from agents import default_adapters

        _pipeline = VideoPipeline(default_adapters())
    return _pipeline


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown events."""
    logger.info("Starting Video Production server...")
    yield
    logger.info("Shutting down Video Production server...")
    if _pipeline is not None:
        await _pipeline.adapters.close()


app = FastAPI(
    title="Video Production API",
    description="Brief to published YouTube video with stage-by-stage status",
    version="1.0.0",
    lifespan=lifespan,
)


# ============================================================================
# ENVELOPES
# ============================================================================

def success_envelope(result: Any, status_updates: list[dict]) -> dict:
    return {"ok": True, "result": result.to_dict(), "statusUpdates": status_updates}


def failure_envelope(error: BaseException, status_updates: list[dict]) -> dict:
    """Error envelope; names the failed stage when the error is a StageFailure."""
    if isinstance(error, StageFailure):
        return {
            "ok": False,
            "error": str(error),
            "failedStage": error.stage.value,
            "statusUpdates": [event.to_dict() for event in error.status_updates],
        }
    return {
        "ok": False,
        "error": describe_cause(error),
        "statusUpdates": status_updates,
    }


def describe_validation_error(exc: RequestValidationError) -> str:
    """'Invalid brief: targetAudience: String should have at least 3 characters; ...'"""
    problems = []
    for error in exc.errors():
        loc = [str(part) for part in error.get("loc", ()) if part != "body"]
        field_name = ".".join(loc) or "body"
        problems.append(f"{field_name}: {error.get('msg', 'invalid value')}")
    return "Invalid brief: " + "; ".join(problems)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Invalid briefs never reach the pipeline."""
    message = describe_validation_error(exc)
    logger.info(f"Rejected brief on {request.url.path}: {message}")
    return JSONResponse(
        status_code=422,
        content={"ok": False, "error": message, "statusUpdates": []},
    )


# ============================================================================
# ROUTES
# ============================================================================

@app.get("/")
async def root():
    """Root endpoint with API info."""
    return {
        "service": "Video Production",
        "version": "1.0.0",
        "endpoints": {
            "POST /api/pipeline": "Run a brief, respond with result and status updates",
            "POST /api/pipeline/stream": "Run a brief, stream status updates over SSE",
            "GET /health": "Health check",
        },
    }


@app.get("/health")
async def health():
    """Health check endpoint."""
    return {
        "status": "healthy",
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }


@app.post("/api/pipeline")
async def run_pipeline_endpoint(
    brief: Brief,
    pipeline: VideoPipeline = Depends(get_pipeline),
):
    """Run one production brief and return the envelope."""
    sink = BufferedStatusSink()

    try:
        result = await pipeline.run(brief, sink)
    except StageFailure as e:
        return JSONResponse(status_code=500, content=failure_envelope(e, sink.to_dicts()))
    except Exception as e:
        logger.exception(f"Unexpected pipeline error: {e}")
        return JSONResponse(status_code=500, content=failure_envelope(e, sink.to_dicts()))

    return success_envelope(result, sink.to_dicts())


async def pipeline_event_stream(pipeline: VideoPipeline, brief: Brief):
    """
    Run a brief and yield SSE frames: status events, heartbeats, then one
    terminal result or error frame. Closing the generator cancels the run.
    """
    buffer = BufferedStatusSink()
    queue_sink = QueueStatusSink()
    queue = queue_sink.queue
    task = asyncio.create_task(pipeline.run(brief, fan_out(buffer, queue_sink)))
    getter: Optional[asyncio.Future] = None

    try:
        while True:
            getter = asyncio.ensure_future(queue.get())
            done, _ = await asyncio.wait(
                {getter, task},
                timeout=HEARTBEAT_SECONDS,
                return_when=asyncio.FIRST_COMPLETED,
            )

            if getter in done:
                yield format_sse("status", getter.result().to_dict())
                continue

            getter.cancel()
            if task in done:
                break

            # No events for a while - keep the connection alive
            yield ": heartbeat\n\n"

        # Events queued in the same tick the run finished
        while not queue.empty():
            yield format_sse("status", queue.get_nowait().to_dict())

        try:
            result = task.result()
        except Exception as e:
            if not isinstance(e, StageFailure):
                logger.exception(f"Unexpected pipeline error: {e}")
            yield format_sse("error", failure_envelope(e, buffer.to_dicts()))
        else:
            yield format_sse("result", success_envelope(result, buffer.to_dicts()))

    finally:
        # Client went away mid-run
        if getter is not None and not getter.done():
            getter.cancel()
        if not task.done():
            logger.info("Stream closed before the run finished, cancelling")
            task.cancel()


@app.post("/api/pipeline/stream")
async def stream_pipeline_endpoint(
    brief: Brief,
    pipeline: VideoPipeline = Depends(get_pipeline),
):
    """
    SSE endpoint for a production run.

    Event types:
    - status: one per StatusEvent, as it happens
    - result: success envelope (terminal)
    - error: failure envelope (terminal)

    Usage:
        curl -N -X POST -H 'Content-Type: application/json' \\
            -d @brief.json http://localhost:8765/api/pipeline/stream
    """
    return StreamingResponse(
        pipeline_event_stream(pipeline, brief),
        media_type="text/event-stream",
        headers={
            "Cache-Control": "no-cache",
            "Connection": "keep-alive",
            "X-Accel-Buffering": "no",
        },
    )
