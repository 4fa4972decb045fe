"""
AgenticVideo Services

Core services for the video production pipeline:
- orchestrator: stage sequencing, data model, HTTP transport
- streaming: status sinks and SSE formatting
- rendering: Remotion composition client
- publisher: YouTube upload client and listing metadata
"""

from .orchestrator import (
    VideoPipeline,
    StageFailure,
    Brief,
    PipelineResult,
    PipelineStage,
)

__all__ = [
    "VideoPipeline",
    "StageFailure",
    "Brief",
    "PipelineResult",
    "PipelineStage",
]
