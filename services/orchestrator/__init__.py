"""
Production Orchestrator Service

Sequences the Script → Prompt → Render → Publish stages over a creative
brief, reports stage boundaries to a caller-supplied status sink, and
attributes any failure to the stage that caused it.
"""

from .pipeline import VideoPipeline, run_pipeline, check_prompts_match_sections
from .errors import (
    PipelineError,
    StageFailure,
    AdapterError,
    ScriptGenerationError,
    PromptDesignError,
    RenderError,
    PublishRejectedError,
)
from .stages import (
    StageAdapter,
    Scriptwriter,
    PromptDesigner,
    Renderer,
    Publisher,
    StageAdapters,
)
from .state import (
    Brief,
    validate_brief,
    EventType,
    PipelineStage,
    Script,
    ScriptSection,
    VisualPrompt,
    RenderOutput,
    PublishMetadata,
    PublishOutput,
    PipelineResult,
    StatusEvent,
)

__all__ = [
    "VideoPipeline",
    "run_pipeline",
    "check_prompts_match_sections",
    "PipelineError",
    "StageFailure",
    "AdapterError",
    "ScriptGenerationError",
    "PromptDesignError",
    "RenderError",
    "PublishRejectedError",
    "StageAdapter",
    "Scriptwriter",
    "PromptDesigner",
    "Renderer",
    "Publisher",
    "StageAdapters",
    "Brief",
    "validate_brief",
    "EventType",
    "PipelineStage",
    "Script",
    "ScriptSection",
    "VisualPrompt",
    "RenderOutput",
    "PublishMetadata",
    "PublishOutput",
    "PipelineResult",
    "StatusEvent",
]
