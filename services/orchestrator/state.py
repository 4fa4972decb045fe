"""
Production Pipeline State

Defines the value objects that flow through the production pipeline.
The Brief is validated at the transport boundary; every stage output is
an immutable dataclass that serializes to the camelCase JSON shape the
presentation layer renders.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Annotated, Any, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class PipelineStage(str, Enum):
    """The four production stages, in execution order."""
    SCRIPT = "script"
    PROMPT = "prompt"
    RENDER = "render"
    PUBLISH = "publish"

    @property
    def label(self) -> str:
        """Human-readable stage name ("Script", "Prompt", ...)."""
        return self.value.title()

    @property
    def position(self) -> int:
        """1-based position of the stage in the pipeline."""
        return list(PipelineStage).index(self) + 1


class EventType(str, Enum):
    """Types of status events emitted at stage boundaries."""
    PHASE_STARTED = "phase_started"
    PHASE_COMPLETED = "phase_completed"


# ============================================================
# Brief
# ============================================================

class Brief(BaseModel):
    """
    Creative brief driving a production run.

    Field names are snake_case in Python and camelCase on the wire
    (``targetAudience``, ``durationSeconds``...). Instances are frozen:
    stages receive the exact brief the caller submitted.
    """

    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )

    topic: str = Field(min_length=3, description="What the video covers")
    target_audience: str = Field(min_length=3, description="Who the video is for")
    content_goals: str = Field(min_length=3, description="Outcome the video should drive")
    tone: Optional[str] = None
    keywords: Optional[tuple[Annotated[str, Field(min_length=1)], ...]] = None
    call_to_action: Optional[str] = None
    duration_seconds: Optional[int] = Field(default=None, ge=30, le=300)

    def to_dict(self) -> dict[str, Any]:
        """Serialize using the wire (camelCase) field names."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


def validate_brief(payload: Any) -> Brief:
    """
    Validate raw input into a Brief.

    Raises pydantic.ValidationError when fields are missing or out of
    range. Passing an already-valid Brief (or its ``to_dict()``) yields an
    equal Brief.
    """
    return Brief.model_validate(payload)


# ============================================================
# Stage outputs
# ============================================================

@dataclass(frozen=True)
class ScriptSection:
    """One narrated section of the script."""
    heading: str
    narrative: str
    duration_seconds: int

    def to_dict(self) -> dict[str, Any]:
        return {
            "heading": self.heading,
            "narrative": self.narrative,
            "durationSeconds": self.duration_seconds,
        }


@dataclass(frozen=True)
class Script:
    """Structured video script produced by the Scriptwriter stage."""
    hook: str
    sections: tuple[ScriptSection, ...]
    outro: str

    def __post_init__(self):
        object.__setattr__(self, "sections", tuple(self.sections))

    @property
    def total_duration_seconds(self) -> int:
        return sum(section.duration_seconds for section in self.sections)

    def to_dict(self) -> dict[str, Any]:
        return {
            "hook": self.hook,
            "sections": [section.to_dict() for section in self.sections],
            "outro": self.outro,
        }


@dataclass(frozen=True)
class VisualPrompt:
    """Visual-generation prompt for one script section."""
    scene: str  # heading of the section this prompt illustrates
    prompt: str
    duration_seconds: int

    def to_dict(self) -> dict[str, Any]:
        return {
            "scene": self.scene,
            "prompt": self.prompt,
            "durationSeconds": self.duration_seconds,
        }


@dataclass(frozen=True)
class RenderOutput:
    """Locator of the rendered video asset."""
    video_download_url: str

    def to_dict(self) -> dict[str, Any]:
        return {"videoDownloadUrl": self.video_download_url}


@dataclass(frozen=True)
class PublishMetadata:
    """Listing metadata sent to the video platform."""
    tags: tuple[str, ...] = ()
    title: str = ""
    description: str = ""

    def __post_init__(self):
        object.__setattr__(self, "tags", tuple(self.tags))

    def to_dict(self) -> dict[str, Any]:
        return {
            "tags": list(self.tags),
            "title": self.title,
            "description": self.description,
        }


@dataclass(frozen=True)
class PublishOutput:
    """Public listing produced by the Publisher stage."""
    youtube_video_url: str
    metadata: PublishMetadata = field(default_factory=PublishMetadata)
    video_id: Optional[str] = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "youtubeVideoUrl": self.youtube_video_url,
            "metadata": self.metadata.to_dict(),
            "videoId": self.video_id,
        }


@dataclass(frozen=True)
class PipelineResult:
    """Aggregated output of a fully successful production run."""
    script: Script
    visual_prompts: tuple[VisualPrompt, ...]
    video_download_url: str
    youtube_video_url: str
    metadata: PublishMetadata

    def __post_init__(self):
        object.__setattr__(self, "visual_prompts", tuple(self.visual_prompts))

    def to_dict(self) -> dict[str, Any]:
        return {
            "script": self.script.to_dict(),
            "visualPrompts": [prompt.to_dict() for prompt in self.visual_prompts],
            "videoDownloadUrl": self.video_download_url,
            "youtubeVideoUrl": self.youtube_video_url,
            "metadata": self.metadata.to_dict(),
        }


# ============================================================
# Status events
# ============================================================

@dataclass(frozen=True)
class StatusEvent:
    """A progress record emitted at a stage boundary."""
    stage: PipelineStage
    detail: str
    event_type: EventType = EventType.PHASE_STARTED
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def to_dict(self) -> dict[str, Any]:
        return {
            "stage": self.stage.value,
            "detail": self.detail,
            "type": self.event_type.value,
            "timestamp": self.timestamp.isoformat(),
        }

    def to_cli_line(self) -> str:
        """Format as single CLI line."""
        icon = "▶️" if self.event_type == EventType.PHASE_STARTED else "✔️"
        total = len(PipelineStage)
        return f"{icon} [{self.stage.position}/{total}] {self.stage.label}: {self.detail}"
