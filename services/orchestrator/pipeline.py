"""
Production Pipeline

Sequences the four production stages over a brief:

    Brief
      ↓
    SCRIPT   (Scriptwriter)     → Script
      ↓
    PROMPT   (PromptDesigner)   → VisualPrompt per section
      ↓
    RENDER   (Renderer)         → RenderOutput
      ↓
    PUBLISH  (Publisher)        → PublishOutput
      ↓
    PipelineResult

Key behaviours:
- Strictly linear: each stage is awaited to completion before the next
- A start and a completion status event around every stage
- First failure stops the run and raises StageFailure (no retries here)
- Status events already emitted are never retracted
"""

import logging
from typing import Any, Awaitable, Callable, Optional, Sequence, TypeVar

from core.config import PipelineConfig, get_config
from services.streaming.status_sink import StatusSink, deliver

from .errors import PromptDesignError, StageFailure
from .stages import StageAdapters
from .state import (
    Brief,
    EventType,
    PipelineResult,
    PipelineStage,
    PublishOutput,
    RenderOutput,
    Script,
    StatusEvent,
    VisualPrompt,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")


class _RunReporter:
    """Per-run event log that forwards every event to the caller's sink."""

    def __init__(self, sink: Optional[StatusSink], timeout: Optional[float]):
        self.sink = sink
        self.timeout = timeout
        self.events: list[StatusEvent] = []

    async def emit(self, stage: PipelineStage, event_type: EventType, detail: str):
        event = StatusEvent(stage=stage, detail=detail, event_type=event_type)
        self.events.append(event)
        await deliver(self.sink, event, timeout=self.timeout)


class VideoPipeline:
    """
    Orchestrates Script → Prompt → Render → Publish.

    Usage:
        pipeline = VideoPipeline(default_adapters())
        sink = BufferedStatusSink()

        try:
            result = await pipeline.run(brief, sink)
        except StageFailure as failure:
            print(failure.stage, failure.cause, len(failure.status_updates))

    The pipeline holds no per-run state, so one instance can serve
    concurrent runs.
    """

    def __init__(
        self,
        adapters: StageAdapters,
        config: Optional[PipelineConfig] = None,
    ):
        self.adapters = adapters
        self.config = config or get_config().pipeline

    async def run(
        self,
        brief: Brief,
        status_sink: Optional[StatusSink] = None,
    ) -> PipelineResult:
        """
        Run every stage over the brief.

        Args:
            brief: Validated creative brief
            status_sink: Receives one event before and one after each stage

        Returns:
            PipelineResult once all four stages succeed

        Raises:
            StageFailure: naming the first stage that failed
        """
        reporter = _RunReporter(status_sink, self.config.status_timeout_seconds)
        logger.info(f"Starting production run: {brief.topic[:60]}")

        script = await self._run_stage(
            reporter,
            PipelineStage.SCRIPT,
            f"Drafting script for \"{brief.topic}\"",
            lambda: self.adapters.scriptwriter.write_script(brief),
            lambda s: (
                f"Script ready: {len(s.sections)} sections, "
                f"~{s.total_duration_seconds}s runtime"
            ),
        )

        prompts = await self._run_stage(
            reporter,
            PipelineStage.PROMPT,
            f"Designing visual prompts for {len(script.sections)} scenes",
            lambda: self._design_prompts(script),
            lambda p: f"Storyboard ready: {len(p)} visual prompts",
        )

        render = await self._run_stage(
            reporter,
            PipelineStage.RENDER,
            f"Rendering {len(prompts)} scenes",
            lambda: self.adapters.renderer.render(prompts, script),
            lambda r: f"Render complete: {r.video_download_url}",
        )

        publication = await self._run_stage(
            reporter,
            PipelineStage.PUBLISH,
            "Publishing to YouTube",
            lambda: self.adapters.publisher.publish(render, brief),
            lambda p: f"Published: {p.youtube_video_url}",
        )

        logger.info(f"Production run complete: {publication.youtube_video_url}")
        return self._assemble(script, prompts, render, publication)

    async def _run_stage(
        self,
        reporter: _RunReporter,
        stage: PipelineStage,
        start_detail: str,
        call: Callable[[], Awaitable[T]],
        done_detail: Callable[[T], str],
    ) -> T:
        """Run one stage between its start and completion events."""
        await reporter.emit(stage, EventType.PHASE_STARTED, start_detail)
        logger.info(f"Executing stage: {stage.value}")

        try:
            output = await call()
            # Malformed adapter output surfaces here, attributed to this stage
            detail = done_detail(output)
        except Exception as e:
            logger.error(f"Stage {stage.value} failed: {e}")
            raise StageFailure(stage, e, reporter.events) from e

        await reporter.emit(stage, EventType.PHASE_COMPLETED, detail)
        return output

    async def _design_prompts(self, script: Script) -> tuple[VisualPrompt, ...]:
        """Call the prompt designer and check one prompt maps to each section."""
        prompts = tuple(await self.adapters.prompt_designer.design_prompts(script))
        check_prompts_match_sections(prompts, script)
        return prompts

    @staticmethod
    def _assemble(
        script: Script,
        prompts: Sequence[VisualPrompt],
        render: RenderOutput,
        publication: PublishOutput,
    ) -> PipelineResult:
        return PipelineResult(
            script=script,
            visual_prompts=tuple(prompts),
            video_download_url=render.video_download_url,
            youtube_video_url=publication.youtube_video_url,
            metadata=publication.metadata,
        )


def check_prompts_match_sections(prompts: Sequence[VisualPrompt], script: Script):
    """
    Raise PromptDesignError unless prompts and sections correspond
    one-to-one (same count, each scene naming a distinct section).
    """
    if len(prompts) != len(script.sections):
        raise PromptDesignError(
            f"Expected {len(script.sections)} visual prompts, got {len(prompts)}"
        )

    headings = [section.heading for section in script.sections]
    if len(set(headings)) != len(headings):
        repeated = sorted({h for h in headings if headings.count(h) > 1})
        raise PromptDesignError(
            f"Script sections repeat headings, scenes cannot be matched: {repeated}"
        )

    scenes = [prompt.scene for prompt in prompts]
    if sorted(scenes) != sorted(headings):
        unknown = [scene for scene in scenes if scene not in headings]
        raise PromptDesignError(
            f"Visual prompt scenes do not match script sections: {unknown or scenes}"
        )


async def run_pipeline(
    brief: Brief,
    adapters: StageAdapters,
    status_sink: Optional[StatusSink] = None,
    **kwargs: Any,
) -> PipelineResult:
    """Convenience wrapper: build a pipeline and run it once."""
    return await VideoPipeline(adapters, **kwargs).run(brief, status_sink)
