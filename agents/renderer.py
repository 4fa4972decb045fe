"""
Renderer Agent - Storyboard to finished video

The Renderer agent turns the storyboard into a downloadable video:
1. Generates one Veo clip per visual prompt via Kie.ai (concurrently)
2. Builds narration captions from the script's section timing
3. Calls Remotion to compose clips and captions into the final video
4. Returns the download URL of the rendered asset

Usage:
    from agents.renderer import VeoRenderer

    renderer = VeoRenderer()
    output = await renderer.render(prompts, script)
    await renderer.close()
"""

import asyncio
import logging
from typing import List, Optional, Sequence

from agents.shared.kie_client import GenerationResult, KieClient
from core.config import RenderConfig, get_config
from services.orchestrator.errors import RenderError
from services.orchestrator.stages import Renderer
from services.orchestrator.state import RenderOutput, Script, VisualPrompt
from services.rendering.remotion_client import (
    Caption,
    RemotionClient,
    RenderRequest,
    SceneInput,
)

logger = logging.getLogger(__name__)


def build_captions(script: Script) -> List[Caption]:
    """
    One caption per section spanning that section's slot on the timeline.
    The hook is overlaid on the opening of the first section.
    """
    captions = []
    cursor = 0.0

    if script.sections and script.hook:
        first = script.sections[0].duration_seconds
        captions.append(Caption(text=script.hook, start_seconds=0.0, end_seconds=min(3.0, float(first))))

    for section in script.sections:
        end = cursor + section.duration_seconds
        captions.append(Caption(text=section.narrative, start_seconds=cursor, end_seconds=end))
        cursor = end

    if script.outro and script.sections:
        last = script.sections[-1].duration_seconds
        captions.append(
            Caption(text=script.outro, start_seconds=max(0.0, cursor - min(3.0, last)), end_seconds=cursor)
        )

    return captions


class VeoRenderer(Renderer):
    """Veo clips through Kie.ai, composed by Remotion."""

    def __init__(
        self,
        kie: Optional[KieClient] = None,
        remotion: Optional[RemotionClient] = None,
        config: Optional[RenderConfig] = None,
    ):
        self.kie = kie or KieClient()
        self.remotion = remotion or RemotionClient()
        self.config = config or get_config().render

    async def close(self):
        await self.remotion.close()

    async def render(
        self,
        prompts: Sequence[VisualPrompt],
        script: Script,
    ) -> RenderOutput:
        if not prompts:
            raise RenderError("Nothing to render: storyboard is empty")

        clips = await self._generate_clips(prompts)

        request = RenderRequest(
            composition=self.config.composition,
            scenes=[
                SceneInput(
                    order=i + 1,
                    url=clip.output_url,
                    type="video",
                    duration_seconds=float(prompt.duration_seconds),
                )
                for i, (prompt, clip) in enumerate(zip(prompts, clips))
            ],
            captions=build_captions(script),
            title=script.hook,
        )

        logger.info(f"Composing {len(request.scenes)} clips with Remotion ({request.composition})")
        job = await self.remotion.render_and_wait(
            request,
            poll_interval=self.config.poll_interval_seconds,
            timeout=self.config.render_timeout_seconds,
        )

        if job.status != "completed":
            raise RenderError(f"Remotion render failed: {job.error_message or 'unknown error'}")
        if not job.output_url:
            raise RenderError(f"Remotion job {job.job_id} completed without an output URL")

        return RenderOutput(video_download_url=job.output_url)

    async def _generate_clips(self, prompts: Sequence[VisualPrompt]) -> List[GenerationResult]:
        tasks = [
            self.kie.generate_video(
                prompt.prompt,
                duration=min(prompt.duration_seconds, self.config.clip_max_seconds),
            )
            for prompt in prompts
        ]
        results = await asyncio.gather(*tasks, return_exceptions=True)

        failures = []
        for prompt, result in zip(prompts, results):
            if isinstance(result, BaseException):
                if not isinstance(result, Exception):
                    raise result
                failures.append(f"{prompt.scene}: {result}")
            elif result.status != "completed" or not result.output_url:
                failures.append(f"{prompt.scene}: {result.error_message or result.status}")

        if failures:
            raise RenderError(f"Clip generation failed for {len(failures)} scene(s): {'; '.join(failures)}")

        logger.info(f"Generated {len(results)} Veo clips")
        return list(results)
