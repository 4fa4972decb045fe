"""
Prompt Designer Agent - Script to Veo storyboard

Turns each script section into one visual-generation prompt. The model is
asked to echo section headings; its scenes are matched back to sections
by heading (case and surrounding whitespace ignored) and emitted in
script order with the section's own timing.

Usage:
    from agents.prompt_designer import GeminiPromptDesigner

    prompts = await GeminiPromptDesigner().design_prompts(script)
"""

import logging
from typing import List

from agents.shared.llm import generate_storyboard
from services.orchestrator.errors import PromptDesignError
from services.orchestrator.stages import PromptDesigner
from services.orchestrator.state import Script, VisualPrompt

logger = logging.getLogger(__name__)


def _key(heading: str) -> str:
    return " ".join(heading.split()).lower()


class GeminiPromptDesigner(PromptDesigner):
    """Designs Veo scene prompts with Gemini structured output."""

    async def design_prompts(self, script: Script) -> List[VisualPrompt]:
        storyboard = await generate_storyboard(script)

        by_heading = {}
        for scene in storyboard.scenes:
            # First scene wins when the model repeats a heading
            by_heading.setdefault(_key(scene.scene), scene)

        missing = [s.heading for s in script.sections if _key(s.heading) not in by_heading]
        if missing:
            raise PromptDesignError(f"Storyboard has no scene for: {', '.join(missing)}", retryable=True)

        prompts = []
        for section in script.sections:
            scene = by_heading[_key(section.heading)]
            if not scene.prompt.strip():
                raise PromptDesignError(f"Empty prompt for scene: {section.heading}", retryable=True)
            prompts.append(
                VisualPrompt(
                    scene=section.heading,
                    prompt=scene.prompt.strip(),
                    duration_seconds=section.duration_seconds,
                )
            )

        extra = len(storyboard.scenes) - len(prompts)
        if extra > 0:
            logger.warning(f"Dropped {extra} storyboard scenes with no matching section")

        return prompts
