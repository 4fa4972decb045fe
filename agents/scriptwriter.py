"""
Scriptwriter Agent - Brief to structured script

The Scriptwriter agent is the entry point of a production run:
1. Prompts Gemini for a structured script draft
2. Checks the draft has usable, uniquely named sections
3. Fits section timings to the requested duration
4. Makes sure the outro carries the call to action

Usage:
    from agents.scriptwriter import GeminiScriptwriter

    script = await GeminiScriptwriter().write_script(brief)
"""

import logging
from typing import List, Optional

from agents.shared.llm import ScriptDraft, generate_script_draft
from services.orchestrator.errors import ScriptGenerationError
from services.orchestrator.stages import Scriptwriter
from services.orchestrator.state import Brief, Script, ScriptSection

logger = logging.getLogger(__name__)


def fit_durations(durations: List[int], target: Optional[int]) -> List[int]:
    """
    Scale section durations so they sum to ``target`` seconds.

    Every section keeps at least one second; rounding drift is settled on
    the longest section. Without a target the durations are only clamped.
    Raises ScriptGenerationError when there are more sections than seconds.
    """
    clamped = [max(1, d) for d in durations]
    if not target or not clamped:
        return clamped
    if len(clamped) > target:
        raise ScriptGenerationError(
            f"{len(clamped)} sections cannot fit in {target}s", retryable=True
        )

    total = sum(clamped)
    scaled = [max(1, round(d * target / total)) for d in clamped]

    drift = target - sum(scaled)
    longest = scaled.index(max(scaled))
    scaled[longest] = max(1, scaled[longest] + drift)
    return scaled


class GeminiScriptwriter(Scriptwriter):
    """Writes scripts with Gemini structured output."""

    async def write_script(self, brief: Brief) -> Script:
        draft = await generate_script_draft(brief)
        script = self._to_script(draft, brief)
        logger.info(
            f"Script drafted: {len(script.sections)} sections, "
            f"{script.total_duration_seconds}s for \"{brief.topic}\""
        )
        return script

    def _to_script(self, draft: ScriptDraft, brief: Brief) -> Script:
        sections = [s for s in draft.sections if s.heading.strip() and s.narrative.strip()]
        if not sections:
            raise ScriptGenerationError("Script draft has no usable sections", retryable=True)

        headings = [s.heading.strip() for s in sections]
        if len({h.lower() for h in headings}) != len(headings):
            raise ScriptGenerationError(f"Script draft repeats section headings: {headings}", retryable=True)

        if not draft.hook.strip():
            raise ScriptGenerationError("Script draft has no hook", retryable=True)

        durations = fit_durations([s.duration_seconds for s in sections], brief.duration_seconds)

        outro = draft.outro.strip()
        cta = (brief.call_to_action or "").strip()
        if cta and cta.lower() not in outro.lower():
            outro = f"{outro} {cta}".strip()

        return Script(
            hook=draft.hook.strip(),
            sections=tuple(
                ScriptSection(
                    heading=heading,
                    narrative=section.narrative.strip(),
                    duration_seconds=duration,
                )
                for heading, section, duration in zip(headings, sections, durations)
            ),
            outro=outro,
        )
