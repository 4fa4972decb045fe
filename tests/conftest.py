"""
Shared fixtures: a sample brief and stub stage adapters.

The stubs return canned outputs so the orchestrator and transport can be
exercised without any generation backend.
"""

import os
import sys
from typing import Optional, Sequence

import pytest

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from services.orchestrator.stages import (
    PromptDesigner,
    Publisher,
    Renderer,
    Scriptwriter,
    StageAdapters,
)
from services.orchestrator.state import (
    Brief,
    PublishOutput,
    RenderOutput,
    Script,
    ScriptSection,
    VisualPrompt,
)
from services.publisher.metadata import build_metadata

SAMPLE_BRIEF = {
    "topic": "AI automation for video creators",
    "targetAudience": "Busy YouTubers",
    "contentGoals": "Educate on automation",
    "durationSeconds": 120,
}

RENDER_URL = "https://cdn.example.com/renders/abc123.mp4"
YOUTUBE_URL = "https://youtube.com/watch?v=abc123"


class StubScriptwriter(Scriptwriter):
    def __init__(self, sections: int = 3, error: Optional[Exception] = None):
        self.sections = sections
        self.error = error
        self.calls = []

    async def write_script(self, brief: Brief) -> Script:
        self.calls.append(brief)
        if self.error:
            raise self.error
        per_section = (brief.duration_seconds or 60) // self.sections
        return Script(
            hook=f"Stop wasting hours on {brief.topic.lower()}",
            sections=tuple(
                ScriptSection(
                    heading=f"Step {i + 1}",
                    narrative=f"Narration for step {i + 1}",
                    duration_seconds=per_section,
                )
                for i in range(self.sections)
            ),
            outro="Subscribe for more",
        )


class StubPromptDesigner(PromptDesigner):
    def __init__(self, drop: int = 0, error: Optional[Exception] = None):
        self.drop = drop
        self.error = error
        self.calls = []

    async def design_prompts(self, script: Script) -> Sequence[VisualPrompt]:
        self.calls.append(script)
        if self.error:
            raise self.error
        sections = script.sections[: len(script.sections) - self.drop]
        return [
            VisualPrompt(
                scene=section.heading,
                prompt=f"Cinematic shot illustrating {section.heading.lower()}",
                duration_seconds=section.duration_seconds,
            )
            for section in sections
        ]


class StubRenderer(Renderer):
    def __init__(self, error: Optional[Exception] = None):
        self.error = error
        self.calls = []

    async def render(self, prompts, script) -> RenderOutput:
        self.calls.append((prompts, script))
        if self.error:
            raise self.error
        return RenderOutput(video_download_url=RENDER_URL)


class StubPublisher(Publisher):
    def __init__(self, error: Optional[Exception] = None):
        self.error = error
        self.calls = []

    async def publish(self, render: RenderOutput, brief: Brief) -> PublishOutput:
        self.calls.append((render, brief))
        if self.error:
            raise self.error
        return PublishOutput(
            youtube_video_url=YOUTUBE_URL,
            metadata=build_metadata(brief),
            video_id="abc123",
        )


def make_adapters(**overrides) -> StageAdapters:
    return StageAdapters(
        scriptwriter=overrides.get("scriptwriter") or StubScriptwriter(),
        prompt_designer=overrides.get("prompt_designer") or StubPromptDesigner(),
        renderer=overrides.get("renderer") or StubRenderer(),
        publisher=overrides.get("publisher") or StubPublisher(),
    )


@pytest.fixture
def sample_payload() -> dict:
    return dict(SAMPLE_BRIEF)


@pytest.fixture
def sample_brief() -> Brief:
    return Brief.model_validate(SAMPLE_BRIEF)


@pytest.fixture
def adapters() -> StageAdapters:
    return make_adapters()


@pytest.fixture
def adapter_factory():
    """Build an adapter set with some stages replaced."""
    return make_adapters
