"""
Stage Adapter Contracts

The orchestrator depends only on these abstractions. Each adapter performs
a single logical operation: given valid input it returns the declared
output or raises. Adapters never report status themselves.

Stage      | Input                      | Output
-----------|----------------------------|----------------------
Script     | Brief                      | Script
Prompt     | Script                     | sequence of VisualPrompt
Render     | VisualPrompts + Script     | RenderOutput
Publish    | RenderOutput + Brief       | PublishOutput
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Sequence

from .state import (
    Brief,
    PipelineStage,
    PublishOutput,
    RenderOutput,
    Script,
    VisualPrompt,
)


class StageAdapter(ABC):
    """Base class for all stage adapters."""

    stage: PipelineStage

    async def close(self):
        """Release backend resources. No-op unless the adapter holds sessions."""


class Scriptwriter(StageAdapter):
    """Writes a structured script from the brief."""

    stage = PipelineStage.SCRIPT

    @abstractmethod
    async def write_script(self, brief: Brief) -> Script:
        pass


class PromptDesigner(StageAdapter):
    """Derives one visual prompt per script section."""

    stage = PipelineStage.PROMPT

    @abstractmethod
    async def design_prompts(self, script: Script) -> Sequence[VisualPrompt]:
        pass


class Renderer(StageAdapter):
    """Renders the storyboard into a downloadable video."""

    stage = PipelineStage.RENDER

    @abstractmethod
    async def render(
        self,
        prompts: Sequence[VisualPrompt],
        script: Script,
    ) -> RenderOutput:
        pass


class Publisher(StageAdapter):
    """Publishes the rendered video to the hosting platform."""

    stage = PipelineStage.PUBLISH

    @abstractmethod
    async def publish(self, render: RenderOutput, brief: Brief) -> PublishOutput:
        pass


@dataclass(frozen=True)
class StageAdapters:
    """The four adapters a pipeline is wired with."""
    scriptwriter: Scriptwriter
    prompt_designer: PromptDesigner
    renderer: Renderer
    publisher: Publisher

    def __iter__(self):
        return iter((self.scriptwriter, self.prompt_designer, self.renderer, self.publisher))

    async def close(self):
        """Close every adapter."""
        for adapter in self:
            await adapter.close()
