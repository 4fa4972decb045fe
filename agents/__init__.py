"""
Stage Agents

Concrete stage adapters wired to real backends:

- GeminiScriptwriter: Brief -> Script (Gemini)
- GeminiPromptDesigner: Script -> Veo prompts (Gemini)
- VeoRenderer: prompts -> rendered video (Kie.ai Veo + Remotion)
- YouTubePublisher: rendered video -> YouTube listing

Usage:
    from agents import default_adapters
    from services.orchestrator import VideoPipeline

    pipeline = VideoPipeline(default_adapters())
"""

from services.orchestrator.stages import StageAdapters

from .prompt_designer import GeminiPromptDesigner
from .publisher import YouTubePublisher
from .renderer import VeoRenderer
from .scriptwriter import GeminiScriptwriter


def default_adapters(**overrides) -> StageAdapters:
    """
    Build the production adapter set.

    Any of ``scriptwriter``, ``prompt_designer``, ``renderer`` or
    ``publisher`` may be passed to replace the default for that stage.
    """
    unknown = set(overrides) - {"scriptwriter", "prompt_designer", "renderer", "publisher"}
    if unknown:
        raise TypeError(f"Unknown adapter override(s): {', '.join(sorted(unknown))}")

    return StageAdapters(
        scriptwriter=overrides.get("scriptwriter") or GeminiScriptwriter(),
        prompt_designer=overrides.get("prompt_designer") or GeminiPromptDesigner(),
        renderer=overrides.get("renderer") or VeoRenderer(),
        publisher=overrides.get("publisher") or YouTubePublisher(),
    )


__all__ = [
    "GeminiScriptwriter",
    "GeminiPromptDesigner",
    "VeoRenderer",
    "YouTubePublisher",
    "default_adapters",
]
