"""
Shared Agent Modules

This package contains shared backend clients for the stage adapters:

- llm: Gemini 2.0 Flash structured generation (scripts, storyboards)
- kie_client: Kie.ai Market API (Veo 3 scene clips)

Usage:
    from agents.shared import (
        generate_script_draft,
        generate_storyboard,
        KieClient,
    )
"""

from .llm import (
    generate_script_draft,
    generate_storyboard,
    ScriptDraft,
    SectionDraft,
    SceneDraft,
    StoryboardDraft,
)
from .kie_client import (
    KieClient,
    KieAPIError,
    GenerationResult,
)

__all__ = [
    # LLM
    "generate_script_draft",
    "generate_storyboard",
    "ScriptDraft",
    "SectionDraft",
    "SceneDraft",
    "StoryboardDraft",
    # Kie.ai
    "KieClient",
    "KieAPIError",
    "GenerationResult",
]
