"""
LLM Client - Gemini structured generation

Usage:
    from agents.shared.llm import generate_script_draft, generate_storyboard

Features:
    - Gemini 2.0 Flash for fast generation
    - Structured output with Pydantic models
    - Async calls via the google-genai aio client
"""

import logging
from typing import List, Optional

from google import genai
from google.genai import types
from pydantic import BaseModel, Field

from core.config import get_config
from services.orchestrator.state import Brief, Script

logger = logging.getLogger(__name__)

# Lazy-load Gemini client
_client: Optional[genai.Client] = None


def get_client() -> genai.Client:
    """Get or create the Gemini client (lazy-loaded)."""
    global _client
    if _client is None:
        api_key = get_config().api.google_api_key
        if not api_key:
            raise ValueError("GOOGLE_API_KEY environment variable not set")
        _client = genai.Client(api_key=api_key)
    return _client


# ============================================================
# Output Models
# ============================================================

class SectionDraft(BaseModel):
    """One narrated section of a script"""
    heading: str = Field(description="Short unique heading naming the section")
    narrative: str = Field(description="Voice-over text for the section")
    duration_seconds: int = Field(description="Seconds of screen time for the section")


class ScriptDraft(BaseModel):
    """A complete script for a YouTube video"""
    hook: str = Field(description="Opening hook that grabs attention in first 3 seconds")
    sections: List[SectionDraft] = Field(description="Body sections in narrative order")
    outro: str = Field(description="Closing line, including the call to action when one is given")


class SceneDraft(BaseModel):
    """A single visual scene prompt"""
    scene: str = Field(description="Heading of the script section this scene illustrates, copied exactly")
    prompt: str = Field(description="Detailed prompt for video generation")
    duration_seconds: int = Field(description="Scene length in seconds")


class StoryboardDraft(BaseModel):
    """List of visual scenes for a video"""
    scenes: List[SceneDraft]


# ============================================================
# Generation Functions
# ============================================================

async def generate_script_draft(brief: Brief) -> ScriptDraft:
    """
    Generate a structured script for a brief.

    Args:
        brief: The validated creative brief

    Returns:
        ScriptDraft with hook, sections and outro
    """
    models = get_config().models
    duration = brief.duration_seconds or 60

    system_prompt = f"""You are an expert YouTube scriptwriter.

Your scripts are:
- Hook-driven: First 3 seconds must grab attention
- Written for the audience: {brief.target_audience}
- Value-dense: Every sentence teaches something
- Paced for about {duration} seconds in total

Split the body into 3-6 sections with unique headings.
Section durations must add up to roughly {duration} seconds.
"""

    user_prompt = f"""Write a script about: {brief.topic}

Content goals: {brief.content_goals}
{f"Tone: {brief.tone}" if brief.tone else ""}
{f"Keywords to work in: {', '.join(brief.keywords)}" if brief.keywords else ""}
{f"Call to action for the outro: {brief.call_to_action}" if brief.call_to_action else ""}
"""

    logger.info(f"Generating script with {models.script_model}: {brief.topic}")
    response = await get_client().aio.models.generate_content(
        model=models.script_model,
        contents=user_prompt,
        config=types.GenerateContentConfig(
            system_instruction=system_prompt,
            response_mime_type="application/json",
            response_schema=ScriptDraft,
            temperature=models.script_temperature,
            max_output_tokens=models.max_output_tokens,
        ),
    )

    return ScriptDraft.model_validate_json(response.text)


async def generate_storyboard(script: Script) -> StoryboardDraft:
    """
    Generate one visual scene prompt per script section.

    Args:
        script: The structured script

    Returns:
        StoryboardDraft with one scene per section
    """
    models = get_config().models

    system_prompt = """You are a visual director for YouTube explainer content.

Your visual prompts:
- Are cinematic and concrete: subject, setting, action
- Specify camera movements (dolly, crane, orbit)
- Include lighting direction (golden hour, soft diffused)
- Contain no on-screen text, logos or real people
- Are optimized for AI video generation (Veo 3)
"""

    sections = "\n\n".join(
        f"[{section.heading}] ({section.duration_seconds}s)\n{section.narrative}"
        for section in script.sections
    )

    user_prompt = f"""Generate exactly one visual scene for each section below.

HOOK: {script.hook}

SECTIONS:
{sections}

Copy each section heading verbatim into the scene field.
Keep each scene's duration equal to its section duration.
"""

    logger.info(f"Generating storyboard with {models.prompt_model}: {len(script.sections)} sections")
    response = await get_client().aio.models.generate_content(
        model=models.prompt_model,
        contents=user_prompt,
        config=types.GenerateContentConfig(
            system_instruction=system_prompt,
            response_mime_type="application/json",
            response_schema=StoryboardDraft,
            temperature=models.prompt_temperature,
            max_output_tokens=models.max_output_tokens,
        ),
    )

    return StoryboardDraft.model_validate_json(response.text)
