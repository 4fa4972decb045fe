"""
Tests for the concrete stage adapters.

Backends (Gemini, Kie.ai, Remotion, YouTube) are replaced with AsyncMocks;
these tests check how each adapter maps backend responses onto stage
outputs and stage errors.

Run with:
    python -m pytest tests/test_agents.py -v
"""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from agents import default_adapters
from agents.prompt_designer import GeminiPromptDesigner
from agents.publisher import YouTubePublisher
from agents.renderer import VeoRenderer, build_captions
from agents.scriptwriter import GeminiScriptwriter, fit_durations
from agents.shared.kie_client import GenerationResult
from agents.shared.llm import SceneDraft, ScriptDraft, SectionDraft, StoryboardDraft
from conftest import StubRenderer
from core.config import PublishConfig, RenderConfig
from services.orchestrator import (
    PromptDesignError,
    PublishRejectedError,
    RenderError,
    ScriptGenerationError,
)
from services.orchestrator.state import Brief, RenderOutput, Script, ScriptSection, VisualPrompt
from services.publisher.youtube_client import UploadResult
from services.rendering.remotion_client import RenderJob


def make_script() -> Script:
    return Script(
        hook="Editing eats your week",
        sections=(
            ScriptSection("The problem", "Hours lost to manual edits", 30),
            ScriptSection("The fix", "Automate the boring parts", 50),
            ScriptSection("Results", "Ship twice as often", 40),
        ),
        outro="Subscribe for more",
    )


class TestScriptwriter:

    def test_fit_durations_hits_target(self):
        assert sum(fit_durations([10, 20, 30], 120)) == 120
        assert fit_durations([10, 20, 30], 120) == [20, 40, 60]

    def test_fit_durations_without_target_clamps(self):
        assert fit_durations([0, 15], None) == [1, 15]

    def test_fit_durations_one_second_per_section(self):
        assert fit_durations([1] * 30, 30) == [1] * 30

        with pytest.raises(ScriptGenerationError, match="40 sections"):
            fit_durations([1] * 40, 30)

    @pytest.mark.asyncio
    async def test_draft_becomes_script(self, sample_brief):
        draft = ScriptDraft(
            hook="  Stop editing by hand ",
            sections=[
                SectionDraft(heading="Why", narrative="Because time", duration_seconds=20),
                SectionDraft(heading="How", narrative="Use agents", duration_seconds=40),
            ],
            outro="See you next time",
        )

        with patch("agents.scriptwriter.generate_script_draft", AsyncMock(return_value=draft)):
            script = await GeminiScriptwriter().write_script(sample_brief)

        assert script.hook == "Stop editing by hand"
        assert [s.heading for s in script.sections] == ["Why", "How"]
        assert script.total_duration_seconds == sample_brief.duration_seconds

    @pytest.mark.asyncio
    async def test_outro_gets_call_to_action(self, sample_payload):
        brief = Brief.model_validate({**sample_payload, "callToAction": "Subscribe now"})
        draft = ScriptDraft(
            hook="Hook",
            sections=[SectionDraft(heading="One", narrative="Body", duration_seconds=60)],
            outro="Thanks for watching.",
        )

        with patch("agents.scriptwriter.generate_script_draft", AsyncMock(return_value=draft)):
            script = await GeminiScriptwriter().write_script(brief)

        assert script.outro == "Thanks for watching. Subscribe now"

    @pytest.mark.asyncio
    async def test_duplicate_headings_rejected(self, sample_brief):
        draft = ScriptDraft(
            hook="Hook",
            sections=[
                SectionDraft(heading="Intro", narrative="a", duration_seconds=30),
                SectionDraft(heading="intro", narrative="b", duration_seconds=30),
            ],
            outro="Bye",
        )

        with patch("agents.scriptwriter.generate_script_draft", AsyncMock(return_value=draft)):
            with pytest.raises(ScriptGenerationError):
                await GeminiScriptwriter().write_script(sample_brief)

    @pytest.mark.asyncio
    async def test_empty_draft_rejected(self, sample_brief):
        draft = ScriptDraft(hook="Hook", sections=[], outro="Bye")

        with patch("agents.scriptwriter.generate_script_draft", AsyncMock(return_value=draft)):
            with pytest.raises(ScriptGenerationError):
                await GeminiScriptwriter().write_script(sample_brief)


class TestPromptDesigner:

    @pytest.mark.asyncio
    async def test_scenes_matched_to_sections_in_script_order(self):
        storyboard = StoryboardDraft(scenes=[
            SceneDraft(scene="results ", prompt="Team celebrating", duration_seconds=5),
            SceneDraft(scene="The Problem", prompt="Cluttered timeline", duration_seconds=5),
            SceneDraft(scene="The fix", prompt="Robot arm editing", duration_seconds=5),
            SceneDraft(scene="Bonus", prompt="Extra", duration_seconds=5),
        ])
        script = make_script()

        with patch("agents.prompt_designer.generate_storyboard", AsyncMock(return_value=storyboard)):
            prompts = await GeminiPromptDesigner().design_prompts(script)

        assert [p.scene for p in prompts] == ["The problem", "The fix", "Results"]
        assert [p.prompt for p in prompts] == ["Cluttered timeline", "Robot arm editing", "Team celebrating"]
        assert [p.duration_seconds for p in prompts] == [30, 50, 40]

    @pytest.mark.asyncio
    async def test_missing_scene_rejected(self):
        storyboard = StoryboardDraft(scenes=[
            SceneDraft(scene="The problem", prompt="x", duration_seconds=5),
        ])

        with patch("agents.prompt_designer.generate_storyboard", AsyncMock(return_value=storyboard)):
            with pytest.raises(PromptDesignError, match="The fix"):
                await GeminiPromptDesigner().design_prompts(make_script())


class TestRenderer:

    @pytest.fixture
    def kie(self):
        kie = MagicMock()
        kie.generate_video = AsyncMock(side_effect=lambda prompt, duration: GenerationResult(
            task_id=f"task-{prompt}",
            status="completed",
            output_url=f"https://clips.example.com/{duration}.mp4",
        ))
        return kie

    @pytest.fixture
    def remotion(self):
        remotion = MagicMock()
        remotion.close = AsyncMock()
        remotion.render_and_wait = AsyncMock(return_value=RenderJob(
            job_id="job-1",
            composition="YouTubeVideo",
            status="completed",
            output_url="https://renders.example.com/final.mp4",
        ))
        return remotion

    @pytest.fixture
    def prompts(self):
        return [
            VisualPrompt(scene=s.heading, prompt=f"shot {i}", duration_seconds=s.duration_seconds)
            for i, s in enumerate(make_script().sections)
        ]

    @pytest.mark.asyncio
    async def test_renders_clips_then_composes(self, kie, remotion, prompts):
        renderer = VeoRenderer(kie=kie, remotion=remotion, config=RenderConfig())

        output = await renderer.render(prompts, make_script())

        assert output == RenderOutput(video_download_url="https://renders.example.com/final.mp4")
        assert kie.generate_video.await_count == 3
        # Clip requests are capped at the model's maximum clip length
        assert {c.kwargs["duration"] for c in kie.generate_video.await_args_list} == {8}

        request = remotion.render_and_wait.await_args.args[0]
        assert [s.order for s in request.scenes] == [1, 2, 3]
        assert [s.duration_seconds for s in request.scenes] == [30.0, 50.0, 40.0]
        assert request.title == "Editing eats your week"

    @pytest.mark.asyncio
    async def test_failed_clip_raises_render_error(self, kie, remotion, prompts):
        kie.generate_video = AsyncMock(return_value=GenerationResult(
            task_id="t", status="failed", error_message="content policy",
        ))
        renderer = VeoRenderer(kie=kie, remotion=remotion, config=RenderConfig())

        with pytest.raises(RenderError, match="content policy"):
            await renderer.render(prompts, make_script())

        remotion.render_and_wait.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_failed_composition_raises_render_error(self, kie, remotion, prompts):
        remotion.render_and_wait = AsyncMock(return_value=RenderJob(
            job_id="job-1", composition="YouTubeVideo", status="failed",
            error_message="Render timeout exceeded (600s)",
        ))
        renderer = VeoRenderer(kie=kie, remotion=remotion, config=RenderConfig())

        with pytest.raises(RenderError, match="timeout"):
            await renderer.render(prompts, make_script())

    def test_captions_follow_section_timing(self):
        captions = build_captions(make_script())

        narration = [c for c in captions if c.text not in ("Editing eats your week", "Subscribe for more")]
        assert [(c.start_seconds, c.end_seconds) for c in narration] == [(0.0, 30.0), (30.0, 80.0), (80.0, 120.0)]
        assert captions[0].text == "Editing eats your week"
        assert captions[-1].end_seconds == 120.0


class TestPublisher:

    @pytest.fixture
    def render(self):
        return RenderOutput(video_download_url="https://renders.example.com/final.mp4")

    @pytest.mark.asyncio
    async def test_uploads_with_brief_metadata(self, render, sample_brief):
        youtube = MagicMock()
        youtube.upload_video = AsyncMock(return_value=UploadResult(
            success=True, video_id="vid123", video_url="https://youtube.com/watch?v=vid123",
        ))
        publisher = YouTubePublisher(youtube=youtube, config=PublishConfig(privacy_status="unlisted"))

        with patch("agents.publisher.download_video", AsyncMock(return_value=2048)) as download:
            output = await publisher.publish(render, sample_brief)

        assert download.await_args.args[0] == render.video_download_url
        assert output.youtube_video_url == "https://youtube.com/watch?v=vid123"
        assert output.video_id == "vid123"
        assert output.metadata.title == sample_brief.topic
        assert output.metadata.tags

        metadata = youtube.upload_video.await_args.args[1]
        assert metadata.privacy_status == "unlisted"
        assert metadata.tags == list(output.metadata.tags)

    @pytest.mark.asyncio
    async def test_quota_rejection(self, render, sample_brief):
        youtube = MagicMock()
        youtube.upload_video = AsyncMock(return_value=UploadResult(
            success=False, error_message="quotaExceeded", error_reason="quota",
        ))
        publisher = YouTubePublisher(youtube=youtube, config=PublishConfig())

        with patch("agents.publisher.download_video", AsyncMock(return_value=2048)):
            with pytest.raises(PublishRejectedError) as exc_info:
                await publisher.publish(render, sample_brief)

        assert exc_info.value.reason == "quota"
        assert exc_info.value.retryable is True


class TestDefaultAdapters:

    def test_override_one_stage(self):
        stub = StubRenderer()

        adapters = default_adapters(renderer=stub)

        assert adapters.renderer is stub
        assert isinstance(adapters.scriptwriter, GeminiScriptwriter)
        assert isinstance(adapters.publisher, YouTubePublisher)

    def test_unknown_override_rejected(self):
        with pytest.raises(TypeError):
            default_adapters(narrator=object())
