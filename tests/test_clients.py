"""
Tests for the backend clients (Kie.ai, Remotion, YouTube).

Network calls are patched out at the client method level.

Run with:
    python -m pytest tests/test_clients.py -v
"""

from unittest.mock import AsyncMock, patch

import httpx
import pytest
from tenacity import stop_after_attempt, wait_none

from agents.shared.kie_client import GenerationResult, KieClient, market_duration
from services.publisher.youtube_client import (
    VideoMetadata,
    YouTubeClient,
    classify_error,
)
from services.rendering.remotion_client import (
    Caption,
    RemotionClient,
    RenderJob,
    RenderRequest,
    SceneInput,
)


def api_error(*reasons: str) -> dict:
    return {"error": {"errors": [{"reason": r} for r in reasons]}}


class TestYouTubeClient:

    @pytest.mark.parametrize(
        "status, body, expected",
        [
            (403, api_error("quotaExceeded"), "quota"),
            (400, api_error("uploadLimitExceeded"), "quota"),
            (401, {}, "auth"),
            (403, api_error("youtubeSignupRequired"), "auth"),
            (400, api_error("invalidTitle"), "policy"),
            (403, api_error("forbidden"), "policy"),
            (503, {}, "upload"),
            (500, "not json", "upload"),
        ],
    )
    def test_classify_error(self, status, body, expected):
        assert classify_error(status, body) == expected

    def test_resource_body_respects_limits(self):
        metadata = VideoMetadata(title="t" * 150, description="d" * 6000, tags=["a", "b"])

        resource = metadata.to_resource()

        assert len(resource["snippet"]["title"]) == 100
        assert len(resource["snippet"]["description"]) == 5000
        assert resource["status"]["privacyStatus"] == "private"
        assert resource["status"]["containsSyntheticMedia"] is True

    @pytest.mark.asyncio
    async def test_missing_file_is_upload_failure(self, tmp_path):
        client = YouTubeClient(client_id="id", client_secret="secret", refresh_token="token")

        result = await client.upload_video(str(tmp_path / "missing.mp4"), VideoMetadata("t", "d"))

        assert result.success is False
        assert result.error_reason == "upload"

    @pytest.mark.asyncio
    async def test_missing_refresh_token_is_auth_failure(self, tmp_path):
        video = tmp_path / "video.mp4"
        video.write_bytes(b"\x00" * 16)
        client = YouTubeClient(client_id="id", client_secret="secret", refresh_token="")
        client.refresh_token = ""

        result = await client.upload_video(str(video), VideoMetadata("t", "d"))

        assert result.success is False
        assert result.error_reason == "auth"


class TestRemotionClient:

    def test_payload(self):
        request = RenderRequest(
            composition="YouTubeVideo",
            scenes=[SceneInput(order=1, url="https://clip/1.mp4", duration_seconds=8.0)],
            captions=[Caption(text="Hello", start_seconds=0.0, end_seconds=2.5)],
            title="My video",
        )

        payload = request.to_payload()

        assert payload["composition"] == "YouTubeVideo"
        assert payload["inputProps"]["scenes"] == [
            {"order": 1, "url": "https://clip/1.mp4", "type": "video", "durationInSeconds": 8.0}
        ]
        assert payload["inputProps"]["subtitles"] == [{"text": "Hello", "start": 0.0, "end": 2.5}]
        assert payload["inputProps"]["title"] == "My video"

    @pytest.mark.asyncio
    async def test_wait_for_completion_polls_until_done(self):
        client = RemotionClient(api_url="http://remotion.local", api_key="")
        statuses = iter(["rendering", "rendering", "completed"])

        async def fake_status(job):
            job.status = next(statuses)
            if job.status == "completed":
                job.output_url = "https://renders/final.mp4"
            return job

        with patch.object(client, "get_status", side_effect=fake_status) as get_status:
            job = await client.wait_for_completion(
                RenderJob(job_id="job-1", composition="YouTubeVideo"),
                poll_interval=0,
                timeout=5,
            )

        assert job.status == "completed"
        assert job.output_url == "https://renders/final.mp4"
        assert get_status.call_count == 3

    @pytest.mark.asyncio
    async def test_wait_for_completion_times_out(self):
        client = RemotionClient(api_url="http://remotion.local", api_key="")

        async def still_rendering(job):
            job.status = "rendering"
            return job

        with patch.object(client, "get_status", side_effect=still_rendering):
            job = await client.wait_for_completion(
                RenderJob(job_id="job-1", composition="YouTubeVideo"),
                poll_interval=0,
                timeout=0,
            )

        assert job.status == "failed"
        assert "timeout" in job.error_message.lower()

    @pytest.mark.asyncio
    async def test_failed_submission_skips_polling(self):
        client = RemotionClient(api_url="http://remotion.local", api_key="")
        failed = RenderJob(job_id="", composition="YouTubeVideo", status="failed", error_message="HTTP 500")

        with patch.object(client, "render", AsyncMock(return_value=failed)), \
                patch.object(client, "wait_for_completion", AsyncMock()) as wait:
            job = await client.render_and_wait(RenderRequest(composition="YouTubeVideo", scenes=[]))

        assert job.status == "failed"
        wait.assert_not_awaited()


class TestKieClient:

    @pytest.mark.parametrize("seconds, expected", [(4, "5"), (7, "5"), (8, "10"), (12, "10")])
    def test_market_duration(self, seconds, expected):
        assert market_duration(seconds) == expected

    @pytest.mark.asyncio
    async def test_generate_video_creates_and_polls(self):
        client = KieClient(api_key="key", base_url="https://kie.local/api/v1")
        done = GenerationResult(task_id="task-1", status="completed", output_url="https://clip.mp4")

        with patch.object(client, "_create_task", AsyncMock(return_value="task-1")) as create, \
                patch.object(client, "_poll_for_completion", AsyncMock(return_value=done)):
            result = await client.generate_video("A sunrise over mountains", duration=8)

        assert result.output_url == "https://clip.mp4"
        model, params = create.await_args.args
        assert model == "veo3-fast/text-to-video"
        assert params["duration"] == "10"
        assert params["aspect_ratio"] == "16:9"

    @pytest.mark.asyncio
    async def test_transport_errors_are_retried(self):
        client = KieClient(api_key="key", base_url="https://kie.local/api/v1")
        done = GenerationResult(task_id="task-2", status="completed", output_url="https://clip.mp4")
        create = AsyncMock(side_effect=[httpx.ConnectError("reset"), "task-2"])
        fast_retry = KieClient.generate_video.retry_with(wait=wait_none(), stop=stop_after_attempt(3))

        with patch.object(client, "_create_task", create), \
                patch.object(client, "_poll_for_completion", AsyncMock(return_value=done)):
            result = await fast_retry(client, "A sunrise", duration=5)

        assert result.task_id == "task-2"
        assert create.await_count == 2
