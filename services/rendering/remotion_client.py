"""
Remotion Rendering Service

Client for the Remotion video composition API.
Handles:
- Assembly of scene clips and captions into composition input props
- Render job submission
- Status polling until completion or timeout
"""

import asyncio
import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Literal, Optional

import aiohttp

from core.config import get_config

logger = logging.getLogger(__name__)


@dataclass
class RenderJob:
    """Tracks a Remotion render job."""
    job_id: str
    composition: str
    status: Literal["pending", "rendering", "completed", "failed"] = "pending"
    progress_percent: int = 0
    output_url: Optional[str] = None
    error_message: Optional[str] = None
    started_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    completed_at: Optional[datetime] = None


@dataclass
class SceneInput:
    """Scene clip for the Remotion composition."""
    order: int
    url: str
    type: Literal["video", "image"] = "video"
    duration_seconds: float = 5.0


@dataclass
class Caption:
    """On-screen narration caption."""
    text: str
    start_seconds: float
    end_seconds: float


@dataclass
class RenderRequest:
    """Request to render a video composition."""
    composition: Literal["ViralShort", "YouTubeVideo"]
    scenes: list[SceneInput]
    captions: list[Caption] = field(default_factory=list)
    title: Optional[str] = None
    metadata: Optional[dict] = None

    def to_payload(self) -> dict:
        """Build the Remotion render payload."""
        props = {
            "scenes": [
                {
                    "order": s.order,
                    "url": s.url,
                    "type": s.type,
                    "durationInSeconds": s.duration_seconds,
                }
                for s in self.scenes
            ],
            "subtitles": [
                {"text": c.text, "start": c.start_seconds, "end": c.end_seconds}
                for c in self.captions
            ],
        }

        if self.composition == "YouTubeVideo" and self.title:
            props["title"] = self.title

        if self.metadata:
            props["metadata"] = self.metadata

        return {
            "composition": self.composition,
            "inputProps": props,
        }


class RemotionClient:
    """
    Client for Remotion video rendering API.

    Connects to either:
    - Self-hosted Remotion server
    - Cloud Remotion Lambda behind the same HTTP interface
    """

    def __init__(
        self,
        api_url: Optional[str] = None,
        api_key: Optional[str] = None,
    ):
        api = get_config().api
        self.api_url = (api_url or api.remotion_api_url).rstrip("/")
        self.api_key = api_key if api_key is not None else api.remotion_api_key
        self._session: Optional[aiohttp.ClientSession] = None

    async def _get_session(self) -> aiohttp.ClientSession:
        """Get or create aiohttp session."""
        if self._session is None or self._session.closed:
            headers = {}
            if self.api_key:
                headers["Authorization"] = f"Bearer {self.api_key}"
            self._session = aiohttp.ClientSession(headers=headers)
        return self._session

    async def close(self):
        """Close the client session."""
        if self._session and not self._session.closed:
            await self._session.close()

    async def render(self, request: RenderRequest) -> RenderJob:
        """
        Submit a render job to Remotion.

        Returns:
            RenderJob with job_id for tracking, or status="failed"
        """
        session = await self._get_session()

        try:
            async with session.post(
                f"{self.api_url}/render",
                json=request.to_payload(),
            ) as resp:
                if resp.status != 200:
                    error = await resp.text()
                    logger.error(f"Remotion render failed: {error}")
                    return RenderJob(
                        job_id="",
                        composition=request.composition,
                        status="failed",
                        error_message=f"HTTP {resp.status}: {error}",
                    )

                data = await resp.json()
                job = RenderJob(
                    job_id=data.get("jobId", ""),
                    composition=request.composition,
                )
                logger.info(f"Render job submitted: {job.job_id}")
                return job

        except aiohttp.ClientError as e:
            logger.error(f"Failed to submit render job: {e}")
            return RenderJob(
                job_id="",
                composition=request.composition,
                status="failed",
                error_message=str(e),
            )

    async def get_status(self, job: RenderJob) -> RenderJob:
        """Refresh the status of a render job in place."""
        session = await self._get_session()

        try:
            async with session.get(f"{self.api_url}/render/{job.job_id}") as resp:
                if resp.status != 200:
                    job.status = "failed"
                    job.error_message = f"Job lookup failed: HTTP {resp.status}"
                    return job

                data = await resp.json()

        except aiohttp.ClientError as e:
            logger.error(f"Failed to get job status: {e}")
            job.status = "failed"
            job.error_message = str(e)
            return job

        job.status = data.get("status", "pending")
        job.progress_percent = data.get("progress", 0)

        if job.status == "completed":
            job.output_url = data.get("outputUrl")
            job.completed_at = datetime.now(timezone.utc)
        elif job.status == "failed":
            job.error_message = data.get("error", "Unknown error")

        return job

    async def wait_for_completion(
        self,
        job: RenderJob,
        poll_interval: float = 2.0,
        timeout: float = 600.0,
    ) -> RenderJob:
        """
        Poll a render job until it completes, fails or times out.

        Returns:
            Final RenderJob with output URL or error
        """
        loop = asyncio.get_running_loop()
        deadline = loop.time() + timeout

        while True:
            job = await self.get_status(job)

            if job.status in ("completed", "failed"):
                return job

            if loop.time() >= deadline:
                job.status = "failed"
                job.error_message = f"Render timeout exceeded ({timeout:.0f}s)"
                return job

            await asyncio.sleep(poll_interval)

    async def render_and_wait(
        self,
        request: RenderRequest,
        poll_interval: float = 2.0,
        timeout: float = 600.0,
    ) -> RenderJob:
        """Submit a render job and wait for completion."""
        job = await self.render(request)

        if job.status == "failed":
            return job

        return await self.wait_for_completion(job, poll_interval=poll_interval, timeout=timeout)
