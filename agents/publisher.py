"""
Publisher Agent - Rendered video to YouTube listing

The Publisher agent is the last step of a production run:
1. Builds listing metadata (title, description, tags) from the brief
2. Downloads the rendered video to a temporary file
3. Uploads it through the YouTube Data API
4. Maps platform rejections to PublishRejectedError

Usage:
    from agents.publisher import YouTubePublisher

    output = await YouTubePublisher().publish(render, brief)
"""

import logging
import tempfile
from pathlib import Path
from typing import Optional

import aiofiles
import aiohttp

from core.config import PublishConfig, get_config
from services.orchestrator.errors import PublishRejectedError
from services.orchestrator.stages import Publisher
from services.orchestrator.state import Brief, PublishOutput, RenderOutput
from services.publisher.metadata import build_metadata
from services.publisher.youtube_client import VideoMetadata, YouTubeClient

logger = logging.getLogger(__name__)

DOWNLOAD_CHUNK_BYTES = 1024 * 1024


async def download_video(url: str, destination: Path) -> int:
    """Stream a remote video to ``destination``. Returns bytes written."""
    written = 0
    timeout = aiohttp.ClientTimeout(total=600)
    async with aiohttp.ClientSession(timeout=timeout) as session:
        async with session.get(url) as resp:
            resp.raise_for_status()
            async with aiofiles.open(destination, "wb") as f:
                async for chunk in resp.content.iter_chunked(DOWNLOAD_CHUNK_BYTES):
                    await f.write(chunk)
                    written += len(chunk)
    return written


class YouTubePublisher(Publisher):
    """Uploads renders to YouTube with brief-derived metadata."""

    def __init__(
        self,
        youtube: Optional[YouTubeClient] = None,
        config: Optional[PublishConfig] = None,
    ):
        self.youtube = youtube or YouTubeClient()
        self.config = config or get_config().publish

    async def close(self):
        await self.youtube.close()

    async def publish(self, render: RenderOutput, brief: Brief) -> PublishOutput:
        metadata = build_metadata(
            brief,
            default_tags=self.config.default_tags,
            max_tags=self.config.max_tags,
        )

        with tempfile.NamedTemporaryFile(suffix=".mp4", delete=False) as tmp:
            video_path = Path(tmp.name)

        try:
            size = await download_video(render.video_download_url, video_path)
            logger.info(f"Downloaded render ({size / 1024 / 1024:.1f} MB) from {render.video_download_url}")

            result = await self.youtube.upload_video(
                str(video_path),
                VideoMetadata(
                    title=metadata.title,
                    description=metadata.description,
                    tags=list(metadata.tags),
                    category_id=self.config.category_id,
                    privacy_status=self.config.privacy_status,
                ),
            )
        finally:
            video_path.unlink(missing_ok=True)

        if not result.success or not result.video_url:
            reason = result.error_reason or "upload"
            raise PublishRejectedError(
                result.error_message or "YouTube rejected the upload",
                reason=reason,
                retryable=reason == "quota",
            )

        return PublishOutput(
            youtube_video_url=result.video_url,
            metadata=metadata,
            video_id=result.video_id,
        )
