"""
YouTube Upload Client

Handles video uploads to YouTube using the YouTube Data API v3.
Supports:
- OAuth2 access-token refresh
- Resumable upload of a local video file
- Classification of API rejections (auth, quota, policy)
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Literal, Optional

import aiofiles
import aiohttp

from core.config import get_config

logger = logging.getLogger(__name__)


@dataclass
class VideoMetadata:
    """Metadata for a YouTube video upload."""
    title: str
    description: str
    tags: list[str] = field(default_factory=list)
    category_id: str = "28"  # Science & Technology
    privacy_status: Literal["public", "private", "unlisted"] = "private"
    made_for_kids: bool = False
    contains_synthetic_media: bool = True
    default_language: str = "en"

    def to_resource(self) -> dict:
        """Build the YouTube video resource body."""
        return {
            "snippet": {
                "title": self.title[:100],  # YouTube limit
                "description": self.description[:5000],  # YouTube limit
                "tags": self.tags,
                "categoryId": self.category_id,
                "defaultLanguage": self.default_language,
            },
            "status": {
                "privacyStatus": self.privacy_status,
                "selfDeclaredMadeForKids": self.made_for_kids,
                "containsSyntheticMedia": self.contains_synthetic_media,
            },
        }


@dataclass
class UploadResult:
    """Result of a video upload."""
    success: bool
    video_id: Optional[str] = None
    video_url: Optional[str] = None
    error_message: Optional[str] = None
    error_reason: Optional[Literal["auth", "quota", "policy", "upload"]] = None
    upload_time_seconds: float = 0.0


# YouTube API error reasons grouped by what the caller can do about them
QUOTA_REASONS = {"quotaExceeded", "uploadLimitExceeded", "rateLimitExceeded", "userRateLimitExceeded"}
AUTH_REASONS = {"authError", "unauthorized", "invalidCredentials", "youtubeSignupRequired"}
POLICY_REASONS = {"forbidden", "invalidVideoMetadata", "mediaBodyRequired", "invalidTitle", "invalidDescription", "invalidTags"}


def classify_error(status: int, body: dict) -> Literal["auth", "quota", "policy", "upload"]:
    """Map a YouTube API error response to a rejection reason."""
    errors = body.get("error", {}).get("errors", []) if isinstance(body, dict) else []
    reasons = {e.get("reason", "") for e in errors if isinstance(e, dict)}

    if reasons & QUOTA_REASONS:
        return "quota"
    if status == 401 or reasons & AUTH_REASONS:
        return "auth"
    if reasons & POLICY_REASONS or status in (400, 403):
        return "policy"
    return "upload"


class YouTubeClient:
    """
    Client for YouTube Data API v3.

    Handles OAuth2 token refresh and resumable video uploads.
    """

    YOUTUBE_UPLOAD_URL = "https://www.googleapis.com/upload/youtube/v3/videos"
    TOKEN_URL = "https://oauth2.googleapis.com/token"

    def __init__(
        self,
        client_id: Optional[str] = None,
        client_secret: Optional[str] = None,
        refresh_token: Optional[str] = None,
        access_token: Optional[str] = None,
    ):
        api = get_config().api
        self.client_id = client_id or api.youtube_client_id
        self.client_secret = client_secret or api.youtube_client_secret
        self.refresh_token = refresh_token or api.youtube_refresh_token
        self._access_token = access_token
        self._token_expires_at: Optional[datetime] = None
        self._session: Optional[aiohttp.ClientSession] = None

    async def _get_session(self) -> aiohttp.ClientSession:
        """Get or create aiohttp session."""
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession()
        return self._session

    async def close(self):
        """Close the client session."""
        if self._session and not self._session.closed:
            await self._session.close()

    async def _ensure_access_token(self):
        """Refresh access token if needed."""
        if self._access_token:
            if self._token_expires_at is None or datetime.now(timezone.utc) < self._token_expires_at:
                return  # Token still valid

        if not self.refresh_token:
            raise PermissionError("No refresh token available. Run OAuth2 flow first.")

        session = await self._get_session()

        async with session.post(
            self.TOKEN_URL,
            data={
                "client_id": self.client_id,
                "client_secret": self.client_secret,
                "refresh_token": self.refresh_token,
                "grant_type": "refresh_token",
            },
        ) as resp:
            if resp.status != 200:
                error = await resp.text()
                raise PermissionError(f"Failed to refresh token: {error}")

            data = await resp.json()
            self._access_token = data["access_token"]
            expires_in = data.get("expires_in", 3600)
            # Refresh a minute early
            self._token_expires_at = datetime.now(timezone.utc) + timedelta(seconds=expires_in - 60)

    async def _get_auth_headers(self) -> dict:
        """Get authorization headers."""
        await self._ensure_access_token()
        return {
            "Authorization": f"Bearer {self._access_token}",
        }

    async def upload_video(
        self,
        video_path: str,
        metadata: VideoMetadata,
    ) -> UploadResult:
        """
        Upload a video to YouTube.

        Args:
            video_path: Path to the video file
            metadata: Video metadata

        Returns:
            UploadResult with video ID and URL, or the rejection reason
        """
        start_time = datetime.now(timezone.utc)

        video_file = Path(video_path)
        if not video_file.exists():
            return UploadResult(
                success=False,
                error_message=f"Video file not found: {video_path}",
                error_reason="upload",
            )

        file_size = video_file.stat().st_size
        logger.info(f"Uploading video: {video_path} ({file_size / 1024 / 1024:.1f} MB)")

        try:
            headers = await self._get_auth_headers()
        except PermissionError as e:
            return UploadResult(success=False, error_message=str(e), error_reason="auth")

        session = await self._get_session()

        # Step 1: Initialize resumable upload
        init_headers = {
            **headers,
            "Content-Type": "application/json; charset=UTF-8",
            "X-Upload-Content-Length": str(file_size),
            "X-Upload-Content-Type": "video/*",
        }

        async with session.post(
            f"{self.YOUTUBE_UPLOAD_URL}?uploadType=resumable&part=snippet,status",
            headers=init_headers,
            json=metadata.to_resource(),
        ) as resp:
            if resp.status not in (200, 308):
                return await self._rejected(resp, "Upload init failed")

            upload_url = resp.headers.get("Location")
            if not upload_url:
                return UploadResult(
                    success=False,
                    error_message="No upload URL returned",
                    error_reason="upload",
                )

        # Step 2: Upload video data
        async with aiofiles.open(video_path, "rb") as f:
            video_data = await f.read()

        async with session.put(
            upload_url,
            headers={"Content-Type": "video/*", "Content-Length": str(file_size)},
            data=video_data,
        ) as resp:
            if resp.status not in (200, 201):
                return await self._rejected(resp, "Upload failed")

            result_data = await resp.json()
            video_id = result_data.get("id")

        elapsed = (datetime.now(timezone.utc) - start_time).total_seconds()
        logger.info(f"Upload complete: {video_id} in {elapsed:.1f}s")

        return UploadResult(
            success=True,
            video_id=video_id,
            video_url=f"https://youtube.com/watch?v={video_id}",
            upload_time_seconds=elapsed,
        )

    async def _rejected(self, resp: aiohttp.ClientResponse, prefix: str) -> UploadResult:
        """Build a failed UploadResult from an API error response."""
        text = await resp.text()
        try:
            body = await resp.json(content_type=None)
        except ValueError:
            body = {}
        reason = classify_error(resp.status, body)
        logger.error(f"{prefix} ({reason}): HTTP {resp.status}")
        return UploadResult(
            success=False,
            error_message=f"{prefix}: HTTP {resp.status} {text[:300]}",
            error_reason=reason,
        )
