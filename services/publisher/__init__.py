"""
Publisher Services

Video distribution to YouTube: the Data API upload client and the
listing metadata (title, description, tags) derived from a brief.
"""

from .youtube_client import (
    YouTubeClient,
    VideoMetadata,
    UploadResult,
    classify_error,
)

from .metadata import (
    build_metadata,
    build_tags,
    build_title,
    build_description,
    to_hashtag,
)

__all__ = [
    # YouTube Client
    "YouTubeClient",
    "VideoMetadata",
    "UploadResult",
    "classify_error",
    # Listing metadata
    "build_metadata",
    "build_tags",
    "build_title",
    "build_description",
    "to_hashtag",
]
