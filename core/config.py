"""
Configuration management for AgenticVideo.

Centralizes all configuration including:
- API keys and endpoints for the stage backends
- Model selections
- Render and publish settings
- Server settings
"""

import os
from dataclasses import dataclass, field
from typing import Literal, Optional


@dataclass
class APIConfig:
    """API configuration for the generation, render and publish backends."""

    # LLM (script + storyboard prompts)
    google_api_key: str = field(default_factory=lambda: os.getenv("GOOGLE_API_KEY", ""))

    # Kie.ai aggregator (Veo scene clips)
    kie_api_key: str = field(default_factory=lambda: os.getenv("KIE_API_KEY", ""))
    kie_api_base: str = field(default_factory=lambda: os.getenv("KIE_API_URL", "https://api.kie.ai/api/v1"))

    # Remotion composition server
    remotion_api_url: str = field(default_factory=lambda: os.getenv("REMOTION_API_URL", "https://api.cckeeper.dev"))
    remotion_api_key: str = field(default_factory=lambda: os.getenv("REMOTION_API_KEY", ""))

    # YouTube Data API v3 (OAuth2 refresh flow)
    youtube_client_id: str = field(default_factory=lambda: os.getenv("YOUTUBE_CLIENT_ID", ""))
    youtube_client_secret: str = field(default_factory=lambda: os.getenv("YOUTUBE_CLIENT_SECRET", ""))
    youtube_refresh_token: str = field(default_factory=lambda: os.getenv("YOUTUBE_REFRESH_TOKEN", ""))


@dataclass
class ModelConfig:
    """Model selection configuration."""

    script_model: str = field(default_factory=lambda: os.getenv("SCRIPT_MODEL", "gemini-2.0-flash"))
    prompt_model: str = field(default_factory=lambda: os.getenv("PROMPT_MODEL", "gemini-2.0-flash"))

    # Kie.ai market name for scene clips
    video_model: str = field(default_factory=lambda: os.getenv("VIDEO_MODEL", "veo3_fast"))

    script_temperature: float = 0.7
    prompt_temperature: float = 0.6
    max_output_tokens: int = 4096


@dataclass
class RenderConfig:
    """Render settings for clip generation and composition."""
    composition: Literal["ViralShort", "YouTubeVideo"] = "YouTubeVideo"
    aspect_ratio: str = "16:9"
    clip_max_seconds: int = 8  # Veo clips top out at 8s
    clip_timeout_seconds: int = 300
    poll_interval_seconds: float = 2.0
    render_timeout_seconds: float = 600.0


@dataclass
class PublishConfig:
    """YouTube publishing settings."""
    privacy_status: Literal["public", "private", "unlisted"] = field(
        default_factory=lambda: os.getenv("YOUTUBE_PRIVACY_STATUS", "private")
    )
    category_id: str = field(default_factory=lambda: os.getenv("YOUTUBE_CATEGORY_ID", "28"))
    max_tags: int = 15
    default_tags: list[str] = field(default_factory=lambda: ["ai video", "automation"])


@dataclass
class PipelineConfig:
    """Orchestrator settings."""

    # Upper bound on how long an async status sink may hold up a stage boundary
    status_timeout_seconds: float = field(
        default_factory=lambda: float(os.getenv("STATUS_TIMEOUT_SECONDS", "5"))
    )


@dataclass
class ServerConfig:
    """HTTP server settings."""
    host: str = field(default_factory=lambda: os.getenv("HOST", "0.0.0.0"))
    port: int = field(default_factory=lambda: int(os.getenv("PORT", "8765")))
    log_level: str = field(default_factory=lambda: os.getenv("LOG_LEVEL", "INFO"))


@dataclass
class Config:
    """Main configuration class."""

    api: APIConfig = field(default_factory=APIConfig)
    models: ModelConfig = field(default_factory=ModelConfig)
    render: RenderConfig = field(default_factory=RenderConfig)
    publish: PublishConfig = field(default_factory=PublishConfig)
    pipeline: PipelineConfig = field(default_factory=PipelineConfig)
    server: ServerConfig = field(default_factory=ServerConfig)

    @classmethod
    def from_env(cls) -> "Config":
        """Load configuration from environment variables."""
        return cls()

    def validate(self) -> list[str]:
        """Validate configuration and return list of issues."""
        issues = []

        if not self.api.google_api_key:
            issues.append("GOOGLE_API_KEY not configured (needed for script and prompt generation)")

        if not self.api.kie_api_key:
            issues.append("KIE_API_KEY not configured (needed for scene clip generation)")

        if not self.api.youtube_refresh_token:
            issues.append("YOUTUBE_REFRESH_TOKEN not configured (needed for publishing)")

        return issues


# Global config instance
_config: Optional[Config] = None


def get_config() -> Config:
    """Get the global configuration instance."""
    global _config
    if _config is None:
        _config = Config.from_env()
    return _config


def reload_config():
    """Reload configuration from environment."""
    global _config
    _config = Config.from_env()
