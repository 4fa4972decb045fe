"""
AgenticVideo Core Components

Provides foundational infrastructure for the video production pipeline:
- Environment-driven configuration for backends, render, publish and server
"""

from .config import Config, get_config, reload_config

__all__ = ["Config", "get_config", "reload_config"]
