"""
Rendering Services

Video composition and rendering using Remotion.
"""

from .remotion_client import (
    RemotionClient,
    RenderJob,
    RenderRequest,
    SceneInput,
    Caption,
)

__all__ = [
    "RemotionClient",
    "RenderJob",
    "RenderRequest",
    "SceneInput",
    "Caption",
]
