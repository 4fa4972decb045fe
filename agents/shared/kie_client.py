"""
Kie.ai Client - Veo scene clips via Market API

Usage:
    from agents.shared.kie_client import KieClient

    client = KieClient()
    result = await client.generate_video(prompt, duration=8)

Supported Models (Market API):
    Video: veo3, veo3_fast, wan, hailuo

API Documentation: https://docs.kie.ai/market/quickstart
"""

import asyncio
import json
import logging
from typing import Any, Dict, List, Literal, Optional

import httpx
from pydantic import BaseModel
from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_exponential

from core.config import get_config

logger = logging.getLogger(__name__)


# ============================================================
# Models
# ============================================================

class GenerationResult(BaseModel):
    """Result from a kie.ai generation"""
    task_id: str
    status: Literal["pending", "processing", "completed", "failed"]
    output_url: Optional[str] = None
    output_urls: Optional[List[str]] = None
    generation_time_seconds: Optional[float] = None
    error_message: Optional[str] = None


class KieAPIError(Exception):
    """Raised when kie.ai refuses to create a task."""


# Model name mappings for Market API
MODEL_MAPPINGS: Dict[str, str] = {
    "veo3": "veo3/text-to-video",
    "veo3_fast": "veo3-fast/text-to-video",
    "wan": "wan-2.6/text-to-video",
    "hailuo": "hailuo-i2v/text-to-video",
}


def market_duration(seconds: int) -> str:
    """Market API only accepts "5" or "10" second clips."""
    return "5" if seconds <= 7 else "10"


# ============================================================
# Kie.ai Client - Market API
# ============================================================

class KieClient:
    """Client for kie.ai Market API"""

    def __init__(self, api_key: Optional[str] = None, base_url: Optional[str] = None):
        api = get_config().api
        self.api_key = api_key or api.kie_api_key
        self.base_url = (base_url or api.kie_api_base).rstrip("/")
        self.headers = {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }

    async def _create_task(
        self,
        model: str,
        input_params: Dict[str, Any],
    ) -> str:
        """Create a generation task via Market API."""
        body = {
            "model": model,
            "input": input_params,
        }

        async with httpx.AsyncClient(timeout=60) as client:
            response = await client.post(
                f"{self.base_url}/jobs/createTask",
                headers=self.headers,
                json=body,
            )
            response.raise_for_status()
            data = response.json()

            if data.get("code") != 200:
                raise KieAPIError(f"Kie.ai API error: {data.get('msg', 'Unknown error')}")

            return data["data"]["taskId"]

    async def _poll_for_completion(
        self,
        task_id: str,
        max_wait: float = 300,
        poll_interval: float = 5,
    ) -> GenerationResult:
        """Poll for task completion via Market API."""
        elapsed = 0.0

        async with httpx.AsyncClient(timeout=30) as client:
            while elapsed < max_wait:
                response = await client.get(
                    f"{self.base_url}/jobs/recordInfo",
                    params={"taskId": task_id},
                    headers=self.headers,
                )
                response.raise_for_status()
                data = response.json()

                if data.get("code") != 200:
                    return GenerationResult(
                        task_id=task_id,
                        status="failed",
                        error_message=data.get("msg", "API error"),
                    )

                task_data = data.get("data") or {}
                state = task_data.get("state", "unknown")

                if state == "success":
                    # resultJson is a JSON string holding the output URLs
                    try:
                        result_json = json.loads(task_data.get("resultJson") or "{}")
                        output_urls = result_json.get("resultUrls", [])
                    except json.JSONDecodeError:
                        output_urls = []

                    return GenerationResult(
                        task_id=task_id,
                        status="completed" if output_urls else "failed",
                        output_url=output_urls[0] if output_urls else None,
                        output_urls=output_urls,
                        generation_time_seconds=task_data.get("costTime"),
                        error_message=None if output_urls else "Task succeeded without output",
                    )
                elif state == "fail":
                    return GenerationResult(
                        task_id=task_id,
                        status="failed",
                        error_message=task_data.get("failMsg") or "Generation failed",
                    )

                # Still processing
                await asyncio.sleep(poll_interval)
                elapsed += poll_interval

        return GenerationResult(
            task_id=task_id,
            status="failed",
            error_message=f"Timeout after {max_wait:.0f}s",
        )

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=4, max=60),
        retry=retry_if_exception_type((httpx.TransportError, httpx.HTTPStatusError)),
        reraise=True,
    )
    async def generate_video(
        self,
        prompt: str,
        duration: int = 8,
        model: Optional[str] = None,
        aspect_ratio: Optional[str] = None,
    ) -> GenerationResult:
        """
        Generate a video clip using kie.ai Market API.

        Transport and HTTP errors are retried up to three times with
        exponential backoff; a task the backend marks failed is returned
        as a failed GenerationResult.

        Args:
            prompt: Text prompt for video generation
            duration: Requested clip length in seconds
            model: Model key (defaults to the configured video model)
            aspect_ratio: "16:9", "9:16", or "1:1"

        Returns:
            GenerationResult with output URL
        """
        config = get_config()
        model_key = model or config.models.video_model
        model_name = MODEL_MAPPINGS.get(model_key, model_key)

        input_params: Dict[str, Any] = {
            "prompt": prompt,
            "aspect_ratio": aspect_ratio or config.render.aspect_ratio,
            "duration": market_duration(duration),
        }

        task_id = await self._create_task(model_name, input_params)
        logger.info(f"[Kie.ai] Created task: {task_id} ({model_name})")

        return await self._poll_for_completion(
            task_id,
            max_wait=config.render.clip_timeout_seconds,
            poll_interval=config.render.poll_interval_seconds,
        )
