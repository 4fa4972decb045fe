#!/usr/bin/env python3
"""
CLI Progress Monitor for Video Production

Submits a brief to the server's streaming endpoint and displays stage
progress as it arrives, followed by the result or the failed stage.

Usage:
    python -m cli.progress_monitor brief.json
    python -m cli.progress_monitor --server http://localhost:8765 brief.json
"""

import argparse
import asyncio
import json
import sys
from typing import Iterable, Iterator, Optional

import aiohttp


# ANSI color codes
class Colors:
    RESET = "\033[0m"
    BOLD = "\033[1m"
    DIM = "\033[2m"

    RED = "\033[31m"
    GREEN = "\033[32m"
    YELLOW = "\033[33m"
    BLUE = "\033[34m"
    MAGENTA = "\033[35m"
    CYAN = "\033[36m"
    WHITE = "\033[37m"


STAGES = ("script", "prompt", "render", "publish")


def colored(text: str, color: str) -> str:
    """Apply color to text."""
    return f"{color}{text}{Colors.RESET}"


def parse_sse(lines: Iterable[str]) -> Iterator[tuple[str, dict]]:
    """
    Parse SSE lines into (event name, JSON payload) pairs.

    Comment lines (heartbeats) are skipped; a message without an
    ``event:`` field is reported as "message".
    """
    event_name = "message"
    data_lines: list[str] = []

    for raw in lines:
        line = raw.rstrip("\r\n")

        if not line:
            if data_lines:
                try:
                    yield event_name, json.loads("\n".join(data_lines))
                except json.JSONDecodeError:
                    pass
            event_name, data_lines = "message", []
        elif line.startswith(":"):
            continue
        elif line.startswith("event:"):
            event_name = line[6:].strip()
        elif line.startswith("data:"):
            data_lines.append(line[5:].strip())


def format_status(event: dict) -> str:
    """Format a status event for display."""
    stage = event.get("stage", "")
    detail = event.get("detail", "")
    finished = event.get("type") == "phase_completed"

    position = STAGES.index(stage) + 1 if stage in STAGES else 0
    indicator = colored(f"[{position}/{len(STAGES)}]", Colors.DIM)

    if finished:
        return f"✔️ {indicator} {colored(stage.title(), Colors.GREEN)}: {detail}"
    return f"\n▶️ {indicator} {colored(stage.title(), Colors.CYAN + Colors.BOLD)}: {detail}"


def format_result(envelope: dict) -> str:
    """Format the success envelope: links, storyboard and tags."""
    result = envelope.get("result", {})
    script = result.get("script", {})
    prompts = result.get("visualPrompts", [])
    tags = result.get("metadata", {}).get("tags", [])

    lines = [
        "",
        colored("═══ ✅ Video published ═══", Colors.GREEN + Colors.BOLD),
        f"YouTube:  {colored(result.get('youtubeVideoUrl', ''), Colors.BOLD)}",
        f"Download: {result.get('videoDownloadUrl', '')}",
        "",
        f"{colored('Hook:', Colors.MAGENTA)} {script.get('hook', '')}",
    ]

    for prompt in prompts:
        lines.append(
            f"  • {colored(prompt.get('scene', ''), Colors.CYAN)} "
            f"({prompt.get('durationSeconds', 0)}s): {prompt.get('prompt', '')[:80]}"
        )

    if tags:
        lines.append(colored(f"Tags: {', '.join(tags)}", Colors.DIM))

    return "\n".join(lines)


def format_error(envelope: dict) -> str:
    """Format the failure envelope."""
    lines = ["", f"❌ {colored(envelope.get('error', 'Pipeline failed'), Colors.RED)}"]
    stage = envelope.get("failedStage")
    if stage:
        lines.append(colored(f"    Failed stage: {stage}", Colors.DIM))
    return "\n".join(lines)


class ProgressMonitor:
    """Submits a brief and renders the SSE progress stream."""

    def __init__(
        self,
        brief: dict,
        server_url: str = "http://localhost:8765",
    ):
        self.brief = brief
        self.server_url = server_url.rstrip("/")
        self.stream_url = f"{self.server_url}/api/pipeline/stream"

    async def start(self) -> Optional[dict]:
        """
        Run the brief and print progress.

        Returns:
            The terminal envelope, or None if the server could not be reached
        """
        print(colored("\n╔═══════════════════════════════════════════╗", Colors.CYAN))
        print(colored("║  Video Production Progress Monitor        ║", Colors.CYAN))
        print(colored("╚═══════════════════════════════════════════╝", Colors.CYAN))
        print(f"Topic:  {colored(self.brief.get('topic', ''), Colors.BOLD)}")
        print(f"Server: {colored(self.stream_url, Colors.DIM)}")
        print(colored("─" * 45, Colors.DIM))

        # No reconnect: a resubmitted brief would start a second run
        try:
            return await self._stream_events()
        except aiohttp.ClientError as e:
            print(colored(f"\n❌ Cannot reach server: {e}", Colors.RED))
            return None

    async def _stream_events(self) -> Optional[dict]:
        """Stream and display events until a terminal event arrives."""
        timeout = aiohttp.ClientTimeout(total=None, sock_read=120)
        async with aiohttp.ClientSession(timeout=timeout) as session:
            async with session.post(self.stream_url, json=self.brief) as response:
                if response.status == 422:
                    envelope = await response.json()
                    print(format_error(envelope))
                    return envelope
                if response.status != 200:
                    raise aiohttp.ClientError(f"Server returned {response.status}")

                # Buffer lines until the blank line that ends each message
                pending: list[str] = []
                async for raw in response.content:
                    line = raw.decode("utf-8")
                    pending.append(line)
                    if line.strip():
                        continue
                    for event_name, data in parse_sse(pending):
                        envelope = self._handle_event(event_name, data)
                        if envelope is not None:
                            return envelope
                    pending = []

        return None

    def _handle_event(self, event_name: str, data: dict) -> Optional[dict]:
        """Print one event. Returns the envelope for terminal events."""
        if event_name == "status":
            print(format_status(data))
            return None
        if event_name == "result":
            print(format_result(data))
            return data
        if event_name == "error":
            print(format_error(data))
            return data
        return None


async def main():
    parser = argparse.ArgumentParser(
        description="Submit a brief and monitor production progress",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    %(prog)s brief.json
    %(prog)s --server http://remote:8765 brief.json
        """,
    )
    parser.add_argument("brief", help="Path to a brief JSON file")
    parser.add_argument(
        "--server",
        default="http://localhost:8765",
        help="Server URL (default: http://localhost:8765)",
    )

    args = parser.parse_args()

    with open(args.brief, encoding="utf-8") as f:
        brief = json.load(f)

    monitor = ProgressMonitor(brief=brief, server_url=args.server)

    try:
        envelope = await monitor.start()
    except KeyboardInterrupt:
        print(colored("\n\nInterrupted by user.", Colors.YELLOW))
        sys.exit(130)

    sys.exit(0 if envelope and envelope.get("ok") else 1)


if __name__ == "__main__":
    asyncio.run(main())
