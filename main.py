#!/usr/bin/env python3
"""
AgenticVideo - Main Entry Point

Brief in, published YouTube video out, with stage-by-stage progress.

Usage:
    # Start server mode (HTTP + SSE)
    python main.py server

    # Produce a single video in-process
    python main.py generate --topic "AI automation for video creators" \\
        --audience "Busy YouTubers" --goals "Educate on automation"

    # Submit a brief to a running server and watch progress
    python main.py submit --topic ... --audience ... --goals ...
"""

import argparse
import asyncio
import json
import logging
import sys
from typing import Optional

from pydantic import ValidationError

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
    datefmt="%H:%M:%S",
)
logger = logging.getLogger("agenticvideo")


def start_server(host: str, port: int, log_level: str = "info"):
    """Run the FastAPI app with uvicorn."""
    import uvicorn

    logger.info(f"AgenticVideo server running at http://{host}:{port}")
    uvicorn.run(
        "services.orchestrator.server:app",
        host=host,
        port=port,
        log_level=log_level.lower(),
    )


def brief_from_args(args: argparse.Namespace) -> dict:
    """Build the wire-format brief payload from CLI arguments."""
    payload = {
        "topic": args.topic,
        "targetAudience": args.audience,
        "contentGoals": args.goals,
    }
    if args.tone:
        payload["tone"] = args.tone
    if args.keywords:
        payload["keywords"] = [k.strip() for k in args.keywords.split(",") if k.strip()]
    if args.cta:
        payload["callToAction"] = args.cta
    if args.duration is not None:
        payload["durationSeconds"] = args.duration
    return payload


async def generate_video(payload: dict) -> Optional[str]:
    """
    Run the full pipeline in-process with console progress.

    Returns:
        The YouTube URL, or None if the brief is invalid or a stage failed
    """
    from agents import default_adapters
    from core.config import get_config
    from services.orchestrator import StageFailure, VideoPipeline, validate_brief
    from services.streaming import ConsoleStatusSink

    try:
        brief = validate_brief(payload)
    except ValidationError as e:
        print(f"❌ Invalid brief:\n{e}")
        return None

    for issue in get_config().validate():
        logger.warning(issue)

    adapters = default_adapters()
    pipeline = VideoPipeline(adapters)

    logger.info(f"Topic: {brief.topic}")
    try:
        result = await pipeline.run(brief, ConsoleStatusSink())
    except StageFailure as e:
        print(f"❌ {e}")
        return None
    finally:
        await adapters.close()

    print()
    print(f"✅ Published: {result.youtube_video_url}")
    print(f"   Download:  {result.video_download_url}")
    print(f"   Tags:      {', '.join(result.metadata.tags)}")
    return result.youtube_video_url


async def submit_brief(payload: dict, server_url: str) -> bool:
    """Submit a brief to a running server and display progress."""
    from cli.progress_monitor import ProgressMonitor

    monitor = ProgressMonitor(brief=payload, server_url=server_url)
    envelope = await monitor.start()
    return bool(envelope and envelope.get("ok"))


def add_brief_arguments(parser: argparse.ArgumentParser):
    parser.add_argument("--topic", "-t", required=True, help="What the video covers")
    parser.add_argument("--audience", "-a", required=True, help="Who the video is for")
    parser.add_argument("--goals", "-g", required=True, help="Outcome the video should drive")
    parser.add_argument("--tone", help="Voice of the script (e.g. 'energetic')")
    parser.add_argument("--keywords", "-k", help="Comma-separated keywords")
    parser.add_argument("--cta", help="Call to action for the outro")
    parser.add_argument("--duration", "-d", type=int, help="Target length in seconds (30-300)")
    parser.add_argument("--brief-file", help="JSON brief file (overrides the flags above)")


def load_payload(args: argparse.Namespace) -> dict:
    if args.brief_file:
        with open(args.brief_file, encoding="utf-8") as f:
            return json.load(f)
    return brief_from_args(args)


def main():
    from core.config import get_config

    config = get_config()

    parser = argparse.ArgumentParser(
        description="AgenticVideo - Brief to published YouTube video",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    # Start HTTP server
    python main.py server

    # Produce a video in-process
    python main.py generate -t "AI automation for video creators" \\
        -a "Busy YouTubers" -g "Educate on automation" -d 120

    # Submit to a running server
    python main.py submit -t "..." -a "..." -g "..." --server http://localhost:8765
        """,
    )

    subparsers = parser.add_subparsers(dest="command", help="Command to run")

    # Server command
    server_parser = subparsers.add_parser("server", help="Start HTTP server")
    server_parser.add_argument("--host", default=config.server.host, help="Host to bind")
    server_parser.add_argument("--port", type=int, default=config.server.port, help="Port to bind")

    # Generate command
    gen_parser = subparsers.add_parser("generate", help="Produce a video in-process")
    add_brief_arguments(gen_parser)

    # Submit command
    submit_parser = subparsers.add_parser("submit", help="Submit a brief to a running server")
    add_brief_arguments(submit_parser)
    submit_parser.add_argument(
        "--server",
        default=f"http://localhost:{config.server.port}",
        help="Server URL",
    )

    args = parser.parse_args()

    if not args.command:
        parser.print_help()
        sys.exit(1)

    # Run appropriate command
    if args.command == "server":
        start_server(args.host, args.port, config.server.log_level)

    elif args.command == "generate":
        result = asyncio.run(generate_video(load_payload(args)))
        sys.exit(0 if result else 1)

    elif args.command == "submit":
        ok = asyncio.run(submit_brief(load_payload(args), args.server))
        sys.exit(0 if ok else 1)


if __name__ == "__main__":
    main()
