"""
Listing Metadata for YouTube

Builds the title, description and tags of a listing from the brief.
Deterministic: the same brief always yields the same metadata, so a
republish of the same render produces an identical listing.
"""

import re
from typing import Iterable, Optional

from services.orchestrator.state import Brief, PublishMetadata

# YouTube limits
MAX_TITLE_CHARS = 100
MAX_DESCRIPTION_CHARS = 5000
MAX_TAGS_TOTAL_CHARS = 500

DEFAULT_TAGS = ("ai video", "automation")


def normalize_tag(tag: str) -> str:
    """Collapse whitespace and strip characters YouTube rejects in tags."""
    tag = re.sub(r"[<>\"#,]", " ", tag)
    return " ".join(tag.split())


def tag_cost(tag: str) -> int:
    """Characters a tag uses against the budget: quotes around multi-word tags, plus a comma."""
    return len(tag) + (2 if " " in tag else 0) + 1


def build_tags(
    brief: Brief,
    default_tags: Iterable[str] = DEFAULT_TAGS,
    max_tags: int = 15,
) -> tuple[str, ...]:
    """
    Ordered, de-duplicated tags: brief keywords first, then the topic,
    then the defaults. Duplicates are detected case-insensitively and the
    first spelling wins. The result fits YouTube's 500-character budget.
    """
    candidates = [*(brief.keywords or ()), brief.topic, *default_tags]

    tags: list[str] = []
    seen: set[str] = set()
    char_count = 0
    for raw in candidates:
        tag = normalize_tag(raw)
        key = tag.lower()
        if not tag or key in seen:
            continue
        cost = tag_cost(tag)
        if char_count + cost > MAX_TAGS_TOTAL_CHARS:
            continue
        tags.append(tag)
        seen.add(key)
        char_count += cost
        if len(tags) >= max_tags:
            break

    return tuple(tags)


def to_hashtag(text: str) -> Optional[str]:
    """'AI tools' -> '#AITools'. None if nothing usable remains."""
    words = re.findall(r"[A-Za-z0-9]+", text)
    if not words:
        return None
    return "#" + "".join(w[:1].upper() + w[1:] for w in words)


def build_title(brief: Brief) -> str:
    title = " ".join(brief.topic.split())
    if len(title) > MAX_TITLE_CHARS:
        title = title[: MAX_TITLE_CHARS - 1].rstrip() + "…"
    return title


def build_description(brief: Brief, tags: Iterable[str]) -> str:
    """Description: goals, call to action, then up to five hashtags."""
    parts = [brief.content_goals.strip()]

    if brief.call_to_action:
        parts.append(f"👉 {brief.call_to_action.strip()}")

    hashtags = [h for h in (to_hashtag(t) for t in tags) if h][:5]
    if hashtags:
        parts.append(" ".join(hashtags))

    return "\n\n".join(parts)[:MAX_DESCRIPTION_CHARS]


def build_metadata(
    brief: Brief,
    default_tags: Iterable[str] = DEFAULT_TAGS,
    max_tags: int = 15,
) -> PublishMetadata:
    """Build the full listing metadata for a brief."""
    tags = build_tags(brief, default_tags=default_tags, max_tags=max_tags)
    return PublishMetadata(
        tags=tags,
        title=build_title(brief),
        description=build_description(brief, tags),
    )
