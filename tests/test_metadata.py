"""
Tests for YouTube listing metadata.

Run with:
    python -m pytest tests/test_metadata.py -v
"""

from services.orchestrator.state import Brief
from services.publisher.metadata import (
    MAX_TAGS_TOTAL_CHARS,
    build_description,
    build_metadata,
    build_tags,
    build_title,
    tag_cost,
    to_hashtag,
)


def make_brief(**overrides) -> Brief:
    payload = {
        "topic": "AI automation for video creators",
        "targetAudience": "Busy YouTubers",
        "contentGoals": "Educate on automation",
    }
    payload.update(overrides)
    return Brief.model_validate(payload)


class TestTags:

    def test_keywords_then_topic_then_defaults(self):
        brief = make_brief(keywords=["AI tools", "YouTube growth"])

        tags = build_tags(brief)

        assert tags == (
            "AI tools",
            "YouTube growth",
            "AI automation for video creators",
            "ai video",
            "automation",
        )

    def test_case_insensitive_dedupe_keeps_first_spelling(self):
        brief = make_brief(keywords=["Automation", "AI Video"])

        tags = build_tags(brief)

        assert tags.count("Automation") == 1
        assert "automation" not in tags
        assert "ai video" not in tags

    def test_max_tags(self):
        brief = make_brief(keywords=[f"keyword {i}" for i in range(30)])

        assert len(build_tags(brief, max_tags=15)) == 15

    def test_total_budget(self):
        brief = make_brief(keywords=["x" * 200 + str(i) for i in range(10)])

        tags = build_tags(brief, max_tags=50)

        assert sum(tag_cost(t) for t in tags) <= MAX_TAGS_TOTAL_CHARS
        # Short defaults still fit after long keywords are refused
        assert "automation" in tags

    def test_strips_rejected_characters(self):
        brief = make_brief(keywords=["<b>bold</b>", "#hash, tag"])

        tags = build_tags(brief)

        assert tags[0] == "b bold /b"
        assert tags[1] == "hash tag"

    def test_deterministic(self):
        brief = make_brief(keywords=["a1", "b2"])

        assert build_metadata(brief) == build_metadata(brief)


class TestTitleAndDescription:

    def test_hashtag(self):
        assert to_hashtag("AI tools") == "#AITools"
        assert to_hashtag("!!!") is None

    def test_title_truncated(self):
        brief = make_brief(topic="word " * 40)

        title = build_title(brief)

        assert len(title) == 100
        assert title.endswith("…")

    def test_description_includes_cta_and_hashtags(self):
        brief = make_brief(callToAction="Subscribe for weekly tips")

        description = build_description(brief, ("AI tools", "automation"))

        assert description.startswith("Educate on automation")
        assert "👉 Subscribe for weekly tips" in description
        assert description.endswith("#AITools #Automation")

    def test_metadata_has_tags(self):
        metadata = build_metadata(make_brief())

        assert metadata.title == "AI automation for video creators"
        assert metadata.tags
