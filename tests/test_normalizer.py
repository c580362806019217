"""
Tests for the Mention Normalizer

Covers JSON extraction from prose-wrapped provider responses and the
per-record repair rules.
"""

import pytest
from datetime import datetime, timezone
import sys
import os

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from services.normalizer import extract_json_array, normalize_mentions, normalize_mention


NOW = datetime(2024, 3, 1, 12, 0, tzinfo=timezone.utc)


# =============================================================================
# Extraction Tests
# =============================================================================

class TestExtractJsonArray:
    """Tests for locating and parsing the JSON array."""

    def test_array_wrapped_in_prose(self):
        """Prose before and after the array is ignored."""
        assert extract_json_array('here are results: [{"author":"A"}] thanks') == [{"author": "A"}]

    def test_no_brackets_returns_empty(self, capture_logs):
        """Responses without an array yield an empty list and a warning."""
        assert extract_json_array("Sorry, I could not find anything.") == []
        assert any(r.levelname == 'WARNING' for r in capture_logs)

    def test_malformed_json_returns_empty(self):
        """Broken JSON never raises."""
        assert extract_json_array('[{"author": "A",]') == []

    def test_empty_and_none_input(self):
        assert extract_json_array("") == []
        assert extract_json_array(None) == []

    def test_reversed_brackets_returns_empty(self):
        assert extract_json_array("] nothing here [") == []

    def test_uses_first_and_last_bracket(self):
        """Nested arrays inside records survive extraction."""
        text = 'Results: [{"author": "A", "tags": ["x", "y"]}] done'
        assert extract_json_array(text) == [{"author": "A", "tags": ["x", "y"]}]


# =============================================================================
# Repair Tests
# =============================================================================

class TestNormalizeMentions:
    """Tests for per-record repair."""

    def test_minimal_record_is_repaired(self):
        """A record with only an author gets every default filled in."""
        mentions = normalize_mentions('here are results: [{"author":"A"}] thanks', now=NOW)

        assert len(mentions) == 1
        mention = mentions[0]
        assert mention.author == "A"
        assert mention.id
        assert mention.likes == 0
        assert mention.shares == 0
        assert mention.platform == "web"
        assert mention.timestamp == NOW
        assert "name=A" in mention.avatar

    def test_generated_ids_are_unique(self):
        mentions = normalize_mentions('[{"author":"A"},{"author":"B"},{"author":"C"}]', now=NOW)
        assert len({m.id for m in mentions}) == 3

    def test_upstream_fields_are_kept(self):
        text = ('[{"id": "abc", "author": "Jane", "handle": "@jane", "content": "Great shoes", '
                '"platform": "reddit", "sentiment": "positive", "sourceUrl": "https://reddit.com/r/x", '
                '"likes": 12, "shares": "3"}]')
        mention = normalize_mentions(text, now=NOW)[0]

        assert mention.handle == "@jane"
        assert mention.content == "Great shoes"
        assert mention.platform == "reddit"
        assert mention.sentiment == "positive"
        assert mention.source_url == "https://reddit.com/r/x"
        assert mention.likes == 12
        assert mention.shares == 3

    def test_upstream_ids_are_replaced(self):
        """Provider ids like "1" or "unique" repeat, so every record gets a fresh id."""
        text = '[{"id": "unique", "author": "A"}, {"id": "unique", "author": "B"}, {"id": "1", "author": "C"}]'
        mentions = normalize_mentions(text, now=NOW)

        ids = [m.id for m in mentions]
        assert len(set(ids)) == 3
        assert "unique" not in ids
        assert "1" not in ids

    @pytest.mark.parametrize("raw_url,expected", [
        ("https://bsky.app/profile/nike/post/1", "https://bsky.app/profile/nike/post/1"),
        ("bsky.app/profile/nike", None),
        ("N/A", None),
        ("", None),
    ])
    def test_source_url_must_be_absolute(self, raw_url, expected):
        mention = normalize_mention({"author": "A", "sourceUrl": raw_url}, NOW)
        assert mention.source_url == expected

    @pytest.mark.parametrize("raw_platform,expected", [
        ("tiktok", "web"),
        ("mastodon", "web"),
        (None, "web"),
        ("LinkedIn", "linkedin"),
        ("news", "news"),
        ("twitter", "twitter"),
        ("instagram", "instagram"),
    ])
    def test_platform_coercion(self, raw_platform, expected):
        mention = normalize_mention({"author": "A", "platform": raw_platform}, NOW)
        assert mention.platform == expected

    def test_unknown_sentiment_is_stored_as_given(self):
        """Sentiment is not rejected; display falls back to neutral."""
        mention = normalize_mention({"author": "A", "sentiment": "mixed"}, NOW)
        assert mention.sentiment == "mixed"
        assert mention.display_sentiment == "neutral"

    def test_missing_sentiment_defaults_to_neutral(self):
        assert normalize_mention({"author": "A"}, NOW).sentiment == "neutral"

    @pytest.mark.parametrize("value", ["lots", None, -5, True, [], {}])
    def test_bad_counters_default_to_zero(self, value):
        mention = normalize_mention({"author": "A", "likes": value, "shares": value}, NOW)
        assert mention.likes == 0
        assert mention.shares == 0

    def test_missing_author_uses_placeholder_avatar(self):
        mention = normalize_mention({"content": "hello"}, NOW)
        assert mention.author == ""
        assert "name=User" in mention.avatar

    def test_upstream_avatar_is_kept(self):
        mention = normalize_mention({"author": "A", "avatar": "https://cdn.example.com/a.png"}, NOW)
        assert mention.avatar == "https://cdn.example.com/a.png"

    def test_non_object_items_are_skipped(self):
        mentions = normalize_mentions('["just a string", 42, {"author": "A"}]', now=NOW)
        assert [m.author for m in mentions] == ["A"]

    def test_batch_shares_one_capture_time(self):
        mentions = normalize_mentions('[{"author":"A"},{"author":"B"}]')
        assert mentions[0].timestamp == mentions[1].timestamp
        assert mentions[0].timestamp.tzinfo is not None

    def test_parse_failure_returns_empty(self):
        assert normalize_mentions("no results today") == []
