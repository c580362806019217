"""
Mention Normalizer Module

Turns the free text returned by the generative search provider into
well-formed Mention objects. The provider is asked for a JSON array but
often wraps it in prose, and individual records are loosely typed, so
everything here repairs rather than rejects.
"""

import json
from datetime import datetime, timezone
from typing import Optional, List, Dict, Any

from config import settings
from data.models import Mention
from utils.helpers import generate_id, avatar_url, is_valid_url
from utils.logger import get_logger

logger = get_logger(__name__)


def extract_json_array(text: Optional[str]) -> List[Any]:
    """
    Pull the JSON array out of a provider response.

    Takes everything from the first '[' to the last ']' and parses it.

    Args:
        text: Raw response text

    Returns:
        List: The parsed array, or an empty list if none could be parsed
    """
    if not text:
        return []

    start = text.find('[')
    end = text.rfind(']')
    if start == -1 or end == -1 or end < start:
        logger.warning("No JSON array found in provider response")
        return []

    try:
        parsed = json.loads(text[start:end + 1])
    except ValueError as e:
        logger.warning(f"Could not parse provider JSON: {e}")
        return []

    if not isinstance(parsed, list):
        logger.warning(f"Provider JSON was {type(parsed).__name__}, expected array")
        return []

    return parsed


def _count(value: Any) -> int:
    """Non-negative integer from a loosely typed counter, 0 if unusable."""
    if isinstance(value, bool) or value is None:
        return 0
    try:
        number = int(float(value))
    except (TypeError, ValueError, OverflowError):
        return 0
    return max(number, 0)


def _text(value: Any, default: str = "") -> str:
    if value is None:
        return default
    return str(value)


def _platform(value: Any) -> str:
    platform = _text(value).strip().lower()
    if platform in settings.VALID_PLATFORMS:
        return platform
    return settings.DEFAULT_PLATFORM


def normalize_mention(item: Dict[str, Any], now: datetime) -> Mention:
    """
    Repair a single provider record into a Mention.

    Args:
        item: One decoded JSON object from the provider
        now: Capture timestamp to stamp on the mention

    Returns:
        Mention: The normalized mention
    """
    author = _text(item.get('author'))
    source_url = _text(item.get('sourceUrl') or item.get('source_url'))
    sentiment = item.get('sentiment')

    return Mention(
        id=generate_id(),                  # upstream ids repeat across polls
        author=author,
        handle=_text(item.get('handle')),
        avatar=_text(item.get('avatar')) or avatar_url(author),
        content=_text(item.get('content')),
        platform=_platform(item.get('platform')),
        sentiment=_text(sentiment) if sentiment else settings.DEFAULT_SENTIMENT,
        timestamp=now,
        likes=_count(item.get('likes')),
        shares=_count(item.get('shares')),
        source_url=source_url if is_valid_url(source_url) else None,
    )


def normalize_mentions(raw_text: Optional[str], now: Optional[datetime] = None) -> List[Mention]:
    """
    Parse and repair a full provider response.

    Args:
        raw_text: Raw response text, possibly with prose around the array
        now: Capture timestamp (defaults to the current UTC time)

    Returns:
        List[Mention]: Normalized mentions in provider order; empty on parse failure
    """
    now = now or datetime.now(timezone.utc)
    mentions = []

    for item in extract_json_array(raw_text):
        if not isinstance(item, dict):
            logger.debug(f"Skipping non-object item in provider array: {item!r}")
            continue
        mentions.append(normalize_mention(item, now))

    return mentions
