"""
Feed Merge Module

Combines freshly fetched mentions with the feed already on screen.

Historical timeframes are snapshots: each fetch replaces the feed.
The live timeframe streams: new mentions are prepended and the feed is
capped. Duplicates are detected by exact content text because the
provider regenerates identifiers on every call.
"""

from typing import List, Optional

from config import settings
from data.models import Mention


def merge_feed(existing: List[Mention], incoming: List[Mention], timeframe: str,
               limit: Optional[int] = None) -> List[Mention]:
    """
    Merge incoming mentions into the current feed.

    Args:
        existing: Current feed, newest first
        incoming: Mentions from the latest fetch, in provider order
        timeframe: Active timeframe; anything but 'live' replaces the feed
        limit: Live feed cap (defaults to settings.LIVE_FEED_LIMIT)

    Returns:
        List[Mention]: The new feed. When nothing new arrives in live mode
        the `existing` list itself is returned.
    """
    if timeframe != settings.LIVE_TIMEFRAME:
        return incoming

    limit = limit if limit is not None else settings.LIVE_FEED_LIMIT
    seen = {m.content for m in existing}
    fresh = [m for m in incoming if m.content not in seen]

    if not fresh:
        return existing

    return (fresh + existing)[:limit]
