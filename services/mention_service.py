"""
Mention Service Module

Fetch gateway for brand mentions. Builds the search prompt for a
brand / keyword / timeframe combination, sends it to Gemini with Google
Search grounding and normalizes whatever comes back.

Only rate limiting is reported to the caller. Every other failure is
logged and turned into an empty result so one bad poll never stops a
live session.
"""

from typing import List

from config import settings
from data.models import Mention
from services.ai_service import AIService
from services.normalizer import normalize_mentions
from utils.exceptions import AIServiceError, RateLimitedError
from utils.logger import get_logger

logger = get_logger(__name__)


def build_mention_query(brand: str, keywords: str = "", timeframe: str = settings.LIVE_TIMEFRAME) -> str:
    """
    Build the combined news + social search prompt.

    Args:
        brand: Cleaned brand name
        keywords: Optional free-text keyword filter
        timeframe: One of settings.TIMEFRAMES

    Returns:
        str: Prompt text
    """
    keywords = (keywords or "").strip()
    search_query = f"{brand} {keywords}" if keywords else brand
    time_instruction = settings.TIMEFRAME_INSTRUCTIONS.get(
        timeframe, settings.TIMEFRAME_INSTRUCTIONS[settings.LIVE_TIMEFRAME]
    )
    focus = f"Focus specifically on mentions related to: {keywords}\n" if keywords else ""
    social_sites = " and ".join(f"({site})" for site in settings.SOCIAL_SITE_FILTERS)
    professional_sites = " and ".join(f"({site})" for site in settings.PROFESSIONAL_SITE_FILTERS)
    platforms = " | ".join(f'"{p}"' for p in settings.VALID_PLATFORMS)
    sentiments = "|".join(f'"{s}"' for s in settings.VALID_SENTIMENTS)

    return f"""Perform a comprehensive search for "{search_query}".

TIME CONSTRAINT: {time_instruction}
{focus}
1. Search for news and web mentions matching the time constraint.
2. Search specifically for user discussions on BlueSky and Reddit {social_sites}.
3. Search for professional discussions and posts on LinkedIn {professional_sites}.

Return a single JSON array of {settings.MENTIONS_PER_FETCH} items containing a mix of sources.

Schema:
[{{
  "id": "unique",
  "author": "Name or Handle",
  "handle": "@handle or u/user or empty",
  "content": "Summary of the post/article (max {settings.MENTION_CONTENT_LIMIT} chars)",
  "platform": {platforms},
  "sentiment": {sentiments},
  "sourceUrl": "Full URL to the source"
}}]"""


class MentionService:
    """Gateway between the monitoring session and the generative search provider."""

    def __init__(self, ai_service: AIService):
        self.ai_service = ai_service

    async def fetch_mentions(self, brand: str, keywords: str = "",
                             timeframe: str = settings.LIVE_TIMEFRAME) -> List[Mention]:
        """
        Search for brand mentions.

        Args:
            brand: Cleaned brand name
            keywords: Optional keyword filter
            timeframe: Query window

        Returns:
            List[Mention]: Normalized mentions, empty on transient failure

        Raises:
            RateLimitedError: The provider is out of quota
        """
        logger.info(f"Fetching mentions for '{brand}' (keywords: '{keywords}', timeframe: {timeframe})")
        prompt = build_mention_query(brand, keywords, timeframe)

        try:
            text = await self.ai_service.generate_text(prompt, use_search=True)
        except RateLimitedError:
            raise
        except AIServiceError as e:
            logger.error(f"Mention fetch failed, returning no results: {e}")
            return []

        mentions = normalize_mentions(text)
        if not mentions:
            logger.warning(f"No usable mentions in provider response for '{brand}'")
        else:
            logger.info(f"Retrieved {len(mentions)} mentions for '{brand}'")
        return mentions
