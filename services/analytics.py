"""
Analytics Module

Two kinds of numbers for the dashboard:

- A synthetic activity chart. It is a bounded random walk that only shows
  the monitor is alive; it is not derived from mention counts.
- A real summary of the current feed (sentiment and platform breakdown).
"""

import random
from collections import Counter
from datetime import datetime, timedelta
from typing import List, Optional

from config import settings
from data.models import AnalyticsSample, FeedSummary, Mention


def _time_label(moment: datetime) -> str:
    return moment.strftime('%H:%M')


def seed_analytics(now: Optional[datetime] = None, rng: Optional[random.Random] = None) -> List[AnalyticsSample]:
    """
    Build a fresh synthetic window, one sample per minute ending at `now`.

    Args:
        now: End of the window (defaults to the local current time)
        rng: Random source, injectable for tests

    Returns:
        List[AnalyticsSample]: settings.ANALYTICS_WINDOW_SIZE samples, oldest first
    """
    now = now or datetime.now()
    rng = rng or random
    low_vol, high_vol = settings.ANALYTICS_SEED_VOLUME_RANGE
    low_sent, high_sent = settings.ANALYTICS_SEED_SENTIMENT_RANGE

    samples = []
    for minutes_back in range(settings.ANALYTICS_WINDOW_SIZE - 1, -1, -1):
        samples.append(AnalyticsSample(
            time=_time_label(now - timedelta(minutes=minutes_back)),
            volume=rng.randint(low_vol, high_vol),
            sentiment_score=rng.randint(low_sent, high_sent),
        ))
    return samples


def next_volume(has_mentions: bool, rng: Optional[random.Random] = None) -> int:
    """Random-walk volume around the active or idle baseline, clamped."""
    rng = rng or random
    baseline = settings.ANALYTICS_ACTIVE_BASELINE if has_mentions else settings.ANALYTICS_IDLE_BASELINE
    jitter = settings.ANALYTICS_VOLUME_JITTER
    volume = baseline + rng.uniform(-jitter, jitter)
    volume = max(settings.ANALYTICS_MIN_VOLUME, min(settings.ANALYTICS_MAX_VOLUME, volume))
    return int(round(volume))


def advance_analytics(samples: List[AnalyticsSample], has_mentions: bool,
                      now: Optional[datetime] = None,
                      rng: Optional[random.Random] = None) -> List[AnalyticsSample]:
    """
    Append one sample, dropping the oldest once the window is full.

    Args:
        samples: Current window, oldest first
        has_mentions: Whether the feed currently holds anything
        now: Timestamp for the new sample
        rng: Random source, injectable for tests

    Returns:
        List[AnalyticsSample]: New window, never longer than settings.ANALYTICS_WINDOW_SIZE
    """
    now = now or datetime.now()
    window = list(samples[-(settings.ANALYTICS_WINDOW_SIZE - 1):]) if samples else []
    window.append(AnalyticsSample(
        time=_time_label(now),
        volume=next_volume(has_mentions, rng),
        sentiment_score=0,
    ))
    return window[-settings.ANALYTICS_WINDOW_SIZE:]


def signal_strength(mention_count: int, timeframe: str) -> str:
    if mention_count == 0:
        return 'Low'
    return 'High' if timeframe == settings.LIVE_TIMEFRAME else 'Static'


def summarize_feed(mentions: List[Mention], timeframe: str = settings.LIVE_TIMEFRAME) -> FeedSummary:
    """
    Count the current feed by sentiment and platform.

    Args:
        mentions: Current feed
        timeframe: Active timeframe, used for the signal label

    Returns:
        FeedSummary: Totals; every known sentiment appears even when zero
    """
    sentiments = Counter(m.display_sentiment for m in mentions)
    platforms = Counter(m.platform for m in mentions)

    return FeedSummary(
        total=len(mentions),
        sentiment_counts={s: sentiments.get(s, 0) for s in settings.VALID_SENTIMENTS},
        platform_counts=dict(platforms),
        signal_strength=signal_strength(len(mentions), timeframe),
    )
