"""
Data Models for Pulse Brand Monitor

This module contains data classes and models used throughout the application.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Optional, Dict

from config import settings


@dataclass(frozen=True)
class Mention:
    """A normalized brand mention surfaced by the search provider."""
    id: str                            # Unique within a feed snapshot, regenerated per fetch
    author: str                        # Display name
    handle: str                        # @handle, u/user or empty
    avatar: str                        # Avatar URL (placeholder if upstream had none)
    content: str                       # Post text or article summary
    platform: str                      # One of settings.VALID_PLATFORMS
    sentiment: str                     # positive / negative / neutral, stored as given
    timestamp: datetime                # Capture time, not original post time
    likes: int = 0
    shares: int = 0
    source_url: Optional[str] = None

    @property
    def display_sentiment(self) -> str:
        """Sentiment for display; unknown upstream values count as neutral."""
        if self.sentiment in settings.VALID_SENTIMENTS:
            return self.sentiment
        return settings.DEFAULT_SENTIMENT


@dataclass
class AnalyticsSample:
    """One point on the synthetic activity chart."""
    time: str                          # HH:MM label
    volume: int
    sentiment_score: int = 0


@dataclass
class ResponsePolicy:
    """A user-authored SOP consumed by reply generation."""
    id: str
    title: str
    content: str
    type: str                          # 'tone', 'rule' or 'template'
    is_active: bool = True


@dataclass(frozen=True)
class SessionError:
    """User-visible error banner, tagged by kind."""
    kind: str                          # currently only 'rate_limited'
    message: str


class SessionState(str, Enum):
    """Connection lifecycle of a monitoring session."""
    DISCONNECTED = 'disconnected'
    LOADING = 'loading'
    LIVE = 'live'
    STATIC = 'static'
    PAUSED = 'paused'
    ERROR = 'error'


@dataclass
class FeedSummary:
    """Real counts derived from the current feed."""
    total: int = 0
    sentiment_counts: Dict[str, int] = field(default_factory=dict)
    platform_counts: Dict[str, int] = field(default_factory=dict)
    signal_strength: str = 'Low'
