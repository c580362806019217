"""
Brand Session Module

The monitoring session: which brand is tracked, over which timeframe, what
the feed currently shows and whether live polling is running.

State is derived from a handful of flags:

    loading       an initial fetch is in flight
    disconnected  no brand
    error         a rate limit banner is showing (polling is paused)
    static        historical timeframe, one snapshot
    live          live timeframe, polling
    paused        live timeframe, polling stopped

Every fetch is tagged with the session epoch, brand, keywords and timeframe
it was issued for. A response that comes back after any of those changed is
dropped, so a slow request can never write into a newer session.
"""

import asyncio
from typing import Callable, List, Optional, Tuple

from apscheduler.schedulers.asyncio import AsyncIOScheduler

from config import settings
from data.models import AnalyticsSample, FeedSummary, Mention, SessionError, SessionState
from services.analytics import advance_analytics, seed_analytics, summarize_feed
from services.feed_merge import merge_feed
from services.protocols import MentionSource, PollingTimer
from services.scheduler import PollingScheduler
from utils.exceptions import RateLimitedError
from utils.helpers import clean_brand_name
from utils.logger import get_logger

logger = get_logger(__name__)

FeedListener = Callable[[List[Mention]], None]


class BrandSession:
    """
    Controller for a single brand-monitoring session.

    Usage:
        session = BrandSession(MentionService(AIService()))
        await session.start("https://www.nike.com", "air max", "live")
        ...
        session.disconnect()
    """

    def __init__(self, mention_source: MentionSource,
                 poller: Optional[PollingTimer] = None,
                 poll_interval: Optional[int] = None,
                 scheduler: Optional[AsyncIOScheduler] = None):
        """
        Args:
            mention_source: Fetch gateway used for every refresh
            poller: Live-mode timer; a PollingScheduler calling on_tick if omitted
            poll_interval: Seconds between live refreshes when building the default poller
            scheduler: APScheduler instance for the default poller
        """
        self.mention_source = mention_source
        self.poller = poller or PollingScheduler(self.on_tick, poll_interval, scheduler)

        self.brand: Optional[str] = None
        self.keywords: str = ""
        self.timeframe: str = settings.LIVE_TIMEFRAME
        self.is_live = False
        self.is_loading = False
        self.error: Optional[SessionError] = None
        self.feed: List[Mention] = []
        self.analytics: List[AnalyticsSample] = []

        self._epoch = 0
        self._listeners: List[FeedListener] = []
        self._refresh_lock: Optional[asyncio.Lock] = None

    # =========================================================================
    # Derived state
    # =========================================================================

    @property
    def state(self) -> SessionState:
        if self.is_loading:
            return SessionState.LOADING
        if self.brand is None:
            return SessionState.DISCONNECTED
        if self.error is not None:
            return SessionState.ERROR
        if self.timeframe != settings.LIVE_TIMEFRAME:
            return SessionState.STATIC
        if self.is_live:
            return SessionState.LIVE
        return SessionState.PAUSED

    @property
    def should_poll(self) -> bool:
        return bool(self.is_live and self.brand and self.timeframe == settings.LIVE_TIMEFRAME)

    @property
    def status_label(self) -> str:
        if self.timeframe != settings.LIVE_TIMEFRAME:
            return 'HISTORICAL VIEW'
        return 'ONLINE' if self.is_live else 'PAUSED'

    def summary(self) -> FeedSummary:
        return summarize_feed(self.feed, self.timeframe)

    def add_listener(self, listener: FeedListener) -> None:
        """Register a callable invoked with the new feed whenever it changes."""
        self._listeners.append(listener)

    # =========================================================================
    # User actions
    # =========================================================================

    async def start(self, raw_brand: str, raw_keywords: str = "",
                    timeframe: str = settings.LIVE_TIMEFRAME) -> SessionState:
        """
        Begin monitoring a brand.

        Runs one fetch before returning. Live timeframes then keep polling;
        historical ones stay on that snapshot.

        Args:
            raw_brand: Brand as typed (name, @handle or URL)
            raw_keywords: Optional keyword filter
            timeframe: One of settings.TIMEFRAMES

        Returns:
            SessionState: State after the initial fetch

        Raises:
            ValueError: Unknown timeframe or blank brand
        """
        if timeframe not in settings.TIMEFRAMES:
            raise ValueError(f"Unknown timeframe '{timeframe}', expected one of {settings.TIMEFRAMES}")

        brand = clean_brand_name(raw_brand)
        if not brand:
            raise ValueError("Brand name is required")

        self.poller.disarm()
        self._epoch += 1
        epoch = self._epoch

        self.brand = brand
        self.keywords = (raw_keywords or "").strip()
        self.timeframe = timeframe
        self.is_live = False
        self.error = None
        self._set_feed([])
        self.analytics = seed_analytics()
        self.is_loading = True
        logger.info(f"Starting session for '{brand}' (keywords: '{self.keywords}', timeframe: {timeframe})")

        try:
            await self._fetch_cycle()
        finally:
            if epoch == self._epoch:
                self.is_loading = False

        if epoch != self._epoch:
            logger.info(f"Session for '{brand}' was replaced during its initial fetch")
            return self.state

        if self.error is None:
            self.is_live = timeframe == settings.LIVE_TIMEFRAME
        self._sync_polling()

        logger.info(f"Session for '{brand}' is {self.state.value} with {len(self.feed)} mentions")
        return self.state

    def disconnect(self) -> None:
        """Stop monitoring and reset everything to the initial state."""
        self.poller.disarm()
        self._epoch += 1

        if self.brand:
            logger.info(f"Disconnecting from '{self.brand}'")

        self.brand = None
        self.keywords = ""
        self.timeframe = settings.LIVE_TIMEFRAME
        self.is_live = False
        self.is_loading = False
        self.error = None
        self.analytics = []
        self._set_feed([])

    def retry(self) -> bool:
        """
        Resume live polling after a rate limit.

        Dismisses the error and re-arms the timer; the next fetch happens on
        the next tick, not immediately.

        Returns:
            bool: True if polling was resumed
        """
        if self.brand is None or self.timeframe != settings.LIVE_TIMEFRAME:
            logger.warning("Retry ignored: no live session to resume")
            return False

        self.error = None
        self.is_live = True
        self._sync_polling()
        logger.info(f"Live polling resumed for '{self.brand}'")
        return True

    def dismiss_error(self) -> None:
        """Hide the error banner without resuming polling."""
        self.error = None

    def close(self) -> None:
        """Release the polling scheduler."""
        self.poller.shutdown()

    # =========================================================================
    # Polling
    # =========================================================================

    async def on_tick(self) -> None:
        """One scheduler tick: advance the synthetic chart, then refresh."""
        if not self.should_poll:
            return

        self.analytics = advance_analytics(self.analytics, has_mentions=bool(self.feed))
        await self.refresh()

    async def refresh(self) -> bool:
        """
        Run one fetch-and-merge cycle for the current query.

        Ticks and on-demand refreshes share a lock, so at most one cycle
        is in flight; a second caller waits and then fetches again.

        Returns:
            bool: True if the feed changed
        """
        # Created lazily so it binds to the running loop
        if self._refresh_lock is None:
            self._refresh_lock = asyncio.Lock()

        async with self._refresh_lock:
            return await self._fetch_cycle()

    def _request_tag(self) -> Tuple[int, Optional[str], str, str]:
        return (self._epoch, self.brand, self.keywords, self.timeframe)

    async def _fetch_cycle(self) -> bool:
        if self.brand is None:
            return False

        tag = self._request_tag()
        _, brand, keywords, timeframe = tag

        try:
            mentions = await self.mention_source.fetch_mentions(brand, keywords, timeframe)
        except RateLimitedError as e:
            if tag != self._request_tag():
                logger.info(f"Ignoring rate limit from a stale request for '{brand}'")
                return False
            logger.warning(f"Rate limited while fetching '{brand}', pausing polling: {e}")
            self.error = SessionError(kind='rate_limited', message=settings.RATE_LIMIT_MESSAGE)
            self.is_live = False
            self._sync_polling()
            return False

        if tag != self._request_tag():
            logger.info(f"Discarding {len(mentions)} mentions from a stale request for '{brand}'")
            return False

        if not mentions:
            return False

        merged = merge_feed(self.feed, mentions, timeframe)
        if merged is self.feed:
            logger.debug("No new mentions in this cycle")
            return False

        self._set_feed(merged)
        return True

    def _sync_polling(self) -> None:
        if self.should_poll:
            self.poller.arm()
        else:
            self.poller.disarm()

    def _set_feed(self, feed: List[Mention]) -> None:
        self.feed = feed
        for listener in list(self._listeners):
            try:
                listener(feed)
            except Exception as e:
                logger.error(f"Feed listener failed: {e}")
