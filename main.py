"""
Pulse Brand Monitor

Headless entry point. Starts one monitoring session for a brand, logs
mentions as they arrive and, in live mode, keeps polling until interrupted
or until the provider rate-limits the session.
"""

import sys
import asyncio
import argparse
import logging
from typing import Optional, List, Set

from config import settings
from config.validators import validate_settings, get_config_summary
from data.models import Mention, SessionState
from services.ai_service import AIService
from services.mention_service import MentionService
from services.session import BrandSession
from utils.exceptions import PulseError, ConfigurationError
from utils.helpers import truncate_text
from utils.logger import get_logger, setup_file_logging

# Set up logging
logger = get_logger(__name__)


class PulseMonitor:
    """
    Main application class for the brand monitor.

    Wires the AI service, the fetch gateway and the session together and
    drives a session from the command line.
    """

    def __init__(self, validate: bool = True, session: Optional[BrandSession] = None,
                 ai_service: Optional[AIService] = None):
        """
        Initialize the monitor.

        Args:
            validate: Run settings validation first
            session: Pre-built session (tests)
            ai_service: Pre-built AI service (tests)
        """
        if validate:
            validate_settings()

        self.ai_service = ai_service or AIService()
        self.session = session or BrandSession(MentionService(self.ai_service))
        self.session.add_listener(self._log_feed)
        self._seen_ids: Set[str] = set()

    def _log_feed(self, feed: List[Mention]) -> None:
        """Log mentions that were not in the previous feed."""
        new = [m for m in feed if m.id not in self._seen_ids]
        self._seen_ids = {m.id for m in feed}

        for mention in reversed(new):
            who = mention.handle or mention.author or "unknown"
            logger.info(f"[{mention.platform.upper()}] ({mention.display_sentiment}) {who}: "
                        f"{truncate_text(mention.content, 120)}")

        if new:
            summary = self.session.summary()
            logger.info(f"Feed: {summary.total} mentions, sentiment {summary.sentiment_counts}")

    async def run(self, brand: str, keywords: str = "", timeframe: str = settings.LIVE_TIMEFRAME,
                  show_insight: bool = False, stop_event: Optional[asyncio.Event] = None) -> bool:
        """
        Monitor a brand.

        Args:
            brand: Brand as typed by the user
            keywords: Optional keyword filter
            timeframe: Query window
            show_insight: Log a strategic insight after the initial fetch
            stop_event: Set to end a live session (defaults to running until cancelled)

        Returns:
            bool: True if the session ended normally, False if it ended on an error
        """
        try:
            state = await self.session.start(brand, keywords, timeframe)

            if show_insight and self.session.brand:
                insight = await self.ai_service.fetch_strategic_insight(self.session.brand, self.session.feed)
                logger.info(f"Insight: {insight}")

            if state is SessionState.ERROR:
                logger.error(self.session.error.message)
                return False

            if state is SessionState.STATIC:
                label = settings.TIMEFRAME_LABELS.get(timeframe, timeframe)
                logger.info(f"Historical snapshot ({label}) holds {len(self.session.feed)} mentions")
                return True

            logger.info(f"Live tracking active, polling every {settings.POLL_INTERVAL_SECONDS}s (Ctrl+C to stop)")
            stop_event = stop_event or asyncio.Event()
            while not stop_event.is_set():
                if self.session.state is SessionState.ERROR:
                    logger.error(self.session.error.message)
                    return False
                try:
                    await asyncio.wait_for(stop_event.wait(), timeout=1.0)
                except asyncio.TimeoutError:
                    continue
            return True

        finally:
            self.session.disconnect()
            self.session.close()


def parse_arguments(argv: Optional[List[str]] = None):
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(description='Pulse Brand Monitor')
    parser.add_argument('--brand', type=str, required=True, help='Brand name, @handle or website')
    parser.add_argument('--keywords', type=str, default='', help='Optional keyword filter')
    parser.add_argument('--timeframe', type=str, choices=list(settings.TIMEFRAMES),
                        default=settings.LIVE_TIMEFRAME, help='Query window')
    parser.add_argument('--insight', action='store_true', help='Log a strategic insight after the first fetch')
    parser.add_argument('--log-file', type=str, default=None, help='Log file path')
    parser.add_argument('--log-level', type=str, choices=['DEBUG', 'INFO', 'WARNING', 'ERROR'],
                        default='INFO', help='Logging level')
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the application."""
    args = parse_arguments(argv)

    # Set up logging
    log_level = getattr(logging, args.log_level)
    setup_file_logging(args.log_file, log_level)

    logger.info("Starting Pulse Brand Monitor")
    logger.debug(f"Configuration: {get_config_summary()}")

    try:
        monitor = PulseMonitor()
        success = asyncio.run(monitor.run(args.brand, args.keywords, args.timeframe, args.insight))
        exit_code = 0 if success else 1

    except KeyboardInterrupt:
        logger.info("Interrupted, session disconnected")
        exit_code = 0
    except ConfigurationError as e:
        logger.error(str(e))
        exit_code = 2
    except PulseError as e:
        logger.error(f"Monitor error: {e}", exc_info=True)
        exit_code = 2
    except Exception as e:
        logger.error(f"Unhandled exception in Pulse Brand Monitor: {e}", exc_info=True)
        exit_code = 2

    logger.info(f"Pulse Brand Monitor finished with exit code {exit_code}")
    return exit_code


if __name__ == "__main__":
    sys.exit(main())
