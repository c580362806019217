"""
Service Protocol Definitions

typing.Protocol interfaces for the seams of a monitoring session. They let
the session run against fakes in tests and against other mention sources
later without changing the state machine.

Protocols defined:
- MentionSource: Interface for fetching normalized mentions
- PollingTimer: Interface for the live-mode interval timer
"""

from typing import Protocol, List

from data.models import Mention


class MentionSource(Protocol):
    """Protocol for anything that can search for brand mentions.

    Implementations must raise utils.exceptions.RateLimitedError on quota
    exhaustion and return an empty list for every other failure.
    """

    async def fetch_mentions(self, brand: str, keywords: str = "",
                             timeframe: str = "live") -> List[Mention]:
        """Fetch mentions for a brand.

        Args:
            brand: Cleaned brand name.
            keywords: Optional keyword filter.
            timeframe: One of live, 24h, 7d, 30d, 1y.

        Returns:
            Normalized mentions in provider order.
        """
        ...


class PollingTimer(Protocol):
    """Protocol for the single live-mode interval timer."""

    @property
    def is_armed(self) -> bool:
        ...

    def arm(self) -> None:
        """Cancel any pending timer and start a new one."""
        ...

    def disarm(self) -> None:
        """Cancel the pending timer, if any."""
        ...

    def shutdown(self) -> None:
        """Cancel the timer and release scheduler resources."""
        ...
