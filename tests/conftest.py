"""
Shared Test Fixtures for Pulse Brand Monitor

This module provides common fixtures used across all test modules.
Fixtures include a fake Gemini client, a fake polling timer, log capture
and data factories for mentions and provider responses.
"""

import pytest
import json
from unittest.mock import MagicMock, AsyncMock
from datetime import datetime, timezone
from typing import Optional, List, Dict, Any
import sys
import os

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))


# =============================================================================
# Logging Fixtures
# =============================================================================

@pytest.fixture
def capture_logs():
    """
    Capture log messages for assertion in tests.

    Attaches a handler to the application logger and yields the list of
    captured records.

    Returns:
        list: A list that will contain captured log records.
    """
    import logging

    class LogCapture(logging.Handler):
        def __init__(self):
            super().__init__()
            self.records = []

        def emit(self, record):
            self.records.append(record)

    handler = LogCapture()
    handler.setLevel(logging.DEBUG)

    app_logger = logging.getLogger("pulse")
    original_level = app_logger.level
    app_logger.setLevel(logging.DEBUG)
    app_logger.addHandler(handler)

    yield handler.records

    app_logger.removeHandler(handler)
    app_logger.setLevel(original_level)


# =============================================================================
# Data Model Factories
# =============================================================================

@pytest.fixture
def mention_factory():
    """
    Factory fixture for creating Mention test objects.

    Usage:
        def test_feed(mention_factory):
            mention = mention_factory(content='Loving the new shoes')

    Returns:
        callable: A factory function for creating Mention objects.
    """
    from data.models import Mention

    counter = {'n': 0}

    def _create_mention(
        content: Optional[str] = None,
        id: Optional[str] = None,
        author: str = 'Test Author',
        handle: str = '@tester',
        platform: str = 'bluesky',
        sentiment: str = 'neutral',
        likes: int = 0,
        shares: int = 0,
        source_url: Optional[str] = 'https://example.com/post',
        timestamp: Optional[datetime] = None,
    ) -> Mention:
        counter['n'] += 1
        return Mention(
            id=id or f'mention-{counter["n"]}',
            author=author,
            handle=handle,
            avatar='https://example.com/avatar.png',
            content=content if content is not None else f'Mention content {counter["n"]}',
            platform=platform,
            sentiment=sentiment,
            timestamp=timestamp or datetime(2024, 1, 15, 10, 0, tzinfo=timezone.utc),
            likes=likes,
            shares=shares,
            source_url=source_url,
        )

    return _create_mention


@pytest.fixture
def provider_response_factory():
    """
    Factory fixture for raw provider response text.

    Wraps a JSON array of records in prose, the way Gemini tends to answer.

    Returns:
        callable: A factory taking a list of record dicts.
    """
    def _create_response(records: List[Dict[str, Any]], prefix: str = "Here is what I found:\n",
                         suffix: str = "\nLet me know if you need more.") -> str:
        return f"{prefix}{json.dumps(records)}{suffix}"

    return _create_response


# =============================================================================
# AI Service Fixtures
# =============================================================================

@pytest.fixture
def mock_genai_client():
    """
    Mock google.genai.Client.

    models.list() returns two models and aio.models.generate_content is an
    AsyncMock returning a response whose text is "Generated test content".

    Returns:
        MagicMock: A mock client.
    """
    mock_client = MagicMock()

    flash = MagicMock()
    flash.name = 'models/gemini-2.0-flash'
    other = MagicMock()
    other.name = 'models/gemini-1.5-pro'
    mock_client.models.list.return_value = [other, flash]

    mock_response = MagicMock()
    mock_response.text = "Generated test content"
    mock_client.aio.models.generate_content = AsyncMock(return_value=mock_response)

    return mock_client


@pytest.fixture
def ai_service(mock_genai_client):
    """AIService bound to the mock client with a fixed model."""
    from services.ai_service import AIService
    return AIService(client=mock_genai_client, model_name='gemini-2.5-flash')


# =============================================================================
# Session Fixtures
# =============================================================================

class FakeTimer:
    """Stateful stand-in for PollingScheduler that records arm/disarm calls."""

    def __init__(self):
        self.armed = False
        self.arm_count = 0
        self.disarm_count = 0
        self.was_shutdown = False

    @property
    def is_armed(self) -> bool:
        return self.armed

    def arm(self) -> None:
        self.arm_count += 1
        self.armed = True

    def disarm(self) -> None:
        self.disarm_count += 1
        self.armed = False

    def shutdown(self) -> None:
        self.armed = False
        self.was_shutdown = True


@pytest.fixture
def fake_timer():
    return FakeTimer()


@pytest.fixture
def mention_source():
    """Fetch gateway mock; fetch_mentions returns [] unless configured."""
    source = MagicMock()
    source.fetch_mentions = AsyncMock(return_value=[])
    return source


@pytest.fixture
def session(mention_source, fake_timer):
    from services.session import BrandSession
    return BrandSession(mention_source, poller=fake_timer)
