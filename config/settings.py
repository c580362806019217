"""
Configuration Settings for Pulse Brand Monitor

This module centralizes all configuration settings for the brand monitor,
including environment variables, API keys, and application constants.
"""

import os
from pathlib import Path
from dotenv import load_dotenv

# Determine the application root directory
APP_ROOT = Path(__file__).resolve().parent.parent

# Load environment variables from .env file
load_dotenv(dotenv_path=os.path.join(APP_ROOT, '.env'))

# API Keys and Authentication
GOOGLE_AI_API_KEY = (
    os.getenv("GOOGLE_AI_API_KEY")
    or os.getenv("GEMINI_API_KEY")
    or os.getenv("API_KEY")
)

# AI Model Settings
DEFAULT_AI_MODELS = [
    'gemini-2.5-flash',         # Search grounding + good latency
    'gemini-2.0-flash',         # Fallback if 2.5 is not enabled for the key
    'gemini-2.5-flash-lite',
]

# =============================================================================
# Live Feed Settings
# =============================================================================

POLL_INTERVAL_SECONDS = int(os.getenv("POLL_INTERVAL_SECONDS", "60"))
FETCH_TIMEOUT_SECONDS = int(os.getenv("FETCH_TIMEOUT_SECONDS", "45"))
LIVE_FEED_LIMIT = 50                 # Max mentions kept while streaming
POLL_JOB_ID = "live-mention-poll"

# Mention schema
VALID_PLATFORMS = ('twitter', 'bluesky', 'linkedin', 'instagram', 'reddit', 'news', 'web')
DEFAULT_PLATFORM = 'web'
VALID_SENTIMENTS = ('positive', 'negative', 'neutral')
DEFAULT_SENTIMENT = 'neutral'
MENTION_CONTENT_LIMIT = 280          # Asked of the provider, not enforced
MENTION_ID_LENGTH = 9
AVATAR_URL_TEMPLATE = "https://ui-avatars.com/api/?background=random&name={name}&color=fff"
AVATAR_FALLBACK_NAME = "User"

# Timeframes and the instruction each one adds to the search prompt
TIMEFRAMES = ('live', '24h', '7d', '30d', '1y')
LIVE_TIMEFRAME = 'live'
TIMEFRAME_INSTRUCTIONS = {
    'live': "Search for the absolute latest, most recent mentions from today.",
    '24h': "Search for mentions from the past 24 hours.",
    '7d': "Search for key mentions from the past 7 days.",
    '30d': "Search for mentions from the past 30 days.",
    '1y': "Search for major mentions and sentiment from the past year (12 months).",
}
TIMEFRAME_LABELS = {
    'live': 'Live',
    '24h': 'Past 24H',
    '7d': 'Past 7 Days',
    '30d': 'Past Month',
    '1y': 'Past Year',
}

# Site filters used for the social part of the search
SOCIAL_SITE_FILTERS = ['site:bsky.app', 'site:reddit.com']
PROFESSIONAL_SITE_FILTERS = ['site:linkedin.com']
MENTIONS_PER_FETCH = "5-6"

# =============================================================================
# Analytics Settings (synthetic telemetry)
# =============================================================================

ANALYTICS_WINDOW_SIZE = 11           # Samples kept in the rolling window
ANALYTICS_MIN_VOLUME = 5
ANALYTICS_MAX_VOLUME = 100
ANALYTICS_ACTIVE_BASELINE = 50       # Baseline volume when the feed has mentions
ANALYTICS_IDLE_BASELINE = 10         # Baseline volume when the feed is empty
ANALYTICS_VOLUME_JITTER = 10         # Random walk step, +/-
ANALYTICS_SEED_VOLUME_RANGE = (20, 69)
ANALYTICS_SEED_SENTIMENT_RANGE = (60, 99)

# =============================================================================
# AI Assist Settings
# =============================================================================

INSIGHT_CONTEXT_LIMIT = 10           # Most recent mentions sent for insight/plan
INSIGHT_WORD_LIMIT = 30
REPLY_CHARACTER_LIMIT = 280          # Twitter / BlueSky reply length
SHORT_FORM_PLATFORMS = ('twitter', 'bluesky')
ACTION_PLAN_STEPS = 5

# Canned fallbacks
INSIGHT_NO_DATA_MESSAGE = (
    "No sufficient data found for **{brand}** yet. Try checking the spelling "
    "or wait for the system to index more sources."
)
INSIGHT_UNAVAILABLE_MESSAGE = "Insight generation temporarily unavailable due to high traffic."
INSIGHT_EMPTY_MESSAGE = "Analysis complete."
REPLY_UNAVAILABLE_MESSAGE = "Error generating reply. Please check your API connection."
REPLY_EMPTY_MESSAGE = "Could not generate reply."
PLAN_NO_DATA_MESSAGE = "Insufficient data to generate plan."
PLAN_UNAVAILABLE_MESSAGE = "Error generating plan."
PLAN_EMPTY_MESSAGE = "Plan generation failed."
RATE_LIMIT_MESSAGE = "API Quota Exceeded. Polling paused. Please wait a moment."

# Rate limit detection
RATE_LIMIT_STATUS_CODE = 429
RATE_LIMIT_MARKERS = ['429', 'quota', 'resource_exhausted']

# =============================================================================
# Response Policy (SOP) Settings
# =============================================================================

SOP_TYPES = ('tone', 'rule', 'template')
DEFAULT_SOPS = [
    {
        'title': 'Default Professional Tone',
        'content': 'Maintain a helpful, professional, yet conversational tone. Avoid corporate jargon.',
        'type': 'tone',
    },
    {
        'title': 'Crisis Escalation',
        'content': ('If the user is reporting a severe bug or outage, do not make jokes. '
                    'Apologize sincerely and ask them to DM for support.'),
        'type': 'rule',
    },
]
TEMPLATE_BRAND_FALLBACK = "our team"
