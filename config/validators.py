"""
Configuration Validation for Pulse Brand Monitor

This module contains configuration validation logic.
Kept apart from settings.py so importing settings never raises.
"""

from utils.exceptions import ConfigurationError


def validate_settings():
    """
    Validate that all required settings are properly configured.

    Raises:
        ConfigurationError: If required settings are missing or invalid.
    """
    # Import settings here to avoid circular imports
    from config import settings

    errors = []

    if not settings.GOOGLE_AI_API_KEY:
        errors.append("Missing required environment variable: GOOGLE_AI_API_KEY "
                      "(GEMINI_API_KEY and API_KEY are also accepted)")

    if not settings.DEFAULT_AI_MODELS:
        errors.append("DEFAULT_AI_MODELS must list at least one model")

    # Validate numeric settings are within reasonable bounds
    numeric_validations = [
        ("POLL_INTERVAL_SECONDS", settings.POLL_INTERVAL_SECONDS, 5, 3600),
        ("FETCH_TIMEOUT_SECONDS", settings.FETCH_TIMEOUT_SECONDS, 1, 600),
        ("LIVE_FEED_LIMIT", settings.LIVE_FEED_LIMIT, 1, 1000),
        ("ANALYTICS_WINDOW_SIZE", settings.ANALYTICS_WINDOW_SIZE, 2, 500),
        ("INSIGHT_CONTEXT_LIMIT", settings.INSIGHT_CONTEXT_LIMIT, 1, 100),
        ("REPLY_CHARACTER_LIMIT", settings.REPLY_CHARACTER_LIMIT, 50, 5000),
    ]

    for name, value, min_val, max_val in numeric_validations:
        if value < min_val or value > max_val:
            errors.append(f"{name} must be between {min_val} and {max_val}, got {value}")

    if settings.ANALYTICS_MIN_VOLUME >= settings.ANALYTICS_MAX_VOLUME:
        errors.append(f"ANALYTICS_MIN_VOLUME ({settings.ANALYTICS_MIN_VOLUME}) must be below "
                      f"ANALYTICS_MAX_VOLUME ({settings.ANALYTICS_MAX_VOLUME})")

    # Every timeframe needs a prompt instruction
    missing = [tf for tf in settings.TIMEFRAMES if tf not in settings.TIMEFRAME_INSTRUCTIONS]
    if missing:
        errors.append(f"No search instruction configured for timeframes: {', '.join(missing)}")

    if settings.DEFAULT_PLATFORM not in settings.VALID_PLATFORMS:
        errors.append(f"DEFAULT_PLATFORM '{settings.DEFAULT_PLATFORM}' is not a valid platform")

    # Raise all errors at once
    if errors:
        error_msg = "Configuration validation failed:\n" + "\n".join(f"  - {e}" for e in errors)
        raise ConfigurationError(error_msg)

    return True


def get_config_summary() -> dict:
    """
    Returns a summary of current configuration (without sensitive values).
    Useful for logging startup state.
    """
    # Import settings here to avoid circular imports
    from config import settings

    return {
        "ai": {
            "api_key_configured": bool(settings.GOOGLE_AI_API_KEY),
            "preferred_models": list(settings.DEFAULT_AI_MODELS),
        },
        "feed_settings": {
            "poll_interval_seconds": settings.POLL_INTERVAL_SECONDS,
            "fetch_timeout_seconds": settings.FETCH_TIMEOUT_SECONDS,
            "live_feed_limit": settings.LIVE_FEED_LIMIT,
        },
        "analytics": {
            "window_size": settings.ANALYTICS_WINDOW_SIZE,
            "volume_range": f"{settings.ANALYTICS_MIN_VOLUME}-{settings.ANALYTICS_MAX_VOLUME}",
        },
    }
