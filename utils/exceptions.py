"""
Custom Exception Classes for Pulse Brand Monitor

This module defines custom exceptions for better error handling and
categorization of failures across the application.
"""


class PulseError(Exception):
    """Base exception for all Pulse application errors."""
    pass


# =============================================================================
# Configuration Errors
# =============================================================================

class ConfigurationError(PulseError):
    """Raised when configuration validation fails or required settings are missing."""
    pass


# =============================================================================
# AI Service Errors
# =============================================================================

class AIServiceError(PulseError):
    """Base exception for generative provider errors."""
    pass


class RateLimitedError(AIServiceError):
    """Raised when the provider reports quota exhaustion (HTTP 429 / quota)."""
    pass


class ProviderError(AIServiceError):
    """Raised for any other provider failure: network, timeout, bad status, empty body."""
    pass
