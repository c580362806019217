"""
Helper Utility Module

This module provides various helper functions used throughout the brand monitor.
"""

import random
import re
import string
from typing import Optional
from urllib.parse import urlparse, quote

from config import settings

_ID_ALPHABET = string.ascii_lowercase + string.digits
_HOSTNAME = re.compile(r'[a-z0-9-]+(?:\.[a-z0-9-]+)*')


def is_valid_url(url: str) -> bool:
    """
    Check if a URL is valid.

    Args:
        url: The URL to validate

    Returns:
        bool: True if the URL is valid, False otherwise
    """
    try:
        result = urlparse(url)
        return all([result.scheme, result.netloc])
    except Exception:
        return False


def clean_brand_name(raw: str) -> str:
    """
    Turn whatever the user typed into a brand token.

    Inputs that look like a URL or domain are reduced to their host with a
    leading "www." removed; anything else loses a leading "@". Names with
    spaces such as "Dr. Martens" are never treated as domains.

    Examples:
        "https://www.nike.com" -> "nike.com"
        "@nike" -> "nike"
        "nike" -> "nike"

    Args:
        raw: Raw brand input

    Returns:
        str: Cleaned brand name (may be empty if the input was blank)
    """
    text = (raw or "").strip()
    is_url = text.lower().startswith(('http://', 'https://'))

    if (is_url or '.' in text) and not any(ch.isspace() for ch in text):
        candidate = text if is_url else f"https://{text}"
        try:
            host = urlparse(candidate).hostname
        except ValueError:
            host = None
        if host and _HOSTNAME.fullmatch(host):
            if host.startswith('www.'):
                host = host[4:]
            return host

    if text.startswith('@'):
        text = text[1:]
    return text.strip()


def generate_id(length: Optional[int] = None) -> str:
    """Random lowercase base-36 identifier."""
    length = length or settings.MENTION_ID_LENGTH
    return ''.join(random.choice(_ID_ALPHABET) for _ in range(length))


def avatar_url(author: Optional[str]) -> str:
    """Placeholder avatar image keyed by author name."""
    name = author or settings.AVATAR_FALLBACK_NAME
    return settings.AVATAR_URL_TEMPLATE.format(name=quote(name, safe=''))


def truncate_text(text: str, max_length: int = 100, add_ellipsis: bool = True) -> str:
    """
    Truncate text to a maximum length.

    Args:
        text: The text to truncate
        max_length: Maximum length
        add_ellipsis: Whether to add an ellipsis if text is truncated

    Returns:
        str: Truncated text
    """
    if not text or len(text) <= max_length:
        return text

    truncated = text[:max_length].rstrip()
    if add_ellipsis:
        truncated += "..."

    return truncated
