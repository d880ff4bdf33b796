"""
Canonical forms for contact identifiers.

Emails, phone numbers and social profile URLs are compared in normalized
form so that formatting differences do not prevent an exact match. All
functions are pure, never raise, and are idempotent.
"""

import re
from urllib.parse import urlparse

_NON_DIGIT = re.compile(r"[^0-9]")
_LINKEDIN_PROFILE = re.compile(r"linkedin\.com/in/([^/?]+)", re.IGNORECASE)
_SOCIAL_PROFILE = re.compile(r"(?:facebook|twitter|instagram|telegram)\.com/([^/?]+)", re.IGNORECASE)
_HTTP_PREFIX = re.compile(r"^https?://")

PHONE_DIGITS = 10


def normalize_email(email: str) -> str:
    """Lowercase and trim an email address."""
    return email.lower().strip()


def normalize_phone(phone: str) -> str:
    """
    Reduce a phone number to its digits.

    Numbers longer than 10 digits keep only the last 10, which drops a
    leading country code. Two numbers that share the last 10 digits but
    differ in country code therefore compare equal.
    """
    digits = _NON_DIGIT.sub("", phone)
    if len(digits) > PHONE_DIGITS:
        return digits[-PHONE_DIGITS:]
    return digits


def _normalize_social_once(url: str) -> str:
    linkedin = _LINKEDIN_PROFILE.search(url)
    if linkedin:
        return linkedin.group(1).lower().strip()

    social = _SOCIAL_PROFILE.search(url)
    if social:
        return social.group(1).lower().strip()

    try:
        parsed = urlparse(url.strip())
        hostname = parsed.hostname
    except ValueError:
        parsed, hostname = None, None
    if parsed is not None and parsed.scheme and hostname:
        return (hostname + parsed.path).lower().rstrip("/")

    # Plain handle or partial URL
    value = url.lower().strip().rstrip("/")
    value = _HTTP_PREFIX.sub("", value)
    return value.lstrip("@")


def normalize_social_url(url: str) -> str:
    """
    Normalize a social profile URL or handle.

    Examples:
        https://www.linkedin.com/in/Jane-Doe-123/  -> jane-doe-123
        https://twitter.com/JaneDoe?ref=x          -> janedoe
        https://example.com/About/                 -> example.com/about
        @JaneDoe                                   -> janedoe
    """
    current = url
    while True:
        normalized = _normalize_social_once(current)
        if normalized == current:
            return normalized
        current = normalized
