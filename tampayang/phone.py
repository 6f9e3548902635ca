"""Phone number clean-up and validation."""

from __future__ import annotations

import re

_NON_DIGITS = re.compile(r"[^0-9]+")

_MIN_LENGTH = 11
_MAX_LENGTH = 15


def sanitize_phone_number(phone_number: str) -> str:
    """Strip non-digits and add a country prefix (+62 replaces a leading 0)."""
    digits = _NON_DIGITS.sub("", phone_number)
    if not digits:
        return ""
    if digits.startswith("0"):
        return "+62" + digits[1:]
    return "+" + digits


def is_valid_phone_number(phone_number: str) -> bool:
    """Return True if the sanitized number is between 11 and 15 characters long."""
    cleaned = sanitize_phone_number(phone_number)
    return bool(cleaned) and _MIN_LENGTH <= len(cleaned) <= _MAX_LENGTH