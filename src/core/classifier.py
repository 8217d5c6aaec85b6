"""Ride-request classification (core domain).

Pure functions only: decide whether a text is a ride request, whether it
carries a phone number (or a blocked one), and which configured city is the
pickup point.
"""

from __future__ import annotations

import re
from typing import Iterable, Optional, Sequence

from core.city_aliases import canonical_city

COUNTRY_CODE = "91"

_EMOJI = re.compile(
    "["
    "\U0001F600-\U0001F64F"
    "\U0001F300-\U0001F5FF"
    "\U0001F680-\U0001F6FF"
    "\U0001F1E0-\U0001F1FF"
    "\u2600-\u26FF"
    "\u2700-\u27BF"
    "\uFE00-\uFE0F"
    "\U0001F900-\U0001F9FF"
    "]"
)

ROUTE_PATTERNS = [
    re.compile(r"\bfrom\b.+\bto\b", re.IGNORECASE),
    re.compile(r"\bto\b.+\bfrom\b", re.IGNORECASE),
    re.compile(r"\b\w+\s+to\s+\w+", re.IGNORECASE),
    re.compile(r"pickup", re.IGNORECASE),
    re.compile(r"drop", re.IGNORECASE),
]

PHONE_PATTERNS = [
    re.compile(pattern, re.ASCII)
    for pattern in (
        r"\d{10}",
        r"\d{5}\s*\d{5}",
        r"\d{5}[-]\d{5}",
        r"\+?\d{2}\s*\d{10}",
        r"\+?\d{2}[-\s]\d{5}[-\s]\d{5}",
        r"\d{3}[-\s]?\d{3}[-\s]?\d{4}",
        r"\(\d{3}\)\s*\d{3}[-\s]?\d{4}",
        r"\d{2,4}[-\s]\d{6,8}",
        r"\d{4}[-\s]\d{6}",
        r"\d{2}[-\s]\d{8}",
        r"\d{3}[-]\d{3}[-]\d{4}",
        r"\b\d{10,12}\b",
    )
]

# Pickup extraction patterns, tried strictly in this order.
_FROM_TO = re.compile(r"\bfrom\s+([a-z\s]+?)\s+to\s+([a-z\s]+?)(?:\s|$|[^a-z])")
_X_TO_Y = re.compile(r"\b([a-z\s]+?)\s+to\s+([a-z\s]+?)(?:\s|$|[^a-z])")
_PICKUP = re.compile(r"\bpickup\s*:?\s*([a-z\s]+?)(?:\s*drop|\s*to|\s*-|\s*phone|\s*\d|$)")

_NON_DIGIT = re.compile(r"[^0-9]")


def normalize_text(text: str) -> str:
    """Strip emoji, collapse whitespace and lowercase."""

    if not text:
        return ""
    stripped = _EMOJI.sub("", text)
    return re.sub(r"\s+", " ", stripped).strip().lower()


def digits_only(value: str) -> str:
    return _NON_DIGIT.sub("", value or "")


def has_phone_number(text: str) -> bool:
    """Return True when the text looks like it carries a phone number."""

    if not text:
        return False
    if len(digits_only(text)) < 8:
        return False
    return any(pattern.search(text) for pattern in PHONE_PATTERNS)


def contains_blocked_number(text: str, blocked_numbers: Iterable[str]) -> bool:
    """Digit-only substring match, with and without the country code."""

    if not text or not blocked_numbers:
        return False

    text_digits = digits_only(text)
    for blocked in blocked_numbers:
        blocked_digits = digits_only(blocked)
        if not blocked_digits:
            continue
        if blocked_digits in text_digits:
            return True
        if COUNTRY_CODE + blocked_digits in text_digits:
            return True
    return False


def is_request(
    text: str,
    keywords: Iterable[str],
    ignore_list: Iterable[str],
    blocked_numbers: Iterable[str] = (),
) -> bool:
    """Return True when ``text`` reads like a ride request.

    Ignore terms are checked against the raw lowercased text rather than the
    normalized one, so terms written in non-Latin scripts still apply.
    """

    if not text:
        return False

    if contains_blocked_number(text, blocked_numbers):
        return False

    original_lower = text.lower()
    if any(term.lower() in original_lower for term in ignore_list if term):
        return False

    normalized = normalize_text(text)
    if any(keyword.lower() in normalized for keyword in keywords if keyword):
        return True
    return any(pattern.search(normalized) for pattern in ROUTE_PATTERNS)


def _match_city(phrase: str, cities: Sequence[str]) -> Optional[str]:
    phrase = phrase.lower().strip()
    for city in cities:
        if city.lower() == phrase:
            return city
    mapped = canonical_city(phrase)
    if mapped and mapped in cities:
        return mapped
    return None


def _scan_words(words: Sequence[str], cities: Sequence[str], window: int) -> Optional[str]:
    """Try 1-word, then 2-word, ... up to ``window``-word phrases at each offset."""

    for index in range(len(words)):
        for size in range(1, window + 1):
            if index + size > len(words):
                break
            city = _match_city(" ".join(words[index : index + size]), cities)
            if city:
                return city
    return None


def extract_pickup_city(text: str, configured_cities: Sequence[str]) -> Optional[str]:
    """Return the configured city where the ride starts, if one is named.

    Patterns are tried in priority order and the first one that matches the
    text structurally decides the result, even when it yields no city:

    1. ``from X to Y``  -> X
    2. ``X to Y``       -> X
    3. ``pickup[:] X``  -> first three words of X
    4. any word, word pair or word triple in the whole text
    """

    if not text or not configured_cities:
        return None

    cities = list(configured_cities)
    normalized = normalize_text(text)

    match = _FROM_TO.search(normalized)
    if match:
        return _scan_words(match.group(1).split(), cities, window=3)

    match = _X_TO_Y.search(normalized)
    if match:
        return _scan_words(match.group(1).split(), cities, window=2)

    match = _PICKUP.search(normalized)
    if match:
        return _scan_words(match.group(1).split()[:3], cities, window=2)

    return _scan_words(normalized.split(" "), cities, window=3)
