"""
Payment-card number checks: Luhn checksum and brand detection.

Both functions are total: malformed or non-string input simply fails
validation (or yields "unknown"), it never raises.
"""

from __future__ import annotations

import re

MIN_CARD_DIGITS = 13
MAX_CARD_DIGITS = 19

_NON_DIGIT = re.compile(r"\D")

# Brand -> IIN/length pattern over the cleaned digit string. Order matters.
CARD_BRAND_PATTERNS: tuple[tuple[str, re.Pattern[str]], ...] = (
    ("visa", re.compile(r"^4[0-9]{12}(?:[0-9]{3})?$")),
    ("mastercard", re.compile(r"^5[1-5][0-9]{14}$")),
    ("amex", re.compile(r"^3[47][0-9]{13}$")),
    ("discover", re.compile(r"^6(?:011|5[0-9]{2})[0-9]{12}$")),
    ("diners", re.compile(r"^3[0689][0-9]{11}$")),
    ("jcb", re.compile(r"^(?:2131|1800|35\d{3})\d{11}$")),
)
CARD_BRAND_UNKNOWN = "unknown"


def clean_card_number(number: object) -> str:
    """Strip spaces, dashes and any other separators; non-strings become ''."""
    if not isinstance(number, str):
        return ""
    return _NON_DIGIT.sub("", number)


def validate_checksum(number: object) -> bool:
    """
    Validate a card-like number with the Luhn (mod 10) checksum.

    Separators are stripped first. Returns False when the digit count is
    outside [13, 19]. Walking from the rightmost digit, every second digit is
    doubled (minus 9 when above 9); the number is valid iff the sum is a
    multiple of 10.
    """
    digits = clean_card_number(number)
    if not MIN_CARD_DIGITS <= len(digits) <= MAX_CARD_DIGITS:
        return False

    total = 0
    for position, char in enumerate(reversed(digits)):
        digit = int(char)
        if position % 2 == 1:
            digit *= 2
            if digit > 9:
                digit -= 9
        total += digit
    return total % 10 == 0


def detect_card_brand(number: object) -> str:
    """Return the card brand (visa, mastercard, amex, discover, diners, jcb) or 'unknown'."""
    digits = clean_card_number(number)
    for brand, pattern in CARD_BRAND_PATTERNS:
        if pattern.match(digits):
            return brand
    return CARD_BRAND_UNKNOWN
