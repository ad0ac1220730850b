"""
Pytest tests for the Luhn checksum and card brand detection.
"""

from __future__ import annotations

import pytest

from backend_riskguard.analysis_engine.checksum import (
    clean_card_number,
    detect_card_brand,
    validate_checksum,
)

from conftest import VALID_CARD


@pytest.mark.parametrize(
    "number",
    [
        "4111111111111111",
        "5555555555554444",
        "378282246310005",
        "6011111111111117",
        "4111 1111 1111 1111",
        "4111-1111-1111-1111",
    ],
)
def test_valid_numbers(number):
    assert validate_checksum(number) is True


def test_every_single_digit_mutation_is_invalid():
    """Luhn catches any single substituted digit."""
    for position, original in enumerate(VALID_CARD):
        for digit in "0123456789":
            if digit == original:
                continue
            mutated = VALID_CARD[:position] + digit + VALID_CARD[position + 1:]
            assert validate_checksum(mutated) is False, mutated


@pytest.mark.parametrize("number", ["", "411111111111", "4" * 20, "abcd", None, 4111111111111111])
def test_malformed_input_is_false_not_error(number):
    assert validate_checksum(number) is False


def test_clean_card_number_strips_separators():
    assert clean_card_number(" 4111-1111 1111.1111 ") == VALID_CARD
    assert clean_card_number(None) == ""


def test_detect_card_brand():
    assert detect_card_brand("4111 1111 1111 1111") == "visa"
    assert detect_card_brand("5555555555554444") == "mastercard"
    assert detect_card_brand("378282246310005") == "amex"
    assert detect_card_brand("6011111111111117") == "discover"
    assert detect_card_brand("1234") == "unknown"
