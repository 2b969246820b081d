"""Checksum validation for payment cards and bank accounts.

Luhn (mod 10) guards the card scanner, ISO 7064 mod-97 guards the IBAN
scanner. Both validators expect input that already passed a shape regex.
"""

import re
from typing import List, NamedTuple

from leak_checker.utils import get_logger

logger = get_logger(__name__)

# 13-19 digits, optionally grouped in fours with spaces or dashes
CARD_PATTERN = re.compile(r"\b(\d{4}[\s-]?\d{4}[\s-]?\d{4}[\s-]?\d{1,7}|\d{13,19})\b")

_SEPARATORS = re.compile(r"[\s-]")


class CardCandidate(NamedTuple):
    """A Luhn-valid card number found in text."""

    value: str
    start: int
    end: int
    issuer: str


class ChecksumValidator:
    """Checksum algorithms used by the financial detectors."""

    @staticmethod
    def luhn(value: str) -> bool:
        """
        Validate a number using the Luhn algorithm (modulo 10).

        Every second digit from the right is doubled (minus 9 when the
        result exceeds 9); the number is valid when the digit sum is a
        multiple of 10.

        Args:
            value: Card number, spaces and dashes allowed

        Returns:
            True if checksum is valid
        """
        digits = _SEPARATORS.sub("", value)

        if not digits.isdigit() or not digits.isascii():
            return False

        # Typical card number length
        if not 13 <= len(digits) <= 19:
            return False

        checksum = 0
        for i, char in enumerate(reversed(digits)):
            digit = int(char)
            if i % 2 == 1:
                digit *= 2
                if digit > 9:
                    digit -= 9
            checksum += digit

        return checksum % 10 == 0

    @staticmethod
    def iban_mod97(iban: str) -> bool:
        """
        Validate an IBAN using the ISO 7064 mod-97 checksum.

        The first four characters move to the end, letters become 10-35,
        and the resulting numeral must leave remainder 1 modulo 97.

        Args:
            iban: IBAN without spaces, upper case

        Returns:
            True if checksum is valid
        """
        if not 15 <= len(iban) <= 34:
            return False

        rearranged = iban[4:] + iban[:4]
        remainder = 0
        for char in rearranged:
            if "A" <= char <= "Z":
                chunk = str(ord(char) - 55)
            elif "0" <= char <= "9":
                chunk = char
            else:
                return False
            for digit in chunk:
                remainder = (remainder * 10 + int(digit)) % 97

        return remainder == 1


def luhn_validate(value: str) -> bool:
    """Validate a card number with the Luhn checksum."""
    return ChecksumValidator.luhn(value)


def validate_iban_checksum(iban: str) -> bool:
    """Validate an IBAN with the mod-97 checksum (spaces and case ignored)."""
    return ChecksumValidator.iban_mod97(re.sub(r"\s", "", iban).upper())


def identify_card_issuer(card_number: str) -> str:
    """
    Identify the card network from the issuer identification number.

    Args:
        card_number: Card number (non-digits are ignored)

    Returns:
        Network name or 'unknown'
    """
    digits = re.sub(r"\D", "", card_number)

    if digits.startswith("4"):
        return "visa"
    # Mastercard: 51-55 or 2221-2720
    if re.match(r"5[1-5]|2(2[2-9]|[3-6]\d|7[01]|720)", digits):
        return "mastercard"
    if re.match(r"3[47]", digits):
        return "amex"
    if re.match(r"6011|64[4-9]|65", digits):
        return "discover"
    if re.match(r"30[0-5]|36|38", digits):
        return "diners"
    if re.match(r"35(2[89]|[3-8]\d)", digits):
        return "jcb"
    if digits.startswith("62"):
        return "unionpay"
    return "unknown"


def looks_like_credit_card(text: str) -> bool:
    """Quick shape check before full Luhn validation."""
    return re.fullmatch(r"\d{13,19}", _SEPARATORS.sub("", text)) is not None


def mask_credit_card(card_number: str) -> str:
    """
    Mask a card number for display, keeping the first and last four digits.

    Args:
        card_number: Card number to mask

    Returns:
        Masked string like "4532********0366"
    """
    digits = re.sub(r"\D", "", card_number)
    if len(digits) < 8:
        return "*" * len(digits)
    return digits[:4] + "*" * (len(digits) - 8) + digits[-4:]


def extract_credit_cards(text: str) -> List[CardCandidate]:
    """
    Extract Luhn-valid card numbers from text.

    Args:
        text: Text to search

    Returns:
        Candidates with positions and inferred issuer
    """
    cards: List[CardCandidate] = []

    for match in CARD_PATTERN.finditer(text):
        candidate = match.group(1)
        normalized = _SEPARATORS.sub("", candidate)

        if not ChecksumValidator.luhn(normalized):
            continue

        issuer = identify_card_issuer(normalized)
        cards.append(CardCandidate(candidate, match.start(1), match.end(1), issuer))
        logger.debug(f"Card candidate at {match.start(1)}-{match.end(1)} (issuer: {issuer})")

    return cards
