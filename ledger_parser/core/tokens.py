"""
Monetary token extraction from flattened statement text.
"""
import re
from decimal import Decimal, InvalidOperation
from typing import List
import logging

logger = logging.getLogger(__name__)

# 1,234.56 with an optional trailing '-' sign marker. Ungrouped runs such as
# 1234.56 or 12.345 are not money and must not match partially.
MONEY_PATTERN = re.compile(r'(?<![\d.])(?<!\d,)(\d{1,3}(?:,\d{3})*\.\d{2})(?![\d])(-?)')


class MonetaryToken:
    """A formatted currency amount found in a text span."""
    def __init__(self, raw_text: str, magnitude: Decimal, is_negative: bool,
                 start: int = -1, end: int = -1):
        self.raw_text = raw_text
        self.magnitude = magnitude
        self.is_negative = is_negative
        self.start = start
        self.end = end

    @property
    def signed(self) -> Decimal:
        return self.magnitude.copy_negate() if self.is_negative else self.magnitude

    def __eq__(self, other):
        if not isinstance(other, MonetaryToken):
            return NotImplemented
        return (self.raw_text, self.magnitude, self.is_negative) == \
            (other.raw_text, other.magnitude, other.is_negative)

    def __repr__(self):
        return f"MonetaryToken('{self.raw_text}', magnitude={self.magnitude}, negative={self.is_negative})"


def parse_magnitude(digits: str) -> Decimal:
    """
    Parse the digits-and-decimal-point part of a token.

    Grouping commas are removed. Anything unparseable becomes zero.
    """
    cleaned = digits.replace(',', '').strip()
    try:
        return Decimal(cleaned).copy_abs()
    except InvalidOperation:
        logger.warning(f"Could not parse monetary value: {digits!r}")
        return Decimal('0')


def extract_tokens(text: str) -> List[MonetaryToken]:
    """
    Find all monetary tokens in a span, left to right.

    Args:
        text: Span of statement text

    Returns:
        List of MonetaryToken in order of appearance
    """
    if not text:
        return []

    tokens = []
    for match in MONEY_PATTERN.finditer(text):
        tokens.append(MonetaryToken(
            raw_text=match.group(0),
            magnitude=parse_magnitude(match.group(1)),
            is_negative=match.group(2) == '-',
            start=match.start(),
            end=match.end(),
        ))
    return tokens


def contains_token(text: str) -> bool:
    return MONEY_PATTERN.search(text or '') is not None
