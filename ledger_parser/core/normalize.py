"""
Data normalization and cleaning functions.
"""
import re
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP, localcontext
from typing import Iterable, Optional
import logging

logger = logging.getLogger(__name__)

CENTS = Decimal('0.01')

CONTINUED_PATTERN = re.compile(r'continued from previous page', re.IGNORECASE)
TRAILING_DASH_PATTERN = re.compile(r'-\s*$')
CELL_QUOTES = '"\''


def normalize_text(value: str) -> str:
    """
    Normalize text by trimming and collapsing whitespace.

    Args:
        value: Raw text string

    Returns:
        Cleaned text string
    """
    if not value:
        return ""

    return re.sub(r'\s+', ' ', value.strip())


def remove_first(text: str, fragment: str) -> str:
    """Remove the first literal occurrence of fragment from text."""
    if not fragment:
        return text
    index = text.find(fragment)
    if index == -1:
        return text
    return text[:index] + text[index + len(fragment):]


def clean_description(description: str) -> str:
    """
    Strip page-break noise and sign leftovers from a description.

    Applying it to an already clean description returns it unchanged.
    """
    if not description:
        return ""

    cleaned = normalize_text(description)
    while True:
        previous = cleaned
        cleaned = normalize_text(CONTINUED_PATTERN.sub(' ', cleaned))
        cleaned = normalize_text(TRAILING_DASH_PATTERN.sub('', cleaned))
        if cleaned == previous:
            return cleaned


def quantize(value: Optional[Decimal]) -> Optional[Decimal]:
    """Round a money value half-up to cents; None stays None."""
    if value is None:
        return None
    if not value.is_finite():
        logger.warning(f"Could not round monetary value: {value}")
        return Decimal('0.00')

    # enough digits for every grouped token the grammar accepts
    with localcontext() as ctx:
        ctx.prec = max(ctx.prec, value.adjusted() + 4)
        try:
            return value.quantize(CENTS, rounding=ROUND_HALF_UP)
        except InvalidOperation:
            logger.warning(f"Could not round monetary value: {value}")
            return Decimal('0.00')


def total(values: Iterable[Decimal]) -> Decimal:
    """Exact sum of money values, whatever their magnitude."""
    values = [v for v in values if v.is_finite()]
    if not values:
        return Decimal('0')

    with localcontext() as ctx:
        widest = max(v.adjusted() for v in values)
        ctx.prec = max(ctx.prec, widest + len(str(len(values))) + 4)
        return sum(values, Decimal('0'))


def multiply(value: Decimal, factor: Decimal) -> Decimal:
    """Exact product of two finite decimals."""
    with localcontext() as ctx:
        ctx.prec = max(ctx.prec, len(value.as_tuple().digits) + len(factor.as_tuple().digits) + 2)
        return value * factor


def strip_cell(value: Optional[str]) -> str:
    """Strip surrounding whitespace and quote characters from a table cell."""
    if value is None:
        return ""
    return str(value).strip().strip(CELL_QUOTES).strip()


def has_digit(value: str) -> bool:
    return any(ch.isdigit() for ch in value or "")


def normalize_money(value: str) -> Decimal:
    """
    Normalize a single-value money cell to a signed Decimal.

    Commas, spaces and currency symbols are dropped. A leading or trailing
    '-' and surrounding parentheses all mark a negative amount.

    Args:
        value: Raw money string

    Returns:
        Decimal value, zero if nothing numeric is found
    """
    if not value or not value.strip():
        return Decimal('0.00')

    cleaned = re.sub(r'[,\s]', '', value.strip())

    is_negative = cleaned.startswith('(') and cleaned.endswith(')')
    if is_negative:
        cleaned = cleaned[1:-1]

    if cleaned.endswith('-'):
        is_negative = True
        cleaned = cleaned[:-1]
    if '-' in cleaned[:2]:
        is_negative = True

    match = re.search(r'\d+(?:\.\d+)?', cleaned)
    if not match:
        logger.warning(f"Could not extract numeric value from: {value}")
        return Decimal('0.00')

    try:
        amount = Decimal(match.group())
    except InvalidOperation:
        logger.warning(f"Could not extract numeric value from: {value}")
        return Decimal('0.00')

    if is_negative:
        amount = amount.copy_negate()

    return amount


def normalize_account_number(value: str) -> str:
    """Keep only the digits of an account number cell."""
    return re.sub(r'\D', '', value or "")
