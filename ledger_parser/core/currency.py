"""
Currency conversion of extracted money values.
"""
from decimal import Decimal, InvalidOperation
from typing import Optional
import logging

import requests

from .config import CurrencyConfig
from .errors import InvalidRateError
from .normalize import multiply, quantize
from ..models.schema import AccountSummary, StatementResult, Transaction

logger = logging.getLogger(__name__)


class RateUnavailable(Exception):
    """The exchange rate could not be fetched."""


def _lookup(data, dotted_path: str):
    value = data
    for key in dotted_path.split('.'):
        if not isinstance(value, dict) or key not in value:
            raise RateUnavailable(f"Missing field '{dotted_path}' in rate response")
        value = value[key]
    return value


def is_valid_rate(rate: Decimal) -> bool:
    return rate.is_finite() and rate > 0


def fetch_rate(config: CurrencyConfig) -> Decimal:
    """
    Fetch the source -> target rate once.

    Raises:
        RateUnavailable: on network errors, bad status, or a missing or
            non-positive rate field
    """
    url = config.rate_url.format(source=config.source, target=config.target)
    field = config.rate_field.format(source=config.source, target=config.target)

    try:
        resp = requests.get(url, timeout=config.timeout)
        resp.raise_for_status()
        data = resp.json()
    except (requests.RequestException, ValueError) as e:
        raise RateUnavailable(f"Rate request failed: {e}") from e

    raw = _lookup(data, field)
    try:
        rate = Decimal(str(raw))
    except InvalidOperation as e:
        raise RateUnavailable(f"Invalid rate value: {raw!r}") from e

    if not is_valid_rate(rate):
        raise RateUnavailable(f"Invalid rate value: {raw!r}")
    return rate


class CurrencyNormalizer:
    """Scales every money field of a result by one rate."""

    def __init__(self, rate: Decimal, currency: Optional[str] = None):
        try:
            rate = Decimal(rate)
        except (InvalidOperation, TypeError, ValueError):
            raise InvalidRateError(f"Invalid conversion rate: {rate!r}")
        if not is_valid_rate(rate):
            raise InvalidRateError(f"Conversion rate must be a finite positive number: {rate}")
        self.rate = rate
        self.currency = currency

    @classmethod
    def from_config(cls, config: CurrencyConfig, fetch: bool = True) -> "CurrencyNormalizer":
        """Fetch the rate, falling back to the configured default on failure."""
        rate = config.default_rate
        if fetch:
            try:
                rate = fetch_rate(config)
                logger.info(f"Using fetched rate {config.source}->{config.target}: {rate}")
            except RateUnavailable as e:
                logger.warning(f"{e}; falling back to default rate {config.default_rate}")
        return cls(rate, config.target)

    def scale(self, value: Optional[Decimal]) -> Optional[Decimal]:
        if value is None:
            return None
        if not value.is_finite():
            return quantize(value)
        return quantize(multiply(value, self.rate))

    def apply_transaction(self, transaction: Transaction) -> Transaction:
        return transaction.model_copy(update={
            'debit': self.scale(transaction.debit),
            'credit': self.scale(transaction.credit),
            'balance': self.scale(transaction.balance),
        })

    def apply_summary(self, summary: AccountSummary) -> AccountSummary:
        return summary.model_copy(update={
            'deposits': self.scale(summary.deposits),
            'withdrawals': self.scale(summary.withdrawals),
            'balance': self.scale(summary.balance),
            'ytd_dividends': self.scale(summary.ytd_dividends),
        })

    def apply(self, result: StatementResult) -> StatementResult:
        """Return a converted copy of the result tagged with the target currency."""
        return result.model_copy(update={
            'summary': [self.apply_summary(s) for s in result.summary],
            'transactions': [self.apply_transaction(t) for t in result.transactions],
            'currency': self.currency,
        })
