"""
Turning a pending statement line into a finished transaction.
"""
from typing import Optional
import logging

from .tokens import MonetaryToken, extract_tokens
from .normalize import clean_description, normalize_text, remove_first, quantize
from ..models.schema import Transaction

logger = logging.getLogger(__name__)


class PendingTransaction:
    """A date-anchored line whose amount and balance have not been seen yet."""
    def __init__(self, date: str, description: str = ""):
        self.date = date
        self.description = normalize_text(description)

    def append(self, line: str):
        self.description = normalize_text(f"{self.description} {line}")

    def __repr__(self):
        return f"PendingTransaction('{self.date}', '{self.description}')"


def split_amount(amount: MonetaryToken):
    """Return (debit, credit) for an amount token; exactly one is set."""
    if amount.is_negative:
        return quantize(amount.magnitude), None
    return None, quantize(amount.magnitude)


class TransactionFinalizer:
    """Picks amount and balance from a span and builds the transaction."""

    MIN_TOKENS = 2

    def finalize(self, pending: PendingTransaction, span: str) -> Optional[Transaction]:
        """
        Try to finish the pending transaction from a text span.

        The last monetary token in the span is the running balance and the
        one before it is the amount. Earlier tokens stay in the description.

        Args:
            pending: Transaction being accumulated
            span: Text to look for monetary tokens in

        Returns:
            Transaction, or None when fewer than two tokens are present
        """
        tokens = extract_tokens(span)
        if len(tokens) < self.MIN_TOKENS:
            return None

        amount, balance = tokens[-2], tokens[-1]
        debit, credit = split_amount(amount)

        description = remove_first(pending.description, amount.raw_text)
        description = remove_first(description, balance.raw_text)

        return Transaction(
            date=pending.date,
            description=clean_description(description),
            debit=debit,
            credit=credit,
            balance=quantize(balance.magnitude),
        )

    def salvage(self, pending: PendingTransaction) -> Optional[Transaction]:
        """
        Keep a trailing pending record that only ever got one number.

        Lines such as "Beginning Balance 500.00" carry a balance but no
        amount. Records with no monetary token at all are dropped.
        """
        tokens = extract_tokens(pending.description)
        if not tokens:
            logger.debug(f"Discarding pending record without numbers: {pending}")
            return None

        balance = tokens[-1]
        return Transaction(
            date=pending.date,
            description=clean_description(remove_first(pending.description, balance.raw_text)),
            balance=quantize(balance.magnitude),
        )
