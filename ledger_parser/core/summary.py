"""
Account summary aggregation.
"""
from decimal import Decimal
from typing import List, Optional, Sequence
import logging

from .normalize import quantize, total
from ..models.schema import AccountSummary, Transaction

logger = logging.getLogger(__name__)


def ending_balance(transactions: Sequence[Transaction]) -> Optional[Decimal]:
    """Balance of the last transaction that has one, scanning from the end."""
    for transaction in reversed(transactions):
        if transaction.balance is not None:
            return transaction.balance
    return None


class SummaryAggregator:
    """Builds the account summary list for a parsed statement."""

    def __init__(self, account_number: str = "—", account_name: str = "Statement Account"):
        self.account_number = account_number
        self.account_name = account_name

    def from_transactions(self, transactions: Sequence[Transaction]) -> List[AccountSummary]:
        """
        Synthesize one summary when the source has no per-account rows.

        Deposits are the sum of credits, withdrawals the sum of debits.
        Year-to-date dividends cannot be known from text and stay empty.
        """
        deposits = total(t.credit for t in transactions if t.credit is not None)
        withdrawals = total(t.debit for t in transactions if t.debit is not None)

        summary = AccountSummary(
            account_number=self.account_number,
            account_name=self.account_name,
            deposits=quantize(deposits),
            withdrawals=quantize(withdrawals),
            balance=ending_balance(transactions),
            ytd_dividends=None,
        )
        logger.debug(f"Synthesized summary: {summary}")
        return [summary]

    def aggregate(self, transactions: Sequence[Transaction],
                  summary_rows: Optional[Sequence[AccountSummary]] = None) -> List[AccountSummary]:
        """Pass explicit summary rows through, or synthesize one from text."""
        if summary_rows is not None:
            return list(summary_rows)
        return self.from_transactions(transactions)
