"""
Table front-end: transactions and account summaries from CSV-like rows.
"""
from typing import Dict, List, Optional, Sequence, Tuple
import logging
from decimal import Decimal

from .lines import DATE_ANCHOR_PATTERN
from .normalize import (
    clean_description, has_digit, normalize_account_number, normalize_money,
    quantize, strip_cell,
)
from ..models.schema import AccountSummary, Transaction

logger = logging.getLogger(__name__)

SUMMARY_FIELDS = ('deposits', 'withdrawals', 'balance', 'ytd_dividends')


class TableRow:
    """A row of cleaned cells."""
    def __init__(self, cells: Sequence[str]):
        self.cells = [strip_cell(cell) for cell in cells]

    @property
    def first(self) -> str:
        return self.cells[0] if self.cells else ""

    def numeric_cells(self) -> List[Tuple[int, str]]:
        """(index, text) of cells after the first one that contain a digit."""
        return [
            (i, cell) for i, cell in enumerate(self.cells)
            if i > 0 and has_digit(cell)
        ]

    def __repr__(self):
        return f"TableRow({self.cells})"


class TableRowParser:
    """Parses statement table rows into the shared ledger model."""

    def __init__(self, accounts: Optional[Dict[str, str]] = None,
                 unknown_account_name: str = "Unknown"):
        self.accounts = {
            normalize_account_number(str(number)): name
            for number, name in (accounts or {}).items()
        }
        self.unknown_account_name = unknown_account_name

    def is_transaction_row(self, row: TableRow) -> bool:
        return DATE_ANCHOR_PATTERN.match(row.first) is not None

    def is_summary_row(self, row: TableRow) -> bool:
        number = normalize_account_number(row.first)
        return bool(number) and number in self.accounts

    def parse_rows(self, rows: Sequence[Sequence[str]]) -> Tuple[List[Transaction], List[AccountSummary]]:
        """
        Parse table rows.

        Args:
            rows: Rows of raw cell strings, in statement order

        Returns:
            (transactions, account summaries), both in source order
        """
        transactions = []
        summaries = []

        for raw in rows:
            row = TableRow(raw)
            if not row.cells:
                continue

            if self.is_transaction_row(row):
                transaction = self.parse_transaction_row(row)
                if transaction:
                    transactions.append(transaction)
            elif self.is_summary_row(row):
                summaries.append(self.parse_summary_row(row))
            else:
                logger.debug(f"Skipping table row: {row}")

        logger.debug(f"Table parser produced {len(transactions)} transactions, {len(summaries)} summaries")
        return transactions, summaries

    def parse_transaction_row(self, row: TableRow) -> Optional[Transaction]:
        """
        Build a transaction from a date-anchored row.

        The last two cells holding digits are amount and balance. A check
        number sitting in its own cell can be mistaken for the amount when
        the row lacks a separate amount column.
        """
        numeric = row.numeric_cells()
        if len(numeric) < 2:
            logger.debug(f"Date row without amount and balance: {row}")
            return None

        (amount_index, amount_text), (_, balance_text) = numeric[-2], numeric[-1]
        amount = normalize_money(amount_text)
        balance = normalize_money(balance_text)

        debit, credit = self._split_signed(amount)
        description = ' '.join(cell for cell in row.cells[1:amount_index] if cell)

        return Transaction(
            date=row.first,
            description=clean_description(description),
            debit=debit,
            credit=credit,
            balance=quantize(balance.copy_abs()),
        )

    def parse_summary_row(self, row: TableRow) -> AccountSummary:
        """Map a known account-number row onto an AccountSummary."""
        number = normalize_account_number(row.first)
        values = [quantize(normalize_money(text)) for _, text in row.numeric_cells()]
        fields = dict(zip(SUMMARY_FIELDS, values))

        return AccountSummary(
            account_number=number,
            account_name=self.account_name(number),
            **fields,
        )

    def account_name(self, number: str) -> str:
        return self.accounts.get(normalize_account_number(number)) or self.unknown_account_name

    @staticmethod
    def _split_signed(amount: Decimal):
        if amount < 0:
            return quantize(amount.copy_negate()), None
        return None, quantize(amount)
