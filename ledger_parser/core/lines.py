"""
Text front-end: classify statement lines and merge continuations.

The parser is a two-state machine. In ``IDLE`` nothing is pending and
non-anchor lines are noise. In ``ACCUMULATING`` a date-anchored record is
collecting description text until two monetary tokens finish it.
"""
import re
from enum import Enum
from typing import Iterable, List, Optional
import logging

from .finalizer import PendingTransaction, TransactionFinalizer
from ..models.schema import Transaction

logger = logging.getLogger(__name__)

DATE_ANCHOR_PATTERN = re.compile(r'^\d{2}-\d{2}\b')
ANCHOR_SPLIT_PATTERN = re.compile(r'^\d{2}-\d{2}\s*(.*)$')


class ParserState(Enum):
    IDLE = "idle"
    ACCUMULATING = "accumulating"


def split_lines(text: str) -> List[str]:
    """Strip CRs, trim every line and drop blank ones, keeping order."""
    if not text:
        return []
    lines = (line.strip() for line in text.replace('\r', '').split('\n'))
    return [line for line in lines if line]


class LineClassifier:
    """Decides whether a line opens a new transaction."""

    @staticmethod
    def is_anchor(line: str) -> bool:
        return DATE_ANCHOR_PATTERN.match(line) is not None

    @staticmethod
    def split_anchor(line: str):
        """Return (date, rest) for a date-anchor line."""
        match = ANCHOR_SPLIT_PATTERN.match(line)
        rest = match.group(1) if match else line[5:]
        return line[:5], rest


class TextStatementParser:
    """Runs the line state machine over one statement's text."""

    def __init__(self, finalizer: Optional[TransactionFinalizer] = None):
        self.finalizer = finalizer or TransactionFinalizer()
        self.classifier = LineClassifier()
        self.pending: Optional[PendingTransaction] = None

    @property
    def state(self) -> ParserState:
        return ParserState.ACCUMULATING if self.pending else ParserState.IDLE

    def reset(self):
        self.pending = None

    def on_anchor_line(self, line: str) -> Optional[Transaction]:
        """Open a new record, abandoning any unfinished one."""
        if self.pending is not None:
            logger.debug(f"Abandoning unfinished record: {self.pending}")

        date, rest = self.classifier.split_anchor(line)
        self.pending = PendingTransaction(date, rest)

        # Date and numbers often share the anchor line.
        return self._try_finalize(line)

    def on_continuation_line(self, line: str) -> Optional[Transaction]:
        """Extend the open record, or skip the line as noise."""
        if self.pending is None:
            logger.debug(f"Skipping line outside a transaction: {line!r}")
            return None

        self.pending.append(line)
        # Amount and balance may have been split across physical lines.
        return self._try_finalize(self.pending.description)

    def on_end_of_input(self) -> Optional[Transaction]:
        """Salvage a trailing record that only got a balance."""
        if self.pending is None:
            return None

        transaction = self.finalizer.salvage(self.pending)
        self.pending = None
        return transaction

    def feed(self, line: str) -> Optional[Transaction]:
        if self.classifier.is_anchor(line):
            return self.on_anchor_line(line)
        return self.on_continuation_line(line)

    def parse_lines(self, lines: Iterable[str]) -> List[Transaction]:
        """
        Parse prepared lines into transactions in source order.

        Args:
            lines: Trimmed, non-empty statement lines

        Returns:
            List of Transaction objects
        """
        self.reset()
        transactions = []

        for line in lines:
            transaction = self.feed(line)
            if transaction:
                transactions.append(transaction)

        trailing = self.on_end_of_input()
        if trailing:
            transactions.append(trailing)

        logger.debug(f"Text parser produced {len(transactions)} transactions")
        return transactions

    def parse(self, text: str) -> List[Transaction]:
        return self.parse_lines(split_lines(text))

    def _try_finalize(self, span: str) -> Optional[Transaction]:
        transaction = self.finalizer.finalize(self.pending, span)
        if transaction:
            self.pending = None
        return transaction
