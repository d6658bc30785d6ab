"""
Bank Statement Ledger Parser

A deterministic extractor that turns flattened bank statement text or table
rows into an account summary and an ordered transaction ledger.
"""

__version__ = "1.0.0"
__author__ = "Ledger Parser Team"

from .core.runner import extract_statement, parse_statement, StatementExtractor
from .core.errors import ExtractionError, InputMissingError, NoExtractableContentError
from .models.schema import PlainText, Table, StatementResult, AccountSummary, Transaction

__all__ = [
    "extract_statement",
    "parse_statement",
    "StatementExtractor",
    "ExtractionError",
    "InputMissingError",
    "NoExtractableContentError",
    "PlainText",
    "Table",
    "StatementResult",
    "AccountSummary",
    "Transaction"
]
