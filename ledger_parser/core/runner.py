"""
End-to-end extraction orchestration.
"""
from pathlib import Path
from typing import Optional, Union
import logging
from decimal import Decimal

from .config import ParserConfig, load_config
from .currency import CurrencyNormalizer
from .errors import InputMissingError, NoExtractableContentError
from .lines import TextStatementParser, split_lines
from .loader import has_content, load_document, table_rows
from .summary import SummaryAggregator
from .tables import TableRowParser
from ..models.schema import PlainText, StatementResult, Table

logger = logging.getLogger(__name__)

Document = Union[PlainText, Table]


def is_empty(document: Document) -> bool:
    """Zero-length text or a table without rows: nothing was supplied at all."""
    if isinstance(document, Table):
        return not document.rows
    return not document.text


class StatementExtractor:
    """Main extractor class that runs one front-end and the summary pass."""

    def __init__(self, config: Optional[ParserConfig] = None, verbose: bool = False):
        self.config = config or load_config()
        self.verbose = verbose

        self.aggregator = SummaryAggregator(
            account_number=self.config.text_summary.account_number,
            account_name=self.config.text_summary.account_name,
        )

        if verbose:
            logging.basicConfig(level=logging.DEBUG)

    def extract(self, document: Optional[Document],
                normalizer: Optional[CurrencyNormalizer] = None) -> StatementResult:
        """
        Extract summary and transactions from a flattened statement.

        Args:
            document: PlainText or Table produced by the upstream converter
            normalizer: Optional currency conversion applied afterwards

        Returns:
            StatementResult object
        """
        if document is None or is_empty(document):
            raise InputMissingError("No document content supplied")
        if not has_content(document):
            raise NoExtractableContentError("No text or table rows to extract from")

        if isinstance(document, Table):
            result = self._extract_table(document)
        else:
            result = self._extract_text(document)

        logger.info(
            f"Extracted {len(result.transactions)} transactions and "
            f"{len(result.summary)} account summaries from {result.source_format}"
        )

        if normalizer is not None:
            result = normalizer.apply(result)
        return result

    def _extract_text(self, document: PlainText) -> StatementResult:
        parser = TextStatementParser()
        transactions = parser.parse_lines(split_lines(document.text))
        return StatementResult(
            summary=self.aggregator.aggregate(transactions),
            transactions=transactions,
            source_format="text",
        )

    def _extract_table(self, document: Table) -> StatementResult:
        parser = TableRowParser(self.config.accounts, self.config.unknown_account_name)
        transactions, summaries = parser.parse_rows(table_rows(document))
        return StatementResult(
            summary=self.aggregator.aggregate(transactions, summaries),
            transactions=transactions,
            source_format="table",
        )

    def currency_normalizer(self, rate: Optional[Decimal] = None) -> CurrencyNormalizer:
        """A fixed-rate normalizer when rate is given, otherwise a fetched one."""
        if rate is not None:
            return CurrencyNormalizer(rate, self.config.currency.target)
        return CurrencyNormalizer.from_config(self.config.currency)


def extract_statement(document: Optional[Document], config: Optional[ParserConfig] = None,
                      convert_currency: bool = False, rate: Optional[Decimal] = None,
                      verbose: bool = False) -> StatementResult:
    """
    Extract a statement that is already text or table rows.

    Args:
        document: PlainText or Table
        config: Parser configuration; the packaged default when omitted
        convert_currency: Scale money values into the target currency
        rate: Fixed conversion rate; fetched when omitted
        verbose: Enable verbose logging

    Returns:
        StatementResult object
    """
    extractor = StatementExtractor(config, verbose)
    normalizer = extractor.currency_normalizer(rate) if convert_currency else None
    return extractor.extract(document, normalizer)


def parse_statement(path: Path, fmt: str = "auto", config: Optional[ParserConfig] = None,
                    convert_currency: bool = False, rate: Optional[Decimal] = None,
                    verbose: bool = False) -> StatementResult:
    """
    Load a statement file and extract it.

    Args:
        path: Statement file (.pdf, .txt, .csv)
        fmt: Input format, see loader.FORMATS
        config: Parser configuration
        convert_currency: Scale money values into the target currency
        rate: Fixed conversion rate; fetched when omitted
        verbose: Enable verbose logging

    Returns:
        StatementResult object
    """
    document = load_document(path, fmt)
    return extract_statement(document, config, convert_currency, rate, verbose)
