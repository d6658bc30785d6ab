"""
Tests for extraction orchestration, loading and configuration.
"""
import json
import pytest
from decimal import Decimal
from pathlib import Path

from ledger_parser import (
    InputMissingError, NoExtractableContentError, PlainText, StatementResult, Table,
    extract_statement, parse_statement,
)
from ledger_parser.core.config import DEFAULT_CONFIG_PATH, ParserConfig, load_config
from ledger_parser.core.errors import InvalidRateError
from ledger_parser.core.loader import detect_format, load_document

STATEMENT_TEXT = """
ACME FEDERAL CREDIT UNION
Statement Period 03/01 - 03/31

01-01 BEGINNING BALANCE 500.00 500.00
03-14 CHECK #102
PURCHASE AT
STORE 1,234.56 1,734.56
03-15 ATM WITHDRAWAL 234.56- 1,500.00
Page 1 of 2
03-16 SERVICE FEE
continued from previous page
MONTHLY 5.00- 1,495.00
"""


@pytest.fixture
def config():
    return ParserConfig(
        accounts={"1000123456": "Premium Bus Checking"},
        text_summary={"account_number": "—", "account_name": "Premium Bus Checking"},
    )


class TestExtractStatement:
    """Extraction from already-flattened input."""

    def test_text_statement(self, config):
        result = extract_statement(PlainText(text=STATEMENT_TEXT), config)

        assert result.source_format == "text"
        assert result.currency is None
        assert [t.date for t in result.transactions] == ["01-01", "03-14", "03-15", "03-16"]
        assert result.transactions[3].description == "SERVICE FEE MONTHLY"

        summary = result.summary[0]
        assert summary.account_name == "Premium Bus Checking"
        assert summary.deposits == Decimal("1734.56")
        assert summary.withdrawals == Decimal("239.56")
        assert summary.balance == Decimal("1495.00")

    def test_table_statement(self, config):
        rows = [
            ["Account", "Name", "Deposits", "Withdrawals", "Balance", "YTD Dividends"],
            ["1000123456", "Checking", "1,000.00", "250.00", "1,250.00", "0.42"],
            ["Date", "Description", "Amount", "Balance"],
            ["03-01", "PAYROLL", "1,000.00", "1,500.00"],
            ["03-02", "RENT", "250.00-", "1,250.00"],
        ]
        result = extract_statement(Table(rows=rows), config)

        assert result.source_format == "table"
        assert len(result.transactions) == 2
        assert result.transactions[1].debit == Decimal("250.00")
        assert len(result.summary) == 1
        assert result.summary[0].account_name == "Premium Bus Checking"
        assert result.summary[0].ytd_dividends == Decimal("0.42")

    def test_fixed_rate_conversion(self, config):
        result = extract_statement(PlainText(text="05-01 FEE 25.00- 100.00"), config,
                                   convert_currency=True, rate=Decimal("2"))
        assert result.currency == config.currency.target
        assert result.transactions[0].debit == Decimal("50.00")
        assert result.summary[0].withdrawals == Decimal("50.00")
        assert result.transactions[0].description == "FEE"

    @pytest.mark.parametrize("document", [None, PlainText(text=""), Table(rows=[])])
    def test_missing_input(self, config, document):
        with pytest.raises(InputMissingError):
            extract_statement(document, config)

    @pytest.mark.parametrize("rate", [Decimal("-2"), Decimal("0"), Decimal("NaN"), Decimal("Infinity")])
    def test_invalid_fixed_rate(self, config, rate):
        with pytest.raises(InvalidRateError):
            extract_statement(PlainText(text="05-01 FEE 25.00- 100.00"), config,
                              convert_currency=True, rate=rate)

    def test_oversized_grouped_amount(self, config):
        amount = "1" + ",000" * 10 + ".55"
        result = extract_statement(PlainText(text=f"03-14 WIRE {amount} {amount}"), config)

        txn = result.transactions[0]
        assert txn.credit == Decimal("1" + "000" * 10 + ".55")
        assert txn.balance == txn.credit
        assert result.summary[0].deposits == txn.credit

    @pytest.mark.parametrize("document", [
        PlainText(text=" \n\r\n\t "),
        Table(rows=[["", " "]]),
        Table(rows=[[]]),
    ])
    def test_no_extractable_content(self, config, document):
        with pytest.raises(NoExtractableContentError):
            extract_statement(document, config)

    def test_errors_are_value_errors(self, config):
        with pytest.raises(ValueError):
            extract_statement(PlainText(text=""), config)

    def test_result_json_round_trip(self, config):
        result = extract_statement(PlainText(text=STATEMENT_TEXT), config)
        data = json.loads(result.model_dump_json())

        assert data["transactions"][0]["debit"] == ""
        assert data["transactions"][1]["credit"] == "1234.56"
        assert data["summary"][0]["ytd_dividends"] == ""
        assert StatementResult.model_validate_json(result.model_dump_json()) == result


class TestParseStatementFiles:
    """File loading front door."""

    def test_text_file(self, tmp_path, config):
        path = tmp_path / "statement.txt"
        path.write_text(STATEMENT_TEXT, encoding="utf-8")
        result = parse_statement(path, config=config)
        assert len(result.transactions) == 4

    def test_csv_file(self, tmp_path, config):
        path = tmp_path / "statement.csv"
        path.write_text('03-01,"PAYROLL, ACME","1,000.00","1,500.00"\n', encoding="utf-8")
        result = parse_statement(path, config=config)
        assert result.source_format == "table"
        assert result.transactions[0].description == "PAYROLL, ACME"
        assert result.transactions[0].credit == Decimal("1000.00")

    def test_missing_file(self, tmp_path):
        with pytest.raises(InputMissingError):
            load_document(tmp_path / "nope.txt")

    def test_empty_file(self, tmp_path):
        path = tmp_path / "empty.txt"
        path.write_text("")
        with pytest.raises(InputMissingError):
            load_document(path)

    def test_blank_file(self, tmp_path):
        path = tmp_path / "blank.txt"
        path.write_text("\n\n   \n")
        with pytest.raises(NoExtractableContentError):
            load_document(path)

    def test_unknown_format(self, tmp_path):
        path = tmp_path / "statement.txt"
        path.write_text("x")
        with pytest.raises(ValueError):
            load_document(path, "xlsx")

    @pytest.mark.parametrize("name,fmt", [
        ("a.pdf", "pdf"), ("a.PDF", "pdf"), ("a.csv", "csv"), ("a.txt", "text"), ("a", "text"),
    ])
    def test_detect_format(self, name, fmt):
        assert detect_format(Path(name)) == fmt


class TestConfig:
    """YAML configuration."""

    def test_packaged_default(self, monkeypatch):
        monkeypatch.delenv("LEDGER_PARSER_CONFIG", raising=False)
        monkeypatch.delenv("LEDGER_PARSER_FX_URL", raising=False)
        monkeypatch.delenv("LEDGER_PARSER_FX_DEFAULT_RATE", raising=False)

        config = load_config()
        assert DEFAULT_CONFIG_PATH.exists()
        assert config.accounts["1000123456"] == "Premium Bus Checking"
        assert config.unknown_account_name == "Unknown"
        assert config.currency.default_rate == Decimal("83.00")

    def test_yaml_file_with_int_keys(self, tmp_path):
        path = tmp_path / "accounts.yaml"
        path.write_text("accounts:\n  42: Savings\ncurrency:\n  target: EUR\n", encoding="utf-8")
        config = load_config(path)
        assert config.accounts == {"42": "Savings"}
        assert config.currency.target == "EUR"
        assert config.currency.source == "USD"

    def test_missing_file_uses_defaults(self, tmp_path):
        config = load_config(tmp_path / "missing.yaml")
        assert config.accounts == {}
        assert config.unknown_account_name == "Unknown"

    def test_env_overrides(self, tmp_path, monkeypatch):
        monkeypatch.setenv("LEDGER_PARSER_FX_URL", "https://fx.example/{source}")
        monkeypatch.setenv("LEDGER_PARSER_FX_DEFAULT_RATE", "90.5")
        config = load_config(tmp_path / "missing.yaml")
        assert config.currency.rate_url == "https://fx.example/{source}"
        assert config.currency.default_rate == Decimal("90.5")

    def test_invalid_env_rate_is_ignored(self, tmp_path, monkeypatch):
        monkeypatch.setenv("LEDGER_PARSER_FX_DEFAULT_RATE", "lots")
        config = load_config(tmp_path / "missing.yaml")
        assert config.currency.default_rate == Decimal("83.00")
