"""
Pydantic models for statement extraction input and output.
"""
from typing import List, Optional
from decimal import Decimal
from pydantic import BaseModel, Field, field_serializer, field_validator, model_validator


def format_amount(value: Optional[Decimal]) -> str:
    """Render a money value the way statements show it: two decimals, or empty."""
    if value is None:
        return ""
    return f"{value:.2f}"


class PlainText(BaseModel):
    """Linearized statement text, one physical line per newline."""
    text: str


class Table(BaseModel):
    """Statement table, rows of cell strings in source order."""
    rows: List[List[str]]


class Transaction(BaseModel):
    """Individual ledger line."""
    date: str
    description: str = ""
    debit: Optional[Decimal] = None
    credit: Optional[Decimal] = None
    balance: Optional[Decimal] = None

    @field_validator('debit', 'credit', 'balance', mode='before')
    @classmethod
    def empty_string_is_none(cls, v):
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @model_validator(mode='after')
    def validate_single_side(self):
        """A transaction is either a debit or a credit, never both."""
        if self.debit is not None and self.credit is not None:
            raise ValueError(
                f"Transaction cannot carry both debit and credit: {self.description}"
            )
        return self

    @field_serializer('debit', 'credit', 'balance')
    def serialize_amount(self, value: Optional[Decimal]) -> str:
        return format_amount(value)


class AccountSummary(BaseModel):
    """Per-account totals."""
    account_number: str
    account_name: str
    deposits: Optional[Decimal] = None
    withdrawals: Optional[Decimal] = None
    balance: Optional[Decimal] = None
    ytd_dividends: Optional[Decimal] = None

    @field_validator('deposits', 'withdrawals', 'balance', 'ytd_dividends', mode='before')
    @classmethod
    def empty_string_is_none(cls, v):
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @field_serializer('deposits', 'withdrawals', 'balance', 'ytd_dividends')
    def serialize_amount(self, value: Optional[Decimal]) -> str:
        return format_amount(value)


class StatementResult(BaseModel):
    """Complete extraction result."""
    summary: List[AccountSummary] = Field(default_factory=list)
    transactions: List[Transaction] = Field(default_factory=list)
    currency: Optional[str] = None
    source_format: str = "text"
