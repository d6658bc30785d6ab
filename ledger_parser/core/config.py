"""
Parser configuration loading.
"""
import os
import yaml
from decimal import Decimal
from pathlib import Path
from typing import Dict, Optional
import logging

from pydantic import BaseModel, Field, field_validator

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path(__file__).parent.parent / "config" / "default.yaml"


class TextSummaryConfig(BaseModel):
    """Placeholder identity for the summary synthesized from text."""
    account_number: str = "—"
    account_name: str = "Statement Account"


class CurrencyConfig(BaseModel):
    """Currency conversion settings."""
    source: str = "USD"
    target: str = "INR"
    default_rate: Decimal = Decimal("83.00")
    rate_url: str = "https://open.er-api.com/v6/latest/{source}"
    rate_field: str = "rates.{target}"
    timeout: float = 5


class ParserConfig(BaseModel):
    """Complete parser configuration."""
    accounts: Dict[str, Optional[str]] = Field(default_factory=dict)
    unknown_account_name: str = "Unknown"
    text_summary: TextSummaryConfig = Field(default_factory=TextSummaryConfig)
    currency: CurrencyConfig = Field(default_factory=CurrencyConfig)

    @field_validator('accounts', mode='before')
    @classmethod
    def account_keys_as_strings(cls, v):
        # YAML reads unquoted account numbers as ints
        if v is None:
            return {}
        return {str(number): name for number, name in v.items()}


def load_config(config_path: Optional[Path] = None) -> ParserConfig:
    """
    Load parser configuration from YAML.

    Args:
        config_path: YAML file to read; defaults to LEDGER_PARSER_CONFIG or
            the packaged default.yaml

    Returns:
        ParserConfig object
    """
    if config_path is None:
        env_path = os.getenv("LEDGER_PARSER_CONFIG")
        config_path = Path(env_path) if env_path else DEFAULT_CONFIG_PATH

    config_path = Path(config_path)
    data = {}
    if config_path.exists():
        with open(config_path, 'r', encoding='utf-8') as f:
            data = yaml.safe_load(f) or {}
        logger.debug(f"Loaded config: {config_path}")
    else:
        logger.warning(f"Config file not found: {config_path}, using built-in defaults")

    config = ParserConfig.model_validate(data)
    return apply_env_overrides(config)


def apply_env_overrides(config: ParserConfig) -> ParserConfig:
    """Apply FX settings from the environment on top of the file config."""
    rate_url = os.getenv("LEDGER_PARSER_FX_URL")
    if rate_url:
        config.currency.rate_url = rate_url

    default_rate = os.getenv("LEDGER_PARSER_FX_DEFAULT_RATE")
    if default_rate:
        try:
            config.currency.default_rate = Decimal(default_rate)
        except ArithmeticError:
            logger.warning(f"Ignoring invalid LEDGER_PARSER_FX_DEFAULT_RATE: {default_rate}")

    return config
