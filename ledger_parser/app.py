#!/usr/bin/env python3
"""
CLI interface for the bank statement ledger parser.
"""
import typer
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import Optional
from rich.console import Console
from rich.progress import Progress, SpinnerColumn, TextColumn
from rich.table import Table as RichTable

from .core.config import load_config
from .core.errors import ExtractionError
from .core.loader import FORMATS
from .core.runner import parse_statement
from .models.schema import StatementResult

app = typer.Typer(help="Bank statement ledger parser")
console = Console()


@app.command()
def parse(
    path: Path = typer.Argument(..., help="Statement file (.pdf, .txt, .csv)"),
    output: Optional[Path] = typer.Option(None, "--out", "-o", help="Output JSON file path"),
    fmt: str = typer.Option("auto", "--format", "-f", help=f"Input format: {', '.join(FORMATS)}"),
    config_path: Optional[Path] = typer.Option(None, "--config", "-c", help="YAML configuration file"),
    convert_currency: bool = typer.Option(False, "--convert-currency", help="Convert amounts into the target currency"),
    rate: Optional[str] = typer.Option(None, "--rate", help="Fixed conversion rate (skips the rate fetch)"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose output")
):
    """Parse a statement into summary and transaction JSON."""

    if not path.exists():
        console.print(f"[red]Error: file not found: {path}[/red]")
        raise typer.Exit(1)

    fixed_rate = None
    if rate is not None:
        try:
            fixed_rate = Decimal(rate)
        except InvalidOperation:
            console.print(f"[red]Error: invalid rate: {rate}[/red]")
            raise typer.Exit(1)

    try:
        with Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            console=console,
            transient=True
        ) as progress:
            task = progress.add_task("Loading configuration...", total=None)
            config = load_config(config_path)

            progress.update(task, description="Extracting transactions...")
            result = parse_statement(
                path,
                fmt=fmt,
                config=config,
                convert_currency=convert_currency or fixed_rate is not None,
                rate=fixed_rate,
                verbose=verbose
            )

        if output:
            output.write_text(result.model_dump_json(indent=2))
            console.print(f"[green]✓ Parsed {len(result.transactions)} transactions! Output written to: {output}[/green]")
        else:
            console.print_json(result.model_dump_json(indent=2))

    except ExtractionError as e:
        console.print(f"[red]Extraction failed: {e}[/red]")
        raise typer.Exit(1)
    except Exception as e:
        console.print(f"[red]Error parsing statement: {e}[/red]")
        if verbose:
            import traceback
            console.print(traceback.format_exc())
        raise typer.Exit(1)


@app.command()
def accounts(
    config_path: Optional[Path] = typer.Option(None, "--config", "-c", help="YAML configuration file")
):
    """List the known account numbers and their names."""
    config = load_config(config_path)

    table = RichTable(title="Known accounts")
    table.add_column("Account number")
    table.add_column("Account name")
    for number, name in config.accounts.items():
        table.add_row(number, name or config.unknown_account_name)
    console.print(table)


@app.command()
def validate(
    json_path: Path = typer.Argument(..., help="Path to JSON file to validate")
):
    """Validate a JSON result file against the schema."""
    try:
        data = StatementResult.model_validate_json(json_path.read_text())
        console.print("[green]✓ JSON is valid[/green]")
        console.print(f"Source format: {data.source_format}")
        console.print(f"Accounts: {len(data.summary)}")
        console.print(f"Transactions: {len(data.transactions)}")
        if data.currency:
            console.print(f"Currency: {data.currency}")
    except Exception as e:
        console.print(f"[red]Validation failed: {e}[/red]")
        raise typer.Exit(1)


if __name__ == "__main__":
    app()
