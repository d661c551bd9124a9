"""
CLI for the ``cashbook`` package.

A Typer console interface over the library. Input is a JSON export of wallet
transactions (see ``cashbook.adapters.load_json``). Environment variables are
loaded from a local ``.env`` before configuration is read. Business logic
lives in the library modules; this module only parses arguments, formats
output and turns validation errors into exit code 1.
"""

from __future__ import annotations

import json
from datetime import datetime, timezone
from pathlib import Path
from typing import List, Optional

import typer
from dotenv import load_dotenv

from .adapters import load_json
from .cashbook import Cashbook
from .config import CashbookConfig, load_config
from .core import CashbookError, Transaction, parse_timestamp
from .export import write_csv
from .filters import ReportQuery
from .logging_setup import configure_logging, get_logger
from .overview import summarize_wallet
from .reconciliation import reconcile

logger = get_logger(__name__)

app = typer.Typer(
    no_args_is_help=True,
    add_completion=False,
    help="Petty cash ledger: reconstruct balances, replay history and export reports.",
)


# ---- Small module-level helpers -------------------------------------------------


def format_money(amount: int, currency: str) -> str:
    """Render minor units as "<currency> 1,234.50" without floating point."""
    sign = "-" if amount < 0 else ""
    major, minor = divmod(abs(amount), 100)
    return f"{sign}{currency} {major:,}.{minor:02d}"


def _fail(message: str) -> None:
    typer.echo(f"Error: {message}", err=True)
    raise typer.Exit(1)


def _config(ctx: typer.Context) -> CashbookConfig:
    return ctx.obj if isinstance(ctx.obj, CashbookConfig) else load_config()


def _now(value: Optional[str]) -> datetime:
    if value:
        return parse_timestamp(value)
    return parse_timestamp(datetime.now(timezone.utc))


def _load(input_path: Path, current_balance: Optional[int]) -> tuple[List[Transaction], int]:
    transactions, file_balance = load_json(input_path)
    balance = current_balance if current_balance is not None else file_balance
    if balance is None:
        _fail("current balance unknown: pass --current-balance or include it in the input file")
    return transactions, balance


# ---- Commands -------------------------------------------------------------------


@app.command("report")
def report_cmd(
    ctx: typer.Context,
    input_path: Path = typer.Argument(..., help="JSON file of wallet transactions", dir_okay=False),
    from_date: Optional[str] = typer.Option(None, "--from", help="First date (YYYY-MM-DD), inclusive"),
    to_date: Optional[str] = typer.Option(None, "--to", help="Last date (YYYY-MM-DD), inclusive"),
    status: Optional[str] = typer.Option(None, help="Status filter ('all' for any; default from config)"),
    category: Optional[str] = typer.Option(None, help="Category label filter"),
    search: Optional[str] = typer.Option(None, help="Text to find in id, title or payee"),
    current_balance: Optional[int] = typer.Option(None, help="Current balance in minor units"),
    now: Optional[str] = typer.Option(None, help="Present instant (ISO-8601); defaults to the clock"),
    csv_path: Optional[Path] = typer.Option(None, "--csv", help="Also write the rows as CSV here"),
    newest_first: bool = typer.Option(False, "--newest-first", help="List rows most recent first"),
    as_json: bool = typer.Option(False, "--json", help="Print the report as JSON"),
) -> None:
    """Opening/closing balances, totals and running balances for a window."""
    config = _config(ctx)
    try:
        transactions, balance = _load(input_path, current_balance)
        query = ReportQuery(
            from_date=from_date,
            to_date=to_date,
            status=status if status is not None else config.default_status,
            category=category,
            search_text=search,
        )
        book = Cashbook(transactions, balance, _now(now), balance_statuses=config.balance_statuses)
        report = book.report(query)
    except (CashbookError, ValueError, OSError) as e:
        _fail(str(e))
        return

    if as_json:
        typer.echo(json.dumps(report.as_dict(), indent=2))
    else:
        def money(v: int) -> str:
            return format_money(v, config.currency)

        typer.echo(f"Opening balance: {money(report.opening_balance)}")
        typer.echo(f"Inflows:         {money(report.inflows)}")
        typer.echo(f"Outflows:        {money(report.outflows)}")
        typer.echo(f"Closing balance: {money(report.closing_balance)}")
        rows = report.newest_first() if newest_first else list(report.rows)
        typer.echo(f"{len(rows)} transactions")
        for row in rows:
            txn = row.transaction
            typer.echo(
                f"{txn.created_at.date().isoformat()}  {txn.id:<12} {txn.direction.value:<6} "
                f"{money(txn.effect):>18}  {money(row.opening_balance):>18} -> {money(row.closing_balance):>18}  "
                f"{txn.category.label} {txn.title}".rstrip()
            )

    if csv_path is not None:
        rows = report.newest_first() if newest_first else list(report.rows)
        try:
            with open(csv_path, "w", encoding="utf-8", newline="") as f:
                written = write_csv(rows, f, include_balances=True)
        except OSError as e:
            _fail(f"cannot write {csv_path}: {e}")
            return
        logger.info("wrote %d rows to %s", written, csv_path)


@app.command("balance-at")
def balance_at_cmd(
    ctx: typer.Context,
    input_path: Path = typer.Argument(..., help="JSON file of wallet transactions", dir_okay=False),
    when: str = typer.Argument(..., help="Instant to reconstruct (ISO-8601)"),
    current_balance: Optional[int] = typer.Option(None, help="Current balance in minor units"),
    now: Optional[str] = typer.Option(None, help="Present instant (ISO-8601); defaults to the clock"),
) -> None:
    """Reconstruct the balance as it stood at WHEN."""
    config = _config(ctx)
    try:
        transactions, balance = _load(input_path, current_balance)
        book = Cashbook(transactions, balance, _now(now), balance_statuses=config.balance_statuses)
        value = book.balance_at(parse_timestamp(when))
    except (CashbookError, ValueError, OSError) as e:
        _fail(str(e))
        return
    typer.echo(format_money(value, config.currency))


@app.command("reconcile")
def reconcile_cmd(
    ctx: typer.Context,
    physical_count: int = typer.Argument(..., help="Counted cash in minor units"),
    system_balance: int = typer.Option(..., help="Balance per the ledger, minor units"),
    tolerance: Optional[int] = typer.Option(None, help="Allowed difference (default from config)"),
    notes: str = typer.Option("", help="Notes recorded with the result"),
) -> None:
    """Compare a physical cash count with the system balance."""
    config = _config(ctx)
    try:
        result = reconcile(
            physical_count,
            system_balance,
            tolerance=config.reconcile_tolerance if tolerance is None else tolerance,
            notes=notes,
        )
    except (CashbookError, ValueError) as e:
        _fail(str(e))
        return
    typer.echo(f"System balance: {format_money(result.system_balance, config.currency)}")
    typer.echo(f"Physical count: {format_money(result.physical_count, config.currency)}")
    sign = "+" if result.difference >= 0 else ""
    typer.echo(f"Difference:     {sign}{format_money(result.difference, config.currency)}")
    typer.echo(f"Status:         {result.status.value}")
    if not result.is_balanced:
        raise typer.Exit(2)


@app.command("overview")
def overview_cmd(
    ctx: typer.Context,
    input_path: Path = typer.Argument(..., help="JSON file of wallet transactions", dir_okay=False),
    current_balance: Optional[int] = typer.Option(None, help="Current balance in minor units"),
    now: Optional[str] = typer.Option(None, help="Present instant (ISO-8601); defaults to the clock"),
) -> None:
    """Current balance, this month's spending and pending approvals."""
    config = _config(ctx)
    try:
        transactions, balance = _load(input_path, current_balance)
        summary = summarize_wallet(transactions, balance, _now(now), config.low_balance_threshold)
    except (CashbookError, ValueError, OSError) as e:
        _fail(str(e))
        return
    typer.echo(f"Current balance:   {format_money(summary.current_balance, config.currency)}")
    typer.echo(f"Monthly spending:  {format_money(summary.monthly_spending, config.currency)}")
    typer.echo(f"Pending approvals: {summary.pending_approvals}")
    if summary.is_low_balance:
        typer.echo(
            f"Warning: balance is below the threshold of "
            f"{format_money(summary.low_balance_threshold, config.currency)}"
        )


@app.callback()
def _root(ctx: typer.Context) -> None:
    """
    Root command.

    Loads ``.env`` from the current working directory (without overriding
    already-set variables), reads configuration and sets up logging.
    """
    load_dotenv(dotenv_path=Path.cwd() / ".env", override=False)
    try:
        config = load_config()
    except ValueError as e:
        _fail(str(e))
        return
    configure_logging(config.log_level)
    ctx.obj = config


if __name__ == "__main__":  # pragma: no cover
    app()
