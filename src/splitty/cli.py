"""CLI for Splitty using Typer."""

import logging
import re
import sqlite3
import sys
from datetime import date, datetime
from pathlib import Path

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.table import Table

from .config import load_settings
from .db import Database
from .exceptions import SplittyError
from .models import Expense, SettlementReport
from .money import from_cents, parse_amount
from .service import LedgerService
from .store import load_event, save_event
from .ui import select_participant_interactive

app = typer.Typer(
    name="splitty",
    help="Track shared expenses and work out who pays whom",
)

console = Console()

# Errors reported as a single line instead of a traceback
USER_ERRORS = (SplittyError, ValidationError, OSError, ValueError, sqlite3.Error)


def setup_logging(verbose: bool = False):
    """Setup logging configuration."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )


def format_money(cents: int, currency: str, use_color: bool = True) -> str:
    """
    Format money in accounting style with alignment.

    Negative amounts use parentheses: (85.02 EUR)
    Positive amounts have spaces:      85.02 EUR
    """
    amount = from_cents(abs(cents))
    if cents < 0:
        if use_color:
            return f"([red]{amount:,.2f}[/red] {currency})"
        return f"({amount:,.2f} {currency})"
    if use_color:
        return f" [green]{amount:,.2f}[/green] {currency} "
    return f" {amount:,.2f} {currency} "


def currency_code(value: str | None) -> str | None:
    """Normalize a currency option to an upper-case ISO 4217 code."""
    if value is None:
        return None
    code = value.strip().upper()
    if not re.fullmatch(r"[A-Z]{3}", code):
        raise typer.BadParameter(f"'{value}' is not a three-letter currency code")
    return code


def _fail(error: Exception, verbose: bool):
    console.print(f"\n[bold red]Error:[/bold red] {error}")
    if verbose:
        raise error
    sys.exit(1)


@app.command()
def balances(
    event_file: Path = typer.Argument(..., exists=True, help="Event JSON file"),
    currency: str | None = typer.Option(
        None,
        "--currency",
        help="Base currency (defaults to BASE_CURRENCY)",
        callback=currency_code,
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose output"),
):
    """Show what every participant is owed, owes and their net balance."""
    setup_logging(verbose)

    try:
        settings = load_settings()
        db = Database(settings.database_path)
        service = LedgerService(settings, db)

        event = load_event(event_file)
        base = currency or settings.base_currency
        summaries = service.summarize(event, base)

        table = Table(
            title=f"Balances: {event.title}", show_header=True, header_style="bold magenta"
        )
        table.add_column("Participant", style="cyan")
        table.add_column("Is owed", justify="right")
        table.add_column("Owes", justify="right")
        table.add_column("Balance", justify="right")

        for summary in summaries:
            table.add_row(
                summary.participant.name,
                format_money(summary.owed_cents, base, use_color=False),
                format_money(summary.debt_cents, base, use_color=False),
                format_money(summary.balance_cents, base),
            )

        console.print(table)

    except USER_ERRORS as e:
        _fail(e, verbose)
    finally:
        if "db" in locals():
            db.close()


def display_report(report: SettlementReport):
    """Display settlement payments in a table."""
    currency = report.base_currency

    if not report.debts:
        console.print("[green]✓ Everyone is settled up.[/green]")
        return

    table = Table(title="Payments", show_header=True, header_style="bold magenta")
    table.add_column("From", style="cyan")
    table.add_column("To", style="cyan")
    table.add_column("Amount", justify="right")
    table.add_column("Payment details", style="dim", no_wrap=False)

    for debt in report.debts:
        table.add_row(
            debt.debtor.name,
            debt.creditor.name,
            format_money(debt.amount_cents, currency, use_color=False),
            debt.payment_details() or "Bank details unavailable",
        )

    console.print(table)
    console.print(f"  Total payments: {len(report.debts)}")
    if report.slack_cents:
        console.print(
            f"  [dim]Rounding slack left unsettled: "
            f"{format_money(report.slack_cents, currency, use_color=False)}[/dim]"
        )


@app.command(name="settle")
def settle_command(
    event_file: Path = typer.Argument(..., exists=True, help="Event JSON file"),
    currency: str | None = typer.Option(
        None,
        "--currency",
        help="Base currency (defaults to BASE_CURRENCY)",
        callback=currency_code,
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose output"),
):
    """
    Show the payments that settle all balances of an event.

    Payments are found greedily: the largest debtor pays the largest creditor
    until one side is settled.
    """
    setup_logging(verbose)

    try:
        settings = load_settings()
        db = Database(settings.database_path)
        service = LedgerService(settings, db)

        event = load_event(event_file)
        report = service.settle_event(event, currency)
        display_report(report)

    except USER_ERRORS as e:
        _fail(e, verbose)
    finally:
        if "db" in locals():
            db.close()


def display_expense(expense: Expense):
    """Display how an expense was split."""
    console.print(f"\n[bold]{expense.title or 'Expense'}[/bold]")
    console.print(f"  Date: {expense.date}")
    console.print(f"  Paid by: {expense.payee.name}")
    console.print(
        f"  Total: {format_money(expense.amount_cents, expense.currency, use_color=False)}"
    )

    table = Table(show_header=True, header_style="bold magenta")
    table.add_column("Participant", style="cyan")
    table.add_column("Share", justify="right")
    for share in expense.split:
        table.add_row(
            share.participant.name,
            format_money(share.amount_cents, expense.currency, use_color=False),
        )
    console.print(table)


@app.command()
def split(
    event_file: Path = typer.Argument(..., exists=True, help="Event JSON file"),
    amount: str = typer.Option(..., "--amount", "-a", help="Amount, e.g. 12.34"),
    title: str = typer.Option("", "--title", "-t", help="What the expense was for"),
    payee: str | None = typer.Option(
        None, "--payee", "-p", help="Who paid (participant id or name)"
    ),
    among: list[str] | None = typer.Option(
        None,
        "--among",
        help="Share only among these participants (repeatable; default: everyone)",
    ),
    currency: str | None = typer.Option(
        None,
        "--currency",
        help="Expense currency (defaults to BASE_CURRENCY)",
        callback=currency_code,
    ),
    on: str | None = typer.Option(
        None, "--date", help="Expense date as YYYY-MM-DD (default: today)"
    ),
    seed: int | None = typer.Option(
        None, "--seed", help="Seed for picking who absorbs leftover cents"
    ),
    interactive: bool = typer.Option(
        False, "--interactive", "-i", help="Pick the payee interactively"
    ),
    write: bool = typer.Option(
        False, "--write", "-w", help="Append the expense to the event file"
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose output"),
):
    """
    Split an amount fairly across participants.

    Every participant gets an equal share in whole cents; leftover cents go
    one each to randomly chosen participants.
    """
    setup_logging(verbose)

    try:
        settings = load_settings()
        db = Database(settings.database_path)
        service = LedgerService(settings, db)

        event = load_event(event_file)

        payee_ref: str | int | None = payee
        if interactive and payee_ref is None:
            selected = select_participant_interactive(event.participants)
            if selected is None:
                console.print("[yellow]No payee selected.[/yellow]")
                return
            payee_ref = selected.id
        if payee_ref is None:
            raise typer.BadParameter("--payee is required unless --interactive is set")

        expense_date = datetime.strptime(on, "%Y-%m-%d").date() if on else date.today()

        expense = service.split_expense(
            event,
            title=title,
            amount_cents=parse_amount(amount),
            currency=currency or settings.base_currency,
            on=expense_date,
            payee_ref=payee_ref,
            participant_refs=among or None,
            seed=seed,
        )
        display_expense(expense)

        if write:
            save_event(event.with_expense(expense), event_file)
            console.print(f"\n[bold green]✓ Added to {event_file}[/bold green]")

    except USER_ERRORS as e:
        _fail(e, verbose)
    finally:
        if "db" in locals():
            db.close()


@app.command()
def rate(
    on: str = typer.Argument(..., help="Day as YYYY-MM-DD"),
    from_currency: str = typer.Argument(
        ..., help="Currency to convert from", callback=currency_code
    ),
    to_currency: str = typer.Argument(
        ..., help="Currency to convert to", callback=currency_code
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose output"),
):
    """Look up (and cache) the exchange rate for a day."""
    setup_logging(verbose)

    try:
        settings = load_settings()
        db = Database(settings.database_path)
        service = LedgerService(settings, db)

        day = datetime.strptime(on, "%Y-%m-%d").date()
        value = service.get_rate(day, from_currency, to_currency)
        console.print(f"1 {from_currency} = {value} {to_currency} on {day}")

    except USER_ERRORS as e:
        _fail(e, verbose)
    finally:
        if "db" in locals():
            db.close()


if __name__ == "__main__":
    app()
