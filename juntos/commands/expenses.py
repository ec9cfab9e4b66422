"""Expense management commands (add, delete, list)."""

import sqlite3
import sys
from datetime import datetime

import pandas as pd
from rich.console import Console
from rich.table import Table

from juntos.commands.session import Session, load_session
from juntos.dates import period_range
from juntos.domain.balance import format_money
from juntos.domain.errors import InvalidArgument
from juntos.domain.expenses import ExpenseCategory, ExpenseRecord, new_expense
from juntos.domain.models import MemberId, Period
from juntos.logs import get_logger
from juntos.store.queries import delete_expense, find_expense, insert_expense, list_expenses

console = Console()
log = get_logger(__name__)

SHORT_ID_LENGTH = 8


def parse_date(raw: str) -> datetime:
    """Normalize a user-typed date using pandas.

    Dates with a UTC offset are converted to naive UTC so every stored date
    compares with every other.

    Raises:
        ValueError: If pandas cannot parse the date.
    """
    ts = pd.to_datetime(raw, dayfirst=True)
    if ts.tzinfo is not None:
        ts = ts.tz_convert(None)
    return ts.to_pydatetime()


def parse_category(raw: str) -> ExpenseCategory:
    try:
        return ExpenseCategory(raw.strip().lower())
    except ValueError as e:
        choices = ", ".join(c.value for c in ExpenseCategory)
        raise InvalidArgument(f"Unknown category '{raw}' (choose from: {choices})") from e


def add_command(
    description: str,
    amount: str,
    category: str = "other",
    personal: bool = False,
    paid_by: str | None = None,
    date: str | None = None,
) -> None:
    """Add an expense for the couple.

    Args:
        description: What the money was spent on.
        amount: Amount in major units (e.g. "12.50").
        category: Category name.
        personal: Record as a personal expense instead of a shared one.
        paid_by: Member who paid. Defaults to you.
        date: Expense date (YYYY-MM-DD, DD/MM/YYYY, ...). Defaults to now.
    """
    session = load_session()

    try:
        expense_date = parse_date(date) if date else None
    except (ValueError, OverflowError) as e:
        console.print(f"[red]Invalid date format: {e}[/red]")
        console.print("[dim]Accepted formats: YYYY-MM-DD, DD/MM/YYYY, DD-MM-YYYY, etc.[/dim]")
        sys.exit(1)

    try:
        expense = new_expense(
            session.couple,
            description,
            amount,
            MemberId(paid_by) if paid_by else session.member,
            is_shared=not personal,
            category=parse_category(category),
            date=expense_date,
        )
        insert_expense(expense, session.db_path)
    except InvalidArgument as e:
        log.warning("expense_rejected", problems=e.problems)
        console.print("[red]Invalid expense:[/red]", style="bold")
        for problem in e.problems:
            console.print(f"  {problem}")
        sys.exit(1)
    except sqlite3.Error as e:
        console.print(f"[red]Database error: {e}[/red]", style="bold")
        sys.exit(1)

    console.print("[green]✓[/green] Expense added:")
    console.print(f"  ID: {expense.id[:SHORT_ID_LENGTH]}")
    console.print(f"  Date: {expense.date:%Y-%m-%d}")
    console.print(f"  Description: {expense.description}")
    console.print(f"  Amount: {format_money(expense.amount, session.currency)}")
    console.print(f"  Category: {expense.category.icon} {expense.category.label}")
    console.print(f"  Paid by: {session.label(expense.paid_by)}")
    console.print(f"  {'Shared' if expense.is_shared else 'Personal'}")


def delete_command(expense_id: str) -> None:
    """Delete an expense by id or unique id prefix.

    Args:
        expense_id: Full id or the short id shown by 'juntos list'.
    """
    session = load_session()

    try:
        matches = find_expense(expense_id, session.couple.id, session.db_path)

        if not matches:
            console.print(f"[red]Expense {expense_id} not found[/red]")
            sys.exit(1)
        if len(matches) > 1:
            console.print(f"[yellow]'{expense_id}' matches {len(matches)} expenses, use a longer id[/yellow]")
            sys.exit(1)

        expense = matches[0]
        delete_expense(expense.id, session.couple.id, session.db_path)
    except sqlite3.Error as e:
        console.print(f"[red]Database error: {e}[/red]", style="bold")
        sys.exit(1)

    console.print(
        f"[green]✓[/green] Deleted {expense.description} "
        f"({format_money(expense.amount, session.currency)}, {expense.date:%Y-%m-%d})"
    )


def render_expense_table(title: str, expenses: list[ExpenseRecord], session: Session) -> Table:
    """Build a rich table of expenses."""
    table = Table(title=title)
    table.add_column("ID", style="dim")
    table.add_column("Date", style="cyan")
    table.add_column("Description", style="white")
    table.add_column("Category", style="magenta")
    table.add_column("Paid by")
    table.add_column("Amount", justify="right")
    table.add_column("Split", justify="center")

    for expense in expenses:
        paid_by = session.label(expense.paid_by)
        if expense.paid_by == session.member:
            paid_by = f"[green]{paid_by}[/green]"

        table.add_row(
            expense.id[:SHORT_ID_LENGTH],
            f"{expense.date:%Y-%m-%d}",
            expense.description,
            f"{expense.category.icon} {expense.category.label}",
            paid_by,
            format_money(expense.amount, session.currency),
            "½" if expense.is_shared else "[dim]personal[/dim]",
        )

    return table


def list_command(period: str | None = None, limit: int | None = None) -> None:
    """List the couple's expenses for a period."""
    session = load_session()
    selected = Period(period or session.default_period)

    try:
        since, until, label = period_range(selected, datetime.now())
        expenses = list_expenses(session.couple.id, session.db_path, since, until, limit)
    except ValueError as e:
        console.print(f"[red]{e}[/red]")
        sys.exit(1)
    except sqlite3.Error as e:
        console.print(f"[red]Database error: {e}[/red]", style="bold")
        sys.exit(1)

    if not expenses:
        console.print(f"[yellow]No expenses found for {label}[/yellow]")
        return

    console.print(render_expense_table(f"Expenses - {label} ({len(expenses)})", expenses, session))
