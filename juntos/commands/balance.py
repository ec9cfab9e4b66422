"""Balance and report commands for settling up between partners."""

import sqlite3
import sys
from datetime import datetime

from rich.console import Console

from juntos.commands.session import Session, load_session
from juntos.dates import period_range
from juntos.domain.balance import BalanceResult, BalanceStatus, format_money
from juntos.domain.errors import InvalidArgument
from juntos.domain.models import MemberId, Period
from juntos.domain.report import ExpenseSummary, filter_by_period, half_share, summarize
from juntos.logs import get_logger
from juntos.store.queries import ExpenseSource, SqliteExpenseSource

console = Console()
log = get_logger(__name__)


def build_summary(
    source: ExpenseSource, session: Session, period: Period, perspective: MemberId, now: datetime
) -> ExpenseSummary:
    """Load the couple's expenses and summarize them for a period.

    Raises:
        InvalidArgument: If the records or couple are rejected by the balance engine.
        ValueError: If the period is unknown.
    """
    member_a, member_b = session.couple.require_members()
    records = filter_by_period(source.list_expenses(session.couple.id), period, now)
    summary = summarize(records, member_a, member_b, perspective, session.currency, session.labels)
    log.debug(
        "balance_computed",
        couple_id=session.couple.id,
        period=period,
        records=len(records),
        status=summary.balance.status.value,
    )
    return summary


def _load_summary(period: str | None, as_member: str | None) -> tuple[Session, ExpenseSummary, str]:
    session = load_session(require_linked=True)
    selected = Period(period or session.default_period)
    perspective = MemberId(as_member) if as_member else session.member

    now = datetime.now()

    try:
        _, _, label = period_range(selected, now)
        summary = build_summary(SqliteExpenseSource(session.db_path), session, selected, perspective, now)
    except InvalidArgument as e:
        log.warning("balance_rejected", couple_id=session.couple.id, problems=e.problems)
        console.print("[red]Cannot compute balance:[/red]", style="bold")
        for problem in e.problems:
            console.print(f"  {problem}")
        sys.exit(1)
    except ValueError as e:
        console.print(f"[red]{e}[/red]")
        sys.exit(1)
    except sqlite3.Error as e:
        console.print(f"[red]Database error: {e}[/red]", style="bold")
        sys.exit(1)
    return session, summary, label


def render_balance(balance: BalanceResult, session: Session) -> None:
    """Render the balance card."""
    you = session.label(balance.perspective)
    partner = session.label(balance.other)
    amount = format_money(balance.settlement_amount, session.currency)

    if balance.status is BalanceStatus.SETTLED:
        console.print(f"[green]✓ {balance.suggestion}[/green]", style="bold")
        console.print("[dim]No pending debts between you[/dim]")
    elif balance.status is BalanceStatus.OWED_TO_YOU:
        console.print(f"[green]{balance.suggestion}[/green]", style="bold")
    else:
        console.print(f"[red]{balance.suggestion}[/red]", style="bold")

    console.print()
    console.print(f"  {you + ' paid':24} {format_money(balance.total_paid[balance.perspective], session.currency):>12}")
    console.print(f"  {partner + ' paid':24} {format_money(balance.total_paid[balance.other], session.currency):>12}")
    console.print(
        f"  {you + ' fair share':24} {format_money(balance.fair_share[balance.perspective], session.currency):>12}"
    )
    console.print(
        f"  {partner + ' fair share':24} {format_money(balance.fair_share[balance.other], session.currency):>12}"
    )

    if balance.status is BalanceStatus.OWED_TO_YOU:
        console.print(f"\n[yellow]Suggestion:[/yellow] ask {partner} to transfer {amount} to balance shared costs")
    elif balance.status is BalanceStatus.YOU_OWE:
        console.print(f"\n[yellow]Suggestion:[/yellow] transfer {amount} to {partner} to balance shared costs")


def balance_command(period: str | None = None, as_member: str | None = None) -> None:
    """Show who owes whom for a period."""
    session, summary, label = _load_summary(period, as_member)

    console.print(f"[bold cyan]Balance - {label}[/bold cyan]\n")
    render_balance(summary.balance, session)


def report_command(period: str | None = None, as_member: str | None = None) -> None:
    """Show the full expense report for a period."""
    session, summary, label = _load_summary(period, as_member)
    currency = session.currency
    balance = summary.balance

    console.print(f"[bold cyan]{label}[/bold cyan]\n")

    if summary.count == 0:
        console.print("[dim]No expenses in this period[/dim]\n")
    else:
        console.print(f"  {'Total spent':24} {format_money(summary.total, currency):>12}")
        console.print(f"  {'Number of expenses':24} {summary.count:>12}")
        if summary.average is not None:
            console.print(f"  {'Average per expense':24} {format_money(summary.average, currency):>12}")

        console.print("\n[bold]By category:[/bold]\n")
        for cat_total in summary.by_category:
            console.print(
                f"  {cat_total.category.icon} {cat_total.category.label:18} "
                f"{format_money(cat_total.amount, currency):>12}  [dim]({cat_total.count})[/dim]"
            )

        console.print("\n[bold]Breakdown:[/bold]\n")
        console.print(f"  {'Shared':24} {format_money(summary.shared_total, currency):>12}")
        for member in (balance.perspective, balance.other):
            personal = summary.personal_totals[member]
            console.print(f"  {session.label(member) + ' personal':24} {format_money(personal, currency):>12}")

    console.print("\n[bold]Balance:[/bold]\n")
    render_balance(balance, session)

    console.print(f"\n[bold]Recent shared expenses[/bold] [dim]({len(summary.recent_shared) + summary.more_shared})[/dim]\n")
    if not summary.recent_shared:
        console.print("[dim]No shared expenses in this period[/dim]")
        return

    for expense in summary.recent_shared:
        payer = "you" if expense.paid_by == balance.perspective else session.label(expense.paid_by)
        console.print(
            f"  {expense.date:%Y-%m-%d}  {expense.description:24} "
            f"{format_money(expense.amount, currency):>10}  "
            f"[dim]{format_money(half_share(expense.amount), currency)} each, paid by {payer}[/dim]"
        )
    if summary.more_shared:
        console.print(f"  [dim]and {summary.more_shared} more...[/dim]")
