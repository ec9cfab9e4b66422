"""CLI entry point for juntos."""

import typer

from juntos.commands.admin import init_command
from juntos.commands.balance import balance_command, report_command
from juntos.commands.couple import create_command, join_command, show_command
from juntos.commands.expenses import add_command, delete_command, list_command
from juntos.config import get_setting
from juntos.domain.models import PERIODS
from juntos.logs import configure_logging

app = typer.Typer(
    name="juntos",
    help="Juntos - shared expenses and balances for couples",
    add_completion=False,
)

couple_app = typer.Typer(help="Create, join, or show your couple.")
app.add_typer(couple_app, name="couple")

PERIOD_HELP = f"Period: {', '.join(PERIODS)} (default from config)"


def validate_period(value: str | None) -> str | None:
    if value is not None and value not in PERIODS:
        raise typer.BadParameter(f"must be one of: {', '.join(PERIODS)}")
    return value


@app.callback()
def main(
    log_level: str = typer.Option(None, "--log-level", help="Log level (overrides config)"),
) -> None:
    """Juntos - shared expenses and balances for couples."""
    configure_logging(log_level or get_setting("log_level"))


@app.command(name="init")
def init(
    force: bool = typer.Option(False, "--force", "-f", help="Overwrite existing database and config"),
) -> None:
    """Initialize juntos database and configuration."""
    init_command(force)


@couple_app.command(name="create")
def couple_create(
    member: str,
    name: str = typer.Option(None, "--name", help="Your display name"),
) -> None:
    """Create a couple and get an invite code for your partner."""
    create_command(member, name)


@couple_app.command(name="join")
def couple_join(
    code: str,
    member: str,
    name: str = typer.Option(None, "--name", help="Your display name"),
) -> None:
    """Join your partner's couple with their invite code."""
    join_command(code, member, name)


@couple_app.command(name="show")
def couple_show() -> None:
    """Show your couple and invite code."""
    show_command()


@app.command()
def add(
    description: str,
    amount: str,
    category: str = typer.Option("other", "--category", "-c", help="Expense category"),
    personal: bool = typer.Option(False, "--personal", help="Personal expense (not split)"),
    paid_by: str = typer.Option(None, "--paid-by", help="Member who paid (default: you)"),
    date: str = typer.Option(None, "--date", help="Expense date (default: now)"),
) -> None:
    """Add an expense (shared by default)."""
    add_command(description, amount, category, personal, paid_by, date)


@app.command()
def delete(expense_id: str) -> None:
    """Delete an expense by id."""
    delete_command(expense_id)


@app.command(name="list")
def list_expenses(
    period: str = typer.Option(None, "--period", "-p", help=PERIOD_HELP, callback=validate_period),
    limit: int = typer.Option(None, "--limit", help="Maximum expenses to show"),
) -> None:
    """List your expenses."""
    list_command(period, limit)


@app.command()
def balance(
    period: str = typer.Option(None, "--period", "-p", help=PERIOD_HELP, callback=validate_period),
    as_member: str = typer.Option(None, "--as", help="Show the balance from another member's point of view"),
) -> None:
    """Show who owes whom."""
    balance_command(period, as_member)


@app.command()
def report(
    period: str = typer.Option(None, "--period", "-p", help=PERIOD_HELP, callback=validate_period),
    as_member: str = typer.Option(None, "--as", help="Show the balance from another member's point of view"),
) -> None:
    """Show spending summary, category breakdown and balance."""
    report_command(period, as_member)


if __name__ == "__main__":
    app()
