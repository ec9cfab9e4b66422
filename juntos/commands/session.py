"""Shared setup for commands that act on the configured couple."""

import sqlite3
import sys
from dataclasses import dataclass, field
from pathlib import Path

from rich.console import Console

from juntos.config import get_config_path, load_config
from juntos.domain.expenses import Couple
from juntos.domain.models import CoupleId, MemberId, Period
from juntos.store.queries import get_couple
from juntos.store.schema import get_db_path

console = Console()


@dataclass
class Session:
    """Couple, local member and display settings for one command run."""

    db_path: Path
    couple: Couple
    member: MemberId
    currency: str
    default_period: Period
    labels: dict[MemberId, str] = field(default_factory=dict)

    def label(self, member: MemberId | None) -> str:
        if member is None:
            return "-"
        return self.labels.get(member, member)


def load_session(require_linked: bool = False) -> Session:
    """Load config and the active couple, exiting with a message on failure.

    Args:
        require_linked: Exit unless the partner has joined the couple.

    Returns:
        Session for the configured member and couple.
    """
    db_path = get_db_path()
    config_path = get_config_path()

    if not db_path.exists() or not config_path.exists():
        console.print("[red]Database or config not found. Run 'juntos init' first.[/red]", style="bold")
        sys.exit(1)

    config = load_config(config_path)
    couple_id = config.get("couple_id")
    member = config.get("member")

    if not couple_id or not member:
        console.print("[yellow]No couple set up yet[/yellow]")
        console.print("[dim]Use 'juntos couple create' or 'juntos couple join'[/dim]")
        sys.exit(1)

    try:
        couple = get_couple(CoupleId(couple_id), db_path)
    except sqlite3.Error as e:
        console.print(f"[red]Database error: {e}[/red]", style="bold")
        sys.exit(1)

    if couple is None:
        console.print(f"[red]Couple {couple_id} not found in database[/red]", style="bold")
        sys.exit(1)

    if require_linked and not couple.is_linked:
        console.print("[yellow]Your partner hasn't joined yet[/yellow]")
        console.print(f"[dim]Share your invite code: {couple.invite_code}[/dim]")
        sys.exit(1)

    labels = {MemberId(k): str(v) for k, v in config.get("labels", {}).items()}

    return Session(
        db_path=db_path,
        couple=couple,
        member=MemberId(member),
        currency=config.get("currency", "$"),
        default_period=Period(config.get("default_period", "this-month")),
        labels=labels,
    )
