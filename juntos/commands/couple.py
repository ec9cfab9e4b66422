"""Couple setup commands (create, join, show)."""

import sqlite3
import sys
import uuid

from rich.console import Console

from juntos.commands.session import load_session
from juntos.config import get_config_path, update_config
from juntos.domain.errors import CoupleError
from juntos.domain.models import CoupleId, MemberId
from juntos.store.queries import create_couple, join_couple
from juntos.store.schema import get_db_path

console = Console()


def _require_database() -> None:
    if not get_db_path().exists():
        console.print("[red]Database not found. Run 'juntos init' first.[/red]", style="bold")
        sys.exit(1)


def _labels_update(member: str, name: str | None) -> dict[str, dict[str, str]]:
    return {"labels": {member: name}} if name else {}


def create_command(member: str, name: str | None = None) -> None:
    """Create a new couple with yourself as the first member.

    Args:
        member: Your member id.
        name: Optional display name for yourself.
    """
    _require_database()

    try:
        couple = create_couple(CoupleId(uuid.uuid4().hex), MemberId(member), get_db_path())
        update_config(
            {"member": member, "couple_id": couple.id, **_labels_update(member, name)},
            get_config_path(),
        )
    except (CoupleError, sqlite3.Error) as e:
        console.print(f"[red]Could not create couple: {e}[/red]", style="bold")
        sys.exit(1)

    console.print("[green]✓[/green] Couple created")
    console.print(f"  Invite code: [bold cyan]{couple.invite_code}[/bold cyan]")
    console.print("[dim]Share this code with your partner so they can run 'juntos couple join'[/dim]")


def join_command(code: str, member: str, name: str | None = None) -> None:
    """Join your partner's couple with their invite code.

    Args:
        code: Invite code shared by your partner.
        member: Your member id.
        name: Optional display name for yourself.
    """
    _require_database()

    try:
        couple = join_couple(code, MemberId(member), get_db_path())
        update_config(
            {"member": member, "couple_id": couple.id, **_labels_update(member, name)},
            get_config_path(),
        )
    except CoupleError as e:
        console.print(f"[red]{e}[/red]", style="bold")
        sys.exit(1)
    except sqlite3.Error as e:
        console.print(f"[red]Database error: {e}[/red]", style="bold")
        sys.exit(1)

    console.print(f"[green]✓[/green] Joined couple with {couple.member_a}")


def show_command() -> None:
    """Show the configured couple."""
    session = load_session()
    couple = session.couple

    console.print(f"[bold cyan]Couple {couple.id}[/bold cyan]\n")
    console.print(f"  Member A: {session.label(couple.member_a)}")
    console.print(f"  Member B: {session.label(couple.member_b) if couple.is_linked else '[dim]waiting to join[/dim]'}")
    console.print(f"  Invite code: {couple.invite_code}")
    console.print(f"  You: {session.label(session.member)}")
