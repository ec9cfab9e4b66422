"""Database schema initialization and migrations."""

import os
import sqlite3
from pathlib import Path


def get_xdg_data_home() -> Path:
    """Get XDG data directory, with fallback to ~/.local/share."""
    xdg_data = os.environ.get("XDG_DATA_HOME")
    if xdg_data:
        return Path(xdg_data)
    return Path.home() / ".local" / "share"


def get_db_path() -> Path:
    """Get the default database path (XDG compliant)."""
    return get_xdg_data_home() / "juntos" / "juntos.db"


def init_database(db_path: Path | None = None) -> None:
    """Initialize the database with the required schema.

    Safe to run on an existing database.

    Args:
        db_path: Path to the database file. If None, uses default location.

    Raises:
        sqlite3.Error: If database initialization fails.
    """
    if db_path is None:
        db_path = get_db_path()

    db_path.parent.mkdir(parents=True, exist_ok=True)

    conn = sqlite3.connect(db_path)
    cursor = conn.cursor()

    try:
        cursor.execute(
            """
            CREATE TABLE IF NOT EXISTS couples (
                id TEXT PRIMARY KEY,
                member_a TEXT NOT NULL,
                member_b TEXT,
                invite_code TEXT NOT NULL UNIQUE,
                created_at TEXT NOT NULL
            )
        """
        )

        # Amounts are stored in minor units (cents) so they round-trip exactly
        cursor.execute(
            """
            CREATE TABLE IF NOT EXISTS expenses (
                id TEXT PRIMARY KEY,
                couple_id TEXT NOT NULL REFERENCES couples(id),
                description TEXT NOT NULL,
                amount INTEGER NOT NULL CHECK (amount > 0),
                paid_by TEXT NOT NULL,
                is_shared INTEGER NOT NULL DEFAULT 1,
                category TEXT NOT NULL DEFAULT 'other',
                date TEXT NOT NULL,
                created_at TEXT NOT NULL
            )
        """
        )

        cursor.execute("CREATE INDEX IF NOT EXISTS idx_expense_couple_date ON expenses(couple_id, date)")

        conn.commit()

    except sqlite3.Error:
        conn.rollback()
        raise
    finally:
        conn.close()
