"""Database query functions."""

import sqlite3
from datetime import datetime
from decimal import Decimal
from pathlib import Path
from typing import Any, Protocol

from juntos.domain.errors import CoupleError
from juntos.domain.expenses import (
    Couple,
    ExpenseCategory,
    ExpenseRecord,
    generate_invite_code,
    normalize_invite_code,
)
from juntos.domain.models import CoupleId, ExpenseId, MemberId, Money
from juntos.logs import get_logger
from juntos.store.schema import get_db_path

log = get_logger(__name__)

INVITE_CODE_ATTEMPTS = 10


class ExpenseSource(Protocol):
    """Anything that can list a couple's expenses."""

    def list_expenses(self, couple_id: CoupleId) -> list[ExpenseRecord]: ...


def _connect(db_path: Path | None = None) -> sqlite3.Connection:
    """Create a database connection with row factory.

    Args:
        db_path: Path to the database file. If None, uses default location.

    Returns:
        Database connection with row_factory configured.
    """
    if db_path is None:
        db_path = get_db_path()
    conn = sqlite3.connect(db_path)
    conn.row_factory = sqlite3.Row
    return conn


def to_cents(amount: Decimal) -> int:
    """Convert an amount to integer minor units.

    Raises:
        ValueError: If the amount has sub-cent precision.
    """
    cents = amount * 100
    if cents != cents.to_integral_value():
        raise ValueError(f"Amount {amount} has sub-cent precision")
    return int(cents)


def from_cents(cents: int) -> Money:
    return Money(Decimal(cents) / 100)


def _row_to_couple(row: sqlite3.Row) -> Couple:
    return Couple(
        id=CoupleId(row["id"]),
        member_a=MemberId(row["member_a"]),
        member_b=MemberId(row["member_b"]) if row["member_b"] else None,
        invite_code=row["invite_code"],
        created_at=datetime.fromisoformat(row["created_at"]),
    )


def _row_to_expense(row: sqlite3.Row) -> ExpenseRecord:
    return ExpenseRecord(
        id=ExpenseId(row["id"]),
        description=row["description"],
        amount=from_cents(row["amount"]),
        paid_by=MemberId(row["paid_by"]),
        is_shared=bool(row["is_shared"]),
        date=datetime.fromisoformat(row["date"]),
        category=ExpenseCategory(row["category"]),
        couple_id=CoupleId(row["couple_id"]),
        created_at=datetime.fromisoformat(row["created_at"]),
    )


def create_couple(
    couple_id: CoupleId, member: MemberId, db_path: Path | None = None, now: datetime | None = None
) -> Couple:
    """Create a couple with one member and a fresh invite code.

    Args:
        couple_id: New couple id.
        member: Founding member.
        db_path: Path to the database file. If None, uses default location.
        now: Creation time. Defaults to the current time.

    Returns:
        The stored Couple.

    Raises:
        CoupleError: If a unique invite code could not be generated.
        sqlite3.Error: If database operation fails.
    """
    created_at = now or datetime.now()

    with _connect(db_path) as conn:
        cursor = conn.cursor()
        try:
            for _ in range(INVITE_CODE_ATTEMPTS):
                code = generate_invite_code()
                cursor.execute("SELECT 1 FROM couples WHERE invite_code = ?", (code,))
                if cursor.fetchone() is None:
                    break
            else:
                raise CoupleError("Could not generate a unique invite code")

            cursor.execute(
                "INSERT INTO couples (id, member_a, member_b, invite_code, created_at) VALUES (?, ?, NULL, ?, ?)",
                (couple_id, member, code, created_at.isoformat()),
            )
            conn.commit()
        except sqlite3.Error:
            conn.rollback()
            raise

    log.info("couple_created", couple_id=couple_id, member=member)
    return Couple(id=couple_id, member_a=member, member_b=None, invite_code=code, created_at=created_at)


def get_couple(couple_id: CoupleId, db_path: Path | None = None) -> Couple | None:
    """Get a couple by id.

    Args:
        couple_id: Couple id.
        db_path: Path to the database file. If None, uses default location.

    Returns:
        Couple or None if not found.

    Raises:
        sqlite3.Error: If database operation fails.
    """
    with _connect(db_path) as conn:
        cursor = conn.cursor()
        cursor.execute("SELECT * FROM couples WHERE id = ?", (couple_id,))
        row = cursor.fetchone()
        return _row_to_couple(row) if row else None


def find_couple_by_invite_code(code: str, db_path: Path | None = None) -> Couple | None:
    """Look up a couple by invite code (case-insensitive).

    Args:
        code: Invite code as typed by the user.
        db_path: Path to the database file. If None, uses default location.

    Returns:
        Couple or None if no couple has this code.

    Raises:
        sqlite3.Error: If database operation fails.
    """
    with _connect(db_path) as conn:
        cursor = conn.cursor()
        cursor.execute("SELECT * FROM couples WHERE invite_code = ?", (normalize_invite_code(code),))
        row = cursor.fetchone()
        return _row_to_couple(row) if row else None


def join_couple(code: str, member: MemberId, db_path: Path | None = None) -> Couple:
    """Link a second member to a couple using its invite code.

    Args:
        code: Invite code.
        member: Joining member.
        db_path: Path to the database file. If None, uses default location.

    Returns:
        The linked Couple.

    Raises:
        CoupleError: If the code is unknown, the couple is full, or the
            member tries to join their own couple.
        sqlite3.Error: If database operation fails.
    """
    couple = find_couple_by_invite_code(code, db_path)
    if couple is None:
        raise CoupleError(f"Invalid invite code '{normalize_invite_code(code)}'")
    if couple.member_a == member:
        raise CoupleError("You cannot join your own couple")
    if couple.is_linked:
        raise CoupleError(f"Couple {couple.id} already has two members")

    with _connect(db_path) as conn:
        cursor = conn.cursor()
        try:
            cursor.execute(
                "UPDATE couples SET member_b = ? WHERE id = ? AND member_b IS NULL",
                (member, couple.id),
            )
            if cursor.rowcount != 1:
                raise CoupleError(f"Couple {couple.id} already has two members")
            conn.commit()
        except sqlite3.Error:
            conn.rollback()
            raise

    log.info("couple_joined", couple_id=couple.id, member=member)
    return Couple(
        id=couple.id,
        member_a=couple.member_a,
        member_b=member,
        invite_code=couple.invite_code,
        created_at=couple.created_at,
    )


def insert_expense(expense: ExpenseRecord, db_path: Path | None = None) -> None:
    """Insert an expense record.

    Args:
        expense: Validated expense record (see juntos.domain.expenses.new_expense).
        db_path: Path to the database file. If None, uses default location.

    Raises:
        ValueError: If the expense has no couple id or sub-cent precision.
        sqlite3.Error: If database operation fails.
    """
    if expense.couple_id is None:
        raise ValueError(f"Expense {expense.id} has no couple id")

    created_at = expense.created_at or datetime.now()

    with _connect(db_path) as conn:
        cursor = conn.cursor()
        try:
            cursor.execute(
                """
                INSERT INTO expenses
                    (id, couple_id, description, amount, paid_by, is_shared, category, date, created_at)
                VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    expense.id,
                    expense.couple_id,
                    expense.description,
                    to_cents(expense.amount),
                    expense.paid_by,
                    int(expense.is_shared),
                    expense.category.value,
                    expense.date.isoformat(),
                    created_at.isoformat(),
                ),
            )
            conn.commit()
        except sqlite3.Error:
            conn.rollback()
            raise

    log.info(
        "expense_inserted",
        expense_id=expense.id,
        couple_id=expense.couple_id,
        amount=str(expense.amount),
        shared=expense.is_shared,
    )


def delete_expense(expense_id: ExpenseId, couple_id: CoupleId, db_path: Path | None = None) -> bool:
    """Delete an expense belonging to a couple.

    Args:
        expense_id: Expense id.
        couple_id: Couple the expense must belong to.
        db_path: Path to the database file. If None, uses default location.

    Returns:
        True if a record was deleted, False if none matched.

    Raises:
        sqlite3.Error: If database operation fails.
    """
    with _connect(db_path) as conn:
        cursor = conn.cursor()
        try:
            cursor.execute("DELETE FROM expenses WHERE id = ? AND couple_id = ?", (expense_id, couple_id))
            deleted = cursor.rowcount > 0
            conn.commit()
        except sqlite3.Error:
            conn.rollback()
            raise

    if deleted:
        log.info("expense_deleted", expense_id=expense_id, couple_id=couple_id)
    return deleted


def list_expenses(
    couple_id: CoupleId,
    db_path: Path | None = None,
    since: datetime | None = None,
    until: datetime | None = None,
    limit: int | None = None,
) -> list[ExpenseRecord]:
    """List a couple's expenses, newest first.

    Args:
        couple_id: Couple id.
        db_path: Path to the database file. If None, uses default location.
        since: Optional inclusive lower bound on date.
        until: Optional exclusive upper bound on date.
        limit: Maximum number of records to return. If None, returns all.

    Returns:
        List of ExpenseRecord ordered by date descending.

    Raises:
        sqlite3.Error: If database operation fails.
    """
    with _connect(db_path) as conn:
        cursor = conn.cursor()
        query = "SELECT * FROM expenses WHERE couple_id = ?"
        params: list[Any] = [couple_id]

        if since:
            query += " AND date >= ?"
            params.append(since.isoformat())
        if until:
            query += " AND date < ?"
            params.append(until.isoformat())

        query += " ORDER BY date DESC, created_at DESC"

        if limit is not None:
            query += " LIMIT ?"
            params.append(limit)

        cursor.execute(query, params)
        return [_row_to_expense(row) for row in cursor.fetchall()]


def find_expense(expense_id_prefix: str, couple_id: CoupleId, db_path: Path | None = None) -> list[ExpenseRecord]:
    """Find a couple's expenses whose id starts with a prefix.

    Args:
        expense_id_prefix: Full id or a short prefix (as shown by 'juntos list').
        couple_id: Couple id.
        db_path: Path to the database file. If None, uses default location.

    Returns:
        Matching expenses (more than one means the prefix is ambiguous).

    Raises:
        sqlite3.Error: If database operation fails.
    """
    with _connect(db_path) as conn:
        cursor = conn.cursor()
        cursor.execute(
            "SELECT * FROM expenses WHERE couple_id = ? AND substr(id, 1, ?) = ?",
            (couple_id, len(expense_id_prefix), expense_id_prefix),
        )
        return [_row_to_expense(row) for row in cursor.fetchall()]


class SqliteExpenseSource:
    """ExpenseSource backed by the local SQLite database."""

    def __init__(self, db_path: Path | None = None) -> None:
        self.db_path = db_path

    def list_expenses(self, couple_id: CoupleId) -> list[ExpenseRecord]:
        return list_expenses(couple_id, self.db_path)
