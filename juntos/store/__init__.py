"""Database store layer - provides persistence for the application.

This module re-exports all public database functions for easy importing.
"""

from juntos.store.queries import (
    ExpenseSource,
    SqliteExpenseSource,
    create_couple,
    delete_expense,
    find_couple_by_invite_code,
    find_expense,
    get_couple,
    insert_expense,
    join_couple,
    list_expenses,
)
from juntos.store.schema import get_db_path, init_database

__all__ = [
    # Schema
    "get_db_path",
    "init_database",
    # Queries
    "ExpenseSource",
    "SqliteExpenseSource",
    "create_couple",
    "delete_expense",
    "find_couple_by_invite_code",
    "find_expense",
    "get_couple",
    "insert_expense",
    "join_couple",
    "list_expenses",
]
