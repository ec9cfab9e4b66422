"""Pure functions for expense report calculations and aggregations.

This module contains the functional core for reporting operations:
- No I/O operations (no database, no console, no files)
- No side effects
- Pure data transformations
- Easy to test

All monetary amounts are Decimal (Money type).
"""

from collections.abc import Iterable
from dataclasses import dataclass
from datetime import datetime

from juntos.dates import period_range
from juntos.domain.balance import BalanceResult, compute_balance
from juntos.domain.expenses import ExpenseCategory, ExpenseRecord
from juntos.domain.models import ZERO, MemberId, Money, Period

RECENT_SHARED_LIMIT = 5


@dataclass(frozen=True)
class CategoryTotal:
    """Immutable total for one expense category."""

    category: ExpenseCategory
    amount: Money
    count: int


@dataclass(frozen=True)
class ExpenseSummary:
    """Immutable summary of a set of expenses for one couple."""

    total: Money
    count: int
    average: Money | None
    shared_total: Money
    personal_totals: dict[MemberId, Money]
    by_category: list[CategoryTotal]
    recent_shared: list[ExpenseRecord]
    more_shared: int
    balance: BalanceResult


def sort_newest_first(records: Iterable[ExpenseRecord]) -> list[ExpenseRecord]:
    """Sort records by date, newest first."""
    return sorted(records, key=lambda r: r.date, reverse=True)


def filter_by_period(records: Iterable[ExpenseRecord], period: Period, now: datetime) -> list[ExpenseRecord]:
    """Keep only records dated inside the period.

    Args:
        records: Records to filter.
        period: Named period (see juntos.dates.period_range).
        now: Reference time.

    Returns:
        Matching records, newest first.
    """
    since, until, _ = period_range(period, now)
    selected = [
        r for r in records if (since is None or r.date >= since) and (until is None or r.date < until)
    ]
    return sort_newest_first(selected)


def half_share(amount: Money) -> Money:
    """Per-person share of a shared amount."""
    return Money(amount / 2)


def total_amount(records: Iterable[ExpenseRecord]) -> Money:
    return Money(sum((r.amount for r in records), ZERO))


def calculate_category_totals(records: Iterable[ExpenseRecord]) -> list[CategoryTotal]:
    """Group records by category.

    Args:
        records: Records to group.

    Returns:
        Category totals sorted by amount descending, then by category name.
    """
    amounts: dict[ExpenseCategory, Money] = {}
    counts: dict[ExpenseCategory, int] = {}
    for record in records:
        amounts[record.category] = Money(amounts.get(record.category, ZERO) + record.amount)
        counts[record.category] = counts.get(record.category, 0) + 1

    totals = [CategoryTotal(category=cat, amount=amt, count=counts[cat]) for cat, amt in amounts.items()]
    return sorted(totals, key=lambda t: (-t.amount, t.category.value))


def calculate_personal_totals(
    records: Iterable[ExpenseRecord], member_a: MemberId, member_b: MemberId
) -> dict[MemberId, Money]:
    """Sum personal (non-shared) expenses per member."""
    totals: dict[MemberId, Money] = {member_a: ZERO, member_b: ZERO}
    for record in records:
        if not record.is_shared and record.paid_by in totals:
            totals[record.paid_by] = Money(totals[record.paid_by] + record.amount)
    return totals


def summarize(
    records: Iterable[ExpenseRecord],
    member_a: MemberId,
    member_b: MemberId,
    perspective: MemberId,
    currency: str = "$",
    labels: dict[MemberId, str] | None = None,
) -> ExpenseSummary:
    """Build the full expense summary for a pre-filtered set of records.

    Args:
        records: Records to summarize (already filtered to a period).
        member_a: First couple member.
        member_b: Second couple member.
        perspective: Member whose balance is reported.
        currency: Currency symbol for the balance suggestion.
        labels: Optional member display names.

    Returns:
        ExpenseSummary including the couple balance.

    Raises:
        InvalidArgument: If the balance engine rejects the input.
    """
    records = sort_newest_first(records)
    balance = compute_balance(records, member_a, member_b, perspective, currency, labels)

    total = total_amount(records)
    count = len(records)
    shared = [r for r in records if r.is_shared]

    return ExpenseSummary(
        total=total,
        count=count,
        average=Money(total / count) if count else None,
        shared_total=total_amount(shared),
        personal_totals=calculate_personal_totals(records, member_a, member_b),
        by_category=calculate_category_totals(records),
        recent_shared=shared[:RECENT_SHARED_LIMIT],
        more_shared=max(len(shared) - RECENT_SHARED_LIMIT, 0),
        balance=balance,
    )
