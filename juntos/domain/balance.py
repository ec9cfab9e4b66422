"""Pure functions for the couple balance engine.

This module contains the functional core for settling up between the two
members of a couple:
- No I/O operations (no database, no console, no files)
- No side effects
- Pure data transformations
- Easy to test

All monetary amounts are Decimal (Money type). Shared amounts are halved
exactly; rounding happens only when the suggestion is rendered.
"""

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from enum import Enum

from juntos.domain.errors import InvalidArgument
from juntos.domain.expenses import ExpenseRecord
from juntos.domain.models import ZERO, MemberId, Money

# Balances smaller than this are treated as settled to absorb drift
SETTLEMENT_EPSILON = Money(Decimal("0.01"))

CENTS = Decimal("0.01")

SETTLED_MESSAGE = "All square"


class BalanceStatus(Enum):
    """Direction of the balance from the perspective member's point of view."""

    SETTLED = "settled"
    OWED_TO_YOU = "owed_to_you"
    YOU_OWE = "you_owe"


@dataclass(frozen=True)
class BalanceResult:
    """Immutable result of a balance computation."""

    perspective: MemberId
    other: MemberId
    total_paid: dict[MemberId, Money]
    fair_share: dict[MemberId, Money]
    signed_balance: Money
    status: BalanceStatus
    suggestion: str

    @property
    def settlement_amount(self) -> Money:
        """Amount to transfer, rounded to cents (zero when settled)."""
        if self.status is BalanceStatus.SETTLED:
            return Money(ZERO.quantize(CENTS))
        return round_money(abs(self.signed_balance))


def round_money(amount: Decimal) -> Money:
    """Round an amount to cents for presentation."""
    return Money(amount.quantize(CENTS, rounding=ROUND_HALF_UP))


def format_money(amount: Decimal, currency: str = "$") -> str:
    """Format an amount with two decimal places and a currency symbol.

    Args:
        amount: Amount in major units.
        currency: Currency symbol prefix.

    Returns:
        Formatted string, e.g. "$12.50" or "-$3.00".
    """
    rounded = round_money(amount)
    sign = "-" if rounded < 0 else ""
    return f"{sign}{currency}{abs(rounded):,.2f}"


def classify_balance(signed_balance: Decimal) -> BalanceStatus:
    """Classify a signed balance against the settlement epsilon.

    Args:
        signed_balance: totalPaid - fairShare from one member's perspective.

    Returns:
        SETTLED if the magnitude is below epsilon, otherwise the direction.
    """
    if abs(signed_balance) < SETTLEMENT_EPSILON:
        return BalanceStatus.SETTLED
    if signed_balance > 0:
        return BalanceStatus.OWED_TO_YOU
    return BalanceStatus.YOU_OWE


def render_suggestion(
    status: BalanceStatus,
    signed_balance: Decimal,
    perspective: str,
    other: str,
    currency: str = "$",
) -> str:
    """Render the settlement suggestion text.

    Args:
        status: Classified balance status.
        signed_balance: Signed balance from the perspective member.
        perspective: Display name of the perspective member.
        other: Display name of the other member.
        currency: Currency symbol prefix.

    Returns:
        Suggestion such as "Bea owes Ana $50.00".
    """
    if status is BalanceStatus.SETTLED:
        return SETTLED_MESSAGE

    amount = format_money(abs(signed_balance), currency)
    if status is BalanceStatus.OWED_TO_YOU:
        return f"{other} owes {perspective} {amount}"
    return f"{perspective} owes {other} {amount}"


def validate_balance_input(
    records: list[ExpenseRecord],
    member_a: MemberId | None,
    member_b: MemberId | None,
    perspective: MemberId,
) -> None:
    """Check every precondition of compute_balance.

    Raises:
        InvalidArgument: Listing every problem found.
    """
    problems: list[str] = []

    if not member_a or not member_b:
        problems.append("Couple must have two members")
    elif member_a == member_b:
        problems.append(f"Couple members must be distinct (both are '{member_a}')")

    if perspective not in (member_a, member_b):
        problems.append(f"Perspective '{perspective}' is not a member of the couple")

    for record in records:
        if not record.amount.is_finite() or record.amount <= 0:
            problems.append(f"Expense {record.id} has non-positive or non-finite amount {record.amount}")
        if record.paid_by not in (member_a, member_b):
            problems.append(f"Expense {record.id} was paid by unknown member '{record.paid_by}'")

    if problems:
        raise InvalidArgument(problems)


def compute_balance(
    records: Iterable[ExpenseRecord],
    member_a: MemberId,
    member_b: MemberId,
    perspective: MemberId,
    currency: str = "$",
    labels: Mapping[MemberId, str] | None = None,
) -> BalanceResult:
    """Compute who owes whom between the two members of a couple.

    Shared records are split evenly between both members; personal records
    are attributed wholly to their payer and never move the balance.

    Args:
        records: Expense records, in any order (may be empty).
        member_a: First couple member.
        member_b: Second couple member.
        perspective: Member whose point of view the balance is signed from.
        currency: Currency symbol used in the suggestion.
        labels: Optional display names for members in the suggestion.

    Returns:
        BalanceResult with totals, fair shares, signed balance and suggestion.

    Raises:
        InvalidArgument: If the couple, perspective or any record is invalid.
            Nothing is computed in that case.
    """
    records = list(records)
    validate_balance_input(records, member_a, member_b, perspective)

    total_paid: dict[MemberId, Money] = {member_a: ZERO, member_b: ZERO}
    fair_share: dict[MemberId, Money] = {member_a: ZERO, member_b: ZERO}

    for record in records:
        total_paid[record.paid_by] = Money(total_paid[record.paid_by] + record.amount)

        if record.is_shared:
            half = Money(record.amount / 2)
            fair_share[member_a] = Money(fair_share[member_a] + half)
            fair_share[member_b] = Money(fair_share[member_b] + half)
        else:
            fair_share[record.paid_by] = Money(fair_share[record.paid_by] + record.amount)

    other = member_b if perspective == member_a else member_a
    signed_balance = Money(total_paid[perspective] - fair_share[perspective])
    status = classify_balance(signed_balance)

    names = labels or {}
    suggestion = render_suggestion(
        status,
        signed_balance,
        names.get(perspective, perspective),
        names.get(other, other),
        currency,
    )

    return BalanceResult(
        perspective=perspective,
        other=other,
        total_paid=total_paid,
        fair_share=fair_share,
        signed_balance=signed_balance,
        status=status,
        suggestion=suggestion,
    )
