"""Expense records, couples and the rules for creating them.

Pure functions only: ids and timestamps are generated here, but nothing is
persisted. The store layer saves what these functions return.
"""

import secrets
import string
import uuid
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal, InvalidOperation
from enum import Enum

from juntos.domain.errors import InvalidArgument
from juntos.domain.models import CoupleId, ExpenseId, MemberId, Money

INVITE_CODE_LENGTH = 6
INVITE_CODE_ALPHABET = string.ascii_uppercase + string.digits

# Stored as integer cents, which must fit a SQLite INTEGER
MAX_AMOUNT = Decimal("999999999.99")

CENTS = Decimal("0.01")


class ExpenseCategory(Enum):
    """Expense category tag. Informational only, never used in balance arithmetic."""

    FOOD = "food"
    ENTERTAINMENT = "entertainment"
    BILLS = "bills"
    TRANSPORT = "transport"
    HEALTH = "health"
    SHOPPING = "shopping"
    HOME = "home"
    OTHER = "other"

    @property
    def label(self) -> str:
        return self.value.capitalize()

    @property
    def icon(self) -> str:
        return _CATEGORY_ICONS[self]


_CATEGORY_ICONS = {
    ExpenseCategory.FOOD: "🍽️",
    ExpenseCategory.ENTERTAINMENT: "🎬",
    ExpenseCategory.BILLS: "📄",
    ExpenseCategory.TRANSPORT: "🚗",
    ExpenseCategory.HEALTH: "🏥",
    ExpenseCategory.SHOPPING: "🛍️",
    ExpenseCategory.HOME: "🏠",
    ExpenseCategory.OTHER: "💰",
}


@dataclass(frozen=True)
class ExpenseRecord:
    """Immutable expense. Edits are modelled as delete + recreate."""

    id: ExpenseId
    description: str
    amount: Money
    paid_by: MemberId
    is_shared: bool
    date: datetime
    category: ExpenseCategory = ExpenseCategory.OTHER
    couple_id: CoupleId | None = None
    created_at: datetime | None = None


@dataclass(frozen=True)
class Couple:
    """Immutable couple. ``member_b`` is None until the partner joins."""

    id: CoupleId
    member_a: MemberId
    member_b: MemberId | None
    invite_code: str
    created_at: datetime | None = None

    @property
    def is_linked(self) -> bool:
        return bool(self.member_b)

    def has_member(self, member: MemberId) -> bool:
        return member in (self.member_a, self.member_b)

    def partner_of(self, member: MemberId) -> MemberId | None:
        """Return the other member, or None if ``member`` is not in this couple."""
        if member == self.member_a:
            return self.member_b
        if member == self.member_b:
            return self.member_a
        return None

    def require_members(self) -> tuple[MemberId, MemberId]:
        """Return both member ids.

        Raises:
            InvalidArgument: If the second member has not joined yet.
        """
        if not self.member_b:
            raise InvalidArgument(f"Couple {self.id} has no second member yet")
        return self.member_a, self.member_b


def parse_amount(text: str | Decimal) -> Money:
    """Parse a user-supplied amount into Money.

    Args:
        text: Decimal string such as "12.50" (or a Decimal).

    Returns:
        The amount as Money, unrounded.

    Raises:
        InvalidArgument: If the amount is not a number, is not positive,
            is above MAX_AMOUNT, or has more than two decimal places.
    """
    try:
        amount = Decimal(str(text).strip())
    except InvalidOperation as e:
        raise InvalidArgument(f"Amount '{text}' is not a number") from e

    if not amount.is_finite():
        raise InvalidArgument(f"Amount '{text}' is not a number")
    if amount <= 0:
        raise InvalidArgument("Amount must be positive")
    if amount > MAX_AMOUNT:
        raise InvalidArgument(f"Amount '{text}' is too large (maximum {MAX_AMOUNT:,})")
    if amount != amount.quantize(CENTS):
        raise InvalidArgument(f"Amount '{text}' has more than two decimal places")

    return Money(amount)


def new_expense(
    couple: Couple,
    description: str,
    amount: str | Decimal,
    paid_by: MemberId,
    is_shared: bool = True,
    category: ExpenseCategory = ExpenseCategory.OTHER,
    date: datetime | None = None,
    now: datetime | None = None,
) -> ExpenseRecord:
    """Create a validated expense record for a couple.

    Args:
        couple: Couple the expense belongs to.
        description: What the money was spent on.
        amount: Amount as a decimal string or Decimal.
        paid_by: Member who paid.
        is_shared: True to split evenly, False for a personal expense.
        category: Informational category tag.
        date: When the expense happened. Defaults to ``now``.
        now: Creation timestamp. Defaults to the current time.

    Returns:
        A new ExpenseRecord with a fresh id.

    Raises:
        InvalidArgument: If any field is invalid.
    """
    problems: list[str] = []

    if not description.strip():
        problems.append("Description must not be empty")

    money: Money | None = None
    try:
        money = parse_amount(amount)
    except InvalidArgument as e:
        problems.extend(e.problems)

    if not couple.has_member(paid_by):
        problems.append(f"Payer '{paid_by}' is not a member of couple {couple.id}")

    if problems or money is None:
        raise InvalidArgument(problems)

    created = now or datetime.now()
    return ExpenseRecord(
        id=ExpenseId(uuid.uuid4().hex),
        description=description.strip(),
        amount=money,
        paid_by=paid_by,
        is_shared=is_shared,
        date=date or created,
        category=category,
        couple_id=couple.id,
        created_at=created,
    )


def generate_invite_code() -> str:
    """Generate a random six character invite code (A-Z, 0-9)."""
    return "".join(secrets.choice(INVITE_CODE_ALPHABET) for _ in range(INVITE_CODE_LENGTH))


def normalize_invite_code(code: str) -> str:
    """Normalize user input for invite code lookup."""
    return code.strip().upper()
