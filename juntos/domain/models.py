"""Domain type definitions for juntos.

These NewTypes provide semantic clarity and help with type checking:
- Money: Amount in major currency units, always a Decimal
- MemberId: Identifier of one member of a couple
- CoupleId: Identifier of a couple
- ExpenseId: Identifier of an expense record
- Period: Named reporting period (e.g., "this-month")
"""

from decimal import Decimal
from typing import NewType

# Money is a Decimal in major units (e.g. Decimal("12.50")); floats never enter the domain
Money = NewType("Money", Decimal)

MemberId = NewType("MemberId", str)

CoupleId = NewType("CoupleId", str)

ExpenseId = NewType("ExpenseId", str)

# One of PERIODS below, validated at the CLI
Period = NewType("Period", str)

PERIODS: tuple[Period, ...] = (
    Period("this-week"),
    Period("this-month"),
    Period("last-month"),
    Period("this-year"),
    Period("all"),
)

ZERO = Money(Decimal("0"))
