"""Domain models and types for juntos.

This package contains the functional core:
- Pure functions with no side effects
- No I/O operations
- Easy to test
- Business logic separated from infrastructure
"""

from juntos.domain.errors import CoupleError, InvalidArgument
from juntos.domain.models import CoupleId, ExpenseId, MemberId, Money, Period

__all__ = ["Money", "MemberId", "CoupleId", "ExpenseId", "Period", "InvalidArgument", "CoupleError"]
