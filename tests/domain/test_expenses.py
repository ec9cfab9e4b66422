"""Tests for juntos.domain.expenses pure functions."""

from datetime import datetime
from decimal import Decimal

import pytest

from juntos.domain.errors import InvalidArgument
from juntos.domain.expenses import (
    INVITE_CODE_ALPHABET,
    Couple,
    ExpenseCategory,
    generate_invite_code,
    new_expense,
    normalize_invite_code,
    parse_amount,
)
from juntos.domain.models import CoupleId, MemberId

A = MemberId("ana")
B = MemberId("bea")

LINKED = Couple(id=CoupleId("c1"), member_a=A, member_b=B, invite_code="ABC123")
WAITING = Couple(id=CoupleId("c2"), member_a=A, member_b=None, invite_code="XYZ789")


class TestParseAmount:
    """Tests for parse_amount."""

    def test_parses_decimal_string(self) -> None:
        """Should parse a plain decimal string exactly."""
        assert parse_amount("12.50") == Decimal("12.50")

    def test_parses_whole_number(self) -> None:
        """Should accept amounts without decimals."""
        assert parse_amount(" 7 ") == Decimal("7")

    def test_accepts_decimal(self) -> None:
        """Should accept a Decimal unchanged."""
        assert parse_amount(Decimal("0.01")) == Decimal("0.01")

    @pytest.mark.parametrize("text", ["0", "0.00", "-1", "-0.01"])
    def test_rejects_non_positive(self, text: str) -> None:
        """Should reject zero and negative amounts."""
        with pytest.raises(InvalidArgument, match="must be positive"):
            parse_amount(text)

    @pytest.mark.parametrize("text", ["abc", "", "12,50", "NaN", "Infinity"])
    def test_rejects_non_numbers(self, text: str) -> None:
        """Should reject text that is not a finite number."""
        with pytest.raises(InvalidArgument, match="not a number"):
            parse_amount(text)

    def test_rejects_sub_cent_precision(self) -> None:
        """Should reject more than two decimal places instead of rounding."""
        with pytest.raises(InvalidArgument, match="two decimal places"):
            parse_amount("1.005")

    def test_accepts_trailing_zeros(self) -> None:
        """Extra zero decimals are still whole cents."""
        assert parse_amount("1.000") == Decimal("1")
        assert parse_amount("2.5000") == Decimal("2.50")

    def test_rejects_amount_too_large(self) -> None:
        """Amounts that would overflow integer cent storage should be rejected."""
        assert parse_amount("999999999.99") == Decimal("999999999.99")
        with pytest.raises(InvalidArgument, match="too large"):
            parse_amount("1000000000")
        with pytest.raises(InvalidArgument, match="too large"):
            parse_amount("1e20")


class TestNewExpense:
    """Tests for new_expense."""

    def test_creates_shared_expense(self) -> None:
        """Should build a record with defaults filled in."""
        now = datetime(2025, 3, 1, 9, 30)
        record = new_expense(LINKED, " Groceries ", "84.20", A, now=now)

        assert record.description == "Groceries"
        assert record.amount == Decimal("84.20")
        assert record.paid_by == A
        assert record.is_shared is True
        assert record.category is ExpenseCategory.OTHER
        assert record.couple_id == "c1"
        assert record.date == now
        assert record.created_at == now
        assert len(record.id) == 32

    def test_uses_explicit_date(self) -> None:
        """Should keep the expense date separate from creation time."""
        when = datetime(2025, 2, 14)
        record = new_expense(LINKED, "Dinner", "60", B, category=ExpenseCategory.FOOD, date=when)

        assert record.date == when
        assert record.category is ExpenseCategory.FOOD

    def test_ids_are_unique(self) -> None:
        """Each record should get its own id."""
        first = new_expense(LINKED, "Coffee", "3.50", A)
        second = new_expense(LINKED, "Coffee", "3.50", A)

        assert first.id != second.id

    def test_personal_expense(self) -> None:
        """Should record personal expenses as not shared."""
        record = new_expense(LINKED, "Haircut", "25", B, is_shared=False)

        assert record.is_shared is False

    def test_first_member_can_add_before_partner_joins(self) -> None:
        """Founding member should be able to record expenses while waiting."""
        record = new_expense(WAITING, "Rent", "900", A)

        assert record.couple_id == "c2"

    def test_rejects_payer_outside_couple(self) -> None:
        """Should reject a payer who is not a member."""
        with pytest.raises(InvalidArgument, match="not a member"):
            new_expense(LINKED, "Taxi", "12", MemberId("carla"))

    def test_reports_all_problems(self) -> None:
        """Should collect every invalid field."""
        with pytest.raises(InvalidArgument) as exc_info:
            new_expense(LINKED, "  ", "-4", MemberId("carla"))

        assert len(exc_info.value.problems) == 3


class TestCouple:
    """Tests for Couple helpers."""

    def test_linked_state(self) -> None:
        """Should know whether the partner has joined."""
        assert LINKED.is_linked
        assert not WAITING.is_linked

    def test_partner_of(self) -> None:
        """Should return the other member."""
        assert LINKED.partner_of(A) == B
        assert LINKED.partner_of(B) == A
        assert LINKED.partner_of(MemberId("carla")) is None
        assert WAITING.partner_of(A) is None

    def test_require_members(self) -> None:
        """Should return both members or raise when not linked."""
        assert LINKED.require_members() == (A, B)
        with pytest.raises(InvalidArgument, match="no second member"):
            WAITING.require_members()


class TestInviteCodes:
    """Tests for invite code helpers."""

    def test_code_shape(self) -> None:
        """Should generate six characters from A-Z and 0-9."""
        for _ in range(50):
            code = generate_invite_code()
            assert len(code) == 6
            assert all(ch in INVITE_CODE_ALPHABET for ch in code)

    def test_normalize(self) -> None:
        """Should strip and uppercase user input."""
        assert normalize_invite_code(" abc12z ") == "ABC12Z"


class TestExpenseCategory:
    """Tests for ExpenseCategory."""

    def test_every_category_has_label_and_icon(self) -> None:
        """Each category should render with a label and an icon."""
        for category in ExpenseCategory:
            assert category.label
            assert category.icon

    def test_label(self) -> None:
        assert ExpenseCategory.FOOD.label == "Food"
