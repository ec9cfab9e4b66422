"""End-to-end tests for the juntos CLI using an isolated XDG home."""

from datetime import datetime
from pathlib import Path

import pytest
from click.testing import Result
from typer.testing import CliRunner

from juntos.cli import app
from juntos.config import get_config_path, load_config
from juntos.domain.models import CoupleId
from juntos.store import get_couple, get_db_path, list_expenses

runner = CliRunner()


@pytest.fixture(autouse=True)
def isolated_home(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    monkeypatch.setenv("HOME", str(tmp_path))
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "config"))
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path / "data"))
    return tmp_path


def invoke(*args: str) -> Result:
    return runner.invoke(app, list(args))


def linked_couple() -> CoupleId:
    """Initialize, create a couple as ana and join it as bea."""
    assert invoke("init").exit_code == 0
    assert invoke("couple", "create", "ana", "--name", "Ana").exit_code == 0

    couple_id = CoupleId(load_config(get_config_path())["couple_id"])
    code = get_couple(couple_id, get_db_path()).invite_code

    result = invoke("couple", "join", code.lower(), "bea", "--name", "Bea")
    assert result.exit_code == 0, result.output
    return couple_id


class TestInit:
    """Tests for the init command."""

    def test_init_creates_files(self) -> None:
        result = invoke("init")

        assert result.exit_code == 0, result.output
        assert get_db_path().exists()
        assert get_config_path().exists()

    def test_init_refuses_overwrite(self) -> None:
        invoke("init")

        result = invoke("init")

        assert result.exit_code == 1
        assert "already exists" in result.output

    def test_commands_require_init(self) -> None:
        result = invoke("balance")

        assert result.exit_code == 1
        assert "juntos init" in result.output


class TestCouple:
    """Tests for couple setup commands."""

    def test_balance_waits_for_partner(self) -> None:
        invoke("init")
        invoke("couple", "create", "ana")

        result = invoke("balance")

        assert result.exit_code == 1
        assert "hasn't joined" in result.output

    def test_join_with_bad_code(self) -> None:
        invoke("init")

        result = invoke("couple", "join", "NOPE00", "bea")

        assert result.exit_code == 1
        assert "Invalid invite code" in result.output

    def test_join_saves_config(self) -> None:
        couple_id = linked_couple()

        config = load_config(get_config_path())
        assert config["member"] == "bea"
        assert config["couple_id"] == couple_id
        assert config["labels"] == {"ana": "Ana", "bea": "Bea"}


class TestExpenseFlow:
    """Tests for adding, listing, deleting and balancing expenses."""

    def test_balance_after_expenses(self) -> None:
        """Shared dinner paid by Ana and Bea's personal gym should leave Bea owing half."""
        linked_couple()

        assert invoke("add", "Dinner", "100.00", "--paid-by", "ana", "--category", "food").exit_code == 0
        assert invoke("add", "Gym", "30", "--personal").exit_code == 0

        result = invoke("balance", "--period", "all")
        assert result.exit_code == 0, result.output
        assert "Bea owes Ana $50.00" in result.output

        result = invoke("balance", "--period", "all", "--as", "ana")
        assert result.exit_code == 0, result.output
        assert "Bea owes Ana $50.00" in result.output

    def test_empty_balance_is_settled(self) -> None:
        linked_couple()

        result = invoke("balance")

        assert result.exit_code == 0, result.output
        assert "All square" in result.output

    def test_rejects_invalid_amount(self) -> None:
        linked_couple()

        result = invoke("add", "Refund", "0")

        assert result.exit_code == 1
        assert "must be positive" in result.output

    def test_rejects_unknown_payer(self) -> None:
        linked_couple()

        result = invoke("add", "Taxi", "12", "--paid-by", "carla")

        assert result.exit_code == 1
        assert "not a member" in result.output

    def test_rejects_unknown_category(self) -> None:
        linked_couple()

        result = invoke("add", "Taxi", "12", "--category", "gadgets")

        assert result.exit_code == 1
        assert "Unknown category" in result.output

    def test_balance_rejects_outsider_perspective(self) -> None:
        linked_couple()

        result = invoke("balance", "--as", "carla")

        assert result.exit_code == 1
        assert "not a member" in result.output

    def test_add_with_day_first_date_and_list(self) -> None:
        linked_couple()

        assert invoke("add", "Rent", "900", "--date", "01/03/2025", "--category", "home").exit_code == 0

        result = invoke("list", "--period", "all")
        assert result.exit_code == 0, result.output
        assert "Rent" in result.output
        assert "2025-03-01" in result.output

    def test_delete_by_short_id(self) -> None:
        couple_id = linked_couple()
        invoke("add", "Taxi", "12")
        [expense] = list_expenses(couple_id, get_db_path())

        result = invoke("delete", expense.id[:8])

        assert result.exit_code == 0, result.output
        assert list_expenses(couple_id, get_db_path()) == []

    def test_delete_unknown(self) -> None:
        linked_couple()

        result = invoke("delete", "deadbeef")

        assert result.exit_code == 1
        assert "not found" in result.output

    def test_report(self) -> None:
        linked_couple()
        invoke("add", "Dinner", "60", "--paid-by", "ana", "--category", "food")
        invoke("add", "Cinema", "20", "--category", "entertainment")

        result = invoke("report", "--period", "all")

        assert result.exit_code == 0, result.output
        assert "Total spent" in result.output
        assert "$80.00" in result.output
        assert "Bea owes Ana $20.00" in result.output

    def test_add_with_utc_offset_date_then_balance(self) -> None:
        """A date with an offset should be stored as naive UTC and still balance against local dates."""
        couple_id = linked_couple()

        assert invoke("add", "Lunch", "10").exit_code == 0
        result = invoke("add", "Rent", "20", "--paid-by", "ana", "--date", "2025-03-01T10:00:00+02:00")
        assert result.exit_code == 0, result.output

        result = invoke("balance", "--period", "all")
        assert result.exit_code == 0, result.output
        assert "Bea owes Ana $5.00" in result.output

        result = invoke("report", "--period", "all")
        assert result.exit_code == 0, result.output

        rent = next(e for e in list_expenses(couple_id, get_db_path()) if e.description == "Rent")
        assert rent.date == datetime(2025, 3, 1, 8, 0)
        assert rent.date.tzinfo is None

    def test_rejects_amount_too_large_to_store(self) -> None:
        linked_couple()

        result = invoke("add", "Yacht", "1e20")

        assert result.exit_code == 1
        assert "too large" in result.output

    def test_rejects_unknown_period(self) -> None:
        linked_couple()

        result = invoke("list", "--period", "fortnight")

        assert result.exit_code == 2
        assert "Invalid value" in result.output
