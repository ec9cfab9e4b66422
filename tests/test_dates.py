"""Tests for juntos.dates pure functions."""

from datetime import datetime

import pytest

from juntos.dates import period_range
from juntos.domain.models import Period


class TestPeriodRange:
    """Tests for period_range."""

    def test_this_week_starts_monday(self) -> None:
        """Should start the week on Monday at midnight."""
        since, until, label = period_range(Period("this-week"), datetime(2025, 3, 12, 18, 30))

        assert since == datetime(2025, 3, 10)
        assert until == datetime(2025, 3, 17)
        assert label == "Week of 10 March 2025"

    def test_this_week_on_monday(self) -> None:
        """Monday itself should start its own week."""
        since, _, _ = period_range(Period("this-week"), datetime(2025, 3, 10, 0, 0, 1))

        assert since == datetime(2025, 3, 10)

    def test_this_month(self) -> None:
        """Should cover the whole current month."""
        since, until, label = period_range(Period("this-month"), datetime(2025, 2, 15, 12, 0))

        assert since == datetime(2025, 2, 1)
        assert until == datetime(2025, 3, 1)
        assert label == "February 2025"

    def test_this_month_december(self) -> None:
        """Should roll the end of December into the next year."""
        _, until, _ = period_range(Period("this-month"), datetime(2025, 12, 31, 23, 59))

        assert until == datetime(2026, 1, 1)

    def test_last_month_crosses_year(self) -> None:
        """Last month in January should be December of the previous year."""
        since, until, label = period_range(Period("last-month"), datetime(2025, 1, 31, 10, 0))

        assert since == datetime(2024, 12, 1)
        assert until == datetime(2025, 1, 1)
        assert label == "December 2024"

    def test_this_year(self) -> None:
        """Should cover the calendar year."""
        since, until, label = period_range(Period("this-year"), datetime(2025, 7, 4, 9, 0))

        assert since == datetime(2025, 1, 1)
        assert until == datetime(2026, 1, 1)
        assert label == "2025"

    def test_all_time_is_unbounded(self) -> None:
        """Should return no bounds for all time."""
        assert period_range(Period("all"), datetime(2025, 7, 4)) == (None, None, "All Time")

    def test_unknown_period_raises_valueerror(self) -> None:
        """Should raise ValueError for unknown periods."""
        with pytest.raises(ValueError, match="Unknown period"):
            period_range(Period("fortnight"), datetime(2025, 7, 4))
