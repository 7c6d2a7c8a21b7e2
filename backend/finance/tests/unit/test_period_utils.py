from datetime import date
from unittest.mock import patch

import pytest
from django.core.exceptions import ValidationError

from finance.exceptions import InvalidPeriodError
from finance.utils.period_utils import (current_month_year, month_date_range,
                                        month_year_for, parse_month_year)


class TestParseMonthYear:
    def test_valid_value(self):
        assert parse_month_year("2024-03") == (2024, 3)

    @pytest.mark.parametrize(
        "value",
        ["03-2024", "2024-3", "2024-13", "2024-00", "2024/03", "", " 2024-03", "2024-03\n", None, 202403],
    )
    def test_invalid_values_raise(self, value):
        with pytest.raises(InvalidPeriodError):
            parse_month_year(value)

    def test_invalid_period_is_a_validation_error(self):
        with pytest.raises(ValidationError) as exc_info:
            parse_month_year("March")
        assert exc_info.value.code == "invalid_period"


class TestMonthDateRange:
    @pytest.mark.parametrize(
        "month_year, first, last",
        [
            ("2024-02", date(2024, 2, 1), date(2024, 2, 29)),
            ("2023-02", date(2023, 2, 1), date(2023, 2, 28)),
            ("2024-04", date(2024, 4, 1), date(2024, 4, 30)),
            ("2024-12", date(2024, 12, 1), date(2024, 12, 31)),
            ("1900-02", date(1900, 2, 1), date(1900, 2, 28)),
            ("2000-02", date(2000, 2, 1), date(2000, 2, 29)),
        ],
    )
    def test_window_covers_whole_month(self, month_year, first, last):
        assert month_date_range(month_year) == (first, last)


def test_month_year_for_date():
    assert month_year_for(date(2024, 2, 29)) == "2024-02"


def test_current_month_year_uses_local_date():
    with patch("finance.utils.period_utils.timezone.localdate", return_value=date(2025, 7, 31)):
        assert current_month_year() == "2025-07"
