from datetime import date

import pytest

from src.hr_payroll.hr_payroll.core.exceptions import ValidationError
from src.hr_payroll.hr_payroll.payroll.model import PayPeriod


def test_weekday_count_and_standard_hours():
    april = PayPeriod.parse("April", 2025)
    assert april.weekday_count == 22
    assert april.standard_hours(8) == 176

    assert PayPeriod.parse("March", 2025).weekday_count == 21
    assert PayPeriod.parse("February", 2025).weekday_count == 20


def test_payment_date_is_last_day_of_month():
    assert PayPeriod.parse("February", 2024).payment_date == date(2024, 2, 29)
    assert PayPeriod.parse("April", 2025).payment_date == date(2025, 4, 30)


def test_month_names_are_normalised():
    assert PayPeriod.parse("march", "2025") == PayPeriod(month="March", year=2025)
    assert PayPeriod.parse("Mars", 2025).month == "March"
    assert PayPeriod.parse("février", 2025).month == "February"


def test_bounds_cover_the_whole_month():
    p = PayPeriod.parse("June", 2025)
    assert (p.start, p.end) == (date(2025, 6, 1), date(2025, 6, 30))


@pytest.mark.parametrize("month,year", [("Smarch", 2025), ("March", "abc"), ("", 2025)])
def test_invalid_period_is_rejected(month, year):
    with pytest.raises(ValidationError):
        PayPeriod.parse(month, year)
