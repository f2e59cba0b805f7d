"""Unit tests for calendar derivations."""

from datetime import date

import pytest

from nik_parse.core.derivations import (
    Duration,
    add_months,
    age_on,
    birthday_countdown,
    calendar_difference,
    format_age,
    format_countdown,
    market_day,
    next_birthday,
    pasaran,
    zodiac_sign,
)


class TestCalendarDifference:
    """Tests for calendar_difference."""

    def test_simple(self):
        assert calendar_difference(date(1990, 9, 15), date(2026, 10, 19)) == Duration(36, 1, 4)

    def test_same_day(self):
        assert calendar_difference(date(2020, 5, 5), date(2020, 5, 5)).is_zero

    def test_start_after_end_is_zero(self):
        assert calendar_difference(date(2030, 1, 1), date(2026, 1, 1)) == Duration()

    def test_borrows_across_short_month(self):
        assert calendar_difference(date(2000, 1, 31), date(2000, 3, 1)) == Duration(0, 1, 1)

    def test_end_of_month_start(self):
        assert calendar_difference(date(2001, 1, 31), date(2001, 2, 28)) == Duration(0, 0, 28)

    def test_year_rollover(self):
        assert calendar_difference(date(2025, 12, 20), date(2026, 1, 5)) == Duration(0, 0, 16)


class TestAddMonths:
    def test_clamps_day(self):
        assert add_months(date(2001, 1, 31), 1) == date(2001, 2, 28)

    def test_crosses_year(self):
        assert add_months(date(2025, 11, 15), 3) == date(2026, 2, 15)


class TestAge:
    def test_age_before_birthday(self):
        assert age_on(date(1990, 9, 15), date(2026, 9, 14)) == Duration(35, 11, 30)

    def test_age_on_birthday(self):
        assert age_on(date(1990, 9, 15), date(2026, 9, 15)) == Duration(36, 0, 0)

    def test_future_birth_date(self):
        assert age_on(date(2030, 1, 1), date(2026, 10, 19)).is_zero

    def test_format(self):
        assert format_age(Duration(34, 2, 15)) == "34 Tahun 2 Bulan 15 Hari"


class TestBirthdayCountdown:
    """Tests for the next-birthday countdown."""

    def test_later_this_year(self):
        today = date(2026, 3, 1)
        assert next_birthday(date(1990, 9, 15), today) == date(2026, 9, 15)
        assert birthday_countdown(date(1990, 9, 15), today) == Duration(0, 6, 14)

    def test_already_passed_rolls_over(self):
        today = date(2026, 10, 19)
        assert next_birthday(date(1990, 9, 15), today) == date(2027, 9, 15)
        assert birthday_countdown(date(1990, 9, 15), today) == Duration(0, 10, 27)

    def test_birthday_today(self):
        assert birthday_countdown(date(1990, 10, 19), date(2026, 10, 19)).is_zero

    def test_tomorrow(self):
        assert birthday_countdown(date(1990, 10, 20), date(2026, 10, 19)) == Duration(0, 0, 1)

    def test_leap_day_in_common_year(self):
        assert next_birthday(date(2000, 2, 29), date(2026, 1, 1)) == date(2026, 2, 28)
        assert next_birthday(date(2000, 2, 29), date(2027, 3, 1)) == date(2028, 2, 29)

    def test_format(self):
        assert format_countdown(Duration(0, 10, 15)) == "10 bulan 15 hari lagi"
        assert format_countdown(Duration()) == "Hari ini"


class TestZodiac:
    """Tests for zodiac_sign."""

    def test_december_boundary(self):
        assert zodiac_sign(12, 21) == "Sagittarius"
        assert zodiac_sign(12, 22) == "Capricorn"

    def test_year_wrap(self):
        assert zodiac_sign(12, 31) == "Capricorn"
        assert zodiac_sign(1, 1) == "Capricorn"
        assert zodiac_sign(1, 19) == "Capricorn"
        assert zodiac_sign(1, 20) == "Aquarius"

    @pytest.mark.parametrize(
        "month,day,sign",
        [
            (2, 19, "Pisces"),
            (2, 29, "Pisces"),
            (3, 21, "Aries"),
            (4, 20, "Taurus"),
            (5, 21, "Gemini"),
            (6, 21, "Cancer"),
            (7, 23, "Leo"),
            (8, 23, "Virgo"),
            (9, 23, "Libra"),
            (10, 23, "Scorpio"),
            (11, 22, "Sagittarius"),
        ],
    )
    def test_sign_starts(self, month, day, sign):
        assert zodiac_sign(month, day) == sign

    def test_invalid_month(self):
        with pytest.raises(ValueError):
            zodiac_sign(13, 1)


class TestMarketDay:
    """Tests for the Javanese pasaran cycle."""

    def test_reference_date(self):
        assert market_day(date(1970, 1, 1)) == "Kamis Wage"

    def test_independence_day(self):
        # 17 August 1945 is remembered as Jumat Legi
        assert market_day(date(1945, 8, 17)) == "Jumat Legi"

    def test_cycle_repeats_every_five_days(self):
        start = date(1990, 9, 15)
        labels = [pasaran(date.fromordinal(start.toordinal() + i)) for i in range(10)]

        assert labels[:5] == labels[5:]
        assert sorted(labels[:5]) == sorted(["Legi", "Pahing", "Pon", "Wage", "Kliwon"])

    def test_sample_birth_date(self):
        assert market_day(date(1990, 9, 15)) == "Sabtu Legi"
