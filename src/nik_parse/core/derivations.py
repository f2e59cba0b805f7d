"""
Calendar Derivations

Facts derived from a birth date: age, next-birthday countdown, tropical
zodiac sign and the Javanese market day (weekday + pasaran). Every function
takes "today" explicitly so results are reproducible.
"""

import calendar
from dataclasses import dataclass
from datetime import date


WEEKDAYS = ("Senin", "Selasa", "Rabu", "Kamis", "Jumat", "Sabtu", "Minggu")

PASARAN = ("Legi", "Pahing", "Pon", "Wage", "Kliwon")

# 1 January 1970 (a Thursday) fell on Wage
PASARAN_REFERENCE_DATE = date(1970, 1, 1)
PASARAN_REFERENCE_INDEX = 3

# (sign, last month, last day): a date belongs to the first sign whose
# end it does not pass
ZODIAC_TABLE = (
    ("Capricorn", 1, 19),
    ("Aquarius", 2, 18),
    ("Pisces", 3, 20),
    ("Aries", 4, 19),
    ("Taurus", 5, 20),
    ("Gemini", 6, 20),
    ("Cancer", 7, 22),
    ("Leo", 8, 22),
    ("Virgo", 9, 22),
    ("Libra", 10, 22),
    ("Scorpio", 11, 21),
    ("Sagittarius", 12, 21),
    ("Capricorn", 12, 31),
)


@dataclass(frozen=True)
class Duration:
    """A calendar span in whole years, months and days."""

    years: int = 0
    months: int = 0
    days: int = 0

    @property
    def is_zero(self) -> bool:
        return self.years == 0 and self.months == 0 and self.days == 0


def add_months(start: date, months: int) -> date:
    """Shift a date by whole months, clamping the day to the month's length."""
    index = start.year * 12 + start.month - 1 + months
    year, month = divmod(index, 12)
    month += 1
    day = min(start.day, calendar.monthrange(year, month)[1])
    return date(year, month, day)


def calendar_difference(start: date, end: date) -> Duration:
    """Whole years, months and days from start to end.

    Counts complete months first, then the days left over from the last
    month boundary. A start after end yields a zero duration.

    Example:
        >>> calendar_difference(date(1990, 9, 15), date(2026, 10, 19))
        Duration(years=36, months=1, days=4)
    """
    if start >= end:
        return Duration()

    months = (end.year - start.year) * 12 + end.month - start.month
    if end.day < start.day:
        months -= 1

    days = (end - add_months(start, months)).days
    years, months = divmod(months, 12)
    return Duration(years=years, months=months, days=days)


def _anniversary(birth_date: date, year: int) -> date:
    """Birthday in the given year; 29 February falls back to the 28th."""
    return add_months(birth_date, (year - birth_date.year) * 12)


def age_on(birth_date: date, today: date) -> Duration:
    """Age in whole years, months and days."""
    return calendar_difference(birth_date, today)


def next_birthday(birth_date: date, today: date) -> date:
    """Date of the next birthday on or after today."""
    upcoming = _anniversary(birth_date, today.year)
    if upcoming < today:
        upcoming = _anniversary(birth_date, today.year + 1)
    return upcoming


def birthday_countdown(birth_date: date, today: date) -> Duration:
    """Months and days until the next birthday; zero on the birthday itself."""
    return calendar_difference(today, next_birthday(birth_date, today))


def zodiac_sign(month: int, day: int) -> str:
    """Tropical zodiac sign for a month/day.

    Example:
        >>> zodiac_sign(12, 21), zodiac_sign(12, 22)
        ('Sagittarius', 'Capricorn')
    """
    for sign, last_month, last_day in ZODIAC_TABLE:
        if (month, day) <= (last_month, last_day):
            return sign
    raise ValueError(f"Invalid month/day: {month}/{day}")


def pasaran(day: date) -> str:
    """Javanese five-day market label for a date."""
    offset = (day - PASARAN_REFERENCE_DATE).days
    return PASARAN[(PASARAN_REFERENCE_INDEX + offset) % len(PASARAN)]


def market_day(day: date) -> str:
    """Weekday name combined with the pasaran label, e.g. "Kamis Wage"."""
    return f"{WEEKDAYS[day.weekday()]} {pasaran(day)}"


def format_age(duration: Duration) -> str:
    return f"{duration.years} Tahun {duration.months} Bulan {duration.days} Hari"


def format_countdown(duration: Duration) -> str:
    if duration.is_zero:
        return "Hari ini"
    months = duration.years * 12 + duration.months
    return f"{months} bulan {duration.days} hari lagi"
