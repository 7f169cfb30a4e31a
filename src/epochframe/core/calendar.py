"""Calendar dates, times of day and ISO-8601 parsing.

Dates use the proleptic Gregorian calendar. Day numbers count days from
2000-01-01, so J2000 (2000-01-01T12:00) sits half a day after day zero.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from epochframe.core.errors import InvalidDateError, InvalidTimeError
from epochframe.utils.constants import SECONDS_PER_DAY, SECONDS_PER_HOUR, SECONDS_PER_MINUTE

_DAYS_IN_MONTH = (31, 28, 31, 30, 31, 30, 31, 31, 30, 31, 30, 31)
_UNIX_TO_J2000_DAYS = 10957

_ISO_PATTERN = re.compile(
    r"^(?P<year>[+-]?\d{4,})-(?P<month>\d{2})-(?P<day>\d{2})"
    r"(?:[T ](?P<hour>\d{2}):(?P<minute>\d{2}):(?P<second>\d{2})(?P<fraction>\.\d+)?)?"
    r"(?:\s+(?P<scale>[A-Za-z0-9]+))?$"
)


def is_leap_year(year: int) -> bool:
    return year % 4 == 0 and (year % 100 != 0 or year % 400 == 0)


def days_in_month(year: int, month: int) -> int:
    """Number of days in ``month`` of ``year``.

    Raises:
        InvalidDateError: If the month is outside [1, 12].
    """
    if not 1 <= month <= 12:
        raise InvalidDateError(f"Invalid month: {month}")
    if month == 2 and is_leap_year(year):
        return 29
    return _DAYS_IN_MONTH[month - 1]


def _days_from_civil(year: int, month: int, day: int) -> int:
    # Days since 1970-01-01 (H. Hinnant's civil calendar algorithm).
    year -= month <= 2
    era = year // 400
    yoe = year - era * 400
    doy = (153 * (month + (-3 if month > 2 else 9)) + 2) // 5 + day - 1
    doe = yoe * 365 + yoe // 4 - yoe // 100 + doy
    return era * 146097 + doe - 719468


def _civil_from_days(days: int) -> tuple[int, int, int]:
    days += 719468
    era = days // 146097
    doe = days - era * 146097
    yoe = (doe - doe // 1460 + doe // 36524 - doe // 146096) // 365
    doy = doe - (365 * yoe + yoe // 4 - yoe // 100)
    mp = (5 * doy + 2) // 153
    day = doy - (153 * mp + 2) // 5 + 1
    month = mp + (3 if mp < 10 else -9)
    year = yoe + era * 400 + (month <= 2)
    return year, month, day


@dataclass(frozen=True, order=True)
class Date:
    """A proleptic Gregorian calendar date.

    Attributes:
        year: Astronomical year (year 0 exists).
        month: Month in [1, 12].
        day: Day of month.

    Raises:
        InvalidDateError: If the month or day does not exist.
    """

    year: int
    month: int
    day: int

    def __post_init__(self) -> None:
        length = days_in_month(self.year, self.month)
        if not 1 <= self.day <= length:
            raise InvalidDateError(
                f"Invalid day {self.day} for {self.year:04d}-{self.month:02d} (1-{length})"
            )

    @classmethod
    def from_day_number(cls, days: int) -> Date:
        """Create a date from the number of days since 2000-01-01."""
        return cls(*_civil_from_days(days + _UNIX_TO_J2000_DAYS))

    @classmethod
    def from_iso(cls, text: str) -> Date:
        date, _, _ = parse_iso(text)
        return date

    def day_number(self) -> int:
        """Days since 2000-01-01."""
        return _days_from_civil(self.year, self.month, self.day) - _UNIX_TO_J2000_DAYS

    def day_of_year(self) -> int:
        return self.day_number() - Date(self.year, 1, 1).day_number() + 1

    def __str__(self) -> str:
        return f"{self.year:04d}-{self.month:02d}-{self.day:02d}"


@dataclass(frozen=True, order=True)
class TimeOfDay:
    """A time of day with sub-second precision.

    Second value 60 is accepted here; whether it denotes a real leap second
    is decided by the UTC layer.

    Attributes:
        hour: Hour in [0, 23].
        minute: Minute in [0, 59].
        second: Second in [0, 60].
        subsecond: Fraction of a second in [0, 1).

    Raises:
        InvalidTimeError: If any field is out of range.
    """

    hour: int = 0
    minute: int = 0
    second: int = 0
    subsecond: float = 0.0

    def __post_init__(self) -> None:
        if not 0 <= self.hour <= 23:
            raise InvalidTimeError(f"Invalid hour: {self.hour}")
        if not 0 <= self.minute <= 59:
            raise InvalidTimeError(f"Invalid minute: {self.minute}")
        if not 0 <= self.second <= 60:
            raise InvalidTimeError(f"Invalid second: {self.second}")
        if not 0.0 <= self.subsecond < 1.0:
            raise InvalidTimeError(f"Invalid subsecond: {self.subsecond}")

    @classmethod
    def from_seconds_of_day(cls, seconds: int, subsecond: float = 0.0) -> TimeOfDay:
        """Create a time of day from whole seconds since midnight in [0, 86400)."""
        if not 0 <= seconds < SECONDS_PER_DAY:
            raise InvalidTimeError(f"Seconds of day out of range: {seconds}")
        hour, rest = divmod(seconds, SECONDS_PER_HOUR)
        minute, second = divmod(rest, SECONDS_PER_MINUTE)
        return cls(hour, minute, second, subsecond)

    def seconds_of_day(self) -> int:
        return self.hour * SECONDS_PER_HOUR + self.minute * SECONDS_PER_MINUTE + self.second

    def __str__(self) -> str:
        # Truncate rather than round so 59.9999 never prints as 60.000
        millis = min(int(self.subsecond * 1000), 999)
        return f"{self.hour:02d}:{self.minute:02d}:{self.second:02d}.{millis:03d}"


def parse_iso(text: str) -> tuple[Date, TimeOfDay, str | None]:
    """Parse an ISO-8601 date or date-time with an optional scale suffix.

    Accepted forms are ``2000-01-01``, ``2000-01-01T12:00:00``,
    ``2000-01-01T12:00:00.123456`` and any of these followed by whitespace
    and a scale abbreviation, e.g. ``2000-01-01T12:00:00 TDB``.

    Args:
        text: The text to parse.

    Returns:
        Tuple of (date, time of day, scale abbreviation or None).

    Raises:
        InvalidDateError: If the text is not ISO-8601 or the date is invalid.
        InvalidTimeError: If the time fields are out of range.
    """
    match = _ISO_PATTERN.match(text.strip())
    if match is None:
        raise InvalidDateError(f"Invalid ISO-8601 string: {text!r}")
    date = Date(int(match["year"]), int(match["month"]), int(match["day"]))
    if match["hour"] is None:
        return date, TimeOfDay(), match["scale"]
    fraction = match["fraction"]
    subsecond = float("0" + fraction) if fraction else 0.0
    time = TimeOfDay(int(match["hour"]), int(match["minute"]), int(match["second"]), subsecond)
    return date, time, match["scale"]
