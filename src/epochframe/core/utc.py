"""Coordinated Universal Time as a civil, leap-second aware representation."""

from __future__ import annotations

from dataclasses import dataclass

from epochframe.core.calendar import Date, TimeOfDay, parse_iso
from epochframe.core.conversions import Ut1Provider, convert
from epochframe.core.deltas import Delta
from epochframe.core.errors import InvalidTimeError, MismatchedScaleError
from epochframe.core.instant import Instant
from epochframe.core.leap_seconds import DEFAULT_LEAP_SECONDS, LeapSecondsProvider
from epochframe.core.scales import TimeScale
from epochframe.utils.constants import SECONDS_PER_DAY, SECONDS_PER_HALF_DAY


@dataclass(frozen=True, order=True)
class UTC:
    """A UTC date and time of day.

    UTC is not a continuous scale: during an inserted leap second the second
    field reads 60. Such values are only accepted on dates for which the
    leap-second provider records an insertion.

    Attributes:
        date: Calendar date.
        time: Time of day; ``time.second`` may be 60.
    """

    date: Date
    time: TimeOfDay

    @classmethod
    def from_calendar(
        cls,
        year: int,
        month: int,
        day: int,
        hour: int = 0,
        minute: int = 0,
        second: int = 0,
        subsecond: float = 0.0,
        leap_seconds: LeapSecondsProvider | None = None,
    ) -> UTC:
        """Create a validated UTC value.

        Raises:
            InvalidDateError: If the date does not exist.
            InvalidTimeError: If the time is out of range, or second 60 is
                requested on a day without a leap second.
        """
        return cls.build(Date(year, month, day), TimeOfDay(hour, minute, second, subsecond), leap_seconds)

    @classmethod
    def build(cls, date: Date, time: TimeOfDay, leap_seconds: LeapSecondsProvider | None = None) -> UTC:
        if time.second == 60:
            provider = leap_seconds or DEFAULT_LEAP_SECONDS
            if (time.hour, time.minute) != (23, 59) or not provider.is_leap_second_date(date):
                raise InvalidTimeError(f"{date}T{time} is not a leap second")
        return cls(date, time)

    @classmethod
    def from_iso(cls, text: str, leap_seconds: LeapSecondsProvider | None = None) -> UTC:
        """Parse ISO-8601 text; a trailing scale suffix must read ``UTC``."""
        date, time, suffix = parse_iso(text)
        if suffix is not None and suffix.upper() != "UTC":
            raise MismatchedScaleError(f"Expected a UTC timestamp, got {suffix!r}")
        return cls.build(date, time, leap_seconds)

    @classmethod
    def from_tai(cls, tai: Instant, leap_seconds: LeapSecondsProvider | None = None) -> UTC:
        """Convert a TAI instant to UTC.

        Raises:
            MismatchedScaleError: If ``tai`` is not on TAI.
            OutOfRangeError: Before 1960-01-01.
        """
        if tai.scale is not TimeScale.TAI:
            raise MismatchedScaleError(f"Expected a TAI instant, got {tai.scale}")
        provider = leap_seconds or DEFAULT_LEAP_SECONDS
        delta = tai.delta + provider.delta_utc_tai(tai.delta)
        days, seconds = divmod(delta.seconds + SECONDS_PER_HALF_DAY, SECONDS_PER_DAY)
        date = Date.from_day_number(days)
        time = TimeOfDay.from_seconds_of_day(seconds, delta.subsecond)
        if provider.is_leap_second(tai.delta):
            time = TimeOfDay(time.hour, time.minute, time.second + 1, time.subsecond)
        return cls(date, time)

    def to_delta(self) -> Delta:
        """Seconds since J2000 counting every day as 86400 s.

        23:59:60 therefore maps to the same value as 00:00:00 of the next day.
        """
        seconds = self.date.day_number() * SECONDS_PER_DAY + self.time.seconds_of_day() - SECONDS_PER_HALF_DAY
        return Delta(seconds, self.time.subsecond)

    def to_tai(self, leap_seconds: LeapSecondsProvider | None = None) -> Instant:
        """Convert to TAI.

        Raises:
            OutOfRangeError: Before 1960-01-01.
        """
        provider = leap_seconds or DEFAULT_LEAP_SECONDS
        delta = self.to_delta()
        offset = provider.delta_tai_utc(delta, leap_second=self.time.second == 60)
        return Instant(TimeScale.TAI, delta + offset)

    def to_scale(
        self,
        scale: TimeScale,
        leap_seconds: LeapSecondsProvider | None = None,
        provider: Ut1Provider | None = None,
    ) -> Instant:
        """Convert to any continuous scale via TAI."""
        return convert(self.to_tai(leap_seconds), scale, provider)

    def __str__(self) -> str:
        return f"{self.date}T{self.time} UTC"
