"""Time points on continuous time scales."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from epochframe.core.calendar import Date, TimeOfDay, parse_iso
from epochframe.core.deltas import Delta
from epochframe.core.errors import InvalidTimeError, MismatchedScaleError
from epochframe.core.scales import TimeScale
from epochframe.utils.constants import MJD_OFFSET, SECONDS_PER_DAY, SECONDS_PER_HALF_DAY

if TYPE_CHECKING:
    from epochframe.core.conversions import Ut1Provider
    from epochframe.core.leap_seconds import LeapSecondsProvider
    from epochframe.core.utc import UTC


@dataclass(frozen=True)
class Instant:
    """A point in time on a continuous time scale.

    Instants on different scales are never mixed implicitly: subtraction and
    ordering across scales raise :class:`MismatchedScaleError`. Equality is
    structural, so equal deltas on different scales compare unequal.

    Attributes:
        scale: The time scale.
        delta: Duration since J2000 (2000-01-01T12:00:00) of that scale.
    """

    scale: TimeScale
    delta: Delta

    @classmethod
    def j2000(cls, scale: TimeScale) -> Instant:
        return cls(scale, Delta())

    @classmethod
    def from_seconds(cls, scale: TimeScale, seconds: float) -> Instant:
        """Create an instant from (decimal) seconds since J2000."""
        return cls(scale, Delta.from_seconds(seconds))

    @classmethod
    def from_calendar(
        cls,
        scale: TimeScale,
        year: int,
        month: int,
        day: int,
        hour: int = 0,
        minute: int = 0,
        second: int = 0,
        subsecond: float = 0.0,
    ) -> Instant:
        """Create an instant from calendar fields.

        Raises:
            InvalidDateError: If the date does not exist.
            InvalidTimeError: If the time of day is out of range.
        """
        return cls.from_date_time(scale, Date(year, month, day), TimeOfDay(hour, minute, second, subsecond))

    @classmethod
    def from_date_time(cls, scale: TimeScale, date: Date, time: TimeOfDay | None = None) -> Instant:
        """Create an instant from a date and an optional time of day.

        Raises:
            InvalidTimeError: If ``time`` has second value 60, which only
                exists in UTC.
        """
        time = time or TimeOfDay()
        if time.second == 60:
            raise InvalidTimeError(f"Second 60 is only valid in UTC, not {scale}")
        seconds = date.day_number() * SECONDS_PER_DAY + time.seconds_of_day() - SECONDS_PER_HALF_DAY
        return cls(scale, Delta(seconds, time.subsecond))

    @classmethod
    def from_julian_date(cls, scale: TimeScale, jd1: float, jd2: float = 0.0) -> Instant:
        """Create an instant from a (two-part) Julian date."""
        return cls(scale, Delta.from_julian_date(jd1, jd2))

    @classmethod
    def from_modified_julian_date(cls, scale: TimeScale, mjd: float) -> Instant:
        return cls(scale, Delta.from_julian_date(MJD_OFFSET, mjd))

    @classmethod
    def from_iso(cls, text: str, scale: TimeScale | None = None) -> Instant:
        """Parse ISO-8601 text such as ``"2000-01-01T12:00:00.000 TT"``.

        The scale may be given as a suffix of the text or as an argument;
        TAI is assumed when neither is present.

        Raises:
            InvalidDateError: If the text cannot be parsed.
            MismatchedScaleError: If the suffix and the argument disagree, or
                the suffix is UTC.
        """
        date, time, suffix = parse_iso(text)
        if suffix is not None:
            if suffix.strip().upper() == "UTC":
                raise MismatchedScaleError(f"{text!r} is a UTC epoch, parse it with UTC.from_iso")
            parsed = TimeScale.from_name(suffix)
            if scale is not None and parsed is not scale:
                raise MismatchedScaleError(f"{text!r} is on {parsed}, expected {scale}")
            scale = parsed
        return cls.from_date_time(scale or TimeScale.TAI, date, time)

    def _check_scale(self, other: Instant) -> None:
        if self.scale is not other.scale:
            raise MismatchedScaleError(f"Cannot combine {self.scale} and {other.scale} instants")

    def seconds_since_j2000(self) -> float:
        return self.delta.to_decimal_seconds()

    def days_since_j2000(self) -> float:
        return self.delta.to_days()

    def centuries_since_j2000(self) -> float:
        return self.delta.to_julian_centuries()

    def julian_date(self) -> tuple[float, float]:
        """Two-part Julian date (day number, day fraction)."""
        return self.delta.to_julian_date()

    def modified_julian_date(self) -> float:
        jd1, jd2 = self.julian_date()
        return (jd1 - MJD_OFFSET) + jd2

    def date(self) -> Date:
        days = (self.delta.seconds + SECONDS_PER_HALF_DAY) // SECONDS_PER_DAY
        return Date.from_day_number(days)

    def time_of_day(self) -> TimeOfDay:
        seconds = (self.delta.seconds + SECONDS_PER_HALF_DAY) % SECONDS_PER_DAY
        return TimeOfDay.from_seconds_of_day(seconds, self.delta.subsecond)

    def with_scale(self, scale: TimeScale) -> Instant:
        """Reinterpret the same delta on another scale (no conversion)."""
        return Instant(scale, self.delta)

    def to_scale(self, scale: TimeScale, provider: Ut1Provider | None = None) -> Instant:
        """Convert to another scale, see :func:`epochframe.core.conversions.convert`."""
        from epochframe.core.conversions import convert

        return convert(self, scale, provider)

    def to_utc(
        self,
        leap_seconds: LeapSecondsProvider | None = None,
        provider: Ut1Provider | None = None,
    ) -> UTC:
        """Convert to the civil UTC representation."""
        from epochframe.core.utc import UTC

        return UTC.from_tai(self.to_scale(TimeScale.TAI, provider), leap_seconds)

    def is_close(self, other: Instant, rel_tol: float = 0.0, abs_tol: float = 1e-12) -> bool:
        """Check closeness; ``rel_tol`` is relative to the seconds since J2000."""
        self._check_scale(other)
        return self.delta.is_close(other.delta, rel_tol, abs_tol)

    def __add__(self, other: object) -> Instant:
        if not isinstance(other, Delta):
            return NotImplemented
        return Instant(self.scale, self.delta + other)

    def __sub__(self, other: object):
        if isinstance(other, Delta):
            return Instant(self.scale, self.delta - other)
        if isinstance(other, Instant):
            self._check_scale(other)
            return self.delta - other.delta
        return NotImplemented

    def __lt__(self, other: Instant) -> bool:
        self._check_scale(other)
        return self.delta < other.delta

    def __le__(self, other: Instant) -> bool:
        self._check_scale(other)
        return self.delta <= other.delta

    def __gt__(self, other: Instant) -> bool:
        self._check_scale(other)
        return self.delta > other.delta

    def __ge__(self, other: Instant) -> bool:
        self._check_scale(other)
        return self.delta >= other.delta

    def to_iso(self) -> str:
        return f"{self.date()}T{self.time_of_day()}"

    def __str__(self) -> str:
        return f"{self.to_iso()} {self.scale}"
