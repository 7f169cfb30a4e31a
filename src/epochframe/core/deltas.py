"""Exact signed durations with sub-second precision.

A :class:`Delta` stores an integer count of whole seconds and a non-negative
floating-point fraction of a second. Keeping the two parts apart preserves
femtosecond resolution across decades, where a single float would only
resolve about a tenth of a microsecond.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from fractions import Fraction

from epochframe.utils.constants import (
    DAYS_PER_JULIAN_CENTURY,
    J2000_JD,
    SECONDS_PER_DAY,
    SECONDS_PER_HOUR,
    SECONDS_PER_JULIAN_CENTURY,
    SECONDS_PER_JULIAN_YEAR,
    SECONDS_PER_MINUTE,
)


@dataclass(frozen=True, order=True)
class Delta:
    """A signed duration.

    Attributes:
        seconds: Whole seconds, floor of the duration.
        subsecond: Fraction of a second in [0, 1).
    """

    seconds: int = 0
    subsecond: float = 0.0

    def __post_init__(self) -> None:
        if not math.isfinite(self.subsecond) or not 0.0 <= self.subsecond < 1.0:
            raise ValueError(f"Subsecond must lie in [0, 1), got {self.subsecond!r}")

    @classmethod
    def _normalized(cls, seconds: int, subsecond: float) -> Delta:
        if not math.isfinite(subsecond):
            raise ValueError(f"Non-finite duration: {subsecond!r}")
        carry = math.floor(subsecond)
        seconds += carry
        subsecond -= carry
        if subsecond >= 1.0:
            # -1e-17 + 1.0 rounds to exactly 1.0
            seconds += 1
            subsecond = 0.0
        return cls(int(seconds), float(subsecond))

    @classmethod
    def from_seconds(cls, value: float) -> Delta:
        """Create a duration from (decimal) seconds.

        Raises:
            ValueError: If ``value`` is NaN or infinite.
        """
        if isinstance(value, int):
            return cls(value, 0.0)
        if not math.isfinite(value):
            raise ValueError(f"Non-finite duration: {value!r}")
        whole = math.floor(value)
        return cls._normalized(int(whole), value - whole)

    @classmethod
    def from_seconds_and_subsecond(cls, seconds: int, subsecond: float) -> Delta:
        """Create a duration from whole seconds and an unnormalized fraction."""
        return cls._normalized(seconds, subsecond)

    @classmethod
    def from_minutes(cls, value: float) -> Delta:
        return cls.from_seconds(value * SECONDS_PER_MINUTE)

    @classmethod
    def from_hours(cls, value: float) -> Delta:
        return cls.from_seconds(value * SECONDS_PER_HOUR)

    @classmethod
    def from_days(cls, value: float) -> Delta:
        return cls.from_seconds(value * SECONDS_PER_DAY)

    @classmethod
    def from_julian_years(cls, value: float) -> Delta:
        return cls.from_seconds(value * SECONDS_PER_JULIAN_YEAR)

    @classmethod
    def from_julian_centuries(cls, value: float) -> Delta:
        return cls.from_seconds(value * SECONDS_PER_JULIAN_CENTURY)

    @classmethod
    def from_julian_date(cls, jd1: float, jd2: float = 0.0) -> Delta:
        """Create the duration since J2000 from a two-part Julian date.

        The day number is rebased to J2000 before scaling to seconds so that
        the large part stays exact and the fraction keeps its full precision.

        Args:
            jd1: Day-number part, e.g. 2451545.0.
            jd2: Day-fraction part.
        """
        days = jd1 - J2000_JD
        whole_days = math.floor(days)
        head = cls(int(whole_days) * SECONDS_PER_DAY, 0.0)
        return head + cls.from_seconds((days - whole_days) * SECONDS_PER_DAY) + cls.from_days(jd2)

    def to_julian_date(self) -> tuple[float, float]:
        """Return the two-part Julian date (day number, day fraction in [0, 1))."""
        days, rest = divmod(self.seconds, SECONDS_PER_DAY)
        return J2000_JD + days, (rest + self.subsecond) / SECONDS_PER_DAY

    def to_decimal_seconds(self) -> float:
        return self.seconds + self.subsecond

    def to_days(self) -> float:
        days, rest = divmod(self.seconds, SECONDS_PER_DAY)
        return days + (rest + self.subsecond) / SECONDS_PER_DAY

    def to_julian_centuries(self) -> float:
        return self.to_days() / DAYS_PER_JULIAN_CENTURY

    def is_negative(self) -> bool:
        return self.seconds < 0

    def is_zero(self) -> bool:
        return self.seconds == 0 and self.subsecond == 0.0

    def is_close(self, other: Delta, rel_tol: float = 1e-9, abs_tol: float = 1e-12) -> bool:
        """Check whether two durations agree within the given tolerances.

        The difference is formed exactly before it is compared, so the
        check stays meaningful for durations of many years.
        """
        diff = abs(self - other).to_decimal_seconds()
        scale = max(abs(self.to_decimal_seconds()), abs(other.to_decimal_seconds()))
        return diff <= max(rel_tol * scale, abs_tol)

    @staticmethod
    def _scaled(whole: Fraction, subsecond: float) -> Delta:
        # whole seconds are scaled exactly, only the remainder is rounded
        seconds = math.floor(whole)
        return Delta._normalized(seconds, float(whole - seconds) + subsecond)

    def __add__(self, other: object) -> Delta:
        if not isinstance(other, Delta):
            return NotImplemented
        return Delta._normalized(self.seconds + other.seconds, self.subsecond + other.subsecond)

    def __sub__(self, other: object) -> Delta:
        if not isinstance(other, Delta):
            return NotImplemented
        return Delta._normalized(self.seconds - other.seconds, self.subsecond - other.subsecond)

    def __neg__(self) -> Delta:
        if self.subsecond == 0.0:
            return Delta(-self.seconds, 0.0)
        return Delta._normalized(-self.seconds - 1, 1.0 - self.subsecond)

    def __abs__(self) -> Delta:
        return -self if self.is_negative() else self

    def __mul__(self, factor: object) -> Delta:
        if isinstance(factor, bool) or not isinstance(factor, (int, float)):
            return NotImplemented
        if isinstance(factor, int):
            return Delta(self.seconds * factor, 0.0) + Delta.from_seconds(self.subsecond * factor)
        if not math.isfinite(factor):
            raise ValueError(f"Non-finite factor: {factor!r}")
        return self._scaled(self.seconds * Fraction(factor), self.subsecond * factor)

    __rmul__ = __mul__

    def __truediv__(self, divisor: object) -> Delta:
        if isinstance(divisor, bool) or not isinstance(divisor, (int, float)):
            return NotImplemented
        if divisor == 0:
            raise ZeroDivisionError("Division of a duration by zero")
        if isinstance(divisor, int):
            whole, rest = divmod(self.seconds, divisor)
            return Delta(whole, 0.0) + Delta.from_seconds((rest + self.subsecond) / divisor)
        if not math.isfinite(divisor):
            raise ValueError(f"Non-finite divisor: {divisor!r}")
        return self._scaled(self.seconds / Fraction(divisor), self.subsecond / divisor)

    def __float__(self) -> float:
        return self.to_decimal_seconds()

    def __str__(self) -> str:
        return f"{self.to_decimal_seconds()} s"
