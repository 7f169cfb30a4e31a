"""Leap-second bookkeeping between TAI and UTC.

From 1972 onwards TAI - UTC is an integer number of seconds that changes only
at inserted leap seconds. Between 1960 and 1972 UTC ran at a slightly
different rate than TAI and the offset is given by a piecewise linear drift
table, which is applied automatically for dates before the step table.
"""

from __future__ import annotations

import bisect
import logging
from typing import Iterable, Protocol, Sequence

from epochframe.core.calendar import Date
from epochframe.core.deltas import Delta
from epochframe.core.errors import LeapTableParseError, OutOfRangeError
from epochframe.utils.constants import (
    J2000_MJD,
    SECONDS_PER_DAY,
    SECONDS_PER_HALF_DAY,
    UTC_EARLIEST_MJD,
)

logger = logging.getLogger(__name__)

# (UTC date of the step, TAI - UTC from that date on)
_BUILTIN_ENTRIES: tuple[tuple[Date, int], ...] = (
    (Date(1972, 1, 1), 10),
    (Date(1972, 7, 1), 11),
    (Date(1973, 1, 1), 12),
    (Date(1974, 1, 1), 13),
    (Date(1975, 1, 1), 14),
    (Date(1976, 1, 1), 15),
    (Date(1977, 1, 1), 16),
    (Date(1978, 1, 1), 17),
    (Date(1979, 1, 1), 18),
    (Date(1980, 1, 1), 19),
    (Date(1981, 7, 1), 20),
    (Date(1982, 7, 1), 21),
    (Date(1983, 7, 1), 22),
    (Date(1985, 7, 1), 23),
    (Date(1988, 1, 1), 24),
    (Date(1990, 1, 1), 25),
    (Date(1991, 1, 1), 26),
    (Date(1992, 7, 1), 27),
    (Date(1993, 7, 1), 28),
    (Date(1994, 7, 1), 29),
    (Date(1996, 1, 1), 30),
    (Date(1997, 7, 1), 31),
    (Date(1999, 1, 1), 32),
    (Date(2006, 1, 1), 33),
    (Date(2009, 1, 1), 34),
    (Date(2012, 7, 1), 35),
    (Date(2015, 7, 1), 36),
    (Date(2017, 1, 1), 37),
)

# 1960-1972 drift rule: TAI - UTC = offset + (MJD - drift epoch) * rate
_DRIFT_EPOCHS_MJD = (
    36934, 37300, 37512, 37665, 38334, 38395, 38486,
    38639, 38761, 38820, 38942, 39004, 39126, 39887,
)
_DRIFT_OFFSETS = (
    1.417818, 1.422818, 1.372818, 1.845858, 1.945858, 3.240130, 3.340130,
    3.440130, 3.540130, 3.640130, 3.740130, 3.840130, 4.313170, 4.213170,
)
_DRIFT_REFERENCE_MJD = (
    37300, 37300, 37300, 37665, 37665, 38761, 38761,
    38761, 38761, 38761, 38761, 38761, 39126, 39126,
)
_DRIFT_RATES = (
    0.0012960, 0.0012960, 0.0012960, 0.0011232, 0.0011232, 0.0012960, 0.0012960,
    0.0012960, 0.0012960, 0.0012960, 0.0012960, 0.0012960, 0.0025920, 0.0025920,
)


class LeapSecondsProvider(Protocol):
    """Source of TAI - UTC offsets."""

    def delta_tai_utc(self, utc: Delta, leap_second: bool = False) -> Delta:
        ...

    def delta_utc_tai(self, tai: Delta) -> Delta:
        ...

    def is_leap_second_date(self, date: Date) -> bool:
        ...

    def is_leap_second(self, tai: Delta) -> bool:
        ...


def _mjd(seconds: float) -> float:
    return seconds / SECONDS_PER_DAY + J2000_MJD


def _drift_index(mjd: float) -> int:
    if mjd < UTC_EARLIEST_MJD:
        raise OutOfRangeError(f"UTC is undefined before 1960-01-01 (MJD {mjd:.3f})")
    return bisect.bisect_right(_DRIFT_EPOCHS_MJD, int(mjd // 1)) - 1


def pre_1972_delta_tai_utc(utc: Delta) -> Delta:
    """TAI - UTC for a UTC instant between 1960 and 1972.

    Raises:
        OutOfRangeError: Before 1960-01-01.
    """
    mjd = _mjd(utc.to_decimal_seconds())
    i = _drift_index(mjd)
    return Delta.from_seconds(_DRIFT_OFFSETS[i] + (mjd - _DRIFT_REFERENCE_MJD[i]) * _DRIFT_RATES[i])


def pre_1972_delta_utc_tai(tai: Delta) -> Delta:
    """UTC - TAI for a TAI instant between 1960 and 1972.

    The drift rates are defined per UTC day, so they are rescaled to the
    TAI time line before use.

    Raises:
        OutOfRangeError: Before 1960-01-01.
    """
    mjd = _mjd(tai.to_decimal_seconds())
    i = _drift_index(mjd)
    rate_utc = _DRIFT_RATES[i] / SECONDS_PER_DAY
    rate_tai = rate_utc / (1.0 + rate_utc) * SECONDS_PER_DAY
    offset = _DRIFT_OFFSETS[i]
    dt = mjd - _DRIFT_REFERENCE_MJD[i] - offset / SECONDS_PER_DAY
    return -Delta.from_seconds(offset + dt * rate_tai)


class LeapSecondsTable:
    """An immutable TAI - UTC step table.

    Instances are never modified; :meth:`with_entry` returns a new table.
    Dates before the first entry fall back to the 1960-1972 drift rule and
    dates after the last entry keep the last known offset.

    Args:
        entries: (UTC date, TAI - UTC seconds) pairs in chronological order.

    Raises:
        LeapTableParseError: If the table is empty, unordered, or the offsets
            do not change by whole seconds.
    """

    def __init__(self, entries: Iterable[tuple[Date, int]]) -> None:
        entries = tuple(entries)
        if not entries:
            raise LeapTableParseError("Leap-second table is empty")
        utc_epochs: list[int] = []
        tai_epochs: list[int] = []
        counts: list[int] = []
        for date, count in entries:
            if not isinstance(count, int) or count <= 0:
                raise LeapTableParseError(f"Invalid leap-second count {count!r} at {date}")
            epoch = date.day_number() * SECONDS_PER_DAY - SECONDS_PER_HALF_DAY
            if utc_epochs and epoch <= utc_epochs[-1]:
                raise LeapTableParseError(f"Leap-second entries out of order at {date}")
            utc_epochs.append(epoch)
            # the first entry ends the drift era; later ones each insert one second
            tai_epochs.append(epoch + count if not tai_epochs else epoch + count - 1)
            counts.append(count)
        self._entries = entries
        self._utc_epochs = tuple(utc_epochs)
        self._tai_epochs = tuple(tai_epochs)
        self._counts = tuple(counts)
        logger.debug("Leap-second table with %d entries, last %s (%d s)", len(entries), entries[-1][0], counts[-1])

    @classmethod
    def builtin(cls) -> LeapSecondsTable:
        """The historical table from 1972-01-01 (10 s) to 2017-01-01 (37 s)."""
        return cls(_BUILTIN_ENTRIES)

    @classmethod
    def from_entries(cls, entries: Sequence[tuple[Date, int]]) -> LeapSecondsTable:
        return cls(entries)

    @property
    def entries(self) -> tuple[tuple[Date, int], ...]:
        return self._entries

    def with_entry(self, date: Date, count: int) -> LeapSecondsTable:
        """Return a new table extended by one entry."""
        return LeapSecondsTable(self._entries + ((date, count),))

    def delta_tai_utc(self, utc: Delta, leap_second: bool = False) -> Delta:
        """TAI - UTC for a UTC instant.

        Args:
            utc: UTC seconds since J2000, counting the calendar fields as if
                the day had 86400 seconds.
            leap_second: Whether the UTC second value is 60. The instant then
                coincides with the start of the next day and the count before
                the step applies.

        Raises:
            OutOfRangeError: Before 1960-01-01.
        """
        i = bisect.bisect_right(self._utc_epochs, utc.seconds) - 1
        if i < 0:
            return pre_1972_delta_tai_utc(utc)
        count = self._counts[i]
        if leap_second:
            count -= 1
        return Delta(count, 0.0)

    def delta_utc_tai(self, tai: Delta) -> Delta:
        """UTC - TAI for a TAI instant.

        Raises:
            OutOfRangeError: Before 1960-01-01.
        """
        i = bisect.bisect_right(self._tai_epochs, tai.seconds) - 1
        if i < 0:
            return pre_1972_delta_utc_tai(tai)
        return Delta(-self._counts[i], 0.0)

    def is_leap_second_date(self, date: Date) -> bool:
        """Whether a leap second was inserted at the end of ``date``."""
        midnight = (date.day_number() + 1) * SECONDS_PER_DAY - SECONDS_PER_HALF_DAY
        i = bisect.bisect_left(self._utc_epochs, midnight)
        return (
            0 < i < len(self._utc_epochs)
            and self._utc_epochs[i] == midnight
            and self._counts[i] > self._counts[i - 1]
        )

    def is_leap_second(self, tai: Delta) -> bool:
        """Whether a TAI instant falls inside an inserted leap second."""
        i = bisect.bisect_left(self._tai_epochs, tai.seconds)
        return (
            0 < i < len(self._tai_epochs)
            and self._tai_epochs[i] == tai.seconds
            and self._counts[i] > self._counts[i - 1]
        )

    def __len__(self) -> int:
        return len(self._entries)

    def __repr__(self) -> str:
        return f"LeapSecondsTable({len(self._entries)} entries, last {self._entries[-1][0]})"


DEFAULT_LEAP_SECONDS = LeapSecondsTable.builtin()
"""Shared read-only instance of the built-in table."""
