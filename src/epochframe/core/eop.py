"""Earth orientation parameters (EOP).

An :class:`EopProvider` interpolates a time-ordered series of IERS samples
to supply UT1 - TAI, polar motion and celestial pole offsets. Providers are
built once from already-parsed data and are read-only afterwards.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Sequence

import numpy as np
from numpy.typing import NDArray
from scipy.interpolate import Akima1DInterpolator, CubicSpline, make_interp_spline

from epochframe.core.conversions import convert
from epochframe.core.deltas import Delta
from epochframe.core.errors import EopParseError, OutOfRangeError
from epochframe.core.iers import IersConvention
from epochframe.core.instant import Instant
from epochframe.core.leap_seconds import DEFAULT_LEAP_SECONDS, LeapSecondsProvider
from epochframe.core.scales import TimeScale
from epochframe.utils.constants import (
    ARCSECONDS_TO_RAD,
    J2000_MJD,
    MILLIARCSECONDS_TO_RAD,
    SECONDS_PER_DAY,
    UT1_ITERATIONS,
)

logger = logging.getLogger(__name__)


class Interpolation(Enum):
    """Interpolation schemes for EOP series."""

    LINEAR = "linear"
    CUBIC = "cubic"
    AKIMA = "akima"


@dataclass(frozen=True)
class EopSample:
    """One daily IERS Earth orientation record.

    Attributes:
        mjd: Epoch as a UTC modified Julian date.
        delta_ut1_utc: UT1 - UTC in seconds.
        x_pole: Polar motion x in arcseconds.
        y_pole: Polar motion y in arcseconds.
        dpsi: IAU 1980 nutation correction in longitude, milliarcseconds.
        deps: IAU 1980 nutation correction in obliquity, milliarcseconds.
        dx: IAU 2000 celestial pole offset dX, milliarcseconds.
        dy: IAU 2000 celestial pole offset dY, milliarcseconds.
    """

    mjd: float
    delta_ut1_utc: float
    x_pole: float
    y_pole: float
    dpsi: float | None = None
    deps: float | None = None
    dx: float | None = None
    dy: float | None = None


class _Series:
    """An interpolated scalar series with a hard coverage check."""

    def __init__(self, name: str, x: NDArray[np.float64], y: NDArray[np.float64], method: Interpolation) -> None:
        self.name = name
        self.start = float(x[0])
        self.end = float(x[-1])
        self._interp = _interpolator(x, y, method)

    def __call__(self, seconds: float) -> float:
        if not self.start <= seconds <= self.end:
            raise OutOfRangeError(
                f"{seconds:.3f} s since J2000 TAI is outside the EOP {self.name} span "
                f"[{self.start:.3f}, {self.end:.3f}]"
            )
        return float(self._interp(seconds))

    def evaluate(self, seconds: float) -> float:
        """Evaluate without the coverage check (used for iteration guesses)."""
        return float(self._interp(min(max(seconds, self.start), self.end)))


def _interpolator(x: NDArray[np.float64], y: NDArray[np.float64], method: Interpolation) -> Callable:
    if method is Interpolation.LINEAR:
        return make_interp_spline(x, y, k=1)
    if method is Interpolation.CUBIC:
        return CubicSpline(x, y)
    return Akima1DInterpolator(x, y)


def _column(samples: Sequence[EopSample], field: str) -> tuple[list[int], list[float]]:
    rows = [i for i, s in enumerate(samples) if getattr(s, field) is not None]
    return rows, [getattr(samples[i], field) for i in rows]


class EopProvider:
    """Interpolated Earth orientation parameters.

    Internally every series is indexed by TAI seconds since J2000, obtained
    from the UTC sample epochs through the leap-second provider. UT1 - UTC
    is stored as UT1 - TAI so that UT1 conversions never pass through UTC.

    Args:
        samples: Daily records, strictly increasing in ``mjd``.
        interpolation: Interpolation scheme, ``"linear"``, ``"cubic"`` or
            ``"akima"``.
        leap_seconds: Leap-second provider used to place the UTC epochs on
            TAI. Defaults to the built-in table.

    Raises:
        EopParseError: If fewer than two samples are given, epochs are not
            strictly increasing, or any value is not finite.
    """

    def __init__(
        self,
        samples: Sequence[EopSample],
        interpolation: Interpolation | str = Interpolation.LINEAR,
        leap_seconds: LeapSecondsProvider | None = None,
    ) -> None:
        try:
            method = Interpolation(interpolation)
        except ValueError:
            raise EopParseError(f"Unknown interpolation scheme: {interpolation!r}") from None
        samples = list(samples)
        if len(samples) < 2:
            raise EopParseError(f"At least two EOP samples are required, got {len(samples)}")
        leap_seconds = leap_seconds or DEFAULT_LEAP_SECONDS

        mjd = np.array([s.mjd for s in samples], dtype=np.float64)
        if not np.all(np.isfinite(mjd)):
            raise EopParseError("Non-finite EOP epoch")
        if np.any(np.diff(mjd) <= 0.0):
            bad = int(np.argmax(np.diff(mjd) <= 0.0)) + 1
            raise EopParseError(f"EOP epochs are not strictly increasing at MJD {mjd[bad]}")

        utc_seconds = [(m - J2000_MJD) * SECONDS_PER_DAY for m in mjd]
        tai_minus_utc = [
            leap_seconds.delta_tai_utc(Delta.from_seconds(s)).to_decimal_seconds() for s in utc_seconds
        ]
        self._epochs = np.array([u + d for u, d in zip(utc_seconds, tai_minus_utc)], dtype=np.float64)
        if np.any(np.diff(self._epochs) <= 0.0):
            raise EopParseError("EOP epochs are not strictly increasing on TAI")

        ut1_tai = np.array(
            [s.delta_ut1_utc - d for s, d in zip(samples, tai_minus_utc)], dtype=np.float64
        )
        x_pole = np.array([s.x_pole for s in samples], dtype=np.float64) * ARCSECONDS_TO_RAD
        y_pole = np.array([s.y_pole for s in samples], dtype=np.float64) * ARCSECONDS_TO_RAD
        for name, values in (("UT1-UTC", ut1_tai), ("x_pole", x_pole), ("y_pole", y_pole)):
            if not np.all(np.isfinite(values)):
                raise EopParseError(f"Non-finite EOP {name} value")

        self.interpolation = method
        self.leap_seconds = leap_seconds
        self._ut1_tai = _Series("UT1-TAI", self._epochs, ut1_tai, method)
        self._x_pole = _Series("polar motion", self._epochs, x_pole, method)
        self._y_pole = _Series("polar motion", self._epochs, y_pole, method)
        self._iau1980 = self._corrections(samples, "dpsi", "deps", "IAU1980 nutation corrections", method)
        self._iau2000 = self._corrections(samples, "dx", "dy", "IAU2000 pole offsets", method)
        logger.debug(
            "EOP provider with %d samples, MJD %.1f-%.1f, %s interpolation",
            len(samples), mjd[0], mjd[-1], method.value,
        )

    def _corrections(
        self,
        samples: Sequence[EopSample],
        first: str,
        second: str,
        name: str,
        method: Interpolation,
    ) -> tuple[_Series, _Series] | None:
        rows_a, values_a = _column(samples, first)
        rows_b, values_b = _column(samples, second)
        if rows_a != rows_b:
            raise EopParseError(f"Columns {first!r} and {second!r} are not populated on the same epochs")
        if len(rows_a) < 2:
            return None
        x = self._epochs[rows_a]
        a = np.array(values_a, dtype=np.float64) * MILLIARCSECONDS_TO_RAD
        b = np.array(values_b, dtype=np.float64) * MILLIARCSECONDS_TO_RAD
        if not (np.all(np.isfinite(a)) and np.all(np.isfinite(b))):
            raise EopParseError(f"Non-finite {name} value")
        return _Series(name, x, a, method), _Series(name, x, b, method)

    @property
    def span(self) -> tuple[Instant, Instant]:
        """First and last covered TAI instants."""
        return (
            Instant(TimeScale.TAI, Delta.from_seconds(float(self._epochs[0]))),
            Instant(TimeScale.TAI, Delta.from_seconds(float(self._epochs[-1]))),
        )

    @property
    def has_iau1980_corrections(self) -> bool:
        return self._iau1980 is not None

    @property
    def has_iau2000_corrections(self) -> bool:
        return self._iau2000 is not None

    def delta_ut1_tai(self, tai: Delta) -> Delta:
        """UT1 - TAI at a TAI instant.

        Raises:
            OutOfRangeError: Outside the covered span.
        """
        return Delta.from_seconds(self._ut1_tai(tai.to_decimal_seconds()))

    def delta_tai_ut1(self, ut1: Delta) -> Delta:
        """TAI - UT1 at a UT1 instant.

        The series is indexed by TAI, so the UT1 argument is mapped back by
        fixed-point iteration starting from the value at the UT1 epoch.

        Raises:
            OutOfRangeError: Outside the covered span.
        """
        seconds = ut1.to_decimal_seconds()
        value = self._ut1_tai.evaluate(seconds)
        for _ in range(UT1_ITERATIONS - 1):
            value = self._ut1_tai.evaluate(seconds - value)
        value = self._ut1_tai(seconds - value)
        return -Delta.from_seconds(value)

    def _tai_seconds(self, instant: Instant) -> float:
        return convert(instant, TimeScale.TAI, self).seconds_since_j2000()

    def offset_at(self, instant: Instant) -> Delta:
        """UT1 - TAI at any instant."""
        return Delta.from_seconds(self._ut1_tai(self._tai_seconds(instant)))

    def polar_motion(self, instant: Instant) -> tuple[float, float]:
        """Pole coordinates (xp, yp) in radians.

        Raises:
            OutOfRangeError: Outside the covered span.
        """
        seconds = self._tai_seconds(instant)
        return self._x_pole(seconds), self._y_pole(seconds)

    def nutation_corrections(self, instant: Instant) -> tuple[float, float] | None:
        """IAU 1980 nutation corrections (dpsi, deps) in radians, if loaded."""
        if self._iau1980 is None:
            return None
        seconds = self._tai_seconds(instant)
        return self._iau1980[0](seconds), self._iau1980[1](seconds)

    def pole_offsets(self, instant: Instant) -> tuple[float, float] | None:
        """IAU 2000 celestial pole offsets (dX, dY) in radians, if loaded."""
        if self._iau2000 is None:
            return None
        seconds = self._tai_seconds(instant)
        return self._iau2000[0](seconds), self._iau2000[1](seconds)

    def corrections(self, instant: Instant, convention: IersConvention) -> tuple[float, float]:
        """Precession-nutation corrections for an IERS convention.

        Returns (dpsi, deps) for IERS 1996 and (dX, dY) for the IAU 2000
        based conventions, in radians. Missing series yield zeros; a loaded
        series that does not cover the instant raises.

        Raises:
            OutOfRangeError: If the relevant series does not cover the instant.
        """
        if convention is IersConvention.IERS1996:
            values = self.nutation_corrections(instant)
        else:
            values = self.pole_offsets(instant)
        if values is None:
            return 0.0, 0.0
        return values

    def __repr__(self) -> str:
        start, end = self.span
        return f"EopProvider({start} .. {end}, {self.interpolation.value})"
