"""Continuous astronomical time scales."""

from __future__ import annotations

from enum import Enum


class TimeScale(Enum):
    """Continuous time scales.

    UTC is deliberately absent: it has leap-second discontinuities and is
    modelled separately by :class:`epochframe.core.utc.UTC`.
    """

    TAI = "TAI"
    TT = "TT"
    TDB = "TDB"
    TCB = "TCB"
    TCG = "TCG"
    UT1 = "UT1"

    @property
    def long_name(self) -> str:
        return _LONG_NAMES[self]

    @classmethod
    def from_name(cls, name: str) -> TimeScale:
        """Parse a scale abbreviation such as ``"tdb"``.

        Raises:
            ValueError: If the name is not a continuous time scale.
        """
        try:
            return cls(name.strip().upper())
        except ValueError:
            raise ValueError(f"Unknown time scale: {name!r}") from None

    def __str__(self) -> str:
        return self.value


_LONG_NAMES = {
    TimeScale.TAI: "International Atomic Time",
    TimeScale.TT: "Terrestrial Time",
    TimeScale.TDB: "Barycentric Dynamical Time",
    TimeScale.TCB: "Barycentric Coordinate Time",
    TimeScale.TCG: "Geocentric Coordinate Time",
    TimeScale.UT1: "Universal Time",
}
