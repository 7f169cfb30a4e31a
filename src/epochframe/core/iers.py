"""IERS precession-nutation, Earth rotation and polar motion models.

Every hop function returns the :class:`Rotation` from a parent frame to a
child frame of the frame graph in :mod:`epochframe.core.frames`. The IAU
series themselves come from ERFA (``pyerfa``), the reference
implementation of the IAU SOFA algorithms.

CIO-based chain (IERS 2010)::

    ICRF --(X, Y, s)--> CIRF --(ERA)--> TIRF --(xp, yp, s')--> ITRF

Equinox-based chain (per convention)::

    ICRF --(bias, precession)--> MOD --(nutation)--> TOD --(GAST)--> PEF
                                                     TOD --(EqE 1994)--> TEME
"""

from __future__ import annotations

import logging
import math
from enum import Enum
from typing import TYPE_CHECKING

import erfa
import numpy as np
from numpy.typing import NDArray

from epochframe.core.conversions import convert
from epochframe.core.errors import MissingOffsetProviderError
from epochframe.core.instant import Instant
from epochframe.core.rotations import Rotation
from epochframe.core.scales import TimeScale
from epochframe.utils.constants import ROTATION_RATE_EARTH

if TYPE_CHECKING:
    from epochframe.core.eop import EopProvider

logger = logging.getLogger(__name__)

EARTH_ANGULAR_VELOCITY = np.array([0.0, 0.0, ROTATION_RATE_EARTH])


class IersConvention(Enum):
    """IERS conventions selecting the precession-nutation model."""

    IERS1996 = "IERS1996"
    IERS2003A = "IERS2003/IAU2000A"
    IERS2003B = "IERS2003/IAU2000B"
    IERS2010 = "IERS2010"

    @classmethod
    def from_name(cls, name: str) -> IersConvention:
        """Parse names such as ``"IERS2010"``, ``"iers2003a"`` or ``"IERS2003"``.

        A bare ``IERS2003`` selects the IAU 2000A model.

        Raises:
            ValueError: If the name is not a known convention.
        """
        key = name.strip().upper().replace("/", "").replace("_", "").replace("IAU2000", "")
        try:
            return _CONVENTION_NAMES[key]
        except KeyError:
            raise ValueError(f"Unknown IERS convention: {name!r}") from None

    def __str__(self) -> str:
        return self.value


_CONVENTION_NAMES = {
    "IERS1996": IersConvention.IERS1996,
    "IERS2003": IersConvention.IERS2003A,
    "IERS2003A": IersConvention.IERS2003A,
    "IERS2003B": IersConvention.IERS2003B,
    "IERS2010": IersConvention.IERS2010,
}

DEFAULT_CONVENTION = IersConvention.IERS2010
"""Convention used for equinox-based frames when none is given."""


def _julian_date(instant: Instant, scale: TimeScale, eop: EopProvider | None) -> tuple[float, float]:
    return convert(instant, scale, eop).julian_date()


def _require(eop: EopProvider | None, quantity: str) -> EopProvider:
    if eop is None:
        raise MissingOffsetProviderError(f"{quantity} requires an Earth orientation provider")
    return eop


def _rz(angle: float) -> NDArray[np.float64]:
    return erfa.rz(angle, np.eye(3))


# --- CIO-based chain ---

def icrf_to_cirf(instant: Instant, eop: EopProvider | None = None) -> Rotation:
    """Celestial-to-intermediate rotation from the IAU 2006/2000A CIP and CIO.

    Celestial pole offsets dX, dY are applied when the provider carries them.
    """
    tt = _julian_date(instant, TimeScale.TT, eop)
    x, y, s = erfa.xys06a(*tt)
    if eop is not None:
        dx, dy = eop.corrections(instant, IersConvention.IERS2010)
        x, y = x + dx, y + dy
    return Rotation(erfa.c2ixys(x, y, s))


def earth_rotation_angle(instant: Instant, eop: EopProvider | None = None) -> float:
    """IAU 2000 Earth rotation angle in radians.

    Raises:
        MissingOffsetProviderError: If UT1 is unavailable.
    """
    ut1 = _julian_date(instant, TimeScale.UT1, _require(eop, "Earth rotation"))
    return float(erfa.era00(*ut1))


def cirf_to_tirf(instant: Instant, eop: EopProvider | None = None) -> Rotation:
    era = earth_rotation_angle(instant, eop)
    return Rotation(_rz(era)).with_angular_velocity(EARTH_ANGULAR_VELOCITY)


def tirf_to_itrf(instant: Instant, eop: EopProvider | None = None) -> Rotation:
    """Polar motion including the TIO locator s'.

    Raises:
        MissingOffsetProviderError: Without a provider; polar motion is never
            assumed to be zero.
        OutOfRangeError: If the provider does not cover the instant.
    """
    provider = _require(eop, "Polar motion")
    tt = _julian_date(instant, TimeScale.TT, provider)
    xp, yp = provider.polar_motion(instant)
    return Rotation(erfa.pom00(xp, yp, erfa.sp00(*tt)))


# --- Equinox-based chain ---

def bias_precession_matrix(tt: tuple[float, float], convention: IersConvention) -> NDArray[np.float64]:
    if convention is IersConvention.IERS1996:
        return erfa.pmat76(*tt)
    if convention is IersConvention.IERS2010:
        return erfa.pmat06(*tt)
    _, _, rbp = erfa.bp00(*tt)
    return rbp


def _raw_nutation(tt: tuple[float, float], convention: IersConvention) -> tuple[float, float]:
    if convention is IersConvention.IERS1996:
        return erfa.nut80(*tt)
    if convention is IersConvention.IERS2003A:
        return erfa.nut00a(*tt)
    if convention is IersConvention.IERS2003B:
        return erfa.nut00b(*tt)
    return erfa.nut06a(*tt)


def nutation(
    instant: Instant, convention: IersConvention, eop: EopProvider | None = None
) -> tuple[float, float, float, float]:
    """Corrected nutation for an IERS convention.

    For the IAU 2000 based conventions the provider's celestial pole offsets
    are rotated to the mean equator and equinox of date before they are added
    to the nutation angles (SOFA cookbook procedure).

    Returns:
        Tuple of (dpsi, deps, mean obliquity, dpsi correction), radians.
    """
    tt = _julian_date(instant, TimeScale.TT, eop)
    dpsi, deps = _raw_nutation(tt, convention)
    if convention is IersConvention.IERS1996:
        epsa = float(erfa.obl80(*tt))
        ddpsi, ddeps = eop.corrections(instant, convention) if eop is not None else (0.0, 0.0)
        return dpsi + ddpsi, deps + ddeps, epsa, ddpsi

    pn = erfa.pn06 if convention is IersConvention.IERS2010 else erfa.pn00
    epsa, _, _, _, _, rbpn = pn(*tt, dpsi, deps)
    ddpsi = 0.0
    if eop is not None:
        dx, dy = eop.corrections(instant, convention)
        if dx != 0.0 or dy != 0.0:
            v = rbpn @ np.array([dx, dy, 0.0])
            ddpsi = v[0] / math.sin(epsa)
            dpsi, deps = dpsi + ddpsi, deps + v[1]
            epsa, *_ = pn(*tt, dpsi, deps)
    return float(dpsi), float(deps), float(epsa), float(ddpsi)


def icrf_to_mod(instant: Instant, convention: IersConvention, eop: EopProvider | None = None) -> Rotation:
    tt = _julian_date(instant, TimeScale.TT, eop)
    return Rotation(bias_precession_matrix(tt, convention))


def mod_to_tod(instant: Instant, convention: IersConvention, eop: EopProvider | None = None) -> Rotation:
    dpsi, deps, epsa, _ = nutation(instant, convention, eop)
    return Rotation(erfa.numat(epsa, dpsi, deps))


def greenwich_mean_sidereal_time(
    instant: Instant, convention: IersConvention, eop: EopProvider | None = None
) -> float:
    """GMST in radians (IAU 1982, 2000 or 2006 depending on the convention)."""
    ut1 = _julian_date(instant, TimeScale.UT1, _require(eop, "Sidereal time"))
    if convention is IersConvention.IERS1996:
        return float(erfa.gmst82(*ut1))
    tt = _julian_date(instant, TimeScale.TT, eop)
    if convention is IersConvention.IERS2010:
        return float(erfa.gmst06(*ut1, *tt))
    return float(erfa.gmst00(*ut1, *tt))


def greenwich_apparent_sidereal_time(
    instant: Instant, convention: IersConvention, eop: EopProvider | None = None
) -> float:
    """GAST in radians, consistent with :func:`nutation` for the convention.

    Raises:
        MissingOffsetProviderError: If UT1 is unavailable.
    """
    gmst = greenwich_mean_sidereal_time(instant, convention, eop)
    tt = _julian_date(instant, TimeScale.TT, eop)
    dpsi, _, epsa, ddpsi = nutation(instant, convention, eop)
    if convention is IersConvention.IERS1996:
        ee = erfa.eqeq94(*tt) + math.cos(epsa) * ddpsi
    else:
        ee = erfa.ee00(*tt, epsa, dpsi)
    return float(erfa.anp(gmst + ee))


def tod_to_pef(instant: Instant, convention: IersConvention, eop: EopProvider | None = None) -> Rotation:
    gast = greenwich_apparent_sidereal_time(instant, convention, eop)
    return Rotation(_rz(gast)).with_angular_velocity(EARTH_ANGULAR_VELOCITY)


def equation_of_the_equinoxes(instant: Instant, eop: EopProvider | None = None) -> float:
    """IAU 1994 equation of the equinoxes in radians."""
    tt = _julian_date(instant, TimeScale.TT, eop)
    return float(erfa.eqeq94(*tt))


def tod_to_teme(instant: Instant, eop: EopProvider | None = None) -> Rotation:
    """True equator, true equinox to true equator, mean equinox (SGP4 frame).

    The two frames share the true equator and differ by the IAU 1994
    equation of the equinoxes measured along it.
    """
    return Rotation(_rz(equation_of_the_equinoxes(instant, eop)))
