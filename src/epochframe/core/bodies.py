"""Solar-system body catalog and IAU rotational elements.

Rotational elements follow the IAU WGCCRE report: the body's north pole
right ascension and declination are polynomials in Julian centuries T and
its prime meridian angle is a polynomial in days d, all since J2000 TDB,
plus trigonometric nutation-precession terms in angles that are linear in T.

Example:
    >>> earth = get_body("Earth")
    >>> ra, dec, w = earth.elements.angles(0.0)
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field

import numpy as np
from numpy.polynomial import polynomial as P
from numpy.typing import NDArray

from epochframe.core.errors import UnsupportedBodyError
from epochframe.core.rotations import Rotation
from epochframe.utils.constants import SECONDS_PER_DAY, SECONDS_PER_JULIAN_CENTURY

logger = logging.getLogger(__name__)

_X_AXIS = (1.0, 0.0, 0.0)
_Z_AXIS = (0.0, 0.0, 1.0)


def _polynomial(coefficients: tuple[float, ...], x: float) -> tuple[float, float]:
    """Value and first derivative of a polynomial with ascending coefficients."""
    c = np.asarray(coefficients, dtype=np.float64)
    return float(P.polyval(x, c)), float(P.polyval(x, P.polyder(c)))


@dataclass(frozen=True)
class RotationalElements:
    """IAU rotation model of a body.

    All coefficients are in degrees. Each entry of ``nut_prec_angles`` holds
    ascending polynomial coefficients in T, e.g. (theta_0, theta_1) with
    theta = theta_0 + theta_1 * T. Amplitude tuples are indexed like the
    angle table and may stop early; missing trailing terms are zero.

    Attributes:
        right_ascension: Pole right ascension polynomial in T.
        declination: Pole declination polynomial in T.
        prime_meridian: Prime meridian polynomial in d.
        nut_prec_angles: Nutation-precession angle definitions.
        nut_prec_right_ascension: Sine amplitudes added to the right ascension.
        nut_prec_declination: Cosine amplitudes added to the declination.
        nut_prec_prime_meridian: Sine amplitudes added to the prime meridian.
    """

    right_ascension: tuple[float, ...]
    declination: tuple[float, ...]
    prime_meridian: tuple[float, ...]
    nut_prec_angles: tuple[tuple[float, ...], ...] = ()
    nut_prec_right_ascension: tuple[float, ...] = ()
    nut_prec_declination: tuple[float, ...] = ()
    nut_prec_prime_meridian: tuple[float, ...] = ()

    def _theta(self, centuries: float) -> tuple[NDArray[np.float64], NDArray[np.float64]]:
        """Nutation-precession angles (rad) and their rates (rad/s)."""
        if not self.nut_prec_angles:
            return np.zeros(0), np.zeros(0)
        values, rates = zip(*(_polynomial(c, centuries) for c in self.nut_prec_angles))
        return np.radians(values), np.radians(rates) / SECONDS_PER_JULIAN_CENTURY

    def right_ascension_at(self, seconds: float) -> tuple[float, float]:
        """Pole right ascension and its rate, in rad and rad/s."""
        t = seconds / SECONDS_PER_JULIAN_CENTURY
        value, rate = _polynomial(self.right_ascension, t)
        rate /= SECONDS_PER_JULIAN_CENTURY
        if self.nut_prec_right_ascension:
            theta, theta_dot = self._theta(t)
            a = np.asarray(self.nut_prec_right_ascension)
            n = len(a)
            value += float(np.sum(a * np.sin(theta[:n])))
            rate += float(np.sum(a * np.cos(theta[:n]) * theta_dot[:n]))
        return math.radians(value), math.radians(rate)

    def declination_at(self, seconds: float) -> tuple[float, float]:
        """Pole declination and its rate, in rad and rad/s."""
        t = seconds / SECONDS_PER_JULIAN_CENTURY
        value, rate = _polynomial(self.declination, t)
        rate /= SECONDS_PER_JULIAN_CENTURY
        if self.nut_prec_declination:
            theta, theta_dot = self._theta(t)
            d = np.asarray(self.nut_prec_declination)
            n = len(d)
            value += float(np.sum(d * np.cos(theta[:n])))
            rate -= float(np.sum(d * np.sin(theta[:n]) * theta_dot[:n]))
        return math.radians(value), math.radians(rate)

    def prime_meridian_at(self, seconds: float) -> tuple[float, float]:
        """Prime meridian angle and its rate, in rad and rad/s."""
        days = seconds / SECONDS_PER_DAY
        value, rate = _polynomial(self.prime_meridian, days)
        rate /= SECONDS_PER_DAY
        if self.nut_prec_prime_meridian:
            theta, theta_dot = self._theta(seconds / SECONDS_PER_JULIAN_CENTURY)
            w = np.asarray(self.nut_prec_prime_meridian)
            n = len(w)
            value += float(np.sum(w * np.sin(theta[:n])))
            rate += float(np.sum(w * np.cos(theta[:n]) * theta_dot[:n]))
        return math.radians(value), math.radians(rate)

    def angles(self, seconds: float) -> tuple[float, float, float]:
        """Right ascension, declination and prime meridian in radians.

        Args:
            seconds: TDB seconds since J2000.
        """
        return (
            self.right_ascension_at(seconds)[0],
            self.declination_at(seconds)[0],
            self.prime_meridian_at(seconds)[0],
        )

    def rotation(self, seconds: float) -> Rotation:
        """ICRF to body-fixed rotation R3(W) R1(pi/2 - dec) R3(ra + pi/2).

        Args:
            seconds: TDB seconds since J2000.
        """
        ra, ra_rate = self.right_ascension_at(seconds)
        dec, dec_rate = self.declination_at(seconds)
        w, w_rate = self.prime_meridian_at(seconds)
        node = Rotation.from_axis_angle(_Z_AXIS, ra + math.pi / 2).with_angular_velocity((0.0, 0.0, ra_rate))
        tilt = Rotation.from_axis_angle(_X_AXIS, math.pi / 2 - dec).with_angular_velocity((-dec_rate, 0.0, 0.0))
        spin = Rotation.from_axis_angle(_Z_AXIS, w).with_angular_velocity((0.0, 0.0, w_rate))
        return spin @ tilt @ node


@dataclass(frozen=True)
class Body:
    """A solar-system body or barycenter.

    Attributes:
        naif_id: NAIF integer code.
        name: Display name.
        gravitational_parameter: GM in km^3/s^2, if known.
        equatorial_radius: Equatorial radius in km, if the body has a shape.
        polar_radius: Polar radius in km, if the body has a shape.
        elements: IAU rotational elements, if published.
    """

    naif_id: int
    name: str
    gravitational_parameter: float | None = None
    equatorial_radius: float | None = None
    polar_radius: float | None = None
    elements: RotationalElements | None = field(default=None, repr=False)

    @property
    def flattening(self) -> float | None:
        if self.equatorial_radius is None or self.polar_radius is None:
            return None
        return (self.equatorial_radius - self.polar_radius) / self.equatorial_radius

    def rotational_elements(self) -> RotationalElements:
        """Return the rotation model.

        Raises:
            UnsupportedBodyError: If no IAU elements are published for the body.
        """
        if self.elements is None:
            raise UnsupportedBodyError(f"{self.name} has no IAU rotational elements")
        return self.elements

    def __str__(self) -> str:
        return self.name


def _sparse(offset: int, *amplitudes: float) -> tuple[float, ...]:
    """Amplitudes starting at index ``offset`` of a barycenter angle table."""
    return (0.0,) * offset + amplitudes


# Nutation-precession angles are shared by all bodies of a planetary system.
_MERCURY_ANGLES = (
    (174.7910857, 149472.53587500003),
    (349.5821714, 298945.07175000006),
    (164.3732571, 448417.60762500006),
    (339.1643429, 597890.1435000001),
    (153.9554286, 747362.679375),
)

_EARTH_ANGLES = (
    (125.045, -1935.5364525),
    (250.089, -3871.072905),
    (260.008, 475263.3328725),
    (176.625, 487269.629985),
    (357.529, 35999.0509575),
    (311.589, 964468.49931),
    (134.963, 477198.869325),
    (276.617, 12006.300765),
    (34.226, 63863.5132425),
    (15.134, -5806.6093575),
    (119.743, 131.84064),
    (239.961, 6003.1503825),
    (25.053, 473327.79642),
)

_MARS_ANGLES = (
    (190.72646643, 15917.10818695),
    (21.4689247, 31834.27934054),
    (332.86082793, 19139.89694742),
    (394.93256437, 38280.79631835),
    (189.6327156, 41215158.1842005, 12.711923222),
    (121.46893664, 660.22803474),
    (231.05028581, 660.9912354),
    (251.37314025, 1320.50145245),
    (217.98635955, 38279.9612555),
    (196.19729402, 19139.83628608),
    (198.991226, 19139.4819985),
    (226.292679, 38280.8511281),
    (249.663391, 57420.7251593),
    (266.18351, 76560.636795),
    (79.398797, 0.5042615),
    (122.433576, 19139.9407476),
    (43.058401, 38280.8753272),
    (57.663379, 57420.7517205),
    (79.476401, 76560.6495004),
    (166.325722, 0.5042615),
    (129.071773, 19140.0328244),
    (36.352167, 38281.0473591),
    (56.668646, 57420.929536),
    (67.364003, 76560.2552215),
    (104.79268, 95700.4387578),
    (95.391654, 0.5042615),
)

_JUPITER_ANGLES = (
    (73.32, 91472.9),
    (24.62, 45137.2),
    (283.9, 4850.7),
    (355.8, 1191.3),
    (119.9, 262.1),
    (229.8, 64.3),
    (352.25, 2382.6),
    (113.35, 6070.0),
    (146.64, 182945.8),
    (49.24, 90274.4),
    (99.360714, 4850.4046),
    (175.895369, 1191.9605),
    (300.323162, 262.5475),
    (114.012305, 6070.2476),
    (49.511251, 64.3),
)

_SATURN_ANGLES = (
    (353.32, 75706.7),
    (28.72, 75706.7),
    (177.4, -36505.5),
    (300.0, -7225.9),
    (316.45, 506.2),
    (345.2, -1016.3),
    (706.64, 151413.4),
    (57.44, 151413.4),
)

_NEPTUNE_ANGLES = (
    (357.85, 52.316),
    (323.92, 62606.6),
    (220.51, 55064.2),
    (354.27, 46564.5),
    (75.31, 26109.4),
    (35.36, 14325.4),
    (142.61, 2824.6),
    (177.85, 52.316),
    (647.84, 125213.2),
    (355.7, 104.632),
    (533.55, 156.948),
    (711.4, 209.264),
    (889.25, 261.58),
    (1067.1, 313.896),
    (1244.95, 366.212),
    (1422.8, 418.528),
    (1600.65, 470.844),
)

# Days per Julian century squared, for quadratic T terms of prime meridians
_D2_PER_T2 = 36525.0**2

_BODIES: tuple[Body, ...] = (
    Body(0, "Solar System Barycenter"),
    Body(1, "Mercury Barycenter", 22031.868551400003),
    Body(2, "Venus Barycenter", 324858.592),
    Body(3, "Earth Barycenter", 403503.2356254802),
    Body(4, "Mars Barycenter", 42828.3758157561),
    Body(5, "Jupiter Barycenter", 126712764.09999998),
    Body(6, "Saturn Barycenter", 37940584.8418),
    Body(7, "Uranus Barycenter", 5794556.3999999985),
    Body(8, "Neptune Barycenter", 6836527.100580399),
    Body(9, "Pluto Barycenter", 975.5),
    Body(
        10, "Sun", 132712440041.27942, 695700.0, 695700.0,
        RotationalElements((286.13,), (63.87,), (84.176, 14.1844)),
    ),
    Body(
        199, "Mercury", 22031.868551400003, 2440.53, 2438.26,
        RotationalElements(
            (281.0103, -0.0328),
            (61.4155, -0.0049),
            (329.5988, 6.1385108),
            nut_prec_angles=_MERCURY_ANGLES,
            nut_prec_prime_meridian=(0.01067257, -0.00112309, -0.0001104, -0.00002539, -0.00000571),
        ),
    ),
    Body(
        299, "Venus", 324858.592, 6051.8, 6051.8,
        RotationalElements((272.76,), (67.16,), (160.2, -1.4813688)),
    ),
    Body(
        399, "Earth", 398600.43550702266, 6378.1366, 6356.7519,
        RotationalElements((0.0, -0.641), (90.0, -0.557), (190.147, 360.9856235)),
    ),
    Body(
        301, "Moon", 4902.800118457549, 1737.4, 1737.4,
        RotationalElements(
            (269.9949, 0.0031),
            (66.5392, 0.013),
            (38.3213, 13.17635815, -1.4e-12),
            nut_prec_angles=_EARTH_ANGLES,
            nut_prec_right_ascension=(
                -3.8787, -0.1204, 0.07, -0.0172, 0.0, 0.0072, 0.0, 0.0, 0.0, -0.0052, 0.0, 0.0, 0.0043,
            ),
            nut_prec_declination=(
                1.5419, 0.0239, -0.0278, 0.0068, 0.0, -0.0029, 0.0009, 0.0, 0.0, 0.0008, 0.0, 0.0, -0.0009,
            ),
            nut_prec_prime_meridian=(
                3.561, 0.1208, -0.0642, 0.0158, 0.0252, -0.0066, -0.0047,
                -0.0046, 0.0028, 0.0052, 0.004, 0.0019, -0.0044,
            ),
        ),
    ),
    Body(
        499, "Mars", 42828.37362069909, 3396.19, 3376.2,
        RotationalElements(
            (317.269202, -0.10927547),
            (54.432516, -0.05827105),
            (176.049863, 350.891982443297),
            nut_prec_angles=_MARS_ANGLES,
            nut_prec_right_ascension=_sparse(10, 0.000068, 0.000238, 0.000052, 0.000009, 0.419057),
            nut_prec_declination=_sparse(15, 0.000051, 0.000141, 0.000031, 0.000005, 1.591274),
            nut_prec_prime_meridian=_sparse(20, 0.000145, 0.000157, 0.00004, 0.000001, 0.000001, 0.584542),
        ),
    ),
    Body(
        401, "Phobos", 0.0007087546066894452, 13.0, 9.1,
        RotationalElements(
            (317.67071657, -0.10844326),
            (52.88627266, -0.06134706),
            (35.1877444, 1128.84475928, 12.72192797 / _D2_PER_T2),
            nut_prec_angles=_MARS_ANGLES,
            nut_prec_right_ascension=(-1.78428399, 0.02212824, -0.01028251, -0.00475595),
            nut_prec_declination=(-1.07516537, 0.00668626, -0.0064874, 0.00281576),
            nut_prec_prime_meridian=(1.42421769, -0.02273783, 0.00410711, 0.00631964, -1.143),
        ),
    ),
    Body(
        402, "Deimos", 0.00009615569648120313, 7.8, 5.1,
        RotationalElements(
            (316.65705808, -0.10518014),
            (53.50992033, -0.05979094),
            (79.39932954, 285.16188899),
            nut_prec_angles=_MARS_ANGLES,
            nut_prec_right_ascension=_sparse(5, 3.09217726, 0.22980637, 0.06418655, 0.02533537, 0.00778695),
            nut_prec_declination=_sparse(5, 1.83936004, 0.1432532, 0.01911409, -0.0148259, 0.0019243),
            nut_prec_prime_meridian=_sparse(5, -2.73954829, -0.39968606, -0.06563259, -0.0291294, 0.0169916),
        ),
    ),
    Body(
        599, "Jupiter", 126686531.9003704, 71492.0, 66854.0,
        RotationalElements(
            (268.056595, -0.006499),
            (64.495303, 0.002413),
            (284.95, 870.536),
            nut_prec_angles=_JUPITER_ANGLES,
            nut_prec_right_ascension=_sparse(10, 0.000117, 0.000938, 0.001432, 0.00003, 0.00215),
            nut_prec_declination=_sparse(10, 0.00005, 0.000404, 0.000617, -0.000013, 0.000926),
        ),
    ),
    Body(
        501, "Io", 5959.915466180539, 1829.4, 1815.7,
        RotationalElements(
            (268.05, -0.009),
            (64.5, 0.003),
            (200.39, 203.4889538),
            nut_prec_angles=_JUPITER_ANGLES,
            nut_prec_right_ascension=_sparse(2, 0.094, 0.024),
            nut_prec_declination=_sparse(2, 0.04, 0.011),
            nut_prec_prime_meridian=_sparse(2, -0.085, -0.022),
        ),
    ),
    Body(
        502, "Europa", 3202.712099607295, 1562.6, 1559.5,
        RotationalElements(
            (268.08, -0.009),
            (64.51, 0.003),
            (36.022, 101.3747235),
            nut_prec_angles=_JUPITER_ANGLES,
            nut_prec_right_ascension=_sparse(3, 1.086, 0.06, 0.015, 0.009),
            nut_prec_declination=_sparse(3, 0.468, 0.026, 0.007, 0.002),
            nut_prec_prime_meridian=_sparse(3, -0.98, -0.054, -0.014, -0.008),
        ),
    ),
    Body(
        503, "Ganymede", 9887.832752719638, 2631.2, 2631.2,
        RotationalElements(
            (268.2, -0.009),
            (64.57, 0.003),
            (44.064, 50.3176081),
            nut_prec_angles=_JUPITER_ANGLES,
            nut_prec_right_ascension=_sparse(3, -0.037, 0.431, 0.091),
            nut_prec_declination=_sparse(3, -0.016, 0.186, 0.039),
            nut_prec_prime_meridian=_sparse(3, 0.033, -0.389, -0.082),
        ),
    ),
    Body(
        504, "Callisto", 7179.283402579837, 2410.3, 2410.3,
        RotationalElements(
            (268.72, -0.009),
            (64.83, 0.003),
            (259.51, 21.5710715),
            nut_prec_angles=_JUPITER_ANGLES,
            nut_prec_right_ascension=_sparse(4, -0.068, 0.59, 0.0, 0.01),
            nut_prec_declination=_sparse(4, -0.029, 0.254, 0.0, -0.004),
            nut_prec_prime_meridian=_sparse(4, 0.061, -0.533, 0.0, -0.009),
        ),
    ),
    Body(
        699, "Saturn", 37931206.23436167, 60268.0, 54364.0,
        RotationalElements((40.589, -0.036), (83.537, -0.004), (38.9, 810.7939024)),
    ),
    Body(
        602, "Enceladus", 7.211454165826048, 256.6, 248.3,
        RotationalElements((40.66, -0.036), (83.52, -0.004), (6.32, 262.7318996)),
    ),
    Body(
        605, "Rhea", 153.9427554038052, 765.0, 762.4,
        RotationalElements(
            (40.38, -0.036),
            (83.55, -0.004),
            (235.16, 79.6900478),
            nut_prec_angles=_SATURN_ANGLES,
            nut_prec_right_ascension=_sparse(5, 3.1),
            nut_prec_declination=_sparse(5, -0.35),
            nut_prec_prime_meridian=_sparse(5, -3.08),
        ),
    ),
    Body(
        606, "Titan", 8978.137095521046, 2575.15, 2574.47,
        RotationalElements((39.4827,), (83.4279,), (186.5855, 22.5769768)),
    ),
    Body(
        799, "Uranus", 5793951.256527211, 25559.0, 24973.0,
        RotationalElements((257.311,), (-15.175,), (203.81, -501.1600928)),
    ),
    Body(
        899, "Neptune", 6835103.145462294, 24764.0, 24341.0,
        RotationalElements(
            (299.36,),
            (43.46,),
            (249.978, 541.1397757),
            nut_prec_angles=_NEPTUNE_ANGLES,
            nut_prec_right_ascension=(0.7,),
            nut_prec_declination=(-0.51,),
            nut_prec_prime_meridian=(-0.48,),
        ),
    ),
    Body(
        801, "Triton", 1428.495462910464, 1352.6, 1352.6,
        RotationalElements(
            (299.36,),
            (41.17,),
            (296.53, -61.2572637),
            nut_prec_angles=_NEPTUNE_ANGLES,
            nut_prec_right_ascension=_sparse(7, -32.35, 0.0, -6.28, -2.08, -0.74, -0.28, -0.11, -0.07, -0.02, -0.01),
            nut_prec_declination=_sparse(7, 22.55, 0.0, 2.1, 0.55, 0.16, 0.05, 0.02, 0.01),
            nut_prec_prime_meridian=_sparse(7, 22.25, 0.0, 6.73, 2.05, 0.74, 0.28, 0.11, 0.05, 0.02, 0.01),
        ),
    ),
    Body(
        999, "Pluto", 869.6138177608748, 1188.3, 1188.3,
        RotationalElements((132.993,), (-6.163,), (302.695, 56.3625225)),
    ),
    Body(
        901, "Charon", 105.8799888601881, 606.0, 606.0,
        RotationalElements((132.993,), (-6.163,), (122.695, 56.3625225)),
    ),
    # Minor bodies: the equatorial radius is the longest (sub-planetary) axis
    Body(
        2000001, "Ceres", 62.62888864440993, 487.3, 446.0,
        RotationalElements((291.418,), (66.764,), (170.65, 952.1532)),
    ),
    Body(
        2000002, "Pallas", 13.665878145967422,
        elements=RotationalElements((33.0,), (-3.0,), (38.0, 1105.8036)),
    ),
    Body(
        2000004, "Vesta", 17.288232879171513, 289.0, 229.0,
        RotationalElements((309.031,), (42.235,), (285.39, 1617.3329428)),
    ),
    Body(
        2000021, "Lutetia", None, 62.0, 46.5,
        RotationalElements((52.0,), (12.0,), (94.0, 1057.7515)),
    ),
    Body(
        2000433, "Eros", 0.0004463, 17.0, 5.5,
        RotationalElements((11.35,), (17.22,), (326.07, 1639.38864745)),
    ),
    Body(
        2000511, "Davida", 3.8944831481705644, 180.0, 127.0,
        RotationalElements((297.0,), (5.0,), (268.1, 1684.4193549)),
    ),
    Body(
        2002867, "Steins", None, 3.24, 2.04,
        RotationalElements((91.0,), (-62.0,), (321.76, 1428.09917)),
    ),
    Body(
        2025143, "Itokawa", None, 0.268, 0.104,
        RotationalElements((90.53,), (-66.3,), (0.0, 712.143)),
    ),
    Body(
        2431010, "Ida", None, 26.8, 7.6,
        RotationalElements((168.76,), (-87.12,), (274.05, 1864.628007)),
    ),
    Body(
        9511010, "Gaspra", None, 9.1, 4.4,
        RotationalElements((9.47,), (26.7,), (83.67, 1226.911485)),
    ),
)

_BY_ID = {body.naif_id: body for body in _BODIES}
_BY_NAME = {body.name.upper(): body for body in _BODIES}
_BY_NAME["SSB"] = _BY_ID[0]


def get_body(key: str | int) -> Body:
    """Look up a body by NAIF id or case-insensitive name.

    Raises:
        UnsupportedBodyError: If the body is not in the catalog.
    """
    if isinstance(key, int):
        body = _BY_ID.get(key)
    else:
        text = key.strip().replace("_", " ").upper()
        body = _BY_ID.get(int(text)) if text.lstrip("-").isdigit() else _BY_NAME.get(text)
    if body is None:
        raise UnsupportedBodyError(f"Unknown body: {key!r}")
    return body


def list_bodies() -> list[Body]:
    """All catalog entries ordered by NAIF id."""
    return sorted(_BODIES, key=lambda b: b.naif_id)
