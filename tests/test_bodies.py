"""Tests for the body catalog and IAU rotational elements."""

import math

import numpy as np
import pytest

from epochframe.core.bodies import Body, RotationalElements, get_body, list_bodies
from epochframe.core.errors import UnsupportedBodyError
from epochframe.core.rotations import Rotation
from epochframe.utils.constants import SECONDS_PER_JULIAN_CENTURY

SECONDS_2024 = 7.73e8


class TestCatalog:
    @pytest.mark.parametrize("key", [399, "399", "Earth", "earth", " EARTH "])
    def test_lookup_earth(self, key) -> None:
        assert get_body(key).naif_id == 399

    def test_lookup_barycenters(self) -> None:
        assert get_body("ssb").naif_id == 0
        assert get_body("solar_system_barycenter").naif_id == 0
        assert get_body("Earth Barycenter").naif_id == 3

    def test_unknown_body_raises(self) -> None:
        with pytest.raises(UnsupportedBodyError, match="Unknown body"):
            get_body("Vulcan")
        with pytest.raises(UnsupportedBodyError):
            get_body(12345)

    def test_listing_is_sorted(self) -> None:
        ids = [b.naif_id for b in list_bodies()]
        assert ids == sorted(ids)
        assert {0, 10, 199, 299, 301, 399, 499, 599, 699, 799, 899, 999} <= set(ids)

    def test_physical_constants(self) -> None:
        earth = get_body("Earth")
        assert earth.gravitational_parameter == pytest.approx(398600.4355, rel=1e-9)
        assert earth.flattening == pytest.approx(1 / 298.257, rel=1e-3)
        assert get_body("Moon").flattening == 0.0

    def test_barycenters_have_no_shape_or_rotation(self) -> None:
        ssb = get_body(0)
        assert ssb.flattening is None
        with pytest.raises(UnsupportedBodyError, match="no IAU rotational elements"):
            ssb.rotational_elements()

    def test_str(self) -> None:
        assert str(get_body(301)) == "Moon"


class TestRotationalElements:
    def test_earth_at_j2000(self) -> None:
        ra, dec, w = get_body("Earth").rotational_elements().angles(0.0)
        assert ra == 0.0
        assert dec == pytest.approx(math.pi / 2)
        assert w == pytest.approx(math.radians(190.147))

    def test_earth_rotation_at_j2000_is_a_single_spin(self) -> None:
        rotation = get_body("Earth").rotational_elements().rotation(0.0)
        expected = Rotation.from_axis_angle([0.0, 0.0, 1.0], math.radians(190.147) + math.pi / 2)
        np.testing.assert_allclose(rotation.matrix, expected.matrix, atol=1e-14)

    def test_earth_spin_rate(self) -> None:
        rotation = get_body("Earth").rotational_elements().rotation(SECONDS_2024)
        rate = np.linalg.norm(rotation.angular_velocity)
        assert rate == pytest.approx(math.radians(360.9856235) / 86400.0, rel=1e-6)

    def test_prime_meridian_rate(self) -> None:
        _, rate = get_body("Saturn").rotational_elements().prime_meridian_at(0.0)
        assert rate == pytest.approx(math.radians(810.7939024) / 86400.0, rel=1e-12)

    def test_mars_pole_includes_periodic_terms(self) -> None:
        mars = get_body("Mars").rotational_elements()
        ra, dec, _ = mars.angles(0.0)
        assert math.degrees(ra) - 317.269202 == pytest.approx(0.419057 * math.sin(math.radians(79.398797)), abs=1e-3)
        assert math.degrees(dec) - 54.432516 == pytest.approx(1.591274 * math.cos(math.radians(166.325722)), abs=1e-3)

    def test_periodic_terms_change_the_pole(self) -> None:
        moon = get_body("Moon").rotational_elements()
        bare = RotationalElements(moon.right_ascension, moon.declination, moon.prime_meridian)
        ra, dec, _ = moon.angles(0.0)
        ra0, dec0, _ = bare.angles(0.0)
        assert abs(ra - ra0) > math.radians(1.0)
        assert abs(dec - dec0) > math.radians(0.1)

    @pytest.mark.parametrize(
        "name", ["Moon", "Earth", "Mars", "Jupiter", "Neptune", "Mercury", "Phobos", "Deimos", "Io", "Triton"]
    )
    def test_derivative_matches_finite_difference(self, name: str) -> None:
        elements = get_body(name).rotational_elements()
        t, h = 1.0e7, 0.5
        numeric = (elements.rotation(t + h).matrix - elements.rotation(t - h).matrix) / (2 * h)
        np.testing.assert_allclose(elements.rotation(t).derivative, numeric, atol=1e-11)

    def test_rotation_is_orthonormal(self) -> None:
        matrix = get_body("Jupiter").rotational_elements().rotation(SECONDS_2024).matrix
        np.testing.assert_allclose(matrix @ matrix.T, np.eye(3), atol=1e-14)

    def test_body_fixed_pole_is_body_axis(self) -> None:
        elements = get_body("Saturn").rotational_elements()
        ra, dec, _ = elements.angles(SECONDS_2024)
        pole = np.array([math.cos(dec) * math.cos(ra), math.cos(dec) * math.sin(ra), math.sin(dec)])
        np.testing.assert_allclose(elements.rotation(SECONDS_2024).apply(pole), [0.0, 0.0, 1.0], atol=1e-14)

    def test_custom_body(self) -> None:
        body = Body(-999, "Probe", elements=RotationalElements((0.0,), (90.0,), (0.0, 360.0)))
        _, rate = body.rotational_elements().prime_meridian_at(0.0)
        assert rate == pytest.approx(2 * math.pi / 86400.0)


class TestSatellitesAndMinorBodies:
    @pytest.mark.parametrize(
        "name, naif_id",
        [
            ("Phobos", 401),
            ("Deimos", 402),
            ("Io", 501),
            ("Europa", 502),
            ("Ganymede", 503),
            ("Callisto", 504),
            ("Enceladus", 602),
            ("Rhea", 605),
            ("Titan", 606),
            ("Triton", 801),
            ("Charon", 901),
            ("Ceres", 2000001),
            ("Pallas", 2000002),
            ("Vesta", 2000004),
            ("Lutetia", 2000021),
            ("Eros", 2000433),
            ("Davida", 2000511),
            ("Steins", 2002867),
            ("Itokawa", 2025143),
            ("Ida", 2431010),
            ("Gaspra", 9511010),
        ],
    )
    def test_catalog_entry(self, name: str, naif_id: int) -> None:
        body = get_body(name)
        assert body.naif_id == naif_id
        assert get_body(naif_id) is body
        matrix = body.rotational_elements().rotation(SECONDS_2024).matrix
        np.testing.assert_allclose(matrix @ matrix.T, np.eye(3), atol=1e-14)

    def test_satellites_share_the_barycenter_angles(self) -> None:
        for moon, planet in (("Phobos", "Mars"), ("Io", "Jupiter"), ("Triton", "Neptune")):
            angles = get_body(moon).rotational_elements().nut_prec_angles
            assert angles is get_body(planet).rotational_elements().nut_prec_angles

    def test_angle_rates_are_radians_per_second(self) -> None:
        _, rates = get_body("Moon").rotational_elements()._theta(0.0)
        assert rates[0] == pytest.approx(math.radians(-1935.5364525) / SECONDS_PER_JULIAN_CENTURY, rel=1e-14)

    def test_quadratic_angle(self) -> None:
        t = 10.0
        theta, rates = get_body("Phobos").rotational_elements()._theta(t)
        expected = math.radians(189.6327156 + 41215158.1842005 * t + 12.711923222 * t**2)
        assert theta[4] == pytest.approx(expected, rel=1e-14)
        expected_rate = math.radians(41215158.1842005 + 2 * 12.711923222 * t) / SECONDS_PER_JULIAN_CENTURY
        assert rates[4] == pytest.approx(expected_rate, rel=1e-12)

    def test_titan_spin(self) -> None:
        _, rate = get_body("Titan").rotational_elements().prime_meridian_at(0.0)
        assert rate == pytest.approx(math.radians(22.5769768) / 86400.0, rel=1e-12)

    def test_asteroid_shape(self) -> None:
        vesta = get_body("Vesta")
        assert vesta.flattening == pytest.approx((289.0 - 229.0) / 289.0)
        assert get_body("Pallas").flattening is None
