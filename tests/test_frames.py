"""Tests for the frame catalog and state vector transformations."""

import math

import erfa
import numpy as np
import pytest

from epochframe.core import iers
from epochframe.core.eop import EopProvider, EopSample
from epochframe.core.errors import (
    MissingOffsetProviderError,
    OutOfRangeError,
    UnsupportedBodyError,
    UnsupportedFrameError,
)
from epochframe.core.frames import (
    CIRF,
    ICRF,
    ITRF,
    TEME,
    TIRF,
    Frame,
    FrameKind,
    StateVector,
    path,
    rotation,
    transform,
)
from epochframe.core.iers import IersConvention
from epochframe.core.instant import Instant
from epochframe.core.rotations import Rotation
from epochframe.core.scales import TimeScale
from epochframe.core.utc import UTC

from conftest import COOKBOOK_TT

EPOCH_2024 = UTC.from_iso("2024-07-05T09:09:18.173").to_scale(TimeScale.TDB)
R_2024 = np.array([-5530.01774359, -3487.0895338, -1850.03476185])
V_2024 = np.array([1.29534407, -5.02456882, 5.6391936])
R_2000 = np.array([6068.27927, -1692.84394, -2516.61918])
V_2000 = np.array([-0.660415582, 5.495938726, -5.303093233])


class TestFrameCatalog:
    @pytest.mark.parametrize("name", ["ICRF", "icrf", "GCRF", "ICRS", "EME2000"])
    def test_inertial_aliases(self, name: str) -> None:
        assert Frame.from_name(name) == ICRF

    def test_body_fixed_names(self) -> None:
        moon = Frame.from_name("IAU_MOON")
        assert moon == Frame.iau("Moon") == Frame.iau(301)
        assert moon.naif_id == 301
        assert moon.name == "IAU_MOON"
        assert Frame.from_name("iau_mars").body.naif_id == 499

    def test_unknown_name_raises(self) -> None:
        with pytest.raises(UnsupportedFrameError, match="Unknown frame"):
            Frame.from_name("J2000ECLIPTIC")

    def test_bare_iau_raises(self) -> None:
        with pytest.raises(UnsupportedFrameError):
            Frame.from_name("IAU")

    def test_body_without_elements_raises(self) -> None:
        with pytest.raises(UnsupportedBodyError):
            Frame.from_name("IAU_SSB")
        with pytest.raises(UnsupportedBodyError):
            Frame.iau("Vulcan")

    def test_equinox_frames_default_to_iers2010(self) -> None:
        mod = Frame.from_name("MOD")
        assert mod.convention is IersConvention.IERS2010
        assert str(mod) == "MOD(IERS2010)"
        assert Frame.from_name("TOD", IersConvention.IERS1996) != Frame.from_name("TOD")

    def test_convention_rejected_for_other_frames(self) -> None:
        with pytest.raises(UnsupportedFrameError, match="does not take an IERS convention"):
            Frame(FrameKind.ITRF, IersConvention.IERS2010)

    def test_parents(self) -> None:
        assert ICRF.parent is None
        assert ITRF.parent == TIRF
        assert TIRF.parent == CIRF
        assert TEME.parent == Frame(FrameKind.TOD, IersConvention.IERS1996)
        assert Frame.from_name("PEF").parent == Frame(FrameKind.TOD)
        assert Frame.iau("Mars").parent == ICRF

    def test_path_through_common_ancestor(self) -> None:
        old = IersConvention.IERS1996
        assert path(ITRF, TEME) == [
            ITRF, TIRF, CIRF, ICRF, Frame(FrameKind.MOD, old), Frame(FrameKind.TOD, old), TEME,
        ]

    def test_path_between_siblings(self) -> None:
        tod = Frame(FrameKind.TOD)
        assert path(Frame(FrameKind.PEF), tod) == [Frame(FrameKind.PEF), tod]
        assert path(tod, tod) == [tod]


class TestRotations:
    def test_identity(self) -> None:
        assert rotation(ITRF, ITRF, COOKBOOK_TT).is_close(Rotation.identity())

    def test_matches_model_chain(self, eop_2006: EopProvider) -> None:
        chain = (
            iers.tirf_to_itrf(COOKBOOK_TT, eop_2006)
            @ iers.cirf_to_tirf(COOKBOOK_TT, eop_2006)
            @ iers.icrf_to_cirf(COOKBOOK_TT, eop_2006)
        )
        assert rotation(ICRF, ITRF, COOKBOOK_TT, eop_2006).is_close(chain, atol=1e-15)

    def test_reverse_is_inverse(self, eop_2006: EopProvider) -> None:
        forward = rotation(TEME, ITRF, COOKBOOK_TT, eop_2006)
        backward = rotation(ITRF, TEME, COOKBOOK_TT, eop_2006)
        assert (backward @ forward).is_close(Rotation.identity(), atol=1e-13)

    def test_teme_to_pef_is_mean_sidereal_time(self, eop_plain: EopProvider) -> None:
        pef = Frame(FrameKind.PEF, IersConvention.IERS1996)
        ut1 = COOKBOOK_TT.to_scale(TimeScale.UT1, eop_plain).julian_date()
        matrix = rotation(TEME, pef, COOKBOOK_TT, eop_plain).matrix
        np.testing.assert_allclose(matrix, erfa.rz(erfa.gmst82(*ut1), np.eye(3)), atol=1e-12)

    def test_pef_and_tirf_nearly_coincide(self, eop_2006: EopProvider) -> None:
        pef = Frame(FrameKind.PEF, IersConvention.IERS2010)
        matrix = rotation(pef, TIRF, COOKBOOK_TT, eop_2006).matrix
        np.testing.assert_allclose(matrix, np.eye(3), atol=1e-8)

    def test_earth_body_frame_at_j2000(self) -> None:
        rot = rotation(ICRF, Frame.iau("Earth"), Instant.j2000(TimeScale.TDB))
        expected = erfa.rz(math.radians(190.147) + math.pi / 2, np.eye(3))
        np.testing.assert_allclose(rot.matrix, expected, atol=1e-14)

    def test_earth_body_frame_reference(self) -> None:
        midnight = Instant.from_calendar(TimeScale.TDB, 2000, 1, 1)
        state = StateVector(R_2000, V_2000, midnight)
        fixed = transform(state, Frame.iau("Earth"))
        np.testing.assert_allclose(
            fixed.position_km,
            [-2686.528145086, -5698.446837946, -2516.619987566],
            rtol=0.0,
            atol=1e-6,
        )
        np.testing.assert_allclose(
            fixed.velocity_km_s,
            [5.113319779, -0.074708197, -5.303093145],
            rtol=0.0,
            atol=1e-6,
        )


class TestErrors:
    def test_missing_provider_names_the_hop(self) -> None:
        state = StateVector(R_2024, V_2024, COOKBOOK_TT)
        with pytest.raises(MissingOffsetProviderError, match="CIRF -> TIRF") as excinfo:
            transform(state, ITRF)
        assert excinfo.value.hop == "CIRF -> TIRF"

    def test_missing_provider_on_the_way_up(self) -> None:
        state = StateVector(R_2024, V_2024, COOKBOOK_TT, ITRF)
        with pytest.raises(MissingOffsetProviderError, match="TIRF -> ITRF"):
            transform(state, ICRF)

    def test_outside_coverage(self, eop_plain: EopProvider) -> None:
        state = StateVector(R_2024, V_2024, EPOCH_2024)
        with pytest.raises(OutOfRangeError, match="CIRF -> TIRF"):
            transform(state, ITRF, eop_plain)

    def test_partial_pole_offset_coverage(self) -> None:
        samples = [
            EopSample(54194.0, -0.07, 0.03, 0.48, dx=0.17, dy=-0.22),
            EopSample(54195.0, -0.07, 0.03, 0.48, dx=0.17, dy=-0.22),
            EopSample(54196.0, -0.07, 0.03, 0.48),
            EopSample(54197.0, -0.07, 0.03, 0.48),
        ]
        eop = EopProvider(samples)
        late = UTC.from_calendar(2007, 4, 7).to_scale(TimeScale.TT)
        with pytest.raises(OutOfRangeError, match="IAU2000 pole offsets") as excinfo:
            rotation(ICRF, CIRF, late, eop)
        assert excinfo.value.hop == "ICRF -> CIRF"

    def test_state_vector_shape(self) -> None:
        with pytest.raises(ValueError, match="shape"):
            StateVector([1.0, 2.0], [0.0, 0.0, 0.0], COOKBOOK_TT)


class TestTransform:
    def test_defaults_to_icrf(self) -> None:
        assert StateVector(R_2024, V_2024, EPOCH_2024).frame == ICRF

    def test_roundtrip_through_itrf(self, eop_2006: EopProvider) -> None:
        state = StateVector(R_2024, V_2024, COOKBOOK_TT)
        there = transform(state, ITRF, eop_2006)
        back = transform(there, ICRF, eop_2006)
        assert there.frame == ITRF and back.frame == ICRF
        assert there.epoch == state.epoch
        np.testing.assert_allclose(back.position_km, R_2024, atol=1e-8)
        np.testing.assert_allclose(back.velocity_km_s, V_2024, atol=1e-11)

    def test_roundtrip_between_body_frames(self, eop_2006: EopProvider) -> None:
        state = StateVector(R_2024, V_2024, COOKBOOK_TT, ITRF)
        moon = transform(state, Frame.iau("Moon"), eop_2006)
        back = transform(moon, ITRF, eop_2006)
        np.testing.assert_allclose(back.position_km, R_2024, atol=1e-8)
        np.testing.assert_allclose(back.velocity_km_s, V_2024, atol=1e-11)

    def test_earth_body_frame_roundtrip(self) -> None:
        state = StateVector(R_2024, V_2024, Instant.j2000(TimeScale.TT))
        back = transform(transform(state, Frame.iau("Earth")), ICRF)
        np.testing.assert_allclose(back.position_km, R_2024, rtol=1e-9)
        np.testing.assert_allclose(back.velocity_km_s, V_2024, rtol=1e-9)

    def test_ground_station_moves_in_inertial_space(self, eop_plain: EopProvider) -> None:
        station = StateVector([6378.137, 0.0, 0.0], [0.0, 0.0, 0.0], COOKBOOK_TT, ITRF)
        inertial = transform(station, ICRF, eop_plain)
        assert np.linalg.norm(inertial.position_km) == pytest.approx(6378.137, rel=1e-12)
        assert np.linalg.norm(inertial.velocity_km_s) == pytest.approx(0.4651, rel=1e-3)

    def test_iau_earth_reference(self) -> None:
        state = transform(StateVector(R_2024, V_2024, EPOCH_2024), Frame.iau("Earth"))
        np.testing.assert_allclose(
            state.position_km,
            [-5740.259426667957, 3121.1360727954725, -1863.1826563318027],
            rtol=1e-8,
        )
        np.testing.assert_allclose(
            state.velocity_km_s,
            [-3.53237875783652, -3.152377656863808, 5.642296713889555],
            rtol=1e-5,
        )

    def test_iau_moon_reference(self) -> None:
        state = transform(StateVector(R_2024, V_2024, EPOCH_2024), Frame.iau("Moon"))
        np.testing.assert_allclose(
            state.position_km,
            [3777.805761337502, -5633.8126664396805, -389.6880165980424],
            rtol=1e-8,
        )
        np.testing.assert_allclose(
            state.velocity_km_s,
            [2.5769017110275083, 1.2501068740060324, 7.100615382464156],
            atol=1e-5,
        )

    def test_epoch_scale_does_not_matter(self) -> None:
        tdb = transform(StateVector(R_2024, V_2024, EPOCH_2024), Frame.iau("Mars"))
        tai = transform(StateVector(R_2024, V_2024, EPOCH_2024.to_scale(TimeScale.TAI)), Frame.iau("Mars"))
        np.testing.assert_allclose(tai.position_km, tdb.position_km, atol=1e-9)

    def test_iau_jupiter_reference(self) -> None:
        noon = Instant.j2000(TimeScale.TDB)
        fixed = transform(StateVector(R_2000, V_2000, noon), Frame.iau("Jupiter"))
        np.testing.assert_allclose(
            fixed.position_km,
            [3922.220687351738, 5289.381014412637, -1631.4837924820245],
            rtol=1e-8,
        )
        np.testing.assert_allclose(
            fixed.velocity_km_s,
            [-1.852284168309543, -0.8227941105651749, -7.14175174489828],
            rtol=1e-8,
        )
        back = transform(fixed, ICRF)
        np.testing.assert_allclose(back.position_km, R_2000, rtol=1e-12)
        np.testing.assert_allclose(back.velocity_km_s, V_2000, rtol=1e-12)

    @pytest.mark.parametrize(
        "name",
        ["IAU_PHOBOS", "IAU_DEIMOS", "IAU_IO", "IAU_TITAN", "IAU_TRITON", "IAU_CHARON", "IAU_CERES", "IAU_VESTA"],
    )
    def test_natural_satellite_and_asteroid_frames(self, name: str) -> None:
        state = StateVector(R_2024, V_2024, EPOCH_2024)
        fixed = transform(state, Frame.from_name(name))
        assert np.linalg.norm(fixed.position_km) == pytest.approx(np.linalg.norm(R_2024), rel=1e-12)
        back = transform(fixed, ICRF)
        np.testing.assert_allclose(back.position_km, R_2024, atol=1e-8)
        np.testing.assert_allclose(back.velocity_km_s, V_2024, atol=1e-11)
