"""Tests for instants on continuous time scales."""

import pytest

from epochframe.core.calendar import Date, TimeOfDay
from epochframe.core.deltas import Delta
from epochframe.core.errors import InvalidDateError, InvalidTimeError, MismatchedScaleError
from epochframe.core.instant import Instant
from epochframe.core.scales import TimeScale
from epochframe.core.utc import UTC


class TestTimeScale:
    def test_from_name_case_insensitive(self) -> None:
        assert TimeScale.from_name("tdb") is TimeScale.TDB
        assert TimeScale.from_name(" UT1 ") is TimeScale.UT1

    def test_utc_is_not_a_scale(self) -> None:
        with pytest.raises(ValueError, match="Unknown time scale"):
            TimeScale.from_name("UTC")

    def test_long_name(self) -> None:
        assert TimeScale.TT.long_name == "Terrestrial Time"


class TestConstruction:
    def test_j2000(self) -> None:
        t = Instant.j2000(TimeScale.TT)
        assert t.julian_date() == (2451545.0, 0.0)
        assert t.seconds_since_j2000() == 0.0

    def test_from_calendar(self) -> None:
        assert Instant.from_calendar(TimeScale.TT, 2000, 1, 1, 12) == Instant.j2000(TimeScale.TT)

    def test_from_iso_with_suffix(self) -> None:
        assert Instant.from_iso("2000-01-01T12:00:00 TT") == Instant.j2000(TimeScale.TT)

    def test_from_iso_defaults_to_tai(self) -> None:
        assert Instant.from_iso("2000-01-01T12:00:00").scale is TimeScale.TAI

    def test_from_iso_scale_argument(self) -> None:
        t = Instant.from_iso("2000-01-01T12:00:00", TimeScale.TDB)
        assert t == Instant.j2000(TimeScale.TDB)

    def test_from_iso_conflicting_scale_raises(self) -> None:
        with pytest.raises(MismatchedScaleError):
            Instant.from_iso("2000-01-01T12:00:00 TT", TimeScale.TDB)

    def test_from_iso_utc_suffix_points_to_utc(self) -> None:
        with pytest.raises(MismatchedScaleError, match="UTC.from_iso"):
            Instant.from_iso("2024-07-05T09:09:18.173 UTC")

    def test_from_iso_malformed_raises(self) -> None:
        with pytest.raises(InvalidDateError):
            Instant.from_iso("yesterday")

    def test_second_60_rejected(self) -> None:
        with pytest.raises(InvalidTimeError, match="only valid in UTC"):
            Instant.from_calendar(TimeScale.TAI, 2016, 12, 31, 23, 59, 60)

    def test_modified_julian_date(self) -> None:
        t = Instant.from_modified_julian_date(TimeScale.TT, 51544.5)
        assert t == Instant.j2000(TimeScale.TT)
        assert t.modified_julian_date() == 51544.5

    def test_from_julian_date(self) -> None:
        t = Instant.from_julian_date(TimeScale.TDB, 2451545.0, -0.5)
        assert t.date() == Date(2000, 1, 1)
        assert t.time_of_day() == TimeOfDay()


class TestAccessors:
    def test_calendar_fields(self) -> None:
        t = Instant.from_calendar(TimeScale.TAI, 2024, 7, 5, 9, 9, 18, 0.25)
        assert t.date() == Date(2024, 7, 5)
        assert t.time_of_day() == TimeOfDay(9, 9, 18, 0.25)

    def test_before_j2000(self) -> None:
        t = Instant.from_calendar(TimeScale.TT, 1999, 12, 31, 23, 59, 59, 0.5)
        assert t.date() == Date(1999, 12, 31)
        assert t.seconds_since_j2000() == -43200.5

    def test_days_and_centuries(self) -> None:
        t = Instant.from_calendar(TimeScale.TT, 2100, 1, 1, 12)
        assert t.days_since_j2000() == 36525.0
        assert t.centuries_since_j2000() == pytest.approx(1.0)

    def test_str(self) -> None:
        assert str(Instant.j2000(TimeScale.TT)) == "2000-01-01T12:00:00.000 TT"


class TestArithmetic:
    def test_add_and_subtract_delta(self) -> None:
        t = Instant.j2000(TimeScale.TAI) + Delta(60)
        assert t - Instant.j2000(TimeScale.TAI) == Delta(60)
        assert t - Delta(60) == Instant.j2000(TimeScale.TAI)

    def test_subtract_mismatched_scales_raises(self) -> None:
        with pytest.raises(MismatchedScaleError):
            Instant.j2000(TimeScale.TAI) - Instant.j2000(TimeScale.TT)

    def test_compare_mismatched_scales_raises(self) -> None:
        with pytest.raises(MismatchedScaleError):
            Instant.j2000(TimeScale.TAI) < Instant.j2000(TimeScale.TT)

    def test_equality_includes_scale(self) -> None:
        assert Instant.j2000(TimeScale.TAI) != Instant.j2000(TimeScale.TT)

    def test_ordering(self) -> None:
        a = Instant.j2000(TimeScale.TT)
        b = a + Delta(0, 1e-9)
        assert a < b and b > a and a <= a and b >= a

    def test_is_close(self) -> None:
        a = Instant.j2000(TimeScale.TT)
        assert a.is_close(a + Delta.from_seconds(1e-13))
        # far from J2000 the default tolerance stays absolute
        late = Instant.from_calendar(TimeScale.TT, 2024, 7, 5)
        assert not late.is_close(late + Delta.from_seconds(0.5))
        assert late.is_close(late + Delta.from_seconds(0.5), rel_tol=1e-9)
        with pytest.raises(MismatchedScaleError):
            a.is_close(Instant.j2000(TimeScale.TDB))


class TestConversionShortcuts:
    def test_to_scale(self) -> None:
        tt = Instant.j2000(TimeScale.TAI).to_scale(TimeScale.TT)
        assert tt.scale is TimeScale.TT
        assert tt.delta.is_close(Delta.from_seconds(32.184))

    def test_to_utc(self) -> None:
        tai = Instant.from_calendar(TimeScale.TAI, 2017, 1, 1, 0, 0, 37)
        assert tai.to_utc() == UTC.from_calendar(2017, 1, 1)

    def test_to_utc_inside_leap_second(self) -> None:
        tai = Instant.from_calendar(TimeScale.TAI, 2017, 1, 1, 0, 0, 36)
        assert tai.to_utc() == UTC.from_calendar(2016, 12, 31, 23, 59, 60)
