"""Shared fixtures: Earth orientation providers around the SOFA cookbook epoch."""

import pytest

from epochframe.core.eop import EopProvider, EopSample
from epochframe.core.instant import Instant
from epochframe.core.scales import TimeScale

# 2007-04-05T12:00:00 UTC, TAI - UTC = 33 s
COOKBOOK_TT = Instant.from_julian_date(TimeScale.TT, 2454195.5, 0.500754444444444)
COOKBOOK_DUT1 = -0.072073685
COOKBOOK_XP = 0.0349282  # arcsec
COOKBOOK_YP = 0.4833163  # arcsec
COOKBOOK_MJDS = (54194.0, 54195.0, 54196.0)


def _cookbook_samples(**corrections: float) -> list[EopSample]:
    return [
        EopSample(mjd, COOKBOOK_DUT1, COOKBOOK_XP, COOKBOOK_YP, **corrections)
        for mjd in COOKBOOK_MJDS
    ]


@pytest.fixture
def eop_plain() -> EopProvider:
    """UT1 and polar motion only, no precession-nutation corrections."""
    return EopProvider(_cookbook_samples())


@pytest.fixture
def eop_2006() -> EopProvider:
    """Celestial pole offsets of the IAU 2006/2000A cookbook example."""
    return EopProvider(_cookbook_samples(dx=0.1750, dy=-0.2259))


@pytest.fixture
def eop_2000() -> EopProvider:
    """Celestial pole offsets of the IAU 2000A cookbook example."""
    return EopProvider(_cookbook_samples(dx=0.1725, dy=-0.2650))


@pytest.fixture
def eop_1980() -> EopProvider:
    """IAU 1980 nutation corrections."""
    return EopProvider(_cookbook_samples(dpsi=-55.0655, deps=-6.3580))
