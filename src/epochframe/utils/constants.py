from __future__ import annotations

"""Time and Earth-orientation constants.

All values in SI units unless otherwise noted. Epoch-relative quantities are
seconds since J2000 (2000-01-01T12:00:00) of the relevant time scale.
"""

import math

# --- Calendar and epochs ---
SECONDS_PER_MINUTE: int = 60
"""Seconds in one minute."""

SECONDS_PER_HOUR: int = 3600
"""Seconds in one hour."""

SECONDS_PER_DAY: int = 86400
"""Seconds in one (non-leap) day."""

SECONDS_PER_HALF_DAY: int = 43200
"""Offset between midnight and the J2000 noon epoch."""

DAYS_PER_JULIAN_YEAR: float = 365.25
"""Days in one Julian year."""

DAYS_PER_JULIAN_CENTURY: float = 36525.0
"""Days in one Julian century."""

SECONDS_PER_JULIAN_YEAR: float = DAYS_PER_JULIAN_YEAR * SECONDS_PER_DAY
"""Seconds in one Julian year."""

SECONDS_PER_JULIAN_CENTURY: float = DAYS_PER_JULIAN_CENTURY * SECONDS_PER_DAY
"""Seconds in one Julian century."""

J2000_JD: float = 2451545.0
"""Julian date of J2000."""

MJD_OFFSET: float = 2400000.5
"""Difference between Julian date and modified Julian date."""

J2000_MJD: float = J2000_JD - MJD_OFFSET
"""Modified Julian date of J2000 (51544.5)."""

# --- TAI/TT ---
TT_MINUS_TAI: float = 32.184
"""Constant offset TT - TAI in seconds."""

J77_TAI: int = -725803200
"""TAI 1977-01-01T00:00:00 in seconds since J2000."""

J77_TT: float = -7.25803167816e8
"""TT 1977-01-01T00:00:32.184 in seconds since J2000."""

# --- TCG/TCB scale factors (IAU 2000 B1.9, IAU 2006 B3) ---
LG: float = 6.969290134e-10
"""Rate difference between TCG and TT."""

INV_LG: float = LG / (1.0 - LG)
"""Rate difference between TT and TCG, relative to TT."""

LB: float = 1.550519768e-8
"""Rate difference between TCB and TDB."""

INV_LB: float = LB / (1.0 - LB)
"""Rate difference between TDB and TCB, relative to TDB."""

TDB_0: float = -6.55e-5
"""TDB - TCB offset at 1977-01-01T00:00:32.184 TT, in seconds."""

TCB_77: float = TDB_0 + LB * (J77_TAI + TT_MINUS_TAI)
"""TCB - TDB bookkeeping constant at the 1977 reference epoch."""

# --- TT/TDB periodic series ---
TDB_K: float = 1.657e-3
"""Amplitude of the TDB - TT periodic term in seconds."""

TDB_EB: float = 1.671e-2
"""Eccentricity of the Earth-Moon barycenter orbit."""

TDB_M_0: float = 6.239996
"""Mean anomaly of the Earth-Moon barycenter at J2000 in radians."""

TDB_M_1: float = 1.99096871e-7
"""Mean motion of the Earth-Moon barycenter in rad/s."""

TDB_ITERATIONS: int = 3
"""Fixed-point iterations used to invert the TT -> TDB series."""

# --- Earth orientation ---
ROTATION_RATE_EARTH: float = 7.292115146706979e-5
"""Nominal angular velocity of the Earth in rad/s."""

ARCSECONDS_TO_RAD: float = math.pi / (180.0 * 3600.0)
"""Conversion factor from arcseconds to radians."""

MILLIARCSECONDS_TO_RAD: float = ARCSECONDS_TO_RAD / 1000.0
"""Conversion factor from milliarcseconds to radians."""

UT1_ITERATIONS: int = 3
"""Fixed-point iterations used to invert the UT1 - TAI series."""

# --- UTC ---
UTC_EARLIEST_MJD: int = 36934
"""MJD of 1960-01-01, the start of the UTC definition."""
