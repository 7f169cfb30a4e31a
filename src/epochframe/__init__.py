"""
epochframe: Astronomical time scales and reference frames for Python.

Precision-preserving instants on TAI, TT, TDB, TCB, TCG and UT1, leap-second
aware UTC, Earth orientation data, and position/velocity transformations
between inertial, terrestrial, equinox-based and body-fixed frames.
"""

from __future__ import annotations

__version__ = "0.1.0-dev"

from epochframe.core.deltas import Delta
from epochframe.core.calendar import Date, TimeOfDay
from epochframe.core.scales import TimeScale
from epochframe.core.instant import Instant
from epochframe.core.conversions import convert
from epochframe.core.leap_seconds import DEFAULT_LEAP_SECONDS, LeapSecondsTable
from epochframe.core.utc import UTC
from epochframe.core.eop import EopProvider, EopSample, Interpolation
from epochframe.core.rotations import Rotation
from epochframe.core.bodies import Body, get_body
from epochframe.core.iers import IersConvention
from epochframe.core.frames import Frame, FrameKind, StateVector, rotation, transform
from epochframe.core.errors import (
    EopParseError,
    EpochframeError,
    InvalidDateError,
    InvalidTimeError,
    LeapTableParseError,
    MismatchedScaleError,
    MissingOffsetProviderError,
    OutOfRangeError,
    UnsupportedBodyError,
    UnsupportedFrameError,
)
from epochframe.data.lsk import parse_lsk, read_lsk
from epochframe.data.iers_finals import parse_finals_csv, read_finals_csv

__all__ = [
    "__version__",
    "Delta",
    "Date",
    "TimeOfDay",
    "TimeScale",
    "Instant",
    "convert",
    "DEFAULT_LEAP_SECONDS",
    "LeapSecondsTable",
    "UTC",
    "EopProvider",
    "EopSample",
    "Interpolation",
    "Rotation",
    "Body",
    "get_body",
    "IersConvention",
    "Frame",
    "FrameKind",
    "StateVector",
    "rotation",
    "transform",
    "EpochframeError",
    "InvalidDateError",
    "InvalidTimeError",
    "MismatchedScaleError",
    "MissingOffsetProviderError",
    "OutOfRangeError",
    "UnsupportedBodyError",
    "UnsupportedFrameError",
    "EopParseError",
    "LeapTableParseError",
    "parse_lsk",
    "read_lsk",
    "parse_finals_csv",
    "read_finals_csv",
]
