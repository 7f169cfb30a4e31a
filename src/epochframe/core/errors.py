"""Exception types raised by time and frame computations."""

from __future__ import annotations


class EpochframeError(ValueError):
    """Base class for all errors raised by epochframe."""


class InvalidDateError(EpochframeError):
    """A calendar date is malformed or does not exist."""


class InvalidTimeError(EpochframeError):
    """A time of day is malformed or out of range."""


class MismatchedScaleError(EpochframeError):
    """Arithmetic or comparison between instants on different time scales."""


class MissingOffsetProviderError(EpochframeError):
    """A UT1- or polar-motion-dependent operation was called without a provider."""


class OutOfRangeError(EpochframeError):
    """An instant lies outside the span covered by an offset provider."""


class UnsupportedBodyError(EpochframeError):
    """A body is unknown or has no rotational elements."""


class UnsupportedFrameError(EpochframeError):
    """A frame name or frame parameterisation is not supported."""


class EopParseError(EpochframeError):
    """Earth orientation data is malformed."""


class LeapTableParseError(EpochframeError):
    """Leap-second data is malformed."""


def with_hop(err: EpochframeError, hop: str) -> EpochframeError:
    """Return a copy of ``err`` whose message names the failing hop.

    The copy keeps the original exception type so callers can still catch
    the specific error class.
    """
    wrapped = type(err)(f"{hop}: {err}")
    wrapped.hop = hop  # type: ignore[attr-defined]
    return wrapped
