"""Reference frame catalog and frame-to-frame transformations.

The frames form a tree rooted at the ICRF::

    ICRF ─┬─ CIRF ── TIRF ── ITRF
          ├─ MOD(c) ── TOD(c) ─┬─ PEF(c)
          │                    └─ TEME            (c = IERS1996 only)
          └─ IAU_<BODY>

Every edge is a hop function from :mod:`epochframe.core.iers` or the IAU
body model; any other pair of frames is connected through the nearest
common ancestor. Rotations are recomputed on every call.

Example:
    >>> itrf = Frame.from_name("ITRF")
    >>> state = StateVector(r, v, epoch)              # ICRF by default
    >>> transform(state, itrf, eop_provider=eop)
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Optional

import numpy as np
from numpy.typing import NDArray

from epochframe.core import iers
from epochframe.core.bodies import Body, get_body
from epochframe.core.conversions import convert
from epochframe.core.eop import EopProvider
from epochframe.core.errors import EpochframeError, UnsupportedFrameError, with_hop
from epochframe.core.iers import DEFAULT_CONVENTION, IersConvention
from epochframe.core.instant import Instant
from epochframe.core.rotations import Rotation
from epochframe.core.scales import TimeScale

logger = logging.getLogger(__name__)


class FrameKind(Enum):
    """Frame families."""

    ICRF = "ICRF"
    CIRF = "CIRF"
    TIRF = "TIRF"
    ITRF = "ITRF"
    MOD = "MOD"
    TOD = "TOD"
    PEF = "PEF"
    TEME = "TEME"
    IAU = "IAU"


_EQUINOX_KINDS = frozenset({FrameKind.MOD, FrameKind.TOD, FrameKind.PEF})

_ALIASES = {
    "GCRF": FrameKind.ICRF,
    "ICRS": FrameKind.ICRF,
    "GCRS": FrameKind.ICRF,
    "EME2000": FrameKind.ICRF,
}


@dataclass(frozen=True)
class Frame:
    """A reference frame.

    Equinox-based frames (MOD, TOD, PEF) carry the IERS convention of their
    precession-nutation model and default to IERS 2010. Body-fixed frames
    carry their body. Frames are plain values: equal parameters mean the same
    frame.

    Attributes:
        kind: Frame family.
        convention: IERS convention, equinox-based frames only.
        body: Body of an ``IAU`` body-fixed frame.

    Raises:
        UnsupportedFrameError: If a parameter does not apply to the kind.
        UnsupportedBodyError: If a body-fixed frame is requested for a body
            without rotational elements.
    """

    kind: FrameKind
    convention: Optional[IersConvention] = None
    body: Optional[Body] = field(default=None, compare=False, repr=False)
    naif_id: Optional[int] = field(default=None, init=False)

    def __post_init__(self) -> None:
        if self.kind in _EQUINOX_KINDS:
            if self.convention is None:
                object.__setattr__(self, "convention", DEFAULT_CONVENTION)
        elif self.convention is not None:
            raise UnsupportedFrameError(f"{self.kind.value} does not take an IERS convention")
        if self.kind is FrameKind.IAU:
            if self.body is None:
                raise UnsupportedFrameError("A body-fixed frame requires a body")
            self.body.rotational_elements()
            object.__setattr__(self, "naif_id", self.body.naif_id)
        elif self.body is not None:
            raise UnsupportedFrameError(f"{self.kind.value} does not take a body")

    @classmethod
    def iau(cls, body: Body | str | int) -> Frame:
        """IAU body-fixed frame of ``body`` (a :class:`Body`, name or NAIF id)."""
        if not isinstance(body, Body):
            body = get_body(body)
        return cls(FrameKind.IAU, body=body)

    @classmethod
    def from_name(cls, name: str, convention: IersConvention | None = None) -> Frame:
        """Parse a frame name such as ``"ITRF"``, ``"gcrf"`` or ``"IAU_MARS"``.

        Raises:
            UnsupportedFrameError: If the name is not recognised.
            UnsupportedBodyError: If an ``IAU_`` frame names an unknown body
                or one without rotational elements.
        """
        key = name.strip().upper()
        if key.startswith("IAU_"):
            return cls.iau(key[4:])
        kind = _ALIASES.get(key)
        if kind is None:
            try:
                kind = FrameKind(key)
            except ValueError:
                raise UnsupportedFrameError(f"Unknown frame: {name!r}") from None
        if kind is FrameKind.IAU:
            raise UnsupportedFrameError(f"Body-fixed frame names need a body, e.g. 'IAU_EARTH', got {name!r}")
        return cls(kind, convention if kind in _EQUINOX_KINDS else None)

    @property
    def name(self) -> str:
        if self.kind is FrameKind.IAU:
            return f"IAU_{self.body.name.upper().replace(' ', '_')}"
        return self.kind.value

    @property
    def parent(self) -> Frame | None:
        """The frame this one is defined against, None for the ICRF."""
        kind = self.kind
        if kind is FrameKind.ICRF:
            return None
        if kind in (FrameKind.CIRF, FrameKind.MOD, FrameKind.IAU):
            return ICRF
        if kind is FrameKind.TIRF:
            return CIRF
        if kind is FrameKind.ITRF:
            return TIRF
        if kind is FrameKind.TOD:
            return Frame(FrameKind.MOD, self.convention)
        if kind is FrameKind.PEF:
            return Frame(FrameKind.TOD, self.convention)
        return Frame(FrameKind.TOD, IersConvention.IERS1996)

    def ancestry(self) -> list[Frame]:
        """This frame followed by its ancestors up to the ICRF."""
        chain = [self]
        while chain[-1].parent is not None:
            chain.append(chain[-1].parent)
        return chain

    def __str__(self) -> str:
        if self.kind in _EQUINOX_KINDS:
            return f"{self.name}({self.convention})"
        return self.name


ICRF = Frame(FrameKind.ICRF)
CIRF = Frame(FrameKind.CIRF)
TIRF = Frame(FrameKind.TIRF)
ITRF = Frame(FrameKind.ITRF)
TEME = Frame(FrameKind.TEME)

Hop = Callable[[Frame, Instant, Optional[EopProvider]], Rotation]


def _icrf_to_cirf(child: Frame, instant: Instant, eop: EopProvider | None) -> Rotation:
    return iers.icrf_to_cirf(instant, eop)


def _cirf_to_tirf(child: Frame, instant: Instant, eop: EopProvider | None) -> Rotation:
    return iers.cirf_to_tirf(instant, eop)


def _tirf_to_itrf(child: Frame, instant: Instant, eop: EopProvider | None) -> Rotation:
    return iers.tirf_to_itrf(instant, eop)


def _icrf_to_mod(child: Frame, instant: Instant, eop: EopProvider | None) -> Rotation:
    return iers.icrf_to_mod(instant, child.convention, eop)


def _mod_to_tod(child: Frame, instant: Instant, eop: EopProvider | None) -> Rotation:
    return iers.mod_to_tod(instant, child.convention, eop)


def _tod_to_pef(child: Frame, instant: Instant, eop: EopProvider | None) -> Rotation:
    return iers.tod_to_pef(instant, child.convention, eop)


def _tod_to_teme(child: Frame, instant: Instant, eop: EopProvider | None) -> Rotation:
    return iers.tod_to_teme(instant, eop)


def _icrf_to_body_fixed(child: Frame, instant: Instant, eop: EopProvider | None) -> Rotation:
    tdb = convert(instant, TimeScale.TDB, eop)
    return child.body.rotational_elements().rotation(tdb.seconds_since_j2000())


_HOPS: dict[tuple[FrameKind, FrameKind], Hop] = {
    (FrameKind.ICRF, FrameKind.CIRF): _icrf_to_cirf,
    (FrameKind.CIRF, FrameKind.TIRF): _cirf_to_tirf,
    (FrameKind.TIRF, FrameKind.ITRF): _tirf_to_itrf,
    (FrameKind.ICRF, FrameKind.MOD): _icrf_to_mod,
    (FrameKind.MOD, FrameKind.TOD): _mod_to_tod,
    (FrameKind.TOD, FrameKind.PEF): _tod_to_pef,
    (FrameKind.TOD, FrameKind.TEME): _tod_to_teme,
    (FrameKind.ICRF, FrameKind.IAU): _icrf_to_body_fixed,
}


def _hop(child: Frame, instant: Instant, eop: EopProvider | None) -> Rotation:
    """Rotation from ``child.parent`` to ``child``, naming the hop on failure."""
    parent = child.parent
    hop = _HOPS.get((parent.kind, child.kind))
    if hop is None:
        raise UnsupportedFrameError(f"No transformation defined from {parent} to {child}")
    try:
        return hop(child, instant, eop)
    except EpochframeError as err:
        raise with_hop(err, f"{parent} -> {child}") from err


def path(origin: Frame, target: Frame) -> list[Frame]:
    """Frames visited from ``origin`` to ``target``, both included."""
    up = origin.ancestry()
    down = target.ancestry()
    common = next(frame for frame in up if frame in down)
    return up[: up.index(common) + 1] + list(reversed(down[: down.index(common)]))


def rotation(
    origin: Frame,
    target: Frame,
    instant: Instant,
    eop_provider: EopProvider | None = None,
) -> Rotation:
    """Rotation taking vectors from ``origin`` to ``target`` at ``instant``.

    Args:
        origin: Frame the vectors are given in.
        target: Frame to express them in.
        instant: Epoch on any time scale.
        eop_provider: Earth orientation data; required for frames that depend
            on UT1 or polar motion.

    Returns:
        The rotation and its rate.

    Raises:
        MissingOffsetProviderError: If a hop needs EOP data and none is given.
        OutOfRangeError: If the EOP data does not cover the instant.
        UnsupportedFrameError: If no transformation is defined.
    """
    if origin == target:
        return Rotation.identity()
    up = origin.ancestry()
    down = target.ancestry()
    common = next(frame for frame in up if frame in down)

    result = Rotation.identity()
    for child in up[: up.index(common)]:
        result = _hop(child, instant, eop_provider).inverse() @ result
    for child in reversed(down[: down.index(common)]):
        result = _hop(child, instant, eop_provider) @ result
    logger.debug("Rotation %s -> %s at %s via %s", origin, target, instant, common)
    return result


@dataclass(eq=False)
class StateVector:
    """Position and velocity in a reference frame.

    Attributes:
        position_km: [x, y, z] position in km.
        velocity_km_s: [vx, vy, vz] velocity in km/s.
        epoch: Time of this state vector.
        frame: Frame the components are expressed in.
    """

    position_km: NDArray[np.float64]  # shape (3,)
    velocity_km_s: NDArray[np.float64]  # shape (3,)
    epoch: Instant
    frame: Frame = ICRF

    def __post_init__(self) -> None:
        self.position_km = np.asarray(self.position_km, dtype=np.float64)
        self.velocity_km_s = np.asarray(self.velocity_km_s, dtype=np.float64)
        if self.position_km.shape != (3,) or self.velocity_km_s.shape != (3,):
            raise ValueError("Position and velocity must have shape (3,)")


def transform(state: StateVector, target: Frame, eop_provider: EopProvider | None = None) -> StateVector:
    """Express a state vector in another frame.

    The velocity includes the transport term of a rotating target frame.

    Raises:
        MissingOffsetProviderError: If a hop needs EOP data and none is given.
        OutOfRangeError: If the EOP data does not cover the epoch.
        UnsupportedFrameError: If no transformation is defined.
    """
    rot = rotation(state.frame, target, state.epoch, eop_provider)
    position, velocity = rot.apply_state(state.position_km, state.velocity_km_s)
    return StateVector(position, velocity, state.epoch, target)
