"""Conversions between continuous time scales.

The network is a small fixed graph::

    TCG -- TT -- TAI -- UT1
           |
          TDB -- TCB

Each edge is a pair of direct rules operating on :class:`Delta` values.
Conversions between non-adjacent scales walk the shortest path, so TT and
TDB convert directly and TCB reaches TAI through TDB and TT.
"""

from __future__ import annotations

import logging
import math
from collections import deque
from typing import Callable, Protocol

from epochframe.core.deltas import Delta
from epochframe.core.errors import EpochframeError, MissingOffsetProviderError, with_hop
from epochframe.core.instant import Instant
from epochframe.core.scales import TimeScale
from epochframe.utils.constants import (
    INV_LB,
    INV_LG,
    J77_TT,
    LB,
    LG,
    TCB_77,
    TDB_EB,
    TDB_ITERATIONS,
    TDB_K,
    TDB_M_0,
    TDB_M_1,
    TT_MINUS_TAI,
)

logger = logging.getLogger(__name__)

_TT_MINUS_TAI = Delta.from_seconds(TT_MINUS_TAI)


class Ut1Provider(Protocol):
    """Source of UT1 - TAI offsets, typically an :class:`EopProvider`."""

    def delta_ut1_tai(self, tai: Delta) -> Delta:
        """UT1 - TAI at the given TAI instant (seconds since J2000)."""
        ...

    def delta_tai_ut1(self, ut1: Delta) -> Delta:
        """TAI - UT1 at the given UT1 instant (seconds since J2000)."""
        ...


Rule = Callable[[Delta, "Ut1Provider | None"], Delta]


def tai_to_tt(tai: Delta, provider: Ut1Provider | None = None) -> Delta:
    return tai + _TT_MINUS_TAI


def tt_to_tai(tt: Delta, provider: Ut1Provider | None = None) -> Delta:
    return tt - _TT_MINUS_TAI


def tt_to_tcg(tt: Delta, provider: Ut1Provider | None = None) -> Delta:
    return tt + Delta.from_seconds(INV_LG * (tt.to_decimal_seconds() - J77_TT))


def tcg_to_tt(tcg: Delta, provider: Ut1Provider | None = None) -> Delta:
    return tcg + Delta.from_seconds(-LG * (tcg.to_decimal_seconds() - J77_TT))


def _tdb_minus_tt(tt_seconds: float) -> float:
    g = TDB_M_0 + TDB_M_1 * tt_seconds
    return TDB_K * math.sin(g + TDB_EB * math.sin(g))


def tt_to_tdb(tt: Delta, provider: Ut1Provider | None = None) -> Delta:
    """Apply the periodic TDB - TT series (Fairhead & Bretagnon leading term)."""
    return tt + Delta.from_seconds(_tdb_minus_tt(tt.to_decimal_seconds()))


def tdb_to_tt(tdb: Delta, provider: Ut1Provider | None = None) -> Delta:
    """Invert :func:`tt_to_tdb` by fixed-point iteration."""
    seconds = tdb.to_decimal_seconds()
    tt = seconds
    for _ in range(TDB_ITERATIONS):
        offset = _tdb_minus_tt(tt)
        tt = seconds - offset
    return tdb - Delta.from_seconds(offset)


def tdb_to_tcb(tdb: Delta, provider: Ut1Provider | None = None) -> Delta:
    offset = -TCB_77 / (1.0 - LB) + INV_LB * tdb.to_decimal_seconds()
    return tdb + Delta.from_seconds(offset)


def tcb_to_tdb(tcb: Delta, provider: Ut1Provider | None = None) -> Delta:
    return tcb + Delta.from_seconds(TCB_77 - LB * tcb.to_decimal_seconds())


def _require(provider: Ut1Provider | None) -> Ut1Provider:
    if provider is None:
        raise MissingOffsetProviderError(
            "UT1 conversions require an Earth orientation provider"
        )
    return provider


def tai_to_ut1(tai: Delta, provider: Ut1Provider | None = None) -> Delta:
    """Shift TAI to UT1 using the provider's UT1 - TAI series.

    Raises:
        MissingOffsetProviderError: If no provider is given.
        OutOfRangeError: If the provider does not cover the instant.
    """
    return tai + _require(provider).delta_ut1_tai(tai)


def ut1_to_tai(ut1: Delta, provider: Ut1Provider | None = None) -> Delta:
    return ut1 + _require(provider).delta_tai_ut1(ut1)


_RULES: dict[tuple[TimeScale, TimeScale], Rule] = {
    (TimeScale.TAI, TimeScale.TT): tai_to_tt,
    (TimeScale.TT, TimeScale.TAI): tt_to_tai,
    (TimeScale.TT, TimeScale.TCG): tt_to_tcg,
    (TimeScale.TCG, TimeScale.TT): tcg_to_tt,
    (TimeScale.TT, TimeScale.TDB): tt_to_tdb,
    (TimeScale.TDB, TimeScale.TT): tdb_to_tt,
    (TimeScale.TDB, TimeScale.TCB): tdb_to_tcb,
    (TimeScale.TCB, TimeScale.TDB): tcb_to_tdb,
    (TimeScale.TAI, TimeScale.UT1): tai_to_ut1,
    (TimeScale.UT1, TimeScale.TAI): ut1_to_tai,
}


def _shortest_path(origin: TimeScale, target: TimeScale) -> list[TimeScale]:
    previous: dict[TimeScale, TimeScale | None] = {origin: None}
    queue = deque([origin])
    while queue:
        scale = queue.popleft()
        if scale is target:
            break
        for src, dst in _RULES:
            if src is scale and dst not in previous:
                previous[dst] = scale
                queue.append(dst)
    path = [target]
    while previous[path[-1]] is not None:
        path.append(previous[path[-1]])
    return path[::-1]


_ROUTES: dict[tuple[TimeScale, TimeScale], list[TimeScale]] = {
    (a, b): _shortest_path(a, b) for a in TimeScale for b in TimeScale
}


def route(origin: TimeScale, target: TimeScale) -> list[TimeScale]:
    """Return the scales visited when converting ``origin`` to ``target``."""
    return list(_ROUTES[(origin, target)])


def convert(instant: Instant, target: TimeScale, provider: Ut1Provider | None = None) -> Instant:
    """Convert an instant to another continuous time scale.

    Args:
        instant: The instant to convert.
        target: The target scale.
        provider: UT1 - TAI source, needed whenever the route touches UT1.

    Returns:
        A new instant on ``target``.

    Raises:
        MissingOffsetProviderError: If the route needs UT1 and no provider
            is given.
        OutOfRangeError: If the provider does not cover the instant.
    """
    path = _ROUTES[(instant.scale, target)]
    delta = instant.delta
    for src, dst in zip(path, path[1:]):
        try:
            delta = _RULES[(src, dst)](delta, provider)
        except EpochframeError as err:
            raise with_hop(err, f"{src} -> {dst}") from err
    return Instant(target, delta)
