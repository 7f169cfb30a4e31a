"""IERS ``finals`` CSV parser.

The IERS publishes the same daily series in two semicolon-delimited files
with identical headers: ``finals.all.csv`` fills the IAU 1980 nutation
corrections (``dPsi``, ``dEpsilon``) and ``finals2000A.all.csv`` the IAU 2000
celestial pole offsets (``dX``, ``dY``). Either can be loaded alone; passing
the other one as ``supplement`` fills the missing correction columns.
"""

from __future__ import annotations

import csv
import io
import logging
import math
from os import PathLike
from typing import Iterator

from epochframe.core.eop import EopProvider, EopSample, Interpolation
from epochframe.core.errors import EopParseError
from epochframe.core.leap_seconds import LeapSecondsProvider

logger = logging.getLogger(__name__)

_REQUIRED = ("MJD", "x_pole", "y_pole", "UT1-UTC")
_CORRECTIONS = {"dPsi": "dpsi", "dEpsilon": "deps", "dX": "dx", "dY": "dy"}


def _value(row: dict[str, str | None], column: str, line: int) -> float | None:
    text = (row.get(column) or "").strip()
    if not text:
        return None
    try:
        value = float(text)
    except ValueError:
        raise EopParseError(f"Line {line}: invalid {column} value {text!r}") from None
    if not math.isfinite(value):
        raise EopParseError(f"Line {line}: non-finite {column} value {text!r}")
    return value


def _records(text: str) -> Iterator[tuple[int, dict[str, float | None]]]:
    reader = csv.DictReader(io.StringIO(text), delimiter=";")
    if reader.fieldnames is None:
        raise EopParseError("EOP file is empty")
    missing = [c for c in _REQUIRED if c not in reader.fieldnames]
    if missing:
        logger.error("EOP header lacks columns %s", missing)
        raise EopParseError(f"EOP header lacks required columns: {', '.join(missing)}")
    for row in reader:
        line = reader.line_num
        record = {c: _value(row, c, line) for c in _REQUIRED}
        for column, key in _CORRECTIONS.items():
            record[key] = _value(row, column, line)
        yield line, record


def _samples(text: str, supplement: str | None) -> list[EopSample]:
    extra: dict[float, dict[str, float | None]] = {}
    if supplement is not None:
        extra = {r["MJD"]: r for _, r in _records(supplement) if r["MJD"] is not None}

    samples = []
    for line, r in _records(text):
        # Rows past the prediction horizon carry no pole coordinates.
        if r["MJD"] is None or r["x_pole"] is None:
            continue
        if r["y_pole"] is None or r["UT1-UTC"] is None:
            logger.error("EOP line %d has x_pole but lacks y_pole or UT1-UTC", line)
            raise EopParseError(f"Line {line}: missing y_pole or UT1-UTC")
        other = extra.get(r["MJD"], {})
        corrections = {
            key: r[key] if r[key] is not None else other.get(key)
            for key in _CORRECTIONS.values()
        }
        samples.append(
            EopSample(
                mjd=r["MJD"],
                delta_ut1_utc=r["UT1-UTC"],
                x_pole=r["x_pole"],
                y_pole=r["y_pole"],
                **corrections,
            )
        )
    return samples


def parse_finals_csv(
    text: str,
    supplement: str | None = None,
    interpolation: Interpolation | str = Interpolation.LINEAR,
    leap_seconds: LeapSecondsProvider | None = None,
) -> EopProvider:
    """Build an EOP provider from IERS finals CSV text.

    Args:
        text: Contents of ``finals.all.csv`` or ``finals2000A.all.csv``.
        supplement: Optional contents of the other file, used to fill
            correction columns that are empty in ``text``.
        interpolation: Interpolation scheme of the provider.
        leap_seconds: Leap-second provider placing the UTC epochs on TAI.

    Returns:
        The provider covering every row with pole coordinates.

    Raises:
        EopParseError: If the header lacks required columns, a value is not a
            number, or fewer than two usable rows remain.
    """
    samples = _samples(text, supplement)
    provider = EopProvider(samples, interpolation=interpolation, leap_seconds=leap_seconds)
    logger.debug("Parsed %d EOP rows from finals CSV", len(samples))
    return provider


def read_finals_csv(
    path: str | PathLike[str],
    supplement: str | PathLike[str] | None = None,
    interpolation: Interpolation | str = Interpolation.LINEAR,
    leap_seconds: LeapSecondsProvider | None = None,
) -> EopProvider:
    """Read IERS finals CSV files from disk, see :func:`parse_finals_csv`.

    Raises:
        OSError: If a file cannot be read.
        EopParseError: If the data is malformed.
    """
    with open(path, encoding="utf-8") as f:
        text = f.read()
    extra = None
    if supplement is not None:
        with open(supplement, encoding="utf-8") as f:
            extra = f.read()
    return parse_finals_csv(text, extra, interpolation=interpolation, leap_seconds=leap_seconds)
