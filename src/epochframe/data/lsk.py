"""NAIF leap-seconds kernel (LSK) parser.

Only the ``DELTET/DELTA_AT`` assignment is read; it lists pairs of
cumulative TAI - UTC and the UTC date the value takes effect::

    \\begindata
    DELTET/DELTA_AT        = ( 10,   @1972-JAN-1
                               11,   @1972-JUL-1
                               ...
                               37,   @2017-JAN-1 )
    \\begintext
"""

from __future__ import annotations

import logging
import re
from os import PathLike

from epochframe.core.calendar import Date
from epochframe.core.errors import InvalidDateError, LeapTableParseError
from epochframe.core.leap_seconds import LeapSecondsTable

logger = logging.getLogger(__name__)

DELTA_AT_KEY = "DELTET/DELTA_AT"

_MONTHS = {
    "JAN": 1, "FEB": 2, "MAR": 3, "APR": 4, "MAY": 5, "JUN": 6,
    "JUL": 7, "AUG": 8, "SEP": 9, "OCT": 10, "NOV": 11, "DEC": 12,
}

_DATA_BLOCK = re.compile(r"\\begindata(.*?)(?:\\begintext|\Z)", re.DOTALL)
_ENTRY = re.compile(r"([+-]?\d+)\s*,\s*@(\d{4})-([A-Za-z]{3})-(\d{1,2})")


def _data_sections(text: str) -> str:
    return "\n".join(block for block in _DATA_BLOCK.findall(text))


def _assignment(data: str, key: str) -> str | None:
    match = re.search(re.escape(key) + r"\s*=\s*\((.*?)\)", data, re.DOTALL)
    return match.group(1) if match else None


def _parse_date(year: str, month: str, day: str) -> Date:
    try:
        return Date(int(year), _MONTHS[month.upper()], int(day))
    except KeyError:
        raise LeapTableParseError(f"Unknown month abbreviation in LSK date: {month!r}") from None
    except InvalidDateError as e:
        raise LeapTableParseError(f"Invalid LSK date {year}-{month}-{day}: {e}") from e


def parse_lsk(text: str) -> LeapSecondsTable:
    """Parse leap-second data from the text of a NAIF LSK.

    Args:
        text: Kernel contents.

    Returns:
        The leap-second table defined by ``DELTET/DELTA_AT``.

    Raises:
        LeapTableParseError: If the kernel has no ``DELTET/DELTA_AT`` data or
            an entry is malformed.
    """
    values = _assignment(_data_sections(text), DELTA_AT_KEY)
    if values is None:
        logger.error("No %s assignment in leap-seconds kernel", DELTA_AT_KEY)
        raise LeapTableParseError(f"No {DELTA_AT_KEY} data found in kernel")

    entries = [
        (_parse_date(year, month, day), int(count))
        for count, year, month, day in _ENTRY.findall(values)
    ]
    leftover = _ENTRY.sub("", values).replace(",", "").strip()
    if leftover:
        logger.error("Malformed %s entries: %r", DELTA_AT_KEY, leftover[:40])
        raise LeapTableParseError(f"Malformed {DELTA_AT_KEY} entry near {leftover[:40]!r}")

    table = LeapSecondsTable(entries)
    logger.debug("Parsed %d leap-second entries from LSK", len(table))
    return table


def read_lsk(path: str | PathLike[str]) -> LeapSecondsTable:
    """Read and parse a NAIF LSK file such as ``naif0012.tls``.

    Raises:
        OSError: If the file cannot be read.
        LeapTableParseError: If the kernel is malformed.
    """
    with open(path, encoding="ascii", errors="replace") as f:
        return parse_lsk(f.read())
