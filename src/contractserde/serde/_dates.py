# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""Date leaf conversion between ``datetime`` values and wire ISO-8601 text."""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from re import Pattern
from typing import Final

from ..logging import StructuredLogger, get_logger
from ._types import Direction

__all__ = [
    "LEGACY_DATE_PATTERN",
    "InvalidDate",
    "convert_date",
    "format_wire_date",
    "is_valid_date",
]

logger: StructuredLogger = get_logger(__name__, context={"component": "serde"})

LEGACY_DATE_PATTERN: Final[Pattern[str]] = re.compile(
    r"(\d+)-(\d+)-(\d+)T(\d+):(\d+):(\d+).(\d+)Z"
)


@dataclass(slots=True, frozen=True)
class InvalidDate:
    """Result of deserializing text that is not a recognisable date.

    Instances are falsy so that ``if value:`` style checks treat them like a
    missing date; ``text`` keeps the original wire value for diagnostics.
    """

    text: str

    def __bool__(self) -> bool:
        return False

    def __str__(self) -> str:
        return "Invalid Date"


def is_valid_date(value: object) -> bool:
    """Return ``True`` when ``value`` is a usable ``datetime``."""

    return isinstance(value, datetime)


def format_wire_date(value: datetime) -> str:
    """Render ``value`` as ``YYYY-MM-DDTHH:MM:SS.sssZ`` in UTC.

    Naive datetimes are taken to already be in UTC.
    """

    if value.tzinfo is not None:
        value = value.astimezone(UTC)
    return (
        f"{value.year:04d}-{value.month:02d}-{value.day:02d}"
        f"T{value.hour:02d}:{value.minute:02d}:{value.second:02d}"
        f".{value.microsecond // 1000:03d}Z"
    )


def convert_date(
    value: object, direction: Direction, *, legacy_recovery: bool = False
) -> object:
    """Convert one date leaf in ``direction``.

    Serializing turns a ``datetime`` into wire text; one that cannot be
    shifted to UTC is returned unchanged. Deserializing parses
    text into an aware UTC ``datetime``; unparseable text becomes an
    :class:`InvalidDate`, or is run through the fixed legacy pattern when
    ``legacy_recovery`` is set (``None`` if that fails too). Anything else is
    returned unchanged.
    """

    if direction is Direction.SERIALIZE and isinstance(value, datetime):
        try:
            return format_wire_date(value)
        except (OverflowError, ValueError):
            logger.debug(
                "Date cannot be expressed in UTC.",
                event="serde.date.invalid",
                context={"value": repr(value)},
            )
            return value
    if direction is Direction.DESERIALIZE and isinstance(value, str):
        parsed = _parse_wire_date(value)
        if parsed is not None:
            return parsed
        if legacy_recovery:
            return _parse_legacy_date(value)
        logger.debug(
            "Unparseable date string.",
            event="serde.date.invalid",
            context={"value": value},
        )
        return InvalidDate(value)
    return value


def _parse_wire_date(text: str) -> datetime | None:
    try:
        parsed = datetime.fromisoformat(text)
        if parsed.tzinfo is None:
            return parsed.replace(tzinfo=UTC)
        return parsed.astimezone(UTC)
    except (ValueError, OverflowError):
        return None


def _parse_legacy_date(text: str) -> datetime | None:
    match = LEGACY_DATE_PATTERN.search(text)
    if match is None:
        logger.debug(
            "Legacy date pattern did not match.",
            event="serde.date.legacy_failed",
            context={"value": text},
        )
        return None

    year, month, day, hour, minute, second, millisecond = (
        int(part) for part in match.groups()
    )
    # Two digit years belong to the twentieth century.
    if year <= 99:
        year += 1900
    # Out-of-range components roll over into the next unit.
    year += (month - 1) // 12
    month = (month - 1) % 12 + 1
    try:
        recovered = datetime(year, month, 1, tzinfo=UTC) + timedelta(
            days=day - 1,
            hours=hour,
            minutes=minute,
            seconds=second,
            milliseconds=millisecond,
        )
    except (ValueError, OverflowError):
        logger.debug(
            "Legacy date components are out of range.",
            event="serde.date.legacy_failed",
            context={"value": text},
        )
        return None

    logger.debug(
        "Recovered legacy date string.",
        event="serde.date.legacy_recovered",
        context={"value": text},
    )
    return recovered
