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

"""Enum leaf conversion between wire names and integer bitmasks."""

from __future__ import annotations

from ..logging import StructuredLogger, get_logger
from ..metadata import EnumMetadata
from ._types import Direction

__all__ = ["convert_enum"]

logger: StructuredLogger = get_logger(__name__, context={"component": "serde"})


def convert_enum(enum_type: EnumMetadata, value: object, direction: Direction) -> object:
    """Convert one enum leaf in ``direction``.

    Deserializing resolves comma separated names (``"Read, Write"``) and ORs
    their values together, starting from ``0``. Names are matched exactly
    first and then case-insensitively; names that resolve to nothing are
    skipped. Serializing leaves values untouched because the wire accepts
    the numeric form, and any other input is returned as-is.
    """

    if direction is Direction.DESERIALIZE and isinstance(value, str):
        result = 0
        for part in value.split(","):
            name = part.strip()
            if name:
                result |= _resolve_name(enum_type, name)
        return result
    return value


def _resolve_name(enum_type: EnumMetadata, name: str) -> int:
    resolved = enum_type.values.get(name)
    if not resolved:
        lowered = name.lower()
        for candidate, candidate_value in enum_type.values.items():
            if candidate.lower() == lowered:
                resolved = candidate_value
                break

    if resolved is None:
        logger.debug(
            "Unresolved enum name.",
            event="serde.enum.unresolved",
            context={"name": name, "known": sorted(enum_type.values)},
        )
        return 0
    return resolved
