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

"""Shared types for the contract converter."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

__all__ = ["Direction"]


class Direction(Enum):
    """Which way a conversion runs."""

    SERIALIZE = "serialize"
    """In-memory shape to wire shape."""

    DESERIALIZE = "deserialize"
    """Wire shape to in-memory shape."""


@dataclass(slots=True, frozen=True)
class _WalkOptions:
    direction: Direction
    preserve_original: bool
    legacy_dates: bool = False


type _Translated = tuple[object, bool]
"""A converted value paired with whether it differs from its input."""

