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

"""Contract serialization: in-memory shape to wire shape."""

from __future__ import annotations

from ..metadata import TypeMetadata
from ._types import Direction, _WalkOptions
from ._walk import _walk

__all__ = ["serialize"]


def serialize(
    data: object,
    metadata: TypeMetadata | None,
    preserve_original: bool = True,
) -> object:
    """Return the wire-shaped equivalent of ``data``.

    ``datetime`` fields become ISO-8601 text and nested contract objects are
    converted recursively. Enum fields keep their numeric value because the
    wire accepts it as-is.

    Args:
        data: An object (mapping) or a list of objects to convert.
        metadata: Type metadata describing ``data``. ``None`` returns
            ``data`` unchanged.
        preserve_original: When ``True`` (the default) ``data`` is never
            mutated and is returned as-is when nothing needed converting.
            When ``False`` ``data`` is updated in place and returned.
    """

    if not data or metadata is None:
        return data
    return _walk(data, metadata, _WalkOptions(Direction.SERIALIZE, preserve_original))[0]
