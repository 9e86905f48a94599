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

"""Metadata-driven conversion of contract objects to and from the wire.

The wire shape differs from the in-memory shape in three ways: dates are
ISO-8601 text, enums are (comma separated) names, and top-level collections
may arrive wrapped in a ``{"value": [...], "count": N}`` envelope. The
converter walks an object graph guided by :class:`~contractserde.metadata.TypeMetadata`
and only touches fields the metadata names.

Core Functions
--------------
serialize(data, metadata, preserve_original=True)
    In-memory values to wire values (``datetime`` to text).

deserialize(data, metadata, preserve_original=True, unwrap_wrapped_collections=False)
    Wire values to in-memory values (text to ``datetime``, names to ints).

walk / convert_field / convert_date / convert_enum
    The individual steps, for callers converting fragments.

Basic Usage
-----------
::

    from contractserde.metadata import DateField, EnumField, EnumMetadata, TypeMetadata
    from contractserde.serde import deserialize, serialize

    access = EnumMetadata({"Read": 1, "Write": 2})
    meta = TypeMetadata({"created": DateField(), "access": EnumField(access)})

    item = deserialize({"created": "2013-05-13T14:26:54.397Z", "access": "read, Write"}, meta)
    assert item["access"] == 3

    wire = serialize(item, meta)
    assert wire["created"] == "2013-05-13T14:26:54.397Z"

Failure Handling
----------------
Conversion never raises for malformed data. Unknown enum names contribute
``0``, unparseable dates become :class:`InvalidDate`, and values whose shape
does not match their metadata pass through untouched.
"""

from __future__ import annotations

from ._dates import LEGACY_DATE_PATTERN, InvalidDate, convert_date, is_valid_date
from ._enums import convert_enum
from ._types import Direction
from ._walk import convert_field, walk
from .deserialize import WRAPPED_COLLECTION_KEY, deserialize
from .serialize import serialize

__all__ = [
    "LEGACY_DATE_PATTERN",
    "WRAPPED_COLLECTION_KEY",
    "Direction",
    "InvalidDate",
    "convert_date",
    "convert_enum",
    "convert_field",
    "deserialize",
    "is_valid_date",
    "serialize",
    "walk",
]
