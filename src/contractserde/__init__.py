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

"""Metadata-driven conversion of API contract objects between wire JSON and
in-memory values.

The most common entry points are re-exported here::

    from contractserde import TypeMetadata, DateField, deserialize, serialize
"""

from __future__ import annotations

from . import errors, islands, metadata, serde, settings
from .errors import ContractSerdeError, JsonIslandError, MetadataError, SettingsError
from .islands import deserialize_json_island, find_json_island
from .metadata import (
    ArrayField,
    DateField,
    DictionaryField,
    EnumField,
    EnumMetadata,
    FieldMetadata,
    NestedField,
    PlainField,
    TypeMetadata,
    load_metadata,
    type_metadata_from_mapping,
)
from .serde import Direction, InvalidDate, deserialize, is_valid_date, serialize
from .settings import SerdeSettings, load_settings

__all__ = [
    "ArrayField",
    "ContractSerdeError",
    "DateField",
    "DictionaryField",
    "Direction",
    "EnumField",
    "EnumMetadata",
    "FieldMetadata",
    "InvalidDate",
    "JsonIslandError",
    "MetadataError",
    "NestedField",
    "PlainField",
    "SerdeSettings",
    "SettingsError",
    "TypeMetadata",
    "deserialize",
    "deserialize_json_island",
    "errors",
    "find_json_island",
    "is_valid_date",
    "islands",
    "load_metadata",
    "load_settings",
    "metadata",
    "serde",
    "serialize",
    "settings",
    "type_metadata_from_mapping",
]
