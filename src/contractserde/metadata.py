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

"""Contract metadata: which fields of a type need conversion, and how.

Metadata is passive data supplied by the caller. Each field is described by
one tagged variant so the converter never has to guess between overlapping
flags::

    from contractserde.metadata import (
        ArrayField, DateField, EnumField, EnumMetadata, NestedField, TypeMetadata,
    )

    state = EnumMetadata({"active": 1, "deleted": 2})
    ref = TypeMetadata({"createdDate": DateField()})
    repo = TypeMetadata(
        {
            "state": EnumField(state),
            "refs": ArrayField(NestedField(ref)),
        }
    )

Metadata published in the flag-style JSON shape (``isArray``, ``isDate``,
``enumType``, ``typeInfo``, ``isDictionary`` ...) is read with
:func:`type_metadata_from_mapping` or :func:`load_metadata`.
"""

from __future__ import annotations

import enum
import json
import tomllib
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import cast

import yaml

from .errors import MetadataError

__all__ = [
    "ArrayField",
    "DateField",
    "DictionaryField",
    "DictionaryKeyMetadata",
    "EnumField",
    "EnumMetadata",
    "FieldMetadata",
    "NestedField",
    "PlainField",
    "TypeMetadata",
    "field_metadata_from_mapping",
    "load_metadata",
    "type_metadata_from_mapping",
]


@dataclass(slots=True, frozen=True)
class EnumMetadata:
    """Name to integer value mapping for one enumeration.

    The same mapping doubles as a flag set: several names may be combined
    with bitwise OR.
    """

    values: Mapping[str, int] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "values", MappingProxyType(dict(self.values)))

    @classmethod
    def from_enum(cls, enum_type: type[enum.Enum]) -> EnumMetadata:
        """Build metadata from an ``IntEnum`` or ``IntFlag`` class."""

        values: dict[str, int] = {}
        for name, member in enum_type.__members__.items():
            if not isinstance(member.value, int):
                raise MetadataError(
                    f"{enum_type.__name__}.{name} does not have an integer value."
                )
            values[name] = member.value
        return cls(values)


@dataclass(slots=True, frozen=True)
class PlainField:
    """Field passed through unchanged."""


@dataclass(slots=True, frozen=True)
class DateField:
    """Field holding a date: ISO-8601 text on the wire, ``datetime`` in memory."""


@dataclass(slots=True, frozen=True)
class EnumField:
    """Field holding an enumeration: names on the wire, an int bitmask in memory."""

    enum_type: EnumMetadata


@dataclass(slots=True, frozen=True)
class NestedField:
    """Field holding another contract object (or array of them)."""

    type_info: TypeMetadata


@dataclass(slots=True, frozen=True)
class ArrayField:
    """Field holding a list whose elements are each described by ``element``."""

    element: FieldMetadata


type DictionaryKeyMetadata = PlainField | DateField | EnumField


@dataclass(slots=True, frozen=True)
class DictionaryField:
    """Field holding a mapping with independently converted keys and values."""

    key: DictionaryKeyMetadata = field(default_factory=PlainField)
    value: FieldMetadata = field(default_factory=PlainField)


type FieldMetadata = (
    PlainField | DateField | EnumField | NestedField | ArrayField | DictionaryField
)


@dataclass(slots=True, frozen=True)
class TypeMetadata:
    """Per-field conversion metadata for one contract type."""

    fields: Mapping[str, FieldMetadata] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "fields", MappingProxyType(dict(self.fields)))


def type_metadata_from_mapping(raw: Mapping[str, object]) -> TypeMetadata:
    """Build :class:`TypeMetadata` from the flag-style ``{"fields": {...}}`` shape."""

    fields_obj = raw.get("fields")
    if fields_obj is None:
        return TypeMetadata()
    if not isinstance(fields_obj, Mapping):
        raise MetadataError("'fields' must be a mapping of field name to metadata.")

    fields: dict[str, FieldMetadata] = {}
    for name, field_obj in cast(Mapping[object, object], fields_obj).items():
        if not isinstance(name, str):
            raise MetadataError(f"Field names must be strings (got {name!r}).")
        fields[name] = field_metadata_from_mapping(
            _require_mapping(field_obj, f"field {name!r}")
        )
    return TypeMetadata(fields)


def field_metadata_from_mapping(raw: Mapping[str, object]) -> FieldMetadata:
    """Build one field variant from flag-style metadata.

    Several flags may be present at once; the first match in the order
    array, dictionary, date, enum, nested object wins. No flags means the
    field is passed through.
    """

    if raw.get("isArray"):
        return ArrayField(_element_metadata(raw))
    if raw.get("isDictionary"):
        return DictionaryField(key=_dictionary_key(raw), value=_dictionary_value(raw))
    return _element_metadata(raw)


def load_metadata(path: Path | str) -> TypeMetadata:
    """Read flag-style type metadata from a JSON, YAML or TOML document."""

    metadata_path = Path(path)
    suffix = metadata_path.suffix.lower()
    data: object
    try:
        if suffix == ".json":
            data = json.loads(metadata_path.read_text(encoding="utf-8"))
        elif suffix in {".yaml", ".yml"}:
            with metadata_path.open("r", encoding="utf-8") as handle:
                data = yaml.safe_load(handle) or {}
        elif suffix == ".toml":
            with metadata_path.open("rb") as handle:
                data = tomllib.load(handle)
        else:
            raise MetadataError(f"Unsupported metadata format: {metadata_path.suffix}")
    except (json.JSONDecodeError, yaml.YAMLError, tomllib.TOMLDecodeError) as error:
        raise MetadataError(f"Could not parse {metadata_path}: {error}") from error

    return type_metadata_from_mapping(_require_mapping(data, str(metadata_path)))


def _element_metadata(raw: Mapping[str, object]) -> FieldMetadata:
    if raw.get("isDate"):
        return DateField()
    enum_obj = raw.get("enumType")
    if enum_obj:
        return EnumField(_enum_metadata(enum_obj))
    type_obj = raw.get("typeInfo") or raw.get("nestedType")
    if type_obj:
        return NestedField(
            type_metadata_from_mapping(_require_mapping(type_obj, "typeInfo"))
        )
    return PlainField()


def _dictionary_key(raw: Mapping[str, object]) -> DictionaryKeyMetadata:
    if raw.get("dictionaryKeyIsDate"):
        return DateField()
    enum_obj = raw.get("dictionaryKeyEnumType")
    if enum_obj:
        return EnumField(_enum_metadata(enum_obj))
    return PlainField()


def _dictionary_value(raw: Mapping[str, object]) -> FieldMetadata:
    if raw.get("dictionaryValueIsDate"):
        return DateField()
    enum_obj = raw.get("dictionaryValueEnumType")
    if enum_obj:
        return EnumField(_enum_metadata(enum_obj))
    type_obj = raw.get("dictionaryValueTypeInfo")
    if type_obj:
        return NestedField(
            type_metadata_from_mapping(
                _require_mapping(type_obj, "dictionaryValueTypeInfo")
            )
        )
    field_obj = raw.get("dictionaryValueFieldInfo")
    if field_obj:
        return field_metadata_from_mapping(
            _require_mapping(field_obj, "dictionaryValueFieldInfo")
        )
    return PlainField()


def _enum_metadata(raw: object) -> EnumMetadata:
    mapping = _require_mapping(raw, "enumType")
    values_obj = mapping.get("enumValues", mapping)
    values: dict[str, int] = {}
    for name, value in _require_mapping(values_obj, "enumValues").items():
        if isinstance(value, bool) or not isinstance(value, int):
            raise MetadataError(f"Enum value for {name!r} must be an integer.")
        values[name] = value
    return EnumMetadata(values)


def _require_mapping(value: object, location: str) -> Mapping[str, object]:
    if not isinstance(value, Mapping):
        raise MetadataError(f"Expected a mapping for {location}.")
    return cast(Mapping[str, object], value)
