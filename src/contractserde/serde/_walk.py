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

"""Recursive object/array walker and per-field converter.

Every internal step returns a ``(value, changed)`` pair where ``changed``
means "``value`` is not the object that came in". Parents use the flag to
decide whether they need a copy of themselves:

- With ``preserve_original`` the input graph is never mutated. Lists and
  objects are shallow-copied lazily, the first time one of their members
  changes, so an untouched subtree comes back as the very same object.
- Without it, lists and objects are updated in place and the input
  reference is returned.

Dictionaries are always rebuilt while walking and the rebuilt mapping is
only returned when a key or value actually changed.
"""

from __future__ import annotations

import copy
from collections.abc import Callable, Mapping, MutableMapping
from typing import assert_never, cast

from ..metadata import (
    ArrayField,
    DateField,
    DictionaryField,
    EnumField,
    FieldMetadata,
    NestedField,
    PlainField,
    TypeMetadata,
)
from ._dates import convert_date
from ._enums import convert_enum
from ._types import Direction, _Translated, _WalkOptions

__all__ = ["convert_field", "walk"]


def walk(
    value: object,
    metadata: TypeMetadata,
    direction: Direction,
    preserve_original: bool = True,
    *,
    legacy_dates: bool = False,
) -> object:
    """Convert ``value`` (an object or a possibly nested list of objects)."""

    options = _WalkOptions(direction, preserve_original, legacy_dates)
    return _walk(value, metadata, options)[0]


def convert_field(
    value: object,
    field: FieldMetadata,
    direction: Direction,
    preserve_original: bool = True,
    *,
    legacy_dates: bool = False,
) -> object:
    """Convert a single field value described by ``field``."""

    options = _WalkOptions(direction, preserve_original, legacy_dates)
    return _convert_field(value, field, options)[0]


def _walk(value: object, metadata: TypeMetadata, options: _WalkOptions) -> _Translated:
    if isinstance(value, list):
        items = cast(list[object], value)
        return _map_list(items, lambda item: _walk(item, metadata, options), options)
    return _translate_object(value, metadata, options)


def _translate_object(
    value: object, metadata: TypeMetadata, options: _WalkOptions
) -> _Translated:
    if not value or not metadata.fields or not isinstance(value, MutableMapping):
        return value, False

    source = cast(MutableMapping[str, object], value)
    target = source
    for name, field in metadata.fields.items():
        converted, changed = _convert_field(source.get(name), field, options)
        if not changed:
            continue
        if options.preserve_original and target is source:
            target = copy.copy(source)
        target[name] = converted
    return target, target is not source


def _map_list(
    items: list[object],
    convert: Callable[[object], _Translated],
    options: _WalkOptions,
) -> _Translated:
    if not options.preserve_original:
        for index, item in enumerate(items):
            converted, changed = convert(item)
            if changed:
                items[index] = converted
        return items, False

    copied: list[object] | None = None
    for index, item in enumerate(items):
        converted, changed = convert(item)
        if changed and copied is None:
            copied = items[:index]
        if copied is not None:
            copied.append(converted)
    if copied is None:
        return items, False
    return copied, True


def _convert_field(
    value: object, field: FieldMetadata, options: _WalkOptions
) -> _Translated:
    # Falsy values (0, "", False, None, empty containers) are never converted.
    if not value:
        return value, False

    match field:
        case ArrayField(element=element):
            if not isinstance(value, list):
                return value, False
            return _map_list(
                cast(list[object], value),
                lambda item: _convert_element(item, element, options),
                options,
            )
        case DictionaryField():
            return _translate_dictionary(value, field, options)
        case _:
            return _convert_element(value, field, options)


def _convert_element(
    value: object, field: FieldMetadata, options: _WalkOptions
) -> _Translated:
    converted: object
    match field:
        case DateField():
            converted = convert_date(
                value, options.direction, legacy_recovery=options.legacy_dates
            )
        case EnumField(enum_type=enum_type):
            converted = convert_enum(enum_type, value, options.direction)
        case NestedField(type_info=type_info):
            return _walk(value, type_info, options)
        case ArrayField() | DictionaryField():
            return _convert_field(value, field, options)
        case PlainField():
            return value, False
        case _ as unreachable:  # pragma: no cover - exhaustiveness sentinel
            assert_never(unreachable)
    return converted, converted is not value


def _translate_dictionary(
    value: object, field: DictionaryField, options: _WalkOptions
) -> _Translated:
    if not isinstance(value, Mapping):
        return value, False

    translated: dict[object, object] = {}
    modified = False
    for key, item in cast(Mapping[object, object], value).items():
        new_key, key_changed = _convert_element(key, field.key, options)
        new_item, item_changed = _convert_element(item, field.value, options)
        translated[new_key] = new_item
        modified = modified or key_changed or item_changed
    if not modified:
        return value, False
    return translated, True
