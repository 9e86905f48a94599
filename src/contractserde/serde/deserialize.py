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

"""Contract deserialization: wire shape to in-memory shape."""

from __future__ import annotations

from collections.abc import Mapping
from typing import cast

from ..errors import SettingsError
from ..logging import StructuredLogger, get_logger
from ..metadata import TypeMetadata
from ..settings import SerdeSettings
from ._types import Direction, _WalkOptions
from ._walk import _walk

__all__ = ["WRAPPED_COLLECTION_KEY", "deserialize"]

WRAPPED_COLLECTION_KEY = "value"

logger: StructuredLogger = get_logger(__name__, context={"component": "serde"})


def deserialize(
    data: object,
    metadata: TypeMetadata | None,
    preserve_original: bool = True,
    unwrap_wrapped_collections: bool = False,
    *,
    settings: SerdeSettings | None = None,
) -> object:
    """Return the in-memory equivalent of wire-shaped ``data``.

    Date text becomes aware UTC ``datetime`` values, enum names become their
    integer (bitmask) values and nested contract objects are converted
    recursively.

    Args:
        data: Parsed JSON: an object or a list of objects.
        metadata: Type metadata describing ``data``. ``None`` skips field
            conversion but still honours ``unwrap_wrapped_collections``.
        preserve_original: When ``True`` (the default) ``data`` is never
            mutated. When ``False`` objects and lists are updated in place.
        unwrap_wrapped_collections: Treat a ``{"value": [...], "count": N}``
            envelope as the bare list it wraps.
        settings: Converter settings; defaults to
            :meth:`SerdeSettings.from_env`. Only legacy date recovery is
            read from here.
    """

    if not data:
        return data

    if unwrap_wrapped_collections and isinstance(data, Mapping):
        wrapped = cast(Mapping[str, object], data).get(WRAPPED_COLLECTION_KEY)
        if isinstance(wrapped, list):
            logger.debug(
                "Unwrapped collection envelope.",
                event="serde.deserialize.unwrapped",
                context={"count": len(cast(list[object], wrapped))},
            )
            data = wrapped

    if metadata is None:
        return data

    resolved = settings if settings is not None else _settings_from_env()
    options = _WalkOptions(
        Direction.DESERIALIZE,
        preserve_original,
        legacy_dates=resolved.legacy_date_recovery,
    )
    return _walk(data, metadata, options)[0]


def _settings_from_env() -> SerdeSettings:
    try:
        return SerdeSettings.from_env()
    except SettingsError as error:
        logger.warning(
            "Ignoring invalid converter settings from the environment.",
            event="serde.settings.invalid",
            context={"error": str(error)},
        )
        return SerdeSettings()
