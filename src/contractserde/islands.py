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

"""Contract payloads embedded as JSON islands in HTML documents.

Server-rendered pages ship initial data as
``<script type="application/json" id="...">{...}</script>`` elements.
"""

from __future__ import annotations

import json

from bs4 import BeautifulSoup, Tag

from .errors import JsonIslandError
from .logging import StructuredLogger, get_logger
from .metadata import TypeMetadata
from .serde import deserialize
from .settings import SerdeSettings

__all__ = ["deserialize_json_island", "find_json_island"]

logger: StructuredLogger = get_logger(__name__, context={"component": "islands"})


def find_json_island(document: str | BeautifulSoup, element_id: str) -> Tag | None:
    """Return the element with ``element_id`` in ``document``, if any."""

    soup = (
        document
        if isinstance(document, BeautifulSoup)
        else BeautifulSoup(document, "html.parser")
    )
    found = soup.find(id=element_id)
    return found if isinstance(found, Tag) else None


def deserialize_json_island(
    element: Tag | None,
    metadata: TypeMetadata | None,
    *,
    remove_element: bool = False,
    settings: SerdeSettings | None = None,
) -> object:
    """Parse and deserialize the JSON held by ``element``.

    The original payload is preserved while converting. Returns ``None``
    when ``element`` is ``None``. With ``remove_element`` the element is
    detached from its document afterwards. ``settings`` is handed to
    :func:`~contractserde.serde.deserialize`.

    Raises:
        JsonIslandError: The element text is not valid JSON.
    """

    if element is None:
        return None

    text = element.get_text()
    try:
        payload = json.loads(text)
    except json.JSONDecodeError as error:
        raise JsonIslandError(
            f"Element {element.get('id')!r} does not contain valid JSON: {error}"
        ) from error

    content = deserialize(payload, metadata, True, settings=settings)
    if remove_element:
        _ = element.extract()
        logger.debug(
            "Removed JSON island.",
            event="islands.removed",
            context={"id": element.get("id")},
        )
    return content
