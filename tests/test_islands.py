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

"""Tests for JSON island extraction."""

from __future__ import annotations

import pytest
from bs4 import BeautifulSoup

from contractserde.errors import JsonIslandError
from contractserde.islands import deserialize_json_island, find_json_island
from contractserde.metadata import DateField, TypeMetadata
from contractserde.settings import SerdeSettings

META = TypeMetadata({"createdDate": DateField()})

PAGE = """
<html>
  <body>
    <script type="application/json" id="repo-data">
      {"name": "Fabrikam", "createdDate": "2013-05-13T14:26:54.397Z"}
    </script>
    <script type="application/json" id="legacy-data">{"createdDate": "2013-5-13T14:26:54.397Z"}</script>
    <script type="application/json" id="broken">{"name": </script>
  </body>
</html>
"""


def test_find_json_island_accepts_text_and_soup() -> None:
    soup = BeautifulSoup(PAGE, "html.parser")

    from_text = find_json_island(PAGE, "repo-data")
    from_soup = find_json_island(soup, "repo-data")

    assert from_text is not None
    assert from_soup is not None
    assert from_soup.name == "script"
    assert find_json_island(soup, "absent") is None


def test_deserialize_json_island_converts_payload() -> None:
    element = find_json_island(PAGE, "repo-data")

    content = deserialize_json_island(element, META)

    assert isinstance(content, dict)
    assert content["name"] == "Fabrikam"
    assert content["createdDate"].isoformat() == "2013-05-13T14:26:54.397000+00:00"


def test_missing_element_yields_none() -> None:
    assert deserialize_json_island(None, META) is None


def test_element_can_be_removed_after_reading() -> None:
    soup = BeautifulSoup(PAGE, "html.parser")
    element = find_json_island(soup, "repo-data")

    _ = deserialize_json_island(element, META, remove_element=True)

    assert find_json_island(soup, "repo-data") is None
    assert find_json_island(soup, "legacy-data") is not None


def test_element_is_kept_by_default() -> None:
    soup = BeautifulSoup(PAGE, "html.parser")

    _ = deserialize_json_island(find_json_island(soup, "repo-data"), META)

    assert find_json_island(soup, "repo-data") is not None


def test_settings_are_passed_to_deserialize() -> None:
    element = find_json_island(PAGE, "legacy-data")

    content = deserialize_json_island(
        element, META, settings=SerdeSettings(legacy_dates=True)
    )

    assert isinstance(content, dict)
    assert content["createdDate"].year == 2013


def test_invalid_json_raises() -> None:
    element = find_json_island(PAGE, "broken")

    with pytest.raises(JsonIslandError, match="broken"):
        _ = deserialize_json_island(element, META)
