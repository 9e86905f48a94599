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

"""Base exception hierarchy for :mod:`contractserde`."""

from __future__ import annotations


class ContractSerdeError(Exception):
    """Base class for all contractserde exceptions.

    Conversion itself never raises for malformed payloads: unresolved enum
    names, unparseable dates and metadata/data shape mismatches are recovered
    at the leaf that encountered them. The exceptions below cover the
    surfaces around the converter (metadata documents, settings and embedded
    payloads).

    Example:
        Catch any contractserde-specific error::

            try:
                metadata = load_metadata(path)
            except ContractSerdeError as e:
                logger.error("Contract setup failed: %s", e)
    """


class MetadataError(ContractSerdeError, ValueError):
    """Raised when a metadata document cannot be turned into type metadata.

    Common causes:
        - A ``fields`` entry that is not a mapping
        - An enum description whose values are not integers
        - An unsupported metadata file extension

    Note:
        This exception also inherits from ``ValueError``.
    """


class SettingsError(ContractSerdeError, ValueError):
    """Raised when converter settings are invalid."""


class JsonIslandError(ContractSerdeError, ValueError):
    """Raised when an embedded JSON payload cannot be parsed.

    Example:
        Handling a malformed island::

            try:
                payload = deserialize_json_island(element, metadata)
            except JsonIslandError:
                payload = None
    """


__all__ = [
    "ContractSerdeError",
    "JsonIslandError",
    "MetadataError",
    "SettingsError",
]
