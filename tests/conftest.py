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

from __future__ import annotations

from collections.abc import Iterator

import pytest

from contractserde.settings import (
    ENV_LEGACY_DATES,
    ENV_PRESERVE_ORIGINAL,
    ENV_UNWRAP_COLLECTIONS,
    ENV_USER_AGENT,
)


@pytest.fixture(autouse=True, scope="session")
def clean_serde_environment() -> Iterator[None]:
    """Keep host environment variables from leaking into converter settings."""

    with pytest.MonkeyPatch.context() as patch:
        for name in (
            ENV_USER_AGENT,
            ENV_LEGACY_DATES,
            ENV_PRESERVE_ORIGINAL,
            ENV_UNWRAP_COLLECTIONS,
        ):
            patch.delenv(name, raising=False)
        yield
