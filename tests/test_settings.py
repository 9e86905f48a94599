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

"""Tests for :mod:`contractserde.settings`."""

from __future__ import annotations

from pathlib import Path
from textwrap import dedent
from types import SimpleNamespace

import pytest

from contractserde.errors import SettingsError
from contractserde.settings import SerdeSettings, load_settings

IE8 = "Mozilla/4.0 (compatible; MSIE 8.0; Windows NT 6.1; Trident/4.0)"
FIREFOX = "Mozilla/5.0 (X11; Linux x86_64; rv:128.0) Gecko/20100101 Firefox/128.0"


def test_defaults() -> None:
    settings = SerdeSettings()

    assert settings.user_agent is None
    assert settings.preserve_original is True
    assert settings.unwrap_wrapped_collections is False
    assert settings.legacy_date_recovery is False


@pytest.mark.parametrize(
    ("user_agent", "legacy_dates", "expected"),
    [
        (IE8, None, True),
        ("mozilla/4.0 (compatible; msie 7.0)", None, True),
        (FIREFOX, None, False),
        ("", None, False),
        (FIREFOX, True, True),
        (IE8, False, False),
    ],
)
def test_legacy_date_recovery_detection(
    user_agent: str, legacy_dates: bool | None, expected: bool
) -> None:
    settings = SerdeSettings(user_agent=user_agent, legacy_dates=legacy_dates)

    assert settings.legacy_date_recovery is expected


def test_from_env_reads_every_variable() -> None:
    settings = SerdeSettings.from_env(
        {
            "CONTRACTSERDE_USER_AGENT": IE8,
            "CONTRACTSERDE_LEGACY_DATES": "no",
            "CONTRACTSERDE_PRESERVE_ORIGINAL": "0",
            "CONTRACTSERDE_UNWRAP_COLLECTIONS": "Yes",
        }
    )

    assert settings == SerdeSettings(
        user_agent=IE8,
        legacy_dates=False,
        preserve_original=False,
        unwrap_wrapped_collections=True,
    )


def test_from_env_rejects_invalid_booleans() -> None:
    with pytest.raises(SettingsError, match="CONTRACTSERDE_LEGACY_DATES"):
        _ = SerdeSettings.from_env({"CONTRACTSERDE_LEGACY_DATES": "maybe"})


def test_load_settings_from_mapping() -> None:
    settings = load_settings(
        {"user_agent": FIREFOX, "legacy_dates": True, "unwrap": True}, env={}
    )

    assert settings.user_agent == FIREFOX
    assert settings.legacy_dates is True
    assert settings.unwrap_wrapped_collections is True


def test_load_settings_from_toml_section(tmp_path: Path) -> None:
    path = tmp_path / "settings.toml"
    path.write_text(
        dedent(
            """
            [contractserde]
            preserve_original = false
            unwrap_wrapped_collections = true
            """
        )
    )

    settings = load_settings(path, env={})

    assert settings.preserve_original is False
    assert settings.unwrap_wrapped_collections is True


def test_load_settings_from_yaml(tmp_path: Path) -> None:
    path = tmp_path / "settings.yaml"
    path.write_text("user_agent: test-agent\nlegacy_dates: 'true'\n")

    settings = load_settings(path, env={})

    assert settings.user_agent == "test-agent"
    assert settings.legacy_dates is True


def test_environment_overrides_file_and_cli_overrides_environment() -> None:
    settings = load_settings(
        {"unwrap": False, "legacy_dates": False},
        SimpleNamespace(legacy_dates=True, unwrap_wrapped_collections=None),
        env={"CONTRACTSERDE_UNWRAP_COLLECTIONS": "true", "CONTRACTSERDE_LEGACY_DATES": "false"},
    )

    assert settings.unwrap_wrapped_collections is True
    assert settings.legacy_dates is True


def test_cli_overrides_ignore_unknown_keys() -> None:
    settings = load_settings(None, {"command": "deserialize"}, env={})

    assert settings == SerdeSettings()


def test_cli_overrides_must_be_mapping_like() -> None:
    with pytest.raises(TypeError):
        _ = load_settings(None, 42, env={})


def test_missing_settings_file(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        _ = load_settings(tmp_path / "absent.toml", env={})


def test_unsupported_settings_file(tmp_path: Path) -> None:
    path = tmp_path / "settings.ini"
    path.write_text("[contractserde]\n")

    with pytest.raises(SettingsError, match="Unsupported"):
        _ = load_settings(path, env={})


def test_settings_file_root_must_be_mapping(tmp_path: Path) -> None:
    path = tmp_path / "settings.yaml"
    path.write_text("- one\n- two\n")

    with pytest.raises(SettingsError, match="mapping"):
        _ = load_settings(path, env={})


@pytest.mark.parametrize(
    "raw",
    [{"user_agent": 7}, {"preserve_original": 1}, {"legacy_dates": "sometimes"}],
)
def test_invalid_setting_values(raw: dict[str, object]) -> None:
    with pytest.raises(SettingsError):
        _ = load_settings(raw, env={})
