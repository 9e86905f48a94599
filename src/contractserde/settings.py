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

"""Converter settings resolved from a config file, the environment and CLI flags."""

from __future__ import annotations

import os
import re
import tomllib
from collections.abc import Mapping, MutableMapping
from dataclasses import dataclass
from pathlib import Path
from typing import Final, cast

import yaml

from .errors import SettingsError

ENV_USER_AGENT = "CONTRACTSERDE_USER_AGENT"
ENV_LEGACY_DATES = "CONTRACTSERDE_LEGACY_DATES"
ENV_PRESERVE_ORIGINAL = "CONTRACTSERDE_PRESERVE_ORIGINAL"
ENV_UNWRAP_COLLECTIONS = "CONTRACTSERDE_UNWRAP_COLLECTIONS"

_LEGACY_AGENT: Final = re.compile(r"msie", re.IGNORECASE)
_TRUE_VALUES: Final = frozenset({"1", "true", "yes", "on"})
_FALSE_VALUES: Final = frozenset({"0", "false", "no", "off"})

__all__ = [
    "ENV_LEGACY_DATES",
    "ENV_PRESERVE_ORIGINAL",
    "ENV_UNWRAP_COLLECTIONS",
    "ENV_USER_AGENT",
    "SerdeSettings",
    "load_settings",
]


@dataclass(frozen=True, slots=True)
class SerdeSettings:
    """Resolved converter settings.

    ``user_agent`` identifies the consuming environment. Legacy date
    recovery is enabled for old Internet Explorer agents unless
    ``legacy_dates`` forces it on or off. ``preserve_original`` and
    ``unwrap_wrapped_collections`` are the command line defaults.
    """

    user_agent: str | None = None
    legacy_dates: bool | None = None
    preserve_original: bool = True
    unwrap_wrapped_collections: bool = False

    @property
    def legacy_date_recovery(self) -> bool:
        if self.legacy_dates is not None:
            return self.legacy_dates
        if not self.user_agent:
            return False
        return _LEGACY_AGENT.search(self.user_agent) is not None

    @classmethod
    def from_env(cls, env: Mapping[str, str] | None = None) -> SerdeSettings:
        """Build settings from environment variables alone."""

        config = _apply_environment_overrides(
            config={}, env=os.environ if env is None else env
        )
        return _build_settings(config)


def load_settings(
    path: Path | Mapping[str, object] | None,
    cli_overrides: object | None = None,
    *,
    env: Mapping[str, str] | None = None,
) -> SerdeSettings:
    """Load converter settings.

    Parameters
    ----------
    path:
        TOML or YAML file; settings may sit at the root or under a
        ``[contractserde]`` table. ``None`` skips the file. Tests may pass
        an in-memory mapping instead.
    cli_overrides:
        Mapping or namespace whose non-``None`` values win over everything.
    env:
        Optional environment mapping. Defaults to :data:`os.environ`.
    """

    if isinstance(path, Mapping):
        raw: Mapping[str, object] = path
    elif path is None:
        raw = {}
    else:
        raw = _load_settings_file(path)

    section = raw.get("contractserde")
    if isinstance(section, Mapping):
        raw = cast(Mapping[str, object], section)

    config = _normalise_settings(raw)
    config = _apply_environment_overrides(
        config=config, env=os.environ if env is None else env
    )
    config = _apply_cli_overrides(config=config, overrides=cli_overrides)
    return _build_settings(config)


def _load_settings_file(path: Path) -> Mapping[str, object]:
    if not path.exists():
        raise FileNotFoundError(f"Settings file not found: {path}")

    suffix = path.suffix.lower()
    data: object
    if suffix == ".toml":
        with path.open("rb") as handle:
            data = tomllib.load(handle)
    elif suffix in {".yaml", ".yml"}:
        with path.open("r", encoding="utf-8") as handle:
            data = yaml.safe_load(handle) or {}
    else:
        raise SettingsError(f"Unsupported settings format: {path.suffix}")

    if not isinstance(data, MutableMapping):
        raise SettingsError("Settings file must contain a mapping at the root.")
    return cast(Mapping[str, object], data)


def _normalise_settings(raw: Mapping[str, object]) -> dict[str, object]:
    config: dict[str, object] = {
        "user_agent": raw.get("user_agent"),
        "legacy_dates": raw.get("legacy_dates"),
        "preserve_original": raw.get("preserve_original"),
        "unwrap_wrapped_collections": raw.get("unwrap_wrapped_collections")
        if "unwrap_wrapped_collections" in raw
        else raw.get("unwrap"),
    }
    return {key: value for key, value in config.items() if value is not None}


def _apply_environment_overrides(
    *, config: dict[str, object], env: Mapping[str, str]
) -> dict[str, object]:
    if ENV_USER_AGENT in env:
        config["user_agent"] = env[ENV_USER_AGENT]
    if ENV_LEGACY_DATES in env:
        config["legacy_dates"] = _parse_bool(env[ENV_LEGACY_DATES], ENV_LEGACY_DATES)
    if ENV_PRESERVE_ORIGINAL in env:
        config["preserve_original"] = _parse_bool(
            env[ENV_PRESERVE_ORIGINAL], ENV_PRESERVE_ORIGINAL
        )
    if ENV_UNWRAP_COLLECTIONS in env:
        config["unwrap_wrapped_collections"] = _parse_bool(
            env[ENV_UNWRAP_COLLECTIONS], ENV_UNWRAP_COLLECTIONS
        )
    return config


def _apply_cli_overrides(
    *, config: dict[str, object], overrides: object | None
) -> dict[str, object]:
    if overrides is None:
        return config

    materialised: dict[str, object]
    if isinstance(overrides, Mapping):
        materialised = dict(cast(Mapping[str, object], overrides))
    elif hasattr(overrides, "__dict__"):
        materialised = {key: getattr(overrides, key) for key in vars(overrides)}
    else:
        raise TypeError("CLI overrides must be a mapping or support attribute access.")

    for key in SerdeSettings.__dataclass_fields__:
        value = materialised.get(key)
        if value is not None:
            config[key] = value
    return config


def _build_settings(config: Mapping[str, object]) -> SerdeSettings:
    user_agent = config.get("user_agent")
    if user_agent is not None and not isinstance(user_agent, str):
        raise SettingsError("user_agent must be a string.")

    legacy_dates = config.get("legacy_dates")
    return SerdeSettings(
        user_agent=user_agent,
        legacy_dates=None
        if legacy_dates is None
        else _coerce_bool(legacy_dates, "legacy_dates"),
        preserve_original=_coerce_bool(
            config.get("preserve_original", True), "preserve_original"
        ),
        unwrap_wrapped_collections=_coerce_bool(
            config.get("unwrap_wrapped_collections", False),
            "unwrap_wrapped_collections",
        ),
    )


def _coerce_bool(value: object, name: str) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        return _parse_bool(value, name)
    raise SettingsError(f"{name} must be a boolean (got {value!r}).")


def _parse_bool(value: str, name: str) -> bool:
    lowered = value.strip().lower()
    if lowered in _TRUE_VALUES:
        return True
    if lowered in _FALSE_VALUES:
        return False
    raise SettingsError(f"Invalid boolean for {name}: {value!r}")
