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

"""Tests for the contractserde CLI entry point."""

from __future__ import annotations

import json
from io import StringIO
from pathlib import Path

import pytest

from contractserde import cli
from contractserde.cli import app

REPO_METADATA = {
    "fields": {
        "createdDate": {"isDate": True},
        "access": {"enumType": {"enumValues": {"Read": 1, "Write": 2}}},
        "seen": {
            "isDictionary": True,
            "dictionaryKeyIsDate": True,
            "dictionaryValueEnumType": {"enumValues": {"Read": 1, "Write": 2}},
        },
    }
}


@pytest.fixture(autouse=True)
def quiet_logging(monkeypatch: pytest.MonkeyPatch) -> list[dict[str, object]]:
    calls: list[dict[str, object]] = []

    def fake_configure_logging(*, level: object, json_mode: object) -> None:
        calls.append({"level": level, "json_mode": json_mode})

    monkeypatch.setattr(app, "configure_logging", fake_configure_logging)
    return calls


@pytest.fixture
def metadata_path(tmp_path: Path) -> Path:
    path = tmp_path / "repo.json"
    path.write_text(json.dumps(REPO_METADATA))
    return path


def _write(path: Path, payload: object) -> Path:
    path.write_text(json.dumps(payload))
    return path


def _run(*argv: str) -> tuple[int, object]:
    out = StringIO()
    code = app.main(list(argv), stdout=out)
    text = out.getvalue()
    return code, json.loads(text) if text else None


def test_cli_exports_main() -> None:
    assert cli.main is app.main


def test_deserialize_command(metadata_path: Path, tmp_path: Path) -> None:
    payload = _write(
        tmp_path / "payload.json",
        {
            "createdDate": "2013-05-13T16:26:54.397+02:00",
            "access": "read, Write",
            "seen": {"2013-05-13T14:26:54.397Z": "Read"},
        },
    )

    code, output = _run("deserialize", str(metadata_path), str(payload))

    assert code == 0
    assert output == {
        "createdDate": "2013-05-13T14:26:54.397Z",
        "access": 3,
        "seen": {"2013-05-13T14:26:54.397Z": 1},
    }


def test_normalize_command_unwraps_envelopes(
    metadata_path: Path, tmp_path: Path
) -> None:
    payload = _write(
        tmp_path / "payload.json",
        {"value": [{"createdDate": "2013-05-13", "access": "Write"}], "count": 1},
    )

    code, output = _run(
        "--no-pretty", "normalize", str(metadata_path), str(payload), "--unwrap"
    )

    assert code == 0
    assert output == [{"createdDate": "2013-05-13T00:00:00.000Z", "access": 2}]


def test_invalid_dates_are_rendered_as_null(
    metadata_path: Path, tmp_path: Path
) -> None:
    payload = _write(
        tmp_path / "payload.json", {"createdDate": "2013-5-13T14:26:54.397Z"}
    )

    code, output = _run("deserialize", str(metadata_path), str(payload))

    assert code == 0
    assert output == {"createdDate": None}


def test_legacy_dates_flag(metadata_path: Path, tmp_path: Path) -> None:
    payload = _write(
        tmp_path / "payload.json", {"createdDate": "2013-5-13T14:26:54.397Z"}
    )

    code, output = _run(
        "deserialize", str(metadata_path), str(payload), "--legacy-dates"
    )

    assert code == 0
    assert output == {"createdDate": "2013-05-13T14:26:54.397Z"}


def test_reads_payload_from_stdin(
    metadata_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.setattr("sys.stdin", StringIO('{"access": "Read"}'))

    code, output = _run("deserialize", str(metadata_path))

    assert code == 0
    assert output == {"access": 1}


def test_island_command(metadata_path: Path, tmp_path: Path) -> None:
    page = tmp_path / "page.html"
    page.write_text(
        '<script type="application/json" id="data">'
        '{"createdDate": "2013-05-13T14:26:54.397Z", "access": "Write"}'
        "</script>"
    )

    code, output = _run("island", str(metadata_path), str(page), "data")

    assert code == 0
    assert output == {"createdDate": "2013-05-13T14:26:54.397Z", "access": 2}


def test_island_command_missing_element(metadata_path: Path, tmp_path: Path) -> None:
    page = tmp_path / "page.html"
    page.write_text("<p>nothing here</p>")

    code, output = _run("island", str(metadata_path), str(page), "data")

    assert code == 2
    assert output is None


def test_invalid_payload_returns_input_error(
    metadata_path: Path, tmp_path: Path
) -> None:
    payload = tmp_path / "payload.json"
    payload.write_text("{broken")

    code, _ = _run("deserialize", str(metadata_path), str(payload))

    assert code == 2


def test_missing_metadata_returns_metadata_error(tmp_path: Path) -> None:
    payload = _write(tmp_path / "payload.json", {})

    code, _ = _run("deserialize", str(tmp_path / "missing.json"), str(payload))

    assert code == 3


def test_invalid_settings_file_returns_input_error(
    metadata_path: Path, tmp_path: Path
) -> None:
    config = tmp_path / "settings.ini"
    config.write_text("")
    payload = _write(tmp_path / "payload.json", {})

    code, _ = _run(
        "--config", str(config), "deserialize", str(metadata_path), str(payload)
    )

    assert code == 2


def test_argument_errors_return_exit_code() -> None:
    code, _ = _run("unknown-command")

    assert code == 2


def test_logging_is_configured_from_flags(
    metadata_path: Path, tmp_path: Path, quiet_logging: list[dict[str, object]]
) -> None:
    payload = _write(tmp_path / "payload.json", {})

    code, _ = _run(
        "--log-level",
        "DEBUG",
        "--json-logs",
        "deserialize",
        str(metadata_path),
        str(payload),
    )

    assert code == 0
    assert quiet_logging == [{"level": "DEBUG", "json_mode": True}]
