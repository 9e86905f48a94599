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

"""Command line entry point for the ``contractserde`` executable."""

from __future__ import annotations

import argparse
import json
import sys
from collections.abc import Mapping, Sequence
from datetime import datetime
from pathlib import Path
from typing import TextIO, cast

from ..errors import JsonIslandError, MetadataError, SettingsError
from ..islands import deserialize_json_island, find_json_island
from ..logging import StructuredLogger, configure_logging, get_logger
from ..metadata import TypeMetadata, load_metadata
from ..serde import InvalidDate, deserialize, serialize
from ..serde._dates import format_wire_date
from ..settings import SerdeSettings, load_settings

EXIT_OK = 0
EXIT_INPUT_ERROR = 2
EXIT_METADATA_ERROR = 3


def main(argv: Sequence[str] | None = None, *, stdout: TextIO | None = None) -> int:
    """Run the contractserde CLI."""

    parser = _build_parser()
    try:
        args = parser.parse_args(list(argv) if argv is not None else None)
    except SystemExit as exc:  # argparse exits with code 2 on errors
        code = exc.code if isinstance(exc.code, int) else EXIT_INPUT_ERROR
        return int(code)

    configure_logging(level=args.log_level, json_mode=args.json_logs)
    logger = get_logger(__name__, context={"command": args.command})
    out = stdout if stdout is not None else sys.stdout

    try:
        settings = load_settings(
            Path(args.config) if args.config is not None else None,
            {
                "legacy_dates": getattr(args, "legacy_dates", None),
                "unwrap_wrapped_collections": getattr(args, "unwrap", None),
            },
        )
    except (SettingsError, OSError) as error:
        logger.error(
            "Invalid settings.",
            event="cli.settings_error",
            context={"error": str(error)},
        )
        return EXIT_INPUT_ERROR

    try:
        metadata = load_metadata(args.metadata)
    except (MetadataError, OSError) as error:
        logger.error(
            "Could not load metadata.",
            event="cli.metadata_error",
            context={"path": args.metadata, "error": str(error)},
        )
        return EXIT_METADATA_ERROR

    try:
        if args.command == "island":
            result = _run_island(args, metadata, settings)
        else:
            result = _run_convert(args, metadata, settings)
    except (JsonIslandError, json.JSONDecodeError, LookupError, OSError) as error:
        logger.error(
            "Could not read input.",
            event="cli.input_error",
            context={"error": str(error)},
        )
        return EXIT_INPUT_ERROR

    _log_summary(logger, result)
    json.dump(_to_jsonable(result), out, indent=2 if args.pretty else None)
    _ = out.write("\n")
    return EXIT_OK


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="contractserde",
        description="Convert contract JSON between wire and in-memory shapes.",
    )
    _ = parser.add_argument(
        "--log-level",
        choices=("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG", "NOTSET"),
        default=None,
        help="Override the log level emitted by the CLI.",
    )
    _ = parser.add_argument(
        "--json-logs",
        action=argparse.BooleanOptionalAction,
        default=False,
        help="Emit structured JSON logs on stderr.",
    )
    _ = parser.add_argument(
        "--config",
        default=None,
        help="TOML or YAML settings file.",
    )
    _ = parser.add_argument(
        "--pretty",
        action=argparse.BooleanOptionalAction,
        default=True,
        help="Indent the JSON output (disable with --no-pretty).",
    )

    subcommands = parser.add_subparsers(dest="command", required=True)

    deserialize_parser = subcommands.add_parser(
        "deserialize",
        help="Show the in-memory shape of a wire payload.",
    )
    normalize_parser = subcommands.add_parser(
        "normalize",
        help="Deserialize then serialize a wire payload into canonical wire form.",
    )
    for sub in (deserialize_parser, normalize_parser):
        _ = sub.add_argument("metadata", help="Type metadata (JSON, YAML or TOML).")
        _ = sub.add_argument(
            "input",
            nargs="?",
            default="-",
            help="JSON payload file (default: stdin).",
        )
        _ = sub.add_argument(
            "--unwrap",
            action=argparse.BooleanOptionalAction,
            default=None,
            help="Unwrap {\"value\": [...]} collection envelopes.",
        )
        _add_legacy_flag(sub)

    island_parser = subcommands.add_parser(
        "island",
        help="Deserialize a JSON island embedded in an HTML document.",
    )
    _ = island_parser.add_argument("metadata", help="Type metadata (JSON, YAML or TOML).")
    _ = island_parser.add_argument("html", help="HTML document containing the island.")
    _ = island_parser.add_argument("element_id", help="Id of the island element.")
    _add_legacy_flag(island_parser)

    return parser


def _add_legacy_flag(parser: argparse.ArgumentParser) -> None:
    _ = parser.add_argument(
        "--legacy-dates",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Force legacy date recovery on or off.",
    )


def _run_convert(
    args: argparse.Namespace, metadata: TypeMetadata, settings: SerdeSettings
) -> object:
    payload = _read_payload(args.input)
    result = deserialize(
        payload,
        metadata,
        settings.preserve_original,
        settings.unwrap_wrapped_collections,
        settings=settings,
    )
    if args.command == "normalize":
        result = serialize(result, metadata, settings.preserve_original)
    return result


def _run_island(
    args: argparse.Namespace, metadata: TypeMetadata, settings: SerdeSettings
) -> object:
    document = Path(args.html).read_text(encoding="utf-8")
    element = find_json_island(document, args.element_id)
    if element is None:
        raise LookupError(f"No element with id {args.element_id!r} in {args.html}")
    return deserialize_json_island(element, metadata, settings=settings)


def _read_payload(source: str) -> object:
    if source == "-":
        return json.load(sys.stdin)
    with Path(source).open("r", encoding="utf-8") as handle:
        return json.load(handle)


def _to_jsonable(value: object) -> object:
    if isinstance(value, datetime):
        return format_wire_date(value)
    if isinstance(value, InvalidDate):
        return None
    if isinstance(value, Mapping):
        return {
            _to_json_key(key): _to_jsonable(item)
            for key, item in cast(Mapping[object, object], value).items()
        }
    if isinstance(value, list):
        return [_to_jsonable(item) for item in cast(list[object], value)]
    return value


def _to_json_key(key: object) -> object:
    if isinstance(key, datetime):
        return format_wire_date(key)
    if isinstance(key, InvalidDate):
        return key.text
    return key


def _log_summary(logger: StructuredLogger, result: object) -> None:
    logger.info(
        "Conversion finished.",
        event="cli.converted",
        context={"kind": type(result).__name__},
    )
