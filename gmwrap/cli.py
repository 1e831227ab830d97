from __future__ import annotations

import argparse
import json
import logging
from pathlib import Path
from typing import Any

from gmwrap import gm
from gmwrap.config import Settings, load_config, resolve_profile
from gmwrap.options import Option, parse_option_spec
from gmwrap.types import CommandResult, CommandSummary, MetadataResult

LOGGER = logging.getLogger("gmwrap")
LOGGER.propagate = False


class JsonLogFormatter(logging.Formatter):
    """Simple JSON formatter to keep log output structured."""

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "level": record.levelname,
            "event": record.getMessage(),
            "logger": record.name,
        }
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)
        for key, value in getattr(record, "structured_data", {}).items():
            payload[key] = value
        return json.dumps(payload)


def configure_logging(verbose: bool) -> None:
    """Configure structured logging for the CLI."""
    LOGGER.handlers.clear()
    handler = logging.StreamHandler()
    handler.setFormatter(JsonLogFormatter())
    LOGGER.addHandler(handler)
    LOGGER.setLevel(logging.DEBUG if verbose else logging.INFO)


def collect_options(args: argparse.Namespace, settings: Settings, attr: str = "option") -> list[Option]:
    """Profile options first, then the ones given on the command line."""
    options: list[Option] = []
    if attr == "option" and args.profile:
        try:
            options.extend(resolve_profile(args.profile, settings).options)
        except KeyError as error:
            LOGGER.error("Profile resolution failed", extra={"structured_data": {"profile": args.profile}})
            raise SystemExit(str(error)) from error
    try:
        options.extend(parse_option_spec(spec) for spec in getattr(args, attr, None) or [])
    except ValueError as error:
        raise SystemExit(str(error)) from error
    return options


def emit(operation: str, result: CommandResult | MetadataResult | str) -> int:
    summary: CommandSummary = {"operation": operation, "ok": True}
    if isinstance(result, str):
        summary["output"] = result
    else:
        summary["ok"] = result.ok
        if result.error is not None:
            summary["error"] = result.error
        if result.output:
            summary["output"] = result.output
        if isinstance(result, MetadataResult) and result.ok:
            summary["metadata"] = result.record
    print(json.dumps(summary))
    return 0 if summary["ok"] else 1


def handle_identify(args: argparse.Namespace, settings: Settings) -> int:
    """Handle the ``identify`` subcommand."""
    output = gm.identify(args.file, collect_options(args, settings), settings=settings)
    return emit("identify", output)


def handle_identify_explicit(args: argparse.Namespace, settings: Settings) -> int:
    """Handle the ``identify-explicit`` subcommand."""
    try:
        result = gm.identify_explicit(args.file, args.field, settings=settings)
    except ValueError as error:
        raise SystemExit(str(error)) from error
    return emit("identify-explicit", result)


def handle_convert(args: argparse.Namespace, settings: Settings) -> int:
    """Handle the ``convert`` subcommand."""
    result = gm.convert(
        args.input,
        args.output,
        collect_options(args, settings),
        collect_options(args, settings, attr="output_option"),
        settings=settings,
    )
    return emit("convert", result)


def handle_composite(args: argparse.Namespace, settings: Settings) -> int:
    """Handle the ``composite`` subcommand."""
    result = gm.composite(args.input, args.base, args.output, collect_options(args, settings), settings=settings)
    return emit("composite", result)


def handle_mogrify(args: argparse.Namespace, settings: Settings) -> int:
    """Handle the ``mogrify`` subcommand."""
    result = gm.mogrify(args.file, collect_options(args, settings), settings=settings)
    return emit("mogrify", result)


def handle_montage(args: argparse.Namespace, settings: Settings) -> int:
    """Handle the ``montage`` subcommand."""
    result = gm.montage(args.inputs, args.output, collect_options(args, settings), settings=settings)
    return emit("montage", result)


def handle_version(args: argparse.Namespace, settings: Settings) -> int:
    """Handle the ``version`` subcommand."""
    return emit("version", gm.version(settings=settings))


def _add_option_argument(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "-o",
        "--option",
        action="append",
        dest="option",
        help="Option as NAME or NAME=ARG1,ARG2 (e.g. resize=100,50). Can be used multiple times.",
    )


def build_parser() -> argparse.ArgumentParser:
    """Create the top-level argument parser."""
    parser = argparse.ArgumentParser(description="CLI wrapper around GraphicsMagick with profile support")
    parser.add_argument(
        "--config",
        default=Path("config/gmwrap.yaml"),
        type=Path,
        help="Path to the YAML configuration file.",
    )
    parser.add_argument(
        "--binary",
        help="GraphicsMagick binary to run. Overrides the configuration and $GMWRAP_BINARY.",
    )
    parser.add_argument(
        "--profile",
        help="Named option profile from the configuration, applied before --option values.",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable debug logging.",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    identify_parser = subparsers.add_parser("identify", help="Print gm identify output for an image")
    identify_parser.add_argument("file", help="Image file path")
    _add_option_argument(identify_parser)
    identify_parser.set_defaults(handler=handle_identify)

    explicit_parser = subparsers.add_parser("identify-explicit", help="Extract selected image characteristics")
    explicit_parser.add_argument("file", help="Image file path")
    explicit_parser.add_argument(
        "--field",
        action="append",
        required=True,
        help="Characteristic to extract (e.g. width). Can be used multiple times.",
    )
    explicit_parser.set_defaults(handler=handle_identify_explicit)

    convert_parser = subparsers.add_parser("convert", help="Convert an image into another file")
    convert_parser.add_argument("input", help="Input image path")
    convert_parser.add_argument("output", help="Output image path")
    _add_option_argument(convert_parser)
    convert_parser.add_argument(
        "--output-option",
        action="append",
        dest="output_option",
        help="Option placed between the input and output files. Can be used multiple times.",
    )
    convert_parser.set_defaults(handler=handle_convert)

    composite_parser = subparsers.add_parser("composite", help="Composite an image over a base image")
    composite_parser.add_argument("input", help="Overlay image path")
    composite_parser.add_argument("base", help="Base image path")
    composite_parser.add_argument("output", help="Output image path")
    _add_option_argument(composite_parser)
    composite_parser.set_defaults(handler=handle_composite)

    mogrify_parser = subparsers.add_parser("mogrify", help="Transform an image in place")
    mogrify_parser.add_argument("file", help="Image file path")
    _add_option_argument(mogrify_parser)
    mogrify_parser.set_defaults(handler=handle_mogrify)

    montage_parser = subparsers.add_parser("montage", help="Tile several images into one")
    montage_parser.add_argument("inputs", nargs="+", help="Input image paths")
    montage_parser.add_argument("--output", required=True, help="Output image path")
    _add_option_argument(montage_parser)
    montage_parser.set_defaults(handler=handle_montage)

    version_parser = subparsers.add_parser("version", help="Print the GraphicsMagick version banner")
    version_parser.set_defaults(handler=handle_version)

    return parser


def main(argv: list[str] | None = None) -> int:
    """Entrypoint for the CLI."""
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(verbose=args.verbose)
    try:
        settings = load_config(args.config, binary=args.binary)
    except ValueError as error:
        LOGGER.error("Configuration failed to load", extra={"structured_data": {"config": str(args.config)}})
        raise SystemExit(str(error)) from error
    return args.handler(args, settings)


if __name__ == "__main__":
    raise SystemExit(main())
