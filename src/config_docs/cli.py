"""Command line interface for config-docs."""

from __future__ import annotations

import argparse
import importlib
import logging
import sys
from pathlib import Path
from typing import Callable

from config_docs.adapter import exported_types
from config_docs.codegen_markdown import (
    MarkdownOptions,
    generate_config_docs,
    generate_docs,
)
from config_docs.config import CONFIG_DOCS_FORMAT, CONFIG_DOCS_OUTPUT_DIR
from config_docs.exceptions import ConfigDocsError, MalformedAdapterError
from config_docs.formats import ConfigFormat, get_strategy, registered_formats

Handler = Callable[[argparse.Namespace], int]

logger = logging.getLogger(__name__)


def _resolve_targets(targets: list[str]) -> list[type]:
    """Import ``module:Type`` or ``module`` targets."""
    resolved: list[type] = []
    for target in targets:
        module_name, _, attr = target.partition(":")
        try:
            module = importlib.import_module(module_name)
        except ImportError as err:
            raise ConfigDocsError(f"cannot import '{module_name}': {err}") from err

        if attr:
            config_type = getattr(module, attr, None)
            if config_type is None:
                raise ConfigDocsError(f"module '{module_name}' has no attribute '{attr}'")
            if not callable(getattr(config_type, "schema", None)):
                raise ConfigDocsError(f"'{target}' does not provide a schema() method")
            resolved.append(config_type)
            continue

        found = exported_types(module.__name__)
        if not found:
            raise ConfigDocsError(f"module '{module_name}' exports no configuration types")
        resolved.extend(found)
    return resolved


def _handle_gen_docs(args: argparse.Namespace) -> int:
    """Render the documents of the requested configuration types."""
    app_dir = str(Path(args.app_dir).resolve())
    if app_dir not in sys.path:
        sys.path.insert(0, app_dir)

    config_format = ConfigFormat.parse(args.format)
    get_strategy(config_format)
    options = MarkdownOptions.new(config_format).with_title(args.title)

    for config_type in _resolve_targets(args.targets):
        try:
            if args.stdout:
                sys.stdout.write(generate_config_docs(config_type, options))
            else:
                path = generate_docs(config_type, args.output_dir, options)
                print(f"Generated documentation: {path}")
        except MalformedAdapterError:
            # already names the type and field
            raise
        except ConfigDocsError as err:
            raise ConfigDocsError(f"{config_type.__name__}: {err}") from err
    return 0


def _handle_formats(_args: argparse.Namespace) -> int:
    """List the formats examples can be rendered in."""
    for config_format in registered_formats():
        print(f"{config_format.value}\t.{get_strategy(config_format).extension()}.md")
    return 0


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser for the CLI."""
    parser = argparse.ArgumentParser(prog="config-docs")
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="show debug output",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    gen_docs = subparsers.add_parser(
        "gen-docs",
        help="generate Markdown reference documents",
    )
    gen_docs.add_argument(
        "targets",
        nargs="+",
        metavar="TARGET",
        help="'module:Type' or a module whose exported types are documented",
    )
    gen_docs.add_argument(
        "--format",
        default=CONFIG_DOCS_FORMAT,
        help="example format (default: %(default)s, env CONFIG_DOCS_FORMAT)",
    )
    gen_docs.add_argument("--title", default=None, help="document title")
    gen_docs.add_argument(
        "--output-dir",
        type=Path,
        default=CONFIG_DOCS_OUTPUT_DIR,
        help="directory for the documents (default: %(default)s, env CONFIG_DOCS_OUTPUT_DIR)",
    )
    gen_docs.add_argument(
        "--app-dir",
        default=".",
        help="directory prepended to the import path (default: current directory)",
    )
    gen_docs.add_argument(
        "--stdout",
        action="store_true",
        help="print the documents instead of writing files",
    )
    gen_docs.set_defaults(func=_handle_gen_docs)

    formats = subparsers.add_parser("formats", help="list the supported example formats")
    formats.set_defaults(func=_handle_formats)

    return parser


def main(argv: list[str] | None = None) -> int:
    """Entry point for the CLI."""
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    handler: Handler = args.func
    try:
        return handler(args)
    except ConfigDocsError as err:
        logger.debug("command failed", exc_info=True)
        print(f"config-docs: error: {err}", file=sys.stderr)
        return 1


if __name__ == "__main__":  # pragma: no cover - CLI entry point
    raise SystemExit(main())
