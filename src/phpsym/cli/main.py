# Copyright 2026 phpsym Contributors
# SPDX-License-Identifier: Apache-2.0

"""Entry point for the phpsym command-line interface."""

import argparse
import sys
from pathlib import Path

from pydantic import TypeAdapter

from phpsym.model.entities import ParseResult
from phpsym.parser.parser import parse_file
from phpsym.views.tree import render_tree
from phpsym.workspace.config import ConfigError, ParserConfig, find_config, load_config

# ###############
# Public Interface
# ###############


def main() -> None:
    """Run the phpsym CLI."""
    parser = argparse.ArgumentParser(
        prog="phpsym",
        description="phpsym - symbol tables for PHP source files",
    )
    subparsers = parser.add_subparsers(dest="command", metavar="COMMAND")

    # dump subcommand
    dump_parser = subparsers.add_parser(
        "dump",
        help="Print the symbol table of PHP files",
        description="Parse PHP files and print their namespaces, classes, functions and variables.",
    )
    dump_parser.add_argument(
        "paths",
        nargs="+",
        help="PHP files, or directories searched recursively for PHP files",
    )
    dump_parser.add_argument(
        "--bodies",
        action="store_true",
        help="Also record local variables declared inside function bodies",
    )
    dump_parser.add_argument(
        "--json",
        action="store_true",
        help="Print the parse results as JSON instead of an indented tree",
    )
    dump_parser.add_argument(
        "--config",
        default=None,
        help="Path to a configuration file (default: ./.phpsym.yaml if present)",
    )

    args = parser.parse_args()
    if args.command is None:
        parser.print_help()
        sys.exit(0)

    sys.exit(_dispatch(args))


# ################
# Implementation
# ################

_RESULTS_ADAPTER = TypeAdapter(list[ParseResult])


def _dispatch(args: argparse.Namespace) -> int:
    """Dispatch to the appropriate subcommand handler."""
    if args.command == "dump":
        return _cmd_dump(args)
    return 0


def _cmd_dump(args: argparse.Namespace) -> int:
    """Handle the dump subcommand."""
    try:
        config = load_config(Path(args.config)) if args.config else find_config(Path.cwd())
    except ConfigError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    files = _collect_files([Path(p) for p in args.paths], config)
    if files is None:
        return 1
    if not files:
        print("No PHP files found.")
        return 0

    parse_bodies = args.bodies or config.parse_function_bodies
    results: list[ParseResult] = []
    for path in files:
        try:
            results.append(parse_file(path, parse_function_bodies=parse_bodies))
        except OSError as exc:
            print(f"Error: cannot read '{path}': {exc}", file=sys.stderr)
            return 1

    if args.json:
        print(_RESULTS_ADAPTER.dump_json(results, indent=2).decode("utf-8"))
        return 0

    for result in results:
        print(f"File: {result.filename}")
        print(render_tree(result))
    return 0


def _collect_files(paths: list[Path], config: ParserConfig) -> list[Path] | None:
    """Expand directories into PHP files. Returns None if a path does not exist."""
    files: list[Path] = []
    for path in paths:
        if not path.exists():
            print(f"Error: path '{path}' does not exist.", file=sys.stderr)
            return None
        if path.is_dir():
            files.extend(
                sorted(f for f in path.rglob("*") if f.is_file() and f.suffix.lower() in config.file_extensions)
            )
        else:
            files.append(path)
    return files
