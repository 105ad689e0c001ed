#!/usr/bin/env python3
"""
wasm-strip

Command-line interface for removing custom sections from WebAssembly modules.

Usage:
    wasm-strip [input] [-o output] [-a] [-d REGEX]...
    wasm-strip -h | --help
    wasm-strip --version

Arguments:
    input              Path to the input module (default: stdin)

Options:
    -o --output        Where to write the stripped module (default: stdout)
    -a --all           Remove all custom sections, regardless of name
    -d --delete        Remove custom sections matching the specified regex
    --config           Path to config.json
    -v --verbose       Log every section decision to stderr
    -h --help          Show this help message
    --version          Show version
"""

import sys
import logging
import argparse
from pathlib import Path
from typing import List, Optional

from . import __version__
from .config import Config
from .formats.wasm import NotSupportedError
from .io.binary_stream import BinaryReaderError
from .strip.policy import RetentionPolicy, InvalidPatternError
from .strip.stripper import strip_module_with_report


def error(message: str) -> None:
    print(f"ERROR: {message}", file=sys.stderr)


def read_input(path: Optional[str]) -> bytes:
    """Read the module from a file, or from stdin for `-` or no path."""
    if path is None or path == '-':
        return sys.stdin.buffer.read()
    return Path(path).read_bytes()


def write_output(path: Optional[str], data: bytes) -> None:
    """
    Write the module to a file, or to stdout for `-` or no path.

    Raises:
        ValueError: If stdout is a terminal
    """
    if path is None or path == '-':
        if sys.stdout.isatty():
            raise ValueError(
                "cannot print binary wasm output to a terminal, pass `-o` to write to a file")
        sys.stdout.buffer.write(data)
        sys.stdout.buffer.flush()
        return
    Path(path).write_bytes(data)


def build_config(args: argparse.Namespace) -> Config:
    """Load the config file and apply command line overrides."""
    config_path = Path(args.config) if args.config else None
    config = Config.load(config_path)

    if args.all:
        config.strip_all = True
    if args.delete:
        config.delete = list(args.delete)
    if args.verbose:
        config.verbose = True

    return config


def create_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='wasm-strip',
        description="Removes custom sections from an input WebAssembly file.\n\n"
                    "By default all custom sections such as DWARF debugging information\n"
                    "are stripped, except the `name` section unless --all is passed.",
        formatter_class=argparse.RawDescriptionHelpFormatter
    )
    parser.add_argument('input', nargs='?', help='Input WebAssembly module (default: stdin)')
    parser.add_argument('-o', '--output', help='Output file (default: stdout)')
    parser.add_argument('-a', '--all', action='store_true',
                        help='Remove all custom sections, regardless of name')
    parser.add_argument('-d', '--delete', action='append', metavar='REGEX', default=[],
                        help='Remove custom sections matching the specified regex')
    parser.add_argument('--config', type=str, help='Path to config.json')
    parser.add_argument('-v', '--verbose', action='store_true',
                        help='Log every section decision to stderr')
    parser.add_argument('--version', action='version', version=f'wasm-strip {__version__}')
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    parser = create_parser()
    args = parser.parse_args(argv)

    try:
        config = build_config(args)
    except (OSError, ValueError, TypeError) as e:
        error(f"failed to load config: {e}")
        return 1

    if config.verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(levelname)s %(name)s: %(message)s",
            stream=sys.stderr,
        )

    # Patterns are checked before the input is touched
    try:
        policy = RetentionPolicy.from_config(config)
    except InvalidPatternError as e:
        error(str(e))
        return 1

    try:
        data = read_input(args.input)
    except OSError as e:
        error(f"failed to read input: {e}")
        return 1

    try:
        result = strip_module_with_report(data, policy)
    except NotSupportedError as e:
        error(str(e))
        return 1
    except BinaryReaderError as e:
        error(f"failed to parse input: {e}")
        return 1

    if config.verbose:
        print(f"Removed {len(result.removed)} custom section(s): {', '.join(result.removed) or '-'}",
              file=sys.stderr)
        print(f"Kept {len(result.kept)} custom section(s): {', '.join(result.kept) or '-'}",
              file=sys.stderr)
        print(f"{result.input_size} -> {result.output_size} bytes", file=sys.stderr)

    try:
        write_output(args.output, result.data)
    except (OSError, ValueError) as e:
        error(str(e))
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
