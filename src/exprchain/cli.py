"""Command-line interface for exprchain."""

from __future__ import annotations

import argparse
import json
import sys
import tomllib
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from exprchain.errors import InvalidOffsetError, SourceUnavailableError
from exprchain.tokens import DEFAULT_BOUNDARY_KINDS, TokenKind, parse_kind_name

CONFIG_NAME = "exprchain.toml"
FORMATS = ("text", "json")


@dataclass(frozen=True, slots=True)
class CliOptions:
    """Parsed CLI options."""

    input_file: Path | None
    stdin: bool
    offset: int | None
    char_offset: bool
    output_format: str
    boundary_kinds: frozenset[TokenKind]
    debug: bool


@dataclass(frozen=True, slots=True)
class ChainResult:
    """Where the expression starts and the chain it reduces to."""

    start: int
    line: int
    chain: list[str]


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser (separate function for testability)."""
    p = argparse.ArgumentParser(
        prog="exprchain",
        description="Find the PHP access chain that ends at a cursor offset",
    )
    p.add_argument("input", nargs="?", help="Input .php file")
    p.add_argument("--stdin", action="store_true", help="Read source from stdin (blocks until EOF)")
    p.add_argument(
        "--offset",
        type=int,
        default=None,
        metavar="N",
        help="Cursor offset in bytes (default: end of source)",
    )
    p.add_argument(
        "--charoffset",
        action="store_true",
        help="Interpret --offset as a character offset instead of a byte offset",
    )
    p.add_argument("--format", choices=FORMATS, default=None, help="Output format (default: text)")
    p.add_argument(
        "--boundary-kind",
        action="append",
        default=[],
        metavar="KIND",
        help="Extra token kind that ends an expression (repeatable)",
    )
    p.add_argument(
        "--ignore-kind",
        action="append",
        default=[],
        metavar="KIND",
        help="Token kind to drop from the boundary table (repeatable)",
    )
    p.add_argument(
        "--config",
        metavar="FILE",
        help=f"Config file (default: auto-discover {CONFIG_NAME})",
    )
    p.add_argument("--debug", action="store_true", help="Dump tokens to stderr")
    return p


def parse_kind_arg(s: str) -> TokenKind:
    """Parse a token kind name such as "NEW" or "double_colon"."""
    try:
        return parse_kind_name(s)
    except KeyError:
        raise argparse.ArgumentTypeError(f"unknown token kind: {s}") from None


def load_config(config_path: Path | None, input_dir: Path) -> dict[str, Any]:
    """Load a TOML config file, returning an empty dict on missing/absent file."""
    path = config_path if config_path is not None else input_dir / CONFIG_NAME

    if not path.is_file():
        return {}

    with open(path, "rb") as f:
        try:
            return tomllib.load(f)
        except tomllib.TOMLDecodeError as exc:
            raise argparse.ArgumentTypeError(f"invalid config file {path}: {exc}") from exc


def resolve_options(args: argparse.Namespace) -> CliOptions:
    """Merge config file and CLI args into CliOptions.

    Precedence: defaults < config file < CLI flags.
    """
    input_file = Path(args.input) if args.input else None
    input_dir = input_file.parent if input_file is not None else Path(".")
    if not input_dir.parts:
        input_dir = Path(".")

    config_path = Path(args.config) if args.config else None
    config = load_config(config_path, input_dir)

    # Boundary table: defaults < config < CLI
    kinds = set(DEFAULT_BOUNDARY_KINDS)
    cfg_scanner = config.get("scanner")
    if isinstance(cfg_scanner, dict):
        cfg_add = cfg_scanner.get("boundary_kinds")
        if isinstance(cfg_add, list):
            kinds.update(parse_kind_arg(str(k)) for k in cfg_add)
        cfg_remove = cfg_scanner.get("ignore_kinds")
        if isinstance(cfg_remove, list):
            kinds.difference_update(parse_kind_arg(str(k)) for k in cfg_remove)
    kinds.update(parse_kind_arg(k) for k in args.boundary_kind)
    kinds.difference_update(parse_kind_arg(k) for k in args.ignore_kind)

    # Output format: default < config < CLI
    output_format = "text"
    cfg_output = config.get("output")
    if isinstance(cfg_output, dict):
        cfg_format = cfg_output.get("format")
        if cfg_format is not None:
            if cfg_format not in FORMATS:
                raise argparse.ArgumentTypeError(f"invalid output format in config: {cfg_format}")
            output_format = cfg_format
    if args.format is not None:
        output_format = args.format

    return CliOptions(
        input_file=input_file,
        stdin=args.stdin,
        offset=args.offset,
        char_offset=args.charoffset,
        output_format=output_format,
        boundary_kinds=frozenset(kinds),
        debug=args.debug,
    )


def analyze(options: CliOptions, source: str) -> ChainResult:
    """Run the scanner and the extractor over source at the requested offset."""
    from exprchain.callstack import sanitize_call_stack
    from exprchain.debug import dump_tokens
    from exprchain.lexer import tokenize
    from exprchain.offsets import char_offset_to_byte_offset, decode, encode, line_at
    from exprchain.scanner import find_expression_start

    data = encode(source)
    cursor = options.offset if options.offset is not None else len(data)
    if options.offset is not None and options.char_offset:
        cursor = char_offset_to_byte_offset(options.offset, source)

    start = find_expression_start(source, cursor, boundary_kinds=options.boundary_kinds)

    if options.debug:
        dump_tokens(tokenize(decode(data[:cursor])), start, file=sys.stderr)

    return ChainResult(
        start=start,
        line=line_at(source, start),
        chain=sanitize_call_stack(decode(data[start:cursor])),
    )


def format_result(result: ChainResult, output_format: str) -> str:
    """Render a ChainResult as text (one segment per line) or JSON."""
    if output_format == "json":
        return json.dumps({"start": result.start, "line": result.line, "chain": result.chain})
    return "\n".join(result.chain)


def main(argv: list[str] | None = None) -> int:
    """CLI entry point. Returns exit code (0/1/2). Does not call sys.exit()."""
    from exprchain.source import get_source_code

    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        options = resolve_options(args)
    except argparse.ArgumentTypeError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 2

    try:
        source = get_source_code(options.input_file, stdin=options.stdin)
        result = analyze(options, source)
    except SourceUnavailableError as exc:
        print(str(exc), file=sys.stderr)
        return 1
    except InvalidOffsetError as exc:
        name = str(options.input_file) if options.input_file is not None else "<stdin>"
        print(exc.format(name), file=sys.stderr)
        return 1

    sys.stdout.write(format_result(result, options.output_format) + "\n")
    return 0
