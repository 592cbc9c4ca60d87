"""stabel CLI entry point."""

from __future__ import annotations

import argparse
import logging
import os
import sys
from pathlib import Path
from typing import List, Optional

from . import __version__
from .build import NativeBuilder, write_source
from .config import TranspileOptions
from .errors import BuildError, StabelError
from .repl import DEFAULT_HISTORY, PreviewREPL
from .transpiler import transpile

LOG = logging.getLogger("stabel.cli")

DEFAULT_SOURCE = "test.stabel"


def _configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.WARNING),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="stabel",
        description="Transpile a stabel stack program to C",
    )
    parser.add_argument(
        "source",
        nargs="?",
        default=DEFAULT_SOURCE,
        help=f"Program source file, or '-' for stdin (default {DEFAULT_SOURCE})",
    )
    parser.add_argument("-o", "--output", help="C output path, or '-' for stdout (default: SOURCE with .c suffix)")
    parser.add_argument("--tokens", action="store_true", help="Print the token stream")
    parser.add_argument("--no-trace", action="store_true", help="Omit per-token trace comments")
    parser.add_argument("--stack-size", type=int, help="Capacity of the emitted stack")
    parser.add_argument(
        "--permissive-blocks",
        action="store_true",
        help="Do not check that `= then` / `!` / `end` blocks balance",
    )
    parser.add_argument("--cc", action="store_true", help="Compile the C output to an executable")
    parser.add_argument("--compiler", metavar="NAME", help="C compiler for --cc (default: $CC or cc)")
    parser.add_argument("--exe", type=Path, help="Executable path for --cc (default: output without suffix)")
    parser.add_argument("--run", action="store_true", help="Run the executable after building (implies --cc)")
    parser.add_argument("--repl", action="store_true", help="Start the interactive preview")
    parser.add_argument(
        "--log-level",
        default=os.environ.get("STABEL_LOG", "WARNING"),
        help="Logging level (default WARNING)",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def _options_from_args(args: argparse.Namespace) -> TranspileOptions:
    options = TranspileOptions.from_env()
    return options.override(
        stack_size=args.stack_size,
        trace_comments=False if args.no_trace else None,
        strict_blocks=False if args.permissive_blocks else None,
    )


def _read_source(source: str) -> str:
    if source == "-":
        return sys.stdin.read()
    return Path(source).read_text(encoding="utf-8", errors="surrogateescape")


def _output_path(args: argparse.Namespace) -> Optional[Path]:
    if args.output == "-":
        return None
    if args.output:
        return Path(args.output)
    if args.source == "-":
        return None
    return Path(args.source).with_suffix(".c")


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_arg_parser()
    args = parser.parse_args(argv)
    _configure_logging(args.log_level)

    try:
        options = _options_from_args(args)
    except ValueError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1

    if args.repl:
        return PreviewREPL(options, history_path=DEFAULT_HISTORY, show_tokens=args.tokens).run()

    want_build = args.run or args.cc
    out_path = _output_path(args)
    if want_build and out_path is None:
        print("error: --cc/--run need a C output file, not stdout", file=sys.stderr)
        return 1

    try:
        source_text = _read_source(args.source)
    except (OSError, UnicodeDecodeError) as exc:
        print(f"error: cannot read {args.source}: {exc}", file=sys.stderr)
        return 1

    try:
        result = transpile(source_text, options)
    except StabelError as exc:
        sep = ":" if exc.line is not None else ": "
        print(f"error: {args.source}{sep}{exc}", file=sys.stderr)
        return 1

    if args.tokens:
        stream = sys.stderr if out_path is None else sys.stdout
        for line in result.tokens.dump():
            print(line, file=stream)

    if out_path is None:
        sys.stdout.write(result.code)
        return 0
    write_source(out_path, result.code)
    LOG.info("transpiled %s -> %s", args.source, out_path)

    if not want_build:
        return 0
    builder = NativeBuilder(args.compiler)
    try:
        exe_path = builder.compile(out_path, args.exe)
        if not args.run:
            return 0
        completed = builder.run(exe_path)
    except BuildError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1
    sys.stdout.write(completed.stdout)
    if completed.stderr:
        sys.stderr.write(completed.stderr)
    return completed.returncode


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
