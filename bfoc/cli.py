from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Optional

from .emitter import DEFAULT_TAPE_LENGTH, CEmitter
from .listing import format_code_window, format_listing, format_summary, summarize
from .scanner import scan
from .toolchain import Toolchain, ToolchainError
from .translator import TranslationError, Translator

logger = logging.getLogger(__name__)


def _read_source(path: Optional[str]) -> bytes:
    if path is None or path == "-":
        return sys.stdin.buffer.read()
    return Path(path).read_bytes()


def _positive_int(value: str) -> int:
    number = int(value)
    if number < 1:
        raise argparse.ArgumentTypeError(f"expected a positive integer, got {value}")
    return number


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(format="%(levelname)s: %(message)s")
    logging.getLogger("bfoc").setLevel(logging.DEBUG if verbose else logging.INFO)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="bfoc",
        description="Brainfuck optimizing compiler (emits C and builds it with a native compiler)",
        add_help=False,
    )
    parser.add_argument("-h", "--help", action="store_true", help="Show usage and exit")
    parser.add_argument(
        "-o",
        dest="output",
        default="./a.out",
        help="Path of the compiled executable (default: ./a.out)",
    )
    parser.add_argument(
        "-S",
        "--emit-c",
        metavar="PATH",
        help="Write the generated C source to PATH ('-' for stdout) instead of compiling",
    )
    parser.add_argument(
        "--dump",
        action="store_true",
        help="Print the translated instruction listing and exit",
    )
    parser.add_argument(
        "--tape-length",
        type=_positive_int,
        default=DEFAULT_TAPE_LENGTH,
        help=f"Number of tape cells in the generated program (default: {DEFAULT_TAPE_LENGTH})",
    )
    parser.add_argument("--cc", help="C compiler command (default: $CC, then gcc)")
    parser.add_argument(
        "--keep-c",
        action="store_true",
        help="Keep the intermediate C file instead of deleting it",
    )
    parser.add_argument(
        "--no-timestamp",
        action="store_true",
        help="Omit the generation timestamp from the C header",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    parser.add_argument("input", nargs="?", help="Brainfuck source file (default: stdin)")
    return parser


def main(argv: Optional[list[str]] = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)
    if args.help:
        parser.print_help(sys.stderr)
        return 1

    _configure_logging(args.verbose)

    try:
        source = _read_source(args.input)
    except OSError as exc:
        print(f"error: failed to open input file {args.input} for reading: {exc}", file=sys.stderr)
        return 1

    stream = scan(source)
    logger.info("read %d bytes of input code", len(stream))

    try:
        instructions = Translator().translate(stream)
    except TranslationError as exc:
        print(f"error: {exc}", file=sys.stderr)
        print(f"  {format_code_window(stream, exc.position)}", file=sys.stderr)
        return 1

    if args.dump:
        sys.stdout.write(format_listing(instructions))
        if instructions:
            sys.stdout.write("\n")
        sys.stdout.write(format_summary(summarize(stream, instructions)) + "\n")
        return 0

    emitter = CEmitter(tape_length=args.tape_length, timestamp=not args.no_timestamp)

    if args.emit_c is not None:
        if args.emit_c == "-":
            sys.stdout.write(emitter.emit(instructions))
            return 0
        try:
            emitter.write(instructions, Path(args.emit_c))
        except OSError as exc:
            print(f"error: couldn't write C source to {args.emit_c}: {exc}", file=sys.stderr)
            return 1
        logger.info("wrote C source to %s", args.emit_c)
        return 0

    toolchain = Toolchain.from_environment(keep_source=args.keep_c)
    if args.cc:
        toolchain.compiler = args.cc
    try:
        toolchain.compile_source(emitter.emit(instructions), args.output)
    except ToolchainError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
