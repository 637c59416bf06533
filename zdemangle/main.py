import argparse
import logging
import sys
from pathlib import Path
from typing import Iterator, List, TextIO

from .decode import parse
from .error import MalformedInputError
from .options import Options
from .render import render


def set_up_logging(debug: bool) -> None:
    logging.basicConfig(
        format="[%(levelname)s] %(message)s",
        level=logging.DEBUG if debug else logging.INFO,
    )


def read_symbols(f: TextIO) -> Iterator[str]:
    for line in f:
        line = line.strip()
        if line:
            yield line


def iter_symbols(options: Options) -> Iterator[str]:
    for symbol in options.symbols:
        if symbol == "-":
            yield from read_symbols(sys.stdin)
        else:
            yield symbol
    for filename in options.filenames:
        with open(filename, "r", encoding="utf-8-sig") as f:
            yield from read_symbols(f)


def run(options: Options) -> int:
    return_code = 0
    for mangled in iter_symbols(options):
        try:
            text = render(parse(mangled))
        except MalformedInputError as e:
            logging.error(f"Unable to demangle {mangled}: {e}")
            print(options.format_failure(mangled, e.message))
            return_code = 1
            if options.stop_on_error:
                break
            continue
        print(options.format_result(mangled, text))
    return return_code


def parse_flags(flags: List[str]) -> Options:
    parser = argparse.ArgumentParser(
        description="Demangle _Z-prefixed C++ symbol names.",
        usage="%(prog)s [--file FILE ...] [symbol ...]",
    )

    group = parser.add_argument_group("Input Options")
    group.add_argument(
        "symbol",
        nargs="*",
        help="Mangled symbol. Use - to read symbols from stdin, one per line. "
        "It's a good idea to quote symbols so the shell doesn't eat special characters.",
    )
    group.add_argument(
        "--file",
        metavar="FILE",
        dest="filenames",
        action="append",
        type=Path,
        default=[],
        help="Read symbols from a file, one per line. Can be specified multiple times.",
    )

    group = parser.add_argument_group("Output Options")
    group.add_argument(
        "--keep-mangled",
        dest="keep_mangled",
        action="store_true",
        help="Print symbols which fail to demangle as-is, instead of as a comment.",
    )
    group.add_argument(
        "--show-mangled",
        dest="show_mangled",
        action="store_true",
        help="Print each mangled symbol on the line before its demangled form.",
    )
    group.add_argument(
        "--debug",
        dest="debug",
        action="store_true",
        help="Print debug info, including every substitution table entry.",
    )
    group.add_argument(
        "--stop-on-error",
        dest="stop_on_error",
        action="store_true",
        help="Stop at the first symbol which fails to demangle.",
    )

    args = parser.parse_args(flags)
    if not args.symbol and not args.filenames:
        parser.error("no symbols given")

    return Options(
        symbols=args.symbol,
        filenames=args.filenames,
        debug=args.debug,
        stop_on_error=args.stop_on_error,
        keep_mangled=args.keep_mangled,
        show_mangled=args.show_mangled,
    )


def main() -> None:
    options = parse_flags(sys.argv[1:])
    set_up_logging(options.debug)
    sys.exit(run(options))


if __name__ == "__main__":
    main()
