"""
cli.py
------

Command line front end: `stp2stl <input> <output> [options]`.

Exits 0 on success, 2 on a usage error and otherwise with the
status returned by `stp2stl.convert`.
"""

import argparse
import logging
import math
import os
import sys
from typing import List, Optional

from .options import default_options
from .pipeline import convert, last_error, version


def _positive_float(text: str) -> float:
    try:
        value = float(text)
    except ValueError:
        raise argparse.ArgumentTypeError(
            f"expects a positive number, got {text!r}"
        ) from None
    if not (math.isfinite(value) and value > 0.0):
        raise argparse.ArgumentTypeError(f"expects a positive number, got {text!r}")
    return value


def build_parser() -> argparse.ArgumentParser:
    defaults = default_options()
    parser = argparse.ArgumentParser(
        prog="stp2stl",
        description="Convert a STEP solid model to an STL mesh.",
    )
    parser.add_argument("input", help="STEP file to read")
    parser.add_argument("output", help="STL file to write")
    parser.add_argument(
        "--deflection",
        dest="linear_deflection",
        type=_positive_float,
        metavar="V",
        help=f"linear deflection (default: {defaults.linear_deflection:g})",
    )
    parser.add_argument(
        "--angle",
        dest="angular_deflection",
        type=_positive_float,
        metavar="DEG",
        help=f"angular deflection in degrees (default: {defaults.angular_deflection:g})",
    )
    parser.add_argument(
        "--relative",
        dest="relative_deflection",
        action="store_const",
        const=True,
        help="deflection relative to each entity's size (default)",
    )
    parser.add_argument(
        "--absolute",
        dest="relative_deflection",
        action="store_const",
        const=False,
        help="deflection as an absolute distance",
    )
    parser.add_argument(
        "--binary",
        dest="binary_output",
        action="store_const",
        const=True,
        help="write binary STL (default)",
    )
    parser.add_argument(
        "--ascii",
        dest="binary_output",
        action="store_const",
        const=False,
        help="write ASCII STL",
    )
    parser.add_argument(
        "--scale",
        type=_positive_float,
        metavar="V",
        help=f"uniform scale factor (default: {defaults.scale:g})",
    )
    parser.add_argument(
        "--parallel",
        action="store_const",
        const=True,
        help="mesh on several threads (default: off)",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="log conversion steps"
    )
    parser.add_argument("--version", action="version", version=version())
    return parser


def _to_utf8(parser: argparse.ArgumentParser, arg: str) -> bytes:
    """Turn a command line argument back into the bytes the user passed."""
    if os.name == "nt":
        try:
            return arg.encode("utf-8")
        except UnicodeEncodeError:
            parser.error("Invalid path encoding (UTF-16 -> UTF-8 conversion failed)")
    # undecodable bytes round-trip through surrogateescape and
    # are rejected by convert itself
    return os.fsencode(arg)


def parse_args(
    parser: argparse.ArgumentParser, argv: List[str]
) -> argparse.Namespace:
    """
    Parse `<input> <output> [options]`.

    The first two arguments are always the paths, even when they
    start with a dash.
    """
    if len(argv) < 2:
        return parser.parse_args(argv)
    return parser.parse_args(argv[2:] + ["--"] + argv[:2])


def main(argv: Optional[List[str]] = None) -> int:
    argv = sys.argv[1:] if argv is None else list(argv)
    parser = build_parser()

    # help and version win over anything else on the line
    for arg in argv:
        if arg in ("-h", "--help"):
            parser.print_help()
            return 0
        if arg == "--version":
            print(version())
            return 0

    args = parse_args(parser, argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    fields = (
        "linear_deflection",
        "angular_deflection",
        "relative_deflection",
        "binary_output",
        "scale",
        "parallel",
    )
    options = default_options().with_overrides(
        **{k: getattr(args, k) for k in fields if getattr(args, k) is not None}
    )

    status = convert(
        _to_utf8(parser, args.input), _to_utf8(parser, args.output), options
    )
    if status != 0:
        print(f"Conversion failed ({int(status)}): {last_error()}", file=sys.stderr)
    return int(status)


if __name__ == "__main__":
    sys.exit(main())
