#!/usr/bin/env python3
"""
Pixelsort -- Pixel Sorting Glitch Tool
CLI entry point. Also importable as a library (see core.pipeline).

Usage:
    python pixelsort.py photo.png
    python pixelsort.py photo.png --interval threshold --lower 60 --upper 200
    python pixelsort.py photo.png -i random -l 10 -u 80 --seed 7 -r 90
    python pixelsort.py photo.png -i split -n 4 -s maximum -o out.png
    python pixelsort.py photo.png -m mask.png
    python pixelsort.py --list-modes
"""

import sys
import os
import logging
import argparse

# Add project root to path so imports work
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from core.image_io import ImageIOError
from core.interval import IntervalError
from core.pipeline import run
from core.safety import SafetyError
from core.settings import SortSettings, SettingsError, IntervalMode, SortMode
from core.sorting import SortError
from effects import list_sort_keys, list_interval_functions

__version__ = "0.1.0"

INPUT_ERRORS = (SettingsError, IntervalError, SortError, ImageIOError,
                SafetyError, FileNotFoundError)


def _parse_number(val: str) -> float:
    """argparse type for lower/upper: any finite number."""
    try:
        f = float(val)
    except ValueError:
        raise argparse.ArgumentTypeError(f"not a number: {val}")
    if f != f or f in (float("inf"), float("-inf")):
        raise argparse.ArgumentTypeError(f"NaN/Inf not allowed: {val}")
    return f


def cmd_list_modes(args):
    """List interval functions and sort keys."""
    print(f"\n  Interval functions ({len(list_interval_functions())})")
    print(f"  {'-' * 50}")
    for e in list_interval_functions():
        params_str = ", ".join(e["params"]) or "none"
        print(f"    {e['name']:12s} -- {e['description']}")
        print(f"    {'':12s}    Params: {params_str}")
    print(f"\n  Sort keys ({len(list_sort_keys())})")
    print(f"  {'-' * 50}")
    for e in list_sort_keys():
        print(f"    {e['name']:12s} -- {e['description']}")
    print()


def cmd_sort(args):
    """Sort the input image and save it."""
    settings = SortSettings.build(
        interval=args.interval,
        sorting=args.sorting,
        lower=args.lower,
        upper=args.upper,
        rotation=args.rotation,
        num=args.num,
        seed=args.seed,
        keep_tail=args.keep_tail,
        mask_path=args.mask,
        output_path=args.output,
    )
    output = run(args.input, settings)
    print(f"Output: {output}")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="pixelsort",
        description="Pixelsort -- sort pixels inside row intervals of an image",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("input", nargs="?", help="The input image to sort")
    parser.add_argument(
        "-i", "--interval", choices=[m.value for m in IntervalMode], default="full",
        help="Interval function used to separate the image into intervals",
    )
    parser.add_argument("-o", "--output", help="A file path to save the output image to")
    parser.add_argument(
        "-m", "--mask",
        help="A gray image masking parts of the input. White pixels may be sorted, black may not",
    )
    parser.add_argument(
        "-u", "--upper", type=_parse_number,
        help="Upper bound: edge threshold (float), max random width (int), "
             "or lightness a pixel must fall below to be sorted (byte)",
    )
    parser.add_argument(
        "-l", "--lower", type=_parse_number,
        help="Lower bound: edge threshold (float), min random width (int), "
             "or lightness a pixel must reach to be sorted (byte)",
    )
    parser.add_argument(
        "-r", "--rotation", type=int, default=0,
        help="Rotation (multiple of 90) applied to image and mask before sorting. "
             "90 or 270 sorts columns instead of rows",
    )
    parser.add_argument("-n", "--num", type=int, help="Number of parts for --interval split")
    parser.add_argument(
        "-s", "--sorting", choices=[m.value for m in SortMode], default="lightness",
        help="Function used to order pixels",
    )
    parser.add_argument("--seed", type=int, help="Seed for --interval random")
    parser.add_argument(
        "--keep-tail", action="store_true",
        help="Keep a white mask run that reaches the row end without a closing black pixel",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    parser.add_argument("--list-modes", action="store_true",
                        help="List interval functions and sort keys")
    return parser


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if args.list_modes:
        cmd_list_modes(args)
        return
    if not args.input:
        parser.error("the following arguments are required: input")

    try:
        cmd_sort(args)
    except INPUT_ERRORS as e:
        logging.getLogger("pixelsort").debug("Run failed", exc_info=True)
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
