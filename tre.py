#!/usr/bin/env python3
"""
Unified CLI for the Text Region Enhancer.

Usage:
    tre enhance <image> -o DIR       # Detect text regions, write enhanced images
    tre enhance <image> -o DIR --no-detection
                                     # Only enhance the whole image
    tre preprocess <image> -o FILE   # Run the global preprocessing pipeline
    tre preprocess <image> -o FILE --auto
                                     # Pick steps from image statistics
    tre analyze <image>              # Show statistics and suggested steps
"""

import argparse
import logging
import sys

from logging_utils import configure_logging, add_logging_args
from cli.enhance import add_enhance_subparser
from cli.preprocess import add_preprocess_subparser, add_analyze_subparser

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="tre",
        description="Text Region Enhancer - prepare images for text recognition",
    )
    add_logging_args(parser)
    subparsers = parser.add_subparsers(dest="command", help="Command to run")

    add_enhance_subparser(subparsers)
    add_preprocess_subparser(subparsers)
    add_analyze_subparser(subparsers)

    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(args.log_level, args.verbose, args.quiet)

    cmd = getattr(args, "_cmd", None)
    if cmd is None:
        parser.print_help()
        return 1
    return cmd(args)


if __name__ == "__main__":
    sys.exit(main())
