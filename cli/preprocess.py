"""Preprocess and analyze command CLI parsing and control flow."""

from __future__ import annotations

import argparse
import json
import logging
import sys

from preprocessing import (
    ImagePipelineError,
    PreprocessingOptions,
    analyze_image,
    image_statistics,
    load_image,
    preprocess_image,
    save_image,
)

logger = logging.getLogger(__name__)

STEP_FLAGS = (
    "enhance_contrast",
    "remove_noise",
    "binarize",
    "scale_up",
    "sharpen",
    "remove_background",
)


def add_preprocess_subparser(subparsers: argparse._SubParsersAction) -> None:
    preprocess_parser = subparsers.add_parser(
        "preprocess",
        help="Run the global preprocessing pipeline on an image",
    )
    preprocess_parser.add_argument("image", help="Input image file")
    preprocess_parser.add_argument(
        "-o", "--out",
        required=True,
        help="Output PNG path",
    )
    preprocess_parser.add_argument(
        "--auto",
        action="store_true",
        help="Choose steps from image statistics instead of the defaults",
    )
    preprocess_parser.add_argument(
        "--artifacts",
        metavar="DIR",
        help="Save the original and every intermediate step as PNG in DIR",
    )
    preprocess_parser.add_argument(
        "--deskew",
        action="store_true",
        help="Enable the deskew step (currently leaves the image unchanged)",
    )
    for flag in STEP_FLAGS:
        preprocess_parser.add_argument(
            f"--no-{flag.replace('_', '-')}",
            dest=f"no_{flag}",
            action="store_true",
            help=f"Disable the {flag} step",
        )
    preprocess_parser.set_defaults(_cmd=cmd_preprocess)


def add_analyze_subparser(subparsers: argparse._SubParsersAction) -> None:
    analyze_parser = subparsers.add_parser(
        "analyze",
        help="Show image statistics and the preprocessing steps they suggest",
    )
    analyze_parser.add_argument("image", help="Input image file")
    analyze_parser.add_argument(
        "--json",
        action="store_true",
        help="Print statistics and options as JSON",
    )
    analyze_parser.set_defaults(_cmd=cmd_analyze)


def options_from_args(args: argparse.Namespace) -> PreprocessingOptions:
    flags = {flag: not getattr(args, f"no_{flag}") for flag in STEP_FLAGS}
    return PreprocessingOptions(deskew=args.deskew, **flags)


def cmd_preprocess(args: argparse.Namespace) -> int:
    options = "auto" if args.auto else options_from_args(args)
    try:
        buffer = load_image(args.image)
        result = preprocess_image(buffer, options, artifact_dir=args.artifacts)
    except FileNotFoundError as e:
        logger.error("%s", e)
        return 1
    except ImagePipelineError as e:
        logger.error("Preprocessing failed: %s", e)
        return 1

    path = save_image(result.processed, args.out)
    logger.info("Steps: %s", ", ".join(result.options.enabled_steps()) or "(none)")
    if "threshold" in result.metadata:
        logger.info("Binarization threshold: %d", result.metadata["threshold"])
    logger.info("Wrote %s", path)
    return 0


def cmd_analyze(args: argparse.Namespace) -> int:
    try:
        buffer = load_image(args.image)
    except FileNotFoundError as e:
        logger.error("%s", e)
        return 1
    except ImagePipelineError as e:
        logger.error("Cannot analyze image: %s", e)
        return 1

    stats = image_statistics(buffer)
    options = analyze_image(buffer)

    if args.json:
        payload = {
            "statistics": stats.to_dict(),
            "steps": options.enabled_steps(),
        }
        sys.stdout.write(json.dumps(payload, indent=2) + "\n")
        return 0

    logger.info("Size: %dx%d", stats.width, stats.height)
    logger.info("Average brightness: %.1f", stats.avg_brightness)
    logger.info("Average contrast: %.1f", stats.avg_contrast)
    logger.info("Edge ratio: %.3f", stats.edge_ratio)
    logger.info("Suggested steps: %s", ", ".join(options.enabled_steps()))
    return 0
