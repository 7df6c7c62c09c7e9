"""Enhance command CLI parsing and control flow."""

from __future__ import annotations

import argparse
import json
import logging
from pathlib import Path

from detection import SmartOCROptions, TextRegionPipeline
from preprocessing import ImagePipelineError, load_image, save_image

logger = logging.getLogger(__name__)


def add_enhance_subparser(subparsers: argparse._SubParsersAction) -> None:
    enhance_parser = subparsers.add_parser(
        "enhance",
        help="Detect text regions and write one enhanced image per region",
    )
    enhance_parser.add_argument(
        "image",
        help="Input image file",
    )
    enhance_parser.add_argument(
        "-o", "--out",
        required=True,
        help="Output directory for region_<i>.png, global.png and regions.json",
    )
    enhance_parser.add_argument(
        "--no-detection",
        action="store_true",
        help="Skip region detection and only enhance the whole image",
    )
    enhance_parser.add_argument(
        "--no-fallback",
        action="store_true",
        help="Do not enhance the whole image when regions were found",
    )
    enhance_parser.add_argument(
        "--no-region-enhance",
        action="store_true",
        help="Detect regions but do not write per-region images",
    )
    enhance_parser.set_defaults(_cmd=cmd_enhance)


def cmd_enhance(args: argparse.Namespace) -> int:
    options = SmartOCROptions(
        use_text_detection=not args.no_detection,
        enhance_text_regions=not args.no_region_enhance,
        fallback_to_original=not args.no_fallback,
    )

    try:
        buffer = load_image(args.image)
        result = TextRegionPipeline(options).run(buffer)
    except FileNotFoundError as e:
        logger.error("%s", e)
        return 1
    except ImagePipelineError as e:
        logger.error("Enhancement failed: %s", e)
        return 1

    out_dir = Path(args.out)
    out_dir.mkdir(parents=True, exist_ok=True)

    for index, region in enumerate(result.regions):
        logger.info(
            "Region %d: x=%d y=%d w=%d h=%d confidence=%.2f (%s)",
            index, region.x, region.y, region.width, region.height,
            region.confidence, ",".join(region.sources),
        )

    for processed in result.processed_images:
        name = "global.png" if processed.is_global else f"region_{processed.source}.png"
        path = save_image(processed.image, out_dir / name)
        logger.info("Wrote %s", path)

    (out_dir / "regions.json").write_text(
        json.dumps([region.to_dict() for region in result.regions], indent=2)
    )

    if result.no_text_detected and options.use_text_detection:
        logger.warning("No text detected in %s", args.image)
    return 0
