"""imgchain CLI batch processor.

Runs a processor pipeline over image files and writes the results as PNG.
"""

import argparse
import json
import logging
import math
import os
import sys
import time
from typing import Any, Dict, List, Optional

from imgchain.domain.interfaces import IProcessor, ProcessOptions
from imgchain.domain.types import DataItem
from imgchain.features.processing.registry import build_pipeline
from imgchain.kernel.caching.logic import calculate_config_hash
from imgchain.kernel.image.validation import validate_size
from imgchain.kernel.system.config import APP_CONFIG, DEFAULT_PROCESS_OPTIONS
from imgchain.kernel.system.logging import get_logger, setup_logging

logger = get_logger("cli")

SUPPORTED_EXTENSIONS = (
    ".png",
    ".jpg",
    ".jpeg",
    ".gif",
    ".bmp",
    ".tif",
    ".tiff",
    ".webp",
)


def parse_size_arg(value: str) -> List[float]:
    """argparse type for WxH values."""
    size = validate_size(value)
    if size is None or size.is_empty or not math.isfinite(size.width + size.height):
        raise argparse.ArgumentTypeError(f"Expected WIDTHxHEIGHT, got '{value}'")
    return [size.width, size.height]


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="imgchain",
        description="imgchain -- batch image processing pipeline",
        epilog="Example: imgchain --resize 128x128 --radius 12 --output ./out ./images/",
    )

    parser.add_argument(
        "inputs",
        nargs="*",
        metavar="FILE_OR_DIR",
        help="Input image files or directories",
    )

    parser.add_argument(
        "--radius",
        type=float,
        default=None,
        metavar="FLOAT",
        help="Round corners with this radius in points",
    )

    parser.add_argument(
        "--size",
        type=parse_size_arg,
        default=None,
        metavar="WxH",
        help="Target size for the rounded-corner step (default: image size)",
    )

    parser.add_argument(
        "--resize",
        type=parse_size_arg,
        default=None,
        metavar="WxH",
        help="Resize to WxH points before any corner rounding",
    )

    parser.add_argument(
        "--scale",
        type=float,
        default=None,
        metavar="FLOAT",
        help=f"Output scale factor (default: {APP_CONFIG.scale_factor:g})",
    )

    parser.add_argument(
        "--preload-frames",
        action="store_true",
        default=False,
        help="Decode every frame of animated inputs up front",
    )

    parser.add_argument(
        "--pipeline",
        default=None,
        metavar="JSON_FILE",
        help="Load the processor pipeline (and options) from a JSON file",
    )

    parser.add_argument(
        "--output",
        default=APP_CONFIG.output_dir,
        metavar="DIR",
        help="Output directory (default: $IMGCHAIN_OUTPUT_DIR or ./processed)",
    )

    parser.add_argument(
        "--verbose",
        action="store_true",
        default=False,
        help="Enable debug logging",
    )

    return parser


def discover_files(inputs: List[str]) -> List[str]:
    """Resolves input paths to a sorted list of supported image files."""
    files = []
    for input_path in inputs:
        path = os.path.abspath(input_path)
        if os.path.isfile(path):
            ext = os.path.splitext(path)[1].lower()
            if ext in SUPPORTED_EXTENSIONS:
                files.append(path)
            else:
                print(f"Warning: Skipping unsupported file: {path}", file=sys.stderr)
        elif os.path.isdir(path):
            for root, _dirs, filenames in os.walk(path):
                for fname in sorted(filenames):
                    if os.path.splitext(fname)[1].lower() in SUPPORTED_EXTENSIONS:
                        files.append(os.path.join(root, fname))
        else:
            print(f"Warning: Path not found: {path}", file=sys.stderr)
    return files


def load_pipeline_settings(path: Optional[str]) -> Dict[str, Any]:
    """
    Reads a pipeline file. Accepts either a bare list of processor specs or
    {"pipeline": [...], "options": {...}}.
    """
    if not path:
        return {"pipeline": [], "options": {}}
    with open(os.path.abspath(path), "r") as f:
        data = json.load(f)
    if isinstance(data, list):
        return {"pipeline": data, "options": {}}
    return {
        "pipeline": data.get("pipeline", []),
        "options": data.get("options", {}),
    }


def build_processor(args: argparse.Namespace, settings: Dict[str, Any]) -> IProcessor:
    """Builds the pipeline: JSON steps first, then --resize, then --radius."""
    specs = list(settings.get("pipeline", []))
    if args.resize is not None:
        specs.append({"type": "resize", "target_size": args.resize})
    if args.radius is not None:
        specs.append(
            {"type": "round_corner", "corner_radius": args.radius, "target_size": args.size}
        )
    return build_pipeline(specs)


def build_options(args: argparse.Namespace, settings: Dict[str, Any]) -> ProcessOptions:
    """Builds ProcessOptions with priority DEFAULT -> JSON options -> CLI flags."""
    options = ProcessOptions.from_dict(settings.get("options", {}), DEFAULT_PROCESS_OPTIONS)
    overrides: Dict[str, Any] = {}
    if args.scale is not None:
        overrides["scale_factor"] = args.scale
    if args.preload_frames:
        overrides["preload_all_frames"] = True
    if overrides:
        options = ProcessOptions.from_dict(overrides, options)
    return options


def main(argv: Optional[List[str]] = None) -> int:
    """CLI entry point. Returns 0 on success, 1 on failure."""
    parser = build_parser()
    args = parser.parse_args(argv)

    setup_logging(logging.DEBUG if args.verbose else None, stream=sys.stderr)

    files = discover_files(args.inputs)
    if not files:
        print("Error: No supported image files found.", file=sys.stderr)
        return 1

    try:
        settings = load_pipeline_settings(args.pipeline)
        processor = build_processor(args, settings)
        options = build_options(args, settings)
    except (json.JSONDecodeError, FileNotFoundError, KeyError, TypeError, ValueError) as e:
        print(f"Error loading pipeline: {e}", file=sys.stderr)
        return 1

    output_dir = os.path.abspath(args.output)
    os.makedirs(output_dir, exist_ok=True)
    suffix = calculate_config_hash(processor)[:8]
    logger.debug(f"Pipeline '{processor.identifier}' with {options}")

    total = len(files)
    failed = 0
    print(f"Processing {total} file(s) -> {output_dir}", file=sys.stderr)
    t_start = time.monotonic()

    for i, file_path in enumerate(files, 1):
        name = os.path.splitext(os.path.basename(file_path))[0]
        print(f"  [{i}/{total}] {name} ...", file=sys.stderr, end="", flush=True)
        t_file = time.monotonic()

        try:
            with open(file_path, "rb") as f:
                data = f.read()

            bitmap = processor.process(DataItem(data), options)
            if bitmap is None:
                print(" FAILED (could not process image)", file=sys.stderr)
                failed += 1
                continue

            out_path = os.path.join(output_dir, f"{name}_{suffix}.png")
            bitmap.image.save(out_path, format=APP_CONFIG.output_format)

            elapsed = time.monotonic() - t_file
            print(f" OK ({elapsed:.1f}s)", file=sys.stderr)
        except OSError as e:
            print(f" ERROR: {e}", file=sys.stderr)
            failed += 1

    total_time = time.monotonic() - t_start
    succeeded = total - failed
    print(f"Done: {succeeded}/{total} succeeded in {total_time:.1f}s", file=sys.stderr)

    return 1 if failed > 0 else 0


def cli_entry() -> None:
    """Console script entry point."""
    sys.exit(main())


if __name__ == "__main__":
    sys.exit(main())
