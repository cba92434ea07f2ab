"""Command-line interface for penhatch."""

import argparse
import logging
import sys
from pathlib import Path
from typing import Optional

from .config import load_env_config
from .fields import FIELD_NAMES
from .palette import INK_SETS, load_ink_file
from .pipeline import HatchPipeline
from .types import HatchError

# CLI flag -> HatchConfig attribute; flags left unset keep the env/default value
_OVERRIDES = {
    "blocks_x": "blocks_x",
    "blocks_y": "blocks_y",
    "scale_x": "scale_to_x",
    "scale_y": "scale_to_y",
    "min_spacing": "min_spacing",
    "max_spacing": "max_spacing",
    "brighten": "brighten",
    "seed": "seed",
    "field": "field",
    "angle": "angle",
    "palette": "palette",
    "svg_width": "svg_width",
    "svg_height": "svg_height",
    "stroke_width": "stroke_width",
    "workers": "workers",
}


def create_parser() -> argparse.ArgumentParser:
    """Create argument parser for CLI."""
    parser = argparse.ArgumentParser(
        prog="penhatch",
        description="Convert a raster image into layered pen-plotter hatching",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Settings come from (lowest to highest priority): defaults, a .env file,
environment variables (PIXELS_X, PIXELS_Y, INPUT_SCALE_TO_X, INPUT_SCALE_TO_Y,
LINE_MIN_SPACING, LINE_MAX_SPACING, BRIGHTEN, RANDOM_SEED, SVG_WIDTH,
SVG_HEIGHT) and finally the flags below.

Examples:
  penhatch photo.jpg photo.svg
  penhatch photo.jpg photo.svg --blocks-x 60 --blocks-y 80 --seed 1234
  penhatch photo.jpg photo.svg --palette black --field swirl --workers 4
        """,
    )

    parser.add_argument("input", help="Input image file path")
    parser.add_argument(
        "output",
        nargs="?",
        default=None,
        help="Output SVG file path (default: input name with .svg extension)",
    )

    parser.add_argument("--env-file", default=None, help="Read settings from this .env file")

    grid = parser.add_argument_group("grid")
    grid.add_argument("--blocks-x", type=int, default=None, help="Blocks across (PIXELS_X)")
    grid.add_argument("--blocks-y", type=int, default=None, help="Blocks down (PIXELS_Y)")
    grid.add_argument("--scale-x", type=int, default=None,
                      help="Resize input to this width before sampling (INPUT_SCALE_TO_X)")
    grid.add_argument("--scale-y", type=int, default=None,
                      help="Resize input to this height before sampling (INPUT_SCALE_TO_Y)")
    grid.add_argument("--brighten", type=int, default=None,
                      help="Add this to every color channel (BRIGHTEN)")

    hatching = parser.add_argument_group("hatching")
    hatching.add_argument("--min-spacing", type=float, default=None,
                          help="Line spacing for fully inked blocks (LINE_MIN_SPACING)")
    hatching.add_argument("--max-spacing", type=float, default=None,
                          help="Line spacing for nearly blank blocks (LINE_MAX_SPACING)")
    hatching.add_argument("--field", choices=FIELD_NAMES, default=None,
                          help="Direction field (default: noise)")
    hatching.add_argument("--angle", type=float, default=None,
                          help="Stroke angle in degrees for --field constant")
    hatching.add_argument("--palette", choices=sorted(INK_SETS), default=None,
                          help="Built-in ink set (default: gel)")
    hatching.add_argument("--inks", default=None,
                          help="JSON file with a custom ink set (overrides --palette)")
    hatching.add_argument("--seed", type=int, default=None, help="Random seed (RANDOM_SEED)")

    output = parser.add_argument_group("output")
    output.add_argument("--svg-width", default=None, help="SVG width, e.g. 200mm (SVG_WIDTH)")
    output.add_argument("--svg-height", default=None, help="SVG height, e.g. 200mm (SVG_HEIGHT)")
    output.add_argument("--stroke-width", default=None, help="Stroke width (default: 0.7mm)")

    parser.add_argument("--workers", type=int, default=None,
                        help="Worker processes (default: 1, sequential)")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")

    return parser


def main(args: Optional[list] = None) -> int:
    """Main entry point for CLI.

    Args:
        args: Command-line arguments (defaults to sys.argv[1:])

    Returns:
        Exit code (0 for success, 1 for error)
    """
    parser = create_parser()
    parsed = parser.parse_args(args)

    logging.basicConfig(
        level=logging.DEBUG if parsed.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )

    input_path = Path(parsed.input)
    output_path = Path(parsed.output) if parsed.output else input_path.with_suffix(".svg")

    try:
        config = load_env_config(parsed.env_file)
        for flag, attr in _OVERRIDES.items():
            value = getattr(parsed, flag)
            if value is not None:
                setattr(config, attr, value)

        inks = load_ink_file(parsed.inks) if parsed.inks else None

        output_path.parent.mkdir(parents=True, exist_ok=True)

        print(f"Processing: {input_path}")
        print(f"  Grid: {config.blocks_x}x{config.blocks_y} blocks")
        print(f"  Spacing: {config.min_spacing}-{config.max_spacing}")

        pipeline = HatchPipeline(config, inks=inks)
        pipeline.process(input_path, output_path)

        print(f"Saved SVG to {output_path}.")
        print(f"Random seed: {pipeline.result.seed}")
        return 0

    except FileNotFoundError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except HatchError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
