"""SVG export: one Inkscape layer per ink."""
from functools import partial
from pathlib import Path
from typing import Dict, List, Tuple, Union
from xml.sax.saxutils import quoteattr

from penhatch.palette import Ink
from penhatch.types import HatchConfig, HatchResult, LineSegment


def format_color(rgb: Tuple[int, int, int]) -> str:
    """Format an 8-bit RGB triple as an SVG ``rgb()`` color."""
    r, g, b = rgb
    return f"rgb({r},{g},{b})"


def format_number(x: float, precision: int) -> str:
    """
    Format number with given precision.

    Args:
        x: Number to format
        precision: Decimal places

    Returns:
        Formatted string
    """
    formatted = f"{x:.{precision}f}"
    # Remove trailing zeros and decimal point if not needed
    if '.' in formatted:
        formatted = formatted.rstrip('0').rstrip('.')
    if formatted == "-0":
        formatted = "0"
    return formatted


def segment_to_svg(segment: LineSegment, precision: int = 3) -> str:
    """Convert a segment to an SVG line element."""
    fmt = partial(format_number, precision=precision)
    return (
        f'<line x1="{fmt(segment.start.x)}" y1="{fmt(segment.start.y)}" '
        f'x2="{fmt(segment.end.x)}" y2="{fmt(segment.end.y)}"/>'
    )


def layer_to_svg(ink: Ink, segments: List[LineSegment], precision: int = 3) -> str:
    """Wrap one ink's segments in an Inkscape layer group."""
    lines = '\n    '.join(segment_to_svg(s, precision) for s in segments)
    return (
        f'<g stroke="{format_color(ink.display_color())}" '
        f'inkscape:groupmode="layer" inkscape:label={quoteattr(ink.name)}>\n'
        f'    {lines}\n'
        f'  </g>'
    )


def generate_svg(
    layers: Dict[Ink, List[LineSegment]],
    width: int,
    height: int,
    svg_width: str = "100%",
    svg_height: str = "100%",
    stroke_width: str = "0.7mm",
    precision: int = 3
) -> str:
    """
    Generate a layered SVG document.

    Args:
        layers: Ink -> segments; empty layers are skipped
        width: View box width in image pixels
        height: View box height in image pixels
        svg_width: Physical width written to the root element
        svg_height: Physical height written to the root element
        stroke_width: Stroke width for all lines
        precision: Decimal places for coordinates

    Returns:
        Complete SVG string
    """
    groups = [
        layer_to_svg(ink, segments, precision)
        for ink, segments in layers.items()
        if segments
    ]
    content = '\n  '.join(
        ['<rect width="100%" height="100%" fill="white"/>'] + groups
    )

    svg = f'''<?xml version="1.0" encoding="UTF-8"?>
<svg xmlns="http://www.w3.org/2000/svg" xmlns:inkscape="http://www.inkscape.org/namespaces/inkscape" viewBox="0 0 {width} {height}" width={quoteattr(svg_width)} height={quoteattr(svg_height)} stroke-width={quoteattr(stroke_width)} fill="none">
  {content}
</svg>'''

    return svg


def result_to_svg(result: HatchResult, config: HatchConfig) -> str:
    """Serialize a finished drawing with the output settings from ``config``."""
    return generate_svg(
        result.layers,
        result.width,
        result.height,
        svg_width=config.svg_width,
        svg_height=config.svg_height,
        stroke_width=config.stroke_width,
    )


def save_svg(
    svg_string: str,
    output_path: Union[str, Path]
) -> None:
    """
    Save SVG string to file.

    Args:
        svg_string: SVG content
        output_path: Output file path
    """
    with open(output_path, 'w', encoding='utf-8') as f:
        f.write(svg_string)
