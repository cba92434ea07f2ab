"""penhatch: raster images to layered pen-plotter hatching."""
from penhatch.types import (
    Point,
    PixelBlock,
    LineSegment,
    HatchConfig,
    HatchResult,
    HatchError,
    PaletteError,
    SamplingError,
    ConfigError,
    IngestError,
)
from penhatch.palette import Ink, InkBlend, Palette, blend_palette
from penhatch.pipeline import HatchPipeline

__version__ = "0.1.0"

__all__ = [
    "Point",
    "PixelBlock",
    "LineSegment",
    "HatchConfig",
    "HatchResult",
    "HatchError",
    "PaletteError",
    "SamplingError",
    "ConfigError",
    "IngestError",
    "Ink",
    "InkBlend",
    "Palette",
    "blend_palette",
    "HatchPipeline",
]
