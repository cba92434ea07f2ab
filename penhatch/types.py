"""Core types for the hatching pipeline."""
from dataclasses import dataclass, field
from typing import Dict, List, Optional, TYPE_CHECKING

import numpy as np

if TYPE_CHECKING:
    from penhatch.palette import Ink

# Type aliases
ImageArray = np.ndarray
PerceptualColor = np.ndarray  # (L*, a*, b*)
Vector = np.ndarray  # (x, y)


@dataclass(frozen=True)
class Point:
    """2D point with float coordinates."""
    x: float
    y: float


@dataclass(frozen=True)
class PixelBlock:
    """Rectangular region of the source image, in source pixels."""
    x: int
    y: int
    width: int
    height: int

    @property
    def area(self) -> int:
        return self.width * self.height


@dataclass(frozen=True)
class LineSegment:
    """A single hatch stroke in global image coordinates."""
    start: Point
    end: Point
    ink: "Ink"


@dataclass
class HatchConfig:
    """Configuration for the hatching pipeline."""
    # Grid
    blocks_x: int = 40
    blocks_y: int = 40

    # Sampling resolution the input is resized to
    scale_to_x: int = 800
    scale_to_y: int = 800
    brighten: int = 0

    # Hatching
    min_spacing: float = 1.0
    max_spacing: float = 5.0
    dilution_step: float = 0.005
    field: str = "noise"
    angle: float = 0.0  # degrees, constant field only
    palette: str = "gel"

    # Reproducibility
    seed: Optional[int] = None

    # Output
    svg_width: str = "100%"
    svg_height: str = "100%"
    stroke_width: str = "0.7mm"

    # Performance
    workers: int = 1

    def validate(self) -> None:
        """Check value ranges.

        Raises:
            ConfigError: If any setting is out of range
        """
        if self.blocks_x < 1 or self.blocks_y < 1:
            raise ConfigError(
                f"Grid must have at least one block per axis, got {self.blocks_x}x{self.blocks_y}"
            )
        if self.scale_to_x < self.blocks_x or self.scale_to_y < self.blocks_y:
            raise ConfigError(
                f"Sampling size {self.scale_to_x}x{self.scale_to_y} is smaller than "
                f"the block grid {self.blocks_x}x{self.blocks_y}"
            )
        if self.min_spacing <= 0:
            raise ConfigError(f"min_spacing must be > 0, got {self.min_spacing}")
        if self.max_spacing < self.min_spacing:
            raise ConfigError(
                f"max_spacing ({self.max_spacing}) must be >= min_spacing ({self.min_spacing})"
            )
        if not 0 < self.dilution_step < 1:
            raise ConfigError(f"dilution_step must be in (0, 1), got {self.dilution_step}")
        if self.seed is not None and self.seed < 0:
            raise ConfigError(f"seed must be >= 0, got {self.seed}")
        if self.workers < 1:
            raise ConfigError(f"workers must be >= 1, got {self.workers}")


@dataclass
class IngestResult:
    """Result from raster image ingestion."""
    image_srgb: np.ndarray  # (H, W, 3) uint8
    original_path: str
    width: int
    height: int
    has_alpha: bool


@dataclass
class HatchResult:
    """Finished drawing: one layer of segments per visible ink."""
    layers: Dict["Ink", List[LineSegment]] = field(default_factory=dict)
    width: int = 0
    height: int = 0
    seed: int = 0

    @property
    def segment_count(self) -> int:
        return sum(len(segments) for segments in self.layers.values())


class HatchError(Exception):
    """Base exception for hatching errors."""
    pass


class PaletteError(HatchError):
    """Raised for empty candidate sets or malformed ink definitions."""
    pass


class SamplingError(HatchError):
    """Raised when a pixel block cannot be sampled."""
    pass


class ConfigError(HatchError):
    """Raised for invalid or unparsable configuration."""
    pass


class IngestError(HatchError):
    """Raised when an input image cannot be loaded."""
    pass
