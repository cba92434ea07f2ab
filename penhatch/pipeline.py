"""Hatching pipeline: image -> blocks -> inks, dilution and strokes -> layers."""
import logging
import os
import pickle
import time
from concurrent.futures import ProcessPoolExecutor
from pathlib import Path
from typing import List, Optional, Sequence, Tuple, Union

import numpy as np

from penhatch.brightness import estimate_dilution
from penhatch.fields import DirectionField, make_field
from penhatch.hatching import block_rng, hatch_block
from penhatch.layers import LayerSet
from penhatch.matcher import PenMatcher
from penhatch.palette import Ink, Palette, blend_palette
from penhatch.raster_ingest import ingest, ingest_from_array
from penhatch.sampler import iter_blocks, sample_block
from penhatch.svg_export import result_to_svg, save_svg
from penhatch.types import (
    HatchConfig,
    HatchError,
    HatchResult,
    ImageArray,
    LineSegment,
    PixelBlock,
)

logger = logging.getLogger(__name__)

GridBlock = Tuple[int, int, PixelBlock]


def hatch_grid_block(
    image: ImageArray,
    grid_block: GridBlock,
    matcher: PenMatcher,
    field: DirectionField,
    config: HatchConfig,
    seed: int
) -> List[LineSegment]:
    """Run sampling, matching, dilution and hatching for one grid cell."""
    gx, gy, block = grid_block

    target = sample_block(image, block)
    blend = matcher.match(target)
    dilution = estimate_dilution(target, blend.perceptual_color(), config.dilution_step)

    direction = field.direction(gx / config.blocks_x, gy / config.blocks_y)

    return hatch_block(
        block,
        blend,
        dilution,
        direction,
        block_rng(seed, gx, gy),
        config.min_spacing,
        config.max_spacing,
    )


def _hatch_chunk(args) -> List[List[LineSegment]]:
    """Worker entry point: hatch a run of grid blocks."""
    image, chunk, palette, field, config, seed = args
    matcher = PenMatcher(palette)
    return [
        hatch_grid_block(image, grid_block, matcher, field, config, seed)
        for grid_block in chunk
    ]


def _new_seed() -> int:
    return int(np.random.SeedSequence().generate_state(1)[0])


class HatchPipeline:
    """Converts a raster image into per-ink layers of hatch strokes."""

    def __init__(
        self,
        config: Optional[HatchConfig] = None,
        inks: Optional[Sequence[Ink]] = None,
        field: Optional[DirectionField] = None
    ):
        """
        Initialize pipeline.

        Args:
            config: Configuration (uses defaults if None)
            inks: Custom ink set; overrides ``config.palette``
            field: Custom direction field; overrides ``config.field``

        Raises:
            ConfigError: If the configuration is invalid
            PaletteError: If the palette name is unknown or ``inks`` is empty
        """
        self.config = config or HatchConfig()
        self.config.validate()

        if inks is not None:
            self.palette = Palette.blends_of(inks)
        else:
            self.palette = blend_palette(self.config.palette)

        self.field = field
        self.result: Optional[HatchResult] = None

    def render(self, image: ImageArray) -> HatchResult:
        """
        Hatch an already decoded and resized image.

        Args:
            image: sRGB array, (H, W), (H, W, 3) or (H, W, 4), uint8 or float
                in [0, 1]; transparency is composited on white

        Returns:
            HatchResult with the finalized layers and the seed used

        Raises:
            IngestError: If the array shape is not an image
            HatchError: If a parallel run gets a field that cannot be pickled
        """
        config = self.config
        image = ingest_from_array(image).image_srgb
        height, width = image.shape[:2]
        seed = config.seed if config.seed is not None else _new_seed()
        field = self.field or make_field(config.field, seed, config.angle)

        blocks = list(iter_blocks(width, height, config.blocks_x, config.blocks_y))
        logger.info(
            f"Hatching {width}x{height} image as {config.blocks_x}x{config.blocks_y} "
            f"blocks (seed {seed}, {len(self.palette)} blends)"
        )

        start_time = time.time()
        layers = LayerSet()

        if config.workers > 1 and len(blocks) > 1:
            for block_segments in self._render_parallel(image, blocks, field, seed):
                layers.extend(block_segments)
        else:
            matcher = PenMatcher(self.palette)
            step = max(1, len(blocks) // 10)
            for i, grid_block in enumerate(blocks, start=1):
                layers.extend(hatch_grid_block(image, grid_block, matcher, field, config, seed))
                if i % step == 0 or i == len(blocks):
                    logger.info(f"  {i}/{len(blocks)} blocks")

        result = HatchResult(layers=layers.finalize(), width=width, height=height, seed=seed)

        for ink, segments in result.layers.items():
            logger.debug(f"  Layer {ink.name}: {len(segments)} strokes")
        logger.info(
            f"Generated {result.segment_count} strokes in {len(result.layers)} layers "
            f"({time.time() - start_time:.1f}s)"
        )

        self.result = result
        return result

    def _render_parallel(
        self,
        image: ImageArray,
        blocks: List[GridBlock],
        field: DirectionField,
        seed: int
    ) -> List[List[LineSegment]]:
        """Per-block segment lists in raster order, computed in a process pool."""
        try:
            pickle.dumps(field)
        except (pickle.PicklingError, AttributeError, TypeError) as e:
            raise HatchError(
                f"Direction field {field!r} cannot be sent to worker processes; "
                f"use a module-level function or workers=1: {e}"
            ) from e

        workers = min(self.config.workers, os.cpu_count() or 1, len(blocks))
        n_chunks = min(len(blocks), workers * 4)
        bounds = np.linspace(0, len(blocks), n_chunks + 1).astype(int)
        chunks = [blocks[a:b] for a, b in zip(bounds[:-1], bounds[1:]) if b > a]

        logger.info(f"Hatching {len(blocks)} blocks using {workers} workers...")

        tasks = [(image, chunk, self.palette, field, self.config, seed) for chunk in chunks]
        with ProcessPoolExecutor(max_workers=workers) as executor:
            results = list(executor.map(_hatch_chunk, tasks))

        # map preserves task order, so the merge is in raster order
        return [segments for chunk_result in results for segments in chunk_result]

    def process(
        self,
        input_path: Union[str, Path],
        output_path: Optional[Union[str, Path]] = None
    ) -> str:
        """
        Process an image file into a layered SVG.

        Args:
            input_path: Path to input image
            output_path: Optional path for output SVG

        Returns:
            SVG string

        Raises:
            FileNotFoundError: If input file doesn't exist
            HatchError: If processing fails
        """
        config = self.config
        try:
            ingest_result = ingest(
                input_path,
                size=(config.scale_to_x, config.scale_to_y),
                brightness=config.brighten,
            )
            logger.info(
                f"Loaded {ingest_result.original_path} as {ingest_result.width}x{ingest_result.height}"
                + (" (transparency flattened on white)" if ingest_result.has_alpha else "")
            )
            result = self.render(ingest_result.image_srgb)
            svg = result_to_svg(result, config)

            if output_path:
                save_svg(svg, output_path)
                logger.info(f"Saved SVG to {output_path}")

            return svg

        except (FileNotFoundError, HatchError):
            raise
        except Exception as e:
            raise HatchError(f"Pipeline processing failed: {e}") from e
