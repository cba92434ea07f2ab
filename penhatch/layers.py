"""Group strokes into one layer per ink."""
from typing import Dict, Iterable, List

from penhatch.palette import Ink
from penhatch.types import LineSegment


class LayerSet:
    """Accumulates segments by ink, dropping the blank-canvas ink.

    Layers appear in first-seen order, so feeding blocks in raster order
    gives the same mapping every run.
    """

    def __init__(self):
        self._layers: Dict[Ink, List[LineSegment]] = {}

    def add(self, segment: LineSegment) -> None:
        if segment.ink.blank:
            return
        self._layers.setdefault(segment.ink, []).append(segment)

    def extend(self, segments: Iterable[LineSegment]) -> None:
        for segment in segments:
            self.add(segment)

    def finalize(self) -> Dict[Ink, List[LineSegment]]:
        """The ink -> segments mapping; later adds do not affect it."""
        return {ink: list(segments) for ink, segments in self._layers.items()}

    def __len__(self) -> int:
        return len(self._layers)


def aggregate_layers(segments: Iterable[LineSegment]) -> Dict[Ink, List[LineSegment]]:
    layers = LayerSet()
    layers.extend(segments)
    return layers.finalize()
