"""Ordered store of finalized speech segments."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from .timestamps import Timestamp

if TYPE_CHECKING:
    from src.voxgate.streaming.segmenter import HysteresisSegmenter

logger = logging.getLogger(__name__)


class SegmentAccumulator:
    """Collects segments emitted by a segmenter in arrival order.

    Samples are consumed strictly in time order, so arrival order is
    chronological order and no sorting is ever needed.
    """

    def __init__(self, segmenter: HysteresisSegmenter):
        self.segmenter = segmenter
        self.segments: list[Timestamp] = []

    def __len__(self) -> int:
        return len(self.segments)

    def finalize(self, segment: Timestamp) -> None:
        """Append a closed segment."""
        if self.segments and segment.start < self.segments[-1].end:
            raise ValueError(
                f"Segment {segment} overlaps or precedes the previous segment "
                f"{self.segments[-1]}"
            )
        self.segments.append(segment)

    def flush_trailing(self, total_samples: int) -> Timestamp | None:
        """Close any still-open segment at ``total_samples`` and append it.

        No minimum-duration filter is applied to the trailing segment.

        Returns:
            The flushed segment, or None if no segment was open
        """
        segment = self.segmenter.close(total_samples)
        if segment is not None:
            logger.debug("Flushed trailing segment %s", segment)
            self.finalize(segment)
        return segment

    def reset(self) -> None:
        """Clear collected segments and all segmenter timers."""
        self.segments = []
        self.segmenter.reset()
