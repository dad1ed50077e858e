"""Post-processing for emitted speech segments."""

from .postprocess import pad_segments, segments_to_seconds

__all__ = ["pad_segments", "segments_to_seconds"]
