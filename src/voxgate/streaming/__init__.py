"""Streaming segmentation.

This module contains:
- segmenter.py: Hysteresis state machine over per-frame speech probabilities
- driver.py: Frame loop tying windows, model, segmenter and accumulator together
"""

from .driver import StreamDriver, segment_probabilities
from .segmenter import HysteresisSegmenter, SegmentationState

__all__ = ["HysteresisSegmenter", "SegmentationState", "StreamDriver", "segment_probabilities"]
