"""Speech segment types, accumulation, and export.

This module contains:
- timestamps.py: Timestamp half-open sample interval
- accumulator.py: Ordered segment store with end-of-stream flush
- export.py: JSON/CSV writers
"""

from .accumulator import SegmentAccumulator
from .timestamps import Timestamp

__all__ = ["SegmentAccumulator", "Timestamp"]
