from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Timestamp:
    """Half-open speech interval ``[start, end)`` in sample units."""

    start: int
    end: int

    def __post_init__(self) -> None:
        if self.start < 0:
            raise ValueError(f"Segment start cannot be negative: {self.start}")
        if self.end <= self.start:
            raise ValueError(f"Segment end ({self.end}) must be after start ({self.start})")

    @property
    def duration(self) -> int:
        """Segment length in samples."""
        return self.end - self.start

    def overlaps(self, other: Timestamp) -> bool:
        """Check if this interval shares any sample with another."""
        return not (self.end <= other.start or self.start >= other.end)

    def to_seconds(self, sample_rate: int) -> tuple[float, float]:
        """(start_s, end_s) for a given sample rate."""
        return self.start / sample_rate, self.end / sample_rate
