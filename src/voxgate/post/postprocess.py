"""Post-processing operations for speech segments.

Segments leave the segmenter unpadded; the maximum speech duration was already
shortened by twice the padding so padded segments stay within the limit.
"""

from __future__ import annotations

from collections.abc import Sequence

from src.voxgate.events.timestamps import Timestamp


def pad_segments(
    segments: Sequence[Timestamp],
    pad_samples: int,
    total_samples: int,
) -> list[Timestamp]:
    """Widen each segment by ``pad_samples`` on both sides.

    Padding is clamped to ``[0, total_samples]``. When the padded neighbours
    would overlap, the gap between the original segments is split at its
    midpoint so the output stays sorted and non-overlapping.

    Args:
        segments: Chronological, non-overlapping segments
        pad_samples: Padding per side in samples
        total_samples: Stream length in samples

    Returns:
        Padded segments, same count and order as the input
    """
    if pad_samples < 0:
        raise ValueError(f"pad_samples must be >= 0, got {pad_samples}")
    if not segments:
        return []

    padded: list[Timestamp] = []
    for i, seg in enumerate(segments):
        start = max(0, seg.start - pad_samples)
        end = min(total_samples, seg.end + pad_samples)

        if i > 0:
            prev = segments[i - 1]
            if start < prev.end + pad_samples:
                start = max(start, prev.end + (seg.start - prev.end) // 2)
        if i + 1 < len(segments):
            nxt = segments[i + 1]
            if end > nxt.start - pad_samples:
                end = min(end, seg.end + (nxt.start - seg.end) // 2)

        padded.append(Timestamp(start, max(end, seg.end)))
    return padded


def segments_to_seconds(
    segments: Sequence[Timestamp], sample_rate: int, decimals: int = 1
) -> list[tuple[float, float]]:
    """Convert sample intervals to rounded (start_s, end_s) pairs."""
    return [
        (round(seg.start / sample_rate, decimals), round(seg.end / sample_rate, decimals))
        for seg in segments
    ]
