"""Export utilities for speech segments."""

from __future__ import annotations

import csv
import json
from collections.abc import Sequence
from pathlib import Path
from typing import Any

from .timestamps import Timestamp

CSV_HEADER = ["start_sample", "end_sample", "start_s", "end_s"]


def _segment_rows(
    segments: Sequence[Timestamp], sample_rate: int, decimals: int
) -> list[dict[str, Any]]:
    rows = []
    for seg in segments:
        start_s, end_s = seg.to_seconds(sample_rate)
        rows.append(
            {
                "start_sample": seg.start,
                "end_sample": seg.end,
                "start_s": round(start_s, decimals),
                "end_s": round(end_s, decimals),
            }
        )
    return rows


def export_json(
    segments: Sequence[Timestamp],
    output_path: Path,
    sample_rate: int,
    metadata: dict[str, Any] | None = None,
    decimals: int = 3,
) -> None:
    """Write segments (samples and seconds) plus run metadata as JSON.

    Args:
        segments: Chronological speech segments
        output_path: Destination file; parent directories are created
        sample_rate: Rate used to convert samples to seconds
        metadata: Extra key/values stored under "metadata"
        decimals: Rounding for the seconds fields
    """
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    payload = {
        "sample_rate": sample_rate,
        "num_segments": len(segments),
        "segments": _segment_rows(segments, sample_rate, decimals),
        "metadata": metadata or {},
    }
    with output_path.open("w") as f:
        json.dump(payload, f, indent=2, default=str)


def export_csv(
    segments: Sequence[Timestamp],
    output_path: Path,
    sample_rate: int,
    decimals: int = 3,
) -> None:
    """Write one ``start_sample,end_sample,start_s,end_s`` row per segment."""
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    with output_path.open("w", newline="") as f:
        writer = csv.DictWriter(f, fieldnames=CSV_HEADER)
        writer.writeheader()
        writer.writerows(_segment_rows(segments, sample_rate, decimals))
