"""Model and segmentation constants shared across the pipeline."""

from __future__ import annotations

# Samples carried from the tail of one window into the next (16 kHz model)
CONTEXT_SAMPLES: int = 64

# Recurrent state layout of the Silero-style network: (layers, batch, hidden)
STATE_SHAPE: tuple[int, int, int] = (2, 1, 128)

# Width of the hysteresis band below the trigger threshold
NEG_THRESHOLD_MARGIN: float = 0.15

DEFAULT_SAMPLE_RATE: int = 16000
DEFAULT_WINDOW_MS: int = 32

__all__ = [
    "CONTEXT_SAMPLES",
    "STATE_SHAPE",
    "NEG_THRESHOLD_MARGIN",
    "DEFAULT_SAMPLE_RATE",
    "DEFAULT_WINDOW_MS",
]
