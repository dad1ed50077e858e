"""Frame splitting and context-window assembly for the probability model."""

from __future__ import annotations

import logging
from collections.abc import Iterator

import numpy as np
import numpy.typing as npt

from src.voxgate.errors import InvalidFrameLength

logger = logging.getLogger(__name__)


def iter_frames(
    samples: npt.ArrayLike, window_size_samples: int
) -> Iterator[npt.NDArray[np.float32]]:
    """Split a sample sequence into non-overlapping frames of exactly one window.

    A trailing partial frame (fewer than ``window_size_samples`` samples) is
    dropped, not padded, so up to ``window_size_samples - 1`` samples at the end
    of the stream are never scored.

    Args:
        samples: Flat mono sample sequence
        window_size_samples: Frame length in samples

    Yields:
        Read-only float32 frames of length ``window_size_samples``
    """
    data = np.asarray(samples, dtype=np.float32)
    if data.ndim != 1:
        raise ValueError(f"Expected a 1-D sample sequence, got shape {data.shape}")

    n_frames = len(data) // window_size_samples
    dropped = len(data) - n_frames * window_size_samples
    if dropped:
        logger.debug("Dropping %d trailing samples (partial frame)", dropped)

    for i in range(n_frames):
        frame = data[i * window_size_samples : (i + 1) * window_size_samples]
        frame.flags.writeable = False
        yield frame


class WindowAssembler:
    """Prepends the carried context to each frame to build the model window.

    After each window is produced the context is replaced with the window's last
    ``context_samples`` samples, so consecutive windows overlap the previous
    frame by exactly that many samples. The context starts out all-zero.
    """

    def __init__(self, window_size_samples: int, context_samples: int):
        if window_size_samples <= 0:
            raise ValueError("window_size_samples must be positive")
        if context_samples < 0:
            raise ValueError("context_samples must be non-negative")
        self.window_size_samples = window_size_samples
        self.context_samples = context_samples
        self.context = np.zeros(context_samples, dtype=np.float32)

    @property
    def effective_window_size(self) -> int:
        """Length of every assembled window."""
        return self.context_samples + self.window_size_samples

    def reset(self) -> None:
        """Zero the carried context for a new stream."""
        self.context = np.zeros(self.context_samples, dtype=np.float32)

    def assemble(self, frame: npt.ArrayLike) -> npt.NDArray[np.float32]:
        """Build ``context + frame`` and carry the window's tail forward.

        Raises:
            InvalidFrameLength: If the frame is not exactly one window long
        """
        window = self.build(frame)
        self.commit(window)
        return window

    def build(self, frame: npt.ArrayLike) -> npt.NDArray[np.float32]:
        """Build ``context + frame`` without touching the carried context.

        Raises:
            InvalidFrameLength: If the frame is not exactly one window long
        """
        data = np.asarray(frame, dtype=np.float32).reshape(-1)
        if len(data) != self.window_size_samples:
            raise InvalidFrameLength(self.window_size_samples, len(data))
        return np.concatenate([self.context, data])

    def commit(self, window: npt.NDArray[np.float32]) -> None:
        """Carry the tail of a consumed window into the next one."""
        if self.context_samples:
            self.context = window[-self.context_samples :].copy()
