"""WAV audio I/O and normalisation utilities."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

import numpy as np
import numpy.typing as npt
from scipy.io import wavfile  # type: ignore[import-untyped]

from src.voxgate.errors import AudioFormatError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AudioData:
    """Decoded audio: normalised float32 samples plus stream metadata."""

    samples: npt.NDArray[np.float32]
    sample_rate: int
    num_channels: int

    @property
    def num_samples(self) -> int:
        """Samples per channel."""
        return int(self.samples.shape[0])

    @property
    def duration_s(self) -> float:
        """Stream duration in seconds."""
        return self.num_samples / self.sample_rate if self.sample_rate else 0.0


def _read_wav(file_path: Path) -> tuple[int, np.ndarray]:  # pragma: no cover - thin wrapper
    """Read a WAV via scipy.

    Split out for easy monkeypatching in tests.
    """
    return wavfile.read(file_path)


def normalize_pcm(data: np.ndarray) -> npt.NDArray[np.float32]:
    """Map integer PCM (or float) samples to float32 in roughly [-1, 1].

    Raises:
        AudioFormatError: For sample encodings WAV readers do not produce
    """
    if data.dtype == np.uint8:
        return ((data.astype(np.float32) - 128.0) / 128.0).astype(np.float32)
    if data.dtype == np.int16:
        return (data.astype(np.float32) / 32768.0).astype(np.float32)
    if data.dtype == np.int32:
        return (data.astype(np.float64) / 2147483648.0).astype(np.float32)
    if data.dtype in (np.float32, np.float64):
        return data.astype(np.float32, copy=False)
    raise AudioFormatError(f"Unsupported WAV sample type: {data.dtype}")


def load_wav(file_path: Path | str, channel: int | None = None) -> AudioData:
    """Load a WAV file as normalised float32 samples.

    Args:
        file_path: Path to a RIFF/WAV file
        channel: For multi-channel input, the channel to keep. When None the
            samples keep their (n_samples, n_channels) layout and the caller
            decides what to do with them; no mixing is performed.

    Returns:
        AudioData with samples shaped (n_samples,) or (n_samples, n_channels)

    Raises:
        FileNotFoundError: If the file does not exist
        AudioFormatError: If the file cannot be decoded or the channel is invalid
    """
    file_path = Path(file_path)
    if not file_path.exists():
        raise FileNotFoundError(f"Audio file not found: {file_path}")

    try:
        sample_rate, data = _read_wav(file_path)
    except ValueError as e:
        raise AudioFormatError(f"Cannot decode {file_path}: {e}") from e

    samples = normalize_pcm(np.asarray(data))
    num_channels = 1 if samples.ndim == 1 else int(samples.shape[1])

    if channel is not None and samples.ndim == 2:
        if not 0 <= channel < num_channels:
            raise AudioFormatError(
                f"Channel {channel} out of range for {num_channels}-channel audio"
            )
        samples = np.ascontiguousarray(samples[:, channel])

    logger.info(
        "Loaded %s: %d samples @ %d Hz, %d channel(s)",
        file_path.name,
        samples.shape[0],
        sample_rate,
        num_channels,
    )
    return AudioData(samples=samples, sample_rate=int(sample_rate), num_channels=num_channels)
