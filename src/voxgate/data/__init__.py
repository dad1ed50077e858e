"""Audio loading and frame/window assembly."""

from .io import AudioData, load_wav
from .windows import WindowAssembler, iter_frames

__all__ = ["AudioData", "WindowAssembler", "iter_frames", "load_wav"]
