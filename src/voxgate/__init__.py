"""Voxgate: streaming voice-activity segmentation.

Turns a continuous sequence of fixed-size audio frames, scored one at a time by
a recurrent speech-probability model, into chronological speech segments:
- hysteresis thresholding with a hangover window for brief dips
- minimum speech duration filtering
- maximum speech duration splitting
"""

__version__ = "0.3.0"

from .constants import *  # noqa: F403
from .errors import (
    AudioFormatError,
    ConfigurationError,
    InferenceContractViolation,
    InvalidFrameLength,
    VoxgateError,
)
