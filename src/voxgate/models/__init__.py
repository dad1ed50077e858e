"""Speech-probability model interfaces and adapters."""

from .base import ProbabilityModel, zero_state
from .silero import TorchScriptVadModel

__all__ = ["ProbabilityModel", "TorchScriptVadModel", "zero_state"]
