"""Centralized environment variable management for voxgate.

Typed access to the VOXGATE_* environment variables, read once at import
time so every component sees the same values for the life of the process.
"""

import os

_MODEL_PATH = os.getenv("VOXGATE_MODEL_PATH")
_LOG_LEVEL = os.getenv("VOXGATE_LOG_LEVEL", "INFO").upper()
_NUM_THREADS = os.getenv("VOXGATE_NUM_THREADS")


class EnvConfig:
    """Typed accessor for voxgate environment variables."""

    @staticmethod
    def model_path() -> str | None:
        """Default TorchScript model path when none is configured."""
        return _MODEL_PATH or None

    @staticmethod
    def log_level() -> str:
        """Logging verbosity for the CLI (default: INFO)."""
        if _LOG_LEVEL not in {"DEBUG", "INFO", "WARNING", "ERROR"}:
            return "INFO"
        return _LOG_LEVEL

    @staticmethod
    def num_threads() -> int | None:
        """Torch intra-op thread count; None leaves the torch default."""
        if _NUM_THREADS is None:
            return None
        try:
            value = int(_NUM_THREADS)
        except ValueError:
            return None
        return value if value > 0 else None
