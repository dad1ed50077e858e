"""Configuration schemas for voxgate runs and their conversion to sample counts."""

from __future__ import annotations

import math
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Literal

from pydantic import BaseModel, Field, ValidationError, field_validator, model_validator

from src.voxgate.constants import (
    CONTEXT_SAMPLES,
    DEFAULT_SAMPLE_RATE,
    DEFAULT_WINDOW_MS,
    STATE_SHAPE,
)
from src.voxgate.errors import ConfigurationError


def _format_validation_error(e: ValidationError) -> str:
    parts = []
    for error in e.errors():
        loc = ".".join(str(x) for x in error["loc"]) or "<root>"
        parts.append(f"{loc}: {error['msg']}")
    return "; ".join(parts)


class SegmenterConfig(BaseModel):
    """Hysteresis segmentation configuration (user-facing units)."""

    sample_rate: int = Field(default=DEFAULT_SAMPLE_RATE, gt=0, description="Stream rate in Hz")
    threshold: float = Field(default=0.5, ge=0.0, le=1.0, description="Speech trigger threshold")
    window_size_ms: int = Field(
        default=DEFAULT_WINDOW_MS, gt=0, description="Frame length handed to the model (ms)"
    )
    speech_pad_ms: int = Field(default=30, ge=0, description="Padding added around segments (ms)")
    min_speech_ms: int = Field(default=250, ge=0, description="Shortest segment kept (ms)")
    min_silence_ms: int = Field(
        default=100, ge=0, description="Silence needed before a segment closes (ms)"
    )
    max_speech_s: float = Field(
        default=30.0, gt=0.0, description="Longest segment before a forced split (seconds)"
    )

    @model_validator(mode="after")
    def validate_window(self) -> SegmenterConfig:
        """Ensure a window covers at least one whole sample."""
        if self.window_size_ms * self.sample_rate // 1000 < 1:
            raise ValueError(
                f"window_size_ms={self.window_size_ms} is shorter than one sample "
                f"at {self.sample_rate} Hz"
            )
        return self

    @classmethod
    def from_kwargs(cls, **kwargs: Any) -> SegmenterConfig:
        """Build a config, reporting bad values as ConfigurationError."""
        try:
            return cls(**kwargs)
        except ValidationError as e:
            raise ConfigurationError(_format_validation_error(e)) from e


class ModelConfig(BaseModel):
    """Probability model configuration."""

    path: Path | None = Field(default=None, description="TorchScript model file")
    context_samples: int = Field(
        default=CONTEXT_SAMPLES, ge=0, description="Samples carried between windows"
    )
    state_shape: tuple[int, ...] = Field(
        default=STATE_SHAPE, description="Shape of the recurrent hidden state"
    )
    device: Literal["cpu", "cuda"] = Field(default="cpu", description="Inference device")
    num_threads: int | None = Field(default=None, ge=1, description="Torch intra-op threads")

    @field_validator("state_shape")
    @classmethod
    def validate_state_shape(cls, v: tuple[int, ...]) -> tuple[int, ...]:
        """Ensure every state dimension is positive."""
        if not v or any(dim <= 0 for dim in v):
            raise ValueError(f"state_shape {v} must be non-empty with positive dims")
        return tuple(v)


class OutputConfig(BaseModel):
    """Reporting configuration."""

    apply_padding: bool = Field(default=False, description="Pad segments by speech_pad_ms")
    decimals: int = Field(default=1, ge=0, le=6, description="Rounding for seconds output")


class Config(BaseModel):
    """Complete configuration schema for a segmentation run."""

    segmenter: SegmenterConfig = Field(default_factory=SegmenterConfig)
    model: ModelConfig = Field(default_factory=ModelConfig)
    output: OutputConfig = Field(default_factory=OutputConfig)
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="INFO", description="Logging verbosity"
    )

    def to_dict(self) -> dict[str, Any]:
        """Convert config to dictionary."""
        return self.model_dump()

    @classmethod
    def from_yaml(cls, path: Path | str) -> Config:
        """Load config from YAML file."""
        import yaml

        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {path}")

        with open(path) as f:
            data = yaml.safe_load(f)

        return cls(**(data or {}))


def load_config(path: Path | str) -> Config:
    """Load a YAML config, reporting schema violations as ConfigurationError."""
    import yaml

    try:
        return Config.from_yaml(path)
    except ValidationError as e:
        raise ConfigurationError(_format_validation_error(e)) from e
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Invalid YAML in {path}: {e}") from e


@dataclass(frozen=True)
class SegmentationParams:
    """Segmentation durations pre-converted to sample counts."""

    sample_rate: int
    threshold: float
    window_size_samples: int
    speech_pad_samples: int
    min_speech_samples: int
    min_silence_samples: int
    max_speech_samples: int

    def __post_init__(self) -> None:
        problems = []
        if self.sample_rate <= 0:
            problems.append(f"sample_rate must be positive, got {self.sample_rate}")
        if self.window_size_samples <= 0:
            problems.append(
                f"window_size_samples must be positive, got {self.window_size_samples}"
            )
        if not (math.isfinite(self.threshold) and 0.0 <= self.threshold <= 1.0):
            problems.append(f"threshold must be within [0, 1], got {self.threshold}")
        for name in ("speech_pad_samples", "min_speech_samples", "min_silence_samples"):
            if getattr(self, name) < 0:
                problems.append(f"{name} must be >= 0, got {getattr(self, name)}")
        if self.max_speech_samples <= 0:
            problems.append(
                f"max_speech_samples must be positive, got {self.max_speech_samples}"
            )
        if problems:
            raise ConfigurationError("; ".join(problems))

    @classmethod
    def from_config(cls, config: SegmenterConfig) -> SegmentationParams:
        """Convert millisecond/second settings using the stream's sample rate.

        The maximum speech duration is shortened by one window and by the padding
        on both sides, since padding is added around emitted segments later.
        """
        sr = config.sample_rate
        window = config.window_size_ms * sr // 1000
        pad = config.speech_pad_ms * sr // 1000
        max_speech = int(sr * config.max_speech_s) - window - 2 * pad

        if max_speech <= 0:
            raise ConfigurationError(
                f"max_speech_s={config.max_speech_s} leaves no room after subtracting one "
                f"window ({window}) and twice the padding ({pad}); got {max_speech} samples"
            )

        return cls(
            sample_rate=sr,
            threshold=config.threshold,
            window_size_samples=window,
            speech_pad_samples=pad,
            min_speech_samples=config.min_speech_ms * sr // 1000,
            min_silence_samples=config.min_silence_ms * sr // 1000,
            max_speech_samples=max_speech,
        )
