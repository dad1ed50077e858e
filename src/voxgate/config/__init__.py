"""Configuration schemas and loaders."""

from .schemas import (
    Config,
    ModelConfig,
    OutputConfig,
    SegmentationParams,
    SegmenterConfig,
    load_config,
)

__all__ = [
    "Config",
    "ModelConfig",
    "OutputConfig",
    "SegmentationParams",
    "SegmenterConfig",
    "load_config",
]
