"""Root test configuration and shared fixtures for voxgate."""

from typing import Any, Tuple  # noqa: UP035

import numpy as np
import pytest
import torch
from torch import nn

from src.voxgate.config.schemas import SegmentationParams, SegmenterConfig
from src.voxgate.constants import STATE_SHAPE


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line("markers", "integration: integration tests")
    config.addinivalue_line("markers", "edge: edge case stress tests")


class ScriptedModel:
    """Probability model that replays a fixed probability sequence.

    Records every window and hidden state it is handed so tests can check the
    driver's buffer threading.
    """

    def __init__(self, probabilities, state_shape: tuple[int, ...] = STATE_SHAPE):
        self.probabilities = list(probabilities)
        self.state_shape = state_shape
        self.windows: list[np.ndarray] = []
        self.states: list[np.ndarray] = []
        self.calls = 0

    def infer(self, window: np.ndarray, hidden_state: Any) -> tuple[float, np.ndarray]:
        self.windows.append(np.array(window, copy=True))
        self.states.append(np.array(hidden_state, copy=True))
        prob = self.probabilities[self.calls % len(self.probabilities)]
        self.calls += 1
        return prob, np.asarray(hidden_state) + 1.0


@pytest.fixture
def scripted_model():
    """Factory for ScriptedModel instances."""
    return ScriptedModel


@pytest.fixture
def segmenter_config() -> SegmenterConfig:
    """16 kHz, threshold 0.5, 32 ms windows, 250 ms min speech, 100 ms min silence."""
    return SegmenterConfig(
        sample_rate=16000,
        threshold=0.5,
        window_size_ms=32,
        speech_pad_ms=30,
        min_speech_ms=250,
        min_silence_ms=100,
        max_speech_s=30.0,
    )


@pytest.fixture
def params(segmenter_config: SegmenterConfig) -> SegmentationParams:
    """Sample-unit parameters for the default 16 kHz setup."""
    return SegmentationParams.from_config(segmenter_config)


@pytest.fixture
def short_max_params() -> SegmentationParams:
    """Parameters with a 1 s maximum speech duration (14528 samples after reduction)."""
    return SegmentationParams.from_config(SegmenterConfig(max_speech_s=1.0))


class EnergyVad(nn.Module):
    """Toy recurrent VAD: probability is ten times the mean absolute amplitude."""

    def forward(
        self, x: torch.Tensor, state: torch.Tensor, sr: torch.Tensor
    ) -> Tuple[torch.Tensor, torch.Tensor]:  # noqa: UP006
        prob = torch.clamp(x.abs().mean(dim=1, keepdim=True) * 10.0, 0.0, 1.0)
        return prob, state + 1.0


@pytest.fixture
def energy_vad_path(tmp_path):
    """TorchScript file of EnergyVad saved under tmp_path."""
    path = tmp_path / "energy_vad.pt"
    torch.jit.save(torch.jit.script(EnergyVad()), str(path))
    return path
