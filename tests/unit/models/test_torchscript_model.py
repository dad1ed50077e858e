"""Tests for the TorchScript VAD adapter."""

import numpy as np
import pytest
import torch
from torch import nn

from src.voxgate.errors import ConfigurationError, InferenceContractViolation
from src.voxgate.models import ProbabilityModel, TorchScriptVadModel, zero_state

WINDOW = 64 + 512


class SingleOutput(nn.Module):
    def forward(self, x, state, sr):
        return x.mean()


class EmptyOutput(nn.Module):
    def forward(self, x, state, sr):
        return x[:, :0], state


class TestTorchScriptVadModel:
    """Test loading, inference and schema inspection."""

    def test_satisfies_protocol(self, energy_vad_path):
        model = TorchScriptVadModel.load(energy_vad_path, sample_rate=16000)
        assert isinstance(model, ProbabilityModel)

    def test_infer_silence_and_loud(self, energy_vad_path):
        model = TorchScriptVadModel.load(energy_vad_path, sample_rate=16000)
        state = zero_state((2, 1, 128))

        prob, new_state = model.infer(np.zeros(WINDOW, dtype=np.float32), state)
        assert prob == 0.0
        assert isinstance(new_state, np.ndarray)
        assert new_state.shape == (2, 1, 128)
        np.testing.assert_array_equal(new_state, 1.0)

        prob, _ = model.infer(np.full(WINDOW, 0.5, dtype=np.float32), new_state)
        assert prob == pytest.approx(1.0)

    def test_infer_partial_energy(self, energy_vad_path):
        model = TorchScriptVadModel.load(energy_vad_path, sample_rate=16000)
        prob, _ = model.infer(np.full(WINDOW, 0.02, dtype=np.float32), zero_state((2, 1, 128)))
        assert prob == pytest.approx(0.2, abs=1e-6)

    def test_describe(self, energy_vad_path):
        """Scripted modules expose their forward inputs and outputs."""
        model = TorchScriptVadModel.load(energy_vad_path, sample_rate=16000)
        info = model.describe()

        assert [name for name, _ in info["inputs"]] == ["x", "state", "sr"]
        assert all(type_str == "Tensor" for _, type_str in info["inputs"])
        assert len(info["outputs"]) == 1
        assert "Tensor" in info["outputs"][0][1]

    def test_describe_eager_module(self):
        model = TorchScriptVadModel(SingleOutput(), sample_rate=16000)
        assert model.describe() == {"inputs": [], "outputs": []}

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigurationError, match="not found"):
            TorchScriptVadModel.load(tmp_path / "missing.pt", sample_rate=16000)

    def test_single_output_is_contract_violation(self):
        model = TorchScriptVadModel(SingleOutput(), sample_rate=16000)
        with pytest.raises(InferenceContractViolation, match="must return"):
            model.infer(np.zeros(WINDOW, dtype=np.float32), zero_state((2, 1, 128)))

    def test_empty_output_is_contract_violation(self):
        model = TorchScriptVadModel(EmptyOutput(), sample_rate=16000)
        with pytest.raises(InferenceContractViolation, match="empty"):
            model.infer(np.zeros(WINDOW, dtype=np.float32), zero_state((2, 1, 128)))

    def test_sample_rate_tensor(self, energy_vad_path):
        model = TorchScriptVadModel.load(energy_vad_path, sample_rate=8000)
        assert model._sr.dtype == torch.int64
        assert model._sr.tolist() == [8000]
