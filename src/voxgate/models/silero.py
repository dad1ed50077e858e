"""TorchScript adapter for Silero-style recurrent VAD networks.

The scripted module is expected to expose
``forward(input[1, N], state, sr) -> (output, new_state)`` where ``output``
holds a single speech probability.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import numpy as np
import numpy.typing as npt
import torch

from src.voxgate.errors import ConfigurationError, InferenceContractViolation

logger = logging.getLogger(__name__)


class TorchScriptVadModel:
    """Runs a scripted VAD network one window at a time.

    Hidden state crosses the adapter boundary as a numpy array so the driver can
    own it without depending on torch.
    """

    def __init__(
        self,
        module: torch.jit.ScriptModule | torch.nn.Module,
        sample_rate: int,
        device: str = "cpu",
    ):
        """Wrap an already-loaded module.

        Args:
            module: Scripted (or eager) recurrent VAD network
            sample_rate: Rate passed to the network's ``sr`` input
            device: Torch device to run on
        """
        self.device = torch.device(device)
        self.module = module.to(self.device)
        self.module.eval()
        self.sample_rate = sample_rate
        self._sr = torch.tensor([sample_rate], dtype=torch.int64, device=self.device)

    @classmethod
    def load(
        cls,
        path: Path | str,
        sample_rate: int,
        device: str = "cpu",
        num_threads: int | None = None,
    ) -> TorchScriptVadModel:
        """Load a TorchScript file with ``torch.jit.load``."""
        path = Path(path)
        if not path.exists():
            raise ConfigurationError(f"Model file not found: {path}")
        if num_threads is not None:
            torch.set_num_threads(num_threads)

        logger.info("Loading TorchScript VAD model from %s", path)
        module = torch.jit.load(str(path), map_location=device)
        return cls(module, sample_rate=sample_rate, device=device)

    def infer(
        self, window: npt.NDArray[np.float32], hidden_state: Any
    ) -> tuple[float, npt.NDArray[np.float32]]:
        """Score one window and return (probability, new_state)."""
        x = torch.from_numpy(np.ascontiguousarray(window, dtype=np.float32)).to(self.device)
        state = torch.as_tensor(np.asarray(hidden_state, dtype=np.float32), device=self.device)

        with torch.no_grad():
            result = self.module(x.unsqueeze(0), state, self._sr)

        if not isinstance(result, (tuple, list)) or len(result) != 2:
            raise InferenceContractViolation(
                "Model forward must return (probability, state), "
                f"got {type(result).__name__}"
            )
        output, new_state = result
        if output.numel() == 0:
            raise InferenceContractViolation("Model returned an empty probability output")

        prob = float(output.reshape(-1)[0].item())
        return prob, new_state.detach().cpu().numpy().astype(np.float32, copy=False)

    def describe(self) -> dict[str, list[tuple[str, str]]]:
        """List the forward inputs and outputs as (name, type) pairs.

        Only scripted modules carry a schema; eager modules report nothing.
        """
        forward = getattr(self.module, "forward", None)
        schema = getattr(forward, "schema", None)
        if schema is None:
            return {"inputs": [], "outputs": []}

        inputs = [(arg.name, str(arg.type)) for arg in schema.arguments if arg.name != "self"]
        outputs = [(ret.name or f"output_{i}", str(ret.type)) for i, ret in enumerate(schema.returns)]
        return {"inputs": inputs, "outputs": outputs}
