"""Probability model protocol.

The network itself is an external collaborator: it consumes one assembled
window plus the recurrent hidden state and returns a speech probability and
the updated state. Nothing else about its internals is assumed.
"""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable

import numpy as np
import numpy.typing as npt


@runtime_checkable
class ProbabilityModel(Protocol):
    """Per-window speech-probability inference step."""

    def infer(
        self, window: npt.NDArray[np.float32], hidden_state: Any
    ) -> tuple[float, Any]:
        """Score one window.

        Args:
            window: context + frame samples, shape (context_samples + window_size_samples,)
            hidden_state: State returned by the previous call (zeros at stream start)

        Returns:
            (probability in [0, 1], new hidden state)
        """
        ...


def zero_state(shape: tuple[int, ...]) -> npt.NDArray[np.float32]:
    """All-zero hidden state used at stream start and after reset."""
    return np.zeros(shape, dtype=np.float32)
