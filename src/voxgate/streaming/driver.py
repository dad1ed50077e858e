"""Frame loop for single-stream speech segmentation.

Frames flow WindowAssembler -> model -> HysteresisSegmenter -> SegmentAccumulator
one at a time and strictly in order: frame n's carried context and hidden state
are inputs to frame n+1, so nothing here can run concurrently. Independent
streams each get their own driver.
"""

from __future__ import annotations

import logging
import math
from typing import Any

import numpy as np
import numpy.typing as npt

from src.voxgate.config.schemas import Config, SegmentationParams
from src.voxgate.constants import CONTEXT_SAMPLES, STATE_SHAPE
from src.voxgate.data.windows import WindowAssembler, iter_frames
from src.voxgate.errors import InferenceContractViolation
from src.voxgate.events.accumulator import SegmentAccumulator
from src.voxgate.events.timestamps import Timestamp
from src.voxgate.models.base import ProbabilityModel, zero_state

from .segmenter import HysteresisSegmenter

logger = logging.getLogger(__name__)


class StreamDriver:
    """Owns the per-stream buffers and drives one frame at a time."""

    def __init__(
        self,
        params: SegmentationParams,
        model: ProbabilityModel,
        context_samples: int = CONTEXT_SAMPLES,
        state_shape: tuple[int, ...] = STATE_SHAPE,
    ):
        """Initialize a driver for one stream.

        Args:
            params: Segmentation settings in sample units
            model: Per-window speech-probability model
            context_samples: Samples carried from each window into the next
            state_shape: Shape of the model's recurrent hidden state
        """
        self.params = params
        self.model = model
        self.state_shape = tuple(state_shape)
        self.assembler = WindowAssembler(params.window_size_samples, context_samples)
        self.segmenter = HysteresisSegmenter(params)
        self.accumulator = SegmentAccumulator(self.segmenter)
        self.hidden_state: Any = zero_state(self.state_shape)
        self.frames_processed = 0

    @classmethod
    def from_config(cls, config: Config, model: ProbabilityModel) -> StreamDriver:
        """Build a driver from a validated Config."""
        return cls(
            SegmentationParams.from_config(config.segmenter),
            model,
            context_samples=config.model.context_samples,
            state_shape=config.model.state_shape,
        )

    @property
    def segments(self) -> list[Timestamp]:
        """Segments finalized so far, in chronological order."""
        return list(self.accumulator.segments)

    @property
    def samples_consumed(self) -> int:
        """Samples scored so far (whole frames only)."""
        return self.segmenter.state.current_sample

    def reset(self) -> None:
        """Zero every carried buffer, exactly as at construction."""
        self.assembler.reset()
        self.accumulator.reset()
        self.hidden_state = zero_state(self.state_shape)
        self.frames_processed = 0

    def push(self, frame: npt.ArrayLike) -> Timestamp | None:
        """Process one frame of exactly ``window_size_samples`` samples.

        Carried context and hidden state only advance once the model reply has
        been accepted, so a frame that raises leaves the driver where it was.

        Returns:
            The segment finalized by this frame, if any

        Raises:
            InvalidFrameLength: If the frame has the wrong length
            InferenceContractViolation: If the model reply is malformed
        """
        window = self.assembler.build(frame)
        probability = self._infer(window)
        self.assembler.commit(window)
        self.frames_processed += 1

        segment = self.segmenter.process(probability)
        if segment is not None:
            self.accumulator.finalize(segment)
        return segment

    def finish(self, total_samples: int | None = None) -> Timestamp | None:
        """Flush a still-open segment at end of stream.

        Args:
            total_samples: Stream length in samples; defaults to the samples
                consumed so far
        """
        if total_samples is None:
            total_samples = self.samples_consumed
        return self.accumulator.flush_trailing(total_samples)

    def run(self, samples: npt.ArrayLike) -> list[Timestamp]:
        """Segment a complete mono sample sequence from a fresh state.

        The stream is cut into whole frames and a trailing partial frame is
        dropped; a segment still open at the end is closed at the full input
        length.
        """
        data = np.asarray(samples, dtype=np.float32)
        self.reset()

        for frame in iter_frames(data, self.params.window_size_samples):
            self.push(frame)
        self.finish(len(data))

        logger.info(
            "Segmented %d frames (%d samples): %d speech segment(s)",
            self.frames_processed,
            len(data),
            len(self.accumulator),
        )
        return self.segments

    def _infer(self, window: npt.NDArray[np.float32]) -> float:
        """Run the model and check its reply against the infer() contract."""
        raw_prob, new_state = self.model.infer(window, self.hidden_state)

        probs = np.asarray(raw_prob, dtype=np.float64).reshape(-1)
        if probs.size == 0:
            raise InferenceContractViolation("Model returned an empty probability output")
        probability = float(probs[0])
        if not math.isfinite(probability) or not 0.0 <= probability <= 1.0:
            raise InferenceContractViolation(
                f"Model returned probability {probability} outside [0, 1]"
            )

        state = np.asarray(new_state, dtype=np.float32)
        expected = math.prod(self.state_shape)
        if state.size != expected:
            raise InferenceContractViolation(
                f"Hidden state length mismatch: expected {expected}, got {state.size}"
            )
        self.hidden_state = state.reshape(self.state_shape)
        return probability


def segment_probabilities(
    probabilities: npt.ArrayLike,
    params: SegmentationParams,
    total_samples: int | None = None,
) -> list[Timestamp]:
    """Segment precomputed per-frame probabilities without running a model.

    Args:
        probabilities: One speech probability per frame, in frame order
        params: Segmentation settings in sample units
        total_samples: Stream length for the trailing flush; defaults to
            ``len(probabilities) * window_size_samples``

    Returns:
        Chronological speech segments
    """
    probs = np.asarray(probabilities, dtype=np.float64).reshape(-1)
    segmenter = HysteresisSegmenter(params)
    accumulator = SegmentAccumulator(segmenter)

    for prob in probs:
        segment = segmenter.process(float(prob))
        if segment is not None:
            accumulator.finalize(segment)

    if total_samples is None:
        total_samples = len(probs) * params.window_size_samples
    accumulator.flush_trailing(total_samples)
    return list(accumulator.segments)
