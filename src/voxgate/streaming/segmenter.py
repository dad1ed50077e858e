"""Stateful hysteresis segmentation of per-frame speech probabilities.

One probability arrives per frame. The segmenter opens a segment when the
probability reaches the threshold, holds it through the hysteresis band
``[threshold - 0.15, threshold)``, and closes it only after the probability has
stayed below the band for the minimum silence duration (the hangover). Closed
segments shorter than the minimum speech duration are discarded, and segments
that run past the maximum speech duration are force-split.
"""

from __future__ import annotations

import logging
import math
from dataclasses import asdict, dataclass
from typing import Any

from src.voxgate.config.schemas import SegmentationParams
from src.voxgate.constants import NEG_THRESHOLD_MARGIN
from src.voxgate.events.timestamps import Timestamp

logger = logging.getLogger(__name__)


@dataclass
class SegmentationState:
    """Timers and markers carried from one frame to the next."""

    triggered: bool = False
    speech_start: int | None = None
    temp_end: int | None = None
    prev_end: int | None = None
    next_start: int | None = None
    current_sample: int = 0


class HysteresisSegmenter:
    """Online speech segmenter driven by one probability per frame.

    All durations are sample counts taken from ``SegmentationParams``; the
    sample clock advances by exactly one window per processed probability.
    """

    def __init__(self, params: SegmentationParams):
        self.params = params
        self.neg_threshold = params.threshold - NEG_THRESHOLD_MARGIN
        self.state = SegmentationState()

    @property
    def triggered(self) -> bool:
        """True while a speech segment is open."""
        return self.state.triggered

    def reset(self) -> None:
        """Reset all internal state for new stream."""
        self.state = SegmentationState()

    def process(self, probability: float) -> Timestamp | None:
        """Consume the probability of the next frame.

        Args:
            probability: Speech probability in [0, 1] for the frame

        Returns:
            The segment finalized by this frame, if any
        """
        if not (math.isfinite(probability) and 0.0 <= probability <= 1.0):
            raise ValueError(f"Probability must be within [0, 1], got {probability}")

        p = self.params
        s = self.state
        s.current_sample += p.window_size_samples
        frame_start = s.current_sample - p.window_size_samples

        if probability >= p.threshold:
            if s.temp_end is not None:
                s.temp_end = None
                if (s.next_start or 0) < (s.prev_end or 0):
                    s.next_start = frame_start
            if not s.triggered:
                s.triggered = True
                s.speech_start = frame_start
                logger.debug("Speech start at sample %d", frame_start)
                return None

        if s.triggered and s.current_sample - self._start() > p.max_speech_samples:
            return self._split_max_duration()

        # Sustained speech or the hysteresis band: hold state
        if probability >= self.neg_threshold or not s.triggered:
            return None

        if s.temp_end is None:
            s.temp_end = s.current_sample
        silence = s.current_sample - s.temp_end
        if silence > p.min_silence_samples:
            s.prev_end = s.temp_end
        if silence < p.min_silence_samples:
            return None
        return self._close_on_silence()

    def close(self, total_samples: int) -> Timestamp | None:
        """Close an open segment at ``total_samples`` (end-of-stream flush).

        No minimum-duration filter applies here.
        """
        s = self.state
        segment = None
        if s.triggered and s.speech_start is not None:
            if total_samples > s.speech_start:
                segment = Timestamp(s.speech_start, total_samples)
            else:
                logger.debug(
                    "Open segment at %d has no samples before %d", s.speech_start, total_samples
                )
        self._clear_markers()
        s.triggered = False
        return segment

    def get_state_dict(self) -> dict[str, Any]:
        """Get current state for checkpointing.

        Returns:
            State dictionary that can be saved/loaded
        """
        return asdict(self.state)

    def load_state_dict(self, state_dict: dict[str, Any]) -> None:
        """Load state from checkpoint.

        Args:
            state_dict: Previously saved state dictionary

        Raises:
            ValueError: If the markers are inconsistent with ``triggered``
        """
        state = SegmentationState(
            triggered=bool(state_dict["triggered"]),
            speech_start=state_dict.get("speech_start"),
            temp_end=state_dict.get("temp_end"),
            prev_end=state_dict.get("prev_end"),
            next_start=state_dict.get("next_start"),
            current_sample=int(state_dict["current_sample"]),
        )
        if state.current_sample < 0:
            raise ValueError(f"current_sample cannot be negative: {state.current_sample}")
        if state.triggered:
            if state.speech_start is None:
                raise ValueError("Triggered checkpoint has no speech_start")
            if state.speech_start > state.current_sample:
                raise ValueError(
                    f"speech_start {state.speech_start} is ahead of current_sample "
                    f"{state.current_sample}"
                )
        else:
            markers = {
                "speech_start": state.speech_start,
                "temp_end": state.temp_end,
                "prev_end": state.prev_end,
                "next_start": state.next_start,
            }
            stray = sorted(name for name, value in markers.items() if value is not None)
            if stray:
                raise ValueError(f"Idle checkpoint carries segment markers: {', '.join(stray)}")
        self.state = state

    def _start(self) -> int:
        assert self.state.speech_start is not None
        return self.state.speech_start

    def _clear_markers(self) -> None:
        self.state.speech_start = None
        self.state.temp_end = None
        self.state.prev_end = None
        self.state.next_start = None

    def _split_max_duration(self) -> Timestamp:
        s = self.state
        start = self._start()
        prev_end = s.prev_end
        next_start = s.next_start or 0

        if prev_end is not None:
            segment = Timestamp(start, prev_end)
            reopen = next_start >= prev_end
            self._clear_markers()
            if reopen:
                s.speech_start = next_start
            else:
                s.triggered = False
        else:
            segment = Timestamp(start, s.current_sample)
            self._clear_markers()
            s.triggered = False

        logger.debug("Max speech duration reached, split at %s", segment)
        return segment

    def _close_on_silence(self) -> Timestamp | None:
        s = self.state
        start = self._start()
        assert s.temp_end is not None
        end = s.temp_end

        segment = None
        if end - start > self.params.min_speech_samples:
            segment = Timestamp(start, end)
            logger.debug("Speech segment %s", segment)
        else:
            logger.debug("Discarding short segment [%d, %d)", start, end)

        self._clear_markers()
        s.triggered = False
        return segment
