# src/eesim_core/simulation/clock.py
"""
The tick-driven simulation clock.

The host owns the frame loop and calls `tick(now_ms)` as often as it likes with a
monotonically increasing wall timestamp. The clock converts accepted ticks into
virtual time, asks the active sample function for the circuit state at that time,
and records the result. Ticks that arrive faster than the cadence are coalesced,
and time spent paused is never counted.

State machine:

    IDLE --start--> RUNNING --pause--> PAUSED --resume--> RUNNING
      ^                                                      |
      +------------------------- reset ----------------------+  (from any state)
"""
import logging
import math
from collections.abc import Mapping
from enum import Enum
from typing import Any, Callable, Dict, Optional, Sequence, Tuple

from ..constants import DEFAULT_CADENCE_MS, DEFAULT_HISTORY_CAP, DEFAULT_SEED_LENGTH
from ..data_structures import TRANSIENT_CHANNELS, Sample, SimulationSnapshot, to_float
from .config import ClockConfig
from .history import History

logger = logging.getLogger(__name__)

SampleFunction = Callable[[float], Any]


class ClockState(Enum):
    IDLE = "idle"
    RUNNING = "running"
    PAUSED = "paused"


def _as_mapping(record: Any) -> Dict[str, Any]:
    if isinstance(record, Mapping):
        return dict(record)
    if hasattr(record, "as_dict"):
        return dict(record.as_dict())
    raise TypeError(
        f"Sample function returned {type(record).__name__}; expected a mapping or a record with as_dict()."
    )


def _validated_cadence(cadence_ms: Any) -> float:
    value = to_float(cadence_ms)
    if not math.isfinite(value) or value <= 0.0:
        raise ValueError(f"Cadence must be a positive number of milliseconds, got {cadence_ms!r}.")
    return value


class SimulationClock:
    """
    Owns one History and one Snapshot and advances them from host ticks.

    Args:
        channels: Channel names recorded into History. When None, the channels of the
            first sample function passed to `start()` are used, falling back to V, I, P, E.
        cap: Maximum number of samples kept in History.
        seed_length: Number of zero samples History starts out with.
        cadence_ms: Default minimum wall time between two recorded samples.
    """

    def __init__(
        self,
        channels: Optional[Sequence[str]] = None,
        cap: int = DEFAULT_HISTORY_CAP,
        seed_length: int = DEFAULT_SEED_LENGTH,
        cadence_ms: float = DEFAULT_CADENCE_MS,
    ):
        self._explicit_channels = channels is not None
        self._history = History(channels if channels is not None else TRANSIENT_CHANNELS, cap, seed_length)
        self._cadence_ms = _validated_cadence(cadence_ms)
        self._state = ClockState.IDLE
        self._sample_fn: Optional[SampleFunction] = None
        self._virtual_ms = 0.0
        self._anchor_ms: Optional[float] = None
        self._snapshot: Optional[SimulationSnapshot] = None

    @classmethod
    def from_config(cls, config: ClockConfig, channels: Optional[Sequence[str]] = None) -> "SimulationClock":
        return cls(channels=channels, cap=config.cap, seed_length=config.seed_length, cadence_ms=config.cadence_ms)

    # --- Read-only State ---

    @property
    def state(self) -> ClockState:
        return self._state

    @property
    def is_running(self) -> bool:
        return self._state is ClockState.RUNNING

    @property
    def virtual_time_s(self) -> float:
        return self._virtual_ms / 1000.0

    @property
    def history(self) -> History:
        return self._history

    @property
    def channels(self) -> Tuple[str, ...]:
        return self._history.channels

    @property
    def snapshot(self) -> Optional[SimulationSnapshot]:
        return self._snapshot

    @property
    def cadence_ms(self) -> float:
        return self._cadence_ms

    @property
    def cap(self) -> int:
        return self._history.cap

    # --- Transitions ---

    def start(
        self,
        sample_fn: Optional[SampleFunction] = None,
        cadence_ms: Optional[float] = None,
        cap: Optional[int] = None,
        now_ms: Optional[float] = None,
    ):
        """
        Enters RUNNING with `sample_fn` as the active sampler.

        From RUNNING or PAUSED this swaps the sampler and cadence and re-anchors the
        wall reference; virtual time and History are kept. Passing no `sample_fn`
        reuses the previous one, e.g. to restart after `reset()`.
        """
        if sample_fn is None:
            sample_fn = self._sample_fn
        if sample_fn is None or not callable(sample_fn):
            raise ValueError("start() needs a callable sample function.")
        if cadence_ms is not None:
            self._cadence_ms = _validated_cadence(cadence_ms)

        sampler_channels = getattr(sample_fn, "channels", None)
        if (
            not self._explicit_channels
            and self._state is ClockState.IDLE
            and sampler_channels is not None
            and tuple(sampler_channels) != self._history.channels
        ):
            self._history = History(sampler_channels, self._history.cap, self._history.seed_length)
            logger.debug(f"History channels set from sampler: {self._history.channels}")

        if cap is not None and int(cap) != self._history.cap:
            self._history.resize(cap)

        previous = self._state
        self._sample_fn = sample_fn
        self._anchor_ms = None if now_ms is None else to_float(now_ms)
        self._state = ClockState.RUNNING
        logger.info(
            f"Clock started from {previous.value} (cadence={self._cadence_ms} ms, cap={self._history.cap})."
        )

    def pause(self):
        if self._state is not ClockState.RUNNING:
            logger.debug(f"pause() ignored in state {self._state.value}.")
            return
        self._state = ClockState.PAUSED
        logger.info(f"Clock paused at virtual time {self.virtual_time_s:.3f} s.")

    def resume(self, now_ms: Optional[float] = None):
        if self._state is not ClockState.PAUSED:
            logger.debug(f"resume() ignored in state {self._state.value}.")
            return
        # Re-anchoring drops the paused interval from virtual time.
        self._anchor_ms = None if now_ms is None else to_float(now_ms)
        self._state = ClockState.RUNNING
        logger.info(f"Clock resumed at virtual time {self.virtual_time_s:.3f} s.")

    def reset(self):
        self._virtual_ms = 0.0
        self._anchor_ms = None
        self._snapshot = None
        self._history.reseed()
        self._state = ClockState.IDLE
        logger.info("Clock reset.")

    # --- Sampling ---

    def tick(self, now_ms: Any) -> Optional[Sample]:
        """
        Offers a wall-clock timestamp to the clock.

        Returns the recorded `Sample` when the tick was accepted, otherwise None.
        Exceptions from the sample function propagate and leave the clock untouched.
        """
        if self._state is not ClockState.RUNNING:
            return None
        now = to_float(now_ms)
        if not math.isfinite(now):
            return None
        if self._anchor_ms is None or now < self._anchor_ms:
            self._anchor_ms = now
            return None

        elapsed = now - self._anchor_ms
        if elapsed < self._cadence_ms:
            return None

        virtual_ms = self._virtual_ms + elapsed
        values = _as_mapping(self._sample_fn(virtual_ms / 1000.0))

        self._virtual_ms = virtual_ms
        self._anchor_ms = now
        sample = self._history.append(virtual_ms / 1000.0, values)
        self._snapshot = SimulationSnapshot(t=sample.t, time_s=sample.time_s, values=values)
        logger.debug(f"Tick accepted: t={sample.t}, virtual={sample.time_s:.4f} s.")
        return sample
