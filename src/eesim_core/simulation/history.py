# src/eesim_core/simulation/history.py
import logging
from collections import deque
from typing import Any, Deque, Iterator, Mapping, Optional, Sequence, Tuple

import numpy as np

from ..constants import DEFAULT_HISTORY_CAP, DEFAULT_SEED_LENGTH
from ..data_structures import Sample, to_float

logger = logging.getLogger(__name__)


class History:
    """
    A FIFO-capped buffer of `Sample` records.

    The buffer starts out holding `seed_length` zero samples so a chart bound to it
    never has to render an empty series. Appending past `cap` evicts the oldest
    sample. Sample indices keep increasing across evictions; they restart only
    when the buffer is reseeded.
    """

    def __init__(
        self,
        channels: Sequence[str],
        cap: int = DEFAULT_HISTORY_CAP,
        seed_length: int = DEFAULT_SEED_LENGTH,
    ):
        cap = int(cap)
        if cap < 1:
            raise ValueError(f"History cap must be at least 1, got {cap}.")
        self.channels: Tuple[str, ...] = tuple(channels)
        self.seed_length: int = max(0, int(seed_length))
        self._samples: Deque[Sample] = deque(maxlen=cap)
        self._next_t: int = 0
        self.reseed()

    @property
    def cap(self) -> int:
        return self._samples.maxlen

    def reseed(self):
        """Replaces the whole buffer with a fresh run of zero samples."""
        seed = (Sample.zero(t, self.channels) for t in range(self.seed_length))
        self._samples = deque(seed, maxlen=self.cap)
        self._next_t = self.seed_length
        logger.debug(f"History reseeded with {len(self._samples)} zero sample(s) (cap={self.cap}).")

    def resize(self, cap: int):
        """Changes the cap, keeping the newest samples if the buffer shrinks."""
        cap = int(cap)
        if cap < 1:
            raise ValueError(f"History cap must be at least 1, got {cap}.")
        if cap == self.cap:
            return
        self._samples = deque(self._samples, maxlen=cap)
        logger.debug(f"History resized to cap={cap}; holding {len(self._samples)} sample(s).")

    def append(self, time_s: float, values: Mapping[str, Any]) -> Sample:
        """Builds the next sample from a solver record and appends it. Channels missing from `values` are 0."""
        channels = {name: to_float(values.get(name, 0.0)) for name in self.channels}
        sample = Sample(t=self._next_t, time_s=float(time_s), channels=channels)
        self._samples.append(sample)
        self._next_t += 1
        return sample

    def latest(self) -> Optional[Sample]:
        return self._samples[-1] if self._samples else None

    def __len__(self) -> int:
        return len(self._samples)

    def __iter__(self) -> Iterator[Sample]:
        return iter(self._samples)

    def __getitem__(self, index: int) -> Sample:
        return self._samples[index]

    def column(self, name: str) -> np.ndarray:
        """One channel (or 't' / 'time_s') as a 1-D float array."""
        if name == "t":
            return np.array([s.t for s in self._samples], dtype=float)
        if name == "time_s":
            return np.array([s.time_s for s in self._samples], dtype=float)
        return np.array([s.get(name, np.nan) for s in self._samples], dtype=float)

    def to_array(self, channels: Optional[Sequence[str]] = None) -> np.ndarray:
        """
        The buffer as a 2-D array with columns [t, channel...], for chart collaborators.
        Values are full precision.
        """
        names = tuple(channels) if channels is not None else self.channels
        columns = [self.column("t")] + [self.column(name) for name in names]
        return np.column_stack(columns) if self._samples else np.empty((0, 1 + len(names)))
