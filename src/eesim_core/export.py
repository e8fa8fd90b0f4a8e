# src/eesim_core/export.py
"""CSV export of clock history."""
import csv
import io
import logging
import math
from pathlib import Path
from typing import IO, Iterator, List, Mapping, Optional, Sequence, Union

from .data_structures import TRANSIENT_CHANNELS
from .simulation.history import History

logger = logging.getLogger(__name__)

TRANSIENT_PRECISION = 9
DEFAULT_PRECISION = 6


def _default_precision(channel: str) -> int:
    return TRANSIENT_PRECISION if channel in TRANSIENT_CHANNELS else DEFAULT_PRECISION


def _cell(value: float, places: int) -> str:
    if not math.isfinite(value):
        return ""
    return repr(round(value, places))


def history_rows(
    history: History,
    channels: Optional[Sequence[str]] = None,
    precision: Optional[Mapping[str, int]] = None,
) -> Iterator[List[str]]:
    """
    Yields the header row followed by one row per sample.

    Args:
        history: The buffer to export.
        channels: Channel columns to write; defaults to every history channel.
        precision: Per-channel decimal places, overriding the defaults (9 for V, I, P, E
            and 6 for everything else).
    """
    names = tuple(channels) if channels is not None else history.channels
    places = {name: _default_precision(name) for name in names}
    places.update(precision or {})

    yield ["t", *names]
    for sample in history:
        yield [str(sample.t)] + [_cell(float(sample.get(name, math.nan)), places[name]) for name in names]


def write_history_csv(
    history: History,
    target: Union[str, Path, IO[str]],
    channels: Optional[Sequence[str]] = None,
    precision: Optional[Mapping[str, int]] = None,
) -> int:
    """Writes history as CSV to a path or an open text stream. Returns the number of data rows."""
    rows = list(history_rows(history, channels, precision))
    if isinstance(target, (str, Path)):
        with open(target, "w", newline="", encoding="utf-8") as f:
            csv.writer(f).writerows(rows)
        logger.info(f"Exported {len(rows) - 1} history row(s) to: {target}")
    else:
        csv.writer(target).writerows(rows)
        logger.debug(f"Exported {len(rows) - 1} history row(s) to stream.")
    return len(rows) - 1


def history_to_csv(history: History, channels: Optional[Sequence[str]] = None, precision=None) -> str:
    buffer = io.StringIO()
    write_history_csv(history, buffer, channels, precision)
    return buffer.getvalue()
