# src/eesim_core/simulation/config.py
import logging
import math
from dataclasses import dataclass
from typing import Any, Dict, Optional

import pint

from ..constants import DEFAULT_CADENCE_MS, DEFAULT_HISTORY_CAP, DEFAULT_SEED_LENGTH
from ..units import ureg

logger = logging.getLogger(__name__)


class ConfigParsingError(ValueError):
    """Custom exception for errors during simulation clock configuration parsing."""
    pass


@dataclass(frozen=True)
class ClockConfig:
    cadence_ms: float = DEFAULT_CADENCE_MS
    cap: int = DEFAULT_HISTORY_CAP
    seed_length: int = DEFAULT_SEED_LENGTH


def _duration_ms(raw_value: Any) -> float:
    # Bare numbers (and dimensionless strings) are milliseconds.
    if isinstance(raw_value, (int, float)) and not isinstance(raw_value, bool):
        return float(raw_value)
    text = str(raw_value).strip()
    try:
        quantity = ureg.Quantity(text)
    except (pint.DimensionalityError, pint.UndefinedUnitError):
        raise
    except Exception as e:
        # The pint tokenizer raises assorted errors on free-form text.
        raise ValueError(f"'{text}' is not a duration: {e!r}") from e
    if quantity.dimensionless:
        return float(quantity.magnitude)
    return float(quantity.to("millisecond").magnitude)


def _count(raw_value: Any, name: str) -> int:
    if isinstance(raw_value, bool):
        raise TypeError(f"{name} must be an integer, got {raw_value!r}.")
    if isinstance(raw_value, float):
        if not raw_value.is_integer():
            raise ValueError(f"{name} must be a whole number, got {raw_value!r}.")
        return int(raw_value)
    return int(raw_value)


def parse_clock_config(raw_config: Optional[Dict[str, Any]]) -> ClockConfig:
    """
    Parses a raw clock configuration dictionary into a `ClockConfig`.

    Recognized keys are 'cadence' (or 'cadence_ms'), 'cap' and 'seed_length'.
    Missing keys take the defaults. An empty or missing configuration is valid.
    """
    raw_config = raw_config or {}
    try:
        raw_cadence = raw_config.get("cadence", raw_config.get("cadence_ms", DEFAULT_CADENCE_MS))
        cadence_ms = _duration_ms(raw_cadence)
        cap = _count(raw_config.get("cap", DEFAULT_HISTORY_CAP), "History cap")
        seed_length = _count(raw_config.get("seed_length", DEFAULT_SEED_LENGTH), "Seed length")

        if not math.isfinite(cadence_ms) or cadence_ms <= 0: raise ValueError("Cadence must be a positive duration.")
        if cap < 1: raise ValueError("History cap must be at least 1.")
        if seed_length < 0: raise ValueError("Seed length must be >= 0.")
    except (TypeError, ValueError, pint.DimensionalityError, pint.UndefinedUnitError) as e:
        raise ConfigParsingError(f"Failed to parse clock configuration: {e}") from e

    config = ClockConfig(cadence_ms=cadence_ms, cap=cap, seed_length=seed_length)
    logger.debug(f"Parsed clock configuration: {config}")
    return config
