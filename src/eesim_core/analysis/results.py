# src/eesim_core/analysis/results.py
"""
Typed result contracts for the analysis functions.

Each solver returns one of these frozen dataclasses rather than a raw dict, so
consumers (the samplers, the exporter, the UI) read values by name and cannot
mutate a result after it has been produced.
"""
from dataclasses import dataclass
from typing import Any, Dict, Optional, Tuple

import numpy as np

from ..data_structures import ComponentKind, GroupKind
from ..units import CANONICAL_UNITS, format_quantity, si_scale


@dataclass(frozen=True)
class GroupEquivalent:
    """The reduced value of a single group, in SI, alongside the values it came from."""
    kind: GroupKind
    equivalent: float
    raw_magnitudes: Tuple[Any, ...]
    si_magnitudes: Tuple[float, ...]


@dataclass(frozen=True)
class ReductionResult:
    """
    The result of reducing a Network.

    Attributes:
        equivalent: Total equivalent in SI (farads or henries). Always finite and >= 0.
        per_group: Per-group equivalents, in network order.
        component_kind: Whether `equivalent` is a capacitance or an inductance.
    """
    equivalent: float
    per_group: Tuple[GroupEquivalent, ...]
    component_kind: ComponentKind

    @property
    def is_empty(self) -> bool:
        """True when nothing in the network contributed (treated as 'no load')."""
        return self.equivalent <= 0.0

    @property
    def display_value(self) -> Optional[float]:
        """The equivalent in user units (uF or mH), or None when there is no equivalent."""
        if self.is_empty:
            return None
        return self.equivalent / si_scale(self.component_kind)

    def format_display(self, precision: int = 6) -> str:
        """Formats the equivalent for display, using '--' when there is none."""
        value = self.display_value
        if value is None:
            return "--"
        return format_quantity(value, CANONICAL_UNITS[self.component_kind], precision)


@dataclass(frozen=True)
class TransientState:
    """Instantaneous step-response values. E is the energy stored in the reactive element."""
    V: float = 0.0
    I: float = 0.0
    P: float = 0.0
    E: float = 0.0

    def as_dict(self) -> Dict[str, float]:
        return {"V": self.V, "I": self.I, "P": self.P, "E": self.E}


@dataclass(frozen=True)
class TransientCurve:
    """Step response sampled over an array of times; every field is a 1-D array of equal length."""
    times: np.ndarray
    V: np.ndarray
    I: np.ndarray
    P: np.ndarray
    E: np.ndarray
    tau: float


@dataclass(frozen=True)
class TheoremSolution:
    """
    Steady-state solution for one theorem mode.

    Fields that do not apply to the selected mode are left at 0 (or False) so
    that every mode can be consumed uniformly.
    """
    probe_v: float = 0.0
    probe_i: float = 0.0
    power: float = 0.0
    vth: float = 0.0
    rth: float = 0.0
    i_n: float = 0.0
    matched: bool = False
    series_probe_v: float = 0.0
    series_probe_i: float = 0.0

    def as_dict(self) -> Dict[str, Any]:
        return {
            "probeV": self.probe_v,
            "probeI": self.probe_i,
            "power": self.power,
            "Vth": self.vth,
            "Rth": self.rth,
            "In": self.i_n,
            "matched": self.matched,
        }


@dataclass(frozen=True)
class DeviationResult:
    """Practical-versus-theoretical error. `percent` is unsigned, `signed_percent` keeps the sign of `absolute`."""
    absolute: float
    percent: float
    signed_percent: float

    def as_dict(self) -> Dict[str, float]:
        return {"absolute": self.absolute, "percent": self.percent, "signedPercent": self.signed_percent}
