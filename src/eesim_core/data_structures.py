# src/eesim_core/data_structures.py
"""
The plain-data model shared by every solver and by the simulation clock.

All records are frozen dataclasses. They are passed into the core by value on each
evaluation, and the core never holds on to UI state. Construction normalizes raw,
keystroke-by-keystroke input (strings, None, NaN, zero resistances) into values
the solvers can use without raising.
"""
from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any, Dict, Iterable, Iterator, Mapping, Optional, Tuple

from .constants import RESISTANCE_FLOOR_OHM

logger = logging.getLogger(__name__)


# --- Channel Layouts ---

TRANSIENT_CHANNELS: Tuple[str, ...] = ("V", "I", "P", "E")
THEOREM_CHANNELS: Tuple[str, ...] = ("probeV", "probeI", "power")
DEVIATION_CHANNELS: Tuple[str, ...] = ("practical", "theoretical", "absolute", "percent", "signedPercent")


# --- Normalization Helpers ---

def to_float(value: Any) -> float:
    """
    Best-effort conversion of a raw input value to float.
    Anything that cannot be read as a number becomes NaN; this never raises.
    """
    if value is None or isinstance(value, bool):
        return math.nan
    if isinstance(value, (int, float)):
        try:
            return float(value)
        except OverflowError:
            # Integers beyond float range saturate so finite checks reject them.
            return math.inf if value > 0 else -math.inf
    try:
        text = str(value).strip()
        if not text:
            return math.nan
        return float(text)
    except (TypeError, ValueError):
        return math.nan


def finite_or(value: Any, fallback: float) -> float:
    """Returns `value` as a float if it is finite, otherwise `fallback`."""
    number = to_float(value)
    return number if math.isfinite(number) else fallback


def floor_positive(value: Any, floor: float = RESISTANCE_FLOOR_OHM) -> float:
    """Clamps a resistance-like value to a strictly positive floor. Non-finite input yields the floor."""
    number = to_float(value)
    if not math.isfinite(number):
        return floor
    return max(floor, number)


# --- Enumerations ---

class ComponentKind(Enum):
    """The type of reactive component a network is built from."""
    CAPACITIVE = "capacitive"
    INDUCTIVE = "inductive"

    @classmethod
    def parse(cls, label: Any) -> "ComponentKind":
        if isinstance(label, cls):
            return label
        key = str(label).strip().lower()
        kind = _COMPONENT_KIND_ALIASES.get(key)
        if kind is None:
            raise ValueError(
                f"Unknown component kind '{label}'. Expected one of: {sorted(_COMPONENT_KIND_ALIASES)}."
            )
        return kind

    def __str__(self):
        return self.value


_COMPONENT_KIND_ALIASES: Dict[str, ComponentKind] = {
    "capacitive": ComponentKind.CAPACITIVE,
    "capacitor": ComponentKind.CAPACITIVE,
    "capacitance": ComponentKind.CAPACITIVE,
    "cap": ComponentKind.CAPACITIVE,
    "c": ComponentKind.CAPACITIVE,
    "inductive": ComponentKind.INDUCTIVE,
    "inductor": ComponentKind.INDUCTIVE,
    "inductance": ComponentKind.INDUCTIVE,
    "ind": ComponentKind.INDUCTIVE,
    "l": ComponentKind.INDUCTIVE,
}


class GroupKind(Enum):
    """How the components inside one group are connected."""
    SERIES = "series"
    PARALLEL = "parallel"

    @classmethod
    def parse(cls, label: Any) -> "GroupKind":
        """Anything that is not recognizably 'parallel' is a series group."""
        if isinstance(label, cls):
            return label
        key = str(label).strip().lower()
        if key in ("parallel", "p", "par"):
            return cls.PARALLEL
        return cls.SERIES

    def __str__(self):
        return self.value


# --- Network Model ---

@dataclass(frozen=True)
class ComponentGroup:
    """
    One series or parallel group of components.

    `magnitudes` are raw values in user units (uF for capacitors, mH for inductors),
    kept exactly as supplied. Entries that are not finite positive numbers are
    ignored by the reducer instead of being rejected here.
    """
    kind: GroupKind
    magnitudes: Tuple[Any, ...] = ()

    def __post_init__(self):
        object.__setattr__(self, "kind", GroupKind.parse(self.kind))
        object.__setattr__(self, "magnitudes", tuple(self.magnitudes or ()))

    @classmethod
    def from_raw(cls, raw: Mapping[str, Any]) -> "ComponentGroup":
        """Accepts both the canonical keys (kind, magnitudes) and the legacy keys (type, values)."""
        kind = raw.get("kind", raw.get("type", GroupKind.SERIES))
        magnitudes = raw.get("magnitudes", raw.get("values")) or ()
        return cls(kind=kind, magnitudes=tuple(magnitudes))

    def to_dict(self) -> Dict[str, Any]:
        return {"kind": self.kind.value, "magnitudes": list(self.magnitudes)}


@dataclass(frozen=True)
class Network:
    """An ordered sequence of groups, always combined as mutually parallel branches."""
    groups: Tuple[ComponentGroup, ...] = ()

    def __post_init__(self):
        object.__setattr__(self, "groups", tuple(self.groups or ()))

    def __iter__(self) -> Iterator[ComponentGroup]:
        return iter(self.groups)

    def __len__(self) -> int:
        return len(self.groups)

    @classmethod
    def from_raw(cls, raw_groups: Optional[Iterable[Any]]) -> "Network":
        groups = []
        for raw in raw_groups or ():
            groups.append(raw if isinstance(raw, ComponentGroup) else ComponentGroup.from_raw(raw))
        return cls(groups=tuple(groups))

    def to_list(self):
        return [group.to_dict() for group in self.groups]


@dataclass(frozen=True)
class ElectricalContext:
    """
    Supply and load conditions for a transient evaluation.

    The series resistance is floored to RESISTANCE_FLOOR_OHM so that neither
    R*C nor L/R or Vsup/R can divide by zero. A non-finite supply voltage is read as 0 V.
    """
    source_voltage: float
    series_resistance: float
    component_kind: ComponentKind = ComponentKind.CAPACITIVE

    def __post_init__(self):
        object.__setattr__(self, "source_voltage", finite_or(self.source_voltage, 0.0))
        object.__setattr__(self, "series_resistance", floor_positive(self.series_resistance))
        object.__setattr__(self, "component_kind", ComponentKind.parse(self.component_kind))


@dataclass(frozen=True)
class TheoremParameters:
    """
    Source and resistor values for the theorem solver.

    Voltages and the current source default to 0; every resistance is floored to a
    strictly positive minimum, so any sum or product of them is a safe divisor.
    """
    v1: float = 0.0
    v2: float = 0.0
    i1: float = 0.0
    r1: float = RESISTANCE_FLOOR_OHM
    r2: float = RESISTANCE_FLOOR_OHM
    rl: float = RESISTANCE_FLOOR_OHM
    rs: float = RESISTANCE_FLOOR_OHM
    rs2: float = RESISTANCE_FLOOR_OHM

    def __post_init__(self):
        for name in ("v1", "v2", "i1"):
            object.__setattr__(self, name, finite_or(getattr(self, name), 0.0))
        for name in ("r1", "r2", "rl", "rs", "rs2"):
            object.__setattr__(self, name, floor_positive(getattr(self, name)))

    @classmethod
    def from_raw(cls, raw: Mapping[str, Any]) -> "TheoremParameters":
        """
        Builds parameters from form-style input. Keys may use the circuit notation
        (V1, RL, Rs, ...) or the attribute names; values may be strings or None.
        """
        lowered = {str(k).lower(): v for k, v in raw.items()}
        return cls(**{name: lowered.get(name) for name in _THEOREM_PARAMETER_NAMES})


_THEOREM_PARAMETER_NAMES = ("v1", "v2", "i1", "r1", "r2", "rl", "rs", "rs2")


# --- Simulation Records ---

@dataclass(frozen=True)
class Sample:
    """
    One immutable point of simulation history.

    Attributes:
        t: Monotonically increasing integer index assigned by the clock.
        time_s: Virtual time in seconds at which the sample was taken.
        channels: Read-only mapping of channel name to full-precision value.
    """
    t: int
    time_s: float
    channels: Mapping[str, float] = field(default_factory=dict)

    def __post_init__(self):
        object.__setattr__(self, "channels", MappingProxyType(dict(self.channels)))

    def __getitem__(self, name: str) -> float:
        return self.channels[name]

    def get(self, name: str, default: float = 0.0) -> float:
        return self.channels.get(name, default)

    @classmethod
    def zero(cls, t: int, channels: Iterable[str]) -> "Sample":
        return cls(t=t, time_s=0.0, channels={name: 0.0 for name in channels})


@dataclass(frozen=True)
class SimulationSnapshot:
    """
    The latest full solver output, including values that are not kept in history
    (e.g. Vth, Rth, In). Derived and non-authoritative; rebuilt on every accepted tick.
    """
    t: int
    time_s: float
    values: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        object.__setattr__(self, "values", MappingProxyType(dict(self.values)))

    def __getitem__(self, name: str) -> Any:
        return self.values[name]

    def get(self, name: str, default: Any = None) -> Any:
        return self.values.get(name, default)
