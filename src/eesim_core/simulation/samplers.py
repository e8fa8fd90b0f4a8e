# src/eesim_core/simulation/samplers.py
"""
Sample functions for `SimulationClock`.

Each sampler is a callable taking virtual time in seconds and returning a mapping
of channel values, plus extra keys that only land in the clock's snapshot. A
sampler reads its parameters when it is called, so `update()` takes effect on the
next accepted tick without touching the clock.
"""
import dataclasses
import logging
import math
from typing import Any, Dict, Mapping, Optional, Union

from ..constants import THEOREM_SETTLE_SCALE, THEOREM_SETTLE_TAU_MAX_S, THEOREM_SETTLE_TAU_MIN_S
from ..data_structures import (
    DEVIATION_CHANNELS,
    THEOREM_CHANNELS,
    TRANSIENT_CHANNELS,
    ElectricalContext,
    Network,
    TheoremParameters,
    finite_or,
)
from ..analysis.deviation import analyze_deviation
from ..analysis.reduction import reduce_network
from ..analysis.results import ReductionResult
from ..analysis.theorems import TheoremMode, solve_theorem
from ..analysis.transient import instant_at, time_constant

logger = logging.getLogger(__name__)

_CONTEXT_FIELDS = ("source_voltage", "series_resistance", "component_kind")


def _as_context(context: Union[ElectricalContext, Mapping[str, Any]]) -> ElectricalContext:
    if isinstance(context, ElectricalContext):
        return context
    return ElectricalContext(
        source_voltage=context.get("source_voltage"),
        series_resistance=context.get("series_resistance"),
        component_kind=context.get("component_kind", "capacitive"),
    )


class TransientSampler:
    """Steps the RC/RL response of a reactive network."""

    channels = TRANSIENT_CHANNELS

    def __init__(
        self,
        network: Any,
        context: Union[ElectricalContext, Mapping[str, Any]],
        manual_current: Optional[float] = None,
    ):
        self.network = network if isinstance(network, Network) else Network.from_raw(network)
        self.context = _as_context(context)
        self.manual_current = manual_current

    def update(self, **changes):
        """
        Swaps any of `network`, `context`, `manual_current`, or single context fields
        (`source_voltage`, `series_resistance`, `component_kind`).
        """
        unknown = set(changes) - {"network", "context", "manual_current", *_CONTEXT_FIELDS}
        if unknown:
            raise TypeError(f"Unknown transient parameter(s): {sorted(unknown)}")
        if "network" in changes:
            network = changes["network"]
            self.network = network if isinstance(network, Network) else Network.from_raw(network)
        if "context" in changes:
            self.context = _as_context(changes["context"])
        field_changes = {k: changes[k] for k in _CONTEXT_FIELDS if k in changes}
        if field_changes:
            self.context = dataclasses.replace(self.context, **field_changes)
        if "manual_current" in changes:
            self.manual_current = changes["manual_current"]

    def reduce(self) -> ReductionResult:
        return reduce_network(self.network, self.context)

    def __call__(self, time_s: float) -> Dict[str, Any]:
        equivalent = self.reduce().equivalent
        state = instant_at(time_s, equivalent, self.context, self.manual_current)
        values = state.as_dict()
        values["equivalent"] = equivalent
        values["tau"] = time_constant(equivalent, self.context)
        return values


def settle_fraction(time_s: float, r_load: float) -> float:
    """
    Display ramp for theorem probes, alpha = 1 - exp(-t / tau_s), with
    tau_s = clamp(RL * 1e-3, 5 ms, 2 s). Presentation only; the circuits are resistive.
    """
    tau_s = max(THEOREM_SETTLE_TAU_MIN_S, min(THEOREM_SETTLE_TAU_MAX_S, r_load * THEOREM_SETTLE_SCALE))
    t = finite_or(time_s, 0.0)
    return 1.0 - math.exp(-max(t, 0.0) / tau_s)


class TheoremSampler:
    """Records the load probe of a theorem circuit over time."""

    channels = THEOREM_CHANNELS

    def __init__(
        self,
        mode: Union[TheoremMode, str],
        params: Union[TheoremParameters, Mapping[str, Any]],
        settle: bool = True,
        match_tolerance: float = 0.0,
    ):
        self.mode = TheoremMode.parse(mode)
        self.params = params if isinstance(params, TheoremParameters) else TheoremParameters.from_raw(params)
        self.settle = settle
        self.match_tolerance = match_tolerance

    def update(self, **changes):
        """Swaps `mode`, `params`, `settle`, `match_tolerance`, or single parameters such as `rl=10`."""
        if "mode" in changes:
            self.mode = TheoremMode.parse(changes.pop("mode"))
        if "params" in changes:
            params = changes.pop("params")
            self.params = params if isinstance(params, TheoremParameters) else TheoremParameters.from_raw(params)
        if "settle" in changes:
            self.settle = bool(changes.pop("settle"))
        if "match_tolerance" in changes:
            self.match_tolerance = changes.pop("match_tolerance")
        if changes:
            lowered = {str(k).lower(): v for k, v in changes.items()}
            self.params = dataclasses.replace(self.params, **lowered)

    def __call__(self, time_s: float) -> Dict[str, Any]:
        solution = solve_theorem(self.mode, self.params, self.match_tolerance)
        alpha = settle_fraction(time_s, self.params.rl) if self.settle else 1.0
        values = solution.as_dict()
        values["probeV"] = solution.probe_v * alpha
        values["probeI"] = solution.probe_i * alpha
        values["power"] = solution.power * alpha
        values["alpha"] = alpha
        values["mode"] = self.mode.value
        return values


class DeviationSampler:
    """Records a practical/theoretical pair and its error metrics."""

    channels = DEVIATION_CHANNELS

    def __init__(self, practical: Any = None, theoretical: Any = None):
        self.practical = practical
        self.theoretical = theoretical

    def update(self, **changes):
        unknown = set(changes) - {"practical", "theoretical"}
        if unknown:
            raise TypeError(f"Unknown deviation parameter(s): {sorted(unknown)}")
        self.practical = changes.get("practical", self.practical)
        self.theoretical = changes.get("theoretical", self.theoretical)

    def __call__(self, time_s: float) -> Dict[str, Any]:
        result = analyze_deviation(self.practical, self.theoretical)
        values = {
            "practical": finite_or(self.practical, 0.0),
            "theoretical": finite_or(self.theoretical, 0.0),
        }
        values.update(result.as_dict())
        return values
