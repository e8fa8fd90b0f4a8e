# src/eesim_core/analysis/theorems.py
"""
Steady-state solutions for the fixed teaching topologies.

Each mode evaluates one hard-wired circuit: two sources feeding a load
(superposition), a Thevenin source driving a load (maximum power transfer), a
two-source network reduced to its Thevenin/Norton equivalent, and a voltage
source converted to Norton form. All resistances arrive floored to a strictly
positive minimum, so every divisor below is positive.
"""
import logging
import math
from enum import Enum
from typing import Any, Mapping, Union

from ..data_structures import TheoremParameters
from .results import TheoremSolution

logger = logging.getLogger(__name__)


class TheoremMode(Enum):
    SUPERPOSITION = "superposition"
    MAX_POWER_TRANSFER = "maxpower"
    THEVENIN_NORTON = "thevenin"
    SOURCE_TRANSFORMATION = "sourcetrans"
    VOLTAGE_DIVIDER = "divider"

    @classmethod
    def parse(cls, label: Any) -> "TheoremMode":
        """
        Accepts the UI labels ('superposition', 'maxpower', 'thevenin', 'sourcetrans')
        as well as member names. Unrecognized labels fall back to VOLTAGE_DIVIDER.
        """
        if isinstance(label, cls):
            return label
        key = str(label or "superposition").strip().lower().replace("-", "_").replace(" ", "_")
        mode = _MODE_ALIASES.get(key)
        if mode is None:
            logger.warning(f"Unknown theorem mode '{label}'; falling back to a single-source voltage divider.")
            return cls.VOLTAGE_DIVIDER
        return mode


_MODE_ALIASES = {}
for _mode in TheoremMode:
    _MODE_ALIASES[_mode.value] = _mode
    _MODE_ALIASES[_mode.name.lower()] = _mode
_MODE_ALIASES.update({
    "max_power": TheoremMode.MAX_POWER_TRANSFER,
    "maximum_power_transfer": TheoremMode.MAX_POWER_TRANSFER,
    "thevenin_norton": TheoremMode.THEVENIN_NORTON,
    "norton": TheoremMode.THEVENIN_NORTON,
    "source_transformation": TheoremMode.SOURCE_TRANSFORMATION,
    "voltage_divider": TheoremMode.VOLTAGE_DIVIDER,
})


def parallel(r_a: float, r_b: float) -> float:
    """Parallel combination of two positive resistances."""
    return 1.0 / (1.0 / r_a + 1.0 / r_b)


def is_power_matched(r_load: float, r_thevenin: float, rel_tol: float = 0.0) -> bool:
    """
    The maximum-power condition RL == Rth.

    With the default `rel_tol=0.0` this is an exact comparison. Pass a tolerance
    (e.g. 0.01 for 1%) to accept loads within a band around Rth.
    """
    if rel_tol <= 0.0:
        return r_load == r_thevenin
    return math.isclose(r_load, r_thevenin, rel_tol=rel_tol)


def _superposition(p: TheoremParameters) -> TheoremSolution:
    v1 = p.v1 * p.rl / (p.r1 + p.rl)
    v2 = p.v2 * p.rl / (p.r2 + p.rl)
    probe_v = v1 + v2
    probe_i = probe_v / p.rl
    return TheoremSolution(probe_v=probe_v, probe_i=probe_i, power=probe_v * probe_i)


def _max_power_transfer(p: TheoremParameters, match_tolerance: float) -> TheoremSolution:
    vth, rth = p.v1, p.rs
    probe_i = vth / (rth + p.rl)
    probe_v = probe_i * p.rl
    return TheoremSolution(
        probe_v=probe_v,
        probe_i=probe_i,
        power=probe_v * probe_i,
        vth=vth,
        rth=rth,
        matched=is_power_matched(p.rl, rth, match_tolerance),
    )


def _thevenin_norton(p: TheoremParameters) -> TheoremSolution:
    # Open-circuit voltage at the load node with both sources active.
    vth = p.v1 * p.r2 / (p.r1 + p.r2) + p.v2 * p.r1 / (p.r1 + p.r2)
    rth = parallel(p.r1, p.r2)
    probe_v = vth * p.rl / (rth + p.rl)
    probe_i = probe_v / p.rl
    return TheoremSolution(
        probe_v=probe_v,
        probe_i=probe_i,
        power=probe_v * probe_i,
        vth=vth,
        rth=rth,
        i_n=vth / rth,
    )


def _source_transformation(p: TheoremParameters) -> TheoremSolution:
    i_n = p.v1 / p.rs
    probe_v = i_n * parallel(p.rs, p.rl)
    probe_i = probe_v / p.rl
    # The untransformed series circuit, for comparison.
    series_v = p.v1 * p.rl / (p.rs + p.rl)
    return TheoremSolution(
        probe_v=probe_v,
        probe_i=probe_i,
        power=probe_v * probe_i,
        vth=p.v1,
        rth=p.rs,
        i_n=i_n,
        series_probe_v=series_v,
        series_probe_i=series_v / p.rl,
    )


def _voltage_divider(p: TheoremParameters) -> TheoremSolution:
    probe_v = p.v1 * p.rl / (p.r1 + p.rl)
    probe_i = probe_v / p.rl
    return TheoremSolution(probe_v=probe_v, probe_i=probe_i, power=probe_v * probe_i)


def solve_theorem(
    mode: Union[TheoremMode, str],
    params: Union[TheoremParameters, Mapping[str, Any]],
    match_tolerance: float = 0.0,
) -> TheoremSolution:
    """
    Solves the selected topology for the load probe and the derived equivalents.

    Args:
        mode: A `TheoremMode` or one of its labels.
        params: `TheoremParameters`, or a raw mapping that will be normalized.
        match_tolerance: Relative tolerance for the maximum-power 'matched' flag.
            0 keeps the exact comparison.

    Returns:
        A `TheoremSolution`; fields that do not apply to the mode are 0.
    """
    mode = TheoremMode.parse(mode)
    if not isinstance(params, TheoremParameters):
        params = TheoremParameters.from_raw(params)

    if mode is TheoremMode.SUPERPOSITION:
        return _superposition(params)
    if mode is TheoremMode.MAX_POWER_TRANSFER:
        return _max_power_transfer(params, match_tolerance)
    if mode is TheoremMode.THEVENIN_NORTON:
        return _thevenin_norton(params)
    if mode is TheoremMode.SOURCE_TRANSFORMATION:
        return _source_transformation(params)
    return _voltage_divider(params)


class TheoremSolver:
    """Object-style entry point; holds the tolerance used for the matched flag."""

    def __init__(self, match_tolerance: float = 0.0):
        self.match_tolerance = match_tolerance

    def solve(self, mode, params) -> TheoremSolution:
        return solve_theorem(mode, params, self.match_tolerance)
