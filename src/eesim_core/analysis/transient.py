# src/eesim_core/analysis/transient.py
"""
Closed-form RC / RL step response.

Capacitive networks charge from 0 V toward the supply through the series
resistance; inductive networks energize from 0 A toward Vsup/R. In both cases E is
the energy stored in the reactive element at time t, not the cumulative energy
dissipated in the resistor.
"""
import logging
import math
from typing import Any, Optional

import numpy as np

from ..constants import TAU_MAX_S, TAU_MIN_S
from ..data_structures import ComponentKind, ElectricalContext, to_float
from .results import TransientCurve, TransientState

logger = logging.getLogger(__name__)

_ZERO_STATE = TransientState()


def _clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


def _valid_equivalent(equivalent_si: Any) -> Optional[float]:
    value = to_float(equivalent_si)
    if not math.isfinite(value) or value <= 0.0:
        return None
    return value


def _manual_current(manual_current: Any) -> Optional[float]:
    value = to_float(manual_current)
    return value if math.isfinite(value) else None


def time_constant(equivalent_si: Any, context: ElectricalContext) -> float:
    """
    tau = R*C for capacitive networks and L/R for inductive ones, clamped to
    [TAU_MIN_S, TAU_MAX_S]. Returns 0 when there is no usable equivalent.
    """
    value = _valid_equivalent(equivalent_si)
    if value is None:
        return 0.0
    r = context.series_resistance
    raw_tau = r * value if context.component_kind is ComponentKind.CAPACITIVE else value / r
    return _clamp(raw_tau, TAU_MIN_S, TAU_MAX_S)


def instant_at(
    t_seconds: Any,
    equivalent_si: Any,
    context: ElectricalContext,
    manual_current: Any = None,
) -> TransientState:
    """
    Evaluates the step response at `t_seconds`.

    Args:
        t_seconds: Time since the step, in seconds. Negative or non-finite values are read as 0.
        equivalent_si: Equivalent capacitance (F) or inductance (H) from the reducer.
        context: Supply voltage, series resistance and component kind.
        manual_current: Optional finite current (any sign) that replaces the simulated
            current when computing P. V, I and E still come from the closed-form solution.

    Returns:
        A `TransientState`; the zero state when the equivalent is not a finite positive number.
    """
    value = _valid_equivalent(equivalent_si)
    if value is None:
        return _ZERO_STATE

    t = to_float(t_seconds)
    if not math.isfinite(t) or t < 0.0:
        t = 0.0

    r = context.series_resistance
    vsup = context.source_voltage
    tau = time_constant(value, context)
    decay = math.exp(-t / tau)

    if context.component_kind is ComponentKind.CAPACITIVE:
        c = value
        v = vsup * (1.0 - decay)
        i = (c * vsup / tau) * decay
        e = 0.5 * c * v * v
    else:
        inductance = value
        i_inf = vsup / r
        i = i_inf * (1.0 - decay)
        v = inductance * (i_inf / tau) * decay
        e = 0.5 * inductance * i * i

    override = _manual_current(manual_current)
    p = v * (override if override is not None else i)
    return TransientState(V=v, I=i, P=p, E=e)


def response_curve(
    times: Any,
    equivalent_si: Any,
    context: ElectricalContext,
    manual_current: Any = None,
) -> TransientCurve:
    """
    Vectorized `instant_at` over an array of times. Useful for drawing the full
    charge curve at once instead of waiting for the clock to fill history.
    """
    t = np.asarray(times, dtype=float).reshape(-1)
    t = np.where(np.isfinite(t) & (t > 0.0), t, 0.0)
    zeros = np.zeros_like(t)

    value = _valid_equivalent(equivalent_si)
    if value is None:
        return TransientCurve(times=t, V=zeros, I=zeros.copy(), P=zeros.copy(), E=zeros.copy(), tau=0.0)

    r = context.series_resistance
    vsup = context.source_voltage
    tau = time_constant(value, context)
    decay = np.exp(-t / tau)

    if context.component_kind is ComponentKind.CAPACITIVE:
        v = vsup * (1.0 - decay)
        i = (value * vsup / tau) * decay
        e = 0.5 * value * v * v
    else:
        i_inf = vsup / r
        i = i_inf * (1.0 - decay)
        v = value * (i_inf / tau) * decay
        e = 0.5 * value * i * i

    override = _manual_current(manual_current)
    p = v * (override if override is not None else i)
    logger.debug(f"Computed {t.size}-point {context.component_kind} response curve (tau={tau:.4e} s).")
    return TransientCurve(times=t, V=v, I=i, P=p, E=e, tau=tau)


class TransientSolver:
    """Object-style wrapper over `instant_at` and `response_curve`."""

    def instant_at(self, t_seconds, equivalent_si, context, manual_current=None) -> TransientState:
        return instant_at(t_seconds, equivalent_si, context, manual_current)

    def response_curve(self, times, equivalent_si, context, manual_current=None) -> TransientCurve:
        return response_curve(times, equivalent_si, context, manual_current)

    def time_constant(self, equivalent_si, context) -> float:
        return time_constant(equivalent_si, context)
