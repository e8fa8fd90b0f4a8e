# src/eesim_core/analysis/reduction.py
"""
Series/parallel reduction of a component network to a single equivalent value.

The network has a fixed two-level topology: each group is internally series or
parallel, and the groups themselves are always parallel branches. Any magnitude
that is not a finite, positive number is treated as absent rather than raising.
"""
import logging
import math
from typing import Any, Iterable, Union

import numpy as np

from ..data_structures import ComponentGroup, ComponentKind, ElectricalContext, GroupKind, Network, to_float
from ..units import si_scale
from .results import GroupEquivalent, ReductionResult

logger = logging.getLogger(__name__)


def _usable_mask(values: np.ndarray) -> np.ndarray:
    with np.errstate(invalid="ignore"):
        return np.isfinite(values) & (values > 0)


def arithmetic_sum(values: Iterable[float]) -> float:
    """Sum of the finite positive entries; 0 when there are none."""
    arr = np.asarray(list(values), dtype=float)
    usable = arr[_usable_mask(arr)]
    if usable.size == 0:
        return 0.0
    return float(np.sum(usable))


def harmonic_sum(values: Iterable[float]) -> float:
    """1 / sum(1/x) over the finite positive entries; 0 when there are none."""
    arr = np.asarray(list(values), dtype=float)
    usable = arr[_usable_mask(arr)]
    if usable.size == 0:
        return 0.0
    with np.errstate(divide="ignore", over="ignore"):
        denominator = float(np.sum(1.0 / usable))
    if not math.isfinite(denominator) or denominator <= 0.0:
        return 0.0
    return 1.0 / denominator


def _finite_or_zero(value: float, what: str) -> float:
    if math.isfinite(value):
        return value
    logger.warning(f"{what} overflowed to {value}; reporting 0 instead.")
    return 0.0


def _combines_harmonically(component_kind: ComponentKind, group_kind: GroupKind) -> bool:
    # Capacitors add reciprocally in series, inductors reciprocally in parallel.
    if component_kind is ComponentKind.CAPACITIVE:
        return group_kind is GroupKind.SERIES
    return group_kind is GroupKind.PARALLEL


def reduce_group(group: ComponentGroup, component_kind: ComponentKind) -> GroupEquivalent:
    """Reduces one group to its SI equivalent."""
    scale = si_scale(component_kind)
    si_values = np.array([to_float(m) for m in group.magnitudes], dtype=float) * scale
    if _combines_harmonically(component_kind, group.kind):
        equivalent = harmonic_sum(si_values)
    else:
        equivalent = arithmetic_sum(si_values)

    mask = _usable_mask(si_values)
    si_display = tuple(float(v) if ok else math.nan for v, ok in zip(si_values, mask))
    return GroupEquivalent(
        kind=group.kind,
        equivalent=_finite_or_zero(equivalent, f"{group.kind} group equivalent"),
        raw_magnitudes=tuple(group.magnitudes),
        si_magnitudes=si_display,
    )


def reduce_network(
    network: Union[Network, Iterable[Any]],
    context: Union[ElectricalContext, ComponentKind, str],
) -> ReductionResult:
    """
    Folds a network into one equivalent capacitance (F) or inductance (H).

    Args:
        network: A `Network`, or a raw list of group mappings.
        context: The electrical context, or just the component kind.

    Returns:
        A `ReductionResult` whose `equivalent` is finite and >= 0, 0 for an empty network.
    """
    if not isinstance(network, Network):
        network = Network.from_raw(network)
    if isinstance(context, ElectricalContext):
        component_kind = context.component_kind
    else:
        component_kind = ComponentKind.parse(context)

    per_group = tuple(reduce_group(group, component_kind) for group in network)
    group_values = [g.equivalent for g in per_group]

    # The groups are parallel branches: capacitances add, inductances add reciprocally.
    if component_kind is ComponentKind.CAPACITIVE:
        total = arithmetic_sum(group_values)
    else:
        total = harmonic_sum(group_values)
    total = _finite_or_zero(total, "network equivalent")

    logger.debug(f"Reduced {len(per_group)} {component_kind} group(s) to {total:.6e} (SI).")
    return ReductionResult(equivalent=total, per_group=per_group, component_kind=component_kind)


class NetworkReducer:
    """Object-style entry point for callers that hold a reducer instance."""

    def reduce(
        self,
        network: Union[Network, Iterable[Any]],
        context: Union[ElectricalContext, ComponentKind, str],
    ) -> ReductionResult:
        return reduce_network(network, context)
