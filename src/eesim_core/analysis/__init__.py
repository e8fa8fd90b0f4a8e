# src/eesim_core/analysis/__init__.py
"""
Public interface of the pure analysis functions: network reduction, transient
response, theorem solving and deviation analysis, plus their result contracts.
"""
from .results import (
    DeviationResult,
    GroupEquivalent,
    ReductionResult,
    TheoremSolution,
    TransientCurve,
    TransientState,
)
from .reduction import NetworkReducer, reduce_network, reduce_group, arithmetic_sum, harmonic_sum
from .transient import TransientSolver, instant_at, response_curve, time_constant
from .theorems import TheoremMode, TheoremSolver, solve_theorem, is_power_matched
from .deviation import DeviationAnalyzer, analyze_deviation

__all__ = [
    # Result Contracts
    "DeviationResult",
    "GroupEquivalent",
    "ReductionResult",
    "TheoremSolution",
    "TransientCurve",
    "TransientState",
    # Network Reduction
    "NetworkReducer",
    "reduce_network",
    "reduce_group",
    "arithmetic_sum",
    "harmonic_sum",
    # Transient Response
    "TransientSolver",
    "instant_at",
    "response_curve",
    "time_constant",
    # Theorems
    "TheoremMode",
    "TheoremSolver",
    "solve_theorem",
    "is_power_matched",
    # Deviation
    "DeviationAnalyzer",
    "analyze_deviation",
]
