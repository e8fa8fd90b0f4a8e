# src/eesim_core/simulation/__init__.py
from .config import ClockConfig, ConfigParsingError, parse_clock_config
from .history import History
from .clock import ClockState, SimulationClock
from .samplers import DeviationSampler, TheoremSampler, TransientSampler, settle_fraction

__all__ = [
    # Configuration
    "ClockConfig",
    "ConfigParsingError",
    "parse_clock_config",
    # Clock
    "History",
    "ClockState",
    "SimulationClock",
    # Sample Functions
    "TransientSampler",
    "TheoremSampler",
    "DeviationSampler",
    "settle_fraction",
]
