# src/eesim_core/__init__.py
import logging
from .log_config import setup_logging

setup_logging()
logger = logging.getLogger(__name__)
logger.info("EESim Core package initialized.")

from .units import (
    ureg, Quantity, CANONICAL_UNITS,
    to_base, from_base, to_si, db_to_linear, linear_to_db,
    parse_magnitude, convert_electrical, format_quantity,
)
from .data_structures import (
    ComponentKind, GroupKind, ComponentGroup, Network, ElectricalContext,
    TheoremParameters, Sample, SimulationSnapshot,
    TRANSIENT_CHANNELS, THEOREM_CHANNELS, DEVIATION_CHANNELS,
)
from .analysis import (
    reduce_network, instant_at, response_curve, time_constant,
    TheoremMode, solve_theorem, analyze_deviation,
)
from .simulation import (
    SimulationClock, ClockState, History, parse_clock_config,
    TransientSampler, TheoremSampler, DeviationSampler,
)
from .parser import parse_network_text, PresetLoader, load_preset_file
from .export import history_rows, write_history_csv
from .errors import EESimError, PresetLoadError

__all__ = [
    # Units
    "ureg", "Quantity", "CANONICAL_UNITS",
    "to_base", "from_base", "to_si", "db_to_linear", "linear_to_db",
    "parse_magnitude", "convert_electrical", "format_quantity",
    # Data Structures
    "ComponentKind", "GroupKind", "ComponentGroup", "Network", "ElectricalContext",
    "TheoremParameters", "Sample", "SimulationSnapshot",
    "TRANSIENT_CHANNELS", "THEOREM_CHANNELS", "DEVIATION_CHANNELS",
    # Analysis
    "reduce_network", "instant_at", "response_curve", "time_constant",
    "TheoremMode", "solve_theorem", "analyze_deviation",
    # Simulation
    "SimulationClock", "ClockState", "History", "parse_clock_config",
    "TransientSampler", "TheoremSampler", "DeviationSampler",
    # Documents
    "parse_network_text", "PresetLoader", "load_preset_file",
    "history_rows", "write_history_csv",
    # Top-Level Errors (Actionable Diagnostics)
    "EESimError", "PresetLoadError",
]
