# --- src/eesim_core/constants.py ---
import logging

logger = logging.getLogger(__name__)

# --- Numerical Floors and Clamps ---

#: Smallest resistance the solvers will ever divide by. User input of 0, a
#: negative number, or a non-finite value is replaced by this floor.
#: Value: 1e-6 Ohm.
RESISTANCE_FLOOR_OHM: float = 1.0e-6

#: Bounds applied to every RC / RL time constant before it is used as a divisor
#: in an exponent. Keeps e^(-t/tau) well-defined for extreme component values.
TAU_MIN_S: float = 1.0e-9
TAU_MAX_S: float = 1.0e9

#: Linear amplitude floor applied before log10 in amplitude -> dB conversion.
DB_LINEAR_FLOOR: float = 1.0e-12

# --- Theorem Scope Animation ---

#: The theorem sampler ramps probe values with a first-order settle whose
#: time constant is RL * THEOREM_SETTLE_SCALE seconds, clamped to the range below.
THEOREM_SETTLE_SCALE: float = 1.0e-3
THEOREM_SETTLE_TAU_MIN_S: float = 0.005
THEOREM_SETTLE_TAU_MAX_S: float = 2.0

# --- Simulation Clock Defaults ---

DEFAULT_CADENCE_MS: float = 80.0
DEFAULT_HISTORY_CAP: int = 720
DEFAULT_SEED_LENGTH: int = 160

logger.debug("Defined core constants: RESISTANCE_FLOOR_OHM, TAU_MIN_S, TAU_MAX_S, DB_LINEAR_FLOOR")
