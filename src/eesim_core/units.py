# --- src/eesim_core/units.py ---
"""
Stateless unit conversions backed by a single pint registry.

Every function here is total: unrecognized units fall back to a best-effort numeric
reading of the value, and unreadable values produce NaN. Nothing raises.
"""
import logging
import math
import re
from functools import lru_cache
from typing import Any, Optional, Tuple

import pint

from .constants import DB_LINEAR_FLOOR
from .data_structures import ComponentKind, to_float

logger = logging.getLogger(__name__)
ureg = pint.UnitRegistry()
Quantity = ureg.Quantity
logger.info("Pint Unit Registry initialized.")

# --- Canonical working units per physical dimension ---
# The first entry of each tuple is the "user" unit the UI works in, the second is SI.
_DIMENSION_UNITS = {
    "capacitance": ("microfarad", "farad"),
    "inductance": ("millihenry", "henry"),
    "frequency": ("hertz", "hertz"),
    "resistance": ("ohm", "ohm"),
    "voltage": ("volt", "volt"),
    "current": ("ampere", "ampere"),
    "power": ("watt", "watt"),
}

_DIMENSIONALITIES = {
    name: ureg.parse_units(units[1]).dimensionality for name, units in _DIMENSION_UNITS.items()
}

#: The user-facing unit each component kind's raw magnitudes are expressed in.
CANONICAL_UNITS = {
    ComponentKind.CAPACITIVE: "uF",
    ComponentKind.INDUCTIVE: "mH",
}

# Lower-case spellings from hand-typed input that pint would either reject or
# misread (pint reads "mh" as milli-hour, for instance).
_UNIT_ALIASES = {
    "pf": "picofarad",
    "nf": "nanofarad",
    "uf": "microfarad",
    "mf": "millifarad",
    "f": "farad",
    "nh": "nanohenry",
    "uh": "microhenry",
    "mh": "millihenry",
    "h": "henry",
    "hz": "hertz",
    "khz": "kilohertz",
    "ohm": "ohm",
    "ohms": "ohm",
    "kohm": "kiloohm",
}

# Bare metric prefixes, read in the dimension of the component kind.
_BARE_PREFIXES = {"p": "pico", "n": "nano", "u": "micro", "m": "milli"}

_DB_UNITS = ("db",)
_LINEAR_UNITS = ("linear", "lin", "ratio")

_TOKEN_RE = re.compile(r"^([+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)\s*([a-zA-Z\u00b5\u03bc\u03a9\u2126]*)$")


def _normalize_unit_text(unit: str) -> str:
    """Maps both micro signs to 'u' and the ohm sign to 'ohm'."""
    return (
        unit.strip()
        .replace("\u00b5", "u")  # MICRO SIGN
        .replace("\u03bc", "u")  # GREEK SMALL LETTER MU
        .replace("\u03a9", "ohm")  # GREEK CAPITAL LETTER OMEGA
        .replace("\u2126", "ohm")  # OHM SIGN
    )


@lru_cache(maxsize=256)
def _resolve_unit(unit: str) -> Optional[Tuple[str, str]]:
    """
    Resolves a unit string to (pint unit expression, dimension name).
    Returns None if the unit is unknown or belongs to an unsupported dimension.
    """
    text = _normalize_unit_text(unit)
    if not text:
        return None
    candidate = _UNIT_ALIASES.get(text.lower(), text)
    try:
        parsed = ureg.parse_units(candidate)
    except pint.UndefinedUnitError:
        logger.debug(f"Unit '{unit}' is not known to the registry.")
        return None
    except Exception as e:
        # The pint tokenizer raises assorted errors on free-form text.
        logger.debug(f"Unit '{unit}' could not be parsed: {e}")
        return None
    for dimension, dimensionality in _DIMENSIONALITIES.items():
        if parsed.dimensionality == dimensionality:
            return candidate, dimension
    logger.debug(f"Unit '{unit}' has unsupported dimensionality {parsed.dimensionality}.")
    return None


@lru_cache(maxsize=256)
def _scale(from_unit: str, to_unit: str) -> float:
    return float(Quantity(1.0, from_unit).to(to_unit).magnitude)


def _is_db(unit: str) -> bool:
    return unit.strip().lower() in _DB_UNITS


def _is_linear(unit: str) -> bool:
    return unit.strip().lower() in _LINEAR_UNITS


def db_to_linear(db: Any) -> float:
    """Amplitude ratio for a dB value: 10^(dB/20)."""
    value = to_float(db)
    if math.isnan(value):
        return math.nan
    try:
        return 10.0 ** (value / 20.0)
    except OverflowError:
        return math.inf


def linear_to_db(linear: Any) -> float:
    """dB value for an amplitude ratio: 20*log10(x), with x floored to 1e-12."""
    value = to_float(linear)
    if math.isnan(value):
        return math.nan
    return 20.0 * math.log10(max(value, DB_LINEAR_FLOOR))


def to_base(value: Any, unit: str) -> float:
    """
    Converts `value` expressed in `unit` into the canonical working unit of that
    unit's dimension (uF, mH, Hz, ohm, V, A, W). For "dB" the base is a linear
    amplitude ratio.
    """
    unit = str(unit or "")
    if _is_db(unit):
        return db_to_linear(value)
    number = to_float(value)
    if _is_linear(unit) or math.isnan(number):
        return number
    resolved = _resolve_unit(unit)
    if resolved is None:
        return number
    candidate, dimension = resolved
    return number * _scale(candidate, _DIMENSION_UNITS[dimension][0])


def from_base(value: Any, unit: str) -> float:
    """Inverse of `to_base`: converts a canonical working value into `unit`."""
    unit = str(unit or "")
    if _is_db(unit):
        return linear_to_db(value)
    number = to_float(value)
    if _is_linear(unit) or math.isnan(number):
        return number
    resolved = _resolve_unit(unit)
    if resolved is None:
        return number
    candidate, dimension = resolved
    return number * _scale(_DIMENSION_UNITS[dimension][0], candidate)


def to_si(value: Any, unit: str) -> float:
    """Converts `value` in `unit` to the SI unit of its dimension (F, H, Hz, ohm, V, A, W)."""
    number = to_float(value)
    if math.isnan(number):
        return number
    resolved = _resolve_unit(str(unit or ""))
    if resolved is None:
        return number
    candidate, dimension = resolved
    return number * _scale(candidate, _DIMENSION_UNITS[dimension][1])


def si_scale(kind: ComponentKind) -> float:
    """The factor that takes a raw magnitude of `kind` (uF or mH) to SI (F or H)."""
    return to_si(1.0, CANONICAL_UNITS[ComponentKind.parse(kind)])


def unit_kind(unit: str) -> Optional[ComponentKind]:
    """The component kind a unit string measures, or None if it is neither capacitance nor inductance."""
    resolved = _resolve_unit(str(unit or ""))
    if resolved is None:
        return None
    dimension = resolved[1]
    if dimension == "capacitance":
        return ComponentKind.CAPACITIVE
    if dimension == "inductance":
        return ComponentKind.INDUCTIVE
    return None


def split_magnitude_token(token: Any) -> Tuple[float, str]:
    """
    Splits a token such as '10uF', '4.7 nF' or '3' into (number, unit suffix).
    A token that does not look like number+unit yields (NaN, '').
    """
    if isinstance(token, (int, float)) and not isinstance(token, bool):
        return float(token), ""
    text = str(token if token is not None else "").strip().rstrip(",;")
    match = _TOKEN_RE.match(text)
    if not match:
        return math.nan, ""
    return float(match.group(1)), match.group(2)


def parse_magnitude(token: Any, kind: Optional[ComponentKind] = None) -> float:
    """
    Reads a hand-typed component value into user units (uF for capacitance, mH for
    inductance).

    A bare metric prefix ('10u', '4m') is read in the dimension of `kind`; with no
    kind given, 'm' means millihenry and the other prefixes mean farads. Units this
    module does not recognize leave the number unscaled.
    """
    number, suffix = split_magnitude_token(token)
    if math.isnan(number) or not suffix:
        return number

    normalized = _normalize_unit_text(suffix).lower()
    if normalized in _BARE_PREFIXES:
        if kind is None:
            kind = ComponentKind.INDUCTIVE if normalized == "m" else ComponentKind.CAPACITIVE
        base = "farad" if ComponentKind.parse(kind) is ComponentKind.CAPACITIVE else "henry"
        return to_base(number, _BARE_PREFIXES[normalized] + base)
    return to_base(number, suffix)


def convert_electrical(
    value: Any,
    from_unit: str,
    to_unit: str,
    voltage: Any = None,
    current: Any = None,
    resistance: Any = None,
) -> float:
    """
    Converts between volts, amperes and watts using P = V*I and V = I*R.

    The quantity that is not being converted has to be supplied: V<->W needs
    `current`, A<->W needs `voltage`, V<->A needs `resistance`. Missing or zero
    context produces NaN.
    """
    number = to_float(value)
    if not math.isfinite(number):
        return math.nan
    source, target = str(from_unit).strip().upper(), str(to_unit).strip().upper()
    if source == target:
        return number

    v, i, r = to_float(voltage), to_float(current), to_float(resistance)
    pair = (source, target)
    if pair == ("V", "W"):
        return number * i if math.isfinite(i) else math.nan
    if pair == ("A", "W"):
        return number * v if math.isfinite(v) else math.nan
    if pair == ("W", "V"):
        return number / i if math.isfinite(i) and i != 0 else math.nan
    if pair == ("W", "A"):
        return number / v if math.isfinite(v) and v != 0 else math.nan
    if pair == ("V", "A"):
        return number / r if math.isfinite(r) and r != 0 else math.nan
    if pair == ("A", "V"):
        return number * r if math.isfinite(r) and r != 0 else math.nan
    logger.debug(f"No electrical conversion from '{from_unit}' to '{to_unit}'.")
    return math.nan


def format_quantity(value: Any, unit: str, precision: int = 6) -> str:
    """Rounds and labels a value for display; non-finite values render as '--'."""
    number = to_float(value)
    if not math.isfinite(number):
        return "--"
    return f"{round(number, precision):g} {unit}".strip()
