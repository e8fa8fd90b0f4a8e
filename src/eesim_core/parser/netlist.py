# src/eesim_core/parser/netlist.py
"""
Reads hand-written network descriptions into a `Network`.

Two input styles are accepted. A JSON array of groups:

    [{"type": "series", "values": ["10uF", 22]}, {"kind": "parallel", "magnitudes": [4.7]}]

or one group per line, with commas, colons and tabs treated as whitespace:

    C series 10uF 22uF
    L parallel 4mH 10mH
    series, 10, 20
    parallel: 10, 20
    group parallel 5
    10 20              (bare numbers form a series group)

Magnitudes end up in user units (uF or mH). The component kind comes from the
first unit suffix or leading C/L token found, else from `default_kind`. Tokens
that cannot be read as a magnitude of that kind are dropped and reported.
"""
import json
import logging
import math
import re
from dataclasses import dataclass
from typing import Any, List, Optional, Sequence, Tuple

from ..data_structures import ComponentGroup, ComponentKind, GroupKind, Network
from ..units import parse_magnitude, split_magnitude_token, unit_kind

logger = logging.getLogger(__name__)

_SERIES_WORDS = ("series", "s")
_PARALLEL_WORDS = ("parallel", "p", "par")
_LEADER_RE = re.compile(r"^(c|cap|capacitor|capacitance|l|ind|inductor|inductance)\d*$", re.IGNORECASE)
_SEPARATOR_RE = re.compile(r"[,;:\t]+")


@dataclass(frozen=True)
class ParsedNetwork:
    component_kind: ComponentKind
    network: Network
    dropped_tokens: Tuple[str, ...] = ()


def _group_word(token: str) -> Optional[GroupKind]:
    lowered = token.lower()
    if lowered in _SERIES_WORDS:
        return GroupKind.SERIES
    if lowered in _PARALLEL_WORDS:
        return GroupKind.PARALLEL
    return None


def _leader_kind(token: str) -> Optional[ComponentKind]:
    match = _LEADER_RE.match(token)
    if not match:
        return None
    return ComponentKind.parse(match.group(1))


def _token_kind(token: Any) -> Optional[ComponentKind]:
    _, suffix = split_magnitude_token(token)
    return unit_kind(suffix) if suffix else None


def _split_line(line: str) -> Tuple[GroupKind, List[str], Optional[ComponentKind]]:
    """Returns (group kind, value tokens, component kind named by a leading token)."""
    parts = _SEPARATOR_RE.sub(" ", line).split()
    first = parts[0]

    group_kind = _group_word(first)
    if group_kind is not None:
        return group_kind, parts[1:], None

    if first.lower() == "group" and len(parts) > 1:
        return _group_word(parts[1]) or GroupKind.SERIES, parts[2:], None

    leader = _leader_kind(first)
    if leader is not None:
        if len(parts) > 1 and _group_word(parts[1]) is not None:
            return _group_word(parts[1]), parts[2:], leader
        return GroupKind.SERIES, parts[1:], leader

    return GroupKind.SERIES, parts, None


def _convert(tokens: Sequence[Any], kind: ComponentKind, dropped: List[str]) -> Tuple[float, ...]:
    values = []
    for token in tokens:
        token_kind = _token_kind(token)
        value = parse_magnitude(token, kind)
        if (token_kind is not None and token_kind is not kind) or not math.isfinite(value):
            dropped.append(str(token))
            continue
        values.append(value)
    return tuple(values)


def _parse_json_groups(text: str) -> Optional[List[Tuple[GroupKind, List[Any]]]]:
    try:
        decoded = json.loads(text)
    except ValueError:
        return None
    if not isinstance(decoded, list):
        return None
    groups = []
    for entry in decoded:
        if not isinstance(entry, dict):
            groups.append((GroupKind.SERIES, []))
            continue
        kind = GroupKind.parse(entry.get("kind", entry.get("type", "series")))
        raw_values = entry.get("magnitudes", entry.get("values")) or []
        groups.append((kind, list(raw_values) if isinstance(raw_values, list) else [raw_values]))
    return groups


def parse_network_text(text: Optional[str], default_kind: Any = ComponentKind.CAPACITIVE) -> ParsedNetwork:
    """
    Parses a network description. Never raises on content: blank text gives an
    empty network and unreadable tokens are dropped.
    """
    default_kind = ComponentKind.parse(default_kind)
    if not text or not text.strip():
        return ParsedNetwork(component_kind=default_kind, network=Network())

    detected: Optional[ComponentKind] = None
    raw_groups = _parse_json_groups(text)
    if raw_groups is not None:
        logger.debug(f"Network text decoded as a JSON array of {len(raw_groups)} group(s).")
        for _, tokens in raw_groups:
            for token in tokens:
                detected = detected or _token_kind(token)
    else:
        raw_groups = []
        for line in text.splitlines():
            if not _SEPARATOR_RE.sub(" ", line).strip():
                continue
            group_kind, tokens, leader = _split_line(line.strip())
            detected = detected or leader
            for token in tokens:
                detected = detected or _token_kind(token)
            raw_groups.append((group_kind, tokens))

    component_kind = detected or default_kind
    dropped: List[str] = []
    groups = [
        ComponentGroup(kind=group_kind, magnitudes=_convert(tokens, component_kind, dropped))
        for group_kind, tokens in raw_groups
    ]
    if dropped:
        logger.warning(f"Dropped {len(dropped)} unreadable token(s) from network text: {dropped}")
    logger.debug(f"Parsed {len(groups)} {component_kind} group(s) from network text.")
    return ParsedNetwork(component_kind=component_kind, network=Network(groups=tuple(groups)), dropped_tokens=tuple(dropped))
