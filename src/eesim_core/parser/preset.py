# src/eesim_core/parser/preset.py
import json
import logging
import math
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Union

import cerberus
import yaml

from ..data_structures import ComponentKind, ElectricalContext, Network, to_float
from ..errors import DiagnosableError, PresetLoadError
from .exceptions import ParsingError, SchemaValidationError

logger = logging.getLogger(__name__)

# Defaults of a freshly created note in the notes workspace.
NOTE_DEFAULT_SOURCE_VOLTAGE = 12.0
NOTE_DEFAULT_SERIES_RESISTANCE = 10.0


@dataclass(frozen=True)
class Preset:
    """A saved network together with the conditions it is simulated under."""
    component_kind: ComponentKind
    network: Network
    context: ElectricalContext
    name: Optional[str] = None
    manual_current: Optional[float] = None


class PresetLoader:
    """
    Validates preset documents against a strict Cerberus schema and rehydrates them
    into `Preset` objects. Magnitudes are kept exactly as stored; the reducer
    decides which of them are usable.
    """
    _numeric_rule = {"type": ["number", "string"], "nullable": True}

    _group_schema = {
        "kind": {"type": "string", "required": True, "allowed": ["series", "parallel"]},
        "magnitudes": {"type": "list", "required": True, "schema": _numeric_rule},
    }

    _schema = {
        "name": {"type": "string", "required": False, "nullable": True},
        "componentKind": {"type": "string", "required": True, "allowed": ["capacitive", "inductive"]},
        "network": {"type": "list", "required": True, "schema": {"type": "dict", "schema": _group_schema}},
        "context": {
            "type": "dict", "required": True, "schema": {
                "sourceVoltage": dict(_numeric_rule, required=True),
                "seriesResistance": dict(_numeric_rule, required=True),
            },
        },
        "manualCurrent": {"type": ["number", "string"], "required": False, "nullable": True},
    }

    def __init__(self):
        self._validator = cerberus.Validator(self._schema)
        self._validator.allow_unknown = False
        logger.debug("PresetLoader initialized with strict structural validation rules.")

    def load_dict(self, data: Any, file_path: Optional[Path] = None) -> Preset:
        """Validates a decoded document and rehydrates it."""
        if not isinstance(data, Mapping):
            raise ParsingError(details="The root of a preset must be a mapping.", file_path=file_path)
        if not self._validator.validate(dict(data)):
            name = data.get("name")
            raise SchemaValidationError(
                self._validator.errors, file_path, preset_name=name if isinstance(name, str) else None
            )
        document = self._validator.document

        component_kind = ComponentKind.parse(document["componentKind"])
        context = document["context"]
        manual_current = to_float(document.get("manualCurrent"))
        return Preset(
            component_kind=component_kind,
            network=Network.from_raw(document["network"]),
            context=ElectricalContext(
                source_voltage=context["sourceVoltage"],
                series_resistance=context["seriesResistance"],
                component_kind=component_kind,
            ),
            name=document.get("name"),
            manual_current=manual_current if math.isfinite(manual_current) else None,
        )

    def load_file(self, path: Union[str, Path]) -> Preset:
        """Loads a `.json` preset with json, anything else with YAML."""
        source = Path(path).resolve()
        logger.info(f"Loading preset from: {source}")
        return self.load_dict(self._read(source), file_path=source)

    def _read(self, source: Path) -> Any:
        if not source.is_file():
            raise ParsingError(details=f"Preset file not found at path: {source}", file_path=source)
        try:
            with source.open("r", encoding="utf-8") as f:
                if source.suffix.lower() == ".json":
                    content = json.load(f)
                else:
                    content = yaml.safe_load(f)
        except PermissionError as e:
            raise ParsingError(details=f"Permission denied when trying to read file: {e}", file_path=source) from e
        except json.JSONDecodeError as e:
            raise ParsingError(details=f"Invalid JSON syntax: {e}", file_path=source) from e
        except yaml.YAMLError as e:
            raise ParsingError(details=f"Invalid YAML syntax: {e}", file_path=source) from e
        if content is None:
            raise ParsingError(details="The preset file is empty or contains no valid content.", file_path=source)
        return content

    @staticmethod
    def from_note(note: Mapping[str, Any]) -> Preset:
        """
        Converts a stored note of the notes workspace, e.g.
        {"title": ..., "compType": "inductor", "preset": {"Vsup": 5, "Rs": 8, "manualI": ""},
         "diagram": {"groups": [{"type": "series", "values": [50]}]}}
        """
        component_kind = ComponentKind.parse(note.get("compType") or "capacitor")
        settings = note.get("preset") or {}
        diagram = note.get("diagram") or {}
        manual_current = to_float(settings.get("manualI"))
        return Preset(
            component_kind=component_kind,
            network=Network.from_raw(diagram.get("groups")),
            context=ElectricalContext(
                source_voltage=settings.get("Vsup", NOTE_DEFAULT_SOURCE_VOLTAGE),
                series_resistance=settings.get("Rs", NOTE_DEFAULT_SERIES_RESISTANCE),
                component_kind=component_kind,
            ),
            name=note.get("title"),
            manual_current=manual_current if math.isfinite(manual_current) else None,
        )


def preset_to_dict(preset: Preset) -> Dict[str, Any]:
    """The document form of a preset, as accepted by `PresetLoader.load_dict`."""
    document: Dict[str, Any] = {
        "componentKind": preset.component_kind.value,
        "network": preset.network.to_list(),
        "context": {
            "sourceVoltage": preset.context.source_voltage,
            "seriesResistance": preset.context.series_resistance,
        },
    }
    if preset.name is not None:
        document["name"] = preset.name
    if preset.manual_current is not None:
        document["manualCurrent"] = preset.manual_current
    return document


def dump_file(preset: Preset, path: Union[str, Path]) -> Path:
    """Writes a preset as JSON for a `.json` suffix, YAML otherwise."""
    target = Path(path)
    document = preset_to_dict(preset)
    with target.open("w", encoding="utf-8") as f:
        if target.suffix.lower() == ".json":
            json.dump(document, f, indent=2)
        else:
            yaml.safe_dump(document, f, sort_keys=False)
    logger.info(f"Preset written to: {target}")
    return target


def load_preset_file(path: Union[str, Path]) -> Preset:
    """
    Loads a preset for user-facing callers. Any diagnosable failure is re-raised as
    a `PresetLoadError` carrying the full diagnostic report.
    """
    try:
        return PresetLoader().load_file(path)
    except DiagnosableError as e:
        diagnostic_report = e.get_diagnostic_report()
        logger.error(f"Preset loading failed:{diagnostic_report}")
        raise PresetLoadError(diagnostic_report) from e
