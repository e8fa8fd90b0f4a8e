# src/eesim_core/parser/__init__.py
from .exceptions import ParsingError, SchemaValidationError
from .netlist import ParsedNetwork, parse_network_text
from .preset import Preset, PresetLoader, dump_file, load_preset_file, preset_to_dict

__all__ = [
    # Network Text
    "ParsedNetwork",
    "parse_network_text",
    # Presets
    "Preset",
    "PresetLoader",
    "preset_to_dict",
    "dump_file",
    "load_preset_file",
    # Exceptions
    "ParsingError",
    "SchemaValidationError",
]
