# src/eesim_core/parser/exceptions.py
"""
Diagnosable exceptions for preset loading and network-document validation.

`ParsingError` covers file-level problems (missing file, unreadable content,
invalid JSON/YAML syntax). `SchemaValidationError` covers documents that load but
do not have the shape of a preset. Both render a full diagnostic report.
"""
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional

from ..errors import DiagnosableError, format_diagnostic_report


class BaseParsingError(DiagnosableError):
    """Common base for every preset parsing and schema validation error."""
    def get_diagnostic_report(self) -> str:
        return format_diagnostic_report(
            error_type="Generic Parsing Error",
            details=str(self),
            suggestion="Please check the format and content of the preset document.",
            context={}
        )


def _describe_source(file_path: Optional[Path]) -> str:
    return f"file '{file_path}'" if file_path is not None else "in-memory document"


@dataclass(frozen=True)
class ParsingError(BaseParsingError):
    """Raised when a preset file cannot be read or decoded at all."""
    details: str
    file_path: Optional[Path] = None

    def __str__(self):
        return f"Parsing error in {_describe_source(self.file_path)}: {self.details}"

    def get_diagnostic_report(self) -> str:
        return format_diagnostic_report(
            error_type="Preset Parsing or File Error",
            details=self.details,
            suggestion="Ensure the file exists, is readable, and contains valid JSON or YAML.",
            context={'source_file': self.file_path}
        )


@dataclass(frozen=True)
class SchemaValidationError(BaseParsingError):
    """
    Raised when Cerberus rejects a decoded document. `errors` is the validator's
    error tree, keyed by field name.
    """
    errors: Dict[str, Any]
    file_path: Optional[Path] = None
    preset_name: Optional[str] = None

    def _error_lines(self, prefix: str):
        return [f"{prefix}'{field}': {messages}" for field, messages in sorted(self.errors.items(), key=lambda kv: str(kv[0]))]

    def __str__(self):
        return (
            f"Preset schema validation failed for {_describe_source(self.file_path)}:\n"
            + "\n".join(self._error_lines("  - In field "))
        )

    def get_diagnostic_report(self) -> str:
        error_list_str = "\n".join(self._error_lines("  - Field "))
        details = (
            "The preset does not conform to the required structure.\n"
            f"See details for {len(self.errors)} issue(s) below:\n\n{error_list_str}"
        )
        return format_diagnostic_report(
            error_type="Preset Schema Validation Error",
            details=details,
            suggestion=(
                "A preset needs 'componentKind' ('capacitive' or 'inductive'), a 'network' list of "
                "{'kind': 'series'|'parallel', 'magnitudes': [...]} groups, and a 'context' with "
                "'sourceVoltage' and 'seriesResistance'."
            ),
            context={'source_file': self.file_path, 'preset': self.preset_name, 'fields': self.errors}
        )
