# src/eesim_core/errors.py
"""
Error types that can leave the core.

Numeric input never raises; only preset documents and clock configuration do.
Parser failures are `DiagnosableError`s that render a boxed report naming the
preset file, the preset and the offending document fields. User-facing entry
points re-raise them as `PresetLoadError` carrying that report.
"""
import logging
from typing import Any, Iterable, Mapping, Optional

logger = logging.getLogger(__name__)

_REPORT_TITLE = " EESim Core: Diagnostic Report "
_REPORT_WIDTH = 63
_LABEL_WIDTH = 16


class EESimError(Exception):
    """Base class for all custom, user-facing errors in EESim Core."""
    pass


class PresetLoadError(EESimError):
    """
    Raised when a saved preset cannot be turned into a Network/ElectricalContext.
    The message is a pre-formatted diagnostic report.
    """
    pass


class DiagnosableError(Exception):
    """Internal preset errors that can describe themselves to a user."""
    def get_diagnostic_report(self) -> str:
        raise NotImplementedError(f"{type(self).__name__} does not render a diagnostic report.")


def _field_list(fields: Optional[Iterable[Any]]) -> str:
    return ", ".join(f"'{name}'" for name in sorted({str(f) for f in fields or ()}))


def format_diagnostic_report(
    error_type: str,
    details: str,
    suggestion: str = "",
    context: Optional[Mapping[str, Any]] = None,
) -> str:
    """
    Renders the boxed report shared by preset errors.

    `context` may carry 'source_file' (a path), 'preset' (the preset name), and
    'fields' (the offending top-level document keys). Empty entries are skipped.
    """
    context = context or {}
    header = [("Error Type:", error_type)]
    if context.get("source_file"):
        header.append(("Source File:", str(context["source_file"])))
    if context.get("preset"):
        header.append(("Preset:", f"'{context['preset']}'"))
    fields = _field_list(context.get("fields"))
    if fields:
        header.append(("Fields:", fields))

    lines = ["\n", _REPORT_TITLE.center(_REPORT_WIDTH, "=")]
    lines.extend(f"{label:<{_LABEL_WIDTH}}{value}" for label, value in header)
    for title, body in (("Details", details), ("Suggestion", suggestion)):
        if not body:
            continue
        lines.append(f"\n{title}:")
        lines.extend(f"  {line}" for line in body.splitlines())
    lines.append("=" * _REPORT_WIDTH)
    return "\n".join(lines)
