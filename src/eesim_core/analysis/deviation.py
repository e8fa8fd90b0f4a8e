# src/eesim_core/analysis/deviation.py
import logging
import math
from typing import Any

from ..data_structures import to_float
from .results import DeviationResult

logger = logging.getLogger(__name__)


def analyze_deviation(practical: Any, theoretical: Any) -> DeviationResult:
    """
    Measured-versus-expected error.

    The percentage is normalized by max(|theoretical|, 1): a theoretical value of
    0 (or any magnitude below 1) is divided by 1, so the percentage reads as the
    absolute error scaled by 100 instead of diverging.
    """
    p = to_float(practical)
    t = to_float(theoretical)
    if math.isnan(p) or math.isnan(t):
        return DeviationResult(absolute=math.nan, percent=math.nan, signed_percent=math.nan)

    absolute = p - t
    reference = max(abs(t), 1.0)
    signed_percent = absolute / reference * 100.0
    return DeviationResult(absolute=absolute, percent=abs(signed_percent), signed_percent=signed_percent)


class DeviationAnalyzer:
    def analyze(self, practical: Any, theoretical: Any) -> DeviationResult:
        return analyze_deviation(practical, theoretical)
