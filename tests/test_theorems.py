# tests/test_theorems.py
import logging
import math

import pytest

from eesim_core import TheoremParameters
from eesim_core.analysis import TheoremMode, TheoremSolver, is_power_matched, solve_theorem


class TestMaximumPowerTransfer:
    def test_matched_load(self, matched_load_params):
        solution = solve_theorem(TheoremMode.MAX_POWER_TRANSFER, matched_load_params)
        assert solution.probe_i == pytest.approx(0.6)
        assert solution.probe_v == pytest.approx(6.0)
        assert solution.power == pytest.approx(3.6)
        assert solution.vth == 12.0
        assert solution.rth == 10.0
        assert solution.matched is True

    def test_unmatched_load_delivers_less_power(self, matched_load_params):
        matched = solve_theorem("maxpower", matched_load_params)
        unmatched = solve_theorem("maxpower", TheoremParameters(v1=12.0, rs=10.0, rl=5.0))
        assert unmatched.matched is False
        assert unmatched.power == pytest.approx((12.0 / 15.0) ** 2 * 5.0)
        assert unmatched.power < matched.power

    @pytest.mark.parametrize("rl", [1.0, 5.0, 9.0, 11.0, 20.0, 100.0])
    def test_power_peaks_at_matched_load(self, matched_load_params, rl):
        other = solve_theorem("maxpower", TheoremParameters(v1=12.0, rs=10.0, rl=rl))
        assert other.power < solve_theorem("maxpower", matched_load_params).power

    def test_match_tolerance(self):
        params = TheoremParameters(v1=12.0, rs=10.0, rl=10.05)
        assert solve_theorem("maxpower", params).matched is False
        assert solve_theorem("maxpower", params, match_tolerance=0.01).matched is True
        assert TheoremSolver(match_tolerance=0.01).solve("maxpower", params).matched is True

    def test_is_power_matched(self):
        assert is_power_matched(10.0, 10.0)
        assert not is_power_matched(10.0, 10.0000001)
        assert is_power_matched(10.0, 10.0000001, rel_tol=1e-6)


class TestOtherModes:
    def test_superposition_sums_source_contributions(self):
        params = TheoremParameters(v1=10.0, r1=10.0, v2=5.0, r2=10.0, rl=10.0)
        solution = solve_theorem(TheoremMode.SUPERPOSITION, params)
        assert solution.probe_v == pytest.approx(5.0 + 2.5)
        assert solution.probe_i == pytest.approx(0.75)
        assert solution.power == pytest.approx(7.5 * 0.75)

    def test_thevenin_norton(self):
        params = TheoremParameters(v1=10.0, v2=0.0, r1=10.0, r2=10.0, rl=5.0)
        solution = solve_theorem(TheoremMode.THEVENIN_NORTON, params)
        assert solution.vth == pytest.approx(5.0)
        assert solution.rth == pytest.approx(5.0)
        assert solution.i_n == pytest.approx(1.0)
        assert solution.probe_v == pytest.approx(2.5)
        assert solution.i_n == pytest.approx(solution.vth / solution.rth)

    @pytest.mark.parametrize("v1, rs, rl", [(10.0, 5.0, 5.0), (9.0, 2.2, 47.0), (0.5, 100.0, 1.0)])
    def test_source_transformation_is_equivalent(self, v1, rs, rl):
        solution = solve_theorem("sourcetrans", TheoremParameters(v1=v1, rs=rs, rl=rl))
        assert solution.i_n == pytest.approx(v1 / rs)
        assert solution.probe_v == pytest.approx(solution.series_probe_v)
        assert solution.probe_i == pytest.approx(solution.series_probe_i)

    def test_unknown_mode_falls_back_to_divider(self, caplog):
        params = {"V1": 10, "R1": 30, "RL": 10}
        with caplog.at_level(logging.WARNING):
            solution = solve_theorem("millman", params)
        assert solution.probe_v == pytest.approx(2.5)
        assert "millman" in caplog.text

    def test_mode_labels(self):
        assert TheoremMode.parse("maxpower") is TheoremMode.MAX_POWER_TRANSFER
        assert TheoremMode.parse("Source Transformation") is TheoremMode.SOURCE_TRANSFORMATION
        assert TheoremMode.parse(None) is TheoremMode.SUPERPOSITION


class TestNormalization:
    def test_raw_form_input(self):
        solution = solve_theorem("maxpower", {"V1": "12", "Rs": "10", "RL": 10})
        assert solution.power == pytest.approx(3.6)

    def test_zero_resistances_stay_finite(self):
        params = TheoremParameters(v1=5.0, v2=5.0, r1=0.0, r2=0.0, rl=0.0, rs=0.0)
        for mode in TheoremMode:
            values = solve_theorem(mode, params).as_dict()
            assert all(math.isfinite(v) for k, v in values.items() if k != "matched")

    def test_blank_voltages_are_zero(self):
        params = TheoremParameters.from_raw({"V1": "", "V2": None, "R1": 1, "R2": 1, "RL": 1})
        assert params.v1 == 0.0 and params.v2 == 0.0
        assert solve_theorem("superposition", params).power == 0.0
