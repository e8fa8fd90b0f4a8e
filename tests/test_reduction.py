# tests/test_reduction.py
import math

import numpy as np
import pytest

from eesim_core import ComponentGroup, ComponentKind, GroupKind, Network
from eesim_core.analysis import arithmetic_sum, harmonic_sum, reduce_group, reduce_network


def _network(*groups):
    return Network(groups=tuple(ComponentGroup(kind=kind, magnitudes=values) for kind, values in groups))


class TestCapacitiveReduction:
    def test_scenario_network_is_25_microfarad(self, scenario_network, scenario_context):
        result = reduce_network(scenario_network, scenario_context)
        assert result.equivalent == pytest.approx(25e-6)
        assert result.display_value == pytest.approx(25.0)
        assert result.format_display() == "25 uF"
        assert [g.equivalent for g in result.per_group] == pytest.approx([5e-6, 20e-6])

    def test_series_capacitors_combine_harmonically(self):
        values = (3.3, 4.7, 10.0)
        result = reduce_network(_network((GroupKind.SERIES, values)), ComponentKind.CAPACITIVE)
        expected = 1.0 / sum(1.0 / v for v in values)
        assert result.equivalent == pytest.approx(expected * 1e-6)

    def test_parallel_capacitors_add(self):
        result = reduce_network(_network((GroupKind.PARALLEL, (1, 2, 3))), "capacitive")
        assert result.equivalent == pytest.approx(6e-6)

    def test_groups_are_parallel_branches(self):
        network = _network((GroupKind.PARALLEL, (4,)), (GroupKind.PARALLEL, (6,)))
        assert reduce_network(network, ComponentKind.CAPACITIVE).equivalent == pytest.approx(10e-6)


class TestInductiveReduction:
    def test_series_inductors_add(self):
        result = reduce_network(_network((GroupKind.SERIES, (4, 6))), ComponentKind.INDUCTIVE)
        assert result.equivalent == pytest.approx(10e-3)

    def test_parallel_groups_combine_harmonically(self):
        network = _network((GroupKind.SERIES, (4,)), (GroupKind.SERIES, (4,)))
        assert reduce_network(network, ComponentKind.INDUCTIVE).equivalent == pytest.approx(2e-3)

    def test_duality_with_capacitors(self):
        values = (2.2, 4.7, 15.0)
        inductive = reduce_network(_network((GroupKind.PARALLEL, values)), ComponentKind.INDUCTIVE)
        capacitive = reduce_network(_network((GroupKind.SERIES, values)), ComponentKind.CAPACITIVE)
        assert inductive.equivalent / 1e-3 == pytest.approx(capacitive.equivalent / 1e-6)

    def test_empty_group_does_not_short_the_network(self):
        network = _network((GroupKind.SERIES, ("", None)), (GroupKind.SERIES, (8,)))
        assert reduce_network(network, ComponentKind.INDUCTIVE).equivalent == pytest.approx(8e-3)


class TestForgivingInput:
    def test_invalid_magnitudes_are_ignored(self):
        group = ComponentGroup(kind=GroupKind.SERIES, magnitudes=(10, "abc", -5, None, 0, math.nan, math.inf))
        result = reduce_group(group, ComponentKind.CAPACITIVE)
        assert result.equivalent == pytest.approx(10e-6)
        assert np.isnan(result.si_magnitudes[1])

    def test_huge_integer_magnitude_is_dropped(self):
        result = reduce_network(_network((GroupKind.PARALLEL, (10**400, 20))), ComponentKind.CAPACITIVE)
        assert result.equivalent == pytest.approx(20e-6)

    def test_numeric_strings_are_read(self):
        result = reduce_network(_network((GroupKind.PARALLEL, ("10", " 5 "))), ComponentKind.CAPACITIVE)
        assert result.equivalent == pytest.approx(15e-6)

    def test_empty_network_gives_zero(self):
        result = reduce_network(Network(), ComponentKind.CAPACITIVE)
        assert result.equivalent == 0.0
        assert result.is_empty
        assert result.display_value is None
        assert result.format_display() == "--"

    def test_all_invalid_gives_zero(self):
        result = reduce_network(_network((GroupKind.SERIES, (0, -1, "x"))), ComponentKind.INDUCTIVE)
        assert result.equivalent == 0.0

    def test_raw_list_with_legacy_keys(self):
        raw = [{"type": "parallel", "values": [1, 2]}, {"kind": "series", "magnitudes": [6, 6]}]
        assert reduce_network(raw, "capacitor").equivalent == pytest.approx(6e-6)

    def test_unknown_group_kind_is_series(self):
        assert GroupKind.parse("whatever") is GroupKind.SERIES
        assert GroupKind.parse("P") is GroupKind.PARALLEL


def test_sum_helpers():
    assert arithmetic_sum([]) == 0.0
    assert harmonic_sum([]) == 0.0
    assert harmonic_sum([2.0, 2.0]) == pytest.approx(1.0)
    assert arithmetic_sum([1.0, -1.0, 2.0]) == pytest.approx(3.0)
