# tests/test_config.py
import pytest

from eesim_core.simulation import ClockConfig, ConfigParsingError, parse_clock_config


def test_defaults():
    assert parse_clock_config(None) == ClockConfig(cadence_ms=80.0, cap=720, seed_length=160)
    assert parse_clock_config({}) == ClockConfig()


@pytest.mark.parametrize("raw, expected_ms", [
    ({"cadence": 40}, 40.0),
    ({"cadence": "80 ms"}, 80.0),
    ({"cadence": "0.1 s"}, 100.0),
    ({"cadence_ms": 16.5}, 16.5),
    ({"cadence": "25"}, 25.0),
])
def test_cadence_forms(raw, expected_ms):
    assert parse_clock_config(raw).cadence_ms == pytest.approx(expected_ms)


def test_cap_and_seed():
    config = parse_clock_config({"cap": "100", "seed_length": 0})
    assert config.cap == 100
    assert config.seed_length == 0
    assert parse_clock_config({"cap": 64.0}).cap == 64


@pytest.mark.parametrize("raw", [
    {"cadence": 0},
    {"cadence": "-5 ms"},
    {"cadence": "5 volt"},
    {"cadence": "fortnightly"},
    {"cadence": "80 +"},
    {"cadence": "(80"},
    {"cap": 0},
    {"cap": "many"},
    {"cap": 10.5},
    {"seed_length": 2.5},
    {"seed_length": -1},
])
def test_invalid_configuration(raw):
    with pytest.raises(ConfigParsingError, match="Failed to parse clock configuration"):
        parse_clock_config(raw)


def test_error_is_a_value_error():
    assert issubclass(ConfigParsingError, ValueError)
