# tests/conftest.py
import pytest

from eesim_core import (
    ComponentGroup, ComponentKind, ElectricalContext, GroupKind, Network,
    TheoremParameters, SimulationClock, TRANSIENT_CHANNELS,
)


# --- Network Fixtures ---

@pytest.fixture
def scenario_network():
    """Two 10 uF capacitors in series, in parallel with a 20 uF capacitor: 25 uF total."""
    return Network(groups=(
        ComponentGroup(kind=GroupKind.SERIES, magnitudes=(10, 10)),
        ComponentGroup(kind=GroupKind.PARALLEL, magnitudes=(20,)),
    ))


@pytest.fixture
def scenario_context():
    """12 V through 10 ohm; with 25 uF this gives tau = 250 us."""
    return ElectricalContext(source_voltage=12.0, series_resistance=10.0, component_kind=ComponentKind.CAPACITIVE)


@pytest.fixture
def inductive_context():
    return ElectricalContext(source_voltage=12.0, series_resistance=10.0, component_kind=ComponentKind.INDUCTIVE)


@pytest.fixture
def matched_load_params():
    """A 12 V Thevenin source with Rs = 10 ohm driving a matched 10 ohm load."""
    return TheoremParameters(v1=12.0, rs=10.0, rl=10.0)


# --- Clock Fixtures ---

class RecordingSampler:
    """A deterministic sample function that remembers the times it was called with."""
    channels = TRANSIENT_CHANNELS

    def __init__(self):
        self.calls = []

    def __call__(self, time_s):
        self.calls.append(time_s)
        return {"V": time_s, "I": 2 * time_s, "P": 3 * time_s, "E": 4 * time_s, "extra": "snapshot-only"}


@pytest.fixture
def recording_sampler():
    return RecordingSampler()


@pytest.fixture
def clock():
    return SimulationClock(channels=TRANSIENT_CHANNELS, cap=720, seed_length=160, cadence_ms=80.0)
