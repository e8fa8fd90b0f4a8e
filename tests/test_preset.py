# tests/test_preset.py
import json

import pytest
import yaml

from eesim_core import ComponentKind, GroupKind, PresetLoadError, reduce_network
from eesim_core.errors import DiagnosableError
from eesim_core.parser import (
    ParsingError,
    PresetLoader,
    SchemaValidationError,
    dump_file,
    load_preset_file,
    preset_to_dict,
)


# --- Fixtures ---

@pytest.fixture
def loader():
    return PresetLoader()


@pytest.fixture
def scenario_document():
    return {
        "name": "Mixed capacitor bank",
        "componentKind": "capacitive",
        "network": [
            {"kind": "series", "magnitudes": [10, 10]},
            {"kind": "parallel", "magnitudes": [20]},
        ],
        "context": {"sourceVoltage": 12, "seriesResistance": 10},
    }


# --- Loading ---

class TestLoadDict:
    def test_rehydrates_the_scenario(self, loader, scenario_document):
        preset = loader.load_dict(scenario_document)
        assert preset.component_kind is ComponentKind.CAPACITIVE
        assert preset.context.source_voltage == 12.0
        assert preset.context.series_resistance == 10.0
        assert preset.context.component_kind is ComponentKind.CAPACITIVE
        assert preset.network.groups[1].kind is GroupKind.PARALLEL
        assert reduce_network(preset.network, preset.context).equivalent == pytest.approx(25e-6)

    def test_round_trip(self, loader, scenario_document):
        preset = loader.load_dict(scenario_document)
        assert loader.load_dict(preset_to_dict(preset)) == preset
        assert preset_to_dict(preset) == scenario_document

    def test_magnitudes_are_kept_as_stored(self, loader, scenario_document):
        scenario_document["network"][0]["magnitudes"] = [10, None, "", "4.7"]
        preset = loader.load_dict(scenario_document)
        assert preset.network.groups[0].magnitudes == (10, None, "", "4.7")

    def test_manual_current(self, loader, scenario_document):
        scenario_document["manualCurrent"] = 0.25
        assert loader.load_dict(scenario_document).manual_current == 0.25
        scenario_document["manualCurrent"] = None
        assert loader.load_dict(scenario_document).manual_current is None


class TestSchemaViolations:
    @pytest.mark.parametrize("mutate", [
        lambda d: d.pop("componentKind"),
        lambda d: d.update(componentKind="resistive"),
        lambda d: d.update(network={"kind": "series"}),
        lambda d: d["network"][0].update(kind="diagonal"),
        lambda d: d["network"][0].update(magnitudes=[[1, 2]]),
        lambda d: d["context"].pop("seriesResistance"),
        lambda d: d.update(colour="blue"),
    ])
    def test_rejected(self, loader, scenario_document, mutate):
        mutate(scenario_document)
        with pytest.raises(SchemaValidationError) as excinfo:
            loader.load_dict(scenario_document)
        assert isinstance(excinfo.value, DiagnosableError)
        assert "Preset Schema Validation Error" in excinfo.value.get_diagnostic_report()

    def test_non_mapping_root(self, loader):
        with pytest.raises(ParsingError):
            loader.load_dict([1, 2, 3])

    def test_report_names_preset_and_fields(self, loader, scenario_document):
        scenario_document.pop("context")
        scenario_document["colour"] = "blue"
        with pytest.raises(SchemaValidationError) as excinfo:
            loader.load_dict(scenario_document)
        report = excinfo.value.get_diagnostic_report()
        assert "Preset:         'Mixed capacitor bank'" in report
        assert "Fields:         'colour', 'context'" in report


def test_huge_integers_are_normalized(loader, scenario_document):
    scenario_document["context"]["sourceVoltage"] = 10**400
    scenario_document["network"][1]["magnitudes"] = [20, 10**400]
    preset = loader.load_dict(scenario_document)
    assert preset.context.source_voltage == 0.0
    assert reduce_network(preset.network, preset.context).equivalent == pytest.approx(25e-6)


# --- Files ---

class TestFiles:
    def test_json_file(self, loader, scenario_document, tmp_path):
        path = tmp_path / "bank.json"
        path.write_text(json.dumps(scenario_document))
        assert loader.load_file(path).name == "Mixed capacitor bank"

    def test_yaml_file(self, loader, scenario_document, tmp_path):
        path = tmp_path / "bank.yaml"
        path.write_text(yaml.safe_dump(scenario_document))
        assert loader.load_file(path).component_kind is ComponentKind.CAPACITIVE

    @pytest.mark.parametrize("suffix", [".json", ".yml"])
    def test_dump_and_reload(self, loader, scenario_document, tmp_path, suffix):
        preset = loader.load_dict(scenario_document)
        path = dump_file(preset, tmp_path / f"out{suffix}")
        assert loader.load_file(path) == preset

    def test_missing_file(self, loader, tmp_path):
        with pytest.raises(ParsingError) as excinfo:
            loader.load_file(tmp_path / "nowhere.json")
        assert "not found" in str(excinfo.value)

    def test_invalid_json(self, loader, tmp_path):
        path = tmp_path / "broken.json"
        path.write_text("{not json")
        with pytest.raises(ParsingError, match="Invalid JSON"):
            loader.load_file(path)

    def test_empty_yaml(self, loader, tmp_path):
        path = tmp_path / "empty.yaml"
        path.write_text("")
        with pytest.raises(ParsingError):
            loader.load_file(path)

    def test_user_facing_loader_wraps_diagnostics(self, tmp_path):
        path = tmp_path / "bad.yaml"
        path.write_text("componentKind: capacitive\nnetwork: []\n")
        with pytest.raises(PresetLoadError) as excinfo:
            load_preset_file(path)
        report = str(excinfo.value)
        assert "EESim Core: Diagnostic Report" in report
        assert "context" in report
        assert isinstance(excinfo.value.__cause__, SchemaValidationError)


# --- Legacy Notes ---

def test_from_note():
    note = {
        "title": "Inductor step response (bite-sized)",
        "compType": "inductor",
        "preset": {"Vsup": 5, "Rs": 8, "manualI": ""},
        "diagram": {"groups": [{"type": "series", "values": [50]}]},
    }
    preset = PresetLoader.from_note(note)
    assert preset.component_kind is ComponentKind.INDUCTIVE
    assert preset.context.source_voltage == 5.0
    assert preset.context.series_resistance == 8.0
    assert preset.manual_current is None
    assert preset.name == "Inductor step response (bite-sized)"
    assert reduce_network(preset.network, preset.context).equivalent == pytest.approx(50e-3)


def test_from_note_defaults():
    preset = PresetLoader.from_note({"compType": "capacitor"})
    assert preset.context.source_voltage == 12.0
    assert preset.context.series_resistance == 10.0
    assert len(preset.network) == 0
