import pytest

from core.exceptions import ConfigError
from inout.simulation_config import SimulationConfig, load_simulation_config, parse_simulation_config


def test_defaults():
    assert parse_simulation_config(None) == SimulationConfig()
    assert parse_simulation_config({}) == SimulationConfig()

def test_load_config(tmp_path):
    path = tmp_path / "run.yaml"
    path.write_text("duration: 0.002\ntimestep: 1e-5\nplugin_dir: ext\nrecord_every: 5\nlog_level: debug\n")
    config = load_simulation_config(path)
    assert config.duration == 0.002
    assert config.timestep == 1e-5
    assert config.plugin_dir == "ext"
    assert config.record_every == 5
    assert config.log_level == "DEBUG"

@pytest.mark.parametrize("data", [
    {"duration": -1.0},
    {"timestep": 0},
    {"timestep": -1e-6},
    {"record_every": 0},
    {"log_level": "LOUD"},
    {"unexpected": 1},
])
def test_invalid_config(data):
    with pytest.raises(ConfigError, match="schema validation"):
        parse_simulation_config(data)

def test_missing_file(tmp_path):
    with pytest.raises(ConfigError, match="Failed to read"):
        load_simulation_config(tmp_path / "nope.yaml")

def test_non_mapping_document(tmp_path):
    path = tmp_path / "list.yaml"
    path.write_text("- 1\n- 2\n")
    with pytest.raises(ConfigError, match="mapping"):
        load_simulation_config(path)

def test_merged_validates_overrides():
    with pytest.raises(ConfigError, match="timestep"):
        SimulationConfig().merged(timestep=0.0)

def test_merged_ignores_none():
    config = SimulationConfig().merged(duration=1.0, timestep=None)
    assert config.duration == 1.0
    assert config.timestep == 1e-6
