# inout/simulation_config.py
"""
Load and validate YAML run configurations for ICSim.
"""
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml
from cerberus import Validator

from core.exceptions import ConfigError


def _positive(field, value, error):
    if value <= 0:
        error(field, "must be greater than 0")


# Cerberus schema for the run configuration
CONFIG_SCHEMA = {
    'duration': {'type': 'float', 'coerce': float, 'min': 0.0, 'default': 0.01},
    'timestep': {'type': 'float', 'coerce': float, 'check_with': _positive, 'default': 1e-6},
    'plugin_dir': {'type': 'string', 'nullable': True, 'default': 'plugins'},
    'record_every': {'type': 'integer', 'coerce': int, 'min': 1, 'default': 10},
    'log_level': {
        'type': 'string',
        'coerce': str.upper,
        'allowed': ['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'],
        'default': 'INFO',
    },
}


@dataclass
class SimulationConfig:
    duration: float = 0.01
    timestep: float = 1e-6
    plugin_dir: Optional[str] = "plugins"
    record_every: int = 10
    log_level: str = "INFO"

    def merged(self, **overrides: Any) -> "SimulationConfig":
        """
        Return a copy with every override that is not None applied.
        The result is validated against CONFIG_SCHEMA.

        Raises:
            ConfigError: If an override fails schema validation.
        """
        values = asdict(self)
        values.update({k: v for k, v in overrides.items() if v is not None})
        return parse_simulation_config(values)


def parse_simulation_config(data: Optional[Dict[str, Any]]) -> SimulationConfig:
    """
    Validate a configuration mapping and return a SimulationConfig.
    An empty document yields the defaults.

    Raises:
        ConfigError: If schema validation fails.
    """
    validator = Validator(CONFIG_SCHEMA, allow_unknown=False)
    if not validator.validate(data or {}):
        raise ConfigError(f"Simulation config schema validation errors: {validator.errors}")
    return SimulationConfig(**validator.document)


def load_simulation_config(path: Union[str, Path]) -> SimulationConfig:
    """
    Load a YAML run configuration file.

    Raises:
        ConfigError: If the file cannot be read or fails schema validation.
    """
    path = Path(path)
    try:
        raw = yaml.safe_load(path.read_text())
    except (OSError, yaml.YAMLError) as e:
        raise ConfigError(f"Failed to read simulation config YAML '{path}': {e}")
    if raw is not None and not isinstance(raw, dict):
        raise ConfigError(f"Simulation config '{path}' must be a mapping at top level.")
    return parse_simulation_config(raw)
