# plugins/example_plugin.py
"""
Example ICSim plugin supplying Inductor and Diode components.
Load it with PluginManager.load_plugin("plugins/example_plugin.py").
"""
from typing import List, Mapping, Optional

import numpy as np

from components.single_value_component import SingleValueComponent
from core.behavior.component import Component
from core.plugins.base import BasePlugin
from utils.logging_config import get_logger

logger = get_logger(__name__)

SATURATION_CURRENT = 1e-12  # A
THERMAL_VOLTAGE = 0.026     # V


class Inductor(SingleValueComponent):
    """
    Two-terminal inductor: L * di/dt = V, integrated with a forward step.

    Parameters:
      inductance: Henries (default 1e-3)
    """
    type_name = "Inductor"
    param_key = "inductance"
    default_value = 1e-3

    def __init__(self, inductance: float, comp_id: str = "") -> None:
        super().__init__(inductance, comp_id)
        self._current = np.float64(0.0)
        self._voltage = np.float64(0.0)

    @property
    def inductance(self) -> float:
        return float(self._value)

    @property
    def voltage(self) -> float:
        return float(self._voltage)

    def _step(self, timestep: float, voltage_diff: np.float64) -> None:
        self._current += voltage_diff * timestep / self._value
        self._voltage = voltage_diff

    def current_value(self) -> float:
        return float(self._current)


class Diode(SingleValueComponent):
    """
    Idealized diode: exponential conduction above the forward voltage,
    constant leakage otherwise.

    Parameters:
      forward_voltage: Volts (default 0.7)
    """
    type_name = "Diode"
    param_key = "forward_voltage"
    default_value = 0.7

    def __init__(self, forward_voltage: float = 0.7, comp_id: str = "") -> None:
        super().__init__(forward_voltage, comp_id)
        self._current = np.float64(0.0)

    @property
    def forward_voltage(self) -> float:
        return float(self._value)

    def _step(self, timestep: float, voltage_diff: np.float64) -> None:
        if voltage_diff > self._value:
            self._current = SATURATION_CURRENT * (np.exp(voltage_diff / THERMAL_VOLTAGE) - 1.0)
        else:
            self._current = np.float64(-SATURATION_CURRENT)

    def current_value(self) -> float:
        return float(self._current)


class ExamplePlugin(BasePlugin):
    _component_classes = {cls.type_name: cls for cls in (Inductor, Diode)}

    def __init__(self):
        super().__init__("ExamplePlugin", "1.0.0",
                         "Example plugin with inductor and diode components")

    def create_component(self, type_tag: str,
                         parameters: Mapping[str, float]) -> Optional[Component]:
        comp_class = self._component_classes.get(type_tag)
        if comp_class is None:
            return None
        value = self.parameter(parameters, comp_class.param_key, comp_class.default_value)
        return comp_class(value)

    def get_supported_components(self) -> List[str]:
        return list(self._component_classes)

    def do_initialize(self) -> bool:
        logger.info("ExamplePlugin initialized with components: %s",
                    ", ".join(self._component_classes))
        return True

    def do_cleanup(self) -> None:
        logger.info("ExamplePlugin cleaned up")


def create_plugin() -> ExamplePlugin:
    return ExamplePlugin()


def destroy_plugin(plugin: ExamplePlugin) -> None:
    plugin.cleanup()
