import numpy as np

from components.single_value_component import SingleValueComponent


class Resistor(SingleValueComponent):
    """
    Two-terminal resistor.

    Parameters:
      resistance: Ohms (default 1000)

    current_value() is the current I = (v0 - v1) / R from the last step.
    """
    type_name = "Resistor"
    param_key = "resistance"
    default_value = 1000.0

    def __init__(self, resistance: float, comp_id: str = "") -> None:
        super().__init__(resistance, comp_id)
        self._current = np.float64(0.0)

    @property
    def resistance(self) -> float:
        return float(self._value)

    @property
    def current(self) -> float:
        return float(self._current)

    def _step(self, timestep: float, voltage_diff: np.float64) -> None:
        # R == 0 is left unguarded: the current becomes inf or nan.
        self._current = voltage_diff / self._value

    def current_value(self) -> float:
        return float(self._current)
