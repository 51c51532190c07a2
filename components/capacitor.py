import numpy as np

from components.single_value_component import SingleValueComponent


class Capacitor(SingleValueComponent):
    """
    Two-terminal capacitor.

    Parameters:
      capacitance: Farads (default 1e-6)

    The stored voltage follows the terminal voltage each step, the charging
    current is C * dV/dt and the accumulated charge integrates that current.
    current_value() reports the stored voltage, not a current.
    """
    type_name = "Capacitor"
    param_key = "capacitance"
    default_value = 1e-6

    def __init__(self, capacitance: float, comp_id: str = "") -> None:
        super().__init__(capacitance, comp_id)
        self._charge = np.float64(0.0)
        self._voltage = np.float64(0.0)
        self._current = np.float64(0.0)

    @property
    def capacitance(self) -> float:
        return float(self._value)

    @property
    def charge(self) -> float:
        return float(self._charge)

    @property
    def voltage(self) -> float:
        return float(self._voltage)

    @property
    def current(self) -> float:
        """Charging current computed during the last step."""
        return float(self._current)

    def _step(self, timestep: float, voltage_diff: np.float64) -> None:
        new_voltage = voltage_diff
        self._current = self._value * (new_voltage - self._voltage) / np.float64(timestep)
        self._charge += self._current * timestep
        self._voltage = new_voltage

    def current_value(self) -> float:
        return float(self._voltage)
