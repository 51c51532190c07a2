from typing import Mapping, Optional

import numpy as np

from core.behavior.component import TwoTerminalComponent


class SingleValueComponent(TwoTerminalComponent):
    """
    For resistor, capacitor, inductor, diode: one characteristic value drives the update law.
    """
    type_name: str = "undefined"
    param_key: str = "value"  # e.g. "resistance", "capacitance"
    default_value: float = 0.0

    def __init__(self, value: float, comp_id: str = "") -> None:
        super().__init__(comp_id)
        # Stored as float64 so a zero divisor yields inf/nan instead of raising.
        self._value = np.float64(value)

    @classmethod
    def from_parameters(cls, parameters: Optional[Mapping[str, float]] = None,
                        comp_id: str = "") -> "SingleValueComponent":
        """
        Build an instance from a parameter mapping, falling back to `default_value`
        when `param_key` is absent. Unknown keys are ignored.
        """
        parameters = parameters or {}
        return cls(parameters.get(cls.param_key, cls.default_value), comp_id)

    @property
    def parameters(self) -> dict:
        return {self.param_key: float(self._value)}

    def to_dict(self) -> dict:
        data = super().to_dict()
        data["parameters"] = self.parameters
        return data
