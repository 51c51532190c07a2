from abc import ABC, abstractmethod
from typing import Any, Dict, List

import numpy as np

from core.topology.node import Node


class Component(ABC):
    """
    Abstract base class for circuit components.
    Subclasses should override `type_name` and implement advance() and current_value().
    """
    type_name: str = "undefined"  # Override in subclasses

    def __init__(self, comp_id: str = "") -> None:
        """
        Initialize the component.

        Args:
            comp_id: Identifier of the component inside a Circuit. Plugin factories
                     leave it empty; the caller assigns it before adding the
                     component to a circuit.
        """
        self.id = comp_id
        # Ordered terminals; index 0 and 1 fix the polarity of two-terminal devices.
        self.nodes: List[Node] = []

    @abstractmethod
    def advance(self, timestep: float) -> None:
        """
        Advance the component's internal state by one timestep.

        Reads the voltages of the attached nodes and writes only the
        component's own state.
        """
        pass

    @abstractmethod
    def current_value(self) -> float:
        """Return the characteristic reading of this component type."""
        pass

    def attach(self, node: Node) -> None:
        """Append `node` as the next terminal and register a back-reference on it."""
        self.nodes.append(node)
        node.add_component(self)

    def type_tag(self) -> str:
        return self.type_name

    def voltage_diff(self) -> np.float64:
        """Voltage across terminals 0 and 1."""
        return np.float64(self.nodes[0].voltage) - np.float64(self.nodes[1].voltage)

    def to_dict(self) -> Dict[str, Any]:
        """
        Snapshot of the component for front ends and recorders.

        Returns:
            A dictionary with keys 'id', 'type', 'value' and 'nodes'.
        """
        return {
            "id": self.id,
            "type": self.type_name,
            "value": float(self.current_value()),
            "nodes": [node.id for node in self.nodes],
        }

    def __repr__(self) -> str:
        return (f"<Component {self.id} ({self.type_name}): "
                f"nodes={[node.id for node in self.nodes]}, value={self.current_value()}>")


class TwoTerminalComponent(Component):
    """
    Abstract subclass for devices driven by the voltage across their first two terminals.

    Advancing with fewer than two attached nodes is a no-op. Terminals beyond
    the second are accepted by attach() but ignored by the update law.
    """

    def advance(self, timestep: float) -> None:
        if len(self.nodes) < 2:
            return
        self._step(timestep, self.voltage_diff())

    @abstractmethod
    def _step(self, timestep: float, voltage_diff: np.float64) -> None:
        """Apply the device's update law for one timestep."""
        pass
