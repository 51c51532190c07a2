# core/topology/node.py
import weakref
from typing import List


class Node:
    """
    A named connection point holding a scalar voltage.

    Components attached to the node are kept as weak back-references so the
    node never keeps a component alive; the Circuit owns both sides.
    """
    def __init__(self, node_id: str, voltage: float = 0.0) -> None:
        self.id = node_id
        self.voltage = float(voltage)
        self._attached: List[weakref.ref] = []

    def set_voltage(self, voltage: float) -> None:
        self.voltage = float(voltage)

    def get_voltage(self) -> float:
        return self.voltage

    def add_component(self, component) -> None:
        # Duplicates are kept; the list is bookkeeping only.
        self._attached.append(weakref.ref(component))

    @property
    def components(self) -> list:
        """Attached components that are still alive, in attach order."""
        return [comp for comp in (ref() for ref in self._attached) if comp is not None]

    def __repr__(self) -> str:
        return f"<Node {self.id}: voltage={self.voltage}, components={len(self._attached)}>"
