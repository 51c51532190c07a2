# core/topology/circuit.py
from types import MappingProxyType
from typing import Any, Callable, Dict, List, Mapping, Optional

from core.behavior.component import Component
from core.topology.netlist_graph import build_graph
from core.topology.node import Node
from utils.logging_config import get_logger

logger = get_logger(__name__)

StepObserver = Callable[[float, "Circuit"], None]


class Circuit:
    """
    Owning container for nodes and components, and driver of the time-stepping loop.

    Each component computes its own response from the present voltages of its
    nodes. Node voltages are boundary conditions set by the caller; no solve
    across nodes is performed.
    """
    def __init__(self, name: str = ""):
        self.name = name
        self._components: Dict[str, Component] = {}
        self._nodes: Dict[str, Node] = {}

    @property
    def components(self) -> Mapping[str, Component]:
        return MappingProxyType(self._components)

    @property
    def nodes(self) -> Mapping[str, Node]:
        return MappingProxyType(self._nodes)

    def add_component(self, component: Optional[Component]) -> None:
        if component is None or not component.id:
            logger.debug("Ignoring component without an id in circuit '%s'.", self.name)
            return
        self._components[component.id] = component

    def add_node(self, node: Optional[Node]) -> None:
        if node is None or not node.id:
            logger.debug("Ignoring node without an id in circuit '%s'.", self.name)
            return
        self._nodes[node.id] = node

    def get_component(self, comp_id: str) -> Optional[Component]:
        return self._components.get(comp_id)

    def get_node(self, node_id: str) -> Optional[Node]:
        return self._nodes.get(node_id)

    def simulate(self, duration: float, timestep: float,
                 observer: Optional[StepObserver] = None) -> int:
        """
        Advance every component by `timestep` until the simulated time reaches `duration`.

        Time accumulates by repeated addition, so the step count for a given
        duration is subject to floating-point drift. Components are advanced in
        ascending id order on every step.

        Args:
            duration: Simulated time span in seconds.
            timestep: Step size in seconds.
            observer: Optional callable invoked as observer(time, circuit) after each step.

        Returns:
            The number of steps taken.
        """
        logger.info("Simulating circuit '%s' for %ss with timestep %ss", self.name, duration, timestep)
        time = 0.0
        steps = 0
        while time < duration:
            for comp_id in sorted(self._components):
                self._components[comp_id].advance(timestep)
            time += timestep
            steps += 1
            if observer is not None:
                observer(time, self)
        logger.info("Simulation of '%s' completed after %d steps.", self.name, steps)
        return steps

    def reset(self) -> None:
        """Set every node voltage to zero. Component state is left as it is."""
        for node in self._nodes.values():
            node.set_voltage(0.0)
        logger.info("Circuit '%s' reset.", self.name)

    def snapshot(self, time: float = 0.0) -> Dict[str, Any]:
        """Readings of every component and node voltage, ordered by id."""
        return {
            "time": time,
            "components": [self._components[cid].to_dict() for cid in sorted(self._components)],
            "nodes": {nid: self._nodes[nid].voltage for nid in sorted(self._nodes)},
        }

    def floating_components(self) -> List[str]:
        """Ids of components with fewer than two terminals; these never change state."""
        return sorted(cid for cid, comp in self._components.items() if len(comp.nodes) < 2)

    def to_graph(self):
        """Connectivity view as a networkx MultiGraph; see core.topology.netlist_graph."""
        return build_graph(self)

    def __len__(self) -> int:
        return len(self._components)

    def __repr__(self) -> str:
        return f"<Circuit {self.name!r}: components={len(self._components)}, nodes={len(self._nodes)}>"
