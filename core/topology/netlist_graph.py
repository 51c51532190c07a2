# core/topology/netlist_graph.py
"""
Connectivity view of a Circuit as a networkx MultiGraph.
Graph nodes are circuit node ids; every component contributes one edge between
its first two terminals, keyed by the component id. The graph is derived data:
the stepping loop never reads it.
"""
from typing import Dict, List

import networkx as nx


def build_graph(circuit) -> nx.MultiGraph:
    """
    Build the connectivity graph of `circuit`.

    Nodes referenced by a component but not owned by the circuit are still
    added, flagged with owned=False.
    """
    graph = nx.MultiGraph(name=circuit.name)
    for node_id, node in circuit.nodes.items():
        graph.add_node(node_id, voltage=node.voltage, owned=True)

    for comp_id in sorted(circuit.components):
        comp = circuit.components[comp_id]
        for node in comp.nodes:
            if not graph.has_node(node.id):
                graph.add_node(node.id, voltage=node.voltage, owned=False)
        if len(comp.nodes) >= 2:
            graph.add_edge(comp.nodes[0].id, comp.nodes[1].id, key=comp_id,
                           type=comp.type_tag())
    return graph


def connected_groups(circuit) -> List[List[str]]:
    """Sorted node ids of each connected group of nodes, largest first."""
    graph = build_graph(circuit)
    groups = [sorted(group) for group in nx.connected_components(graph)]
    return sorted(groups, key=lambda group: (-len(group), group))


def node_degrees(circuit) -> Dict[str, int]:
    """Number of two-terminal edges incident to each node (self-loops count twice)."""
    return {node_id: degree for node_id, degree in build_graph(circuit).degree()}
