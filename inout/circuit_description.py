# inout/circuit_description.py
"""
Load and dump persisted circuit descriptions (YAML or JSON).

Document layout:

    name: RC demo
    nodes:
      - {id: N1, voltage: 5.0}
      - {id: GND}
    components:
      - {id: R1, type: Resistor, parameters: {resistance: 1000}}
    connections:
      - {from: R1, to: N1, id: c1}
      - {from: R1, to: N2, id: c2}

A connection attaches the component named by `from` to the node named by `to`;
connections are applied in order, which fixes terminal order. Nodes that are
only referenced by connections are created at 0 V.
"""
import json
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Union

import yaml
from cerberus import Validator

from components.factory import create_builtin
from core.exceptions import CircuitDescriptionError
from core.topology.circuit import Circuit
from core.topology.node import Node
from utils.logging_config import get_logger

logger = get_logger(__name__)

CIRCUIT_SCHEMA: Dict[str, Any] = {
    'name': {'type': 'string', 'required': False, 'default': ''},
    'nodes': {
        'type': 'list',
        'required': False,
        'default': [],
        'schema': {
            'type': 'dict',
            'schema': {
                'id': {'type': 'string', 'required': True, 'empty': False},
                'voltage': {'type': 'float', 'coerce': float, 'default': 0.0},
            },
        },
    },
    'components': {
        'type': 'list',
        'required': True,
        'schema': {
            'type': 'dict',
            'schema': {
                'id': {'type': 'string', 'required': True},
                'type': {'type': 'string', 'required': True, 'empty': False},
                'parameters': {
                    'type': 'dict',
                    'required': False,
                    'default': {},
                    'keysrules': {'type': 'string'},
                    'valuesrules': {'type': 'float', 'coerce': float},
                },
            },
        },
    },
    'connections': {
        'type': 'list',
        'required': False,
        'default': [],
        'schema': {
            'type': 'dict',
            'schema': {
                'from': {'type': 'string', 'required': True},
                'to': {'type': 'string', 'required': True},
                'id': {'type': 'string', 'required': False},
            },
        },
    },
}


def validate_description(data: Any) -> Dict[str, Any]:
    """
    Validate a description mapping against CIRCUIT_SCHEMA.

    Returns:
        The normalized document (defaults filled in, numbers coerced to float).

    Raises:
        CircuitDescriptionError: If validation fails.
    """
    if not isinstance(data, Mapping):
        raise CircuitDescriptionError("Circuit description must be a mapping at top level.")
    validator = Validator(CIRCUIT_SCHEMA)
    if not validator.validate(dict(data)):
        logger.error("Circuit description validation errors: %s", validator.errors)
        raise CircuitDescriptionError(f"Circuit description validation failed: {validator.errors}")
    return validator.document


def read_description(path: Union[str, Path]) -> Dict[str, Any]:
    """Read a description file; `.json` files are parsed as JSON, anything else as YAML."""
    path = Path(path)
    try:
        text = path.read_text()
        if path.suffix.lower() == '.json':
            return json.loads(text)
        return yaml.safe_load(text)
    except (OSError, ValueError, yaml.YAMLError) as e:
        raise CircuitDescriptionError(f"Failed to read circuit description '{path}': {e}")


def load_circuit_description(source: Union[str, Path, Mapping[str, Any]],
                             plugin_manager=None) -> Circuit:
    """
    Build a Circuit from a description file or an already parsed mapping.

    Component types are resolved against the built-in types first and then
    through `plugin_manager`, if given. Entries that cannot be resolved are
    logged and skipped.
    """
    data = source if isinstance(source, Mapping) else read_description(source)
    doc = validate_description(data)

    circuit = Circuit(doc['name'])
    for entry in doc['nodes']:
        circuit.add_node(Node(entry['id'], entry['voltage']))

    for entry in doc['components']:
        comp_id, comp_type = entry['id'], entry['type']
        component = create_builtin(comp_type, entry['parameters'])
        if component is None and plugin_manager is not None:
            component = plugin_manager.create_component(comp_type, entry['parameters'])
        if component is None:
            logger.error("Cannot create component '%s' of unknown type '%s'; skipping.",
                         comp_id, comp_type)
            continue
        component.id = comp_id
        circuit.add_component(component)

    for conn in doc['connections']:
        component = circuit.get_component(conn['from'])
        if component is None:
            logger.error("Connection %s references unknown component '%s'; skipping.",
                         conn.get('id', '?'), conn['from'])
            continue
        if not conn['to']:
            logger.error("Connection %s of component '%s' names no node; skipping.",
                         conn.get('id', '?'), conn['from'])
            continue
        node = circuit.get_node(conn['to'])
        if node is None:
            node = Node(conn['to'])
            circuit.add_node(node)
        component.attach(node)

    logger.info("Loaded circuit '%s' with %d components and %d nodes",
                circuit.name, len(circuit.components), len(circuit.nodes))
    return circuit


def dump_circuit_description(circuit: Circuit, path: Optional[Union[str, Path]] = None) -> Dict[str, Any]:
    """
    Serialize `circuit` into the description layout.
    Writes it to `path` as YAML (or JSON for `.json`) when a path is given.
    """
    doc: Dict[str, Any] = {
        'name': circuit.name,
        'nodes': [{'id': node_id, 'voltage': circuit.nodes[node_id].voltage}
                  for node_id in sorted(circuit.nodes)],
        'components': [],
        'connections': [],
    }
    for comp_id in sorted(circuit.components):
        component = circuit.components[comp_id]
        doc['components'].append({
            'id': comp_id,
            'type': component.type_tag(),
            'parameters': dict(getattr(component, 'parameters', {})),
        })
        for index, node in enumerate(component.nodes):
            doc['connections'].append({'from': comp_id, 'to': node.id, 'id': f"{comp_id}.{index}"})

    if path is not None:
        path = Path(path)
        if path.suffix.lower() == '.json':
            path.write_text(json.dumps(doc, indent=2))
        else:
            path.write_text(yaml.safe_dump(doc, sort_keys=False))
    return doc
