# components/factory.py
from typing import Dict, Mapping, Optional, Type

from components.capacitor import Capacitor
from components.resistor import Resistor
from components.single_value_component import SingleValueComponent
from core.behavior.component import Component
from core.exceptions import ComponentError
from utils.logging_config import get_logger

logger = get_logger(__name__)

# Keys are lower-cased type tags; lookups are case-insensitive.
_component_registry: Dict[str, Type[SingleValueComponent]] = {
    Resistor.type_name.lower(): Resistor,
    Capacitor.type_name.lower(): Capacitor,
}


def get_component_class(type_name: str) -> Type[SingleValueComponent]:
    if not isinstance(type_name, str):
        raise ComponentError("Component type name must be a string.")
    comp_class = _component_registry.get(type_name.lower())
    if comp_class is None:
        raise ComponentError(f"Unknown component type: {type_name}")
    return comp_class


def register_component(comp_class: Type[SingleValueComponent]) -> None:
    if not isinstance(comp_class, type) or not issubclass(comp_class, SingleValueComponent):
        raise ComponentError("Registered component must be a subclass of SingleValueComponent.")
    _component_registry[comp_class.type_name.lower()] = comp_class


def builtin_types() -> list:
    return sorted(comp_class.type_name for comp_class in _component_registry.values())


def create_builtin(type_name: str, parameters: Optional[Mapping[str, float]] = None,
                   comp_id: str = "") -> Optional[Component]:
    """
    Instantiate a built-in component by type tag (case-insensitive).
    Returns None when the type is not built in.
    """
    try:
        comp_class = get_component_class(type_name)
    except ComponentError:
        logger.debug("'%s' is not a built-in component type.", type_name)
        return None
    return comp_class.from_parameters(parameters, comp_id)
