# core/plugins/base.py
"""
Plugin API for ICSim.
A plugin is a named, versioned unit that manufactures Component instances for a
fixed set of type tags. Plugin modules expose two module-level functions:

    create_plugin()          -> IPlugin   (zero-argument factory)
    destroy_plugin(plugin)   -> None      (matching destructor)
"""
from abc import ABC, abstractmethod
from enum import Enum
from typing import List, Mapping, Optional

from core.behavior.component import Component
from utils.logging_config import get_logger

logger = get_logger(__name__)

FACTORY_SYMBOL = "create_plugin"
DESTRUCTOR_SYMBOL = "destroy_plugin"


class IPlugin(ABC):
    """
    Abstract plugin interface.
    The PluginManager only ever talks to plugins through this interface.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        pass

    @property
    @abstractmethod
    def version(self) -> str:
        pass

    @property
    @abstractmethod
    def description(self) -> str:
        pass

    @abstractmethod
    def initialize(self) -> bool:
        """Prepare the plugin for use. Returns False when setup cannot complete."""
        pass

    @abstractmethod
    def cleanup(self) -> None:
        pass

    @abstractmethod
    def create_component(self, type_tag: str,
                         parameters: Mapping[str, float]) -> Optional[Component]:
        """Return a new component for `type_tag`, or None if the tag is not supported."""
        pass

    @abstractmethod
    def get_supported_components(self) -> List[str]:
        pass


class PluginState(Enum):
    LOADED = "loaded"
    INITIALIZED = "initialized"
    FAILED = "failed"
    CLEANED_UP = "cleaned_up"


class BasePlugin(IPlugin):
    """
    Base class for plugin implementations.

    Implements the lifecycle LOADED -> INITIALIZED -> CLEANED_UP. initialize()
    runs do_initialize() at most once and caches its outcome; cleanup() runs
    do_cleanup() only from INITIALIZED. Subclasses provide do_initialize(),
    do_cleanup(), create_component() and get_supported_components().
    """
    def __init__(self, name: str, version: str, description: str = ""):
        self._name = name
        self._version = version
        self._description = description
        self._state = PluginState.LOADED

    @property
    def name(self) -> str:
        return self._name

    @property
    def version(self) -> str:
        return self._version

    @property
    def description(self) -> str:
        return self._description

    @property
    def state(self) -> PluginState:
        return self._state

    @property
    def initialized(self) -> bool:
        return self._state is PluginState.INITIALIZED

    def initialize(self) -> bool:
        if self._state is not PluginState.LOADED:
            return self._state is PluginState.INITIALIZED
        try:
            ok = bool(self.do_initialize())
        except Exception as e:
            logger.error("Plugin '%s' raised during initialization: %s", self._name, e)
            ok = False
        self._state = PluginState.INITIALIZED if ok else PluginState.FAILED
        return ok

    def cleanup(self) -> None:
        if self._state is not PluginState.INITIALIZED:
            return
        try:
            self.do_cleanup()
        finally:
            self._state = PluginState.CLEANED_UP

    @staticmethod
    def parameter(parameters: Optional[Mapping[str, float]], key: str, default: float) -> float:
        """Look up a numeric parameter, falling back to `default` when absent."""
        if parameters is None or key not in parameters:
            return default
        return float(parameters[key])

    @abstractmethod
    def do_initialize(self) -> bool:
        pass

    @abstractmethod
    def do_cleanup(self) -> None:
        pass

    def __repr__(self) -> str:
        return f"<Plugin {self._name} v{self._version} ({self._state.value})>"
