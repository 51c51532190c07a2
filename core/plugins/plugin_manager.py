# core/plugins/plugin_manager.py
"""
Plugin manager for ICSim.
Loads plugin modules from files or from installed entry points, keeps the
registry of initialized plugins and brokers component creation across them.
"""
import atexit
import importlib.machinery
import importlib.util
import sys
import threading
import uuid
from dataclasses import dataclass
from importlib.metadata import entry_points
from pathlib import Path
from types import ModuleType
from typing import Callable, Dict, List, Mapping, Optional, Tuple, Union

from core.behavior.component import Component
from core.exceptions import PluginLoadError
from core.plugins.base import FACTORY_SYMBOL, IPlugin
from utils.logging_config import get_logger

logger = get_logger(__name__)

ENTRY_POINT_GROUP = "icsim.plugins"

# Suffixes of files the import system can load as modules (.py, .so, .pyd, ...).
PLUGIN_SUFFIXES: Tuple[str, ...] = tuple(
    importlib.machinery.SOURCE_SUFFIXES + importlib.machinery.EXTENSION_SUFFIXES
)


@dataclass
class LibraryHandle:
    """
    Loaded plugin library. For file plugins `module_name` is the private
    sys.modules key the module was imported under; entry point plugins have none.
    """
    source: str
    module_name: Optional[str] = None
    module: Optional[ModuleType] = None

    def close(self) -> None:
        if self.module_name is not None:
            sys.modules.pop(self.module_name, None)
        self.module = None


def _open_library(path: Union[str, Path]) -> LibraryHandle:
    path = Path(path)
    if not path.is_file():
        raise PluginLoadError(f"Failed to load plugin library: {path} (no such file)")
    module_name = f"icsim_plugin_{path.name.split('.')[0]}_{uuid.uuid4().hex[:8]}"
    spec = importlib.util.spec_from_file_location(module_name, path)
    if spec is None or spec.loader is None:
        raise PluginLoadError(f"Failed to load plugin library: {path} (not an importable module)")
    module = importlib.util.module_from_spec(spec)
    handle = LibraryHandle(str(path), module_name, module)
    sys.modules[module_name] = module
    try:
        spec.loader.exec_module(module)
    except Exception as e:
        handle.close()
        raise PluginLoadError(f"Failed to load plugin library: {path} ({type(e).__name__}: {e})") from e
    return handle


class PluginManager:
    """
    Registry of loaded plugins.

    Registry reads and writes are serialized by a single re-entrant lock.
    Plugins are keyed by the name they report; loading a second plugin with the
    same name replaces the first entry.
    """
    def __init__(self):
        self._plugins: Dict[str, IPlugin] = {}
        self._handles: Dict[str, LibraryHandle] = {}
        self._lock = threading.RLock()

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------
    def load_plugin(self, plugin_path: Union[str, Path]) -> bool:
        """
        Load, initialize and register the plugin module at `plugin_path`.

        Returns False, registering nothing, when the module cannot be imported,
        does not export `create_plugin`, the factory returns no plugin, or the
        plugin fails to initialize.
        """
        return self._load_file(plugin_path) is not None

    def _load_file(self, plugin_path: Union[str, Path]) -> Optional[str]:
        logger.info("Loading plugin: %s", plugin_path)
        with self._lock:
            try:
                handle = _open_library(plugin_path)
                plugin = self._instantiate(getattr(handle.module, FACTORY_SYMBOL, None),
                                           handle, str(plugin_path))
            except PluginLoadError as e:
                logger.error("%s", e)
                return None
            self._register(plugin, handle)
            return plugin.name

    def load_entry_point_plugins(self, group: str = ENTRY_POINT_GROUP) -> List[str]:
        """
        Load plugins advertised by installed distributions under the entry point
        `group`. Each entry point must resolve to a zero-argument plugin factory.

        Returns:
            Names of the plugins that were registered.
        """
        loaded: List[str] = []
        for ep in entry_points(group=group):
            source = f"entry point '{ep.name}' ({ep.value})"
            logger.info("Loading plugin: %s", source)
            try:
                factory = ep.load()
            except Exception as e:
                logger.error("Failed to load plugin library: %s (%s)", source, e)
                continue
            handle = LibraryHandle(source)
            with self._lock:
                try:
                    plugin = self._instantiate(factory, handle, source)
                except PluginLoadError as e:
                    logger.error("%s", e)
                    continue
                self._register(plugin, handle)
            loaded.append(plugin.name)
        return loaded

    def load_plugins_from_directory(self, directory: Union[str, Path]) -> List[str]:
        """Discover plugin files in `directory` and load each; returns the names registered."""
        loaded: List[str] = []
        for plugin_path in self.discover_plugins(directory):
            name = self._load_file(plugin_path)
            if name is not None:
                loaded.append(name)
        return loaded

    def _instantiate(self, factory: Optional[Callable[[], IPlugin]],
                     handle: LibraryHandle, source: str) -> IPlugin:
        if not callable(factory):
            handle.close()
            raise PluginLoadError(f"Plugin does not export {FACTORY_SYMBOL} function: {source}")
        try:
            plugin = factory()
        except Exception as e:
            handle.close()
            raise PluginLoadError(f"Failed to create plugin instance: {source} ({e})") from e
        if plugin is None:
            handle.close()
            raise PluginLoadError(f"Failed to create plugin instance: {source}")
        if not isinstance(plugin, IPlugin):
            handle.close()
            raise PluginLoadError(
                f"Plugin factory in {source} returned {type(plugin).__name__}, not an IPlugin")
        try:
            initialized = plugin.initialize()
        except Exception as e:
            handle.close()
            raise PluginLoadError(f"Failed to initialize plugin: {source} ({type(e).__name__}: {e})") from e
        if not initialized:
            handle.close()
            raise PluginLoadError(f"Failed to initialize plugin: {plugin.name}")
        return plugin

    def _register(self, plugin: IPlugin, handle: LibraryHandle) -> None:
        name = plugin.name
        if name in self._plugins:
            # The replaced plugin is neither cleaned up nor is its handle released.
            logger.warning("Plugin '%s' is already loaded; replacing it with %s", name, handle.source)
        self._plugins[name] = plugin
        self._handles[name] = handle
        logger.info("Successfully loaded plugin: %s v%s", name, plugin.version)

    # ------------------------------------------------------------------
    # Unloading
    # ------------------------------------------------------------------
    def unload_plugin(self, plugin_name: str) -> bool:
        with self._lock:
            plugin = self._plugins.pop(plugin_name, None)
            if plugin is None:
                return False
            try:
                plugin.cleanup()
            except Exception as e:
                logger.error("Plugin '%s' failed during cleanup: %s", plugin_name, e)
            handle = self._handles.pop(plugin_name, None)
            if handle is not None:
                handle.close()
            logger.info("Unloaded plugin: %s", plugin_name)
            return True

    def unload_all_plugins(self) -> None:
        with self._lock:
            for name in list(self._plugins):
                self.unload_plugin(name)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------
    def get_loaded_plugins(self) -> List[str]:
        with self._lock:
            return sorted(self._plugins)

    def get_plugin(self, name: str) -> Optional[IPlugin]:
        with self._lock:
            return self._plugins.get(name)

    def create_component(self, type_tag: str,
                         parameters: Optional[Mapping[str, float]] = None) -> Optional[Component]:
        """
        Ask each plugin supporting `type_tag`, in plugin-name order, for a new component.
        Returns the first component produced, or None when no plugin manages to.
        """
        parameters = dict(parameters or {})
        with self._lock:
            for name in sorted(self._plugins):
                plugin = self._plugins[name]
                try:
                    if type_tag not in plugin.get_supported_components():
                        continue
                    component = plugin.create_component(type_tag, parameters)
                except Exception as e:
                    logger.error("Plugin '%s' failed to create '%s': %s", name, type_tag, e)
                    continue
                if component is not None:
                    logger.info("Created component '%s' using plugin '%s'", type_tag, name)
                    return component
        logger.warning("No plugin found to create component type: %s", type_tag)
        return None

    def get_all_supported_components(self) -> List[str]:
        with self._lock:
            supported = set()
            for name, plugin in self._plugins.items():
                try:
                    supported.update(plugin.get_supported_components())
                except Exception as e:
                    logger.error("Plugin '%s' failed to list its component types: %s", name, e)
        return sorted(supported)

    def discover_plugins(self, directory: Union[str, Path]) -> List[str]:
        """
        List plugin files in `directory`: regular files with an importable module suffix.
        A missing directory or a filesystem error yields an empty list.
        """
        path = Path(directory)
        try:
            if not path.is_dir():
                return []
            found = [str(entry) for entry in path.iterdir()
                     if entry.is_file() and entry.name.endswith(PLUGIN_SUFFIXES)]
        except OSError as e:
            logger.error("Error discovering plugins in %s: %s", directory, e)
            return []
        return sorted(found)

    def __contains__(self, name: str) -> bool:
        with self._lock:
            return name in self._plugins

    def __len__(self) -> int:
        with self._lock:
            return len(self._plugins)

    def __enter__(self) -> "PluginManager":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.unload_all_plugins()


_default_manager: Optional[PluginManager] = None
_default_lock = threading.Lock()


def get_plugin_manager() -> PluginManager:
    """
    Process default PluginManager, created on first use and unloaded at
    interpreter exit. Code that can be handed a manager should take one
    explicitly instead.
    """
    global _default_manager
    with _default_lock:
        if _default_manager is None:
            _default_manager = PluginManager()
            atexit.register(_default_manager.unload_all_plugins)
        return _default_manager
