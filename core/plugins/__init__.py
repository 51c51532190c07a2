# core/plugins/__init__.py
from .base import BasePlugin, IPlugin, PluginState
from .plugin_manager import PluginManager, get_plugin_manager

__all__ = ["BasePlugin", "IPlugin", "PluginState", "PluginManager", "get_plugin_manager"]
