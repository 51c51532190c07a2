# core/exceptions.py

class ICSimError(Exception):
    """Base exception for ICSim errors."""
    pass

class ComponentError(ICSimError):
    """Raised when a component type cannot be resolved or instantiated."""
    pass

class PluginError(ICSimError):
    """Raised when a plugin violates the plugin contract."""
    pass

class PluginLoadError(PluginError):
    """Raised while loading a plugin; converted to a boolean result by the PluginManager."""
    pass

class NumericError(ICSimError):
    """Raised when a numeric accelerator operation cannot be completed."""
    pass

class CircuitDescriptionError(ICSimError):
    """Raised when a persisted circuit description fails validation."""
    pass

class ConfigError(ICSimError):
    """Raised when a simulation configuration file cannot be read or validated."""
    pass
