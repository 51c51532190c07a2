import textwrap
from pathlib import Path

import pytest

from components.capacitor import Capacitor
from components.resistor import Resistor
from core.plugins.plugin_manager import PluginManager
from core.topology.circuit import Circuit
from core.topology.node import Node

REPO_ROOT = Path(__file__).resolve().parent.parent

WIDGET_PLUGIN_SOURCE = '''
from core.behavior.component import TwoTerminalComponent
from core.plugins.base import BasePlugin


class Widget(TwoTerminalComponent):
    type_name = "Widget"

    def __init__(self, gain=1.0):
        super().__init__()
        self.gain = gain
        self.reading = 0.0

    def _step(self, timestep, voltage_diff):
        self.reading = float(voltage_diff) * self.gain

    def current_value(self):
        return self.reading


class WidgetPlugin(BasePlugin):
    cleanups = 0

    def __init__(self):
        super().__init__("PLUGIN_NAME", "0.1.0", "Test widgets")

    def create_component(self, type_tag, parameters):
        if type_tag != "Widget":
            return None
        return Widget(self.parameter(parameters, "gain", 1.0))

    def get_supported_components(self):
        return ["Widget"]

    def do_initialize(self):
        return INIT_RESULT

    def do_cleanup(self):
        WidgetPlugin.cleanups += 1


def create_plugin():
    return WidgetPlugin()


def destroy_plugin(plugin):
    plugin.cleanup()
'''


def widget_plugin_source(name: str = "WidgetPlugin", init_result: bool = True) -> str:
    return (WIDGET_PLUGIN_SOURCE
            .replace("PLUGIN_NAME", name)
            .replace("INIT_RESULT", repr(init_result)))


@pytest.fixture
def rc_circuit():
    circuit = Circuit("rc")
    nodes = {n: Node(n) for n in ["n1", "n2", "gnd"]}
    for node in nodes.values():
        circuit.add_node(node)

    r1 = Resistor(1000.0, "R1")
    r1.attach(nodes["n1"])
    r1.attach(nodes["n2"])
    circuit.add_component(r1)

    c1 = Capacitor(1e-6, "C1")
    c1.attach(nodes["n2"])
    c1.attach(nodes["gnd"])
    circuit.add_component(c1)

    nodes["n1"].set_voltage(5.0)
    nodes["n2"].set_voltage(2.0)
    return circuit


@pytest.fixture
def plugin_manager():
    manager = PluginManager()
    yield manager
    manager.unload_all_plugins()


@pytest.fixture
def example_plugin_path():
    return REPO_ROOT / "plugins" / "example_plugin.py"


@pytest.fixture
def write_plugin(tmp_path):
    """Write plugin module source into tmp_path and return the file path."""
    def _write(filename: str, source: str) -> Path:
        path = tmp_path / filename
        path.write_text(textwrap.dedent(source))
        return path
    return _write


@pytest.fixture
def widget_plugin_path(write_plugin):
    return write_plugin("widget_plugin.py", widget_plugin_source())


@pytest.fixture
def dummy_logger(caplog):
    caplog.set_level("DEBUG")
    return caplog
