import numpy as np
import pytest

from components.capacitor import Capacitor
from components.resistor import Resistor
from core.topology.node import Node


def _wired(component, v0, v1):
    n0, n1 = Node("a", v0), Node("b", v1)
    component.attach(n0)
    component.attach(n1)
    return n0, n1

def test_resistor_ohms_law():
    r = Resistor(1000.0, "R1")
    _wired(r, 5.0, 0.0)
    r.advance(1e-6)
    assert r.current_value() == pytest.approx(0.005, abs=1e-9)
    assert r.type_tag() == "Resistor"

def test_resistor_sign_follows_terminal_order():
    r = Resistor(100.0, "R1")
    _wired(r, 0.0, 5.0)
    r.advance(1e-3)
    assert r.current_value() == pytest.approx(-0.05)

def test_resistor_ignores_timestep():
    r = Resistor(50.0)
    _wired(r, 1.0, 0.0)
    r.advance(1.0)
    first = r.current_value()
    r.advance(1e-9)
    assert r.current_value() == first

@pytest.mark.parametrize("terminals", [0, 1])
def test_advance_with_fewer_than_two_terminals_is_noop(terminals):
    r = Resistor(10.0, "R1")
    c = Capacitor(1e-6, "C1")
    for _ in range(terminals):
        r.attach(Node("x", 5.0))
        c.attach(Node("y", 5.0))
    r.advance(1e-3)
    c.advance(1e-3)
    assert r.current_value() == 0.0
    assert c.current_value() == 0.0
    assert c.charge == 0.0

def test_attach_registers_back_reference():
    r = Resistor(10.0, "R1")
    n0, n1 = _wired(r, 1.0, 0.0)
    assert r.nodes == [n0, n1]
    assert n0.components == [r]
    assert n1.components == [r]

def test_extra_terminals_accepted_but_ignored():
    r = Resistor(10.0, "R1")
    _wired(r, 2.0, 1.0)
    r.attach(Node("extra", 100.0))
    assert len(r.nodes) == 3
    r.advance(1e-3)
    assert r.current_value() == pytest.approx(0.1)

def test_zero_resistance_is_unguarded():
    r = Resistor(0.0, "R0")
    _wired(r, 1.0, 0.0)
    with np.errstate(divide="ignore", invalid="ignore"):
        r.advance(1e-3)
    assert np.isinf(r.current_value())

def test_zero_resistance_zero_voltage_gives_nan():
    r = Resistor(0.0, "R0")
    _wired(r, 0.0, 0.0)
    with np.errstate(divide="ignore", invalid="ignore"):
        r.advance(1e-3)
    assert np.isnan(r.current_value())

def test_capacitor_reports_voltage_not_current():
    c = Capacitor(1e-6, "C1")
    _wired(c, 3.0, 1.0)
    c.advance(1e-3)
    assert c.current_value() == pytest.approx(2.0)
    assert c.current == pytest.approx(1e-6 * 2.0 / 1e-3)
    assert c.charge == pytest.approx(2e-6)

def test_capacitor_charge_accumulates_only_on_change():
    c = Capacitor(2e-6, "C1")
    n0, _ = _wired(c, 1.0, 0.0)
    for _ in range(5):
        c.advance(1e-4)
    assert c.charge == pytest.approx(2e-6)
    assert c.current == pytest.approx(0.0)
    n0.set_voltage(3.0)
    c.advance(1e-4)
    assert c.charge == pytest.approx(6e-6)

def test_capacitor_voltage_converges_to_terminal_voltage():
    c = Capacitor(1e-6, "C1")
    n0, _ = _wired(c, 0.0, 0.0)
    c.advance(1e-6)
    n0.set_voltage(5.0)
    gaps = []
    for _ in range(4):
        gaps.append(abs(5.0 - c.current_value()))
        c.advance(1e-6)
    gaps.append(abs(5.0 - c.current_value()))
    assert gaps[0] == pytest.approx(5.0)
    assert gaps[1] < gaps[0]
    assert all(later <= earlier for earlier, later in zip(gaps, gaps[1:]))
    assert gaps[-1] == pytest.approx(0.0)

def test_capacitor_zero_timestep_is_unguarded():
    c = Capacitor(1e-6, "C1")
    _wired(c, 1.0, 0.0)
    with np.errstate(divide="ignore", invalid="ignore"):
        c.advance(0.0)
    assert np.isinf(c.current)
    assert c.current_value() == pytest.approx(1.0)

def test_from_parameters_defaults():
    assert Resistor.from_parameters({}).resistance == 1000.0
    assert Capacitor.from_parameters(None).capacitance == 1e-6
    r = Resistor.from_parameters({"resistance": 47.0, "ignored": 1.0}, comp_id="R9")
    assert r.id == "R9"
    assert r.resistance == 47.0

def test_to_dict_snapshot():
    r = Resistor(100.0, "R1")
    _wired(r, 1.0, 0.0)
    r.advance(1e-3)
    data = r.to_dict()
    assert data == {
        "id": "R1",
        "type": "Resistor",
        "value": pytest.approx(0.01),
        "nodes": ["a", "b"],
        "parameters": {"resistance": 100.0},
    }
