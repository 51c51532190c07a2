#!/usr/bin/env python
"""
Simulator entry point for ICSim.
Discovers and loads plugins, builds a circuit (from a description file or the
built-in RC demo), runs the time-stepping loop and reports component readings.
"""
import argparse
import csv
from pathlib import Path
from typing import List, Optional, Sequence

from components.capacitor import Capacitor
from components.resistor import Resistor
from core.exceptions import ICSimError
from core.numeric.accelerator import get_accelerator
from core.plugins.plugin_manager import PluginManager
from core.topology.circuit import Circuit
from core.topology.node import Node
from inout.circuit_description import load_circuit_description
from inout.simulation_config import SimulationConfig, load_simulation_config
from utils.logging_config import get_logger, setup_logging

logger = get_logger(__name__)


def build_demo_circuit() -> Circuit:
    """RC demo: 5 V on N1, 1 kOhm from N1 to N2, 1 uF from N2 to GND."""
    circuit = Circuit("Demo RC Circuit")
    n1, n2, gnd = Node("N1"), Node("N2"), Node("GND")
    for node in (n1, n2, gnd):
        circuit.add_node(node)

    resistor = Resistor(1000.0, "R1")
    resistor.attach(n1)
    resistor.attach(n2)
    capacitor = Capacitor(1e-6, "C1")
    capacitor.attach(n2)
    capacitor.attach(gnd)
    circuit.add_component(resistor)
    circuit.add_component(capacitor)

    n1.set_voltage(5.0)
    gnd.set_voltage(0.0)
    return circuit


class SnapshotRecorder:
    """Step observer keeping every `every`-th circuit snapshot."""
    def __init__(self, every: int = 10):
        self.every = every
        self.snapshots: List[dict] = []
        self._step = 0

    def __call__(self, time: float, circuit: Circuit) -> None:
        if self._step % self.every == 0:
            self.snapshots.append(circuit.snapshot(time))
        self._step += 1

    def write_csv(self, path: Path) -> None:
        with open(path, "w", newline="") as f:
            writer = csv.writer(f)
            writer.writerow(["time", "component", "type", "value"])
            for snap in self.snapshots:
                for comp in snap["components"]:
                    writer.writerow([snap["time"], comp["id"], comp["type"], comp["value"]])


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="ICSim circuit simulation runner")
    parser.add_argument("--circuit", type=Path, help="Circuit description (YAML or JSON); defaults to the RC demo")
    parser.add_argument("--config", type=Path, help="Run configuration YAML file")
    parser.add_argument("--plugin-dir", help="Directory scanned for plugin modules")
    parser.add_argument("--duration", type=float, help="Simulated time in seconds")
    parser.add_argument("--timestep", type=float, help="Timestep in seconds")
    parser.add_argument("--output", type=Path, help="Optional CSV file for recorded snapshots")
    parser.add_argument("--log-level", help="Logging level (DEBUG, INFO, ...)")
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    try:
        config = load_simulation_config(args.config) if args.config else SimulationConfig()
        config = config.merged(duration=args.duration, timestep=args.timestep,
                               plugin_dir=args.plugin_dir, log_level=args.log_level)
    except ICSimError as e:
        print(f"Configuration error: {e}")
        return 1
    setup_logging(config.log_level)

    accelerator = get_accelerator()
    if accelerator.initialize():
        print(f"Acceleration: available ({accelerator.device_count()} device(s), "
              f"{accelerator.device_info()})")
    else:
        print("Acceleration: not available, using CPU fallback")

    with PluginManager() as plugin_manager:
        if config.plugin_dir:
            discovered = plugin_manager.discover_plugins(config.plugin_dir)
            print(f"Discovered {len(discovered)} plugin(s)")
            for plugin_path in discovered:
                plugin_manager.load_plugin(plugin_path)
        plugin_manager.load_entry_point_plugins()

        try:
            circuit = (load_circuit_description(args.circuit, plugin_manager)
                       if args.circuit else build_demo_circuit())
        except ICSimError as e:
            print(f"Circuit load failed: {e}")
            return 1

        recorder = SnapshotRecorder(config.record_every)
        steps = circuit.simulate(config.duration, config.timestep, observer=recorder)

        print(f"Simulation of '{circuit.name}' completed in {steps} steps.")
        for comp_id in sorted(circuit.components):
            comp = circuit.components[comp_id]
            print(f"{comp_id} ({comp.type_tag()}): {comp.current_value():.6g}")

        loaded = plugin_manager.get_loaded_plugins()
        if loaded:
            print("Loaded plugins: " + ", ".join(loaded))
            print("Supported component types: " + ", ".join(plugin_manager.get_all_supported_components()))

        if args.output:
            recorder.write_csv(args.output)
            print(f"Wrote {len(recorder.snapshots)} snapshots to {args.output}")

        accelerator.cleanup()
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
