# core/numeric/accelerator.py
"""
Numeric batch-acceleration interface.

The simulation core never depends on an accelerator; callers may query one
and route batch work through it when it reports itself available.
CpuFallbackEngine is the implementation used when no device is present.
"""
from typing import Protocol, Sequence, runtime_checkable

import numpy as np
import scipy.linalg

from core.exceptions import NumericError
from utils.logging_config import get_logger

logger = get_logger(__name__)


@runtime_checkable
class NumericAccelerator(Protocol):
    def initialize(self) -> bool: ...
    def cleanup(self) -> None: ...
    def is_available(self) -> bool: ...
    def device_count(self) -> int: ...
    def device_info(self, device_id: int = 0) -> str: ...

    def solve_linear_system(self, matrix: Sequence[Sequence[float]],
                            rhs: Sequence[float]) -> np.ndarray: ...

    def simulate_components(self, voltages: Sequence[float], resistances: Sequence[float],
                            timestep: float, count: int) -> np.ndarray: ...


class CpuFallbackEngine:
    """
    Host-side implementation of NumericAccelerator.

    Reports no accelerator device (is_available() is False, initialize()
    returns False) but still performs the numeric operations on the CPU.
    """
    def __init__(self):
        self._initialized = False

    def initialize(self) -> bool:
        logger.info("No accelerator available. Using CPU fallback engine.")
        self._initialized = False
        return False

    def cleanup(self) -> None:
        self._initialized = False

    def is_available(self) -> bool:
        return False

    def device_count(self) -> int:
        return 0

    def device_info(self, device_id: int = 0) -> str:
        return "No accelerator device available"

    def solve_linear_system(self, matrix: Sequence[Sequence[float]],
                            rhs: Sequence[float]) -> np.ndarray:
        """
        Solve matrix @ x = rhs for a square system.

        Raises:
            NumericError: If the system is not square, the sizes disagree or the matrix is singular.
        """
        A = np.asarray(matrix, dtype=float)
        b = np.asarray(rhs, dtype=float)
        if A.ndim != 2 or A.shape[0] != A.shape[1]:
            raise NumericError(f"Linear system matrix must be square, got shape {A.shape}.")
        if b.shape != (A.shape[0],):
            raise NumericError(
                f"Right-hand side of length {b.shape[0] if b.ndim else 0} does not match "
                f"a {A.shape[0]}x{A.shape[0]} system.")
        try:
            return scipy.linalg.solve(A, b)
        except (scipy.linalg.LinAlgError, ValueError) as e:
            raise NumericError(f"Linear solve failed: {e}") from e

    def simulate_components(self, voltages: Sequence[float], resistances: Sequence[float],
                            timestep: float, count: int) -> np.ndarray:
        """
        Batch Ohm's law for the first `count` resistor-like devices.
        Devices with a non-positive resistance report zero current.
        """
        v = np.asarray(voltages, dtype=float)[:count]
        r = np.asarray(resistances, dtype=float)[:count]
        if v.shape != (count,) or r.shape != (count,):
            raise NumericError(f"Expected {count} voltages and resistances, "
                               f"got {v.shape[0]} and {r.shape[0]}.")
        currents = np.zeros(count)
        positive = r > 0.0
        currents[positive] = v[positive] / r[positive]
        return currents


def get_accelerator() -> NumericAccelerator:
    """Return the best accelerator for this process; currently always the CPU fallback."""
    return CpuFallbackEngine()
