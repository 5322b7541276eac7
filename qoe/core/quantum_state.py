# File: qoe/core/quantum_state.py

"""
Finite-dimensional quantum state with a self-maintained normalization invariant.

A ``QuantumState`` belongs to exactly one driver run. Operators mutate its
amplitude vector through ``set_amplitudes`` and then call ``normalize``;
measurement probabilities are derived from the amplitudes on every read so
they cannot drift out of sync.
"""

import logging
import numpy as np
from typing import List, Optional

from .complex_math import (
    AMPLITUDE_DTYPE, ComplexVector, as_amplitudes, l2_norm, normalize as normalized,
    squared_magnitudes, uniform_amplitudes,
)
from .exceptions import DegenerateStateRecovered, InvalidDimension

logger = logging.getLogger(__name__)

NORMALIZATION_TOLERANCE = 1e-9


class QuantumState:
    """
    Complex amplitude vector over ``dimensions`` basis states.

    Attributes
    ----------
    id : str
        Identifier, usually derived from the problem id.
    dimensions : int
        Number of basis states.
    recoveries : List[DegenerateStateRecovered]
        Degenerate-state events observed on this state, oldest first.
    """

    def __init__(self, state_id: str, amplitudes: ComplexVector):
        amplitudes = as_amplitudes(amplitudes)
        if amplitudes.size == 0:
            raise InvalidDimension("Quantum state requires at least one dimension")

        self.id = state_id
        self.dimensions = int(amplitudes.size)
        self._amplitudes = amplitudes
        self.recoveries: List[DegenerateStateRecovered] = []

    @classmethod
    def initialize(cls, dimensions: int, state_id: str = "state") -> "QuantumState":
        """Create a uniform superposition: every amplitude is (1/sqrt(d), 0)."""
        if not isinstance(dimensions, (int, np.integer)) or dimensions <= 0:
            raise InvalidDimension(f"dimensions must be a positive integer, got {dimensions!r}")

        return cls(state_id, uniform_amplitudes(int(dimensions)))

    @property
    def amplitudes(self) -> ComplexVector:
        """Read-only view of the amplitude vector."""
        view = self._amplitudes.view()
        view.flags.writeable = False
        return view

    @property
    def measurement_probabilities(self) -> np.ndarray:
        return squared_magnitudes(self._amplitudes)

    def set_amplitudes(self, amplitudes: ComplexVector) -> None:
        """Replace the amplitude vector. Callers must ``normalize`` before reading."""
        amplitudes = np.asarray(amplitudes, dtype=AMPLITUDE_DTYPE).reshape(-1)
        if amplitudes.size != self.dimensions:
            raise InvalidDimension(
                f"Expected {self.dimensions} amplitudes, got {amplitudes.size}"
            )
        self._amplitudes = amplitudes.copy()

    def norm(self) -> float:
        return l2_norm(self._amplitudes)

    def is_normalized(self, tolerance: float = NORMALIZATION_TOLERANCE) -> bool:
        return abs(float(np.sum(self.measurement_probabilities)) - 1.0) < tolerance

    def normalize(self) -> bool:
        """
        Rescale amplitudes to unit norm.

        Returns True when the state was degenerate (zero or non-finite norm)
        and had to be reset to a uniform superposition.
        """
        amplitudes = self._amplitudes

        if not np.all(np.isfinite(amplitudes)):
            self._recover("non-finite amplitude")
            return True

        # Pre-scale by the largest magnitude so the sum of squares cannot overflow
        peak = float(np.max(np.abs(amplitudes)))
        if peak <= 0.0:
            self._recover("zero norm")
            return True

        try:
            self._amplitudes = normalized(amplitudes / peak)
        except ZeroDivisionError:
            self._recover(f"norm {l2_norm(amplitudes / peak)}")
            return True
        return False

    def reset(self) -> None:
        self._amplitudes = uniform_amplitudes(self.dimensions)

    def _recover(self, reason: str) -> None:
        event = DegenerateStateRecovered(self.id, reason)
        self.recoveries.append(event)
        self.reset()
        logger.warning(str(event))

    def copy(self, state_id: Optional[str] = None) -> "QuantumState":
        clone = QuantumState(state_id or self.id, self._amplitudes.copy())
        clone.recoveries = list(self.recoveries)
        return clone

    def __repr__(self) -> str:
        return f"QuantumState(id={self.id!r}, dimensions={self.dimensions}, norm={self.norm():.6f})"
