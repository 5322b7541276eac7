# File: qoe/core/sampler.py

"""
Measurement of a quantum state into a concrete variable assignment.

Basis slot ``i`` of the state belongs to variable ``i`` of the problem. A
variable flagged for superposition with a non-zero slot probability is drawn
with probability-weighted sampling; every other variable is sampled
classically and uniformly from its domain.
"""

import math
import logging
import numpy as np
from typing import Optional, Sequence

from .problem import (
    Assignment, NoiseModel, OptimizationProblem, Value, Variable, VariableType,
)
from .quantum_state import QuantumState

logger = logging.getLogger(__name__)

# Spread added to quantum Gaussian draws
QUANTUM_ENHANCEMENT = 0.1


class MeasurementSampler:
    """
    Converts states to assignments using an injected random generator.

    Parameters
    ----------
    rng : np.random.Generator
        Source of every random draw; a seeded generator makes measurement
        fully reproducible.
    noise_model : NoiseModel, optional
        When enabled, superposed draws fall back to classical sampling with
        probability ``measurement_error_rate``.
    """

    def __init__(self, rng: np.random.Generator, noise_model: Optional[NoiseModel] = None):
        self.rng = rng
        self.noise_model = noise_model or NoiseModel()
        self.measurement_errors = 0

    def measure(self, state: QuantumState, problem: OptimizationProblem) -> Assignment:
        probabilities = state.measurement_probabilities
        assignment: Assignment = {}

        for index, variable in enumerate(problem.variables):
            probability = float(probabilities[index]) if index < state.dimensions else 0.0

            if variable.quantum_superposition and probability > 0 and not self._measurement_error():
                assignment[variable.id] = self.quantum_sample(variable, probability)
            else:
                assignment[variable.id] = self.sample_from_domain(variable)

        return assignment

    def random_assignment(self, problem: OptimizationProblem) -> Assignment:
        """One classical sample of every variable."""
        return {variable.id: self.sample_from_domain(variable) for variable in problem.variables}

    def quantum_sample(self, variable: Variable, probability: float) -> Value:
        if variable.type is VariableType.CONTINUOUS:
            domain = variable.domain
            variance = probability * domain.width
            enhancement = 1.0 + self.rng.random() * QUANTUM_ENHANCEMENT
            draw = domain.midpoint + self.rng.standard_normal() * enhancement * math.sqrt(variance)
            return float(min(max(draw, domain.min), domain.max))

        # Discrete and binary variables index into their allowed values
        values = variable.allowed_values()
        return self._biased_choice(values, probability)

    def sample_from_domain(self, variable: Variable) -> Value:
        if variable.type is VariableType.CONTINUOUS:
            domain = variable.domain
            return float(self.rng.random() * domain.width + domain.min)
        if variable.type is VariableType.BINARY:
            return int(self.rng.integers(0, 2))

        values = variable.allowed_values()
        if not values:
            return 0
        return _plain(values[int(self.rng.integers(0, len(values)))])

    def _biased_choice(self, values: Sequence[Value], probability: float) -> Value:
        count = len(values)
        if count == 0:
            return 0
        index = int(math.floor(self.rng.random() * count * (1.0 + probability * QUANTUM_ENHANCEMENT)))
        return _plain(values[min(index, count - 1)])

    def _measurement_error(self) -> bool:
        if not self.noise_model.enabled or self.noise_model.measurement_error_rate <= 0:
            return False
        if self.rng.random() < self.noise_model.measurement_error_rate:
            self.measurement_errors += 1
            return True
        return False


def _plain(value):
    """Unwrap numpy scalars so assignments hold builtin types."""
    if isinstance(value, np.generic):
        return value.item()
    return value
