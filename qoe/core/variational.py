# File: qoe/core/variational.py

"""
Variational parameter tuning for the QAOA circuit.

Finite-difference gradient descent over the 2 * depth circuit angles
(gamma_0, beta_0, gamma_1, beta_1, ...). Each gradient entry is a central
difference of two short circuit simulations on fresh states, so one step
costs 2 * len(params) + 1 circuit evaluations.
"""

import logging
import numpy as np
from dataclasses import dataclass, field
from typing import List, Sequence, Tuple

from .driver_base import RunContext
from .evaluator import EnergyEvaluator
from .operators import apply_mixer, apply_problem_phase
from .problem import OptimizationProblem
from .quantum_state import QuantumState

logger = logging.getLogger(__name__)


def run_circuit(state: QuantumState, problem: OptimizationProblem,
                params: Sequence[float], depth: int) -> QuantumState:
    """Apply ``depth`` layers of problem phase (gamma) followed by mixer (beta)."""
    for layer in range(depth):
        apply_problem_phase(state, problem.objectives, params[2 * layer])
        apply_mixer(state, params[2 * layer + 1])
    return state


@dataclass
class VariationalResult:
    params: np.ndarray
    energy: float
    steps: int = 0
    evaluations: int = 0
    energy_history: List[float] = field(default_factory=list)
    stopped_early: bool = False


class VariationalOptimizer:
    """
    Central-difference gradient descent on circuit parameters.

    Parameters
    ----------
    evaluator : EnergyEvaluator
        Energy function shared with the drivers.
    epsilon : float
        Finite-difference step.
    learning_rate : float
        Initial step size.
    decay : float
        Multiplier applied to the learning rate every ``decay_interval`` steps.
    """

    def __init__(self, evaluator: EnergyEvaluator, epsilon: float = 0.01,
                 learning_rate: float = 0.1, decay: float = 0.99, decay_interval: int = 10):
        self.evaluator = evaluator
        self.epsilon = epsilon
        self.learning_rate = learning_rate
        self.decay = decay
        self.decay_interval = decay_interval
        self.evaluations = 0

    def evaluate(self, problem: OptimizationProblem, params: Sequence[float],
                 context: RunContext) -> float:
        """Energy of one measurement after running the circuit on a fresh state."""
        self.evaluations += 1
        state = QuantumState.initialize(problem.dimensions, f"{problem.id}_trial")
        run_circuit(state, problem, params, len(params) // 2)
        assignment = context.sampler.measure(state, problem)
        return self.evaluator.energy(assignment, problem)

    def gradient(self, problem: OptimizationProblem, params: np.ndarray,
                 context: RunContext) -> np.ndarray:
        grad = np.zeros_like(params)
        for i in range(params.size):
            shifted_up = params.copy()
            shifted_down = params.copy()
            shifted_up[i] += self.epsilon
            shifted_down[i] -= self.epsilon

            energy_up = self.evaluate(problem, shifted_up, context)
            energy_down = self.evaluate(problem, shifted_down, context)
            grad[i] = (energy_up - energy_down) / (2.0 * self.epsilon)
        return grad

    def step(self, problem: OptimizationProblem, params: np.ndarray, learning_rate: float,
             context: RunContext) -> Tuple[np.ndarray, float, np.ndarray]:
        """One descent step: returns (updated params, their energy, gradient)."""
        grad = self.gradient(problem, params, context)
        updated = params - learning_rate * grad
        energy = self.evaluate(problem, updated, context)
        return updated, energy, grad

    def optimize(self, problem: OptimizationProblem, initial_params: Sequence[float],
                 steps: int, context: RunContext) -> VariationalResult:
        best_params = np.asarray(initial_params, dtype=float).copy()
        result = VariationalResult(params=best_params, energy=float("inf"))
        learning_rate = self.learning_rate
        evaluations_before = self.evaluations

        for step in range(steps):
            candidate, energy, grad = self.step(problem, result.params, learning_rate, context)
            result.steps += 1

            if energy < result.energy and np.all(np.isfinite(candidate)):
                result.params = candidate
                result.energy = energy
                logger.debug(f"Variational step {step}: energy {energy:.6f}, "
                             f"|grad|={np.linalg.norm(grad):.4f}, lr={learning_rate:.5f}")
            result.energy_history.append(result.energy)

            if (step + 1) % self.decay_interval == 0:
                learning_rate *= self.decay

            if context.expired():
                result.stopped_early = True
                break

        result.evaluations = self.evaluations - evaluations_before
        return result
