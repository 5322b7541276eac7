# File: qoe/core/quantum_walk.py

"""
Quantum Walk Driver

Discrete-time walk over the variable slots: coin, then cyclic shift, then
interference on every step, with a measurement on every tenth step. The
coin and shift matrices are built once per run.
"""

import logging

from .driver_base import CandidatePool, DriverResult, QuantumDriver, RunContext
from .operators import apply_interference, apply_operator, coin_operator, shift_operator
from .problem import AlgorithmConfig, AlgorithmType, OptimizationProblem

logger = logging.getLogger(__name__)

DEFAULT_WALK_STEPS = 1000
MEASUREMENT_INTERVAL = 10


class QuantumWalkDriver(QuantumDriver):
    """Coin-and-shift walk sampled at a fixed interval."""

    algorithm = AlgorithmType.QUANTUM_WALK

    def _execute(self, problem: OptimizationProblem, config: AlgorithmConfig,
                 context: RunContext) -> DriverResult:
        steps = config.parameters.quantum_walk_steps
        if steps is None:
            steps = DEFAULT_WALK_STEPS

        pool = CandidatePool()
        best, best_energy = self._seed_solution(problem, context)
        pool.offer(best, best_energy, "initial classical sample")

        state = self._new_state(problem)
        coin = coin_operator(problem.dimensions)
        shift = shift_operator(problem.dimensions)

        result = DriverResult(self.algorithm, best, best_energy, state, terminated_by="steps")
        result.best_energy_trace.append(best_energy)

        for step in range(steps):
            apply_operator(state, coin)
            apply_operator(state, shift)
            result.iterations += 1

            if step % MEASUREMENT_INTERVAL == 0:
                candidate, energy = self._measure(state, problem, context)
                result.measurements += 1
                result.proposals += 1
                pool.offer(candidate, energy, f"walk step {step}")
                if energy < best_energy:
                    best, best_energy = candidate, energy
                    result.accepted_moves += 1
                    logger.debug(f"Step {step}: new best energy {best_energy:.6f}")
                result.best_energy_trace.append(best_energy)

            apply_interference(state)
            self._apply_noise(state, context)

            if context.expired():
                result.terminated_by = "deadline"
                break

        result.best_assignment = best
        result.best_energy = best_energy
        result.alternatives = pool.alternatives(best)
        result.details["walk_steps"] = result.iterations
        return result
