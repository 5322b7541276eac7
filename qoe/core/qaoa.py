# File: qoe/core/qaoa.py

"""
QAOA Driver

Layered circuit of problem-phase and mixer operators. The circuit is run
once with the starting parameters (measuring after every layer), the
parameters are tuned by ``VariationalOptimizer`` and the tuned circuit is
run a final time on a fresh state.
"""

import logging
import numpy as np
from typing import Optional

from .driver_base import CandidatePool, DriverResult, QuantumDriver, RunContext
from .evaluator import EnergyEvaluator
from .problem import AlgorithmConfig, AlgorithmType, OptimizationProblem
from .variational import VariationalOptimizer, run_circuit
from .operators import apply_mixer, apply_problem_phase

logger = logging.getLogger(__name__)

DEFAULT_CIRCUIT_DEPTH = 3


class QAOADriver(QuantumDriver):
    """Quantum approximate optimization with finite-difference parameter tuning."""

    algorithm = AlgorithmType.QAOA

    def __init__(self, evaluator: Optional[EnergyEvaluator] = None,
                 optimizer: Optional[VariationalOptimizer] = None):
        super().__init__(evaluator)
        self.optimizer = optimizer

    def _execute(self, problem: OptimizationProblem, config: AlgorithmConfig,
                 context: RunContext) -> DriverResult:
        params_config = config.parameters
        depth = params_config.circuit_depth or DEFAULT_CIRCUIT_DEPTH

        if params_config.variational_parameters:
            params = np.asarray(params_config.variational_parameters[:2 * depth], dtype=float)
        else:
            params = context.rng.uniform(0.0, 2.0 * np.pi, 2 * depth)

        pool = CandidatePool()
        best, best_energy = self._seed_solution(problem, context)
        pool.offer(best, best_energy, "initial classical sample")

        state = self._new_state(problem)
        result = DriverResult(self.algorithm, best, best_energy, state)
        result.best_energy_trace.append(best_energy)

        # Initial pass, one measurement per layer
        for layer in range(depth):
            apply_problem_phase(state, problem.objectives, params[2 * layer])
            apply_mixer(state, params[2 * layer + 1])
            self._apply_noise(state, context)

            candidate, energy = self._measure(state, problem, context)
            result.measurements += 1
            result.proposals += 1
            pool.offer(candidate, energy, f"layer {layer + 1} measurement")
            if energy < best_energy:
                best, best_energy = candidate, energy
                result.accepted_moves += 1
                logger.debug(f"Layer {layer + 1}: new best energy {best_energy:.6f}")
            result.best_energy_trace.append(best_energy)

        optimizer = self.optimizer or VariationalOptimizer(self.evaluator)
        tuned = optimizer.optimize(problem, params, params_config.iterations, context)
        result.iterations = tuned.steps
        result.measurements += tuned.evaluations
        if tuned.stopped_early:
            result.terminated_by = "deadline"

        final_params = tuned.params
        final_state = self._new_state(problem, "final")
        final_state.recoveries.extend(state.recoveries)
        run_circuit(final_state, problem, final_params, depth)
        self._apply_noise(final_state, context)

        candidate, energy = self._measure(final_state, problem, context)
        result.measurements += 1
        result.proposals += 1
        pool.offer(candidate, energy, "optimized circuit measurement")
        if energy < best_energy:
            best, best_energy = candidate, energy
            result.accepted_moves += 1
        result.best_energy_trace.append(best_energy)

        result.best_assignment = best
        result.best_energy = best_energy
        result.state = final_state
        result.alternatives = pool.alternatives(best)
        result.details.update({
            "circuit_depth": depth,
            "optimized_parameters": [float(p) for p in final_params],
            "variational_energy": tuned.energy if np.isfinite(tuned.energy) else None,
            "circuit_evaluations": tuned.evaluations,
            "variational_energy_trace": [e for e in tuned.energy_history if np.isfinite(e)],
        })
        return result
