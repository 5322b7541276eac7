# File: qoe/core/annealing.py

"""
Quantum Annealing Driver

Simulated annealing with quantum-style tunnelling:

    Init -> {Fluctuate -> Measure -> Evaluate -> AcceptOrReject -> Cool} -> Done

Accepted candidates become the walker's current position and reinforce the
state; the best assignment ever accepted is tracked separately, so the
best-energy trace never increases even when a worse candidate tunnels in.
"""

import math
import logging
from typing import Optional

from .driver_base import CandidatePool, DriverResult, QuantumDriver, RunContext
from .operators import apply_fluctuation, apply_reinforcement
from .problem import AlgorithmConfig, AlgorithmType, CoolingSchedule, OptimizationProblem

logger = logging.getLogger(__name__)

DEFAULT_TEMPERATURE = 100.0
CLASSICAL_TEMPERATURE_SCALE = 0.1
TUNNELING_ENHANCEMENT = 1.2


def tunneling_probability(current_energy: float, candidate_energy: float,
                          temperature: float) -> float:
    """
    Probability of moving to a candidate that is not an improvement.

    max(exp(-d/T), 1.2 * exp(-d/(0.1 T))) for d = candidate - current, and
    1.0 whenever the candidate is at least as good.
    """
    delta = candidate_energy - current_energy
    if delta <= 0:
        return 1.0
    if temperature <= 0:
        return 0.0

    quantum = math.exp(-delta / temperature)
    boltzmann = math.exp(-delta / (temperature * CLASSICAL_TEMPERATURE_SCALE))
    return min(1.0, max(quantum, TUNNELING_ENHANCEMENT * boltzmann))


class AnnealingDriver(QuantumDriver):
    """Temperature-scheduled search over states perturbed by quantum fluctuations."""

    algorithm = AlgorithmType.ANNEALING

    def _execute(self, problem: OptimizationProblem, config: AlgorithmConfig,
                 context: RunContext) -> DriverResult:
        params = config.parameters
        schedule = params.cooling_schedule or CoolingSchedule()
        temperature = _initial_temperature(params.temperature, schedule)

        state = self._new_state(problem)
        pool = CandidatePool()

        current, current_energy = self._seed_solution(problem, context)
        best, best_energy = dict(current), current_energy
        pool.offer(best, best_energy, "initial classical sample")

        result = DriverResult(self.algorithm, best, best_energy, state)
        result.best_energy_trace.append(best_energy)

        for _ in range(params.iterations):
            apply_fluctuation(state, temperature, context.rng)

            candidate, candidate_energy = self._measure(state, problem, context)
            result.iterations += 1
            result.measurements += 1
            result.proposals += 1

            accept = candidate_energy < current_energy
            if not accept:
                probability = tunneling_probability(current_energy, candidate_energy, temperature)
                accept = context.rng.random() < probability

            if accept:
                current, current_energy = candidate, candidate_energy
                result.accepted_moves += 1
                apply_reinforcement(state, problem, candidate, candidate_energy)
                pool.offer(candidate, candidate_energy, f"accepted at iteration {result.iterations}")

                if candidate_energy < best_energy:
                    best, best_energy = candidate, candidate_energy
                    logger.debug(f"Iteration {result.iterations}: new best energy {best_energy:.6f} "
                                 f"at T={temperature:.4f}")

            temperature *= schedule.rate
            self._apply_noise(state, context)
            result.best_energy_trace.append(best_energy)

            if temperature < schedule.final_temperature:
                result.terminated_by = "temperature"
                break
            if context.expired():
                result.terminated_by = "deadline"
                break

        result.best_assignment = best
        result.best_energy = best_energy
        result.alternatives = pool.alternatives(best)
        result.details["final_temperature"] = temperature
        return result


def _initial_temperature(temperature: Optional[float], schedule: CoolingSchedule) -> float:
    if temperature is not None:
        return float(temperature)
    if schedule.initial_temperature is not None:
        return float(schedule.initial_temperature)
    return DEFAULT_TEMPERATURE
