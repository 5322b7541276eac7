# File: qoe/core/classical.py

"""
Classical Fallback Driver

Population and neighbourhood search over the same energy landscape the
quantum drivers explore. The engine runs it when quantum drivers are
disabled, when a quantum run fails, and as the baseline of a
quantum-versus-classical benchmark.

Methods:
    genetic_algorithm: tournament selection, uniform crossover, single-gene
        mutation and elitist survivor selection over parents and offspring
    hill_climbing: first-improvement search over random single-gene
        neighbours, stopping at a local optimum

The driver allocates a uniform register only so that solution assembly can
report it; the register is never evolved.
"""

import logging
import numpy as np
from typing import List, Tuple

from .driver_base import CandidatePool, DriverResult, QuantumDriver, RunContext
from .problem import (
    AlgorithmConfig, AlgorithmParameters, AlgorithmType, Assignment,
    OptimizationProblem, VariableType,
)

logger = logging.getLogger(__name__)

DEFAULT_METHOD = "genetic_algorithm"
DEFAULT_POPULATION_SIZE = 100
DEFAULT_MUTATION_RATE = 0.1
DEFAULT_CROSSOVER_RATE = 0.8
TOURNAMENT_SIZE = 5
NEIGHBOURS_PER_STEP = 10
MUTATION_SCALE = 0.1
CONVERGENCE_WINDOW = 10
CONVERGENCE_THRESHOLD = 1e-6

Member = Tuple[Assignment, float]


class ClassicalDriver(QuantumDriver):
    """Genetic algorithm and hill climbing scored by the shared energy evaluator."""

    algorithm = AlgorithmType.CLASSICAL

    def _execute(self, problem: OptimizationProblem, config: AlgorithmConfig,
                 context: RunContext) -> DriverResult:
        params = config.parameters
        method = params.classical_method or DEFAULT_METHOD

        seed, seed_energy = self._seed_solution(problem, context)
        pool = CandidatePool()
        pool.offer(seed, seed_energy, "initial classical sample")

        result = DriverResult(self.algorithm, seed, seed_energy, self._new_state(problem, "classical"))

        if method == "hill_climbing":
            self._hill_climb(problem, params, context, result, pool)
        else:
            self._evolve(problem, params, context, result, pool)

        result.alternatives = pool.alternatives(result.best_assignment)
        result.details["method"] = method
        result.details["evaluations"] = result.proposals + 1
        return result

    # ==================== Genetic algorithm ====================

    def _evolve(self, problem: OptimizationProblem, params: AlgorithmParameters,
                context: RunContext, result: DriverResult, pool: CandidatePool) -> None:
        size = params.population_size or DEFAULT_POPULATION_SIZE
        mutation_rate = _rate(params.mutation_rate, DEFAULT_MUTATION_RATE)
        crossover_rate = _rate(params.crossover_rate, DEFAULT_CROSSOVER_RATE)

        population: List[Member] = [(result.best_assignment, result.best_energy)]
        for _ in range(size - 1):
            member, energy = self._seed_solution(problem, context)
            population.append((member, energy))
            result.proposals += 1
        population.sort(key=lambda m: m[1])
        self._promote(population[0], result, pool, "initial population")
        result.best_energy_trace.append(result.best_energy)

        for generation in range(params.iterations):
            parents = [self._tournament(population, context.rng) for _ in range(size)]

            offspring = []
            for first, second in zip(parents[::2], parents[1::2]):
                first, second = dict(first), dict(second)
                if context.rng.random() < crossover_rate:
                    first, second = self._crossover(first, second, problem, context.rng)
                offspring.extend([first, second])

            evaluated = []
            for child in offspring:
                if context.rng.random() < mutation_rate:
                    child = self._mutate(child, problem, context)
                energy = self.evaluator.energy(child, problem)
                evaluated.append((child, energy))
                pool.offer(child, energy, f"generation {generation + 1}")

            result.iterations += 1
            result.proposals += len(evaluated)
            population = sorted(population + evaluated, key=lambda m: m[1])[:size]
            self._promote(population[0], result, pool, f"generation {generation + 1}")
            result.best_energy_trace.append(result.best_energy)

            if self._converged(result.best_energy_trace):
                result.terminated_by = "converged"
                break
            if context.expired():
                result.terminated_by = "deadline"
                break

        result.details["population_size"] = size

    @staticmethod
    def _tournament(population: List[Member], rng: np.random.Generator) -> Assignment:
        # Population is sorted by energy, so the smallest drawn index wins
        contestants = rng.integers(0, len(population), size=min(TOURNAMENT_SIZE, len(population)))
        return population[int(np.min(contestants))][0]

    @staticmethod
    def _crossover(first: Assignment, second: Assignment, problem: OptimizationProblem,
                   rng: np.random.Generator) -> Tuple[Assignment, Assignment]:
        """Uniform crossover: each gene swaps between the children with probability 0.5."""
        swap = rng.random(problem.dimensions) < 0.5
        for variable, exchange in zip(problem.variables, swap):
            if exchange:
                key = variable.id
                first[key], second[key] = second[key], first[key]
        return first, second

    @staticmethod
    def _converged(trace: List[float]) -> bool:
        if len(trace) <= CONVERGENCE_WINDOW:
            return False
        return float(np.var(trace[-CONVERGENCE_WINDOW:])) < CONVERGENCE_THRESHOLD

    # ==================== Hill climbing ====================

    def _hill_climb(self, problem: OptimizationProblem, params: AlgorithmParameters,
                    context: RunContext, result: DriverResult, pool: CandidatePool) -> None:
        current, current_energy = result.best_assignment, result.best_energy
        result.best_energy_trace.append(current_energy)

        for _ in range(params.iterations):
            result.iterations += 1
            improved = False

            for _ in range(NEIGHBOURS_PER_STEP):
                neighbour = self._mutate(current, problem, context)
                energy = self.evaluator.energy(neighbour, problem)
                result.proposals += 1
                if energy < current_energy:
                    current, current_energy = neighbour, energy
                    self._promote((current, current_energy), result, pool,
                                  f"step {result.iterations}")
                    improved = True
                    break

            result.best_energy_trace.append(result.best_energy)
            if not improved:
                result.terminated_by = "local_optimum"
                break
            if context.expired():
                result.terminated_by = "deadline"
                break

    # ==================== Shared helpers ====================

    def _mutate(self, assignment: Assignment, problem: OptimizationProblem,
                context: RunContext) -> Assignment:
        """Copy of ``assignment`` with one randomly chosen gene changed."""
        mutant = dict(assignment)
        variable = problem.variables[int(context.rng.integers(0, problem.dimensions))]

        if variable.type is VariableType.CONTINUOUS:
            domain = variable.domain
            step = (context.rng.random() - 0.5) * MUTATION_SCALE * domain.width
            mutant[variable.id] = float(min(max(float(mutant[variable.id]) + step, domain.min), domain.max))
        else:
            mutant[variable.id] = context.sampler.sample_from_domain(variable)
        return mutant

    @staticmethod
    def _promote(member: Member, result: DriverResult, pool: CandidatePool,
                 description: str) -> None:
        assignment, energy = member
        if energy < result.best_energy:
            result.best_assignment, result.best_energy = dict(assignment), energy
            result.accepted_moves += 1
            pool.offer(assignment, energy, description)
            logger.debug(f"{description}: new best energy {energy:.6f}")


def _rate(value, default: float) -> float:
    return default if value is None else float(value)
