# File: qoe/core/engine.py

"""
Quantum Optimization Engine

Entry point that validates a problem, picks or accepts an algorithm
configuration, runs the matching driver with a fresh random generator and
assembles the immutable solution. When quantum drivers are disabled, or a
quantum run fails and the classical fallback is enabled, the classical
driver answers instead. The engine keeps aggregate run statistics only;
quantum states never outlive a single ``optimize`` call.
"""

import math
import time
import logging
import threading
import numpy as np
from dataclasses import dataclass
from typing import Any, Dict, Optional

from ..config import DEFAULT_CONFIG, build_algorithm_config
from .annealing import AnnealingDriver
from .classical import ClassicalDriver
from .driver_base import DriverResult, QuantumDriver
from .evaluator import EnergyEvaluator
from .exceptions import ParameterOutOfRange
from .objectives import ScorerRegistry
from .problem import AlgorithmConfig, AlgorithmType, OptimizationProblem
from .qaoa import QAOADriver
from .quantum_walk import QuantumWalkDriver
from .solution import QuantumOptimizationSolution, SolutionAssembler, to_builtin

logger = logging.getLogger(__name__)

MAX_AUTO_ANNEALING_ITERATIONS = 1000


def problem_complexity(problem: OptimizationProblem) -> int:
    """|variables| * |objectives| + 10 * |constraints|."""
    return len(problem.variables) * len(problem.objectives) + 10 * len(problem.constraints)


@dataclass(frozen=True)
class BenchmarkReport:
    """
    Quantum run against the classical driver on the same problem and seed.

    ``energy_gap`` is classical energy minus quantum energy, so it is
    positive when the quantum run found the lower energy. ``speedup`` is
    classical time over quantum time.
    """
    quantum: QuantumOptimizationSolution
    classical: QuantumOptimizationSolution
    energy_gap: float
    speedup: float

    def to_dict(self) -> Dict[str, Any]:
        return to_builtin(self)


class QuantumOptimizationEngine:
    """
    Dispatches optimization problems to the annealing, QAOA, quantum walk and classical drivers.

    Parameters
    ----------
    config : dict, optional
        Engine configuration shaped like ``DEFAULT_CONFIG``.
    registry : ScorerRegistry, optional
        Objective scoring rules, for collaborators that register extra tags.
    """

    def __init__(self, config: Optional[Dict[str, Any]] = None,
                 registry: Optional[ScorerRegistry] = None):
        self.config = config if config is not None else DEFAULT_CONFIG
        self.evaluator = EnergyEvaluator(registry)

        engine_config = self.config.get('engine', {})
        self.assembler = SolutionAssembler(
            self.evaluator,
            confidence=engine_config.get('confidence', 0.85),
            shots=engine_config.get('measurement_shots', 1000),
        )
        self.drivers: Dict[AlgorithmType, QuantumDriver] = {
            AlgorithmType.ANNEALING: AnnealingDriver(self.evaluator),
            AlgorithmType.QAOA: QAOADriver(self.evaluator),
            AlgorithmType.QUANTUM_WALK: QuantumWalkDriver(self.evaluator),
            AlgorithmType.CLASSICAL: ClassicalDriver(self.evaluator),
        }

        self._lock = threading.RLock()
        self._stats = self._empty_statistics()

    @staticmethod
    def _empty_statistics() -> Dict[str, Any]:
        return {
            'total_runs': 0,
            'runs_by_algorithm': {algorithm.value: 0 for algorithm in AlgorithmType},
            'total_computation_time': 0.0,
            'best_score': None,
            'feasible_runs': 0,
            'fallback_runs': 0,
        }

    @property
    def quantum_enabled(self) -> bool:
        return bool(self.config.get('engine', {}).get('quantum_enabled', True))

    @property
    def fallback_enabled(self) -> bool:
        fallback = self.config.get('engine', {}).get('fallback', {})
        return bool(fallback.get('use_classical_fallback', True))

    def select_algorithm(self, problem: OptimizationProblem) -> AlgorithmConfig:
        """Pick an algorithm configuration from the shape of the problem."""
        engine_config = self.config.get('engine', {})
        complexity = problem_complexity(problem)

        if complexity > engine_config.get('complexity_threshold', 100):
            iterations = min(MAX_AUTO_ANNEALING_ITERATIONS, complexity * 10)
            selected = build_algorithm_config(AlgorithmType.ANNEALING, self.config,
                                              iterations=iterations)
        elif problem.problem_type in engine_config.get('structured_problem_types', ()):
            selected = build_algorithm_config(AlgorithmType.QAOA, self.config)
        else:
            selected = build_algorithm_config(AlgorithmType.QUANTUM_WALK, self.config)

        logger.info(f"Selected {selected.algorithm.value} for problem '{problem.id}' "
                    f"(complexity {complexity}, type {problem.problem_type})")
        return selected

    def classical_config(self, config: Optional[AlgorithmConfig] = None) -> AlgorithmConfig:
        """Classical parameter bag, keeping the noise model and deadline of ``config``."""
        fallback = self.config.get('engine', {}).get('fallback', {})
        classical = build_algorithm_config(AlgorithmType.CLASSICAL, self.config,
                                           classical_method=fallback.get('method'))
        if config is None:
            return classical
        return AlgorithmConfig(AlgorithmType.CLASSICAL, classical.parameters,
                               config.noise_model, config.deadline_seconds)

    def optimize(self, problem: OptimizationProblem, config: Optional[AlgorithmConfig] = None,
                 seed: Optional[int] = None,
                 rng: Optional[np.random.Generator] = None) -> QuantumOptimizationSolution:
        """
        Run one optimization.

        Args:
            problem: Problem to solve; validated before any state is allocated
            config: Algorithm configuration, selected automatically when None
            seed: Seed for a fresh ``numpy.random.Generator``
            rng: Generator to use instead of ``seed``

        Returns:
            Assembled solution

        Raises:
            InvalidProblem: Malformed problem or unknown objective type
            ParameterOutOfRange: Algorithm parameters out of range
        """
        problem.validate()
        self.evaluator.validate_objectives(problem)

        if config is None:
            config = self.select_algorithm(problem)
        config.validate()

        if rng is None:
            rng = np.random.default_rng(seed)

        fallback = False
        if config.algorithm is not AlgorithmType.CLASSICAL and not self.quantum_enabled:
            logger.info(f"Quantum drivers disabled; running classical optimizer on '{problem.id}'")
            config = self.classical_config(config)
            fallback = True

        start_time = time.perf_counter()
        try:
            result = self.drivers[config.algorithm].run(problem, config, rng)
        except Exception as e:
            if config.algorithm is AlgorithmType.CLASSICAL or not self.fallback_enabled:
                raise
            logger.warning(f"{config.algorithm.value} failed on '{problem.id}': {e}. "
                           f"Using classical fallback.")
            result = self._run_fallback(problem, config, rng, e)
            fallback = True
        computation_time = time.perf_counter() - start_time

        solution = self.assembler.assemble(problem, result, computation_time)
        self._record_run(solution, fallback)
        return solution

    def _run_fallback(self, problem: OptimizationProblem, failed: AlgorithmConfig,
                      rng: np.random.Generator, error: Exception) -> DriverResult:
        config = self.classical_config(failed)
        result = self.drivers[AlgorithmType.CLASSICAL].run(problem, config, rng)
        result.details["fallback_from"] = failed.algorithm.value
        result.details["fallback_reason"] = str(error)
        return result

    def benchmark(self, problem: OptimizationProblem, config: Optional[AlgorithmConfig] = None,
                  seed: Optional[int] = None) -> BenchmarkReport:
        """
        Run a quantum driver and the classical driver on the same problem.

        Both runs draw from generators seeded with ``seed``. Both are counted
        in the engine statistics.
        """
        if config is not None and config.algorithm is AlgorithmType.CLASSICAL:
            raise ParameterOutOfRange("algorithm", config.algorithm.value,
                                      "a benchmark needs a quantum algorithm")

        quantum = self.optimize(problem, config, seed=seed)
        classical = self.optimize(problem, self.classical_config(config), seed=seed)

        quantum_time = quantum.computation_time
        speedup = classical.computation_time / quantum_time if quantum_time > 0 else math.inf

        report = BenchmarkReport(quantum, classical, classical.energy - quantum.energy, speedup)
        logger.info(f"Benchmark on '{problem.id}': {quantum.algorithm.value} energy {quantum.energy:.6f}, "
                    f"classical energy {classical.energy:.6f}, speedup {speedup:.3f}")
        return report

    def _record_run(self, solution: QuantumOptimizationSolution, fallback: bool = False) -> None:
        with self._lock:
            stats = self._stats
            stats['total_runs'] += 1
            stats['runs_by_algorithm'][solution.algorithm.value] += 1
            stats['total_computation_time'] += solution.computation_time
            if solution.solution.feasible:
                stats['feasible_runs'] += 1
            if fallback:
                stats['fallback_runs'] += 1

            score = solution.solution.overall_score
            if stats['best_score'] is None or score > stats['best_score']:
                stats['best_score'] = score

    def get_statistics(self) -> Dict[str, Any]:
        """Snapshot of aggregate run statistics."""
        with self._lock:
            stats = dict(self._stats)
            stats['runs_by_algorithm'] = dict(self._stats['runs_by_algorithm'])

        total = stats['total_runs']
        stats['mean_computation_time'] = stats['total_computation_time'] / total if total else 0.0
        stats['feasible_rate'] = stats['feasible_runs'] / total if total else 0.0
        return stats

    def reset_statistics(self) -> None:
        with self._lock:
            self._stats = self._empty_statistics()


def optimize(problem: OptimizationProblem, config: Optional[AlgorithmConfig] = None,
             seed: Optional[int] = None) -> QuantumOptimizationSolution:
    """One-shot optimization with a default engine."""
    return QuantumOptimizationEngine().optimize(problem, config, seed=seed)
