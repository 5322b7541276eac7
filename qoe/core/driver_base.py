# File: qoe/core/driver_base.py

"""
Shared scaffolding for the algorithm drivers.

A driver run owns its ``QuantumState``, sampler and random generator for
the length of one ``run`` call and reports everything it observed through a
``DriverResult`` value. Nothing is cached between runs.
"""

import time
import logging
import numpy as np
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

from .evaluator import EnergyEvaluator
from .operators import apply_noise
from .problem import AlgorithmConfig, AlgorithmType, Assignment, NoiseModel, OptimizationProblem
from .quantum_state import QuantumState
from .sampler import MeasurementSampler

logger = logging.getLogger(__name__)

MAX_ALTERNATIVES = 3


class RunContext:
    """Per-run resources: random generator, noise model and optional deadline."""

    def __init__(self, rng: np.random.Generator, noise_model: Optional[NoiseModel] = None,
                 deadline_seconds: Optional[float] = None):
        self.rng = rng
        self.noise_model = noise_model or NoiseModel()
        self.started = time.monotonic()
        self.deadline = self.started + deadline_seconds if deadline_seconds is not None else None
        self.sampler = MeasurementSampler(rng, self.noise_model)

    def expired(self) -> bool:
        return self.deadline is not None and time.monotonic() >= self.deadline

    def elapsed(self) -> float:
        return time.monotonic() - self.started


class CandidatePool:
    """Keeps the lowest-energy distinct assignments seen during a run."""

    def __init__(self, capacity: int = MAX_ALTERNATIVES + 1):
        self.capacity = capacity
        self._entries: List[Tuple[float, int, Assignment, str]] = []
        self._counter = 0

    def offer(self, assignment: Assignment, energy: float, description: str) -> None:
        if any(entry[2] == assignment for entry in self._entries):
            return
        self._counter += 1
        self._entries.append((energy, self._counter, dict(assignment), description))
        self._entries.sort(key=lambda entry: (entry[0], entry[1]))
        del self._entries[self.capacity:]

    def alternatives(self, best: Assignment) -> List[Tuple[Assignment, float, str]]:
        return [(assignment, energy, description)
                for energy, _, assignment, description in self._entries
                if assignment != best][:MAX_ALTERNATIVES]


@dataclass
class DriverResult:
    """Everything a driver run reports back to the assembler."""
    algorithm: AlgorithmType
    best_assignment: Assignment
    best_energy: float
    state: QuantumState
    iterations: int = 0
    measurements: int = 0
    proposals: int = 0
    accepted_moves: int = 0
    terminated_by: str = "iterations"
    best_energy_trace: List[float] = field(default_factory=list)
    alternatives: List[Tuple[Assignment, float, str]] = field(default_factory=list)
    measurement_errors: int = 0
    details: Dict[str, object] = field(default_factory=dict)

    @property
    def acceptance_rate(self) -> float:
        return self.accepted_moves / self.proposals if self.proposals else 0.0


class QuantumDriver(ABC):
    """
    Base class for the iterative drivers.

    Subclasses implement ``_execute``; ``run`` wires up the per-run context.
    """

    algorithm: AlgorithmType

    def __init__(self, evaluator: Optional[EnergyEvaluator] = None):
        self.evaluator = evaluator or EnergyEvaluator()

    def run(self, problem: OptimizationProblem, config: AlgorithmConfig,
            rng: np.random.Generator) -> DriverResult:
        context = RunContext(rng, config.noise_model, config.deadline_seconds)
        logger.info(f"Starting {self.algorithm.value} on problem '{problem.id}': "
                    f"{problem.dimensions} variables, {len(problem.objectives)} objectives")

        result = self._execute(problem, config, context)
        result.measurement_errors = context.sampler.measurement_errors
        result.details["noise_enabled"] = context.noise_model.enabled

        logger.info(f"{self.algorithm.value} finished on '{problem.id}': "
                    f"{result.iterations} iterations, best energy {result.best_energy:.6f}, "
                    f"stopped by {result.terminated_by} after {context.elapsed():.3f}s")
        return result

    @abstractmethod
    def _execute(self, problem: OptimizationProblem, config: AlgorithmConfig,
                 context: RunContext) -> DriverResult:
        pass

    def _new_state(self, problem: OptimizationProblem, suffix: str = "state") -> QuantumState:
        return QuantumState.initialize(problem.dimensions, f"{problem.id}_{suffix}")

    def _measure(self, state: QuantumState, problem: OptimizationProblem,
                 context: RunContext) -> Tuple[Assignment, float]:
        assignment = context.sampler.measure(state, problem)
        return assignment, self.evaluator.energy(assignment, problem)

    def _seed_solution(self, problem: OptimizationProblem,
                       context: RunContext) -> Tuple[Assignment, float]:
        """Classical random sample used as the fallback best solution."""
        assignment = context.sampler.random_assignment(problem)
        return assignment, self.evaluator.energy(assignment, problem)

    @staticmethod
    def _apply_noise(state: QuantumState, context: RunContext) -> None:
        apply_noise(state, context.noise_model, context.rng)
