# File: qoe/core/solution.py

"""
Solution records and their assembly from a finished driver run.

Everything here is an immutable value: the assembler copies what it needs
out of the ``DriverResult`` (including the final probabilities) so no
``QuantumState`` outlives the run that produced it. Mapping fields are
exposed as read-only ``MappingProxyType`` views and sequences as tuples.
"""

import time
import uuid
import logging
import numpy as np
from dataclasses import dataclass, field, fields, is_dataclass
from enum import Enum
from scipy.stats import entropy
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional, Tuple

from .driver_base import DriverResult
from .evaluator import EnergyEvaluator
from .problem import AlgorithmType, OptimizationProblem

logger = logging.getLogger(__name__)

DEFAULT_CONFIDENCE = 0.85
DEFAULT_SHOTS = 1000


def freeze(value: Any) -> Any:
    """Read-only copy of nested dicts and lists."""
    if isinstance(value, Mapping):
        return MappingProxyType({key: freeze(item) for key, item in value.items()})
    if isinstance(value, (list, tuple)):
        return tuple(freeze(item) for item in value)
    return value


def to_builtin(value: Any) -> Any:
    """Plain dicts, lists and enum values, ready for ``json.dumps``."""
    if is_dataclass(value) and not isinstance(value, type):
        return {f.name: to_builtin(getattr(value, f.name)) for f in fields(value)}
    if isinstance(value, Mapping):
        return {key: to_builtin(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [to_builtin(item) for item in value]
    if isinstance(value, Enum):
        return value.value
    return value


@dataclass(frozen=True)
class MeasurementResult:
    """Probability of one basis state and its expected count over ``shots``."""
    state: str
    probability: float
    count: int


@dataclass(frozen=True)
class AlternativeSolution:
    variables: Mapping[str, Any]
    score: float
    description: str

    def __post_init__(self):
        object.__setattr__(self, "variables", freeze(self.variables))


@dataclass(frozen=True)
class QuantumMetrics:
    superposition_states: int
    measurement_results: Tuple[MeasurementResult, ...]
    measurement_entropy: float
    final_norm: float
    iterations: int
    measurements: int
    accepted_moves: int
    acceptance_rate: float
    degenerate_recoveries: int
    noise_enabled: bool
    measurement_errors: int
    terminated_by: str
    best_energy_trace: Tuple[float, ...] = ()
    details: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        object.__setattr__(self, "measurement_results", tuple(self.measurement_results))
        object.__setattr__(self, "best_energy_trace", tuple(self.best_energy_trace))
        object.__setattr__(self, "details", freeze(self.details))


@dataclass(frozen=True)
class OptimizationSolution:
    variables: Mapping[str, Any]
    objective_values: Mapping[str, float]
    overall_score: float
    feasible: bool
    confidence: float
    alternative_solutions: Tuple[AlternativeSolution, ...] = ()

    def __post_init__(self):
        object.__setattr__(self, "variables", freeze(self.variables))
        object.__setattr__(self, "objective_values", freeze(self.objective_values))
        object.__setattr__(self, "alternative_solutions", tuple(self.alternative_solutions))


@dataclass(frozen=True)
class QuantumOptimizationSolution:
    id: str
    problem_id: str
    algorithm: AlgorithmType
    solution: OptimizationSolution
    quantum_metrics: QuantumMetrics
    timestamp: float
    computation_time: float

    @property
    def energy(self) -> float:
        return -self.solution.overall_score

    def to_dict(self) -> Dict[str, Any]:
        return to_builtin(self)


class SolutionAssembler:
    """
    Builds a ``QuantumOptimizationSolution`` from a driver's result.

    Parameters
    ----------
    evaluator : EnergyEvaluator
        Re-scores the final assignment.
    confidence : float
        Reported confidence of the returned solution.
    shots : int
        Shot count used for the expected measurement counts.
    """

    def __init__(self, evaluator: EnergyEvaluator, confidence: float = DEFAULT_CONFIDENCE,
                 shots: int = DEFAULT_SHOTS):
        self.evaluator = evaluator
        self.confidence = confidence
        self.shots = shots

    def assemble(self, problem: OptimizationProblem, result: DriverResult,
                 computation_time: float, timestamp: Optional[float] = None) -> QuantumOptimizationSolution:
        best = result.best_assignment
        energy = self.evaluator.energy(best, problem)

        solution = OptimizationSolution(
            variables=dict(best),
            objective_values=self.evaluator.objective_values(best, problem),
            overall_score=-energy,
            feasible=self.evaluator.is_feasible(best, problem),
            confidence=self.confidence,
            alternative_solutions=tuple(
                AlternativeSolution(dict(assignment), -alt_energy, description)
                for assignment, alt_energy, description in result.alternatives
            ),
        )

        return QuantumOptimizationSolution(
            id=f"qsol_{uuid.uuid4().hex[:12]}",
            problem_id=problem.id,
            algorithm=result.algorithm,
            solution=solution,
            quantum_metrics=self.metrics(result),
            timestamp=timestamp if timestamp is not None else time.time(),
            computation_time=computation_time,
        )

    def metrics(self, result: DriverResult) -> QuantumMetrics:
        state = result.state
        probabilities = np.asarray(state.measurement_probabilities, dtype=float)

        return QuantumMetrics(
            superposition_states=state.dimensions,
            measurement_results=self.measurement_results(probabilities),
            measurement_entropy=measurement_entropy(probabilities),
            final_norm=state.norm(),
            iterations=result.iterations,
            measurements=result.measurements,
            accepted_moves=result.accepted_moves,
            acceptance_rate=result.acceptance_rate,
            degenerate_recoveries=len(state.recoveries),
            noise_enabled=bool(result.details.get("noise_enabled", False)),
            measurement_errors=result.measurement_errors,
            terminated_by=result.terminated_by,
            best_energy_trace=tuple(float(e) for e in result.best_energy_trace),
            details=dict(result.details),
        )

    def measurement_results(self, probabilities: np.ndarray) -> Tuple[MeasurementResult, ...]:
        return tuple(
            MeasurementResult(f"|{i}>", float(p), int(round(float(p) * self.shots)))
            for i, p in enumerate(probabilities)
        )


def measurement_entropy(probabilities: np.ndarray) -> float:
    """Shannon entropy in bits; 0 for a single basis state."""
    if probabilities.size <= 1 or not np.any(probabilities > 0):
        return 0.0
    return float(entropy(probabilities, base=2))

