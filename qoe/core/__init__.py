# File: qoe/core/__init__.py

"""Core data model, quantum state simulation, drivers and engine."""

from .exceptions import (
    QOEError, InvalidProblem, InvalidDimension, ParameterOutOfRange, DegenerateStateRecovered,
)
from .problem import (
    VariableType, OptimizationDirection, AlgorithmType,
    VariableDomain, Variable, Objective, ConstraintBounds, Constraint, OptimizationProblem,
    CoolingSchedule, NoiseModel, AlgorithmParameters, AlgorithmConfig, make_problem,
)
from .quantum_state import QuantumState
from .objectives import ObjectiveType, ObjectiveScorer, ScorerRegistry
from .evaluator import EnergyEvaluator
from .sampler import MeasurementSampler
from .annealing import AnnealingDriver
from .qaoa import QAOADriver
from .quantum_walk import QuantumWalkDriver
from .classical import ClassicalDriver
from .variational import VariationalOptimizer
from .solution import (
    MeasurementResult, AlternativeSolution, QuantumMetrics,
    OptimizationSolution, QuantumOptimizationSolution, SolutionAssembler,
)
from .engine import BenchmarkReport, QuantumOptimizationEngine, optimize
