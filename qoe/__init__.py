# File: qoe/__init__.py

"""
QOE: Quantum-Inspired Optimization Engine
=========================================

Classical simulation of quantum optimization heuristics for multi-objective
problems over continuous, discrete and binary variables.

Main Components:
---------------
- Quantum state simulation with a self-maintained normalization invariant
- Quantum annealing, QAOA and quantum walk drivers
- Classical fallback (genetic algorithm, hill climbing) and quantum-vs-classical benchmarks
- Objective and constraint energy evaluation
- Solution assembly with measured quantum metrics
- Convergence analysis of best-energy traces

Usage Example:
--------------
>>> from qoe import QuantumOptimizationEngine, OptimizationProblem, build_algorithm_config

>>> problem = OptimizationProblem.from_dict({
...     'id': 'budget',
...     'variables': [{'id': 'x', 'type': 'continuous', 'domain': {'min': 0, 'max': 10}}],
...     'objectives': [{'id': 'cost', 'type': 'generic_sum', 'weight': 1.0,
...                     'minimize_or_maximize': 'minimize'}],
... })
>>> engine = QuantumOptimizationEngine()
>>> solution = engine.optimize(problem, build_algorithm_config('annealing'), seed=7)
>>> solution.solution.overall_score

"""

__version__ = "1.0.0"
__author__ = "QOE Team"
__license__ = "MIT"

# Core imports; must precede config, which reads the data model
from .core.exceptions import (
    QOEError, InvalidProblem, InvalidDimension, ParameterOutOfRange, DegenerateStateRecovered,
)
from .core.problem import (
    VariableType, AlgorithmType, Variable, VariableDomain, Objective, Constraint,
    ConstraintBounds, OptimizationProblem, CoolingSchedule, NoiseModel,
    AlgorithmParameters, AlgorithmConfig,
)
from .core.quantum_state import QuantumState
from .core.objectives import ObjectiveType, ObjectiveScorer, ScorerRegistry
from .core.evaluator import EnergyEvaluator
from .core.solution import QuantumOptimizationSolution
from .core.classical import ClassicalDriver
from .core.engine import BenchmarkReport, QuantumOptimizationEngine, optimize as engine_optimize

# Configuration
from .config import DEFAULT_CONFIG, load_config, build_algorithm_config

# Evaluation imports
from .evaluation.convergence import ConvergenceAnalyzer, trace_to_frame

# Utility imports
from .utils.logging_utils import setup_logger, get_logger

# Main exports
__all__ = [
    # Errors
    'QOEError',
    'InvalidProblem',
    'InvalidDimension',
    'ParameterOutOfRange',
    'DegenerateStateRecovered',

    # Data model
    'VariableType',
    'AlgorithmType',
    'Variable',
    'VariableDomain',
    'Objective',
    'Constraint',
    'ConstraintBounds',
    'OptimizationProblem',
    'CoolingSchedule',
    'NoiseModel',
    'AlgorithmParameters',
    'AlgorithmConfig',

    # Simulation and engine
    'QuantumState',
    'ObjectiveType',
    'ObjectiveScorer',
    'ScorerRegistry',
    'EnergyEvaluator',
    'QuantumOptimizationSolution',
    'QuantumOptimizationEngine',
    'ClassicalDriver',
    'BenchmarkReport',

    # Configuration
    'DEFAULT_CONFIG',
    'load_config',
    'build_algorithm_config',

    # Evaluation and utilities
    'ConvergenceAnalyzer',
    'trace_to_frame',
    'setup_logger',
    'get_logger',

    # Convenience
    'optimize',
    'create_default_engine',

    # Version info
    '__version__',
]


# Convenience functions
def create_default_engine(config_path=None, **overrides):
    """
    Create an engine from ``DEFAULT_CONFIG``.

    Args:
        config_path: Optional JSON file merged over the defaults
        **overrides: Top-level sections merged last, e.g. ``engine={'confidence': 0.9}``

    Returns:
        Configured QuantumOptimizationEngine
    """
    return QuantumOptimizationEngine(load_config(config_path, overrides or None))


def optimize(problem, config=None, seed=None):
    """
    Optimize a problem with a default engine.

    Args:
        problem: OptimizationProblem or its dict form
        config: AlgorithmConfig, its dict form, or None for automatic selection
        seed: Optional random seed

    Returns:
        QuantumOptimizationSolution
    """
    if isinstance(problem, dict):
        problem = OptimizationProblem.from_dict(problem)
    if isinstance(config, dict):
        config = AlgorithmConfig.from_dict(config)
    return engine_optimize(problem, config, seed=seed)
