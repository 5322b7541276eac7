# File: qoe/core/exceptions.py

"""
Error taxonomy for the quantum-inspired optimization engine.

Fatal errors (bad input) are raised before any quantum state is allocated.
Degenerate numeric states are not errors: they are recovered in place and
recorded as ``DegenerateStateRecovered`` events on the owning state.
"""

from typing import Optional


class QOEError(Exception):
    """Base class for all engine errors."""


class InvalidProblem(QOEError):
    """Raised when an optimization problem fails structural validation."""

    def __init__(self, message: str, problem_id: Optional[str] = None):
        self.problem_id = problem_id
        if problem_id:
            message = f"Problem '{problem_id}': {message}"
        super().__init__(message)


class InvalidDimension(QOEError, ValueError):
    """Raised when a quantum state is requested with a non-positive dimension."""


class ParameterOutOfRange(QOEError, ValueError):
    """Raised when an algorithm parameter lies outside its valid range."""

    def __init__(self, name: str, value, requirement: str):
        self.name = name
        self.value = value
        super().__init__(f"Parameter '{name}'={value!r} out of range: {requirement}")


class DegenerateStateRecovered(RuntimeWarning):
    """
    Event record for a state that was reset to uniform superposition.

    Instances are stored on the recovered state and counted in the run
    metrics. They are never raised by the engine.
    """

    def __init__(self, state_id: str, reason: str):
        self.state_id = state_id
        self.reason = reason
        super().__init__(f"State '{state_id}' reset to uniform superposition: {reason}")
