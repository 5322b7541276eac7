# File: qoe/core/problem.py

"""
Optimization problem and algorithm configuration data model.

Problems are supplied by an external collaborator and are read-only for the
duration of a run. ``from_dict`` constructors accept both snake_case and the
camelCase keys used by JSON producers.
"""

import math
import numbers
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Sequence, Tuple, Union

from .exceptions import InvalidProblem, ParameterOutOfRange

logger = logging.getLogger(__name__)

Value = Union[int, float, str]
Assignment = Dict[str, Value]

CLASSICAL_METHODS = ("genetic_algorithm", "hill_climbing")


def _pick(data: Dict[str, Any], *keys: str, default: Any = None) -> Any:
    for key in keys:
        if key in data and data[key] is not None:
            return data[key]
    return default


class VariableType(Enum):
    CONTINUOUS = "continuous"
    DISCRETE = "discrete"
    BINARY = "binary"


class OptimizationDirection(Enum):
    MINIMIZE = "minimize"
    MAXIMIZE = "maximize"


class AlgorithmType(Enum):
    ANNEALING = "annealing"
    QAOA = "qaoa"
    QUANTUM_WALK = "quantum_walk"
    CLASSICAL = "classical"

    @classmethod
    def parse(cls, value: Union[str, "AlgorithmType"]) -> "AlgorithmType":
        if isinstance(value, cls):
            return value
        key = str(value).strip().lower().replace("-", "_")
        aliases = {
            "quantum_annealing": cls.ANNEALING,
            "quantum_approximate_optimization": cls.QAOA,
            "classical_fallback": cls.CLASSICAL,
        }
        if key in aliases:
            return aliases[key]
        try:
            return cls(key)
        except ValueError:
            choices = ", ".join(member.value for member in cls)
            raise ParameterOutOfRange("algorithm", value, f"one of {choices}") from None


@dataclass(frozen=True)
class VariableDomain:
    min: Optional[float] = None
    max: Optional[float] = None
    allowed_values: Optional[Tuple[Value, ...]] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "VariableDomain":
        allowed = _pick(data, "allowed_values", "allowedValues")
        return cls(
            min=_pick(data, "min"),
            max=_pick(data, "max"),
            allowed_values=tuple(allowed) if allowed is not None else None,
        )

    @property
    def midpoint(self) -> float:
        return (self.min + self.max) / 2.0

    @property
    def width(self) -> float:
        return self.max - self.min


@dataclass(frozen=True)
class Variable:
    id: str
    type: VariableType
    domain: VariableDomain = field(default_factory=VariableDomain)
    quantum_superposition: bool = False
    name: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Variable":
        try:
            var_type = VariableType(str(data.get("type", "continuous")).lower())
        except ValueError:
            raise InvalidProblem(f"Variable '{data.get('id')}' has unsupported type {data.get('type')!r}")
        return cls(
            id=str(data["id"]),
            type=var_type,
            domain=VariableDomain.from_dict(data.get("domain", {})),
            quantum_superposition=bool(_pick(data, "quantum_superposition", "quantumSuperposition", default=False)),
            name=data.get("name"),
        )

    def allowed_values(self) -> Tuple[Value, ...]:
        """Values a discrete or binary variable may take."""
        if self.type is VariableType.BINARY:
            return (0, 1)
        if self.domain.allowed_values:
            return self.domain.allowed_values
        if self.domain.min is not None and self.domain.max is not None:
            return tuple(range(int(math.ceil(self.domain.min)), int(math.floor(self.domain.max)) + 1))
        return ()

    def validate(self) -> None:
        if self.type is VariableType.CONTINUOUS:
            if self.domain.min is None or self.domain.max is None:
                raise InvalidProblem(f"Continuous variable '{self.id}' needs domain min and max")
            if not (math.isfinite(self.domain.min) and math.isfinite(self.domain.max)):
                raise InvalidProblem(f"Continuous variable '{self.id}' has a non-finite domain")
            if self.domain.min > self.domain.max:
                raise InvalidProblem(
                    f"Variable '{self.id}' has contradictory bounds "
                    f"min={self.domain.min} > max={self.domain.max}"
                )
        elif self.type is VariableType.DISCRETE:
            if (self.domain.min is not None and self.domain.max is not None
                    and self.domain.min > self.domain.max):
                raise InvalidProblem(
                    f"Variable '{self.id}' has contradictory bounds "
                    f"min={self.domain.min} > max={self.domain.max}"
                )
            if not self.allowed_values():
                raise InvalidProblem(f"Discrete variable '{self.id}' has no allowed values")


@dataclass(frozen=True)
class Objective:
    id: str
    type: str
    weight: float = 1.0
    minimize_or_maximize: OptimizationDirection = OptimizationDirection.MINIMIZE
    name: Optional[str] = None
    target: Optional[float] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Objective":
        direction = _pick(data, "minimize_or_maximize", "minimizeOrMaximize", default="minimize")
        try:
            direction = OptimizationDirection(str(direction).lower())
        except ValueError:
            raise InvalidProblem(f"Objective '{data.get('id')}' has unsupported direction {direction!r}")
        return cls(
            id=str(data["id"]),
            type=str(data.get("type", "generic_sum")),
            weight=float(data.get("weight", 1.0)),
            minimize_or_maximize=direction,
            name=data.get("name"),
            target=data.get("target"),
        )

    @property
    def minimize(self) -> bool:
        return self.minimize_or_maximize is OptimizationDirection.MINIMIZE


@dataclass(frozen=True)
class ConstraintBounds:
    min: Optional[float] = None
    max: Optional[float] = None


@dataclass(frozen=True)
class Constraint:
    """
    Bound on the sum of every numeric variable value in an assignment.

    The sum covers all variables regardless of which ones the constraint
    logically concerns; per-variable constraints are not modelled.
    """

    bounds: ConstraintBounds = field(default_factory=ConstraintBounds)
    id: Optional[str] = None
    name: Optional[str] = None
    type: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Constraint":
        bounds = data.get("bounds", {})
        return cls(
            bounds=ConstraintBounds(min=bounds.get("min"), max=bounds.get("max")),
            id=data.get("id"),
            name=data.get("name"),
            type=data.get("type"),
        )

    def validate(self) -> None:
        lower, upper = self.bounds.min, self.bounds.max
        if lower is not None and upper is not None and lower > upper:
            raise InvalidProblem(f"Constraint '{self.id}' has contradictory bounds min={lower} > max={upper}")


@dataclass(frozen=True)
class OptimizationProblem:
    id: str
    variables: Tuple[Variable, ...]
    objectives: Tuple[Objective, ...] = ()
    constraints: Tuple[Constraint, ...] = ()
    name: Optional[str] = None
    problem_type: Optional[str] = None

    def __post_init__(self):
        # Freeze sequences so the problem cannot change mid-run
        object.__setattr__(self, "variables", tuple(self.variables))
        object.__setattr__(self, "objectives", tuple(self.objectives))
        object.__setattr__(self, "constraints", tuple(self.constraints))

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "OptimizationProblem":
        if "id" not in data:
            raise InvalidProblem("Problem definition has no 'id'")
        return cls(
            id=str(data["id"]),
            variables=tuple(Variable.from_dict(v) for v in data.get("variables", [])),
            objectives=tuple(Objective.from_dict(o) for o in data.get("objectives", [])),
            constraints=tuple(Constraint.from_dict(c) for c in data.get("constraints", [])),
            name=data.get("name"),
            problem_type=_pick(data, "problem_type", "type"),
        )

    @property
    def dimensions(self) -> int:
        return len(self.variables)

    def validate(self) -> None:
        """Structural validation; raises ``InvalidProblem``."""
        if not self.variables:
            raise InvalidProblem("problem has no variables", self.id)

        seen = set()
        for variable in self.variables:
            if variable.id in seen:
                raise InvalidProblem(f"duplicate variable id '{variable.id}'", self.id)
            seen.add(variable.id)
            variable.validate()

        for constraint in self.constraints:
            constraint.validate()


# ==================== Algorithm configuration ====================

@dataclass(frozen=True)
class CoolingSchedule:
    initial_temperature: Optional[float] = None
    final_temperature: float = 0.01
    rate: float = 0.95

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "CoolingSchedule":
        return cls(
            initial_temperature=_pick(data, "initial_temperature", "initialTemperature"),
            final_temperature=float(_pick(data, "final_temperature", "finalTemperature", default=0.01)),
            rate=float(data.get("rate", 0.95)),
        )


@dataclass(frozen=True)
class NoiseModel:
    enabled: bool = False
    gate_error_rate: float = 0.001
    measurement_error_rate: float = 0.01
    decoherence_time: float = 100.0

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "NoiseModel":
        if not data:
            return cls()
        return cls(
            enabled=bool(data.get("enabled", False)),
            gate_error_rate=float(_pick(data, "gate_error_rate", "gateErrorRate", default=0.001)),
            measurement_error_rate=float(_pick(data, "measurement_error_rate", "measurementErrorRate", default=0.01)),
            decoherence_time=float(_pick(data, "decoherence_time", "decoherenceTime", default=100.0)),
        )

    def validate(self) -> None:
        for name in ("gate_error_rate", "measurement_error_rate"):
            value = getattr(self, name)
            if not 0.0 <= value <= 1.0:
                raise ParameterOutOfRange(name, value, "must lie in [0, 1]")
        if self.decoherence_time <= 0:
            raise ParameterOutOfRange("decoherence_time", self.decoherence_time, "must be positive")


@dataclass(frozen=True)
class AlgorithmParameters:
    iterations: int = 100
    temperature: Optional[float] = None
    cooling_schedule: Optional[CoolingSchedule] = None
    circuit_depth: Optional[int] = None
    variational_parameters: Optional[Tuple[float, ...]] = None
    quantum_walk_steps: Optional[int] = None
    classical_method: Optional[str] = None
    population_size: Optional[int] = None
    mutation_rate: Optional[float] = None
    crossover_rate: Optional[float] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "AlgorithmParameters":
        schedule = _pick(data, "cooling_schedule", "coolingSchedule")
        params = _pick(data, "variational_parameters", "variationalParameters")
        depth = _pick(data, "circuit_depth", "circuitDepth")
        steps = _pick(data, "quantum_walk_steps", "quantumWalkSteps")
        temperature = data.get("temperature")
        method = _pick(data, "classical_method", "classicalMethod")
        population = _pick(data, "population_size", "populationSize")
        mutation = _pick(data, "mutation_rate", "mutationRate")
        crossover = _pick(data, "crossover_rate", "crossoverRate")
        return cls(
            iterations=int(data.get("iterations", 100)),
            temperature=float(temperature) if temperature is not None else None,
            cooling_schedule=CoolingSchedule.from_dict(schedule) if schedule else None,
            circuit_depth=int(depth) if depth is not None else None,
            variational_parameters=tuple(float(p) for p in params) if params is not None else None,
            quantum_walk_steps=int(steps) if steps is not None else None,
            classical_method=str(method).strip().lower().replace("-", "_") if method is not None else None,
            population_size=int(population) if population is not None else None,
            mutation_rate=float(mutation) if mutation is not None else None,
            crossover_rate=float(crossover) if crossover is not None else None,
        )


@dataclass(frozen=True)
class AlgorithmConfig:
    algorithm: AlgorithmType
    parameters: AlgorithmParameters = field(default_factory=AlgorithmParameters)
    noise_model: NoiseModel = field(default_factory=NoiseModel)
    deadline_seconds: Optional[float] = None

    def __post_init__(self):
        object.__setattr__(self, "algorithm", AlgorithmType.parse(self.algorithm))

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "AlgorithmConfig":
        if "algorithm" not in data:
            raise ParameterOutOfRange("algorithm", None, "an algorithm name is required")
        deadline = _pick(data, "deadline_seconds", "deadlineSeconds")
        return cls(
            algorithm=AlgorithmType.parse(data["algorithm"]),
            parameters=AlgorithmParameters.from_dict(data.get("parameters", {})),
            noise_model=NoiseModel.from_dict(_pick(data, "noise_model", "noiseModel")),
            deadline_seconds=float(deadline) if deadline is not None else None,
        )

    def validate(self) -> None:
        """Range checks; raises ``ParameterOutOfRange``."""
        params = self.parameters

        if params.iterations < 0:
            raise ParameterOutOfRange("iterations", params.iterations, "must be >= 0")
        if params.temperature is not None and params.temperature <= 0:
            raise ParameterOutOfRange("temperature", params.temperature, "must be positive")

        schedule = params.cooling_schedule
        if schedule is not None:
            if not 0.0 < schedule.rate < 1.0:
                raise ParameterOutOfRange("cooling_schedule.rate", schedule.rate, "must lie in (0, 1)")
            if schedule.final_temperature < 0:
                raise ParameterOutOfRange("cooling_schedule.final_temperature",
                                          schedule.final_temperature, "must be >= 0")
            if schedule.initial_temperature is not None and schedule.initial_temperature <= 0:
                raise ParameterOutOfRange("cooling_schedule.initial_temperature",
                                          schedule.initial_temperature, "must be positive")

        if params.circuit_depth is not None and params.circuit_depth <= 0:
            raise ParameterOutOfRange("circuit_depth", params.circuit_depth, "must be > 0")
        if params.variational_parameters is not None:
            depth = params.circuit_depth if params.circuit_depth is not None else 3
            if len(params.variational_parameters) < 2 * depth:
                raise ParameterOutOfRange(
                    "variational_parameters", list(params.variational_parameters),
                    f"need at least {2 * depth} values for circuit depth {depth}",
                )
            if not all(math.isfinite(p) for p in params.variational_parameters):
                raise ParameterOutOfRange("variational_parameters",
                                          list(params.variational_parameters), "must be finite")

        if params.quantum_walk_steps is not None and params.quantum_walk_steps < 0:
            raise ParameterOutOfRange("quantum_walk_steps", params.quantum_walk_steps, "must be >= 0")

        if params.classical_method is not None and params.classical_method not in CLASSICAL_METHODS:
            raise ParameterOutOfRange("classical_method", params.classical_method,
                                      f"one of {', '.join(CLASSICAL_METHODS)}")
        if params.population_size is not None and params.population_size < 2:
            raise ParameterOutOfRange("population_size", params.population_size, "must be >= 2")
        for name in ("mutation_rate", "crossover_rate"):
            value = getattr(params, name)
            if value is not None and not 0.0 <= value <= 1.0:
                raise ParameterOutOfRange(name, value, "must lie in [0, 1]")

        if self.deadline_seconds is not None and self.deadline_seconds <= 0:
            raise ParameterOutOfRange("deadline_seconds", self.deadline_seconds, "must be positive")

        self.noise_model.validate()


def numeric_values(assignment: Assignment) -> List[float]:
    """Numeric values of an assignment, in variable order (strings and bools skipped)."""
    return [float(v) for v in assignment.values()
            if isinstance(v, numbers.Real) and not isinstance(v, bool)]


def make_problem(problem_id: str, variables: Sequence[Variable],
                 objectives: Sequence[Objective] = (),
                 constraints: Sequence[Constraint] = (), **kwargs) -> OptimizationProblem:
    """Convenience constructor accepting any sequences."""
    return OptimizationProblem(
        id=problem_id,
        variables=tuple(variables),
        objectives=tuple(objectives),
        constraints=tuple(constraints),
        **kwargs,
    )
