# File: qoe/core/evaluator.py

"""
Energy evaluation for candidate assignments.

Energy is the single quantity every driver minimizes:

    E = sum_k w_k * (v_k if minimize else -v_k) + 1000 * sum_c violation_c

where ``v_k`` is the scored value of objective ``k`` and each constraint
violation is measured against the sum of all numeric variable values.
"""

import logging
from typing import Dict, List, Optional

from .exceptions import InvalidProblem
from .objectives import ScorerRegistry
from .problem import Assignment, Constraint, Objective, OptimizationProblem, numeric_values

logger = logging.getLogger(__name__)

CONSTRAINT_PENALTY = 1000.0


class EnergyEvaluator:
    """
    Objective and constraint evaluation against an ``OptimizationProblem``.

    Parameters
    ----------
    registry : ScorerRegistry, optional
        Scoring rules by objective tag; defaults to the built-in rules.
    penalty : float
        Energy added per unit of constraint violation.
    """

    def __init__(self, registry: Optional[ScorerRegistry] = None,
                 penalty: float = CONSTRAINT_PENALTY):
        self.registry = registry if registry is not None else ScorerRegistry()
        self.penalty = penalty

    def validate_objectives(self, problem: OptimizationProblem) -> None:
        for objective in problem.objectives:
            if objective.type not in self.registry:
                raise InvalidProblem(
                    f"objective '{objective.id}' has unknown type '{objective.type}' "
                    f"(known: {', '.join(self.registry.tags())})",
                    problem.id,
                )

    def evaluate_objective(self, assignment: Assignment, objective: Objective) -> float:
        scorer = self.registry.get(objective.type)
        if scorer is None:
            raise InvalidProblem(f"no scorer registered for objective type '{objective.type}'")
        return float(scorer.score(assignment))

    def objective_values(self, assignment: Assignment,
                         problem: OptimizationProblem) -> Dict[str, float]:
        return {objective.id: self.evaluate_objective(assignment, objective)
                for objective in problem.objectives}

    @staticmethod
    def constraint_violation(assignment: Assignment, constraint: Constraint) -> float:
        """max(0, sum - max) + max(0, min - sum); absent bounds contribute nothing."""
        total = sum(numeric_values(assignment))
        violation = 0.0
        if constraint.bounds.max is not None:
            violation += max(0.0, total - constraint.bounds.max)
        if constraint.bounds.min is not None:
            violation += max(0.0, constraint.bounds.min - total)
        return violation

    def constraint_violations(self, assignment: Assignment,
                              problem: OptimizationProblem) -> List[float]:
        return [self.constraint_violation(assignment, c) for c in problem.constraints]

    def is_feasible(self, assignment: Assignment, problem: OptimizationProblem) -> bool:
        return all(v == 0.0 for v in self.constraint_violations(assignment, problem))

    def energy(self, assignment: Assignment, problem: OptimizationProblem) -> float:
        total = 0.0
        for objective in problem.objectives:
            value = self.evaluate_objective(assignment, objective)
            total += objective.weight * (value if objective.minimize else -value)

        for violation in self.constraint_violations(assignment, problem):
            total += violation * self.penalty

        return total
