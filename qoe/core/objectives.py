# File: qoe/core/objectives.py

"""
Objective scoring capabilities.

Each objective names a scoring rule through its ``type`` tag. The built-in
rules are enumerated in ``ObjectiveType``; collaborators add new rules by
registering an ``ObjectiveScorer`` under a new tag instead of branching on
strings inside the evaluator.
"""

import math
import logging
import threading
from abc import ABC, abstractmethod
from enum import Enum
from typing import Dict, List, Optional

from .problem import Assignment, numeric_values

logger = logging.getLogger(__name__)


class ObjectiveType(Enum):
    GENERIC_SUM = "generic_sum"
    CONVERSION_RATE = "conversion_rate"
    COST_PER_LEAD = "cost_per_lead"
    ENGAGEMENT_RATE = "engagement_rate"
    PIPELINE_VELOCITY = "pipeline_velocity"
    ROI = "roi"
    COMPLIANCE_SCORE = "compliance_score"
    CUSTOMER_SATISFACTION = "customer_satisfaction"
    RESOURCE_EFFICIENCY = "resource_efficiency"


def normalize_tag(tag: str) -> str:
    return str(tag).strip().lower().replace("-", "_")


class ObjectiveScorer(ABC):
    """Maps an assignment to the raw value of one objective."""

    @abstractmethod
    def score(self, assignment: Assignment) -> float:
        pass


class GenericSumScorer(ObjectiveScorer):
    """Sum of all numeric variable values."""

    def score(self, assignment: Assignment) -> float:
        return float(sum(numeric_values(assignment)))


class ConversionRateScorer(ObjectiveScorer):
    """Mean value expressed as a percentage, clipped to [0, 1]."""

    def score(self, assignment: Assignment) -> float:
        values = numeric_values(assignment)
        if not values:
            return 0.0
        return max(0.0, min(1.0, sum(values) / (len(values) * 100.0)))


class CostPerLeadScorer(ObjectiveScorer):

    def score(self, assignment: Assignment) -> float:
        values = numeric_values(assignment)
        if not values:
            return 0.0
        return sum(values) / len(values)


class EngagementRateScorer(ObjectiveScorer):
    """Periodic response curve over the value sum, in [0, 1]."""

    def score(self, assignment: Assignment) -> float:
        total = sum(numeric_values(assignment))
        return max(0.0, min(1.0, math.sin(total / 100.0) * 0.5 + 0.5))


_BUILTIN_SCORERS = {
    ObjectiveType.GENERIC_SUM: GenericSumScorer,
    ObjectiveType.CONVERSION_RATE: ConversionRateScorer,
    ObjectiveType.COST_PER_LEAD: CostPerLeadScorer,
    ObjectiveType.ENGAGEMENT_RATE: EngagementRateScorer,
    ObjectiveType.PIPELINE_VELOCITY: GenericSumScorer,
    ObjectiveType.ROI: GenericSumScorer,
    ObjectiveType.COMPLIANCE_SCORE: GenericSumScorer,
    ObjectiveType.CUSTOMER_SATISFACTION: GenericSumScorer,
    ObjectiveType.RESOURCE_EFFICIENCY: GenericSumScorer,
}


class ScorerRegistry:
    """
    Tag to scorer lookup.

    A fresh registry holds the built-in rules. Registering an existing tag
    replaces its scorer.
    """

    def __init__(self, include_builtins: bool = True):
        self._scorers: Dict[str, ObjectiveScorer] = {}
        self._lock = threading.RLock()
        if include_builtins:
            for objective_type, scorer_cls in _BUILTIN_SCORERS.items():
                self._scorers[objective_type.value] = scorer_cls()

    def register(self, tag: str, scorer: ObjectiveScorer) -> None:
        if not isinstance(scorer, ObjectiveScorer):
            raise TypeError(f"Scorer for '{tag}' must be an ObjectiveScorer, got {type(scorer).__name__}")
        with self._lock:
            self._scorers[normalize_tag(tag)] = scorer
        logger.debug(f"Registered objective scorer '{normalize_tag(tag)}': {type(scorer).__name__}")

    def get(self, tag: str) -> Optional[ObjectiveScorer]:
        with self._lock:
            return self._scorers.get(normalize_tag(tag))

    def __contains__(self, tag: str) -> bool:
        return self.get(tag) is not None

    def tags(self) -> List[str]:
        with self._lock:
            return sorted(self._scorers)
