# File: qoe/evaluation/convergence.py

"""
Convergence analysis of optimization traces.

Works on any sequence of energies recorded once per iteration, typically
``QuantumMetrics.best_energy_trace``. All window statistics use the last
10 samples and the same 0.001 improvement threshold.
"""

import numpy as np
import pandas as pd
from dataclasses import dataclass, asdict
from typing import Any, Dict, Optional, Sequence

from ..utils.logging_utils import get_logger

STABILITY_WINDOW = 10
RECENT_WINDOW = 5
OSCILLATION_WINDOW = 6
IMPROVEMENT_THRESHOLD = 0.001


@dataclass
class ConvergenceReport:

    converged: bool = False
    convergence_rate: float = 0.0
    stability_score: float = 0.0
    plateau_detected: bool = False
    oscillation_detected: bool = False
    convergence_point: Optional[int] = None
    samples: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


class ConvergenceAnalyzer:
    """
    Convergence rate, stability, plateau, oscillation and convergence point of a trace.

    A trace counts as converged when its convergence rate exceeds
    ``rate_threshold`` and its stability score exceeds ``stability_threshold``.
    """

    def __init__(self, rate_threshold: float = 0.8, stability_threshold: float = 0.7,
                 improvement_threshold: float = IMPROVEMENT_THRESHOLD):
        self.rate_threshold = rate_threshold
        self.stability_threshold = stability_threshold
        self.improvement_threshold = improvement_threshold
        self.logger = get_logger(__name__)

    def analyze(self, trace: Sequence[float]) -> ConvergenceReport:
        values = np.asarray(trace, dtype=float)
        if values.size < 2:
            return ConvergenceReport(samples=int(values.size))

        rate = self.convergence_rate(values)
        stability = self.stability_score(values)
        report = ConvergenceReport(
            converged=rate > self.rate_threshold and stability > self.stability_threshold,
            convergence_rate=rate,
            stability_score=stability,
            plateau_detected=self.detect_plateau(values),
            oscillation_detected=self.detect_oscillation(values),
            convergence_point=self.convergence_point(values),
            samples=int(values.size),
        )
        self.logger.debug(f"Convergence analysis over {values.size} samples: {report}")
        return report

    def convergence_rate(self, values: np.ndarray) -> float:
        """
        1 - (mean recent relative change / mean relative change).

        Steps from a zero value count as no change; a trace that never
        changes has rate 1.
        """
        previous = values[:-1]
        change = np.abs(np.diff(values))
        relative = np.divide(change, np.abs(previous),
                             out=np.zeros_like(change), where=previous != 0)

        average = float(np.mean(relative))
        if average == 0.0:
            return 1.0
        recent = float(np.mean(relative[-RECENT_WINDOW:]))
        return max(0.0, 1.0 - recent / average)

    def stability_score(self, values: np.ndarray) -> float:
        """1 - relative standard deviation of the last 10 samples (0 below 5 samples)."""
        if values.size < 5:
            return 0.0
        recent = values[-STABILITY_WINDOW:]
        deviation = float(np.std(recent))
        scale = abs(float(np.mean(recent)))
        if scale == 0.0:
            return 1.0 if deviation == 0.0 else 0.0
        return max(0.0, 1.0 - deviation / scale)

    def detect_plateau(self, values: np.ndarray) -> bool:
        if values.size < STABILITY_WINDOW:
            return False
        recent = values[-STABILITY_WINDOW:]
        return float(np.mean(np.abs(np.diff(recent)))) < self.improvement_threshold

    def detect_oscillation(self, values: np.ndarray) -> bool:
        """At least two strict local extrema among the last 6 samples."""
        if values.size < OSCILLATION_WINDOW:
            return False
        recent = values[-OSCILLATION_WINDOW:]
        oscillations = 0
        for i in range(2, OSCILLATION_WINDOW - 1):
            prev, curr, nxt = recent[i - 1], recent[i], recent[i + 1]
            if (curr > prev and curr > nxt) or (curr < prev and curr < nxt):
                oscillations += 1
        return oscillations >= 2

    def convergence_point(self, values: np.ndarray) -> Optional[int]:
        """First index i >= 10 whose preceding 10 samples move less than the threshold on average."""
        if values.size < STABILITY_WINDOW:
            return None
        for i in range(STABILITY_WINDOW, values.size):
            window = values[i - STABILITY_WINDOW:i]
            if float(np.mean(np.abs(np.diff(window)))) < self.improvement_threshold:
                return i
        return None


def trace_to_frame(trace: Sequence[float]) -> pd.DataFrame:
    """Trace as a DataFrame with iteration, energy, improvement and running best columns."""
    energies = np.asarray(trace, dtype=float)
    frame = pd.DataFrame({
        'iteration': np.arange(energies.size),
        'energy': energies,
    })
    frame['improvement'] = (-frame['energy'].diff()).fillna(0.0)
    frame['best_energy'] = frame['energy'].cummin()
    return frame
