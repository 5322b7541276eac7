# File: qoe/core/operators.py

"""
Operator library for quantum-inspired state evolution.

Every ``apply_*`` function mutates the given state's amplitudes and finishes
with ``state.normalize()``, so the normalization invariant holds whenever
control returns to the caller. Matrix operators are built as
``scipy.sparse`` matrices since they are at most tri-diagonal.
"""

import logging
import numpy as np
from scipy import sparse
from typing import Iterable, Optional

from .complex_math import add, phase_rotation
from .problem import (
    Assignment, NoiseModel, Objective, OptimizationProblem, Value, Variable, VariableType,
)
from .quantum_state import QuantumState

logger = logging.getLogger(__name__)

HADAMARD = 1.0 / np.sqrt(2.0)
INTERFERENCE_STRENGTH = 0.1
GATE_NOISE_AMPLITUDE = 0.01
REINFORCEMENT_STRENGTH = 0.1


def apply_fluctuation(state: QuantumState, temperature: float,
                      rng: np.random.Generator) -> QuantumState:
    """Uniform perturbation of every real and imaginary part, scaled by sqrt(T / 100)."""
    strength = np.sqrt(max(temperature, 0.0) / 100.0)
    real_noise = (rng.random(state.dimensions) - 0.5) * strength
    imag_noise = (rng.random(state.dimensions) - 0.5) * strength

    state.set_amplitudes(add(state.amplitudes, real_noise + 1j * imag_noise))
    state.normalize()
    return state


def apply_problem_phase(state: QuantumState, objectives: Iterable[Objective],
                        gamma: float) -> QuantumState:
    """
    Problem-encoding phase operator.

    Each objective rotates slot i by weight * gamma * sin(i * pi / d),
    applied objective by objective.
    """
    slot_profile = np.sin(np.arange(state.dimensions) * np.pi / state.dimensions)
    amplitudes = state.amplitudes
    for objective in objectives:
        amplitudes = phase_rotation(amplitudes, objective.weight * gamma * slot_profile)

    state.set_amplitudes(amplitudes)
    state.normalize()
    return state


def apply_mixer(state: QuantumState, beta: float) -> QuantumState:
    """Rotate every amplitude by the shared angle -beta * pi / 4."""
    state.set_amplitudes(phase_rotation(state.amplitudes, -beta * np.pi / 4.0))
    state.normalize()
    return state


def coin_operator(dimensions: int) -> sparse.csr_matrix:
    """Symmetric tri-diagonal Hadamard-like coin with 1/sqrt(2) on all three diagonals."""
    if dimensions == 1:
        return sparse.csr_matrix([[HADAMARD]])
    off_diagonal = np.full(dimensions - 1, HADAMARD)
    return sparse.diags(
        [off_diagonal, np.full(dimensions, HADAMARD), off_diagonal],
        offsets=[-1, 0, 1],
        format="csr",
    )


def shift_operator(dimensions: int) -> sparse.csr_matrix:
    """Cyclic permutation moving amplitude from slot i to slot i + 1 (periodic boundary)."""
    rows = (np.arange(dimensions) + 1) % dimensions
    cols = np.arange(dimensions)
    data = np.ones(dimensions)
    return sparse.csr_matrix((data, (rows, cols)), shape=(dimensions, dimensions))


def apply_operator(state: QuantumState, operator) -> QuantumState:
    """Matrix-vector product with a real operator, then renormalize."""
    state.set_amplitudes(operator @ state.amplitudes)
    state.normalize()
    return state


def apply_interference(state: QuantumState,
                       strength: float = INTERFERENCE_STRENGTH) -> QuantumState:
    """
    Damp or boost each slot by the phase of its difference to the next slot.

    Slot i (except the last) is scaled by 1 + strength * cos(arg(a[i+1] - a[i])),
    computed from pre-update amplitudes.
    """
    amplitudes = np.array(state.amplitudes)
    if state.dimensions > 1:
        phase_difference = np.angle(amplitudes[1:] - amplitudes[:-1])
        amplitudes[:-1] = amplitudes[:-1] * (1.0 + strength * np.cos(phase_difference))

    state.set_amplitudes(amplitudes)
    state.normalize()
    return state


def apply_noise(state: QuantumState, noise_model: Optional[NoiseModel],
                rng: np.random.Generator) -> QuantumState:
    """
    Gate errors and decoherence.

    Each amplitude is perturbed with probability ``gate_error_rate``; every
    imaginary part then decays by exp(-1 / decoherence_time). No-op when the
    model is absent or disabled.
    """
    if noise_model is None or not noise_model.enabled:
        return state

    amplitudes = np.array(state.amplitudes)
    hit = rng.random(state.dimensions) < noise_model.gate_error_rate
    if np.any(hit):
        count = int(np.sum(hit))
        real_noise = (rng.random(count) - 0.5) * GATE_NOISE_AMPLITUDE
        imag_noise = (rng.random(count) - 0.5) * GATE_NOISE_AMPLITUDE
        amplitudes[hit] = add(amplitudes[hit], real_noise + 1j * imag_noise)

    decay = np.exp(-1.0 / noise_model.decoherence_time)
    amplitudes = amplitudes.real + 1j * (amplitudes.imag * decay)

    state.set_amplitudes(amplitudes)
    state.normalize()
    return state


def slot_affinity(variable: Variable, value: Value) -> float:
    """
    Where ``value`` sits relative to the draws slot ``i`` drives, in [0, 1].

    Continuous draws spread out from the domain midpoint with the slot
    probability, so the affinity is the distance from the midpoint over the
    half-width. Discrete and binary draws lean towards later allowed values as
    the slot probability grows, so the affinity is the value's index position.
    """
    if variable.type is VariableType.CONTINUOUS:
        half_width = variable.domain.width / 2.0
        if half_width <= 0:
            return 0.0
        return min(abs(float(value) - variable.domain.midpoint) / half_width, 1.0)

    values = list(variable.allowed_values())
    if len(values) < 2 or value not in values:
        return 0.0
    return values.index(value) / (len(values) - 1)


def apply_reinforcement(state: QuantumState, problem: OptimizationProblem, assignment: Assignment,
                        energy: float, strength: float = REINFORCEMENT_STRENGTH) -> QuantumState:
    """
    Shift probability towards the slots that reproduce an accepted candidate.

    Slot i is scaled by 1 + strength * exp(-E / 10) * affinity_i, so slots
    whose variable landed far from their unbiased draw gain weight and a
    low-energy candidate pulls harder than a poor one.
    """
    quality = np.exp(-max(energy, 0.0) / 10.0)
    affinity = np.zeros(state.dimensions)
    for index, variable in enumerate(problem.variables[:state.dimensions]):
        if variable.id in assignment:
            affinity[index] = slot_affinity(variable, assignment[variable.id])

    state.set_amplitudes(state.amplitudes * (1.0 + strength * quality * affinity))
    state.normalize()
    return state
