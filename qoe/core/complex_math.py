# File: qoe/core/complex_math.py

"""
Complex amplitude arithmetic.

Amplitudes are numpy ``complex128`` values; vectors are 1-D ``complex128``
arrays. Every function returns a new array and leaves its inputs untouched.
"""

import numpy as np
from typing import Union

ComplexVector = np.ndarray

AMPLITUDE_DTYPE = np.complex128


def as_amplitudes(values) -> ComplexVector:
    """Coerce a sequence of numbers or (real, imaginary) pairs to a complex vector."""
    array = np.asarray(values)
    if array.ndim == 2 and array.shape[1] == 2 and not np.iscomplexobj(array):
        array = array[:, 0] + 1j * array[:, 1]
    return np.array(array, dtype=AMPLITUDE_DTYPE).reshape(-1)


def add(a: ComplexVector, b: ComplexVector) -> ComplexVector:
    return np.add(a, b, dtype=AMPLITUDE_DTYPE)


def scale(vector: ComplexVector, factor: Union[complex, float, np.ndarray]) -> ComplexVector:
    return np.multiply(vector, factor, dtype=AMPLITUDE_DTYPE)


def squared_magnitudes(vector: ComplexVector) -> np.ndarray:
    return vector.real ** 2 + vector.imag ** 2


def l2_norm(vector: ComplexVector) -> float:
    return float(np.sqrt(np.sum(squared_magnitudes(vector))))


def phase_rotation(vector: ComplexVector, phases: Union[float, np.ndarray]) -> ComplexVector:
    """Multiply each amplitude by exp(i * phase)."""
    return scale(vector, np.exp(1j * np.asarray(phases, dtype=float)))


def uniform_amplitudes(dimensions: int) -> ComplexVector:
    return np.full(dimensions, 1.0 / np.sqrt(dimensions), dtype=AMPLITUDE_DTYPE)


def normalize(vector: ComplexVector) -> ComplexVector:
    """
    Return ``vector`` scaled to unit L2 norm.

    Raises ``ZeroDivisionError`` for zero or non-finite norms; callers that
    need recovery use ``QuantumState.normalize`` instead.
    """
    norm = l2_norm(vector)
    if not np.isfinite(norm) or norm <= 0.0:
        raise ZeroDivisionError(f"Cannot normalize vector with norm {norm}")
    return scale(vector, 1.0 / norm)
