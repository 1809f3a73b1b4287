"""Polynomials stored with coefficients in increasing powers of t."""

from __future__ import annotations

import math
import numbers
import sys
from functools import lru_cache
from typing import Iterable, Sequence

import numpy as np

MAX_N = 12
MAX_CONVOLUTION_SIZE = 2 * MAX_N - 2

_IMAGINARY_TOLERANCE = 1e-10


@lru_cache(maxsize=None)
def _base(n: int) -> np.ndarray:
    matrix = np.array(
        [[float(math.perm(j, i)) if j >= i else 0.0 for j in range(n)] for i in range(n)]
    ).reshape(n, n)
    matrix.setflags(write=False)
    return matrix


def compute_base_coefficients(n: int) -> np.ndarray:
    """Return the n x n matrix whose row d holds the factors of the d-th derivative."""
    if n < 0:
        raise ValueError("number of coefficients must not be negative")
    return _base(n).copy()


def base_coeffs_with_time(n: int, derivative: int, t: float) -> np.ndarray:
    """Return the derivative's base coefficients multiplied by powers of t."""
    if not 0 <= derivative < n:
        raise ValueError(f"derivative {derivative} out of range for {n} coefficients")
    base = _base(n)
    coeffs = np.zeros(n)
    coeffs[derivative] = base[derivative, derivative]
    if abs(t) < sys.float_info.epsilon:
        return coeffs
    powers = t ** np.arange(1, n - derivative)
    coeffs[derivative + 1 :] = base[derivative, derivative + 1 :] * powers
    return coeffs


def convolve(data: Sequence[float], kernel: Sequence[float]) -> np.ndarray:
    """Discrete convolution: result[m] = sum(data[m - k] * kernel[k])."""
    return np.convolve(np.asarray(data, dtype=float), np.asarray(kernel, dtype=float))


def convolution_length(data_size: int, kernel_size: int) -> int:
    return data_size + kernel_size - 1


def select_min_max_candidates_from_roots(
    t_start: float, t_end: float, roots: Iterable[complex]
) -> list[float]:
    """Return the interval ends plus every real root inside [t_start, t_end]."""
    if t_start > t_end:
        raise ValueError(f"t_start {t_start} is greater than t_end {t_end}")
    candidates = [float(t_start), float(t_end)]
    for root in roots:
        root = complex(root)
        if abs(root.imag) > _IMAGINARY_TOLERANCE * max(1.0, abs(root.real)):
            continue
        if t_start <= root.real <= t_end:
            candidates.append(root.real)
    return candidates


class Polynomial:
    """Polynomial c_0 + c_1*t + ... + c_{N-1}*t^{N-1}."""

    __hash__ = None  # mutable

    def __init__(self, coefficients: Sequence[float]):
        coeffs = np.array(coefficients, dtype=float)
        if coeffs.ndim != 1:
            raise ValueError("coefficients must be one-dimensional")
        self._c = coeffs

    @property
    def coefficients(self) -> np.ndarray:
        return self._c.copy()

    @coefficients.setter
    def coefficients(self, values: Sequence[float]) -> None:
        coeffs = np.array(values, dtype=float)
        if coeffs.shape != self._c.shape:
            raise ValueError("number of coefficients has to match")
        self._c = coeffs

    def __len__(self) -> int:
        return len(self._c)

    def __repr__(self) -> str:
        return f"Polynomial({self._c.tolist()!r})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Polynomial):
            return NotImplemented
        return np.array_equal(self._c, other._c)

    def _check_same_size(self, other: Polynomial) -> None:
        if len(self) != len(other):
            raise ValueError(
                f"polynomials differ in size: {len(self)} and {len(other)}"
            )

    def __add__(self, other: Polynomial) -> Polynomial:
        if not isinstance(other, Polynomial):
            return NotImplemented
        self._check_same_size(other)
        return Polynomial(self._c + other._c)

    def __iadd__(self, other: Polynomial) -> Polynomial:
        if not isinstance(other, Polynomial):
            return NotImplemented
        self._check_same_size(other)
        self._c = self._c + other._c
        return self

    def __mul__(self, other):
        if isinstance(other, Polynomial):
            return Polynomial(convolve(self._c, other._c))
        if isinstance(other, numbers.Real):
            return Polynomial(self._c * float(other))
        return NotImplemented

    def __rmul__(self, other):
        if isinstance(other, numbers.Real):
            return Polynomial(self._c * float(other))
        return NotImplemented

    def derivative_coefficients(self, derivative: int = 0) -> np.ndarray:
        """Coefficients of the given derivative, zero-padded to the same length."""
        n = len(self._c)
        if derivative < 0 or derivative > n:
            raise ValueError(f"derivative {derivative} out of range for {n} coefficients")
        if derivative == 0:
            return self._c.copy()
        result = np.zeros(n)
        if derivative < n:
            result[: n - derivative] = self._c[derivative:] * _base(n)[derivative, derivative:]
        return result

    def evaluate(self, t: float, derivative: int = 0) -> float:
        """Value of the given derivative at time t."""
        if derivative < 0:
            raise ValueError("derivative must not be negative")
        n = len(self._c)
        if derivative >= n:
            return 0.0
        terms = _base(n)[derivative, derivative:] * self._c[derivative:]
        result = 0.0
        for term in terms[::-1]:
            result = result * t + term
        return float(result)

    def evaluate_up_to(self, t: float, count: int) -> np.ndarray:
        """Values of derivatives 0 .. count-1 at time t."""
        if not 0 <= count <= len(self._c):
            raise ValueError(f"count {count} out of range for {len(self._c)} coefficients")
        return np.array([self.evaluate(t, d) for d in range(count)])

    def roots(self, derivative: int = 0) -> np.ndarray:
        """All complex roots of the given derivative."""
        coeffs = self.derivative_coefficients(derivative)[: max(len(self._c) - derivative, 0)]
        if not np.all(np.isfinite(coeffs)):
            raise ValueError("cannot compute roots of non-finite coefficients")
        coeffs = np.trim_zeros(coeffs, "b")
        if coeffs.size < 2:
            return np.empty(0, dtype=complex)
        return np.roots(coeffs[::-1]).astype(complex)

    def compute_min_max_candidates(
        self, t_start: float, t_end: float, derivative: int = 0
    ) -> list[float]:
        """Candidate times for extrema of the derivative in [t_start, t_end]."""
        if len(self._c) - derivative - 1 < 0:
            raise ValueError(
                f"derivative {derivative} too high for {len(self._c)} coefficients"
            )
        return select_min_max_candidates_from_roots(
            t_start, t_end, self.roots(derivative + 1)
        )

    def select_min_max_from_roots(
        self,
        t_start: float,
        t_end: float,
        derivative: int,
        roots: Iterable[complex],
    ) -> tuple[tuple[float, float], tuple[float, float]]:
        """Minimum and maximum as (t, value) given roots of the next derivative."""
        candidates = select_min_max_candidates_from_roots(t_start, t_end, roots)
        return self.select_min_max_from_candidates(candidates, derivative)

    def compute_min_max(
        self, t_start: float, t_end: float, derivative: int = 0
    ) -> tuple[tuple[float, float], tuple[float, float]]:
        """Minimum and maximum of the derivative in [t_start, t_end] as (t, value)."""
        candidates = self.compute_min_max_candidates(t_start, t_end, derivative)
        return self.select_min_max_from_candidates(candidates, derivative)

    def select_min_max_from_candidates(
        self, candidates: Iterable[float], derivative: int = 0
    ) -> tuple[tuple[float, float], tuple[float, float]]:
        """Minimum and maximum as (t, value) among candidate times."""
        minimum: tuple[float, float] | None = None
        maximum: tuple[float, float] | None = None
        for t in candidates:
            value = self.evaluate(t, derivative)
            if minimum is None or value < minimum[1]:
                minimum = (t, value)
            if maximum is None or value > maximum[1]:
                maximum = (t, value)
        if minimum is None or maximum is None:
            raise ValueError("cannot select extrema from an empty candidate set")
        return minimum, maximum

    def with_appended_coefficients(self, new_n: int) -> Polynomial:
        """A copy padded with zero coefficients up to new_n coefficients."""
        if new_n < len(self._c):
            raise ValueError(
                f"cannot shrink polynomial from {len(self._c)} to {new_n} coefficients"
            )
        coeffs = np.zeros(new_n)
        coeffs[: len(self._c)] = self._c
        return Polynomial(coeffs)

    def scale_in_time(self, scaling_factor: float) -> None:
        """Replace p(t) by p(scaling_factor * t)."""
        self._c = self._c * scaling_factor ** np.arange(len(self._c))

    def offset(self, offset: float) -> None:
        """Add a constant to the polynomial."""
        if len(self._c) == 0:
            return
        self._c[0] += offset