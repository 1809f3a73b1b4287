import random

import numpy as np
import pytest

from mavtraj.motion_defines import DerivativeOrder
from mavtraj.polynomial import (
    MAX_N,
    Polynomial,
    base_coeffs_with_time,
    compute_base_coefficients,
    convolution_length,
    convolve,
    select_min_max_candidates_from_roots,
)

SAMPLING_INTERVAL = 1.0e-3
EQUALITY_RESOLUTION = 1.0e-2


def _find_min_max_by_sampling(polynomial, derivative, t_start, t_end):
    ts = np.arange(t_start, t_end + SAMPLING_INTERVAL, SAMPLING_INTERVAL)
    ts = ts[ts <= t_end]
    if ts.size == 0:
        ts = np.array([t_start])
    values = np.polynomial.polynomial.polyval(
        ts, polynomial.derivative_coefficients(derivative)
    )
    i_min = int(np.argmin(values))
    i_max = int(np.argmax(values))
    return (ts[i_min], values[i_min]), (ts[i_max], values[i_max])


def test_convolution():
    coeffs_1 = [1.0, 2.0]
    coeffs_2 = [-1.0, 3.0]
    p = Polynomial(coeffs_1)
    q = Polynomial(coeffs_2)
    result = p * q
    expected = [
        coeffs_1[0] * coeffs_2[0],
        coeffs_1[0] * coeffs_2[1] + coeffs_1[1] * coeffs_2[0],
        coeffs_1[1] * coeffs_2[1],
    ]
    assert np.array_equal(result.coefficients, expected)


@pytest.mark.parametrize(
    "derivative",
    [DerivativeOrder.POSITION, DerivativeOrder.VELOCITY, DerivativeOrder.ACCELERATION],
)
def test_find_min_max(derivative):
    rng = random.Random(1234567)
    for _ in range(100):
        num_coeffs = rng.randrange(MAX_N - 1) + 1 + derivative
        coeffs = [rng.uniform(-100.0, 100.0) for _ in range(num_coeffs)]
        p = Polynomial(coeffs)
        t_start = rng.uniform(-100.0, 100.0)
        t_end = rng.uniform(t_start, 100.0)
        min_sampling, max_sampling = _find_min_max_by_sampling(
            p, derivative, t_start, t_end
        )
        min_computing, max_computing = p.compute_min_max(t_start, t_end, derivative)
        assert max_computing[0] == pytest.approx(
            max_sampling[0], abs=EQUALITY_RESOLUTION
        )
        assert min_computing[0] == pytest.approx(
            min_sampling[0], abs=EQUALITY_RESOLUTION
        )


def test_evaluate_values_and_derivatives():
    p = Polynomial([1.0, 2.0, 3.0])
    assert p.evaluate(2.0) == pytest.approx(17.0)
    assert p.evaluate(2.0, 1) == pytest.approx(14.0)
    assert p.evaluate(2.0, 2) == pytest.approx(6.0)
    assert p.evaluate(2.0, 3) == 0.0
    assert np.allclose(p.evaluate_up_to(2.0, 3), [17.0, 14.0, 6.0])


def test_evaluate_up_to_rejects_too_many():
    with pytest.raises(ValueError):
        Polynomial([1.0, 2.0]).evaluate_up_to(0.0, 3)


def test_derivative_coefficients():
    p = Polynomial([1.0, 2.0, 3.0, 4.0])
    assert np.array_equal(p.derivative_coefficients(0), [1.0, 2.0, 3.0, 4.0])
    assert np.array_equal(p.derivative_coefficients(1), [2.0, 6.0, 12.0, 0.0])
    assert np.array_equal(p.derivative_coefficients(2), [6.0, 24.0, 0.0, 0.0])
    with pytest.raises(ValueError):
        p.derivative_coefficients(5)


def test_base_coefficients():
    expected = np.array(
        [
            [1.0, 1.0, 1.0, 1.0],
            [0.0, 1.0, 2.0, 3.0],
            [0.0, 0.0, 2.0, 6.0],
            [0.0, 0.0, 0.0, 6.0],
        ]
    )
    assert np.array_equal(compute_base_coefficients(4), expected)


def test_base_coeffs_with_time():
    assert np.allclose(base_coeffs_with_time(4, 1, 2.0), [0.0, 1.0, 4.0, 12.0])
    assert np.array_equal(base_coeffs_with_time(4, 1, 0.0), [0.0, 1.0, 0.0, 0.0])
    p = Polynomial([0.5, -1.0, 2.0, 0.25])
    for derivative in range(4):
        row = base_coeffs_with_time(4, derivative, 1.5)
        assert row @ p.coefficients == pytest.approx(p.evaluate(1.5, derivative))
    with pytest.raises(ValueError):
        base_coeffs_with_time(4, 4, 1.0)


def test_convolve_and_length():
    result = convolve([1.0, 2.0, 3.0], [1.0, 1.0])
    assert len(result) == convolution_length(3, 2)
    assert np.array_equal(result, [1.0, 3.0, 5.0, 3.0])


def test_roots():
    p = Polynomial([-1.0, 0.0, 1.0])
    assert sorted(p.roots(0).real) == pytest.approx([-1.0, 1.0])
    assert p.roots(1).real == pytest.approx([0.0])
    assert p.roots(2).size == 0


def test_compute_min_max():
    p = Polynomial([-1.0, 0.0, 1.0])
    minimum, maximum = p.compute_min_max(-2.0, 3.0)
    assert minimum[0] == pytest.approx(0.0)
    assert minimum[1] == pytest.approx(-1.0)
    assert maximum == (3.0, 8.0)


def test_select_min_max_from_roots():
    p = Polynomial([-1.0, 0.0, 1.0])
    minimum, maximum = p.select_min_max_from_roots(-2.0, 3.0, 0, p.roots(1))
    assert minimum[0] == pytest.approx(0.0)
    assert maximum[0] == 3.0


def test_candidates_skip_complex_and_outside_roots():
    candidates = select_min_max_candidates_from_roots(
        0.0, 1.0, [0.5 + 0j, 2.0 + 0j, 0.3 + 1.0j]
    )
    assert candidates == [0.0, 1.0, 0.5]
    with pytest.raises(ValueError):
        select_min_max_candidates_from_roots(1.0, 0.0, [])


def test_select_from_empty_candidates_raises():
    with pytest.raises(ValueError):
        Polynomial([1.0]).select_min_max_from_candidates([], 0)


def test_min_max_derivative_too_high_raises():
    with pytest.raises(ValueError):
        Polynomial([1.0, 2.0]).compute_min_max_candidates(0.0, 1.0, 2)


def test_addition_and_equality():
    p = Polynomial([1.0, 2.0])
    q = Polynomial([3.0, -1.0])
    assert p + q == Polynomial([4.0, 1.0])
    p += q
    assert p == Polynomial([4.0, 1.0])
    assert p != q
    with pytest.raises(ValueError):
        p + Polynomial([1.0])


def test_scalar_multiplication():
    p = Polynomial([1.0, -2.0])
    assert p * 3.0 == Polynomial([3.0, -6.0])
    assert 3.0 * p == Polynomial([3.0, -6.0])


def test_with_appended_coefficients():
    p = Polynomial([1.0, 2.0])
    longer = p.with_appended_coefficients(4)
    assert np.array_equal(longer.coefficients, [1.0, 2.0, 0.0, 0.0])
    assert longer.evaluate(1.7) == pytest.approx(p.evaluate(1.7))
    with pytest.raises(ValueError):
        p.with_appended_coefficients(1)


def test_scale_in_time():
    original = Polynomial([1.0, 2.0, 3.0])
    scaled = Polynomial([1.0, 2.0, 3.0])
    scaled.scale_in_time(2.0)
    assert np.array_equal(scaled.coefficients, [1.0, 4.0, 12.0])
    for t in (-1.0, 0.3, 2.5):
        assert scaled.evaluate(t) == pytest.approx(original.evaluate(2.0 * t))


def test_offset():
    p = Polynomial([1.0, 2.0])
    p.offset(0.5)
    assert np.array_equal(p.coefficients, [1.5, 2.0])


def test_coefficients_setter_checks_size():
    p = Polynomial([1.0, 2.0])
    p.coefficients = [3.0, 4.0]
    assert p == Polynomial([3.0, 4.0])
    with pytest.raises(ValueError):
        p.coefficients = [1.0]