"""
Unit tests for the normal CDF approximation.

This module validates:
1. Accuracy against scipy's reference implementation
2. Exact symmetry N(-x) = 1 - N(x)
3. Tail clamping and NaN propagation
"""

import math

import pytest
from scipy.stats import norm

from fxhedge.core.distributions import normal_cdf


# ===========================
# Accuracy Tests
# ===========================


@pytest.mark.parametrize("x", [-6.0, -3.5, -1.96, -1.0, -0.25, 0.0, 0.3, 1.0, 1.645, 2.5, 4.0])
def test_matches_reference_cdf(x):
    """The approximation should agree with scipy to about 1e-7."""
    assert abs(normal_cdf(x) - norm.cdf(x)) < 2e-7, f"N({x}) = {normal_cdf(x)}, expected {norm.cdf(x)}"


def test_cdf_at_zero():
    """N(0) = 0.5."""
    assert abs(normal_cdf(0.0) - 0.5) < 1e-9


def test_cdf_is_monotone():
    """CDF should be non-decreasing on a fine grid."""
    values = [normal_cdf(-3.0 + 0.01 * i) for i in range(601)]
    for previous, current in zip(values, values[1:]):
        assert current >= previous


# ===========================
# Symmetry Tests
# ===========================


@pytest.mark.parametrize("x", [0.1, 0.5, 1.0, 1.96, 3.0, 7.5])
def test_exact_symmetry(x):
    """Reflection makes N(-x) + N(x) equal to 1 up to rounding."""
    assert abs(normal_cdf(-x) + normal_cdf(x) - 1.0) < 1e-15


# ===========================
# Edge Cases
# ===========================


def test_far_tails_are_clamped():
    """Beyond eight standard deviations the CDF is exactly 0 or 1."""
    assert normal_cdf(8.5) == 1.0
    assert normal_cdf(-8.5) == 0.0
    assert normal_cdf(math.inf) == 1.0
    assert normal_cdf(-math.inf) == 0.0


def test_nan_propagates():
    """NaN input gives NaN output."""
    assert math.isnan(normal_cdf(math.nan))


def test_output_in_unit_interval():
    """CDF values stay within [0, 1]."""
    for x in [-8.0, -7.99, -4.0, 0.0, 4.0, 7.99, 8.0]:
        value = normal_cdf(x)
        assert 0.0 <= value <= 1.0, f"N({x}) = {value} outside [0, 1]"
