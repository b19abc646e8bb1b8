"""
Pytest configuration and shared fixtures.
"""

import pytest

from fxhedge.utils.types import MarketParams, MonteCarloConfig


@pytest.fixture
def standard_params():
    """At-the-money EUR/USD-like parameters."""
    return {
        "S": 1.10,
        "K": 1.10,
        "T": 1.0,
        "r1": 0.02,
        "r2": 0.01,
        "sigma": 0.10,
    }


@pytest.fixture
def itm_call_params():
    """In-the-money call parameters."""
    return {
        "S": 1.20,
        "K": 1.10,
        "T": 0.5,
        "r1": 0.03,
        "r2": 0.01,
        "sigma": 0.12,
    }


@pytest.fixture
def inverted_rates_params():
    """Foreign rate above the domestic rate (forward below spot)."""
    return {
        "S": 1.10,
        "K": 1.05,
        "T": 1.0,
        "r1": 0.01,
        "r2": 0.04,
        "sigma": 0.15,
    }


@pytest.fixture
def market():
    """Market inputs matching standard_params."""
    return MarketParams(
        spot=1.10, domestic_rate=0.02, foreign_rate=0.01, volatility=0.10, maturity=1.0
    )


@pytest.fixture
def mc_config():
    """Seeded Monte Carlo settings small enough for unit tests."""
    return MonteCarloConfig(n_paths=20_000, n_steps=100, seed=12345)
