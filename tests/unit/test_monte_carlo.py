"""
Unit tests for the Monte Carlo engine.

This module validates:
1. Box-Muller normal draws
2. Seeding reproducibility and independence from the thread count
3. Standard error scaling with the number of paths
4. Convergence to the closed-form prices
5. Knock-out / knock-in complementarity on identical paths
"""

import math

import numpy as np
import pytest

from fxhedge.core.barrier import double_barrier, standard_barrier
from fxhedge.core.garman_kohlhagen import gk_call, gk_put
from fxhedge.core.monte_carlo import box_muller, monte_carlo_price, simulate_terminal
from fxhedge.utils.exceptions import InvalidInputError
from fxhedge.utils.types import MonteCarloConfig, ResolvedLeg

S, T, R_D, R_F, SIGMA = 1.10, 1.0, 0.02, 0.01, 0.10


def _leg(option_type="call", strike=1.10, quantity=100.0, **barrier):
    return ResolvedLeg(option_type, strike=strike, quantity=quantity, volatility=SIGMA, **barrier)


# ===========================
# Box-Muller Tests
# ===========================


def test_box_muller_moments():
    """Draws have zero mean and unit variance."""
    z = box_muller(np.random.default_rng(0), 200_000)
    assert abs(z.mean()) < 0.01, f"Mean {z.mean()}"
    assert abs(z.std() - 1.0) < 0.01, f"Std {z.std()}"


def test_box_muller_odd_size():
    """Odd sizes are honoured exactly and values are finite."""
    z = box_muller(np.random.default_rng(1), 1001)
    assert z.shape == (1001,)
    assert np.isfinite(z).all()


# ===========================
# Reproducibility Tests
# ===========================


def test_same_seed_same_price(mc_config):
    """A seeded run is reproducible."""
    leg = _leg(barrier_type="knock_out", barrier=1.25)
    first = monte_carlo_price(leg, S, T, R_D, R_F, mc_config)
    second = monte_carlo_price(leg, S, T, R_D, R_F, mc_config)
    assert first.price == second.price
    assert first.std_error == second.std_error


def test_thread_count_does_not_change_price():
    """Batches own their RNG streams, so threading gives identical results."""
    leg = _leg(barrier_type="knock_out", barrier=1.25)
    serial = MonteCarloConfig(n_paths=8_000, n_steps=50, seed=99, n_batches=8, max_workers=1)
    threaded = MonteCarloConfig(n_paths=8_000, n_steps=50, seed=99, n_batches=8, max_workers=4)
    assert (
        monte_carlo_price(leg, S, T, R_D, R_F, serial).price
        == monte_carlo_price(leg, S, T, R_D, R_F, threaded).price
    )


def test_different_seeds_differ():
    """Different seeds give different estimates."""
    leg = _leg()
    a = monte_carlo_price(leg, S, T, R_D, R_F, MonteCarloConfig(n_paths=5_000, seed=1))
    b = monte_carlo_price(leg, S, T, R_D, R_F, MonteCarloConfig(n_paths=5_000, seed=2))
    assert a.price != b.price


def test_explicit_generator():
    """An explicit generator drives a single batch and overrides the seed."""
    leg = _leg()
    config = MonteCarloConfig(n_paths=5_000, seed=123)
    a = monte_carlo_price(leg, S, T, R_D, R_F, config, rng=np.random.default_rng(7))
    b = monte_carlo_price(leg, S, T, R_D, R_F, config, rng=np.random.default_rng(7))
    assert a.price == b.price


# ===========================
# Standard Error Tests
# ===========================


def test_std_error_scales_with_root_n():
    """Ten times the paths cuts the standard error by about √10."""
    leg = _leg()
    small = monte_carlo_price(leg, S, T, R_D, R_F, MonteCarloConfig(n_paths=4_000, seed=5))
    large = monte_carlo_price(leg, S, T, R_D, R_F, MonteCarloConfig(n_paths=40_000, seed=5))
    ratio = small.std_error / large.std_error
    assert 2.8 < ratio < 3.6, f"Expected ~{math.sqrt(10):.2f}, got {ratio:.2f}"


def test_barrier_std_error_shrinks_from_1k_to_100k():
    """Standard error of a knock-out estimate falls as paths go 1k → 10k → 100k."""
    leg = _leg("call", barrier_type="knock_out", barrier=1.25)
    errors = [
        monte_carlo_price(leg, S, T, R_D, R_F, MonteCarloConfig(n_paths=n, n_steps=50, seed=9)).std_error
        for n in (1_000, 10_000, 100_000)
    ]
    assert errors[0] > errors[1] > errors[2], f"Not decreasing: {errors}"


def test_std_error_positive_and_reported():
    """Every result carries a positive standard error."""
    result = monte_carlo_price(_leg(), S, T, R_D, R_F, MonteCarloConfig(n_paths=2_000, seed=3))
    assert result.std_error > 0
    assert result.n_paths == 2_000


# ===========================
# Convergence Tests
# ===========================


@pytest.mark.parametrize("option_type,pricer", [("call", gk_call), ("put", gk_put)])
def test_vanilla_converges_to_garman_kohlhagen(option_type, pricer):
    """Vanilla estimate lies within 4 standard errors of the closed form."""
    config = MonteCarloConfig(n_paths=100_000, seed=2024)
    result = monte_carlo_price(_leg(option_type), S, T, R_D, R_F, config)
    exact = pricer(S, 1.10, T, R_D, R_F, SIGMA)
    assert abs(result.price - exact) < 4 * result.std_error, (
        f"MC {result.price:.6f} ± {result.std_error:.6f} vs GK {exact:.6f}"
    )


NEAR_BARRIERS = [
    (
        _leg("call", barrier_type="knock_out", barrier=1.20),
        standard_barrier("cuo", S, 1.10, 1.20, T, R_D, R_F, SIGMA),
    ),
    (
        _leg("call", barrier_type="double_knock_out", lower_barrier=1.00, upper_barrier=1.20),
        double_barrier("co", S, 1.10, 1.00, 1.20, T, R_D, R_F, SIGMA),
    ),
]


@pytest.mark.parametrize("leg,exact", NEAR_BARRIERS, ids=["cuo", "dko"])
def test_barrier_within_three_std_errors_at_100k(leg, exact):
    """With 100,000 daily-monitored paths the estimate is within 3 standard errors."""
    result = monte_carlo_price(leg, S, T, R_D, R_F, MonteCarloConfig(n_paths=100_000, seed=1))
    assert abs(result.price - exact) < 3 * result.std_error, (
        f"MC {result.price:.6f} ± {result.std_error:.6f} vs closed form {exact:.6f}"
    )


@pytest.mark.parametrize("leg,exact", NEAR_BARRIERS, ids=["cuo", "dko"])
def test_barrier_error_decreases_from_1k_to_100k(leg, exact):
    """Root-mean-square error over a fixed seed sequence falls as paths go 1k → 10k → 100k."""
    seeds = range(1, 9)

    def rms_error(n_paths):
        errors = [
            monte_carlo_price(leg, S, T, R_D, R_F, MonteCarloConfig(n_paths=n_paths, seed=seed)).price
            - exact
            for seed in seeds
        ]
        return math.sqrt(sum(e * e for e in errors) / len(errors))

    errors = [rms_error(n) for n in (1_000, 10_000, 100_000)]
    assert errors[0] > errors[1] > errors[2], f"Not decreasing: {errors}"


@pytest.mark.parametrize(
    "leg,flag,H",
    [
        (_leg("put", barrier_type="knock_out", barrier=0.95), "pdo", 0.95),
        (_leg("put", barrier_type="knock_in", barrier=0.95), "pdi", 0.95),
    ],
)
def test_down_barrier_converges(leg, flag, H):
    """Down barriers converge to the continuous closed form too."""
    config = MonteCarloConfig(n_paths=50_000, seed=11)
    result = monte_carlo_price(leg, S, T, R_D, R_F, config)
    exact = standard_barrier(flag, S, 1.10, H, T, R_D, R_F, SIGMA)
    assert abs(result.price - exact) < 4 * result.std_error, (
        f"MC {result.price:.6f} ± {result.std_error:.6f} vs closed form {exact:.6f}"
    )


@pytest.mark.parametrize(
    "kwargs",
    [
        {"barrier_type": "knock_out", "barrier": 1.20},
        {"option_type": "put", "barrier_type": "knock_out", "barrier": 1.00},
        {"barrier_type": "double_knock_out", "lower_barrier": 1.00, "upper_barrier": 1.20},
        {"barrier_type": "double_knock_out", "reverse": True, "lower_barrier": 1.15, "upper_barrier": 1.25},
    ],
    ids=["up", "down", "corridor", "reverse-corridor"],
)
def test_continuity_correction_widens_trigger_region(kwargs):
    """On identical paths the corrected knock-out hits more often and is worth less."""
    leg = _leg(**kwargs)
    corrected = monte_carlo_price(
        leg, S, T, R_D, R_F, MonteCarloConfig(n_paths=20_000, n_steps=52, seed=6)
    )
    plain = monte_carlo_price(
        leg, S, T, R_D, R_F,
        MonteCarloConfig(n_paths=20_000, n_steps=52, seed=6, continuity_correction=False),
    )
    assert corrected.barrier_hits > plain.barrier_hits
    assert corrected.price < plain.price


def test_discrete_monitoring_overprices_knock_out():
    """Without correction, a discretely monitored knock-out is worth more."""
    leg = _leg("call", barrier_type="knock_out", barrier=1.20)
    config = MonteCarloConfig(n_paths=50_000, n_steps=12, seed=4, continuity_correction=False)
    result = monte_carlo_price(leg, S, T, R_D, R_F, config)
    exact = standard_barrier("cuo", S, 1.10, 1.20, T, R_D, R_F, SIGMA)
    assert result.price > exact


# ===========================
# Barrier Behaviour Tests
# ===========================


@pytest.mark.parametrize(
    "out_kwargs,in_kwargs",
    [
        ({"barrier_type": "knock_out", "barrier": 1.20}, {"barrier_type": "knock_in", "barrier": 1.20}),
        (
            {"barrier_type": "double_knock_out", "lower_barrier": 1.0, "upper_barrier": 1.2},
            {"barrier_type": "double_knock_in", "lower_barrier": 1.0, "upper_barrier": 1.2},
        ),
        (
            {"barrier_type": "double_knock_out", "reverse": True, "lower_barrier": 1.0, "upper_barrier": 1.2},
            {"barrier_type": "double_knock_in", "reverse": True, "lower_barrier": 1.0, "upper_barrier": 1.2},
        ),
    ],
)
def test_knock_out_plus_knock_in_on_same_paths(out_kwargs, in_kwargs):
    """On identical paths the out and in payoffs add up to the vanilla estimate."""
    config = MonteCarloConfig(n_paths=30_000, n_steps=50, seed=8)
    out = monte_carlo_price(_leg(**out_kwargs), S, T, R_D, R_F, config)
    knock_in = monte_carlo_price(_leg(**in_kwargs), S, T, R_D, R_F, config)
    exact = gk_call(S, 1.10, T, R_D, R_F, SIGMA)
    assert abs(out.price + knock_in.price - exact) < 4 * (out.std_error + knock_in.std_error)
    assert out.barrier_hits == knock_in.barrier_hits


def test_barrier_at_spot_hits_every_path():
    """A barrier already reached at inception knocks out every path."""
    leg = _leg("call", barrier_type="knock_out", barrier=1.10)
    result = monte_carlo_price(leg, S, T, R_D, R_F, MonteCarloConfig(n_paths=1_000, n_steps=10, seed=0))
    assert result.price == 0.0
    assert result.barrier_hits == 1_000


def test_simulate_terminal_shapes():
    """Terminal spots and hit flags have one entry per path."""
    leg = _leg(barrier_type="knock_out", barrier=1.25)
    terminal, hit = simulate_terminal(leg, S, T, R_D, R_F, 500, 20, np.random.default_rng(0))
    assert terminal.shape == (500,)
    assert hit.dtype == bool
    assert (terminal > 0).all()


def test_quantity_scales_price():
    """Sold half-notional legs return minus half the unit price."""
    config = MonteCarloConfig(n_paths=5_000, seed=21)
    result = monte_carlo_price(_leg(quantity=-50.0), S, T, R_D, R_F, config)
    assert result.price == pytest.approx(-0.5 * result.unit_price)
    assert result.std_error == pytest.approx(0.5 * result.unit_std_error)


# ===========================
# Configuration Tests
# ===========================


@pytest.mark.parametrize(
    "kwargs",
    [{"n_paths": 0}, {"n_steps": 0}, {"n_batches": 0}, {"max_workers": 0}],
)
def test_invalid_config_raises(kwargs):
    """Non-positive simulation settings are rejected."""
    with pytest.raises(InvalidInputError):
        MonteCarloConfig(**kwargs)


@pytest.mark.parametrize("spot,maturity", [(-1.10, 1.0), (0.0, 1.0), (1.10, -1.0), (1.10, 0.0)])
def test_non_positive_spot_or_maturity_raises(spot, maturity):
    """Degenerate spot or maturity is rejected like in the closed form."""
    with pytest.raises(InvalidInputError):
        monte_carlo_price(_leg("put"), spot, maturity, R_D, R_F, MonteCarloConfig(n_paths=100, seed=0))
