"""
Payoff evaluation of multi-leg hedge strategies.

The payoff of a leg at a hypothetical spot at maturity is its intrinsic
value, gated by the barrier condition tested AT that spot (a static,
single-point test, not a path memory), and scaled by quantity/100 with
its sign. The hedged rate of a party buying the foreign currency is

    hedged_rate = spot - strategy_payoff
    hedged_rate_with_premium = hedged_rate - total_premium
"""

from typing import Optional, Union

import numpy as np
import pandas as pd

from fxhedge.core.activation import gate_payoff, leg_triggered
from fxhedge.core.pricing import price_strategy
from fxhedge.utils.constants import SWEEP_STEPS, SWEEP_WIDTH_PCT
from fxhedge.utils.types import (
    MarketParams,
    MonteCarloConfig,
    PayoffCurve,
    PayoffPoint,
    PricingModel,
    ResolvedLeg,
    Strategy,
    StrategyPricing,
    SweepConfig,
)

SpotLike = Union[float, np.ndarray]

# Volatility does not enter intrinsic values; any positive placeholder will do
_PAYOFF_VOLATILITY = 1.0


def leg_payoff(leg: ResolvedLeg, spot: SpotLike) -> SpotLike:
    """
    Signed payoff of one resolved leg at the given spot(s).

    Examples:
        >>> leg = ResolvedLeg("call", strike=1.10, quantity=-50, volatility=0.1)
        >>> round(float(leg_payoff(leg, 1.20)), 6)
        -0.05
    """
    if leg.option_type == "call":
        intrinsic = np.maximum(spot - leg.strike, 0.0)
    else:
        intrinsic = np.maximum(leg.strike - spot, 0.0)

    gated = gate_payoff(intrinsic, leg_triggered(spot, leg), leg)
    return gated * (leg.quantity / 100.0)


def resolved_payoff(legs: list[ResolvedLeg], spot: SpotLike) -> SpotLike:
    """Sum of signed leg payoffs."""
    total = np.zeros_like(spot, dtype=float) if isinstance(spot, np.ndarray) else 0.0
    for leg in legs:
        total = total + leg_payoff(leg, spot)
    return total


def payoff_at_spot(strategy: Strategy, spot: float, initial_spot: float) -> float:
    """
    Aggregate intrinsic value of a strategy at a hypothetical future spot.

    Args:
        strategy: Legs with percentage or absolute levels
        spot: Spot at maturity
        initial_spot: Spot used to resolve percentage levels

    Returns:
        Sum over legs of gated intrinsic value times quantity/100
    """
    legs = strategy.resolve(initial_spot, _PAYOFF_VOLATILITY)
    return float(resolved_payoff(legs, spot))


def _reference_levels(legs: list[ResolvedLeg]) -> dict[str, float]:
    levels: dict[str, float] = {}
    for index, leg in enumerate(legs):
        levels.update(leg.reference_levels(index))
    return levels


def payoff_curve(
    strategy: Strategy,
    market: MarketParams,
    sweep_width_pct: float = SWEEP_WIDTH_PCT,
    steps: int = SWEEP_STEPS,
    total_premium: float = 0.0,
) -> PayoffCurve:
    """
    Evaluate the strategy over evenly spaced spots around market.spot.

    Args:
        strategy: Strategy to evaluate
        market: Market inputs; market.spot is the initial spot
        sweep_width_pct: Half-width of the sweep in percent of spot
        steps: Number of spot levels, endpoints included
        total_premium: Signed premium subtracted from the hedged rate

    Returns:
        PayoffCurve ordered by increasing spot
    """
    sweep = SweepConfig(width_pct=sweep_width_pct, steps=steps)
    initial_spot = market.spot
    legs = strategy.resolve(initial_spot, market.volatility)

    spots = np.linspace(
        initial_spot * (1.0 - sweep.width_pct / 100.0),
        initial_spot * (1.0 + sweep.width_pct / 100.0),
        sweep.steps,
    )
    payoffs = resolved_payoff(legs, spots)
    hedged = spots - payoffs
    levels = _reference_levels(legs)

    points = [
        PayoffPoint(
            spot=float(spot),
            unhedged_rate=float(spot),
            hedged_rate=float(rate),
            hedged_rate_with_premium=float(rate - total_premium),
            reference_levels=dict(levels),
        )
        for spot, rate in zip(spots, hedged)
    ]
    return PayoffCurve(points=points, total_premium=total_premium)


def evaluate_payoff_curve(
    strategy: Strategy,
    market: MarketParams,
    sweep: Optional[SweepConfig] = None,
    pricing_model: PricingModel = "closed_form",
    mc_config: Optional[MonteCarloConfig] = None,
    pricing: Optional[StrategyPricing] = None,
) -> PayoffCurve:
    """
    Price the strategy (unless pricing is supplied) and build its payoff curve.

    This is the entry point for chart and export collaborators.
    """
    sweep = sweep or SweepConfig()
    if pricing is None:
        pricing = price_strategy(strategy, market, pricing_model, mc_config)
    return payoff_curve(strategy, market, sweep.width_pct, sweep.steps, pricing.total_premium)


def curve_to_frame(curve: PayoffCurve) -> pd.DataFrame:
    """Payoff curve as a DataFrame, one row per spot level."""
    return pd.DataFrame.from_records(curve.to_records())
