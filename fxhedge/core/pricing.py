"""
Pricing dispatch for option legs and strategies.

The pricing model is an explicit argument of every call. Closed form
covers vanilla legs (Garman-Kohlhagen), all single barriers and standard
double barriers. Reverse double barriers have no closed form here: they
fall back to Monte Carlo and the returned PricingResult says so.
"""

import logging
from typing import Optional

import numpy as np

from fxhedge.core.activation import triggers_upward
from fxhedge.core.barrier import double_barrier, standard_barrier
from fxhedge.core.garman_kohlhagen import gk_price
from fxhedge.core.monte_carlo import monte_carlo_price
from fxhedge.utils.exceptions import InvalidInputError, UnsupportedCombinationError
from fxhedge.utils.types import (
    PRICING_MODELS,
    MarketParams,
    MonteCarloConfig,
    OptionType,
    PricingModel,
    PricingResult,
    ResolvedLeg,
    Strategy,
    StrategyPricing,
)

logger = logging.getLogger(__name__)


def _check_model(pricing_model: str) -> None:
    if pricing_model not in PRICING_MODELS:
        raise ValueError(f"pricing_model must be one of {PRICING_MODELS}, got '{pricing_model}'")


def closed_form_flag(leg: ResolvedLeg) -> Optional[str]:
    """
    Type flag of the closed-form formula for a barrier leg.

    Returns:
        A single-barrier flag such as "cuo", a double-barrier flag such as
        "co", or None when no closed form applies (vanilla legs and
        reverse double barriers)
    """
    if not leg.is_barrier:
        return None

    prefix = leg.option_type[0]
    suffix = "o" if leg.knocks_out else "i"

    if leg.is_double:
        if leg.reverse:
            return None
        return prefix + suffix

    direction = "u" if triggers_upward(leg.option_type, leg.reverse) else "d"
    return prefix + direction + suffix


def price_vanilla(
    option_type: OptionType,
    S: float,
    K: float,
    T: float,
    r1: float,
    r2: float,
    sigma: float,
    pricing_model: PricingModel = "closed_form",
    mc_config: Optional[MonteCarloConfig] = None,
    rng: Optional[np.random.Generator] = None,
) -> float:
    """
    Price a vanilla FX option per unit of notional.

    Args:
        option_type: "call" or "put"
        S, K, T, r1, r2, sigma: Garman-Kohlhagen parameters
        pricing_model: "closed_form" or "monte_carlo"
        mc_config: Simulation settings for the Monte Carlo model
        rng: Optional generator for the Monte Carlo model

    Returns:
        Option price
    """
    _check_model(pricing_model)
    logger.debug("Pricing vanilla %s with %s: S=%s K=%s T=%s", option_type, pricing_model, S, K, T)

    if pricing_model == "closed_form":
        return gk_price(option_type, S, K, T, r1, r2, sigma)

    leg = ResolvedLeg(option_type, strike=K, quantity=100.0, volatility=sigma)
    return monte_carlo_price(leg, S, T, r1, r2, mc_config, rng).unit_price


def price_leg(
    leg: ResolvedLeg,
    market: MarketParams,
    pricing_model: PricingModel = "closed_form",
    mc_config: Optional[MonteCarloConfig] = None,
    rng: Optional[np.random.Generator] = None,
    allow_fallback: bool = True,
) -> PricingResult:
    """
    Price any resolved leg.

    Args:
        leg: Resolved leg
        market: Spot and rates; the leg carries its own volatility
        pricing_model: Requested model
        mc_config: Simulation settings when Monte Carlo is used
        rng: Optional generator when Monte Carlo is used
        allow_fallback: Fall back to Monte Carlo when no closed form exists

    Returns:
        PricingResult; `method` is the model that actually produced the price
        and `fallback` is True when it differs from the requested one

    Raises:
        UnsupportedCombinationError: If closed form was requested, none
            exists for the leg, and allow_fallback is False
    """
    _check_model(pricing_model)
    S, T = market.spot, market.maturity
    r_d, r_f = market.domestic_rate, market.foreign_rate
    scale = leg.quantity / 100.0

    if pricing_model == "closed_form":
        flag = closed_form_flag(leg)
        if not leg.is_barrier:
            price = gk_price(leg.option_type, S, leg.strike, T, r_d, r_f, leg.volatility)
            return PricingResult(leg, price, price * scale, "closed_form")
        if flag is not None and leg.is_double:
            price = double_barrier(
                flag, S, leg.strike, leg.lower_barrier, leg.upper_barrier,
                T, r_d, r_f, leg.volatility,
            )
            return PricingResult(leg, price, price * scale, "closed_form")
        if flag is not None:
            price = standard_barrier(
                flag, S, leg.strike, leg.barrier, T, r_d, r_f, leg.volatility
            )
            return PricingResult(leg, price, price * scale, "closed_form")

        message = f"No closed form for {leg.label}"
        if not allow_fallback:
            raise UnsupportedCombinationError(message)
        logger.warning("%s, falling back to Monte Carlo", message)
        result = monte_carlo_price(leg, S, T, r_d, r_f, mc_config, rng)
        return PricingResult(
            leg,
            result.unit_price,
            result.unit_price * scale,
            "monte_carlo",
            fallback=True,
            std_error=result.unit_std_error,
            message=message + "; priced by Monte Carlo",
        )

    result = monte_carlo_price(leg, S, T, r_d, r_f, mc_config, rng)
    return PricingResult(
        leg,
        result.unit_price,
        result.unit_price * scale,
        "monte_carlo",
        std_error=result.unit_std_error,
    )


def price_barrier(
    leg: ResolvedLeg,
    market: MarketParams,
    pricing_model: PricingModel = "closed_form",
    mc_config: Optional[MonteCarloConfig] = None,
    rng: Optional[np.random.Generator] = None,
    allow_fallback: bool = True,
) -> PricingResult:
    """
    Price a barrier leg (single or double, knock-out or knock-in).

    Raises:
        InvalidInputError: If the leg has no barrier
    """
    if not leg.is_barrier:
        raise InvalidInputError(f"price_barrier needs a barrier leg, got {leg.label}")
    return price_leg(leg, market, pricing_model, mc_config, rng, allow_fallback)


def price_strategy(
    strategy: Strategy,
    market: MarketParams,
    pricing_model: PricingModel = "closed_form",
    mc_config: Optional[MonteCarloConfig] = None,
    rng: Optional[np.random.Generator] = None,
) -> StrategyPricing:
    """
    Price every leg of a strategy and aggregate the premium.

    Percentage strikes and barriers are resolved against market.spot and
    legs without their own volatility use market.volatility. The total
    premium is signed: sold legs reduce it.
    """
    legs = strategy.resolve(market.spot, market.volatility)
    results = [price_leg(leg, market, pricing_model, mc_config, rng) for leg in legs]
    total = sum(result.premium for result in results)

    logger.debug("Strategy %s priced: %d legs, total premium %.6f", strategy.name, len(results), total)
    return StrategyPricing(strategy=strategy, results=results, total_premium=total)
