"""
Garman-Kohlhagen option pricing model for FX options.

This module implements the closed-form price of European FX calls and
puts, and the interest-rate-parity forward. The foreign interest rate
plays the role of a continuous dividend yield in Black-Scholes.

Mathematical Background:
    The exchange rate S (domestic per foreign unit) follows
    dS = (r1 - r2)·S·dt + σ·S·dW under the domestic risk-neutral measure,
    so the cost of carry is b = r1 - r2.

References:
    Garman, M. B., & Kohlhagen, S. W. (1983). Foreign Currency Option Values.
    Journal of International Money and Finance, 2(3), 231-237.
"""

import math

from fxhedge.core.distributions import normal_cdf
from fxhedge.utils.constants import MIN_POSITIVE
from fxhedge.utils.exceptions import InvalidInputError
from fxhedge.utils.types import OptionType


def _validate_inputs(S: float, K: float) -> None:
    """
    Validate spot and strike.

    Raises:
        InvalidInputError: If spot or strike is not positive
    """
    if S <= 0:
        raise InvalidInputError(f"Spot rate must be positive, got S={S}")
    if K <= 0:
        raise InvalidInputError(f"Strike must be positive, got K={K}")


def _floor(T: float, sigma: float) -> tuple[float, float]:
    """Clamp time and volatility to a small positive floor."""
    return max(T, MIN_POSITIVE), max(sigma, MIN_POSITIVE)


def forward_rate(S: float, T: float, r1: float, r2: float) -> float:
    """
    Interest-rate-parity forward rate.

    Args:
        S: Spot exchange rate
        T: Time to maturity in years
        r1: Domestic interest rate
        r2: Foreign interest rate

    Returns:
        F = S·e^((r1 - r2)·T)

    Examples:
        >>> round(forward_rate(1.10, 1.0, 0.02, 0.01), 4)
        1.1111
    """
    return S * math.exp((r1 - r2) * T)


def d1(S: float, K: float, T: float, r1: float, r2: float, sigma: float) -> float:
    """
    Calculate d1 in the Garman-Kohlhagen formula.

    Formula:
        d1 = [ln(S/K) + (r1 - r2 + σ²/2)T] / (σ√T)
    """
    _validate_inputs(S, K)
    T, sigma = _floor(T, sigma)

    log_moneyness = math.log(S) - math.log(K)
    drift = (r1 - r2 + 0.5 * sigma * sigma) * T
    diffusion = sigma * math.sqrt(T)

    return (log_moneyness + drift) / diffusion


def d2(S: float, K: float, T: float, r1: float, r2: float, sigma: float) -> float:
    """
    Calculate d2 = d1 - σ√T.

    For a call, N(d2) is the risk-neutral probability of exercise.
    """
    T, sigma = _floor(T, sigma)
    return d1(S, K, T, r1, r2, sigma) - sigma * math.sqrt(T)


def gk_call(S: float, K: float, T: float, r1: float, r2: float, sigma: float) -> float:
    """
    Calculate a European FX call price.

    Args:
        S: Spot exchange rate
        K: Strike
        T: Time to maturity in years
        r1: Domestic interest rate (annualized, continuous)
        r2: Foreign interest rate (annualized, continuous)
        sigma: Volatility (annualized)

    Returns:
        Call price in domestic currency per unit of foreign notional

    Formula:
        C = S·e^(-r2·T)·N(d1) - K·e^(-r1·T)·N(d2)

    Examples:
        >>> price = gk_call(1.10, 1.10, 1.0, 0.02, 0.01, 0.10)
        >>> abs(price - 0.0488) < 0.0005
        True
    """
    _validate_inputs(S, K)
    T, sigma = _floor(T, sigma)

    d1_value = d1(S, K, T, r1, r2, sigma)
    d2_value = d1_value - sigma * math.sqrt(T)

    discount_spot = S * math.exp(-r2 * T)
    discount_strike = K * math.exp(-r1 * T)

    price = discount_spot * normal_cdf(d1_value) - discount_strike * normal_cdf(d2_value)
    return max(price, 0.0)


def gk_put(S: float, K: float, T: float, r1: float, r2: float, sigma: float) -> float:
    """
    Calculate a European FX put price.

    Formula:
        P = K·e^(-r1·T)·N(-d2) - S·e^(-r2·T)·N(-d1)

    Alternatively (via put-call parity):
        P = C - S·e^(-r2·T) + K·e^(-r1·T)
    """
    _validate_inputs(S, K)
    T, sigma = _floor(T, sigma)

    d1_value = d1(S, K, T, r1, r2, sigma)
    d2_value = d1_value - sigma * math.sqrt(T)

    discount_spot = S * math.exp(-r2 * T)
    discount_strike = K * math.exp(-r1 * T)

    price = discount_strike * normal_cdf(-d2_value) - discount_spot * normal_cdf(-d1_value)
    return max(price, 0.0)


def gk_price(
    option_type: OptionType,
    S: float,
    K: float,
    T: float,
    r1: float,
    r2: float,
    sigma: float,
) -> float:
    """
    Calculate a European FX option price (call or put).

    Raises:
        ValueError: If option_type is not "call" or "put"
        InvalidInputError: If spot or strike is not positive
    """
    if option_type == "call":
        return gk_call(S, K, T, r1, r2, sigma)
    elif option_type == "put":
        return gk_put(S, K, T, r1, r2, sigma)
    else:
        raise ValueError(f"option_type must be 'call' or 'put', got '{option_type}'")
