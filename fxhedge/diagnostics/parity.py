"""
Consistency diagnostics for FX option prices.

This module implements no-arbitrage checks including:
- Garman-Kohlhagen price bounds
- Put-call parity with two interest rates
- Barrier in/out parity (knock-in + knock-out = vanilla)
"""

import math

from fxhedge.utils.constants import BOUNDS_TOLERANCE, PARITY_TOLERANCE
from fxhedge.utils.types import ParityCheck


def check_price_bounds(
    call_price: float,
    put_price: float,
    S: float,
    K: float,
    T: float,
    r1: float,
    r2: float,
    tolerance: float = BOUNDS_TOLERANCE,
) -> ParityCheck:
    """
    Validate option prices against no-arbitrage bounds.

    Checks:
    1. Call lower bound: C >= max(S·e^(-r2·T) - K·e^(-r1·T), 0)
    2. Call upper bound: C <= S·e^(-r2·T)
    3. Put lower bound: P >= max(K·e^(-r1·T) - S·e^(-r2·T), 0)
    4. Put upper bound: P <= K·e^(-r1·T)

    Args:
        call_price, put_price: Option prices
        S: Spot exchange rate
        K: Strike
        T: Time to maturity
        r1: Domestic rate
        r2: Foreign rate
        tolerance: Tolerance for floating point comparisons

    Returns:
        ParityCheck; details hold 1.0 for a satisfied bound and 0.0 otherwise
    """
    violations = []
    details = {}

    discount_spot = S * math.exp(-r2 * T)
    discount_strike = K * math.exp(-r1 * T)

    call_lower = max(discount_spot - discount_strike, 0.0)
    call_lower_ok = call_price >= call_lower - tolerance
    details["call_lower_bound"] = float(call_lower_ok)
    if not call_lower_ok:
        violations.append(f"Call price {call_price:.6f} below lower bound {call_lower:.6f}")

    call_upper_ok = call_price <= discount_spot + tolerance
    details["call_upper_bound"] = float(call_upper_ok)
    if not call_upper_ok:
        violations.append(f"Call price {call_price:.6f} above upper bound {discount_spot:.6f}")

    put_lower = max(discount_strike - discount_spot, 0.0)
    put_lower_ok = put_price >= put_lower - tolerance
    details["put_lower_bound"] = float(put_lower_ok)
    if not put_lower_ok:
        violations.append(f"Put price {put_price:.6f} below lower bound {put_lower:.6f}")

    put_upper_ok = put_price <= discount_strike + tolerance
    details["put_upper_bound"] = float(put_upper_ok)
    if not put_upper_ok:
        violations.append(f"Put price {put_price:.6f} above upper bound {discount_strike:.6f}")

    return ParityCheck(is_valid=len(violations) == 0, violations=violations, details=details)


def check_put_call_parity(
    call_price: float,
    put_price: float,
    S: float,
    K: float,
    T: float,
    r1: float,
    r2: float,
    tolerance: float = PARITY_TOLERANCE,
) -> ParityCheck:
    """
    Validate the FX put-call parity relationship.

        C - P = S·e^(-r2·T) - K·e^(-r1·T)

    Args:
        call_price, put_price: Option prices
        S, K, T, r1, r2: Garman-Kohlhagen parameters
        tolerance: Tolerance for parity check

    Returns:
        ParityCheck with validation results
    """
    lhs = call_price - put_price
    rhs = S * math.exp(-r2 * T) - K * math.exp(-r1 * T)

    diff = abs(lhs - rhs)
    is_valid = diff < tolerance

    violations = []
    if not is_valid:
        violations.append(
            f"Put-call parity violated: C - P = {lhs:.8f}, "
            f"S·e^(-r2·T) - K·e^(-r1·T) = {rhs:.8f}, diff = {diff:.2e}"
        )

    details = {"parity_lhs": lhs, "parity_rhs": rhs, "difference": diff}

    return ParityCheck(is_valid=is_valid, violations=violations, details=details)


def check_barrier_parity(
    knock_in_price: float,
    knock_out_price: float,
    vanilla_price: float,
    tolerance: float = PARITY_TOLERANCE,
) -> ParityCheck:
    """
    Validate in/out parity for a barrier pair with the same strike and barrier.

        knock_in + knock_out = vanilla

    Both barrier prices must also be non-negative.

    Args:
        knock_in_price: Knock-in price
        knock_out_price: Knock-out price
        vanilla_price: Vanilla price with the same strike
        tolerance: Absolute tolerance; widen it for Monte Carlo prices

    Returns:
        ParityCheck with validation results
    """
    violations = []

    total = knock_in_price + knock_out_price
    diff = abs(total - vanilla_price)
    if diff >= tolerance:
        violations.append(
            f"In/out parity violated: KI + KO = {total:.8f}, "
            f"vanilla = {vanilla_price:.8f}, diff = {diff:.2e}"
        )

    for name, value in (("Knock-in", knock_in_price), ("Knock-out", knock_out_price)):
        if value < -tolerance:
            violations.append(f"{name} price {value:.8f} is negative")

    details = {
        "knock_in": knock_in_price,
        "knock_out": knock_out_price,
        "vanilla": vanilla_price,
        "difference": diff,
    }

    return ParityCheck(is_valid=len(violations) == 0, violations=violations, details=details)
