"""
Zero-cost strike solver for two-leg collars.

Given one leg of a collar with a fixed strike, find the strike of the
opposite leg whose Garman-Kohlhagen premium is identical, so that buying
one and selling the other costs nothing. Uses Brent's method, which is
guaranteed to converge once the premium difference changes sign over the
search bracket.
"""

from scipy.optimize import brentq

from fxhedge.core.garman_kohlhagen import gk_price
from fxhedge.utils.constants import ZERO_COST_BRACKET, ZERO_COST_MAX_ITER, ZERO_COST_XTOL
from fxhedge.utils.types import OptionType, ZeroCostResult


def solve_zero_cost_strike(
    fixed_type: OptionType,
    fixed_strike: float,
    S: float,
    T: float,
    r1: float,
    r2: float,
    sigma: float,
    bracket: tuple[float, float] = ZERO_COST_BRACKET,
    tolerance: float = ZERO_COST_XTOL,
) -> ZeroCostResult:
    """
    Solve the strike of the opposite option type with the same premium.

    Args:
        fixed_type: Type of the leg whose strike is given ("put" solves a call strike)
        fixed_strike: Absolute strike of that leg
        S, T, r1, r2, sigma: Garman-Kohlhagen parameters
        bracket: Search range for the solved strike, as multiples of S
        tolerance: Absolute tolerance on the strike

    Returns:
        ZeroCostResult with the solved strike and both premiums

    Examples:
        >>> result = solve_zero_cost_strike("put", 1.05, 1.10, 1.0, 0.02, 0.01, 0.10)
        >>> result.success and result.strike > 1.10
        True
    """
    solved_type = "call" if fixed_type == "put" else "put"
    fixed_price = gk_price(fixed_type, S, fixed_strike, T, r1, r2, sigma)

    def objective(strike: float) -> float:
        """Premium difference; zero at the zero-cost strike."""
        return gk_price(solved_type, S, strike, T, r1, r2, sigma) - fixed_price

    lower, upper = bracket[0] * S, bracket[1] * S

    try:
        strike = brentq(
            objective,
            lower,
            upper,
            xtol=tolerance,
            rtol=1e-12,
            maxiter=ZERO_COST_MAX_ITER,
            full_output=False,
        )
    except ValueError:
        # brentq raises when objective(lower) and objective(upper) share a sign
        return ZeroCostResult(
            strike=0.0,
            fixed_price=fixed_price,
            solved_price=0.0,
            success=False,
            message=(
                f"No {solved_type} strike in [{lower:.6f}, {upper:.6f}] matches the "
                f"{fixed_type} premium {fixed_price:.6f}: "
                f"diff({lower:.4f}) = {objective(lower):.6f}, "
                f"diff({upper:.4f}) = {objective(upper):.6f}"
            ),
        )

    solved_price = gk_price(solved_type, S, strike, T, r1, r2, sigma)
    return ZeroCostResult(
        strike=strike,
        fixed_price=fixed_price,
        solved_price=solved_price,
        success=True,
        message=f"Converged with premium difference {abs(solved_price - fixed_price):.2e}",
    )
