"""
Named hedge strategies and their expansion into option legs.

Every template hedges a party that BUYS the foreign currency at maturity:
long calls cap the rate paid, short puts give up the benefit of a fall.
Strikes and barriers in StrategyParams are percentages of the initial
spot; solved strikes (forward, zero-cost collars) are stored as absolute
levels.
"""

from dataclasses import dataclass
from typing import Callable, Optional

from fxhedge.core.garman_kohlhagen import forward_rate
from fxhedge.solvers.zero_cost import solve_zero_cost_strike
from fxhedge.utils.exceptions import FXPricingError, InvalidInputError
from fxhedge.utils.types import Level, MarketParams, OptionLeg, Strategy


@dataclass(frozen=True)
class StrategyParams:
    """
    User inputs for a named strategy.

    Attributes:
        strike_upper: Upper strike, % of spot (calls)
        strike_lower: Lower strike, % of spot (puts)
        strike_mid: Middle strike, % of spot (seagull bought call)
        barrier_upper: Upper barrier, % of spot
        barrier_lower: Lower barrier, % of spot
        quantity: Hedged share of notional in percent
        legs: Explicit legs for the "custom" strategy
    """
    strike_upper: Optional[float] = None
    strike_lower: Optional[float] = None
    strike_mid: Optional[float] = None
    barrier_upper: Optional[float] = None
    barrier_lower: Optional[float] = None
    quantity: float = 100.0
    legs: tuple[OptionLeg, ...] = ()


def _require(params: StrategyParams, key: str, *names: str) -> list[float]:
    values = []
    for name in names:
        value = getattr(params, name)
        if value is None:
            raise InvalidInputError(f"Strategy '{key}' requires {name}")
        if value <= 0:
            raise InvalidInputError(f"{name} must be positive for '{key}', got {value}")
        values.append(value)
    return values


def _ordered(key: str, low_name: str, low: float, high_name: str, high: float) -> None:
    if low >= high:
        raise InvalidInputError(
            f"Strategy '{key}' needs {low_name} < {high_name}, got {low} >= {high}"
        )


def _call(strike: Level, quantity: float, **barrier) -> OptionLeg:
    return OptionLeg("call", strike, quantity, **barrier)


def _put(strike: Level, quantity: float, **barrier) -> OptionLeg:
    return OptionLeg("put", strike, quantity, **barrier)


def _forward(params: StrategyParams, market: MarketParams) -> tuple[OptionLeg, ...]:
    # Long call + short put struck at the forward replicate it at zero premium
    fwd = Level(
        forward_rate(market.spot, market.maturity, market.domestic_rate, market.foreign_rate),
        is_percent=False,
    )
    return (_call(fwd, params.quantity), _put(fwd, -params.quantity))


def _vanilla_call(params: StrategyParams, market: MarketParams) -> tuple[OptionLeg, ...]:
    (upper,) = _require(params, "call", "strike_upper")
    return (_call(Level(upper), params.quantity),)


def _vanilla_put(params: StrategyParams, market: MarketParams) -> tuple[OptionLeg, ...]:
    (lower,) = _require(params, "put", "strike_lower")
    return (_put(Level(lower), params.quantity),)


def _collar(params: StrategyParams, market: MarketParams) -> tuple[OptionLeg, ...]:
    lower, upper = _require(params, "collar", "strike_lower", "strike_upper")
    _ordered("collar", "strike_lower", lower, "strike_upper", upper)
    return (_call(Level(upper), params.quantity), _put(Level(lower), -params.quantity))


def _zero_cost_collar(fixed_type: str, key: str):
    name = "strike_lower" if fixed_type == "put" else "strike_upper"

    def build(params: StrategyParams, market: MarketParams) -> tuple[OptionLeg, ...]:
        (fixed_pct,) = _require(params, key, name)
        fixed_strike = market.spot * fixed_pct / 100.0
        result = solve_zero_cost_strike(
            fixed_type,
            fixed_strike,
            market.spot,
            market.maturity,
            market.domestic_rate,
            market.foreign_rate,
            market.volatility,
        )
        if not result.success:
            raise FXPricingError(f"Cannot build '{key}': {result.message}")

        if fixed_type == "put":
            call_strike, put_strike = Level(result.strike, False), Level(fixed_strike, False)
        else:
            call_strike, put_strike = Level(fixed_strike, False), Level(result.strike, False)
        return (_call(call_strike, params.quantity), _put(put_strike, -params.quantity))

    return build


def _strangle(params: StrategyParams, market: MarketParams) -> tuple[OptionLeg, ...]:
    lower, upper = _require(params, "strangle", "strike_lower", "strike_upper")
    _ordered("strangle", "strike_lower", lower, "strike_upper", upper)
    return (_put(Level(lower), params.quantity), _call(Level(upper), params.quantity))


def _straddle(params: StrategyParams, market: MarketParams) -> tuple[OptionLeg, ...]:
    atm = Level(100.0)
    return (_put(atm, params.quantity), _call(atm, params.quantity))


def _seagull(params: StrategyParams, market: MarketParams) -> tuple[OptionLeg, ...]:
    lower, mid, upper = _require(
        params, "seagull", "strike_lower", "strike_mid", "strike_upper"
    )
    _ordered("seagull", "strike_lower", lower, "strike_mid", mid)
    _ordered("seagull", "strike_mid", mid, "strike_upper", upper)
    q = params.quantity
    return (
        _call(Level(mid), q),
        _call(Level(upper), -q),
        _put(Level(lower), -q),
    )


def _call_ko(params: StrategyParams, market: MarketParams) -> tuple[OptionLeg, ...]:
    upper, barrier = _require(params, "call_ko", "strike_upper", "barrier_upper")
    _ordered("call_ko", "strike_upper", upper, "barrier_upper", barrier)
    return (
        _call(Level(upper), params.quantity, barrier_type="knock_out", barrier=Level(barrier)),
    )


def _put_ki(params: StrategyParams, market: MarketParams) -> tuple[OptionLeg, ...]:
    lower, barrier = _require(params, "put_ki", "strike_lower", "barrier_lower")
    _ordered("put_ki", "barrier_lower", barrier, "strike_lower", lower)
    return (
        _put(Level(lower), params.quantity, barrier_type="knock_in", barrier=Level(barrier)),
    )


def _call_put_ki_ko(params: StrategyParams, market: MarketParams) -> tuple[OptionLeg, ...]:
    upper, b_upper, lower, b_lower = _require(
        params, "call_put_ki_ko", "strike_upper", "barrier_upper", "strike_lower", "barrier_lower"
    )
    _ordered("call_put_ki_ko", "strike_upper", upper, "barrier_upper", b_upper)
    _ordered("call_put_ki_ko", "barrier_lower", b_lower, "strike_lower", lower)
    q = params.quantity
    return (
        _call(Level(upper), q, barrier_type="knock_out", barrier=Level(b_upper)),
        _put(Level(lower), -q, barrier_type="knock_in", barrier=Level(b_lower)),
    )


def _custom(params: StrategyParams, market: MarketParams) -> tuple[OptionLeg, ...]:
    if not params.legs:
        raise InvalidInputError("Strategy 'custom' requires at least one leg")
    return tuple(params.legs)


Builder = Callable[[StrategyParams, MarketParams], tuple[OptionLeg, ...]]

STRATEGY_CATALOG: dict[str, tuple[str, Builder]] = {
    "forward": ("Forward at the interest-rate-parity rate", _forward),
    "call": ("Bought call capping the purchase rate", _vanilla_call),
    "put": ("Bought put", _vanilla_put),
    "collar": ("Bought call financed by a sold put", _collar),
    "collar_put": ("Zero-cost collar, put strike fixed, call strike solved", _zero_cost_collar("put", "collar_put")),
    "collar_call": ("Zero-cost collar, call strike fixed, put strike solved", _zero_cost_collar("call", "collar_call")),
    "strangle": ("Bought out-of-the-money put and call", _strangle),
    "straddle": ("Bought at-the-money put and call", _straddle),
    "seagull": ("Bought call, sold higher call and sold put", _seagull),
    "call_ko": ("Bought up-and-out call", _call_ko),
    "put_ki": ("Bought down-and-in put", _put_ki),
    "call_put_ki_ko": ("Bought up-and-out call financed by a sold down-and-in put", _call_put_ki_ko),
    "custom": ("Arbitrary user-defined legs", _custom),
}


def resolve_strategy(key: str, params: StrategyParams, market: MarketParams) -> Strategy:
    """
    Expand a catalog entry into its legs.

    Args:
        key: Catalog key, see STRATEGY_CATALOG
        params: Strikes, barriers and quantity (percent of spot)
        market: Market inputs, used by templates with solved strikes

    Returns:
        Strategy whose legs are ready for pricing and payoff evaluation

    Raises:
        InvalidInputError: Unknown key, missing or inconsistent parameters
        FXPricingError: A zero-cost strike cannot be found
    """
    if key not in STRATEGY_CATALOG:
        raise InvalidInputError(
            f"Unknown strategy '{key}', expected one of {sorted(STRATEGY_CATALOG)}"
        )
    _, builder = STRATEGY_CATALOG[key]
    legs = builder(params, market)

    # Resolve once so inconsistent legs fail here rather than inside a sweep
    for leg in legs:
        leg.resolve(market.spot, market.volatility)

    return Strategy(name=key, legs=legs)
