"""
Command-line interface for the FX hedge pricer.

This CLI provides access to:
- Vanilla pricing (Garman-Kohlhagen or Monte Carlo)
- Interest-rate-parity forwards
- Single and double barrier pricing
- Named hedge strategies with premium and payoff curve
- Price bounds, put-call parity and barrier in/out parity checks
"""

import logging

import click

from fxhedge.core.garman_kohlhagen import forward_rate
from fxhedge.core.pricing import price_barrier, price_leg, price_strategy, price_vanilla
from fxhedge.diagnostics.parity import (
    check_barrier_parity,
    check_price_bounds,
    check_put_call_parity,
)
from fxhedge.hedging.payoff import curve_to_frame, evaluate_payoff_curve
from fxhedge.hedging.strategies import STRATEGY_CATALOG, StrategyParams, resolve_strategy
from fxhedge.utils.constants import (
    BOUNDS_TOLERANCE,
    MC_DEFAULT_PATHS,
    MC_DEFAULT_STEPS,
    PARITY_TOLERANCE,
)
from fxhedge.utils.exceptions import FXPricingError
from fxhedge.utils.types import (
    MarketParams,
    MonteCarloConfig,
    PRICING_MODELS,
    ResolvedLeg,
    SweepConfig,
)

MODEL_CHOICE = click.Choice(list(PRICING_MODELS))


@click.group()
@click.version_option(version="1.0.0")
@click.option("--verbose", is_flag=True, help="Log pricing details")
def cli(verbose):
    """FX Hedge Pricer - Garman-Kohlhagen, barrier and Monte Carlo pricing of FX hedges."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


@cli.command()
@click.option("--spot", "-S", type=float, required=True, help="Spot exchange rate")
@click.option("--strike", "-K", type=float, required=True, help="Strike")
@click.option("--time", "-T", type=float, required=True, help="Time to maturity (years)")
@click.option("--domestic-rate", "-r", type=float, required=True, help="Domestic rate r1")
@click.option("--foreign-rate", "-f", type=float, required=True, help="Foreign rate r2")
@click.option("--vol", "-v", type=float, required=True, help="Volatility (annualized)")
@click.option("--type", "-t", type=click.Choice(["call", "put"]), default="call")
@click.option("--model", "-m", type=MODEL_CHOICE, default="closed_form")
@click.option("--paths", type=int, default=MC_DEFAULT_PATHS, help="Monte Carlo paths")
@click.option("--seed", type=int, default=None, help="Monte Carlo seed")
def price(spot, strike, time, domestic_rate, foreign_rate, vol, type, model, paths, seed):
    """Calculate a vanilla FX option price."""
    try:
        config = MonteCarloConfig(n_paths=paths, seed=seed)
        price_value = price_vanilla(
            type, spot, strike, time, domestic_rate, foreign_rate, vol, model, config
        )
    except (FXPricingError, ValueError) as e:
        click.echo(f"\nError: {e}", err=True)
        raise SystemExit(1)

    click.echo(f"\n{type.capitalize()} Option Price ({model}): {price_value:.6f}")


@cli.command()
@click.option("--spot", "-S", type=float, required=True, help="Spot exchange rate")
@click.option("--time", "-T", type=float, required=True, help="Time to maturity (years)")
@click.option("--domestic-rate", "-r", type=float, required=True, help="Domestic rate r1")
@click.option("--foreign-rate", "-f", type=float, required=True, help="Foreign rate r2")
def forward(spot, time, domestic_rate, foreign_rate):
    """Calculate the forward rate from interest rate parity."""
    fwd = forward_rate(spot, time, domestic_rate, foreign_rate)
    click.echo(f"\nForward Rate: {fwd:.6f}")
    click.echo(f"Forward Points: {(fwd - spot) * 10_000:.2f}")


@cli.command()
@click.option("--spot", "-S", type=float, required=True, help="Spot exchange rate")
@click.option("--strike", "-K", type=float, required=True, help="Strike")
@click.option("--time", "-T", type=float, required=True, help="Time to maturity (years)")
@click.option("--domestic-rate", "-r", type=float, required=True, help="Domestic rate r1")
@click.option("--foreign-rate", "-f", type=float, required=True, help="Foreign rate r2")
@click.option("--vol", "-v", type=float, required=True, help="Volatility (annualized)")
@click.option("--type", "-t", type=click.Choice(["call", "put"]), default="call")
@click.option(
    "--barrier-type",
    "-b",
    type=click.Choice(["knock_out", "knock_in", "double_knock_out", "double_knock_in"]),
    default="knock_out",
)
@click.option("--reverse", is_flag=True, help="Invert the activation direction")
@click.option("--barrier", "-H", type=float, default=None, help="Single barrier level")
@click.option("--lower", "-L", type=float, default=None, help="Lower double barrier")
@click.option("--upper", "-U", type=float, default=None, help="Upper double barrier")
@click.option("--model", "-m", type=MODEL_CHOICE, default="closed_form")
@click.option("--paths", type=int, default=MC_DEFAULT_PATHS, help="Monte Carlo paths")
@click.option("--steps", type=int, default=MC_DEFAULT_STEPS, help="Monitoring steps")
@click.option("--seed", type=int, default=None, help="Monte Carlo seed")
@click.option("--no-fallback", is_flag=True, help="Fail instead of falling back to Monte Carlo")
def barrier(
    spot, strike, time, domestic_rate, foreign_rate, vol, type, barrier_type, reverse,
    barrier, lower, upper, model, paths, steps, seed, no_fallback,
):
    """Calculate a single or double barrier option price."""
    try:
        market = MarketParams(spot, domestic_rate, foreign_rate, vol, time)
        leg = ResolvedLeg(
            option_type=type,
            strike=strike,
            quantity=100.0,
            volatility=vol,
            barrier_type=barrier_type,
            reverse=reverse,
            barrier=barrier,
            lower_barrier=lower,
            upper_barrier=upper,
        )
        config = MonteCarloConfig(n_paths=paths, n_steps=steps, seed=seed)
        result = price_barrier(leg, market, model, config, allow_fallback=not no_fallback)
    except (FXPricingError, ValueError) as e:
        click.echo(f"\nError: {e}", err=True)
        raise SystemExit(1)

    click.echo(f"\n{leg.label}: {result.price:.6f}")
    click.echo(f"  Method:    {result.method}")
    if result.std_error is not None:
        click.echo(f"  Std error: {result.std_error:.6f}")
    if result.fallback:
        click.echo(f"  Fallback:  {result.message}")


@cli.command()
@click.argument("key", type=click.Choice([k for k in STRATEGY_CATALOG if k != "custom"]))
@click.option("--spot", "-S", type=float, required=True, help="Spot exchange rate")
@click.option("--time", "-T", type=float, required=True, help="Time to maturity (years)")
@click.option("--domestic-rate", "-r", type=float, required=True, help="Domestic rate r1")
@click.option("--foreign-rate", "-f", type=float, required=True, help="Foreign rate r2")
@click.option("--vol", "-v", type=float, required=True, help="Volatility (annualized)")
@click.option("--strike-upper", type=float, default=None, help="Upper strike (% of spot)")
@click.option("--strike-lower", type=float, default=None, help="Lower strike (% of spot)")
@click.option("--strike-mid", type=float, default=None, help="Middle strike (% of spot)")
@click.option("--barrier-upper", type=float, default=None, help="Upper barrier (% of spot)")
@click.option("--barrier-lower", type=float, default=None, help="Lower barrier (% of spot)")
@click.option("--quantity", "-q", type=float, default=100.0, help="Hedged % of notional")
@click.option("--model", "-m", type=MODEL_CHOICE, default="closed_form")
@click.option("--paths", type=int, default=MC_DEFAULT_PATHS, help="Monte Carlo paths")
@click.option("--seed", type=int, default=None, help="Monte Carlo seed")
@click.option("--width", type=float, default=30.0, help="Sweep half-width (% of spot)")
@click.option("--points", type=int, default=100, help="Number of sweep points")
@click.option("--csv", "csv_path", type=click.Path(dir_okay=False), default=None,
              help="Write the payoff curve to this CSV file")
def strategy(
    key, spot, time, domestic_rate, foreign_rate, vol, strike_upper, strike_lower,
    strike_mid, barrier_upper, barrier_lower, quantity, model, paths, seed, width,
    points, csv_path,
):
    """Price a named hedge strategy and summarize its payoff curve."""
    try:
        market = MarketParams(spot, domestic_rate, foreign_rate, vol, time)
        params = StrategyParams(
            strike_upper=strike_upper,
            strike_lower=strike_lower,
            strike_mid=strike_mid,
            barrier_upper=barrier_upper,
            barrier_lower=barrier_lower,
            quantity=quantity,
        )
        resolved = resolve_strategy(key, params, market)
        config = MonteCarloConfig(n_paths=paths, seed=seed)
        pricing = price_strategy(resolved, market, model, config)
        curve = evaluate_payoff_curve(
            resolved, market, SweepConfig(width_pct=width, steps=points), pricing=pricing
        )
    except (FXPricingError, ValueError) as e:
        click.echo(f"\nError: {e}", err=True)
        raise SystemExit(1)

    description, _ = STRATEGY_CATALOG[key]
    click.echo(f"\n{key}: {description}")
    for result in pricing.results:
        leg = result.leg
        line = (
            f"  {leg.label:<28} K={leg.strike:.6f}  price={result.price:.6f}  "
            f"premium={result.premium:+.6f}  [{result.method}]"
        )
        if result.fallback:
            line += " (fallback)"
        click.echo(line)
    click.echo(f"\nTotal Premium: {pricing.total_premium:+.6f}")

    hedged = [p.hedged_rate_with_premium for p in curve.points]
    click.echo(f"Spot range:   {curve.points[0].spot:.6f} .. {curve.points[-1].spot:.6f}")
    click.echo(f"Hedged rate incl. premium: min {min(hedged):.6f}, max {max(hedged):.6f}")

    if csv_path:
        curve_to_frame(curve).to_csv(csv_path, index=False)
        click.echo(f"Payoff curve written to {csv_path}")


@cli.command()
@click.option("--spot", "-S", type=float, required=True, help="Spot exchange rate")
@click.option("--strike", "-K", type=float, required=True, help="Strike")
@click.option("--time", "-T", type=float, required=True, help="Time to maturity (years)")
@click.option("--domestic-rate", "-r", type=float, required=True, help="Domestic rate r1")
@click.option("--foreign-rate", "-f", type=float, required=True, help="Foreign rate r2")
@click.option("--vol", "-v", type=float, required=True, help="Volatility (annualized)")
@click.option("--barrier", "-H", type=float, default=None, help="Also check in/out parity at this barrier")
@click.option("--model", "-m", type=MODEL_CHOICE, default="closed_form")
@click.option("--paths", type=int, default=MC_DEFAULT_PATHS, help="Monte Carlo paths")
@click.option("--seed", type=int, default=None, help="Monte Carlo seed")
def parity(spot, strike, time, domestic_rate, foreign_rate, vol, barrier, model, paths, seed):
    """Check price bounds, put-call parity and barrier in/out parity."""
    try:
        market = MarketParams(spot, domestic_rate, foreign_rate, vol, time)
        config = MonteCarloConfig(n_paths=paths, seed=seed)

        def _price(option_type, barrier_type="none"):
            leg = ResolvedLeg(
                option_type=option_type,
                strike=strike,
                quantity=100.0,
                volatility=vol,
                barrier_type=barrier_type,
                barrier=barrier if barrier_type != "none" else None,
            )
            return price_leg(leg, market, model, config)

        def _slack(*results):
            # Monte Carlo prices are compared within 4 standard errors
            return 4 * sum(result.std_error or 0.0 for result in results)

        call, put = _price("call"), _price("put")
        checks = [
            (
                "Price bounds",
                check_price_bounds(
                    call.price, put.price, spot, strike, time, domestic_rate, foreign_rate,
                    BOUNDS_TOLERANCE + _slack(call, put),
                ),
            ),
            (
                "Put-call parity",
                check_put_call_parity(
                    call.price, put.price, spot, strike, time, domestic_rate, foreign_rate,
                    PARITY_TOLERANCE + _slack(call, put),
                ),
            ),
        ]
        if barrier is not None:
            for vanilla in (call, put):
                option_type = vanilla.leg.option_type
                knock_out = _price(option_type, "knock_out")
                knock_in = _price(option_type, "knock_in")
                checks.append((
                    f"Barrier parity ({option_type})",
                    check_barrier_parity(
                        knock_in.price, knock_out.price, vanilla.price,
                        PARITY_TOLERANCE + _slack(knock_out, knock_in, vanilla),
                    ),
                ))
    except (FXPricingError, ValueError) as e:
        click.echo(f"\nError: {e}", err=True)
        raise SystemExit(1)

    click.echo(f"\nCall: {call.price:.6f}  Put: {put.price:.6f}  ({model})")
    for name, check in checks:
        click.echo(f"{name}: {'OK' if check.is_valid else 'VIOLATED'}")
        for violation in check.violations:
            click.echo(f"  - {violation}")

    if not all(check.is_valid for _, check in checks):
        raise SystemExit(1)


if __name__ == "__main__":
    cli()
