"""
Data types and structures for FX option pricing and hedge analysis.

This module defines dataclasses and tags used throughout the toolkit
for representing market inputs, option legs, strategies, pricing
results and payoff curves.
"""

from dataclasses import dataclass, field
from typing import Literal, Optional

from fxhedge.utils.constants import (
    MC_DEFAULT_BATCHES,
    MC_DEFAULT_PATHS,
    MC_DEFAULT_STEPS,
    SWEEP_STEPS,
    SWEEP_WIDTH_PCT,
)
from fxhedge.utils.exceptions import InvalidInputError

OptionType = Literal["call", "put"]
BarrierType = Literal["none", "knock_out", "knock_in", "double_knock_out", "double_knock_in"]
PricingModel = Literal["closed_form", "monte_carlo"]

OPTION_TYPES = ("call", "put")
BARRIER_TYPES = ("none", "knock_out", "knock_in", "double_knock_out", "double_knock_in")
PRICING_MODELS = ("closed_form", "monte_carlo")
SINGLE_BARRIERS = ("knock_out", "knock_in")
DOUBLE_BARRIERS = ("double_knock_out", "double_knock_in")


@dataclass(frozen=True)
class Level:
    """
    A strike or barrier level.

    Attributes:
        value: Either a percentage of the initial spot (100 = at the money)
            or an absolute exchange rate
        is_percent: Whether value is a percentage of the initial spot
    """
    value: float
    is_percent: bool = True

    def resolve(self, initial_spot: float) -> float:
        """Absolute level for the given initial spot."""
        if self.is_percent:
            return initial_spot * self.value / 100.0
        return self.value


@dataclass(frozen=True)
class MarketParams:
    """
    Immutable container for market inputs.

    Attributes:
        spot: Current exchange rate (domestic units per foreign unit)
        domestic_rate: Domestic interest rate r1 (annualized, continuous)
        foreign_rate: Foreign interest rate r2 (annualized, continuous)
        volatility: Annualized volatility
        maturity: Time to maturity in years
    """
    spot: float
    domestic_rate: float
    foreign_rate: float
    volatility: float
    maturity: float

    def __post_init__(self) -> None:
        """Validate parameters are positive where required."""
        if self.spot <= 0:
            raise InvalidInputError(f"Spot rate must be positive, got spot={self.spot}")
        if self.volatility <= 0:
            raise InvalidInputError(
                f"Volatility must be positive, got volatility={self.volatility}"
            )
        if self.maturity <= 0:
            raise InvalidInputError(f"Maturity must be positive, got maturity={self.maturity}")

    @property
    def cost_of_carry(self) -> float:
        return self.domestic_rate - self.foreign_rate


@dataclass(frozen=True)
class ResolvedLeg:
    """
    An option leg with every level expressed as an absolute exchange rate.

    This is the form consumed by the pricers and the payoff evaluator.
    The barrier of a single-barrier leg lives in `barrier`; double-barrier
    legs use `lower_barrier` and `upper_barrier`.
    """
    option_type: OptionType
    strike: float
    quantity: float
    volatility: float
    barrier_type: BarrierType = "none"
    reverse: bool = False
    barrier: Optional[float] = None
    lower_barrier: Optional[float] = None
    upper_barrier: Optional[float] = None

    def __post_init__(self) -> None:
        if self.option_type not in OPTION_TYPES:
            raise InvalidInputError(
                f"Option type must be 'call' or 'put', got {self.option_type}"
            )
        if self.barrier_type not in BARRIER_TYPES:
            raise InvalidInputError(f"Unknown barrier type {self.barrier_type!r}")
        if self.strike <= 0:
            raise InvalidInputError(f"Strike must be positive, got strike={self.strike}")
        if self.volatility <= 0:
            raise InvalidInputError(
                f"Volatility must be positive, got volatility={self.volatility}"
            )
        if self.barrier_type in SINGLE_BARRIERS:
            if self.barrier is None or self.barrier <= 0:
                raise InvalidInputError(
                    f"{self.barrier_type} leg needs a positive barrier, got {self.barrier}"
                )
        if self.barrier_type in DOUBLE_BARRIERS:
            if self.lower_barrier is None or self.upper_barrier is None:
                raise InvalidInputError(
                    f"{self.barrier_type} leg needs both lower and upper barriers"
                )
            if self.lower_barrier <= 0:
                raise InvalidInputError(
                    f"Lower barrier must be positive, got {self.lower_barrier}"
                )
            if self.lower_barrier >= self.upper_barrier:
                raise InvalidInputError(
                    f"Lower barrier {self.lower_barrier} must be below "
                    f"upper barrier {self.upper_barrier}"
                )

    @property
    def is_barrier(self) -> bool:
        return self.barrier_type != "none"

    @property
    def is_double(self) -> bool:
        return self.barrier_type in DOUBLE_BARRIERS

    @property
    def knocks_out(self) -> bool:
        return self.barrier_type in ("knock_out", "double_knock_out")

    @property
    def knocks_in(self) -> bool:
        return self.barrier_type in ("knock_in", "double_knock_in")

    @property
    def label(self) -> str:
        """Short human-readable description, e.g. 'long call KO (reverse)'."""
        side = "long" if self.quantity >= 0 else "short"
        tags = {
            "none": "",
            "knock_out": " KO",
            "knock_in": " KI",
            "double_knock_out": " DKO",
            "double_knock_in": " DKI",
        }
        text = f"{side} {self.option_type}{tags[self.barrier_type]}"
        if self.reverse:
            text += " (reverse)"
        return text

    def reference_levels(self, index: int) -> dict[str, float]:
        """Named levels used to annotate payoff charts."""
        prefix = f"leg{index + 1} {self.option_type}"
        levels = {f"{prefix} strike": self.strike}
        if self.barrier is not None and self.barrier_type in SINGLE_BARRIERS:
            levels[f"{prefix} barrier"] = self.barrier
        if self.is_double:
            levels[f"{prefix} lower barrier"] = self.lower_barrier
            levels[f"{prefix} upper barrier"] = self.upper_barrier
        return levels


@dataclass(frozen=True)
class OptionLeg:
    """
    A single instrument as entered by the user.

    Attributes:
        option_type: "call" or "put"
        strike: Strike level (percent of initial spot or absolute)
        quantity: Percentage of notional; positive = bought, negative = sold
        barrier_type: Barrier family, "none" for a vanilla leg
        reverse: Invert the standard activation direction for the option type
        barrier: Single barrier level
        lower_barrier: Lower level of a double barrier
        upper_barrier: Upper level of a double barrier
        volatility: Leg-specific volatility; falls back to the market volatility
    """
    option_type: OptionType
    strike: Level
    quantity: float = 100.0
    barrier_type: BarrierType = "none"
    reverse: bool = False
    barrier: Optional[Level] = None
    lower_barrier: Optional[Level] = None
    upper_barrier: Optional[Level] = None
    volatility: Optional[float] = None

    def resolve(self, initial_spot: float, default_volatility: float) -> ResolvedLeg:
        """
        Convert percentage levels to absolute ones.

        Raises:
            InvalidInputError: If the resolved leg is inconsistent
        """

        def _absolute(level: Optional[Level]) -> Optional[float]:
            return None if level is None else level.resolve(initial_spot)

        volatility = self.volatility if self.volatility is not None else default_volatility
        return ResolvedLeg(
            option_type=self.option_type,
            strike=self.strike.resolve(initial_spot),
            quantity=self.quantity,
            volatility=volatility,
            barrier_type=self.barrier_type,
            reverse=self.reverse,
            barrier=_absolute(self.barrier),
            lower_barrier=_absolute(self.lower_barrier),
            upper_barrier=_absolute(self.upper_barrier),
        )


@dataclass(frozen=True)
class Strategy:
    """
    An ordered collection of legs.

    Order only matters for display; pricing and payoffs are sums over legs.
    """
    name: str
    legs: tuple[OptionLeg, ...]

    def resolve(self, initial_spot: float, default_volatility: float) -> list[ResolvedLeg]:
        return [leg.resolve(initial_spot, default_volatility) for leg in self.legs]


@dataclass(frozen=True)
class MonteCarloConfig:
    """
    Monte Carlo simulation settings.

    Attributes:
        n_paths: Number of simulated paths
        n_steps: Number of monitoring steps over the option life
        seed: Seed for numpy's SeedSequence; None draws fresh entropy
        n_batches: Number of independent path batches (one RNG stream each)
        max_workers: Threads used to run batches; results do not depend on it
        continuity_correction: Move barriers into their trigger region by
            exp(0.5826·σ·√dt) so that discrete monitoring reproduces the
            continuously monitored closed form; False prices the plain
            discretely monitored contract
    """
    n_paths: int = MC_DEFAULT_PATHS
    n_steps: int = MC_DEFAULT_STEPS
    seed: Optional[int] = None
    n_batches: int = MC_DEFAULT_BATCHES
    max_workers: int = 1
    continuity_correction: bool = True

    def __post_init__(self) -> None:
        if self.n_paths < 1:
            raise InvalidInputError(f"n_paths must be at least 1, got {self.n_paths}")
        if self.n_steps < 1:
            raise InvalidInputError(f"n_steps must be at least 1, got {self.n_steps}")
        if self.n_batches < 1:
            raise InvalidInputError(f"n_batches must be at least 1, got {self.n_batches}")
        if self.max_workers < 1:
            raise InvalidInputError(f"max_workers must be at least 1, got {self.max_workers}")


@dataclass
class MonteCarloResult:
    """
    Result from a Monte Carlo pricing run.

    Attributes:
        price: Discounted mean payoff, scaled by quantity/100
        std_error: Standard error of the price estimate (same scaling)
        unit_price: Discounted mean payoff per unit of notional
        unit_std_error: Standard error of unit_price
        n_paths: Paths simulated
        n_steps: Monitoring steps per path
        barrier_hits: Paths on which the barrier condition was met
    """
    price: float
    std_error: float
    unit_price: float
    unit_std_error: float
    n_paths: int
    n_steps: int
    barrier_hits: int = 0


@dataclass
class PricingResult:
    """
    Premium of one resolved leg.

    Attributes:
        leg: The resolved leg that was priced
        price: Option value per unit of notional
        premium: price * quantity / 100 (negative for sold legs)
        method: Pricing method that produced the value
        fallback: True when a closed form was requested but Monte Carlo priced the leg
        std_error: Monte Carlo standard error per unit notional, None for closed form
        message: Explanation of a fallback, empty otherwise
    """
    leg: ResolvedLeg
    price: float
    premium: float
    method: PricingModel
    fallback: bool = False
    std_error: Optional[float] = None
    message: str = ""


@dataclass
class StrategyPricing:
    """Per-leg pricing and the aggregated premium of a strategy."""
    strategy: Strategy
    results: list[PricingResult]
    total_premium: float


@dataclass(frozen=True)
class SweepConfig:
    """Spot sweep settings: `steps` levels across initial_spot·(1 ± width_pct/100)."""
    width_pct: float = SWEEP_WIDTH_PCT
    steps: int = SWEEP_STEPS

    def __post_init__(self) -> None:
        if not 0 < self.width_pct < 100:
            raise InvalidInputError(f"width_pct must be in (0, 100), got {self.width_pct}")
        if self.steps < 2:
            raise InvalidInputError(f"steps must be at least 2, got {self.steps}")


@dataclass
class PayoffPoint:
    """
    Hedge outcome at one hypothetical future spot.

    Attributes:
        spot: Spot level at maturity
        unhedged_rate: Rate obtained without hedging (the spot itself)
        hedged_rate: spot - strategy payoff
        hedged_rate_with_premium: hedged_rate - total premium
        reference_levels: Resolved strikes/barriers for annotation
    """
    spot: float
    unhedged_rate: float
    hedged_rate: float
    hedged_rate_with_premium: float
    reference_levels: dict[str, float] = field(default_factory=dict)


@dataclass
class PayoffCurve:
    """Ordered payoff points over a spot sweep."""
    points: list[PayoffPoint]
    total_premium: float

    def __len__(self) -> int:
        return len(self.points)

    def to_records(self) -> list[dict[str, float]]:
        """Flat records, one per point, suitable for tabular export."""
        records = []
        for point in self.points:
            record = {
                "spot": point.spot,
                "unhedged_rate": point.unhedged_rate,
                "hedged_rate": point.hedged_rate,
                "hedged_rate_with_premium": point.hedged_rate_with_premium,
            }
            record.update(point.reference_levels)
            records.append(record)
        return records


@dataclass
class ParityCheck:
    """
    Result from a parity or bounds validation.

    Attributes:
        is_valid: Whether the prices satisfy the relation
        violations: List of specific violations detected
        details: Dictionary with the quantities compared
    """
    is_valid: bool
    violations: list[str]
    details: dict[str, float]


@dataclass
class ZeroCostResult:
    """
    Result from the zero-cost strike solver.

    Attributes:
        strike: Solved strike of the adjusted leg (0.0 on failure)
        fixed_price: Premium of the leg whose strike was given
        solved_price: Premium of the adjusted leg at the solved strike
        success: Whether the solver converged
        message: Additional information about convergence
    """
    strike: float
    fixed_price: float
    solved_price: float
    success: bool
    message: str = ""
