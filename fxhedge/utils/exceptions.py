"""Exception hierarchy for the FX hedge pricer."""


class FXPricingError(Exception):
    """Base class for all pricing errors."""


class InvalidInputError(FXPricingError, ValueError):
    """Non-positive spot/strike/barrier/time/volatility or an inconsistent leg."""


class UnsupportedCombinationError(FXPricingError):
    """No closed form exists for the requested leg and fallback was disabled."""
