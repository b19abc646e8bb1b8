"""
Numerical constants and tolerances for FX option pricing.

This module defines floors, tolerances and simulation defaults shared by
the closed-form pricers, the Monte Carlo engine and the payoff evaluator.
"""

# Input floors
MIN_POSITIVE = 1e-10  # Floor applied to T and sigma before dividing by them

# Normal distribution approximation (Abramowitz & Stegun 7.1.26)
CDF_P = 0.3275911
CDF_A1 = 0.254829592
CDF_A2 = -0.284496736
CDF_A3 = 1.421413741
CDF_A4 = -1.453152027
CDF_A5 = 1.061405429

# Double barrier series truncation: n runs over [-N, N]
DOUBLE_BARRIER_TERMS = 5

# Monte Carlo defaults
MC_DEFAULT_PATHS = 10_000
MC_DEFAULT_STEPS = 252  # Daily monitoring over one year
MC_DEFAULT_BATCHES = 8
BGK_BETA = 0.5825971579390106  # -zeta(1/2)/sqrt(2*pi), discrete monitoring shift

# Payoff sweep defaults
SWEEP_WIDTH_PCT = 30.0  # +/-30% around the initial spot
SWEEP_STEPS = 100

# Diagnostics tolerances
PARITY_TOLERANCE = 1e-6
BOUNDS_TOLERANCE = 1e-8

# Zero-cost strike solver
ZERO_COST_XTOL = 1e-10
ZERO_COST_MAX_ITER = 200
ZERO_COST_BRACKET = (0.5, 2.0)  # Strike search range as a multiple of spot
