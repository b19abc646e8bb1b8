"""
Barrier activation rules shared by simulation and payoff evaluation.

Direction table (standard / reverse):
    call, single barrier:  spot >= H  /  spot <= H
    put, single barrier:   spot <= H  /  spot >= H
    double barrier:        spot <= L or spot >= U  /  L < spot < U

A standard double barrier is triggered when the spot leaves the
corridor (spot <= L or spot >= U), and a reverse one when it enters it.
This deliberately inverts the plain reading "standard = inside the
corridor": leaving the corridor is the event priced by the Ikeda-Kunitomo
formula, so the simulation and the closed form agree on what a double
knock-out is. Every function accepts a float or a numpy array of spots.
"""

from typing import Optional, Union

import numpy as np

from fxhedge.utils.types import OptionType, ResolvedLeg

SpotLike = Union[float, np.ndarray]


def triggers_upward(option_type: OptionType, reverse: bool) -> bool:
    """Whether a single barrier is hit from below (spot >= H)."""
    return (option_type == "call") != reverse


def barrier_triggered(
    spot: SpotLike,
    option_type: OptionType,
    reverse: bool,
    barrier: Optional[float] = None,
    lower_barrier: Optional[float] = None,
    upper_barrier: Optional[float] = None,
) -> SpotLike:
    """
    Test the barrier condition at the given spot(s).

    Double-barrier rules apply when both lower and upper levels are given,
    otherwise the single barrier is used. With no barrier at all nothing
    is ever triggered.
    """
    if lower_barrier is not None and upper_barrier is not None:
        if reverse:
            return (spot > lower_barrier) & (spot < upper_barrier)
        return (spot <= lower_barrier) | (spot >= upper_barrier)

    if barrier is None:
        return np.zeros_like(spot, dtype=bool) if isinstance(spot, np.ndarray) else False

    if triggers_upward(option_type, reverse):
        return spot >= barrier
    return spot <= barrier


def leg_triggered(spot: SpotLike, leg: ResolvedLeg) -> SpotLike:
    """Barrier condition of a resolved leg; vanilla legs are never triggered."""
    if not leg.is_barrier:
        return barrier_triggered(spot, leg.option_type, leg.reverse)
    if leg.is_double:
        return barrier_triggered(
            spot,
            leg.option_type,
            leg.reverse,
            lower_barrier=leg.lower_barrier,
            upper_barrier=leg.upper_barrier,
        )
    return barrier_triggered(spot, leg.option_type, leg.reverse, barrier=leg.barrier)


def gate_payoff(intrinsic: SpotLike, triggered: SpotLike, leg: ResolvedLeg) -> SpotLike:
    """
    Apply knock-out / knock-in gating to an intrinsic value.

    Knock-out legs pay only when not triggered, knock-in legs only when
    triggered, vanilla legs always.
    """
    if leg.knocks_out:
        return np.where(triggered, 0.0, intrinsic)
    if leg.knocks_in:
        return np.where(triggered, intrinsic, 0.0)
    return intrinsic
