"""Projections from the current balance: time to exhaustion and MPA."""

import math

from .state import EngineState


def time_to_exhaustion(state: EngineState, sustained_power: float) -> float:
    """
    Seconds until the balance reaches zero at a constant power.

    A linear projection that ignores recovery. Returns ``math.inf`` at or
    below CP, and 0 once the balance is already spent.
    """
    power_above_cp = sustained_power - state.estimated_cp
    if power_above_cp <= 0:
        return math.inf
    if state.balance <= 0:
        return 0.0
    return state.balance / power_above_cp


def maximal_power_available(state: EngineState, tau: float) -> float:
    """
    Maximal power available right now.

    The power whose depletion over one recovery time constant would use up
    exactly the remaining balance: CP + balance / tau.
    """
    return state.estimated_cp + max(state.balance, 0) / tau
