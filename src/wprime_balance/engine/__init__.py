"""
Real-time W' balance engine.

This package contains the sample-driven model, organized by responsibility:
- integrator: differential W' balance with Skiba's adaptive tau
- estimator: CP / W' re-estimation at depletion milestones
- matches: effort bout ("match") detection
- projection: time to exhaustion and maximal power available
- two_parameter: closed-form two-parameter CP model
- balance_engine: the locked facade tying them to one EngineState
"""

from .balance_engine import BalanceEngine
from .estimator import ParameterEstimator
from .integrator import BalanceIntegrator, IntegratorStep, coerce_power, skiba_tau
from .matches import MatchDetector
from .projection import maximal_power_available, time_to_exhaustion
from .state import EngineState
from .two_parameter import (
    constrain_initial_values,
    cp_from_two_parameter,
    twenty_minute_w_prime,
    w_prime_from_two_parameter,
)

__all__ = [
    "BalanceEngine",
    "BalanceIntegrator",
    "EngineState",
    "IntegratorStep",
    "MatchDetector",
    "ParameterEstimator",
    "coerce_power",
    "constrain_initial_values",
    "cp_from_two_parameter",
    "maximal_power_available",
    "skiba_tau",
    "time_to_exhaustion",
    "twenty_minute_w_prime",
    "w_prime_from_two_parameter",
]
