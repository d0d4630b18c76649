"""
Mid-ride re-estimation of CP and W'.

A rider's true CP and W' are unknown at the start of a ride. Whenever the
balance drops through a new depletion milestone while the rider is still
depleting, the average power held above CP and the time spent there are fed
back through the two-parameter model. Milestones are ``update_level_step``
joules apart, starting at 0 J.
"""

import logging

from ..models import EngineConfig
from .state import EngineState
from .two_parameter import cp_from_two_parameter, twenty_minute_w_prime

logger = logging.getLogger(__name__)


class ParameterEstimator:
    """Re-estimates CP and the 20-minute-test W' at depletion milestones."""

    def __init__(self, config: EngineConfig):
        """
        Initialize estimator with engine configuration.

        Args:
            config: Engine configuration (milestone step, feature toggle)
        """
        self.config = config

    def should_reestimate(self, state: EngineState, w_prime_expended: float) -> bool:
        """True when the balance has crossed the next milestone while depleting."""
        return state.balance < state.next_update_level and w_prime_expended > 0

    def reestimate(self, state: EngineState) -> None:
        """
        Move to the next milestone and refit CP and the test W'.

        Fits that are degenerate or would lower the current estimate are
        rejected and the previous value is kept.
        """
        state.next_update_level -= self.config.update_level_step

        cp_fit = cp_from_two_parameter(
            state.avg_power_above_cp, state.time_above_cp, state.estimated_w_prime
        )
        if cp_fit is not None and cp_fit > state.estimated_cp:
            state.estimated_cp = cp_fit

        state.modified_w_prime = state.w_prime_initial - state.next_update_level

        w_prime_fit = twenty_minute_w_prime(state.estimated_cp)
        if w_prime_fit is not None and w_prime_fit > state.test_w_prime:
            state.test_w_prime = w_prime_fit

        logger.info(
            f"Re-estimated at {state.next_update_level:.0f} J: "
            f"avg above CP {state.avg_power_above_cp:.0f} W over "
            f"{state.time_above_cp:.0f} s -> CP {state.estimated_cp:.0f} W, "
            f"modified W' {state.modified_w_prime:.0f} J, "
            f"test W' {state.test_w_prime:.0f} J"
        )

    def observe(self, state: EngineState, w_prime_expended: float) -> bool:
        """
        Run re-estimation for this sample if it is due.

        Returns:
            True if a re-estimation fired
        """
        if not self.config.estimate_cp:
            return False
        if not self.should_reestimate(state, w_prime_expended):
            return False
        self.reestimate(state)
        return True
