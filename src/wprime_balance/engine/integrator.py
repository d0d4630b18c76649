"""
Balance integrator.

Implements the differential (Waterworth) form of the Skiba W' balance model.
Each sample's expenditure above CP is weighted forward by ``exp(t / tau)`` into
a running sum, and the whole sum is discounted back by ``exp(-t / tau)``,
with ``t`` measured from an origin that is moved forward before the exponent
can overflow:

    balance = W' - exp(-t / tau) * sum(expended_i * exp(t_i / tau))

so past depletion recovers with time constant ``tau`` while new depletion is
charged at full weight. ``tau`` follows Skiba's fit against how far below CP
the rider typically rides:

    tau = 546 * exp(-0.01 * (CP - avg_power_below_cp)) + 316
"""

import logging
import math
from dataclasses import dataclass

import numpy as np

from ..constants import BelowCpAveraging, TauConstants
from ..models import EngineConfig
from .state import EngineState

logger = logging.getLogger(__name__)


@dataclass
class IntegratorStep:
    """What the integrator did with one sample."""

    power: float
    dt: float
    tau: float
    power_above_cp: float
    w_prime_expended: float


def coerce_power(power: float | None) -> float:
    """Treat missing, non-finite and negative readings as 0 W."""
    if power is None:
        return 0.0
    power = float(power)
    if not math.isfinite(power) or power < 0:
        return 0.0
    return power


def skiba_tau(critical_power: float, avg_power_below_cp: float) -> float:
    """Recovery time constant in seconds for the given CP gap."""
    delta_cp = critical_power - avg_power_below_cp
    return float(
        TauConstants.AMPLITUDE * np.exp(-TauConstants.DECAY * delta_cp)
        + TauConstants.OFFSET
    )


class BalanceIntegrator:
    """Turns (power, dt) samples into an updated W' balance."""

    def __init__(self, config: EngineConfig):
        """
        Initialize integrator with engine configuration.

        Args:
            config: Engine configuration (selects the below-CP averaging policy)
        """
        self.config = config

    def avg_power_below_cp(self, state: EngineState) -> float:
        """Average power below CP under the configured policy."""
        if self.config.below_cp_average == BelowCpAveraging.WINDOW:
            if not state.recent_below_cp:
                return 0.0
            return sum(state.recent_below_cp) / len(state.recent_below_cp)

        if state.count_below_cp == 0:
            return 0.0
        return state.sum_below_cp / state.count_below_cp

    def current_tau(self, state: EngineState) -> float:
        """Tau from the recorded history, without recording anything."""
        return skiba_tau(state.estimated_cp, self.avg_power_below_cp(state))

    def _record_below_cp(self, state: EngineState, power: float) -> None:
        if power >= state.estimated_cp:
            return
        state.sum_below_cp += power
        state.count_below_cp += 1
        if self.config.below_cp_average == BelowCpAveraging.WINDOW:
            state.recent_below_cp.append(power)
            while len(state.recent_below_cp) > self.config.below_cp_window:
                state.recent_below_cp.popleft()

    def _record_above_cp(self, state: EngineState, power: float, dt: float) -> None:
        state.sum_above_cp += power
        state.count_above_cp += 1
        state.time_above_cp += dt

    def _rebase(self, state: EngineState, tau: float) -> float:
        """
        Keep the weighted sum's exponent bounded.

        Once ride time since the origin passes MAX_EXPONENT time constants the
        sum is discounted to the current sample and the origin moves there, so
        long rides and stale gaps never overflow exp(). Returns the ride time
        since the (possibly new) origin.
        """
        offset = state.elapsed_ride_time - state.weighted_origin
        if offset / tau <= TauConstants.MAX_EXPONENT:
            return offset

        state.running_weighted_expenditure *= float(np.exp(-offset / tau))
        state.weighted_origin = state.elapsed_ride_time
        logger.debug(f"Rebased W' weighting at {state.elapsed_ride_time:.0f} s")
        return 0.0

    def integrate(
        self, state: EngineState, power: float, now: float, dt: float
    ) -> IntegratorStep:
        """
        Advance the balance by one sample.

        Args:
            state: Engine state to update in place
            power: Coerced instantaneous power in watts
            now: Sample timestamp in seconds
            dt: Seconds since the previous sample (must be positive)

        Returns:
            IntegratorStep describing the sample's contribution
        """
        state.last_sample_time = now

        # The current sample counts towards the below-CP history before tau
        self._record_below_cp(state, power)
        tau = self.current_tau(state)

        power_above_cp = max(0.0, power - state.estimated_cp)
        state.elapsed_ride_time += dt

        w_prime_expended = power_above_cp * dt

        offset = self._rebase(state, tau)
        growth = np.exp(offset / tau)
        decay = np.exp(-offset / tau)

        state.running_weighted_expenditure += w_prime_expended * growth
        state.balance = int(
            state.estimated_w_prime - state.running_weighted_expenditure * decay
        )

        if power_above_cp > 0:
            self._record_above_cp(state, power, dt)

        logger.debug(
            f"W' balance: {state.balance} J, expended: {w_prime_expended:.0f} J, "
            f"CP: {state.estimated_cp:.0f} W, tau: {tau:.1f} s"
        )

        return IntegratorStep(
            power=power,
            dt=dt,
            tau=tau,
            power_above_cp=power_above_cp,
            w_prime_expended=w_prime_expended,
        )
