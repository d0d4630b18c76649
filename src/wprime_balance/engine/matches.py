"""
Match detection.

A match is a bout of riding at or above a percentage of CP that lasts long
enough and depletes enough W' to matter. Bouts are opened by the first
qualifying sample and closed by the first sample that no longer qualifies.
Each sample covers the interval since the previous one, so a bout spans from
the sample before its first qualifying reading to its last qualifying reading;
only closed bouts meeting both the duration and depletion thresholds are
counted.
"""

import logging

from ..models import MatchConfig
from .integrator import IntegratorStep
from .state import EngineState

logger = logging.getLogger(__name__)


class MatchDetector:
    """Two-state (idle / in match) classifier of effort bouts."""

    def __init__(self, config: MatchConfig):
        """
        Initialize detector with match thresholds.

        Args:
            config: Duration, depletion and power thresholds
        """
        self.config = config

    def is_effort(self, power: float, critical_power: float) -> bool:
        """True when the power reaches the in-effort threshold."""
        return power >= self.config.min_power_fraction * critical_power / 100

    def depletion_threshold(self, w_prime: float) -> float:
        """Joules a bout must deplete to count."""
        return self.config.min_depletion_fraction * w_prime / 100

    def observe(self, state: EngineState, step: IntegratorStep, now: float) -> None:
        """
        Advance the state machine by one integrated sample.

        Args:
            state: Engine state to update in place
            step: The integrator's view of this sample
            now: Sample timestamp in seconds
        """
        if self.is_effort(step.power, state.estimated_cp):
            if not state.in_match:
                state.in_match = True
                state.current_match_start = now - step.dt
                state.current_match_energy = 0.0
                logger.debug(f"Effort started at {now:.1f}s ({step.power:.0f} W)")
            state.current_match_energy += step.power_above_cp * step.dt
            return

        if state.in_match:
            self._close(state, now - step.dt)

    def _close(self, state: EngineState, end: float) -> None:
        duration = end - state.current_match_start
        energy = state.current_match_energy
        required = self.depletion_threshold(state.estimated_w_prime)

        if duration >= self.config.min_match_duration and energy >= required:
            state.match_count += 1
            state.last_match_duration = duration
            state.last_match_energy = energy
            logger.debug(
                f"Match {state.match_count} burned: {duration:.0f}s, {energy:.0f} J"
            )
        else:
            logger.debug(
                f"Effort discarded: {duration:.0f}s, {energy:.0f} J "
                f"(needs {self.config.min_match_duration:.0f}s, {required:.0f} J)"
            )

        state.in_match = False
        state.current_match_start = None
        state.current_match_energy = 0.0

    def current_duration(self, state: EngineState) -> float:
        """Seconds covered by the open bout up to the latest sample."""
        if not state.in_match or state.last_sample_time is None:
            return 0.0
        return state.last_sample_time - state.current_match_start
