"""
The W' balance engine.

``BalanceEngine`` owns one ``EngineState`` and the four components that work
on it (integrator, estimator, match detector, projections). ``update()`` is
the only mutating entry point per sample; ``reset()`` and ``reconfigure()``
rebuild the state. A single lock serializes all of them, and every read takes
the same lock so no reader sees a half-applied sample.
"""

import logging
import math
import threading

from ..exceptions import ConfigurationError
from ..models import BalanceSnapshot, EngineConfig, MatchConfig, MatchSummary
from . import projection
from .estimator import ParameterEstimator
from .integrator import BalanceIntegrator, coerce_power
from .matches import MatchDetector
from .state import EngineState
from .two_parameter import constrain_initial_values

logger = logging.getLogger(__name__)


class BalanceEngine:
    """
    Real-time W' balance model for one rider.

    Example:
        >>> engine = BalanceEngine(250, 20000, now=0.0)
        >>> engine.update(0, 0.0)  # seeds the clock
        20000
        >>> engine.update(400, 1.0) < 20000
        True
    """

    def __init__(
        self,
        initial_cp: float,
        initial_w_prime: float,
        now: float = 0.0,
        config: EngineConfig | None = None,
    ):
        """
        Initialize the engine and apply the floor constraint.

        Args:
            initial_cp: Configured critical power in watts
            initial_w_prime: Configured W' in joules
            now: Session start timestamp in seconds
            config: Thresholds and policies; CP and W' arguments take precedence

        Raises:
            ConfigurationError: If CP or W' is not a finite number
        """
        base = config or EngineConfig()
        self._lock = threading.Lock()
        self._config = self._validated(
            base.model_copy(
                update={"critical_power": initial_cp, "w_prime": initial_w_prime}
            )
        )
        self._build_components()
        self._state = self._fresh_state()
        self._session_start = now

        logger.info(
            f"Balance engine created: CP {self._state.critical_power_initial:.0f} W, "
            f"W' {self._state.w_prime_initial:.0f} J"
        )

    @classmethod
    def from_config(cls, config: EngineConfig, now: float = 0.0) -> "BalanceEngine":
        """Create an engine from a complete configuration."""
        return cls(config.critical_power, config.w_prime, now=now, config=config)

    # ------------------------------------------------------------------
    # Construction helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _validated(config: EngineConfig) -> EngineConfig:
        for name in ("critical_power", "w_prime"):
            value = getattr(config, name)
            if not math.isfinite(value):
                raise ConfigurationError(f"{name} must be a finite number, got {value}")
        return config

    def _build_components(self) -> None:
        self._integrator = BalanceIntegrator(self._config)
        self._estimator = ParameterEstimator(self._config)
        self._matches = MatchDetector(self._config.match)

    def _fresh_state(self) -> EngineState:
        cp, w_prime = constrain_initial_values(
            self._config.critical_power, self._config.w_prime
        )
        if (cp, w_prime) != (self._config.critical_power, self._config.w_prime):
            logger.info(
                f"Configured CP/W' raised to the model floor: "
                f"{self._config.critical_power:.0f} W -> {cp:.0f} W, "
                f"{self._config.w_prime:.0f} J -> {w_prime:.0f} J"
            )
        return EngineState(
            critical_power_initial=cp,
            w_prime_initial=w_prime,
            estimated_cp=cp,
            estimated_w_prime=w_prime,
            test_w_prime=w_prime,
            modified_w_prime=w_prime,
            balance=int(w_prime),
            min_balance=int(w_prime),
        )

    # ------------------------------------------------------------------
    # Mutating operations
    # ------------------------------------------------------------------

    @property
    def config(self) -> EngineConfig:
        """Configuration the engine is currently running with."""
        return self._config

    def reset(self, now: float) -> None:
        """
        Start a new ride with the current configuration.

        Re-applies the floor constraint and zeroes every running accumulator;
        the next ``update()`` seeds the clock.
        """
        with self._lock:
            self._state = self._fresh_state()
            self._session_start = now
        logger.info(f"Balance engine reset at {now:.1f}s")

    def reconfigure(
        self,
        new_cp: float,
        new_w_prime: float,
        now: float,
        match_config: MatchConfig | None = None,
    ) -> None:
        """
        Replace the initial CP and W' (and optionally match thresholds).

        Equivalent to constructing a new engine: all ride state is reset.
        """
        update: dict = {"critical_power": new_cp, "w_prime": new_w_prime}
        if match_config is not None:
            update["match"] = match_config
        self.configure(self._config.model_copy(update=update), now)

    def configure(self, config: EngineConfig, now: float) -> None:
        """Replace the whole configuration and reset the ride."""
        config = self._validated(config)
        with self._lock:
            self._config = config
            self._build_components()
            self._state = self._fresh_state()
            self._session_start = now
        logger.info(
            f"Balance engine reconfigured: CP {config.critical_power:.0f} W, "
            f"W' {config.w_prime:.0f} J"
        )

    def update(self, power: float | None, now: float) -> int:
        """
        Process one power sample.

        Args:
            power: Instantaneous power in watts (None or negative count as 0)
            now: Sample timestamp in seconds

        Returns:
            Updated W' balance in joules (may be negative)
        """
        with self._lock:
            state = self._state
            power = coerce_power(power)

            if state.last_sample_time is None:
                state.last_sample_time = now
                return state.balance

            dt = now - state.last_sample_time
            if dt <= 0:
                return state.balance

            step = self._integrator.integrate(state, power, now, dt)
            self._estimator.observe(state, step.w_prime_expended)
            self._matches.observe(state, step, now)

            state.min_balance = min(state.min_balance, state.balance)
            return state.balance

    # ------------------------------------------------------------------
    # Read accessors
    # ------------------------------------------------------------------

    def current_balance(self) -> int:
        with self._lock:
            return self._state.balance

    def percent_balance(self) -> float:
        """Balance as a percentage of the live W' capacity."""
        with self._lock:
            return 100 * self._state.balance / self._state.estimated_w_prime

    def estimated_cp(self) -> float:
        with self._lock:
            return self._state.estimated_cp

    def estimated_w_prime(self) -> float:
        with self._lock:
            return self._state.estimated_w_prime

    def initial_cp(self) -> float:
        with self._lock:
            return self._state.critical_power_initial

    def initial_w_prime(self) -> float:
        with self._lock:
            return self._state.w_prime_initial

    def test_w_prime(self) -> float:
        """W' implied by a 20-minute test at the live CP estimate."""
        with self._lock:
            return self._state.test_w_prime

    def modified_w_prime(self) -> float:
        """W' adjusted by how many depletion milestones were crossed."""
        with self._lock:
            return self._state.modified_w_prime

    def min_balance(self) -> int:
        with self._lock:
            return self._state.min_balance

    def tau(self) -> float:
        with self._lock:
            return self._integrator.current_tau(self._state)

    def elapsed_time(self) -> float:
        with self._lock:
            return self._state.elapsed_ride_time

    def time_above_cp(self) -> float:
        with self._lock:
            return self._state.time_above_cp

    def previous_reading_time(self) -> float:
        """Timestamp of the last processed sample, 0 before the first one."""
        with self._lock:
            last = self._state.last_sample_time
            return 0.0 if last is None else last

    def session_start(self) -> float:
        with self._lock:
            return self._session_start

    def matches_count(self) -> int:
        with self._lock:
            return self._state.match_count

    def in_effort_block(self) -> bool:
        with self._lock:
            return self._state.in_match

    def current_match_duration(self) -> float:
        with self._lock:
            return self._matches.current_duration(self._state)

    def current_match_energy(self) -> float:
        with self._lock:
            return self._state.current_match_energy

    def last_match_duration(self) -> float:
        with self._lock:
            return self._state.last_match_duration

    def last_match_energy(self) -> float:
        with self._lock:
            return self._state.last_match_energy

    def time_to_exhaustion(self, sustained_power: float) -> float:
        """Seconds to empty the balance at a constant power (inf at or below CP)."""
        with self._lock:
            return projection.time_to_exhaustion(
                self._state, coerce_power(sustained_power)
            )

    def maximal_power_available(self) -> float:
        with self._lock:
            tau = self._integrator.current_tau(self._state)
            return projection.maximal_power_available(self._state, tau)

    def snapshot(self, sustained_power: float | None = None) -> BalanceSnapshot:
        """
        Every derived value, read under one lock acquisition.

        Args:
            sustained_power: Power to project time to exhaustion for; when
                omitted the snapshot carries no projection
        """
        with self._lock:
            state = self._state
            tau = self._integrator.current_tau(state)
            last_match = (
                MatchSummary(
                    duration=state.last_match_duration,
                    energy=state.last_match_energy,
                )
                if state.match_count > 0
                else None
            )
            time_to_exhaustion = (
                None
                if sustained_power is None
                else projection.time_to_exhaustion(
                    state, coerce_power(sustained_power)
                )
            )
            return BalanceSnapshot(
                balance=state.balance,
                min_balance=state.min_balance,
                percent_balance=100 * state.balance / state.estimated_w_prime,
                initial_cp=state.critical_power_initial,
                initial_w_prime=state.w_prime_initial,
                estimated_cp=state.estimated_cp,
                estimated_w_prime=state.estimated_w_prime,
                test_w_prime=state.test_w_prime,
                modified_w_prime=state.modified_w_prime,
                tau=tau,
                elapsed_time=state.elapsed_ride_time,
                previous_reading_time=(
                    0.0 if state.last_sample_time is None else state.last_sample_time
                ),
                matches=state.match_count,
                in_effort=state.in_match,
                current_match_duration=self._matches.current_duration(state),
                current_match_energy=state.current_match_energy,
                last_match=last_match,
                max_power_available=projection.maximal_power_available(state, tau),
                time_to_exhaustion=time_to_exhaustion,
            )
