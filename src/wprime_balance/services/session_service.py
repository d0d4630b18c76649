"""
Ride session orchestration.

``RideSession`` is the owner the engine expects: it feeds samples from the
power source, pushes configuration changes in as explicit reconfigurations,
publishes the named output channels and produces the end-of-ride summary.
The session lock keeps the trailing power window in step with the engine, so
a channel read never mixes a balance with another sample's smoothing.
"""

import logging
import threading
from collections import deque
from collections.abc import Iterable

from ..constants import ChannelNames, TimeConstants
from ..engine import BalanceEngine, coerce_power
from ..models import EngineConfig, SessionSummary
from ..settings import Settings

logger = logging.getLogger(__name__)


def summarize_engine(engine: BalanceEngine) -> SessionSummary:
    """Build the end-of-ride summary from an engine's current state."""
    snapshot = engine.snapshot()
    return SessionSummary(
        initial_cp=snapshot.initial_cp,
        initial_w_prime=snapshot.initial_w_prime,
        estimated_cp=snapshot.estimated_cp,
        estimated_w_prime=snapshot.estimated_w_prime,
        test_w_prime=snapshot.test_w_prime,
        min_balance=snapshot.min_balance,
        end_balance=snapshot.balance,
        matches=snapshot.matches,
        elapsed_time=snapshot.elapsed_time,
    )


class RideSession:
    """
    One ride's worth of W' balance tracking.

    Example:
        >>> session = RideSession(Settings(critical_power=250, w_prime=20000))
        >>> session.start(0.0)
        >>> session.on_power(300, 0.0)
        20000
    """

    def __init__(
        self,
        settings: Settings,
        smoothing_samples: int = TimeConstants.TTE_SMOOTHING_SAMPLES,
    ):
        """
        Initialize the session.

        Args:
            settings: Application settings (athlete values and thresholds)
            smoothing_samples: Trailing samples averaged for time to exhaustion
        """
        self.settings = settings
        self._config: EngineConfig = settings.engine_config()
        self.engine = BalanceEngine.from_config(self._config)
        self._recent_power: deque[float] = deque(maxlen=smoothing_samples)
        self._lock = threading.Lock()
        self.logger = logging.getLogger(__name__)

    def start(self, now: float) -> None:
        """Begin a new ride."""
        with self._lock:
            self.engine.reset(now)
            self._recent_power.clear()
        self.logger.info(f"Ride started at {now:.1f}s")

    def apply_settings(self, settings: Settings, now: float) -> bool:
        """
        React to a configuration change.

        The engine is only reconfigured (and the ride state reset) when the
        values it depends on actually changed.

        Returns:
            True if the engine was reconfigured
        """
        self.settings = settings
        config = settings.engine_config()
        if config == self._config:
            self.logger.debug("Configuration unchanged, engine left running")
            return False

        self._config = config
        with self._lock:
            self.engine.configure(config, now)
            self._recent_power.clear()
        return True

    def on_power(self, power: float | None, now: float) -> int:
        """Forward one sample to the engine and return the new balance."""
        with self._lock:
            balance = self.engine.update(power, now)
            self._recent_power.append(coerce_power(power))
        return balance

    def run(self, samples: Iterable[tuple[float, float]]) -> SessionSummary:
        """Feed a whole stream of (power, timestamp) pairs and finish the ride."""
        for power, now in samples:
            self.on_power(power, now)
        return self.finish()

    def smoothed_power(self) -> float:
        """Mean of the trailing power window, 0 before any samples."""
        with self._lock:
            return self._window_mean()

    def _window_mean(self) -> float:
        if not self._recent_power:
            return 0.0
        return sum(self._recent_power) / len(self._recent_power)

    def channels(self) -> dict[str, float]:
        """Current value of every named numeric output channel."""
        with self._lock:
            snapshot = self.engine.snapshot(sustained_power=self._window_mean())
        last = snapshot.last_match
        return {
            ChannelNames.BALANCE: float(snapshot.balance),
            ChannelNames.PERCENT: snapshot.percent_balance,
            ChannelNames.TIME_TO_EXHAUSTION: snapshot.time_to_exhaustion,
            ChannelNames.MATCHES: float(snapshot.matches),
            ChannelNames.IN_EFFORT: float(snapshot.in_effort),
            ChannelNames.MAX_POWER_AVAILABLE: snapshot.max_power_available,
            ChannelNames.LAST_MATCH_DURATION: last.duration if last else 0.0,
            ChannelNames.LAST_MATCH_JOULES: last.energy if last else 0.0,
        }

    def finish(self) -> SessionSummary:
        """
        Summarize the ride.

        Logs a notification when the ride revealed higher CP or W' values
        than the configured ones.
        """
        summary = summarize_engine(self.engine)

        if summary.new_estimate:
            self.logger.info(
                f"New estimate discovered: CP {summary.initial_cp:.0f} -> "
                f"{summary.estimated_cp:.0f} W, W' {summary.initial_w_prime:.0f} -> "
                f"{summary.test_w_prime:.0f} J"
            )
        return summary
