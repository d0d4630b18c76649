"""
Simulated power sources.

Produces ``(power, timestamp)`` pairs the way a head unit's power stream
would, for exercising the engine without a power meter.
"""

import logging
import random
from collections.abc import Iterator
from dataclasses import dataclass

from .constants import TimeConstants
from .exceptions import ConfigurationError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PowerStep:
    """Hold ``power`` watts for ``duration`` seconds."""

    power: float
    duration: float


def parse_steps(text: str) -> list[PowerStep]:
    """
    Parse a ``"power:seconds,power:seconds"`` step list.

    Raises:
        ConfigurationError: If an entry is malformed or non-positive
    """
    steps = []
    for entry in text.split(","):
        entry = entry.strip()
        if not entry:
            continue
        try:
            power, duration = (float(part) for part in entry.split(":"))
        except ValueError as e:
            raise ConfigurationError(f"Invalid step '{entry}', expected W:s") from e
        if duration <= 0:
            raise ConfigurationError(f"Step duration must be positive: '{entry}'")
        steps.append(PowerStep(power=power, duration=duration))
    return steps


class SimulatedPowerStream:
    """
    Random or stepped power at a fixed sample interval.

    Without steps, power is drawn uniformly from ``[min_power, max_power]``
    and the stream never ends; with steps, each step is held for its duration
    and the sequence is played ``repeat`` times.
    """

    def __init__(
        self,
        min_power: int = 50,
        max_power: int = 400,
        interval: float = TimeConstants.SAMPLE_INTERVAL,
        steps: list[PowerStep] | None = None,
        repeat: int = 1,
        seed: int | None = None,
    ):
        if interval <= 0:
            raise ConfigurationError("Sample interval must be positive")
        if min_power > max_power:
            raise ConfigurationError("min_power must not exceed max_power")
        self.min_power = min_power
        self.max_power = max_power
        self.interval = interval
        self.steps = steps
        self.repeat = repeat
        self._random = random.Random(seed)

    def samples(self, start: float = 0.0) -> Iterator[tuple[float, float]]:
        """
        Yield ``(power, timestamp)`` pairs.

        The first pair is at ``start`` and seeds the engine's clock.
        """
        now = start
        if self.steps is None:
            while True:
                yield float(self._random.randint(self.min_power, self.max_power)), now
                now += self.interval

        if not self.steps:
            logger.warning("Step pattern has no steps defined")
            return

        # Seed sample, no energy is integrated for it
        yield float(self.steps[0].power), now
        for _ in range(self.repeat):
            for step in self.steps:
                count = max(1, round(step.duration / self.interval))
                for _ in range(count):
                    now += self.interval
                    yield float(step.power), now
        logger.debug(f"Simulated stream finished at {now:.0f}s")
