"""Mutable state shared by the four parts of the balance engine."""

from collections import deque
from dataclasses import dataclass, field

from ..constants import ReestimationConstants


@dataclass
class EngineState:
    """
    Running state of one ride.

    Created by ``BalanceEngine`` at construction and on every reset; only the
    engine's own update path mutates it.
    """

    # Configured values after the floor constraint
    critical_power_initial: float
    w_prime_initial: float

    # Live estimates
    estimated_cp: float
    estimated_w_prime: float
    test_w_prime: float
    modified_w_prime: float

    balance: int
    min_balance: int

    last_sample_time: float | None = None
    elapsed_ride_time: float = 0.0
    running_weighted_expenditure: float = 0.0
    # Ride time the weighted sum is measured from
    weighted_origin: float = 0.0

    count_below_cp: int = 0
    sum_below_cp: float = 0.0
    recent_below_cp: deque = field(default_factory=deque)
    count_above_cp: int = 0
    sum_above_cp: float = 0.0
    time_above_cp: float = 0.0

    next_update_level: float = ReestimationConstants.INITIAL_UPDATE_LEVEL

    in_match: bool = False
    current_match_start: float | None = None
    current_match_energy: float = 0.0
    last_match_duration: float = 0.0
    last_match_energy: float = 0.0
    match_count: int = 0

    @property
    def avg_power_above_cp(self) -> float:
        """Mean of every sample recorded above CP, 0 when there are none."""
        if self.count_above_cp == 0:
            return 0.0
        return self.sum_above_cp / self.count_above_cp
