"""
Constants used throughout the W' balance package.

This module centralizes the model coefficients and default thresholds so the
engine, settings and tests agree on a single set of numbers.
"""

from typing import Final


# === Time Constants ===
class TimeConstants:
    """Time-related constants in seconds."""

    SECONDS_PER_MINUTE: Final[int] = 60

    # Nominal sample cadence of the live power source
    SAMPLE_INTERVAL: Final[float] = 1.0

    # Trailing window for the time-to-exhaustion channel
    TTE_SMOOTHING_SAMPLES: Final[int] = 10


# === Skiba Recovery Time Constant ===
class TauConstants:
    """Coefficients of tau = A * exp(-K * (CP - avg_below_cp)) + B."""

    AMPLITUDE: Final[float] = 546.0
    DECAY: Final[float] = 0.01
    OFFSET: Final[float] = 316.0

    # Largest t / tau kept in the weighted sum before it is rebased; exp()
    # overflows a float just past 709
    MAX_EXPONENT: Final[float] = 50.0


# === Two-Parameter Model ===
class TwoParameterConstants:
    """Constants for the closed-form CP / W' estimates."""

    MIN_CRITICAL_POWER: Final[float] = 100.0  # Lowest accepted CP in watts
    TEST_POWER_FACTOR: Final[float] = 1.045  # 20-min test is ridden 4.5% above CP
    TEST_DURATION: Final[float] = 1200.0  # 20 minutes


# === Re-estimation ===
class ReestimationConstants:
    """Depletion milestones that gate CP / W' re-estimation."""

    INITIAL_UPDATE_LEVEL: Final[float] = 0.0  # First fires once balance < 0 J
    UPDATE_LEVEL_STEP: Final[float] = 1000.0  # Joules between milestones


# === Match Defaults ===
class MatchDefaults:
    """Default thresholds for what counts as a burned match."""

    MIN_MATCH_DURATION: Final[float] = 30.0  # seconds
    MIN_DEPLETION_PERCENT: Final[float] = 10.0  # % of W'
    MIN_POWER_PERCENT: Final[float] = 105.0  # % of CP


# === Athlete Defaults ===
class AthleteDefaults:
    """Starting values used when nothing has been configured."""

    CRITICAL_POWER: Final[float] = 250.0
    W_PRIME: Final[float] = 10000.0


# === Below-CP Averaging ===
class BelowCpAveraging:
    """Policies for the average power below CP that drives tau."""

    ALL_TIME: Final[str] = "all_time"
    WINDOW: Final[str] = "window"
    DEFAULT_WINDOW: Final[int] = 300  # samples


# === Output Channels ===
class ChannelNames:
    """Names of the numeric output channels exposed by a ride session."""

    BALANCE: Final[str] = "wprime_balance"
    PERCENT: Final[str] = "wprime_percent"
    TIME_TO_EXHAUSTION: Final[str] = "time_to_exhaustion"
    MATCHES: Final[str] = "matches"
    IN_EFFORT: Final[str] = "in_effort"
    MAX_POWER_AVAILABLE: Final[str] = "max_power_available"
    LAST_MATCH_DURATION: Final[str] = "last_match_duration"
    LAST_MATCH_JOULES: Final[str] = "last_match_joules"


# === CSV Parsing ===
class CSVConstants:
    """Constants for CSV file parsing."""

    DEFAULT_SEPARATOR: Final[str] = ","
    DEFAULT_ENCODING: Final[str] = "utf-8"
    TIME_COLUMN: Final[str] = "time"
    POWER_COLUMN: Final[str] = "watts"
