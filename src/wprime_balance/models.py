"""
Data models for the W' balance package.

Configuration inputs and the read-only views handed to output channels are
Pydantic models; the engine's own mutable state lives in
``engine.state.EngineState``.
"""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .constants import (
    AthleteDefaults,
    BelowCpAveraging,
    MatchDefaults,
    ReestimationConstants,
)


class MatchConfig(BaseModel):
    """Thresholds that decide whether an effort bout counts as a match."""

    model_config = ConfigDict(frozen=True)

    min_match_duration: float = Field(
        MatchDefaults.MIN_MATCH_DURATION,
        description="Minimum bout duration in seconds",
    )
    min_depletion_fraction: float = Field(
        MatchDefaults.MIN_DEPLETION_PERCENT,
        description="Percent of W' that must be depleted during the bout",
    )
    min_power_fraction: float = Field(
        MatchDefaults.MIN_POWER_PERCENT,
        description="Percent of CP a sample must reach to count as effort",
    )

    @field_validator("min_match_duration")
    @classmethod
    def check_duration(cls, v: float) -> float:
        """Validate the duration threshold is not negative."""
        if v < 0:
            raise ValueError("min_match_duration must not be negative")
        return v

    @field_validator("min_depletion_fraction")
    @classmethod
    def check_depletion(cls, v: float) -> float:
        """Validate the depletion threshold is a percentage."""
        if v < 0 or v > 100:
            raise ValueError("min_depletion_fraction must be between 0 and 100")
        return v

    @field_validator("min_power_fraction")
    @classmethod
    def check_power(cls, v: float) -> float:
        """Validate the power threshold is positive."""
        if v <= 0:
            raise ValueError("min_power_fraction must be positive")
        return v


class EngineConfig(BaseModel):
    """Everything a balance engine needs at construction or reconfiguration."""

    model_config = ConfigDict(frozen=True)

    critical_power: float = Field(
        AthleteDefaults.CRITICAL_POWER, description="Initial CP in watts"
    )
    w_prime: float = Field(AthleteDefaults.W_PRIME, description="Initial W' in joules")
    match: MatchConfig = Field(default_factory=MatchConfig)
    estimate_cp: bool = Field(
        True, description="Re-estimate CP and W' at depletion milestones"
    )
    update_level_step: float = Field(
        ReestimationConstants.UPDATE_LEVEL_STEP,
        description="Joules between re-estimation milestones",
    )
    below_cp_average: Literal["all_time", "window"] = Field(
        BelowCpAveraging.ALL_TIME,
        description="How the average power below CP feeding tau is computed",
    )
    below_cp_window: int = Field(
        BelowCpAveraging.DEFAULT_WINDOW,
        description="Number of below-CP samples in the trailing window policy",
    )

    @field_validator("update_level_step")
    @classmethod
    def check_step(cls, v: float) -> float:
        """Validate the milestone step is positive."""
        if v <= 0:
            raise ValueError("update_level_step must be positive")
        return v

    @field_validator("below_cp_window")
    @classmethod
    def check_window(cls, v: int) -> int:
        """Validate the trailing window holds at least one sample."""
        if v < 1:
            raise ValueError("below_cp_window must be at least 1")
        return v


class MatchSummary(BaseModel):
    """A committed match."""

    duration: float = Field(..., description="Bout duration in seconds")
    energy: float = Field(..., description="Joules depleted during the bout")


class BalanceSnapshot(BaseModel):
    """Consistent, read-only view of the engine taken between updates."""

    model_config = ConfigDict(frozen=True)

    balance: int = Field(..., description="W' balance in joules")
    min_balance: int = Field(..., description="Lowest balance seen this ride")
    percent_balance: float = Field(..., description="Balance as % of live W'")
    initial_cp: float = Field(..., description="Floor-constrained initial CP")
    initial_w_prime: float = Field(..., description="Floor-constrained initial W'")
    estimated_cp: float = Field(..., description="Live CP estimate in watts")
    estimated_w_prime: float = Field(..., description="Live W' capacity in joules")
    test_w_prime: float = Field(..., description="20-minute-test W' estimate")
    modified_w_prime: float = Field(..., description="Depletion-adjusted W'")
    tau: float = Field(..., description="Current recovery time constant in seconds")
    elapsed_time: float = Field(..., description="Seconds integrated since reset")
    previous_reading_time: float = Field(
        ..., description="Timestamp of the last processed sample (0 if none)"
    )
    matches: int = Field(..., description="Committed matches this ride")
    in_effort: bool = Field(..., description="True while inside an effort bout")
    current_match_duration: float = Field(..., description="Open bout duration")
    current_match_energy: float = Field(..., description="Open bout depletion")
    last_match: MatchSummary | None = Field(
        None, description="Most recently committed match"
    )
    max_power_available: float = Field(..., description="MPA in watts")
    time_to_exhaustion: float | None = Field(
        None, description="Seconds to empty at the requested sustained power"
    )


class SessionSummary(BaseModel):
    """End-of-ride values, suitable for a one-shot notification."""

    initial_cp: float = Field(..., description="Configured CP after flooring")
    initial_w_prime: float = Field(..., description="Configured W' after flooring")
    estimated_cp: float = Field(..., description="Final live CP estimate")
    estimated_w_prime: float = Field(..., description="Final live W' capacity")
    test_w_prime: float = Field(..., description="Final 20-minute-test W'")
    min_balance: int = Field(..., description="Lowest balance seen this ride")
    end_balance: int = Field(..., description="Balance at the end of the ride")
    matches: int = Field(..., description="Matches burned this ride")
    elapsed_time: float = Field(..., description="Integrated ride time in seconds")

    @property
    def new_estimate(self) -> bool:
        """True when the ride revealed a higher CP or W' than configured."""
        return (
            self.estimated_cp > self.initial_cp
            or self.test_w_prime > self.initial_w_prime
        )
