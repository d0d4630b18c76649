"""Application settings and configuration management."""

from pathlib import Path
from typing import Literal

import yaml
from pydantic_settings import BaseSettings, SettingsConfigDict

from .constants import (
    AthleteDefaults,
    BelowCpAveraging,
    CSVConstants,
    MatchDefaults,
    ReestimationConstants,
)
from .models import EngineConfig, MatchConfig


class Settings(BaseSettings):
    """
    Application settings for the W' balance engine.

    Settings are loaded in the following order of precedence (highest to lowest):
    1. YAML config file passed to load_settings()
    2. Environment variables (e.g., WPRIME_BALANCE_CRITICAL_POWER)
    3. .env file (if found)
    4. Default values
    """

    model_config = SettingsConfigDict(
        env_prefix="WPRIME_BALANCE_", env_file=".env", extra="ignore"
    )

    # --- Athlete ---
    critical_power: float = AthleteDefaults.CRITICAL_POWER  # Watts
    w_prime: float = AthleteDefaults.W_PRIME  # Joules

    # --- Feature Toggles ---
    estimate_cp: bool = True  # Re-estimate CP and W' mid-ride

    # --- Match Thresholds ---
    match_power_percent: float = MatchDefaults.MIN_POWER_PERCENT  # % of CP
    match_joule_percent: float = MatchDefaults.MIN_DEPLETION_PERCENT  # % of W'
    min_match_duration: float = MatchDefaults.MIN_MATCH_DURATION  # Seconds

    # --- Model Policies ---
    update_level_step: float = ReestimationConstants.UPDATE_LEVEL_STEP
    below_cp_average: Literal["all_time", "window"] = "all_time"
    below_cp_window: int = BelowCpAveraging.DEFAULT_WINDOW

    # --- Recorded Stream Layout ---
    time_column: str = CSVConstants.TIME_COLUMN
    power_column: str = CSVConstants.POWER_COLUMN
    stream_separator: str = CSVConstants.DEFAULT_SEPARATOR

    # --- Output ---
    output_dir: Path = Path("output")

    def match_config(self) -> MatchConfig:
        """Match thresholds as a validated MatchConfig."""
        return MatchConfig(
            min_match_duration=self.min_match_duration,
            min_depletion_fraction=self.match_joule_percent,
            min_power_fraction=self.match_power_percent,
        )

    def engine_config(self) -> EngineConfig:
        """Everything the balance engine needs, as a validated EngineConfig."""
        return EngineConfig(
            critical_power=self.critical_power,
            w_prime=self.w_prime,
            match=self.match_config(),
            estimate_cp=self.estimate_cp,
            update_level_step=self.update_level_step,
            below_cp_average=self.below_cp_average,
            below_cp_window=self.below_cp_window,
        )


def load_settings(config_file: Path | None = None) -> Settings:
    """Load settings from a YAML file, environment variables, and defaults."""
    if config_file:
        with open(config_file, encoding="utf-8") as f:
            yaml_settings = yaml.safe_load(f) or {}

        # Resolve a relative output directory against the config file location
        if "output_dir" in yaml_settings:
            output_dir = Path(yaml_settings["output_dir"]).expanduser()
            if not output_dir.is_absolute():
                output_dir = config_file.parent / output_dir
            yaml_settings["output_dir"] = str(output_dir)

        return Settings(**yaml_settings)

    return Settings()
