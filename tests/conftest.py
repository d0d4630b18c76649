"""
Shared pytest fixtures for wprime_balance tests.

This module provides reusable fixtures for:
- Settings configurations and YAML config files
- Engine factories
- Sample power streams
"""

from collections.abc import Callable
from pathlib import Path

import pandas as pd
import pytest
import yaml

from wprime_balance.engine import BalanceEngine
from wprime_balance.models import EngineConfig, MatchConfig
from wprime_balance.settings import Settings


# ============================================================================
# Configuration Fixtures
# ============================================================================


@pytest.fixture
def temp_config_file(tmp_path: Path) -> Path:
    """Create a temporary YAML config file path for testing."""
    return tmp_path / "config.yaml"


@pytest.fixture
def sample_config_dict() -> dict:
    """Provide a sample configuration dictionary."""
    return {
        "critical_power": 280,
        "w_prime": 18000,
        "estimate_cp": True,
        "match_power_percent": 110,
        "match_joule_percent": 8,
        "min_match_duration": 20,
        "output_dir": "results",
    }


@pytest.fixture
def sample_config_file(temp_config_file: Path, sample_config_dict: dict) -> Path:
    """Create a temporary config file with sample data."""
    with open(temp_config_file, "w") as f:
        yaml.dump(sample_config_dict, f)
    return temp_config_file


@pytest.fixture
def default_settings() -> Settings:
    """Provide settings with CP=250W and W'=20000J."""
    return Settings(critical_power=250, w_prime=20000)


@pytest.fixture
def lifecycle_match_config() -> MatchConfig:
    """Match thresholds used by the match lifecycle tests."""
    return MatchConfig(
        min_match_duration=30, min_power_fraction=120, min_depletion_fraction=5
    )


# ============================================================================
# Engine Fixtures
# ============================================================================


@pytest.fixture
def feed() -> Callable[..., float]:
    """
    Provide a helper feeding constant power at 1 Hz.

    ``feed(engine, power, seconds, start)`` sends one sample per second after
    ``start`` and returns the timestamp of the last one.
    """

    def _feed(engine: BalanceEngine, power: float, seconds: int, start: float) -> float:
        now = start
        for _ in range(seconds):
            now += 1.0
            engine.update(power, now)
        return now

    return _feed


@pytest.fixture
def make_engine() -> Callable[..., BalanceEngine]:
    """
    Provide a factory for engines.

    The factory takes CP, W' and optional EngineConfig keyword overrides.
    """

    def _make(cp: float = 250, w_prime: float = 20000, **overrides) -> BalanceEngine:
        config = EngineConfig(critical_power=cp, w_prime=w_prime, **overrides)
        return BalanceEngine.from_config(config, now=0.0)

    return _make


@pytest.fixture
def seeded_engine(make_engine) -> BalanceEngine:
    """Engine at CP=250W, W'=20000J whose clock is already seeded at t=0."""
    engine = make_engine()
    engine.update(0, 0.0)
    return engine


# ============================================================================
# Data Fixtures - Streams
# ============================================================================


@pytest.fixture
def simple_stream() -> pd.DataFrame:
    """Provide a simple stream with 5 data points, all below CP."""
    return pd.DataFrame(
        {
            "time": [0, 1, 2, 3, 4],
            "watts": [100, 150, 200, 150, 100],
        }
    )


@pytest.fixture
def interval_stream() -> pd.DataFrame:
    """
    Provide an interval session at 1 Hz for a CP=250W rider.

    Warmup, three 45s efforts at 400W with 180s recoveries, then cooldown.
    """
    watts = [150] * 300
    for _ in range(3):
        watts += [400] * 45 + [120] * 180
    watts += [150] * 300
    return pd.DataFrame({"time": list(range(len(watts))), "watts": watts})


@pytest.fixture
def stream_with_gaps() -> pd.DataFrame:
    """Provide a stream with a long recording gap and a dropout."""
    return pd.DataFrame(
        {
            "time": [0, 1, 2, 3, 154, 155, 156, 157],
            "watts": [300, 350, None, 0, 250, 300, 250, 200],
        }
    )


@pytest.fixture
def stream_csv(tmp_path: Path, interval_stream: pd.DataFrame) -> Path:
    """Write the interval stream to a CSV file."""
    path = tmp_path / "ride.csv"
    interval_stream.to_csv(path, index=False)
    return path
