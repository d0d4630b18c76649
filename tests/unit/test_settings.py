"""Unit tests for Settings module."""

from pathlib import Path

import pytest
import yaml
from pydantic import ValidationError

from wprime_balance.models import EngineConfig, MatchConfig
from wprime_balance.settings import Settings, load_settings


class TestSettingsBasicLoading:
    """Test basic settings loading from different sources."""

    def test_load_from_env_vars(self, monkeypatch):
        """Test that settings are correctly loaded from environment variables."""
        monkeypatch.setenv("WPRIME_BALANCE_CRITICAL_POWER", "300")
        monkeypatch.setenv("WPRIME_BALANCE_W_PRIME", "22000")
        monkeypatch.setenv("WPRIME_BALANCE_ESTIMATE_CP", "false")

        settings = load_settings()

        assert settings.critical_power == 300
        assert settings.w_prime == 22000
        assert settings.estimate_cp is False

    def test_load_from_yaml(self, sample_config_file: Path):
        """Test that settings are correctly loaded from a YAML file."""
        settings = load_settings(config_file=sample_config_file)

        assert settings.critical_power == 280
        assert settings.w_prime == 18000
        assert settings.match_power_percent == 110
        assert settings.match_joule_percent == 8
        assert settings.min_match_duration == 20

    def test_yaml_overrides_env_vars(self, monkeypatch, temp_config_file: Path):
        """Test that YAML settings override environment variables."""
        monkeypatch.setenv("WPRIME_BALANCE_CRITICAL_POWER", "300")
        monkeypatch.setenv("WPRIME_BALANCE_W_PRIME", "22000")

        with open(temp_config_file, "w") as f:
            yaml.dump({"critical_power": 265}, f)

        settings = load_settings(config_file=temp_config_file)

        assert settings.critical_power == 265
        assert settings.w_prime == 22000

    def test_default_values(self):
        """Test that settings use default values when no config is provided."""
        settings = Settings()

        assert settings.critical_power == 250
        assert settings.w_prime == 10000
        assert settings.estimate_cp is True
        assert settings.match_power_percent == 105
        assert settings.match_joule_percent == 10
        assert settings.min_match_duration == 30
        assert settings.update_level_step == 1000
        assert settings.below_cp_average == "all_time"
        assert settings.time_column == "time"
        assert settings.power_column == "watts"
        assert settings.output_dir == Path("output")


class TestSettingsPathResolution:
    """Test path resolution and handling."""

    def test_relative_output_dir_resolved(self, sample_config_file: Path):
        """Test that a relative output directory is resolved next to the config."""
        settings = load_settings(config_file=sample_config_file)

        assert settings.output_dir == sample_config_file.parent / "results"

    def test_absolute_output_dir_preserved(
        self, temp_config_file: Path, tmp_path: Path
    ):
        """Test that absolute paths are preserved."""
        out = tmp_path / "absolute_out"
        with open(temp_config_file, "w") as f:
            yaml.dump({"output_dir": str(out)}, f)

        settings = load_settings(config_file=temp_config_file)

        assert settings.output_dir == out


class TestEngineConfig:
    """Test conversion to validated engine configuration."""

    def test_engine_config_from_settings(self):
        """Test every engine-relevant field is carried across."""
        settings = Settings(
            critical_power=290,
            w_prime=21000,
            estimate_cp=False,
            match_power_percent=115,
            match_joule_percent=6,
            min_match_duration=15,
            update_level_step=500,
            below_cp_average="window",
            below_cp_window=120,
        )

        config = settings.engine_config()

        assert config == EngineConfig(
            critical_power=290,
            w_prime=21000,
            estimate_cp=False,
            match=MatchConfig(
                min_match_duration=15,
                min_depletion_fraction=6,
                min_power_fraction=115,
            ),
            update_level_step=500,
            below_cp_average="window",
            below_cp_window=120,
        )

    def test_unrelated_fields_do_not_change_engine_config(self):
        """Test stream layout settings do not affect the engine."""
        a = Settings(critical_power=270)
        b = Settings(critical_power=270, power_column="power")

        assert a.engine_config() == b.engine_config()

    @pytest.mark.parametrize(
        "field, value",
        [
            ("match_joule_percent", 150),
            ("match_joule_percent", -1),
            ("match_power_percent", 0),
            ("min_match_duration", -5),
            ("update_level_step", 0),
            ("below_cp_window", 0),
        ],
    )
    def test_invalid_thresholds_rejected(self, field, value):
        """Test out-of-range thresholds fail validation."""
        settings = Settings(**{field: value})

        with pytest.raises(ValidationError):
            settings.engine_config()

    def test_unknown_averaging_policy_rejected(self):
        """Test the averaging policy is restricted to known values."""
        with pytest.raises(ValidationError):
            Settings(below_cp_average="median")


class TestSettingsEdgeCases:
    """Test edge cases and error handling."""

    def test_missing_config_file_raises_error(self):
        """Test that missing config file raises appropriate error."""
        with pytest.raises(FileNotFoundError):
            load_settings(config_file=Path("nonexistent.yaml"))

    def test_invalid_yaml_raises_error(self, temp_config_file: Path):
        """Test that invalid YAML content raises error."""
        with open(temp_config_file, "w") as f:
            f.write("invalid: yaml: content: [")

        with pytest.raises(yaml.YAMLError):
            load_settings(config_file=temp_config_file)

    def test_empty_config_file_uses_defaults(self, temp_config_file: Path):
        """Test that empty config file falls back to defaults."""
        temp_config_file.write_text("")

        settings = load_settings(config_file=temp_config_file)

        assert settings.critical_power == 250
        assert settings.w_prime == 10000

    def test_unknown_keys_ignored(self, temp_config_file: Path):
        """Test that unrelated keys in the YAML are ignored."""
        with open(temp_config_file, "w") as f:
            yaml.dump({"critical_power": 240, "ftp": 285}, f)

        settings = load_settings(config_file=temp_config_file)

        assert settings.critical_power == 240
        assert not hasattr(settings, "ftp")
