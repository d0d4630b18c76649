"""Unit tests for stream loading."""

from pathlib import Path

import pandas as pd
import pytest

from wprime_balance.data import StreamDataLoader
from wprime_balance.exceptions import DataLoadError, InvalidDataError
from wprime_balance.settings import Settings


class TestLoadStream:
    """Test reading stream CSV files."""

    def test_load_csv(self, stream_csv: Path, default_settings: Settings):
        """Test a plain seconds/watts CSV loads unchanged."""
        stream = StreamDataLoader(default_settings).load_stream(stream_csv)

        assert list(stream.columns) == ["time", "watts"]
        assert len(stream) == 1275
        assert stream["time"].iloc[0] == 0.0
        assert stream["watts"].max() == 400

    def test_missing_file(self, tmp_path: Path, default_settings: Settings):
        """Test a missing file raises DataLoadError."""
        with pytest.raises(DataLoadError):
            StreamDataLoader(default_settings).load_stream(tmp_path / "nope.csv")

    def test_unreadable_file(self, tmp_path: Path, default_settings: Settings):
        """Test an empty file is reported as a load failure."""
        path = tmp_path / "empty.csv"
        path.write_text("")

        with pytest.raises(DataLoadError):
            StreamDataLoader(default_settings).load_stream(path)

    def test_custom_layout(self, tmp_path: Path):
        """Test configured column names and separator are honored."""
        path = tmp_path / "ride.csv"
        path.write_text("secs;power\n0;100\n1;300\n2;250\n")
        settings = Settings(
            time_column="secs", power_column="power", stream_separator=";"
        )

        stream = StreamDataLoader(settings).load_stream(path)

        assert stream["watts"].tolist() == [100, 300, 250]
        assert stream["time"].tolist() == [0.0, 1.0, 2.0]


class TestNormalize:
    """Test normalization of raw stream DataFrames."""

    def test_missing_columns(self, default_settings: Settings):
        """Test a stream without power is rejected."""
        df = pd.DataFrame({"time": [0, 1], "heartrate": [120, 125]})

        with pytest.raises(InvalidDataError):
            StreamDataLoader(default_settings).normalize(df)

    def test_sorted_by_time(self, default_settings: Settings):
        """Test out-of-order rows are sorted."""
        df = pd.DataFrame({"time": [2, 0, 1], "watts": [300, 100, 200]})

        stream = StreamDataLoader(default_settings).normalize(df)

        assert stream["time"].tolist() == [0.0, 1.0, 2.0]
        assert stream["watts"].tolist() == [100, 200, 300]

    def test_bad_power_becomes_nan(self, default_settings: Settings):
        """Test unparseable power readings are kept as NaN."""
        df = pd.DataFrame({"time": [0, 1, 2], "watts": ["100", "n/a", "300"]})

        stream = StreamDataLoader(default_settings).normalize(df)

        assert stream["watts"].isna().tolist() == [False, True, False]

    def test_rows_without_time_dropped(self, default_settings: Settings):
        """Test rows whose timestamp cannot be read are dropped."""
        df = pd.DataFrame({"time": [0, None, 2], "watts": [100, 200, 300]})

        stream = StreamDataLoader(default_settings).normalize(df)

        assert len(stream) == 2

    def test_datetime_timestamps(self, default_settings: Settings):
        """Test datetimes are converted to seconds from the first sample."""
        df = pd.DataFrame(
            {
                "time": [
                    "2024-05-01T10:00:00Z",
                    "2024-05-01T10:00:01Z",
                    "2024-05-01T10:00:05Z",
                ],
                "watts": [100, 200, 300],
            }
        )

        stream = StreamDataLoader(default_settings).normalize(df)

        assert stream["time"].tolist() == [0.0, 1.0, 5.0]

    def test_unparseable_timestamps(self, default_settings: Settings):
        """Test timestamps that are neither numbers nor dates are rejected."""
        df = pd.DataFrame({"time": ["soon", "later"], "watts": [100, 200]})

        with pytest.raises(InvalidDataError):
            StreamDataLoader(default_settings).normalize(df)
