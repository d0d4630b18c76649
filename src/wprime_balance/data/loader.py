"""
Power stream loading.

This module provides a clean interface for loading recorded power streams
so they can be replayed through the balance engine.
"""

import logging
from pathlib import Path
from typing import Protocol

import pandas as pd

from ..constants import CSVConstants
from ..exceptions import DataLoadError, InvalidDataError
from ..settings import Settings

logger = logging.getLogger(__name__)


class StreamLoaderProtocol(Protocol):
    """Protocol for stream loaders."""

    def load_stream(self, stream_file: Path) -> pd.DataFrame:
        """Load a recorded power stream."""
        ...


class StreamDataLoader:
    """
    Loads recorded power streams from CSV files.

    The returned DataFrame always has float ``time`` (seconds, ascending) and
    ``watts`` columns, whatever the source column names were.
    """

    def __init__(self, settings: Settings):
        """
        Initialize the data loader.

        Args:
            settings: Application settings containing the stream layout
        """
        self.settings = settings
        self.logger = logging.getLogger(__name__)

    def load_stream(self, stream_file: Path) -> pd.DataFrame:
        """
        Load and normalize a stream CSV.

        Args:
            stream_file: Path to the CSV file

        Returns:
            DataFrame with ``time`` and ``watts`` columns

        Raises:
            DataLoadError: If the file cannot be read
            InvalidDataError: If required columns are missing
        """
        if not stream_file.exists():
            raise DataLoadError(f"Stream file not found: {stream_file}")

        try:
            self.logger.debug(f"Loading stream data from {stream_file}")
            df = pd.read_csv(
                stream_file,
                sep=self.settings.stream_separator,
                encoding=CSVConstants.DEFAULT_ENCODING,
            )
        except Exception as e:
            raise DataLoadError(f"Failed to load stream {stream_file}: {e}") from e

        return self.normalize(df)

    def normalize(self, df: pd.DataFrame) -> pd.DataFrame:
        """
        Rename, coerce and sort a raw stream DataFrame.

        Timestamps may be numeric seconds or parseable datetimes; datetimes
        are converted to seconds since the first sample. Unparseable power
        values become NaN, which the engine treats as 0 W.
        """
        time_col = self.settings.time_column
        power_col = self.settings.power_column

        missing = [col for col in (time_col, power_col) if col not in df.columns]
        if missing:
            raise InvalidDataError(f"Stream is missing required columns: {missing}")

        stream = pd.DataFrame(
            {
                "time": self._to_seconds(df[time_col]),
                "watts": pd.to_numeric(df[power_col], errors="coerce"),
            }
        )
        stream = stream.dropna(subset=["time"])
        stream = stream.sort_values("time", kind="stable").reset_index(drop=True)

        self.logger.info(
            f"Loaded stream with {len(stream)} samples "
            f"spanning {self._span(stream):.0f}s"
        )
        return stream

    @staticmethod
    def _to_seconds(times: pd.Series) -> pd.Series:
        numeric = pd.to_numeric(times, errors="coerce")
        if numeric.notna().any() or times.empty:
            return numeric.astype(float)

        parsed = pd.to_datetime(times, errors="coerce", utc=True)
        if parsed.isna().all():
            raise InvalidDataError("Stream timestamps are neither numbers nor dates")
        return (parsed - parsed.min()).dt.total_seconds()

    @staticmethod
    def _span(stream: pd.DataFrame) -> float:
        if stream.empty:
            return 0.0
        return float(stream["time"].iloc[-1] - stream["time"].iloc[0])
