"""
Base class for metric calculators.

Defines the interface that all stream calculators should follow.
"""

from abc import ABC, abstractmethod

import pandas as pd

from ..exceptions import InvalidDataError
from ..settings import Settings


class BaseMetricCalculator(ABC):
    """
    Abstract base class for metric calculators.

    Provides common functionality and enforces interface consistency.
    """

    required_columns: tuple[str, ...] = ("time", "watts")

    def __init__(self, settings: Settings):
        """
        Initialize calculator with settings.

        Args:
            settings: Application settings containing thresholds and configuration
        """
        self.settings = settings

    @abstractmethod
    def calculate(self, stream_df: pd.DataFrame) -> dict[str, float]:
        """
        Calculate metrics from stream data.

        Args:
            stream_df: DataFrame with ``time`` and ``watts`` columns

        Returns:
            Dictionary of calculated metrics
        """
        raise NotImplementedError("Subclasses must implement calculate()")

    def _check_columns(self, stream_df: pd.DataFrame) -> None:
        missing = [c for c in self.required_columns if c not in stream_df.columns]
        if missing:
            raise InvalidDataError(f"Stream is missing required columns: {missing}")

    def _get_total_duration(self, stream_df: pd.DataFrame) -> float:
        """
        Get total duration of the stream in seconds.

        Args:
            stream_df: DataFrame containing 'time' column

        Returns:
            Seconds between the first and last sample
        """
        if "time" not in stream_df.columns or len(stream_df) < 2:
            return 0.0
        return float(stream_df["time"].iloc[-1] - stream_df["time"].iloc[0])
