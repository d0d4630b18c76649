"""
Replay of recorded rides.

Loads a recorded power stream, runs it through a fresh balance engine and
saves the per-sample balance next to the other outputs.
"""

import logging
from dataclasses import dataclass
from pathlib import Path

import pandas as pd

from ..constants import CSVConstants
from ..data import StreamDataLoader, StreamLoaderProtocol
from ..exceptions import StreamDataError
from ..metrics import WPrimeBalanceCalculator
from ..models import SessionSummary
from ..settings import Settings
from .session_service import summarize_engine

logger = logging.getLogger(__name__)


@dataclass
class ReplayResult:
    """
    Outcome of replaying one recorded ride.

    Attributes:
        samples: Per-sample balance, percent, CP estimate and match state
        summary: End-of-ride summary of the engine
    """

    samples: pd.DataFrame
    summary: SessionSummary


class ReplayService:
    """Replays recorded power streams and saves the per-sample balance."""

    def __init__(self, settings: Settings, loader: StreamLoaderProtocol | None = None):
        """
        Initialize the replay service.

        Args:
            settings: Application settings
            loader: Source of recorded streams (CSV files when omitted)
        """
        self.settings = settings
        self.loader = loader or StreamDataLoader(settings)
        self.calculator = WPrimeBalanceCalculator(settings)

    def replay(self, stream_file: Path) -> ReplayResult:
        """
        Replay one recorded ride.

        Raises:
            StreamDataError: If the stream holds no samples
        """
        stream = self.loader.load_stream(stream_file)
        if stream.empty:
            raise StreamDataError(f"No samples in {stream_file}")

        samples, engine = self.calculator.replay(stream)
        return ReplayResult(samples=samples, summary=summarize_engine(engine))

    def default_output_path(self, stream_file: Path) -> Path:
        """Where a ride's per-sample balance goes when no path is given."""
        return self.settings.output_dir / f"{Path(stream_file).stem}_balance.csv"

    def save(
        self, result: ReplayResult, stream_file: Path, output: Path | None = None
    ) -> Path:
        """
        Write the per-sample balance to CSV.

        Args:
            result: Replay to save
            stream_file: The replayed stream, used to name the default output
            output: Explicit destination, overriding the output directory

        Returns:
            Path the CSV was written to
        """
        path = output if output is not None else self.default_output_path(stream_file)
        path.parent.mkdir(parents=True, exist_ok=True)
        result.samples.to_csv(path, index=False, sep=CSVConstants.DEFAULT_SEPARATOR)
        logger.info(f"Per-sample balance saved to {path}")
        return path
