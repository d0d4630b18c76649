"""
Command-line interface for the W' balance package.

This module provides commands for replaying recorded rides through the
balance engine, running simulated rides, and quick time-to-exhaustion
projections.
"""

import logging
import math
from itertools import islice
from pathlib import Path

import click

from .constants import TimeConstants
from .engine import BalanceEngine
from .exceptions import WPrimeBalanceError
from .models import SessionSummary
from .services import ReplayService, RideSession
from .settings import Settings, load_settings
from .simulation import SimulatedPowerStream, parse_steps


# Configure basic logging
def configure_logging(verbose: bool = False) -> None:
    """Configure logging with appropriate level."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s - %(levelname)s - %(message)s",
    )


def _settings_with_overrides(
    config: Path | None, cp: float | None, w_prime: float | None
) -> Settings:
    settings = load_settings(config)
    overrides = {}
    if cp is not None:
        overrides["critical_power"] = cp
    if w_prime is not None:
        overrides["w_prime"] = w_prime
    if overrides:
        settings = settings.model_copy(update=overrides)
    return settings


def _echo_summary(summary: SessionSummary) -> None:
    click.echo("\nW' Balance Summary")
    click.echo("=" * 40)
    minutes = summary.elapsed_time / TimeConstants.SECONDS_PER_MINUTE
    click.echo(f"Ride time: {minutes:.1f} min")
    click.echo(f"Final balance: {summary.end_balance} J")
    click.echo(f"Lowest balance: {summary.min_balance} J")
    click.echo(f"Matches burned: {summary.matches}")
    click.echo(
        f"CP: {summary.initial_cp:.0f} W -> {summary.estimated_cp:.0f} W (estimated)"
    )
    click.echo(
        f"W': {summary.initial_w_prime:.0f} J -> "
        f"{summary.test_w_prime:.0f} J (20-min test estimate)"
    )
    if summary.new_estimate:
        click.echo("New CP/W' estimate discovered during this ride")


@click.group()
def main():
    """
    Track W' balance from cycling power data.

    Replays recorded rides or simulated power through the real-time balance
    engine and reports balance, matches burned and revised CP / W' estimates.
    """


@main.command()
@click.argument(
    "stream_file", type=click.Path(exists=True, dir_okay=False, path_type=Path)
)
@click.option(
    "--config",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Path to configuration file",
)
@click.option("--cp", type=float, help="Critical power in watts (overrides config)")
@click.option("--w-prime", type=float, help="W' in joules (overrides config)")
@click.option(
    "--output",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Per-sample balance CSV (default: <output_dir>/<stream>_balance.csv)",
)
@click.option(
    "--verbose/--quiet",
    default=False,
    help="Enable verbose output",
)
def replay(
    stream_file: Path,
    config: Path | None,
    cp: float | None,
    w_prime: float | None,
    output: Path | None,
    verbose: bool,
) -> None:
    """
    Replay a recorded power stream through the balance engine.

    STREAM_FILE is a CSV with a time column (seconds or datetimes) and a
    power column. The per-sample balance is written to --output, or to the
    configured output directory.
    """
    configure_logging(verbose)
    logger = logging.getLogger(__name__)

    try:
        settings = _settings_with_overrides(config, cp, w_prime)
        service = ReplayService(settings)
        result = service.replay(stream_file)

        _echo_summary(result.summary)

        saved = service.save(result, stream_file, output)
        click.echo(f"\nPer-sample balance: {saved}")

    except WPrimeBalanceError as e:
        logger.error(f"Replay failed: {str(e)}")
        raise click.Abort() from e


@main.command()
@click.option(
    "--config",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Path to configuration file",
)
@click.option("--cp", type=float, help="Critical power in watts (overrides config)")
@click.option("--w-prime", type=float, help="W' in joules (overrides config)")
@click.option(
    "--steps",
    default="100:600,400:60,100:60,400:60,100:60,400:60,100:600",
    show_default=True,
    help="Comma separated power:seconds steps",
)
@click.option("--repeat", default=1, show_default=True, help="Times to play the steps")
@click.option(
    "--random-seconds",
    type=int,
    help="Ride random power for this many seconds instead of the steps",
)
@click.option("--seed", type=int, help="Random seed for --random-seconds")
@click.option(
    "--verbose/--quiet",
    default=False,
    help="Enable verbose output",
)
def simulate(
    config: Path | None,
    cp: float | None,
    w_prime: float | None,
    steps: str,
    repeat: int,
    random_seconds: int | None,
    seed: int | None,
    verbose: bool,
) -> None:
    """Run a simulated workout through a ride session."""
    configure_logging(verbose)
    logger = logging.getLogger(__name__)

    try:
        settings = _settings_with_overrides(config, cp, w_prime)
        if random_seconds is not None:
            stream = SimulatedPowerStream(seed=seed)
            samples = islice(stream.samples(start=0.0), random_seconds + 1)
        else:
            stream = SimulatedPowerStream(steps=parse_steps(steps), repeat=repeat)
            samples = stream.samples(start=0.0)

        session = RideSession(settings)
        session.start(0.0)
        summary = session.run(samples)
        _echo_summary(summary)

    except WPrimeBalanceError as e:
        logger.error(f"Simulation failed: {str(e)}")
        raise click.Abort() from e


@main.command()
@click.argument("power", type=float)
@click.option(
    "--config",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Path to configuration file",
)
@click.option("--cp", type=float, help="Critical power in watts (overrides config)")
@click.option("--w-prime", type=float, help="W' in joules (overrides config)")
def tte(
    power: float, config: Path | None, cp: float | None, w_prime: float | None
) -> None:
    """Time to exhaustion from a full balance at a sustained POWER."""
    logger = logging.getLogger(__name__)

    try:
        settings = _settings_with_overrides(config, cp, w_prime)
        engine = BalanceEngine.from_config(settings.engine_config())
        seconds = engine.time_to_exhaustion(power)

        if math.isinf(seconds):
            click.echo(
                f"{power:.0f} W is at or below CP ({engine.estimated_cp():.0f} W): "
                "no depletion"
            )
        else:
            minutes, secs = divmod(int(seconds), TimeConstants.SECONDS_PER_MINUTE)
            click.echo(f"Time to exhaustion at {power:.0f} W: {minutes}:{secs:02d}")

    except WPrimeBalanceError as e:
        logger.error(f"Projection failed: {str(e)}")
        raise click.Abort() from e


if __name__ == "__main__":
    main()
