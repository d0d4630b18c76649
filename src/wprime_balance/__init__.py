"""W' Balance - real-time anaerobic capacity tracking from cycling power."""

__version__ = "0.3.0"

from . import constants, data, engine, exceptions, metrics, models, services
from .data import StreamDataLoader
from .engine import BalanceEngine, EngineState
from .metrics import WPrimeBalanceCalculator
from .models import (
    BalanceSnapshot,
    EngineConfig,
    MatchConfig,
    MatchSummary,
    SessionSummary,
)
from .services import RideSession
from .settings import Settings, load_settings
from .simulation import PowerStep, SimulatedPowerStream


def get_version() -> str:
    """Get the current version of wprime_balance."""
    return __version__


def get_package_info() -> dict[str, str]:
    """Get package information including name and version."""
    return {
        "name": "wprime-balance",
        "version": __version__,
        "description": "Real-time W' balance tracking from cycling power",
    }


__all__ = [
    # Version & Info
    "get_version",
    "get_package_info",
    # Engine
    "BalanceEngine",
    "EngineState",
    # Models
    "BalanceSnapshot",
    "EngineConfig",
    "MatchConfig",
    "MatchSummary",
    "SessionSummary",
    # Settings
    "Settings",
    "load_settings",
    # Data Layer
    "StreamDataLoader",
    # Calculators
    "WPrimeBalanceCalculator",
    # Services
    "RideSession",
    # Simulation
    "PowerStep",
    "SimulatedPowerStream",
    # Modules
    "constants",
    "data",
    "engine",
    "exceptions",
    "metrics",
    "models",
    "services",
]
