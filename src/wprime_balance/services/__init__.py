"""
Service layer for coordinating the engine with its collaborators.

This package contains the ride session that owns a live balance engine and
the replay service for recorded rides.
"""

from .replay_service import ReplayResult, ReplayService
from .session_service import RideSession, summarize_engine

__all__ = [
    "ReplayResult",
    "ReplayService",
    "RideSession",
    "summarize_engine",
]
