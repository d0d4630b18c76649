"""
Metrics calculation modules.

This package contains calculators that work on recorded streams:
- base: shared calculator interface and helpers
- balance: W' balance replay of a recorded ride
"""

from .balance import WPrimeBalanceCalculator
from .base import BaseMetricCalculator

__all__ = [
    "BaseMetricCalculator",
    "WPrimeBalanceCalculator",
]
