"""
Custom exceptions for the W' balance package.

The balance engine itself never raises while processing samples: degenerate
inputs are absorbed there. These exceptions cover the layers around it
(configuration, stream loading, replay and the command line).
"""


class WPrimeBalanceError(Exception):
    """Base exception for all W' balance errors."""


class ConfigurationError(WPrimeBalanceError):
    """Raised when there is an issue with configuration settings."""


class ValidationError(WPrimeBalanceError):
    """Raised when data validation fails."""


class InvalidDataError(ValidationError):
    """Raised when input data is invalid or missing required fields."""


class DataLoadError(WPrimeBalanceError):
    """Raised when there is an error loading data files."""


class StreamDataError(WPrimeBalanceError):
    """Raised when there are issues with power stream data."""
