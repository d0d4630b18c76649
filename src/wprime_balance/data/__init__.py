"""
Data access layer.

This package contains modules for loading recorded power streams.
"""

from .loader import StreamDataLoader, StreamLoaderProtocol

__all__ = [
    "StreamDataLoader",
    "StreamLoaderProtocol",
]
