"""CWA nationwide weather forecast proxy."""

__version__ = "0.1.0"
