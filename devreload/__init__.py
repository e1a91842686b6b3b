"""Rebuild and restart a server on source changes, with config, logging and number helpers."""

__version__ = "0.1.0"

__all__ = ["__version__"]