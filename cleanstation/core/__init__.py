"""
Core utilities for CleanStation.

This package provides core functionality including logging configuration,
error types, database setup and the configuration rule engine.
"""

from cleanstation.core.logging_config import get_logger, setup_logging

__all__ = ["get_logger", "setup_logging"]
