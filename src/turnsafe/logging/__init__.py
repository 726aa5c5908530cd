"""Logging utilities for turnsafe."""

from turnsafe.logging.config import JsonFormatter, setup_logging

__all__ = ["JsonFormatter", "setup_logging"]
