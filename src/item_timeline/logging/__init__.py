"""Logging utilities for the item timeline package."""

from item_timeline.logging.config import JsonFormatter, setup_logging

__all__ = ["JsonFormatter", "setup_logging"]
