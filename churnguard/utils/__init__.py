"""Utility functions."""

from .helpers import setup_logging, setup_logging_from_config, format_inr, format_inr_exact, format_percentage

__all__ = ["setup_logging", "setup_logging_from_config", "format_inr", "format_inr_exact", "format_percentage"]
