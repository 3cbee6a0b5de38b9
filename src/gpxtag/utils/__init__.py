"""Utility modules for gpxtag."""

from .logger import setup_logger, get_logger

__all__ = ["setup_logger", "get_logger"]
