"""Utility modules for SoraTV"""

from .logging_setup import get_logger, setup_logging

__all__ = [
    "get_logger",
    "setup_logging",
]
