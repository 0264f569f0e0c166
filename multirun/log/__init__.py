"""
Logging module for multirun.
This module provides the console logging setup shared by the supervisor.
"""

from .setup import setup_logging

__all__ = ["setup_logging"]
