"""Utility modules for the code translator."""

from .text import safe_truncate, normalize_for_display
from .logging_utils import setup_logging

__all__ = ["safe_truncate", "normalize_for_display", "setup_logging"]
