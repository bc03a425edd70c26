"""Utility modules."""

from .config_loader import ConfigLoader, load_config
from .logger import setup_logger, get_logger

__all__ = ["ConfigLoader", "load_config", "setup_logger", "get_logger"]
