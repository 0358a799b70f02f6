"""
Utility modules for the CRM backend.
"""

from .config import Config
from .log_config import setup_logging

__all__ = ["Config", "setup_logging"]
