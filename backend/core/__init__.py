"""
Core package initialization
"""

from .config import settings, get_settings
from .exceptions import *

__all__ = ["settings", "get_settings"]
