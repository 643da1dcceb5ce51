"""
Core stime components.

This package contains the format base class and registry, the value
converter, and configuration management.
"""

from .base_format import (
    BaseFormat,
    ConversionMode,
    FormatError,
    FormatParseError,
    FormatRegistry,
    FormatUnparseError,
    UnsupportedModeError,
)
from .config_manager import ConfigManager
from .converter import Converter, ConversionResults

__all__ = [
    "BaseFormat",
    "ConversionMode",
    "FormatError",
    "FormatParseError",
    "FormatRegistry",
    "FormatUnparseError",
    "UnsupportedModeError",
    "ConfigManager",
    "Converter",
    "ConversionResults",
]
