"""
stime - Slurm time string conversion

Converts timestamps and durations between Slurm's time syntax, plain
seconds, and the locale's calendar representation.

Python: 3.9+ compatibility
"""

__version__ = "1.0.0"
__python_requires__ = ">=3.9"

# Core imports for package users
from .core.base_format import BaseFormat, ConversionMode, FormatError
from .core.converter import Converter, ConversionResults
from .formats import format_registry

__all__ = [
    "BaseFormat",
    "ConversionMode",
    "FormatError",
    "Converter",
    "ConversionResults",
    "format_registry",
]
