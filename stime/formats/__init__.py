"""
Conversion Formats

This package contains all conversion format implementations and builds the
fixed registry the command line selects from.
"""

from typing import Optional

from ..core.base_format import FormatRegistry
from .libc_format import LibcFormat
from .raw_format import RawFormat
from .slurm_format import SlurmFormat


def build_registry(slurm_time_format: Optional[str] = None) -> FormatRegistry:
    """
    Build the format registry in catalogue order.

    Args:
        slurm_time_format: Display format for Slurm timestamps when
            SLURM_TIME_FORMAT is not set
    """
    return FormatRegistry((
        LibcFormat(),
        RawFormat(),
        SlurmFormat(time_format=slurm_time_format),
    ))


# Registry with default settings
format_registry = build_registry()

__all__ = [
    "LibcFormat",
    "RawFormat",
    "SlurmFormat",
    "build_registry",
    "format_registry",
]
