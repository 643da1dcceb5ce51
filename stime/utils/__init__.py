"""
Utility Functions and Helpers

This package contains the Slurm time string grammar, logging setup and
other support functionality.
"""

from .slurm_time import make_time_str, parse_time, secs2time_str, time_str2secs
from .helpers import setup_logging, quiet_stderr

__all__ = [
    "make_time_str",
    "parse_time",
    "secs2time_str",
    "time_str2secs",
    "setup_logging",
    "quiet_stderr",
]
