"""
Slurm Format for stime

Timestamps and durations written the way the Slurm scheduler accepts and
prints them (sbatch --begin and --time).

Python 3.9+ compatible.
"""

import errno
import math
from typing import Optional

from ..core.base_format import BaseFormat, ConversionMode, FormatParseError, FormatUnparseError
from ..utils.slurm_time import (
    INFINITE,
    NO_VAL,
    make_time_str,
    parse_time,
    secs2time_str,
    time_str2secs,
)


class SlurmFormat(BaseFormat):
    """Slurm timestamp and duration strings."""

    name = "slurm"
    description = (
        "Slurm accepts a variety of timestamp and duration formats, "
        "please see the 'sbatch' man page"
    )

    def __init__(self, time_format: Optional[str] = None):
        """
        Args:
            time_format: Timestamp display format used when SLURM_TIME_FORMAT
                is not set ("standard", "relative" or a strftime format)
        """
        super().__init__()
        self.time_format = time_format

    def parse(self, value: str, mode: ConversionMode) -> float:
        if mode.duration:
            seconds = time_str2secs(value)
            if seconds == NO_VAL:
                raise FormatParseError(f"'{value}' is not a Slurm duration")
            return math.inf if seconds == INFINITE else float(seconds)

        timestamp = parse_time(value)
        if timestamp == 0:
            raise FormatParseError(f"'{value}' is not a Slurm time specification")
        return float(timestamp)

    def unparse(self, seconds: float, mode: ConversionMode) -> str:
        if math.isnan(seconds):
            raise FormatUnparseError("cannot render NaN seconds")

        if mode.duration:
            if math.isinf(seconds):
                # Negative infinity renders as INVALID like any negative duration
                text = secs2time_str(INFINITE if seconds > 0 else -1)
            else:
                text = secs2time_str(int(seconds))
            return self.fit_output(text, seconds)

        if math.isinf(seconds):
            return self.fit_output(make_time_str(INFINITE, self.time_format), seconds)

        try:
            text = make_time_str(int(seconds), self.time_format)
        except (OverflowError, OSError, ValueError) as e:
            code = getattr(e, "errno", None) or errno.ERANGE
            raise FormatUnparseError(f"{seconds} has no local time: {e}", code)
        return self.fit_output(text, seconds)
