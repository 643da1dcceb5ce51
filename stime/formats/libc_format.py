"""
libc Format for stime

Timestamps in the platform's locale-dependent date and time
representation (the strftime/strptime "%c" conversion). The process
locale is adopted from the environment at startup, so the accepted and
produced text follows LC_TIME.

Durations have no calendar representation and are rejected.

Python 3.9+ compatible.
"""

import errno
import time

from ..core.base_format import BaseFormat, ConversionMode, FormatParseError, FormatUnparseError

LOCALE_FORMAT = "%c"


def format_broken_down(tm: time.struct_time) -> str:
    """Colon-separated struct_time fields, seconds first."""
    fields = (
        tm.tm_sec, tm.tm_min, tm.tm_hour, tm.tm_mday, tm.tm_mon,
        tm.tm_year, tm.tm_wday, tm.tm_yday, tm.tm_isdst,
    )
    return ":".join(str(field) for field in fields)


class LibcFormat(BaseFormat):
    """Locale-aware calendar timestamps."""

    name = "libc"
    description = "strptime/strftime with locale-dependent times"
    supports_duration = False

    def parse(self, value: str, mode: ConversionMode) -> float:
        self.check_mode(mode, "parse")

        try:
            parsed = time.strptime(value, LOCALE_FORMAT)
        except ValueError as e:
            raise FormatParseError(f"'{value}' does not match the locale format: {e}")

        self.logger.debug(f"strptime() => {format_broken_down(parsed)}")

        # strptime leaves tm_isdst at -1 so mktime works out daylight saving
        try:
            return time.mktime(parsed)
        except (OverflowError, ValueError) as e:
            raise FormatParseError(f"'{value}' is not a valid local time: {e}", errno.ERANGE)

    def unparse(self, seconds: float, mode: ConversionMode) -> str:
        self.check_mode(mode, "unparse")

        try:
            local = time.localtime(int(seconds))
        except (OverflowError, OSError, ValueError) as e:
            code = getattr(e, "errno", None) or errno.ERANGE
            raise FormatUnparseError(f"{seconds} has no local time: {e}", code)

        self.logger.debug(f"localtime() => {format_broken_down(local)}")

        return self.fit_output(time.strftime(LOCALE_FORMAT, local), seconds)
