"""
Slurm Time Strings for stime

Parses and renders the time and duration strings accepted by the Slurm
workload manager (see the sbatch man page, --begin and --time options).

Timestamps:
    now[{+|-}count[seconds|minutes|hours|days|weeks]]
    today, tomorrow, midnight, noon, elevenses, fika, teatime
    HH:MM[:SS] [AM|PM]
    MMDD[YY], MM/DD[/YY], MM.DD[.YY], YYYY-MM-DD[THH:MM[:SS]]

Durations:
    min, min:sec, hr:min:sec, days-hr, days-hr:min, days-hr:min:sec
    -1, INFINITE, UNLIMITED

Python 3.9+ compatible.
"""

import logging
import math
import os
from datetime import datetime, timedelta
from typing import Optional, Tuple, Union

from dateutil import tz

# Sentinels shared with the scheduler's C API
NO_VAL = 0xfffffffe
INFINITE = 0xffffffff

SECONDS_PER_MINUTE = 60
SECONDS_PER_HOUR = 3600
SECONDS_PER_DAY = 86400

DEFAULT_TIME_FORMAT = "%Y-%m-%dT%H:%M:%S"
RELATIVE_TIME_FORMAT = "relative"
TIME_FORMAT_ENV = "SLURM_TIME_FORMAT"
MAX_TIME_FORMAT_LEN = 32

# Longest names first so "minutes" is not consumed as "minute" + "s"
_DELTA_UNITS = (
    ("seconds", 1),
    ("second", 1),
    ("minutes", SECONDS_PER_MINUTE),
    ("minute", SECONDS_PER_MINUTE),
    ("hours", SECONDS_PER_HOUR),
    ("hour", SECONDS_PER_HOUR),
    ("days", SECONDS_PER_DAY),
    ("day", SECONDS_PER_DAY),
    ("weeks", 7 * SECONDS_PER_DAY),
    ("week", 7 * SECONDS_PER_DAY),
)

_KEYWORD_HOURS = (
    ("midnight", 0),
    ("elevenses", 11),
    ("noon", 12),
    ("fika", 15),
    ("teatime", 16),
)

logger = logging.getLogger(__name__)


class InvalidTimeSpecification(ValueError):
    """Raised internally when a timestamp string stops making sense at ``pos``."""

    def __init__(self, pos: int):
        super().__init__(f"invalid time specification at position {pos}")
        self.pos = pos


def _char(text: str, index: int) -> str:
    """Character at ``index`` or '' past the end."""
    return text[index] if 0 <= index < len(text) else ""


def _is_digit(ch: str) -> bool:
    return ch != "" and "0" <= ch <= "9"


def _local_now(now: Optional[float]) -> datetime:
    if now is None:
        return datetime.now(tz.tzlocal())
    return datetime.fromtimestamp(now, tz.tzlocal())


class SlurmTimeParser:
    """
    Absolute timestamp parser following Slurm's ``slurm_parse_time``.

    The parser walks the string once, filling in date and time fields as it
    recognises them, then resolves missing fields against ``now``.
    """

    def __init__(self, past: bool = False, now: Optional[float] = None):
        """
        Args:
            past: Resolve partial dates to the most recent past occurrence
            now: Reference epoch seconds (defaults to the current time)
        """
        self.past = past
        self.now = _local_now(now)
        self.now_ts = self.now.timestamp()
        self.logger = logging.getLogger(__name__)

    def parse(self, time_str: str) -> int:
        """
        Parse a Slurm timestamp string.

        Returns:
            Epoch seconds, or 0 if the string is not a valid specification
        """
        try:
            return self._parse(time_str)
        except InvalidTimeSpecification as e:
            self.logger.error(f"Invalid time specification (pos={e.pos}): {time_str}")
            return 0

    def _parse(self, time_str: str) -> int:
        text = time_str.split("\n", 1)[0]
        now = self.now
        hour = minute = -1
        second = 0
        year = month = mday = -1

        pos = 0
        while pos < len(text):
            ch = text[pos]
            if ch in " \t-T":
                pos += 1
                continue

            rest = text[pos:].lower()

            if rest.startswith("today"):
                year, month, mday = now.year, now.month, now.day
                pos += 5
                continue

            if rest.startswith("tomorrow"):
                later = self._local_after(SECONDS_PER_DAY)
                year, month, mday = later.year, later.month, later.day
                pos += 8
                continue

            keyword = next((kw for kw in _KEYWORD_HOURS if rest.startswith(kw[0])), None)
            if keyword:
                hour, minute, second = keyword[1], 0, 0
                pos += len(keyword[0])
                continue

            if rest.startswith("now"):
                delta, pos = self._get_now_offset(text, pos + 3)
                later = self._local_after(delta)
                year, month, mday = later.year, later.month, later.day
                hour, minute, second = later.hour, later.minute, later.second
                continue

            if not _is_digit(ch):
                raise InvalidTimeSpecification(pos)

            if _char(text, pos + 1) == ":" or _char(text, pos + 2) == ":":
                hour, minute, second, pos = self._get_time(text, pos)
            else:
                parsed_year, month, mday, pos = self._get_date(text, pos)
                if parsed_year != -1:
                    year = parsed_year

        if hour == -1 and month == -1:
            return 0

        if hour == -1:
            # Date with no time means the start of that day
            hour, minute = 0, 0
        elif month == -1:
            # Time with no date means its next occurrence
            if self.past or (hour, minute) > (now.hour, now.minute):
                day = now
            else:
                day = now + timedelta(days=1)
            year, month, mday = day.year, day.month, day.day

        if year == -1:
            if self.past:
                year = now.year - 1 if month > now.month else now.year
            elif (month, mday, hour, minute) > (now.month, now.day, now.hour, now.minute):
                year = now.year
            else:
                year = now.year + 1

        try:
            resolved = datetime(year, month, mday, hour, minute, second, tzinfo=tz.tzlocal())
        except ValueError:
            raise InvalidTimeSpecification(len(text))
        return int(resolved.timestamp())

    def _local_after(self, seconds: int) -> datetime:
        """Local time ``seconds`` after the reference time."""
        return datetime.fromtimestamp(self.now_ts + seconds, tz.tzlocal())

    def _get_now_offset(self, text: str, pos: int) -> Tuple[int, int]:
        """Parse the optional ``{+|-}count[units]`` that follows "now"."""
        while pos < len(text):
            ch = text[pos]
            if ch in "+-":
                delta, pos = self._get_delta(text, pos + 1)
                return (delta if ch == "+" else -delta), pos
            if ch in " \t":
                pos += 1
                continue
            raise InvalidTimeSpecification(pos)
        return 0, pos

    def _get_delta(self, text: str, pos: int) -> Tuple[int, int]:
        count = 0
        digits = 0
        while pos < len(text):
            ch = text[pos]
            if ch.isspace():
                pos += 1
                continue
            rest = text[pos:].lower()
            unit = next((u for u in _DELTA_UNITS if rest.startswith(u[0])), None)
            if unit:
                count *= unit[1]
                pos += len(unit[0])
                break
            if not _is_digit(ch):
                raise InvalidTimeSpecification(pos)
            count = count * 10 + int(ch)
            digits += 1
            pos += 1
        if not digits:
            raise InvalidTimeSpecification(pos)
        return count, pos

    def _get_time(self, text: str, pos: int) -> Tuple[int, int, int, int]:
        """Parse ``HH:MM[:SS] [AM|PM]`` starting at ``pos``."""
        start = pos
        hour = int(text[pos])
        pos += 1
        if _char(text, pos) != ":":
            if not _is_digit(_char(text, pos)):
                raise InvalidTimeSpecification(pos)
            hour = hour * 10 + int(text[pos])
            pos += 1
        if hour > 23:
            raise InvalidTimeSpecification(start)
        if _char(text, pos) != ":":
            raise InvalidTimeSpecification(pos)

        minute, pos = self._two_digits(text, pos + 1, 59)

        second = 0
        if _char(text, pos) == ":":
            second, pos = self._two_digits(text, pos + 1, 59)

        while _char(text, pos) in (" ", "\t"):
            pos += 1

        suffix = text[pos:pos + 2].lower()
        if suffix == "pm":
            hour += 12
            if hour > 23:
                if hour != 24:
                    raise InvalidTimeSpecification(pos)
                hour = 12
            pos += 2
        elif suffix == "am":
            if hour > 11:
                if hour != 12:
                    raise InvalidTimeSpecification(pos)
                hour = 0
            pos += 2

        return hour, minute, second, pos

    def _two_digits(self, text: str, pos: int, maximum: int) -> Tuple[int, int]:
        if not (_is_digit(_char(text, pos)) and _is_digit(_char(text, pos + 1))):
            raise InvalidTimeSpecification(pos)
        value = int(text[pos:pos + 2])
        if value > maximum:
            raise InvalidTimeSpecification(pos)
        return value, pos + 2

    def _get_date(self, text: str, pos: int) -> Tuple[int, int, int, int]:
        """
        Parse a date starting at ``pos``.

        Returns:
            Tuple of (year or -1, month 1-12, day of month, new position)
        """
        if _char(text, pos + 4) == "-" and _char(text, pos + 7) == "-":
            if not all(_is_digit(_char(text, pos + i)) for i in range(4)):
                raise InvalidTimeSpecification(pos)
            year = int(text[pos:pos + 4])
            month, pos = self._two_digits(text, pos + 5, 12)
            if month < 1:
                raise InvalidTimeSpecification(pos - 2)
            mday, pos = self._two_digits(text, pos + 1, 31)
            if mday < 1:
                raise InvalidTimeSpecification(pos - 2)
            return year, month, mday, pos

        month, pos = self._one_or_two_digits(text, pos)
        if not 1 <= month <= 12:
            raise InvalidTimeSpecification(pos)
        if _char(text, pos) in (".", "/"):
            pos += 1

        if not _is_digit(_char(text, pos)):
            raise InvalidTimeSpecification(pos)
        mday, pos = self._one_or_two_digits(text, pos)
        if not 1 <= mday <= 31:
            raise InvalidTimeSpecification(pos)
        if _char(text, pos) in (".", "/"):
            pos += 1

        if not _is_digit(_char(text, pos)):
            return -1, month, mday, pos
        if not _is_digit(_char(text, pos + 1)):
            raise InvalidTimeSpecification(pos + 1)
        return 2000 + int(text[pos:pos + 2]), month, mday, pos + 2

    def _one_or_two_digits(self, text: str, pos: int) -> Tuple[int, int]:
        value = int(text[pos])
        pos += 1
        if _is_digit(_char(text, pos)):
            value = value * 10 + int(text[pos])
            pos += 1
        return value, pos


def _resolve_display_format(time_format: Optional[str]) -> str:
    fmt = os.environ.get(TIME_FORMAT_ENV) or time_format
    if not fmt or fmt == "standard":
        return DEFAULT_TIME_FORMAT
    if fmt == RELATIVE_TIME_FORMAT:
        return RELATIVE_TIME_FORMAT
    if "%" not in fmt or len(fmt) >= MAX_TIME_FORMAT_LEN:
        logger.error(f"invalid {TIME_FORMAT_ENV} = '{fmt}'")
        return DEFAULT_TIME_FORMAT
    return fmt


def _relative_date_format(when: datetime, now: datetime) -> str:
    distance = (when.date() - now.date()).days
    if distance == -1:
        return "Ystday %H:%M"
    if distance == 0:
        return "%H:%M"
    if distance == 1:
        return "Tomorr %H:%M"
    if distance < -365 or distance > 365:
        return "%-d %b %Y"
    if distance < -1 or distance > 6:
        return "%-d %b %H:%M"
    return "%a %H:%M"


def make_time_str(timestamp: Union[int, float], time_format: Optional[str] = None,
                  now: Optional[float] = None) -> str:
    """
    Render epoch seconds the way Slurm displays timestamps.

    Args:
        timestamp: Epoch seconds
        time_format: Display format used when SLURM_TIME_FORMAT is unset
            ("standard", "relative" or a strftime format)
        now: Reference epoch seconds for the relative format

    Returns:
        Rendered timestamp

    Raises:
        OverflowError, OSError, ValueError: If the timestamp has no local time
    """
    if timestamp == 0 or timestamp == INFINITE or (isinstance(timestamp, float) and math.isinf(timestamp)):
        return "Unknown"
    if timestamp == NO_VAL:
        return "None"

    display_format = _resolve_display_format(time_format)
    when = datetime.fromtimestamp(timestamp, tz.tzlocal())
    if display_format == RELATIVE_TIME_FORMAT:
        display_format = _relative_date_format(when, _local_now(now))
    return when.strftime(display_format)


def _is_valid_timespec(text: str) -> bool:
    digit_groups = dashes = colons = 0
    in_digits = False

    for ch in text:
        if _is_digit(ch):
            if not in_digits:
                digit_groups += 1
                in_digits = True
        elif ch == "-":
            in_digits = False
            dashes += 1
            if colons:
                return False
        elif ch == ":":
            in_digits = False
            colons += 1
        else:
            return False

    if not digit_groups or dashes > 1 or colons > 2:
        return False

    # Every colon needs a digit group on both sides
    needed = colons + (2 if dashes else 1)
    return colons == 0 or digit_groups >= needed


def _field(parts, index: int) -> int:
    if index < len(parts) and parts[index]:
        return int(parts[index])
    return 0


def time_str2secs(string: Optional[str]) -> int:
    """
    Convert a Slurm duration string to seconds.

    Returns:
        Seconds, INFINITE for unlimited, or NO_VAL if the string is invalid
    """
    if not string:
        return NO_VAL
    if string.lower() in ("-1", "infinite", "unlimited"):
        return INFINITE
    if not _is_valid_timespec(string):
        return NO_VAL

    if "-" in string:
        days_part, _, clock = string.partition("-")
        parts = clock.split(":")
        days = _field([days_part], 0)
        hours, minutes, seconds = _field(parts, 0), _field(parts, 1), _field(parts, 2)
    else:
        parts = string.split(":")
        days = 0
        if len(parts) == 3:
            hours, minutes, seconds = _field(parts, 0), _field(parts, 1), _field(parts, 2)
        else:
            hours, minutes, seconds = 0, _field(parts, 0), _field(parts, 1)

    return (days * SECONDS_PER_DAY + hours * SECONDS_PER_HOUR
            + minutes * SECONDS_PER_MINUTE + seconds)


def secs2time_str(secs: int) -> str:
    """
    Render a duration in seconds the way Slurm displays time limits.

    Returns:
        "[days-]HH:MM:SS", "UNLIMITED" or "INVALID" for negative values
    """
    if secs == INFINITE:
        return "UNLIMITED"
    if secs < 0:
        return "INVALID"

    days, remainder = divmod(secs, SECONDS_PER_DAY)
    hours, remainder = divmod(remainder, SECONDS_PER_HOUR)
    minutes, seconds = divmod(remainder, SECONDS_PER_MINUTE)

    if days:
        return f"{days}-{hours:02d}:{minutes:02d}:{seconds:02d}"
    return f"{hours:02d}:{minutes:02d}:{seconds:02d}"


# Convenience functions for common use cases
def parse_time(time_str: str, past: bool = False, now: Optional[float] = None) -> int:
    """
    Parse a Slurm timestamp string to epoch seconds.

    Args:
        time_str: Timestamp string
        past: Resolve partial dates into the past instead of the future
        now: Reference epoch seconds (defaults to the current time)

    Returns:
        Epoch seconds, or 0 if unparseable
    """
    parser = SlurmTimeParser(past=past, now=now)
    return parser.parse(time_str)
