"""
Base Format Class for stime

Abstract base class for all conversion format implementations.
Every format turns a text value into a number of seconds (parse) and a
number of seconds back into text (unparse). The registry at the bottom
of this module holds the fixed, ordered set of formats.

Python 3.9+ compatible.
"""

import errno
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import List, Dict, Optional, Iterable


# Rendered values must fit in this many bytes, terminator included
OUTPUT_BUFFER_SIZE = 128


@dataclass(frozen=True)
class ConversionMode:
    """
    Process-wide conversion settings.

    Built once from the command line and handed to every parse/unparse call.
    """

    duration: bool = False
    quiet: bool = False
    debug: bool = False
    reals: bool = False

    @property
    def mode_name(self) -> str:
        return "duration" if self.duration else "timestamp"


class FormatError(ValueError):
    """Base error for a value that a format cannot handle."""

    def __init__(self, message: str, code: int = errno.EINVAL):
        super().__init__(message)
        self.code = code


class FormatParseError(FormatError):
    """Raised when text cannot be parsed to seconds."""


class FormatUnparseError(FormatError):
    """Raised when seconds cannot be rendered to text."""


class UnsupportedModeError(FormatError):
    """Raised when a format does not support the active mode."""


class BaseFormat(ABC):
    """
    Abstract base class for all conversion formats.

    Subclasses define the metadata attributes and implement ``parse`` and
    ``unparse``.
    """

    # Format metadata - must be defined by subclasses
    name: str = None              # Format identifier (e.g., "raw")
    description: str = None       # Help text shown in the usage catalogue
    supports_duration: bool = True
    supports_timestamp: bool = True

    def __init__(self):
        if not self.name:
            raise ValueError(f"Format {self.__class__.__name__} must define 'name' class attribute")
        if not self.description:
            raise ValueError(f"Format {self.__class__.__name__} must define 'description' class attribute")

        self.logger = logging.getLogger(f"{__name__}.{self.name}")

    @abstractmethod
    def parse(self, value: str, mode: ConversionMode) -> float:
        """
        Convert a text value to seconds.

        Args:
            value: Text in this format
            mode: Active conversion mode

        Returns:
            Number of seconds (math.inf for "infinite")

        Raises:
            FormatError: If the value cannot be parsed
        """
        pass

    @abstractmethod
    def unparse(self, seconds: float, mode: ConversionMode) -> str:
        """
        Convert seconds to a text value in this format.

        Raises:
            FormatError: If the value cannot be rendered
        """
        pass

    def check_mode(self, mode: ConversionMode, operation: str) -> None:
        """Raise UnsupportedModeError if this format cannot work in ``mode``."""
        if mode.duration and not self.supports_duration:
            raise UnsupportedModeError(f"{self.name} format cannot {operation} durations")
        if not mode.duration and not self.supports_timestamp:
            raise UnsupportedModeError(f"{self.name} format cannot {operation} timestamps")

    def fit_output(self, text: str, seconds: float) -> str:
        """
        Check that rendered text fits the output buffer.

        Raises:
            FormatUnparseError: If the text plus terminator would not fit
        """
        if len(text.encode("utf-8")) >= OUTPUT_BUFFER_SIZE:
            raise FormatUnparseError(
                f"rendering of {seconds:.3f} does not fit in {OUTPUT_BUFFER_SIZE} bytes",
                errno.ERANGE,
            )
        return text

    def __str__(self) -> str:
        return self.name

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(name='{self.name}')"


class FormatRegistry:
    """
    Fixed, ordered registry of conversion formats.

    Lookups are case-insensitive. Entries are set at construction and never
    change afterwards.
    """

    def __init__(self, formats: Iterable[BaseFormat]):
        self._formats: Dict[str, BaseFormat] = {}
        self.logger = logging.getLogger(__name__)

        for fmt in formats:
            if not isinstance(fmt, BaseFormat):
                raise ValueError(f"Format must inherit from BaseFormat: {fmt!r}")
            key = fmt.name.lower()
            if key in self._formats:
                raise ValueError(f"Format '{fmt.name}' registered twice")
            self._formats[key] = fmt

    def lookup(self, format_id: Optional[str]) -> Optional[BaseFormat]:
        """
        Get a format by identifier.

        Args:
            format_id: Format identifier, any case

        Returns:
            The format, or None if not found
        """
        if not format_id:
            return None
        return self._formats.get(format_id.lower())

    def is_valid(self, format_id: Optional[str]) -> bool:
        return self.lookup(format_id) is not None

    def list_formats(self) -> List[BaseFormat]:
        """Formats in registry order."""
        return list(self._formats.values())

    def __len__(self) -> int:
        return len(self._formats)
