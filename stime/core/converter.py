"""
Value Converter for stime

Runs each input value through the "from" format's parser and the "to"
format's renderer. Failures are reported and counted, never fatal: the
remaining values are still converted.

Python 3.9+ compatible.
"""

import errno
import io
import logging
import sys
from typing import List, Dict, Any, Iterable, Optional, TextIO

from .base_format import BaseFormat, ConversionMode, FormatError, UnsupportedModeError

STDIN_SENTINEL = "-"

# isspace(3) in the C locale
TRAILING_WHITESPACE = " \t\n\v\f\r"


class ConversionResults:
    """
    Tally of a conversion run.
    """

    def __init__(self):
        self.converted = 0
        self.errors: List[str] = []

    def add_success(self):
        self.converted += 1

    def add_error(self, error_message: str):
        """Add an error message to the results."""
        self.errors.append(error_message)

    @property
    def failed(self) -> int:
        return len(self.errors)

    @property
    def exit_status(self) -> int:
        """0 when every value converted, EINVAL otherwise."""
        return errno.EINVAL if self.errors else 0

    def get_summary(self) -> Dict[str, Any]:
        return {
            "converted": self.converted,
            "failed": self.failed,
            "exit_status": self.exit_status,
        }


class Converter:
    """
    Converts values from one format to another and prints the results.
    """

    def __init__(self,
                 from_format: BaseFormat,
                 to_format: BaseFormat,
                 mode: ConversionMode,
                 output: Optional[TextIO] = None,
                 stdin: Optional[TextIO] = None):
        """
        Initialize converter.

        Args:
            from_format: Format input values are written in
            to_format: Format to render values in
            mode: Conversion mode shared by both formats
            output: Stream for converted values (defaults to stdout)
            stdin: Stream read for the "-" value (defaults to stdin)
        """
        self.from_format = from_format
        self.to_format = to_format
        self.mode = mode
        self.output = output
        self.stdin = stdin
        self.logger = logging.getLogger(__name__)

    def process_value(self, value: str, results: ConversionResults) -> None:
        """Convert one value, print it, and record the outcome."""
        try:
            seconds = self.from_format.parse(value, self.mode)
        except FormatError as e:
            self._report(e, f"unable to parse {value} from format {self.from_format.name} ({e.code})",
                         results)
            return

        self.logger.debug(f"parsed to {seconds:f} seconds")

        try:
            text = self.to_format.unparse(seconds, self.mode)
        except FormatError as e:
            self._report(e, f"unable to unparse {seconds:.3f} to format {self.to_format.name} ({e.code})",
                         results)
            return

        print(text, file=self.output or sys.stdout)
        results.add_success()

    def _report(self, error: FormatError, message: str, results: ConversionResults) -> None:
        if isinstance(error, UnsupportedModeError):
            self.logger.error(str(error))
        else:
            self.logger.debug(str(error))
        self.logger.error(message)
        results.add_error(message)

    def process_stream(self, stream: TextIO, results: ConversionResults) -> None:
        """Convert every line of ``stream``, trailing whitespace removed."""
        try:
            for line in stream:
                self.process_value(line.rstrip(TRAILING_WHITESPACE), results)
        except (OSError, UnicodeDecodeError) as e:
            message = f"error reading stdin: {e}"
            self.logger.error(message)
            results.add_error(message)

    def _open_stdin(self) -> TextIO:
        stream = self.stdin or sys.stdin
        # Undecodable bytes only spoil their own line
        if isinstance(stream, io.TextIOWrapper):
            stream.reconfigure(errors="replace")
        return stream

    def run(self, values: Iterable[str], results: Optional[ConversionResults] = None) -> ConversionResults:
        """
        Convert all values in order.

        A "-" value reads stdin one value per line; it may only be used once.

        Returns:
            ConversionResults for the run
        """
        if results is None:
            results = ConversionResults()

        seen_stdin = False
        for value in values:
            if value == STDIN_SENTINEL:
                if seen_stdin:
                    message = "cannot use stdin ('-') for multiple <value> arguments"
                    self.logger.error(message)
                    results.add_error(message)
                    continue
                seen_stdin = True
                self.process_stream(self._open_stdin(), results)
            else:
                self.process_value(value, results)

        self.logger.debug(f"Conversion completed: {results.get_summary()}")
        return results
