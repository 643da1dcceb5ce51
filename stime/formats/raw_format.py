"""
Raw Format for stime

Values are a plain number of seconds.

Python 3.9+ compatible.
"""

import re

from ..core.base_format import BaseFormat, ConversionMode, FormatParseError

# Longest numeric prefix accepted by strtod(3)
_NUMBER_PREFIX = re.compile(
    r"""
    [ \t\n\v\f\r]*
    (?P<number>
        [+-]?
        (?:
            0[xX](?:[0-9a-fA-F]+\.?[0-9a-fA-F]*|\.[0-9a-fA-F]+)(?:[pP][+-]?[0-9]+)?
          | (?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?
          | inf(?:inity)?
          | nan
        )
    )
    """,
    re.VERBOSE | re.IGNORECASE,
)


_HEX_PREFIX = re.compile(r"[+-]?0[xX]")


def _parse_number(text: str) -> float:
    if _HEX_PREFIX.match(text):
        return float.fromhex(text)
    return float(text)


class RawFormat(BaseFormat):
    """Seconds rendered as a decimal number."""

    name = "raw"
    description = "Values are a number of seconds"

    def parse(self, value: str, mode: ConversionMode) -> float:
        match = _NUMBER_PREFIX.match(value)
        if not match:
            raise FormatParseError(f"no number found in '{value}'")
        return _parse_number(match.group("number"))

    def unparse(self, seconds: float, mode: ConversionMode) -> str:
        text = f"{seconds:.3f}" if mode.reals else f"{seconds:.0f}"
        return self.fit_output(text, seconds)
