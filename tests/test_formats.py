"""Conversion format tests."""

import logging
import math
from datetime import datetime, timezone

import pytest

from stime.core.base_format import (
    ConversionMode,
    FormatParseError,
    FormatUnparseError,
    UnsupportedModeError,
)
from stime.formats import LibcFormat, RawFormat, SlurmFormat

NOW = 1700000000  # Tue 2023-11-14 22:13:20 UTC


class TestRawParse:
    @pytest.mark.parametrize("text,expected", [
        ("42", 42.0),
        ("  42abc", 42.0),
        ("\t\n\v\f\r42", 42.0),
        ("-7.25", -7.25),
        ("+3", 3.0),
        (".5", 0.5),
        ("1.5e3", 1500.0),
        ("1e", 1.0),
        ("0x10", 16.0),
        ("0x1.8p1", 3.0),
        ("0xz", 0.0),
    ])
    def test_numeric_prefix(self, timestamp_mode, text, expected):
        assert RawFormat().parse(text, timestamp_mode) == expected

    def test_infinity(self, timestamp_mode):
        assert RawFormat().parse("inf", timestamp_mode) == math.inf
        assert RawFormat().parse("-Infinity", timestamp_mode) == -math.inf

    def test_nan(self, timestamp_mode):
        assert math.isnan(RawFormat().parse("nan", timestamp_mode))

    @pytest.mark.parametrize("text", ["", "   ", "abc", "-", "e5", "\u00a042"])
    def test_no_number(self, timestamp_mode, text):
        with pytest.raises(FormatParseError):
            RawFormat().parse(text, timestamp_mode)

    def test_same_in_duration_mode(self, duration_mode):
        assert RawFormat().parse("90", duration_mode) == 90.0


class TestRawUnparse:
    def test_integer(self, timestamp_mode):
        assert RawFormat().unparse(42.0, timestamp_mode) == "42"

    def test_integer_rounds(self, timestamp_mode):
        assert RawFormat().unparse(41.7, timestamp_mode) == "42"

    def test_reals(self, reals_mode):
        assert RawFormat().unparse(42.0, reals_mode) == "42.000"
        assert RawFormat().unparse(1.23456, reals_mode) == "1.235"

    def test_infinity(self, timestamp_mode):
        assert RawFormat().unparse(math.inf, timestamp_mode) == "inf"

    def test_too_long(self, timestamp_mode):
        with pytest.raises(FormatUnparseError):
            RawFormat().unparse(1e130, timestamp_mode)

    def test_round_trip_loses_fraction(self, timestamp_mode):
        raw = RawFormat()
        assert raw.parse(raw.unparse(12.4, timestamp_mode), timestamp_mode) == 12.0

    def test_round_trip_reals(self, reals_mode):
        raw = RawFormat()
        assert raw.parse(raw.unparse(12.345, reals_mode), reals_mode) == 12.345


class TestLibc:
    def test_unparse(self, timestamp_mode):
        assert LibcFormat().unparse(NOW, timestamp_mode) == "Tue Nov 14 22:13:20 2023"

    def test_parse(self, timestamp_mode):
        assert LibcFormat().parse("Tue Nov 14 22:13:20 2023", timestamp_mode) == NOW

    def test_round_trip(self, timestamp_mode):
        libc = LibcFormat()
        assert libc.parse(libc.unparse(NOW + 0.9, timestamp_mode), timestamp_mode) == NOW

    @pytest.mark.parametrize("text", ["", "not a date", "2023-11-14T22:13:20"])
    def test_parse_mismatch(self, timestamp_mode, text):
        with pytest.raises(FormatParseError):
            LibcFormat().parse(text, timestamp_mode)

    @pytest.mark.parametrize("text", ["", "Tue Nov 14 22:13:20 2023", "anything"])
    def test_parse_duration_unsupported(self, duration_mode, text):
        with pytest.raises(UnsupportedModeError, match="libc format cannot parse durations"):
            LibcFormat().parse(text, duration_mode)

    @pytest.mark.parametrize("seconds", [0.0, 60.0, float(NOW), math.inf])
    def test_unparse_duration_unsupported(self, duration_mode, seconds):
        with pytest.raises(UnsupportedModeError, match="libc format cannot unparse durations"):
            LibcFormat().unparse(seconds, duration_mode)

    @pytest.mark.parametrize("seconds", [math.inf, math.nan, 1e20])
    def test_unparse_out_of_range(self, timestamp_mode, seconds):
        with pytest.raises(FormatUnparseError):
            LibcFormat().unparse(seconds, timestamp_mode)

    def test_debug_fields(self, caplog):
        mode = ConversionMode(debug=True)
        with caplog.at_level(logging.DEBUG):
            LibcFormat().unparse(NOW, mode)
            LibcFormat().parse("Tue Nov 14 22:13:20 2023", mode)
        assert "localtime() => 20:13:22:14:11:2023:1:318:0" in caplog.text
        assert "strptime() => 20:13:22:14:11:2023:1:318:-1" in caplog.text


class TestSlurmDuration:
    def test_parse(self, duration_mode):
        assert SlurmFormat().parse("1-00:00:00", duration_mode) == 86400.0

    def test_parse_minutes(self, duration_mode):
        assert SlurmFormat().parse("90", duration_mode) == 5400.0

    @pytest.mark.parametrize("text", ["UNLIMITED", "infinite", "-1"])
    def test_parse_infinite(self, duration_mode, text):
        assert SlurmFormat().parse(text, duration_mode) == math.inf

    def test_parse_invalid(self, duration_mode):
        with pytest.raises(FormatParseError):
            SlurmFormat().parse("bogus", duration_mode)

    def test_unparse(self, duration_mode):
        assert SlurmFormat().unparse(90.9, duration_mode) == "00:01:30"
        assert SlurmFormat().unparse(93784.0, duration_mode) == "1-02:03:04"

    def test_unparse_infinite(self, duration_mode):
        assert SlurmFormat().unparse(math.inf, duration_mode) == "UNLIMITED"

    def test_unparse_negative(self, duration_mode):
        assert SlurmFormat().unparse(-1.0, duration_mode) == "INVALID"
        assert SlurmFormat().unparse(-math.inf, duration_mode) == "INVALID"


class TestSlurmTimestamp:
    def test_parse(self, timestamp_mode):
        expected = datetime(2024, 5, 1, 10, 30, tzinfo=timezone.utc).timestamp()
        assert SlurmFormat().parse("2024-05-01T10:30:00", timestamp_mode) == expected

    def test_parse_invalid(self, timestamp_mode):
        with pytest.raises(FormatParseError):
            SlurmFormat().parse("junk", timestamp_mode)

    def test_unparse(self, timestamp_mode):
        assert SlurmFormat().unparse(float(NOW), timestamp_mode) == "2023-11-14T22:13:20"

    def test_unparse_unknown(self, timestamp_mode):
        assert SlurmFormat().unparse(0.0, timestamp_mode) == "Unknown"
        assert SlurmFormat().unparse(math.inf, timestamp_mode) == "Unknown"

    def test_unparse_nan(self, timestamp_mode):
        with pytest.raises(FormatUnparseError):
            SlurmFormat().unparse(math.nan, timestamp_mode)

    def test_configured_display_format(self, timestamp_mode):
        assert SlurmFormat(time_format="%Y").unparse(float(NOW), timestamp_mode) == "2023"

    def test_round_trip(self, timestamp_mode):
        slurm = SlurmFormat()
        assert slurm.parse(slurm.unparse(float(NOW), timestamp_mode), timestamp_mode) == NOW
