"""
Command Line Interface for stime

    stime {options} <value> {<value> ..}

Options may appear anywhere among the values. Every option is read before
any value is converted.

Python 3.9+ compatible.
"""

import argparse
import errno
import logging
import sys
from typing import List, Optional

from .core.base_format import ConversionMode, FormatRegistry
from .core.config_manager import ConfigManager
from .core.converter import Converter
from .formats import build_registry
from .utils.helpers import adopt_user_locale, quiet_stderr, setup_logging, wrap_help_text

logger = logging.getLogger(__name__)

USAGE_FORMAT_HELP_WIDTH = 54

USAGE_TEXT = """\
usage:

    {prog} {{options}} <value> {{<value> ..}}

  options:

    --help/-h                      show this information
    --quiet/-q                     emit no error messages
    --debug/-D                     emit extra info to stdout
    --reals/-r                     unparse seconds as float instead of integer
    --from/-F <format-id>          parse values in this format
                                   (default: {from_format})
    --to/-T <format-id>            unparse values in this format
                                   (default: {to_format})
    --duration/-d                  values are interpreted as durations
    --timestamp/-t                 values are interpreted as timestamps

  <value>:

    - if the <value> is a hyphen (-) then stdin is read, one <value> per line
    - otherwise, the value is a string compliant with chosen --from/-F format

  <format-id>:
"""


class StimeArgumentParser(argparse.ArgumentParser):
    """Argument parser that fails with EINVAL like the rest of stime."""

    def error(self, message: str):
        self.exit(errno.EINVAL, f"ERROR:  {message}\n")


def build_parser(config: ConfigManager, prog: Optional[str] = None) -> argparse.ArgumentParser:
    """
    Build the option parser.

    Defaults for --from, --to, --duration and --reals come from ``config``.
    """
    parser = StimeArgumentParser(prog=prog, add_help=False)

    parser.add_argument("-h", "--help", action="store_true")
    parser.add_argument("-D", "--debug", action="store_true")
    parser.add_argument("-q", "--quiet", action="store_true")
    parser.add_argument("-r", "--reals", action="store_true",
                        default=bool(config.get("defaults.reals", False)))
    parser.add_argument("-F", "--from", dest="from_format", metavar="<format-id>",
                        default=str(config.get("defaults.from_format", "slurm")))
    parser.add_argument("-T", "--to", dest="to_format", metavar="<format-id>",
                        default=str(config.get("defaults.to_format", "raw")))

    # Same flag, last one given wins
    parser.add_argument("-d", "--duration", dest="duration", action="store_const", const=True)
    parser.add_argument("-t", "--timestamp", dest="duration", action="store_const", const=False)
    parser.set_defaults(duration=bool(config.get("defaults.duration", False)))

    parser.add_argument("values", nargs="*", metavar="<value>")
    return parser


def format_usage(prog: str, registry: FormatRegistry, from_format: str = "slurm",
                 to_format: str = "raw") -> str:
    """Usage text including the word-wrapped format catalogue."""
    lines = [USAGE_TEXT.format(prog=prog, from_format=from_format, to_format=to_format)]
    indent = " " * 22
    for fmt in registry.list_formats():
        help_lines = wrap_help_text(fmt.description, USAGE_FORMAT_HELP_WIDTH)
        lines.append(f"    {fmt.name:<18} {help_lines[0]}")
        lines.extend(f"{indent} {line}" for line in help_lines[1:])
    return "\n".join(lines)


def run_conversion(args: argparse.Namespace, mode: ConversionMode, registry: FormatRegistry) -> int:
    """
    Select the formats and convert every value.

    Returns:
        Process exit status
    """
    from_format = registry.lookup(args.from_format)
    if from_format is None:
        logger.error(f"invalid 'from' format: {args.from_format}")
        return errno.EINVAL

    to_format = registry.lookup(args.to_format)
    if to_format is None:
        logger.error(f"invalid 'to' format: {args.to_format}")
        return errno.EINVAL

    converter = Converter(from_format, to_format, mode)
    results = converter.run(args.values)
    return results.exit_status


def main(argv: Optional[List[str]] = None, prog: Optional[str] = None) -> int:
    """
    Entry point for the stime command.

    Args:
        argv: Arguments without the program name (defaults to sys.argv[1:])
        prog: Program name shown in the usage text

    Returns:
        0 on success, EINVAL if any value or option was invalid
    """
    config = ConfigManager()
    parser = build_parser(config, prog)
    args = parser.parse_intermixed_args(argv)

    mode = ConversionMode(
        duration=args.duration,
        quiet=args.quiet,
        debug=args.debug,
        reals=args.reals,
    )
    registry = build_registry(config.get("slurm.time_format"))

    if args.help:
        print(format_usage(parser.prog, registry,
                           parser.get_default("from_format"), parser.get_default("to_format")))

    # Anything the formats write to stderr is silenced along with our own errors
    with quiet_stderr(mode.quiet):
        setup_logging(mode.debug)
        config.report_load_messages()
        adopt_user_locale()
        logger.debug(f"{mode.mode_name} mode, {args.from_format} -> {args.to_format}")
        return run_conversion(args, mode, registry)


if __name__ == "__main__":
    sys.exit(main())
