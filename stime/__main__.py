"""Allow ``python -m stime``."""

import sys

from .cli import main

sys.exit(main(prog="stime"))
