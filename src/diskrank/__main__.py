"""Application entry point for diskrank.

Delegates to the click command in ``diskrank.app.cli``, which owns argument
parsing, configuration loading, logging setup and exit codes.
"""

from __future__ import annotations

import sys
from typing import NoReturn

from diskrank.app.cli import EXIT_SUCCESS, cli

__all__ = ["main"]


def main() -> NoReturn:
    """Main entry point for the diskrank application.

    Exit Codes:
        0: Report printed or browser closed normally
        1: Configuration, terminal or runtime error
        130: Interrupted
    """
    cli(prog_name="diskrank")
    # click's standalone mode exits on its own; this is only reached if it returns
    sys.exit(EXIT_SUCCESS)


if __name__ == "__main__":
    main()
