"""Allow ``python -m pishock_client`` to run the command line tool."""

from __future__ import annotations

import sys

from pishock_client.cli.main import main

if __name__ == "__main__":
    sys.exit(main())
