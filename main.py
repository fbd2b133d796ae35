"""CLI entrypoint for the puzzle grid engines."""

from __future__ import annotations

import sys

from puzzlegrid.cli import main


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
