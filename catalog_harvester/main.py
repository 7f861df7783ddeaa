from __future__ import annotations

import sys

from .ui.cli import run_cli


def main() -> int:
    """Console-script target: one harvest pass, or the API with --serve."""
    return run_cli(sys.argv[1:])


if __name__ == "__main__":
    raise SystemExit(main())
