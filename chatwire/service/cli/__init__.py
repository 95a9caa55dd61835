"""chatwire CLI (package entrypoint).

Wires argument parsing to the handler in ``cli_actions``; performs no
protocol logic directly.
"""

from __future__ import annotations

from typing import Optional

from .cli_actions import handle_run
from .cli_parser import build_parser


def main(argv: Optional[list[str]] = None) -> int:
    """CLI entrypoint; returns the process exit code."""
    args = build_parser().parse_args(argv)
    return handle_run(args)


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
