"""CLI parser construction for the ``chatwire`` command.

Wires argument shapes only; the handler lives in ``cli_actions``.
"""

from __future__ import annotations

import argparse

from ...config.defaults import CLI_PROG


def build_parser() -> argparse.ArgumentParser:
    """Construct the CLI parser (no side effects, no I/O)."""
    p = argparse.ArgumentParser(
        prog=CLI_PROG,
        description="Send one user turn to a configured model and stream the reply",
    )
    p.add_argument("prompt", help="User message text")
    p.add_argument("--model", required=True, help="Model id, optionally id::config_id")
    p.add_argument("--settings", default=None, help="Settings file (JSON or YAML)")
    p.add_argument("--system", default=None, help="System message text")
    p.add_argument(
        "--prompt-key",
        action="store_true",
        help="Ask for the API key interactively when none is stored",
    )
    p.add_argument("--json", action="store_true", help="Print every event as one JSON line")
    p.add_argument("--log-level", default=None, help="Log level for the chatwire logger (e.g. INFO)")
    p.add_argument("--log-file", default=None, help="Also write logs to this rotating file")
    return p


__all__ = ["build_parser"]
