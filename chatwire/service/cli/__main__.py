"""Allows ``python -m chatwire.service.cli [args]``."""

from __future__ import annotations

from . import main

if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
