"""One-class-per-file implementations behind :mod:`chatwire.base.errors`."""
