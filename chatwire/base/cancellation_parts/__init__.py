"""Implementation modules behind :mod:`chatwire.base.cancellation`."""
