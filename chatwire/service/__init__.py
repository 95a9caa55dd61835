"""Service layer: chat dispatcher and the command-line entrypoint."""

from .dispatcher import ChatDispatcher, PreparedRequest

__all__ = ["ChatDispatcher", "PreparedRequest"]
