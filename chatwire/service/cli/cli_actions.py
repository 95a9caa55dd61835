"""CLI action handler.

Runs one chat turn through :class:`ChatDispatcher` and renders the events:
text to stdout, thinking to stderr and tool calls as JSON lines on stdout.
With ``--json`` every event is printed as one JSON line instead.

Exit codes: 0 success, 1 provider or configuration error, 130 interrupted.
"""

from __future__ import annotations

import argparse
import getpass
import json
import sys
from typing import Callable, List, Optional, TextIO

from ...base.cancellation import CancellationToken, CancelledError
from ...base.errors import ProviderError, TransportError
from ...base.logging import configure_logger
from ...base.models import CanonicalMessage
from ...base.repositories import CredentialResolver
from ...base.streaming import StreamEvent, TextDelta, ThinkingDelta, ThinkingEnd, ToolCall, event_to_dict
from ...config import load_settings
from ..dispatcher import ChatDispatcher


def _prompt_secret(title: str) -> Optional[str]:
    return getpass.getpass(f"{title}: ")


def build_messages(args: argparse.Namespace) -> List[CanonicalMessage]:
    messages: List[CanonicalMessage] = []
    if args.system:
        messages.append(CanonicalMessage.system(args.system))
    messages.append(CanonicalMessage.user(args.prompt))
    return messages


def render_event(event: StreamEvent, *, as_json: bool, out: TextIO, err: TextIO) -> None:
    """Write one event to the output streams."""
    if as_json:
        out.write(json.dumps(event_to_dict(event), ensure_ascii=False) + "\n")
    elif isinstance(event, TextDelta):
        out.write(event.text)
    elif isinstance(event, ThinkingDelta):
        err.write(event.text)
    elif isinstance(event, ThinkingEnd):
        err.write("\n")
    elif isinstance(event, ToolCall):
        out.write("\n" + json.dumps({"tool_call": event_to_dict(event)}, ensure_ascii=False) + "\n")
    else:
        out.write("\n")
    out.flush()
    err.flush()


def handle_run(
    args: argparse.Namespace,
    *,
    dispatcher_factory: Optional[Callable[[argparse.Namespace], ChatDispatcher]] = None,
    out: Optional[TextIO] = None,
    err: Optional[TextIO] = None,
) -> int:
    """Execute one turn; errors are reported on ``err`` as a single line."""
    out = out if out is not None else sys.stdout
    err = err if err is not None else sys.stderr
    if args.log_level or args.log_file:
        configure_logger(level=args.log_level, file_path=args.log_file)
    token = CancellationToken()
    try:
        if dispatcher_factory is not None:
            dispatcher = dispatcher_factory(args)
        else:
            credentials = CredentialResolver(prompt=_prompt_secret if args.prompt_key else None)
            dispatcher = ChatDispatcher(load_settings(args.settings), credentials=credentials)
        for event in dispatcher.stream(args.model, build_messages(args), token=token):
            render_event(event, as_json=args.json, out=out, err=err)
    except KeyboardInterrupt:
        token.cancel("interrupted")
        err.write("\ninterrupted\n")
        return 130
    except CancelledError:
        err.write("\ncancelled\n")
        return 130
    except TransportError as exc:
        err.write(exc.user_message() + "\n")
        return 1
    except ProviderError as exc:
        err.write(f"{exc.code.value}: {exc.message}\n")
        return 1
    return 0


__all__ = ["build_messages", "render_event", "handle_run"]
