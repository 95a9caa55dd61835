"""Chat dispatcher: one canonical chat turn against a configured model.

Flow of :meth:`ChatDispatcher.stream`:

1. look up the model configuration (``id::config_id``), falling back to a
   default chat-completions entry;
2. validate the base URL and resolve the credential; both fail with
   :class:`InvalidConfiguration` before any network call;
3. build the request body through the protocol family table;
4. wait for the pacing slot, open the stream under the retry executor and
   pump the response bytes through the family parser;
5. close the response on completion, error or cancellation.

Cancellation closes the in-flight response from the cancelling thread so a
blocked read returns promptly; the turn then raises ``CancelledError`` and no
further events (``StreamEnd`` included) are yielded.
"""

from __future__ import annotations

import json
import logging
import time
import uuid
from contextlib import ExitStack
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterator, List, Optional, Sequence

import httpx

from ..base.cancellation import CancellationToken, CancelledError
from ..base.constants import REASONING_CACHE_MAX_ENTRIES, THINKING_FLUSH_INTERVAL_SECONDS
from ..base.errors import InvalidConfiguration, ProviderError, TransportError
from ..base.http import get_httpx_client
from ..base.logging import LogContext, get_logger, normalized_log_event
from ..base.models import BuildContext, CanonicalMessage, ModelConfig, RequestOptions
from ..base.repositories import CredentialResolver
from ..base.resilience.pacing import RequestPacer
from ..base.resilience.reasoning_cache import ReasoningCache
from ..base.resilience.retry import execute_with_retry
from ..base.streaming import StreamEvent, StreamParser, drive_stream
from ..config import ChatwireSettings, find_model_config, load_settings, parse_model_id
from ..protocols import ProtocolBinding, get_protocol
from ..version import __version__

_logger = get_logger("chatwire.dispatcher")

USER_AGENT = f"chatwire/{__version__}"


@dataclass
class PreparedRequest:
    """Everything resolved for one turn before the network is touched."""

    config: ModelConfig
    binding: ProtocolBinding
    url: str
    headers: Dict[str, str]
    body: Dict[str, Any]
    delay_ms: int
    log_context: LogContext
    diagnostics: List[str] = field(default_factory=list)


class ChatDispatcher:
    """Runs chat turns; safe to share between threads.

    Cross-turn state is limited to the request pacer and the reasoning cache.
    """

    def __init__(
        self,
        settings: Optional[ChatwireSettings] = None,
        *,
        client: Optional[httpx.Client] = None,
        credentials: Optional[CredentialResolver] = None,
        pacer: Optional[RequestPacer] = None,
        reasoning_cache: Optional[ReasoningCache] = None,
        thinking_interval: float = THINKING_FLUSH_INTERVAL_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.settings = settings if settings is not None else load_settings()
        self._client = client
        self.credentials = credentials if credentials is not None else CredentialResolver()
        self.pacer = pacer if pacer is not None else RequestPacer()
        self.reasoning_cache = (
            reasoning_cache if reasoning_cache is not None else ReasoningCache(REASONING_CACHE_MAX_ENTRIES)
        )
        self.thinking_interval = thinking_interval
        self.clock = clock

    @property
    def client(self) -> httpx.Client:
        return self._client if self._client is not None else get_httpx_client("stream")

    # ------------------------------------------------------------ resolution
    def resolve_model(self, model_id: str) -> ModelConfig:
        """Configured entry for ``model_id``, else a default chat-completions one."""
        found = find_model_config(self.settings.models, model_id)
        if found is not None:
            return found
        parsed = parse_model_id(model_id)
        return ModelConfig(id=parsed.base_id, config_id=parsed.config_id)

    def prepare(
        self,
        model_id: str,
        messages: Sequence[CanonicalMessage],
        options: Optional[RequestOptions] = None,
        *,
        request_id: Optional[str] = None,
    ) -> PreparedRequest:
        """Resolve configuration, credential, URL, headers and body.

        Raises:
            InvalidConfiguration: bad base URL or missing credential.
            InvalidToolConstraint: required tool mode without exactly one tool.
        """
        config = self.resolve_model(model_id)
        binding = get_protocol(config.protocol_family)
        family = binding.family.value
        ctx = LogContext(provider=family, model=config.full_id, request_id=request_id or uuid.uuid4().hex[:12])

        base_url = config.base_url or self.settings.base_url or ""
        if not base_url.startswith("http"):
            raise InvalidConfiguration(
                f"invalid base URL {base_url!r} for model {config.full_id}", provider=family, model=config.id
            )

        api_key = self.credentials.get_api_key(config.credential_ref, use_generic_key=not config.base_url)
        if not api_key and not binding.credential_optional:
            raise InvalidConfiguration(
                f"API key not found for model {config.full_id}", provider=family, model=config.id
            )

        headers = {"Content-Type": "application/json", "User-Agent": USER_AGENT}
        headers.update(binding.auth_headers(api_key))
        headers.update(config.headers)

        build_ctx = BuildContext(reasoning_cache=self.reasoning_cache, log_context=ctx)
        body = binding.build(messages, config, options or RequestOptions(), build_ctx)
        delay_ms = config.delay_ms if config.delay_ms is not None else self.settings.delay_ms
        return PreparedRequest(
            config=config,
            binding=binding,
            url=binding.url(base_url, config.id),
            headers=headers,
            body=body,
            delay_ms=delay_ms,
            log_context=ctx,
            diagnostics=build_ctx.diagnostics,
        )

    def new_parser(self, request: PreparedRequest) -> StreamParser:
        return request.binding.new_parser(
            reasoning_cache=self.reasoning_cache,
            thinking_interval=self.thinking_interval,
            clock=self.clock,
            cumulative_reasoning=request.config.cumulative_reasoning,
            log_context=request.log_context,
        )

    # ------------------------------------------------------------- streaming
    def stream(
        self,
        model_id: str,
        messages: Sequence[CanonicalMessage],
        options: Optional[RequestOptions] = None,
        token: Optional[CancellationToken] = None,
        *,
        request_id: Optional[str] = None,
    ) -> Iterator[StreamEvent]:
        """Yield the canonical events of one chat turn, ending with ``StreamEnd``.

        Raises:
            InvalidConfiguration: before any network call.
            TransportError: non-success status after retries.
            ToolCallAssemblyError: invalid tool-call arguments at a definitive end.
            CancelledError: the token fired; output so far is not retracted.
        """
        token = token if token is not None else CancellationToken()
        request = self.prepare(model_id, messages, options, request_id=request_id)
        ctx = request.log_context
        parser = self.new_parser(request)
        policy = self.settings.retry_policy
        emitted = 0
        normalized_log_event(
            _logger,
            "chat.start",
            ctx,
            phase="start",
            url=request.url,
            delay_ms=request.delay_ms,
            diagnostics=len(request.diagnostics) or None,
        )
        try:
            with self.pacer.slot(request.delay_ms, token, ctx), ExitStack() as stack:
                response = execute_with_retry(
                    lambda: self._open(request, token),
                    policy,
                    token=token,
                    attempt_logger=self._attempt_logger(ctx),
                )
                stack.callback(response.close)
                stack.callback(token.on_cancel(response.close))
                for event in drive_stream(self._iter_body(response, request, token), parser, token):
                    emitted += 1
                    yield event
        except CancelledError as exc:
            parser.abandon()
            normalized_log_event(
                _logger, "chat.cancelled", ctx, phase="cancelled", emitted=emitted, reason=str(exc)
            )
            raise
        except ProviderError as exc:
            normalized_log_event(
                _logger,
                "chat.error",
                ctx,
                phase="error",
                level=logging.ERROR,
                error_code=exc.code.value,
                emitted=emitted,
                detail=exc.message,
            )
            raise
        normalized_log_event(
            _logger, "chat.end", ctx, phase="end", emitted=emitted, decode_errors=parser.decode_errors or None
        )

    def _open(self, request: PreparedRequest, token: CancellationToken) -> httpx.Response:
        """One attempt: send the request and return the open streaming response."""
        token.raise_if_cancelled()
        http_request = self.client.build_request(
            "POST",
            request.url,
            headers=request.headers,
            content=json.dumps(request.body, ensure_ascii=False).encode("utf-8"),
        )
        family = request.binding.family.value
        try:
            response = self.client.send(http_request, stream=True)
        except httpx.HTTPError as exc:
            if token.cancelled:
                raise CancelledError(token.reason or "operation cancelled") from exc
            raise TransportError(
                status_code=None, reason=str(exc), url=request.url, family=family, model=request.config.id, raw=exc
            ) from exc
        if response.is_success:
            return response
        try:
            response.read()
            body = response.text
        finally:
            response.close()
        raise TransportError(
            status_code=response.status_code,
            body=body,
            url=request.url,
            family=family,
            model=request.config.id,
            reason=response.reason_phrase,
        )

    @staticmethod
    def _iter_body(response: httpx.Response, request: PreparedRequest, token: CancellationToken) -> Iterator[bytes]:
        try:
            yield from response.iter_bytes()
        except (httpx.HTTPError, httpx.StreamError) as exc:
            if token.cancelled:
                raise CancelledError(token.reason or "operation cancelled") from exc
            raise TransportError(
                status_code=None,
                reason=str(exc),
                url=request.url,
                family=request.binding.family.value,
                model=request.config.id,
                raw=exc,
            ) from exc

    @staticmethod
    def _attempt_logger(ctx: LogContext):
        def log_attempt(*, attempt: int, max_attempts: int, delay: Optional[float], error: Optional[ProviderError]) -> None:
            if error is None:
                return
            normalized_log_event(
                _logger,
                "retry.attempt",
                ctx,
                phase="retry",
                attempt=attempt,
                level=logging.WARNING,
                error_code=error.code.value,
                max_attempts=max_attempts,
                retry_in_s=delay,
                status_code=getattr(error, "status_code", None),
            )

        return log_attempt


__all__ = ["ChatDispatcher", "PreparedRequest", "USER_AGENT"]
