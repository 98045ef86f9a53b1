"""Streaming DeepSeek chat client.

Issues one POST with `stream: true` and folds the server-sent `data:`
lines into a single string.
"""

from typing import TYPE_CHECKING, Callable, Iterable, Iterator, Optional

import httpx

from .base import BaseLLM, ChatModel, ChatRequest, StreamFrame
from ..errors import MissingCredentialError, TransportError, UpstreamError

if TYPE_CHECKING:
    from ..abort_controller import AbortController
    from ..logging import RunLogger

DEEPSEEK_COMPLETIONS_URL = "https://api.deepseek.com/v1/chat/completions"
DATA_PREFIX = "data: "
DONE_SENTINEL = "data: [DONE]"


def build_http_client(timeout: float = 60.0) -> httpx.Client:
    """HTTP client with a bounded connect/read timeout."""
    return httpx.Client(timeout=httpx.Timeout(timeout, connect=min(timeout, 10.0)))


def split_lines(chunks: Iterable[bytes]) -> Iterator[str]:
    """Split a byte stream on newline bytes only and decode each line as UTF-8.

    `str.splitlines` also breaks on U+2028, U+2029 and U+0085, which JSON
    strings may carry unescaped.
    """
    buf = b""
    for chunk in chunks:
        buf += chunk
        *lines, buf = buf.split(b"\n")
        for line in lines:
            yield line.decode("utf-8", errors="replace")
    if buf:
        yield buf.decode("utf-8", errors="replace")


def aggregate_lines(
    lines: Iterable[str],
    cancel: Optional["AbortController"] = None,
    on_delta: Optional[Callable[[str], None]] = None,
) -> str:
    """Concatenate delta text from a stream of SSE lines.

    Stops at the `[DONE]` sentinel. Lines without the `data: ` prefix
    (keep-alives, comments) and frames that fail to decode are skipped.
    Running out of lines without a sentinel returns what accumulated.
    """
    buf: list[str] = []
    for line in lines:
        if cancel is not None:
            cancel.check()

        line = line.strip()
        if line == DONE_SENTINEL:
            break
        if not line.startswith(DATA_PREFIX):
            continue

        frame = StreamFrame.from_json(line[len(DATA_PREFIX):])
        if frame is None:
            continue

        text = frame.text
        if text:
            buf.append(text)
            if on_delta is not None:
                on_delta(text)
    return "".join(buf)


class StreamingChatAggregator:
    """Runs one streamed chat completion and returns the assembled text.

    The HTTP client is supplied by the caller and is not closed here.
    """

    def __init__(
        self,
        http_client: httpx.Client,
        endpoint: str = DEEPSEEK_COMPLETIONS_URL,
        sampling: Optional[dict[str, float]] = None,
        logger: Optional["RunLogger"] = None,
    ):
        self.http_client = http_client
        self.endpoint = endpoint
        self.sampling = sampling or {}
        self.logger = logger

    def aggregate(
        self,
        prompt: str,
        api_key: str,
        model: ChatModel = ChatModel.CHAT,
        cancel: Optional["AbortController"] = None,
        on_delta: Optional[Callable[[str], None]] = None,
    ) -> str:
        """Send `prompt` and return the full streamed reply.

        Raises:
            MissingCredentialError: api_key is blank (no request is sent)
            UpstreamError: non-2xx response status
            TransportError: connection/read failure or cancellation
        """
        if not api_key.strip():
            raise MissingCredentialError("deepseek api key empty")

        request = ChatRequest.for_prompt(prompt, model, self.sampling)
        if self.logger:
            self.logger.log_request(request.model, prompt)
        if cancel is not None:
            cancel.check()

        try:
            text = self._stream(request, api_key, cancel, on_delta)
        except (httpx.HTTPError, httpx.StreamError) as e:
            if cancel is not None and cancel.is_aborted:
                error = TransportError("request cancelled", cause=e, cancelled=True)
            else:
                error = TransportError(f"deepseek request failed: {e}", cause=e)
            if self.logger:
                self.logger.log_error(str(error))
            raise error from e
        except (UpstreamError, TransportError) as e:
            if self.logger:
                self.logger.log_error(str(e))
            raise

        if self.logger:
            self.logger.log_response(request.model, text)
        return text

    def _stream(
        self,
        request: ChatRequest,
        api_key: str,
        cancel: Optional["AbortController"],
        on_delta: Optional[Callable[[str], None]],
    ) -> str:
        headers = {
            "Authorization": f"Bearer {api_key}",
            "Content-Type": "application/json",
        }
        with self.http_client.stream(
            "POST", self.endpoint, json=request.to_payload(), headers=headers
        ) as response:
            # Closing the response unblocks a pending read on abort
            remove_listener = cancel.on_abort(response.close) if cancel is not None else None
            try:
                if not response.is_success:
                    response.read()
                    raise UpstreamError(response.status_code, response.text)

                lines = split_lines(response.iter_bytes())
                text = aggregate_lines(lines, cancel=cancel, on_delta=on_delta)
                if cancel is not None:
                    cancel.check()
                return text
            finally:
                if remove_listener is not None:
                    remove_listener()


class DeepSeekStreamClient(BaseLLM):
    """BaseLLM adapter binding a credential and model to the aggregator."""

    def __init__(
        self,
        aggregator: StreamingChatAggregator,
        api_key: str,
        model: ChatModel = ChatModel.CHAT,
        cancel: Optional["AbortController"] = None,
        on_delta: Optional[Callable[[str], None]] = None,
    ):
        self.aggregator = aggregator
        self.api_key = api_key
        self.model = model
        self.cancel = cancel
        self.on_delta = on_delta

    def complete(self, prompt: str) -> str:
        return self.aggregator.aggregate(
            prompt,
            self.api_key,
            model=self.model,
            cancel=self.cancel,
            on_delta=self.on_delta,
        )
