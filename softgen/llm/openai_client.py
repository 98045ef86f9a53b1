"""Single-shot DeepSeek chat over the OpenAI-compatible API."""

import json
import re
from typing import TYPE_CHECKING, Optional

from openai import APIConnectionError, APIStatusError, OpenAI

from .base import BaseLLM, Message
from ..errors import MissingCredentialError, SoftgenError, TransportError, UpstreamError

if TYPE_CHECKING:
    from ..config import Config

_FENCE_RE = re.compile(r"^```[a-zA-Z]*\s*\n?(.*?)\n?```$", re.DOTALL)


class OpenAIClient(BaseLLM):
    """OpenAI-compatible chat client, pointed at DeepSeek by default.

    Non-streaming: the whole reply arrives in one response body.
    """

    def __init__(self, config: "Config", model: str = "deepseek-chat", client: Optional[OpenAI] = None):
        if not config.api_key.strip():
            raise MissingCredentialError("deepseek api key empty")

        self.config = config
        self.model = model
        self.client = client or OpenAI(
            api_key=config.api_key,
            base_url=config.chat_base_url,
            timeout=config.chat_timeout,
            max_retries=0,
        )

    def chat(self, messages: list[Message]) -> str:
        """Send messages and get the complete response."""
        try:
            response = self.client.chat.completions.create(
                model=self.model,
                messages=[m.to_dict() for m in messages],
            )
        except APIStatusError as e:
            raise UpstreamError(e.status_code, e.response.text) from e
        except APIConnectionError as e:
            raise TransportError(f"deepseek request failed: {e}", cause=e) from e

        if not response.choices:
            raise SoftgenError("deepseek returned no choices")
        return response.choices[0].message.content or ""

    def complete(self, prompt: str) -> str:
        return self.chat([Message(role="user", content=prompt)])

    def chat_json(self, prompt: str) -> dict:
        """Ask for a JSON object and decode the reply.

        Models often wrap JSON in a fenced block; the fence is stripped.
        """
        reply = self.complete(prompt).strip()
        match = _FENCE_RE.match(reply)
        if match:
            reply = match.group(1).strip()

        try:
            data = json.loads(reply)
        except json.JSONDecodeError as e:
            raise SoftgenError(f"reply is not valid JSON: {e}") from e
        if not isinstance(data, dict):
            raise SoftgenError("reply is not a JSON object")
        return data
