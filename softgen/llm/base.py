"""Base LLM client interface and wire records."""

import json
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import IntEnum
from typing import Any, Optional


class ChatModel(IntEnum):
    """DeepSeek model selector, indexed the way the CLI exposes it."""
    CHAT = 0
    REASONER = 1

    @property
    def model_name(self) -> str:
        return _MODEL_NAMES[self]


_MODEL_NAMES = {
    ChatModel.CHAT: "deepseek-chat",
    ChatModel.REASONER: "deepseek-reasoner",
}

# Tuned for long-form generation: max output, slightly chatty, low repetition.
DEFAULT_SAMPLING = {
    "max_tokens": 8192 * 3,
    "temperature": 0.7,
    "presence_penalty": 0.5,
    "frequency_penalty": 0.3,
    "top_p": 0.95,
}


@dataclass(frozen=True)
class Message:
    """Chat message."""
    role: str  # "system", "user", "assistant"
    content: str

    def to_dict(self) -> dict:
        return {"role": self.role, "content": self.content}


@dataclass(frozen=True)
class ChatRequest:
    """Chat completion request body."""
    model: str
    messages: tuple[Message, ...]
    stream: bool = True
    # (name, value) pairs, flattened into the body
    sampling: tuple[tuple[str, float], ...] = tuple(DEFAULT_SAMPLING.items())

    @classmethod
    def for_prompt(
        cls,
        prompt: str,
        model: ChatModel,
        sampling: Optional[dict[str, float]] = None,
    ) -> "ChatRequest":
        """Build a single-user-message streaming request."""
        options = dict(DEFAULT_SAMPLING)
        if sampling:
            options.update(sampling)
        return cls(
            model=model.model_name,
            messages=(Message(role="user", content=prompt),),
            stream=True,
            sampling=tuple(options.items()),
        )

    def to_payload(self) -> dict[str, Any]:
        """Serialize to the JSON body; sampling options sit at the top level."""
        payload: dict[str, Any] = {
            "model": self.model,
            "messages": [m.to_dict() for m in self.messages],
            "stream": self.stream,
        }
        payload.update(self.sampling)
        return payload


@dataclass(frozen=True)
class StreamDelta:
    """Incremental text carried by one choice of a stream frame."""
    content: str = ""


@dataclass(frozen=True)
class StreamFrame:
    """One decoded `data:` line of a streamed chat completion."""
    deltas: tuple[StreamDelta, ...] = ()

    @property
    def text(self) -> str:
        """Delta text of the first choice, or empty string."""
        return self.deltas[0].content if self.deltas else ""

    @classmethod
    def from_json(cls, data: str) -> Optional["StreamFrame"]:
        """Decode a frame payload.

        Unknown fields are ignored. Returns None when the payload is not
        valid JSON or does not have the `{choices: [{delta: {content}}]}`
        shape, so the caller can skip it.
        """
        try:
            raw = json.loads(data)
        except ValueError:
            return None
        if not isinstance(raw, dict):
            return None

        choices = raw.get("choices") or []
        if not isinstance(choices, list):
            return None

        deltas = []
        for choice in choices:
            if not isinstance(choice, dict):
                return None
            delta = choice.get("delta") or {}
            if not isinstance(delta, dict):
                return None
            content = delta.get("content") or ""
            if not isinstance(content, str):
                return None
            deltas.append(StreamDelta(content=content))
        return cls(deltas=tuple(deltas))


class BaseLLM(ABC):
    """Abstract base class for text completers used by the workflows."""

    @abstractmethod
    def complete(self, prompt: str) -> str:
        """Send a single prompt and return the full response text."""
        pass
