"""LLM clients."""

from .base import BaseLLM, ChatModel, ChatRequest, Message, StreamFrame
from .deepseek_stream import DeepSeekStreamClient, StreamingChatAggregator, aggregate_lines
from .ollama_client import OllamaClient
from .openai_client import OpenAIClient

__all__ = [
    "BaseLLM",
    "ChatModel",
    "ChatRequest",
    "Message",
    "StreamFrame",
    "DeepSeekStreamClient",
    "StreamingChatAggregator",
    "aggregate_lines",
    "OllamaClient",
    "OpenAIClient",
]
