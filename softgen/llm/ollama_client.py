"""Local Ollama client (native /api/generate endpoint)."""

from typing import TYPE_CHECKING, Optional

import httpx

from .base import BaseLLM
from ..errors import SoftgenError, TransportError, UpstreamError

if TYPE_CHECKING:
    from ..logging import RunLogger

DEFAULT_OLLAMA_URL = "http://localhost:11434"
DEFAULT_OLLAMA_MODEL = "deepseek-coder:6.7b"


class OllamaClient(BaseLLM):
    """Non-streaming text generation against a local Ollama server."""

    def __init__(
        self,
        http_client: httpx.Client,
        base_url: str = "",
        model: str = "",
        temperature: float = 0.2,
        logger: Optional["RunLogger"] = None,
    ):
        self.http_client = http_client
        self.base_url = (base_url or DEFAULT_OLLAMA_URL).rstrip("/")
        self.model = model or DEFAULT_OLLAMA_MODEL
        self.temperature = temperature
        self.logger = logger

    def generate(self, prompt: str, temperature: Optional[float] = None, top_p: float = 0.9) -> str:
        """Generate a completion and return the `response` text.

        Raises:
            TransportError: server unreachable or read failed
            UpstreamError: non-200 status
            SoftgenError: body is not a JSON object
        """
        payload = {
            "model": self.model,
            "prompt": prompt,
            "stream": False,
            "options": {
                "temperature": self.temperature if temperature is None else temperature,
                "top_p": top_p,
            },
        }
        if self.logger:
            self.logger.log_request(self.model, prompt)

        try:
            response = self.http_client.post(f"{self.base_url}/api/generate", json=payload)
        except httpx.HTTPError as e:
            raise TransportError(f"ollama request failed: {e}", cause=e) from e

        if response.status_code != 200:
            raise UpstreamError(response.status_code, response.text)

        try:
            data = response.json()
        except ValueError as e:
            raise SoftgenError(f"unmarshal ollama response: {e}") from e
        if not isinstance(data, dict):
            raise SoftgenError("unmarshal ollama response: not a JSON object")

        text = data.get("response") or ""
        if self.logger:
            self.logger.log_response(self.model, text)
        return text

    def complete(self, prompt: str) -> str:
        return self.generate(prompt)

    def check_service(self) -> None:
        """Verify the server answers on /api/tags."""
        try:
            response = self.http_client.get(f"{self.base_url}/api/tags")
        except httpx.HTTPError as e:
            raise TransportError(f"cannot reach ollama at {self.base_url}: {e}", cause=e) from e
        if response.status_code != 200:
            raise UpstreamError(response.status_code, response.text)
