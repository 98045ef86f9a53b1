"""Configuration and environment variables."""

import os
from dataclasses import dataclass, field
from pathlib import Path

import yaml

from .llm.base import DEFAULT_SAMPLING
from .llm.deepseek_stream import DEEPSEEK_COMPLETIONS_URL
from .llm.ollama_client import DEFAULT_OLLAMA_MODEL, DEFAULT_OLLAMA_URL

# Global config directory
CONFIG_DIR = Path.home() / ".softgen"
CONFIG_FILE = CONFIG_DIR / "config.yaml"
LOCAL_CONFIG_NAME = ".softgen.yaml"

# Template for new config file
CONFIG_TEMPLATE = """# softgen configuration
# Environment variables override these values (DEEPSEEK_API_KEY, SOFTGEN_*).

# DeepSeek credentials; leave empty to use DEEPSEEK_API_KEY
api_key: ""

# Streaming completions endpoint and per-read timeout in seconds
endpoint: "https://api.deepseek.com/v1/chat/completions"
request_timeout: 60.0

# OpenAI-compatible base URL used by `softgen ask`
chat_base_url: "https://api.deepseek.com"
chat_timeout: 30.0

# 0 = deepseek-chat, 1 = deepseek-reasoner
default_model: 1

# Sampling options sent with streamed requests
# sampling:
#   max_tokens: 24576
#   temperature: 0.7
#   presence_penalty: 0.5
#   frequency_penalty: 0.3
#   top_p: 0.95

# Local Ollama server used by `softgen codegen`
ollama_base_url: "http://localhost:11434"
ollama_model: "deepseek-coder:6.7b"
ollama_timeout: 60.0

# Where generated markdown is written
output_dir: "output"

# Directory with custom prompt templates (empty = packaged templates)
prompts_dir: ""

debug: false
"""


def ensure_config_dir() -> Path:
    """Create config directory if it doesn't exist."""
    if not CONFIG_DIR.exists():
        CONFIG_DIR.mkdir(parents=True, exist_ok=True)
    return CONFIG_DIR


def ensure_config_file() -> Path:
    """Create template config file if it doesn't exist."""
    ensure_config_dir()
    if not CONFIG_FILE.exists():
        CONFIG_FILE.write_text(CONFIG_TEMPLATE)
    return CONFIG_FILE


@dataclass
class Config:
    """Application configuration."""

    # DeepSeek
    api_key: str = ""
    endpoint: str = DEEPSEEK_COMPLETIONS_URL
    request_timeout: float = 60.0
    chat_base_url: str = "https://api.deepseek.com"
    chat_timeout: float = 30.0
    default_model: int = 1
    sampling: dict = field(default_factory=lambda: dict(DEFAULT_SAMPLING))

    # Ollama
    ollama_base_url: str = DEFAULT_OLLAMA_URL
    ollama_model: str = DEFAULT_OLLAMA_MODEL
    ollama_timeout: float = 60.0

    # Files
    output_dir: str = "output"
    prompts_dir: str = ""

    debug: bool = False

    @classmethod
    def load(cls) -> "Config":
        """Load configuration from file and environment variables.

        Config priority (later overrides earlier):
        1. ~/.softgen/config.yaml (global)
        2. .softgen.yaml (local project)
        3. Environment variables
        """
        config_data = {}
        sampling = dict(DEFAULT_SAMPLING)

        # Ensure global config exists (creates template on first run)
        ensure_config_file()

        config_paths = [
            str(CONFIG_FILE),
            os.path.join(os.getcwd(), LOCAL_CONFIG_NAME),
        ]

        for path in config_paths:
            if os.path.exists(path):
                try:
                    with open(path, "r", encoding="utf-8") as f:
                        file_data = yaml.safe_load(f) or {}
                except (OSError, yaml.YAMLError):
                    continue  # Unreadable config files are ignored
                if not isinstance(file_data, dict):
                    continue

                if isinstance(file_data.get("sampling"), dict):
                    sampling.update(file_data.pop("sampling"))
                config_data.update(file_data)

        valid_fields = {k: v for k, v in config_data.items()
                        if k in cls.__dataclass_fields__ and k != "sampling"}
        config = cls(**valid_fields)
        config.sampling = sampling

        # Override with environment variables (highest priority)
        env_api_key = os.getenv("DEEPSEEK_API_KEY", os.getenv("SOFTGEN_API_KEY", ""))
        if env_api_key:
            config.api_key = env_api_key

        env_endpoint = os.getenv("SOFTGEN_ENDPOINT", "")
        if env_endpoint:
            config.endpoint = env_endpoint

        env_ollama_url = os.getenv("SOFTGEN_OLLAMA_URL", "")
        if env_ollama_url:
            config.ollama_base_url = env_ollama_url

        env_ollama_model = os.getenv("SOFTGEN_OLLAMA_MODEL", "")
        if env_ollama_model:
            config.ollama_model = env_ollama_model

        env_output_dir = os.getenv("SOFTGEN_OUTPUT_DIR", "")
        if env_output_dir:
            config.output_dir = env_output_dir

        if os.getenv("SOFTGEN_DEBUG"):
            config.debug = os.getenv("SOFTGEN_DEBUG", "").lower() == "true"

        return config

    def validate(self) -> list[str]:
        """Validate configuration, return list of errors."""
        errors = []
        if not self.api_key:
            errors.append(
                f"API key not set. Edit {CONFIG_FILE} or set DEEPSEEK_API_KEY env var"
            )
        if self.default_model not in (0, 1):
            errors.append(f"default_model must be 0 or 1, got {self.default_model!r}")
        if self.request_timeout <= 0:
            errors.append("request_timeout must be positive")
        return errors
