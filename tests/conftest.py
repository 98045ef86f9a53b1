import pytest

from softgen import config as config_module
from softgen import logging as logging_module

ENV_VARS = (
    "DEEPSEEK_API_KEY",
    "SOFTGEN_API_KEY",
    "SOFTGEN_ENDPOINT",
    "SOFTGEN_OLLAMA_URL",
    "SOFTGEN_OLLAMA_MODEL",
    "SOFTGEN_OUTPUT_DIR",
    "SOFTGEN_DEBUG",
)


@pytest.fixture(autouse=True)
def isolated_home(tmp_path, monkeypatch):
    """Keep config and run logs out of the real home directory."""
    home = tmp_path / "home"
    monkeypatch.setattr(config_module, "CONFIG_DIR", home)
    monkeypatch.setattr(config_module, "CONFIG_FILE", home / "config.yaml")
    monkeypatch.setattr(logging_module, "LOG_DIR", home / "logs")
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    return home
