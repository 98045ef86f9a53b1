import yaml

from softgen import config as config_module
from softgen.config import Config
from softgen.llm.base import DEFAULT_SAMPLING


def test_first_load_creates_template(isolated_home, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    config = Config.load()

    assert (isolated_home / "config.yaml").exists()
    assert config.api_key == ""
    assert config.default_model == 1
    assert config.sampling == DEFAULT_SAMPLING


def test_load_config_from_local_yaml(tmp_path, monkeypatch):
    """Local .softgen.yaml overrides the global file."""
    config_module.ensure_config_file()
    config_module.CONFIG_FILE.write_text(yaml.dump({"api_key": "global-key", "output_dir": "global-out"}))

    (tmp_path / ".softgen.yaml").write_text(yaml.dump({
        "api_key": "local-key",
        "ollama_model": "qwen2.5-coder",
        "sampling": {"temperature": 0.3},
        "debug": True,
        "unknown_key": "ignored",
    }))
    monkeypatch.chdir(tmp_path)

    config = Config.load()

    assert config.api_key == "local-key"
    assert config.output_dir == "global-out"
    assert config.ollama_model == "qwen2.5-coder"
    assert config.sampling["temperature"] == 0.3
    assert config.sampling["top_p"] == DEFAULT_SAMPLING["top_p"]
    assert config.debug is True


def test_env_override_yaml(tmp_path, monkeypatch):
    """Environment variables override YAML config."""
    (tmp_path / ".softgen.yaml").write_text(yaml.dump({"api_key": "from-yaml"}))
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("DEEPSEEK_API_KEY", "from-env")
    monkeypatch.setenv("SOFTGEN_OLLAMA_URL", "http://gpu-box:11434")
    monkeypatch.setenv("SOFTGEN_DEBUG", "true")

    config = Config.load()

    assert config.api_key == "from-env"
    assert config.ollama_base_url == "http://gpu-box:11434"
    assert config.debug is True


def test_invalid_yaml_is_ignored(tmp_path, monkeypatch):
    (tmp_path / ".softgen.yaml").write_text("api_key: [unclosed")
    monkeypatch.chdir(tmp_path)

    assert Config.load().api_key == ""


def test_validate():
    assert Config(api_key="sk").validate() == []

    errors = Config(api_key="", default_model=3, request_timeout=0).validate()
    assert len(errors) == 3
    assert "DEEPSEEK_API_KEY" in errors[0]
