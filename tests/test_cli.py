"""CLI tests with mocked HTTP."""

import json

import httpx
import pytest
from click.testing import CliRunner

from softgen import main
from softgen.main import cli


def frame(text):
    return "data: " + json.dumps({"choices": [{"delta": {"content": text}}]})


def use_transport(monkeypatch, handler):
    monkeypatch.setattr(
        main, "build_http_client",
        lambda timeout: httpx.Client(transport=httpx.MockTransport(handler)),
    )


@pytest.fixture
def runner():
    return CliRunner()


def test_version(runner):
    result = runner.invoke(cli, ["--version"])
    assert result.exit_code == 0
    assert "0.1.0" in result.output


class TestGenerate:

    def test_generate_manual(self, runner, tmp_path, monkeypatch):
        monkeypatch.setenv("DEEPSEEK_API_KEY", "sk-test")
        requests = []

        def handler(request):
            requests.append(json.loads(request.content))
            body = "\n".join([frame("# Tetris"), frame(" Manual"), "data: [DONE]"]) + "\n"
            return httpx.Response(200, content=body.encode())

        use_transport(monkeypatch, handler)
        out = tmp_path / "out"

        result = runner.invoke(cli, ["generate", "-n", "Tetris", "-t", "manual", "-m", "0", "-o", str(out)])

        assert result.exit_code == 0, result.output
        assert (out / "manual.md").read_text(encoding="utf-8") == "# Tetris Manual"
        assert requests[0]["model"] == "deepseek-chat"
        assert "Tetris" in requests[0]["messages"][0]["content"]

    def test_generate_all_uses_default_model(self, runner, tmp_path, monkeypatch):
        monkeypatch.setenv("DEEPSEEK_API_KEY", "sk-test")
        models = []

        def handler(request):
            models.append(json.loads(request.content)["model"])
            return httpx.Response(200, content=(frame("text") + "\ndata: [DONE]\n").encode())

        use_transport(monkeypatch, handler)

        result = runner.invoke(cli, ["generate", "-n", "Tetris", "-t", "all", "-o", str(tmp_path)])

        assert result.exit_code == 0, result.output
        assert models == ["deepseek-reasoner", "deepseek-reasoner"]
        assert (tmp_path / "manual.md").exists()
        assert (tmp_path / "code.md").exists()

    def test_missing_api_key(self, runner, tmp_path, monkeypatch):
        calls = []
        use_transport(monkeypatch, lambda request: calls.append(request))

        result = runner.invoke(cli, ["generate", "-n", "Tetris", "-t", "manual", "-o", str(tmp_path)])

        assert result.exit_code == 1
        assert "API key not set" in result.output
        assert calls == []

    def test_upstream_error(self, runner, tmp_path, monkeypatch):
        monkeypatch.setenv("DEEPSEEK_API_KEY", "sk-test")
        use_transport(monkeypatch, lambda request: httpx.Response(401, text="invalid key"))

        result = runner.invoke(cli, ["generate", "-n", "Tetris", "-t", "code", "-o", str(tmp_path)])

        assert result.exit_code == 1
        assert "status=401" in result.output
        assert not (tmp_path / "code.md").exists()

    def test_empty_result(self, runner, tmp_path, monkeypatch):
        monkeypatch.setenv("DEEPSEEK_API_KEY", "sk-test")
        use_transport(monkeypatch, lambda request: httpx.Response(200, content=b"data: [DONE]\n"))

        result = runner.invoke(cli, ["generate", "-n", "Tetris", "-t", "manual", "-o", str(tmp_path)])

        assert result.exit_code == 1
        assert "empty manual" in result.output

    def test_unwritable_output_dir(self, runner, tmp_path, monkeypatch):
        monkeypatch.setenv("DEEPSEEK_API_KEY", "sk-test")
        use_transport(monkeypatch, lambda request: httpx.Response(200, content=(frame("text") + "\n").encode()))
        blocker = tmp_path / "not-a-dir"
        blocker.write_text("")

        result = runner.invoke(cli, ["generate", "-n", "Tetris", "-t", "manual", "-o", str(blocker)])

        assert result.exit_code == 1
        assert "write output" in result.output
        assert isinstance(result.exception, SystemExit)

    def test_unknown_type_rejected(self, runner):
        result = runner.invoke(cli, ["generate", "-n", "Tetris", "-t", "docs"])
        assert result.exit_code == 2


class FakeChatClient:
    def __init__(self, config, model="deepseek-chat"):
        self.model = model

    def complete(self, prompt):
        return "ROI is return on investment."

    def chat_json(self, prompt):
        return {"definition": "return on investment", "example": "spend 1, earn 3"}


def test_ask_json(runner, monkeypatch):
    monkeypatch.setattr(main, "OpenAIClient", FakeChatClient)

    result = runner.invoke(cli, ["ask", "What is ROI?", "--json"])

    assert result.exit_code == 0, result.output
    assert "definition: return on investment" in result.output
    assert "example: spend 1, earn 3" in result.output


def test_ask_without_key(runner):
    result = runner.invoke(cli, ["ask", "What is ROI?"])
    assert result.exit_code == 1
    assert "api key empty" in result.output


class TestCodegen:

    def test_struct(self, runner, tmp_path, monkeypatch):
        prompts = []

        def handler(request):
            if request.url.path == "/api/tags":
                return httpx.Response(200, json={"models": []})
            prompts.append(json.loads(request.content)["prompt"])
            return httpx.Response(200, json={"response": "```go\ntype User struct{}\n```"})

        use_transport(monkeypatch, handler)
        target = tmp_path / "user.go"

        result = runner.invoke(cli, [
            "codegen", "-o", str(target),
            "struct", "--name", "User", "-d", "user records", "--field", "ID", "--field", "Email",
        ])

        assert result.exit_code == 0, result.output
        assert target.read_text() == "type User struct{}\n"
        assert "ID, Email" in prompts[0]

    def test_unwritable_target(self, runner, tmp_path, monkeypatch):
        def handler(request):
            if request.url.path == "/api/tags":
                return httpx.Response(200, json={"models": []})
            return httpx.Response(200, json={"response": "func Auth() {}"})

        use_transport(monkeypatch, handler)
        blocker = tmp_path / "not-a-dir"
        blocker.write_text("")

        result = runner.invoke(cli, [
            "codegen", "-o", str(blocker / "auth.go"), "middleware", "--name", "Auth", "-d", "jwt",
        ])

        assert result.exit_code == 1
        assert "write output" in result.output
        assert isinstance(result.exception, SystemExit)

    def test_service_unreachable(self, runner, monkeypatch):
        def handler(request):
            raise httpx.ConnectError("refused")

        use_transport(monkeypatch, handler)

        result = runner.invoke(cli, ["codegen", "middleware", "--name", "Auth", "-d", "jwt"])

        assert result.exit_code == 1
        assert "cannot reach ollama" in result.output


def test_check_ollama(runner, monkeypatch):
    use_transport(monkeypatch, lambda request: httpx.Response(200, json={"models": []}))
    result = runner.invoke(cli, ["check-ollama"])
    assert result.exit_code == 0
    assert "Ollama is running" in result.output

    use_transport(monkeypatch, lambda request: httpx.Response(500))
    result = runner.invoke(cli, ["check-ollama"])
    assert result.exit_code == 1
    assert "ollama serve" in result.output
