"""softgen CLI entry point."""

import click
from rich.console import Console
from rich.markdown import Markdown
from rich.markup import escape
from rich.syntax import Syntax

from . import __version__
from .abort_controller import AbortController, abort_on_sigint
from .codegen import CodeGenerator
from .config import Config
from .errors import SoftgenError, TransportError
from .llm.base import ChatModel
from .llm.deepseek_stream import DeepSeekStreamClient, StreamingChatAggregator, build_http_client
from .llm.ollama_client import OllamaClient
from .llm.openai_client import OpenAIClient
from .logging import RunLogger
from .output import ArtifactKind, atomic_write
from .prompts import PromptStore
from .workflows import GENERATION_TYPES, run

console = Console()

STEP_LABELS = {
    ArtifactKind.MANUAL: "Generating user manual",
    ArtifactKind.CODE: "Generating source listing",
}


def _fail(message: str, logger: RunLogger = None) -> None:
    if logger:
        logger.log_error(message)
    console.print(f"[red]Error: {escape(message)}[/]")
    raise SystemExit(1)


@click.group()
@click.version_option(version=__version__)
def cli():
    """softgen - generate software documentation and code with LLMs."""


@cli.command()
@click.option("--name", "-n", required=True, help="Software name")
@click.option("--type", "-t", "kind", required=True, type=click.Choice(GENERATION_TYPES),
              help="What to generate")
@click.option("--model", "-m", type=click.IntRange(0, 1), default=None,
              help="Model: 0 deepseek-chat | 1 deepseek-reasoner")
@click.option("--output", "-o", "output_dir", default="", help="Output directory")
@click.option("--prompts", "-p", "prompts_dir", default="", help="Prompt templates directory")
def generate(name: str, kind: str, model: int, output_dir: str, prompts_dir: str):
    """Generate the user manual and/or source listing for NAME."""
    config = Config.load()
    errors = config.validate()
    if errors:
        for error in errors:
            console.print(f"[red]Error: {escape(error)}[/]")
        raise SystemExit(1)

    chat_model = ChatModel(config.default_model if model is None else model)
    output_dir = output_dir or config.output_dir
    store = PromptStore(prompts_dir or config.prompts_dir or None)
    logger = RunLogger("generate")

    console.print(f"[bold green]softgen v{__version__}[/]")
    console.print(f"[dim]Model: {chat_model.model_name}[/]")
    console.print(f"[dim]Output: {output_dir}[/]")
    if config.debug:
        console.print(f"[dim]Logs: {logger.log_path}[/]")

    controller = AbortController()
    received = 0

    with console.status("Connecting...") as status:
        label = ""

        def on_step(step: ArtifactKind) -> None:
            nonlocal label, received
            label = STEP_LABELS[step]
            received = 0
            status.update(f"{label} for {escape(name)}...")

        def on_delta(text: str) -> None:
            nonlocal received
            received += len(text)
            status.update(f"{label} for {escape(name)}... [dim]{received:,} chars[/]")

        try:
            with build_http_client(config.request_timeout) as http_client, abort_on_sigint(controller):
                aggregator = StreamingChatAggregator(
                    http_client,
                    endpoint=config.endpoint,
                    sampling=config.sampling,
                    logger=logger,
                )
                llm = DeepSeekStreamClient(
                    aggregator, config.api_key, chat_model, cancel=controller, on_delta=on_delta
                )
                paths = run(name, kind, llm, store, output_dir, logger=logger, on_step=on_step)
        except TransportError as e:
            if e.cancelled:
                _fail("cancelled", logger)
            _fail(str(e), logger)
        except SoftgenError as e:
            _fail(str(e), logger)
        except OSError as e:
            _fail(f"write output: {e}", logger)

    for path in paths:
        console.print(f"[green]Saved[/] {path}")


@cli.command()
@click.argument("prompt")
@click.option("--model", "-m", default="deepseek-chat", help="Chat model name")
@click.option("--json", "as_json", is_flag=True, help="Ask for a JSON object and print its fields")
def ask(prompt: str, model: str, as_json: bool):
    """Send a single PROMPT and print the reply."""
    config = Config.load()
    logger = RunLogger("ask")

    try:
        client = OpenAIClient(config, model=model)
        logger.log_request(model, prompt)
        if as_json:
            data = client.chat_json(prompt)
            logger.log_response(model, str(data))
            for key, value in data.items():
                console.print(f"[bold]{escape(str(key))}[/]: {escape(str(value))}")
        else:
            reply = client.complete(prompt)
            logger.log_response(model, reply)
            console.print(Markdown(reply))
    except SoftgenError as e:
        _fail(str(e), logger)


@cli.group()
@click.option("--language", "-l", default="go", help="Target programming language")
@click.option("--model", "-m", default="", help="Ollama model")
@click.option("--endpoint", "-e", default="", help="Ollama base URL")
@click.option("--output", "-o", "output_path", default="", help="Write code to this file")
@click.pass_context
def codegen(ctx, language: str, model: str, endpoint: str, output_path: str):
    """Generate code snippets with a local Ollama model."""
    ctx.obj = {
        "language": language,
        "model": model,
        "endpoint": endpoint,
        "output_path": output_path,
    }


def _run_codegen(ctx, build) -> None:
    opts = ctx.obj
    config = Config.load()
    logger = RunLogger("codegen")

    try:
        with build_http_client(config.ollama_timeout) as http_client:
            client = OllamaClient(
                http_client,
                base_url=opts["endpoint"] or config.ollama_base_url,
                model=opts["model"] or config.ollama_model,
                logger=logger,
            )
            client.check_service()
            generator = CodeGenerator(client, language=opts["language"])
            with console.status(f"Generating with {client.model}..."):
                code = build(generator)
    except SoftgenError as e:
        _fail(str(e), logger)

    if opts["output_path"]:
        try:
            atomic_write(opts["output_path"], code + "\n")
        except OSError as e:
            _fail(f"write output: {e}", logger)
        console.print(f"[green]Saved[/] {opts['output_path']}")
    else:
        console.print(Syntax(code, opts["language"], word_wrap=True))


@codegen.command()
@click.option("--name", required=True)
@click.option("--description", "-d", required=True)
@click.option("--field", "fields", multiple=True, help="Field name (repeatable)")
@click.pass_context
def struct(ctx, name: str, description: str, fields: tuple):
    """Data structure with serialization tags."""
    _run_codegen(ctx, lambda g: g.generate_struct(name, description, list(fields)))


@codegen.command()
@click.option("--name", required=True)
@click.option("--method", default="GET")
@click.option("--path", "route", required=True)
@click.option("--description", "-d", required=True)
@click.pass_context
def handler(ctx, name: str, method: str, route: str, description: str):
    """HTTP handler for one route."""
    _run_codegen(ctx, lambda g: g.generate_handler(name, method, route, description))


@codegen.command()
@click.option("--name", required=True)
@click.option("--description", "-d", required=True)
@click.option("--method", "methods", multiple=True, help="Method name (repeatable)")
@click.pass_context
def service(ctx, name: str, description: str, methods: tuple):
    """Service-layer interface and implementation."""
    _run_codegen(ctx, lambda g: g.generate_service(name, description, list(methods)))


@codegen.command()
@click.option("--name", required=True)
@click.option("--description", "-d", required=True)
@click.option("--db", "db_type", default="PostgreSQL")
@click.pass_context
def repository(ctx, name: str, description: str, db_type: str):
    """Data access layer with CRUD operations."""
    _run_codegen(ctx, lambda g: g.generate_repository(name, description, db_type))


@codegen.command()
@click.option("--name", required=True)
@click.option("--description", "-d", required=True)
@click.pass_context
def middleware(ctx, name: str, description: str):
    """HTTP middleware."""
    _run_codegen(ctx, lambda g: g.generate_middleware(name, description))


@codegen.command(name="test")
@click.option("--function", "function_name", required=True)
@click.option("--description", "-d", required=True)
@click.pass_context
def test_cmd(ctx, function_name: str, description: str):
    """Unit tests for a function."""
    _run_codegen(ctx, lambda g: g.generate_test(function_name, description))


@cli.command(name="check-ollama")
@click.option("--endpoint", "-e", default="", help="Ollama base URL")
def check_ollama(endpoint: str):
    """Check that the local Ollama server is reachable."""
    config = Config.load()
    with build_http_client(config.ollama_timeout) as http_client:
        client = OllamaClient(http_client, base_url=endpoint or config.ollama_base_url)
        try:
            client.check_service()
        except SoftgenError as e:
            console.print(f"[red]{escape(str(e))}[/]")
            console.print("Check that:")
            console.print("1. Ollama is installed")
            console.print("2. `ollama serve` is running")
            console.print(f"3. The model is pulled: ollama pull {config.ollama_model}")
            raise SystemExit(1)
    console.print(f"[green]Ollama is running at {client.base_url}[/]")


def main():
    cli()


if __name__ == "__main__":
    main()
