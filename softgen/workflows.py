"""End-to-end generation workflows: template -> prompt -> LLM -> file."""

from pathlib import Path
from typing import Callable, Optional

from .errors import EmptyResultError, SoftgenError
from .llm.base import BaseLLM
from .logging import RunLogger
from .output import ArtifactKind, save_markdown
from .prompts import (
    CODE_EXAMPLE,
    CODE_PROMPT,
    MANUAL_EXAMPLE,
    MANUAL_PROMPT,
    PromptStore,
    build_code_prompt,
    build_manual_prompt,
)

GENERATION_TYPES = ("manual", "code", "all")


def _read_pair(store: PromptStore, prompt_name: str, example_name: str) -> tuple[str, str]:
    try:
        return store.read(prompt_name), store.read(example_name)
    except OSError as e:
        raise SoftgenError(f"read template: {e}") from e


def _complete_and_save(
    llm: BaseLLM,
    prompt: str,
    kind: ArtifactKind,
    output_dir: str,
    logger: Optional[RunLogger],
) -> Path:
    text = llm.complete(prompt)
    if not text.strip():
        raise EmptyResultError(f"empty {kind.value} from llm")

    path = save_markdown(kind, text, output_dir)
    if logger:
        logger.log_artifact(path)
    return path


def generate_manual(
    llm: BaseLLM,
    store: PromptStore,
    software_name: str,
    output_dir: str,
    logger: Optional[RunLogger] = None,
) -> Path:
    """Generate the user manual for `software_name` and save it as markdown."""
    template, example = _read_pair(store, MANUAL_PROMPT, MANUAL_EXAMPLE)
    prompt = build_manual_prompt(template, example, software_name)
    return _complete_and_save(llm, prompt, ArtifactKind.MANUAL, output_dir, logger)


def generate_code(
    llm: BaseLLM,
    store: PromptStore,
    output_dir: str,
    logger: Optional[RunLogger] = None,
) -> Path:
    """Generate the source listing document and save it as markdown."""
    template, example = _read_pair(store, CODE_PROMPT, CODE_EXAMPLE)
    prompt = build_code_prompt(template, example)
    return _complete_and_save(llm, prompt, ArtifactKind.CODE, output_dir, logger)


def run(
    name: str,
    kind: str,
    llm: BaseLLM,
    store: PromptStore,
    output_dir: str,
    logger: Optional[RunLogger] = None,
    on_step: Optional[Callable[[ArtifactKind], None]] = None,
) -> list[Path]:
    """Dispatch `manual`, `code` or `all`; returns the written paths in order.

    A failure in one step aborts the remaining ones.
    """
    if kind not in GENERATION_TYPES:
        raise SoftgenError(f"unknown type: {kind}")

    written = []
    if kind in ("manual", "all"):
        if on_step:
            on_step(ArtifactKind.MANUAL)
        written.append(generate_manual(llm, store, name, output_dir, logger))
    if kind in ("code", "all"):
        if on_step:
            on_step(ArtifactKind.CODE)
        written.append(generate_code(llm, store, output_dir, logger))
    return written
