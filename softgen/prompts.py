"""Prompt template loading and substitution.

Templates are plain text files. Manual prompts use `[doc_name]` for the
software name and a single `%s` where the reference example is inserted;
code prompts only use `%s`.
"""

from pathlib import Path
from typing import Optional

PACKAGED_TEMPLATES = Path(__file__).parent / "templates"

DOC_NAME_PLACEHOLDER = "[doc_name]"
EXAMPLE_PLACEHOLDER = "%s"

MANUAL_PROMPT = "manual_v1.txt"
MANUAL_EXAMPLE = "doc.txt"
CODE_PROMPT = "code_v1.txt"
CODE_EXAMPLE = "code.txt"


class PromptStore:
    """Read-only access to prompt templates in a directory."""

    def __init__(self, templates_dir: Optional[str] = None):
        self.templates_dir = Path(templates_dir) if templates_dir else PACKAGED_TEMPLATES

    def read(self, name: str) -> str:
        """Return the template text.

        Raises:
            FileNotFoundError: template does not exist
        """
        path = self.templates_dir / name
        if not path.is_file():
            raise FileNotFoundError(f"prompt template not found: {path}")
        return path.read_text(encoding="utf-8")

    def available(self) -> list[str]:
        if not self.templates_dir.exists():
            return []
        return sorted(p.name for p in self.templates_dir.glob("*.txt"))


def build_manual_prompt(template: str, example: str, software_name: str) -> str:
    template = template.replace(DOC_NAME_PLACEHOLDER, software_name)
    return template.replace(EXAMPLE_PLACEHOLDER, example, 1)


def build_code_prompt(template: str, example: str) -> str:
    return template.replace(EXAMPLE_PLACEHOLDER, example, 1)
