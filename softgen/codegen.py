"""Code snippet generation on top of a local model."""

import re
from typing import Optional

from .llm.ollama_client import OllamaClient

# Greedy: spans from the first fence to the last one
_CODE_BLOCK_RE = re.compile(r"```[a-zA-Z]*\n?(.*)```", re.DOTALL)

CODE_PROMPT = """Write {language} code for the following requirements:
{requirements}

Return only runnable code with no extra explanation. The code should:
1. Include the necessary comments
2. Follow best practices and the idioms of {language}
3. Handle error cases
4. Include a short usage example

Code:
```{language}"""


def extract_code(response: str) -> str:
    """Strip surrounding markdown fences from a model reply."""
    response = response.strip()
    match = _CODE_BLOCK_RE.search(response)
    if match:
        return match.group(1).strip()
    return response


class CodeGenerator:
    """Builds code-generation prompts and returns extracted code."""

    def __init__(self, client: OllamaClient, language: str = "go"):
        self.client = client
        self.language = language

    def generate_code(self, prompt: str, language: Optional[str] = None, temperature: float = 0.2) -> str:
        language = language or self.language
        full_prompt = CODE_PROMPT.format(language=language, requirements=prompt)
        return extract_code(self.client.generate(full_prompt, temperature=temperature))

    def generate_struct(self, name: str, description: str, fields: Optional[list[str]] = None) -> str:
        fields_str = ", ".join(fields) if fields else "basic fields"
        prompt = (
            f"Create a data structure named {name}. Purpose: {description}. "
            f"Fields: {fields_str}. Add JSON serialization tags and any validation it needs."
        )
        return self.generate_code(prompt)

    def generate_handler(self, name: str, method: str, path: str, description: str) -> str:
        prompt = (
            f"Create an HTTP handler function {name} that serves {method} {path}. "
            f"Purpose: {description}."
        )
        return self.generate_code(prompt)

    def generate_service(self, name: str, description: str, methods: Optional[list[str]] = None) -> str:
        methods_str = ", ".join(methods) if methods else "basic CRUD methods"
        prompt = (
            f"Create a service-layer interface and implementation {name}. Purpose: {description}. "
            f"Methods: {methods_str}. Add error handling and logging."
        )
        return self.generate_code(prompt)

    def generate_repository(self, name: str, description: str, db_type: str) -> str:
        prompt = (
            f"Create a data access layer {name} backed by {db_type}. Purpose: {description}. "
            "Include the basic CRUD operations."
        )
        return self.generate_code(prompt)

    def generate_middleware(self, name: str, description: str) -> str:
        prompt = f"Create an HTTP middleware {name}. Purpose: {description}."
        return self.generate_code(prompt)

    def generate_test(self, function_name: str, description: str) -> str:
        prompt = (
            f"Write complete unit tests for the function {function_name}. Purpose: {description}. "
            "Cover the normal path and the edge cases."
        )
        return self.generate_code(prompt, temperature=0.1)
