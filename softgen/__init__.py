"""softgen - LLM-backed documentation and code scaffolding generator."""

__version__ = "0.1.0"
