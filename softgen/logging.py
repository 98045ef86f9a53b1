"""Run logging for debugging generated output."""

import json
from datetime import datetime
from pathlib import Path
from typing import Optional

# Log directory
LOG_DIR = Path.home() / ".softgen" / "logs"

MAX_LOGGED_CONTENT = 2000


def ensure_log_dir(log_dir: Path = LOG_DIR) -> Path:
    """Create logs directory if it doesn't exist."""
    if not log_dir.exists():
        log_dir.mkdir(parents=True, exist_ok=True)
    return log_dir


def _truncate(text: str) -> str:
    return text[:MAX_LOGGED_CONTENT] + "..." if len(text) > MAX_LOGGED_CONTENT else text


class RunLogger:
    """Appends one JSON line per request, response and error of a run."""

    def __init__(self, command: str = "unknown", log_dir: Optional[Path] = None):
        self.command = command
        self.run_id = datetime.now().strftime("%Y%m%d_%H%M%S")
        self.log_file = ensure_log_dir(log_dir or LOG_DIR) / f"run_{self.run_id}.jsonl"

        self._write_entry({
            "type": "run_start",
            "command": self.command,
            "timestamp": datetime.now().isoformat(),
        })

    def log_request(self, model: str, prompt: str) -> None:
        """Log an outbound prompt."""
        self._write_entry({
            "type": "request",
            "model": model,
            "prompt": _truncate(prompt),
            "timestamp": datetime.now().isoformat(),
        })

    def log_response(self, model: str, content: str) -> None:
        """Log the assembled model response."""
        self._write_entry({
            "type": "response",
            "model": model,
            "length": len(content),
            "content": _truncate(content),
            "timestamp": datetime.now().isoformat(),
        })

    def log_artifact(self, path: Path) -> None:
        self._write_entry({
            "type": "artifact",
            "path": str(path),
            "timestamp": datetime.now().isoformat(),
        })

    def log_error(self, error: str) -> None:
        """Log error."""
        self._write_entry({
            "type": "error",
            "error": error,
            "timestamp": datetime.now().isoformat(),
        })

    def _write_entry(self, entry: dict) -> None:
        """Write a log entry to file."""
        try:
            with open(self.log_file, "a", encoding="utf-8") as f:
                f.write(json.dumps(entry, ensure_ascii=False) + "\n")
        except OSError:
            pass  # Logging must not break a run

    @property
    def log_path(self) -> Path:
        """Return path to current log file."""
        return self.log_file
