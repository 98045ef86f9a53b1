"""Writing generated artifacts to disk."""

import os
import tempfile
from enum import Enum
from pathlib import Path


class ArtifactKind(Enum):
    """Kind of generated document; the value is its file stem."""
    MANUAL = "manual"
    CODE = "code"

    @property
    def filename(self) -> str:
        return f"{self.value}.md"


def atomic_write(path: Path, content: str, encoding: str = "utf-8") -> None:
    """Write content via temp file + rename so readers never see a partial file.

    Raises:
        OSError: If the write operation fails
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    # Temp file must live on the same filesystem for os.replace to be atomic
    fd, tmp_path = tempfile.mkstemp(
        dir=path.parent,
        prefix=f".{path.name}.",
        suffix=".tmp"
    )

    try:
        with os.fdopen(fd, "w", encoding=encoding) as f:
            f.write(content)
            f.flush()
            os.fsync(f.fileno())
        os.replace(tmp_path, path)
    except BaseException:
        if os.path.exists(tmp_path):
            try:
                os.unlink(tmp_path)
            except OSError:
                pass
        raise


def save_markdown(kind: ArtifactKind, content: str, output_dir: str) -> Path:
    """Save `content` as `<output_dir>/<kind>.md` and return the path."""
    path = Path(output_dir) / kind.filename
    atomic_write(path, content)
    return path
