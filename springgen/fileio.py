"""File helpers shared by the artifact writer and the manifest."""
from __future__ import annotations

import os
import tempfile
from pathlib import Path

from .errors import GenerationError


def read_text(pth: Path) -> str:
    return pth.read_text(encoding="utf-8", errors="replace")


def ensure_dir(pth: Path) -> None:
    try:
        pth.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise GenerationError(f"Failed to create directory: {pth}", path=pth) from e


def atomic_write_text(pth: Path, txt: str) -> None:
    """Write through a temp file in the target directory, then rename over the target."""
    ensure_dir(pth.parent)
    fd, tmp = tempfile.mkstemp(prefix=f".{pth.name}.", suffix=".tmp", dir=str(pth.parent))
    try:
        with os.fdopen(fd, "w", encoding="utf-8", newline="\n") as fh:
            fh.write(txt)
        os.replace(tmp, pth)
    except OSError as e:
        try:
            os.unlink(tmp)
        except OSError:
            pass
        raise GenerationError(f"Failed to write file: {pth}", path=pth) from e
