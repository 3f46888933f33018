from __future__ import annotations

from pathlib import Path
from typing import Optional


class CodegenError(Exception):
    """Base class for every error raised by springgen."""


class SchemaValidationError(CodegenError, ValueError):
    def __init__(self, message: str, field: Optional[str] = None) -> None:
        super().__init__(message)
        self.message = message
        self.field = field


class ConfigError(CodegenError):
    pass


class GenerationError(CodegenError):
    def __init__(self, message: str, path: Optional[Path] = None) -> None:
        super().__init__(message)
        self.message = message
        self.path = path
