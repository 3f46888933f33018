"""
Override policy, ownership markers and the checksum manifest.

Base artifacts belong to the generator and are rewritten on every run.
Extensible artifacts belong to the user once they exist; they are only
rewritten when the policy says so. Migrations are written once per entity.
"""
from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Optional

from .artifacts import ArtifactKind, WriteAction, sha256_text
from .fileio import atomic_write_text

log = logging.getLogger(__name__)

TOOL_NAME = "springgen"

OWNER_GENERATOR = "generator"
OWNER_USER = "user"

GENERATED_HEADER = [
    f"@generated by {TOOL_NAME}: owner={OWNER_GENERATOR}",
    "This file is rewritten on every run. Do not edit it; extend it instead.",
]
OWNED_HEADER = [
    f"@generated by {TOOL_NAME}: owner={OWNER_USER}",
    "Generated once. This file is yours to edit; it is not overwritten unless generation is forced.",
]

MANIFEST_DIR = ".springgen"
MANIFEST_FILE = "manifest.json"


def header_for(kind: ArtifactKind) -> list:
    return list(OWNED_HEADER if kind is ArtifactKind.EXTENSIBLE else GENERATED_HEADER)


def ownership_of(text: str) -> Optional[str]:
    marker = f"@generated by {TOOL_NAME}: owner="
    for line in text.splitlines()[:5]:
        idx = line.find(marker)
        if idx >= 0:
            return line[idx + len(marker):].strip()
    return None


@dataclass(frozen=True)
class Decision:
    action: WriteAction
    reason: str

    @property
    def writes(self) -> bool:
        return self.action is not WriteAction.SKIPPED


@dataclass(frozen=True)
class OverridePolicy:
    skip_if_exists: bool = True
    force: bool = False

    def decide(self, kind: ArtifactKind, existing: Optional[Path]) -> Decision:
        if existing is None:
            return Decision(WriteAction.CREATED, "new file")
        if kind is ArtifactKind.BASE:
            return Decision(WriteAction.OVERWRITTEN, "base artifact is always regenerated")
        if kind is ArtifactKind.MIGRATION:
            return Decision(WriteAction.SKIPPED, f"migration already exists: {existing.name}")
        if self.force:
            return Decision(WriteAction.OVERWRITTEN, "forced")
        if self.skip_if_exists:
            return Decision(WriteAction.SKIPPED, "already exists")
        return Decision(WriteAction.OVERWRITTEN, "default mode overwrites")


class Manifest:
    """Checksum of the content last written to each artifact path."""

    def __init__(self, path: Optional[Path], entries: Optional[Dict[str, str]] = None) -> None:
        self.path = path
        self.entries: Dict[str, str] = dict(entries or {})

    @classmethod
    def load(cls, path: Optional[Path]) -> "Manifest":
        if path is None or not path.exists():
            return cls(path)
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            log.warning("Ignoring unreadable manifest %s: %s", path, e)
            return cls(path)
        if not isinstance(data, dict):
            log.warning("Ignoring malformed manifest %s", path)
            return cls(path)
        return cls(path, {str(k): str(v) for k, v in data.items()})

    def record(self, key: str, checksum: str) -> None:
        self.entries[key] = checksum

    def get(self, key: str) -> Optional[str]:
        return self.entries.get(key)

    def is_untouched(self, key: str, text: str) -> Optional[bool]:
        """True if text matches the recorded checksum, None if nothing was recorded."""
        recorded = self.entries.get(key)
        if recorded is None:
            return None
        return recorded == sha256_text(text)

    def save(self) -> None:
        if self.path is None:
            return
        atomic_write_text(self.path, json.dumps(self.entries, indent=2, sort_keys=True) + "\n")
        log.debug("Saved manifest %s (%d entries)", self.path, len(self.entries))
