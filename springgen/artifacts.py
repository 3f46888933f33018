from __future__ import annotations

import hashlib
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import List, Optional


class ArtifactKind(str, Enum):
    BASE = "base"              # generator-owned, rewritten on every run
    EXTENSIBLE = "extensible"  # user-owned after first creation
    MIGRATION = "migration"    # created once per entity, matched by name fragment


class OutputRoot(str, Enum):
    MAIN = "main"
    TEST = "test"
    RESOURCES = "resources"


class WriteAction(str, Enum):
    CREATED = "created"
    OVERWRITTEN = "overwritten"
    SKIPPED = "skipped"


def sha256_text(s: str) -> str:
    return hashlib.sha256(s.encode("utf-8")).hexdigest()


@dataclass(frozen=True)
class Artifact:
    """One generated file, described independently of the file system."""

    target_path: str
    package: str
    kind: ArtifactKind
    content: str
    root: OutputRoot = OutputRoot.MAIN
    name_fragment: Optional[str] = None

    @property
    def checksum(self) -> str:
        return sha256_text(self.content)

    @property
    def file_name(self) -> str:
        return self.target_path.rsplit("/", 1)[-1]

    @property
    def manifest_key(self) -> str:
        return f"{self.root.value}:{self.target_path}"


@dataclass
class WriteOutcome:
    artifact: Artifact
    action: WriteAction
    path: Path
    reason: str = ""


@dataclass
class GenerationReport:
    entity: str
    outcomes: List[WriteOutcome] = field(default_factory=list)
    dry_run: bool = False

    @property
    def written(self) -> List[WriteOutcome]:
        return [o for o in self.outcomes if o.action is not WriteAction.SKIPPED]

    @property
    def skipped(self) -> List[WriteOutcome]:
        return [o for o in self.outcomes if o.action is WriteAction.SKIPPED]

    def outcome_for(self, file_name: str) -> Optional[WriteOutcome]:
        for o in self.outcomes:
            if o.artifact.file_name == file_name:
                return o
        return None
