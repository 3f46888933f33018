"""
The single file-system stage: every artifact reaches disk through ArtifactWriter.
"""
from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING, Iterable, List, Optional

from .artifacts import Artifact, ArtifactKind, WriteAction, WriteOutcome
from .fileio import atomic_write_text, read_text
from .policy import TOOL_NAME, Manifest, OverridePolicy, ownership_of

if TYPE_CHECKING:  # pragma: no cover - typing only
    from .orchestrator import OutputRoots

log = logging.getLogger(__name__)


def find_by_fragment(directory: Path, fragment: str) -> Optional[Path]:
    if not directory.is_dir():
        return None
    for pth in sorted(directory.iterdir()):
        if pth.is_file() and fragment in pth.name:
            return pth
    return None


class ArtifactWriter:
    def __init__(
        self,
        roots: "OutputRoots",
        policy: Optional[OverridePolicy] = None,
        manifest: Optional[Manifest] = None,
        *,
        dry_run: bool = False,
    ) -> None:
        self.roots = roots
        self.policy = policy or OverridePolicy()
        self.manifest = manifest or Manifest(None)
        self.dry_run = dry_run

    def target_of(self, artifact: Artifact) -> Path:
        return self.roots.resolve(artifact.root) / Path(*artifact.target_path.split("/"))

    def existing_of(self, artifact: Artifact, target: Path) -> Optional[Path]:
        if artifact.kind is ArtifactKind.MIGRATION and artifact.name_fragment:
            return find_by_fragment(target.parent, artifact.name_fragment)
        return target if target.exists() else None

    def write(self, artifact: Artifact) -> WriteOutcome:
        target = self.target_of(artifact)
        existing = self.existing_of(artifact, target)
        decision = self.policy.decide(artifact.kind, existing)

        if not decision.writes:
            reason = decision.reason
            if artifact.kind is ArtifactKind.EXTENSIBLE and existing is not None:
                text = read_text(existing)
                untouched = self.manifest.is_untouched(artifact.manifest_key, text)
                if untouched is True:
                    reason += " (untouched since generation)"
                elif untouched is False:
                    reason += " (user-modified)"
                if ownership_of(text) is None:
                    reason += f" (no {TOOL_NAME} marker)"
            log.info("Skipped %s: %s", artifact.file_name, reason)
            return WriteOutcome(artifact, WriteAction.SKIPPED, existing or target, reason)

        if self.dry_run:
            log.info("Would write %s (%s)", artifact.target_path, decision.action.value)
            return WriteOutcome(artifact, decision.action, target, decision.reason)

        atomic_write_text(target, artifact.content)
        self.manifest.record(artifact.manifest_key, artifact.checksum)
        log.info("%s %s", decision.action.value.capitalize(), artifact.target_path)
        return WriteOutcome(artifact, decision.action, target, decision.reason)

    def write_all(self, artifacts: Iterable[Artifact]) -> List[WriteOutcome]:
        return [self.write(a) for a in artifacts]
