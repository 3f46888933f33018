"""
Per-entity and per-batch sequencing of the generators.

For every schema: re-validate, build every artifact of every generator, and
only then hand them to the writer in generator order. A failure while building
therefore leaves the output tree untouched for that entity.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, List, Optional

from .artifacts import Artifact, GenerationReport, OutputRoot
from .fileio import ensure_dir
from .generators import (
    ControllerGenerator,
    EntityGenerator,
    MigrationClock,
    MigrationGenerator,
    RepositoryGenerator,
    ServiceGenerator,
)
from .generators.base import BaseGenerator
from .generators.migration import MIGRATION_DIR
from .policy import MANIFEST_DIR, MANIFEST_FILE, Manifest, OverridePolicy
from .schema import Schema
from .writer import ArtifactWriter

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class OutputRoots:
    main: Path
    test: Path
    resources: Path
    manifest: Optional[Path] = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "main", Path(self.main))
        object.__setattr__(self, "test", Path(self.test))
        object.__setattr__(self, "resources", Path(self.resources))
        if self.manifest is None:
            object.__setattr__(self, "manifest", self.main / MANIFEST_DIR / MANIFEST_FILE)
        else:
            object.__setattr__(self, "manifest", Path(self.manifest))

    @classmethod
    def under(cls, base_dir: Path) -> "OutputRoots":
        """Maven-style generated source roots below a build directory."""
        base = Path(base_dir)
        return cls(
            main=base / "generated-sources" / "java",
            test=base / "generated-test-sources" / "java",
            resources=base / "generated-resources",
        )

    def resolve(self, root: OutputRoot) -> Path:
        if root is OutputRoot.MAIN:
            return self.main
        if root is OutputRoot.TEST:
            return self.test
        return self.resources

    @property
    def migration_dir(self) -> Path:
        return self.resources / Path(*MIGRATION_DIR.split("/"))


def package_path(root: Path, package: str) -> Path:
    return root / Path(*package.split("."))


class CodeGenerator:
    def __init__(
        self,
        roots: OutputRoots,
        policy: Optional[OverridePolicy] = None,
        *,
        dry_run: bool = False,
        clock: Optional[MigrationClock] = None,
    ) -> None:
        self.roots = roots
        self.policy = policy or OverridePolicy()
        self.dry_run = dry_run
        self.clock = clock or MigrationClock()
        self.manifest = Manifest.load(roots.manifest)
        self.writer = ArtifactWriter(roots, self.policy, self.manifest, dry_run=dry_run)
        self.generators: List[BaseGenerator] = [
            MigrationGenerator(self.clock),
            EntityGenerator(),
            RepositoryGenerator(),
            ServiceGenerator(),
            ControllerGenerator(),
        ]
        self.clock.observe_directory(roots.migration_dir)

    def create_package_directories(self, schema: Schema) -> None:
        if self.dry_run:
            return
        for root in (self.roots.main, self.roots.test):
            pth = package_path(root, schema.package_name)
            ensure_dir(pth)
            log.debug("Ensured package directory %s", pth)

    def build_artifacts(self, schema: Schema) -> List[Artifact]:
        artifacts: List[Artifact] = []
        for gen in self.generators:
            built = gen.build(schema)
            log.debug("%s generator built %d artifact(s) for %s", gen.name, len(built), schema.entity_name)
            artifacts.extend(built)
        return artifacts

    def generate_all(self, schema: Schema) -> GenerationReport:
        schema.validate()
        log.info("Generating %s (%s)", schema.entity_name, schema.package_name)
        artifacts = self.build_artifacts(schema)

        self.create_package_directories(schema)
        report = GenerationReport(schema.entity_name, dry_run=self.dry_run)
        try:
            for artifact in artifacts:
                report.outcomes.append(self.writer.write(artifact))
        finally:
            # checksums of files already written survive a failure later in the entity
            if not self.dry_run:
                self.manifest.save()

        log.info(
            "%s: %d written, %d skipped%s",
            schema.entity_name,
            len(report.written),
            len(report.skipped),
            " (dry run)" if self.dry_run else "",
        )
        return report

    def generate_batch(self, schemas: Iterable[Schema]) -> List[GenerationReport]:
        return [self.generate_all(schema) for schema in schemas]
