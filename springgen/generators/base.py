from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, List

from ..artifacts import Artifact, ArtifactKind, OutputRoot, WriteOutcome
from ..javasrc import Annotation, JavaFile
from ..policy import TOOL_NAME, header_for
from ..schema import Schema

if TYPE_CHECKING:  # pragma: no cover - typing only
    from ..writer import ArtifactWriter

GENERATED_IMPORT = "jakarta.annotation.Generated"


class BaseGenerator(ABC):
    """
    Turns a Schema into artifacts.

    build() is pure and never touches the file system; generate() hands the
    built artifacts to a writer, in the order build() returned them.
    """

    name = "base"

    @abstractmethod
    def build(self, schema: Schema) -> List[Artifact]:
        ...

    def generate(self, schema: Schema, writer: "ArtifactWriter") -> List[WriteOutcome]:
        return writer.write_all(self.build(schema))

    @staticmethod
    def generated_annotation(imports: set) -> Annotation:
        imports.add(GENERATED_IMPORT)
        return Annotation("Generated", [("value", f'"{TOOL_NAME}"')])

    @staticmethod
    def java_artifact(jf: JavaFile, kind: ArtifactKind) -> Artifact:
        jf.header = header_for(kind)
        return Artifact(
            target_path=jf.relative_path,
            package=jf.package,
            kind=kind,
            content=jf.render(),
            root=OutputRoot.MAIN,
        )
