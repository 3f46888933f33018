from __future__ import annotations

from typing import List

from ..artifacts import Artifact, ArtifactKind
from ..javasrc import Annotation, JavaFile, Method, Param, TypeDecl
from ..naming import (
    active_flag_field,
    add_type_imports,
    capitalize,
    derive_names,
    id_field,
    id_java_type,
    java_type,
    unique_lookup_fields,
)
from ..schema import Schema
from .base import BaseGenerator


def lookup_methods(schema: Schema, entity: str, imports: set) -> List[Method]:
    """findBy/existsBy declarations for the conventional unique fields (username, email)."""
    out: List[Method] = []
    for f in unique_lookup_fields(schema):
        add_type_imports(f.type, imports)
        imports.add("java.util.Optional")
        param = Param(java_type(f), f.name)
        out.append(Method(f"findBy{capitalize(f.name)}", returns=f"Optional<{entity}>", params=[param], body=None, modifiers=[]))
        out.append(Method(f"existsBy{capitalize(f.name)}", returns="boolean", params=[param], body=None, modifiers=[]))
    return out


class RepositoryGenerator(BaseGenerator):
    name = "repository"

    def build(self, schema: Schema) -> List[Artifact]:
        names = derive_names(schema)
        id_type = id_java_type(schema)
        imports = {
            names.qualified(names.entity_package, names.entity),
            "org.springframework.data.jpa.repository.JpaRepository",
            "org.springframework.stereotype.Repository",
        }
        add_type_imports(id_field(schema).type, imports)

        decl = TypeDecl(
            name=names.repository,
            kind="interface",
            annotations=[self.generated_annotation(imports), Annotation("Repository")],
            extends=f"JpaRepository<{names.entity}, {id_type}>",
        )
        decl.methods.extend(lookup_methods(schema, names.entity, imports))

        active = active_flag_field(schema)
        if active is not None:
            imports.add("java.util.List")
            decl.methods.append(Method(
                "findAllByActive",
                returns=f"List<{names.entity}>",
                params=[Param("Boolean", active.name)],
                body=None,
                modifiers=[],
            ))

        jf = JavaFile(names.repository_package, decl, imports)
        return [self.java_artifact(jf, ArtifactKind.BASE)]
