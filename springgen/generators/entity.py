from __future__ import annotations

from typing import List

from ..artifacts import Artifact, ArtifactKind
from ..javasrc import Annotation, FieldDecl, JavaFile, Method, Param, TypeDecl
from ..naming import (
    add_type_imports,
    camel_to_snake,
    derive_names,
    getter_name,
    java_type,
    map_type,
    setter_name,
    STRING_MAPPING,
    uses_generated_identity,
)
from ..schema import FieldDef, Schema
from .base import BaseGenerator

JPA = "jakarta.persistence"


class EntityGenerator(BaseGenerator):
    name = "entity"

    def build(self, schema: Schema) -> List[Artifact]:
        names = derive_names(schema)
        imports = {f"{JPA}.Entity", f"{JPA}.Table", f"{JPA}.Column", "java.util.Objects"}

        decl = TypeDecl(
            name=names.entity,
            annotations=[
                self.generated_annotation(imports),
                Annotation("Entity"),
                Annotation("Table", [("name", f'"{names.table}"')]),
            ],
        )
        for f in schema.fields:
            add_type_imports(f.type, imports)
            decl.fields.append(self._field(schema, f, imports))

        decl.methods.append(Method(names.entity, returns=None))
        for f in schema.fields:
            decl.methods.extend(self._accessors(f))
        decl.methods.append(self._equals(schema))
        decl.methods.append(self._hash_code(schema))
        decl.methods.append(self._to_string(schema))

        jf = JavaFile(names.entity_package, decl, imports)
        return [self.java_artifact(jf, ArtifactKind.BASE)]

    def _field(self, schema: Schema, f: FieldDef, imports: set) -> FieldDecl:
        anns: List[Annotation] = []
        if schema.is_id(f.name):
            imports.add(f"{JPA}.Id")
            anns.append(Annotation("Id"))
            if uses_generated_identity(schema, f):
                imports |= {f"{JPA}.GeneratedValue", f"{JPA}.GenerationType"}
                anns.append(Annotation("GeneratedValue", [("strategy", "GenerationType.IDENTITY")]))

        column = [("name", f'"{camel_to_snake(f.name)}"'), ("nullable", "true" if f.nullable else "false")]
        if f.length is not None and map_type(f.type) is STRING_MAPPING:
            column.append(("length", str(f.length)))
        anns.append(Annotation("Column", column))
        return FieldDecl(java_type(f), f.name, annotations=anns)

    def _accessors(self, f: FieldDef) -> List[Method]:
        t = java_type(f)
        return [
            Method(getter_name(f.name), returns=t, body=[f"return this.{f.name};"]),
            Method(setter_name(f.name), params=[Param(t, f.name)], body=[f"this.{f.name} = {f.name};"]),
        ]

    def _equals(self, schema: Schema) -> Method:
        entity = schema.entity_name
        checks = [f"Objects.equals(this.{f.name}, that.{f.name})" for f in schema.fields]
        body = [
            "if (this == o) return true;",
            "if (o == null || getClass() != o.getClass()) return false;",
            f"{entity} that = ({entity}) o;",
            "return " + checks[0],
        ]
        body.extend("        && " + c for c in checks[1:])
        body[-1] += ";"
        return Method(
            "equals",
            returns="boolean",
            params=[Param("Object", "o")],
            annotations=[Annotation("Override")],
            body=body,
        )

    def _hash_code(self, schema: Schema) -> Method:
        # same field set as equals, so equal instances hash equally
        args = ", ".join(f"this.{f.name}" for f in schema.fields)
        return Method("hashCode", returns="int", annotations=[Annotation("Override")], body=[f"return Objects.hash({args});"])

    def _to_string(self, schema: Schema) -> Method:
        parts = []
        for i, f in enumerate(schema.fields):
            sep = "" if i == 0 else ", "
            parts.append(f'"{sep}{f.name}=" + this.{f.name}')
        body = [f'return "{schema.entity_name}{{" + ' + " + ".join(parts) + ' + "}";']
        return Method("toString", returns="String", annotations=[Annotation("Override")], body=body)
