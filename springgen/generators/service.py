from __future__ import annotations

from typing import List

from ..artifacts import Artifact, ArtifactKind
from ..javasrc import Annotation, FieldDecl, JavaFile, Method, Param, TypeDecl
from ..naming import (
    add_type_imports,
    capitalize,
    derive_names,
    id_field,
    id_java_type,
    java_type,
    unique_lookup_fields,
    update_assignments,
)
from ..schema import Schema
from .base import BaseGenerator
from .repository import lookup_methods

TX = "org.springframework.transaction.annotation.Transactional"


def _transactional(read_only: bool) -> Annotation:
    return Annotation("Transactional", [("readOnly", "true" if read_only else "false")])


class ServiceGenerator(BaseGenerator):
    """Service interface, its always-regenerated base implementation and the user-owned subclass."""

    name = "service"

    def build(self, schema: Schema) -> List[Artifact]:
        return [
            self.build_interface(schema),
            self.build_base_impl(schema),
            self.build_extensible_impl(schema),
        ]

    def build_interface(self, schema: Schema) -> Artifact:
        names = derive_names(schema)
        id_type = id_java_type(schema)
        entity, var = names.entity, names.entity_var
        imports = {names.qualified(names.entity_package, entity), "java.util.List", "java.util.Optional"}
        add_type_imports(id_field(schema).type, imports)

        def decl(name: str, returns: str, *params: Param) -> Method:
            return Method(name, returns=returns, params=list(params), body=None, modifiers=[])

        methods = [
            decl("create", entity, Param(entity, var)),
            decl("findById", f"Optional<{entity}>", Param(id_type, "id")),
            decl("findAll", f"List<{entity}>"),
            decl("update", entity, Param(id_type, "id"), Param(entity, var)),
            decl("deleteById", "void", Param(id_type, "id")),
        ]
        methods.extend(lookup_methods(schema, entity, imports))

        td = TypeDecl(
            name=names.service,
            kind="interface",
            annotations=[self.generated_annotation(imports)],
            methods=methods,
        )
        return self.java_artifact(JavaFile(names.service_package, td, imports), ArtifactKind.BASE)

    def build_base_impl(self, schema: Schema) -> Artifact:
        names = derive_names(schema)
        id_type = id_java_type(schema)
        entity, var, repo = names.entity, names.entity_var, names.repository_var
        imports = {
            names.qualified(names.entity_package, entity),
            names.qualified(names.repository_package, names.repository),
            names.qualified(names.service_package, names.service),
            "java.util.List",
            "java.util.NoSuchElementException",
            "java.util.Optional",
            TX,
        }
        add_type_imports(id_field(schema).type, imports)

        update_body = [
            f"{entity} existing = {repo}.findById(id)",
            f'        .orElseThrow(() -> new NoSuchElementException("{entity} not found with id: " + id));',
        ]
        update_body.extend(f"existing.{setter}({var}.{getter}());" for setter, getter in update_assignments(schema))
        update_body.append(f"return {repo}.save(existing);")

        override = Annotation("Override")
        methods = [
            Method(
                names.base_service_impl,
                returns=None,
                params=[Param(names.repository, repo)],
                body=[f"this.{repo} = {repo};"],
            ),
            Method(
                "create",
                returns=entity,
                params=[Param(entity, var)],
                annotations=[override, _transactional(False)],
                body=[f"return {repo}.save({var});"],
            ),
            Method(
                "findById",
                returns=f"Optional<{entity}>",
                params=[Param(id_type, "id")],
                annotations=[override],
                body=[f"return {repo}.findById(id);"],
            ),
            Method("findAll", returns=f"List<{entity}>", annotations=[override], body=[f"return {repo}.findAll();"]),
            Method(
                "update",
                returns=entity,
                params=[Param(id_type, "id"), Param(entity, var)],
                annotations=[override, _transactional(False)],
                body=update_body,
            ),
            Method(
                "deleteById",
                params=[Param(id_type, "id")],
                annotations=[override, _transactional(False)],
                body=[f"{repo}.deleteById(id);"],
            ),
        ]
        for f in unique_lookup_fields(schema):
            add_type_imports(f.type, imports)
            suffix = capitalize(f.name)
            param = Param(java_type(f), f.name)
            methods.append(Method(
                f"findBy{suffix}",
                returns=f"Optional<{entity}>",
                params=[param],
                annotations=[override],
                body=[f"return {repo}.findBy{suffix}({f.name});"],
            ))
            methods.append(Method(
                f"existsBy{suffix}",
                returns="boolean",
                params=[param],
                annotations=[override],
                body=[f"return {repo}.existsBy{suffix}({f.name});"],
            ))

        td = TypeDecl(
            name=names.base_service_impl,
            modifiers=["public", "abstract"],
            annotations=[self.generated_annotation(imports), _transactional(True)],
            implements=[names.service],
            fields=[FieldDecl(names.repository, repo, modifiers=["protected", "final"])],
            methods=methods,
            javadoc=(
                f"Generated CRUD implementation of {names.service}.\n"
                "\n"
                "Reads run in the class-level read-only transaction; create, update and\n"
                "delete open a writable one. Rewritten on every generation run: put custom\n"
                f"logic in {names.service_impl} or another subclass."
            ),
        )
        return self.java_artifact(JavaFile(names.base_service_package, td, imports), ArtifactKind.BASE)

    def build_extensible_impl(self, schema: Schema) -> Artifact:
        names = derive_names(schema)
        repo = names.repository_var
        imports = {
            names.qualified(names.base_service_package, names.base_service_impl),
            names.qualified(names.repository_package, names.repository),
            "org.springframework.stereotype.Service",
            TX,
        }
        td = TypeDecl(
            name=names.service_impl,
            annotations=[
                Annotation("Service", [("value", f'"default{names.entity}Service"')]),
                Annotation("Transactional"),
            ],
            extends=names.base_service_impl,
            methods=[
                Method(
                    names.service_impl,
                    returns=None,
                    params=[Param(names.repository, repo)],
                    body=[f"super({repo});"],
                ),
                Method(
                    "customBusinessLogic",
                    javadoc="Placeholder for business logic specific to this service.",
                    body=["// validation, complex queries, business rules"],
                ),
            ],
            javadoc=(
                f"Default {names.service} implementation.\n"
                "\n"
                "Generated once: add business logic here, or register another subclass of\n"
                f"{names.base_service_impl} annotated with @Primary to replace this bean."
            ),
        )
        return self.java_artifact(JavaFile(names.service_package, td, imports), ArtifactKind.EXTENSIBLE)
