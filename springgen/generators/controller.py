from __future__ import annotations

from typing import List

from ..artifacts import Artifact, ArtifactKind
from ..javasrc import Annotation, FieldDecl, JavaFile, Method, Param, TypeDecl
from ..naming import add_type_imports, derive_names, id_field, id_java_type
from ..schema import Schema
from .base import BaseGenerator

WEB = "org.springframework.web.bind.annotation"
HTTP = "org.springframework.http"


def _mapping(kind: str, path: str = "") -> Annotation:
    if not path:
        return Annotation(kind)
    return Annotation(kind, [("value", f'"{path}"')])


class ControllerGenerator(BaseGenerator):
    """Abstract CRUD controller plus the once-generated concrete controller on the default route."""

    name = "controller"

    def build(self, schema: Schema) -> List[Artifact]:
        return [self.build_base(schema), self.build_extensible(schema)]

    def build_base(self, schema: Schema) -> Artifact:
        names = derive_names(schema)
        id_type = id_java_type(schema)
        entity, var, svc = names.entity, names.entity_var, names.service_var
        imports = {
            names.qualified(names.entity_package, entity),
            names.qualified(names.service_package, names.service),
            "jakarta.validation.Valid",
            "java.util.List",
            "java.util.NoSuchElementException",
            f"{HTTP}.HttpStatus",
            f"{HTTP}.ResponseEntity",
            f"{WEB}.DeleteMapping",
            f"{WEB}.GetMapping",
            f"{WEB}.PathVariable",
            f"{WEB}.PostMapping",
            f"{WEB}.PutMapping",
            f"{WEB}.RequestBody",
        }
        add_type_imports(id_field(schema).type, imports)

        def path_id() -> Param:
            return Param(id_type, "id", [Annotation("PathVariable")])

        def body_param() -> Param:
            return Param(entity, var, [Annotation("Valid"), Annotation("RequestBody")])

        methods = [
            Method(
                names.base_controller,
                returns=None,
                modifiers=["protected"],
                params=[Param(names.service, svc)],
                body=[f"this.{svc} = {svc};"],
            ),
            Method(
                f"getAll{entity}s",
                returns=f"List<{entity}>",
                annotations=[_mapping("GetMapping")],
                body=[f"return {svc}.findAll();"],
            ),
            Method(
                f"get{entity}ById",
                returns=f"ResponseEntity<{entity}>",
                params=[path_id()],
                annotations=[_mapping("GetMapping", "/{id}")],
                body=[
                    f"return {svc}.findById(id)",
                    "        .map(ResponseEntity::ok)",
                    "        .orElseGet(() -> ResponseEntity.notFound().build());",
                ],
            ),
            Method(
                f"create{entity}",
                returns=f"ResponseEntity<{entity}>",
                params=[body_param()],
                annotations=[_mapping("PostMapping")],
                body=[
                    f"{entity} created = {svc}.create({var});",
                    "return ResponseEntity.status(HttpStatus.CREATED).body(created);",
                ],
            ),
            Method(
                f"update{entity}",
                returns=f"ResponseEntity<{entity}>",
                params=[path_id(), body_param()],
                annotations=[_mapping("PutMapping", "/{id}")],
                body=[
                    "try {",
                    f"    return ResponseEntity.ok({svc}.update(id, {var}));",
                    "} catch (NoSuchElementException e) {",
                    "    return ResponseEntity.notFound().build();",
                    "}",
                ],
            ),
            Method(
                f"delete{entity}",
                returns="ResponseEntity<Void>",
                params=[path_id()],
                annotations=[_mapping("DeleteMapping", "/{id}")],
                body=[
                    f"if (!{svc}.findById(id).isPresent()) {{",
                    "    return ResponseEntity.notFound().build();",
                    "}",
                    f"{svc}.deleteById(id);",
                    "return ResponseEntity.noContent().build();",
                ],
            ),
        ]

        td = TypeDecl(
            name=names.base_controller,
            modifiers=["public", "abstract"],
            annotations=[self.generated_annotation(imports)],
            fields=[
                FieldDecl(
                    "String",
                    "API_PATH",
                    modifiers=["public", "static", "final"],
                    initializer=f'"{names.api_path}"',
                ),
                FieldDecl(names.service, svc, modifiers=["protected", "final"]),
            ],
            methods=methods,
            javadoc=(
                f"Generated CRUD endpoints for {entity}.\n"
                "\n"
                "Subclasses choose the route with @RequestMapping. Map your own controller to\n"
                f"API_PATH ({names.api_path}); the generated {names.controller} stays on\n"
                f"{names.default_api_path}. Rewritten on every generation run."
            ),
        )
        return self.java_artifact(JavaFile(names.base_controller_package, td, imports), ArtifactKind.BASE)

    def build_extensible(self, schema: Schema) -> Artifact:
        names = derive_names(schema)
        svc = names.service_var
        imports = {
            names.qualified(names.base_controller_package, names.base_controller),
            names.qualified(names.service_package, names.service),
            f"{HTTP}.ResponseEntity",
            f"{WEB}.GetMapping",
            f"{WEB}.RequestMapping",
            f"{WEB}.RestController",
        }
        td = TypeDecl(
            name=names.controller,
            annotations=[Annotation("RestController"), _mapping("RequestMapping", names.default_api_path)],
            extends=names.base_controller,
            methods=[
                Method(
                    names.controller,
                    returns=None,
                    params=[Param(names.service, svc)],
                    body=[f"super({svc});"],
                ),
                Method(
                    "customEndpoint",
                    returns="ResponseEntity<String>",
                    annotations=[_mapping("GetMapping", "/custom")],
                    javadoc="Example endpoint; replace with your own.",
                    body=['return ResponseEntity.ok("Custom endpoint");'],
                ),
            ],
            javadoc=(
                f"Default REST controller for {names.entity}, mounted on {names.default_api_path}.\n"
                "\n"
                "Generated once: edit freely. For the primary API create your own subclass of\n"
                f"{names.base_controller} mapped to {names.base_controller}.API_PATH."
            ),
        )
        return self.java_artifact(JavaFile(names.controller_package, td, imports), ArtifactKind.EXTENSIBLE)
