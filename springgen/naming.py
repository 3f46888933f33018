"""
Naming and type derivation shared by every generator.

Everything here is a pure function of its arguments: two generators asking for
the repository name, the identifier type or a column type of the same schema
always get the same answer.
"""
from __future__ import annotations

import re
from dataclasses import dataclass
from typing import TYPE_CHECKING, Dict, List, Optional, Tuple

from javalang.tokenizer import Identifier, Keyword, LexerError, tokenize

from .errors import GenerationError

if TYPE_CHECKING:  # pragma: no cover - typing only
    from .schema import FieldDef, Schema

RESERVED_LITERALS = {"true", "false", "null", "_"}

UNIQUE_FIELD_NAMES = ("username", "email")  # uniqueness by naming convention only
ACTIVE_FIELD = "active"

DEFAULT_ROUTE_PREFIX = "/api"
DEFAULT_CONTROLLER_SEGMENT = "default"

# ---------------- type mapping ----------------


@dataclass(frozen=True)
class TypeMapping:
    java_type: str
    sql_type: str
    java_import: Optional[str] = None
    identity_generated: bool = False


STRING_MAPPING = TypeMapping("String", "VARCHAR(255)")

TYPE_MAPPINGS: Dict[str, TypeMapping] = {
    "String": STRING_MAPPING,
    "Long": TypeMapping("Long", "BIGINT", identity_generated=True),
    "Integer": TypeMapping("Integer", "INTEGER", identity_generated=True),
    "Short": TypeMapping("Short", "SMALLINT"),
    "Byte": TypeMapping("Byte", "TINYINT"),
    "Double": TypeMapping("Double", "DOUBLE"),
    "Float": TypeMapping("Float", "FLOAT"),
    "BigDecimal": TypeMapping("BigDecimal", "DECIMAL(19,2)", "java.math.BigDecimal"),
    "Boolean": TypeMapping("Boolean", "BOOLEAN"),
    "LocalDate": TypeMapping("LocalDate", "DATE", "java.time.LocalDate"),
    "LocalDateTime": TypeMapping("LocalDateTime", "TIMESTAMP", "java.time.LocalDateTime"),
    "LocalTime": TypeMapping("LocalTime", "TIME", "java.time.LocalTime"),
    "UUID": TypeMapping("UUID", "UUID", "java.util.UUID"),
}


def map_type(type_name: str) -> TypeMapping:
    """Unknown types fall back to the String mapping on purpose."""
    return TYPE_MAPPINGS.get((type_name or "").strip(), STRING_MAPPING)


def java_type(f: "FieldDef") -> str:
    return map_type(f.type).java_type


def sql_column_type(f: "FieldDef") -> str:
    mapping = map_type(f.type)
    if mapping is STRING_MAPPING and f.length is not None:
        return f"VARCHAR({f.length})"
    return mapping.sql_type


def add_type_imports(type_name: str, imports: set) -> None:
    imp = map_type(type_name).java_import
    if imp:
        imports.add(imp)

# ---------------- identifiers ----------------


def is_reserved_word(word: str) -> bool:
    return word in Keyword.VALUES or word in RESERVED_LITERALS


def is_java_identifier(name: str) -> bool:
    if not isinstance(name, str) or not name:
        return False
    try:
        tokens = list(tokenize(name))
    except LexerError:
        return False
    return len(tokens) == 1 and type(tokens[0]) is Identifier and tokens[0].value == name

# ---------------- case conversion ----------------


def camel_to_snake(name: str) -> str:
    # digits next to a case boundary are not split (field1Name -> field1name)
    return re.sub(r"([a-z])([A-Z])", r"\1_\2", name).lower()


def snake_to_camel(name: str) -> str:
    out: List[str] = []
    upper_next = False
    for c in name:
        if c == "_":
            upper_next = True
        elif upper_next:
            out.append(c.upper())
            upper_next = False
        else:
            out.append(c)
    return "".join(out)


def capitalize(s: str) -> str:
    return s[:1].upper() + s[1:] if s else s


def uncapitalize(s: str) -> str:
    return s[:1].lower() + s[1:] if s else s


def variable_name(type_name: str) -> str:
    var = uncapitalize(type_name)
    if is_reserved_word(var):
        return var + "Value"
    return var


def getter_name(field_name: str) -> str:
    return "get" + capitalize(field_name)


def setter_name(field_name: str) -> str:
    return "set" + capitalize(field_name)


def default_table_name(entity_name: str) -> str:
    return entity_name.lower() + "s"

# ---------------- derived artifact names ----------------


@dataclass(frozen=True)
class ArtifactNames:
    entity: str
    repository: str
    service: str
    base_service_impl: str
    service_impl: str
    base_controller: str
    controller: str

    entity_package: str
    repository_package: str
    service_package: str
    base_service_package: str
    controller_package: str
    base_controller_package: str

    entity_var: str
    repository_var: str
    service_var: str

    table: str
    resource: str
    api_path: str
    default_api_path: str
    migration_fragment: str

    def qualified(self, package: str, simple: str) -> str:
        return f"{package}.{simple}"


def derive_names(schema: "Schema") -> ArtifactNames:
    entity = schema.entity_name
    pkg = schema.package_name
    resource = default_table_name(entity)
    repository = entity + "Repository"
    service = entity + "Service"
    return ArtifactNames(
        entity=entity,
        repository=repository,
        service=service,
        base_service_impl=f"Base{entity}ServiceImpl",
        service_impl=f"{entity}ServiceImpl",
        base_controller=f"Base{entity}Controller",
        controller=f"{entity}Controller",
        entity_package=pkg,
        repository_package=f"{pkg}.repository",
        service_package=f"{pkg}.service",
        base_service_package=f"{pkg}.service.base",
        controller_package=f"{pkg}.controller",
        base_controller_package=f"{pkg}.controller.base",
        entity_var=variable_name(entity),
        repository_var=variable_name(repository),
        service_var=variable_name(service),
        table=schema.effective_table_name,
        resource=resource,
        api_path=f"{DEFAULT_ROUTE_PREFIX}/{resource}",
        default_api_path=f"{DEFAULT_ROUTE_PREFIX}/{DEFAULT_CONTROLLER_SEGMENT}/{resource}",
        migration_fragment=f"_Create_{camel_to_snake(entity)}_table.sql",
    )

# ---------------- field selection ----------------


def id_field(schema: "Schema") -> "FieldDef":
    for f in schema.fields:
        if schema.is_id(f.name):
            return f
    raise GenerationError(f"No ID field declared for entity {schema.entity_name}")


def id_java_type(schema: "Schema") -> str:
    return java_type(id_field(schema))


def uses_generated_identity(schema: "Schema", f: "FieldDef") -> bool:
    return len(schema.id_fields) == 1 and schema.is_id(f.name) and map_type(f.type).identity_generated


def unique_lookup_fields(schema: "Schema") -> List["FieldDef"]:
    return [f for f in schema.fields if f.name in UNIQUE_FIELD_NAMES and not schema.is_id(f.name)]


def active_flag_field(schema: "Schema") -> Optional["FieldDef"]:
    for f in schema.fields:
        if f.name == ACTIVE_FIELD and f.type.strip() == "Boolean":
            return f
    return None


def update_assignments(schema: "Schema") -> List[Tuple[str, str]]:
    """(setter, getter) pairs copied by a merge-update: every non-identity field."""
    return [(setter_name(f.name), getter_name(f.name)) for f in schema.fields if not schema.is_id(f.name)]
