"""
Schema model: the validated in-memory description of one entity.

A Schema is validated as soon as it is constructed and is frozen afterwards,
so every generator can consume it read-only and assume it is consistent.
"""
from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional, Tuple

from .errors import SchemaValidationError
from .naming import default_table_name, is_java_identifier, is_reserved_word, map_type, STRING_MAPPING

SQL_TABLE_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*(\.[A-Za-z_][A-Za-z0-9_]*)?$")

# input surface key -> dataclass attribute
SCHEMA_KEYS = {
    "packageName": "package_name",
    "entityName": "entity_name",
    "tableName": "table_name",
    "idFields": "id_fields",
    "fields": "fields",
    "sqlFileContent": "sql_file_content",
}
FIELD_KEYS = {
    "name": "name",
    "type": "type",
    "nullable": "nullable",
    "length": "length",
    "defaultValue": "default_value",
}


def _normalize_keys(raw: Mapping[str, Any], keys: Dict[str, str], what: str) -> Dict[str, Any]:
    allowed = dict(keys)
    allowed.update({v: v for v in keys.values()})
    out: Dict[str, Any] = {}
    for k, v in raw.items():
        if k not in allowed:
            raise SchemaValidationError(f"Unknown {what} key: {k!r}", field=str(k))
        out[allowed[k]] = v
    return out


def _check_identifier(value: Any, what: str, field_name: str) -> None:
    if not isinstance(value, str) or not value.strip():
        raise SchemaValidationError(f"{what} is required", field=field_name)
    if is_reserved_word(value):
        raise SchemaValidationError(f"{what} {value!r} is a reserved word", field=field_name)
    if not is_java_identifier(value):
        raise SchemaValidationError(f"Invalid {what.lower()}: {value!r}", field=field_name)


@dataclass(frozen=True)
class FieldDef:
    name: str
    type: str
    nullable: bool = True
    length: Optional[int] = None
    default_value: Optional[str] = None

    def __post_init__(self) -> None:
        self.validate()

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any]) -> "FieldDef":
        if not isinstance(raw, Mapping):
            raise SchemaValidationError(f"Field definition must be a mapping, got {type(raw).__name__}", field="fields")
        data = _normalize_keys(raw, FIELD_KEYS, "field")
        data.setdefault("name", None)
        data.setdefault("type", None)
        if data.get("default_value") is not None:
            data["default_value"] = str(data["default_value"])
        return cls(**data)

    def validate(self) -> None:
        _check_identifier(self.name, "Field name", "fields.name")
        if not isinstance(self.type, str) or not self.type.strip():
            raise SchemaValidationError(f"Field type is required for field: {self.name}", field=f"fields.{self.name}.type")
        if not isinstance(self.nullable, bool):
            raise SchemaValidationError(
                f"nullable must be true or false for field: {self.name}", field=f"fields.{self.name}.nullable"
            )
        if self.length is not None:
            if isinstance(self.length, bool) or not isinstance(self.length, int) or self.length <= 0:
                raise SchemaValidationError(
                    f"length must be a positive integer for field: {self.name}", field=f"fields.{self.name}.length"
                )
            if map_type(self.type) is not STRING_MAPPING:
                raise SchemaValidationError(
                    f"length is only allowed on string fields, {self.name} is {self.type}",
                    field=f"fields.{self.name}.length",
                )


@dataclass(frozen=True)
class Schema:
    package_name: str
    entity_name: str
    id_fields: Tuple[str, ...]
    fields: Tuple[FieldDef, ...]
    table_name: Optional[str] = None
    sql_file_content: Optional[str] = None

    def __post_init__(self) -> None:
        # normalize collections so callers may pass lists
        object.__setattr__(self, "fields", tuple(self.fields or ()))
        ids: List[str] = []
        for name in self.id_fields or ():
            if name not in ids:
                ids.append(name)
        object.__setattr__(self, "id_fields", tuple(ids))
        self.validate()

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any]) -> "Schema":
        if not isinstance(raw, Mapping):
            raise SchemaValidationError(f"Schema definition must be a mapping, got {type(raw).__name__}")
        data = _normalize_keys(raw, SCHEMA_KEYS, "schema")
        fields = data.get("fields")
        if fields is not None and not isinstance(fields, (list, tuple)):
            raise SchemaValidationError("fields must be a list", field="fields")
        data["fields"] = tuple(FieldDef.from_dict(f) for f in (fields or ()))
        id_fields = data.get("id_fields")
        if isinstance(id_fields, str):
            id_fields = [id_fields]
        if id_fields is not None and not isinstance(id_fields, (list, tuple)):
            raise SchemaValidationError("idFields must be a list", field="idFields")
        data["id_fields"] = tuple(id_fields or ())
        data.setdefault("package_name", None)
        data.setdefault("entity_name", None)
        return cls(**data)

    def validate(self) -> None:
        pkg = self.package_name
        if not isinstance(pkg, str) or not pkg.strip():
            raise SchemaValidationError("Package name is required", field="packageName")
        for part in pkg.split("."):
            if not part or is_reserved_word(part) or not is_java_identifier(part):
                raise SchemaValidationError(f"Invalid package name: {pkg!r}", field="packageName")

        _check_identifier(self.entity_name, "Entity name", "entityName")

        if self.table_name is not None:
            if not isinstance(self.table_name, str):
                raise SchemaValidationError("tableName must be a string", field="tableName")
            if self.table_name.strip() and not SQL_TABLE_RE.match(self.table_name.strip()):
                raise SchemaValidationError(f"Invalid table name: {self.table_name!r}", field="tableName")

        if not self.fields:
            raise SchemaValidationError("At least one field is required", field="fields")
        seen = set()
        for f in self.fields:
            if not isinstance(f, FieldDef):
                raise SchemaValidationError(f"Field entries must be FieldDef, got {type(f).__name__}", field="fields")
            f.validate()
            if f.name in seen:
                raise SchemaValidationError(f"Duplicate field name: {f.name}", field=f"fields.{f.name}")
            seen.add(f.name)

        if not self.id_fields:
            raise SchemaValidationError("At least one ID field is required", field="idFields")
        for id_field in self.id_fields:
            if id_field not in seen:
                raise SchemaValidationError(f"ID field '{id_field}' not found in fields list", field="idFields")

        if self.sql_file_content is not None and not isinstance(self.sql_file_content, str):
            raise SchemaValidationError("sqlFileContent must be a string", field="sqlFileContent")

    @property
    def effective_table_name(self) -> str:
        if self.table_name and self.table_name.strip():
            return self.table_name.strip()
        return default_table_name(self.entity_name)

    @property
    def custom_sql(self) -> Optional[str]:
        if self.sql_file_content and self.sql_file_content.strip():
            return self.sql_file_content
        return None

    def is_id(self, name: str) -> bool:
        return name in self.id_fields
