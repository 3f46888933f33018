from __future__ import annotations

import logging
import re
from datetime import datetime, timedelta
from pathlib import Path
from typing import Callable, List, Optional

from ..artifacts import Artifact, ArtifactKind, OutputRoot
from ..naming import camel_to_snake, derive_names, sql_column_type
from ..schema import Schema
from .base import BaseGenerator

log = logging.getLogger(__name__)

MIGRATION_DIR = "db/migration"
TOKEN_FORMAT = "%Y%m%d%H%M%S"
VERSION_RE = re.compile(r"^V(\d{14})__")


class MigrationClock:
    """
    Hands out version tokens (yyyyMMddHHmmss) that strictly increase.

    Two entities generated within the same second still get distinct,
    ordered versions: the later one is bumped by a second.
    """

    def __init__(self, now: Optional[Callable[[], datetime]] = None) -> None:
        self._now = now or datetime.now
        self._last: Optional[datetime] = None

    def observe(self, token: str) -> None:
        try:
            seen = datetime.strptime(token, TOKEN_FORMAT)
        except ValueError:
            log.debug("Ignoring non-timestamp migration version %s", token)
            return
        if self._last is None or seen > self._last:
            self._last = seen

    def observe_directory(self, directory: Path) -> None:
        if not directory.is_dir():
            return
        for pth in directory.iterdir():
            m = VERSION_RE.match(pth.name)
            if m:
                self.observe(m.group(1))

    def next_token(self) -> str:
        candidate = self._now().replace(microsecond=0)
        if self._last is not None and candidate <= self._last:
            candidate = self._last + timedelta(seconds=1)
        self._last = candidate
        return candidate.strftime(TOKEN_FORMAT)


def migration_file_name(token: str, entity_name: str) -> str:
    return f"V{token}__Create_{camel_to_snake(entity_name)}_table.sql"


def default_sql(schema: Schema) -> str:
    table = derive_names(schema).table
    inline_key = len(schema.id_fields) == 1
    columns: List[str] = []
    for f in schema.fields:
        col = f"    {camel_to_snake(f.name)} {sql_column_type(f)}"
        if f.default_value is not None:
            col += f" DEFAULT {f.default_value}"
        if not f.nullable:
            col += " NOT NULL"
        if inline_key and schema.is_id(f.name):
            col += " PRIMARY KEY"
        columns.append(col)
    if not inline_key:
        # composite key: one table constraint, columns in declaration order
        key_cols = [camel_to_snake(f.name) for f in schema.fields if schema.is_id(f.name)]
        columns.append(f"    PRIMARY KEY ({', '.join(key_cols)})")

    out = "--liquibase formatted sql\n\n"
    out += f"--changeset {camel_to_snake(schema.entity_name)}:1\n"
    out += f"CREATE TABLE {table} (\n"
    out += ",\n".join(columns) + "\n"
    out += ");\n\n"
    out += f"--rollback DROP TABLE {table};\n"
    return out


class MigrationGenerator(BaseGenerator):
    name = "migration"

    def __init__(self, clock: Optional[MigrationClock] = None) -> None:
        self.clock = clock or MigrationClock()

    def build(self, schema: Schema) -> List[Artifact]:
        names = derive_names(schema)
        file_name = migration_file_name(self.clock.next_token(), schema.entity_name)
        return [
            Artifact(
                target_path=f"{MIGRATION_DIR}/{file_name}",
                package="",
                kind=ArtifactKind.MIGRATION,
                content=schema.custom_sql or default_sql(schema),
                root=OutputRoot.RESOURCES,
                name_fragment=names.migration_fragment,
            )
        ]
