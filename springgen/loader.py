"""
YAML configuration loading.

Accepted shapes, per YAML document:

    packageName: com.example        # one entity
    entityName: User
    ...

    - {packageName: ..., entityName: User, ...}     # a list of entities

    packageName: com.example        # shared package
    entities:
      - entityName: User
        ...

Several documents separated by ``---`` are concatenated in order.
"""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Iterable, List, Mapping

import yaml

from .errors import ConfigError, SchemaValidationError
from .schema import Schema

log = logging.getLogger(__name__)


def _entries(doc: Any, path: Path) -> List[Any]:
    if doc is None:
        return []
    if isinstance(doc, list):
        return list(doc)
    if not isinstance(doc, Mapping):
        raise ConfigError(f"{path}: expected a mapping or a list of entities, got {type(doc).__name__}")
    if "entities" not in doc:
        return [doc]

    entities = doc["entities"]
    if not isinstance(entities, list):
        raise ConfigError(f"{path}: 'entities' must be a list")
    shared = {k: v for k, v in doc.items() if k != "entities"}
    unexpected = set(shared) - {"packageName", "package_name"}
    if unexpected:
        raise ConfigError(f"{path}: unexpected top-level keys next to 'entities': {sorted(unexpected)}")
    out = []
    for entry in entities:
        if isinstance(entry, Mapping) and shared and not ({"packageName", "package_name"} & set(entry)):
            entry = {**shared, **entry}
        out.append(entry)
    return out


def parse_schemas(text: str, source: Path) -> List[Schema]:
    try:
        docs = list(yaml.safe_load_all(text))
    except yaml.YAMLError as e:
        raise ConfigError(f"{source}: invalid YAML: {e}") from e

    raw: List[Any] = []
    for doc in docs:
        raw.extend(_entries(doc, source))
    if not raw:
        raise ConfigError(f"{source}: no entity definitions found")

    schemas: List[Schema] = []
    for idx, entry in enumerate(raw, start=1):
        try:
            schemas.append(Schema.from_dict(entry))
        except SchemaValidationError as e:
            name = entry.get("entityName") if isinstance(entry, Mapping) else None
            label = f"entity #{idx}" + (f" ({name})" if name else "")
            raise SchemaValidationError(f"{source}: {label}: {e.message}", field=e.field) from e
    log.debug("Loaded %d schema(s) from %s", len(schemas), source)
    return schemas


def load_schemas(path: Path) -> List[Schema]:
    pth = Path(path)
    try:
        text = pth.read_text(encoding="utf-8")
    except FileNotFoundError as e:
        raise ConfigError(f"Configuration file not found: {pth}") from e
    except OSError as e:
        raise ConfigError(f"Failed to read configuration file {pth}: {e}") from e
    return parse_schemas(text, pth)


def load_all(paths: Iterable[Path]) -> List[Schema]:
    out: List[Schema] = []
    for pth in paths:
        out.extend(load_schemas(pth))
    return out
