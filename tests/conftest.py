"""
Shared test fixtures.
"""
from datetime import datetime

import pytest

from springgen.generators import MigrationClock
from springgen.orchestrator import OutputRoots
from springgen.schema import FieldDef, Schema

FIXED_NOW = datetime(2024, 1, 15, 10, 30, 0)


def make_user_schema(**overrides) -> Schema:
    data = dict(
        package_name="com.example",
        entity_name="User",
        id_fields=("id",),
        fields=(
            FieldDef("id", "Long", nullable=False),
            FieldDef("username", "String", length=50),
            FieldDef("email", "String"),
            FieldDef("active", "Boolean"),
        ),
    )
    data.update(overrides)
    return Schema(**data)


@pytest.fixture
def user_schema() -> Schema:
    """User{id Long not null, username String(50), email String, active Boolean}."""
    return make_user_schema()


@pytest.fixture
def product_schema() -> Schema:
    return Schema(
        package_name="com.example.shop",
        entity_name="Product",
        table_name="catalog_products",
        id_fields=("sku",),
        fields=(
            FieldDef("sku", "String", nullable=False, length=32),
            FieldDef("price", "BigDecimal", nullable=False, default_value="0"),
            FieldDef("releasedOn", "LocalDate"),
        ),
    )


@pytest.fixture
def roots(tmp_path) -> OutputRoots:
    return OutputRoots(
        main=tmp_path / "src" / "main" / "java",
        test=tmp_path / "src" / "test" / "java",
        resources=tmp_path / "src" / "main" / "resources",
    )


@pytest.fixture
def clock() -> MigrationClock:
    return MigrationClock(lambda: FIXED_NOW)


@pytest.fixture
def schema_factory():
    return make_user_schema
