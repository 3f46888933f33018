"""Tests for the migration generator and its version clock."""

from datetime import datetime

from springgen.artifacts import ArtifactKind, OutputRoot
from springgen.generators import MigrationClock, MigrationGenerator, default_sql
from springgen.generators.migration import migration_file_name


def test_clock_is_strictly_increasing():
    clock = MigrationClock(lambda: datetime(2024, 1, 15, 10, 30, 0, 123456))
    assert [clock.next_token() for _ in range(3)] == ["20240115103000", "20240115103001", "20240115103002"]


def test_clock_follows_real_time_when_ahead():
    times = iter([datetime(2024, 1, 1, 0, 0, 0), datetime(2024, 6, 1, 0, 0, 0)])
    clock = MigrationClock(lambda: next(times))
    assert clock.next_token() == "20240101000000"
    assert clock.next_token() == "20240601000000"


def test_clock_seeded_from_directory(tmp_path, clock):
    (tmp_path / "V20991231235959__Create_order_table.sql").write_text("", encoding="utf-8")
    (tmp_path / "V1__baseline.sql").write_text("", encoding="utf-8")
    (tmp_path / "README.md").write_text("", encoding="utf-8")
    clock.observe_directory(tmp_path)
    assert clock.next_token() == "21000101000000"


def test_clock_ignores_bad_tokens(clock):
    clock.observe("20241399999999")
    assert clock.next_token() == "20240115103000"


def test_migration_file_name():
    assert migration_file_name("20240115103000", "UserAccount") == "V20240115103000__Create_user_account_table.sql"


def test_default_sql_for_user(user_schema):
    assert default_sql(user_schema) == (
        "--liquibase formatted sql\n"
        "\n"
        "--changeset user:1\n"
        "CREATE TABLE users (\n"
        "    id BIGINT NOT NULL PRIMARY KEY,\n"
        "    username VARCHAR(50),\n"
        "    email VARCHAR(255),\n"
        "    active BOOLEAN\n"
        ");\n"
        "\n"
        "--rollback DROP TABLE users;\n"
    )


def test_default_sql_uses_table_override_and_defaults(product_schema):
    sql = default_sql(product_schema)
    assert "CREATE TABLE catalog_products (" in sql
    assert "    sku VARCHAR(32) NOT NULL PRIMARY KEY,\n" in sql
    assert "    price DECIMAL(19,2) DEFAULT 0 NOT NULL,\n" in sql
    assert "    released_on DATE\n);" in sql
    assert sql.endswith("--rollback DROP TABLE catalog_products;\n")


def test_migration_artifact(user_schema, clock):
    (art,) = MigrationGenerator(clock).build(user_schema)
    assert art.kind is ArtifactKind.MIGRATION
    assert art.root is OutputRoot.RESOURCES
    assert art.target_path == "db/migration/V20240115103000__Create_user_table.sql"
    assert art.name_fragment == "_Create_user_table.sql"
    assert art.content == default_sql(user_schema)


def test_custom_sql_is_used_verbatim(schema_factory, clock):
    custom = "CREATE TABLE users (id BIGINT PRIMARY KEY);\n"
    (art,) = MigrationGenerator(clock).build(schema_factory(sql_file_content=custom))
    assert art.content == custom


def test_composite_key_is_a_single_table_constraint(schema_factory):
    sql = default_sql(schema_factory(id_fields=("id", "email")))
    assert sql.count("PRIMARY KEY") == 1
    assert "    id BIGINT NOT NULL,\n" in sql
    assert "    email VARCHAR(255),\n" in sql
    assert "    active BOOLEAN,\n    PRIMARY KEY (id, email)\n);" in sql
