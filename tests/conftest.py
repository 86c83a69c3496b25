"""Shared pytest fixtures for db-drive tests."""

import datetime
from unittest.mock import MagicMock

import pytest

from dbdrive.database import CatalogDriver, OracleDriver, PostgresDriver, DuckDBDriver
from dbdrive.database.models import ColumnInfo, SchemaInfo, TableInfo, ViewInfo
from dbdrive.navigation import DatabaseNavigator
from dbdrive.paths import ObjectType
from tests.fixtures.fake_db import FakeDatabase


@pytest.fixture
def fake_db():
    """Create a fresh scripted DB-API backend for each test."""
    return FakeDatabase()


@pytest.fixture
def oracle_driver(fake_db):
    """Oracle driver whose connections come from the fake backend."""
    return OracleDriver(connection_factory=fake_db.connect, timeout=30, bulk_read_limit=2)


@pytest.fixture
def postgres_driver(fake_db):
    """PostgreSQL driver whose connections come from the fake backend."""
    return PostgresDriver(connection_factory=fake_db.connect, timeout=30, bulk_read_limit=2)


@pytest.fixture
def sample_table():
    """SALES.ORDERS table metadata with two columns."""
    return TableInfo(
        schema_name="SALES",
        table_name="ORDERS",
        row_count=10,
        columns=[
            ColumnInfo(schema_name="SALES", table_name="ORDERS", column_name="ID", data_type="NUMBER", nullable=False),
            ColumnInfo(schema_name="SALES", table_name="ORDERS", column_name="TOTAL", data_type="NUMBER"),
        ],
    )


@pytest.fixture
def mock_driver(sample_table):
    """CatalogDriver mock preloaded with a SALES schema holding ORDERS and ORDERS_V."""
    driver = MagicMock(spec=CatalogDriver)
    driver.PROVIDER = "oracle"
    driver.list_schemas.return_value = iter([SchemaInfo("HR"), SchemaInfo("SALES")])
    driver.list_schema_names.return_value = iter(["HR", "SALES"])
    driver.get_schema.return_value = SchemaInfo("SALES")
    driver.schema_exists.return_value = True
    driver.supported_object_types.return_value = [ObjectType.TABLE, ObjectType.VIEW]
    driver.list_tables.return_value = iter([sample_table])
    driver.list_views.return_value = iter([ViewInfo("SALES", "ORDERS_V")])
    driver.list_table_names.return_value = iter(["ORDERS"])
    driver.list_view_names.return_value = iter(["ORDERS_V"])
    driver.get_table.return_value = sample_table
    driver.get_view.return_value = ViewInfo("SALES", "ORDERS_V")
    driver.object_exists.return_value = True
    driver.stream_rows.return_value = iter([{"ID": 1, "TOTAL": 9.5}, {"ID": 2, "TOTAL": 12.0}])
    return driver


@pytest.fixture
def navigator(mock_driver):
    """Navigator bound to the db:\\ drive over the mock driver."""
    return DatabaseNavigator(mock_driver, drive_name="db")


@pytest.fixture
def duckdb_path(tmp_path):
    """On-disk DuckDB database with a sales schema, two tables and a view."""
    import duckdb

    path = tmp_path / "warehouse.duckdb"
    values = ", ".join(
        f"({i}, 'customer{i}', {i}.50, TIMESTAMP '2024-01-{i:02d} 10:00:00')"
        for i in range(1, 11)
    )
    connection = duckdb.connect(str(path))
    try:
        connection.execute("CREATE SCHEMA sales")
        connection.execute(
            "CREATE TABLE sales.orders ("
            "id INTEGER PRIMARY KEY, customer VARCHAR NOT NULL, total DECIMAL(10,2), placed_at TIMESTAMP)"
        )
        connection.execute(f"INSERT INTO sales.orders VALUES {values}")
        connection.execute("CREATE TABLE sales.customers (id INTEGER, name VARCHAR)")
        connection.execute("CREATE VIEW sales.big_orders AS SELECT id, total FROM sales.orders WHERE total > 10")
        connection.execute("CREATE TABLE main.notes (body VARCHAR)")
    finally:
        connection.close()
    return str(path)


@pytest.fixture
def duckdb_driver(duckdb_path):
    """DuckDB driver opening the on-disk sample database read-only."""
    return DuckDBDriver(connection_string=duckdb_path)


@pytest.fixture
def created_at():
    return datetime.datetime(2024, 1, 15, 9, 30)
