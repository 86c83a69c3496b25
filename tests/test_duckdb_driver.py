"""Tests for the DuckDB driver against a real on-disk database."""

import datetime

import pytest

from dbdrive.database import DuckDBDriver, DuckDBTableInfo
from dbdrive.database.duckdb import MEMORY_DATABASE, parse_database_path
from dbdrive.errors import BackendError, NameRejectedError
from dbdrive.navigation import DatabaseNavigator
from dbdrive.paths import ObjectType


class TestParseDatabasePath:
    """Tests for connection string parsing."""

    @pytest.mark.parametrize("connection_string,expected", [
        ("/data/warehouse.duckdb", "/data/warehouse.duckdb"),
        ("duckdb:////data/warehouse.duckdb", "/data/warehouse.duckdb"),
        ("duckdb://warehouse.duckdb", "warehouse.duckdb"),
        ("warehouse.duckdb?threads=4", "warehouse.duckdb"),
        ("", MEMORY_DATABASE),
        (None, MEMORY_DATABASE),
        ("duckdb:///", MEMORY_DATABASE),
    ])
    def test_parse(self, connection_string, expected):
        """Test file paths and duckdb URLs resolve to a database file."""
        assert parse_database_path(connection_string) == expected


class TestDuckDBSchemas:
    """Tests for schema listing."""

    def test_list_schema_names(self, duckdb_driver):
        """Test user schemas of the current database are listed."""
        assert list(duckdb_driver.list_schema_names()) == ["main", "sales"]

    def test_list_schemas(self, duckdb_driver):
        """Test schema records carry the catalog name."""
        schemas = list(duckdb_driver.list_schemas())

        assert [s.schema_name for s in schemas] == ["main", "sales"]
        assert schemas[1].catalog_name == "warehouse"

    def test_schema_lookup_is_case_insensitive(self, duckdb_driver):
        """Test names match regardless of case by default."""
        assert duckdb_driver.schema_exists("SALES")
        assert duckdb_driver.get_schema("Sales").schema_name == "sales"
        assert duckdb_driver.get_schema("nope") is None

    def test_case_sensitive_override(self, duckdb_path):
        """Test case_sensitive=True requires the exact stored name."""
        driver = DuckDBDriver(connection_string=duckdb_path, case_sensitive=True)

        assert driver.schema_exists("sales")
        assert not driver.schema_exists("SALES")

    def test_schema_names_pattern(self, duckdb_driver):
        """Test regular expression filtering."""
        assert list(duckdb_driver.list_schema_names("^sa")) == ["sales"]


class TestDuckDBTables:
    """Tests for table metadata."""

    def test_list_tables(self, duckdb_driver):
        """Test tables come back with catalog enrichment."""
        tables = {t.table_name: t for t in duckdb_driver.list_tables("sales")}

        assert sorted(tables) == ["customers", "orders"]
        orders = tables["orders"]
        assert isinstance(orders, DuckDBTableInfo)
        assert orders.has_primary_key is True
        assert orders.column_count == 4
        assert orders.row_count == 10
        assert tables["customers"].has_primary_key is False

    def test_get_table_columns(self, duckdb_driver):
        """Test columns are populated in declaration order."""
        table = duckdb_driver.get_table("sales", "orders")

        assert [c.column_name for c in table.columns] == ["id", "customer", "total", "placed_at"]
        total = table.columns[2]
        assert total.type_name == "DECIMAL(10,2)"
        assert total.nullable is True
        assert table.columns[1].nullable is False
        assert table.columns[0].ordinal_position == 1

    def test_get_table_ignores_case(self, duckdb_driver):
        """Test SALES.ORDERS resolves to sales.orders."""
        table = duckdb_driver.get_table("SALES", "ORDERS")

        assert table.schema_name == "sales"
        assert table.table_name == "orders"
        assert len(table.columns) == 4

    def test_missing_table(self, duckdb_driver):
        """Test lookups of absent tables return None and False."""
        assert duckdb_driver.get_table("sales", "missing") is None
        assert not duckdb_driver.table_exists("sales", "missing")

    def test_views_are_not_tables(self, duckdb_driver):
        """Test a view is not reported as a table."""
        assert not duckdb_driver.table_exists("sales", "big_orders")
        assert list(duckdb_driver.list_table_names("sales")) == ["customers", "orders"]

    def test_table_names_pattern(self, duckdb_driver):
        """Test table names filtered by regular expression."""
        assert list(duckdb_driver.list_table_names("sales", "^cust")) == ["customers"]

    def test_object_exists(self, duckdb_driver):
        """Test object existence dispatches on the object type."""
        assert duckdb_driver.object_exists("sales", ObjectType.TABLE, ["orders"])
        assert duckdb_driver.object_exists("sales", ObjectType.VIEW, ["big_orders"])
        assert not duckdb_driver.object_exists("sales", ObjectType.VIEW, ["orders"])


class TestDuckDBViews:
    """Tests for view metadata."""

    def test_list_views(self, duckdb_driver):
        """Test views carry their definition."""
        views = list(duckdb_driver.list_views("sales"))

        assert [v.view_name for v in views] == ["big_orders"]
        assert "SELECT" in views[0].definition.upper()

    def test_view_names(self, duckdb_driver):
        """Test view names, plain and filtered."""
        assert list(duckdb_driver.list_view_names("sales")) == ["big_orders"]
        assert list(duckdb_driver.list_view_names("sales", "^small")) == []
        assert list(duckdb_driver.list_view_names("main")) == []


class TestDuckDBRows:
    """Tests for row streaming."""

    def test_stream_rows_cap(self, duckdb_driver):
        """Test max_result bounds the rows and values are plain scalars."""
        rows = list(duckdb_driver.stream_rows("sales", "orders", max_result=3))

        assert len(rows) == 3
        assert list(rows[0]) == ["id", "customer", "total", "placed_at"]
        assert rows[0]["total"] == 1.5
        assert isinstance(rows[0]["total"], float)
        assert rows[0]["placed_at"] == datetime.datetime(2024, 1, 1, 10, 0)

    def test_stream_rows_default_cap(self, duckdb_path):
        """Test the driver's max_read_result applies when no cap is given."""
        driver = DuckDBDriver(connection_string=duckdb_path, max_read_result=4)

        assert len(list(driver.stream_rows("sales", "orders"))) == 4

    def test_stream_all_rows(self, duckdb_driver):
        """Test zero streams everything."""
        assert len(list(duckdb_driver.stream_rows("sales", "orders", max_result=0))) == 10

    def test_stream_view_rows(self, duckdb_driver):
        """Test views stream like tables."""
        rows = list(duckdb_driver.stream_rows("sales", "big_orders", max_result=0))

        assert [r["id"] for r in rows] == [10]

    def test_rejected_name_fails_eagerly(self, duckdb_driver):
        """Test invalid names are rejected before a connection is opened."""
        with pytest.raises(NameRejectedError):
            duckdb_driver.stream_rows("sales", "orders; DROP TABLE x")

    def test_missing_object_is_backend_error(self, duckdb_driver):
        """Test catalog errors surface as BackendError."""
        with pytest.raises(BackendError) as exc_info:
            list(duckdb_driver.stream_rows("sales", "missing"))

        assert "missing" in exc_info.value.message

    def test_ad_hoc_query(self, duckdb_driver):
        """Test named parameters bind with the $name style."""
        rows = list(duckdb_driver.executor.execute(
            "SELECT id FROM sales.orders WHERE id > $low ORDER BY id", {"low": 8}
        ))

        assert rows == [{"id": 9}, {"id": 10}]

    def test_read_only(self, duckdb_driver):
        """Test the database file is opened read-only."""
        with pytest.raises(BackendError):
            list(duckdb_driver.executor.execute("CREATE TABLE sales.scratch (x INTEGER)"))


class TestDuckDBNavigation:
    """Tests for browsing a DuckDB database through the navigator."""

    @pytest.fixture
    def navigator(self, duckdb_driver):
        return DatabaseNavigator(duckdb_driver, drive_name="duck", max_read_result=2)

    def test_browse_top_down(self, navigator):
        """Test schemas, object types, tables and rows in turn."""
        assert list(navigator.get_child_names("duck:\\")) == ["main", "sales"]
        assert list(navigator.get_child_names("duck:\\sales")) == ["TABLE", "VIEW"]
        assert list(navigator.get_child_names("duck:\\sales\\table")) == ["customers", "orders"]

        rows = list(navigator.get_child_items("duck:\\sales\\TABLE\\orders"))
        assert [r.item["id"] for r in rows] == [1, 2]

    def test_get_item(self, navigator):
        """Test an object path resolves to table metadata."""
        table = navigator.get_item("duck:/SALES/TABLE/ORDERS")

        assert table.table_name == "orders"
        assert navigator.item_exists("duck:\\sales\\VIEW\\big_orders")
        assert not navigator.item_exists("duck:\\sales\\VIEW\\orders")

    def test_recursive_listing(self, navigator):
        """Test a recursive walk of the sales schema."""
        paths = [c.path for c in navigator.get_child_items("duck:\\sales", recurse=True) if c.is_container]

        assert paths == [
            "duck:\\sales\\TABLE",
            "duck:\\sales\\TABLE\\customers",
            "duck:\\sales\\TABLE\\orders",
            "duck:\\sales\\VIEW",
            "duck:\\sales\\VIEW\\big_orders",
        ]

    def test_recursive_listing_skips_invalid_schema_names(self, tmp_path):
        """Test a schema named outside the identifier rules is reported, not fatal."""
        import duckdb

        path = str(tmp_path / "names.duckdb")
        connection = duckdb.connect(path)
        try:
            connection.execute('CREATE SCHEMA "bad-schema"')
            connection.execute("CREATE SCHEMA zeta")
            connection.execute("CREATE TABLE zeta.items (id INTEGER)")
        finally:
            connection.close()
        navigator = DatabaseNavigator(DuckDBDriver(connection_string=path), drive_name="db")
        errors = []

        children = list(navigator.get_child_items(
            "db:\\", recurse=True, on_error=lambda p, e: errors.append((p, e.details["name"])),
        ))

        paths = [c.path for c in children]
        assert "db:\\zeta\\TABLE\\items" in paths
        assert not any("bad-schema" in p for p in paths)
        assert errors == [("db:\\", "bad-schema")]
