"""Integration tests against a real local SparkSession.

Require a Java runtime and the Iceberg Spark runtime package. The HIVE
scenario also needs a metastore at FLOE_SPARK_METASTORE_URI.
"""

from __future__ import annotations

from collections.abc import Generator
import os

import pytest

from floe_spark.config import HADOOP, HIVE
from floe_spark.context import CatalogTestContext, assert_equals, row
from floe_spark.names import TableIdentifier
from floe_spark.plugin import SparkCatalogTestBase
from floe_spark.registrar import catalog_conf_key
from floe_spark.warehouse import WarehouseLifecycle

pytestmark = pytest.mark.integration


class TestHadoopCatalog(SparkCatalogTestBase):
    """Round trips through a warehouse-backed hadoop catalog."""

    catalog_scenario = HADOOP

    @pytest.fixture(autouse=True)
    def _drop_table(self, catalog_context: CatalogTestContext) -> Generator[None, None, None]:
        yield
        catalog_context.sql("DROP TABLE IF EXISTS %s", catalog_context.table_name)

    def test_default_namespace_exists(self) -> None:
        """Test default is visible both through SQL and on disk."""
        assert self.validation_namespace_catalog.namespace_exists(("default",))
        namespaces = self.sql("SHOW NAMESPACES IN %s", self.catalog_name)
        assert ("default",) in namespaces

    def test_warehouse_registered(self, catalog_warehouse: WarehouseLifecycle) -> None:
        """Test the catalog points at the class warehouse."""
        key = catalog_conf_key(self.catalog_name, "warehouse")

        assert self.spark.conf.get(key) == catalog_warehouse.uri

    def test_create_insert_select(self) -> None:
        """Test a table can be written and read back."""
        self.sql("CREATE TABLE %s (id bigint, data string) USING iceberg", self.table_name)
        self.sql("INSERT INTO %s VALUES (1, 'a'), (2, 'b')", self.table_name)

        assert_equals(
            "Should read inserted rows",
            [row(1, "a"), row(2, "b")],
            self.sql("SELECT * FROM %s ORDER BY id", self.table_name),
        )
        assert self.scalar_sql("SELECT count(*) FROM %s", self.table_name) == 2

    def test_validation_catalog_sees_table(self) -> None:
        """Test the validation catalog loads metadata written by Spark."""
        self.sql("CREATE TABLE %s (id bigint, data string) USING iceberg", self.table_name)

        assert self.validation_catalog.table_exists(self.table_ident)
        assert self.table_ident in self.validation_catalog.list_tables(("default",))
        table = self.validation_catalog.load_table(self.table_ident)
        assert [field.name for field in table.schema().fields] == ["id", "data"]

    def test_other_tables_in_default(self) -> None:
        """Test qualify() addresses further tables in default."""
        other = self.qualify("other")
        self.sql("CREATE TABLE %s (id bigint) USING iceberg", other)
        try:
            assert self.validation_catalog.table_exists(TableIdentifier.of("default", "other"))
        finally:
            self.sql("DROP TABLE IF EXISTS %s", other)


_CLASS_WAREHOUSES: list[WarehouseLifecycle] = []


class _TableInOwnWarehouse(SparkCatalogTestBase):
    catalog_scenario = HADOOP

    def test_table_lands_in_class_warehouse(self, catalog_warehouse: WarehouseLifecycle) -> None:
        """Test the catalog writes into this class's warehouse, not an earlier one."""
        _CLASS_WAREHOUSES.append(catalog_warehouse)
        self.sql("CREATE TABLE %s (id bigint) USING iceberg", self.table_name)
        try:
            assert self.validation_catalog.table_exists(self.table_ident)
            assert self.validation_catalog.load_table(self.table_ident).schema().fields[0].name == "id"
            for earlier in _CLASS_WAREHOUSES[:-1]:
                assert earlier.path is not None
                assert not earlier.path.exists()
        finally:
            self.sql("DROP TABLE IF EXISTS %s", self.table_name)


class TestFirstHadoopClass(_TableInOwnWarehouse):
    """First class registering the hadoop catalog."""


class TestSecondHadoopClass(_TableInOwnWarehouse):
    """Second class re-registering the hadoop catalog with a new warehouse."""


@pytest.mark.skipif(
    not os.environ.get("FLOE_SPARK_METASTORE_URI"),
    reason="FLOE_SPARK_METASTORE_URI not set",
)
class TestHiveCatalog(SparkCatalogTestBase):
    """Round trips through a metastore-backed catalog."""

    catalog_scenario = HIVE

    def test_create_and_load(self) -> None:
        """Test a table created in Spark is visible to the validation catalog."""
        self.sql("CREATE TABLE IF NOT EXISTS %s (id bigint) USING iceberg", self.table_name)
        try:
            assert self.validation_namespace_catalog.namespace_exists(("default",))
            assert self.validation_catalog.table_exists(self.table_ident)
            table = self.validation_catalog.load_table(self.table_ident)
            assert [field.name for field in table.schema().fields] == ["id"]
        finally:
            self.validation_catalog.drop_table(self.table_ident)
