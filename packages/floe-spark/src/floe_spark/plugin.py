"""pytest plugin providing Spark catalog fixtures.

Fixtures:
    spark_session_config: SparkSessionConfig read from FLOE_SPARK_* variables
    spark: shared SparkSession (skips when no Java runtime is available)
    catalog_session: child session of ``spark`` owned by one test class
    catalog_warehouse: WarehouseLifecycle shared by every test in a class
    catalog_config: catalog scenario under test (HADOOP unless overridden)
    catalog_context: CatalogTestContext for the current test

Choosing the catalog scenario, highest precedence first:
    1. parametrize ``catalog_config`` directly (see ``parametrize_catalogs``)
    2. ``@pytest.mark.spark_catalog(HIVE)`` on the test or class
    3. a ``catalog_scenario`` attribute on the test class
    4. HADOOP

Usage:
    ```python
    from floe_spark.config import HADOOP, HIVE
    from floe_spark.plugin import SparkCatalogTestBase, parametrize_catalogs

    @parametrize_catalogs(HADOOP, HIVE)
    class TestCreateTable(SparkCatalogTestBase):
        def test_create(self) -> None:
            self.sql("CREATE TABLE %s (id bigint) USING iceberg", self.table_name)
            assert self.validation_catalog.table_exists(self.table_ident)
    ```
"""

from __future__ import annotations

from collections.abc import Generator
import os
import shutil
from typing import TYPE_CHECKING, Any, ClassVar

import pytest

from floe_spark.config import HADOOP, CatalogConfig, SparkSessionConfig
from floe_spark.context import CatalogTestContext
from floe_spark.errors import WarehouseCleanupError
from floe_spark.observability import get_logger
from floe_spark.session import build_spark_session
from floe_spark.warehouse import WarehouseLifecycle

if TYPE_CHECKING:
    from pyspark.sql import SparkSession

    from floe_spark.catalogs import SupportsNamespaces, ValidationCatalog
    from floe_spark.names import TableIdentifier

CATALOG_MARKER = "spark_catalog"


def java_available() -> bool:
    """Check whether a Java runtime for Spark can be found."""
    return bool(os.environ.get("JAVA_HOME")) or shutil.which("java") is not None


def parametrize_catalogs(*configs: CatalogConfig) -> pytest.MarkDecorator:
    """Run a test (or every test in a class) once per catalog scenario."""
    return pytest.mark.parametrize(
        "catalog_config",
        configs,
        ids=[config.name for config in configs],
    )


def pytest_configure(config: pytest.Config) -> None:
    config.addinivalue_line(
        "markers",
        f"{CATALOG_MARKER}(config): catalog scenario used by the catalog_context fixture",
    )


@pytest.fixture(scope="session")
def spark_session_config() -> SparkSessionConfig:
    return SparkSessionConfig.from_env()


@pytest.fixture(scope="session")
def spark(spark_session_config: SparkSessionConfig) -> Generator[SparkSession, None, None]:
    """Shared SparkSession for the whole run."""
    if not java_available():
        pytest.skip("Java runtime not available for Spark")

    session = build_spark_session(spark_session_config)
    yield session
    session.stop()


@pytest.fixture(scope="class")
def catalog_session(spark: SparkSession) -> SparkSession:
    """Session whose catalogs belong to one test class.

    Spark loads a catalog once per session and ignores later conf changes
    to it, so each class registers its catalogs on a fresh session sharing
    the JVM of ``spark``.
    """
    return spark.newSession()


@pytest.fixture(scope="class")
def catalog_warehouse() -> Generator[WarehouseLifecycle, None, None]:
    """Warehouse created before the first test of a class, removed after the last.

    Allocation failures error every test in the class. A warehouse that
    cannot be deleted fails the class teardown.
    """
    warehouse = WarehouseLifecycle()
    warehouse.create()
    yield warehouse
    try:
        warehouse.destroy()
    except WarehouseCleanupError as exc:
        get_logger().error("warehouse_cleanup_failed", path=str(exc.path))
        pytest.fail(str(exc), pytrace=False)


@pytest.fixture
def catalog_config(request: pytest.FixtureRequest) -> CatalogConfig:
    """Catalog scenario from the marker, the test class, or HADOOP."""
    marker = request.node.get_closest_marker(CATALOG_MARKER)
    if marker is not None:
        scenario: CatalogConfig = marker.args[0]
        return scenario
    if request.cls is not None:
        class_scenario = getattr(request.cls, "catalog_scenario", None)
        if class_scenario is not None:
            return class_scenario
    return HADOOP


@pytest.fixture
def catalog_context(
    catalog_session: SparkSession,
    catalog_config: CatalogConfig,
    catalog_warehouse: WarehouseLifecycle,
) -> CatalogTestContext:
    return CatalogTestContext(catalog_session, catalog_config, catalog_warehouse)


class SparkCatalogTestBase:
    """Base class for tests that run SQL against a registered catalog.

    Every test gets the CatalogTestContext attributes bound onto ``self``.
    ``self.spark`` is the class's own session (``catalog_session``), so
    catalogs registered by one class never leak into the next.

    Class Attributes:
        catalog_scenario: Catalog scenario used when the test does not
            parametrize ``catalog_config`` or carry a ``spark_catalog`` marker.
    """

    catalog_scenario: ClassVar[CatalogConfig | None] = None

    context: CatalogTestContext
    spark: SparkSession
    catalog_name: str
    validation_catalog: ValidationCatalog
    validation_namespace_catalog: SupportsNamespaces
    table_ident: TableIdentifier
    table_name: str

    @pytest.fixture(autouse=True)
    def _bind_catalog_context(self, catalog_context: CatalogTestContext) -> None:
        self.context = catalog_context
        self.spark = catalog_context.session  # type: ignore[assignment]
        self.catalog_name = catalog_context.catalog_name
        self.validation_catalog = catalog_context.validation_catalog
        self.validation_namespace_catalog = catalog_context.validation_namespace_catalog
        self.table_ident = catalog_context.table_ident
        self.table_name = catalog_context.table_name

    def qualify(self, table: str) -> str:
        return self.context.qualify(table)

    def sql(self, query: str, *args: Any) -> list[tuple[Any, ...]]:
        return self.context.sql(query, *args)

    def scalar_sql(self, query: str, *args: Any) -> Any:
        return self.context.scalar_sql(query, *args)
