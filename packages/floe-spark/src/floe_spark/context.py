"""Per-test catalog context.

CatalogTestContext is built once per test. It registers the catalog under
test with the shared session, makes sure ``default`` exists, and exposes
the names and validation catalog the test works with. The warehouse is
passed in by reference; the context never creates or deletes it.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from typing import TYPE_CHECKING, Any

from floe_spark.catalogs import SupportsNamespaces, create_validation_catalog
from floe_spark.names import TableIdentifier, TableNameResolver
from floe_spark.namespaces import NamespaceProvisioner
from floe_spark.registrar import CatalogRegistrar

if TYPE_CHECKING:
    from floe_spark.catalogs import ValidationCatalog
    from floe_spark.config import CatalogConfig
    from floe_spark.session import SparkSessionLike
    from floe_spark.warehouse import WarehouseLifecycle


def to_python(value: Any) -> Any:
    """Convert Spark result values into plain tuples, lists and dicts."""
    if isinstance(value, tuple):  # pyspark Row is a tuple subclass
        return tuple(to_python(item) for item in value)
    if isinstance(value, list):
        return [to_python(item) for item in value]
    if isinstance(value, dict):
        return {to_python(k): to_python(v) for k, v in value.items()}
    return value


def rows_to_tuples(rows: Iterable[Any]) -> list[tuple[Any, ...]]:
    return [to_python(row) for row in rows]


def row(*values: Any) -> tuple[Any, ...]:
    """Build an expected row for ``assert_equals``."""
    return values


def assert_equals(
    context: str,
    expected_rows: Sequence[Sequence[Any]],
    actual_rows: Sequence[Sequence[Any]],
) -> None:
    """Assert two row lists match, reporting the first differing row."""
    assert len(expected_rows) == len(actual_rows), (
        f"{context}: number of results should match "
        f"(expected {len(expected_rows)}, got {len(actual_rows)})"
    )
    for index, (expected, actual) in enumerate(zip(expected_rows, actual_rows)):
        assert tuple(expected) == tuple(actual), (
            f"{context}: row {index + 1} contents should match: {expected!r} != {actual!r}"
        )


class CatalogTestContext:
    """Catalog wiring for a single test.

    Construction order: validation catalog, catalog registration, default
    namespace provisioning, table names.

    Attributes:
        config: Catalog scenario under test.
        catalog_name: Name of the catalog in SQL.
        validation_catalog: Direct handle on the catalog's contents.
        table_ident: Identifier of the default test table.
        table_name: SQL name of the default test table.

    Example:
        >>> ctx = CatalogTestContext(spark, HADOOP, warehouse)
        >>> ctx.sql("CREATE TABLE %s (id bigint) USING iceberg", ctx.table_name)
        >>> ctx.validation_catalog.table_exists(ctx.table_ident)
        True
    """

    def __init__(
        self,
        session: SparkSessionLike,
        config: CatalogConfig,
        warehouse: WarehouseLifecycle,
    ) -> None:
        self.session = session
        self.config = config
        self.catalog_name = config.name
        self.validation_catalog: ValidationCatalog = create_validation_catalog(
            config, session, warehouse
        )

        CatalogRegistrar(session, warehouse).register(config)
        NamespaceProvisioner(session).ensure_default_namespace(config.name, config.backend)

        self._names = TableNameResolver(config.name)
        self.table_ident: TableIdentifier = self._names.identifier()
        self.table_name: str = self._names.table_name

    @property
    def validation_namespace_catalog(self) -> SupportsNamespaces:
        return self.validation_catalog

    def qualify(self, table: str) -> str:
        """SQL name for a table in this catalog's ``default`` namespace."""
        return self._names.qualify(table)

    def sql(self, query: str, *args: Any) -> list[tuple[Any, ...]]:
        """Run a statement and return its rows as tuples.

        ``%s`` placeholders in ``query`` are filled from ``args``.
        """
        statement = query % args if args else query
        return rows_to_tuples(self.session.sql(statement).collect())

    def scalar_sql(self, query: str, *args: Any) -> Any:
        """Run a query that returns exactly one value."""
        rows = self.sql(query, *args)
        assert len(rows) == 1, f"Scalar SQL should return one row, got {len(rows)}"
        assert len(rows[0]) == 1, f"Scalar SQL should return one column, got {len(rows[0])}"
        return rows[0][0]
