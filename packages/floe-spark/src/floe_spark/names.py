"""Table naming conventions for catalog tests.

Spark's built-in session catalog (``spark_catalog``) is addressed without a
catalog prefix; any other catalog needs one.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

SESSION_CATALOG_NAME = "spark_catalog"
DEFAULT_NAMESPACE = "default"
DEFAULT_TABLE = "table"


def qualify(catalog_name: str, table: str) -> str:
    """Return the name SQL statements should use for a table in ``default``.

    Example:
        >>> qualify("spark_catalog", "table")
        'default.table'
        >>> qualify("testhadoop", "table")
        'testhadoop.default.table'
    """
    prefix = "" if catalog_name == SESSION_CATALOG_NAME else f"{catalog_name}."
    return f"{prefix}{DEFAULT_NAMESPACE}.{table}"


class TableIdentifier(BaseModel):
    """Namespace-qualified table identifier, without the catalog.

    Attributes:
        namespace: Namespace levels (e.g. ``("default",)``).
        name: Table name.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    namespace: tuple[str, ...] = Field(default=(DEFAULT_NAMESPACE,), min_length=1)
    name: str = Field(default=DEFAULT_TABLE, min_length=1)

    @classmethod
    def of(cls, *parts: str) -> TableIdentifier:
        """Build an identifier from namespace levels followed by the table name.

        Example:
            >>> str(TableIdentifier.of("default", "events"))
            'default.events'
        """
        if len(parts) < 2:
            msg = f"identifier needs a namespace and a name, got: {parts!r}"
            raise ValueError(msg)
        return cls(namespace=tuple(parts[:-1]), name=parts[-1])

    def as_tuple(self) -> tuple[str, ...]:
        """Identifier in the tuple form PyIceberg catalogs accept."""
        return (*self.namespace, self.name)

    def __str__(self) -> str:
        return ".".join(self.as_tuple())


class TableNameResolver:
    """Resolves table names for one catalog.

    Example:
        >>> resolver = TableNameResolver("testhive")
        >>> resolver.table_name
        'testhive.default.table'
    """

    def __init__(self, catalog_name: str) -> None:
        self.catalog_name = catalog_name

    @property
    def table_name(self) -> str:
        """Qualified name of the default test table."""
        return self.qualify(DEFAULT_TABLE)

    def qualify(self, table: str) -> str:
        return qualify(self.catalog_name, table)

    def identifier(self, table: str = DEFAULT_TABLE) -> TableIdentifier:
        """Validation-catalog identifier for a table in ``default``."""
        return TableIdentifier(namespace=(DEFAULT_NAMESPACE,), name=table)
