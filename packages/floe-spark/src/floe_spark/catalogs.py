"""Validation catalogs: direct access to what a test wrote through Spark.

Tests write through SQL and then check the result through a catalog handle
that bypasses Spark's catalog plugin. Two handles exist:

- HadoopValidationCatalog reads the hadoop catalog directory layout under
  the shared warehouse.
- SessionValidationCatalog reaches an engine-managed catalog (metastore,
  REST, ...) through the session.

Both satisfy SupportsNamespaces, so tests can manage namespaces without
casting. Tables are returned as read-only PyIceberg ``StaticTable`` objects.
"""

from __future__ import annotations

from pathlib import Path
import re
import shutil
from typing import TYPE_CHECKING, Protocol, runtime_checkable

from pyiceberg.table import StaticTable

from floe_spark.config import FilesystemBacked
from floe_spark.errors import (
    NamespaceNotEmptyError,
    NamespaceNotFoundError,
    TableNotFoundError,
    WarehouseAllocationError,
)
from floe_spark.names import TableIdentifier
from floe_spark.observability import get_logger

if TYPE_CHECKING:
    from floe_spark.config import CatalogConfig
    from floe_spark.session import SparkSessionLike
    from floe_spark.warehouse import WarehouseLifecycle

Namespace = tuple[str, ...]

METADATA_DIR = "metadata"
VERSION_HINT_FILE = "version-hint.text"
_METADATA_FILE_RE = re.compile(r"^v(\d+)(\.gz)?\.metadata\.json$")


@runtime_checkable
class SupportsNamespaces(Protocol):
    """Catalog handle that can manage namespaces and inspect tables."""

    name: str

    def list_namespaces(self, parent: Namespace = ()) -> list[Namespace]: ...

    def namespace_exists(self, namespace: Namespace) -> bool: ...

    def create_namespace(self, namespace: Namespace) -> None: ...

    def drop_namespace(self, namespace: Namespace) -> None: ...

    def list_tables(self, namespace: Namespace) -> list[TableIdentifier]: ...

    def table_exists(self, identifier: TableIdentifier) -> bool: ...

    def load_table(self, identifier: TableIdentifier) -> StaticTable: ...

    def drop_table(self, identifier: TableIdentifier) -> bool: ...


def _metadata_version(path: Path) -> int | None:
    match = _METADATA_FILE_RE.match(path.name)
    return int(match.group(1)) if match else None


class HadoopValidationCatalog:
    """Reads a hadoop catalog straight from its warehouse directory.

    Layout::

        <warehouse>/<ns>/.../<table>/metadata/v<N>.metadata.json
        <warehouse>/<ns>/.../<table>/metadata/version-hint.text

    A directory is a table when it has a ``metadata`` directory holding
    metadata files; any other directory is a namespace.
    """

    def __init__(self, warehouse: Path | str, name: str = "hadoop") -> None:
        self.warehouse = Path(warehouse)
        self.name = name
        self._logger = get_logger()

    def _path(self, parts: tuple[str, ...]) -> Path:
        return self.warehouse.joinpath(*parts)

    @staticmethod
    def _is_table_dir(path: Path) -> bool:
        metadata = path / METADATA_DIR
        if not metadata.is_dir():
            return False
        return any(_metadata_version(child) is not None for child in metadata.iterdir())

    def _is_namespace_dir(self, path: Path) -> bool:
        return path.is_dir() and not self._is_table_dir(path)

    def list_namespaces(self, parent: Namespace = ()) -> list[Namespace]:
        root = self._path(parent)
        if parent and not self._is_namespace_dir(root):
            raise NamespaceNotFoundError(".".join(parent))
        if not root.is_dir():
            return []
        return sorted(
            (*parent, child.name)
            for child in root.iterdir()
            if self._is_namespace_dir(child)
        )

    def namespace_exists(self, namespace: Namespace) -> bool:
        return bool(namespace) and self._is_namespace_dir(self._path(namespace))

    def create_namespace(self, namespace: Namespace) -> None:
        """Create the namespace directory; existing namespaces are left alone."""
        self._path(namespace).mkdir(parents=True, exist_ok=True)
        self._logger.debug("namespace_created", catalog=self.name, namespace=".".join(namespace))

    def drop_namespace(self, namespace: Namespace) -> None:
        """Remove an empty namespace.

        Raises:
            NamespaceNotFoundError: If the namespace does not exist.
            NamespaceNotEmptyError: If it still holds tables or namespaces.
        """
        ns_str = ".".join(namespace)
        path = self._path(namespace)
        if not self.namespace_exists(namespace):
            raise NamespaceNotFoundError(ns_str)
        if any(path.iterdir()):
            raise NamespaceNotEmptyError(ns_str)
        path.rmdir()

    def list_tables(self, namespace: Namespace) -> list[TableIdentifier]:
        if not self.namespace_exists(namespace):
            raise NamespaceNotFoundError(".".join(namespace))
        return sorted(
            (
                TableIdentifier(namespace=namespace, name=child.name)
                for child in self._path(namespace).iterdir()
                if child.is_dir() and self._is_table_dir(child)
            ),
            key=str,
        )

    def table_exists(self, identifier: TableIdentifier) -> bool:
        return self._is_table_dir(self._path(identifier.as_tuple()))

    def current_metadata_file(self, identifier: TableIdentifier) -> Path:
        """Locate the current metadata file of a table.

        Uses ``version-hint.text`` when present, otherwise the highest
        numbered metadata file.

        Raises:
            TableNotFoundError: If the table does not exist.
        """
        if not self.table_exists(identifier):
            raise TableNotFoundError(str(identifier))

        metadata = self._path(identifier.as_tuple()) / METADATA_DIR
        hint = metadata / VERSION_HINT_FILE
        if hint.is_file():
            version = int(hint.read_text().strip())
            for candidate in (f"v{version}.metadata.json", f"v{version}.gz.metadata.json"):
                if (metadata / candidate).is_file():
                    return metadata / candidate

        # Stale or missing hint
        files = [child for child in metadata.iterdir() if _metadata_version(child) is not None]
        return max(files, key=lambda child: _metadata_version(child) or 0)

    def load_table(self, identifier: TableIdentifier) -> StaticTable:
        location = self.current_metadata_file(identifier)
        return StaticTable.from_metadata(location.as_uri())

    def drop_table(self, identifier: TableIdentifier) -> bool:
        """Delete a table's directory, data included.

        Returns:
            False if the table did not exist.
        """
        if not self.table_exists(identifier):
            return False
        shutil.rmtree(self._path(identifier.as_tuple()))
        self._logger.debug("table_dropped", catalog=self.name, table=str(identifier))
        return True


class SessionValidationCatalog:
    """Reaches an engine-managed catalog through the Spark session."""

    def __init__(self, session: SparkSessionLike, name: str) -> None:
        self._session = session
        self.name = name
        self._logger = get_logger()

    def _qualified(self, parts: tuple[str, ...]) -> str:
        return ".".join((self.name, *parts))

    def list_namespaces(self, parent: Namespace = ()) -> list[Namespace]:
        rows = self._session.sql(f"SHOW NAMESPACES IN {self._qualified(parent)}").collect()
        namespaces = []
        for row in rows:
            value = row["namespace"]
            # Nested namespaces come back dotted and possibly backquoted
            levels = tuple(level.strip("`") for level in value.split("."))
            namespaces.append(levels if levels[: len(parent)] == parent else (*parent, *levels))
        return sorted(namespaces)

    def namespace_exists(self, namespace: Namespace) -> bool:
        if not namespace:
            return False
        parent = namespace[:-1]
        if parent and not self.namespace_exists(parent):
            return False
        return namespace in self.list_namespaces(parent)

    def create_namespace(self, namespace: Namespace) -> None:
        self._session.sql(f"CREATE NAMESPACE IF NOT EXISTS {self._qualified(namespace)}")

    def drop_namespace(self, namespace: Namespace) -> None:
        """Drop a namespace; Spark raises if it is missing or not empty."""
        self._session.sql(f"DROP NAMESPACE {self._qualified(namespace)}")

    def list_tables(self, namespace: Namespace) -> list[TableIdentifier]:
        if not self.namespace_exists(namespace):
            raise NamespaceNotFoundError(".".join(namespace))
        rows = self._session.sql(f"SHOW TABLES IN {self._qualified(namespace)}").collect()
        return sorted(
            (
                TableIdentifier(namespace=namespace, name=row["tableName"])
                for row in rows
                if not row["isTemporary"]
            ),
            key=str,
        )

    def table_exists(self, identifier: TableIdentifier) -> bool:
        if not self.namespace_exists(identifier.namespace):
            return False
        return identifier in self.list_tables(identifier.namespace)

    def current_metadata_location(self, identifier: TableIdentifier) -> str:
        """Latest metadata file, read from the ``metadata_log_entries`` table.

        Raises:
            TableNotFoundError: If the table does not exist.
        """
        if not self.table_exists(identifier):
            raise TableNotFoundError(str(identifier))
        table = self._qualified(identifier.as_tuple())
        rows = self._session.sql(
            f"SELECT file FROM {table}.metadata_log_entries ORDER BY timestamp DESC LIMIT 1"
        ).collect()
        return str(rows[0]["file"])

    def load_table(self, identifier: TableIdentifier) -> StaticTable:
        return StaticTable.from_metadata(self.current_metadata_location(identifier))

    def drop_table(self, identifier: TableIdentifier) -> bool:
        if not self.table_exists(identifier):
            return False
        self._session.sql(f"DROP TABLE {self._qualified(identifier.as_tuple())} PURGE")
        self._logger.debug("table_dropped", catalog=self.name, table=str(identifier))
        return True


ValidationCatalog = HadoopValidationCatalog | SessionValidationCatalog


def create_validation_catalog(
    config: CatalogConfig,
    session: SparkSessionLike,
    warehouse: WarehouseLifecycle,
) -> ValidationCatalog:
    """Create the validation catalog matching a catalog's backend.

    Args:
        config: Catalog scenario.
        session: Spark session the catalog is registered with.
        warehouse: Shared warehouse; must already be allocated for
            filesystem-backed catalogs.

    Returns:
        HadoopValidationCatalog rooted at the warehouse for filesystem-backed
        catalogs, otherwise SessionValidationCatalog.
    """
    if isinstance(config.backend, FilesystemBacked):
        if warehouse.path is None:
            raise WarehouseAllocationError("Warehouse path has not been allocated")
        return HadoopValidationCatalog(warehouse.path, name=config.name)
    return SessionValidationCatalog(session, config.name)
