"""Default namespace provisioning for catalog tests.

Whether it is safe to list namespaces before creating one depends on the
backend. ``SHOW NAMESPACES IN <catalog>`` treats the catalog name as the
first namespace level; a metastore-backed catalog answers it, but a hadoop
catalog looks for a ``<catalog>`` directory under the warehouse and fails
with "Namespace does not exist" until it is created. Filesystem-backed
catalogs therefore skip the listing and always issue the idempotent create.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from floe_spark.names import DEFAULT_NAMESPACE
from floe_spark.observability import fixture_operation, get_logger

if TYPE_CHECKING:
    from floe_spark.config import CatalogBackend
    from floe_spark.session import SparkSessionLike


def show_namespaces_sql(catalog_name: str) -> str:
    return f"SHOW NAMESPACES IN {catalog_name}"


def create_namespace_sql(catalog_name: str, namespace: str = DEFAULT_NAMESPACE) -> str:
    return f"CREATE NAMESPACE IF NOT EXISTS {catalog_name}.{namespace}"


class NamespaceProvisioner:
    """Makes sure the ``default`` namespace exists in a catalog.

    Errors from Spark propagate unchanged; nothing is retried.
    """

    def __init__(self, session: SparkSessionLike) -> None:
        self._session = session
        self._logger = get_logger()

    def namespace_listed(self, catalog_name: str, namespace: str = DEFAULT_NAMESPACE) -> bool:
        """Return True if ``SHOW NAMESPACES`` reports the namespace."""
        listed = self._session.sql(show_namespaces_sql(catalog_name)).filter(
            f"namespace = '{namespace}'"
        )
        return not listed.isEmpty()

    def ensure_default_namespace(self, catalog_name: str, backend: CatalogBackend) -> bool:
        """Create ``<catalog>.default`` unless it is known to exist.

        Args:
            catalog_name: Catalog to provision.
            backend: Backend variant of the catalog; decides whether the
                namespace listing is consulted first.

        Returns:
            True if the create statement was issued.
        """
        with fixture_operation(
            "ensure_namespace",
            catalog=catalog_name,
            namespace=DEFAULT_NAMESPACE,
        ):
            if backend.lists_before_create and self.namespace_listed(catalog_name):
                self._logger.debug(
                    "namespace_already_present",
                    catalog=catalog_name,
                    namespace=DEFAULT_NAMESPACE,
                )
                return False

            self._session.sql(create_namespace_sql(catalog_name))
            self._logger.info(
                "namespace_created",
                catalog=catalog_name,
                namespace=DEFAULT_NAMESPACE,
                backend=backend.kind,
            )
            return True
