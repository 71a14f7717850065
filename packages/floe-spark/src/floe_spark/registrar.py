"""Catalog registration with the Spark session configuration.

Spark discovers catalogs from conf entries under ``spark.sql.catalog``:

    spark.sql.catalog.<name>         = <implementation class>
    spark.sql.catalog.<name>.<key>   = <property value>

The session configuration is shared by every statement run afterwards, so
registering the same name twice overwrites the first registration.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from floe_spark.observability import fixture_operation, get_logger

if TYPE_CHECKING:
    from floe_spark.config import CatalogConfig
    from floe_spark.session import SparkSessionLike
    from floe_spark.warehouse import WarehouseLifecycle

CATALOG_CONF_PREFIX = "spark.sql.catalog"
WAREHOUSE_PROPERTY = "warehouse"


def catalog_conf_key(catalog_name: str, key: str | None = None) -> str:
    """Build the session conf key for a catalog or one of its properties.

    Example:
        >>> catalog_conf_key("testhadoop")
        'spark.sql.catalog.testhadoop'
        >>> catalog_conf_key("testhadoop", "type")
        'spark.sql.catalog.testhadoop.type'
    """
    if key is None:
        return f"{CATALOG_CONF_PREFIX}.{catalog_name}"
    return f"{CATALOG_CONF_PREFIX}.{catalog_name}.{key}"


class CatalogRegistrar:
    """Writes catalog definitions into a Spark session's configuration."""

    def __init__(self, session: SparkSessionLike, warehouse: WarehouseLifecycle) -> None:
        self._session = session
        self._warehouse = warehouse
        self._logger = get_logger()

    def register(self, config: CatalogConfig) -> None:
        """Register a catalog with the session.

        Filesystem-backed catalogs get ``warehouse`` pointed at the shared
        warehouse, replacing any value the config carried.

        Args:
            config: Catalog scenario to register.
        """
        conf = self._session.conf
        with fixture_operation("register_catalog", catalog=config.name):
            conf.set(catalog_conf_key(config.name), config.implementation)
            for key, value in config.properties.items():
                conf.set(catalog_conf_key(config.name, key), value)

            if config.backend.needs_warehouse:
                conf.set(
                    catalog_conf_key(config.name, WAREHOUSE_PROPERTY),
                    self._warehouse.uri,
                )

            self._logger.debug(
                "catalog_registered",
                catalog=config.name,
                implementation=config.implementation,
                backend=config.backend.kind,
            )
