"""floe-spark: Spark catalog test fixtures for floe-runtime.

This package lets integration tests run Spark SQL against interchangeable
Iceberg catalog backends with:
- One temporary warehouse shared by all tests of a class
- Catalog registration through the Spark session configuration
- A guaranteed ``default`` namespace, whatever the backend
- Catalog-qualified table names
- Structured logging via structlog and OpenTelemetry spans

Example:
    >>> from floe_spark import CatalogTestContext, WarehouseLifecycle, HADOOP
    >>> with WarehouseLifecycle() as warehouse:
    ...     ctx = CatalogTestContext(spark, HADOOP, warehouse)
    ...     ctx.sql("CREATE TABLE %s (id bigint) USING iceberg", ctx.table_name)
"""

from __future__ import annotations

__version__ = "0.1.0"

__all__ = [
    # Lifecycle components
    "WarehouseLifecycle",
    "CatalogRegistrar",
    "NamespaceProvisioner",
    "TableNameResolver",
    "CatalogTestContext",
    # Naming
    "TableIdentifier",
    "qualify",
    # Configuration models
    "CatalogConfig",
    "FilesystemBacked",
    "ExternallyManaged",
    "SparkSessionConfig",
    "HIVE",
    "HADOOP",
    "SPARK",
    "ALL_CATALOGS",
    # Validation catalogs
    "SupportsNamespaces",
    "HadoopValidationCatalog",
    "SessionValidationCatalog",
    "create_validation_catalog",
    # Exceptions
    "FloeSparkError",
    "WarehouseAllocationError",
    "WarehouseCleanupError",
    "CatalogConfigError",
    "NamespaceNotFoundError",
    "NamespaceNotEmptyError",
    "TableNotFoundError",
]

_MODULES = {
    "WarehouseLifecycle": "floe_spark.warehouse",
    "CatalogRegistrar": "floe_spark.registrar",
    "NamespaceProvisioner": "floe_spark.namespaces",
    "TableNameResolver": "floe_spark.names",
    "TableIdentifier": "floe_spark.names",
    "qualify": "floe_spark.names",
    "CatalogTestContext": "floe_spark.context",
    "CatalogConfig": "floe_spark.config",
    "FilesystemBacked": "floe_spark.config",
    "ExternallyManaged": "floe_spark.config",
    "SparkSessionConfig": "floe_spark.config",
    "HIVE": "floe_spark.config",
    "HADOOP": "floe_spark.config",
    "SPARK": "floe_spark.config",
    "ALL_CATALOGS": "floe_spark.config",
    "SupportsNamespaces": "floe_spark.catalogs",
    "HadoopValidationCatalog": "floe_spark.catalogs",
    "SessionValidationCatalog": "floe_spark.catalogs",
    "create_validation_catalog": "floe_spark.catalogs",
    "FloeSparkError": "floe_spark.errors",
    "WarehouseAllocationError": "floe_spark.errors",
    "WarehouseCleanupError": "floe_spark.errors",
    "CatalogConfigError": "floe_spark.errors",
    "NamespaceNotFoundError": "floe_spark.errors",
    "NamespaceNotEmptyError": "floe_spark.errors",
    "TableNotFoundError": "floe_spark.errors",
}


def __getattr__(name: str) -> object:
    """Lazy import of public API members."""
    module_name = _MODULES.get(name)
    if module_name is None:
        msg = f"module {__name__!r} has no attribute {name!r}"
        raise AttributeError(msg)

    import importlib

    return getattr(importlib.import_module(module_name), name)
