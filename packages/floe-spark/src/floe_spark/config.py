"""Pydantic configuration models for floe-spark.

This module provides:
- FilesystemBacked / ExternallyManaged: catalog backend variants
- CatalogConfig: one named catalog scenario registered with Spark
- HIVE, HADOOP, SPARK: the standard catalog scenarios
- SparkSessionConfig: how the shared Spark session is built
"""

from __future__ import annotations

import os
from typing import Any, ClassVar, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, PrivateAttr, field_validator

from floe_spark.errors import CatalogConfigError

# Property that selects the catalog backend
CATALOG_TYPE_PROPERTY = "type"
HADOOP_CATALOG_TYPE = "hadoop"

SPARK_CATALOG_IMPL = "org.apache.iceberg.spark.SparkCatalog"
SPARK_SESSION_CATALOG_IMPL = "org.apache.iceberg.spark.SparkSessionCatalog"

DEFAULT_ICEBERG_PACKAGE = "org.apache.iceberg:iceberg-spark-runtime-3.5_2.12:1.6.1"
ICEBERG_SQL_EXTENSIONS = "org.apache.iceberg.spark.extensions.IcebergSparkSessionExtensions"


class FilesystemBacked(BaseModel):
    """Catalog that stores everything under the shared warehouse directory.

    Listing namespaces fails while the catalog root does not exist yet, so
    the default namespace is created without probing first.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    kind: Literal["filesystem"] = "filesystem"
    catalog_type: str = HADOOP_CATALOG_TYPE

    lists_before_create: ClassVar[bool] = False
    needs_warehouse: ClassVar[bool] = True


class ExternallyManaged(BaseModel):
    """Catalog whose metadata lives in an external service (e.g. a metastore)."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    kind: Literal["managed"] = "managed"
    catalog_type: str = Field(..., min_length=1)

    lists_before_create: ClassVar[bool] = True
    needs_warehouse: ClassVar[bool] = False


CatalogBackend = Union[FilesystemBacked, ExternallyManaged]


def backend_for_properties(catalog: str, properties: dict[str, str]) -> CatalogBackend:
    """Select the backend variant from a catalog's ``type`` property.

    Args:
        catalog: Catalog name, used in the error message.
        properties: Catalog properties.

    Returns:
        FilesystemBacked for ``type=hadoop`` (any case), else ExternallyManaged.

    Raises:
        CatalogConfigError: If ``type`` is missing.
    """
    catalog_type = properties.get(CATALOG_TYPE_PROPERTY)
    if catalog_type is None:
        raise CatalogConfigError(catalog, CATALOG_TYPE_PROPERTY)
    if catalog_type.lower() == HADOOP_CATALOG_TYPE:
        return FilesystemBacked(catalog_type=catalog_type)
    return ExternallyManaged(catalog_type=catalog_type)


class CatalogConfig(BaseModel):
    """A named catalog scenario to register with the Spark session.

    The backend variant is resolved once, when the model is built.

    Attributes:
        name: Catalog name as used in SQL (e.g. "testhadoop").
        implementation: Spark catalog plugin class.
        properties: Catalog properties; must include ``type``.

    Example:
        >>> config = CatalogConfig(
        ...     name="testhadoop",
        ...     implementation="org.apache.iceberg.spark.SparkCatalog",
        ...     properties={"type": "hadoop"},
        ... )
        >>> config.is_filesystem_backed
        True
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    name: str = Field(
        ...,
        min_length=1,
        description="Catalog name used in SQL statements",
    )
    implementation: str = Field(
        ...,
        min_length=1,
        description="Fully qualified Spark catalog plugin class",
    )
    properties: dict[str, str] = Field(
        default_factory=dict,
        description="Catalog properties, injected under the catalog's conf prefix",
    )

    _backend: CatalogBackend = PrivateAttr()

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        """Reject names that would break the dotted conf keys."""
        if "." in v or v != v.strip():
            msg = f"catalog name must be a single identifier, got: {v!r}"
            raise ValueError(msg)
        return v

    def model_post_init(self, __context: Any) -> None:
        """Resolve the backend variant from the ``type`` property."""
        self._backend = backend_for_properties(self.name, self.properties)

    @property
    def backend(self) -> CatalogBackend:
        """Backend variant selected from the ``type`` property."""
        return self._backend

    @property
    def is_filesystem_backed(self) -> bool:
        return isinstance(self._backend, FilesystemBacked)


HIVE = CatalogConfig(
    name="testhive",
    implementation=SPARK_CATALOG_IMPL,
    properties={"type": "hive", "default-namespace": "default"},
)

HADOOP = CatalogConfig(
    name="testhadoop",
    implementation=SPARK_CATALOG_IMPL,
    properties={"type": "hadoop"},
)

SPARK = CatalogConfig(
    name="spark_catalog",
    implementation=SPARK_SESSION_CATALOG_IMPL,
    properties={
        "type": "hive",
        "default-namespace": "default",
        "parquet-enabled": "true",
        "cache-enabled": "false",
    },
)

ALL_CATALOGS: tuple[CatalogConfig, ...] = (HIVE, HADOOP, SPARK)


class SparkSessionConfig(BaseModel):
    """Settings for the Spark session shared by a test run.

    Attributes:
        app_name: Spark application name.
        master: Spark master URL.
        packages: Maven coordinates resolved via ``spark.jars.packages``
            (None to rely on jars already on the classpath).
        extensions: Value for ``spark.sql.extensions``.
        shuffle_partitions: ``spark.sql.shuffle.partitions``; kept small for tests.
        enable_hive_support: Build the session with Hive support.
        metastore_uri: Optional ``hive.metastore.uris`` for Hive-backed catalogs.
        extra_conf: Additional Spark conf entries.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    app_name: str = Field(default="floe-spark-tests", min_length=1)
    master: str = Field(default="local[2]", min_length=1)
    packages: str | None = Field(default=DEFAULT_ICEBERG_PACKAGE)
    extensions: str = Field(default=ICEBERG_SQL_EXTENSIONS)
    shuffle_partitions: int = Field(default=4, ge=1, le=1000)
    enable_hive_support: bool = Field(default=False)
    metastore_uri: str | None = Field(default=None)
    extra_conf: dict[str, str] = Field(default_factory=dict)

    @classmethod
    def from_env(cls) -> SparkSessionConfig:
        """Build settings from ``FLOE_SPARK_*`` environment variables.

        Unset variables fall back to the field defaults. An empty
        ``FLOE_SPARK_PACKAGES`` disables package resolution.
        """
        kwargs: dict[str, Any] = {}
        if "FLOE_SPARK_APP_NAME" in os.environ:
            kwargs["app_name"] = os.environ["FLOE_SPARK_APP_NAME"]
        if "FLOE_SPARK_MASTER" in os.environ:
            kwargs["master"] = os.environ["FLOE_SPARK_MASTER"]
        if "FLOE_SPARK_PACKAGES" in os.environ:
            kwargs["packages"] = os.environ["FLOE_SPARK_PACKAGES"] or None
        if "FLOE_SPARK_SHUFFLE_PARTITIONS" in os.environ:
            kwargs["shuffle_partitions"] = int(os.environ["FLOE_SPARK_SHUFFLE_PARTITIONS"])
        metastore_uri = os.environ.get("FLOE_SPARK_METASTORE_URI")
        if metastore_uri:
            kwargs["metastore_uri"] = metastore_uri
            kwargs["enable_hive_support"] = True
        return cls(**kwargs)

    def spark_conf(self) -> dict[str, str]:
        """Return the conf entries applied to the session builder."""
        conf = {
            "spark.testing": "true",
            "spark.ui.enabled": "false",
            "spark.sql.extensions": self.extensions,
            "spark.sql.shuffle.partitions": str(self.shuffle_partitions),
        }
        if self.packages:
            conf["spark.jars.packages"] = self.packages
        if self.metastore_uri:
            conf["spark.hadoop.hive.metastore.uris"] = self.metastore_uri
        conf.update(self.extra_conf)
        return conf
