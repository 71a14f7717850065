"""Spark session access for floe-spark.

This module provides:
- Structural types for the parts of a Spark session the fixture touches
- build_spark_session(): create the shared session from SparkSessionConfig

The protocols let unit tests pass an in-memory fake where a real
``pyspark.sql.SparkSession`` would otherwise be required.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

from floe_spark.config import SparkSessionConfig
from floe_spark.observability import get_logger

if TYPE_CHECKING:
    from pyspark.sql import SparkSession


class RuntimeConfigLike(Protocol):
    """Mutable key/value configuration of a session (``spark.conf``)."""

    def set(self, key: str, value: Any) -> None: ...

    def get(self, key: str, default: Any = ...) -> Any: ...

    def unset(self, key: str) -> None: ...


class DataFrameLike(Protocol):
    """Result of ``spark.sql``; only the methods the fixture uses."""

    def filter(self, condition: Any) -> DataFrameLike: ...

    def isEmpty(self) -> bool: ...  # noqa: N802

    def collect(self) -> list[Any]: ...


class SparkSessionLike(Protocol):
    """The slice of ``SparkSession`` used by the catalog fixture."""

    @property
    def conf(self) -> RuntimeConfigLike: ...

    def sql(self, sqlQuery: str) -> DataFrameLike: ...  # noqa: N803


def build_spark_session(config: SparkSessionConfig | None = None) -> SparkSession:
    """Create (or reuse) a local Spark session with the Iceberg extensions.

    Args:
        config: Session settings. Defaults to ``SparkSessionConfig.from_env()``.

    Returns:
        The active SparkSession.
    """
    from pyspark.sql import SparkSession

    config = config or SparkSessionConfig.from_env()
    logger = get_logger()

    builder = SparkSession.builder.appName(config.app_name).master(config.master)
    for key, value in config.spark_conf().items():
        builder = builder.config(key, value)
    if config.enable_hive_support:
        builder = builder.enableHiveSupport()

    spark = builder.getOrCreate()
    spark.sparkContext.setLogLevel("WARN")
    logger.info(
        "spark_session_started",
        app_name=config.app_name,
        master=config.master,
        spark_version=spark.version,
    )
    return spark
