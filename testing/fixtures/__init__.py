"""Shared test fixtures for floe-runtime packages.

Exports:
    FakeSparkSession: In-memory SparkSession double recording conf and SQL
    FakeRuntimeConfig: Dict-backed ``spark.conf`` stand-in
    FakeDataFrame: Minimal DataFrame supporting filter/isEmpty/collect
"""

from __future__ import annotations

from testing.fixtures.spark_session import (
    FakeDataFrame,
    FakeRuntimeConfig,
    FakeSparkSession,
)

__all__ = [
    "FakeDataFrame",
    "FakeRuntimeConfig",
    "FakeSparkSession",
]
