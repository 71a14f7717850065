"""Shared test fixtures for floe-spark tests."""

from __future__ import annotations

from collections.abc import Generator
from pathlib import Path

import pytest

from floe_spark.warehouse import WarehouseLifecycle
from testing.fixtures.spark_session import FakeSparkSession


@pytest.fixture
def fake_spark() -> FakeSparkSession:
    """Create a fresh FakeSparkSession."""
    return FakeSparkSession()


@pytest.fixture
def warehouse(tmp_path: Path) -> Generator[WarehouseLifecycle, None, None]:
    """Allocated warehouse under the test's tmp_path, destroyed afterwards."""
    lifecycle = WarehouseLifecycle(base_dir=tmp_path)
    lifecycle.create()
    yield lifecycle
    lifecycle.destroy()
