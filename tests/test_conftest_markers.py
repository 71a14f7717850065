"""Tests for the pytest markers available across the repository.

These tests verify the integration, requirement and spark_catalog markers
are registered so they can be used without warnings.
"""

from __future__ import annotations

import pytest

from floe_spark.config import HIVE


def registered_markers(config: pytest.Config) -> list[str]:
    return [line.split(":", 1)[0] for line in config.getini("markers")]


class TestRegisteredMarkers:
    """Tests for marker registration."""

    def test_integration_marker(self, pytestconfig: pytest.Config) -> None:
        """Verify the integration marker is declared."""
        assert "integration" in registered_markers(pytestconfig)

    def test_requirement_marker(self, pytestconfig: pytest.Config) -> None:
        """Verify the requirement marker is declared with its argument."""
        assert "requirement(id)" in registered_markers(pytestconfig)

    def test_spark_catalog_marker(self, pytestconfig: pytest.Config) -> None:
        """Verify the plugin registers the spark_catalog marker."""
        assert "spark_catalog(config)" in registered_markers(pytestconfig)


class TestMarkerUsage:
    """Tests for applying markers to tests."""

    def test_requirement_marker_stores_id(self) -> None:
        """Verify the requirement marker keeps its identifier."""
        mark = pytest.mark.requirement("FR-012")
        assert mark.args == ("FR-012",)

    def test_spark_catalog_marker_stores_config(self) -> None:
        """Verify the spark_catalog marker carries a catalog scenario."""

        @pytest.mark.spark_catalog(HIVE)
        def sample_test() -> None:
            """Sample test function with a catalog scenario."""

        markers = list(sample_test.pytestmark)  # type: ignore[attr-defined]
        assert len(markers) == 1
        assert markers[0].name == "spark_catalog"
        assert markers[0].args == (HIVE,)
