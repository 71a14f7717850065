"""Unit tests for floe-spark custom exceptions."""

from __future__ import annotations

from pathlib import Path

from floe_spark.errors import (
    CatalogConfigError,
    FloeSparkError,
    NamespaceNotEmptyError,
    NamespaceNotFoundError,
    TableNotFoundError,
    WarehouseAllocationError,
    WarehouseCleanupError,
)


class TestFloeSparkError:
    """Tests for the base exception."""

    def test_message_only(self) -> None:
        """Test str() without details."""
        error = FloeSparkError("something broke")

        assert str(error) == "something broke"
        assert error.details == {}

    def test_with_details(self) -> None:
        """Test details are appended to str()."""
        error = FloeSparkError("something broke", details={"catalog": "testhive"})

        assert str(error) == "something broke (catalog=testhive)"


class TestWarehouseAllocationError:
    """Tests for WarehouseAllocationError."""

    def test_default_message(self) -> None:
        """Test default message and cause detail."""
        error = WarehouseAllocationError(cause="No space left on device")

        assert "Failed to allocate warehouse path" in str(error)
        assert "No space left on device" in str(error)
        assert error.path is None

    def test_with_path(self) -> None:
        """Test the path is kept in details."""
        error = WarehouseAllocationError(path=Path("/tmp/warehouse123"))

        assert error.details["path"] == "/tmp/warehouse123"
        assert isinstance(error, FloeSparkError)


class TestWarehouseCleanupError:
    """Tests for WarehouseCleanupError."""

    def test_names_path(self) -> None:
        """Test the message names the undeleted path."""
        error = WarehouseCleanupError(Path("/tmp/warehouse123"))

        assert str(error) == "Failed to delete /tmp/warehouse123"
        assert error.path == Path("/tmp/warehouse123")

    def test_with_cause(self) -> None:
        """Test the cause is reported."""
        error = WarehouseCleanupError("/tmp/wh", cause="Permission denied")

        assert "cause=Permission denied" in str(error)
        assert isinstance(error, FloeSparkError)


class TestCatalogConfigError:
    """Tests for CatalogConfigError."""

    def test_basic_creation(self) -> None:
        """Test catalog and key are exposed."""
        error = CatalogConfigError(catalog="testhive", key="type")

        assert error.catalog == "testhive"
        assert error.key == "type"
        assert "catalog 'testhive' requires a 'type' property" in str(error)


class TestLookupErrors:
    """Tests for namespace and table errors."""

    def test_namespace_not_found(self) -> None:
        """Test NamespaceNotFoundError message."""
        error = NamespaceNotFoundError("bronze")

        assert error.namespace == "bronze"
        assert "Namespace not found: bronze" in str(error)

    def test_namespace_not_empty(self) -> None:
        """Test NamespaceNotEmptyError message."""
        error = NamespaceNotEmptyError("default")

        assert "Namespace is not empty: default" in str(error)

    def test_table_not_found_custom_message(self) -> None:
        """Test TableNotFoundError with custom message."""
        error = TableNotFoundError("default.t", message="no metadata for default.t")

        assert error.table == "default.t"
        assert "no metadata for default.t" in str(error)
        assert isinstance(error, FloeSparkError)
