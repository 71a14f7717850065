"""Custom exceptions for floe-spark.

This module defines the exception hierarchy:
- FloeSparkError (base)
- WarehouseAllocationError
- WarehouseCleanupError
- CatalogConfigError
- NamespaceNotFoundError
- NamespaceNotEmptyError
- TableNotFoundError

Errors raised by the Spark engine itself (for example a failing
``CREATE NAMESPACE``) are never wrapped; they reach the test unchanged.
"""

from __future__ import annotations

from pathlib import Path


class FloeSparkError(Exception):
    """Base exception for all floe-spark fixture operations.

    Attributes:
        message: Human-readable error description.
        details: Optional additional context about the error.

    Example:
        >>> try:
        ...     warehouse.destroy()
        ... except FloeSparkError as e:
        ...     print(f"Fixture error: {e}")
    """

    def __init__(self, message: str, *, details: dict[str, str] | None = None) -> None:
        """Initialize FloeSparkError.

        Args:
            message: Human-readable error description.
            details: Optional additional context about the error.
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        """Return string representation with details if present."""
        if self.details:
            detail_str = ", ".join(f"{k}={v}" for k, v in self.details.items())
            return f"{self.message} ({detail_str})"
        return self.message


class WarehouseAllocationError(FloeSparkError):
    """A fresh warehouse path could not be reserved.

    Raised when the temporary file used to reserve the path cannot be
    created or released. No test in the owning class can run.
    """

    def __init__(
        self,
        message: str = "Failed to allocate warehouse path",
        *,
        path: Path | str | None = None,
        cause: str | None = None,
    ) -> None:
        """Initialize WarehouseAllocationError.

        Args:
            message: Human-readable error description.
            path: The path that was being allocated, if known.
            cause: The underlying cause of the failure.
        """
        details: dict[str, str] = {}
        if path is not None:
            details["path"] = str(path)
        if cause:
            details["cause"] = cause
        super().__init__(message, details=details)
        self.path = path
        self.cause = cause


class WarehouseCleanupError(FloeSparkError):
    """The warehouse directory could not be removed at teardown.

    Example:
        >>> try:
        ...     warehouse.destroy()
        ... except WarehouseCleanupError as e:
        ...     print(e.path)
    """

    def __init__(
        self,
        path: Path | str,
        message: str | None = None,
        *,
        cause: str | None = None,
    ) -> None:
        """Initialize WarehouseCleanupError.

        Args:
            path: The warehouse path that survived deletion.
            message: Optional custom error message.
            cause: The underlying cause of the failure.
        """
        msg = message or f"Failed to delete {path}"
        details = {"cause": cause} if cause else {}
        super().__init__(msg, details=details)
        self.path = path
        self.cause = cause


class CatalogConfigError(FloeSparkError):
    """A catalog scenario is missing a property it needs.

    Raised when the ``type`` property that selects the catalog backend is
    absent. The backend is never guessed.
    """

    def __init__(
        self,
        catalog: str,
        key: str,
        message: str | None = None,
    ) -> None:
        """Initialize CatalogConfigError.

        Args:
            catalog: The catalog name being configured.
            key: The missing or invalid property key.
            message: Optional custom error message.
        """
        msg = message or f"catalog '{catalog}' requires a '{key}' property"
        super().__init__(msg, details={"catalog": catalog, "key": key})
        self.catalog = catalog
        self.key = key


class NamespaceNotFoundError(FloeSparkError):
    """Namespace not found in the validation catalog."""

    def __init__(
        self,
        namespace: str,
        message: str | None = None,
    ) -> None:
        """Initialize NamespaceNotFoundError.

        Args:
            namespace: The namespace that was not found.
            message: Optional custom error message.
        """
        msg = message or f"Namespace not found: {namespace}"
        super().__init__(msg, details={"namespace": namespace})
        self.namespace = namespace


class NamespaceNotEmptyError(FloeSparkError):
    """Cannot drop a namespace that still contains tables or namespaces."""

    def __init__(
        self,
        namespace: str,
        message: str | None = None,
    ) -> None:
        """Initialize NamespaceNotEmptyError.

        Args:
            namespace: The namespace that is not empty.
            message: Optional custom error message.
        """
        msg = message or f"Namespace is not empty: {namespace}"
        super().__init__(msg, details={"namespace": namespace})
        self.namespace = namespace


class TableNotFoundError(FloeSparkError):
    """Table not found in the validation catalog."""

    def __init__(
        self,
        table: str,
        message: str | None = None,
    ) -> None:
        """Initialize TableNotFoundError.

        Args:
            table: The table identifier that was not found.
            message: Optional custom error message.
        """
        msg = message or f"Table not found: {table}"
        super().__init__(msg, details={"table": table})
        self.table = table
