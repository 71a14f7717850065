"""Shared warehouse directory for a test class.

WarehouseLifecycle reserves a fresh, not-yet-existing path once before any
test in a class runs, and removes whatever the catalogs wrote there once
after the last test finishes.
"""

from __future__ import annotations

import os
from pathlib import Path
import shutil
import tempfile
from types import TracebackType

from floe_spark.errors import WarehouseAllocationError, WarehouseCleanupError
from floe_spark.observability import fixture_operation, get_logger

WAREHOUSE_PREFIX = "warehouse"


class WarehouseLifecycle:
    """Owns the temporary storage root shared by one test class.

    The path is reserved with a temp file that is deleted straight away, so
    only the name is held and the catalog creates the directory on first
    write.

    Example:
        >>> warehouse = WarehouseLifecycle()
        >>> path = warehouse.create()
        >>> warehouse.exists
        False
        >>> warehouse.destroy()
    """

    def __init__(self, base_dir: Path | str | None = None) -> None:
        """Initialize WarehouseLifecycle.

        Args:
            base_dir: Directory to allocate under. Defaults to the system
                temp directory.
        """
        self._base_dir = Path(base_dir) if base_dir is not None else None
        self._path: Path | None = None
        self._logger = get_logger()

    @property
    def path(self) -> Path | None:
        """Absolute warehouse path, or None before ``create()``."""
        return self._path

    @property
    def exists(self) -> bool:
        return self._path is not None and self._path.exists()

    @property
    def uri(self) -> str:
        """Warehouse location in the ``file:<absolute path>`` form Spark expects.

        Raises:
            WarehouseAllocationError: If called before ``create()``.
        """
        if self._path is None:
            raise WarehouseAllocationError("Warehouse path has not been allocated")
        return f"file:{self._path}"

    def create(self) -> Path:
        """Reserve a fresh warehouse path that does not exist yet.

        Returns:
            The absolute path.

        Raises:
            WarehouseAllocationError: If the path cannot be reserved or released.
        """
        with fixture_operation("warehouse.create"):
            try:
                fd, name = tempfile.mkstemp(prefix=WAREHOUSE_PREFIX, dir=self._base_dir)
                os.close(fd)
                path = Path(name).resolve()
                path.unlink()
            except OSError as exc:
                raise WarehouseAllocationError(cause=str(exc)) from exc

            if path.exists():
                raise WarehouseAllocationError(
                    "Warehouse path still exists after release",
                    path=path,
                )

            self._path = path
            self._logger.info("warehouse_allocated", path=str(path))
            return path

    def destroy(self) -> None:
        """Recursively delete the warehouse if it exists.

        Safe to call when ``create()`` never ran or the directory is already
        gone.

        Raises:
            WarehouseCleanupError: If the directory cannot be fully removed.
        """
        if self._path is None or not self._path.exists():
            self._logger.debug("warehouse_absent", path=str(self._path))
            return

        path = self._path
        with fixture_operation("warehouse.destroy", path=str(path)):
            try:
                if path.is_dir():
                    shutil.rmtree(path)
                else:
                    path.unlink()
            except OSError as exc:
                raise WarehouseCleanupError(path, cause=str(exc)) from exc

            if path.exists():
                raise WarehouseCleanupError(path)

    def __enter__(self) -> WarehouseLifecycle:
        self.create()
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        self.destroy()
