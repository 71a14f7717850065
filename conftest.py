"""Root pytest configuration for floe-runtime.

Loads the floe-spark fixtures and pytester for every test directory in the
repository.
"""

from __future__ import annotations

pytest_plugins = ["pytester", "floe_spark.plugin"]
