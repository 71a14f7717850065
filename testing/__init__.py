"""Shared testing infrastructure for floe-runtime.

This package holds test doubles shared across package test suites.

Modules:
    fixtures: In-memory stand-ins for external services (Spark session)

Usage:
    In your conftest.py:
        from testing.fixtures.spark_session import FakeSparkSession
"""

from __future__ import annotations
