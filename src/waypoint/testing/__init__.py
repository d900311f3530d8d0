"""Test utilities for waypoint services.

Provides an in-process async test client and response assertions::

    from waypoint.testing import TestClient, assert_status
"""

from waypoint.testing.assertions import assert_error, assert_json, assert_status
from waypoint.testing.client import TestClient

__all__ = [
    "TestClient",
    "assert_error",
    "assert_json",
    "assert_status",
]
