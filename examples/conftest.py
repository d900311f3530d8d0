"""Shared pytest configuration for waypoint examples.

Provides the ``example_router`` fixture: it loads the ``app.py`` next to
the test file in an isolated module namespace and calls its
``create_router()`` factory, so every test starts with empty state.
"""

import importlib.util
from pathlib import Path

import pytest


@pytest.fixture
def example_module(request: pytest.FixtureRequest):
    """Load the sibling app.py as a fresh module."""
    app_path = Path(request.path).parent / "app.py"
    module_name = f"example_{app_path.parent.name}"
    spec = importlib.util.spec_from_file_location(module_name, app_path)
    assert spec is not None
    assert spec.loader is not None
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


@pytest.fixture
def example_router(example_module):
    """A fresh router from the example's ``create_router()``."""
    return example_module.create_router()
