"""Shared pytest configuration for easyviewer examples.

Examples are written to be run from their own directory (``python app.py``),
so scheme, view and script paths in them are relative. ``example_app``
changes into the example's directory before executing its ``app.py`` in a
fresh module namespace, and the working directory is restored after the test.
"""

import importlib.util
import logging
from pathlib import Path

import pytest


@pytest.fixture
def example_dir(request: pytest.FixtureRequest, monkeypatch: pytest.MonkeyPatch) -> Path:
    """The directory of the requesting test, made the working directory."""
    directory = Path(request.path).parent
    monkeypatch.chdir(directory)
    return directory


@pytest.fixture
def example_app(example_dir: Path, caplog: pytest.LogCaptureFixture):
    """Execute the sibling app.py and return it as a module.

    Render diagnostics logged while the example runs are captured, so tests
    can assert on them through ``caplog``.
    """
    caplog.set_level(logging.WARNING, logger="easyviewer")
    app_path = example_dir / "app.py"
    module_name = f"example_{example_dir.name}"
    module_spec = importlib.util.spec_from_file_location(module_name, app_path)
    assert module_spec is not None
    assert module_spec.loader is not None
    module = importlib.util.module_from_spec(module_spec)
    module_spec.loader.exec_module(module)
    return module
