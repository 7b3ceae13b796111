"""Pytest configuration for gp_gui tests."""

import importlib.util
import os
from pathlib import Path

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

HAS_PYSIDE6 = importlib.util.find_spec("PySide6") is not None

# Skip collection of test files if the Qt binding is missing.
if not HAS_PYSIDE6:
    collect_ignore = [path.name for path in Path(__file__).parent.glob("test_*.py")]
