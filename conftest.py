# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Copilot-for-Consensus contributors

"""Root conftest.py: import path for tests.fixtures and the integration marker."""

import os
import sys
from pathlib import Path

import pytest

# Add repo root to sys.path so tests.fixtures can be imported
_repo_root = Path(__file__).parent
if str(_repo_root) not in sys.path:
    sys.path.insert(0, str(_repo_root))


def pytest_configure(config):
    config.addinivalue_line("markers", "integration: test needs network access")


def pytest_collection_modifyitems(config, items):
    # Network tests only run when explicitly enabled
    if os.getenv("ZIPPER_RUN_INTEGRATION", "").lower() in ("1", "true", "yes"):
        return
    skip = pytest.mark.skip(reason="set ZIPPER_RUN_INTEGRATION=1 to run integration tests")
    for item in items:
        if "integration" in item.keywords:
            item.add_marker(skip)
