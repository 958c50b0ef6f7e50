# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Copilot-for-Consensus contributors

"""Shared fixtures for zipper tests."""

import pytest


@pytest.fixture
def project_dir(tmp_path):
    """Directory tree with nested files, an executable and VCS metadata."""
    root = tmp_path / "project"
    (root / "src" / "pkg").mkdir(parents=True)
    (root / "docs").mkdir()
    (root / ".git" / "objects").mkdir(parents=True)
    (root / "README.md").write_text("readme\n")
    (root / "src" / "main.py").write_text("print('hi')\n")
    (root / "src" / "pkg" / "mod.py").write_text("x = 1\n")
    (root / "docs" / "guide.txt").write_text("guide\n")
    (root / ".git" / "HEAD").write_text("ref: refs/heads/main\n")
    run = root / "run.sh"
    run.write_text("#!/bin/sh\necho run\n")
    run.chmod(0o755)
    return root
