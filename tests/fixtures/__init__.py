# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Copilot-for-Consensus contributors

"""Shared test helpers for building archives and faking HTTP transport.

Usage:
    from tests.fixtures import FakeClient, make_tar, read_zip

    client = FakeClient({"https://example.com/a.tar": make_tar(entries)})
"""

from .archive_fixtures import (  # noqa: F401
    entry_mode,
    make_tar,
    make_zip,
    read_zip,
)
from .http_fixtures import (  # noqa: F401
    FakeClient,
    FakeResponse,
)

__all__ = [
    # Archive fixtures
    "make_tar",
    "make_zip",
    "read_zip",
    "entry_mode",
    # HTTP fixtures
    "FakeClient",
    "FakeResponse",
]
