# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Copilot-for-Consensus contributors

"""Factory for creating HTTP clients and pre-populated managers."""

from typing import Any

import requests

from .config import ZipperConfig
from .git_handler import GitHandler
from .http_handler import HttpHandler
from .local_handler import LocalHandler
from .manager import Manager


def create_http_client(insecure: bool = False) -> requests.Session:
    """Create the transport client shared by a manager's sessions.

    Proxies are taken from the environment (``HTTP_PROXY``, ``HTTPS_PROXY``,
    ``NO_PROXY``).

    Args:
        insecure: Skip TLS certificate verification

    Returns:
        Configured requests session
    """
    session = requests.Session()
    session.trust_env = True
    session.verify = not insecure
    return session


def create_manager(config: ZipperConfig | None = None, http_client: Any = None) -> Manager:
    """Create a manager with the git, http and local handlers registered.

    Handlers are registered in that order, which is also the order used for
    auto-detection: repository URLs are recognised before generic HTTP URLs.

    Args:
        config: Zipper configuration (defaults if None)
        http_client: Transport client (built from ``config.insecure`` if None)

    Returns:
        Manager instance
    """
    config = config or ZipperConfig()
    if http_client is None:
        http_client = create_http_client(config.insecure)

    return Manager(
        GitHandler(git_binary=config.git_binary, temp_dir=config.temp_dir, ignore_file=config.ignore_file),
        HttpHandler(temp_dir=config.temp_dir),
        LocalHandler(ignore_file=config.ignore_file, temp_dir=config.temp_dir),
        http_client=http_client,
    )
