# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Copilot-for-Consensus contributors

"""Copilot-for-Consensus Zipper.

A shared library that fetches a local directory, an HTTP(S) archive or a git
repository and hands it back as a single zip archive, together with a cheap
fingerprint to tell whether the source changed since the last fetch.
"""

__version__ = "0.1.0"

from .archive import ZipArchive
from .base import CHUNK_FOR_SHA1, Handler, get_sha1_from_stream
from .config import ZipperConfig
from .exceptions import (
    ConfigurationError,
    FetchError,
    HandlerConflictError,
    HandlerNotFoundError,
    RepositoryError,
    SourceError,
    TranscodeError,
    ZipperError,
)
from .factory import create_http_client, create_manager
from .git_handler import GitHandler
from .http_handler import HttpHandler
from .ignore import IgnoreFiles
from .local_handler import LocalHandler
from .manager import Manager
from .models import Source
from .session import Session
from .transcoder import ArchiveEncoding, tar_to_zip, targz_to_zip, transcode

__all__ = [
    # Version
    "__version__",
    # Base classes and utilities
    "Handler",
    "get_sha1_from_stream",
    "CHUNK_FOR_SHA1",
    "ZipArchive",
    "IgnoreFiles",
    "ArchiveEncoding",
    "transcode",
    "tar_to_zip",
    "targz_to_zip",
    # Models
    "Source",
    "ZipperConfig",
    # Handlers
    "GitHandler",
    "HttpHandler",
    "LocalHandler",
    # Registry
    "Manager",
    "Session",
    # Factory
    "create_http_client",
    "create_manager",
    # Exceptions
    "ZipperError",
    "HandlerNotFoundError",
    "HandlerConflictError",
    "FetchError",
    "TranscodeError",
    "SourceError",
    "RepositoryError",
    "ConfigurationError",
]
