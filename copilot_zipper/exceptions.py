# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Copilot-for-Consensus contributors

"""Exceptions for zipper operations."""


class ZipperError(Exception):
    """Base exception for zipper errors."""
    pass


class HandlerNotFoundError(ZipperError):
    """Raised when no handler matches a path or a named handler is absent."""
    pass


class HandlerConflictError(ZipperError):
    """Raised when a handler with the same name is already registered."""
    pass


class FetchError(ZipperError):
    """Raised when a remote source answers with a non-2xx status."""

    def __init__(self, message: str, status_code: int | None = None, body: str = ""):
        super().__init__(message)
        self.status_code = status_code
        self.body = body


class TranscodeError(ZipperError):
    """Raised when a tar or gzip stream cannot be converted to a zip archive."""
    pass


class SourceError(ZipperError):
    """Raised when a local source cannot be read or produces nothing."""

    def __init__(self, message: str, path: str | None = None):
        super().__init__(message)
        self.path = path


class RepositoryError(ZipperError):
    """Raised when a git command fails or a ref cannot be resolved."""
    pass


class ConfigurationError(ZipperError):
    """Raised when there is a configuration error."""
    pass
