# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Copilot-for-Consensus contributors

"""Base handler class and utilities."""

import hashlib
import logging
from abc import ABC, abstractmethod
from typing import BinaryIO

from .archive import ZipArchive
from .models import Source

logger = logging.getLogger(__name__)

CHUNK_FOR_SHA1 = 5 * 1024


class Handler(ABC):
    """Abstract base class for source handlers.

    A handler knows how to recognise one kind of source, turn it into a zip
    archive and compute a cheap fingerprint of it. Handlers hold no per-call
    state, so one instance is shared by every session of a manager.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Unique handler name, compared case-insensitively."""
        pass

    @abstractmethod
    def detect(self, source: Source) -> bool:
        """Tell whether this handler can process ``source``."""
        pass

    @abstractmethod
    def zip(self, source: Source) -> ZipArchive:
        """Fetch the source as a zip archive.

        Args:
            source: Source to fetch

        Returns:
            ZipArchive handle; the caller must close it

        Raises:
            ZipperError: If the source cannot be fetched or normalized
        """
        pass

    @abstractmethod
    def sha1(self, source: Source) -> str:
        """Compute the fingerprint of the source.

        Args:
            source: Source to fingerprint

        Returns:
            Lowercase hex digest
        """
        pass

    def __repr__(self) -> str:
        return f"<{type(self).__name__} name={self.name!r}>"


def get_sha1_from_stream(stream: BinaryIO, limit: int = CHUNK_FOR_SHA1) -> str:
    """Calculate the SHA-1 of the first ``limit`` bytes of a stream.

    Only the head of the stream is read so that fingerprinting a large remote
    payload stays cheap. The stream is closed afterwards when it supports it.

    Args:
        stream: Readable binary stream
        limit: Maximum number of bytes to hash (default: 5 KiB)

    Returns:
        Hash value in hexadecimal
    """
    hash_obj = hashlib.sha1()
    remaining = limit
    try:
        while remaining > 0:
            chunk = stream.read(remaining)
            if not chunk:
                break
            hash_obj.update(chunk)
            remaining -= len(chunk)
    finally:
        close = getattr(stream, "close", None)
        if callable(close):
            close()

    logger.debug(f"Fingerprinted {limit - remaining} bytes")
    return hash_obj.hexdigest()
