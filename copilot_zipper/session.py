# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Copilot-for-Consensus contributors

"""Session binding a handler to a source."""

import logging

from .archive import ZipArchive
from .base import Handler
from .exceptions import ZipperError
from .models import Source
from .utils import redact_url

logger = logging.getLogger(__name__)


class Session:
    """A handler bound to one source.

    Every call goes back to the handler; nothing is cached between calls.
    """

    def __init__(self, source: Source, handler: Handler):
        self._source = source
        self._handler = handler

    @property
    def source(self) -> Source:
        return self._source

    @property
    def handler(self) -> Handler:
        return self._handler

    def zip(self) -> ZipArchive:
        """Fetch the source as a zip archive; the caller must close it."""
        return self._handler.zip(self._source)

    def sha1(self) -> str:
        """Compute the current fingerprint of the source."""
        return self._handler.sha1(self._source)

    def has_changed(self, stored_sha1: str) -> bool:
        """Tell whether the source fingerprint differs from ``stored_sha1``.

        Raises:
            ZipperError: If the fingerprint cannot be computed
        """
        return self._handler.sha1(self._source) != stored_sha1

    def is_diff(self, stored_sha1: str) -> tuple[bool, str | None, Exception | None]:
        """Compare the source fingerprint with ``stored_sha1``.

        A failure to fingerprint is reported as a change so that callers
        never skip a refresh because of it.

        Args:
            stored_sha1: Fingerprint saved from a previous fetch

        Returns:
            Tuple of (changed, current_sha1, error)
        """
        try:
            current = self._handler.sha1(self._source)
        except (ZipperError, OSError) as e:
            logger.warning(f"Could not fingerprint {redact_url(self._source.path)}, assuming it changed: {e}")
            return True, None, e
        return stored_sha1 != current, current, None
