# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Copilot-for-Consensus contributors

"""Data models for zipper."""

from dataclasses import dataclass, field, replace
from typing import Any
from urllib.parse import urldefrag


@dataclass(frozen=True)
class Source:
    """A location to fetch from, plus the transport client used to reach it.

    The path is a local path, an HTTP(S) URL, or a repository URL carrying an
    optional ``#<ref>`` fragment. Instances are immutable; use
    :meth:`with_http_client` to derive a copy bound to another client.
    """

    path: str
    """Local path or URL of the source."""

    http_client: Any = field(default=None, compare=False, repr=False)
    """Transport client (``requests.Session`` compatible) used for HTTP access."""

    def with_http_client(self, http_client: Any) -> "Source":
        """Return a copy of this source bound to ``http_client``."""
        if http_client is None:
            raise ValueError("http_client must not be None")
        return replace(self, http_client=http_client)

    @property
    def url(self) -> str:
        """Path without its ``#ref`` fragment."""
        return urldefrag(self.path)[0]

    @property
    def ref(self) -> str:
        """The ``#ref`` fragment of the path, or an empty string."""
        return urldefrag(self.path)[1]
