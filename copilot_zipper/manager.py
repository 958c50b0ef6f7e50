# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Copilot-for-Consensus contributors

"""Handler registry and session creation."""

import logging
from typing import Any

from .base import Handler
from .exceptions import HandlerConflictError, HandlerNotFoundError
from .models import Source
from .session import Session
from .utils import redact_url

logger = logging.getLogger(__name__)


class Manager:
    """Registry of handlers keyed by lowercase name.

    Handlers are tried in registration order when auto-detecting. Lookups
    are safe from several threads once registration is over; registration
    itself is not synchronized.

    Example:
        >>> manager = Manager(GitHandler(), HttpHandler(), LocalHandler(),
        ...                   http_client=requests.Session())
        >>> session = manager.create_session("https://example.com/app.tar.gz")
        >>> with session.zip() as archive:
        ...     data = archive.read()
    """

    def __init__(self, *handlers: Handler, http_client: Any = None):
        """Initialize manager.

        Args:
            *handlers: Handlers to register, in detection order
            http_client: Transport client injected into every session source

        Raises:
            HandlerConflictError: If two handlers share a name
        """
        self._handlers: dict[str, Handler] = {}
        self.http_client = http_client
        self.add_handlers(*handlers)

    @property
    def handlers(self) -> list[Handler]:
        return list(self._handlers.values())

    def set_http_client(self, http_client: Any) -> None:
        self.http_client = http_client

    def add_handlers(self, *handlers: Handler) -> None:
        for handler in handlers:
            self.add_handler(handler)

    def add_handler(self, handler: Handler) -> None:
        """Register a handler.

        Raises:
            HandlerConflictError: If a handler with the same name exists
        """
        name = handler.name.lower()
        if name in self._handlers:
            raise HandlerConflictError(f"Handler {name} already exists")
        self._handlers[name] = handler
        logger.debug(f"Registered handler {name}")

    def find_handler(self, path: str, handler_name: str = "") -> Handler:
        """Resolve the handler for ``path``.

        Args:
            path: Source path or URL
            handler_name: Handler to use; auto-detect when empty

        Returns:
            The named handler, or the first one whose detection accepts the path

        Raises:
            HandlerNotFoundError: If no handler matches
        """
        handler_name = (handler_name or "").lower()
        if handler_name:
            handler = self._handlers.get(handler_name)
        else:
            handler = self._detect(self._source(path))
        if handler is None:
            raise HandlerNotFoundError(f"Handler for path '{redact_url(path)}' cannot be found.")
        return handler

    def create_session(self, path: str, handler_name: str = "") -> Session:
        """Open a session on ``path`` with the resolved handler.

        Raises:
            HandlerNotFoundError: If no handler matches
        """
        handler = self.find_handler(path, handler_name)
        logger.debug(f"Using handler {handler.name} for {redact_url(path)}")
        return Session(self._source(path), handler)

    def _source(self, path: str) -> Source:
        source = Source(path)
        if self.http_client is not None:
            source = source.with_http_client(self.http_client)
        return source

    def _detect(self, source: Source) -> Handler | None:
        for handler in self._handlers.values():
            if handler.detect(source):
                return handler
        return None
