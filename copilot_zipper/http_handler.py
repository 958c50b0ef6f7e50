# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Copilot-for-Consensus contributors

"""HTTP handler implementation."""

import io
import logging
import posixpath
from http.client import responses as http_status_text
from typing import Any, BinaryIO

import requests

from .archive import (
    DEFAULT_FILE_MODE,
    EXECUTABLE_FILE_MODE,
    ZipArchive,
    build_zip_archive,
    file_header,
    write_stream,
)
from .base import Handler, get_sha1_from_stream
from .exceptions import FetchError
from .models import Source
from .transcoder import ArchiveEncoding, transcode
from .utils import (
    SNIFF_SIZE,
    is_archive_file_ext,
    is_executable_content,
    is_tar_file,
    is_targz_file,
    is_web_url,
    is_zip_content,
    is_zip_file_ext,
    redact_url,
    split_credentials,
    url_path,
)

logger = logging.getLogger(__name__)

DEFAULT_CHUNK_SIZE = 64 * 1024


class ResponseStream(io.RawIOBase):
    """Read-only stream over the body of a streamed HTTP response.

    Closing the stream closes the response.
    """

    def __init__(self, response: Any, chunk_size: int = DEFAULT_CHUNK_SIZE):
        self._response = response
        self._chunks = response.iter_content(chunk_size=chunk_size)
        self._pending = b""

    def readable(self) -> bool:
        return True

    def readinto(self, buffer) -> int:
        while not self._pending:
            try:
                self._pending = next(self._chunks)
            except StopIteration:
                return 0
        size = min(len(buffer), len(self._pending))
        buffer[:size] = self._pending[:size]
        self._pending = self._pending[size:]
        return size

    def close(self) -> None:
        if not self.closed:
            self._response.close()
        super().close()


def content_length(response: Any) -> int:
    """Declared body size of a response, or -1 when unknown."""
    try:
        return int(response.headers.get("Content-Length", -1))
    except (TypeError, ValueError):
        return -1


class HttpHandler(Handler):
    """Handler for archives and files served over HTTP(S).

    Zip bodies are passed through untouched, tar and gzipped tar bodies are
    converted to zip, and any other body becomes the only entry of a new zip.
    """

    def __init__(self, temp_dir: str | None = None, chunk_size: int = DEFAULT_CHUNK_SIZE):
        """Initialize HTTP handler.

        Args:
            temp_dir: Directory for temporary archives
            chunk_size: Size of the chunks read from response bodies
        """
        self.temp_dir = temp_dir
        self.chunk_size = chunk_size

    @property
    def name(self) -> str:
        return "http"

    def detect(self, source: Source) -> bool:
        """Accept HTTP(S) URLs with an archive extension or a zip body.

        URLs without a known extension are requested once to sniff the body.
        """
        if not is_web_url(source.path):
            return False
        if is_archive_file_ext(url_path(source.url)):
            return True
        return self._sniff_is_zip(source)

    def zip(self, source: Source) -> ZipArchive:
        """Download the source and normalize it to a zip archive.

        Args:
            source: Source whose path is an HTTP(S) URL

        Returns:
            ZipArchive handle

        Raises:
            FetchError: If the server answers with a non-2xx status
            TranscodeError: If a tar body is malformed
        """
        response = self._do_request(source)
        self._check_response(response)

        path = url_path(source.url)
        body = io.BufferedReader(ResponseStream(response, self.chunk_size), buffer_size=self.chunk_size)
        size = content_length(response)

        if is_tar_file(path):
            with body:
                return transcode(body, ArchiveEncoding.TAR, self.temp_dir)
        if is_targz_file(path):
            with body:
                return transcode(body, ArchiveEncoding.TAR_GZ, self.temp_dir)

        try:
            head = body.peek(SNIFF_SIZE)[:SNIFF_SIZE]
        except Exception:
            body.close()
            raise

        if is_zip_content(head) or (not head and is_zip_file_ext(path)):
            logger.info(f"Serving zip body of {redact_url(source.path)} as is")
            return ZipArchive(body, size)

        with body:
            return self._wrap_single_file(body, head, path, size)

    def sha1(self, source: Source) -> str:
        """Fingerprint the first bytes of the response body."""
        response = self._do_request(source)
        self._check_response(response)
        return get_sha1_from_stream(ResponseStream(response, self.chunk_size))

    def _wrap_single_file(self, body: BinaryIO, head: bytes, path: str, size: int) -> ZipArchive:
        name = posixpath.basename(path.rstrip("/")) or "index"
        mode = EXECUTABLE_FILE_MODE if is_executable_content(head) else DEFAULT_FILE_MODE
        logger.info(f"Wrapping downloaded file {name} in a zip archive (mode {mode:o})")

        def write_entries(writer) -> None:
            write_stream(writer, file_header(name, mode, size), body, force_zip64=size < 0)

        return build_zip_archive(write_entries, self.temp_dir)

    def _sniff_is_zip(self, source: Source) -> bool:
        try:
            response = self._do_request(source)
            self._check_response(response)
        except (requests.RequestException, FetchError, OSError) as e:
            logger.warning(f"Could not sniff {redact_url(source.path)}: {e}")
            return False
        with ResponseStream(response, self.chunk_size) as stream:
            head = stream.read(SNIFF_SIZE) or b""
        return is_zip_content(head)

    def _do_request(self, source: Source) -> Any:
        client = source.http_client or requests
        url, username, password = split_credentials(source.path)
        auth = (username, password) if username else None
        logger.info(f"Downloading {redact_url(source.path)}")
        return client.get(url, auth=auth, stream=True)

    def _check_response(self, response: Any) -> None:
        status = response.status_code
        if 200 <= status < 300:
            return
        try:
            content = response.text
        except (requests.RequestException, OSError, UnicodeDecodeError):
            content = ""
        finally:
            response.close()
        reason = getattr(response, "reason", None) or http_status_text.get(status, "")
        error_msg = f"Error occurred when downloading file: {status} {reason}:\n{content}"
        logger.error(f"Download failed with status {status}")
        raise FetchError(error_msg, status_code=status, body=content)
