# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Copilot-for-Consensus contributors

"""Zip archive handle and helpers to build archives in temporary storage."""

import logging
import os
import shutil
import stat
import tempfile
import time
import zipfile
from typing import BinaryIO, Callable

logger = logging.getLogger(__name__)

TEMP_PREFIX = "downloads-zipper"
COPY_BUFFER_SIZE = 64 * 1024
DEFAULT_FILE_MODE = 0o644
DEFAULT_DIR_MODE = 0o755
EXECUTABLE_FILE_MODE = 0o755

# Unix attributes are only honoured by readers when the entry claims a unix origin
_CREATE_SYSTEM_UNIX = 3
_MSDOS_DIRECTORY = 0x10
_MIN_DATE_TIME = (1980, 1, 1, 0, 0, 0)


class ZipArchive:
    """Readable zip archive with a known size and a release action.

    Closing the handle closes the underlying stream and then runs the release
    action (typically deleting a temporary file). Both happen exactly once,
    whether or not the stream was read to the end.

    Example:
        >>> with session.zip() as archive:
        ...     shutil.copyfileobj(archive, output)
    """

    def __init__(self, file: BinaryIO, size: int, clean: Callable[[], None] | None = None):
        """Initialize archive handle.

        Args:
            file: Readable binary stream positioned at the start of the archive
            size: Total archive size in bytes (-1 when unknown)
            clean: Release action run once on close
        """
        self._file = file
        self._size = size
        self._clean = clean
        self._closed = False

    @property
    def size(self) -> int:
        return self._size

    @property
    def closed(self) -> bool:
        return self._closed

    def readable(self) -> bool:
        return True

    def read(self, size: int = -1) -> bytes:
        return self._file.read(size)

    def close(self) -> None:
        """Close the stream and release backing storage."""
        if self._closed:
            return
        self._closed = True
        try:
            self._file.close()
        finally:
            if self._clean is not None:
                self._clean()

    def __enter__(self) -> "ZipArchive":
        return self

    def __exit__(self, *args: object) -> None:
        self.close()

    def __del__(self):
        # Abandoned handles still release their backing storage
        if not getattr(self, "_closed", True):
            try:
                self.close()
            except OSError:
                pass


def _remove_file(path: str) -> Callable[[], None]:
    def clean() -> None:
        try:
            os.remove(path)
        except FileNotFoundError:
            pass
        logger.debug(f"Removed temporary archive {path}")

    return clean


def open_temp_archive(path: str) -> ZipArchive:
    """Reopen a finished temporary archive for reading.

    The returned handle deletes ``path`` when closed.
    """
    try:
        file = open(path, "rb")
    except OSError:
        _remove_file(path)()
        raise
    size = os.fstat(file.fileno()).st_size
    return ZipArchive(file, size, _remove_file(path))


def build_zip_archive(
    write_entries: Callable[[zipfile.ZipFile], None],
    temp_dir: str | None = None,
) -> ZipArchive:
    """Write a zip archive to a temporary file and reopen it for reading.

    The archive needs its central directory written after every entry, so it
    is built on disk first and streamed back from there.

    Args:
        write_entries: Callback receiving the open ``zipfile.ZipFile`` writer
        temp_dir: Directory for the temporary file (system default if None)

    Returns:
        ZipArchive whose close deletes the temporary file

    Raises:
        Whatever ``write_entries`` raises; the temporary file is removed first
    """
    fd, path = tempfile.mkstemp(prefix=TEMP_PREFIX, suffix=".zip", dir=temp_dir)
    try:
        with os.fdopen(fd, "wb") as raw:
            with zipfile.ZipFile(raw, "w", compression=zipfile.ZIP_DEFLATED) as writer:
                write_entries(writer)
    except BaseException:
        _remove_file(path)()
        raise
    return open_temp_archive(path)


def _date_time(mtime: float | None) -> tuple:
    if mtime is None:
        mtime = time.time()
    try:
        date_time = time.localtime(mtime)[:6]
    except (OverflowError, OSError, ValueError):
        return _MIN_DATE_TIME
    return max(date_time, _MIN_DATE_TIME)


def file_header(name: str, mode: int = DEFAULT_FILE_MODE, size: int = 0, mtime: float | None = None) -> zipfile.ZipInfo:
    """Build a deflated zip entry header for a regular file.

    Args:
        name: Entry name (forward slashes, no leading slash)
        mode: Permission bits to record
        size: Declared uncompressed size, used to choose zip64 sizing
        mtime: Modification time (now if None)
    """
    zinfo = zipfile.ZipInfo(name, date_time=_date_time(mtime))
    zinfo.create_system = _CREATE_SYSTEM_UNIX
    zinfo.compress_type = zipfile.ZIP_DEFLATED
    zinfo.external_attr = (stat.S_IFREG | stat.S_IMODE(mode)) << 16
    zinfo.file_size = max(size, 0)
    return zinfo


def dir_header(name: str, mode: int = DEFAULT_DIR_MODE, mtime: float | None = None) -> zipfile.ZipInfo:
    """Build a zero-length zip entry header for a directory."""
    if not name.endswith("/"):
        name += "/"
    zinfo = zipfile.ZipInfo(name, date_time=_date_time(mtime))
    zinfo.create_system = _CREATE_SYSTEM_UNIX
    zinfo.compress_type = zipfile.ZIP_STORED
    zinfo.external_attr = ((stat.S_IFDIR | stat.S_IMODE(mode)) << 16) | _MSDOS_DIRECTORY
    return zinfo


def symlink_header(name: str, mode: int = 0o777, mtime: float | None = None) -> zipfile.ZipInfo:
    """Build a zip entry header for a symbolic link (content is the target)."""
    zinfo = zipfile.ZipInfo(name, date_time=_date_time(mtime))
    zinfo.create_system = _CREATE_SYSTEM_UNIX
    zinfo.compress_type = zipfile.ZIP_STORED
    zinfo.external_attr = (stat.S_IFLNK | stat.S_IMODE(mode)) << 16
    return zinfo


def write_dir(writer: zipfile.ZipFile, zinfo: zipfile.ZipInfo) -> None:
    writer.writestr(zinfo, b"")


def write_stream(
    writer: zipfile.ZipFile, zinfo: zipfile.ZipInfo, stream: BinaryIO, force_zip64: bool = False,
) -> int:
    """Copy ``stream`` into a new entry of ``writer``.

    Entries whose declared size exceeds the 32-bit limit are written with
    zip64 size fields. Pass ``force_zip64`` when the size is not known up
    front, otherwise a stream past 4 GiB fails half way through.

    Returns:
        Number of bytes written
    """
    force_zip64 = force_zip64 or zinfo.file_size > zipfile.ZIP64_LIMIT
    with writer.open(zinfo, "w", force_zip64=force_zip64) as dest:
        shutil.copyfileobj(stream, dest, COPY_BUFFER_SIZE)
    return zinfo.file_size
