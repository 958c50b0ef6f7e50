# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Copilot-for-Consensus contributors

"""Streaming conversion of tar and gzipped tar archives to zip."""

import logging
import tarfile
import zipfile
import zlib
from enum import Enum
from typing import BinaryIO

from .archive import (
    ZipArchive,
    build_zip_archive,
    dir_header,
    file_header,
    symlink_header,
    write_dir,
    write_stream,
)
from .exceptions import TranscodeError

logger = logging.getLogger(__name__)


class ArchiveEncoding(str, Enum):
    """Encodings the transcoder accepts."""

    TAR = "tar"
    TAR_GZ = "tar.gz"


_TAR_STREAM_MODES = {
    ArchiveEncoding.TAR: "r|",
    ArchiveEncoding.TAR_GZ: "r|gz",
}


def _normalize_name(name: str) -> str:
    name = name.lstrip("/")
    while name.startswith("./"):
        name = name[2:]
    name = name.rstrip("/")
    return "" if name == "." else name


def _entry_name(name: str, root: str) -> str:
    """Member name relative to the stripped root folder ("" to skip it)."""
    name = _normalize_name(name)
    if root:
        if name == root:
            return ""
        if name.startswith(f"{root}/"):
            name = name[len(root) + 1:]
    return name


def write_tar_to_zip(tar: tarfile.TarFile, writer: zipfile.ZipFile) -> int:
    """Copy every member of a tar stream into a zip writer.

    When the first member is a directory it is treated as a wrapper folder:
    it is not written and its name is removed from every following member.
    A ``.`` wrapper (as written by ``tar -C dir -cf x.tar .``) strips nothing.

    Args:
        tar: Tar archive opened in stream mode
        writer: Zip writer receiving the entries

    Returns:
        Number of entries written
    """
    root = ""
    written = 0
    for index, member in enumerate(tar):
        if index == 0 and member.isdir():
            root = _normalize_name(member.name)
            logger.debug(f"Stripping root folder {member.name!r}")
            continue

        name = _entry_name(member.name, root)
        if not name:
            continue

        if member.isdir():
            write_dir(writer, dir_header(name, member.mode, member.mtime))
        elif member.isreg():
            zinfo = file_header(name, member.mode, member.size, member.mtime)
            write_stream(writer, zinfo, tar.extractfile(member))
        elif member.issym():
            writer.writestr(symlink_header(name, mtime=member.mtime), member.linkname)
        elif member.islnk():
            # Hard link targets cannot be re-read from a forward-only stream
            logger.warning(f"Writing hard link {name!r} as an empty file")
            writer.writestr(file_header(name, member.mode, 0, member.mtime), b"")
        else:
            logger.debug(f"Skipping tar member {name!r} of type {member.type!r}")
            continue
        written += 1
    return written


def transcode(stream: BinaryIO, encoding: ArchiveEncoding, temp_dir: str | None = None) -> ZipArchive:
    """Convert a tar or gzipped tar stream into a zip archive.

    The stream is consumed once, front to back. The zip is assembled in a
    temporary file which is deleted when the returned handle is closed.

    Args:
        stream: Readable binary stream holding the archive
        encoding: Encoding of ``stream``
        temp_dir: Directory for the temporary file

    Returns:
        ZipArchive handle over the converted archive

    Raises:
        TranscodeError: If the stream is malformed, truncated or cannot be written
    """
    encoding = ArchiveEncoding(encoding)

    def write_entries(writer: zipfile.ZipFile) -> None:
        try:
            with tarfile.open(fileobj=stream, mode=_TAR_STREAM_MODES[encoding]) as tar:
                count = write_tar_to_zip(tar, writer)
        except (tarfile.TarError, zlib.error, EOFError, OSError) as e:
            logger.error(f"Failed to convert {encoding.value} stream: {e}")
            raise TranscodeError(f"Failed to convert {encoding.value} archive to zip: {e}") from e
        logger.info(f"Converted {encoding.value} archive to zip ({count} entries)")

    return build_zip_archive(write_entries, temp_dir)


def tar_to_zip(stream: BinaryIO, temp_dir: str | None = None) -> ZipArchive:
    return transcode(stream, ArchiveEncoding.TAR, temp_dir)


def targz_to_zip(stream: BinaryIO, temp_dir: str | None = None) -> ZipArchive:
    return transcode(stream, ArchiveEncoding.TAR_GZ, temp_dir)
