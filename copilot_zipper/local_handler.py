# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Copilot-for-Consensus contributors

"""Local filesystem handler implementation."""

import logging
import os
import stat
import zipfile

from .archive import (
    ZipArchive,
    build_zip_archive,
    dir_header,
    file_header,
    symlink_header,
    write_dir,
    write_stream,
)
from .base import Handler, get_sha1_from_stream
from .config import DEFAULT_IGNORE_FILE
from .exceptions import SourceError
from .ignore import DEFAULT_IGNORED_DIRS, IgnoreFiles
from .models import Source

logger = logging.getLogger(__name__)


def _raise(error: OSError) -> None:
    raise error


class LocalHandler(Handler):
    """Handler for files and directories on the local filesystem."""

    def __init__(self, ignore_file: str = DEFAULT_IGNORE_FILE, temp_dir: str | None = None):
        """Initialize local handler.

        Args:
            ignore_file: Name of the pattern file read from a directory root
            temp_dir: Directory for temporary archives
        """
        self.ignore_file = ignore_file
        self.temp_dir = temp_dir

    @property
    def name(self) -> str:
        return "local"

    def detect(self, source: Source) -> bool:
        return os.path.exists(source.path)

    def zip(self, source: Source) -> ZipArchive:
        """Archive a local directory, or wrap a single local file.

        Args:
            source: Source whose path is a local file or directory

        Returns:
            ZipArchive handle over a temporary archive

        Raises:
            SourceError: If the path does not exist or nothing was archived
        """
        path = source.path
        if not os.path.exists(path):
            error_msg = f"Source path does not exist: {path}"
            logger.error(error_msg)
            raise SourceError(error_msg, path=path)

        if os.path.isfile(path):
            return build_zip_archive(lambda writer: self._zip_single_file(path, writer), self.temp_dir)

        archive = build_zip_archive(lambda writer: self.zip_files(path, writer), self.temp_dir)
        logger.info(f"Archived directory {path} ({archive.size} bytes)")
        return archive

    def sha1(self, source: Source) -> str:
        """Fingerprint the archive freshly produced from the source."""
        return get_sha1_from_stream(self.zip(source))

    def load_ignore(self, directory: str) -> IgnoreFiles:
        """Read ignore patterns from the root of ``directory``.

        The pattern file itself is excluded from the archive unless the
        patterns re-include it.
        """
        default_ignored = DEFAULT_IGNORED_DIRS + (f"/{self.ignore_file}",)
        return IgnoreFiles.from_file(os.path.join(directory, self.ignore_file), default_ignored)

    def zip_files(self, directory: str, writer: zipfile.ZipFile, ignore: IgnoreFiles | None = None) -> int:
        """Write every non-ignored entry below ``directory`` into ``writer``.

        The tree is walked depth first in name order. An ignored directory
        is not descended into. Directory entries are written for directories
        that contain at least one archived entry.

        Args:
            directory: Root directory to archive
            writer: Zip writer receiving the entries
            ignore: Patterns to apply (read from the directory root if None)

        Returns:
            Number of entries written

        Raises:
            SourceError: If the directory is missing, unreadable or yields no entry
        """
        if not os.path.isdir(directory):
            error_msg = f"Source path does not exist: {directory}"
            logger.error(error_msg)
            raise SourceError(error_msg, path=directory)
        if ignore is None:
            ignore = self.load_ignore(directory)

        written_dirs: set[str] = set()
        written = 0

        def write_parents(rel_path: str) -> int:
            count = 0
            parts = rel_path.split("/")[:-1]
            for depth in range(1, len(parts) + 1):
                rel_dir = "/".join(parts[:depth])
                if rel_dir in written_dirs:
                    continue
                st = os.stat(os.path.join(directory, *parts[:depth]))
                write_dir(writer, dir_header(rel_dir, st.st_mode, st.st_mtime))
                written_dirs.add(rel_dir)
                count += 1
            return count

        try:
            for dirpath, dirnames, filenames in os.walk(directory, onerror=_raise):
                dirnames.sort()
                rel_root = os.path.relpath(dirpath, directory)
                rel_root = "" if rel_root == "." else rel_root.replace(os.sep, "/")

                entries = []
                kept_dirs = []
                for dirname in dirnames:
                    rel_path = f"{rel_root}/{dirname}" if rel_root else dirname
                    if ignore.file_should_be_ignored(rel_path):
                        logger.debug(f"Ignoring directory {rel_path}")
                        continue
                    if os.path.islink(os.path.join(dirpath, dirname)):
                        entries.append((dirname, rel_path))
                        continue
                    kept_dirs.append(dirname)
                dirnames[:] = kept_dirs

                for filename in filenames:
                    rel_path = f"{rel_root}/{filename}" if rel_root else filename
                    if ignore.file_should_be_ignored(rel_path):
                        logger.debug(f"Ignoring file {rel_path}")
                        continue
                    entries.append((filename, rel_path))

                for entry_name, rel_path in sorted(entries):
                    full_path = os.path.join(dirpath, entry_name)
                    written += write_parents(rel_path)
                    written += self._write_entry(full_path, rel_path, writer)
        except OSError as e:
            logger.error(f"Failed to archive {directory}: {e}")
            raise SourceError(f"Failed to archive {directory}: {e}", path=getattr(e, "filename", None) or directory) from e

        if written == 0:
            error_msg = f"Directory {directory} is empty"
            logger.error(error_msg)
            raise SourceError(error_msg, path=directory)
        return written

    def _write_entry(self, full_path: str, rel_path: str, writer: zipfile.ZipFile) -> int:
        st = os.lstat(full_path)
        if stat.S_ISLNK(st.st_mode):
            writer.writestr(symlink_header(rel_path, st.st_mode, st.st_mtime), os.readlink(full_path))
            return 1
        if not stat.S_ISREG(st.st_mode):
            logger.debug(f"Skipping special file {rel_path}")
            return 0
        with open(full_path, "rb") as f:
            write_stream(writer, file_header(rel_path, st.st_mode, st.st_size, st.st_mtime), f)
        return 1

    def _zip_single_file(self, path: str, writer: zipfile.ZipFile) -> None:
        try:
            written = self._write_entry(path, os.path.basename(path), writer)
        except OSError as e:
            raise SourceError(f"Failed to archive {path}: {e}", path=path) from e
        if written == 0:
            raise SourceError(f"Source is neither file nor directory: {path}", path=path)
