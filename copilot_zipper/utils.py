# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Copilot-for-Consensus contributors

"""Path, URL and content sniffing helpers."""

import posixpath
import re
from urllib.parse import unquote, urlsplit, urlunsplit

ZIP_FILE_EXT = (".zip", ".jar", ".war")
TAR_FILE_EXT = (".tar",)
GZIP_FILE_EXT = (".gz", ".gzip")
TARGZ_FILE_EXT = (".tgz",)

# Local file header, empty archive, spanned archive
ZIP_SIGNATURES = (
    b"PK\x03\x04",
    b"PK\x05\x06",
    b"PK\x07\x08",
)

EXECUTABLE_SIGNATURES = (
    b"\x7fELF",  # ELF
    b"MZ",  # DOS/PE executable
    b"\xca\xfe\xba\xbe",  # Mach-O universal
    b"\xfe\xed\xfa\xce",  # Mach-O 32-bit
    b"\xfe\xed\xfa\xcf",  # Mach-O 64-bit
    b"\xce\xfa\xed\xfe",  # Mach-O 32-bit, little endian
    b"\xcf\xfa\xed\xfe",  # Mach-O 64-bit, little endian
    b"#!",  # script with interpreter line
)

SNIFF_SIZE = max(len(sig) for sig in ZIP_SIGNATURES + EXECUTABLE_SIGNATURES)

_SCP_LIKE = re.compile(r"^[\w.\-]+@[\w.\-]+:")
_URL_CREDENTIALS = re.compile(r"([a-zA-Z][\w+.\-]*://)[^/\s@]+@")


def is_web_url(path: str) -> bool:
    """Check whether path is an http:// or https:// URL."""
    return path.startswith("http://") or path.startswith("https://")


def is_ssh_url(path: str) -> bool:
    """Check whether path is an ssh:// URL or an scp-like ``user@host:path``."""
    return path.startswith("ssh://") or bool(_SCP_LIKE.match(path))


def file_ext(path: str) -> str:
    """Lowercase extension of the last path element, including the dot."""
    return posixpath.splitext(path)[1].lower()


def has_ext_file(path: str, *extensions: str) -> bool:
    """Check whether path ends with one of the given extensions."""
    ext = file_ext(path)
    if not ext:
        return False
    return ext in extensions


def is_zip_file_ext(path: str) -> bool:
    return has_ext_file(path, *ZIP_FILE_EXT)


def is_tar_file(path: str) -> bool:
    return has_ext_file(path, *TAR_FILE_EXT)


def is_targz_file(path: str) -> bool:
    """Check for ``.tgz`` or a ``.gz``/``.gzip`` extension preceded by ``.tar``."""
    if has_ext_file(path, *TARGZ_FILE_EXT):
        return True
    if not has_ext_file(path, *GZIP_FILE_EXT):
        return False
    return is_tar_file(posixpath.splitext(path)[0])


def is_archive_file_ext(path: str) -> bool:
    """Check whether path has any extension the remote handler can normalize."""
    return is_zip_file_ext(path) or is_tar_file(path) or is_targz_file(path)


def is_zip_content(head: bytes) -> bool:
    """Check leading bytes for a zip signature."""
    return head.startswith(ZIP_SIGNATURES)


def is_executable_content(head: bytes) -> bool:
    """Check leading bytes for an executable file signature."""
    return head.startswith(EXECUTABLE_SIGNATURES)


def url_path(url: str) -> str:
    """Path component of a URL (without query or fragment)."""
    return urlsplit(url).path


def split_credentials(url: str) -> tuple[str, str | None, str | None]:
    """Strip ``user:password@`` from a URL.

    Returns:
        Tuple of (url_without_credentials, username, password)
    """
    parts = urlsplit(url)
    if not parts.username:
        return url, None, None
    netloc = parts.netloc.rsplit("@", 1)[1]
    clean = urlunsplit((parts.scheme, netloc, parts.path, parts.query, parts.fragment))
    return clean, unquote(parts.username), unquote(parts.password or "")


def redact_url(text: str) -> str:
    """Replace credentials of every URL in text so it can be logged."""
    return _URL_CREDENTIALS.sub(r"\1***@", text)
