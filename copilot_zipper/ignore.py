# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Copilot-for-Consensus contributors

"""Ordered include/exclude path patterns for directory archiving.

Pattern text holds one rule per line. ``*`` matches within one path
segment, ``**`` matches any number of segments (including none) and a
leading ``!`` re-includes what earlier rules excluded. A rule without
wildcards names a path or directory wherever it appears in the tree,
unless it starts with ``/``: then it only matches from the archive root.
A trailing ``/`` is ignored. Rules are evaluated top to bottom and the last
matching rule decides.
"""

import logging
import re
from dataclasses import dataclass

logger = logging.getLogger(__name__)

DEFAULT_IGNORED_DIRS = (".git", ".hg", ".svn", ".bzr", "_darcs")


@dataclass(frozen=True)
class IgnoreRule:
    """A single parsed pattern line."""

    pattern: str
    negated: bool
    regex: re.Pattern
    anchored: bool = False

    @property
    def has_wildcard(self) -> bool:
        return "*" in self.pattern

    def matches(self, path: str) -> bool:
        if path == self.pattern:
            return True
        if not self.has_wildcard:
            if self.anchored:
                return path.startswith(f"{self.pattern}/")
            padded = f"/{path}/"
            return f"/{self.pattern}/" in padded
        return self.regex.match(path) is not None


def _translate_segment(segment: str) -> str:
    return "[^/]*".join(re.escape(part) for part in re.split(r"\*+", segment))


def compile_pattern(pattern: str) -> re.Pattern:
    """Translate a path pattern to an anchored regular expression."""
    segments = pattern.split("/")
    regex = ""
    for index, segment in enumerate(segments):
        last = index == len(segments) - 1
        if segment == "**":
            regex += ".*" if last else "(?:[^/]*/)*"
            continue
        regex += _translate_segment(segment)
        if not last:
            regex += "/"
    return re.compile(f"^{regex}$")


def parse_rules(text: str) -> list[IgnoreRule]:
    """Parse newline-separated pattern text, keeping line order."""
    rules = []
    for line in text.splitlines():
        line = line.strip()
        if not line:
            continue
        negated = line.startswith("!")
        if negated:
            line = line[1:]
        anchored = line.startswith("/")
        line = line.strip("/")
        if not line:
            continue
        rules.append(IgnoreRule(
            pattern=line, negated=negated, regex=compile_pattern(line), anchored=anchored,
        ))
    return rules


class IgnoreFiles:
    """Decides whether relative paths are excluded from an archive.

    Example:
        >>> ignore = IgnoreFiles("node_modules/*\\n!node_modules/common")
        >>> ignore.file_should_be_ignored("node_modules/left-pad")
        True
        >>> ignore.file_should_be_ignored("node_modules/common")
        False
    """

    def __init__(self, text: str = "", default_ignored: tuple[str, ...] = DEFAULT_IGNORED_DIRS):
        """Initialize from pattern text.

        Args:
            text: Newline-separated patterns
            default_ignored: Patterns applied before ``text`` (VCS metadata by default)
        """
        self.rules = parse_rules("\n".join(default_ignored)) + parse_rules(text)

    def file_should_be_ignored(self, path: str) -> bool:
        """Tell whether ``path`` (relative, forward slashes) is excluded."""
        path = path.replace("\\", "/").strip("/")
        while path.startswith("./"):
            path = path[2:]
        ignored = False
        for rule in self.rules:
            if rule.matches(path):
                ignored = not rule.negated
        return ignored

    @classmethod
    def from_file(
        cls, file_path: str, default_ignored: tuple[str, ...] = DEFAULT_IGNORED_DIRS,
    ) -> "IgnoreFiles":
        """Load patterns from a file; a missing file yields the defaults only."""
        try:
            with open(file_path, "r", encoding="utf-8") as f:
                text = f.read()
        except FileNotFoundError:
            return cls(default_ignored=default_ignored)
        logger.debug(f"Loaded ignore patterns from {file_path}")
        return cls(text, default_ignored)
