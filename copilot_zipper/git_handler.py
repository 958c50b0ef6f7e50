# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Copilot-for-Consensus contributors

"""Git repository handler implementation."""

import logging
import os
import re
import shutil
import subprocess
import tempfile

from .archive import ZipArchive, build_zip_archive
from .base import Handler
from .config import DEFAULT_IGNORE_FILE
from .exceptions import RepositoryError
from .local_handler import LocalHandler
from .models import Source
from .utils import has_ext_file, is_ssh_url, is_web_url, redact_url

logger = logging.getLogger(__name__)

GIT_FILE_EXT = (".git",)
WORKTREE_PREFIX = "git-zipper"

_COMMIT_ID = re.compile(r"^[0-9a-fA-F]{7,40}$")

REF_HEAD = "head"
REF_BRANCH = "branch"
REF_TAG = "tag"
REF_COMMIT = "commit"


class GitHandler(Handler):
    """Handler for git repositories reached over HTTP(S) or SSH.

    The ``#ref`` fragment of the source selects a branch, a tag or a commit,
    tried in that order. Without a fragment the remote HEAD is used.
    """

    def __init__(
        self,
        git_binary: str = "git",
        temp_dir: str | None = None,
        ignore_file: str = DEFAULT_IGNORE_FILE,
        timeout: float | None = None,
    ):
        """Initialize git handler.

        Args:
            git_binary: git executable to run
            temp_dir: Directory for working trees and temporary archives
            ignore_file: Pattern file read from the root of the working tree
            timeout: Timeout in seconds for each git command (None waits forever)
        """
        self.git_binary = git_binary
        self.temp_dir = temp_dir
        self.timeout = timeout
        self.local = LocalHandler(ignore_file=ignore_file, temp_dir=temp_dir)

    @property
    def name(self) -> str:
        return "git"

    def detect(self, source: Source) -> bool:
        url = source.url
        return (is_web_url(url) or is_ssh_url(url)) and has_ext_file(url, *GIT_FILE_EXT)

    def sha1(self, source: Source) -> str:
        """Return the commit id the source ref points to."""
        commit, _ = self.resolve(source)
        return commit

    def zip(self, source: Source) -> ZipArchive:
        """Check out the source ref and archive its working tree.

        Args:
            source: Repository URL with an optional ``#ref`` fragment

        Returns:
            ZipArchive handle over a temporary archive

        Raises:
            RepositoryError: If the ref cannot be resolved or git fails
        """
        commit, kind = self.resolve(source)
        worktree = tempfile.mkdtemp(prefix=WORKTREE_PREFIX, dir=self.temp_dir)
        try:
            self.checkout(source, kind, commit, worktree)
            archive = build_zip_archive(lambda writer: self.local.zip_files(worktree, writer), self.temp_dir)
        finally:
            shutil.rmtree(worktree, ignore_errors=True)
        logger.info(f"Archived {redact_url(source.url)} at {commit} ({archive.size} bytes)")
        return archive

    def resolve(self, source: Source) -> tuple[str, str]:
        """Resolve the source ref to a commit id.

        Returns:
            Tuple of (commit_id, ref_kind) where ref_kind is one of
            ``head``, ``branch``, ``tag`` or ``commit``

        Raises:
            RepositoryError: If the ref is neither a branch, a tag nor a commit id
        """
        ref = source.ref
        refs = self.ls_remote(source)

        if not ref:
            if "HEAD" not in refs:
                raise RepositoryError(f"Repository {redact_url(source.url)} has no HEAD")
            return refs["HEAD"], REF_HEAD

        branch = f"refs/heads/{ref}"
        if branch in refs:
            return refs[branch], REF_BRANCH

        tag = f"refs/tags/{ref}"
        # Annotated tags are listed twice; the peeled entry is the commit
        for candidate in (f"{tag}^{{}}", tag):
            if candidate in refs:
                return refs[candidate], REF_TAG

        if _COMMIT_ID.match(ref):
            return ref.lower(), REF_COMMIT

        raise RepositoryError(f"Reference '{ref}' cannot be found in {redact_url(source.url)}")

    def ls_remote(self, source: Source) -> dict[str, str]:
        """List the refs of the remote repository.

        Returns:
            Mapping of ref name to commit id
        """
        output = self._run_git(["ls-remote", source.url], source)
        refs = {}
        for line in output.splitlines():
            if "\t" not in line:
                continue
            commit, ref = line.split("\t", 1)
            refs[ref.strip()] = commit.strip()
        return refs

    def checkout(self, source: Source, kind: str, commit: str, worktree: str) -> None:
        """Materialize the working tree of ``commit`` into ``worktree``."""
        if kind == REF_COMMIT:
            self._run_git(["clone", "--quiet", "--no-checkout", source.url, worktree], source)
            self._run_git(["checkout", "--quiet", commit], source, cwd=worktree)
            return

        args = ["clone", "--quiet", "--depth", "1"]
        if kind in (REF_BRANCH, REF_TAG):
            args += ["--branch", source.ref]
        self._run_git(args + [source.url, worktree], source)

    def _git_env(self, source: Source) -> dict[str, str]:
        env = os.environ.copy()
        env["GIT_TERMINAL_PROMPT"] = "0"
        if getattr(source.http_client, "verify", True) is False:
            env["GIT_SSL_NO_VERIFY"] = "true"
        return env

    def _run_git(self, args: list[str], source: Source, cwd: str | None = None) -> str:
        command = [self.git_binary] + args
        logger.debug(f"Executing git: {redact_url(' '.join(command))}")
        try:
            result = subprocess.run(
                command,
                capture_output=True,
                text=True,
                cwd=cwd,
                env=self._git_env(source),
                timeout=self.timeout,
            )
        except FileNotFoundError as e:
            raise RepositoryError(f"git executable not found: {self.git_binary}") from e
        except subprocess.TimeoutExpired as e:
            raise RepositoryError(f"git {args[0]} timed out") from e

        if result.returncode != 0:
            error_msg = f"git {args[0]} failed with code {result.returncode}: {redact_url(result.stderr.strip())}"
            logger.error(error_msg)
            raise RepositoryError(error_msg)
        return result.stdout
