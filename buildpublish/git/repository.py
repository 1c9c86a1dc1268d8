"""Read-only access to repository tags and commit history."""

from __future__ import annotations

import logging
import subprocess
from pathlib import Path
from typing import Callable, Iterable, List, Optional, Protocol, Sequence

from ..errors import GitCommandError
from ..logging import get_logger
from ..models import Commit, CommitRange, RawTag

# ASCII unit/record separators keep multi-line messages intact in git's output.
_FIELD_SEP = "\x1f"
_RECORD_SEP = "\x1e"

_TAG_FORMAT = (
    "%(refname:short)%1f%(objecttype)%1f%(objectname)%1f%(*objectname)%1f%(contents)%1e"
)
_LOG_FORMAT = "%H%x1f%B%x1e"


class TagRepository(Protocol):
    """Backend contract used by the resolver and the commit message extractor."""

    def list_tags(self) -> Sequence[RawTag]:
        """Return every tag; ordering is whatever the backend yields."""

    def log(self, commit_range: Optional[CommitRange] = None) -> Sequence[Commit]:
        """Return commits newest-first, optionally limited to ``commit_range``."""


class GitTagRepository:
    """TagRepository backed by the ``git`` executable.

    Range semantics for ``log``:

    * no range: full history reachable from HEAD;
    * ``sha1 is None``: full history sliced from ``sha2`` to the root commit
      (the whole history when ``sha2`` is not reachable from HEAD);
    * both bounds: ``git log sha1..sha2``, ``sha1`` exclusive and ``sha2`` inclusive.

    A path without a repository, an unborn HEAD and a tagless repository all
    produce empty results.
    """

    def __init__(
        self,
        repo_path: str | Path,
        runner: Callable[..., str] | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        self.repo_path = Path(repo_path).expanduser()
        self._runner = runner or self._default_runner
        self.logger = logger or get_logger("git")

    def list_tags(self) -> List[RawTag]:
        if not self._has_repository():
            return []
        output = self._run(
            ["git", "for-each-ref", f"--format={_TAG_FORMAT}", "refs/tags"]
        )
        tags = [tag for tag in (_parse_tag_record(record) for record in _records(output)) if tag]
        self.logger.debug("Found %d tags in %s", len(tags), self.repo_path)
        return tags

    def log(self, commit_range: Optional[CommitRange] = None) -> List[Commit]:
        if not self._has_repository() or not self._has_commits():
            return []

        if commit_range is None:
            return self._log(["HEAD"])

        if commit_range.sha1 is None:
            commits = self._log(["HEAD"])
            for index, commit in enumerate(commits):
                if commit.sha == commit_range.sha2:
                    return commits[index:]
            self.logger.debug(
                "Commit %s is not reachable from HEAD, using full history", commit_range.sha2
            )
            return commits

        return self._log([f"{commit_range.sha1}..{commit_range.sha2}"])

    # ------------------------------------------------------------------
    # Internals

    def _log(self, revisions: Sequence[str]) -> List[Commit]:
        output = self._run(["git", "log", f"--format={_LOG_FORMAT}", *revisions, "--"])
        commits: List[Commit] = []
        for record in _records(output):
            sha, _, message = record.partition(_FIELD_SEP)
            if sha:
                commits.append(Commit(sha=sha, full_message=message))
        return commits

    def _has_repository(self) -> bool:
        if (self.repo_path / ".git").exists():
            return True
        self.logger.warning("%s is not a Git repository", self.repo_path)
        return False

    def _has_commits(self) -> bool:
        try:
            self._run(["git", "rev-parse", "--verify", "--quiet", "HEAD^{commit}"])
        except GitCommandError as exc:
            # --verify --quiet exits 1 only for a missing ref
            if exc.returncode != 1:
                raise
            self.logger.warning("%s has no commits yet", self.repo_path)
            return False
        return True

    def _run(self, args: Iterable[str]) -> str:
        return self._runner(args, cwd=self.repo_path)

    @staticmethod
    def _default_runner(args: Iterable[str], *, cwd: Path) -> str:
        command = list(args)
        try:
            completed = subprocess.run(
                command,
                cwd=str(cwd),
                check=True,
                text=True,
                encoding="utf-8",
                capture_output=True,
            )
        except subprocess.CalledProcessError as exc:
            raise GitCommandError(command, exc.returncode, exc.stderr or "") from exc
        except OSError as exc:
            raise GitCommandError(command, -1, str(exc)) from exc
        return completed.stdout


def _records(output: str) -> List[str]:
    records = []
    for chunk in output.split(_RECORD_SEP):
        # git terminates each formatted entry with a newline after the separator.
        stripped = chunk.lstrip("\n")
        if stripped.strip():
            records.append(stripped)
    return records


def _parse_tag_record(record: str) -> Optional[RawTag]:
    fields = record.split(_FIELD_SEP, 4)
    if len(fields) < 5:
        return None
    name, object_type, object_sha, peeled_sha, contents = fields
    if object_type == "tag":
        message = contents.rstrip("\n")
        return RawTag(name=name, commit_sha=peeled_sha or object_sha, full_message=message)
    return RawTag(name=name, commit_sha=object_sha, full_message=None)


__all__ = ["GitTagRepository", "TagRepository"]
