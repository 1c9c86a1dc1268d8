"""Error taxonomy for build tag resolution and changelog generation."""

from __future__ import annotations

from typing import Sequence


class BuildPublishError(RuntimeError):
    """Base class for fatal buildpublish failures."""


class TagPatternError(BuildPublishError, ValueError):
    """Raised when a build tag pattern or variant is misconfigured."""


class TagParseError(BuildPublishError):
    """Raised when a tag matched the pattern but its build number cannot be read."""


class TagNotFoundError(BuildPublishError):
    """Raised when no build tag exists and no stub fallback is allowed."""


class BuildTagFileError(BuildPublishError):
    """Raised when a build tag JSON file is missing fields or malformed."""


class GitCommandError(BuildPublishError):
    """Raised when the git backend fails to answer a query."""

    def __init__(self, args: Sequence[str], returncode: int, stderr: str = "") -> None:
        self.command = list(args)
        self.returncode = returncode
        self.stderr = stderr.strip()
        detail = f": {self.stderr}" if self.stderr else ""
        super().__init__(
            f"`{' '.join(self.command)}` exited with status {returncode}{detail}"
        )


__all__ = [
    "BuildPublishError",
    "BuildTagFileError",
    "GitCommandError",
    "TagNotFoundError",
    "TagParseError",
    "TagPatternError",
]
