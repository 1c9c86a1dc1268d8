"""Core data models shared across buildpublish components."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Union


@dataclass(frozen=True)
class RawTag:
    """Tag row as reported by the version-control backend."""

    name: str
    commit_sha: str
    full_message: Optional[str] = None


@dataclass(frozen=True)
class Commit:
    """Commit row as reported by the version-control backend."""

    sha: str
    full_message: str


@dataclass(frozen=True)
class GenericTag:
    """Any repository tag. ``message`` is only set for annotated tags."""

    name: str
    commit_sha: str
    message: Optional[str] = None


@dataclass(frozen=True)
class BuildTag:
    """Tag whose name encodes a build version, variant and build number."""

    name: str
    commit_sha: str
    message: Optional[str]
    build_version: str
    build_variant: str
    build_number: int


Tag = Union[GenericTag, BuildTag]


@dataclass(frozen=True)
class CommitRange:
    """Commit history slice: ``sha1`` is exclusive, ``sha2`` inclusive.

    ``sha1 = None`` means "everything reachable up to ``sha2``".
    """

    sha1: Optional[str]
    sha2: str


@dataclass(frozen=True)
class TagRange:
    """Current build tag plus the one before it, if any."""

    current_build_tag: BuildTag
    previous_build_tag: Optional[BuildTag] = None

    def as_commit_range(self) -> CommitRange:
        previous_sha = (
            self.previous_build_tag.commit_sha if self.previous_build_tag is not None else None
        )
        return CommitRange(sha1=previous_sha, sha2=self.current_build_tag.commit_sha)

    @property
    def points_at_same_commit(self) -> bool:
        """True when both tags resolve to one commit, so nothing changed in between."""
        if self.previous_build_tag is None:
            return False
        return self.current_build_tag.commit_sha == self.previous_build_tag.commit_sha


__all__ = [
    "BuildTag",
    "Commit",
    "CommitRange",
    "GenericTag",
    "RawTag",
    "Tag",
    "TagRange",
]
