"""Conversion of repository tags into structured build tags."""

from __future__ import annotations

import re
from typing import List

from ..errors import TagParseError, TagPatternError
from ..models import BuildTag, GenericTag, RawTag, Tag

_DIGITS = re.compile(r"\d+")


def from_raw_tag(raw: RawTag) -> GenericTag:
    return GenericTag(name=raw.name, commit_sha=raw.commit_sha, message=raw.full_message)


def to_build_tag(tag: Tag, build_variant: str) -> BuildTag:
    """Derive build metadata from ``tag`` for ``build_variant``.

    The variant must appear verbatim in the tag name; anything else means the
    tag pattern and the variant disagree, which is a configuration problem.
    """
    if isinstance(tag, BuildTag):
        if tag.build_variant == build_variant:
            return tag
        tag = GenericTag(name=tag.name, commit_sha=tag.commit_sha, message=tag.message)
    if not build_variant or build_variant not in tag.name:
        raise TagPatternError(
            f"No build variant `{build_variant}` in tag {tag.name}. "
            "Check that the build tag pattern contains the variant placeholder (%s)"
        )
    return BuildTag(
        name=tag.name,
        commit_sha=tag.commit_sha,
        message=tag.message,
        build_version=build_version(tag.name),
        build_variant=build_variant,
        build_number=build_number(tag.name),
    )


def build_version(tag_name: str) -> str:
    """Join every digit run of the first ``-`` segment except the last one.

    ``cabinet+1.2.45-armv8Debug`` gives ``1.2``; ``1.2.3.45-debug`` gives ``1.2.3``.
    """
    return ".".join(_version_numbers(tag_name)[:-1])


def build_number(tag_name: str) -> int:
    """Return the last digit run of the first ``-`` segment."""
    numbers = _version_numbers(tag_name)
    if not numbers:
        raise TagParseError(f"internal error: no build number digits in tag {tag_name}")
    return int(numbers[-1])


def _version_numbers(tag_name: str) -> List[str]:
    first_part = tag_name.split("-", 1)[0]
    return _DIGITS.findall(first_part)


__all__ = ["build_number", "build_version", "from_raw_tag", "to_build_tag"]
