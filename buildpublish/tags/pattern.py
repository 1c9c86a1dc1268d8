"""Build tag pattern templates: defaults, validation and a declarative builder.

A build tag pattern is a regular expression template containing a ``%s``
placeholder for the build variant name and one capturing group holding the
build number, e.g. ``.+\\.(\\d+)-%s`` matches ``app.1.2.3-debug`` for the
``debug`` variant and captures ``3``.
"""

from __future__ import annotations

import re
from typing import List, Pattern

from ..errors import TagParseError, TagPatternError

DEFAULT_TAG_PATTERN = r".+\.(\d+)-%s"

VARIANT_PLACEHOLDER = "%s"
BUILD_VERSION_GROUP = r"(\d+)"

_DUMMY_VARIANT = "dummyVariant"


def format_build_tag_pattern(pattern: str, build_variant: str) -> str:
    """Substitute the variant placeholder with the regex-escaped variant name."""
    return pattern.replace(VARIANT_PLACEHOLDER, re.escape(build_variant))


def validate_build_tag_pattern(pattern: str) -> str:
    """Fail fast on templates that can never resolve a build tag.

    Returns the template unchanged so callers can validate inline.
    """
    if not pattern or not pattern.strip():
        raise TagPatternError("Build tag pattern must not be empty")
    if VARIANT_PLACEHOLDER not in pattern:
        raise TagPatternError(
            f"Build tag pattern `{pattern}` must contain a variant placeholder (%s)"
        )
    candidate = format_build_tag_pattern(pattern, _DUMMY_VARIANT)
    try:
        compiled = re.compile(candidate)
    except re.error as exc:
        raise TagPatternError(f"Build tag pattern `{pattern}` is not a valid regex: {exc}") from exc
    if compiled.groups != 1:
        raise TagPatternError(
            f"Build tag pattern `{pattern}` must contain exactly one capture group, the build "
            f"number (e.g. (\\d+)), found {compiled.groups}. Use (?:...) for other groups"
        )
    return pattern


def compile_build_tag_regex(pattern: str, build_variant: str) -> Pattern[str]:
    """Validate ``pattern`` and compile it for ``build_variant``."""
    if not build_variant:
        raise TagPatternError("Build variant name must not be empty")
    validate_build_tag_pattern(pattern)
    return re.compile(format_build_tag_pattern(pattern, build_variant))


def extract_build_number(regex: Pattern[str], tag_name: str) -> int:
    """Return the integer captured by group 1, the build number group, of a matching tag name."""
    match = regex.fullmatch(tag_name)
    if match is None:
        raise TagParseError(
            f"internal error: tag {tag_name} does not match build tag pattern `{regex.pattern}`"
        )
    captured = match.group(1) if regex.groups >= 1 else None
    if captured is None or not captured.isdecimal():
        raise TagParseError(
            f"internal error: failed to parse build number for tag {tag_name} "
            f"(captured {captured!r} with `{regex.pattern}`)"
        )
    return int(captured)


class BuildTagPatternBuilder:
    """Composes a build tag pattern from named parts instead of raw regex.

    >>> BuildTagPatternBuilder().any_before_dot().build_version().separator("-").build_variant().build()
    '.+\\\\.(\\\\d+)\\\\-%s'
    """

    def __init__(self) -> None:
        self._parts: List[str] = []

    def literal(self, value: str) -> "BuildTagPatternBuilder":
        self._parts.append(re.escape(value))
        return self

    def separator(self, value: str) -> "BuildTagPatternBuilder":
        """Add a separator such as ``-`` or ``_``."""
        self._parts.append(re.escape(value))
        return self

    def optional_separator(self, value: str) -> "BuildTagPatternBuilder":
        self._parts.append(f"(?:{re.escape(value)})?")
        return self

    def build_version(self) -> "BuildTagPatternBuilder":
        """Capture the numeric build number group."""
        self._parts.append(BUILD_VERSION_GROUP)
        return self

    def build_variant(self) -> "BuildTagPatternBuilder":
        self._parts.append(VARIANT_PLACEHOLDER)
        return self

    def any_before_dot(self) -> "BuildTagPatternBuilder":
        """Match any text ending with a dot."""
        self._parts.append(r".+\.")
        return self

    def any_optional_symbols(self) -> "BuildTagPatternBuilder":
        self._parts.append("[a-zA-Z0-9]*")
        return self

    def build(self) -> str:
        template = "".join(self._parts)
        if BUILD_VERSION_GROUP not in template:
            raise TagPatternError(
                "Tag pattern must contain a version capture group (e.g. (\\d+))"
            )
        if VARIANT_PLACEHOLDER not in template:
            raise TagPatternError("Tag pattern must contain a variant placeholder (%s)")
        test_regex = format_build_tag_pattern(template, _DUMMY_VARIANT)
        try:
            compiled = re.compile(test_regex)
        except re.error as exc:
            raise TagPatternError(f"Invalid regex produced: {test_regex}") from exc
        if compiled.groups != 1:
            raise TagPatternError("Tag pattern must contain a single version capture group")
        return template


__all__ = [
    "BUILD_VERSION_GROUP",
    "BuildTagPatternBuilder",
    "DEFAULT_TAG_PATTERN",
    "VARIANT_PLACEHOLDER",
    "compile_build_tag_regex",
    "extract_build_number",
    "format_build_tag_pattern",
    "validate_build_tag_pattern",
]
