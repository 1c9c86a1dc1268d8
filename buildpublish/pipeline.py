"""Tag file and changelog file generation steps used by the CLI."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from .changelog.builder import ChangelogBuilder
from .errors import TagNotFoundError
from .git.repository import TagRepository
from .logging import get_logger
from .models import BuildTag, TagRange
from .tags.resolver import TagRangeResolver
from .tags.serialization import stub_build_tag, write_build_tag_file


@dataclass
class ChangelogOutcome:
    """Result of a changelog generation step."""

    path: Path
    text: str
    generated: bool


NO_CHANGES_SINCE_START = "No changes detected since the start of the project"


def no_changes_message(tag_range: TagRange | None) -> str:
    """Default text when there is neither an annotated message nor marked commits.

    ``None`` stands for a variant that has never been tagged.
    """
    previous = tag_range.previous_build_tag if tag_range is not None else None
    if previous is None:
        return NO_CHANGES_SINCE_START
    return f"No changes detected since build {previous.name}"


def resolve_build_tag(
    repository: TagRepository,
    build_variant: str,
    pattern: str,
    *,
    use_stub_as_fallback: bool = False,
    logger: logging.Logger | None = None,
) -> BuildTag:
    """Return the most recent build tag, a stub, or fail when neither is possible."""
    logger = logger or get_logger("pipeline")
    build_tag = TagRangeResolver(repository, logger=logger).find_recent_build_tag(
        build_variant, pattern
    )
    if build_tag is not None:
        logger.info(
            "Last tag %s, build number %d was found", build_tag.name, build_tag.build_number
        )
        return build_tag
    if use_stub_as_fallback:
        logger.warning("No build tag for %s, using a stub tag", build_variant)
        return stub_build_tag(pattern, build_variant)
    raise TagNotFoundError(
        f"There is no last tag for '{build_variant}' build variant which matches "
        f"`{pattern}` pattern. Check that a tag for that build variant exists and was fetched."
    )


def generate_build_tag_file(
    repository: TagRepository,
    build_variant: str,
    pattern: str,
    output: Path,
    *,
    use_stub_as_fallback: bool = False,
    logger: logging.Logger | None = None,
) -> BuildTag:
    build_tag = resolve_build_tag(
        repository,
        build_variant,
        pattern,
        use_stub_as_fallback=use_stub_as_fallback,
        logger=logger,
    )
    write_build_tag_file(build_tag, output)
    return build_tag


def generate_changelog_file(
    repository: TagRepository,
    message_key: str,
    build_tag: BuildTag,
    pattern: str,
    output: Path,
    *,
    empty_placeholder: bool = False,
    logger: logging.Logger | None = None,
) -> ChangelogOutcome:
    """Write the changelog for ``build_tag`` to ``output``.

    An empty file is a valid result meaning "nothing to report". With
    ``empty_placeholder`` the default no-changes text is written instead.
    """
    logger = logger or get_logger("pipeline")
    builder = ChangelogBuilder(repository, message_key, logger=logger)
    changelog: Optional[str] = builder.build_for_build_tag(
        build_tag,
        pattern,
        default_value_supplier=no_changes_message if empty_placeholder else None,
    )
    output.parent.mkdir(parents=True, exist_ok=True)
    if changelog is None or not changelog.strip():
        logger.info(
            "Changelog is NOT generated for `%s` pattern and %s build tag", pattern, build_tag.name
        )
        text = ""
        if empty_placeholder:
            text = f"No changes because changelog is not generated for tag {build_tag.name}"
        output.write_text(text, encoding="utf-8")
        return ChangelogOutcome(path=output, text=text, generated=False)

    logger.info("Changelog is generated for `%s` pattern and %s build tag", pattern, build_tag.name)
    output.write_text(changelog, encoding="utf-8")
    return ChangelogOutcome(path=output, text=changelog, generated=True)


__all__ = [
    "ChangelogOutcome",
    "generate_build_tag_file",
    "generate_changelog_file",
    "NO_CHANGES_SINCE_START",
    "no_changes_message",
    "resolve_build_tag",
]
