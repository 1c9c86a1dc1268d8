"""Changelog assembly for a build tag."""

from __future__ import annotations

import logging
from typing import Callable, List, Optional

from ..git.repository import TagRepository
from ..logging import get_logger
from ..models import BuildTag, TagRange
from ..tags.resolver import TagRangeResolver
from .extractor import CommitMessageExtractor

DefaultValueSupplier = Callable[[TagRange], Optional[str]]


class ChangelogBuilder:
    """Builds destination-agnostic changelog text between two build tags.

    The annotated message of the current tag comes first, wrapped in single
    asterisks, followed by every marked commit line of the tag range. Issue
    linking, escaping and truncation belong to the callers.
    """

    def __init__(
        self,
        repository: TagRepository,
        message_key: str,
        *,
        resolver: TagRangeResolver | None = None,
        extractor: CommitMessageExtractor | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        if not message_key:
            raise ValueError("Commit message key must not be empty")
        self.message_key = message_key
        self.logger = logger or get_logger("changelog")
        self.resolver = resolver or TagRangeResolver(repository, logger=self.logger)
        self.extractor = extractor or CommitMessageExtractor(repository)

    def build_for_build_tag(
        self,
        build_tag: BuildTag,
        pattern: str,
        default_value_supplier: DefaultValueSupplier | None = None,
    ) -> Optional[str]:
        """Return the changelog for ``build_tag``'s variant.

        ``None`` when the variant has no build tags at all; the supplier's value
        (or ``None``) when the range holds neither an annotated message nor
        marked commits.
        """
        tag_range = self.resolver.find_tag_range(build_tag.build_variant, pattern)
        if tag_range is None:
            self.logger.warning(
                "Failed to build a changelog: no build tags for %s", build_tag.build_variant
            )
            return None

        changelog = self._build_changelog(tag_range)
        if changelog is not None:
            return changelog
        if default_value_supplier is None:
            return None
        return default_value_supplier(tag_range)

    def _build_changelog(self, tag_range: TagRange) -> Optional[str]:
        lines: List[str] = []
        annotated_message = tag_range.current_build_tag.message
        if annotated_message:
            lines.append(f"*{annotated_message}*")

        # Two tags on one commit: nothing to extract, the annotated message above still counts.
        if tag_range.points_at_same_commit:
            self.logger.info(
                "Tags %s and %s point at the same commit, skipping commit messages",
                tag_range.current_build_tag.name,
                tag_range.previous_build_tag.name if tag_range.previous_build_tag else None,
            )
        else:
            lines.extend(self.extractor.extract(self.message_key, tag_range.as_commit_range()))

        text = "".join(f"{line}\n" for line in lines)
        if not text.strip():
            return None
        return text


__all__ = ["ChangelogBuilder", "DefaultValueSupplier"]
