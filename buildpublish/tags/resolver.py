"""Resolution of the current and previous build tags for a build variant."""

from __future__ import annotations

import logging
from typing import List, Optional

from ..git.repository import TagRepository
from ..logging import get_logger
from ..models import BuildTag, GenericTag, TagRange
from .parser import from_raw_tag, to_build_tag
from .pattern import compile_build_tag_regex, extract_build_number


class TagRangeResolver:
    """Finds the most recent build tags of a variant, ordered by build number.

    Tags are ranked by the build number captured from their name, not by
    creation date: a stable ascending sort over discovery order that is then
    reversed, so among equal build numbers the later-discovered tag ranks first.
    """

    def __init__(self, repository: TagRepository, logger: logging.Logger | None = None) -> None:
        self.repository = repository
        self.logger = logger or get_logger("tags")

    def find_tag_range(self, build_variant: str, pattern: str) -> Optional[TagRange]:
        """Return the latest two build tags, or ``None`` on a never-released variant."""
        tags = self._find_build_tags(build_variant, pattern, limit=2)
        if not tags:
            return None
        current, previous = tags[0], tags[1] if len(tags) > 1 else None
        self.logger.debug(
            "Tag range for %s: %s..%s",
            build_variant,
            previous.name if previous else "<root>",
            current.name,
        )
        return TagRange(
            current_build_tag=to_build_tag(current, build_variant),
            previous_build_tag=to_build_tag(previous, build_variant) if previous else None,
        )

    def find_recent_build_tag(self, build_variant: str, pattern: str) -> Optional[BuildTag]:
        tags = self._find_build_tags(build_variant, pattern, limit=1)
        if not tags:
            return None
        return to_build_tag(tags[0], build_variant)

    def _find_build_tags(self, build_variant: str, pattern: str, *, limit: int) -> List[GenericTag]:
        regex = compile_build_tag_regex(pattern, build_variant)
        matching = [
            from_raw_tag(raw)
            for raw in self.repository.list_tags()
            if regex.fullmatch(raw.name) is not None
        ]
        if not matching:
            self.logger.debug("No tags match `%s` for %s", regex.pattern, build_variant)
            return []
        ranked = sorted(matching, key=lambda tag: extract_build_number(regex, tag.name))
        ranked.reverse()
        return ranked[:limit]


__all__ = ["TagRangeResolver"]
